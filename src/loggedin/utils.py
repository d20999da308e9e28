from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def to_timestamp(value: datetime) -> int:
    """Convert a datetime to integer epoch seconds."""
    return int(value.timestamp())

"""structlog configuration for the server and the login limit engine."""

import logging

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Event keys that may hold a session token
TOKEN_KEYS = frozenset({"token", "auth_token"})
TOKEN_HINT_LENGTH = 8

QUIET_LOGGERS = ("pymongo", "pymongo.topology", "pymongo.connection", "pymongo.command")


def mask_session_tokens(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Keep only a short prefix of session tokens, enough to tell sessions apart."""
    for key in TOKEN_KEYS & event_dict.keys():
        value = event_dict[key]
        if isinstance(value, str) and len(value) > TOKEN_HINT_LENGTH:
            event_dict[key] = value[:TOKEN_HINT_LENGTH] + "..."
    return event_dict


def build_processors(debug: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_session_tokens,
    ]
    if debug:
        # ConsoleRenderer formats exc_info itself
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return processors


def setup_logging(debug: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format="%(message)s")
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(debug),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

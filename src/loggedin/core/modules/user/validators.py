from loggedin.errors import ValidationError

MIN_PASSWORD_LENGTH = 4
MAX_PASSWORD_LENGTH = 72  # bcrypt rejects or ignores bytes past 72


def validate_username(username: str) -> None:
    if not username or len(username) > 64:
        raise ValidationError("Username must be between 1 and 64 characters long")
    if any(char.isspace() for char in username):
        raise ValidationError("Username cannot contain whitespace characters")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Between 4 and 72 bytes long

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if len(password.encode("utf-8")) > MAX_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_LENGTH} bytes long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")

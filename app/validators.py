import re
from typing import NamedTuple, Optional

USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_]{3,30}")
USERNAME_RULE = "Username must be 3-30 alphanumeric characters (underscores allowed)"

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 100


class PasswordCheck(NamedTuple):
    valid: bool
    reason: Optional[str] = None


def is_valid_username(username: str) -> bool:
    return USERNAME_PATTERN.fullmatch(username) is not None


def validate_password(password: str) -> PasswordCheck:
    if len(password) < MIN_PASSWORD_LENGTH:
        return PasswordCheck(False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(password) > MAX_PASSWORD_LENGTH:
        return PasswordCheck(False, f"Password must be less than {MAX_PASSWORD_LENGTH} characters")
    return PasswordCheck(True)

import re
from datetime import datetime

from pydantic import Field, field_validator

from .base import CamelModel

USERNAME_PATTERN = r"^[A-Za-z0-9_-]+$"
EMAIL_MAX_LENGTH = 256
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100


class RegisterRequest(CamelModel):
    """Registration input; these rules run before the user registry is touched."""
    username: str = Field(min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    email: str = Field(max_length=EMAIL_MAX_LENGTH)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("username", mode="before")
    @classmethod
    def _strip_username(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip()
        if not re.match(r"^[^@\s]+@[^@\s]+$", value):
            raise ValueError("Email must be a valid address")
        return value


class LoginRequest(CamelModel):
    username_or_email: str = Field(min_length=1, max_length=EMAIL_MAX_LENGTH)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)


class UserRead(CamelModel):
    id: str
    username: str
    email: str
    created_at: datetime


class AuthResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_at_utc: datetime
    user: UserRead


class LogoutResponse(CamelModel):
    message: str = "Logged out (client should discard token)"

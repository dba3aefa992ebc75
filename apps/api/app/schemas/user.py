"""User API schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from app.schemas.error import FieldError

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime | None = None


class UserIdParams(BaseModel):
    """Path parameters carrying a user id."""

    id: int = Field(gt=0)


class UpdateUserRequest(BaseModel):
    """Allow-listed fields a caller may change on a user record."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255, pattern=_EMAIL_PATTERN)
    role: UserRole | None = None

    @model_validator(mode="after")
    def require_one_field(self) -> UpdateUserRequest:
        if not self.changes():
            raise ValueError("At least one field must be provided for update")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller actually supplied with a value."""
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)


class UserListResponse(BaseModel):
    message: str
    users: list[User]
    count: int


class UserResponse(BaseModel):
    message: str
    user: User


class MessageResponse(BaseModel):
    message: str


def format_validation_error(exc: ValidationError, *, root: str) -> list[FieldError]:
    """Flatten a pydantic validation error into ``field``/``message`` pairs.

    Errors raised against the whole object (no location) are reported under ``root``.
    """
    details: list[FieldError] = []
    for item in exc.errors(include_url=False):
        location = ".".join(str(part) for part in item.get("loc", ()))
        details.append(FieldError(field=location or root, message=item["msg"]))
    return details

"""API error response schemas."""

from typing import Literal

from pydantic import BaseModel


class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    error: Literal["Validation Failed"] = "Validation Failed"
    details: list[FieldError]


class AuthErrorResponse(BaseModel):
    error: Literal["Unauthorized", "Forbidden"]
    message: str


class NotFoundErrorResponse(BaseModel):
    error: Literal["User not found"] = "User not found"


class ErrorResponse(BaseModel):
    error: str
    message: str | None = None

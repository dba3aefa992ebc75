"""Application exception types."""

from app.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error rendered by the application exception handler."""

    def __init__(self, status_code: int, error: str, message: str | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(error=error, message=message)
        super().__init__(message or error)


__all__ = ["ApiError"]

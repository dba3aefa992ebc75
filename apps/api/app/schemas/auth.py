"""Authentication schemas."""

from pydantic import BaseModel, Field


class AuthPrincipal(BaseModel):
    """Normalized authenticated principal attached to the request context."""

    id: str = Field(min_length=1)
    role: str = Field(default="user", min_length=1)

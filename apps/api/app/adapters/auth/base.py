"""Authentication provider interfaces."""

from abc import ABC, abstractmethod

from app.schemas.auth import AuthPrincipal


class AuthVerificationError(Exception):
    """Raised when a bearer token cannot be verified or mapped to a principal."""


class TokenVerifier(ABC):
    """Provider-neutral bearer token verification."""

    @abstractmethod
    def verify_token(self, token: str) -> AuthPrincipal:
        """Verify ``token`` and return the principal it identifies."""


__all__ = ["AuthVerificationError", "TokenVerifier"]

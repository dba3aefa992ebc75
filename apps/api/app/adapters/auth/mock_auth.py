"""Mock auth verifier for local development and tests."""

from app.adapters.auth.base import AuthVerificationError, TokenVerifier
from app.schemas.auth import AuthPrincipal
from app.schemas.user import UserRole

_KNOWN_ROLES = frozenset(role.value for role in UserRole)


class MockTokenVerifier(TokenVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>`` (role ``user``)
    - ``test:<user_id>:<role>`` where role is ``user`` or ``admin``
    """

    def verify_token(self, token: str) -> AuthPrincipal:
        parts = token.split(":")
        if len(parts) not in (2, 3) or parts[0] != "test":
            raise AuthVerificationError("Invalid bearer token")

        user_id = parts[1].strip()
        role = parts[2].strip() if len(parts) == 3 else UserRole.USER.value

        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")
        if role not in _KNOWN_ROLES:
            raise AuthVerificationError("Bearer token carries an unknown role")

        return AuthPrincipal(id=user_id, role=role)


__all__ = ["MockTokenVerifier"]

"""Authorization rules for acting on user records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.schemas.auth import AuthPrincipal
from app.schemas.user import UserRole


class UserAction(str, Enum):
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class PolicyDecision:
    allowed: bool
    status_code: int = 200
    error: str | None = None
    message: str | None = None

    @classmethod
    def allow(cls) -> PolicyDecision:
        return cls(allowed=True)

    @classmethod
    def unauthorized(cls, message: str) -> PolicyDecision:
        return cls(allowed=False, status_code=401, error="Unauthorized", message=message)

    @classmethod
    def forbidden(cls, message: str) -> PolicyDecision:
        return cls(allowed=False, status_code=403, error="Forbidden", message=message)


_OWNERSHIP_DENIALS: dict[UserAction, str] = {
    UserAction.UPDATE: "You can only update your own information",
    UserAction.DELETE: "You can only delete your own account",
}


def is_admin(principal: AuthPrincipal) -> bool:
    return principal.role == UserRole.ADMIN.value


def can_act(
    principal: AuthPrincipal | None,
    target_id: int,
    action: UserAction,
    payload: Mapping[str, Any] | None = None,
) -> PolicyDecision:
    """Decide whether ``principal`` may perform ``action`` on user ``target_id``.

    Checks run in a fixed order: authentication, ownership, then role
    escalation. The first failing check determines the decision.
    """
    if principal is None:
        return PolicyDecision.unauthorized("Authentication required")

    if principal.id != str(target_id) and not is_admin(principal):
        return PolicyDecision.forbidden(_OWNERSHIP_DENIALS[action])

    if action is UserAction.UPDATE and payload and payload.get("role") and not is_admin(principal):
        return PolicyDecision.forbidden("Only admins can change user roles")

    return PolicyDecision.allow()


__all__ = ["PolicyDecision", "UserAction", "can_act", "is_admin"]

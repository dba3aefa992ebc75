"""In-memory repositories used by the API scaffold and tests."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from app.schemas.user import UserRole

_MUTABLE_USER_FIELDS = frozenset({"name", "email", "role"})


@dataclass(slots=True)
class UserRecord:
    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime | None = None


@dataclass(slots=True)
class InMemoryStore:
    """Simple, deterministic persistence layer for scaffolding and tests."""

    users: dict[int, UserRecord] = field(default_factory=dict)
    next_user_id: int = 1
    user_write_count: int = 0
    user_delete_count: int = 0

    def create_user(self, name: str, email: str, role: UserRole = UserRole.USER) -> UserRecord:
        user = UserRecord(
            id=self.next_user_id,
            name=name,
            email=email,
            role=UserRole(role),
            created_at=datetime.now(UTC),
        )
        self.users[user.id] = user
        self.next_user_id += 1
        self.user_write_count += 1
        return user

    def seed_users(self, entries: Iterable[dict[str, Any]]) -> list[UserRecord]:
        return [self.create_user(**entry) for entry in entries]

    def list_users(self) -> list[UserRecord]:
        return sorted(self.users.values(), key=lambda user: user.id)

    def get_user(self, user_id: int) -> UserRecord | None:
        return self.users.get(user_id)

    def update_user(self, user: UserRecord, changes: dict[str, Any]) -> UserRecord:
        unknown = set(changes) - _MUTABLE_USER_FIELDS
        if unknown:
            raise ValueError(f"Unsupported user fields: {sorted(unknown)}")

        for key, value in changes.items():
            if key == "role":
                value = UserRole(value)
            setattr(user, key, value)
        user.updated_at = datetime.now(UTC)
        self.user_write_count += 1
        return user

    def delete_user(self, user_id: int) -> bool:
        removed = self.users.pop(user_id, None)
        if removed is None:
            return False
        self.user_delete_count += 1
        return True

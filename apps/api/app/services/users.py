"""User service layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from app.repositories.memory import InMemoryStore, UserRecord
from app.schemas.user import User

USER_NOT_FOUND_MESSAGE = "User not found"


class ServiceErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class UserServiceError(Exception):
    """Failure raised by a user service, tagged with the kind of failure."""

    def __init__(self, kind: ServiceErrorKind, message: str) -> None:
        self.kind = kind
        super().__init__(message)

    @classmethod
    def not_found(cls) -> UserServiceError:
        return cls(ServiceErrorKind.NOT_FOUND, USER_NOT_FOUND_MESSAGE)

    @property
    def is_not_found(self) -> bool:
        return self.kind is ServiceErrorKind.NOT_FOUND


class UserService(ABC):
    """Data access contract consumed by the user controller."""

    @abstractmethod
    async def list_users(self) -> list[User]:
        """Return every user ordered by id."""

    @abstractmethod
    async def get_user_by_id(self, user_id: int) -> User:
        """Return one user or raise a ``NOT_FOUND`` :class:`UserServiceError`."""

    @abstractmethod
    async def update_user(self, user_id: int, changes: dict[str, Any]) -> User:
        """Apply ``changes`` and return the updated user."""

    @abstractmethod
    async def delete_user(self, user_id: int) -> None:
        """Remove the user or raise a ``NOT_FOUND`` :class:`UserServiceError`."""


class InMemoryUserService(UserService):
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def list_users(self) -> list[User]:
        return [self._to_user(record) for record in self._store.list_users()]

    async def get_user_by_id(self, user_id: int) -> User:
        return self._to_user(self._require(user_id))

    async def update_user(self, user_id: int, changes: dict[str, Any]) -> User:
        record = self._require(user_id)
        try:
            updated = self._store.update_user(record, changes)
        except ValueError as exc:
            raise UserServiceError(ServiceErrorKind.INTERNAL, str(exc)) from exc
        return self._to_user(updated)

    async def delete_user(self, user_id: int) -> None:
        if not self._store.delete_user(user_id):
            raise UserServiceError.not_found()

    def _require(self, user_id: int) -> UserRecord:
        record = self._store.get_user(user_id)
        if record is None:
            raise UserServiceError.not_found()
        return record

    @staticmethod
    def _to_user(record: UserRecord) -> User:
        return User(
            id=record.id,
            name=record.name,
            email=record.email,
            role=record.role,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


__all__ = [
    "InMemoryUserService",
    "ServiceErrorKind",
    "USER_NOT_FOUND_MESSAGE",
    "UserService",
    "UserServiceError",
]

"""User controller: validation, authorization and response shaping for user endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.core.logger import safe_log_identifier
from app.domain.user_policy import PolicyDecision, UserAction, can_act
from app.schemas.auth import AuthPrincipal
from app.schemas.error import AuthErrorResponse, NotFoundErrorResponse, ValidationErrorResponse
from app.schemas.user import (
    MessageResponse,
    UpdateUserRequest,
    UserIdParams,
    UserListResponse,
    UserResponse,
    format_validation_error,
)
from app.services.users import UserService, UserServiceError


def _json(status_code: int, model: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=model.model_dump(mode="json"))


def _validation_failed(exc: ValidationError, *, root: str) -> JSONResponse:
    payload = ValidationErrorResponse(details=format_validation_error(exc, root=root))
    return _json(status.HTTP_400_BAD_REQUEST, payload)


def _denied(decision: PolicyDecision) -> JSONResponse:
    payload = AuthErrorResponse(error=decision.error, message=decision.message)
    return _json(decision.status_code, payload)


def _not_found() -> JSONResponse:
    return _json(status.HTTP_404_NOT_FOUND, NotFoundErrorResponse())


class UserController:
    """Handles the four user operations.

    Validation and authorization failures are answered here. A service
    ``NOT_FOUND`` becomes a 404; every other exception is logged and
    re-raised for the application's generic handler.
    """

    def __init__(self, service: UserService, logger: logging.Logger) -> None:
        self._service = service
        self._logger = logger

    async def fetch_all_users(self) -> JSONResponse:
        try:
            self._logger.info("Getting users...")
            users = await self._service.list_users()
            return _json(
                status.HTTP_200_OK,
                UserListResponse(message="Successfully retrieved users", users=users, count=len(users)),
            )
        except Exception as exc:
            self._logger.error("Error fetching users: %s", exc, exc_info=exc)
            raise

    async def get_user_by_id(self, raw_id: str) -> JSONResponse:
        try:
            params = UserIdParams.model_validate({"id": raw_id})
        except ValidationError as exc:
            return _validation_failed(exc, root="params")

        try:
            self._logger.info("Getting user with ID: %s", params.id)
            user = await self._service.get_user_by_id(params.id)
            return _json(status.HTTP_200_OK, UserResponse(message="Successfully retrieved user", user=user))
        except Exception as exc:
            return self._handle_failure("Error fetching user by ID", exc)

    async def update_user(
        self,
        raw_id: str,
        body: Any,
        principal: AuthPrincipal | None,
    ) -> JSONResponse:
        try:
            params = UserIdParams.model_validate({"id": raw_id})
        except ValidationError as exc:
            return _validation_failed(exc, root="params")

        try:
            updates = UpdateUserRequest.model_validate(body)
        except ValidationError as exc:
            return _validation_failed(exc, root="body")

        changes = updates.changes()
        decision = can_act(principal, params.id, UserAction.UPDATE, changes)
        if not decision.allowed:
            self._log_denied(UserAction.UPDATE, params.id, principal, decision)
            return _denied(decision)

        try:
            self._logger.info("Updating user with ID: %s", params.id)
            user = await self._service.update_user(params.id, changes)
            return _json(status.HTTP_200_OK, UserResponse(message="User updated successfully", user=user))
        except Exception as exc:
            return self._handle_failure("Error updating user", exc)

    async def delete_user(self, raw_id: str, principal: AuthPrincipal | None) -> JSONResponse:
        try:
            params = UserIdParams.model_validate({"id": raw_id})
        except ValidationError as exc:
            return _validation_failed(exc, root="params")

        decision = can_act(principal, params.id, UserAction.DELETE)
        if not decision.allowed:
            self._log_denied(UserAction.DELETE, params.id, principal, decision)
            return _denied(decision)

        try:
            self._logger.info("Deleting user with ID: %s", params.id)
            await self._service.delete_user(params.id)
            return _json(status.HTTP_200_OK, MessageResponse(message="User deleted successfully"))
        except Exception as exc:
            return self._handle_failure("Error deleting user", exc)

    def _handle_failure(self, message: str, exc: Exception) -> JSONResponse:
        self._logger.error("%s: %s", message, exc, exc_info=exc)
        if isinstance(exc, UserServiceError) and exc.is_not_found:
            return _not_found()
        raise exc

    def _log_denied(
        self,
        action: UserAction,
        target_id: int,
        principal: AuthPrincipal | None,
        decision: PolicyDecision,
    ) -> None:
        self._logger.warning(
            "users.%s_denied target_id=%s principal_id=%s status=%s",
            action.value,
            target_id,
            safe_log_identifier(principal.id if principal else None, prefix="pid"),
            decision.status_code,
        )


__all__ = ["UserController"]

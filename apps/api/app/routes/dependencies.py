"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.adapters.auth import (
    AuthVerificationError,
    FirebaseTokenVerifier,
    MockTokenVerifier,
    TokenVerifier,
)
from app.controllers.users import UserController
from app.core.config import Settings, get_settings
from app.core.logger import safe_log_identifier
from app.errors import ApiError
from app.repositories.memory import InMemoryStore
from app.schemas.auth import AuthPrincipal
from app.services.users import InMemoryUserService, UserService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")


def _auth_error(message: str) -> ApiError:
    return ApiError(status_code=401, error="Unauthorized", message=message)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_logger(request: Request) -> logging.Logger:
    return request.app.state.logger


def get_token_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> TokenVerifier:
    """Resolve provider adapter from configuration."""
    if settings.auth_provider == "firebase":
        return FirebaseTokenVerifier(
            project_id=settings.firebase_project_id,
            audience=settings.firebase_audience,
        )
    return MockTokenVerifier()


async def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    logger: Annotated[logging.Logger, Depends(get_logger)],
) -> AuthPrincipal:
    """Validate bearer token and attach the principal to the request context."""
    safe_correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=invalid_or_missing_bearer",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_error("Authentication required")

    try:
        principal = verifier.verify_token(credentials.credentials)
    except AuthVerificationError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_verification_failed",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise _auth_error(str(exc) or "Invalid bearer token") from exc

    logger.debug(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s role=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(principal.id, prefix="pid"),
        principal.role,
    )
    request.state.auth_principal = principal
    return principal


def get_request_principal(request: Request) -> AuthPrincipal | None:
    """Return the principal attached by the auth gate, if any."""
    return getattr(request.state, "auth_principal", None)


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_user_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> UserService:
    return InMemoryUserService(store)


def get_user_controller(
    service: Annotated[UserService, Depends(get_user_service)],
    logger: Annotated[logging.Logger, Depends(get_logger)],
) -> UserController:
    return UserController(service=service, logger=logger)

"""User routes."""

from json import JSONDecodeError
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import JSONResponse

from app.controllers.users import UserController
from app.routes.dependencies import (
    get_authenticated_principal,
    get_request_principal,
    get_user_controller,
)
from app.schemas.auth import AuthPrincipal
from app.schemas.error import (
    AuthErrorResponse,
    ErrorResponse,
    NotFoundErrorResponse,
    ValidationErrorResponse,
)
from app.schemas.user import MessageResponse, UserListResponse, UserResponse

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(get_authenticated_principal)],
    responses={401: {"model": ErrorResponse}},
)

UserIdPath = Annotated[str, Path(alias="id", description="Positive integer user id")]
Controller = Annotated[UserController, Depends(get_user_controller)]
Principal = Annotated[AuthPrincipal | None, Depends(get_request_principal)]


async def _read_json_body(request: Request) -> Any:
    """Decode the request body, leaving schema checks to the controller."""
    body = await request.body()
    if not body:
        return None
    try:
        return await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        return None


@router.get("", response_model=UserListResponse)
async def fetch_all_users(controller: Controller) -> JSONResponse:
    return await controller.fetch_all_users()


@router.get(
    "/{id}",
    response_model=UserResponse,
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": NotFoundErrorResponse}},
)
async def get_user_by_id(user_id: UserIdPath, controller: Controller) -> JSONResponse:
    return await controller.get_user_by_id(user_id)


@router.put(
    "/{id}",
    response_model=UserResponse,
    responses={
        400: {"model": ValidationErrorResponse},
        403: {"model": AuthErrorResponse},
        404: {"model": NotFoundErrorResponse},
    },
)
async def update_user(
    request: Request,
    user_id: UserIdPath,
    principal: Principal,
    controller: Controller,
) -> JSONResponse:
    body = await _read_json_body(request)
    return await controller.update_user(user_id, body, principal)


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses={
        400: {"model": ValidationErrorResponse},
        403: {"model": AuthErrorResponse},
        404: {"model": NotFoundErrorResponse},
    },
)
async def delete_user(user_id: UserIdPath, principal: Principal, controller: Controller) -> JSONResponse:
    return await controller.delete_user(user_id, principal)

"""Auth API router: register, login, change password.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware). Login only reports success or failure;
session issuance belongs to the front end.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.dash_common.database import get_db_session
from src.dash_common.response import ApiResponse, success_response
from src.dash_gateway.auth.dependencies import get_auth_service
from src.dash_gateway.user.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from src.dash_gateway.user.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User registration",
)
async def register(
    request: Request,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    service: AuthService = Depends(get_auth_service),
) -> ApiResponse:
    async with db.begin():
        user = await service.register(body.name, body.email, body.password)

    data = RegisterResponse(
        user_id=user.user_id,
        name=user.name,
        email=user.email,
        created_at=user.created_at.isoformat() if user.created_at else "",
    )
    return success_response(
        data.model_dump(),
        message="User registered successfully",
        request_id=_get_request_id(request),
    )


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Verify credentials",
)
async def login(
    request: Request,
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> ApiResponse:
    user = await service.authenticate(body.email, body.password)

    data = UserInfo(user_id=user.user_id, name=user.name, email=user.email)
    return success_response(
        data.model_dump(),
        message="Login successful",
        request_id=_get_request_id(request),
    )


@router.post(
    "/password",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Change password",
)
async def change_password(
    request: Request,
    body: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db_session),
    service: AuthService = Depends(get_auth_service),
) -> ApiResponse:
    async with db.begin():
        user = await service.change_password(
            body.email, body.current_password, body.new_password
        )

    data = UserInfo(user_id=user.user_id, name=user.name, email=user.email)
    return success_response(
        data.model_dump(),
        message="Password changed",
        request_id=_get_request_id(request),
    )

"""Account and password reset routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Security, status
from fastapi.security import HTTPAuthorizationCredentials

from app.routes.dependencies import (
    bearer_scheme,
    bearer_token,
    get_account_service,
    get_authenticated_identity,
    get_password_reset_service,
)
from app.schemas.auth import (
    Credentials,
    ForgotPasswordRequest,
    Identity,
    RefreshRequest,
    ResetPasswordRequest,
    SessionResponse,
    SignInResponse,
    SignUpResponse,
    UserResponse,
)
from app.schemas.error import ErrorResponse, MessageResponse
from app.services.accounts import AccountService
from app.services.password_reset import PasswordResetService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def sign_up(
    payload: Credentials,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> SignUpResponse:
    return await service.sign_up(email=payload.email, password=payload.password)


@router.post(
    "/signin",
    response_model=SignInResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def sign_in(
    payload: Credentials,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> SignInResponse:
    return await service.sign_in(email=payload.email, password=payload.password)


@router.post(
    "/signout",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def sign_out(
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    message = await service.sign_out(identity=identity, access_token=bearer_token(credentials) or "")
    return MessageResponse(message=message)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse}},
)
async def get_current_user(
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
) -> UserResponse:
    return UserResponse(user=identity)


@router.post(
    "/refresh",
    response_model=SessionResponse,
    responses={400: {"model": ErrorResponse}},
)
async def refresh_session(
    payload: RefreshRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> SessionResponse:
    session = await service.refresh(refresh_token=payload.refresh_token)
    return SessionResponse(session=session)


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}},
)
async def forgot_password(
    payload: ForgotPasswordRequest,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
) -> MessageResponse:
    return MessageResponse(message=await service.request_reset(email=payload.email))


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}},
)
async def reset_password(
    payload: ResetPasswordRequest,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
) -> MessageResponse:
    message = await service.reset_password(
        email=payload.email,
        token=payload.token,
        new_password=payload.new_password,
    )
    return MessageResponse(message=message)

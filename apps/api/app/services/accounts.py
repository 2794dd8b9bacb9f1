"""Account lifecycle service: signup, signin, signout and session refresh."""

from __future__ import annotations

import logging

from app.adapters.auth.base import IdentityProvider, ProviderError
from app.core.logging_safety import safe_email_identifier, safe_log_identifier
from app.errors import ApiError
from app.schemas.auth import AuthSession, Identity, SignInResponse, SignUpResponse

logger = logging.getLogger(__name__)

SIGNUP_CONFIRM_MESSAGE = (
    "Account created successfully. Please check your email to confirm your account before signing in."
)
SIGNUP_MESSAGE = "User created successfully"
SIGNIN_MESSAGE = "Signed in successfully"
SIGNOUT_MESSAGE = "Signed out successfully"


class AccountService:
    def __init__(self, identity: IdentityProvider) -> None:
        self._identity = identity

    async def sign_up(self, *, email: str, password: str) -> SignUpResponse:
        try:
            result = await self._identity.sign_up(email, password)
        except ProviderError as exc:
            logger.warning("account.signup_rejected email=%s error=%s", safe_email_identifier(email), exc)
            raise ApiError(status_code=400, message=str(exc)) from exc

        requires_confirmation = result.user is not None and result.session is None
        logger.info(
            "account.signup email=%s session_issued=%s",
            safe_email_identifier(email),
            result.session is not None,
        )
        if requires_confirmation:
            return SignUpResponse(
                message=SIGNUP_CONFIRM_MESSAGE,
                user=result.user,
                session=None,
                requiresEmailConfirmation=True,
            )
        return SignUpResponse(
            message=SIGNUP_MESSAGE,
            user=result.user,
            session=result.session,
            requiresEmailConfirmation=False,
        )

    async def sign_in(self, *, email: str, password: str) -> SignInResponse:
        try:
            result = await self._identity.sign_in(email, password)
        except ProviderError as exc:
            logger.warning("account.signin_rejected email=%s", safe_email_identifier(email))
            raise ApiError(status_code=401, message=str(exc)) from exc

        logger.info("account.signin principal_id=%s", safe_log_identifier(result.user.id, prefix="pid"))
        return SignInResponse(message=SIGNIN_MESSAGE, user=result.user, session=result.session)

    async def sign_out(self, *, identity: Identity, access_token: str) -> str:
        try:
            await self._identity.sign_out(access_token)
        except ProviderError as exc:
            raise ApiError(status_code=400, message=str(exc)) from exc

        logger.info("account.signout principal_id=%s", safe_log_identifier(identity.id, prefix="pid"))
        return SIGNOUT_MESSAGE

    async def refresh(self, *, refresh_token: str) -> AuthSession:
        try:
            return await self._identity.refresh_session(refresh_token)
        except ProviderError as exc:
            raise ApiError(status_code=400, message=str(exc)) from exc

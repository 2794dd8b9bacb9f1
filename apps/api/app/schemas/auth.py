"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """Identity resolved by the provider for the current bearer token.

    Provider-specific fields (metadata, timestamps, confirmation state) are kept
    as extras so ``/auth/me`` can echo the full record.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    email: str | None = None


class AuthSession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    expires_at: int | None = None


class Credentials(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: str = Field(min_length=1)


class ResetPasswordRequest(BaseModel):
    email: str = Field(min_length=1)
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=1)


class SignUpResponse(BaseModel):
    message: str
    user: Identity | None
    session: AuthSession | None
    requiresEmailConfirmation: bool


class SignInResponse(BaseModel):
    message: str
    user: Identity
    session: AuthSession


class SessionResponse(BaseModel):
    session: AuthSession


class UserResponse(BaseModel):
    user: Identity

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.api.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: str = Field(..., max_length=255)
    nickname: str = Field(..., max_length=120)
    password: str = Field(..., max_length=256)


class LoginRequest(CamelModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=256)


class GoogleLoginRequest(CamelModel):
    id_token: str = Field(..., min_length=1)


class VerifyEmailRequest(CamelModel):
    token: str = Field(..., max_length=256)


class ResendVerificationRequest(CamelModel):
    email: str = Field(..., max_length=255)


class RefreshTokenRequest(CamelModel):
    refresh_token: str


class LogoutRequest(CamelModel):
    refresh_token: str = ""


class AuthUserResponse(CamelModel):
    id: str
    email: str
    nickname: str
    is_verified: bool
    premium_status: str
    profile_picture: str | None = None


class AuthTokensResponse(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    access_expires_at: datetime
    refresh_expires_at: datetime


class AuthData(CamelModel):
    user: AuthUserResponse
    tokens: AuthTokensResponse


class AccessTokenData(CamelModel):
    access_token: str
    access_expires_at: datetime

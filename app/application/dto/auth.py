from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.entities.user import PremiumStatus, TokenType


@dataclass(frozen=True)
class AuthUserOutput:
    id: str
    email: str
    nickname: str
    is_verified: bool
    premium_status: PremiumStatus
    profile_picture: str | None


@dataclass(frozen=True)
class RegisterUserInput:
    email: str
    nickname: str
    password: str


@dataclass(frozen=True)
class MessageOutput:
    message: str


@dataclass(frozen=True)
class LoginLocalInput:
    email: str
    password: str


@dataclass(frozen=True)
class LoginGoogleInput:
    id_token: str


@dataclass(frozen=True)
class VerifyEmailInput:
    token: str


@dataclass(frozen=True)
class ResendVerificationInput:
    email: str


@dataclass(frozen=True)
class RefreshSessionInput:
    refresh_token: str


@dataclass(frozen=True)
class RefreshSessionOutput:
    access_token: str
    access_expires_at: datetime


@dataclass(frozen=True)
class LogoutInput:
    refresh_token: str


@dataclass(frozen=True)
class AuthTokensOutput:
    user: AuthUserOutput
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


@dataclass(frozen=True)
class TokenPayload:
    user_id: str
    email: str
    type: TokenType


@dataclass(frozen=True)
class GoogleIdentityInfo:
    subject: str
    email: str
    email_verified: bool
    name: str | None
    picture: str | None
    given_name: str | None
    family_name: str | None

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


PremiumStatus = Literal["FREE", "PREMIUM_SUBSCRIPTION", "PREMIUM_LIFETIME"]

TokenType = Literal["access", "refresh"]


@dataclass(frozen=True)
class User:
    id: str
    email: str
    nickname: str
    password_hash: str | None
    google_id: str | None
    profile_picture: str | None
    first_name: str | None
    last_name: str | None
    verification_token: str | None
    is_verified: bool
    is_email_verified: bool
    premium_status: PremiumStatus
    premium_expiry: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class AuthSession:
    id: str
    user_id: str
    token: str
    expires_at: datetime
    created_at: datetime

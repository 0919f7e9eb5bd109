from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.entities.user import PremiumStatus


@dataclass(frozen=True)
class UserProfileOutput:
    id: str
    email: str
    nickname: str
    is_verified: bool
    premium_status: PremiumStatus
    premium_expiry: datetime | None
    profile_picture: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UpdateProfileInput:
    user_id: str
    nickname: str | None
    email: str | None


@dataclass(frozen=True)
class ChangePasswordInput:
    user_id: str
    current_password: str
    new_password: str


@dataclass(frozen=True)
class DeleteAccountInput:
    user_id: str

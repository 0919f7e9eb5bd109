from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.api.schemas.common import CamelModel


class UserProfileResponse(CamelModel):
    id: str
    email: str
    nickname: str
    is_verified: bool
    premium_status: str
    premium_expiry: datetime | None = None
    profile_picture: str | None = None
    created_at: datetime
    updated_at: datetime


class ProfileData(CamelModel):
    user: UserProfileResponse


class UpdateProfileRequest(CamelModel):
    nickname: str | None = Field(default=None, max_length=120)
    email: str | None = Field(default=None, max_length=255)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., max_length=256)
    new_password: str = Field(..., max_length=256)

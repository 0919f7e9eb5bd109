from __future__ import annotations

from app.application.dto.user import UserProfileOutput
from app.domain.entities.user import User

from .auth_common import build_user_profile_output


class GetProfileUseCase:
    def execute(self, *, user: User) -> UserProfileOutput:
        return build_user_profile_output(user)

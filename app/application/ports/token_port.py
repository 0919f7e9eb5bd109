from __future__ import annotations

from datetime import datetime
from typing import Protocol

from app.application.dto.auth import TokenPayload
from app.domain.entities.user import TokenType


class TokenPort(Protocol):
    def create_access_token(self, *, user_id: str, email: str, now: datetime) -> tuple[str, datetime]:
        ...

    def create_refresh_token(self, *, user_id: str, email: str, now: datetime) -> tuple[str, datetime]:
        ...

    def decode_token(self, *, token: str, expected_type: TokenType) -> TokenPayload:
        ...

    def decode_access_token(self, *, token: str) -> TokenPayload:
        ...

    def generate_verification_token(self) -> str:
        ...

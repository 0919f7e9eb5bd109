from __future__ import annotations

from datetime import datetime
from typing import Callable, Protocol, TypeVar

from app.domain.entities.user import AuthSession, User


TAuthResult = TypeVar("TAuthResult")


class AuthPort(Protocol):
    def execute_in_transaction(self, fn: Callable[[AuthPort], TAuthResult]) -> TAuthResult:
        ...

    def get_user_by_id(self, *, user_id: str) -> User | None:
        ...

    def get_user_by_email(self, *, email: str) -> User | None:
        ...

    def get_user_by_verification_token(self, *, verification_token: str) -> User | None:
        ...

    def find_user_by_google_id_or_email(self, *, google_id: str, email: str) -> User | None:
        ...

    def create_user(
        self,
        *,
        user_id: str,
        email: str,
        nickname: str,
        password_hash: str | None,
        google_id: str | None,
        profile_picture: str | None,
        first_name: str | None,
        last_name: str | None,
        verification_token: str | None,
        is_verified: bool,
        is_email_verified: bool,
        created_at: datetime,
    ) -> User:
        ...

    def mark_user_verified(self, *, user_id: str, verification_token: str) -> bool:
        ...


    def update_verification_token(self, *, user_id: str, verification_token: str) -> None:
        ...

    def link_google_identity(
        self,
        *,
        user_id: str,
        google_id: str,
        profile_picture: str | None,
    ) -> User:
        ...

    def update_user_profile(
        self,
        *,
        user_id: str,
        nickname: str,
        email: str,
        is_verified: bool,
        verification_token: str | None,
    ) -> User:
        ...

    def update_user_password_hash(self, *, user_id: str, password_hash: str) -> None:
        ...

    def delete_user(self, *, user_id: str) -> None:
        ...

    def delete_payments_for_user(self, *, user_id: str) -> int:
        ...

    def create_session(
        self,
        *,
        session_id: str,
        user_id: str,
        token: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> AuthSession:
        ...

    def get_session_by_token(self, *, token: str) -> AuthSession | None:
        ...

    def delete_session(self, *, session_id: str) -> None:
        ...

    def delete_sessions_by_token(self, *, token: str) -> int:
        ...

    def delete_sessions_for_user(self, *, user_id: str) -> int:
        ...

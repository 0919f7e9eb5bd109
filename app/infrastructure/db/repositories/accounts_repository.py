from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
import logging
from typing import Callable, Iterator, TypeVar

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from app.application.ports.auth_port import AuthPort
from app.domain.exceptions import EmailAlreadyExistsError, EmailTakenError
from app.infrastructure.db.mappers.accounts_mapper import map_row_to_auth_session, map_row_to_user


logger = logging.getLogger(__name__)

TResult = TypeVar("TResult")

USER_COLUMNS = """
    id, email, nickname, password_hash, google_id, profile_picture, first_name, last_name,
    verification_token, is_verified, is_email_verified, premium_status, premium_expiry,
    created_at, updated_at
"""

SESSION_COLUMNS = "id, user_id, token, expires_at, created_at"


class SqlAccountsRepository(AuthPort):
    def __init__(self, engine: Engine, *, connection: Connection | None = None):
        self._engine = engine
        self._connection = connection

    def execute_in_transaction(self, fn: Callable[[AuthPort], TResult]) -> TResult:
        if self._connection is not None:
            return fn(self)
        with self._engine.begin() as conn:
            return fn(SqlAccountsRepository(self._engine, connection=conn))

    @contextmanager
    def _reading(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
            return
        with self._engine.connect() as conn:
            yield conn

    @contextmanager
    def _writing(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
            return
        with self._engine.begin() as conn:
            yield conn

    def _fetch_user(self, sql: str, params: dict):
        with self._reading() as conn:
            row = conn.execute(text(sql), params).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_user_by_id(self, *, user_id: str):
        sql = f"""
            SELECT {USER_COLUMNS}
            FROM public.users
            WHERE id = :user_id
            LIMIT 1
        """
        return self._fetch_user(sql, {"user_id": user_id})

    def get_user_by_email(self, *, email: str):
        sql = f"""
            SELECT {USER_COLUMNS}
            FROM public.users
            WHERE email = :email
            LIMIT 1
        """
        return self._fetch_user(sql, {"email": email.lower()})

    def get_user_by_verification_token(self, *, verification_token: str):
        sql = f"""
            SELECT {USER_COLUMNS}
            FROM public.users
            WHERE verification_token = :verification_token
            LIMIT 1
        """
        return self._fetch_user(sql, {"verification_token": verification_token})

    def find_user_by_google_id_or_email(self, *, google_id: str, email: str):
        sql = f"""
            SELECT {USER_COLUMNS}
            FROM public.users
            WHERE google_id = :google_id
               OR email = :email
            ORDER BY (google_id = :google_id) DESC NULLS LAST
            LIMIT 1
        """
        return self._fetch_user(sql, {"google_id": google_id, "email": email.lower()})

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
    ):
        sql = f"""
            INSERT INTO public.users (
                id, email, nickname, password_hash, google_id, profile_picture, first_name, last_name,
                verification_token, is_verified, is_email_verified, premium_status, created_at, updated_at
            ) VALUES (
                :id, :email, :nickname, :password_hash, :google_id, :profile_picture, :first_name, :last_name,
                :verification_token, :is_verified, :is_email_verified, 'FREE', :created_at, :created_at
            )
            RETURNING {USER_COLUMNS}
        """
        params = {
            "id": user_id,
            "email": email.lower(),
            "nickname": nickname,
            "password_hash": password_hash,
            "google_id": google_id,
            "profile_picture": profile_picture,
            "first_name": first_name,
            "last_name": last_name,
            "verification_token": verification_token,
            "is_verified": is_verified,
            "is_email_verified": is_email_verified,
            "created_at": created_at,
        }
        try:
            with self._writing() as conn:
                row = conn.execute(text(sql), params).mappings().one()
        except IntegrityError as exc:
            logger.info("accounts_repository: create_user_conflict email=%s", email)
            raise EmailAlreadyExistsError("A user with this email already exists.") from exc
        return map_row_to_user(row)

    def mark_user_verified(self, *, user_id: str, verification_token: str) -> bool:
        sql = """
            UPDATE public.users
            SET is_verified = true,
                verification_token = NULL,
                updated_at = now()
            WHERE id = :user_id
              AND verification_token = :verification_token
              AND is_verified = false
        """
        params = {"user_id": user_id, "verification_token": verification_token}
        with self._writing() as conn:
            result = conn.execute(text(sql), params)
        return int(result.rowcount or 0) > 0

    def update_verification_token(self, *, user_id: str, verification_token: str) -> None:
        sql = """
            UPDATE public.users
            SET verification_token = :verification_token,
                updated_at = now()
            WHERE id = :user_id
        """
        with self._writing() as conn:
            conn.execute(text(sql), {"user_id": user_id, "verification_token": verification_token})

    def link_google_identity(self, *, user_id: str, google_id: str, profile_picture: str | None):
        sql = f"""
            UPDATE public.users
            SET google_id = :google_id,
                profile_picture = :profile_picture,
                updated_at = now()
            WHERE id = :user_id
            RETURNING {USER_COLUMNS}
        """
        with self._writing() as conn:
            row = conn.execute(
                text(sql),
                {
                    "user_id": user_id,
                    "google_id": google_id,
                    "profile_picture": profile_picture,
                },
            ).mappings().one()
        return map_row_to_user(row)

    def update_user_profile(
        self,
        *,
        user_id: str,
        nickname: str,
        email: str,
        is_verified: bool,
        verification_token: str | None,
    ):
        sql = f"""
            UPDATE public.users
            SET nickname = :nickname,
                email = :email,
                is_verified = :is_verified,
                verification_token = :verification_token,
                updated_at = now()
            WHERE id = :user_id
            RETURNING {USER_COLUMNS}
        """
        params = {
            "user_id": user_id,
            "nickname": nickname,
            "email": email.lower(),
            "is_verified": is_verified,
            "verification_token": verification_token,
        }
        try:
            with self._writing() as conn:
                row = conn.execute(text(sql), params).mappings().one()
        except IntegrityError as exc:
            raise EmailTakenError("This email address is already in use.") from exc
        return map_row_to_user(row)

    def update_user_password_hash(self, *, user_id: str, password_hash: str) -> None:
        sql = """
            UPDATE public.users
            SET password_hash = :password_hash,
                updated_at = now()
            WHERE id = :user_id
        """
        with self._writing() as conn:
            conn.execute(text(sql), {"user_id": user_id, "password_hash": password_hash})

    def delete_user(self, *, user_id: str) -> None:
        sql = """
            DELETE FROM public.users
            WHERE id = :user_id
        """
        with self._writing() as conn:
            conn.execute(text(sql), {"user_id": user_id})

    def delete_payments_for_user(self, *, user_id: str) -> int:
        sql = """
            DELETE FROM public.payments
            WHERE user_id = :user_id
        """
        with self._writing() as conn:
            result = conn.execute(text(sql), {"user_id": user_id})
        return int(result.rowcount or 0)

    def create_session(
        self,
        *,
        session_id: str,
        user_id: str,
        token: str,
        expires_at: datetime,
        created_at: datetime,
    ):
        sql = f"""
            INSERT INTO public.sessions (
                id, user_id, token, expires_at, created_at
            ) VALUES (
                :id, :user_id, :token, :expires_at, :created_at
            )
            RETURNING {SESSION_COLUMNS}
        """
        with self._writing() as conn:
            row = conn.execute(
                text(sql),
                {
                    "id": session_id,
                    "user_id": user_id,
                    "token": token,
                    "expires_at": expires_at,
                    "created_at": created_at,
                },
            ).mappings().one()
        return map_row_to_auth_session(row)

    def get_session_by_token(self, *, token: str):
        sql = f"""
            SELECT {SESSION_COLUMNS}
            FROM public.sessions
            WHERE token = :token
            LIMIT 1
        """
        with self._reading() as conn:
            row = conn.execute(text(sql), {"token": token}).mappings().first()
        if row is None:
            return None
        return map_row_to_auth_session(row)

    def delete_session(self, *, session_id: str) -> None:
        sql = """
            DELETE FROM public.sessions
            WHERE id = :session_id
        """
        with self._writing() as conn:
            conn.execute(text(sql), {"session_id": session_id})

    def delete_sessions_by_token(self, *, token: str) -> int:
        sql = """
            DELETE FROM public.sessions
            WHERE token = :token
        """
        with self._writing() as conn:
            result = conn.execute(text(sql), {"token": token})
        return int(result.rowcount or 0)

    def delete_sessions_for_user(self, *, user_id: str) -> int:
        sql = """
            DELETE FROM public.sessions
            WHERE user_id = :user_id
        """
        with self._writing() as conn:
            result = conn.execute(text(sql), {"user_id": user_id})
        return int(result.rowcount or 0)

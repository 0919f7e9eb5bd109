from __future__ import annotations

from typing import Any, Mapping

from app.domain.entities.user import AuthSession, User


def _as_str(value: Any) -> str:
    return str(value)


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        email=row["email"],
        nickname=row["nickname"],
        password_hash=row.get("password_hash"),
        google_id=row.get("google_id"),
        profile_picture=row.get("profile_picture"),
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
        verification_token=row.get("verification_token"),
        is_verified=bool(row["is_verified"]),
        is_email_verified=bool(row["is_email_verified"]),
        premium_status=row.get("premium_status") or "FREE",
        premium_expiry=row.get("premium_expiry"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def map_row_to_auth_session(row: Mapping[str, Any]) -> AuthSession:
    return AuthSession(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        token=row["token"],
        expires_at=row["expires_at"],
        created_at=row["created_at"],
    )

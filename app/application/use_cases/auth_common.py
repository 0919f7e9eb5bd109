from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from app.application.dto.auth import AuthTokensOutput, AuthUserOutput
from app.application.dto.user import UserProfileOutput
from app.application.ports.auth_port import AuthPort
from app.application.ports.email_port import EmailPort
from app.application.ports.token_port import TokenPort
from app.domain.entities.user import User
from app.domain.exceptions import EmailDeliveryError


logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def build_auth_user_output(user: User) -> AuthUserOutput:
    return AuthUserOutput(
        id=user.id,
        email=user.email,
        nickname=user.nickname,
        is_verified=user.is_verified,
        premium_status=user.premium_status,
        profile_picture=user.profile_picture,
    )


def build_user_profile_output(user: User) -> UserProfileOutput:
    return UserProfileOutput(
        id=user.id,
        email=user.email,
        nickname=user.nickname,
        is_verified=user.is_verified,
        premium_status=user.premium_status,
        premium_expiry=user.premium_expiry,
        profile_picture=user.profile_picture,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def issue_tokens(
    *,
    user: User,
    auth_port: AuthPort,
    token_port: TokenPort,
) -> AuthTokensOutput:
    now = utcnow()
    access_token, access_expires_at = token_port.create_access_token(
        user_id=user.id,
        email=user.email,
        now=now,
    )
    refresh_token, refresh_expires_at = token_port.create_refresh_token(
        user_id=user.id,
        email=user.email,
        now=now,
    )
    auth_port.create_session(
        session_id=str(uuid4()),
        user_id=user.id,
        token=refresh_token,
        expires_at=refresh_expires_at,
        created_at=now,
    )
    return AuthTokensOutput(
        user=build_auth_user_output(user),
        access_token=access_token,
        refresh_token=refresh_token,
        access_expires_at=access_expires_at,
        refresh_expires_at=refresh_expires_at,
    )


def send_verification_email_safely(
    *,
    email_port: EmailPort,
    user: User,
    verification_token: str,
) -> bool:
    # Delivery failures never fail the calling operation.
    try:
        email_port.send_verification_email(
            email=user.email,
            nickname=user.nickname,
            verification_token=verification_token,
        )
    except EmailDeliveryError as exc:
        logger.warning(
            "auth: verification_email_failed user_id=%s email=%s error=%s",
            user.id,
            user.email,
            exc,
        )
        return False
    return True

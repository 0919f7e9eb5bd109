from __future__ import annotations

from datetime import datetime

from app.domain.entities.user import User
from app.domain.exceptions import EmailNotVerifiedError, PremiumRequiredError


def has_premium_access(user: User, *, now: datetime) -> bool:
    if user.premium_status == "PREMIUM_LIFETIME":
        return True
    if user.premium_status == "PREMIUM_SUBSCRIPTION":
        return user.premium_expiry is None or user.premium_expiry > now
    return False


def require_verified_email(user: User) -> User:
    if not user.is_verified:
        raise EmailNotVerifiedError("Email verification required.")
    return user


def require_premium(user: User, *, now: datetime) -> User:
    if not has_premium_access(user, now=now):
        raise PremiumRequiredError("Premium subscription required.")
    return user

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.domain.exceptions import EmailNotVerifiedError, PremiumRequiredError
from app.domain.services.access_policy import has_premium_access, require_premium, require_verified_email
from app.domain.services.credentials_policy import is_valid_email, password_policy_violations
from tests.fakes import FakeAuthPort


NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "email,expected",
    [
        ("a@b.com", True),
        ("first.last@sub.example.org", True),
        ("no-at-sign.com", False),
        ("a@b", False),
        ("a b@c.com", False),
        ("", False),
    ],
)
def test_is_valid_email(email, expected):
    assert is_valid_email(email) is expected


def test_password_policy_accepts_strong_password():
    assert password_policy_violations("Aa1aaaaa") == []


def test_password_policy_lists_all_violations_in_order():
    assert password_policy_violations("") == [
        "Password must be at least 8 characters long",
        "Password must contain at least one uppercase letter",
        "Password must contain at least one lowercase letter",
        "Password must contain at least one number",
    ]


def test_password_policy_caps_utf8_byte_length():
    assert password_policy_violations("Aa1" + "a" * 69) == []
    assert password_policy_violations("Aa1" + "a" * 70) == ["Password must be at most 72 bytes long"]
    # 36 two-byte characters already fill the limit.
    assert "Password must be at most 72 bytes long" in password_policy_violations("Aa1" + "\u00e9" * 36)


def test_premium_access_rules():
    auth_port = FakeAuthPort()
    free = auth_port.add_user(premium_status="FREE")
    lifetime = auth_port.add_user(premium_status="PREMIUM_LIFETIME")
    active = auth_port.add_user(premium_status="PREMIUM_SUBSCRIPTION", premium_expiry=NOW + timedelta(days=1))
    lapsed = auth_port.add_user(premium_status="PREMIUM_SUBSCRIPTION", premium_expiry=NOW - timedelta(days=1))

    assert has_premium_access(free, now=NOW) is False
    assert has_premium_access(lifetime, now=NOW) is True
    assert has_premium_access(active, now=NOW) is True
    assert has_premium_access(lapsed, now=NOW) is False
    with pytest.raises(PremiumRequiredError):
        require_premium(lapsed, now=NOW)
    assert require_premium(lifetime, now=NOW) is lifetime


def test_require_verified_email():
    auth_port = FakeAuthPort()
    verified = auth_port.add_user(is_verified=True)
    pending = auth_port.add_user(is_verified=False)

    assert require_verified_email(verified) is verified
    with pytest.raises(EmailNotVerifiedError):
        require_verified_email(pending)

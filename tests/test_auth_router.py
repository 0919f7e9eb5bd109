from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from app.api import deps
from app.application.use_cases.change_password import ChangePasswordUseCase
from app.application.use_cases.delete_account import DeleteAccountUseCase
from app.application.use_cases.get_profile import GetProfileUseCase
from app.application.use_cases.login_google import LoginGoogleUseCase
from app.application.use_cases.login_local import LoginLocalUseCase
from app.application.use_cases.logout_session import LogoutSessionUseCase
from app.application.use_cases.refresh_session import RefreshSessionUseCase
from app.application.use_cases.register_user import RegisterUserUseCase
from app.application.use_cases.resend_verification import ResendVerificationUseCase
from app.application.use_cases.update_profile import UpdateProfileUseCase
from app.application.use_cases.verify_email import VerifyEmailUseCase
from app.domain.exceptions import EmailAlreadyExistsError
from app.infrastructure.security.token_service import JwtTokenService
from app.main import app
from tests.fakes import (
    FakeAuthPort,
    FakeEmailPort,
    FakeGoogleOauthPort,
    FakePasswordHasher,
    SequentialTokenPort,
)


class Harness:
    def __init__(self):
        self.auth_port = FakeAuthPort()
        self.email_port = FakeEmailPort()
        self.token_port = SequentialTokenPort(
            JwtTokenService(
                access_secret="access-secret",
                refresh_secret="refresh-secret",
                access_ttl_minutes=15,
                refresh_ttl_days=7,
                issuer="mobile-app-skeleton",
                audience="mobile-app-users",
            )
        )
        hasher = FakePasswordHasher()
        self.overrides = {
            deps.get_auth_port: lambda: self.auth_port,
            deps.get_token_port: lambda: self.token_port,
            deps.get_register_user_use_case: lambda: RegisterUserUseCase(
                auth_port=self.auth_port,
                password_hasher=hasher,
                token_port=self.token_port,
                email_port=self.email_port,
            ),
            deps.get_login_local_use_case: lambda: LoginLocalUseCase(
                auth_port=self.auth_port,
                password_hasher=hasher,
                token_port=self.token_port,
            ),
            deps.get_login_google_use_case: lambda: LoginGoogleUseCase(
                auth_port=self.auth_port,
                google_oauth_port=FakeGoogleOauthPort(),
                token_port=self.token_port,
            ),
            deps.get_verify_email_use_case: lambda: VerifyEmailUseCase(auth_port=self.auth_port),
            deps.get_resend_verification_use_case: lambda: ResendVerificationUseCase(
                auth_port=self.auth_port,
                token_port=self.token_port,
                email_port=self.email_port,
            ),
            deps.get_refresh_session_use_case: lambda: RefreshSessionUseCase(
                auth_port=self.auth_port,
                token_port=self.token_port,
            ),
            deps.get_logout_session_use_case: lambda: LogoutSessionUseCase(auth_port=self.auth_port),
            deps.get_get_profile_use_case: lambda: GetProfileUseCase(),
            deps.get_update_profile_use_case: lambda: UpdateProfileUseCase(
                auth_port=self.auth_port,
                token_port=self.token_port,
                email_port=self.email_port,
            ),
            deps.get_change_password_use_case: lambda: ChangePasswordUseCase(
                auth_port=self.auth_port,
                password_hasher=hasher,
            ),
            deps.get_delete_account_use_case: lambda: DeleteAccountUseCase(auth_port=self.auth_port),
        }

    def register_and_verify(self, client: TestClient, email: str = "a@b.com") -> None:
        client.post("/auth/register", json={"email": email, "nickname": "Nick", "password": "Aa1aaaaa"})
        token = self.email_port.sent[-1]["verification_token"]
        client.post("/auth/verify-email", json={"token": token})

    def login(self, client: TestClient, email: str = "a@b.com", password: str = "Aa1aaaaa") -> dict:
        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200
        return response.json()["data"]


@pytest.fixture
def harness():
    h = Harness()
    app.dependency_overrides.update(h.overrides)
    yield h
    app.dependency_overrides.clear()


@pytest.fixture
def client(harness):
    return TestClient(app)


def _auth(access_token: str) -> dict:
    return {"Authorization": f"Bearer {access_token}"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"status": "ok"}}


def test_full_session_lifecycle(client, harness):
    register = client.post("/auth/register", json={"email": "a@b.com", "nickname": "Nick", "password": "Aa1aaaaa"})
    assert register.status_code == 201
    assert register.json()["success"] is True

    blocked = client.post("/auth/login", json={"email": "a@b.com", "password": "Aa1aaaaa"})
    assert blocked.status_code == 401
    assert blocked.json()["error"]["code"] == "EMAIL_NOT_VERIFIED"

    verify = client.post("/auth/verify-email", json={"token": harness.email_port.sent[0]["verification_token"]})
    assert verify.status_code == 200

    data = harness.login(client)
    assert data["user"]["email"] == "a@b.com"
    assert data["user"]["isVerified"] is True
    assert data["user"]["premiumStatus"] == "FREE"
    tokens = data["tokens"]
    assert tokens["tokenType"] == "bearer"
    assert tokens["accessToken"] and tokens["refreshToken"]

    refreshed = client.post("/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert refreshed.status_code == 200
    assert refreshed.json()["data"]["accessToken"]

    logout = client.post("/auth/logout", json={"refreshToken": tokens["refreshToken"]})
    assert logout.status_code == 200

    again = client.post("/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert again.status_code == 401
    assert again.json() == {
        "success": False,
        "error": {"code": "UNAUTHORIZED", "message": "Invalid or expired refresh token."},
    }


def test_register_weak_password_lists_details(client):
    response = client.post("/auth/register", json={"email": "a@b.com", "nickname": "Nick", "password": "abc"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "WEAK_PASSWORD"
    assert "Password must contain at least one number" in error["details"]


def test_register_missing_field_is_validation_error(client):
    response = client.post("/auth/register", json={"email": "a@b.com", "password": "Aa1aaaaa"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"


def test_register_duplicate_email_conflicts(client, harness):
    harness.auth_port.add_user(email="a@b.com")

    response = client.post("/auth/register", json={"email": "A@b.com", "nickname": "Nick", "password": "Aa1aaaaa"})

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USER_EXISTS"


def test_login_wrong_password_is_invalid_credentials(client, harness):
    harness.register_and_verify(client)

    response = client.post("/auth/login", json={"email": "a@b.com", "password": "Wrong1234"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_verify_email_twice_is_invalid_token(client, harness):
    client.post("/auth/register", json={"email": "a@b.com", "nickname": "Nick", "password": "Aa1aaaaa"})
    token = harness.email_port.sent[0]["verification_token"]

    client.post("/auth/verify-email", json={"token": token})
    response = client.post("/auth/verify-email", json={"token": token})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


def test_resend_verification_for_verified_account(client, harness):
    harness.register_and_verify(client)

    response = client.post("/auth/resend-verification", json={"email": "a@b.com"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ALREADY_VERIFIED"


def test_google_login_returns_tokens(client, harness):
    response = client.post("/auth/google", json={"idToken": "token-google"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["email"] == "user@example.com"
    assert data["user"]["profilePicture"] == "https://example.com/avatar.png"
    assert len(harness.auth_port.sessions) == 1


def test_google_login_rejects_bad_token(client):
    response = client.post("/auth/google", json={"idToken": "forged"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_auth_profile_requires_bearer_token(client):
    response = client.get("/auth/profile")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "NO_TOKEN"


def test_auth_profile_returns_current_user(client, harness):
    harness.register_and_verify(client)
    tokens = harness.login(client)["tokens"]

    response = client.get("/auth/profile", headers=_auth(tokens["accessToken"]))

    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["nickname"] == "Nick"
    assert "createdAt" in user
    assert user["premiumExpiry"] is None


def test_users_routes_require_verified_email(client, harness):
    user = harness.auth_port.add_user(email="p@b.com", is_verified=False)
    access_token, _ = harness.token_port.create_access_token(
        user_id=user.id,
        email=user.email,
        now=user.created_at,
    )

    response = client.get("/users/profile", headers=_auth(access_token))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "EMAIL_NOT_VERIFIED"


def test_update_profile_email_conflict(client, harness):
    harness.register_and_verify(client)
    harness.auth_port.add_user(id="other", email="other@b.com")
    tokens = harness.login(client)["tokens"]

    response = client.put(
        "/users/profile",
        json={"email": "other@b.com"},
        headers=_auth(tokens["accessToken"]),
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_TAKEN"


def test_update_profile_nickname(client, harness):
    harness.register_and_verify(client)
    tokens = harness.login(client)["tokens"]

    response = client.put("/users/profile", json={"nickname": "Renamed"}, headers=_auth(tokens["accessToken"]))

    assert response.status_code == 200
    assert response.json()["data"]["user"]["nickname"] == "Renamed"


def test_change_password_revokes_refresh_tokens(client, harness):
    harness.register_and_verify(client)
    tokens = harness.login(client)["tokens"]

    response = client.put(
        "/users/password",
        json={"currentPassword": "Aa1aaaaa", "newPassword": "Bb2bbbbb"},
        headers=_auth(tokens["accessToken"]),
    )

    assert response.status_code == 200
    refreshed = client.post("/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert refreshed.status_code == 401
    assert harness.login(client, password="Bb2bbbbb")["user"]["email"] == "a@b.com"


def test_change_password_same_password(client, harness):
    harness.register_and_verify(client)
    tokens = harness.login(client)["tokens"]

    response = client.put(
        "/users/password",
        json={"currentPassword": "Aa1aaaaa", "newPassword": "Aa1aaaaa"},
        headers=_auth(tokens["accessToken"]),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "SAME_PASSWORD"


def test_delete_account_then_token_is_useless(client, harness):
    harness.register_and_verify(client)
    tokens = harness.login(client)["tokens"]

    response = client.delete("/users/account", headers=_auth(tokens["accessToken"]))

    assert response.status_code == 200
    assert harness.auth_port.users == {}
    profile = client.get("/auth/profile", headers=_auth(tokens["accessToken"]))
    assert profile.status_code == 401
    assert profile.json()["error"]["code"] == "USER_NOT_FOUND"


class ConflictingInsertAuthPort(FakeAuthPort):
    """Simulates another request creating the same account between lookup and insert."""

    def create_user(self, **kwargs):
        raise EmailAlreadyExistsError("A user with this email already exists.")


def test_google_login_insert_conflict_is_user_exists(client, harness):
    app.dependency_overrides[deps.get_login_google_use_case] = lambda: LoginGoogleUseCase(
        auth_port=ConflictingInsertAuthPort(),
        google_oauth_port=FakeGoogleOauthPort(),
        token_port=harness.token_port,
    )

    response = client.post("/auth/google", json={"idToken": "token-google"})

    assert response.status_code == 409
    assert response.json()["success"] is False
    assert response.json()["error"]["code"] == "USER_EXISTS"


def test_register_rejects_password_longer_than_72_bytes(client, harness):
    response = client.post(
        "/auth/register",
        json={"email": "a@b.com", "nickname": "Nick", "password": "Aa1" + "a" * 80},
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"] == ["Password must be at most 72 bytes long"]
    assert harness.auth_port.users == {}

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from app.api.errors import http_error, http_error_code
from app.application.ports.auth_port import AuthPort
from app.application.ports.email_port import EmailPort
from app.application.ports.token_port import TokenPort
from app.application.use_cases.auth_common import utcnow
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
from app.domain.entities.user import User
from app.domain.exceptions import ConfigurationError, EmailNotVerifiedError, PremiumRequiredError, TokenError
from app.domain.services.access_policy import require_premium, require_verified_email
from app.infrastructure.clients.background_email_notifier import BackgroundEmailNotifier
from app.infrastructure.clients.google_oidc_client import GoogleOidcClient
from app.infrastructure.clients.resend_email_client import ResendEmailClient, ResendEmailClientSettings
from app.infrastructure.db.engine import get_engine
from app.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from app.infrastructure.security.password_hasher import PasswordHasher
from app.infrastructure.security.token_service import JwtTokenService
from app.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


@lru_cache(maxsize=1)
def _get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


@lru_cache(maxsize=1)
def _get_token_service() -> JwtTokenService:
    settings = get_settings()
    try:
        return JwtTokenService(
            access_secret=settings.jwt_access_secret,
            refresh_secret=settings.jwt_refresh_secret,
            access_ttl_minutes=settings.jwt_access_ttl_minutes,
            refresh_ttl_days=settings.jwt_refresh_ttl_days,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
        )
    except ConfigurationError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@lru_cache(maxsize=1)
def _get_google_oauth_client() -> GoogleOidcClient:
    settings = get_settings()
    if not settings.google_client_id:
        raise HTTPException(status_code=500, detail="GOOGLE_CLIENT_ID is required.")
    return GoogleOidcClient(client_id=settings.google_client_id)


@lru_cache(maxsize=1)
def get_email_notifier() -> BackgroundEmailNotifier:
    settings = get_settings()
    client = ResendEmailClient(
        ResendEmailClientSettings(
            api_key=settings.resend_api_key,
            api_base=settings.email_api_base,
            from_email=settings.email_from,
            timeout_seconds=settings.email_timeout_seconds,
            app_name=settings.app_name,
            frontend_url=settings.frontend_url,
            deep_link_scheme=settings.app_deep_link_scheme,
        )
    )
    return BackgroundEmailNotifier(delegate=client)


def get_auth_port() -> AuthPort:
    return SqlAccountsRepository(_get_db_engine())


def get_token_port() -> TokenPort:
    return _get_token_service()


def _email_port() -> EmailPort:
    return get_email_notifier()


def get_register_user_use_case() -> RegisterUserUseCase:
    return RegisterUserUseCase(
        auth_port=get_auth_port(),
        password_hasher=_get_password_hasher(),
        token_port=get_token_port(),
        email_port=_email_port(),
    )


def get_login_local_use_case() -> LoginLocalUseCase:
    return LoginLocalUseCase(
        auth_port=get_auth_port(),
        password_hasher=_get_password_hasher(),
        token_port=get_token_port(),
    )


def get_login_google_use_case() -> LoginGoogleUseCase:
    return LoginGoogleUseCase(
        auth_port=get_auth_port(),
        google_oauth_port=_get_google_oauth_client(),
        token_port=get_token_port(),
    )


def get_verify_email_use_case() -> VerifyEmailUseCase:
    return VerifyEmailUseCase(auth_port=get_auth_port())


def get_resend_verification_use_case() -> ResendVerificationUseCase:
    return ResendVerificationUseCase(
        auth_port=get_auth_port(),
        token_port=get_token_port(),
        email_port=_email_port(),
    )


def get_refresh_session_use_case() -> RefreshSessionUseCase:
    return RefreshSessionUseCase(
        auth_port=get_auth_port(),
        token_port=get_token_port(),
    )


def get_logout_session_use_case() -> LogoutSessionUseCase:
    return LogoutSessionUseCase(auth_port=get_auth_port())


def get_get_profile_use_case() -> GetProfileUseCase:
    return GetProfileUseCase()


def get_update_profile_use_case() -> UpdateProfileUseCase:
    return UpdateProfileUseCase(
        auth_port=get_auth_port(),
        token_port=get_token_port(),
        email_port=_email_port(),
    )


def get_change_password_use_case() -> ChangePasswordUseCase:
    return ChangePasswordUseCase(
        auth_port=get_auth_port(),
        password_hasher=_get_password_hasher(),
    )


def get_delete_account_use_case() -> DeleteAccountUseCase:
    return DeleteAccountUseCase(auth_port=get_auth_port())


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization.replace("Bearer ", "", 1).strip()
    return token or None


def get_current_user(
    authorization: str | None = Header(default=None),
    token_port: TokenPort = Depends(get_token_port),
    auth_port: AuthPort = Depends(get_auth_port),
) -> User:
    token = extract_bearer_token(authorization)
    if token is None:
        raise http_error_code(401, code="NO_TOKEN", message="Access token is required.")

    try:
        payload = token_port.decode_access_token(token=token)
    except TokenError as exc:
        raise http_error_code(401, code="INVALID_TOKEN", message="Invalid or expired access token.") from exc

    user = auth_port.get_user_by_id(user_id=payload.user_id)
    if user is None:
        raise http_error_code(401, code="USER_NOT_FOUND", message="User not found.")
    return user


def get_optional_user(
    authorization: str | None = Header(default=None),
    token_port: TokenPort = Depends(get_token_port),
    auth_port: AuthPort = Depends(get_auth_port),
) -> User | None:
    token = extract_bearer_token(authorization)
    if token is None:
        return None
    try:
        payload = token_port.decode_access_token(token=token)
    except TokenError:
        return None
    return auth_port.get_user_by_id(user_id=payload.user_id)


def get_verified_user(user: User = Depends(get_current_user)) -> User:
    try:
        return require_verified_email(user)
    except EmailNotVerifiedError as exc:
        raise http_error(403, exc) from exc


def get_premium_user(user: User = Depends(get_verified_user)) -> User:
    try:
        return require_premium(user, now=utcnow())
    except PremiumRequiredError as exc:
        raise http_error(403, exc) from exc

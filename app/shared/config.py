from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from app.domain.exceptions import ConfigurationError


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _flag(name: str, default: str = "false") -> bool:
    return (_env(name, default) or "").strip().lower() in {"1", "true", "yes"}


def _csv(name: str, default: str) -> tuple[str, ...]:
    value = _env(name, default) or ""
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    db_create_schema: bool
    jwt_access_secret: str
    jwt_refresh_secret: str
    jwt_access_ttl_minutes: int
    jwt_refresh_ttl_days: int
    jwt_issuer: str
    jwt_audience: str
    google_client_id: str
    resend_api_key: str
    email_api_base: str
    email_from: str
    email_timeout_seconds: float
    app_name: str
    frontend_url: str
    app_deep_link_scheme: str
    cors_allow_origins: tuple[str, ...]
    log_level: str


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        db_create_schema=_flag("DB_CREATE_SCHEMA"),
        jwt_access_secret=_env("JWT_ACCESS_SECRET", ""),
        jwt_refresh_secret=_env("JWT_REFRESH_SECRET", ""),
        jwt_access_ttl_minutes=int(_env("JWT_ACCESS_TTL_MINUTES", "15")),
        jwt_refresh_ttl_days=int(_env("JWT_REFRESH_TTL_DAYS", "7")),
        jwt_issuer=_env("JWT_ISSUER", "mobile-app-skeleton"),
        jwt_audience=_env("JWT_AUDIENCE", "mobile-app-users"),
        google_client_id=_env("GOOGLE_CLIENT_ID", ""),
        resend_api_key=_env("RESEND_API_KEY", ""),
        email_api_base=_env("EMAIL_API_BASE", "https://api.resend.com"),
        email_from=_env("EMAIL_FROM", "noreply@example.com"),
        email_timeout_seconds=float(_env("EMAIL_TIMEOUT_SECONDS", "10")),
        app_name=_env("APP_NAME", "Mobile App"),
        frontend_url=_env("FRONTEND_URL", "http://localhost:8081"),
        app_deep_link_scheme=_env("APP_DEEP_LINK_SCHEME", "mobile-app"),
        cors_allow_origins=_csv("CORS_ALLOW_ORIGINS", "*"),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
    )


def validate_auth_settings(settings: Settings) -> None:
    if not settings.jwt_access_secret or not settings.jwt_refresh_secret:
        raise ConfigurationError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET are required.")
    if settings.jwt_access_secret == settings.jwt_refresh_secret:
        raise ConfigurationError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ.")
    if settings.jwt_access_ttl_minutes <= 0 or settings.jwt_refresh_ttl_days <= 0:
        raise ConfigurationError("JWT token lifetimes must be positive.")

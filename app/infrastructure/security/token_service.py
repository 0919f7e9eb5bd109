from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from uuid import uuid4

import jwt

from app.application.dto.auth import TokenPayload
from app.application.ports.token_port import TokenPort
from app.domain.entities.user import TokenType
from app.domain.exceptions import (
    ConfigurationError,
    TokenExpiredError,
    TokenInvalidError,
    WrongTokenTypeError,
)


JWT_ALGORITHM = "HS256"


class JwtTokenService(TokenPort):
    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        access_ttl_minutes: int,
        refresh_ttl_days: int,
        issuer: str,
        audience: str,
    ):
        if not access_secret or not refresh_secret:
            raise ConfigurationError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET are required.")
        if access_secret == refresh_secret:
            raise ConfigurationError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ.")
        self._secrets: dict[str, str] = {"access": access_secret, "refresh": refresh_secret}
        self._ttls: dict[str, timedelta] = {
            "access": timedelta(minutes=access_ttl_minutes),
            "refresh": timedelta(days=refresh_ttl_days),
        }
        self._issuer = issuer
        self._audience = audience

    def create_access_token(self, *, user_id: str, email: str, now: datetime) -> tuple[str, datetime]:
        return self._encode(user_id=user_id, email=email, token_type="access", now=now)

    def create_refresh_token(self, *, user_id: str, email: str, now: datetime) -> tuple[str, datetime]:
        return self._encode(user_id=user_id, email=email, token_type="refresh", now=now)

    def decode_token(self, *, token: str, expected_type: TokenType) -> TokenPayload:
        try:
            payload = jwt.decode(
                token,
                self._secrets[expected_type],
                algorithms=[JWT_ALGORITHM],
                issuer=self._issuer,
                audience=self._audience,
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError(f"Expired {expected_type} token.") from exc
        except jwt.PyJWTError as exc:
            raise TokenInvalidError(f"Invalid {expected_type} token.") from exc

        if payload.get("type") != expected_type:
            raise WrongTokenTypeError(
                f"Invalid token type. Expected {expected_type}, got {payload.get('type')}."
            )

        user_id = payload.get("userId")
        email = payload.get("email")
        if not user_id or not isinstance(user_id, str):
            raise TokenInvalidError("Invalid token subject.")
        if not isinstance(email, str):
            raise TokenInvalidError("Invalid token email.")

        return TokenPayload(user_id=user_id, email=email, type=expected_type)

    def decode_access_token(self, *, token: str) -> TokenPayload:
        return self.decode_token(token=token, expected_type="access")

    def generate_verification_token(self) -> str:
        return secrets.token_hex(32)

    def _encode(
        self,
        *,
        user_id: str,
        email: str,
        token_type: TokenType,
        now: datetime,
    ) -> tuple[str, datetime]:
        exp = now + self._ttls[token_type]
        payload = {
            "userId": user_id,
            "email": email,
            "type": token_type,
            "jti": uuid4().hex,
            "iss": self._issuer,
            "aud": self._audience,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        token = jwt.encode(payload, self._secrets[token_type], algorithm=JWT_ALGORITHM)
        return token, exp

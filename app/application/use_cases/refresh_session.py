from __future__ import annotations

import logging

from app.application.dto.auth import RefreshSessionInput, RefreshSessionOutput
from app.application.ports.auth_port import AuthPort
from app.application.ports.token_port import TokenPort
from app.domain.exceptions import RefreshSessionInvalidError, TokenError, TokenExpiredError

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class RefreshSessionUseCase:
    """Mint a new access token from a refresh token backed by a live session.

    The signature check alone is not enough: the session row is authoritative,
    and expired rows are purged as soon as they are seen. Refresh tokens are not
    rotated, so the same token keeps working until it expires or is logged out.
    """

    def __init__(self, *, auth_port: AuthPort, token_port: TokenPort):
        self._auth_port = auth_port
        self._token_port = token_port

    def execute(self, command: RefreshSessionInput) -> RefreshSessionOutput:
        token = (command.refresh_token or "").strip()
        if not token:
            raise RefreshSessionInvalidError("Refresh token is required.")

        try:
            payload = self._token_port.decode_token(token=token, expected_type="refresh")
        except TokenExpiredError as exc:
            purged = self._auth_port.delete_sessions_by_token(token=token)
            if purged:
                logger.info("auth: expired_session_purged sessions=%s", purged)
            raise RefreshSessionInvalidError("Invalid or expired refresh token.") from exc
        except TokenError as exc:
            raise RefreshSessionInvalidError("Invalid refresh token.") from exc

        now = utcnow()
        session = self._auth_port.get_session_by_token(token=token)
        if session is None:
            raise RefreshSessionInvalidError("Invalid or expired refresh token.")
        if session.expires_at <= now:
            self._auth_port.delete_session(session_id=session.id)
            logger.info("auth: expired_session_purged session_id=%s user_id=%s", session.id, session.user_id)
            raise RefreshSessionInvalidError("Invalid or expired refresh token.")

        user = self._auth_port.get_user_by_id(user_id=session.user_id)
        if user is None or user.id != payload.user_id:
            raise RefreshSessionInvalidError("Invalid or expired refresh token.")

        access_token, access_expires_at = self._token_port.create_access_token(
            user_id=user.id,
            email=user.email,
            now=now,
        )
        logger.info("auth: access_token_refreshed user_id=%s", user.id)
        return RefreshSessionOutput(access_token=access_token, access_expires_at=access_expires_at)

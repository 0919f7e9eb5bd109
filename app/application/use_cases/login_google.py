from __future__ import annotations

import logging
from uuid import uuid4

from app.application.dto.auth import AuthTokensOutput, LoginGoogleInput
from app.application.ports.auth_port import AuthPort
from app.application.ports.google_oauth_port import GoogleOauthPort
from app.application.ports.token_port import TokenPort
from app.domain.entities.user import User
from app.domain.exceptions import GoogleTokenValidationError

from .auth_common import issue_tokens, normalize_email, utcnow


logger = logging.getLogger(__name__)


def _display_name(*, name: str | None, given_name: str | None, family_name: str | None, email: str) -> str:
    if name and name.strip():
        return name.strip()
    full_name = f"{given_name or ''} {family_name or ''}".strip()
    if full_name:
        return full_name
    return email.split("@")[0]


class LoginGoogleUseCase:
    def __init__(
        self,
        *,
        auth_port: AuthPort,
        google_oauth_port: GoogleOauthPort,
        token_port: TokenPort,
    ):
        self._auth_port = auth_port
        self._google_oauth_port = google_oauth_port
        self._token_port = token_port

    def execute(self, command: LoginGoogleInput) -> AuthTokensOutput:
        if not (command.id_token or "").strip():
            raise GoogleTokenValidationError("Google id_token is required.")

        google_identity = self._google_oauth_port.verify_id_token(id_token=command.id_token)
        email = normalize_email(google_identity.email)

        def _tx(auth_port: AuthPort) -> User:
            user = auth_port.find_user_by_google_id_or_email(
                google_id=google_identity.subject,
                email=email,
            )
            if user is not None:
                if user.google_id:
                    return user
                logger.info("auth: google_identity_linked user_id=%s", user.id)
                return auth_port.link_google_identity(
                    user_id=user.id,
                    google_id=google_identity.subject,
                    profile_picture=google_identity.picture or user.profile_picture,
                )

            user = auth_port.create_user(
                user_id=str(uuid4()),
                email=email,
                nickname=_display_name(
                    name=google_identity.name,
                    given_name=google_identity.given_name,
                    family_name=google_identity.family_name,
                    email=email,
                ),
                password_hash=None,
                google_id=google_identity.subject,
                profile_picture=google_identity.picture,
                first_name=google_identity.given_name,
                last_name=google_identity.family_name,
                verification_token=None,
                is_verified=True,
                is_email_verified=True,
                created_at=utcnow(),
            )
            logger.info("auth: google_user_created user_id=%s", user.id)
            return user

        user = self._auth_port.execute_in_transaction(_tx)
        output = issue_tokens(user=user, auth_port=self._auth_port, token_port=self._token_port)
        logger.info("auth: google_login_succeeded user_id=%s", user.id)
        return output

from __future__ import annotations

import logging

from app.application.dto.auth import AuthTokensOutput, LoginLocalInput
from app.application.ports.auth_port import AuthPort
from app.application.ports.password_hasher_port import PasswordHasherPort
from app.application.ports.token_port import TokenPort
from app.domain.exceptions import EmailNotVerifiedError, InvalidCredentialsError, ValidationError

from .auth_common import issue_tokens, normalize_email


logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


class LoginLocalUseCase:
    def __init__(
        self,
        *,
        auth_port: AuthPort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
    ):
        self._auth_port = auth_port
        self._password_hasher = password_hasher
        self._token_port = token_port

    def execute(self, command: LoginLocalInput) -> AuthTokensOutput:
        email = normalize_email(command.email or "")
        if not email or not command.password:
            raise ValidationError("Email and password are required.")

        user = self._auth_port.get_user_by_email(email=email)
        if user is None:
            logger.info("auth: login_failed reason=unknown_email")
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)
        if not user.password_hash:
            logger.info("auth: login_failed reason=no_password user_id=%s", user.id)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)
        if not self._password_hasher.verify(command.password, user.password_hash):
            logger.info("auth: login_failed reason=bad_password user_id=%s", user.id)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        if not user.is_verified:
            raise EmailNotVerifiedError("Please verify your email address before logging in.")

        output = issue_tokens(user=user, auth_port=self._auth_port, token_port=self._token_port)
        logger.info("auth: login_succeeded user_id=%s", user.id)
        return output

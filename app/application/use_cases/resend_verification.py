from __future__ import annotations

import logging

from app.application.dto.auth import MessageOutput, ResendVerificationInput
from app.application.ports.auth_port import AuthPort
from app.application.ports.email_port import EmailPort
from app.application.ports.token_port import TokenPort
from app.domain.exceptions import AlreadyVerifiedError, ValidationError

from .auth_common import normalize_email, send_verification_email_safely


logger = logging.getLogger(__name__)

RESEND_MESSAGE = "If an account with that email exists, a verification email has been sent."


class ResendVerificationUseCase:
    def __init__(
        self,
        *,
        auth_port: AuthPort,
        token_port: TokenPort,
        email_port: EmailPort,
    ):
        self._auth_port = auth_port
        self._token_port = token_port
        self._email_port = email_port

    def execute(self, command: ResendVerificationInput) -> MessageOutput:
        email = normalize_email(command.email or "")
        if not email:
            raise ValidationError("Email is required.")

        user = self._auth_port.get_user_by_email(email=email)
        if user is None:
            return MessageOutput(message=RESEND_MESSAGE)
        if user.is_verified:
            raise AlreadyVerifiedError("Email address is already verified.")

        verification_token = self._token_port.generate_verification_token()
        self._auth_port.update_verification_token(user_id=user.id, verification_token=verification_token)
        send_verification_email_safely(
            email_port=self._email_port,
            user=user,
            verification_token=verification_token,
        )
        logger.info("auth: verification_resent user_id=%s", user.id)
        return MessageOutput(message=RESEND_MESSAGE)

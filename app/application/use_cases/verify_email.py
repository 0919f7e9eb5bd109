from __future__ import annotations

import logging

from app.application.dto.auth import MessageOutput, VerifyEmailInput
from app.application.ports.auth_port import AuthPort
from app.domain.exceptions import AlreadyVerifiedError, InvalidVerificationTokenError, ValidationError


logger = logging.getLogger(__name__)


class VerifyEmailUseCase:
    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def execute(self, command: VerifyEmailInput) -> MessageOutput:
        token = (command.token or "").strip()
        if not token:
            raise ValidationError("Verification token is required.")

        user = self._auth_port.get_user_by_verification_token(verification_token=token)
        if user is None:
            raise InvalidVerificationTokenError("Invalid or expired verification token.")
        if user.is_verified:
            raise AlreadyVerifiedError("Email address is already verified.")

        # The update only matches while the token is still unconsumed.
        if not self._auth_port.mark_user_verified(user_id=user.id, verification_token=token):
            raise InvalidVerificationTokenError("Invalid or expired verification token.")
        logger.info("auth: email_verified user_id=%s", user.id)
        return MessageOutput(message="Email verified successfully. You can now log in.")

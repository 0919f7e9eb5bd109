from __future__ import annotations

import logging

from app.application.dto.user import UpdateProfileInput, UserProfileOutput
from app.application.ports.auth_port import AuthPort
from app.application.ports.email_port import EmailPort
from app.application.ports.token_port import TokenPort
from app.domain.entities.user import User
from app.domain.exceptions import EmailTakenError, InvalidEmailError, UserNotFoundError, ValidationError
from app.domain.services.credentials_policy import is_valid_email

from .auth_common import build_user_profile_output, normalize_email, send_verification_email_safely


logger = logging.getLogger(__name__)


class UpdateProfileUseCase:
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

    def execute(self, command: UpdateProfileInput) -> UserProfileOutput:
        nickname = command.nickname.strip() if command.nickname else None
        email = normalize_email(command.email) if command.email else None
        if not nickname and not email:
            raise ValidationError("At least one field (nickname or email) must be provided.")
        if email and not is_valid_email(email):
            raise InvalidEmailError("Please provide a valid email address.")

        def _tx(auth_port: AuthPort) -> tuple[User, str | None]:
            current = auth_port.get_user_by_id(user_id=command.user_id)
            if current is None:
                raise UserNotFoundError("User not found.")

            email_changed = email is not None and email != current.email
            if email_changed:
                holder = auth_port.get_user_by_email(email=email)
                if holder is not None and holder.id != current.id:
                    raise EmailTakenError("This email address is already in use.")

            verification_token = self._token_port.generate_verification_token() if email_changed else None
            updated = auth_port.update_user_profile(
                user_id=current.id,
                nickname=nickname or current.nickname,
                email=email if email_changed else current.email,
                is_verified=False if email_changed else current.is_verified,
                verification_token=verification_token if email_changed else current.verification_token,
            )
            return updated, verification_token

        user, verification_token = self._auth_port.execute_in_transaction(_tx)
        if verification_token is not None:
            send_verification_email_safely(
                email_port=self._email_port,
                user=user,
                verification_token=verification_token,
            )
        logger.info("users: profile_updated user_id=%s email_changed=%s", user.id, verification_token is not None)
        return build_user_profile_output(user)

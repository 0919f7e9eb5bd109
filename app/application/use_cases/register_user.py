from __future__ import annotations

import logging
from uuid import uuid4

from app.application.dto.auth import MessageOutput, RegisterUserInput
from app.application.ports.auth_port import AuthPort
from app.application.ports.email_port import EmailPort
from app.application.ports.password_hasher_port import PasswordHasherPort
from app.application.ports.token_port import TokenPort
from app.domain.entities.user import User
from app.domain.exceptions import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    ValidationError,
    WeakPasswordError,
)
from app.domain.services.credentials_policy import is_valid_email, password_policy_violations

from .auth_common import normalize_email, send_verification_email_safely, utcnow


logger = logging.getLogger(__name__)

REGISTRATION_MESSAGE = "Registration successful. Please check your email to verify your account."


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        auth_port: AuthPort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
        email_port: EmailPort,
    ):
        self._auth_port = auth_port
        self._password_hasher = password_hasher
        self._token_port = token_port
        self._email_port = email_port

    def execute(self, command: RegisterUserInput) -> MessageOutput:
        email = normalize_email(command.email or "")
        nickname = (command.nickname or "").strip()
        password = command.password or ""

        if not email or not nickname or not password:
            raise ValidationError("Email, nickname, and password are required.")
        if not is_valid_email(email):
            raise InvalidEmailError("Please provide a valid email address.")
        violations = password_policy_violations(password)
        if violations:
            raise WeakPasswordError("Password does not meet requirements.", details=violations)

        password_hash = self._password_hasher.hash(password)
        verification_token = self._token_port.generate_verification_token()

        def _tx(auth_port: AuthPort) -> User:
            if auth_port.get_user_by_email(email=email) is not None:
                raise EmailAlreadyExistsError("A user with this email already exists.")

            return auth_port.create_user(
                user_id=str(uuid4()),
                email=email,
                nickname=nickname,
                password_hash=password_hash,
                google_id=None,
                profile_picture=None,
                first_name=None,
                last_name=None,
                verification_token=verification_token,
                is_verified=False,
                is_email_verified=False,
                created_at=utcnow(),
            )

        user = self._auth_port.execute_in_transaction(_tx)
        send_verification_email_safely(
            email_port=self._email_port,
            user=user,
            verification_token=verification_token,
        )
        logger.info("auth: user_registered user_id=%s email=%s", user.id, user.email)
        return MessageOutput(message=REGISTRATION_MESSAGE)

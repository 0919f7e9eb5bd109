from __future__ import annotations

import logging

from app.application.dto.auth import MessageOutput
from app.application.dto.user import ChangePasswordInput
from app.application.ports.auth_port import AuthPort
from app.application.ports.password_hasher_port import PasswordHasherPort
from app.domain.exceptions import (
    InvalidCurrentPasswordError,
    SamePasswordError,
    UserNotFoundError,
    ValidationError,
    WeakPasswordError,
)
from app.domain.services.credentials_policy import password_policy_violations


logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    def __init__(self, *, auth_port: AuthPort, password_hasher: PasswordHasherPort):
        self._auth_port = auth_port
        self._password_hasher = password_hasher

    def execute(self, command: ChangePasswordInput) -> MessageOutput:
        if not command.current_password or not command.new_password:
            raise ValidationError("Current password and new password are required.")

        user = self._auth_port.get_user_by_id(user_id=command.user_id)
        if user is None:
            raise UserNotFoundError("User not found.")

        if not user.password_hash or not self._password_hasher.verify(
            command.current_password, user.password_hash
        ):
            raise InvalidCurrentPasswordError("Current password is incorrect.")

        violations = password_policy_violations(command.new_password)
        if violations:
            raise WeakPasswordError("New password does not meet requirements.", details=violations)

        if self._password_hasher.verify(command.new_password, user.password_hash):
            raise SamePasswordError("New password must be different from current password.")

        new_hash = self._password_hasher.hash(command.new_password)

        def _tx(auth_port: AuthPort) -> int:
            auth_port.update_user_password_hash(user_id=user.id, password_hash=new_hash)
            return auth_port.delete_sessions_for_user(user_id=user.id)

        revoked = self._auth_port.execute_in_transaction(_tx)
        logger.info("users: password_changed user_id=%s sessions_revoked=%s", user.id, revoked)
        return MessageOutput(message="Password changed successfully. Please log in again.")

from __future__ import annotations

import logging

from app.application.dto.auth import MessageOutput
from app.application.dto.user import DeleteAccountInput
from app.application.ports.auth_port import AuthPort
from app.domain.exceptions import UserNotFoundError


logger = logging.getLogger(__name__)


class DeleteAccountUseCase:
    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def execute(self, command: DeleteAccountInput) -> MessageOutput:
        def _tx(auth_port: AuthPort) -> None:
            user = auth_port.get_user_by_id(user_id=command.user_id)
            if user is None:
                raise UserNotFoundError("User not found.")
            auth_port.delete_sessions_for_user(user_id=user.id)
            auth_port.delete_payments_for_user(user_id=user.id)
            auth_port.delete_user(user_id=user.id)

        self._auth_port.execute_in_transaction(_tx)
        logger.info("users: account_deleted user_id=%s", command.user_id)
        return MessageOutput(message="Account deleted successfully.")

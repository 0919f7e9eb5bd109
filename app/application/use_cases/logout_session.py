from __future__ import annotations

import logging

from app.application.dto.auth import LogoutInput, MessageOutput
from app.application.ports.auth_port import AuthPort


logger = logging.getLogger(__name__)


class LogoutSessionUseCase:
    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def execute(self, command: LogoutInput) -> MessageOutput:
        token = (command.refresh_token or "").strip()
        if token:
            deleted = self._auth_port.delete_sessions_by_token(token=token)
            logger.info("auth: logout sessions_deleted=%s", deleted)
        return MessageOutput(message="Logged out successfully.")

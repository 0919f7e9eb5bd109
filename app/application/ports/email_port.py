from __future__ import annotations

from typing import Protocol


class EmailPort(Protocol):
    def send_verification_email(self, *, email: str, nickname: str, verification_token: str) -> None:
        ...

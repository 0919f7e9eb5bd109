from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from urllib.parse import urlencode

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.application.ports.email_port import EmailPort
from app.domain.exceptions import EmailDeliveryError


logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)


@dataclass(frozen=True)
class ResendEmailClientSettings:
    api_key: str
    api_base: str
    from_email: str
    timeout_seconds: float
    app_name: str
    frontend_url: str
    deep_link_scheme: str


class ResendEmailClient(EmailPort):
    def __init__(self, settings: ResendEmailClientSettings, *, transport: httpx.BaseTransport | None = None):
        self._settings = settings
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.api_key)

    def send_verification_email(self, *, email: str, nickname: str, verification_token: str) -> None:
        query = urlencode({"token": verification_token})
        context = {
            "app_name": self._settings.app_name,
            "nickname": nickname,
            "deep_link_url": f"{self._settings.deep_link_scheme}://verify-email?{query}",
            "web_url": f"{self._settings.frontend_url.rstrip('/')}/verify-email?{query}",
        }
        self._send(
            to_email=email,
            subject="Verify Your Email Address",
            html=jinja_env.get_template("verify_email.html").render(**context),
            text=jinja_env.get_template("verify_email.txt").render(**context),
        )

    def _send(self, *, to_email: str, subject: str, html: str, text: str) -> None:
        if not self.is_configured:
            raise EmailDeliveryError("Email service not configured.")

        url = f"{self._settings.api_base.rstrip('/')}/emails"
        try:
            with httpx.Client(timeout=self._settings.timeout_seconds, transport=self._transport) as client:
                response = client.post(
                    url,
                    headers={"Authorization": f"Bearer {self._settings.api_key}"},
                    json={
                        "from": self._settings.from_email,
                        "to": [to_email],
                        "subject": subject,
                        "html": html,
                        "text": text,
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"Failed to send email to {to_email}.") from exc

        message_id = response.json().get("id") if response.content else None
        logger.info("resend_email_client: email_sent to=%s message_id=%s", to_email, message_id)

import logging
from typing import List

import requests

from src.application.errors import NotificationError
from src.application.ports import NotifierPort
from src.infrastructure.config import Settings


logger = logging.getLogger(__name__)


RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendEmailNotifier(NotifierPort):
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.api_key = self.settings.resend_api_key
        self.sender = self.settings.reminder_sender

    def send_email(self, to: List[str], subject: str, html: str) -> None:
        if not self.api_key:
            logger.warning("Resend API key missing; cannot send email.")
            raise NotificationError("Resend API key missing")

        payload = {"from": self.sender, "to": to, "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            resp = requests.post(RESEND_EMAILS_URL, json=payload, headers=headers, timeout=10)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.exception("Resend error: %s", e)
            raise NotificationError(f"Failed to send email: {e}") from e

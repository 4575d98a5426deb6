"""Email delivery through the Resend HTTP API."""

import logging

import httpx

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending transactional email."""

    def __init__(self, settings: Settings | None = None, client: httpx.Client | None = None):
        self.settings = settings or get_settings()
        self.base_url = self.settings.resend_api_url.rstrip("/")
        self.timeout = self.settings.email_send_timeout_seconds
        self._client = client

    @property
    def is_configured(self) -> bool:
        """Check if an API key is available."""
        return bool(self.settings.resend_api_key)

    def send(self, from_address: str, to: str, subject: str, html: str) -> bool:
        """
        Send one HTML email.

        Returns True if the provider accepted the message. Provider errors and
        timeouts are logged and reported as False, never raised.
        """
        if not self.is_configured:
            logger.warning("RESEND_API_KEY not configured, cannot send email")
            return False

        try:
            response = self._post(
                "/emails",
                json={"from": from_address, "to": [to], "subject": subject, "html": html},
            )
            response.raise_for_status()
        except httpx.TimeoutException:
            logger.error(f"Timed out sending email to {to} after {self.timeout}s")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Failed to send email to {to}: {e}")
            return False

        logger.info(f"Email sent to {to}")
        return True

    def _post(self, path: str, json: dict) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.settings.resend_api_key}"}
        if self._client is not None:
            return self._client.post(f"{self.base_url}{path}", json=json, headers=headers)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(f"{self.base_url}{path}", json=json, headers=headers)


def get_email_service() -> EmailService:
    """Get an email service instance."""
    return EmailService()

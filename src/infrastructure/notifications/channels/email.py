# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Email notification channel using the SendGrid v3 API.

This channel sends rendered email templates through SendGrid's
``mail/send`` endpoint. Every message carries both a plain-text and an
HTML body.

Configuration (via environment variables):
- SENDGRID_API_KEY: SendGrid API key (channel disabled when absent)
- FROM_EMAIL: Sender email address
- SENDGRID_FROM_NAME: Sender display name
"""

from typing import Any

import httpx

from src.core.config.settings import SendGridSettings
from src.infrastructure.notifications.channels.base import (
    DEFAULT_TIMEOUT_SECONDS,
    BaseChannel,
)
from src.infrastructure.notifications.models import ChannelType
from src.infrastructure.notifications.templates import EmailTemplate
from src.utils.logging import mask_email


class EmailChannel(BaseChannel):
    """Email notification channel using SendGrid.

    Authenticates with a bearer API key. When no key is configured every
    send returns False without touching the network.
    """

    def __init__(
        self,
        settings: SendGridSettings,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the email channel.

        Args:
            settings: SendGrid credentials and sender identity.
            timeout: Per-request timeout in seconds.
            client: Optional shared HTTP client.
        """
        super().__init__(timeout=timeout, client=client)
        self._settings = settings

        if not self.is_configured:
            self.warn_unconfigured("SENDGRID_API_KEY")

    @property
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        return ChannelType.EMAIL

    @property
    def is_configured(self) -> bool:
        """Return True when an API key is present."""
        return self._settings.is_configured

    async def send(self, destination: str, content: EmailTemplate) -> bool:
        """Send a rendered email.

        Args:
            destination: Recipient email address.
            content: Rendered subject, HTML and plain-text bodies.

        Returns:
            True if SendGrid accepted the message.
        """
        if not self.is_configured:
            self.logger.debug("SendGrid not configured, skipping email")
            return False

        try:
            async with self.http_client() as client:
                response = await client.post(
                    self._settings.api_url,
                    headers=self._build_headers(),
                    json=self._build_payload(destination, content),
                    timeout=self.timeout,
                )

            if response.is_success:
                self.logger.info("Email sent to %s: %s", mask_email(destination), content.subject)
                return True

            self.logger.warning(
                "SendGrid request failed (%d) for %s: %s",
                response.status_code,
                mask_email(destination),
                response.text,
            )
            return False

        except httpx.HTTPError as e:
            self.logger.error(
                "Failed to send email to %s: %s",
                mask_email(destination),
                str(e),
                exc_info=True,
            )
            return False

        except Exception as e:
            self.logger.error("Unexpected email channel error: %s", str(e), exc_info=True)
            return False

    def _build_headers(self) -> dict[str, str]:
        api_key = self._settings.api_key.get_secret_value() if self._settings.api_key else ""
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _build_payload(self, destination: str, content: EmailTemplate) -> dict[str, Any]:
        """Build the SendGrid mail/send request body.

        SendGrid requires text/plain to precede text/html in ``content``.
        """
        return {
            "personalizations": [{"to": [{"email": destination}]}],
            "from": {
                "email": self._settings.from_email,
                "name": self._settings.from_name,
            },
            "subject": content.subject,
            "content": [
                {"type": "text/plain", "value": content.text},
                {"type": "text/html", "value": content.html},
            ],
        }

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SMS notification channel using Africa's Talking.

Messages are posted form-encoded to the Africa's Talking messaging API
with the ``apiKey`` header. The channel also owns Kenyan phone number
normalization.

Configuration (via environment variables):
- AFRICASTALKING_USERNAME: Account username (``sandbox`` for testing)
- AFRICASTALKING_API_KEY: API key
- SMS_SENDER_ID: Sender ID shown on handsets (default: PANDAMART)
"""

import re

import httpx

from src.core.config.settings import AfricasTalkingSettings
from src.infrastructure.notifications.channels.base import (
    DEFAULT_TIMEOUT_SECONDS,
    BaseChannel,
)
from src.infrastructure.notifications.models import ChannelType
from src.utils.logging import mask_phone

KENYA_COUNTRY_CODE = "254"
KENYA_SUBSCRIBER_DIGITS = 9

# Africa's Talking concatenates at most 10 segments
SMS_MAX_LENGTH = 1600

_NON_DIGITS = re.compile(r"\D")


def normalize_phone_number(phone: str) -> str:
    """Canonicalize a Kenyan phone number to ``+254xxxxxxxxx``.

    Accepts local (``0712345678``), international (``+254712345678`` or
    ``254712345678``) and bare subscriber (``712345678``) forms, with any
    spacing or punctuation. Unrecognized shapes are returned unchanged so
    the provider decides whether they are deliverable.

    Args:
        phone: Phone number as entered by the customer.

    Returns:
        Normalized number, or the input unchanged.
    """
    digits = _NON_DIGITS.sub("", phone)

    if digits.startswith(KENYA_COUNTRY_CODE):
        return f"+{digits}"
    if digits.startswith("0"):
        return f"+{KENYA_COUNTRY_CODE}{digits[1:]}"
    if len(digits) == KENYA_SUBSCRIBER_DIGITS:
        return f"+{KENYA_COUNTRY_CODE}{digits}"

    return phone


class SMSChannel(BaseChannel):
    """SMS notification channel using Africa's Talking.

    Requires both a username and an API key; otherwise every send returns
    False without touching the network.
    """

    def __init__(
        self,
        settings: AfricasTalkingSettings,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the SMS channel.

        Args:
            settings: Africa's Talking credentials and sender ID.
            timeout: Per-request timeout in seconds.
            client: Optional shared HTTP client.
        """
        super().__init__(timeout=timeout, client=client)
        self._settings = settings

        if not self.is_configured:
            self.warn_unconfigured("AFRICASTALKING_USERNAME or AFRICASTALKING_API_KEY")

    @property
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        return ChannelType.SMS

    @property
    def is_configured(self) -> bool:
        """Return True when username and API key are present."""
        return self._settings.is_configured

    @staticmethod
    def normalize(phone: str) -> str:
        """Normalize a phone number for delivery."""
        return normalize_phone_number(phone)

    async def send(self, destination: str, content: str) -> bool:
        """Send an SMS message.

        Args:
            destination: Normalized phone number.
            content: Rendered message text.

        Returns:
            True if the provider reported the first recipient as sent.
        """
        if not self.is_configured:
            self.logger.debug("Africa's Talking not configured, skipping SMS")
            return False

        message = self._truncate(content, destination)

        try:
            async with self.http_client() as client:
                response = await client.post(
                    self._settings.endpoint,
                    headers=self._build_headers(),
                    data={
                        "username": self._settings.username or "",
                        "to": destination,
                        "message": message,
                        "from": self._settings.sender_id,
                    },
                    timeout=self.timeout,
                )

            if not response.is_success:
                self.logger.warning(
                    "Africa's Talking request failed (%d) for %s: %s",
                    response.status_code,
                    mask_phone(destination),
                    response.text,
                )
                return False

            recipients = response.json().get("SMSMessageData", {}).get("Recipients") or []
            status = recipients[0].get("status") if recipients else None

            if status == "Success":
                self.logger.info("SMS sent to %s", mask_phone(destination))
                return True

            self.logger.warning(
                "SMS to %s rejected by provider: %s",
                mask_phone(destination),
                status or response.text,
            )
            return False

        except httpx.HTTPError as e:
            self.logger.error(
                "Failed to send SMS to %s: %s",
                mask_phone(destination),
                str(e),
                exc_info=True,
            )
            return False

        except Exception as e:
            self.logger.error("Unexpected SMS channel error: %s", str(e), exc_info=True)
            return False

    def _build_headers(self) -> dict[str, str]:
        api_key = self._settings.api_key.get_secret_value() if self._settings.api_key else ""
        return {
            "apiKey": api_key,
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded",
        }

    def _truncate(self, message: str, destination: str) -> str:
        if len(message) <= SMS_MAX_LENGTH:
            return message

        self.logger.warning(
            "SMS to %s truncated from %d characters",
            mask_phone(destination),
            len(message),
        )
        return message[: SMS_MAX_LENGTH - 3] + "..."

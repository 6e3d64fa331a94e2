# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Push notification channel using Firebase Cloud Messaging.

This channel sends push notifications to mobile devices using the FCM
HTTP v1 API. Access tokens come from a service account credential set
exchanged through google-auth.

Configuration (via environment variables):
- FIREBASE_PROJECT_ID: Firebase project ID
- FIREBASE_CLIENT_EMAIL: Service account email
- FIREBASE_PRIVATE_KEY: Service account private key (PEM, ``\\n`` escaped)
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from src.core.config.settings import FirebaseSettings
from src.infrastructure.notifications.channels.base import (
    DEFAULT_TIMEOUT_SECONDS,
    BaseChannel,
)
from src.infrastructure.notifications.models import ChannelType
from src.utils.logging import mask_token

# FCM HTTP v1 API endpoint template
FCM_API_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"

ANDROID_NOTIFICATION = {"icon": "ic_notification", "color": "#FF6B35"}
APNS_APS = {"badge": 1, "sound": "default"}


@dataclass
class PushContent:
    """Push notification content.

    Attributes:
        title: Notification title.
        body: Notification body.
        data: Extra key-value data delivered to the app.
    """

    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)


def stringify_data(data: dict[str, Any]) -> dict[str, str]:
    """Convert a data map to the string-only form FCM accepts.

    None values are dropped, strings pass through, everything else is
    JSON-encoded.
    """
    result: dict[str, str] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, str):
            result[str(key)] = value
        else:
            result[str(key)] = json.dumps(value, default=str)
    return result


class PushChannel(BaseChannel):
    """Push notification channel using Firebase Cloud Messaging.

    The service account credential is built once, on first use. A
    malformed credential disables the channel for the lifetime of the
    instance.
    """

    def __init__(
        self,
        settings: FirebaseSettings,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
        credentials: Any | None = None,
    ) -> None:
        """Initialize the push channel.

        Args:
            settings: Firebase project and service account settings.
            timeout: Per-request timeout in seconds.
            client: Optional shared HTTP client.
            credentials: Optional pre-built google-auth credentials.
        """
        super().__init__(timeout=timeout, client=client)
        self._settings = settings
        self._credentials = credentials
        self._init_error: str | None = None
        self._token_lock = asyncio.Lock()

        if not self.is_configured:
            self.warn_unconfigured(
                "FIREBASE_PROJECT_ID, FIREBASE_CLIENT_EMAIL or FIREBASE_PRIVATE_KEY"
            )

    @property
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        return ChannelType.PUSH

    @property
    def is_configured(self) -> bool:
        """Return True when the service account credential set is present."""
        return self._settings.is_configured or self._credentials is not None

    def _ensure_credentials(self) -> Any | None:
        """Build service account credentials on first use.

        Returns:
            Credentials object or None if they cannot be built.
        """
        if self._credentials is not None:
            return self._credentials

        if self._init_error:
            return None

        try:
            self._credentials = service_account.Credentials.from_service_account_info(
                self._settings.service_account_info(),
                scopes=[FCM_SCOPE],
            )
            self.logger.info("FCM push channel initialized for project %s", self._settings.project_id)
            return self._credentials

        except (ValueError, GoogleAuthError) as e:
            self._init_error = f"Invalid Firebase service account: {str(e)}"
            self.logger.error(self._init_error)
            return None

    async def _get_access_token(self) -> str | None:
        """Get an OAuth2 access token for the FCM API.

        Returns:
            Access token string or None if the exchange failed.
        """
        credentials = self._ensure_credentials()
        if credentials is None:
            return None

        async with self._token_lock:
            if credentials.valid and credentials.token:
                return credentials.token

            try:
                # google-auth refresh is blocking
                loop = asyncio.get_running_loop()
                await loop.run_in_executor(None, credentials.refresh, Request())
                return credentials.token

            except Exception as e:
                self.logger.error("Failed to get FCM access token: %s", str(e))
                return None

    async def send(self, destination: str, content: PushContent) -> bool:
        """Send a push notification via FCM.

        Args:
            destination: Device registration token.
            content: Title, body and data map.

        Returns:
            True if FCM accepted the message.
        """
        if not self.is_configured:
            self.logger.debug("Firebase not configured, skipping push notification")
            return False

        try:
            access_token = await self._get_access_token()
            if not access_token:
                return False

            async with self.http_client() as client:
                response = await client.post(
                    FCM_API_URL.format(project_id=self._project_id()),
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Content-Type": "application/json",
                    },
                    json={"message": self._build_fcm_message(destination, content)},
                    timeout=self.timeout,
                )

            if response.is_success:
                message_id = response.json().get("name", "").split("/")[-1]
                self.logger.info(
                    "Push sent to %s: %s",
                    mask_token(destination),
                    message_id,
                )
                return True

            self.logger.warning(
                "FCM request failed (%d) for %s: %s",
                response.status_code,
                mask_token(destination),
                response.text,
            )
            return False

        except httpx.HTTPError as e:
            self.logger.error(
                "Failed to send push to %s: %s",
                mask_token(destination),
                str(e),
                exc_info=True,
            )
            return False

        except Exception as e:
            self.logger.error("Unexpected push channel error: %s", str(e), exc_info=True)
            return False

    def _project_id(self) -> str:
        if self._settings.project_id:
            return self._settings.project_id
        return getattr(self._credentials, "project_id", "") or ""

    def _build_fcm_message(self, token: str, content: PushContent) -> dict[str, Any]:
        """Build FCM message structure.

        Display hints are fixed per platform and not caller-configurable.
        """
        return {
            "token": token,
            "notification": {
                "title": content.title,
                "body": content.body,
            },
            "data": stringify_data(content.data),
            "android": {"notification": dict(ANDROID_NOTIFICATION)},
            "apns": {"payload": {"aps": dict(APNS_APS)}},
        }

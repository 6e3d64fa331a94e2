# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-app notification channel.

This channel stores the full notification request in the notification
store, where the app's notification centre picks it up. It has no
external provider, needs no contact details, and is the most reliable
channel.
"""

from src.infrastructure.notifications.channels.base import BaseChannel
from src.infrastructure.notifications.models import ChannelType, NotificationRequest
from src.infrastructure.notifications.store import NotificationStore


class InAppChannel(BaseChannel):
    """In-app notification channel.

    ``send`` succeeds unless the store write fails.
    """

    def __init__(self, store: NotificationStore | None = None) -> None:
        """Initialize the in-app channel.

        Args:
            store: Notification store. Defaults to the database-backed store.
        """
        super().__init__()
        self.store = store or NotificationStore()

    @property
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        return ChannelType.IN_APP

    @property
    def is_configured(self) -> bool:
        """The in-app channel needs no credentials."""
        return True

    async def send(self, destination: str, content: NotificationRequest) -> bool:
        """Store an in-app notification.

        Args:
            destination: Recipient ID the record is keyed by.
            content: The full notification request.

        Returns:
            True once the record is committed.
        """
        try:
            notification_id = await self.store.create(content)

            self.logger.info(
                "Created in-app notification %s for user %s",
                notification_id,
                destination,
            )
            return True

        except Exception as e:
            self.logger.error(
                "Failed to create in-app notification for user %s: %s",
                destination,
                str(e),
                exc_info=True,
            )
            return False

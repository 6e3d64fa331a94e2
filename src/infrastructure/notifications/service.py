# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification service for orchestrating notification delivery.

This service handles the complete dispatch flow for one request:
1. Reject requests without channels
2. Resolve each requested channel against the recipient's contact data
3. Render category templates for email and SMS
4. Send through all channels concurrently and wait for every one
5. Aggregate per-channel outcomes into a DispatchResult

Delivery is best-effort: one attempt per channel, no retries and no
queueing. Partial delivery is a normal outcome, never an exception.
"""

import asyncio

from src.core.config.settings import Settings, get_settings
from src.infrastructure.notifications.channels import (
    BaseChannel,
    EmailChannel,
    InAppChannel,
    PushChannel,
    PushContent,
    SMSChannel,
    normalize_phone_number,
)
from src.infrastructure.notifications.models import (
    ChannelType,
    DeliveryStatus,
    DispatchResult,
    InvalidNotificationError,
    NotificationRequest,
    RecipientContact,
)
from src.infrastructure.notifications.store import NotificationStore
from src.infrastructure.notifications.templates import TemplateRegistry
from src.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Fans one notification out to every requested channel.

    Channels are built from settings unless injected. Provider credentials
    are read once, at construction.

    Attributes:
        settings: Settings the service was built with.
        channels: Mapping of channel type to channel instance.
        templates: Category template registry.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        email: EmailChannel | None = None,
        sms: SMSChannel | None = None,
        push: PushChannel | None = None,
        in_app: InAppChannel | None = None,
        templates: TemplateRegistry | None = None,
        store: NotificationStore | None = None,
    ) -> None:
        """Initialize the notification service.

        Args:
            settings: Application settings. Defaults to get_settings().
            email: Email channel override.
            sms: SMS channel override.
            push: Push channel override.
            in_app: In-app channel override.
            templates: Template registry override.
            store: Store for the default in-app channel.
        """
        settings = settings or get_settings()
        timeout = settings.notifications.request_timeout

        self.settings = settings

        self.templates = templates or TemplateRegistry()
        self._email = email or EmailChannel(settings.sendgrid, timeout=timeout)
        self._sms = sms or SMSChannel(settings.africastalking, timeout=timeout)
        self._push = push or PushChannel(settings.firebase, timeout=timeout)
        self._in_app = in_app or InAppChannel(store)

        self.channels: dict[ChannelType, BaseChannel] = {
            ChannelType.EMAIL: self._email,
            ChannelType.SMS: self._sms,
            ChannelType.PUSH: self._push,
            ChannelType.IN_APP: self._in_app,
        }

        logger.info(
            "notification_service_initialized",
            channels={
                channel.value: instance.is_configured
                for channel, instance in self.channels.items()
            },
        )

    @property
    def store(self) -> NotificationStore:
        """Return the store behind the in-app channel."""
        return self._in_app.store

    async def send_notification(
        self,
        request: NotificationRequest,
        contact: RecipientContact,
    ) -> DispatchResult:
        """Dispatch one notification to all requested channels.

        Args:
            request: The notification to send.
            contact: The recipient's delivery addresses.

        Returns:
            DispatchResult with one outcome per requested channel.

        Raises:
            InvalidNotificationError: If the request names no channels.
        """
        if not request.channels:
            raise InvalidNotificationError(
                f"Notification for {request.recipient_id} requests no channels"
            )

        outcomes = await asyncio.gather(
            *(self._dispatch(channel, request, contact) for channel in request.channels)
        )

        result = DispatchResult()
        for channel, status in zip(request.channels, outcomes):
            result.record(channel, status)

        logger.info(
            "notification_dispatched",
            recipient_id=request.recipient_id,
            category=request.category_value,
            priority=request.priority.value if request.priority else None,
            success=result.success,
            statuses={channel.value: status.value for channel, status in result.statuses.items()},
        )
        return result

    async def _dispatch(
        self,
        channel: ChannelType,
        request: NotificationRequest,
        contact: RecipientContact,
    ) -> DeliveryStatus:
        """Attempt one channel and map the outcome to a delivery status."""
        address = contact.address_for(channel)
        if address is None:
            logger.debug(
                "channel_skipped",
                channel=channel.value,
                recipient_id=request.recipient_id,
                reason="no contact address",
            )
            return DeliveryStatus.SKIPPED

        try:
            if channel == ChannelType.EMAIL:
                sent = await self._send_email(address, request)
            elif channel == ChannelType.SMS:
                sent = await self._send_sms(address, request)
            elif channel == ChannelType.PUSH:
                sent = await self._send_push(address, request)
            else:
                sent = await self._in_app.send(request.recipient_id, request)

        except Exception as e:
            logger.error(
                "channel_exception",
                channel=channel.value,
                recipient_id=request.recipient_id,
                error=str(e),
                exc_info=True,
            )
            sent = False

        return DeliveryStatus.SENT if sent else DeliveryStatus.FAILED

    async def _send_email(self, email: str, request: NotificationRequest) -> bool:
        template = self.templates.resolve(request.category).email
        content = self.templates.render_email(template, request.template_data())
        return await self._email.send(email, content)

    async def _send_sms(self, phone_number: str, request: NotificationRequest) -> bool:
        template = self.templates.resolve(request.category).sms
        message = self.templates.render_sms(template, request.template_data())
        return await self._sms.send(normalize_phone_number(phone_number), message)

    async def _send_push(self, push_token: str, request: NotificationRequest) -> bool:
        data = {
            **request.structured_data,
            "category": request.category_value,
        }
        if request.action_url:
            data["action_url"] = request.action_url

        content = PushContent(title=request.title, body=request.body, data=data)
        return await self._push.send(push_token, content)

    def channel_status(self) -> dict[str, bool]:
        """Report which channels have their provider configured."""
        return {
            channel.value: instance.is_configured
            for channel, instance in self.channels.items()
        }


# Global service instance
_notification_service: NotificationService | None = None


def get_notification_service() -> NotificationService:
    """Get or create the global notification service.

    Returns:
        NotificationService instance built from application settings.
    """
    global _notification_service

    if _notification_service is None:
        _notification_service = NotificationService(get_settings())

    return _notification_service


def reset_notification_service() -> None:
    """Drop the global notification service (for tests)."""
    global _notification_service
    _notification_service = None

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification dispatch for the Panda Mart storefront.

This package fans one logical notification out to several delivery
channels at once:
- Email (SendGrid)
- SMS (Africa's Talking)
- Push notifications (Firebase Cloud Messaging)
- In-app notifications (database records)

Key Components:
- NotificationService: Concurrent, best-effort dispatch orchestrator
- TemplateRegistry: Per-category email and SMS templates
- Channels: EmailChannel, SMSChannel, PushChannel, InAppChannel
- NotificationStore: In-app notification persistence
- Event helpers: order_status_changed, payment_confirmed,
  loyalty_points_changed, security_alert

Usage:
    from src.infrastructure.notifications import (
        NotificationRequest,
        RecipientContact,
        get_notification_service,
    )

    service = get_notification_service()
    result = await service.send_notification(
        NotificationRequest(
            recipient_id="user-1",
            category="promotion",
            title="Flash Sale",
            body="Everything 20% off until midnight.",
            channels=["email", "in_app"],
        ),
        RecipientContact(email="jane@example.com"),
    )
    if not result.success:
        logger.warning("notification_undelivered", results=result.to_dict())

Configuration (environment variables):
- SENDGRID_API_KEY, FROM_EMAIL: Email provider
- AFRICASTALKING_USERNAME, AFRICASTALKING_API_KEY, SMS_SENDER_ID: SMS provider
- FIREBASE_PROJECT_ID, FIREBASE_CLIENT_EMAIL, FIREBASE_PRIVATE_KEY: Push provider
- NEXT_PUBLIC_APP_URL: Storefront URL for action links
"""

from src.infrastructure.notifications.channels import (
    BaseChannel,
    EmailChannel,
    InAppChannel,
    PushChannel,
    PushContent,
    SMSChannel,
    normalize_phone_number,
)
from src.infrastructure.notifications.events import (
    loyalty_points_changed,
    order_status_changed,
    payment_confirmed,
    security_alert,
)
from src.infrastructure.notifications.models import (
    ChannelType,
    DeliveryStatus,
    DispatchResult,
    InvalidNotificationError,
    NotificationCategory,
    NotificationPriority,
    NotificationRequest,
    RecipientContact,
)
from src.infrastructure.notifications.service import (
    NotificationService,
    get_notification_service,
    reset_notification_service,
)
from src.infrastructure.notifications.store import NotificationStore
from src.infrastructure.notifications.templates import (
    CategoryTemplates,
    EmailTemplate,
    SMSTemplate,
    TemplateRegistry,
    render,
)

__all__ = [
    # Service
    "NotificationService",
    "get_notification_service",
    "reset_notification_service",
    # Types
    "ChannelType",
    "DeliveryStatus",
    "DispatchResult",
    "InvalidNotificationError",
    "NotificationCategory",
    "NotificationPriority",
    "NotificationRequest",
    "RecipientContact",
    # Templates
    "CategoryTemplates",
    "EmailTemplate",
    "SMSTemplate",
    "TemplateRegistry",
    "render",
    # Channels
    "BaseChannel",
    "EmailChannel",
    "InAppChannel",
    "PushChannel",
    "PushContent",
    "SMSChannel",
    "normalize_phone_number",
    # Store
    "NotificationStore",
    # Event helpers
    "loyalty_points_changed",
    "order_status_changed",
    "payment_confirmed",
    "security_alert",
]

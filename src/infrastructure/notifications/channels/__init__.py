# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification delivery channels.

Available channels:
- EmailChannel: SendGrid email
- SMSChannel: Africa's Talking SMS
- PushChannel: Firebase Cloud Messaging push
- InAppChannel: Notification centre records
"""

from src.infrastructure.notifications.channels.base import BaseChannel
from src.infrastructure.notifications.channels.email import EmailChannel
from src.infrastructure.notifications.channels.in_app import InAppChannel
from src.infrastructure.notifications.channels.push import PushChannel, PushContent
from src.infrastructure.notifications.channels.sms import SMSChannel, normalize_phone_number

__all__ = [
    # Base
    "BaseChannel",
    # Channels
    "EmailChannel",
    "InAppChannel",
    "PushChannel",
    "SMSChannel",
    # Content and helpers
    "PushContent",
    "normalize_phone_number",
]

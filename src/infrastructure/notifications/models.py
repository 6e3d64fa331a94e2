# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core types for notification dispatch.

A NotificationRequest is the unit of work: it is built once by a caller
(directly or through the event helpers), passed once through the
NotificationService and then discarded. Only the in-app channel keeps a
durable copy.

RecipientContact carries the delivery addresses supplied by the caller.
DispatchResult reports one outcome per requested channel.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from src.utils.datetime import format_iso, has_passed


class NotificationCategory(str, Enum):
    """Closed set of notification categories.

    The category selects the content templates and the default priority.
    """

    ORDER = "order"
    PAYMENT = "payment"
    LOYALTY = "loyalty"
    SECURITY = "security"
    PROMOTION = "promotion"
    SYSTEM = "system"
    COMMUNITY = "community"


class ChannelType(str, Enum):
    """Available delivery channels."""

    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"
    IN_APP = "in_app"


class NotificationPriority(str, Enum):
    """Notification priority.

    Informational only: delivery order does not depend on it.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class DeliveryStatus(str, Enum):
    """Per-channel outcome of one dispatch.

    SKIPPED means the channel was requested but never attempted because the
    recipient has no address for it.
    """

    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


DEFAULT_PRIORITIES: dict[NotificationCategory, NotificationPriority] = {
    NotificationCategory.ORDER: NotificationPriority.HIGH,
    NotificationCategory.PAYMENT: NotificationPriority.HIGH,
    NotificationCategory.LOYALTY: NotificationPriority.MEDIUM,
    NotificationCategory.SECURITY: NotificationPriority.URGENT,
    NotificationCategory.PROMOTION: NotificationPriority.LOW,
    NotificationCategory.SYSTEM: NotificationPriority.MEDIUM,
    NotificationCategory.COMMUNITY: NotificationPriority.LOW,
}


class InvalidNotificationError(ValueError):
    """Raised when a notification request can never be delivered."""


def coerce_category(value: "NotificationCategory | str") -> "NotificationCategory | str":
    """Convert a category name to the enum when it is a known one.

    Unknown names are returned unchanged so newer producers can send
    categories this engine does not know yet.
    """
    if isinstance(value, NotificationCategory):
        return value
    try:
        return NotificationCategory(value)
    except ValueError:
        return value


def _dedupe_channels(channels: Iterable[ChannelType | str]) -> list[ChannelType]:
    seen: list[ChannelType] = []
    for channel in channels:
        try:
            channel_type = ChannelType(channel)
        except ValueError as e:
            raise InvalidNotificationError(f"Unknown notification channel: {channel!r}") from e
        if channel_type not in seen:
            seen.append(channel_type)
    return seen


@dataclass
class NotificationRequest:
    """One logical notification to fan out.

    Attributes:
        recipient_id: Identifier of the addressed user. Used for logging and
            in-app storage only.
        category: Notification category (enum member or unknown raw string).
        title: Human-readable headline.
        body: Human-readable message.
        structured_data: Placeholder values and machine-readable context.
        channels: Requested channels in order, without duplicates.
        priority: Priority; defaults from the category when omitted.
        action_url: Deep link surfaced in templated content.
        expires_at: Advisory expiry for in-app records.
    """

    recipient_id: str
    category: NotificationCategory | str
    title: str
    body: str
    channels: list[ChannelType] = field(default_factory=list)
    structured_data: dict[str, Any] = field(default_factory=dict)
    priority: NotificationPriority | None = None
    action_url: str | None = None
    expires_at: datetime | None = None

    def __post_init__(self) -> None:
        self.category = coerce_category(self.category)
        self.channels = _dedupe_channels(self.channels)
        if self.priority is None:
            self.priority = DEFAULT_PRIORITIES.get(
                self.category,  # type: ignore[arg-type]
                NotificationPriority.MEDIUM,
            )
        else:
            self.priority = NotificationPriority(self.priority)

    @property
    def category_value(self) -> str:
        """Return the category as a plain string."""
        if isinstance(self.category, NotificationCategory):
            return self.category.value
        return str(self.category)

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the notification is past its advisory expiry."""
        return has_passed(self.expires_at, now)

    def template_data(self) -> dict[str, Any]:
        """Build the placeholder values for template rendering.

        Core content always overrides same-named keys in structured_data so
        a template can never lose the title or body.
        """
        return {
            **self.structured_data,
            "title": self.title,
            "body": self.body,
            "action_url": self.action_url,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "recipient_id": self.recipient_id,
            "category": self.category_value,
            "title": self.title,
            "body": self.body,
            "structured_data": self.structured_data,
            "channels": [channel.value for channel in self.channels],
            "priority": self.priority.value if self.priority else None,
            "action_url": self.action_url,
            "expires_at": format_iso(self.expires_at),
        }


@dataclass
class RecipientContact:
    """Delivery addresses supplied by the caller.

    Attributes:
        email: Email address.
        phone_number: Phone number in any Kenyan format.
        push_token: FCM device registration token.
    """

    email: str | None = None
    phone_number: str | None = None
    push_token: str | None = None

    def address_for(self, channel: ChannelType) -> str | None:
        """Return the address a channel delivers to.

        In-app delivery needs no address and always gets the empty string.
        """
        if channel == ChannelType.EMAIL:
            return self.email or None
        if channel == ChannelType.SMS:
            return self.phone_number or None
        if channel == ChannelType.PUSH:
            return self.push_token or None
        return ""


@dataclass
class DispatchResult:
    """Aggregated outcome of one dispatch.

    ``results`` holds one boolean per requested channel; a skipped channel
    records False exactly like a failed one. ``statuses`` carries the
    three-state detail for callers that need to tell them apart.

    Attributes:
        results: Channel to delivered flag.
        statuses: Channel to delivery status.
    """

    results: dict[ChannelType, bool] = field(default_factory=dict)
    statuses: dict[ChannelType, DeliveryStatus] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        """True when at least one channel delivered."""
        return any(self.results.values())

    def record(self, channel: ChannelType, status: DeliveryStatus) -> None:
        """Record the outcome of one channel."""
        self.statuses[channel] = status
        self.results[channel] = status == DeliveryStatus.SENT

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging and API responses."""
        return {
            "success": self.success,
            "results": {channel.value: sent for channel, sent in self.results.items()},
            "statuses": {
                channel.value: status.value for channel, status in self.statuses.items()
            },
        }

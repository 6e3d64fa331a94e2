# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification helpers for recurring storefront events.

Each helper fixes the channel set and priority for one kind of event,
builds the title, body and structured data from typed parameters, and
returns the service's DispatchResult unchanged. Action links start at the
app_url of the settings the service was built with. Call sites should use
these instead of assembling NotificationRequest objects by hand.

Usage:
    service = get_notification_service()
    result = await order_status_changed(
        service,
        user_id="u1",
        order_number="ORD-100",
        status="shipped",
        contact=RecipientContact(email="jane@example.com"),
    )
"""

from typing import Literal

from src.infrastructure.notifications.models import (
    ChannelType,
    DispatchResult,
    NotificationCategory,
    NotificationPriority,
    NotificationRequest,
    RecipientContact,
)
from src.infrastructure.notifications.service import NotificationService

ALL_CHANNELS = [ChannelType.EMAIL, ChannelType.SMS, ChannelType.PUSH, ChannelType.IN_APP]
LOYALTY_CHANNELS = [ChannelType.EMAIL, ChannelType.PUSH, ChannelType.IN_APP]

ORDER_STATUS_MESSAGES = {
    "confirmed": "Your order has been confirmed and is being prepared.",
    "shipped": "Your order has been shipped and is on its way to you.",
    "delivered": "Your order has been delivered successfully.",
    "cancelled": "Your order has been cancelled as requested.",
}
DEFAULT_ORDER_STATUS_MESSAGE = "Status updated"

LoyaltyAction = Literal["earned", "redeemed"]


def _action_url(service: NotificationService, path: str) -> str:
    return f"{service.settings.app_url}{path}"


async def order_status_changed(
    service: NotificationService,
    user_id: str,
    order_number: str,
    status: str,
    contact: RecipientContact,
) -> DispatchResult:
    """Notify a customer that an order changed status.

    Args:
        service: Notification service.
        user_id: Customer ID.
        order_number: Human-facing order number.
        status: New status (confirmed, shipped, delivered, cancelled or other).
        contact: Customer delivery addresses.
    """
    message = ORDER_STATUS_MESSAGES.get(status.lower(), DEFAULT_ORDER_STATUS_MESSAGE)

    request = NotificationRequest(
        recipient_id=user_id,
        category=NotificationCategory.ORDER,
        title=f"Order {status.capitalize()}",
        body=f"Order #{order_number}: {message}",
        channels=ALL_CHANNELS,
        priority=NotificationPriority.HIGH,
        action_url=_action_url(service, f"/account/orders/{order_number}"),
        structured_data={"order_number": order_number, "status": status},
    )
    return await service.send_notification(request, contact)


async def payment_confirmed(
    service: NotificationService,
    user_id: str,
    amount: float,
    method: str,
    contact: RecipientContact,
) -> DispatchResult:
    """Notify a customer that a payment went through.

    Args:
        service: Notification service.
        user_id: Customer ID.
        amount: Amount paid, in Kenyan shillings.
        method: Payment method shown to the customer (e.g. M-Pesa).
        contact: Customer delivery addresses.
    """
    formatted_amount = f"{amount:,.2f}".rstrip("0").rstrip(".")

    request = NotificationRequest(
        recipient_id=user_id,
        category=NotificationCategory.PAYMENT,
        title="Payment Confirmed",
        body=(
            f"Your payment of KES {formatted_amount} via {method} "
            "has been processed successfully."
        ),
        channels=ALL_CHANNELS,
        priority=NotificationPriority.HIGH,
        action_url=_action_url(service, "/account/orders"),
        structured_data={"amount": amount, "method": method},
    )
    return await service.send_notification(request, contact)


async def loyalty_points_changed(
    service: NotificationService,
    user_id: str,
    points: int,
    action: LoyaltyAction,
    contact: RecipientContact,
    tier: str | None = None,
) -> DispatchResult:
    """Notify a customer that Panda Points were earned or redeemed.

    Args:
        service: Notification service.
        user_id: Customer ID.
        points: Number of points earned or redeemed.
        action: ``earned`` or ``redeemed``.
        contact: Customer delivery addresses.
        tier: Current loyalty tier, if known.

    Raises:
        ValueError: If action is neither earned nor redeemed.
    """
    if action == "earned":
        body = f"You earned {points} Panda Points from your recent purchase!"
    elif action == "redeemed":
        body = f"You redeemed {points} Panda Points successfully."
    else:
        raise ValueError(f"Unknown loyalty action: {action!r}")

    structured_data: dict[str, object] = {"points": points, "action": action}
    if tier:
        body = f"{body} Your current tier: {tier}."
        structured_data["tier"] = tier

    request = NotificationRequest(
        recipient_id=user_id,
        category=NotificationCategory.LOYALTY,
        title=f"Panda Points {action.capitalize()}",
        body=body,
        channels=LOYALTY_CHANNELS,
        priority=NotificationPriority.MEDIUM,
        action_url=_action_url(service, "/account/loyalty"),
        structured_data=structured_data,
    )
    return await service.send_notification(request, contact)


async def security_alert(
    service: NotificationService,
    user_id: str,
    event: str,
    location: str,
    contact: RecipientContact,
) -> DispatchResult:
    """Warn a customer about security-relevant account activity.

    Args:
        service: Notification service.
        user_id: Customer ID.
        event: What happened (e.g. "New sign-in").
        location: Where it came from.
        contact: Customer delivery addresses.
    """
    request = NotificationRequest(
        recipient_id=user_id,
        category=NotificationCategory.SECURITY,
        title="Security Alert",
        body=(
            f"{event} detected from {location}. "
            "If this wasn't you, please secure your account."
        ),
        channels=ALL_CHANNELS,
        priority=NotificationPriority.URGENT,
        action_url=_action_url(service, "/account/security"),
        structured_data={"event": event, "location": location},
    )
    return await service.send_notification(request, contact)

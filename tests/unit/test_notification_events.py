# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the storefront event notification helpers."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.config.settings import Settings
from src.infrastructure.notifications.channels import PushContent
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
    NotificationCategory,
    NotificationPriority,
    NotificationRequest,
    RecipientContact,
)
from src.infrastructure.notifications.service import NotificationService
from src.infrastructure.notifications.templates import EmailTemplate

ALL = [ChannelType.EMAIL, ChannelType.SMS, ChannelType.PUSH, ChannelType.IN_APP]


@pytest.fixture
def storefront_settings() -> Settings:
    """Provide settings pointing action links at the public storefront."""
    return Settings(app_url="https://pandamart.co.ke")


@pytest.fixture
def dispatch_result() -> DispatchResult:
    """Provide the result the mock service returns."""
    return DispatchResult()


@pytest.fixture
def service(dispatch_result: DispatchResult, storefront_settings: Settings) -> MagicMock:
    """Create a mock notification service."""
    service = MagicMock()
    service.settings = storefront_settings
    service.send_notification = AsyncMock(return_value=dispatch_result)
    return service


def sent_request(service: MagicMock) -> NotificationRequest:
    """Return the request handed to the service."""
    service.send_notification.assert_awaited_once()
    return service.send_notification.call_args[0][0]


class TestOrderStatusChanged:
    """Tests for order_status_changed."""

    @pytest.mark.asyncio
    async def test_shipped(
        self,
        service: MagicMock,
        dispatch_result: DispatchResult,
        full_contact: RecipientContact,
    ) -> None:
        """Test the shipped order notification."""
        result = await order_status_changed(
            service,
            user_id="u1",
            order_number="ORD-100",
            status="shipped",
            contact=full_contact,
        )

        assert result is dispatch_result
        request = sent_request(service)
        assert request.recipient_id == "u1"
        assert request.category is NotificationCategory.ORDER
        assert request.priority is NotificationPriority.HIGH
        assert request.channels == ALL
        assert request.title == "Order Shipped"
        assert request.body == (
            "Order #ORD-100: Your order has been shipped and is on its way to you."
        )
        assert request.action_url == "https://pandamart.co.ke/account/orders/ORD-100"
        assert request.structured_data == {"order_number": "ORD-100", "status": "shipped"}
        assert service.send_notification.call_args[0][1] is full_contact

    @pytest.mark.asyncio
    async def test_unknown_status_uses_generic_message(
        self,
        service: MagicMock,
        full_contact: RecipientContact,
    ) -> None:
        """Test that unlisted statuses still notify."""
        await order_status_changed(service, "u1", "ORD-7", "returned", full_contact)

        request = sent_request(service)
        assert request.title == "Order Returned"
        assert request.body == "Order #ORD-7: Status updated"


class TestPaymentConfirmed:
    """Tests for payment_confirmed."""

    @pytest.mark.asyncio
    async def test_payment(self, service: MagicMock, full_contact: RecipientContact) -> None:
        """Test the payment confirmation notification."""
        await payment_confirmed(service, "u1", 1500, "M-Pesa", full_contact)

        request = sent_request(service)
        assert request.category is NotificationCategory.PAYMENT
        assert request.priority is NotificationPriority.HIGH
        assert request.channels == ALL
        assert request.title == "Payment Confirmed"
        assert request.body == (
            "Your payment of KES 1,500 via M-Pesa has been processed successfully."
        )
        assert request.action_url == "https://pandamart.co.ke/account/orders"
        assert request.structured_data == {"amount": 1500, "method": "M-Pesa"}

    @pytest.mark.asyncio
    async def test_fractional_amount(
        self,
        service: MagicMock,
        full_contact: RecipientContact,
    ) -> None:
        """Test that cents are kept when present."""
        await payment_confirmed(service, "u1", 2499.5, "Card", full_contact)

        assert "KES 2,499.5 via Card" in sent_request(service).body


class TestLoyaltyPointsChanged:
    """Tests for loyalty_points_changed."""

    @pytest.mark.asyncio
    async def test_earned(self, service: MagicMock, full_contact: RecipientContact) -> None:
        """Test the points earned notification."""
        await loyalty_points_changed(service, "u1", 120, "earned", full_contact)

        request = sent_request(service)
        assert request.category is NotificationCategory.LOYALTY
        assert request.priority is NotificationPriority.MEDIUM
        assert request.channels == [ChannelType.EMAIL, ChannelType.PUSH, ChannelType.IN_APP]
        assert request.title == "Panda Points Earned"
        assert request.body == "You earned 120 Panda Points from your recent purchase!"
        assert request.action_url == "https://pandamart.co.ke/account/loyalty"
        assert "tier" not in request.structured_data

    @pytest.mark.asyncio
    async def test_redeemed_with_tier(
        self,
        service: MagicMock,
        full_contact: RecipientContact,
    ) -> None:
        """Test the redemption notification with a tier."""
        await loyalty_points_changed(service, "u1", 50, "redeemed", full_contact, tier="Gold")

        request = sent_request(service)
        assert request.title == "Panda Points Redeemed"
        assert request.body == (
            "You redeemed 50 Panda Points successfully. Your current tier: Gold."
        )
        assert request.structured_data == {"points": 50, "action": "redeemed", "tier": "Gold"}

    @pytest.mark.asyncio
    async def test_unknown_action_rejected(
        self,
        service: MagicMock,
        full_contact: RecipientContact,
    ) -> None:
        """Test that only earned and redeemed are accepted."""
        with pytest.raises(ValueError):
            await loyalty_points_changed(service, "u1", 5, "expired", full_contact)  # type: ignore[arg-type]

        service.send_notification.assert_not_awaited()


class TestSecurityAlert:
    """Tests for security_alert."""

    @pytest.mark.asyncio
    async def test_security_alert(
        self,
        service: MagicMock,
        full_contact: RecipientContact,
    ) -> None:
        """Test the security alert notification."""
        await security_alert(service, "u1", "New sign-in", "Nairobi, Kenya", full_contact)

        request = sent_request(service)
        assert request.category is NotificationCategory.SECURITY
        assert request.priority is NotificationPriority.URGENT
        assert request.channels == ALL
        assert request.title == "Security Alert"
        assert request.body == (
            "New sign-in detected from Nairobi, Kenya. "
            "If this wasn't you, please secure your account."
        )
        assert request.action_url == "https://pandamart.co.ke/account/security"


class TestActionLinks:
    """Tests for action link hosts."""

    @pytest.mark.asyncio
    async def test_links_follow_service_settings(
        self,
        monkeypatch: pytest.MonkeyPatch,
        channels: dict[str, MagicMock],
        full_contact: RecipientContact,
    ) -> None:
        """Test that links use the service's settings, not the environment."""
        monkeypatch.setenv("NEXT_PUBLIC_APP_URL", "https://wrong.example.com")
        service = NotificationService(
            settings=Settings(app_url="https://staging.pandamart.co.ke/"),
            **channels,
        )

        await security_alert(service, "u1", "New sign-in", "Mombasa", full_contact)

        _, request = channels["in_app"].send.call_args[0]
        assert isinstance(request, NotificationRequest)
        assert request.action_url == "https://staging.pandamart.co.ke/account/security"


def make_channel() -> MagicMock:
    """Create a configured mock channel that accepts every send."""
    channel = MagicMock()
    channel.is_configured = True
    channel.send = AsyncMock(return_value=True)
    return channel


@pytest.fixture
def channels() -> dict[str, MagicMock]:
    """Create one mock channel per delivery channel."""
    return {name: make_channel() for name in ("email", "sms", "push", "in_app")}


@pytest.fixture
def real_service(channels: dict[str, MagicMock], storefront_settings: Settings) -> NotificationService:
    """Create a real dispatch service over mock channels."""
    return NotificationService(settings=storefront_settings, **channels)


class TestEventDispatchScenarios:
    """Event helpers driven through the real dispatch service."""

    @pytest.mark.asyncio
    async def test_order_shipped_to_email_only_contact(
        self,
        real_service: NotificationService,
        channels: dict[str, MagicMock],
    ) -> None:
        """Test a shipped order for a customer reachable by email only."""
        result = await order_status_changed(
            real_service,
            user_id="u1",
            order_number="ORD-100",
            status="shipped",
            contact=RecipientContact(email="jane@example.com"),
        )

        channels["email"].send.assert_awaited_once()
        destination, content = channels["email"].send.call_args[0]
        assert destination == "jane@example.com"
        assert isinstance(content, EmailTemplate)
        assert content.subject == "Order Update - Order Shipped"
        assert "ORD-100" in content.html
        assert "ORD-100" in content.text
        assert "shipped" in content.text

        channels["sms"].send.assert_not_awaited()
        channels["push"].send.assert_not_awaited()
        channels["in_app"].send.assert_awaited_once()

        assert result.success is True
        assert result.results == {
            ChannelType.EMAIL: True,
            ChannelType.SMS: False,
            ChannelType.PUSH: False,
            ChannelType.IN_APP: True,
        }
        assert result.statuses[ChannelType.SMS] is DeliveryStatus.SKIPPED
        assert result.statuses[ChannelType.PUSH] is DeliveryStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_security_alert_to_full_contact(
        self,
        real_service: NotificationService,
        channels: dict[str, MagicMock],
        full_contact: RecipientContact,
    ) -> None:
        """Test a security alert reaching all four channels independently."""
        channels["push"].send = AsyncMock(return_value=False)

        result = await security_alert(
            real_service,
            "u1",
            "New sign-in",
            "Nairobi, Kenya",
            full_contact,
        )

        for channel in channels.values():
            channel.send.assert_awaited_once()

        _, email = channels["email"].send.call_args[0]
        assert email.subject == "Security Alert - Panda Mart Account"
        destination, message = channels["sms"].send.call_args[0]
        assert destination == "+254712345678"
        assert message.startswith("Panda Mart Security: New sign-in detected from Nairobi, Kenya.")
        _, push = channels["push"].send.call_args[0]
        assert isinstance(push, PushContent)
        assert push.title == "Security Alert"

        assert result.success is True
        assert result.results == {
            ChannelType.EMAIL: True,
            ChannelType.SMS: True,
            ChannelType.PUSH: False,
            ChannelType.IN_APP: True,
        }
        assert result.statuses[ChannelType.PUSH] is DeliveryStatus.FAILED

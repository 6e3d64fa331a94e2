# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for notification request, contact and result types."""

from datetime import datetime, timedelta, timezone

import pytest

from src.infrastructure.notifications.models import (
    ChannelType,
    DeliveryStatus,
    DispatchResult,
    InvalidNotificationError,
    NotificationCategory,
    NotificationPriority,
    NotificationRequest,
    RecipientContact,
    coerce_category,
)


class TestNotificationRequest:
    """Tests for NotificationRequest."""

    def test_category_string_coerced_to_enum(self) -> None:
        """Test that known category names become enum members."""
        request = NotificationRequest(
            recipient_id="u1",
            category="payment",
            title="t",
            body="b",
            channels=["email"],
        )

        assert request.category is NotificationCategory.PAYMENT
        assert request.category_value == "payment"

    def test_unknown_category_kept_as_string(self) -> None:
        """Test that unknown categories survive for template fallback."""
        request = NotificationRequest(
            recipient_id="u1",
            category="flash_sale",
            title="t",
            body="b",
            channels=["in_app"],
        )

        assert request.category == "flash_sale"
        assert request.category_value == "flash_sale"
        assert request.priority is NotificationPriority.MEDIUM

    @pytest.mark.parametrize(
        "category,expected",
        [
            (NotificationCategory.ORDER, NotificationPriority.HIGH),
            (NotificationCategory.SECURITY, NotificationPriority.URGENT),
            (NotificationCategory.PROMOTION, NotificationPriority.LOW),
            (NotificationCategory.LOYALTY, NotificationPriority.MEDIUM),
        ],
    )
    def test_default_priority_from_category(
        self,
        category: NotificationCategory,
        expected: NotificationPriority,
    ) -> None:
        """Test that an omitted priority is derived from the category."""
        request = NotificationRequest(recipient_id="u1", category=category, title="t", body="b")

        assert request.priority is expected

    def test_explicit_priority_kept(self) -> None:
        """Test that a caller-supplied priority wins."""
        request = NotificationRequest(
            recipient_id="u1",
            category=NotificationCategory.PROMOTION,
            title="t",
            body="b",
            priority="urgent",  # type: ignore[arg-type]
        )

        assert request.priority is NotificationPriority.URGENT

    def test_duplicate_channels_removed_in_order(self) -> None:
        """Test that repeated channels collapse, preserving first position."""
        request = NotificationRequest(
            recipient_id="u1",
            category="order",
            title="t",
            body="b",
            channels=["sms", ChannelType.EMAIL, "sms", "in_app", ChannelType.EMAIL],
        )

        assert request.channels == [ChannelType.SMS, ChannelType.EMAIL, ChannelType.IN_APP]

    def test_unknown_channel_rejected(self) -> None:
        """Test that an unknown channel name is refused."""
        with pytest.raises(InvalidNotificationError, match="fax"):
            NotificationRequest(
                recipient_id="u1",
                category="order",
                title="t",
                body="b",
                channels=["email", "fax"],
            )

    def test_template_data_core_fields_win(self) -> None:
        """Test that title and body override same-named structured keys."""
        request = NotificationRequest(
            recipient_id="u1",
            category="order",
            title="Real title",
            body="Real body",
            structured_data={"title": "spoofed", "order_number": "ORD-1"},
            action_url="https://pandamart.co.ke/account/orders/ORD-1",
        )

        data = request.template_data()

        assert data["title"] == "Real title"
        assert data["body"] == "Real body"
        assert data["order_number"] == "ORD-1"
        assert data["action_url"] == "https://pandamart.co.ke/account/orders/ORD-1"

    def test_is_expired(self) -> None:
        """Test advisory expiry checks."""
        now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
        expiring = NotificationRequest(
            recipient_id="u1",
            category="promotion",
            title="t",
            body="b",
            expires_at=now - timedelta(minutes=1),
        )
        open_ended = NotificationRequest(recipient_id="u1", category="promotion", title="t", body="b")

        assert expiring.is_expired(now) is True
        assert open_ended.is_expired(now) is False

    def test_to_dict(self) -> None:
        """Test dictionary conversion uses plain values."""
        request = NotificationRequest(
            recipient_id="u1",
            category=NotificationCategory.SECURITY,
            title="Security Alert",
            body="b",
            channels=[ChannelType.EMAIL],
        )

        data = request.to_dict()

        assert data["category"] == "security"
        assert data["channels"] == ["email"]
        assert data["priority"] == "urgent"
        assert data["expires_at"] is None


class TestCoerceCategory:
    """Tests for coerce_category."""

    def test_enum_passthrough(self) -> None:
        """Test that enum members are returned as-is."""
        assert coerce_category(NotificationCategory.SYSTEM) is NotificationCategory.SYSTEM

    def test_unknown_passthrough(self) -> None:
        """Test that unknown names are returned unchanged."""
        assert coerce_category("newsletter") == "newsletter"


class TestRecipientContact:
    """Tests for RecipientContact."""

    def test_address_for_each_channel(self) -> None:
        """Test address lookup per channel."""
        contact = RecipientContact(email="a@b.c", phone_number="0712345678", push_token="tok")

        assert contact.address_for(ChannelType.EMAIL) == "a@b.c"
        assert contact.address_for(ChannelType.SMS) == "0712345678"
        assert contact.address_for(ChannelType.PUSH) == "tok"

    def test_missing_addresses_are_none(self) -> None:
        """Test that absent or empty addresses resolve to None."""
        contact = RecipientContact(email="", phone_number=None)

        assert contact.address_for(ChannelType.EMAIL) is None
        assert contact.address_for(ChannelType.SMS) is None
        assert contact.address_for(ChannelType.PUSH) is None

    def test_in_app_needs_no_address(self) -> None:
        """Test that in-app delivery is always addressable."""
        assert RecipientContact().address_for(ChannelType.IN_APP) == ""


class TestDispatchResult:
    """Tests for DispatchResult."""

    def test_empty_result_is_not_success(self) -> None:
        """Test that no outcomes means no success."""
        assert DispatchResult().success is False

    def test_success_when_any_channel_sent(self) -> None:
        """Test that one delivered channel is enough."""
        result = DispatchResult()
        result.record(ChannelType.EMAIL, DeliveryStatus.FAILED)
        result.record(ChannelType.IN_APP, DeliveryStatus.SENT)

        assert result.success is True
        assert result.results == {ChannelType.EMAIL: False, ChannelType.IN_APP: True}

    def test_skipped_reported_as_false(self) -> None:
        """Test that skipped channels look like failures in results."""
        result = DispatchResult()
        result.record(ChannelType.SMS, DeliveryStatus.SKIPPED)

        assert result.results[ChannelType.SMS] is False
        assert result.statuses[ChannelType.SMS] is DeliveryStatus.SKIPPED
        assert result.success is False

    def test_to_dict(self) -> None:
        """Test dictionary conversion."""
        result = DispatchResult()
        result.record(ChannelType.PUSH, DeliveryStatus.SENT)

        assert result.to_dict() == {
            "success": True,
            "results": {"push": True},
            "statuses": {"push": "sent"},
        }

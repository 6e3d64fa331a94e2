# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the in-app notification store."""

from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Index, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.utils.datetime import format_iso, has_passed


class Base(DeclarativeBase):
    """Declarative base for all models."""


class NotificationRecord(Base):
    """A notification stored for display in the app's notification centre.

    The row carries the full notification request so the UI can render
    structured content later, plus read tracking and a server timestamp.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    priority: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    channels: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    action_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    @property
    def is_read(self) -> bool:
        """Check whether the user has read the notification."""
        return self.read_at is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the notification is past its advisory expiry."""
        return has_passed(self.expires_at, now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "category": self.category,
            "priority": self.priority,
            "title": self.title,
            "body": self.body,
            "data": self.data or {},
            "channels": self.channels or [],
            "action_url": self.action_url,
            "expires_at": format_iso(self.expires_at),
            "read_at": format_iso(self.read_at),
            "created_at": format_iso(self.created_at),
            "is_read": self.is_read,
            "is_expired": self.is_expired(),
        }

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Durable store for in-app notifications.

The in-app channel writes every notification here; the notification
centre reads it back newest-first. Writes commit before returning, so a
caller awaiting a dispatch can read the new record immediately.

Usage:
    store = NotificationStore()
    notification_id = await store.create(request)
    records = await store.list_for_user("user-1", limit=20)
    await store.mark_as_read("user-1", notification_id)
"""

from contextlib import AbstractAsyncContextManager
from typing import Callable, Sequence
from uuid import uuid4

from pydantic_core import to_jsonable_python
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.connection import get_session
from src.infrastructure.database.models import NotificationRecord
from src.infrastructure.notifications.models import NotificationRequest
from src.utils.datetime import utc_now
from src.utils.logging import get_logger

logger = get_logger(__name__)

SessionProvider = Callable[[], AbstractAsyncContextManager[AsyncSession]]

MAX_PAGE_SIZE = 100


def _validate_page(limit: int, offset: int) -> None:
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}, got {limit}")
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")


class NotificationStore:
    """SQLAlchemy-backed store keyed by recipient.

    Attributes:
        session_provider: Callable returning an async session context that
            commits on exit.
    """

    def __init__(self, session_provider: SessionProvider = get_session) -> None:
        self._session_provider = session_provider

    async def create(self, request: NotificationRequest) -> str:
        """Persist a notification request.

        Structured data is converted to JSON-safe values first: datetimes
        and decimals become strings, unknown objects their str().

        Args:
            request: The full notification request.

        Returns:
            ID of the stored notification.

        Raises:
            DatabaseError: If the write fails.
        """
        record = NotificationRecord(
            id=str(uuid4()),
            user_id=request.recipient_id,
            category=request.category_value,
            priority=request.priority.value if request.priority else "medium",
            title=request.title,
            body=request.body,
            data=to_jsonable_python(request.structured_data, fallback=str),
            channels=[channel.value for channel in request.channels],
            action_url=request.action_url,
            expires_at=request.expires_at,
        )

        async with self._session_provider() as session:
            session.add(record)
            await session.flush()

        logger.info(
            "in_app_notification_stored",
            notification_id=record.id,
            recipient_id=request.recipient_id,
            category=record.category,
        )
        return record.id

    async def list_for_user(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> Sequence[NotificationRecord]:
        """List a user's notifications, newest first.

        Args:
            user_id: Recipient identifier.
            limit: Page size (1 to 100).
            offset: Number of records to skip.
            unread_only: Only return notifications not yet read.

        Returns:
            Notification records.

        Raises:
            ValueError: If limit or offset is out of range.
        """
        _validate_page(limit, offset)

        query = select(NotificationRecord).where(NotificationRecord.user_id == user_id)
        if unread_only:
            query = query.where(NotificationRecord.read_at.is_(None))
        query = (
            query.order_by(NotificationRecord.created_at.desc(), NotificationRecord.id.desc())
            .limit(limit)
            .offset(offset)
        )

        async with self._session_provider() as session:
            result = await session.execute(query)
            return result.scalars().all()

    async def count_unread(self, user_id: str) -> int:
        """Count a user's unread notifications."""
        query = (
            select(func.count())
            .select_from(NotificationRecord)
            .where(
                NotificationRecord.user_id == user_id,
                NotificationRecord.read_at.is_(None),
            )
        )

        async with self._session_provider() as session:
            result = await session.execute(query)
            return int(result.scalar_one())

    async def mark_as_read(self, user_id: str, notification_id: str) -> bool:
        """Mark one notification as read.

        Returns:
            False if the notification does not exist or belongs to another
            user; True otherwise, including when it was already read.
        """
        async with self._session_provider() as session:
            record = await session.get(NotificationRecord, notification_id)
            if record is None or record.user_id != user_id:
                return False
            if record.read_at is None:
                record.read_at = utc_now()

        logger.debug("notification_marked_read", notification_id=notification_id, user_id=user_id)
        return True

    async def mark_all_as_read(self, user_id: str) -> int:
        """Mark every unread notification of a user as read.

        Returns:
            Number of notifications updated.
        """
        statement = (
            update(NotificationRecord)
            .where(
                NotificationRecord.user_id == user_id,
                NotificationRecord.read_at.is_(None),
            )
            .values(read_at=utc_now())
        )

        async with self._session_provider() as session:
            result = await session.execute(statement)
            updated = result.rowcount or 0

        logger.info("notifications_marked_read", user_id=user_id, count=updated)
        return updated

    async def delete(self, user_id: str, notification_id: str) -> bool:
        """Delete one notification owned by a user.

        Returns:
            True if a notification was deleted.
        """
        async with self._session_provider() as session:
            record = await session.get(NotificationRecord, notification_id)
            if record is None or record.user_id != user_id:
                return False
            await session.delete(record)

        logger.info("notification_deleted", notification_id=notification_id, user_id=user_id)
        return True

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-app notification API endpoints.

This module exposes the notification centre backed by the in-app store:
- GET /{user_id}/notifications - List a user's notifications, newest first
- POST /{user_id}/notifications/{notification_id}/read - Mark one as read
- POST /{user_id}/notifications/read-all - Mark all as read
- DELETE /{user_id}/notifications/{notification_id} - Delete one

Example:
    GET /api/v1/users/u1/notifications?limit=20&unread_only=true
"""

import logging
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from src.api.dependencies import StoreDep
from src.infrastructure.notifications.store import MAX_PAGE_SIZE

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Response Models
# ============================================================================


class NotificationItem(BaseModel):
    """A stored in-app notification."""

    id: str = Field(description="Notification ID")
    user_id: str = Field(description="Recipient ID")
    category: str = Field(description="Notification category")
    priority: str = Field(description="Notification priority")
    title: str = Field(description="Short headline")
    body: str = Field(description="Message text")
    data: dict[str, Any] = Field(default_factory=dict, description="Structured data")
    channels: list[str] = Field(default_factory=list, description="Requested channels")
    action_url: str | None = Field(None, description="Link to the related page")
    expires_at: datetime | None = Field(None, description="When the notification lapses")
    read_at: datetime | None = Field(None, description="When it was read")
    created_at: datetime | None = Field(None, description="When it was stored")
    is_read: bool = Field(description="Whether it has been read")
    is_expired: bool = Field(description="Whether it has lapsed")


class NotificationListResponse(BaseModel):
    """A page of notifications plus the unread total."""

    notifications: list[NotificationItem]
    unread_count: int = Field(description="Unread notifications across all pages")
    limit: int
    offset: int


class MarkAllReadResponse(BaseModel):
    """Result of marking all notifications as read."""

    updated: int = Field(description="Number of notifications marked as read")


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/{user_id}/notifications",
    response_model=NotificationListResponse,
    summary="List notifications",
)
async def list_notifications(
    user_id: str,
    store: StoreDep,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
    unread_only: bool = False,
) -> NotificationListResponse:
    """List a user's in-app notifications, newest first."""
    records = await store.list_for_user(
        user_id,
        limit=limit,
        offset=offset,
        unread_only=unread_only,
    )
    unread_count = await store.count_unread(user_id)

    return NotificationListResponse(
        notifications=[NotificationItem.model_validate(record.to_dict()) for record in records],
        unread_count=unread_count,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/{user_id}/notifications/read-all",
    response_model=MarkAllReadResponse,
    summary="Mark all notifications as read",
)
async def mark_all_notifications_read(user_id: str, store: StoreDep) -> MarkAllReadResponse:
    """Mark every unread notification of a user as read."""
    updated = await store.mark_all_as_read(user_id)
    return MarkAllReadResponse(updated=updated)


@router.post(
    "/{user_id}/notifications/{notification_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark a notification as read",
)
async def mark_notification_read(
    user_id: str,
    notification_id: str,
    store: StoreDep,
) -> Response:
    """Mark one notification as read.

    Raises:
        HTTPException: 404 if the notification does not exist for this user.
    """
    if not await store.mark_as_read(user_id, notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{user_id}/notifications/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a notification",
)
async def delete_notification(
    user_id: str,
    notification_id: str,
    store: StoreDep,
) -> Response:
    """Delete one notification.

    Raises:
        HTTPException: 404 if the notification does not exist for this user.
    """
    if not await store.delete(user_id, notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )

    logger.info("Deleted notification %s for user %s", notification_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

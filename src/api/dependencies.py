# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get the notification service
- Get the in-app notification store

Example:
    @router.get("/users/{user_id}/notifications")
    async def list_notifications(
        user_id: str,
        store: NotificationStore = Depends(get_notification_store),
    ):
        ...
"""

from typing import Annotated

from fastapi import Depends

from src.core.config import Settings, get_settings
from src.infrastructure.notifications import (
    NotificationService,
    NotificationStore,
    get_notification_service,
)


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


def get_service() -> NotificationService:
    """Get the notification service."""
    return get_notification_service()


def get_notification_store(
    service: Annotated[NotificationService, Depends(get_service)],
) -> NotificationStore:
    """Get the store behind the service's in-app channel."""
    return service.store


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
ServiceDep = Annotated[NotificationService, Depends(get_service)]
StoreDep = Annotated[NotificationStore, Depends(get_notification_store)]

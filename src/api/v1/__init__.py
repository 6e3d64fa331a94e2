# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    notifications: In-app notification centre (list, read, delete).
"""

from fastapi import APIRouter

from src.api.v1 import notifications

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(notifications.router, prefix="/users", tags=["Notifications"])

__all__ = ["router"]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the Panda Mart notification engine.

Example:
    >>> from src.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from src.core.config.settings import (
    AfricasTalkingSettings,
    DatabaseSettings,
    FirebaseSettings,
    NotificationSettings,
    SendGridSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "SendGridSettings",
    "AfricasTalkingSettings",
    "FirebaseSettings",
    "DatabaseSettings",
    "NotificationSettings",
]

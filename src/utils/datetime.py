# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for notification timestamps.

All timestamps are stored in UTC and every Python datetime handled by the
notification engine is timezone-aware, so naive/aware comparisons never
happen when checking notification expiry.

Usage:
    from src.utils.datetime import utc_now, has_passed

    created_at = utc_now()
    stale = has_passed(request.expires_at)
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def has_passed(moment: datetime | None, now: datetime | None = None) -> bool:
    """Check whether an optional deadline lies in the past.

    A missing deadline never passes, which is what notification expiry
    needs: a notification without ``expires_at`` stays fresh forever.

    Args:
        moment: Deadline to check, or None.
        now: Reference time. Defaults to the current UTC time.

    Returns:
        True if ``moment`` is set and earlier than ``now``.
    """
    if moment is None:
        return False

    reference = ensure_utc(now) if now is not None else utc_now()
    return ensure_utc(moment) < reference


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as ISO 8601 string.

    Args:
        dt: Datetime to format.

    Returns:
        ISO 8601 formatted string or None.
    """
    if dt is None:
        return None

    return ensure_utc(dt).isoformat()

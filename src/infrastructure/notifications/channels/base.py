# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base classes for notification channels.

This module defines the abstract base class shared by every delivery
channel. Each channel wraps exactly one provider and exposes a single
``send`` capability that reports success as a boolean.

Channel implementations must be async and must never raise from ``send``:
provider and network errors are caught, logged and reported as False.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from src.infrastructure.notifications.models import ChannelType

DEFAULT_TIMEOUT_SECONDS = 10.0


class BaseChannel(ABC):
    """Abstract base class for notification channels.

    Attributes:
        channel_type: The type of this channel.
        timeout: Per-request timeout for provider calls, in seconds.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the channel.

        Args:
            timeout: Per-request timeout in seconds.
            client: Optional shared HTTP client. When omitted a short-lived
                client is opened for every send.
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.timeout = timeout
        self._client = client

    @property
    @abstractmethod
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        ...

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Return True when the provider credentials are present."""
        ...

    @abstractmethod
    async def send(self, destination: str, content: Any) -> bool:
        """Deliver content to one destination.

        Args:
            destination: Channel-specific address.
            content: Channel-specific rendered content.

        Returns:
            True if the provider accepted the message.
        """
        ...

    @asynccontextmanager
    async def http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the injected HTTP client or a short-lived one."""
        if self._client is not None:
            yield self._client
            return

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    def warn_unconfigured(self, missing: str) -> None:
        """Log once that the channel is disabled."""
        self.logger.warning(
            "%s notifications disabled: %s not set",
            self.channel_type.value,
            missing,
        )

"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Consumer-side state tracking on top of coordinator registrations.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Generic, TypeVar

from .coordinator import RequestCoordinator
from .types import Producer, Unsubscribe

T = TypeVar("T")

logger = logging.getLogger("requestmap.subscription")


class RequestSubscription(Generic[T]):
    """
    Track ``data``/``error``/``loading`` for one key of a coordinator.

    ``loading`` stays true while only stale or cached data has arrived and
    clears on the first fresh value or error. A ``None`` key is inert: nothing
    is registered and the subscription is never loading.

    Usage::

        async with RequestSubscription(coordinator, "user:1", load_user) as sub:
            user = await sub.wait()
    """

    def __init__(
        self,
        coordinator: RequestCoordinator[T],
        key: str | None,
        producer: Producer[T],
    ) -> None:
        self.key = key
        self.data: T | None = None
        self.error: BaseException | None = None
        self.loading = key is not None
        self._coordinator = coordinator
        self._producer = producer
        self._unsubscribe: Unsubscribe | None = None
        self._closed = False
        self._settled = asyncio.Event()
        if key is None:
            self._settled.set()

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None and not self._closed

    def open(self) -> "RequestSubscription[T]":
        """Register with the coordinator; repeated calls are no-ops."""
        if self.key is None or self._closed or self._unsubscribe is not None:
            return self
        self._unsubscribe = self._coordinator.register(
            self.key, self._on_delivery, self._producer
        )
        logger.debug("Subscription opened for key %s", self.key)
        return self

    def close(self) -> None:
        """Stop receiving deliveries; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._settled.set()
        if self._unsubscribe is not None:
            self._unsubscribe()
            logger.debug("Subscription closed for key %s", self.key)

    async def wait(self) -> T | None:
        """
        Wait for the first fresh value or error and return ``data``.

        Closing the subscription releases pending waiters; they get whatever
        ``data`` holds at that point and ``loading`` stays as it was.
        """
        await self._settled.wait()
        return self.data

    def _on_delivery(
        self,
        error: BaseException | None,
        value: T | None = None,
        stale: bool | None = None,
    ) -> None:
        if self._closed:
            return
        if error is not None:
            self.error = error
        else:
            self.data = value
        if not stale:
            self.loading = False
            self._settled.set()

    async def __aenter__(self) -> "RequestSubscription[T]":
        return self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Keyed request coordinator with in-flight deduplication and stale-while-revalidate.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
import logging
import re
import time
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, Generic, TypeVar

from .cache.base import RequestCache
from .metrics import (
    CACHE_DISCARDED,
    CACHE_HIT,
    FETCH_FAILED,
    FETCH_STARTED,
    FETCH_SUCCEEDED,
    FETCH_SUPERSEDED,
    FETCH_SUPPRESSED,
    CoordinatorMetrics,
    NoOpCoordinatorMetrics,
)
from .types import Entry, KeyPredicate, Observer, Producer, Unsubscribe

T = TypeVar("T")

DEFAULT_TTL_S = 1.0

logger = logging.getLogger("requestmap.coordinator")


def _contains(observers: list[Observer[Any]], observer: Observer[Any]) -> bool:
    return any(existing is observer for existing in observers)


class RequestCoordinator(Generic[T]):
    """
    Share one in-flight fetch per key between every registered observer.

    Registration delivers known data synchronously (flagged stale once older
    than ``ttl_s``), falls back to the optional cache while no value exists,
    and starts a background revalidation whenever the key is stale and no
    fetch for it is already running. Explicit revalidation always starts a
    new cycle; when cycles overlap the newest one wins. Results fan out to all observers of the
    key; failures are delivered through the observer error channel only.

    All methods must be used from a single event loop.
    """

    def __init__(
        self,
        *,
        ttl_s: float = DEFAULT_TTL_S,
        cache: RequestCache | None = None,
        metrics: CoordinatorMetrics | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_s < 0:
            raise ValueError("ttl_s must be >= 0")
        self.ttl_s = ttl_s
        self.cache = cache
        self._metrics: CoordinatorMetrics = metrics or NoOpCoordinatorMetrics()
        self._clock = clock
        self._entries: dict[str, Entry[T]] = {}
        self._inflight: dict[str, asyncio.Task[None]] = {}
        # Highest cycle number settled per key while overlapping cycles run.
        self._settled_seq: dict[str, int] = {}
        self._running: dict[str, int] = {}
        self._cycle_seq = itertools.count(1)
        self._background: set[asyncio.Task[Any]] = set()

    # -- registration -------------------------------------------------------

    def register(
        self,
        key: str,
        observer: Observer[T],
        producer: Producer[T],
    ) -> Unsubscribe:
        """
        Subscribe `observer` to `key`, fetching with `producer` when needed.

        Returns an idempotent callable removing this registration.
        """
        asyncio.get_running_loop()

        entry = self._ensure_entry(key, producer)
        entry.observers.append(observer)

        stale = not entry.has_value or entry.is_stale(self._clock(), self.ttl_s)

        if entry.has_value:
            self._notify(key, observer, None, entry.value, stale)
        else:
            self._deliver_cached(key, observer)

        if stale:
            if key in self._inflight:
                self._metrics.incr(FETCH_SUPPRESSED)
            else:
                self._start_cycle(key, entry, trigger="stale")

        removed = False

        def unsubscribe() -> None:
            nonlocal removed
            if removed:
                return
            removed = True
            for index, existing in enumerate(entry.observers):
                if existing is observer:
                    del entry.observers[index]
                    break
            if not entry.observers and self._entries.get(key) is entry:
                del self._entries[key]
                logger.debug("Dropped entry for key %s (no observers left)", key)

        return unsubscribe

    def _ensure_entry(self, key: str, producer: Producer[T]) -> Entry[T]:
        entry = self._entries.get(key)
        if entry is not None:
            entry.producer = producer
            return entry
        entry = Entry(producer=producer)
        self._entries[key] = entry
        return entry

    # -- revalidation -------------------------------------------------------

    async def revalidate(self, key: str) -> None:
        """
        Re-run the fetch cycle for `key` and wait for it to finish.

        Unknown keys are ignored. A cycle already running for the key does
        not prevent this one; whichever started last wins if they overlap.
        """
        entry = self._entries.get(key)
        if entry is None:
            return
        await asyncio.shield(self._start_cycle(key, entry, trigger="revalidate"))

    async def invalidate_where(self, predicate: KeyPredicate) -> list[str]:
        """
        Revalidate every tracked key for which `predicate(key, value)` is true.

        `value` is ``None`` for entries that have not resolved yet. Waits for
        all selected cycles to settle and returns the selected keys.
        """
        selected = [
            (key, entry)
            for key, entry in list(self._entries.items())
            if predicate(key, entry.value if entry.has_value else None)
        ]
        tasks = [
            self._start_cycle(key, entry, trigger="invalidate") for key, entry in selected
        ]
        if tasks:
            await asyncio.gather(*(asyncio.shield(task) for task in tasks))
        return [key for key, _ in selected]

    async def invalidate_matching(self, pattern: str | re.Pattern[str]) -> list[str]:
        """Revalidate every tracked key containing a match for `pattern`."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        return await self.invalidate_where(
            lambda key, _value: regex.search(key) is not None
        )

    def update(self, key: str, value: T) -> None:
        """Push an externally obtained value to a tracked key's observers."""
        if key not in self._entries:
            return
        self._resolve(key, value)

    def _start_cycle(self, key: str, entry: Entry[T], *, trigger: str) -> asyncio.Task[None]:
        seq = next(self._cycle_seq)
        task = self._spawn(
            self._run_cycle(key, entry.producer, seq, trigger),
            name=f"requestmap:{key}",
        )
        self._inflight[key] = task
        return task

    def _supersede(self, key: str, seq: int) -> bool:
        """Return True if a later-started cycle for `key` has already settled."""
        if seq < self._settled_seq.get(key, 0):
            self._metrics.incr(FETCH_SUPERSEDED)
            logger.debug("Discarding superseded fetch cycle for key %s", key)
            return True
        self._settled_seq[key] = seq
        return False

    async def _run_cycle(
        self,
        key: str,
        producer: Producer[T],
        seq: int,
        trigger: str,
    ) -> None:
        self._metrics.incr(FETCH_STARTED, tags={"trigger": trigger})
        logger.debug("Fetch cycle started for key %s (trigger=%s)", key, trigger)
        self._running[key] = self._running.get(key, 0) + 1
        try:
            value = await producer()
        except Exception as exc:
            self._metrics.incr(FETCH_FAILED)
            logger.warning("Fetch cycle failed for key %s: %s", key, exc)
            if self._supersede(key, seq):
                return
            entry = self._entries.get(key)
            if entry is not None:
                for observer in list(entry.observers):
                    self._notify(key, observer, exc)
        else:
            self._metrics.incr(FETCH_SUCCEEDED)
            if self._supersede(key, seq):
                return
            self._resolve(key, value)
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]
            self._running[key] -= 1
            if not self._running[key]:
                del self._running[key]
                self._settled_seq.pop(key, None)

    def _resolve(self, key: str, value: T) -> None:
        entry = self._entries.get(key)
        if entry is not None:
            entry.value = value
            entry.last_updated = self._clock()
            for observer in list(entry.observers):
                self._notify(key, observer, None, value)
        self._write_cache(key, value)

    # -- cache interaction --------------------------------------------------

    def _deliver_cached(self, key: str, observer: Observer[T]) -> None:
        if self.cache is None:
            return
        try:
            result = self.cache.get(key)
        except Exception:
            logger.warning("Cache lookup failed for key %s", key, exc_info=True)
            return

        if inspect.isawaitable(result):
            self._spawn(self._await_cached(key, observer, result))
        elif result is not None:
            self._metrics.incr(CACHE_HIT)
            self._notify(key, observer, None, result, True)

    async def _await_cached(
        self,
        key: str,
        observer: Observer[T],
        pending: Awaitable[Any],
    ) -> None:
        try:
            value = await pending
        except Exception:
            logger.warning("Cache lookup failed for key %s", key, exc_info=True)
            return
        if value is None:
            return

        # The live fetch may have resolved first; never regress to cached data.
        entry = self._entries.get(key)
        if entry is None or entry.has_value or not _contains(entry.observers, observer):
            self._metrics.incr(CACHE_DISCARDED)
            return
        self._metrics.incr(CACHE_HIT)
        self._notify(key, observer, None, value, True)

    def _write_cache(self, key: str, value: T) -> None:
        if self.cache is None:
            return
        try:
            result = self.cache.set(key, value)
        except Exception:
            logger.warning("Cache write failed for key %s", key, exc_info=True)
            return
        if inspect.isawaitable(result):
            self._spawn(self._await_cache_write(key, result))

    async def _await_cache_write(self, key: str, pending: Awaitable[Any]) -> None:
        try:
            await pending
        except Exception:
            logger.warning("Cache write failed for key %s", key, exc_info=True)

    # -- helpers ------------------------------------------------------------

    def _notify(self, key: str, observer: Observer[T], *args: Any) -> None:
        try:
            observer(*args)
        except Exception:
            logger.exception("Observer for key %s raised", key)

    def _spawn(
        self,
        coro: Coroutine[Any, Any, Any],
        *,
        name: str | None = None,
    ) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def drain(self) -> None:
        """Wait until every background fetch, cache lookup and cache write settles."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # -- introspection ------------------------------------------------------

    def keys(self) -> list[str]:
        return list(self._entries.keys())

    def get_entry(self, key: str) -> Entry[T] | None:
        return self._entries.get(key)

    def peek(self, key: str) -> T | None:
        """Return the stored value for `key` without registering, or ``None``."""
        entry = self._entries.get(key)
        if entry is None or not entry.has_value:
            return None
        return entry.value

    def is_pending(self, key: str) -> bool:
        return key in self._inflight

    def observer_count(self, key: str) -> int:
        entry = self._entries.get(key)
        return 0 if entry is None else len(entry.observers)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

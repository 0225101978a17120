"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Core types shared by the coordinator, cache backends, and subscriptions.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Final, Generic, Protocol, TypeVar

T = TypeVar("T")


class _Missing:
    """Marker for "no value resolved yet"; ``None`` is a legitimate value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


class Observer(Protocol[T]):
    """
    Callback receiving coordinator deliveries for one key.

    Deliveries take one of three shapes:
    - ``observer(error)`` when a fetch cycle failed.
    - ``observer(None, value)`` for a fresh resolution.
    - ``observer(None, value, True)`` for TTL-stale or cache-sourced data.
    """

    def __call__(
        self,
        error: BaseException | None,
        value: T | None = None,
        stale: bool | None = None,
    ) -> None: ...


Producer = Callable[[], Awaitable[T]]
Unsubscribe = Callable[[], None]
KeyPredicate = Callable[[str, Any], bool]


@dataclass(slots=True, eq=False)
class Entry(Generic[T]):
    """
    Coordinator-side record for one tracked key.

    Attributes:
        producer: Most recently registered producer (last writer wins).
        value: Last successfully resolved value, or ``MISSING``.
        last_updated: Wall-clock seconds of the last resolution, ``0.0`` if none.
        observers: Registered callbacks, removed by identity.
    """

    producer: Producer[T]
    value: Any = MISSING
    last_updated: float = 0.0
    observers: list[Observer[T]] = field(default_factory=list)

    @property
    def has_value(self) -> bool:
        return self.value is not MISSING

    def is_stale(self, now: float, ttl_s: float) -> bool:
        return now - self.last_updated > ttl_s

"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class CacheRow:
    """One cached value with its expiration timestamp."""

    value: Any
    expires_at_s: float


class RequestCache(Protocol):
    """
    Cache capability consulted by the coordinator.

    Backends may be synchronous or asynchronous: ``get`` returns the value,
    ``None`` on a miss, or an awaitable resolving to either; ``set`` returns
    ``None`` or an awaitable the coordinator schedules without awaiting.
    """

    backend_id: str

    def get(self, key: str) -> Any | Awaitable[Any]: ...

    def set(self, key: str, value: Any) -> None | Awaitable[None]: ...

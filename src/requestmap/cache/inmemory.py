"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/inmemory.py.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .base import CacheRow


@dataclass(slots=True)
class InMemoryRequestCache:
    """Synchronous process-local cache suitable for development/test workloads."""

    backend_id: str = "inmemory"
    ttl_s: float = 300.0
    clock: Callable[[], float] = time.time
    _rows: dict[str, CacheRow] = field(default_factory=dict, repr=False)

    def get(self, key: str) -> Any | None:
        row = self._rows.get(key)
        if row is None:
            return None
        if row.expires_at_s < self.clock():
            self._rows.pop(key, None)
            return None
        return row.value

    def set(self, key: str, value: Any) -> None:
        self._rows[key] = CacheRow(value=value, expires_at_s=self.clock() + self.ttl_s)

    def delete(self, key: str) -> None:
        self._rows.pop(key, None)

    def clear(self) -> None:
        self._rows.clear()

    def __len__(self) -> int:
        return len(self._rows)

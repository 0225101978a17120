"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/redis.py.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger("requestmap.cache.redis")


class RedisRequestCache:
    """
    Redis-backed asynchronous cache for values shared across processes.

    Values are stored as JSON. Pass ``value_type`` (a pydantic model or any
    type pydantic understands) to get typed values back from ``get``.
    """

    backend_id: str = "redis"

    def __init__(
        self,
        redis_client,
        *,
        prefix: str = "requestmap",
        ttl_s: float = 300.0,
        value_type: Any = Any,
    ) -> None:
        self._redis = redis_client
        self._prefix = prefix.rstrip(":")
        self._ttl_s = ttl_s
        self._adapter: TypeAdapter[Any] = TypeAdapter(value_type)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}" if self._prefix else key

    async def get(self, key: str) -> Any | None:
        blob = await self._redis.get(self._key(key))
        if blob is None:
            return None
        try:
            return self._adapter.validate_json(blob)
        except ValidationError:
            logger.warning("Discarding undecodable cache row for key %s", key)
            return None

    async def set(self, key: str, value: Any) -> None:
        await self._redis.setex(
            self._key(key),
            int(max(1, self._ttl_s)),
            self._adapter.dump_json(value),
        )

    async def delete(self, key: str) -> None:
        await self._redis.delete(self._key(key))

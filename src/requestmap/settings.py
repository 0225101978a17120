"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Coordinator settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def env_first(*names: str, default: str | None = None) -> str | None:
    """
    Return the first non-empty environment variable in `names`.

    Args:
        *names: Environment variable names to check in order.
        default: Value returned if no non-empty variable is found.
    """
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if value:
            return value
    return default


@dataclass(frozen=True, slots=True)
class CoordinatorSettings:
    """Explicit settings used to build a coordinator and its cache backend."""

    ttl_s: float = 1.0
    cache_backend: str = "none"
    cache_ttl_s: float = 300.0
    redis_url: str | None = None
    redis_prefix: str = "requestmap"

    def __post_init__(self) -> None:
        if self.ttl_s < 0:
            raise ValueError("ttl_s must be >= 0")
        if self.cache_ttl_s <= 0:
            raise ValueError("cache_ttl_s must be > 0")

    @staticmethod
    def from_env() -> "CoordinatorSettings":
        """Load settings from `REQUESTMAP_*` environment variables."""
        return CoordinatorSettings(
            ttl_s=float(env_first("REQUESTMAP_TTL_S", default="1.0") or "1.0"),
            cache_backend=(
                env_first("REQUESTMAP_CACHE_BACKEND", default="none") or "none"
            ).lower(),
            cache_ttl_s=float(
                env_first("REQUESTMAP_CACHE_TTL_S", default="300") or "300"
            ),
            redis_url=env_first("REQUESTMAP_REDIS_URL", "REDIS_URL"),
            redis_prefix=(
                env_first("REQUESTMAP_REDIS_PREFIX", default="requestmap")
                or "requestmap"
            ),
        )

    def resolve_redis_url(self) -> str:
        """Return the configured Redis URL or build one from host/port variables."""
        if self.redis_url:
            return self.redis_url
        host = env_first("REQUESTMAP_REDIS_HOST", default="localhost") or "localhost"
        port = env_first("REQUESTMAP_REDIS_PORT", default="6379") or "6379"
        db = env_first("REQUESTMAP_REDIS_DB", default="0") or "0"
        password = env_first("REQUESTMAP_REDIS_PASSWORD", default="") or ""
        if password:
            return f"redis://:{password}@{host}:{port}/{db}"
        return f"redis://{host}:{port}/{db}"

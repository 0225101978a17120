"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers for building coordinators from settings or environment variables.
"""

from __future__ import annotations

from typing import Any

from .cache.base import RequestCache
from .cache.inmemory import InMemoryRequestCache
from .cache.registry import create_request_cache
from .coordinator import RequestCoordinator
from .errors import RequestCacheError
from .metrics import CoordinatorMetrics
from .settings import CoordinatorSettings


def create_request_cache_from_settings(
    settings: CoordinatorSettings,
    *,
    redis_client: Any | None = None,
) -> RequestCache | None:
    """
    Build the cache backend named by `settings.cache_backend`.

    Backends:
    - `none` (default): no cache
    - `inmemory`
    - `redis`: uses `redis_client` when supplied, otherwise a client built
      from `REQUESTMAP_REDIS_URL` or the host/port/db/password variables
    - any other id is resolved through the cache registry
    """
    backend = settings.cache_backend.strip().lower()

    if backend in ("", "none", "off", "disabled"):
        return None

    if backend in ("mem", "memory", "inmemory", "in_memory"):
        return InMemoryRequestCache(ttl_s=settings.cache_ttl_s)

    if backend in ("redis",):
        from .cache.redis import RedisRequestCache

        client = redis_client
        if client is None:
            try:
                import redis.asyncio as redis
            except ModuleNotFoundError as exc:  # pragma: no cover
                raise RuntimeError(
                    "Redis cache backend requires `redis` to be installed."
                ) from exc
            client = redis.Redis.from_url(settings.resolve_redis_url())

        return RedisRequestCache(
            client,
            prefix=settings.redis_prefix,
            ttl_s=settings.cache_ttl_s,
        )

    try:
        return create_request_cache(backend)
    except RequestCacheError as exc:
        raise ValueError(f"Unknown REQUESTMAP_CACHE_BACKEND: {backend}") from exc


def create_coordinator(
    settings: CoordinatorSettings | None = None,
    *,
    redis_client: Any | None = None,
    metrics: CoordinatorMetrics | None = None,
) -> RequestCoordinator[Any]:
    """Build a coordinator (and its cache backend) from explicit settings."""
    settings = settings or CoordinatorSettings()
    return RequestCoordinator(
        ttl_s=settings.ttl_s,
        cache=create_request_cache_from_settings(settings, redis_client=redis_client),
        metrics=metrics,
    )


def create_coordinator_from_env(
    *,
    redis_client: Any | None = None,
    metrics: CoordinatorMetrics | None = None,
) -> RequestCoordinator[Any]:
    """Build a coordinator from `REQUESTMAP_*` environment variables."""
    return create_coordinator(
        CoordinatorSettings.from_env(),
        redis_client=redis_client,
        metrics=metrics,
    )

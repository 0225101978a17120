"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Keyed request deduplication with stale-while-revalidate fan-out.

Quick start::

    from requestmap import RequestCoordinator

    coordinator = RequestCoordinator(ttl_s=5.0)

    def on_user(error, value=None, stale=None):
        ...

    unsubscribe = coordinator.register("user:1", on_user, load_user)
    await coordinator.revalidate("user:1")
    unsubscribe()
"""

from .cache import (
    InMemoryRequestCache,
    RedisRequestCache,
    RequestCache,
    create_request_cache,
    list_request_caches,
    register_request_cache,
)
from .coordinator import DEFAULT_TTL_S, RequestCoordinator
from .errors import RequestCacheError, RequestMapError
from .factory import (
    create_coordinator,
    create_coordinator_from_env,
    create_request_cache_from_settings,
)
from .metrics import (
    CoordinatorMetrics,
    NoOpCoordinatorMetrics,
    PrometheusCoordinatorMetrics,
)
from .settings import CoordinatorSettings
from .subscription import RequestSubscription
from .types import MISSING, Entry, Observer, Producer, Unsubscribe

__all__ = [
    "RequestCoordinator",
    "DEFAULT_TTL_S",
    "RequestSubscription",
    "Entry",
    "MISSING",
    "Observer",
    "Producer",
    "Unsubscribe",
    "RequestCache",
    "InMemoryRequestCache",
    "RedisRequestCache",
    "register_request_cache",
    "create_request_cache",
    "list_request_caches",
    "CoordinatorSettings",
    "create_coordinator",
    "create_coordinator_from_env",
    "create_request_cache_from_settings",
    "CoordinatorMetrics",
    "NoOpCoordinatorMetrics",
    "PrometheusCoordinatorMetrics",
    "RequestMapError",
    "RequestCacheError",
]

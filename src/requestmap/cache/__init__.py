"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import CacheRow, RequestCache
from .inmemory import InMemoryRequestCache
from .redis import RedisRequestCache
from .registry import (
    create_request_cache,
    list_request_caches,
    register_request_cache,
)

__all__ = [
    "CacheRow",
    "RequestCache",
    "InMemoryRequestCache",
    "RedisRequestCache",
    "register_request_cache",
    "create_request_cache",
    "list_request_caches",
]

"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/registry.py.
"""

from __future__ import annotations

from threading import Lock

from ..errors import RequestCacheError
from .base import RequestCache

_REGISTRY: dict[str, RequestCache] = {}
_LOCK = Lock()


def register_request_cache(
    backend: RequestCache,
    *,
    overwrite: bool = False,
) -> None:
    """Register one cache backend by `backend_id`."""
    key = str(backend.backend_id).strip().lower()
    if not key:
        raise RequestCacheError("Cache backend id must be non-empty")

    with _LOCK:
        if key in _REGISTRY and not overwrite:
            raise RequestCacheError(f"Cache backend already registered: {key}")
        _REGISTRY[key] = backend


def create_request_cache(backend: str | RequestCache) -> RequestCache:
    """Resolve cache backend instance from a registered id or pass an instance through."""
    if not isinstance(backend, str):
        return backend

    key = backend.strip().lower()
    with _LOCK:
        resolved = _REGISTRY.get(key)
    if resolved is None:
        raise RequestCacheError(f"Unknown request cache backend '{backend}'")
    return resolved


def list_request_caches() -> list[str]:
    """List registered cache backend ids."""
    with _LOCK:
        return sorted(_REGISTRY.keys())

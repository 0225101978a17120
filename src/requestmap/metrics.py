"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics adapters for coordinator observability.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

FETCH_STARTED = "requestmap_fetch_started_total"
FETCH_SUCCEEDED = "requestmap_fetch_succeeded_total"
FETCH_FAILED = "requestmap_fetch_failed_total"
FETCH_SUPPRESSED = "requestmap_fetch_suppressed_total"
FETCH_SUPERSEDED = "requestmap_fetch_superseded_total"
CACHE_HIT = "requestmap_cache_hit_total"
CACHE_DISCARDED = "requestmap_cache_discarded_total"

# Fetch cycles carry a `trigger` label: stale, revalidate or invalidate.
_DESCRIPTIONS = {
    FETCH_STARTED: "Fetch cycles started, by trigger",
    FETCH_SUCCEEDED: "Fetch cycles whose producer resolved",
    FETCH_FAILED: "Fetch cycles whose producer raised",
    FETCH_SUPPRESSED: "Staleness fetches skipped because one was already in flight",
    FETCH_SUPERSEDED: "Fetch results dropped because a newer cycle settled first",
    CACHE_HIT: "Cached values delivered to observers without a stored value",
    CACHE_DISCARDED: "Cached values dropped because live data or unsubscribe won the race",
}


class CoordinatorMetrics(Protocol):
    """Minimal metrics interface for coordinator instrumentation."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpCoordinatorMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags


class PrometheusCoordinatorMetrics:
    """
    Prometheus-backed coordinator metrics adapter.

    Requires `prometheus_client` package.
    """

    def __init__(self, *, namespace: str = "", registry=None) -> None:
        try:
            from prometheus_client import REGISTRY, Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusCoordinatorMetrics requires `prometheus_client` to be installed."
            ) from exc

        self._Counter = Counter
        self._namespace = namespace
        self._registry = registry if registry is not None else REGISTRY
        self._counters: dict[str, object] = {}

    def incr(self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None) -> None:
        label_names = tuple(sorted((tags or {}).keys()))
        key = f"{name}|{','.join(label_names)}"
        counter = self._counters.get(key)
        if counter is None:
            counter = self._Counter(
                name=name,
                documentation=_DESCRIPTIONS.get(name, f"requestmap metric {name}"),
                namespace=self._namespace,
                labelnames=label_names,
                registry=self._registry,
            )
            self._counters[key] = counter

        if label_names:
            label_values = [str((tags or {})[label]) for label in label_names]
            counter.labels(*label_values).inc(value)
        else:
            counter.inc(value)

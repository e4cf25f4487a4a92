# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Prometheus metrics for the hook dispatcher.

All metrics use the ``mth_`` prefix and are labeled by hook name.

Metrics exposed:
    - ``mth_hook_calls_total``: Synchronous endpoint calls.
    - ``mth_hook_failures_total``: Transport or decode failures.
    - ``mth_hook_halts_total``: Runs stopped by a failure policy or a response.
    - ``mth_hook_skipped_total``: Endpoints skipped for authenticated sessions.
    - ``mth_hook_detached_total``: Fire-and-forget dispatches.

Example:
    Accessing metrics via the REST API::

        GET /metrics
"""

from prometheus_client import CollectorRegistry, Counter, generate_latest


class HookMetrics:
    """Prometheus metrics collector for hook runs.

    Attributes:
        registry: The Prometheus CollectorRegistry holding all metrics.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()
        self.calls = Counter(
            "mth_hook_calls_total",
            "Total hook endpoint calls",
            ["hook"],
            registry=self.registry,
        )
        self.failures = Counter(
            "mth_hook_failures_total",
            "Total failed hook endpoint calls",
            ["hook"],
            registry=self.registry,
        )
        self.halts = Counter(
            "mth_hook_halts_total",
            "Total hook runs that stopped the current command",
            ["hook"],
            registry=self.registry,
        )
        self.skipped = Counter(
            "mth_hook_skipped_total",
            "Total endpoints skipped for authenticated sessions",
            ["hook"],
            registry=self.registry,
        )
        self.detached = Counter(
            "mth_hook_detached_total",
            "Total fire-and-forget dispatches",
            ["hook"],
            registry=self.registry,
        )

    def inc_call(self, hook: str) -> None:
        self.calls.labels(hook=hook).inc()

    def inc_failure(self, hook: str) -> None:
        self.failures.labels(hook=hook).inc()

    def inc_halt(self, hook: str) -> None:
        self.halts.labels(hook=hook).inc()

    def inc_skipped(self, hook: str) -> None:
        self.skipped.labels(hook=hook).inc()

    def inc_detached(self, hook: str) -> None:
        self.detached.labels(hook=hook).inc()

    def generate_latest(self) -> bytes:
        """Return the metrics in Prometheus text exposition format."""
        return generate_latest(self.registry)

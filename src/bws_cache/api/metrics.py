"""Prometheus metrics exposed by the HTTP service."""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest


class ServiceMetrics:
    """Request counters and latency histograms held in a private registry."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.requests = Counter(
            "bws_cache_requests_total",
            "Requests received per endpoint",
            ["endpoint"],
            registry=self.registry,
        )
        self.errors = Counter(
            "bws_cache_request_errors_total",
            "Failed requests per endpoint and error type",
            ["endpoint", "error"],
            registry=self.registry,
        )
        self.latency = Histogram(
            "bws_cache_request_duration_seconds",
            "Time spent resolving a secret",
            ["endpoint"],
            registry=self.registry,
        )

    def record_request(self, endpoint: str) -> None:
        self.requests.labels(endpoint=endpoint).inc()

    @contextmanager
    def track(self, endpoint: str) -> Iterator[None]:
        """Count a request and time it, recording the error type on failure."""

        self.record_request(endpoint)
        started = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self.errors.labels(endpoint=endpoint, error=type(exc).__name__).inc()
            raise
        finally:
            self.latency.labels(endpoint=endpoint).observe(time.perf_counter() - started)

    def render(self) -> tuple[bytes, str]:
        """Return the exposition payload and its content type."""

        return generate_latest(self.registry), CONTENT_TYPE_LATEST


__all__ = ["ServiceMetrics"]

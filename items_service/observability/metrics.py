from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)


# Request duration buckets, in seconds.
REQUEST_DURATION_BUCKETS = (0.1, 0.3, 0.5, 0.7, 1.0, 3.0, 5.0, 7.0, 10.0)


class AppMetrics:
    """Prometheus metrics for one application instance.

    Everything lives in a private registry so that several apps (or tests) in
    the same process never collide on metric names.
    """

    def __init__(self, registry: CollectorRegistry | None = None, *, process_metrics: bool = True) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()

        if process_metrics:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)
            GCCollector(registry=self.registry)

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            ["method", "route", "status_code"],
            buckets=REQUEST_DURATION_BUCKETS,
            registry=self.registry,
        )
        self.items_created = Counter(
            "items_created_total",
            "Total number of items created",
            registry=self.registry,
        )

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def observe_request(self, method: str, route: str, status_code: int, duration_seconds: float) -> None:
        self.http_request_duration.labels(
            method=method,
            route=route,
            status_code=str(status_code),
        ).observe(max(duration_seconds, 0.0))

    def item_created(self) -> None:
        self.items_created.inc()

    def render(self) -> bytes:
        """Text exposition of every collector in the registry."""

        return generate_latest(self.registry)

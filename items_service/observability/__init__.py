"""Observability helpers for the items service.

Structured logging via structlog (JSON in production, console otherwise),
Prometheus request metrics, and the ASGI middleware tying both to every request.
"""

from items_service.observability.logging import build_logger, configure_from_settings, configure_logging
from items_service.observability.metrics import AppMetrics
from items_service.observability.middleware import RequestMetricsMiddleware

__all__ = [
    "AppMetrics",
    "RequestMetricsMiddleware",
    "build_logger",
    "configure_from_settings",
    "configure_logging",
]

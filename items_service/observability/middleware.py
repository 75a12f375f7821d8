from __future__ import annotations

import logging
import uuid
from time import perf_counter
from typing import Any, Callable

import structlog

from items_service.observability.metrics import AppMetrics


_fallback_logger = logging.getLogger(__name__)


class RequestMetricsMiddleware:
    """Times every HTTP request and, once the response is complete, records one
    histogram observation and one access log entry.

    The middleware only observes: messages are forwarded to ``send`` untouched.
    Completion of the response is the only trigger, so a response that is never
    started or never finished produces no emission. It must wrap the error
    middleware so that the 500 answering a handler error passes through here.
    """

    def __init__(self, app: Callable[..., Any], *, metrics: AppMetrics, logger: Any | None = None) -> None:
        self.app = app
        self.metrics = metrics
        self.logger = logger if logger is not None else structlog.get_logger("access")

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "")
        path = scope.get("path", "")

        start = perf_counter()
        status_code: int = 500
        response_complete = False

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code, response_complete

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))

            await send(message)

            if message.get("type") == "http.response.body" and not message.get("more_body", False):
                response_complete = True

        with structlog.contextvars.bound_contextvars(request_id=str(uuid.uuid4())):
            try:
                await self.app(scope, receive, send_wrapper)
            finally:
                if response_complete:
                    elapsed_ms = (perf_counter() - start) * 1000.0
                    self._emit(method, path, status_code, elapsed_ms)

    def _emit(self, method: str, path: str, status_code: int, elapsed_ms: float) -> None:
        # Metrics first so they update even if logging misbehaves.
        try:
            self.metrics.observe_request(method, path, status_code, elapsed_ms / 1000.0)
        except Exception:
            _fallback_logger.exception("failed to record request metrics")

        try:
            self.logger.info(
                f"HTTP {method} {path}",
                method=method,
                path=path,
                statusCode=status_code,
                duration=round(elapsed_ms, 2),
            )
        except Exception:
            _fallback_logger.exception("failed to write access log")

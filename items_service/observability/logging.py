from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

from items_service.config import Settings


_CONFIGURED = False


def configure_logging(
    level: int | str = logging.INFO,
    *,
    json_logs: bool = True,
    log_dir: Path | None = None,
) -> None:
    """Configure structlog + stdlib logging.

    Console output is JSON when ``json_logs`` is set and colorized key/value
    lines otherwise. With ``log_dir`` set, ``combined.log`` receives every record
    and ``error.log`` only ERROR and above; both files are always JSON.

    Safe to call multiple times (no-op after first call).
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            # Let ProcessorFormatter render stdlib log records too.
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=pre_chain,
    )
    if json_logs:
        console_formatter = json_formatter
    else:
        console_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=pre_chain,
        )

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(console_formatter)
    handlers: list[logging.Handler] = [console]

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

        combined = logging.FileHandler(log_dir / "combined.log", encoding="utf-8")
        combined.setFormatter(json_formatter)

        errors = logging.FileHandler(log_dir / "error.log", encoding="utf-8")
        errors.setFormatter(json_formatter)
        errors.setLevel(logging.ERROR)

        handlers.extend([combined, errors])

    root = logging.getLogger()
    root.handlers = list(handlers)
    root.setLevel(level)

    # Keep uvicorn's own loggers consistent with our handlers.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = list(handlers)
        logger.propagate = False
        logger.setLevel(level)

    _CONFIGURED = True


def configure_from_settings(settings: Settings) -> None:
    configure_logging(
        settings.log_level.upper(),
        json_logs=settings.is_production,
        log_dir=settings.log_path,
    )


def build_logger(settings: Settings) -> Any:
    """Return the service logger, bound with the service name on every entry."""

    # Lazy proxy: resolves against whatever configure_logging() installed at first use.
    return structlog.get_logger("items_service", service=settings.service_name)

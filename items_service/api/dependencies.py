from __future__ import annotations

from typing import Any

from fastapi import Request

from items_service.observability.metrics import AppMetrics
from items_service.services.item_service import ItemStore


def get_store(request: Request) -> ItemStore:
    return request.app.state.store


def get_app_metrics(request: Request) -> AppMetrics:
    return request.app.state.metrics


def get_logger(request: Request) -> Any:
    return request.app.state.logger

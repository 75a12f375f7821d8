from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import structlog
from httpx import ASGITransport, AsyncClient
from structlog.testing import CapturingLogger

from items_service.config import Settings, get_settings
from items_service.main import create_app
from items_service.observability.metrics import AppMetrics
from items_service.services.item_service import ItemStore


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{tmp_path / 'items.db'}")
    monkeypatch.delenv("PORT", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def store(settings: Settings) -> ItemStore:
    item_store = ItemStore(settings.database_url)
    assert item_store.connect()
    yield item_store
    item_store.close()


@pytest.fixture
def metrics() -> AppMetrics:
    return AppMetrics()


@pytest.fixture
def capturing_logger() -> CapturingLogger:
    return CapturingLogger()


@pytest.fixture
def logger(capturing_logger: CapturingLogger):
    # The capturing logger receives the final event dict as kwargs.
    return structlog.wrap_logger(capturing_logger, processors=[structlog.contextvars.merge_contextvars])


@pytest.fixture
def app(settings: Settings, store: ItemStore, metrics: AppMetrics, logger):
    return create_app(settings, store=store, metrics=metrics, logger=logger)


@pytest.fixture
async def api_client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def access_log(capturing_logger: CapturingLogger):
    """Returns a callable listing the access log entries (``HTTP <method> <path>``) captured so far."""

    def _entries() -> list[dict]:
        return [
            call.kwargs
            for call in capturing_logger.calls
            if call.method_name == "info" and str(call.kwargs.get("event", "")).startswith("HTTP ")
        ]

    return _entries

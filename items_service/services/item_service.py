from __future__ import annotations

import logging
from datetime import timezone
from typing import Any

from pydantic import ValidationError
from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError

from items_service.db.models import Base, Item
from items_service.db.session import get_engine, get_session_factory
from items_service.models.schemas import ItemCreate, ItemRecord

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """The item store could not complete an operation."""


class ItemValidationError(ValueError):
    """The create payload does not describe a valid item."""


def _to_record(item: Item) -> ItemRecord:
    created_at = item.created_at
    # SQLite drops the offset; timestamps are always written in UTC.
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return ItemRecord(id=str(item.id), name=item.name, created_at=created_at)


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", ())) or "body"
        parts.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "Item validation failed: " + "; ".join(parts)


def parse_item_payload(payload: Any) -> ItemCreate:
    if not isinstance(payload, dict):
        raise ItemValidationError("Item validation failed: body must be a JSON object")
    try:
        return ItemCreate.model_validate(payload)
    except ValidationError as exc:
        raise ItemValidationError(_describe_validation_error(exc)) from exc


class ItemStore:
    """Items persisted through SQLAlchemy, addressed by a connection URL."""

    def __init__(self, database_url: str, *, engine: Engine | None = None) -> None:
        self.database_url = database_url
        self._engine = engine
        self._session_factory = None
        self.connected = False

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = get_engine(self.database_url)
        return self._engine

    def _session(self):
        if self._session_factory is None:
            self._session_factory = get_session_factory(self.engine)
        return self._session_factory()

    def connect(self) -> bool:
        """Create the schema if needed. Failures are logged, never raised."""

        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            self.connected = False
            logger.error("Database connection error: %s", exc)
            return False

        self.connected = True
        logger.info("Connected to database")
        return True

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self.connected = False

    def find(self, newest_first: bool = True) -> list[ItemRecord]:
        order = (Item.created_at.desc(), Item.id.desc()) if newest_first else (Item.created_at.asc(), Item.id.asc())
        try:
            with self._session() as db:
                items = db.execute(select(Item).order_by(*order)).scalars().all()
                return [_to_record(item) for item in items]
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def create(self, name: str) -> ItemRecord:
        if not name or not name.strip():
            raise ItemValidationError("Item validation failed: name: must not be blank")

        item = Item(name=name)
        try:
            with self._session() as db:
                db.add(item)
                db.commit()
                db.refresh(item)
                return _to_record(item)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from items_service.api.dependencies import get_app_metrics, get_logger, get_store
from items_service.models.schemas import ItemRecord
from items_service.observability.metrics import AppMetrics
from items_service.services.item_service import ItemStore, ItemValidationError, StoreError, parse_item_payload

router = APIRouter(tags=["items"])


@router.get("/items", response_model=list[ItemRecord])
async def list_items(
    store: ItemStore = Depends(get_store),
    logger: Any = Depends(get_logger),
) -> list[ItemRecord] | JSONResponse:
    try:
        return store.find(newest_first=True)
    except StoreError as exc:
        logger.error("Error fetching items", error=str(exc))
        return JSONResponse(status_code=500, content={"message": "Server error"})


@router.post("/items", status_code=201, response_model=ItemRecord)
async def create_item(
    request: Request,
    store: ItemStore = Depends(get_store),
    metrics: AppMetrics = Depends(get_app_metrics),
    logger: Any = Depends(get_logger),
) -> ItemRecord | JSONResponse:
    try:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ItemValidationError(f"Item validation failed: invalid JSON body ({exc})") from exc

        item = store.create(parse_item_payload(payload).name)
    except (ItemValidationError, StoreError) as exc:
        logger.error("Error creating item", error=str(exc))
        return JSONResponse(status_code=400, content={"message": str(exc)})

    # Counter and log are independent, best-effort emissions.
    metrics.item_created()
    logger.info(f"New item created: {item.name}", item_id=item.id)
    return item

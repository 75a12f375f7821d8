from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from items_service.api.dependencies import get_app_metrics, get_logger
from items_service.observability.metrics import AppMetrics


router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def metrics(
    app_metrics: AppMetrics = Depends(get_app_metrics),
    logger: Any = Depends(get_logger),
) -> Response:
    try:
        body = app_metrics.render()
    except Exception as exc:  # noqa: BLE001
        logger.error("Error generating metrics", error=str(exc))
        return JSONResponse(status_code=500, content={"message": "Error generating metrics"})
    return Response(content=body, media_type=app_metrics.content_type)

from __future__ import annotations

from fastapi import APIRouter

from items_service.models.schemas import HealthResponse, MessageResponse


router = APIRouter(tags=["health"])


@router.get("/", response_model=MessageResponse)
async def index() -> MessageResponse:
    return MessageResponse(message="Backend API is running")


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok")

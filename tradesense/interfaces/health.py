"""
Liveness check.

Answers without touching the store, the inference provider or any chain
node, so a degraded dependency never takes the process out of rotation.
"""

from fastapi import APIRouter

from tradesense.core.config import settings
from tradesense.interfaces.trading.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=settings.version)

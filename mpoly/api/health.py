"""Liveness endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from mpoly.models.response import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health() -> HealthResponse:
    return HealthResponse(timestamp=datetime.now(timezone.utc))

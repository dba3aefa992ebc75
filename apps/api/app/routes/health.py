"""Liveness route."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    uptime: float


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(UTC),
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
    )


@router.get("/api")
async def api_status() -> dict[str, str]:
    return {"message": "Acquisitions API is running!"}

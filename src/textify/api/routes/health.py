"""
Health check endpoint.

The cleaning collaborator is reported from settings and never contacted here.
"""

import time
from fastapi import APIRouter

from ...config import settings
from ...models.api_models import HealthResponse
from ...version import API_VERSION

router = APIRouter()

_started_at = time.monotonic()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        uptime_seconds=round(time.monotonic() - _started_at, 3),
        llm_provider=settings.llm_provider,
        llm_model=settings.llm_model,
        auto_clean_enabled=settings.auto_clean_enabled,
    )

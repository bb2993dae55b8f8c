# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: health.py
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_health_service
from api.schemas.health import DeepHealthResponse, HealthResponse
from services.AdvisorHealthService import AdvisorHealthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok", message="Advisor RAG API running")


@router.get("/deep", response_model=DeepHealthResponse)
def deep_health_check(
        svc: AdvisorHealthService = Depends(get_health_service),
        run_chat: bool = Query(True, description="Ping the chat endpoint as well"),
) -> DeepHealthResponse:
    logger.info("GET /health/deep called (run_chat=%s)", run_chat)
    try:
        result = svc.deep_health(run_chat=run_chat)
    except Exception as e:
        logger.exception("GET /health/deep failed: %s", e)
        raise HTTPException(status_code=500, detail=f"deep health failed: {e}")

    logger.info("GET /health/deep completed (status=%s)", result.status)
    return result

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: skills.py
# -----------------------------------------------------------------------------
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_skill_service
from api.schemas.skills import SimilarSkill, SimilarSkillsResponse, SkillEmbeddingResponse
from services.SkillEmbeddingService import SkillEmbeddingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("/similar", response_model=SimilarSkillsResponse)
def similar_skills(
        skill: str = Query(..., min_length=1),
        top_n: int = Query(5, ge=1, le=50),
        svc: SkillEmbeddingService = Depends(get_skill_service),
) -> SimilarSkillsResponse:
    logger.info("GET /skills/similar skill='%s' top_n=%d", skill, top_n)
    results = svc.similar_to_skill(skill, top_n=top_n)
    return SimilarSkillsResponse(
        skill=skill.strip(),
        top_n=top_n,
        results=[SimilarSkill(**r) for r in results],
    )


@router.get("/{name}/embedding", response_model=SkillEmbeddingResponse)
def skill_embedding(
        name: str,
        category: Optional[str] = Query(None),
        level: Optional[str] = Query(None),
        svc: SkillEmbeddingService = Depends(get_skill_service),
) -> SkillEmbeddingResponse:
    try:
        vector = svc.get_skill_embedding(name, category=category, level=level)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SkillEmbeddingResponse(skill=name.strip(), vector=list(vector))

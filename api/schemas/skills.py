# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: api/schemas/skills.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class SkillEmbeddingResponse(BaseModel):
    skill: str
    vector: List[float]


class SimilarSkill(BaseModel):
    skill: str
    similarity: float


class SimilarSkillsResponse(BaseModel):
    skill: str
    top_n: int
    results: List[SimilarSkill] = Field(default_factory=list)

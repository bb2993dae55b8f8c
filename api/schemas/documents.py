# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: api/schemas/documents.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class DocumentCreateRequest(BaseModel):
    document_id: Optional[str] = None
    topic: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    relevance_score: Optional[float] = None

    # Omit to have the text encoder generate one
    vector: Optional[List[float]] = None


class DocumentResponse(BaseModel):
    document_id: str
    topic: str
    content: str
    vector: List[float]
    relevance_score: Optional[float] = None


class DocumentStatsResponse(BaseModel):
    collection: str
    count: int

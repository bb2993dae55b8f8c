# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: api/schemas/chat.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    user_id: int
    query: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    user_id: int
    query: str
    answer: str


class HistoryTurn(BaseModel):
    role: str
    text: str
    created_at: datetime


class HistoryResponse(BaseModel):
    user_id: int
    turns: List[HistoryTurn] = Field(default_factory=list)


class HistoryResetResponse(BaseModel):
    user_id: int
    cleared: bool

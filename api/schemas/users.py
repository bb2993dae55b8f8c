# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: api/schemas/users.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class SkillIn(BaseModel):
    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    level: Optional[str] = None


class ExperienceIn(BaseModel):
    company_name: str
    job_title: str
    job_description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class UserCreateRequest(BaseModel):
    user_id: Optional[int] = Field(None, ge=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = ""
    role: Optional[str] = None
    email: Optional[str] = None
    skills: List[Union[str, SkillIn]] = Field(default_factory=list)
    experiences: List[ExperienceIn] = Field(default_factory=list)


class ExperienceOut(BaseModel):
    company_name: str
    job_title: str


class UserResponse(BaseModel):
    user_id: int
    first_name: str
    last_name: str
    role: Optional[str] = None
    email: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    experiences: List[ExperienceOut] = Field(default_factory=list)
    vector: Optional[List[float]] = None
    indexed: Optional[bool] = None

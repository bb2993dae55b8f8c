# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: AdvisorUser
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Skill:
    name: str
    category: Optional[str] = None
    level: Optional[str] = None


@dataclass(frozen=True)
class Experience:
    company_name: str
    job_title: str
    job_description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclass
class AdvisorUser:
    """
    A founder/user as seen by the chat pipeline.
    Only the attributes needed for embedding and prompt context are held here;
    credentials and profile data stay with the persistence layer.
    """

    user_id: int
    first_name: str
    last_name: str
    role: Optional[str] = None
    email: Optional[str] = None
    skills: List[Skill] = field(default_factory=list)
    experiences: List[Experience] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdvisorUser":
        skills = []
        for s in data.get("skills") or []:
            # accept ["java", ...] as well as [{"name": "java"}, ...]
            if isinstance(s, str):
                skills.append(Skill(name=s))
            else:
                skills.append(Skill(name=s["name"], category=s.get("category"), level=s.get("level")))

        experiences = [
            Experience(
                company_name=e.get("company_name", ""),
                job_title=e.get("job_title", ""),
                job_description=e.get("job_description"),
                start_date=e.get("start_date"),
                end_date=e.get("end_date"),
            )
            for e in data.get("experiences") or []
        ]

        return cls(
            user_id=int(data["user_id"]),
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            role=data.get("role"),
            email=data.get("email"),
            skills=skills,
            experiences=experiences,
        )

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: AdvisorDocument
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class AdvisorDocument:
    document_id: str
    topic: str
    content: str
    vector: Tuple[float, ...]
    relevance_score: Optional[float] = None

    def to_payload(self) -> dict:
        """Display attributes carried alongside the vector in the candidate store."""
        payload = {
            "topic": self.topic,
            "content": self.content,
        }
        if self.relevance_score is not None:
            payload["relevance_score"] = self.relevance_score
        return payload

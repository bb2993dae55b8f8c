# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: SkillEmbeddingService.py
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from embedding.FeatureEncoder import LLMFeatureEncoder
from embedding.FeatureVector import FeatureVector
from embedding.SkillTaxonomy import load_skill_entries
from embedding.UserEmbeddingBuilder import UserEmbeddingBuilder
from embedding.VectorNormalizer import is_zero_vector
from entities.EntityRepository import EntityRepository
from exceptions.AdvisorErrors import EntityNotFound
from ranking import SimilarityRanker
from ranking.types import CandidateRecord
from utility.logging_utils import get_class_logger


@dataclass
class SkillEmbeddingService:
    """
    Open-vocabulary skill embeddings backed by the LLM encoder:
        - warm_up(): resolve every skill listed in the skills file at startup
        - get_skill_embedding(): read-through lookup for one skill
        - find_similar_skills() / similar_to_skill(): cosine over the cached skills
        - user_embedding(): L2-normalised concatenation of a user's skill vectors
    """

    encoder: LLMFeatureEncoder
    entities: Optional[EntityRepository] = None
    logger: Optional[logging.Logger] = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self._user_builder = UserEmbeddingBuilder(
            self.encoder,
            experience_encoder=None,
            normalize_mode="l2",
            dim=None,
            logger=self.logger.getChild("user"),
        )

    def warm_up(self, skills_path: str | Path) -> int:
        """
        Resolve each skill from the skills file through the encoder.
        A missing or malformed file is logged and skipped. Returns the number
        of skills resolved.
        """
        path = Path(skills_path)
        if not path.is_file():
            self.logger.warning("Skills file not found, skipping warm-up: %s", path)
            return 0

        try:
            entries = load_skill_entries(path)
        except ValueError as e:
            self.logger.error("Skills file could not be read, skipping warm-up: %s", e)
            return 0

        self.logger.info("Warming skill cache from %s (%d skills)", path, len(entries))
        for entry in entries:
            self.get_skill_embedding(entry["name"], entry.get("category"), entry.get("level"))

        self.logger.info("Skill cache warm-up complete (%d cached)", len(self.encoder.cached_items()))
        return len(entries)

    def get_skill_embedding(
            self,
            name: str,
            category: Optional[str] = None,
            level: Optional[str] = None,
    ) -> FeatureVector:
        name = (name or "").strip()
        if not name:
            raise ValueError("skill name must not be empty")
        return self.encoder.encode(name, category=category, level=level)

    def find_similar_skills(self, vector: FeatureVector, top_n: int = 5) -> List[Dict[str, Any]]:
        """Most similar cached skills by cosine similarity, best first."""
        candidates = [
            CandidateRecord(entity_id=name, vector=vec)
            for name, vec in self.encoder.cached_items().items()
            if not is_zero_vector(vec)
        ]
        matches = SimilarityRanker.rank(vector, candidates, top_n, metric="cosine")
        return [{"skill": m.entity_id, "similarity": m.score} for m in matches]

    def similar_to_skill(self, name: str, top_n: int = 5) -> List[Dict[str, Any]]:
        """Skills most similar to `name`, excluding `name` itself."""
        vector = self.get_skill_embedding(name)
        results = self.find_similar_skills(vector, top_n + 1)
        return [r for r in results if r["skill"] != name.strip()][:top_n]

    def user_embedding(self, user_id: int) -> FeatureVector:
        if self.entities is None:
            raise RuntimeError("SkillEmbeddingService has no entity repository")
        user = self.entities.get_entity(user_id)
        if user is None:
            raise EntityNotFound("user", user_id)
        return self._user_builder.build(user)

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: UserEmbeddingBuilder
# -----------------------------------------------------------------------------
import logging
from typing import Any, List, Optional

from embedding.FeatureEncoder import ExperienceEncoder
from embedding.FeatureVector import USER_DIM, FeatureVector, pad_or_truncate
from embedding import VectorNormalizer
from model.AdvisorUser import AdvisorUser
from utility.logging_utils import get_class_logger


class UserEmbeddingBuilder:
    """
    Builds a user's query vector from their attributes:

      skills      -> skill encoder (3 values each)
      experiences -> ExperienceEncoder (2 values each)

    The concatenation is padded/truncated to `dim`, normalized, and forced to
    `dim` again. With dim=None the raw concatenation is normalized as-is.
    """

    def __init__(
            self,
            skill_encoder: Any,
            experience_encoder: Optional[ExperienceEncoder] = None,
            *,
            normalize_mode: str = "sum",
            dim: Optional[int] = USER_DIM,
            logger: Optional[logging.Logger] = None,
    ):
        if normalize_mode not in VectorNormalizer.NORMALIZE_MODES:
            raise ValueError(f"Unsupported normalize mode {normalize_mode!r}")
        self.skill_encoder = skill_encoder
        self.experience_encoder = experience_encoder
        self.normalize_mode = normalize_mode
        self.dim = dim
        self.logger = logger or get_class_logger(self.__class__)

    def raw_vector(self, user: AdvisorUser) -> FeatureVector:
        values: List[float] = []
        for skill in user.skills:
            values.extend(self.skill_encoder.encode(skill.name, category=skill.category, level=skill.level))
        if self.experience_encoder is not None:
            for exp in user.experiences:
                values.extend(self.experience_encoder.encode(exp))
        return tuple(values)

    def build(self, user: AdvisorUser) -> FeatureVector:
        raw = self.raw_vector(user)
        vec = pad_or_truncate(raw, self.dim) if self.dim is not None else raw

        if self.normalize_mode == "l2" and VectorNormalizer.is_zero_vector(vec):
            # l2 is undefined for the zero vector; keep it as-is
            self.logger.warning("User %s has a zero feature vector; skipping l2 normalisation", user.user_id)
        else:
            vec = VectorNormalizer.normalize(vec, mode=self.normalize_mode)

        if self.dim is not None:
            vec = pad_or_truncate(vec, self.dim)

        self.logger.debug(
            "User %s vector: raw_len=%d mode=%s -> %s",
            user.user_id, len(raw), self.normalize_mode, vec,
        )
        return vec

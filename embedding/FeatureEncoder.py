# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: FeatureEncoder
# -----------------------------------------------------------------------------
import logging
import math
from typing import Any, Dict, List, Optional

from chat.CompletionCapability import CompletionCapability
from embedding.FeatureVector import (
    EXPERIENCE_DIM,
    SKILL_DIM,
    FeatureVector,
    neutral_vector,
)
from embedding.SkillTaxonomy import SkillTaxonomy
from exceptions.AdvisorErrors import EncodingDegraded, StoreUnavailable
from model.AdvisorUser import Experience
from utility.logging_utils import get_class_logger
from vectorstore.VectorCacheStore import VectorCacheStore

SKILL_PROMPT = (
    "Generate a {dim}-dimensional embedding for the skill {name} in the category {category} "
    "at level {level}. The embedding should represent the skill's importance, complexity, "
    "and versatility on a scale of 0 to 1. "
    "Return only the {dim} float values separated by commas, without any additional text or explanation."
)

TEXT_PROMPT = (
    "Generate a {dim}-dimensional embedding for the following {kind}.\n"
    "{text}\n"
    "Each value must be a float between 0 and 1. "
    "Return only the {dim} float values separated by commas, without any additional text or explanation."
)

_STRIP_CHARS = " \t\r\n[](){}.`\"'"


def parse_vector(reply: Optional[str], dim: int, key: str = "") -> FeatureVector:
    """
    Parse exactly `dim` comma-separated floats from a model reply.
    Values are clamped into [0, 1]. Raises EncodingDegraded on wrong count or
    non-numeric / non-finite tokens.
    """
    text = (reply or "").strip().strip(_STRIP_CHARS)
    if not text:
        raise EncodingDegraded(key, reply, "empty reply")

    tokens = [t.strip().strip(_STRIP_CHARS) for t in text.split(",")]
    if len(tokens) != dim:
        raise EncodingDegraded(key, reply, f"expected {dim} values, got {len(tokens)}")

    values: List[float] = []
    for tok in tokens:
        try:
            v = float(tok)
        except ValueError:
            raise EncodingDegraded(key, reply, f"non-numeric token {tok!r}") from None
        if not math.isfinite(v):
            raise EncodingDegraded(key, reply, f"non-finite token {tok!r}")
        values.append(min(1.0, max(0.0, v)))
    return tuple(values)


class StaticSkillEncoder:
    """Closed-vocabulary skill encoder over a SkillTaxonomy table."""

    def __init__(self, taxonomy: Optional[SkillTaxonomy] = None):
        self.taxonomy = taxonomy or SkillTaxonomy()
        self.dim = self.taxonomy.dim

    def encode(self, name: str, **_: Any) -> FeatureVector:
        return self.taxonomy.lookup(name)


class ExperienceEncoder:
    """Two components: company name length and job title length, scaled by 0.01."""

    dim = EXPERIENCE_DIM
    scale = 0.01

    def encode(self, experience: Experience) -> FeatureVector:
        return (
            len(experience.company_name or "") * self.scale,
            len(experience.job_title or "") * self.scale,
        )


class LLMFeatureEncoder:
    """
    Open-vocabulary encoder that asks the completion endpoint for a vector.

    Lookup order for a key:
      1. in-process cache (shared across requests)
      2. VectorCacheStore (read-through; unavailable store is skipped)
      3. generate via the completion endpoint, then write back to store + cache

    Malformed replies and completion failures never propagate: the neutral
    vector is returned and the degradation is logged. Concurrent first access
    may generate twice; the last write wins.
    """

    def __init__(
            self,
            completion: CompletionCapability,
            *,
            dim: int = SKILL_DIM,
            cache_store: Optional[VectorCacheStore] = None,
            completion_kwargs: Optional[Dict[str, Any]] = None,
            logger: Optional[logging.Logger] = None,
    ):
        self.completion = completion
        self.dim = dim
        self.cache_store = cache_store
        self.completion_kwargs = completion_kwargs or {}
        self.logger = logger or get_class_logger(self.__class__)
        self._cache: Dict[str, FeatureVector] = {}

    # ------------------------------------------------------------------
    def encode(self, name: str, category: Optional[str] = None, level: Optional[str] = None) -> FeatureVector:
        """Encode a skill by name (the cache key)."""
        prompt = SKILL_PROMPT.format(
            dim=self.dim,
            name=name,
            category=category or "unknown",
            level=level or "unknown",
        )
        return self.get_or_generate(name, prompt)

    def encode_text(self, key: str, text: str, kind: str = "document") -> FeatureVector:
        """Encode free text under an explicit cache key."""
        prompt = TEXT_PROMPT.format(dim=self.dim, kind=kind, text=text)
        return self.get_or_generate(key, prompt)

    # ------------------------------------------------------------------
    def get_or_generate(self, key: str, prompt: str) -> FeatureVector:
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        stored = self._find_in_store(key)
        if stored is not None:
            self._cache[key] = stored
            return stored

        vec = self.generate(key, prompt)
        if vec is None:
            # degraded results stay in-process only, never persisted
            vec = neutral_vector(self.dim)
        else:
            self._save_to_store(key, vec)
        self._cache[key] = vec
        return vec

    def generate(self, key: str, prompt: str) -> Optional[FeatureVector]:
        """Ask the model for a vector; None when the reply is unusable."""
        try:
            reply = self.completion.complete(prompt, **self.completion_kwargs)
        except Exception as e:
            self.logger.warning("Encoding completion for '%s' failed, using neutral vector: %s", key, e)
            return None

        try:
            vec = parse_vector(reply, self.dim, key=key)
        except EncodingDegraded as e:
            self.logger.warning("%s; using neutral vector", e)
            return None

        self.logger.info("Generated %d-d vector for '%s': %s", self.dim, key, vec)
        return vec

    def _find_in_store(self, key: str) -> Optional[FeatureVector]:
        if self.cache_store is None:
            return None
        try:
            return self.cache_store.find_by_key(key)
        except StoreUnavailable as e:
            self.logger.warning("Vector cache lookup skipped for '%s': %s", key, e)
            return None

    def _save_to_store(self, key: str, vec: FeatureVector) -> None:
        if self.cache_store is None:
            return
        try:
            self.cache_store.save(key, vec)
        except StoreUnavailable as e:
            self.logger.warning("Vector cache write skipped for '%s': %s", key, e)

    # ------------------------------------------------------------------
    def get_cached(self, key: str) -> Optional[FeatureVector]:
        return self._cache.get(key)

    def cached_items(self) -> Dict[str, FeatureVector]:
        """Snapshot of the in-process cache."""
        return dict(self._cache)

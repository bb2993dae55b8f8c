# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: SkillTaxonomy
# -----------------------------------------------------------------------------
import json
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from embedding.FeatureVector import FeatureVector, SKILL_DIM, neutral_vector, pad_or_truncate

# Closed vocabulary: skill name -> (backend, data/analytics, leadership)
DEFAULT_SKILL_VECTORS: Dict[str, FeatureVector] = {
    "java": (1.0, 0.0, 0.0),
    "python": (0.0, 1.0, 0.0),
    "management": (0.0, 0.0, 1.0),
    "javascript": (1.0, 0.5, 0.0),
    "c++": (1.0, 0.3, 0.2),
    "html": (0.5, 1.0, 0.5),
    "data analysis": (0.2, 1.0, 0.3),
    "machine learning": (0.3, 1.0, 0.7),
    "project management": (0.4, 0.6, 1.0),
    "graphic design": (0.2, 0.8, 0.5),
    "cloud computing": (0.6, 1.0, 0.4),
    "devops": (1.0, 1.0, 0.2),
}


def _key(name: str) -> str:
    return " ".join((name or "").strip().lower().split())


class SkillTaxonomy:
    """
    Table-driven mapping from skill name to a fixed 3-d vector.
    New skills are added by data (register / from_json), not code branches.
    """

    def __init__(self, vectors: Optional[Mapping[str, Iterable[float]]] = None, dim: int = SKILL_DIM):
        self.dim = dim
        self._vectors: Dict[str, FeatureVector] = {}
        for name, vec in (DEFAULT_SKILL_VECTORS if vectors is None else vectors).items():
            self.register(name, vec)

    def register(self, name: str, vector: Iterable[float]) -> None:
        self._vectors[_key(name)] = pad_or_truncate(vector, self.dim)

    def lookup(self, name: str) -> FeatureVector:
        """Known skills return their constant vector; anything else the neutral vector."""
        return self._vectors.get(_key(name), neutral_vector(self.dim))

    def __contains__(self, name: str) -> bool:
        return _key(name) in self._vectors

    def __len__(self) -> int:
        return len(self._vectors)

    def names(self) -> List[str]:
        return sorted(self._vectors)

    @classmethod
    def from_json(cls, path: str | Path, include_defaults: bool = True) -> "SkillTaxonomy":
        """
        Load a taxonomy file of the form:

            {"skills": [{"name": "rust", "category": "...", "level": "...", "vector": [0.9, 0.2, 0.1]}, ...]}

        Entries without a "vector" are skipped (they are resolved by the LLM encoder).
        """
        taxonomy = cls() if include_defaults else cls(vectors={})
        for entry in load_skill_entries(path):
            vec = entry.get("vector")
            if vec:
                taxonomy.register(entry["name"], vec)
        return taxonomy


def load_skill_entries(path: str | Path) -> List[Dict[str, str]]:
    """Read the "skills" list from a skills JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    skills = data.get("skills") if isinstance(data, dict) else None
    if not isinstance(skills, list):
        raise ValueError(f"{path}: expected an object with a 'skills' list")

    entries: List[Dict[str, str]] = []
    for s in skills:
        if isinstance(s, dict) and s.get("name"):
            entries.append(s)
    return entries

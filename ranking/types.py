# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: types.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

from embedding.FeatureVector import FeatureVector

EntityId = Union[int, str]


def entity_sort_key(entity_id: EntityId) -> Tuple[int, Any]:
    """Ascending id order for tie-breaks; numeric ids sort numerically and before text ids."""
    if isinstance(entity_id, bool):
        return 1, str(entity_id)
    if isinstance(entity_id, int):
        return 0, entity_id
    return 1, str(entity_id)


@dataclass(frozen=True)
class CandidateRecord:
    """A stored (id, vector) pair eligible for ranking."""
    entity_id: EntityId
    vector: FeatureVector
    payload: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class RankedMatch:
    record: CandidateRecord
    score: float

    @property
    def entity_id(self) -> EntityId:
        return self.record.entity_id

    @property
    def payload(self) -> Dict[str, Any]:
        return self.record.payload

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: VectorCacheStore
# -----------------------------------------------------------------------------
from typing import Dict, Iterable, Optional, Protocol, runtime_checkable

from embedding.FeatureVector import FeatureVector, as_feature_vector


@runtime_checkable
class VectorCacheStore(Protocol):
    """Persisted name -> vector cache behind the feature encoder."""

    def find_by_key(self, name: str) -> Optional[FeatureVector]:
        ...

    def save(self, name: str, vector: Iterable[float]) -> None:
        ...


class InMemoryVectorCacheStore:
    def __init__(self) -> None:
        self._vectors: Dict[str, FeatureVector] = {}

    def find_by_key(self, name: str) -> Optional[FeatureVector]:
        return self._vectors.get(name)

    def save(self, name: str, vector: Iterable[float]) -> None:
        self._vectors[name] = as_feature_vector(vector)

    def __len__(self) -> int:
        return len(self._vectors)

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: ChromaVectorCacheStore
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from chromadb import ClientAPI
from chromadb.api.models import Collection

from embedding.FeatureVector import FeatureVector, as_feature_vector
from exceptions.AdvisorErrors import StoreUnavailable
from utility.logging_utils import get_class_logger


@dataclass
class ChromaVectorCacheStore:
    """Skill name -> vector cache persisted as a Chroma collection keyed by name."""
    client: ClientAPI
    name: str = "skill_embedding"
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        try:
            self.collection: Collection = self.client.get_or_create_collection(name=self.name)
        except Exception as e:
            self.logger.error("Failed to open Chroma collection '%s': %s", self.name, e)
            raise StoreUnavailable(self.name, e) from e

    def find_by_key(self, name: str) -> Optional[FeatureVector]:
        try:
            res = self.collection.get(ids=[name], include=["embeddings"])
        except Exception as e:
            raise StoreUnavailable(self.name, e) from e

        embeddings = res.get("embeddings")
        if embeddings is None or len(embeddings) == 0:
            return None
        return as_feature_vector(embeddings[0])

    def save(self, name: str, vector: Iterable[float]) -> None:
        try:
            self.collection.upsert(
                ids=[name],
                embeddings=[list(as_feature_vector(vector))],
                metadatas=[{"skill_name": name}],
            )
        except Exception as e:
            raise StoreUnavailable(self.name, e) from e
        self.logger.debug("Saved vector for '%s' into '%s'", name, self.name)

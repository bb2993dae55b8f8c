# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: ChromaCandidateStore
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from chromadb import ClientAPI
from chromadb.api.models import Collection

from embedding.FeatureVector import as_feature_vector, pad_or_truncate
from exceptions.AdvisorErrors import StoreUnavailable
from ranking.types import CandidateRecord, EntityId
from utility.logging_utils import get_class_logger

_ID_TYPE_KEY = "entity_id_type"


def _to_chroma_id(entity_id: EntityId) -> str:
    return str(entity_id)


def _from_chroma_id(raw_id: str, meta: Dict[str, Any] | None) -> EntityId:
    if meta and meta.get(_ID_TYPE_KEY) == "int":
        return int(raw_id)
    return raw_id


def _first(res: Dict[str, Any], key: str) -> List[Any]:
    """Chroma query results are list-of-lists (one list per query)."""
    val = res.get(key)
    if val is None or len(val) == 0:
        return []
    inner = val[0]
    return [] if inner is None else list(inner)


@dataclass
class ChromaCandidateStore:
    """
    Candidate space backed by a Chroma collection in L2 space.
    Chroma returns the nearest `limit` records; the chat service re-ranks them
    with exact Euclidean distance for a deterministic order.
    """
    client: ClientAPI
    name: str
    dim: int
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

        try:
            self.collection: Collection = self.client.get_or_create_collection(
                name=self.name,
                metadata={"hnsw:space": "l2"},
            )
        except Exception as e:
            self.logger.error("Failed to open Chroma collection '%s': %s", self.name, e)
            raise StoreUnavailable(self.name, e) from e

        self.logger.info("Chroma candidate collection ready: '%s' (dim=%d)", self.name, self.dim)

    def test_connection(self) -> bool:
        try:
            _ = self.collection.count()
            return True
        except Exception as e:
            self.logger.error("Chroma connection failed for '%s': %s", self.name, e)
            return False

    def count(self) -> int:
        try:
            return self.collection.count()
        except Exception as e:
            raise StoreUnavailable(self.name, e) from e

    def upsert(self, record: CandidateRecord) -> None:
        vec = list(pad_or_truncate(record.vector, self.dim))

        meta: Dict[str, Any] = {
            k: v for k, v in record.payload.items()
            if v is not None and isinstance(v, (str, int, float, bool))
        }
        meta[_ID_TYPE_KEY] = "int" if isinstance(record.entity_id, int) else "str"

        try:
            self.collection.upsert(
                ids=[_to_chroma_id(record.entity_id)],
                embeddings=[vec],
                metadatas=[meta],
            )
        except Exception as e:
            self.logger.error("Upsert of %s into '%s' failed: %s", record.entity_id, self.name, e)
            raise StoreUnavailable(self.name, e) from e

        self.logger.debug("Upserted %s into Chroma collection '%s'", record.entity_id, self.name)

    def query_nearest(self, vector: Sequence[float], limit: int) -> List[CandidateRecord]:
        query = list(pad_or_truncate(vector, self.dim))

        try:
            available = self.collection.count()
            n_results = min(limit, available)
            if n_results <= 0:
                self.logger.debug("Collection '%s' is empty; no candidates", self.name)
                return []

            res = self.collection.query(
                query_embeddings=[query],
                n_results=n_results,
                include=["embeddings", "metadatas"],
            )
        except Exception as e:
            self.logger.error("Chroma query on '%s' failed: %s", self.name, e, exc_info=True)
            raise StoreUnavailable(self.name, e) from e

        ids = _first(res, "ids")
        embeddings = _first(res, "embeddings")
        metas = _first(res, "metadatas")

        records: List[CandidateRecord] = []
        for i, raw_id in enumerate(ids):
            meta = metas[i] if i < len(metas) and metas[i] else {}
            emb = embeddings[i] if i < len(embeddings) else None
            if emb is None:
                continue
            payload = {k: v for k, v in meta.items() if k != _ID_TYPE_KEY}
            records.append(CandidateRecord(
                entity_id=_from_chroma_id(raw_id, meta),
                vector=as_feature_vector(emb),
                payload=payload,
            ))

        self.logger.info(
            "Chroma search on '%s' complete: returned %d results (requested %d)",
            self.name, len(records), limit,
        )
        return records

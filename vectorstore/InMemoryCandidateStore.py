# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: InMemoryCandidateStore
# -----------------------------------------------------------------------------
import logging
import threading
from typing import Dict, List, Optional, Sequence

from embedding.FeatureVector import as_feature_vector, pad_or_truncate
from ranking import SimilarityRanker
from ranking.types import CandidateRecord, EntityId
from utility.logging_utils import get_class_logger


class InMemoryCandidateStore:
    """
    Process-local candidate space with brute-force Euclidean lookup.
    Used for development and tests (ADVISOR_CHROMA_MODE=memory).
    Upserts and the query snapshot share one lock; ranking runs outside it.
    """

    def __init__(self, name: str, dim: int, logger: Optional[logging.Logger] = None):
        self.name = name
        self.dim = dim
        self.logger = logger or get_class_logger(self.__class__)
        self._records: Dict[EntityId, CandidateRecord] = {}
        self._lock = threading.Lock()

    def test_connection(self) -> bool:
        return True

    def upsert(self, record: CandidateRecord) -> None:
        stored = CandidateRecord(
            entity_id=record.entity_id,
            vector=pad_or_truncate(record.vector, self.dim),
            payload=dict(record.payload),
        )
        with self._lock:
            # last write wins
            self._records[record.entity_id] = stored
        self.logger.debug("Upserted %s into '%s'", record.entity_id, self.name)

    def query_nearest(self, vector: Sequence[float], limit: int) -> List[CandidateRecord]:
        query = pad_or_truncate(as_feature_vector(vector), self.dim)
        with self._lock:
            snapshot = list(self._records.values())
        matches = SimilarityRanker.rank(query, snapshot, limit, metric="euclidean")
        self.logger.debug(
            "query_nearest on '%s': %d candidates -> %d results (limit=%d)",
            self.name, len(snapshot), len(matches), limit,
        )
        return [m.record for m in matches]

    def count(self) -> int:
        with self._lock:
            return len(self._records)

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: CandidateStore
# -----------------------------------------------------------------------------

from typing import List, Protocol, Sequence, runtime_checkable

from ranking.types import CandidateRecord


@runtime_checkable
class CandidateStore(Protocol):
    """
    A space of stored (id, vector) pairs, e.g. users or documents.
    Implementations raise StoreUnavailable when the backend cannot be reached.
    """

    name: str

    def test_connection(self) -> bool:
        ...

    def query_nearest(self, vector: Sequence[float], limit: int) -> List[CandidateRecord]:
        ...

    def upsert(self, record: CandidateRecord) -> None:
        ...

    def count(self) -> int:
        ...

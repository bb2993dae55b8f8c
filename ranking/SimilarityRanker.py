# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: SimilarityRanker
# -----------------------------------------------------------------------------
import heapq
import math
from typing import Iterable, List, Sequence

import numpy as np

from embedding.FeatureVector import as_feature_vector, pad_or_truncate
from ranking.types import CandidateRecord, RankedMatch, entity_sort_key

METRICS = ("euclidean", "cosine")


def euclidean_distance(a: Iterable[float], b: Iterable[float]) -> float:
    va = np.asarray(as_feature_vector(a), dtype=np.float64)
    vb = np.asarray(as_feature_vector(b), dtype=np.float64)
    return float(np.linalg.norm(va - vb))


def cosine_similarity(a: Iterable[float], b: Iterable[float]) -> float:
    """
    Cosine similarity; NaN when either side has zero magnitude.
    Callers filter those out before ranking.
    """
    va = np.asarray(as_feature_vector(a), dtype=np.float64)
    vb = np.asarray(as_feature_vector(b), dtype=np.float64)
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return float("nan")
    return float(np.dot(va, vb) / denom)


def rank(
        query: Sequence[float],
        candidates: Iterable[CandidateRecord],
        k: int,
        metric: str = "euclidean",
) -> List[RankedMatch]:
    """
    Score every candidate against `query` and keep the best `k`.

    euclidean: ascending distance (closer first)
    cosine:    descending similarity (more similar first)

    Ties are broken by ascending entity id. Candidates with an undefined (NaN)
    score are dropped. Neither the query nor the candidates are modified.
    """
    if metric not in METRICS:
        raise ValueError(f"Unsupported metric {metric!r}; expected one of {METRICS}")
    if k <= 0:
        return []

    q = as_feature_vector(query)
    dim = len(q)
    score_fn = euclidean_distance if metric == "euclidean" else cosine_similarity
    sign = 1.0 if metric == "euclidean" else -1.0

    scored = []
    for rec in candidates:
        score = score_fn(q, pad_or_truncate(rec.vector, dim))
        if math.isnan(score):
            continue
        scored.append((sign * score, entity_sort_key(rec.entity_id), RankedMatch(record=rec, score=score)))

    # bounded heap of size k: O(N log K)
    best = heapq.nsmallest(k, scored, key=lambda t: (t[0], t[1]))
    return [t[2] for t in best]

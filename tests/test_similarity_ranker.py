# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-13
# Description: test_similarity_ranker.py
# -----------------------------------------------------------------------------
import math
import random

import pytest

from ranking import SimilarityRanker
from ranking.types import CandidateRecord


def _records():
    # distances from the origin: 2.0, 0.5, 1.0
    return [
        CandidateRecord(entity_id=1, vector=(2.0, 0.0, 0.0, 0.0)),
        CandidateRecord(entity_id=2, vector=(0.0, 0.5, 0.0, 0.0)),
        CandidateRecord(entity_id=3, vector=(0.0, 0.0, 1.0, 0.0)),
    ]


def test_rank_returns_closest_k_in_ascending_distance():
    out = SimilarityRanker.rank((0.0, 0.0, 0.0, 0.0), _records(), k=2)
    assert [m.entity_id for m in out] == [2, 3]
    assert [m.score for m in out] == pytest.approx([0.5, 1.0])


def test_rank_is_invariant_to_candidate_order():
    records = _records() + [CandidateRecord(entity_id=i, vector=(i / 10, 0.3, 0.1, 0.0)) for i in range(10, 30)]
    expected = [m.entity_id for m in SimilarityRanker.rank((0.1, 0.2, 0.3, 0.4), records, k=7)]

    for seed in range(5):
        shuffled = list(records)
        random.Random(seed).shuffle(shuffled)
        got = [m.entity_id for m in SimilarityRanker.rank((0.1, 0.2, 0.3, 0.4), shuffled, k=7)]
        assert got == expected


def test_rank_never_returns_more_than_k_and_scores_non_decreasing():
    records = [CandidateRecord(entity_id=i, vector=(i * 0.1, 0.0, 0.0, 0.0)) for i in range(20)]
    out = SimilarityRanker.rank((0.55, 0.0, 0.0, 0.0), records, k=5)
    assert len(out) == 5
    scores = [m.score for m in out]
    assert scores == sorted(scores)


def test_rank_ties_break_by_ascending_entity_id():
    records = [
        CandidateRecord(entity_id=9, vector=(1.0, 0.0)),
        CandidateRecord(entity_id=4, vector=(0.0, 1.0)),
        CandidateRecord(entity_id=7, vector=(-1.0, 0.0)),
    ]
    out = SimilarityRanker.rank((0.0, 0.0), records, k=3)
    assert [m.entity_id for m in out] == [4, 7, 9]


def test_rank_empty_candidates_or_non_positive_k():
    assert SimilarityRanker.rank((0.0, 0.0), [], k=3) == []
    assert SimilarityRanker.rank((0.0, 0.0), _records(), k=0) == []


def test_rank_does_not_mutate_inputs():
    query = [0.1, 0.2, 0.3, 0.4]
    records = _records()
    before = list(records)
    SimilarityRanker.rank(query, records, k=2)
    assert query == [0.1, 0.2, 0.3, 0.4]
    assert records == before


def test_rank_pads_short_candidates_to_query_dimension():
    records = [CandidateRecord(entity_id="a", vector=(1.0,)), CandidateRecord(entity_id="b", vector=(0.0, 0.0, 0.0, 3.0))]
    out = SimilarityRanker.rank((1.0, 0.0, 0.0, 0.0), records, k=2)
    assert [m.entity_id for m in out] == ["a", "b"]
    assert out[0].score == pytest.approx(0.0)


def test_cosine_rank_orders_most_similar_first_and_drops_zero_vectors():
    records = [
        CandidateRecord(entity_id="same", vector=(2.0, 0.0)),
        CandidateRecord(entity_id="orthogonal", vector=(0.0, 1.0)),
        CandidateRecord(entity_id="zero", vector=(0.0, 0.0)),
        CandidateRecord(entity_id="diagonal", vector=(1.0, 1.0)),
    ]
    out = SimilarityRanker.rank((1.0, 0.0), records, k=10, metric="cosine")
    assert [m.entity_id for m in out] == ["same", "diagonal", "orthogonal"]


def test_cosine_similarity_is_symmetric():
    rng = random.Random(42)
    for _ in range(50):
        a = [rng.uniform(-1, 1) for _ in range(4)]
        b = [rng.uniform(-1, 1) for _ in range(4)]
        assert SimilarityRanker.cosine_similarity(a, b) == pytest.approx(SimilarityRanker.cosine_similarity(b, a))


def test_cosine_similarity_zero_magnitude_is_nan():
    assert math.isnan(SimilarityRanker.cosine_similarity((0.0, 0.0), (1.0, 0.0)))


def test_rank_rejects_unknown_metric():
    with pytest.raises(ValueError):
        SimilarityRanker.rank((0.0,), _records(), k=1, metric="manhattan")

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-13
# Description: test_user_embedding_builder.py
# -----------------------------------------------------------------------------
import math

import pytest

from embedding.FeatureEncoder import ExperienceEncoder, StaticSkillEncoder
from embedding.UserEmbeddingBuilder import UserEmbeddingBuilder
from model.AdvisorUser import AdvisorUser


def _user(skills=(), experiences=()):
    return AdvisorUser.from_dict({
        "user_id": 7,
        "first_name": "Asha",
        "last_name": "Rao",
        "skills": list(skills),
        "experiences": list(experiences),
    })


def test_raw_vector_concatenates_skills_then_experiences():
    builder = UserEmbeddingBuilder(StaticSkillEncoder(), ExperienceEncoder())
    user = _user(["java", "python"], [{"company_name": "Acme", "job_title": "CTO"}])
    assert builder.raw_vector(user) == pytest.approx((1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.04, 0.03))


def test_build_sum_mode_is_four_dimensional_and_sums_to_one():
    builder = UserEmbeddingBuilder(StaticSkillEncoder(), ExperienceEncoder())
    vec = builder.build(_user(["javascript", "devops"]))
    assert len(vec) == 4
    # first four of (1, .5, 0, 1, 1, .2) -> (1, .5, 0, 1) / 2.5
    assert vec == pytest.approx((0.4, 0.2, 0.0, 0.4))
    assert sum(vec) == pytest.approx(1.0)


def test_build_short_vector_is_zero_padded():
    builder = UserEmbeddingBuilder(StaticSkillEncoder(), ExperienceEncoder())
    vec = builder.build(_user(["java"]))
    assert vec == (1.0, 0.0, 0.0, 0.0)


def test_build_user_without_attributes_is_zero_vector():
    for mode in ("sum", "l2"):
        builder = UserEmbeddingBuilder(StaticSkillEncoder(), ExperienceEncoder(), normalize_mode=mode)
        assert builder.build(_user()) == (0.0, 0.0, 0.0, 0.0)


def test_build_l2_mode_has_unit_magnitude():
    builder = UserEmbeddingBuilder(StaticSkillEncoder(), ExperienceEncoder(), normalize_mode="l2")
    vec = builder.build(_user(["html"]))
    assert len(vec) == 4
    assert math.isclose(sum(x * x for x in vec), 1.0)


def test_build_without_dimension_keeps_full_length():
    builder = UserEmbeddingBuilder(StaticSkillEncoder(), None, normalize_mode="l2", dim=None)
    vec = builder.build(_user(["java", "python"]))
    assert len(vec) == 6


def test_unknown_normalize_mode_rejected():
    with pytest.raises(ValueError):
        UserEmbeddingBuilder(StaticSkillEncoder(), normalize_mode="max")

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: FeatureVector
# -----------------------------------------------------------------------------
from typing import Iterable, Tuple

import numpy as np

# Immutable value type; copies cross component boundaries, never shared arrays
FeatureVector = Tuple[float, ...]

SKILL_DIM = 3
EXPERIENCE_DIM = 2
USER_DIM = 4
DOCUMENT_DIM = 4

NEUTRAL_COMPONENT = 0.5


def as_feature_vector(values: Iterable[float]) -> FeatureVector:
    """Copy any sequence / numpy array into a plain tuple of floats."""
    if isinstance(values, np.ndarray):
        return tuple(float(x) for x in values.ravel().tolist())
    return tuple(float(x) for x in values)


def pad_or_truncate(vector: Iterable[float], dim: int) -> FeatureVector:
    """
    Force a vector to exactly `dim` components.
    Trailing components are dropped when too long; zeros are appended when too short.
    """
    if dim < 0:
        raise ValueError(f"dim must be >= 0, got {dim}")
    values = as_feature_vector(vector)
    if len(values) >= dim:
        return values[:dim]
    return values + (0.0,) * (dim - len(values))


def neutral_vector(dim: int) -> FeatureVector:
    """All components equal; used whenever an attribute cannot be encoded."""
    return (NEUTRAL_COMPONENT,) * dim

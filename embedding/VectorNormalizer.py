# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: VectorNormalizer
# -----------------------------------------------------------------------------
from typing import Iterable, Optional

import numpy as np

from embedding.FeatureVector import FeatureVector, as_feature_vector, pad_or_truncate

NORMALIZE_MODES = ("sum", "l2")


def sum_normalize(vector: Iterable[float]) -> FeatureVector:
    """
    Divide each component by the sum of all components.
    A sum of exactly zero returns the input unchanged.
    """
    values = as_feature_vector(vector)
    total = float(np.sum(np.asarray(values, dtype=np.float64))) if values else 0.0
    if total == 0.0:
        return values
    return tuple(v / total for v in values)


def l2_normalize(vector: Iterable[float]) -> FeatureVector:
    """
    Divide each component by the Euclidean norm.

    Precondition: the vector is not all zeros. A zero vector yields NaN
    components; callers check `is_zero_vector` first.
    """
    arr = np.asarray(as_feature_vector(vector), dtype=np.float64)
    norm = np.linalg.norm(arr)
    with np.errstate(divide="ignore", invalid="ignore"):
        return as_feature_vector(arr / norm)


def is_zero_vector(vector: Iterable[float]) -> bool:
    return not any(as_feature_vector(vector))


def normalize(vector: Iterable[float], mode: str = "sum", dim: Optional[int] = None) -> FeatureVector:
    """Pad/truncate to `dim` (when given) and then normalize with `mode`."""
    values = pad_or_truncate(vector, dim) if dim is not None else as_feature_vector(vector)
    if mode == "sum":
        return sum_normalize(values)
    if mode == "l2":
        return l2_normalize(values)
    raise ValueError(f"Unsupported normalize mode {mode!r}; expected one of {NORMALIZE_MODES}")

"""
Vector math - pure similarity functions.

No state, no I/O. Vectors arrive as any float sequence and are handled
as float64 numpy arrays.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from semantic_corpus.core.errors import DimensionMismatch

Vector = Sequence[float] | np.ndarray


def _as_array(v: Vector) -> np.ndarray:
    return np.asarray(v, dtype=np.float64).ravel()


def magnitude(v: Vector) -> float:
    """Euclidean norm of a vector. The zero vector has magnitude 0.0."""
    return float(np.linalg.norm(_as_array(v)))


def cosine_similarity(a: Vector, b: Vector) -> float:
    """
    Cosine of the angle between two vectors.

    Returns 0.0 when either vector has zero magnitude, and clamps the
    result to [-1, 1] to absorb floating-point drift.

    Raises:
        DimensionMismatch: if the vectors differ in length
    """
    va = _as_array(a)
    vb = _as_array(b)
    if va.shape[0] != vb.shape[0]:
        raise DimensionMismatch(
            expected=va.shape[0],
            actual=vb.shape[0],
            message=f"Vectors must have the same dimensions ({va.shape[0]} != {vb.shape[0]})",
        )

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = float(np.dot(va, vb) / (norm_a * norm_b))
    # nan only survives here for non-finite inputs
    if np.isnan(similarity):
        return 0.0
    return max(-1.0, min(1.0, similarity))

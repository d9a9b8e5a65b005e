"""Scalar-shader style helpers vectorized over numpy arrays.

These mirror the GLSL built-ins the grading formulas are written in
(``smoothstep``, ``mix``, ``fract``, ``clamp``) so every stage reads the same
way whether it is evaluated for one pixel, a frame, or a LUT lattice.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from lumagrade.constants import EPSILON, HASH_DOT, HASH_SCALE


def clamp(x: ArrayLike, lo: float = 0.0, hi: float = 1.0) -> NDArray[np.float64]:
    """Clamp values into ``[lo, hi]``."""
    return np.clip(x, lo, hi)


def safe_divide(num: ArrayLike, den: ArrayLike) -> NDArray[np.float64]:
    """Divide with the denominator floored at EPSILON in magnitude.

    :param num: Numerator
    :param den: Denominator (sign is preserved)
    :returns: ``num / den`` with ``|den| >= EPSILON``
    """
    den = np.asarray(den, dtype=np.float64)
    floored = np.where(np.abs(den) < EPSILON, np.where(den < 0.0, -EPSILON, EPSILON), den)
    return np.asarray(num, dtype=np.float64) / floored


def smoothstep(edge0: ArrayLike, edge1: ArrayLike, x: ArrayLike) -> NDArray[np.float64]:
    """Cubic Hermite step between two edges.

    Reversed edges (``edge0 > edge1``) produce a falling step, as in GLSL.
    Coincident edges are epsilon-guarded instead of dividing by zero.

    :param edge0: Value mapped to 0
    :param edge1: Value mapped to 1
    :param x: Input values
    :returns: Smoothed step in [0, 1]
    """
    x = np.asarray(x, dtype=np.float64)
    t = np.clip(safe_divide(x - edge0, np.subtract(edge1, edge0)), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def mix(x: ArrayLike, y: ArrayLike, a: ArrayLike) -> NDArray[np.float64]:
    """Linear blend ``x * (1 - a) + y * a``.

    Written in the two-product form so ``a == 0`` and ``a == 1`` return
    ``x`` and ``y`` bit-exactly.
    """
    return np.multiply(x, np.subtract(1.0, a)) + np.multiply(y, a)


def fract(x: ArrayLike) -> NDArray[np.float64]:
    """Fractional part in [0, 1), wrapping negatives upward."""
    x = np.asarray(x, dtype=np.float64)
    return x - np.floor(x)


def hash_noise(u: ArrayLike, v: ArrayLike) -> NDArray[np.float64]:
    """Deterministic pseudo-random value in [0, 1) for a 2D coordinate.

    :param u: Horizontal coordinate
    :param v: Vertical coordinate
    :returns: ``fract(sin(dot(uv, HASH_DOT)) * HASH_SCALE)``
    """
    dot = np.multiply(u, HASH_DOT[0]) + np.multiply(v, HASH_DOT[1])
    return fract(np.sin(dot) * HASH_SCALE)

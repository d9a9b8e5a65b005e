"""Natural cubic spline curves for the display-space curve stage."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from lumagrade.constants import CURVE_EPSILON
from lumagrade.curves.kernels import (
    interpolate_array_numba,
    interpolate_numba,
    solve_second_derivatives_numba,
)

Point = tuple[float, float]

IDENTITY_CURVE: tuple[Point, ...] = ((0.0, 0.0), (1.0, 1.0))


def prepare_knots(
    points: Iterable[Sequence[float]],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Sort control points and enforce a minimum x separation.

    Any x within CURVE_EPSILON of its predecessor is nudged to
    ``previous + CURVE_EPSILON``.

    :param points: Control points as (x, y) pairs
    :returns: Tuple of (xs, ys) float64 arrays
    :raises ValueError: If no points are given
    """
    pts = sorted((float(p[0]), float(p[1])) for p in points)
    if not pts:
        raise ValueError("spline requires at least one control point")

    xs = np.empty(len(pts), dtype=np.float64)
    ys = np.empty(len(pts), dtype=np.float64)
    for i, (x, y) in enumerate(pts):
        if i > 0 and x <= xs[i - 1] + CURVE_EPSILON:
            x = xs[i - 1] + CURVE_EPSILON
        xs[i] = x
        ys[i] = y
    return xs, ys


class NaturalCubicSpline:
    """C2-continuous curve through a set of control points.

    Second derivatives are solved once at construction; evaluation is a
    binary search plus one cubic. Outside the knot range the curve is flat.

    Example:
        >>> curve = NaturalCubicSpline([(0, 0), (0.5, 0.6), (1, 1)])
        >>> curve(0.25)
    """

    __slots__ = ("xs", "ys", "ks")

    def __init__(self, points: Iterable[Sequence[float]]):
        """
        Fit the spline.

        :param points: Control points as (x, y) pairs, any order
        :raises ValueError: If no points are given
        """
        self.xs, self.ys = prepare_knots(points)
        self.ks = np.zeros_like(self.xs)
        solve_second_derivatives_numba(self.xs, self.ys, CURVE_EPSILON, self.ks)

    @classmethod
    def identity(cls) -> NaturalCubicSpline:
        return cls(IDENTITY_CURVE)

    def __len__(self) -> int:
        return self.xs.shape[0]

    def is_identity(self) -> bool:
        """True when the curve is the default diagonal."""
        if len(self) != 2:
            return False
        return np.array_equal(self.xs, [0.0, 1.0]) and np.array_equal(self.ys, [0.0, 1.0])

    def interpolate(self, x: float) -> float:
        """Evaluate the curve at a single position."""
        return float(interpolate_numba(self.xs, self.ys, self.ks, float(x)))

    def __call__(self, values: ArrayLike) -> NDArray[np.float64]:
        """Evaluate the curve for an array of any shape.

        :param values: Query positions
        :returns: Curve values with the same shape
        """
        values = np.asarray(values, dtype=np.float64)
        flat = np.ascontiguousarray(values.reshape(-1))
        out = np.empty_like(flat)
        interpolate_array_numba(self.xs, self.ys, self.ks, flat, out)
        return out.reshape(values.shape)

    def sample(self, steps: int = 256) -> NDArray[np.float64]:
        """Evaluate the curve on ``steps`` evenly spaced positions in [0, 1]."""
        return self(np.linspace(0.0, 1.0, steps))

    def __repr__(self) -> str:
        return f"NaturalCubicSpline(n={len(self)}, range=[{self.xs[0]:.3f}, {self.xs[-1]:.3f}])"

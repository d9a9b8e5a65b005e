"""Control point editing rules for tone curves.

Curves are immutable tuples of (x, y) points sorted by x. Every function
returns a new tuple and leaves the input untouched, so edits can be applied
straight onto a ``GradingParams`` snapshot with ``replace``.

Rules:
- The first and last points are permanent and stay at x=0 and x=1
- New points closer than ``MIN_POINT_DISTANCE`` in x to an existing point are rejected
- A new point within ``SNAP_DISTANCE`` of the current curve lands on it
- Moved points keep ``MOVE_MARGIN`` away from their neighbours
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from lumagrade.curves.spline import IDENTITY_CURVE, NaturalCubicSpline, Point

MIN_POINT_DISTANCE = 0.02
SNAP_DISTANCE = 0.15
MOVE_MARGIN = 0.01


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def normalize_curve(points: Sequence[Sequence[float]]) -> tuple[Point, ...]:
    """Return points as a sorted tuple of float pairs.

    :raises ValueError: If fewer than two points are given
    """
    pts = tuple(sorted((float(p[0]), float(p[1])) for p in points))
    if len(pts) < 2:
        raise ValueError(f"curve requires at least 2 points, got {len(pts)}")
    return pts


def reset_curve() -> tuple[Point, ...]:
    """Identity diagonal from (0, 0) to (1, 1)."""
    return IDENTITY_CURVE


def add_point(points: Sequence[Point], x: float, y: float) -> tuple[Point, ...]:
    """Insert a control point.

    :param points: Current curve points
    :param x: Requested x in [0, 1]
    :param y: Requested y in [0, 1]
    :returns: New curve, or the unchanged curve if x is too close to an existing point
    """
    pts = normalize_curve(points)
    x = _clamp01(x)
    y = _clamp01(y)

    if any(abs(px - x) < MIN_POINT_DISTANCE for px, _ in pts):
        return pts

    on_curve = _clamp01(NaturalCubicSpline(pts).interpolate(x))
    if abs(y - on_curve) < SNAP_DISTANCE:
        y = on_curve

    return tuple(sorted(pts + ((x, y),)))


def delete_point(points: Sequence[Point], index: int) -> tuple[Point, ...]:
    """Remove an interior point; endpoints cannot be deleted.

    :param points: Current curve points
    :param index: Index of the point to remove
    :returns: New curve, unchanged if ``index`` is an endpoint
    :raises IndexError: If index is out of range
    """
    pts = normalize_curve(points)
    if not -len(pts) <= index < len(pts):
        raise IndexError(f"point index {index} out of range for {len(pts)} points")
    index %= len(pts)
    if index in (0, len(pts) - 1):
        return pts
    return pts[:index] + pts[index + 1 :]


def move_point(points: Sequence[Point], index: int, x: float, y: float) -> tuple[Point, ...]:
    """Drag a point, constrained between its neighbours.

    Endpoints keep their x position and only move vertically.

    :param points: Current curve points
    :param index: Index of the point to move
    :param x: Requested x
    :param y: Requested y
    :returns: New curve with the point moved
    """
    pts = list(normalize_curve(points))
    if not -len(pts) <= index < len(pts):
        raise IndexError(f"point index {index} out of range for {len(pts)} points")
    index %= len(pts)

    if index == 0 or index == len(pts) - 1:
        new_x = pts[index][0]
    else:
        lo = pts[index - 1][0] + MOVE_MARGIN
        hi = pts[index + 1][0] - MOVE_MARGIN
        new_x = max(lo, min(hi, float(x)))

    pts[index] = (new_x, _clamp01(y))
    return tuple(pts)


def sample_curve(points: Sequence[Point], steps: int = 256) -> np.ndarray:
    """Curve values on an even grid, clamped to [0, 1] for display."""
    return np.clip(NaturalCubicSpline(points).sample(steps), 0.0, 1.0)

"""Tone curve engine: natural cubic splines and control point editing."""

from lumagrade.curves.editing import (
    add_point,
    delete_point,
    move_point,
    normalize_curve,
    reset_curve,
    sample_curve,
)
from lumagrade.curves.spline import IDENTITY_CURVE, NaturalCubicSpline, prepare_knots

__all__ = [
    "IDENTITY_CURVE",
    "NaturalCubicSpline",
    "prepare_knots",
    "add_point",
    "delete_point",
    "move_point",
    "normalize_curve",
    "reset_curve",
    "sample_curve",
]

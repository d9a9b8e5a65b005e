"""Evaluators that drive the operator chain.

RasterEvaluator grades every pixel of a frame for preview; BakeEvaluator
grades a regular RGB lattice for ``.cube`` export. Both call the same
``lumagrade.grading.grade``.
"""

from lumagrade.evaluators.bake import BakeCancelled, BakeEvaluator, bake_cube, lattice_colors
from lumagrade.evaluators.raster import (
    ArrayImageSource,
    ComparisonMode,
    RasterEvaluator,
    ViewOptions,
    false_color,
)

__all__ = [
    "ArrayImageSource",
    "BakeCancelled",
    "BakeEvaluator",
    "ComparisonMode",
    "RasterEvaluator",
    "ViewOptions",
    "bake_cube",
    "false_color",
    "lattice_colors",
]

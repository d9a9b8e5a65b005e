"""The grading operator chain.

Example:
    >>> from lumagrade.grading import grade, prepare
    >>> prepared = prepare(GradingParams(saturation=0.0))
    >>> grey = grade(colors, prepared)
"""

from lumagrade.grading.chain import (
    CHAIN,
    PreparedGrade,
    Stage,
    grade,
    grade_until,
    point_color_mask,
    pre_point_color,
    prepare,
    sample_qualifier,
)
from lumagrade.grading.stages import qualifier_mask, wheel_masks
from lumagrade.grading.tonemap import apply_tone_mapping, map_linear

__all__ = [
    "CHAIN",
    "PreparedGrade",
    "Stage",
    "grade",
    "grade_until",
    "prepare",
    "pre_point_color",
    "sample_qualifier",
    "point_color_mask",
    "qualifier_mask",
    "wheel_masks",
    "apply_tone_mapping",
    "map_linear",
]

"""3D LUT codec: ``.cube`` parse, trilinear apply, and text output.

Baking a grading into a LUT lives in ``lumagrade.evaluators.bake``.
"""

from lumagrade.lut.cube import (
    CubeLUT,
    LUTParseError,
    format_cube,
    load_cube,
    parse_cube,
    save_cube,
    validate_lut_size,
)

__all__ = [
    "CubeLUT",
    "LUTParseError",
    "parse_cube",
    "format_cube",
    "load_cube",
    "save_cube",
    "validate_lut_size",
]

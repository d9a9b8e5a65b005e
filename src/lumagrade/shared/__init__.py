"""Shared numeric and color space utilities.

This module contains the pure math shared by the operator chain, the
curve engine and both evaluators.
"""

from lumagrade.shared.colorspace import (
    hsl_to_rgb,
    hue_distance,
    linear_to_srgb,
    luminance,
    rgb_to_hsl,
    srgb_to_linear,
)
from lumagrade.shared.numeric import clamp, fract, hash_noise, mix, safe_divide, smoothstep

__all__ = [
    # Color space
    "srgb_to_linear",
    "linear_to_srgb",
    "luminance",
    "rgb_to_hsl",
    "hsl_to_rgb",
    "hue_distance",
    # Numeric helpers
    "clamp",
    "fract",
    "hash_noise",
    "mix",
    "safe_divide",
    "smoothstep",
]

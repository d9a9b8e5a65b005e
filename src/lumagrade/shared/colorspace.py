"""Color space conversions used across the operator chain.

All functions operate on arrays whose last axis holds RGB (or HSL) triples
and accept any leading shape. Transfer functions use the single gamma-2.2
power curve, never the piecewise sRGB function, so every evaluator sees the
same transition.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from lumagrade.constants import GAMMA, LUMA_B, LUMA_G, LUMA_R
from lumagrade.shared.numeric import fract

_LUMA_WEIGHTS = np.array([LUMA_R, LUMA_G, LUMA_B], dtype=np.float64)


def srgb_to_linear(color: ArrayLike) -> NDArray[np.float64]:
    """Decode display values to linear light (``c ** 2.2``)."""
    return np.power(np.maximum(np.asarray(color, dtype=np.float64), 0.0), GAMMA)


def linear_to_srgb(color: ArrayLike) -> NDArray[np.float64]:
    """Encode linear light to display values (``c ** (1 / 2.2)``)."""
    return np.power(np.maximum(np.asarray(color, dtype=np.float64), 0.0), 1.0 / GAMMA)


def luminance(color: ArrayLike) -> NDArray[np.float64]:
    """Rec. 709 luminance of RGB triples.

    :param color: Colors [..., 3]
    :returns: Luminance [...]
    """
    color = np.asarray(color, dtype=np.float64)
    return color[..., 0] * LUMA_R + color[..., 1] * LUMA_G + color[..., 2] * LUMA_B


def hue_distance(a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """Circular distance between hues in [0, 1); result is in [0, 0.5]."""
    d = np.abs(np.subtract(a, b))
    return np.where(d > 0.5, 1.0 - d, d)


def rgb_to_hsl(color: ArrayLike) -> NDArray[np.float64]:
    """Convert RGB in [0, 1] to HSL with hue in [0, 1).

    Achromatic inputs get hue 0 and saturation 0.

    :param color: Colors [..., 3]
    :returns: HSL [..., 3]
    """
    color = np.asarray(color, dtype=np.float64)
    r, g, b = color[..., 0], color[..., 1], color[..., 2]
    cmax = np.maximum(np.maximum(r, g), b)
    cmin = np.minimum(np.minimum(r, g), b)
    delta = cmax - cmin
    light = (cmax + cmin) * 0.5

    chromatic = delta > 0.0
    d = np.where(chromatic, delta, 1.0)

    sat_den = np.where(light > 0.5, 2.0 - cmax - cmin, cmax + cmin)
    sat = np.where(chromatic, delta / np.where(sat_den > 0.0, sat_den, 1.0), 0.0)

    hue = np.where(
        cmax == r,
        (g - b) / d + np.where(g < b, 6.0, 0.0),
        np.where(cmax == g, (b - r) / d + 2.0, (r - g) / d + 4.0),
    )
    hue = np.where(chromatic, hue / 6.0, 0.0)

    return np.stack([hue, sat, light], axis=-1)


def _hue_to_rgb(p: NDArray, q: NDArray, t: NDArray) -> NDArray[np.float64]:
    t = np.where(t < 0.0, t + 1.0, t)
    t = np.where(t > 1.0, t - 1.0, t)
    return np.where(
        t < 1.0 / 6.0,
        p + (q - p) * 6.0 * t,
        np.where(t < 0.5, q, np.where(t < 2.0 / 3.0, p + (q - p) * (2.0 / 3.0 - t) * 6.0, p)),
    )


def hsl_to_rgb(hsl: ArrayLike) -> NDArray[np.float64]:
    """Convert HSL (hue in [0, 1)) back to RGB.

    :param hsl: HSL triples [..., 3]
    :returns: RGB [..., 3]
    """
    hsl = np.asarray(hsl, dtype=np.float64)
    h, s, light = fract(hsl[..., 0]), hsl[..., 1], hsl[..., 2]

    q = np.where(light < 0.5, light * (1.0 + s), light + s - light * s)
    p = 2.0 * light - q

    rgb = np.stack(
        [
            _hue_to_rgb(p, q, h + 1.0 / 3.0),
            _hue_to_rgb(p, q, h),
            _hue_to_rgb(p, q, h - 1.0 / 3.0),
        ],
        axis=-1,
    )
    grey = (s == 0.0)[..., None]
    return np.where(grey, light[..., None], rgb)

"""Display transforms for the tone-map stage.

Every mode maps re-linearized color to a linear result that is then encoded
with the gamma-2.2 curve. The stage output blends the clamped input with the
encoded result by ``tone_strength``.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from lumagrade.config.values import ToneMapping
from lumagrade.constants import AGX_MIN_EV, AGX_RANGE_EV
from lumagrade.shared.colorspace import linear_to_srgb, srgb_to_linear
from lumagrade.shared.numeric import mix

# Narkowicz ACES fit coefficients
ACES_A = 2.51
ACES_B = 0.03
ACES_C = 2.43
ACES_D = 0.59
ACES_E = 0.14
FILMIC_PRESCALE = 0.6

SOFT_CLIP_RATE = 1.2


def filmic(x: NDArray[np.float64]) -> NDArray[np.float64]:
    """Rational ACES-like curve with a 0.6 exposure pre-scale."""
    v = x * FILMIC_PRESCALE
    return np.clip((v * (ACES_A * v + ACES_B)) / (v * (ACES_C * v + ACES_D) + ACES_E), 0.0, 1.0)


def agx(x: NDArray[np.float64]) -> NDArray[np.float64]:
    """Log2 encoding over a fixed EV window, smoothstep-shaped, squared."""
    v = np.log2(np.maximum(x, 1e-10))
    v = np.clip((v - AGX_MIN_EV) / AGX_RANGE_EV, 0.0, 1.0)
    v = v * v * (3.0 - 2.0 * v)
    return v * v


def soft_clip(x: NDArray[np.float64]) -> NDArray[np.float64]:
    v = np.maximum(x, 0.0)
    return np.minimum(v, 1.0 - np.exp(-v * SOFT_CLIP_RATE))


def map_linear(linear: NDArray[np.float64], mode: ToneMapping) -> NDArray[np.float64]:
    """Apply one display transform to linear light.

    :param linear: Linear colors [..., 3]
    :param mode: Tone mapping mode
    :returns: Mapped linear colors (not yet encoded)
    """
    match mode:
        case ToneMapping.STANDARD:
            return np.clip(linear, 0.0, 1.0)
        case ToneMapping.FILMIC:
            return filmic(linear)
        case ToneMapping.AGX:
            return agx(linear)
        case ToneMapping.SOFT:
            return soft_clip(linear)
        case ToneMapping.NEUTRAL:
            return linear
    raise ValueError(f"unhandled tone mapping {mode!r}")


def apply_tone_mapping(
    colors: NDArray[np.float64], mode: ToneMapping, strength: float
) -> NDArray[np.float64]:
    """Re-linearize, map, re-encode, and blend with the clamped input.

    :param colors: Display-space colors [..., 3]
    :param mode: Tone mapping mode
    :param strength: Blend weight of the mapped result in [0, 1]
    :returns: Display-space colors
    """
    mapped = linear_to_srgb(map_linear(srgb_to_linear(colors), mode))
    return mix(np.clip(colors, 0.0, 1.0), mapped, strength)

"""Grading stages that depend on pixel position or neighbouring pixels.

UV coordinates are normalized to [0, 1] with ``v`` growing downward. All
sampling goes through an ``ImageSource``; without one the neighbourhood of a
pixel is treated as uniform, which is how the LUT bake sees every color.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from lumagrade.config.values import Grain, Vignette
from lumagrade.constants import HALATION_TAPS, HALATION_THRESHOLD, HALATION_TINT
from lumagrade.protocols import ImageSource
from lumagrade.shared.colorspace import srgb_to_linear
from lumagrade.shared.numeric import hash_noise, mix, smoothstep

_HALATION_TINT = np.array(HALATION_TINT, dtype=np.float64)

# Lens stages only act above these magnitudes
DISTORTION_THRESHOLD = 0.01
ABERRATION_THRESHOLD = 0.01


def lens_fetch(
    source: ImageSource,
    uv: NDArray[np.float64],
    distortion: float,
    chromatic_aberration: float,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.bool_]]:
    """Warp UVs and fetch source colors with radial channel offsets.

    :param source: Image to sample
    :param uv: Pixel coordinates [..., 2]
    :param distortion: Radial warp amount (factor ``1 + d * 0.01 * r^2``)
    :param chromatic_aberration: Red/blue offset amount (``ca * 0.002``)
    :returns: Tuple of (colors [..., 3], warped uv [..., 2], inside mask [...]);
        pixels warped outside the frame are reported via the mask
    """
    if abs(distortion) > DISTORTION_THRESHOLD:
        rel = uv - 0.5
        radius_sq = (rel * rel).sum(axis=-1, keepdims=True)
        uv = 0.5 + rel * (1.0 + distortion * 0.01 * radius_sq)
    inside = np.all((uv >= 0.0) & (uv <= 1.0), axis=-1)

    u, v = uv[..., 0], uv[..., 1]
    if abs(chromatic_aberration) > ABERRATION_THRESHOLD:
        strength = chromatic_aberration * 0.002
        du = (u - 0.5) * strength
        dv = (v - 0.5) * strength
        colors = np.empty(uv.shape[:-1] + (3,), dtype=np.float64)
        colors[..., 0] = source.sample(u - du, v - dv)[..., 0]
        colors[..., 1] = source.sample(u, v)[..., 1]
        colors[..., 2] = source.sample(u + du, v + dv)[..., 2]
    else:
        colors = np.asarray(source.sample(u, v), dtype=np.float64)
    return colors, uv, inside


def apply_texture(
    colors: NDArray[np.float64],
    uv: NDArray[np.float64] | None,
    source: ImageSource | None,
    amount: float,
    resolution: tuple[int, int],
) -> NDArray[np.float64]:
    """High-pass with a 4-neighbour Laplacian one texel away.

    ``color -= (N + S + E + W - 4 * center) * amount * 2``; the result is
    clamped to [0, 1]. Without a source the Laplacian is zero.
    """
    if amount != 0.0 and uv is not None and source is not None:
        px = 1.0 / resolution[0]
        py = 1.0 / resolution[1]
        u, v = uv[..., 0], uv[..., 1]
        laplacian = (
            source.sample(u, v - py)
            + source.sample(u, v + py)
            + source.sample(u + px, v)
            + source.sample(u - px, v)
            - 4.0 * colors
        )
        colors = colors - laplacian * amount * 2.0
    return np.clip(colors, 0.0, 1.0)


def apply_halation(
    linear: NDArray[np.float64],
    ring_fallback: NDArray[np.float64],
    uv: NDArray[np.float64] | None,
    source: ImageSource | None,
    amount: float,
    aspect: float,
) -> NDArray[np.float64]:
    """Add a red-orange glow from bright pixels on a surrounding ring.

    Eight taps at radius ``amount * 0.01`` (x divided by the aspect ratio),
    start angle jittered per pixel. Each linearized tap contributes
    ``max(0, tap - 0.5)``.

    :param linear: Linear colors [..., 3]
    :param ring_fallback: Linear color used for every tap when no source is given
    :param uv: Pixel coordinates [..., 2] or None
    :param source: Image to sample or None
    :param amount: Halation strength
    :param aspect: Width / height of the frame
    :returns: Linear colors with glow added
    """
    sampled = uv is not None and source is not None
    if sampled:
        u, v = uv[..., 0], uv[..., 1]
        start = hash_noise(u, v) * (2.0 * math.pi / HALATION_TAPS)
        radius = amount * 0.01

    glow = np.zeros_like(linear)
    for i in range(HALATION_TAPS):
        if sampled:
            angle = start + i * (2.0 * math.pi / HALATION_TAPS)
            tap_u = u + np.cos(angle) * radius / aspect
            tap_v = v + np.sin(angle) * radius
            tap = srgb_to_linear(source.sample(tap_u, tap_v))
        else:
            tap = ring_fallback
        glow += np.maximum(tap - HALATION_THRESHOLD, 0.0)
    glow /= HALATION_TAPS

    return linear + glow * _HALATION_TINT * amount * 2.0


def apply_vignette(
    colors: NDArray[np.float64], uv: NDArray[np.float64], vignette: Vignette, aspect: float
) -> NDArray[np.float64]:
    """Darken toward the frame edge with an elliptical smoothstep mask."""
    coord = uv - 0.5
    x = coord[..., 0] * mix(1.0, aspect, vignette.roundness)
    dist = np.sqrt(x * x + coord[..., 1] * coord[..., 1])
    radius = vignette.midpoint * 0.7
    feather = max(0.01, vignette.feather)
    mask = smoothstep(radius, radius + feather, dist)
    return colors * (1.0 - mask * vignette.amount)[..., None]


def apply_grain(
    colors: NDArray[np.float64], uv: NDArray[np.float64], grain: Grain, resolution: tuple[int, int]
) -> NDArray[np.float64]:
    """Add per-cell hash noise; cells are ``grain.size`` pixels wide."""
    scale = max(0.1, grain.size)
    cells_u = resolution[0] / scale
    cells_v = resolution[1] / scale
    qu = np.floor(uv[..., 0] * cells_u) / cells_u
    qv = np.floor(uv[..., 1] * cells_v) / cells_v
    noise = hash_noise(qu, qv)
    return colors + ((noise - 0.5) * grain.amount * 0.1)[..., None]

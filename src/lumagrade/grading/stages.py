"""Per-pixel grading stages.

Each function takes colors as a float64 array ``[..., 3]`` and returns a new
array of the same shape. Functions are pure; stages that need neighbouring
pixels live in ``lumagrade.grading.spatial``.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from lumagrade.config.values import Calibration, ColorGrading, ColorMixer, PointColorQualifier
from lumagrade.constants import (
    CALIBRATION_HUES,
    CALIBRATION_WIDTH,
    CURVE_EPSILON,
    EPSILON,
    HAZE_COLOR,
    MID_GREY,
    MIXER_BAND_CENTERS,
    MIXER_BAND_NAMES,
    MIXER_BAND_WIDTH,
    MIXER_WIDE_BAND_WIDTH,
    MIXER_WIDE_BANDS,
    WHEEL_HIGHLIGHT_THRESHOLD,
    WHEEL_SHADOW_THRESHOLD,
)
from lumagrade.curves.spline import NaturalCubicSpline
from lumagrade.shared.colorspace import hsl_to_rgb, hue_distance, luminance, rgb_to_hsl
from lumagrade.shared.numeric import fract, mix, smoothstep

Colors = NDArray[np.float64]

_HAZE = np.array(HAZE_COLOR, dtype=np.float64)

# ============================================================================
# Linear-light stages
# ============================================================================


def apply_calibration(colors: Colors, calibration: Calibration) -> Colors:
    """Rotate and scale the red, green and blue primaries, then tint shadows.

    Each pixel's hue is weighted against the three primaries with
    ``smoothstep(0.33, 0, distance)``; weights are normalized to sum to 1.
    """
    hsl = rgb_to_hsl(np.clip(colors, 0.0, 1.0))
    hue, sat, light = hsl[..., 0], hsl[..., 1], hsl[..., 2]

    weights = [
        smoothstep(CALIBRATION_WIDTH, 0.0, hue_distance(hue, center)) for center in CALIBRATION_HUES
    ]
    total = np.maximum(weights[0] + weights[1] + weights[2], EPSILON)

    hue_shift = np.zeros_like(hue)
    sat_scale = np.zeros_like(sat)
    for weight, primary in zip(weights, calibration.primaries(), strict=True):
        w = weight / total
        hue_shift += w * primary.hue / 360.0
        sat_scale += w * (1.0 + primary.saturation / 100.0)

    sat = np.clip(sat * sat_scale, 0.0, 1.0)
    out = hsl_to_rgb(np.stack([fract(hue + hue_shift), sat, light], axis=-1))

    if calibration.shadow_tint != 0.0:
        shadow = 1.0 - smoothstep(0.0, 0.4, luminance(out))
        out[..., 1] += calibration.shadow_tint / 100.0 * 0.1 * shadow

    return np.clip(out, 0.0, 1.0)


def apply_exposure(colors: Colors, exposure: float) -> Colors:
    return colors * 2.0**exposure


def apply_contrast(colors: Colors, contrast: float) -> Colors:
    """Scale around the mid-grey pivot, floored at zero."""
    return np.maximum((colors - MID_GREY) * contrast + MID_GREY, 0.0)


def apply_tonal_zones(
    colors: Colors, highlights: float, shadows: float, whites: float, blacks: float
) -> Colors:
    """Luma-masked highlight/shadow gains plus white gain and black offset."""
    luma = luminance(colors)[..., None]
    highlight_mask = smoothstep(0.5, 1.0, luma)
    shadow_mask = 1.0 - smoothstep(0.0, 0.2, luma)

    out = colors + colors * highlights * 0.5 * highlight_mask
    out = out + out * shadows * 0.3 * shadow_mask
    out = out * (1.0 + whites * 0.5)
    out = out + blacks * 0.05
    return np.maximum(out, 0.0)


def apply_dehaze(colors: Colors, dehaze: float) -> Colors:
    """Push away from (positive) or toward (negative) the haze color."""
    factor = abs(dehaze) * 0.5
    if dehaze > 0.0:
        target = (colors - _HAZE * 0.1) / 0.9
    else:
        target = np.broadcast_to(_HAZE, colors.shape)
    return mix(colors, target, factor)


def apply_clarity(colors: Colors, clarity: float) -> Colors:
    """Global tone-curve approximation of local contrast."""
    return mix(colors, smoothstep(0.0, 1.0, colors), clarity * 0.3)


# ============================================================================
# Display-space creative stages
# ============================================================================


def _band_width(name: str) -> float:
    return MIXER_WIDE_BAND_WIDTH if name in MIXER_WIDE_BANDS else MIXER_BAND_WIDTH


def apply_color_mixer(colors: Colors, mixer: ColorMixer) -> Colors:
    """Eight-band hue-selective hue/saturation/lightness shifts."""
    hsl = rgb_to_hsl(np.clip(colors, 0.0, 1.0))
    hue, sat, light = hsl[..., 0], hsl[..., 1], hsl[..., 2]

    hue_acc = np.zeros_like(hue)
    sat_acc = np.zeros_like(hue)
    lum_acc = np.zeros_like(hue)
    for name, center, band in zip(MIXER_BAND_NAMES, MIXER_BAND_CENTERS, mixer.bands(), strict=True):
        if band.is_neutral():
            continue
        weight = smoothstep(_band_width(name), 0.0, hue_distance(hue, center / 360.0))
        hue_acc += weight * band.hue / 360.0
        sat_acc += weight * band.saturation / 100.0
        lum_acc += weight * band.luminance / 100.0

    return hsl_to_rgb(
        np.stack(
            [
                fract(hue + hue_acc),
                np.clip(sat * (1.0 + sat_acc), 0.0, 1.0),
                np.clip(light * (1.0 + lum_acc * 0.5), 0.0, 1.0),
            ],
            axis=-1,
        )
    )


def qualifier_mask(hsl: Colors, qualifier: PointColorQualifier) -> NDArray[np.float64]:
    """Selection mask of one qualifier for HSL triples.

    Per-axis mask is ``1 - smoothstep(range, range + falloff + eps, distance)``
    with circular hue distance; the result is the product of the three.

    :param hsl: HSL triples [..., 3], hue in [0, 1)
    :param qualifier: Qualifier with hue in degrees and sat/lum in percent
    :returns: Mask in [0, 1] with shape [...]
    """
    hue_dist = hue_distance(hsl[..., 0], (qualifier.src_hue / 360.0) % 1.0)
    sat_dist = np.abs(hsl[..., 1] - qualifier.src_sat / 100.0)
    lum_dist = np.abs(hsl[..., 2] - qualifier.src_lum / 100.0)

    def axis_mask(dist, rng, falloff):
        return 1.0 - smoothstep(rng, rng + falloff + CURVE_EPSILON, dist)

    return (
        axis_mask(hue_dist, qualifier.hue_range / 360.0, qualifier.hue_falloff / 360.0)
        * axis_mask(sat_dist, qualifier.sat_range / 100.0, qualifier.sat_falloff / 100.0)
        * axis_mask(lum_dist, qualifier.lum_range / 100.0, qualifier.lum_falloff / 100.0)
    )


def apply_point_colors(colors: Colors, qualifiers: tuple[PointColorQualifier, ...]) -> Colors:
    """Apply every active qualifier, all keyed against the incoming HSL.

    Hue shifts add up; saturation and lightness shifts multiply.
    """
    hsl = rgb_to_hsl(np.clip(colors, 0.0, 1.0))
    hue, sat, light = hsl[..., 0], hsl[..., 1], hsl[..., 2]

    hue_acc = np.zeros_like(hue)
    sat_mul = np.ones_like(hue)
    lum_mul = np.ones_like(hue)
    for qualifier in qualifiers:
        if qualifier.is_neutral():
            continue
        mask = qualifier_mask(hsl, qualifier)
        hue_acc += qualifier.hue_shift / 360.0 * mask
        sat_mul *= 1.0 + qualifier.sat_shift / 100.0 * mask
        lum_mul *= 1.0 + qualifier.lum_shift / 100.0 * mask * 0.5

    return hsl_to_rgb(
        np.stack(
            [
                fract(hue + hue_acc),
                np.clip(sat * sat_mul, 0.0, 1.0),
                np.clip(light * lum_mul, 0.0, 1.0),
            ],
            axis=-1,
        )
    )


def wheel_masks(
    luma: NDArray[np.float64], grading: ColorGrading
) -> tuple[NDArray, NDArray, NDArray]:
    """Shadow, midtone and highlight weights for a luma array.

    The midtone weight is ``1 - shadow - highlight`` and goes negative when
    the zones overlap strongly; it is left unclamped.
    """
    balance = np.clip(grading.balance / 100.0, -1.0, 1.0)
    overlap = np.clip(grading.blending / 100.0, 0.0, 1.0) * 0.5 + 0.01
    t1 = WHEEL_SHADOW_THRESHOLD + balance * 0.2
    t2 = WHEEL_HIGHLIGHT_THRESHOLD + balance * 0.2

    shadow = 1.0 - smoothstep(t1 - overlap, t1 + overlap, luma)
    highlight = smoothstep(t2 - overlap, t2 + overlap, luma)
    return shadow, 1.0 - shadow - highlight, highlight


def apply_color_grading(colors: Colors, grading: ColorGrading) -> Colors:
    """3-way wheels: per-zone tint and luma offset, floored at zero."""
    masks = wheel_masks(luminance(colors), grading)
    out = colors.copy()
    for zone, mask in zip(grading.zones(), masks, strict=True):
        if zone.is_neutral():
            continue
        tint = hsl_to_rgb(np.array([(zone.hue / 360.0) % 1.0, zone.saturation, 0.5])) - 0.5
        m = mask[..., None]
        out += tint * m
        out += zone.luminance * 0.2 * m
    return np.maximum(out, 0.0)


def apply_temperature_tint(colors: Colors, temperature: float, tint: float) -> Colors:
    gains = np.array([1.0 + temperature * 0.05, 1.0 + tint * 0.05, 1.0 - temperature * 0.05])
    return colors * gains


def apply_brightness(colors: Colors, brightness: float) -> Colors:
    return colors + brightness * 0.1


def apply_vibrance(colors: Colors, vibrance: float) -> Colors:
    """Saturation boost that fades out as the pixel's chroma rises."""
    chroma = colors.max(axis=-1) - colors.min(axis=-1)
    factor = (1.0 + vibrance * (1.0 - chroma))[..., None]
    return mix(luminance(colors)[..., None], colors, factor)


def apply_saturation(colors: Colors, saturation: float) -> Colors:
    return mix(luminance(colors)[..., None], colors, saturation)


def apply_lut(colors: Colors, lut, intensity: float) -> Colors:
    """Blend toward the LUT's mapping of the clamped color."""
    return mix(colors, lut.apply(np.clip(colors, 0.0, 1.0)), intensity)


def apply_curves(
    colors: Colors,
    master: NaturalCubicSpline,
    channels: tuple[NaturalCubicSpline, NaturalCubicSpline, NaturalCubicSpline],
) -> Colors:
    """Per-channel curve, then the master curve on each result."""
    out = np.empty_like(colors)
    for c, curve in enumerate(channels):
        value = np.clip(curve(np.clip(colors[..., c], 0.0, 1.0)), 0.0, 1.0)
        out[..., c] = np.clip(master(value), 0.0, 1.0)
    return out

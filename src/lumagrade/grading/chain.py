"""
The ordered grading operator chain.

``grade`` is a pure function of (colors, prepared parameters, optional UV and
image source). Both the raster and the bake evaluator call it, so a preview
pixel and an exported LUT entry go through exactly the same code.

Stage order and working space:

    1  TEXTURE          source sRGB  4-neighbour high-pass
    2  LINEARIZE        sRGB->linear gamma 2.2
    3  CALIBRATION      linear       primary hue/sat shifts, shadow tint
    4  EXPOSURE         linear       2^exposure
    5  CONTRAST         linear       pivot at 0.18
    6  TONAL_ZONES      linear       highlights/shadows/whites/blacks
    7  DEHAZE           linear
    8  CLARITY          linear
    9  HALATION         linear       8-tap ring
    10 ENCODE           linear->sRGB
    11 COLOR_MIXER      sRGB (HSL)   8 hue bands
    12 POINT_COLOR      sRGB (HSL)   qualifiers
    13 COLOR_GRADING    sRGB         3-way wheels
    14 TEMPERATURE_TINT sRGB
    15 BRIGHTNESS       sRGB
    16 VIBRANCE         sRGB
    17 SATURATION       sRGB
    18 VIGNETTE         sRGB         needs UV
    19 LUT              sRGB         trilinear 3D LUT
    20 TONE_MAP         sRGB->linear->sRGB
    21 CURVES           sRGB         channel curve then master curve
    22 GRAIN            sRGB         needs UV

Example:
    >>> prepared = prepare(GradingParams(exposure=1.0))
    >>> grade(np.array([0.5, 0.5, 0.5]), prepared)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

import numpy as np
from numpy.typing import ArrayLike, NDArray

from lumagrade.config.values import GradingParams, PointColorQualifier, ToneMapping
from lumagrade.curves.spline import NaturalCubicSpline
from lumagrade.grading import spatial, stages
from lumagrade.grading.tonemap import apply_tone_mapping
from lumagrade.lut.cube import CubeLUT, LUTParseError, parse_cube
from lumagrade.protocols import ImageSource
from lumagrade.shared.colorspace import linear_to_srgb, rgb_to_hsl, srgb_to_linear

logger = logging.getLogger(__name__)

DEHAZE_THRESHOLD = 0.01


class Stage(IntEnum):
    """Position of each operator in the chain."""

    TEXTURE = 1
    LINEARIZE = 2
    CALIBRATION = 3
    EXPOSURE = 4
    CONTRAST = 5
    TONAL_ZONES = 6
    DEHAZE = 7
    CLARITY = 8
    HALATION = 9
    ENCODE = 10
    COLOR_MIXER = 11
    POINT_COLOR = 12
    COLOR_GRADING = 13
    TEMPERATURE_TINT = 14
    BRIGHTNESS = 15
    VIBRANCE = 16
    SATURATION = 17
    VIGNETTE = 18
    LUT = 19
    TONE_MAP = 20
    CURVES = 21
    GRAIN = 22


@dataclass(frozen=True, eq=False)
class PreparedGrade:
    """Parameters with curves fitted and the LUT parsed, ready for ``grade``.

    Attributes:
        params: Source snapshot
        master: Luma/master curve
        channels: Red, green and blue curves
        lut: Parsed LUT, or None when absent, disabled or rejected
        lut_error: Parse failure reason when ``params.lut_text`` was rejected
    """

    params: GradingParams
    master: NaturalCubicSpline
    channels: tuple[NaturalCubicSpline, NaturalCubicSpline, NaturalCubicSpline]
    lut: CubeLUT | None = None
    lut_error: str | None = None

    @property
    def curves_active(self) -> bool:
        return not self.params.curves.is_neutral()


def prepare(params: GradingParams, use_lut: bool = True) -> PreparedGrade:
    """Fit curves and parse the LUT of a snapshot.

    A malformed LUT never raises here: the failure is logged, recorded in
    ``lut_error``, and the LUT stage is skipped.

    :param params: Grading snapshot
    :param use_lut: Set False to disable the LUT stage (used when baking)
    :returns: PreparedGrade
    """
    curves = params.curves
    lut = None
    lut_error = None
    if use_lut and params.lut_text is not None:
        try:
            lut = parse_cube(params.lut_text)
        except LUTParseError as e:
            lut_error = e.reason
            logger.warning("[Grade] LUT disabled: %s", e.reason)

    return PreparedGrade(
        params=params,
        master=NaturalCubicSpline(curves.l),
        channels=tuple(NaturalCubicSpline(points) for points in (curves.r, curves.g, curves.b)),
        lut=lut,
        lut_error=lut_error,
    )


@dataclass(frozen=True, eq=False)
class _Context:
    prepared: PreparedGrade
    uv: NDArray[np.float64] | None
    source: ImageSource | None
    resolution: tuple[int, int] | None
    ring_fallback: NDArray[np.float64]

    @property
    def aspect(self) -> float:
        if self.resolution is None:
            return 1.0
        return self.resolution[0] / max(self.resolution[1], 1)


# ============================================================================
# Stage adapters (skip when the controlling parameters are neutral)
# ============================================================================

StageFn = Callable[[NDArray[np.float64], _Context], NDArray[np.float64]]


def _texture(c, ctx):
    p = ctx.prepared.params
    return spatial.apply_texture(c, ctx.uv, ctx.source, p.texture + p.sharpness, ctx.resolution)


def _calibration(c, ctx):
    calibration = ctx.prepared.params.calibration
    return c if calibration.is_neutral() else stages.apply_calibration(c, calibration)


def _exposure(c, ctx):
    exposure = ctx.prepared.params.exposure
    return c if exposure == 0.0 else stages.apply_exposure(c, exposure)


def _contrast(c, ctx):
    contrast = ctx.prepared.params.contrast
    return c if contrast == 1.0 else stages.apply_contrast(c, contrast)


def _tonal_zones(c, ctx):
    p = ctx.prepared.params
    if p.highlights == 0.0 and p.shadows == 0.0 and p.whites == 0.0 and p.blacks == 0.0:
        return c
    return stages.apply_tonal_zones(c, p.highlights, p.shadows, p.whites, p.blacks)


def _dehaze(c, ctx):
    dehaze = ctx.prepared.params.dehaze
    return c if abs(dehaze) <= DEHAZE_THRESHOLD else stages.apply_dehaze(c, dehaze)


def _clarity(c, ctx):
    clarity = ctx.prepared.params.clarity
    return c if clarity == 0.0 else stages.apply_clarity(c, clarity)


def _halation(c, ctx):
    amount = ctx.prepared.params.halation
    if amount <= 0.0:
        return c
    return spatial.apply_halation(c, ctx.ring_fallback, ctx.uv, ctx.source, amount, ctx.aspect)


def _color_mixer(c, ctx):
    mixer = ctx.prepared.params.color_mixer
    return c if mixer.is_neutral() else stages.apply_color_mixer(c, mixer)


def _point_color(c, ctx):
    qualifiers = ctx.prepared.params.point_colors
    if all(q.is_neutral() for q in qualifiers):
        return c
    return stages.apply_point_colors(c, qualifiers)


def _color_grading(c, ctx):
    grading = ctx.prepared.params.color_grading
    return c if grading.is_neutral() else stages.apply_color_grading(c, grading)


def _temperature_tint(c, ctx):
    p = ctx.prepared.params
    if p.temperature == 0.0 and p.tint == 0.0:
        return c
    return stages.apply_temperature_tint(c, p.temperature, p.tint)


def _brightness(c, ctx):
    brightness = ctx.prepared.params.brightness
    return c if brightness == 0.0 else stages.apply_brightness(c, brightness)


def _vibrance(c, ctx):
    vibrance = ctx.prepared.params.vibrance
    return c if vibrance == 0.0 else stages.apply_vibrance(c, vibrance)


def _saturation(c, ctx):
    saturation = ctx.prepared.params.saturation
    return c if saturation == 1.0 else stages.apply_saturation(c, saturation)


def _vignette(c, ctx):
    vignette = ctx.prepared.params.vignette
    if ctx.uv is None or vignette.is_neutral():
        return c
    return spatial.apply_vignette(c, ctx.uv, vignette, ctx.aspect)


def _lut(c, ctx):
    lut = ctx.prepared.lut
    return c if lut is None else stages.apply_lut(c, lut, ctx.prepared.params.lut_intensity)


def _tone_map(c, ctx):
    p = ctx.prepared.params
    # STANDARD clips linear light to [0, 1], which is a display-space clip
    if p.tone_mapping is ToneMapping.STANDARD:
        return np.clip(c, 0.0, 1.0)
    return apply_tone_mapping(c, p.tone_mapping, p.tone_strength)


def _curves(c, ctx):
    prepared = ctx.prepared
    if not prepared.curves_active:
        return c
    return stages.apply_curves(c, prepared.master, prepared.channels)


def _grain(c, ctx):
    grain = ctx.prepared.params.grain
    if ctx.uv is None or grain.is_neutral():
        return c
    # grain is sized in pixels
    if ctx.resolution is None:
        return c
    return spatial.apply_grain(c, ctx.uv, grain, ctx.resolution)


CHAIN: tuple[tuple[Stage, StageFn], ...] = (
    (Stage.TEXTURE, _texture),
    (Stage.LINEARIZE, lambda c, ctx: srgb_to_linear(c)),
    (Stage.CALIBRATION, _calibration),
    (Stage.EXPOSURE, _exposure),
    (Stage.CONTRAST, _contrast),
    (Stage.TONAL_ZONES, _tonal_zones),
    (Stage.DEHAZE, _dehaze),
    (Stage.CLARITY, _clarity),
    (Stage.HALATION, _halation),
    (Stage.ENCODE, lambda c, ctx: linear_to_srgb(c)),
    (Stage.COLOR_MIXER, _color_mixer),
    (Stage.POINT_COLOR, _point_color),
    (Stage.COLOR_GRADING, _color_grading),
    (Stage.TEMPERATURE_TINT, _temperature_tint),
    (Stage.BRIGHTNESS, _brightness),
    (Stage.VIBRANCE, _vibrance),
    (Stage.SATURATION, _saturation),
    (Stage.VIGNETTE, _vignette),
    (Stage.LUT, _lut),
    (Stage.TONE_MAP, _tone_map),
    (Stage.CURVES, _curves),
    (Stage.GRAIN, _grain),
)


# ============================================================================
# Public API
# ============================================================================


def _as_prepared(grading: PreparedGrade | GradingParams) -> PreparedGrade:
    return grading if isinstance(grading, PreparedGrade) else prepare(grading)


def _run(
    colors: ArrayLike,
    grading: PreparedGrade | GradingParams,
    uv: ArrayLike | None,
    source: ImageSource | None,
    resolution: tuple[int, int] | None,
    until: Stage | None,
) -> NDArray[np.float64]:
    colors = np.asarray(colors, dtype=np.float64)
    if colors.shape[-1:] != (3,):
        raise ValueError(f"colors must have a trailing axis of 3, got shape {colors.shape}")
    if uv is not None:
        uv = np.asarray(uv, dtype=np.float64)
        if uv.shape != colors.shape[:-1] + (2,):
            raise ValueError(f"uv shape {uv.shape} does not match colors shape {colors.shape}")
    if resolution is None and source is not None:
        resolution = (source.width, source.height)

    ctx = _Context(
        prepared=_as_prepared(grading),
        uv=uv,
        source=source,
        resolution=resolution,
        ring_fallback=srgb_to_linear(np.clip(colors, 0.0, 1.0)),
    )

    c = colors
    for stage, fn in CHAIN:
        if until is not None and stage >= until:
            return c
        c = fn(c, ctx)
    return np.clip(c, 0.0, 1.0)


def grade(
    colors: ArrayLike,
    grading: PreparedGrade | GradingParams,
    uv: ArrayLike | None = None,
    source: ImageSource | None = None,
    resolution: tuple[int, int] | None = None,
) -> NDArray[np.float64]:
    """Run the full operator chain.

    :param colors: Source sRGB colors [..., 3]
    :param grading: PreparedGrade, or GradingParams to prepare on the fly
    :param uv: Normalized pixel coordinates [..., 2]; UV-dependent stages
        (vignette, grain) are skipped when None
    :param source: Image for neighbour sampling (texture, halation); without
        it the neighbourhood is uniform
    :param resolution: (width, height) in pixels; defaults to the source size
    :returns: Graded sRGB colors in [0, 1], same shape as ``colors``
    """
    return _run(colors, grading, uv, source, resolution, until=None)


def grade_until(
    colors: ArrayLike,
    grading: PreparedGrade | GradingParams,
    stage: Stage,
    uv: ArrayLike | None = None,
    source: ImageSource | None = None,
    resolution: tuple[int, int] | None = None,
) -> NDArray[np.float64]:
    """Run the chain up to, but not including, ``stage``.

    The result is in the working space of ``stage`` and is not clamped.
    """
    return _run(colors, grading, uv, source, resolution, until=stage)


def pre_point_color(
    colors: ArrayLike,
    grading: PreparedGrade | GradingParams,
    uv: ArrayLike | None = None,
    source: ImageSource | None = None,
    resolution: tuple[int, int] | None = None,
) -> NDArray[np.float64]:
    """Colors as the point color stage sees them (for eyedropper sampling)."""
    pre = grade_until(colors, grading, Stage.POINT_COLOR, uv, source, resolution)
    return np.clip(pre, 0.0, 1.0)


def sample_qualifier(rgb: ArrayLike, grading: PreparedGrade | GradingParams) -> PointColorQualifier:
    """Build a qualifier keyed on a picked source color.

    The picked color is first run through the stages before point color, so
    the key matches what that stage sees. Ranges and falloffs take their
    defaults.

    :param rgb: Picked source sRGB color [3]
    :param grading: Current grading
    :returns: New active PointColorQualifier with zero shifts
    """
    picked = pre_point_color(np.asarray(rgb, dtype=np.float64).reshape(3), grading)
    hue, sat, light = rgb_to_hsl(picked)
    qualifier = PointColorQualifier(
        src_hue=float(hue) * 360.0,
        src_sat=float(sat) * 100.0,
        src_lum=float(light) * 100.0,
    )
    logger.debug(
        "[Grade] Sampled qualifier h=%.1f s=%.1f l=%.1f",
        qualifier.src_hue,
        qualifier.src_sat,
        qualifier.src_lum,
    )
    return qualifier


def point_color_mask(
    colors: ArrayLike,
    grading: PreparedGrade | GradingParams,
    index: int,
    uv: ArrayLike | None = None,
    source: ImageSource | None = None,
    resolution: tuple[int, int] | None = None,
) -> NDArray[np.float64]:
    """Selection mask of one qualifier, for mask visualization.

    :param colors: Source sRGB colors [..., 3]
    :param grading: Current grading
    :param index: Qualifier index
    :returns: Mask in [0, 1] with shape ``colors.shape[:-1]``
    :raises IndexError: If no qualifier has that index
    """
    prepared = _as_prepared(grading)
    qualifier = prepared.params.point_colors[index]
    pre = pre_point_color(colors, prepared, uv, source, resolution)
    return stages.qualifier_mask(rgb_to_hsl(pre), qualifier)

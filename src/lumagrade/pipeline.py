"""
Pipeline: fluent grading builder with lazy compilation.

Every setter derives a new GradingParams snapshot, so a snapshot handed to a
render or bake is never mutated afterwards. ``compile`` fits the curves and
parses the LUT once; it is skipped while the pipeline is clean.

Example:
    >>> pipe = (Pipeline()
    ...     .exposure(0.3)
    ...     .contrast(1.15)
    ...     .wheel("shadows", hue=200, saturation=0.3)
    ...     .tone_mapping("filmic")
    ...     .curve("l", [(0, 0), (0.25, 0.2), (0.75, 0.8), (1, 1)]))
    >>> graded = pipe(frame)
    >>> cube_text = pipe.bake(size=33)
"""

from __future__ import annotations

import dataclasses
import logging
from copy import deepcopy
from pathlib import Path
from typing import Self

import numpy as np
from numpy.typing import ArrayLike, NDArray

from lumagrade.config import CONFIG
from lumagrade.config.presets import get_preset
from lumagrade.config.values import (
    GradingParams,
    Grain,
    MixerBand,
    PointColorQualifier,
    ToneMapping,
    Vignette,
    WheelZone,
)
from lumagrade.constants import DEFAULT_LUT_SIZE, DEFAULT_LUT_TITLE
from lumagrade.evaluators.bake import bake_cube
from lumagrade.evaluators.raster import ArrayImageSource, RasterEvaluator, ViewOptions
from lumagrade.grading.chain import PreparedGrade, prepare
from lumagrade.lut.cube import CubeLUT
from lumagrade.protocols import ImageSource

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Fluent builder around a GradingParams snapshot.

    Scalar setters clamp their value to the control's range. Setters replace
    rather than stack: ``exposure(0.5).exposure(1.0)`` leaves exposure at 1.0.
    """

    __slots__ = ("_params", "_prepared", "_is_dirty")

    def __init__(self, params: GradingParams | None = None):
        """
        :param params: Starting snapshot (defaults to the neutral grade)
        """
        self._params = params if params is not None else GradingParams()
        self._prepared: PreparedGrade | None = None
        self._is_dirty = True

    @classmethod
    def from_preset(cls, name: str) -> Self:
        return cls(get_preset(name))

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def params(self) -> GradingParams:
        """Current snapshot."""
        return self._params

    @property
    def is_compiled(self) -> bool:
        return self._prepared is not None and not self._is_dirty

    @property
    def lut_error(self) -> str | None:
        """Why the loaded LUT was rejected, after compilation."""
        return self.compile()._prepared.lut_error

    def _update(self, **changes) -> Self:
        self._params = self._params.replace(**changes)
        self._is_dirty = True
        return self

    # ========================================================================
    # Tone
    # ========================================================================

    def exposure(self, stops: float) -> Self:
        """Set exposure in stops (-3..3)."""
        return self._update(exposure=CONFIG.tone.exposure.validate(stops))

    def contrast(self, value: float) -> Self:
        """Set contrast around mid-grey (0..2, 1 = neutral)."""
        return self._update(contrast=CONFIG.tone.contrast.validate(value))

    def tonal_zones(
        self,
        highlights: float = 0.0,
        shadows: float = 0.0,
        whites: float = 0.0,
        blacks: float = 0.0,
    ) -> Self:
        """Set highlight/shadow gains, white gain and black offset (each -1..1)."""
        tone = CONFIG.tone
        return self._update(
            highlights=tone.highlights.validate(highlights),
            shadows=tone.shadows.validate(shadows),
            whites=tone.whites.validate(whites),
            blacks=tone.blacks.validate(blacks),
        )

    def saturation(self, value: float) -> Self:
        return self._update(saturation=CONFIG.tone.saturation.validate(value))

    def vibrance(self, value: float) -> Self:
        return self._update(vibrance=CONFIG.tone.vibrance.validate(value))

    def brightness(self, value: float) -> Self:
        return self._update(brightness=CONFIG.tone.brightness.validate(value))

    def white_balance(self, temperature: float = 0.0, tint: float = 0.0) -> Self:
        """Set temperature (blue/amber) and tint (green/magenta)."""
        return self._update(
            temperature=CONFIG.tone.temperature.validate(temperature),
            tint=CONFIG.tone.tint.validate(tint),
        )

    def tone_mapping(self, mode: ToneMapping | str, strength: float = 1.0) -> Self:
        """Select the tone mapping operator.

        :param mode: ToneMapping member or its name ("filmic", "agx", ...)
        :param strength: Blend toward the mapped result (0..1)
        :raises ValueError: If the mode name is unknown
        """
        return self._update(
            tone_mapping=ToneMapping.coerce(mode),
            tone_strength=CONFIG.tone.tone_strength.validate(strength),
        )

    # ========================================================================
    # Presence and effects
    # ========================================================================

    def presence(
        self,
        texture: float = 0.0,
        clarity: float = 0.0,
        dehaze: float = 0.0,
        sharpness: float = 0.0,
    ) -> Self:
        fx = CONFIG.effects
        return self._update(
            texture=fx.texture.validate(texture),
            clarity=fx.clarity.validate(clarity),
            dehaze=fx.dehaze.validate(dehaze),
            sharpness=fx.sharpness.validate(sharpness),
        )

    def halation(self, amount: float) -> Self:
        return self._update(halation=CONFIG.effects.halation.validate(amount))

    def vignette(
        self,
        amount: float,
        midpoint: float = 0.5,
        roundness: float = 0.0,
        feather: float = 0.5,
    ) -> Self:
        vignette = Vignette(amount=amount, midpoint=midpoint, roundness=roundness, feather=feather)
        return self._update(vignette=vignette.clamp())

    def grain(self, amount: float, size: float = 1.0, roughness: float = 0.5) -> Self:
        return self._update(grain=Grain(amount=amount, size=size, roughness=roughness).clamp())

    def lens(self, distortion: float = 0.0, chromatic_aberration: float = 0.0) -> Self:
        """Set the lens pre-step (preview only, never baked)."""
        fx = CONFIG.effects
        return self._update(
            distortion=fx.distortion.validate(distortion),
            chromatic_aberration=fx.chromatic_aberration.validate(chromatic_aberration),
        )

    # ========================================================================
    # Creative color
    # ========================================================================

    def wheel(
        self, zone: str, hue: float = 0.0, saturation: float = 0.0, luminance: float = 0.0
    ) -> Self:
        """Set one color wheel.

        :param zone: "shadows", "midtones" or "highlights"
        :param hue: Tint hue in degrees
        :param saturation: Tint strength (0..1)
        :param luminance: Luma offset (-1..1)
        :raises ValueError: If zone is unknown
        """
        if zone not in ("shadows", "midtones", "highlights"):
            raise ValueError(f"unknown wheel zone {zone!r}")
        wheel = WheelZone(hue=hue, saturation=saturation, luminance=luminance).clamp()
        grading = dataclasses.replace(self._params.color_grading, **{zone: wheel})
        return self._update(color_grading=grading)

    def wheel_balance(self, blending: float = 50.0, balance: float = 0.0) -> Self:
        grading = dataclasses.replace(
            self._params.color_grading, blending=blending, balance=balance
        ).clamp()
        return self._update(color_grading=grading)

    def mixer(
        self, band: str, hue: float = 0.0, saturation: float = 0.0, luminance: float = 0.0
    ) -> Self:
        """Set one color mixer band (red, orange, yellow, green, aqua, blue, purple, magenta).

        :raises TypeError: If band is not a mixer band name
        """
        value = MixerBand(hue=hue, saturation=saturation, luminance=luminance).clamp()
        mixer = dataclasses.replace(self._params.color_mixer, **{band: value})
        return self._update(color_mixer=mixer)

    def point_color(self, qualifier: PointColorQualifier) -> Self:
        """Append a point color qualifier.

        :raises ValueError: If the maximum number of qualifiers is reached
        """
        return self._update(point_colors=self._params.point_colors + (qualifier.clamp(),))

    def curve(self, channel: str, points: ArrayLike) -> Self:
        """Replace one curve.

        :param channel: "l" (master), "r", "g" or "b"
        :param points: Control points as (x, y) pairs
        :raises ValueError: If the channel is unknown or fewer than two points are given
        """
        return self._update(curves=self._params.curves.with_channel(channel, points))

    def lut(self, lut: str | Path | CubeLUT | None, intensity: float = 1.0) -> Self:
        """Load a 3D LUT.

        A malformed LUT is not rejected here; it is disabled at compile time
        and the reason is exposed as ``lut_error``.

        A ``str`` is always read as ``.cube`` text; pass a ``Path`` to load a file.

        :param lut: ``.cube`` text, a ``Path`` to a ``.cube`` file, a CubeLUT, or None to clear
        :param intensity: Blend amount (0..1)
        """
        if isinstance(lut, CubeLUT):
            text = lut.to_text()
        elif isinstance(lut, Path):
            text = lut.read_text(encoding="utf-8")
        else:
            text = lut
        return self._update(
            lut_text=text, lut_intensity=CONFIG.effects.lut_intensity.validate(intensity)
        )

    def preset(self, name: str) -> Self:
        """Replace the whole grade with a built-in look."""
        self._params = get_preset(name)
        self._is_dirty = True
        return self

    # ========================================================================
    # Compilation and application
    # ========================================================================

    def compile(self) -> Self:
        """Fit curves and parse the LUT of the current snapshot.

        :returns: Self for method chaining
        """
        if self.is_compiled:
            logger.debug("[Pipeline] Already compiled, skipping")
            return self

        self._prepared = prepare(self._params)
        self._is_dirty = False
        logger.info(
            "[Pipeline] Compiled (curves=%s, lut=%s)",
            self._prepared.curves_active,
            self._prepared.lut is not None,
        )
        return self

    def __call__(
        self, image: ImageSource | ArrayLike, view: ViewOptions | None = None
    ) -> NDArray[np.float64]:
        """Grade an image.

        :param image: ImageSource, or an ``[H, W, 3]`` array
        :param view: Display composition (split, bypass, false color)
        :returns: Graded frame [H, W, 3]
        """
        source = image if isinstance(image, ImageSource) else ArrayImageSource(image)
        return RasterEvaluator(source).render(self.compile()._prepared, view)

    def bake(
        self,
        size: int = DEFAULT_LUT_SIZE,
        title: str = DEFAULT_LUT_TITLE,
        workers: int | None = None,
    ) -> str:
        """Export the current grade as ``.cube`` text."""
        return bake_cube(self._params, size=size, title=title, workers=workers)

    def reset(self) -> Self:
        """Return to the neutral grade."""
        self._params = GradingParams()
        self._prepared = None
        self._is_dirty = True
        logger.debug("[Pipeline] Reset to defaults")
        return self

    def copy(self) -> Self:
        return deepcopy(self)

    def __repr__(self) -> str:
        state = "compiled" if self.is_compiled else "dirty"
        return f"Pipeline({state}, neutral={self._params.is_neutral()})"

"""Grading parameter value dataclasses.

A ``GradingParams`` is an immutable snapshot of every control of the grading
panel. The application edits it with ``replace`` (which returns a new
snapshot) and hands the whole value to an evaluator; nothing in the chain
keeps state between evaluations.

Example:
    >>> params = GradingParams(exposure=0.5, saturation=1.2)
    >>> warmer = params.replace(temperature=0.4)
    >>> warmer.is_neutral()
    False
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Self

from lumagrade.config.config import CONFIG
from lumagrade.constants import MAX_POINT_COLORS, MIXER_BAND_NAMES
from lumagrade.curves.editing import normalize_curve
from lumagrade.curves.spline import IDENTITY_CURVE, Point


class ToneMapping(str, Enum):
    """Display transform applied at the tone-map stage."""

    STANDARD = "standard"
    FILMIC = "filmic"
    AGX = "agx"
    SOFT = "soft"
    NEUTRAL = "neutral"

    @classmethod
    def coerce(cls, value: ToneMapping | str) -> ToneMapping:
        """Accept enum members or their case-insensitive names.

        :raises ValueError: If the name is unknown
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown tone mapping {value!r}, expected one of: {valid}") from None


def _clamped(obj: Any, **specs) -> Any:
    """Return ``obj`` with each named field clamped by its OperationSpec."""
    changes = {name: spec.validate(getattr(obj, name)) for name, spec in specs.items()}
    return dataclasses.replace(obj, **changes)


@dataclass(frozen=True)
class Vignette:
    """Radial edge darkening."""

    amount: float = 0.0
    midpoint: float = 0.5
    roundness: float = 0.0
    feather: float = 0.5

    def clamp(self) -> Vignette:
        fx = CONFIG.effects
        return _clamped(
            self,
            amount=fx.vignette_amount,
            midpoint=fx.vignette_midpoint,
            roundness=fx.vignette_roundness,
            feather=fx.vignette_feather,
        )

    def is_neutral(self) -> bool:
        return self.amount <= 0.0


@dataclass(frozen=True)
class Grain:
    """Film grain. ``roughness`` is carried but not consumed by the noise."""

    amount: float = 0.0
    size: float = 1.0
    roughness: float = 0.5

    def clamp(self) -> Grain:
        fx = CONFIG.effects
        return _clamped(
            self, amount=fx.grain_amount, size=fx.grain_size, roughness=fx.grain_roughness
        )

    def is_neutral(self) -> bool:
        return self.amount <= 0.0


@dataclass(frozen=True)
class WheelZone:
    """One zone of the 3-way color wheels.

    Attributes:
        hue: Tint hue in degrees [0, 360)
        saturation: Tint strength in [0, 1]
        luminance: Luma offset in [-1, 1]
    """

    hue: float = 0.0
    saturation: float = 0.0
    luminance: float = 0.0

    def clamp(self) -> WheelZone:
        cr = CONFIG.creative
        return WheelZone(
            hue=float(self.hue) % 360.0,
            saturation=cr.wheel_saturation.validate(self.saturation),
            luminance=cr.wheel_luminance.validate(self.luminance),
        )

    def is_neutral(self) -> bool:
        return self.saturation == 0.0 and self.luminance == 0.0


@dataclass(frozen=True)
class ColorGrading:
    """Shadow/midtone/highlight wheels split by luma thresholds."""

    shadows: WheelZone = WheelZone()
    midtones: WheelZone = WheelZone()
    highlights: WheelZone = WheelZone()
    blending: float = 50.0
    balance: float = 0.0

    def zones(self) -> tuple[WheelZone, WheelZone, WheelZone]:
        return (self.shadows, self.midtones, self.highlights)

    def clamp(self) -> ColorGrading:
        cr = CONFIG.creative
        return ColorGrading(
            shadows=self.shadows.clamp(),
            midtones=self.midtones.clamp(),
            highlights=self.highlights.clamp(),
            blending=cr.blending.validate(self.blending),
            balance=cr.balance.validate(self.balance),
        )

    def is_neutral(self) -> bool:
        return all(zone.is_neutral() for zone in self.zones())


@dataclass(frozen=True)
class MixerBand:
    """Shift for one hue band: hue in degrees, saturation/luminance in percent."""

    hue: float = 0.0
    saturation: float = 0.0
    luminance: float = 0.0

    def clamp(self) -> MixerBand:
        cr = CONFIG.creative
        return _clamped(
            self, hue=cr.mixer_hue, saturation=cr.mixer_saturation, luminance=cr.mixer_luminance
        )

    def is_neutral(self) -> bool:
        return self.hue == 0.0 and self.saturation == 0.0 and self.luminance == 0.0


@dataclass(frozen=True)
class ColorMixer:
    """Eight fixed hue bands, in the order of ``MIXER_BAND_NAMES``."""

    red: MixerBand = MixerBand()
    orange: MixerBand = MixerBand()
    yellow: MixerBand = MixerBand()
    green: MixerBand = MixerBand()
    aqua: MixerBand = MixerBand()
    blue: MixerBand = MixerBand()
    purple: MixerBand = MixerBand()
    magenta: MixerBand = MixerBand()

    def bands(self) -> tuple[MixerBand, ...]:
        return tuple(getattr(self, name) for name in MIXER_BAND_NAMES)

    def clamp(self) -> ColorMixer:
        return ColorMixer(**{name: getattr(self, name).clamp() for name in MIXER_BAND_NAMES})

    def is_neutral(self) -> bool:
        return all(band.is_neutral() for band in self.bands())


@dataclass(frozen=True)
class PrimaryCalibration:
    """Hue (degrees) and saturation (percent) shift of one primary."""

    hue: float = 0.0
    saturation: float = 0.0

    def clamp(self) -> PrimaryCalibration:
        cr = CONFIG.creative
        return _clamped(self, hue=cr.calibration_hue, saturation=cr.calibration_saturation)

    def is_neutral(self) -> bool:
        return self.hue == 0.0 and self.saturation == 0.0


@dataclass(frozen=True)
class Calibration:
    """Camera-calibration style primary shifts plus a shadow tint."""

    red: PrimaryCalibration = PrimaryCalibration()
    green: PrimaryCalibration = PrimaryCalibration()
    blue: PrimaryCalibration = PrimaryCalibration()
    shadow_tint: float = 0.0

    def primaries(self) -> tuple[PrimaryCalibration, PrimaryCalibration, PrimaryCalibration]:
        return (self.red, self.green, self.blue)

    def clamp(self) -> Calibration:
        return Calibration(
            red=self.red.clamp(),
            green=self.green.clamp(),
            blue=self.blue.clamp(),
            shadow_tint=CONFIG.creative.shadow_tint.validate(self.shadow_tint),
        )

    def is_neutral(self) -> bool:
        return all(p.is_neutral() for p in self.primaries()) and self.shadow_tint == 0.0


@dataclass(frozen=True)
class PointColorQualifier:
    """HSL-proximity key with independent per-axis range and falloff.

    Source and shift hues are in degrees; saturation and luminance values,
    ranges and falloffs are in percent.
    """

    src_hue: float = 0.0
    src_sat: float = 0.0
    src_lum: float = 0.0
    hue_shift: float = 0.0
    sat_shift: float = 0.0
    lum_shift: float = 0.0
    hue_range: float = 20.0
    hue_falloff: float = 10.0
    sat_range: float = 30.0
    sat_falloff: float = 10.0
    lum_range: float = 40.0
    lum_falloff: float = 20.0
    active: bool = True

    def clamp(self) -> PointColorQualifier:
        cr = CONFIG.creative
        clamped = _clamped(
            self,
            hue_shift=cr.point_hue_shift,
            sat_shift=cr.point_sat_shift,
            lum_shift=cr.point_lum_shift,
            hue_range=cr.point_hue_range,
            hue_falloff=cr.point_hue_falloff,
            sat_range=cr.point_sat_range,
            sat_falloff=cr.point_sat_falloff,
            lum_range=cr.point_lum_range,
            lum_falloff=cr.point_lum_falloff,
        )
        return dataclasses.replace(
            clamped,
            src_hue=float(self.src_hue) % 360.0,
            src_sat=max(0.0, min(100.0, float(self.src_sat))),
            src_lum=max(0.0, min(100.0, float(self.src_lum))),
        )

    def is_neutral(self) -> bool:
        """True when the qualifier cannot change any pixel."""
        if not self.active:
            return True
        return self.hue_shift == 0.0 and self.sat_shift == 0.0 and self.lum_shift == 0.0


@dataclass(frozen=True)
class Curves:
    """Tone curves for the luma/master channel and each of R, G, B."""

    l: tuple[Point, ...] = IDENTITY_CURVE  # noqa: E741
    r: tuple[Point, ...] = IDENTITY_CURVE
    g: tuple[Point, ...] = IDENTITY_CURVE
    b: tuple[Point, ...] = IDENTITY_CURVE

    CHANNELS = ("l", "r", "g", "b")

    def __post_init__(self):
        for channel in self.CHANNELS:
            object.__setattr__(self, channel, normalize_curve(getattr(self, channel)))

    def with_channel(self, channel: str, points) -> Curves:
        """Return a copy with one channel's points replaced.

        :raises ValueError: If channel is not one of l, r, g, b
        """
        if channel not in self.CHANNELS:
            raise ValueError(f"unknown curve channel {channel!r}, expected one of {self.CHANNELS}")
        return dataclasses.replace(self, **{channel: points})

    def is_neutral(self) -> bool:
        return all(getattr(self, channel) == IDENTITY_CURVE for channel in self.CHANNELS)


@dataclass(frozen=True)
class GradingParams:
    """Complete parameter snapshot for one evaluation.

    Scalars use the slider units of ``CONFIG`` (see ``lumagrade.config``).
    ``lut_text`` holds raw ``.cube`` text; parsing happens once in
    ``lumagrade.grading.prepare``.
    """

    # Global tone
    exposure: float = 0.0
    contrast: float = 1.0
    highlights: float = 0.0
    shadows: float = 0.0
    whites: float = 0.0
    blacks: float = 0.0
    saturation: float = 1.0
    vibrance: float = 0.0
    brightness: float = 0.0
    temperature: float = 0.0
    tint: float = 0.0

    # Presence
    texture: float = 0.0
    clarity: float = 0.0
    dehaze: float = 0.0

    # Effects
    vignette: Vignette = Vignette()
    grain: Grain = Grain()
    halation: float = 0.0
    chromatic_aberration: float = 0.0
    distortion: float = 0.0
    sharpness: float = 0.0

    # Tone mapping
    tone_mapping: ToneMapping = ToneMapping.STANDARD
    tone_strength: float = 1.0

    # Creative
    curves: Curves = Curves()
    color_grading: ColorGrading = ColorGrading()
    color_mixer: ColorMixer = ColorMixer()
    calibration: Calibration = Calibration()
    point_colors: tuple[PointColorQualifier, ...] = field(default_factory=tuple)

    # LUT
    lut_text: str | None = None
    lut_intensity: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "tone_mapping", ToneMapping.coerce(self.tone_mapping))
        qualifiers = tuple(self.point_colors)
        if len(qualifiers) > MAX_POINT_COLORS:
            raise ValueError(
                f"at most {MAX_POINT_COLORS} point color qualifiers allowed, got {len(qualifiers)}"
            )
        object.__setattr__(self, "point_colors", qualifiers)

    def replace(self, **changes) -> Self:
        """Return a new snapshot with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def add_point_color(self, qualifier: PointColorQualifier) -> GradingParams:
        """Append a qualifier.

        :raises ValueError: If the list already holds the maximum number of qualifiers
        """
        return self.replace(point_colors=self.point_colors + (qualifier,))

    def remove_point_color(self, index: int) -> GradingParams:
        qualifiers = list(self.point_colors)
        del qualifiers[index]
        return self.replace(point_colors=tuple(qualifiers))

    def clamp(self) -> GradingParams:
        """Clamp every control to its allowed range.

        :returns: New GradingParams with clamped values
        """
        tone = CONFIG.tone
        fx = CONFIG.effects
        clamped = _clamped(
            self,
            exposure=tone.exposure,
            contrast=tone.contrast,
            highlights=tone.highlights,
            shadows=tone.shadows,
            whites=tone.whites,
            blacks=tone.blacks,
            saturation=tone.saturation,
            vibrance=tone.vibrance,
            brightness=tone.brightness,
            temperature=tone.temperature,
            tint=tone.tint,
            tone_strength=tone.tone_strength,
            texture=fx.texture,
            clarity=fx.clarity,
            dehaze=fx.dehaze,
            halation=fx.halation,
            chromatic_aberration=fx.chromatic_aberration,
            distortion=fx.distortion,
            sharpness=fx.sharpness,
            lut_intensity=fx.lut_intensity,
        )
        return clamped.replace(
            vignette=self.vignette.clamp(),
            grain=self.grain.clamp(),
            color_grading=self.color_grading.clamp(),
            color_mixer=self.color_mixer.clamp(),
            calibration=self.calibration.clamp(),
            point_colors=tuple(q.clamp() for q in self.point_colors),
        )

    def is_neutral(self) -> bool:
        """Check if the snapshot leaves every color unchanged.

        :returns: True if grading with these values is the identity
        """
        tone = CONFIG.tone
        fx = CONFIG.effects
        scalars_neutral = all(
            spec.is_neutral(getattr(self, name))
            for name, spec in (
                *tone.get_all_specs().items(),
                ("texture", fx.texture),
                ("sharpness", fx.sharpness),
                ("clarity", fx.clarity),
                ("dehaze", fx.dehaze),
                ("halation", fx.halation),
                ("chromatic_aberration", fx.chromatic_aberration),
                ("distortion", fx.distortion),
            )
        )
        return (
            scalars_neutral
            and self.tone_mapping is ToneMapping.STANDARD
            and self.vignette.is_neutral()
            and self.grain.is_neutral()
            and self.curves.is_neutral()
            and self.color_grading.is_neutral()
            and self.color_mixer.is_neutral()
            and self.calibration.is_neutral()
            and all(q.is_neutral() for q in self.point_colors)
            and self.lut_text is None
        )

"""Creative color configuration: wheels, mixer, calibration, qualifiers."""

from __future__ import annotations

from dataclasses import dataclass, fields

from lumagrade.config.operations import OperationSpec


@dataclass(frozen=True)
class CreativeConfig:
    """Specifications for the selective and creative color controls.

    Hues are in degrees, saturation/luminance shifts in percent, except the
    3-way wheel zones which carry saturation in [0, 1] and luminance in [-1, 1].
    """

    wheel_hue: OperationSpec = OperationSpec(
        name="wheel_hue",
        min_value=0.0,
        max_value=360.0,
        default=0.0,
        neutral=0.0,
        unit="deg",
        description="Tint hue of a wheel zone",
    )

    wheel_saturation: OperationSpec = OperationSpec(
        name="wheel_saturation",
        min_value=0.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Tint strength of a wheel zone",
    )

    wheel_luminance: OperationSpec = OperationSpec(
        name="wheel_luminance",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Luma offset of a wheel zone (scaled by 0.2)",
    )

    blending: OperationSpec = OperationSpec(
        name="blending",
        min_value=0.0,
        max_value=100.0,
        default=50.0,
        neutral=50.0,
        unit="%",
        description="Overlap softness between wheel zones",
    )

    balance: OperationSpec = OperationSpec(
        name="balance",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        unit="%",
        description="Shift of the wheel zone thresholds",
    )

    mixer_hue: OperationSpec = OperationSpec(
        name="mixer_hue",
        min_value=-60.0,
        max_value=60.0,
        default=0.0,
        neutral=0.0,
        unit="deg",
        description="Hue rotation of a mixer band",
    )

    mixer_saturation: OperationSpec = OperationSpec(
        name="mixer_saturation",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        unit="%",
        description="Saturation scale of a mixer band",
    )

    mixer_luminance: OperationSpec = OperationSpec(
        name="mixer_luminance",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        unit="%",
        description="Lightness scale of a mixer band (halved)",
    )

    calibration_hue: OperationSpec = OperationSpec(
        name="calibration_hue",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        unit="deg",
        description="Hue rotation of a primary",
    )

    calibration_saturation: OperationSpec = OperationSpec(
        name="calibration_saturation",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        unit="%",
        description="Saturation scale of a primary",
    )

    shadow_tint: OperationSpec = OperationSpec(
        name="shadow_tint",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description="Green/magenta push in the shadows",
    )

    point_hue_shift: OperationSpec = OperationSpec(
        name="point_hue_shift",
        min_value=-180.0,
        max_value=180.0,
        default=0.0,
        neutral=0.0,
        unit="deg",
        description="Hue rotation of a qualifier",
    )

    point_sat_shift: OperationSpec = OperationSpec(
        name="point_sat_shift",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        unit="%",
        description="Saturation scale of a qualifier",
    )

    point_lum_shift: OperationSpec = OperationSpec(
        name="point_lum_shift",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        unit="%",
        description="Lightness scale of a qualifier (halved)",
    )

    point_hue_range: OperationSpec = OperationSpec(
        name="point_hue_range",
        min_value=0.0,
        max_value=180.0,
        default=20.0,
        neutral=20.0,
        unit="deg",
        description="Fully selected hue distance",
    )

    point_hue_falloff: OperationSpec = OperationSpec(
        name="point_hue_falloff",
        min_value=0.0,
        max_value=180.0,
        default=10.0,
        neutral=10.0,
        unit="deg",
        description="Soft edge beyond the hue range",
    )

    point_sat_range: OperationSpec = OperationSpec(
        name="point_sat_range",
        min_value=0.0,
        max_value=100.0,
        default=30.0,
        neutral=30.0,
        unit="%",
        description="Fully selected saturation distance",
    )

    point_sat_falloff: OperationSpec = OperationSpec(
        name="point_sat_falloff",
        min_value=0.0,
        max_value=100.0,
        default=10.0,
        neutral=10.0,
        unit="%",
        description="Soft edge beyond the saturation range",
    )

    point_lum_range: OperationSpec = OperationSpec(
        name="point_lum_range",
        min_value=0.0,
        max_value=100.0,
        default=40.0,
        neutral=40.0,
        unit="%",
        description="Fully selected lightness distance",
    )

    point_lum_falloff: OperationSpec = OperationSpec(
        name="point_lum_falloff",
        min_value=0.0,
        max_value=100.0,
        default=20.0,
        neutral=20.0,
        unit="%",
        description="Soft edge beyond the lightness range",
    )

    def get_spec(self, name: str) -> OperationSpec:
        """Get specification for an operation by name."""
        return getattr(self, name)

    def get_all_specs(self) -> dict[str, OperationSpec]:
        """Get all operation specifications keyed by name."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

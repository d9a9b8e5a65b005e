"""Presence, lens and film effect configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields

from lumagrade.config.operations import OperationSpec


@dataclass(frozen=True)
class EffectsConfig:
    """Specifications for presence, lens and film effects.

    Lens distortion and chromatic aberration use the panel's percent-like
    scale; the chain applies its own factors (0.01 and 0.002).
    """

    texture: OperationSpec = OperationSpec(
        name="texture",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="4-neighbour Laplacian high-pass strength",
    )

    sharpness: OperationSpec = OperationSpec(
        name="sharpness",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Added to texture for the high-pass stage",
    )

    clarity: OperationSpec = OperationSpec(
        name="clarity",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Global smoothstep contrast nudge",
    )

    dehaze: OperationSpec = OperationSpec(
        name="dehaze",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Push away from (positive) or toward (negative) the haze color",
    )

    halation: OperationSpec = OperationSpec(
        name="halation",
        min_value=0.0,
        max_value=2.0,
        default=0.0,
        neutral=0.0,
        description="Red-orange glow around highlights",
    )

    chromatic_aberration: OperationSpec = OperationSpec(
        name="chromatic_aberration",
        min_value=0.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description="Radial red/blue fetch offset",
    )

    distortion: OperationSpec = OperationSpec(
        name="distortion",
        min_value=-100.0,
        max_value=100.0,
        default=0.0,
        neutral=0.0,
        description="Radial UV warp: positive=pincushion, negative=barrel",
    )

    vignette_amount: OperationSpec = OperationSpec(
        name="vignette_amount",
        min_value=0.0,
        max_value=1.5,
        default=0.0,
        neutral=0.0,
        description="Edge darkening strength",
    )

    vignette_midpoint: OperationSpec = OperationSpec(
        name="vignette_midpoint",
        min_value=0.0,
        max_value=1.0,
        default=0.5,
        neutral=0.5,
        description="Inner radius as a fraction of 0.7",
    )

    vignette_roundness: OperationSpec = OperationSpec(
        name="vignette_roundness",
        min_value=0.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="0=follows frame shape, 1=circular",
    )

    vignette_feather: OperationSpec = OperationSpec(
        name="vignette_feather",
        min_value=0.0,
        max_value=1.0,
        default=0.5,
        neutral=0.5,
        description="Falloff width, floored at 0.01",
    )

    grain_amount: OperationSpec = OperationSpec(
        name="grain_amount",
        min_value=0.0,
        max_value=2.0,
        default=0.0,
        neutral=0.0,
        description="Film grain strength",
    )

    grain_size: OperationSpec = OperationSpec(
        name="grain_size",
        min_value=0.1,
        max_value=10.0,
        default=1.0,
        neutral=1.0,
        unit="px",
        description="Grain cell size in pixels",
    )

    grain_roughness: OperationSpec = OperationSpec(
        name="grain_roughness",
        min_value=0.0,
        max_value=1.0,
        default=0.5,
        neutral=0.5,
        description="Accepted for compatibility; not consumed by the noise",
    )

    lut_intensity: OperationSpec = OperationSpec(
        name="lut_intensity",
        min_value=0.0,
        max_value=1.0,
        default=1.0,
        neutral=1.0,
        description="Blend between the pre-LUT color and the LUT output",
    )

    def get_spec(self, name: str) -> OperationSpec:
        """Get specification for an operation by name."""
        return getattr(self, name)

    def get_all_specs(self) -> dict[str, OperationSpec]:
        """Get all operation specifications keyed by name."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

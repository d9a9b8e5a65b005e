"""Global tone operation configuration.

Ranges match the sliders of the grading panel; values outside them are
clamped by ``GradingParams.clamp``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from lumagrade.config.operations import OperationSpec


@dataclass(frozen=True)
class ToneConfig:
    """Specifications for exposure, tonal range and global color controls."""

    exposure: OperationSpec = OperationSpec(
        name="exposure",
        min_value=-3.0,
        max_value=3.0,
        default=0.0,
        neutral=0.0,
        unit="stops",
        description="Linear-light gain of 2^exposure",
    )

    contrast: OperationSpec = OperationSpec(
        name="contrast",
        min_value=0.0,
        max_value=2.0,
        default=1.0,
        neutral=1.0,
        description="Slope around the 0.18 mid-grey pivot",
    )

    highlights: OperationSpec = OperationSpec(
        name="highlights",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Gain on the upper luma zone",
    )

    shadows: OperationSpec = OperationSpec(
        name="shadows",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Gain on the lower luma zone",
    )

    whites: OperationSpec = OperationSpec(
        name="whites",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Global gain of 1 + whites * 0.5",
    )

    blacks: OperationSpec = OperationSpec(
        name="blacks",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Black level offset of blacks * 0.05",
    )

    saturation: OperationSpec = OperationSpec(
        name="saturation",
        min_value=0.0,
        max_value=2.0,
        default=1.0,
        neutral=1.0,
        description="Saturation: 0=grayscale, 1.0=no change",
    )

    vibrance: OperationSpec = OperationSpec(
        name="vibrance",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Saturation boost weighted toward muted colors",
    )

    brightness: OperationSpec = OperationSpec(
        name="brightness",
        min_value=-1.0,
        max_value=1.0,
        default=0.0,
        neutral=0.0,
        description="Display-space offset of brightness * 0.1",
    )

    temperature: OperationSpec = OperationSpec(
        name="temperature",
        min_value=-2.0,
        max_value=2.0,
        default=0.0,
        neutral=0.0,
        description="Color temperature: negative=cool/blue, positive=warm/orange",
    )

    tint: OperationSpec = OperationSpec(
        name="tint",
        min_value=-2.0,
        max_value=2.0,
        default=0.0,
        neutral=0.0,
        description="Green channel gain of 1 + tint * 0.05",
    )

    tone_strength: OperationSpec = OperationSpec(
        name="tone_strength",
        min_value=0.0,
        max_value=1.0,
        default=1.0,
        neutral=1.0,
        description="Blend between clamped input and the tone-mapped result",
    )

    def get_spec(self, name: str) -> OperationSpec:
        """Get specification for an operation by name.

        :param name: Operation name
        :returns: OperationSpec for the operation
        :raises AttributeError: If operation not found
        """
        return getattr(self, name)

    def get_all_specs(self) -> dict[str, OperationSpec]:
        """Get all operation specifications keyed by name."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

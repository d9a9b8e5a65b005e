"""Operation specifications for grading parameters.

This module defines the OperationSpec dataclass that specifies the allowed
range, default and neutral value of every scalar grading control.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OperationSpec:
    """Specification for a grading parameter.

    Attributes:
        name: Parameter name (e.g., "exposure", "blending")
        min_value: Minimum allowed value
        max_value: Maximum allowed value
        default: Default value when not specified
        neutral: Value that causes no change (identity)
        unit: Unit of the slider value ("stops", "%", "deg", "" for plain factors)
        description: Human-readable description
    """

    name: str
    min_value: float
    max_value: float
    default: float
    neutral: float
    unit: str = ""
    description: str = ""

    def validate(self, value: float) -> float:
        """Validate and clamp value to allowed range.

        :param value: Value to validate
        :returns: Clamped value within [min_value, max_value]
        :raises ValueError: If value is not a number
        """
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValueError(f"{self.name}: expected number, got {type(value).__name__}")

        return max(self.min_value, min(self.max_value, float(value)))

    def is_neutral(self, value: float, tolerance: float = 1e-6) -> bool:
        """Check if value is effectively neutral (no change).

        :param value: Value to check
        :param tolerance: Tolerance for floating point comparison
        :returns: True if value is within tolerance of neutral
        """
        return abs(value - self.neutral) < tolerance

    def normalize(self, value: float) -> float:
        """Map a value to [0, 1] across the allowed range (for slider widgets)."""
        span = self.max_value - self.min_value
        return (self.validate(value) - self.min_value) / span if span > 0 else 0.0

    def __repr__(self) -> str:
        unit = f" {self.unit}" if self.unit else ""
        return (
            f"OperationSpec({self.name}, "
            f"range=[{self.min_value}, {self.max_value}]{unit}, "
            f"default={self.default}, neutral={self.neutral})"
        )

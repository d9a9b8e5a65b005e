"""Unified lumagrade configuration.

This module provides a top-level configuration dataclass that contains
all parameter group configurations (tone, effects, creative) as
sub-attributes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lumagrade.config.creative import CreativeConfig
from lumagrade.config.effects import EffectsConfig
from lumagrade.config.tone import ToneConfig


@dataclass(frozen=True)
class LumaGradeConfig:
    """Top-level configuration containing all parameter specifications.

    Provides hierarchical access to all operation specifications:
        CONFIG.tone.exposure
        CONFIG.effects.vignette_amount
        CONFIG.creative.blending

    Attributes:
        tone: Global tone specifications
        effects: Presence, lens and film effect specifications
        creative: Wheel, mixer, calibration and qualifier specifications
    """

    tone: ToneConfig = ToneConfig()
    effects: EffectsConfig = EffectsConfig()
    creative: CreativeConfig = CreativeConfig()

    def get_all_specs(self) -> dict[str, dict[str, Any]]:
        """Get all operation specs organized by group.

        :return: Nested dictionary of all specifications
        """
        return {
            "tone": self.tone.get_all_specs(),
            "effects": self.effects.get_all_specs(),
            "creative": self.creative.get_all_specs(),
        }


# Main singleton instance
CONFIG = LumaGradeConfig()

TONE_CONFIG = CONFIG.tone
EFFECTS_CONFIG = CONFIG.effects
CREATIVE_CONFIG = CONFIG.creative

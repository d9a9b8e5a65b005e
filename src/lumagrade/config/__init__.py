"""Grading configuration: parameter specifications, value snapshots, presets.

Example:
    >>> from lumagrade.config import CONFIG, GradingParams
    >>> CONFIG.tone.exposure.validate(5.0)
    3.0
    >>> params = GradingParams(exposure=5.0).clamp()
"""

from lumagrade.config.config import (
    CONFIG,
    CREATIVE_CONFIG,
    EFFECTS_CONFIG,
    TONE_CONFIG,
    LumaGradeConfig,
)
from lumagrade.config.creative import CreativeConfig
from lumagrade.config.effects import EffectsConfig
from lumagrade.config.operations import OperationSpec
from lumagrade.config.tone import ToneConfig
from lumagrade.config.values import (
    Calibration,
    ColorGrading,
    ColorMixer,
    Curves,
    Grain,
    GradingParams,
    MixerBand,
    PointColorQualifier,
    PrimaryCalibration,
    ToneMapping,
    Vignette,
    WheelZone,
)

__all__ = [
    # Specifications
    "CONFIG",
    "TONE_CONFIG",
    "EFFECTS_CONFIG",
    "CREATIVE_CONFIG",
    "LumaGradeConfig",
    "ToneConfig",
    "EffectsConfig",
    "CreativeConfig",
    "OperationSpec",
    # Values
    "GradingParams",
    "ToneMapping",
    "Vignette",
    "Grain",
    "WheelZone",
    "ColorGrading",
    "MixerBand",
    "ColorMixer",
    "PrimaryCalibration",
    "Calibration",
    "PointColorQualifier",
    "Curves",
]

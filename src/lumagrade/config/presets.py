"""Preset library for grading looks.

Provides the built-in looks as ``GradingParams`` snapshots, with support for
converting snapshots to and from plain dicts and JSON files.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

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
from lumagrade.constants import MIXER_BAND_NAMES

logger = logging.getLogger(__name__)

# ============================================================================
# Built-in Looks
# ============================================================================

NEUTRAL = GradingParams()

TEAL_ORANGE = GradingParams(
    contrast=1.2,
    saturation=1.1,
    color_grading=ColorGrading(
        shadows=WheelZone(hue=190, saturation=0.4, luminance=-0.05),
        midtones=WheelZone(hue=35, saturation=0.1, luminance=0.0),
        highlights=WheelZone(hue=35, saturation=0.3, luminance=0.05),
        blending=60,
    ),
    calibration=Calibration(
        red=PrimaryCalibration(hue=20, saturation=-10),
        blue=PrimaryCalibration(hue=-30, saturation=20),
        shadow_tint=-10,
    ),
    tone_mapping=ToneMapping.FILMIC,
)

NOIR = GradingParams(
    saturation=0.0,
    contrast=1.4,
    exposure=0.1,
    texture=0.3,
    vignette=Vignette(amount=0.8),
    grain=Grain(amount=0.5, size=1.5, roughness=0.8),
    curves=Curves(l=((0.0, 0.0), (0.3, 0.2), (0.7, 0.8), (1.0, 1.0))),
    tone_mapping=ToneMapping.AGX,
)

VINTAGE_WARM = GradingParams(
    temperature=0.4,
    tint=0.1,
    contrast=0.9,
    highlights=-0.2,
    shadows=0.2,
    blacks=0.1,
    vignette=Vignette(amount=0.4),
    grain=Grain(amount=0.2, size=2.0),
    chromatic_aberration=20,
    distortion=-5,
    color_grading=ColorGrading(
        shadows=WheelZone(hue=240, saturation=0.2, luminance=0.05),
        midtones=WheelZone(hue=40, saturation=0.1, luminance=0.0),
        highlights=WheelZone(hue=50, saturation=0.2, luminance=-0.1),
    ),
)

CYBERPUNK = GradingParams(
    contrast=1.3,
    saturation=1.4,
    vibrance=0.5,
    shadows=-0.1,
    highlights=0.2,
    clarity=0.2,
    color_grading=ColorGrading(
        shadows=WheelZone(hue=260, saturation=0.6, luminance=-0.1),
        midtones=WheelZone(hue=300, saturation=0.2, luminance=0.0),
        highlights=WheelZone(hue=180, saturation=0.5, luminance=0.2),
    ),
    calibration=Calibration(
        red=PrimaryCalibration(hue=-20, saturation=20),
        green=PrimaryCalibration(hue=50, saturation=0),
        blue=PrimaryCalibration(hue=-50, saturation=50),
    ),
    tone_mapping=ToneMapping.AGX,
)

PRESETS: dict[str, GradingParams] = {
    "neutral": NEUTRAL,
    "teal_orange": TEAL_ORANGE,
    "noir": NOIR,
    "vintage_warm": VINTAGE_WARM,
    "cyberpunk": CYBERPUNK,
}


def get_preset(name: str) -> GradingParams:
    """Get a built-in look by name.

    :param name: Preset name (case-insensitive, spaces and dashes allowed)
    :returns: GradingParams preset
    :raises KeyError: If preset not found
    """
    key = name.lower().replace(" ", "_").replace("-", "_").replace("&", "").replace("__", "_")
    if key not in PRESETS:
        available = ", ".join(PRESETS.keys())
        raise KeyError(f"Unknown preset '{name}'. Available: {available}")
    return PRESETS[key]


# ============================================================================
# Dict/JSON Conversion
# ============================================================================


def _plain(value: Any) -> Any:
    if isinstance(value, ToneMapping):
        return value.value
    if isinstance(value, tuple | list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


def params_to_dict(params: GradingParams) -> dict:
    """Convert GradingParams to a JSON-compatible dictionary.

    :param params: GradingParams instance
    :returns: Nested dictionary representation
    """
    return _plain(dataclasses.asdict(params))


def _build(cls: type, d: dict | None) -> Any:
    """Construct a flat value dataclass from the known keys of ``d``."""
    if d is None:
        return cls()
    names = {f.name for f in dataclasses.fields(cls)}
    unknown = set(d) - names
    if unknown:
        logger.debug("[Presets] Ignoring unknown %s keys: %s", cls.__name__, sorted(unknown))
    return cls(**{k: v for k, v in d.items() if k in names})


def params_from_dict(d: dict) -> GradingParams:
    """Create GradingParams from a dictionary.

    Missing keys take their defaults, unknown keys are ignored.

    :param d: Dictionary as produced by ``params_to_dict``
    :returns: GradingParams instance

    Example:
        >>> params = params_from_dict({"exposure": 0.5, "tone_mapping": "agx"})
    """
    nested = {
        "vignette",
        "grain",
        "curves",
        "color_grading",
        "color_mixer",
        "calibration",
        "point_colors",
    }
    scalar_names = {f.name for f in dataclasses.fields(GradingParams)} - nested
    kwargs: dict[str, Any] = {k: v for k, v in d.items() if k in scalar_names}

    kwargs["vignette"] = _build(Vignette, d.get("vignette"))
    kwargs["grain"] = _build(Grain, d.get("grain"))

    curves = d.get("curves") or {}
    kwargs["curves"] = Curves(
        **{ch: tuple(tuple(p) for p in pts) for ch, pts in curves.items() if ch in Curves.CHANNELS}
    )

    grading = dict(d.get("color_grading") or {})
    for zone in ("shadows", "midtones", "highlights"):
        grading[zone] = _build(WheelZone, grading.get(zone))
    kwargs["color_grading"] = _build(ColorGrading, grading)

    mixer = d.get("color_mixer") or {}
    kwargs["color_mixer"] = ColorMixer(
        **{
            name: _build(MixerBand, band)
            for name, band in mixer.items()
            if name in MIXER_BAND_NAMES
        }
    )

    calibration = dict(d.get("calibration") or {})
    for primary in ("red", "green", "blue"):
        calibration[primary] = _build(PrimaryCalibration, calibration.get(primary))
    kwargs["calibration"] = _build(Calibration, calibration)

    qualifiers = d.get("point_colors") or ()
    kwargs["point_colors"] = tuple(_build(PointColorQualifier, q) for q in qualifiers)

    return GradingParams(**kwargs)


def load_params_json(path: str | Path) -> GradingParams:
    """Load GradingParams from JSON file.

    :param path: Path to JSON file
    :returns: GradingParams instance
    """
    with open(path) as f:
        d = json.load(f)
    return params_from_dict(d)


def save_params_json(params: GradingParams, path: str | Path) -> None:
    """Save GradingParams to JSON file.

    :param params: GradingParams instance
    :param path: Output path
    """
    with open(path, "w") as f:
        json.dump(params_to_dict(params), f, indent=2)

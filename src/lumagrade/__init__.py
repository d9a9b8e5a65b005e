"""
lumagrade - Non-destructive color grading

A 22-stage color grading operator chain evaluated two ways: per pixel for
preview, and on a regular RGB lattice for ``.cube`` 3D LUT export. Both
paths call the same pure chain, so a baked LUT reproduces the preview.

Features:
- Tone: exposure, contrast, highlights/shadows/whites/blacks, tone mapping
  (filmic, AgX, soft clip)
- Color: calibration, 8-band mixer, point color qualifiers, 3-way wheels,
  white balance, vibrance, saturation
- Curves: master and per-channel natural cubic splines
- LUTs: ``.cube`` parse, trilinear apply (Numba), multi-threaded bake
- Effects: texture, clarity, dehaze, halation, vignette, grain, lens
  distortion and chromatic aberration (preview only)

Example - Fluent pipeline:
    >>> from lumagrade import Pipeline
    >>>
    >>> pipe = Pipeline().exposure(0.3).contrast(1.2).tone_mapping("filmic")
    >>> graded = pipe(frame)           # [H, W, 3] float array in [0, 1]
    >>> text = pipe.bake(size=33)      # .cube text

Example - Snapshots and evaluators:
    >>> from lumagrade import GradingParams, RasterEvaluator, ArrayImageSource, bake_cube
    >>>
    >>> params = GradingParams(saturation=1.2, vibrance=0.3)
    >>> preview = RasterEvaluator(ArrayImageSource(frame)).evaluate(params)
    >>> cube = bake_cube(params, size=33, title="MyLook")
"""

__version__ = "0.1.0"

from lumagrade.config import (
    CONFIG,
    Calibration,
    ColorGrading,
    ColorMixer,
    Curves,
    Grain,
    GradingParams,
    MixerBand,
    OperationSpec,
    PointColorQualifier,
    PrimaryCalibration,
    ToneMapping,
    Vignette,
    WheelZone,
)
from lumagrade.config.presets import (
    CYBERPUNK,
    NEUTRAL,
    NOIR,
    PRESETS,
    TEAL_ORANGE,
    VINTAGE_WARM,
    get_preset,
    load_params_json,
    params_from_dict,
    params_to_dict,
    save_params_json,
)
from lumagrade.curves import NaturalCubicSpline, add_point, delete_point, move_point
from lumagrade.evaluators import (
    ArrayImageSource,
    BakeCancelled,
    BakeEvaluator,
    ComparisonMode,
    RasterEvaluator,
    ViewOptions,
    bake_cube,
)
from lumagrade.grading import (
    PreparedGrade,
    Stage,
    grade,
    point_color_mask,
    prepare,
    sample_qualifier,
)
from lumagrade.lut import CubeLUT, LUTParseError, format_cube, load_cube, parse_cube, save_cube
from lumagrade.pipeline import Pipeline
from lumagrade.protocols import Evaluator, ImageSource
from lumagrade.verification import ParityReport, ParityVerifier

__all__ = [
    "__version__",
    # Pipeline
    "Pipeline",
    # Parameters
    "CONFIG",
    "OperationSpec",
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
    # Presets
    "PRESETS",
    "NEUTRAL",
    "TEAL_ORANGE",
    "NOIR",
    "VINTAGE_WARM",
    "CYBERPUNK",
    "get_preset",
    "params_to_dict",
    "params_from_dict",
    "load_params_json",
    "save_params_json",
    # Curves
    "NaturalCubicSpline",
    "add_point",
    "delete_point",
    "move_point",
    # Chain
    "Stage",
    "PreparedGrade",
    "prepare",
    "grade",
    "sample_qualifier",
    "point_color_mask",
    # LUT
    "CubeLUT",
    "LUTParseError",
    "parse_cube",
    "format_cube",
    "load_cube",
    "save_cube",
    # Evaluators
    "ImageSource",
    "Evaluator",
    "ArrayImageSource",
    "RasterEvaluator",
    "ComparisonMode",
    "ViewOptions",
    "BakeEvaluator",
    "BakeCancelled",
    "bake_cube",
    # Verification
    "ParityVerifier",
    "ParityReport",
]

"""
Example: color grading and LUT export.

Demonstrates how to use lumagrade for:
- Building a grade with the fluent Pipeline
- Working with immutable GradingParams snapshots and presets
- Sampling a point color qualifier from a picked pixel
- Previewing with split view and false color
- Baking and re-applying a .cube LUT
- Checking that the baked LUT matches the preview
"""

import dataclasses
import logging
import tempfile
from pathlib import Path

import numpy as np

from lumagrade import (
    ArrayImageSource,
    ComparisonMode,
    GradingParams,
    Pipeline,
    RasterEvaluator,
    ViewOptions,
    get_preset,
    load_cube,
    load_params_json,
    sample_qualifier,
    save_params_json,
)
from lumagrade.verification import ParityVerifier

# Configure logging to see compile and bake statistics
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


def generate_sample_frame(width: int = 64, height: int = 36) -> np.ndarray:
    """Horizontal hue sweep over a vertical brightness ramp."""
    u = np.linspace(0.0, 1.0, width)
    v = np.linspace(0.0, 1.0, height)[:, None]
    frame = np.empty((height, width, 3))
    frame[..., 0] = 0.5 + 0.5 * np.cos(2 * np.pi * u)
    frame[..., 1] = 0.5 + 0.5 * np.cos(2 * np.pi * (u - 1 / 3))
    frame[..., 2] = 0.5 + 0.5 * np.cos(2 * np.pi * (u - 2 / 3))
    return frame * (0.2 + 0.8 * (1.0 - v))[..., None]


def example_1_pipeline(frame: np.ndarray):
    """Example 1: Fluent pipeline."""
    print("\n" + "=" * 70)
    print("EXAMPLE 1: Fluent Pipeline")
    print("=" * 70)

    pipe = (
        Pipeline()
        .exposure(0.3)
        .contrast(1.15)
        .tonal_zones(highlights=-0.2, shadows=0.15)
        .wheel("shadows", hue=200, saturation=0.3)
        .wheel("highlights", hue=35, saturation=0.2)
        .tone_mapping("filmic")
        .curve("l", [(0, 0), (0.25, 0.2), (0.75, 0.8), (1, 1)])
    )
    graded = pipe(frame)

    print(f"Input mean:  {frame.mean(axis=(0, 1)).round(3)}")
    print(f"Graded mean: {graded.mean(axis=(0, 1)).round(3)}")
    print(repr(pipe))
    return pipe


def example_2_snapshots(frame: np.ndarray):
    """Example 2: Immutable snapshots and presets."""
    print("\n" + "=" * 70)
    print("EXAMPLE 2: Snapshots and Presets")
    print("=" * 70)

    base = get_preset("teal orange")
    warmer = base.replace(temperature=0.5)
    print(f"Preset neutral? {base.is_neutral()}")
    print(f"Temperature {base.temperature} -> {warmer.temperature}")

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "look.json"
        save_params_json(warmer, path)
        print(f"Round trip equal: {load_params_json(path) == warmer}")

    evaluator = RasterEvaluator(ArrayImageSource(frame))
    for name in ("neutral", "noir", "cyberpunk"):
        out = evaluator.evaluate(get_preset(name))
        print(f"{name:10s} mean {out.mean():.3f}")


def example_3_point_color(frame: np.ndarray):
    """Example 3: Qualify a picked color and shift it."""
    print("\n" + "=" * 70)
    print("EXAMPLE 3: Point Color")
    print("=" * 70)

    params = GradingParams(contrast=1.1)
    picked = frame[10, 5]
    qualifier = sample_qualifier(picked, params)
    print(
        f"Picked {picked.round(3)} -> h={qualifier.src_hue:.1f} "
        f"s={qualifier.src_sat:.1f} l={qualifier.src_lum:.1f}"
    )

    shifted = dataclasses.replace(qualifier, hue_shift=40.0)
    graded = RasterEvaluator(ArrayImageSource(frame)).evaluate(params.add_point_color(shifted))
    print(f"Picked pixel after shift: {graded[10, 5].round(3)}")


def example_4_preview(frame: np.ndarray, pipe: Pipeline):
    """Example 4: Split view and false color."""
    print("\n" + "=" * 70)
    print("EXAMPLE 4: Preview Composition")
    print("=" * 70)

    split = pipe(frame, ViewOptions(comparison=ComparisonMode.SPLIT, split_position=0.5))
    exposure = pipe(frame, ViewOptions(false_color=True))
    print(f"Split left column equals source: {np.allclose(split[:, 0], frame[:, 0])}")
    print(f"False-color frame shape: {exposure.shape}")


def example_5_bake(frame: np.ndarray, pipe: Pipeline):
    """Example 5: Bake a .cube LUT and verify it."""
    print("\n" + "=" * 70)
    print("EXAMPLE 5: LUT Bake")
    print("=" * 70)

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "look.cube"
        path.write_text(pipe.bake(size=33, title="ExampleLook"))
        lut = load_cube(path)

    preview = pipe(frame)
    applied = lut.apply(frame)
    print(f"LUT vs preview max difference: {np.abs(preview - applied).max():.4f}")

    report = ParityVerifier().compare(pipe.params, size=9)
    print(f"Parity: passed={report.passed} max_error={report.max_abs_error:.2e}")


if __name__ == "__main__":
    frame = generate_sample_frame()
    pipe = example_1_pipeline(frame)
    example_2_snapshots(frame)
    example_3_point_color(frame)
    example_4_preview(frame, pipe)
    example_5_bake(frame, pipe)

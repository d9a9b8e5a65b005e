"""Tests for the fluent Pipeline builder."""

import logging

import numpy as np
import pytest

from lumagrade import Pipeline
from lumagrade.config import GradingParams, PointColorQualifier, ToneMapping
from lumagrade.config.presets import NOIR
from lumagrade.evaluators import ArrayImageSource, ComparisonMode, RasterEvaluator, ViewOptions
from lumagrade.lut import CubeLUT, format_cube, parse_cube

BAD_LUT = "LUT_3D_SIZE 2\n0 0 0\n1 0 0\n"


@pytest.fixture
def frame():
    return np.random.default_rng(31).random((8, 10, 3))


class TestPipelineBuilder:
    """Test setters and snapshot handling."""

    def test_default_is_neutral(self):
        pipe = Pipeline()
        assert pipe.params == GradingParams()
        assert pipe.params.is_neutral()

    def test_chaining_returns_self(self):
        pipe = Pipeline()
        assert pipe.exposure(0.5) is pipe
        assert pipe.contrast(1.2).saturation(0.8).vibrance(0.1) is pipe

    def test_setters_replace(self):
        pipe = Pipeline().exposure(0.5).exposure(1.0)
        assert pipe.params.exposure == 1.0

    def test_setters_clamp(self):
        pipe = Pipeline().exposure(10.0).contrast(-1.0).halation(9.0)

        assert pipe.params.exposure == 3.0
        assert pipe.params.contrast == 0.0
        assert pipe.params.halation == 2.0

    def test_snapshots_are_not_mutated(self):
        """Test a snapshot taken earlier keeps its values."""
        pipe = Pipeline().exposure(0.5)
        snapshot = pipe.params
        pipe.exposure(1.0)

        assert snapshot.exposure == 0.5

    def test_grouped_setters(self):
        pipe = (
            Pipeline()
            .tonal_zones(highlights=-0.3, shadows=0.2, whites=0.1, blacks=-0.1)
            .white_balance(temperature=0.5, tint=-0.2)
            .presence(texture=0.2, clarity=0.3, dehaze=0.1, sharpness=0.4)
            .lens(distortion=-10, chromatic_aberration=200)
            .brightness(0.1)
        )
        p = pipe.params

        assert (p.highlights, p.shadows, p.whites, p.blacks) == (-0.3, 0.2, 0.1, -0.1)
        assert (p.temperature, p.tint) == (0.5, -0.2)
        assert (p.texture, p.clarity, p.dehaze, p.sharpness) == (0.2, 0.3, 0.1, 0.4)
        assert (p.distortion, p.chromatic_aberration) == (-10.0, 100.0)
        assert p.brightness == 0.1

    def test_effects(self):
        p = Pipeline().vignette(3.0, feather=0.2).grain(0.3, size=20.0).params

        assert p.vignette.amount == 1.5
        assert p.vignette.feather == 0.2
        assert p.grain.amount == 0.3
        assert p.grain.size == 10.0

    def test_tone_mapping(self):
        p = Pipeline().tone_mapping("AgX", strength=0.5).params
        assert p.tone_mapping is ToneMapping.AGX
        assert p.tone_strength == 0.5

        with pytest.raises(ValueError):
            Pipeline().tone_mapping("reinhard")

    def test_wheels(self):
        p = Pipeline().wheel("shadows", hue=400, saturation=0.3).wheel_balance(70, -20).params

        assert p.color_grading.shadows.hue == pytest.approx(40.0)
        assert p.color_grading.shadows.saturation == 0.3
        assert p.color_grading.blending == 70.0
        assert p.color_grading.balance == -20.0

        with pytest.raises(ValueError, match="unknown wheel zone"):
            Pipeline().wheel("lows", hue=10)

    def test_mixer(self):
        p = Pipeline().mixer("aqua", hue=90, saturation=-20).params
        assert p.color_mixer.aqua.hue == 60.0
        assert p.color_mixer.aqua.saturation == -20.0

        with pytest.raises(TypeError):
            Pipeline().mixer("teal", hue=10)

    def test_point_colors(self):
        pipe = Pipeline()
        for i in range(8):
            pipe.point_color(PointColorQualifier(src_hue=i * 45, hue_shift=5))
        assert len(pipe.params.point_colors) == 8

        with pytest.raises(ValueError):
            pipe.point_color(PointColorQualifier())

    def test_curve(self):
        p = Pipeline().curve("r", [(0, 0), (0.5, 0.6), (1, 1)]).params
        assert p.curves.r == ((0.0, 0.0), (0.5, 0.6), (1.0, 1.0))

        with pytest.raises(ValueError):
            Pipeline().curve("x", [(0, 0), (1, 1)])
        with pytest.raises(ValueError):
            Pipeline().curve("l", [(0.5, 0.5)])

    def test_preset(self):
        pipe = Pipeline().exposure(1.0).preset("Noir")
        assert pipe.params == NOIR
        assert Pipeline.from_preset("noir").params == NOIR

        with pytest.raises(KeyError):
            Pipeline().preset("sepia")

    def test_reset(self):
        pipe = Pipeline().exposure(1.0).compile().reset()
        assert pipe.params.is_neutral()
        assert not pipe.is_compiled

    def test_copy_is_independent(self):
        pipe = Pipeline().exposure(0.5)
        clone = pipe.copy()
        clone.exposure(1.0)

        assert pipe.params.exposure == 0.5
        assert clone.params.exposure == 1.0

    def test_repr(self):
        assert "neutral=True" in repr(Pipeline())
        assert "dirty" in repr(Pipeline())


class TestPipelineCompile:
    """Test lazy compilation."""

    def test_compile_marks_clean(self):
        pipe = Pipeline().exposure(0.5)
        assert pipe._is_dirty
        assert not pipe.is_compiled

        pipe.compile()
        assert not pipe._is_dirty
        assert pipe.is_compiled

    def test_setter_marks_dirty(self):
        pipe = Pipeline().compile()
        pipe.contrast(1.1)
        assert pipe._is_dirty
        assert not pipe.is_compiled

    def test_compile_is_idempotent(self, caplog):
        pipe = Pipeline().exposure(0.5).compile()
        prepared = pipe._prepared

        with caplog.at_level(logging.DEBUG, logger="lumagrade.pipeline"):
            pipe.compile()

        assert pipe._prepared is prepared
        assert "Already compiled" in caplog.text


class TestPipelineLUT:
    """Test LUT loading."""

    def test_bad_lut_reports_error(self):
        pipe = Pipeline().lut(BAD_LUT)
        assert pipe.lut_error == "insufficient data points: expected 24, found 6"

    def test_good_lut_has_no_error(self):
        pipe = Pipeline().lut(CubeLUT.identity(3))
        assert pipe.lut_error is None
        assert pipe._prepared.lut is not None

    def test_lut_from_path(self, tmp_path, frame):
        path = tmp_path / "invert.cube"
        path.write_text(format_cube(1.0 - CubeLUT.identity(5).table), encoding="utf-8")

        out = Pipeline().lut(path)(frame)
        np.testing.assert_allclose(out, 1.0 - frame, atol=1e-6)

    def test_lut_str_is_text(self, tmp_path):
        """Test a str argument is parsed as cube text, never opened as a file."""
        path = tmp_path / "identity.cube"
        path.write_text(CubeLUT.identity(3).to_text(), encoding="utf-8")

        pipe = Pipeline().lut(str(path))

        assert pipe.params.lut_text == str(path)
        assert pipe.lut_error == "missing LUT_3D_SIZE"

    def test_lut_intensity_and_clear(self):
        pipe = Pipeline().lut(CubeLUT.identity(3), intensity=2.0)
        assert pipe.params.lut_intensity == 1.0

        pipe.lut(None)
        assert pipe.params.lut_text is None


class TestPipelineApply:
    """Test rendering and baking."""

    def test_call_matches_raster(self, frame):
        pipe = Pipeline().exposure(0.3).saturation(1.2).vignette(0.5)
        expected = RasterEvaluator(ArrayImageSource(frame)).evaluate(pipe.params)

        out = pipe(frame)

        assert out.shape == frame.shape
        np.testing.assert_allclose(out, expected, atol=1e-12)

    def test_call_accepts_image_source(self, frame):
        source = ArrayImageSource(frame)
        np.testing.assert_allclose(Pipeline()(source), frame, atol=1e-9)

    def test_call_with_view(self, frame):
        out = Pipeline().exposure(1.0)(frame, ViewOptions(comparison=ComparisonMode.BYPASS))
        np.testing.assert_allclose(out, frame, atol=1e-12)

    def test_call_compiles(self, frame):
        pipe = Pipeline().contrast(1.2)
        pipe(frame)
        assert pipe.is_compiled

    def test_bake(self):
        text = Pipeline().contrast(1.3).bake(size=5, title="Punchy")
        lut = parse_cube(text)

        assert lut.title == "Punchy"
        assert lut.size == 5

    def test_bake_neutral_is_identity(self):
        lut = parse_cube(Pipeline().bake(size=3, workers=1))
        np.testing.assert_allclose(lut.table, CubeLUT.identity(3).table, atol=1e-6)

"""Tests for the raster and bake evaluators."""

import threading
from unittest import mock

import numpy as np
import pytest

from lumagrade.config import GradingParams, Vignette
from lumagrade.config.presets import CYBERPUNK, TEAL_ORANGE
from lumagrade.evaluators import (
    ArrayImageSource,
    BakeCancelled,
    BakeEvaluator,
    ComparisonMode,
    RasterEvaluator,
    ViewOptions,
    bake_cube,
    false_color,
    lattice_colors,
)
from lumagrade.evaluators.raster import GREEN, RED
from lumagrade.grading import grade, prepare
from lumagrade.lut import CubeLUT, format_cube, parse_cube
from lumagrade.protocols import Evaluator, ImageSource


@pytest.fixture
def frame():
    """Random 12x16 sRGB frame."""
    return np.random.default_rng(21).random((12, 16, 3))


class TestArrayImageSource:
    """Test the in-memory image source."""

    def test_is_image_source(self, frame):
        assert isinstance(ArrayImageSource(frame), ImageSource)

    def test_dimensions(self, frame):
        source = ArrayImageSource(frame)
        assert (source.width, source.height) == (16, 12)

    def test_uint8_scaled(self):
        image = np.full((2, 2, 3), 255, dtype=np.uint8)
        image[0, 0] = (0, 51, 102)
        source = ArrayImageSource(image)

        np.testing.assert_allclose(source.pixels[0, 0], [0.0, 0.2, 0.4])
        np.testing.assert_allclose(source.pixels[1, 1], [1.0, 1.0, 1.0])

    def test_alpha_dropped(self):
        source = ArrayImageSource(np.ones((2, 2, 4)))
        assert source.pixels.shape == (2, 2, 3)

    def test_bad_shape(self):
        with pytest.raises(ValueError, match="expected image"):
            ArrayImageSource(np.zeros((4, 4)))
        with pytest.raises(ValueError):
            ArrayImageSource(np.zeros((4, 4, 2)))

    def test_pixel_centers_exact(self, frame):
        """Test sampling at a pixel center returns that pixel."""
        source = ArrayImageSource(frame)
        u = (5 + 0.5) / 16
        v = (3 + 0.5) / 12
        np.testing.assert_allclose(source.sample(u, v), frame[3, 5], atol=1e-12)

    def test_bilinear_midpoint(self):
        image = np.zeros((1, 2, 3))
        image[0, 1] = 1.0
        source = ArrayImageSource(image)
        np.testing.assert_allclose(source.sample(0.5, 0.5), [0.5, 0.5, 0.5], atol=1e-12)

    def test_clamp_to_edge(self, frame):
        source = ArrayImageSource(frame)
        np.testing.assert_allclose(source.sample(-1.0, -1.0), frame[0, 0], atol=1e-12)
        np.testing.assert_allclose(source.sample(2.0, 2.0), frame[-1, -1], atol=1e-12)

    def test_sample_shape(self, frame):
        source = ArrayImageSource(frame)
        u = np.random.default_rng(22).random((5, 7))
        assert source.sample(u, u).shape == (5, 7, 3)

    def test_uniform(self):
        source = ArrayImageSource.uniform([0.1, 0.2, 0.3], width=3, height=2)
        assert (source.width, source.height) == (3, 2)
        np.testing.assert_allclose(source.sample(0.9, 0.1), [0.1, 0.2, 0.3], atol=1e-12)


class TestRasterEvaluator:
    """Test per-pixel frame evaluation and display composition."""

    def test_is_evaluator(self, frame):
        assert isinstance(RasterEvaluator(ArrayImageSource(frame)), Evaluator)

    def test_pixel_uv(self, frame):
        uv = RasterEvaluator(ArrayImageSource(frame)).pixel_uv()

        assert uv.shape == (12, 16, 2)
        np.testing.assert_allclose(uv[0, 0], [0.5 / 16, 0.5 / 12])
        np.testing.assert_allclose(uv[-1, -1], [15.5 / 16, 11.5 / 12])

    def test_neutral_frame(self, frame):
        out = RasterEvaluator(ArrayImageSource(frame)).evaluate(GradingParams())
        np.testing.assert_allclose(out, frame, atol=1e-9)

    def test_matches_chain_without_spatial_stages(self, frame):
        """Test a position-independent grade equals the chain on the raw pixels."""
        out = RasterEvaluator(ArrayImageSource(frame)).evaluate(CYBERPUNK)
        np.testing.assert_allclose(out, grade(frame, CYBERPUNK), atol=1e-9)

    def test_uint8_frame(self):
        image = np.random.default_rng(23).integers(0, 256, (6, 8, 3), dtype=np.uint8)
        out = RasterEvaluator(ArrayImageSource(image)).evaluate(GradingParams())
        np.testing.assert_allclose(out, image / 255.0, atol=1e-9)

    def test_distortion_blacks_out_corners(self, frame):
        """Test pincushion warp pushes corners outside the frame."""
        out = RasterEvaluator(ArrayImageSource(frame)).evaluate(GradingParams(distortion=100))

        np.testing.assert_array_equal(out[0, 0], [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(out[-1, -1], [0.0, 0.0, 0.0])
        assert out[6, 8].sum() > 0.0

    def test_chromatic_aberration_keeps_green(self, frame):
        """Test chromatic aberration only moves the red and blue fetches."""
        evaluator = RasterEvaluator(ArrayImageSource(frame))
        out = evaluator.evaluate(GradingParams(chromatic_aberration=100))

        np.testing.assert_allclose(out[..., 1], frame[..., 1], atol=1e-9)
        assert np.abs(out[..., 0] - frame[..., 0]).max() > 1e-6

    def test_vignette_darkens_edges(self):
        source = ArrayImageSource.uniform([0.5, 0.5, 0.5], width=32, height=32)
        out = RasterEvaluator(source).evaluate(GradingParams(vignette=Vignette(amount=1.0)))
        assert out[0, 0, 0] < out[16, 16, 0]

    def test_bypass(self, frame):
        evaluator = RasterEvaluator(ArrayImageSource(frame))
        out = evaluator.render(TEAL_ORANGE, ViewOptions(comparison=ComparisonMode.BYPASS))
        np.testing.assert_allclose(out, frame, atol=1e-12)

    def test_split(self, frame):
        """Test the left side shows the source and the right the grade."""
        evaluator = RasterEvaluator(ArrayImageSource(frame))
        graded = evaluator.evaluate(TEAL_ORANGE)

        out = evaluator.render(
            TEAL_ORANGE, ViewOptions(comparison=ComparisonMode.SPLIT, split_position=0.5)
        )

        np.testing.assert_allclose(out[:, :8], frame[:, :8], atol=1e-12)
        np.testing.assert_allclose(out[:, 8:], graded[:, 8:], atol=1e-12)

    def test_render_default_is_grade(self, frame):
        evaluator = RasterEvaluator(ArrayImageSource(frame))
        expected = evaluator.evaluate(TEAL_ORANGE)
        np.testing.assert_array_equal(evaluator.render(TEAL_ORANGE), expected)

    def test_false_color_render(self):
        source = ArrayImageSource.uniform([1.0, 1.0, 1.0], width=2, height=2)
        out = RasterEvaluator(source).render(GradingParams(), ViewOptions(false_color=True))
        np.testing.assert_allclose(out, np.broadcast_to(RED, (2, 2, 3)))


class TestFalseColor:
    """Test IRE band mapping."""

    @pytest.mark.parametrize(
        "luma, expected",
        [
            (0.45, GREEN),
            (0.52, (1.0, 0.6, 0.7)),
            (0.9, (1.0, 1.0, 0.0)),
            (0.97, RED),
            (0.3, (0.06, 0.06, 0.06)),
        ],
    )
    def test_bands(self, luma, expected):
        np.testing.assert_allclose(false_color([luma, luma, luma]), expected, atol=1e-9)

    def test_low_ramps(self):
        out = false_color(np.array([[0.0, 0.0, 0.0], [0.075, 0.075, 0.075]]))
        np.testing.assert_allclose(out[0], [0.5, 0.0, 0.5], atol=1e-9)
        np.testing.assert_allclose(out[1], [0.0, 0.25, 1.0], atol=1e-9)


class TestBakeEvaluator:
    """Test lattice baking."""

    def test_is_evaluator(self):
        assert isinstance(BakeEvaluator(size=2), Evaluator)

    def test_lattice_colors(self):
        grid = lattice_colors(3)
        assert grid.shape == (3, 3, 3, 3)
        np.testing.assert_allclose(grid[2, 1, 0], [0.0, 0.5, 1.0])

    def test_identity_bake(self):
        """Test a neutral grade bakes to the identity lattice."""
        table = BakeEvaluator(size=9, workers=2).evaluate(GradingParams())
        np.testing.assert_allclose(table, CubeLUT.identity(9).table, atol=1e-9)

    def test_matches_chain(self):
        """Test each lattice entry equals the chain applied to its color."""
        table = BakeEvaluator(size=7, workers=3).evaluate(TEAL_ORANGE)
        expected = grade(lattice_colors(7), prepare(TEAL_ORANGE, use_lut=False))
        np.testing.assert_allclose(table, expected, atol=1e-12)

    def test_bake_reproduces_grade(self):
        """Test applying the baked LUT approximates the live grade."""
        params = GradingParams(exposure=0.4, contrast=1.1, saturation=1.2)
        lut = parse_cube(bake_cube(params, size=17))

        colors = np.random.default_rng(24).random((500, 3))
        np.testing.assert_allclose(lut.apply(colors), grade(colors, params), atol=1.0 / 16)

    def test_ignores_params_lut(self):
        """Test the snapshot's own LUT is never baked into the result."""
        inverted = format_cube(1.0 - CubeLUT.identity(3).table)
        table = BakeEvaluator(size=5).evaluate(GradingParams(lut_text=inverted))
        np.testing.assert_allclose(table, CubeLUT.identity(5).table, atol=1e-9)

    def test_ignores_prepared_lut(self):
        """Test a prepared grade's parsed LUT is dropped before baking."""
        inverted = format_cube(1.0 - CubeLUT.identity(3).table)
        prepared = prepare(GradingParams(lut_text=inverted))
        assert prepared.lut is not None

        table = BakeEvaluator(size=3).evaluate(prepared)

        np.testing.assert_allclose(table, CubeLUT.identity(3).table, atol=1e-9)
        np.testing.assert_allclose(table[0, 0, 0], [0.0, 0.0, 0.0], atol=1e-9)

    def test_bake_text(self):
        text = BakeEvaluator(size=3).bake(GradingParams(), title="Look")
        lines = text.splitlines()

        assert lines[0] == 'TITLE "Look"'
        assert lines[1] == "LUT_3D_SIZE 3"
        assert len(lines) == 4 + 27

    def test_bake_cube_default_title(self):
        assert bake_cube(GradingParams(), size=2).startswith('TITLE "LumaGrade_Export"')

    @pytest.mark.parametrize("size", [0, 1, 130])
    def test_invalid_size(self, size):
        with pytest.raises(ValueError):
            BakeEvaluator(size=size)

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError, match="chunk_size"):
            BakeEvaluator(size=5, chunk_size=0)

    @pytest.mark.parametrize("workers, chunk_size", [(1, 1), (4, 1), (2, 3), (8, 17)])
    def test_partitioning_does_not_change_result(self, workers, chunk_size):
        reference = BakeEvaluator(size=9, workers=1).evaluate(CYBERPUNK)
        table = BakeEvaluator(size=9, workers=workers, chunk_size=chunk_size).evaluate(CYBERPUNK)
        np.testing.assert_array_equal(table, reference)


class TestBakeCancellation:
    """Test cooperative cancellation."""

    def test_cancel_before_start(self):
        baker = BakeEvaluator(size=5)
        baker.cancel()

        assert baker.cancelled
        with pytest.raises(BakeCancelled):
            baker.evaluate(GradingParams())
        with pytest.raises(BakeCancelled):
            baker.bake(GradingParams())

    def test_reset(self):
        baker = BakeEvaluator(size=3)
        baker.cancel()
        baker.reset()

        assert not baker.cancelled
        assert baker.evaluate(GradingParams()).shape == (3, 3, 3, 3)

    def test_shared_event(self):
        event = threading.Event()
        event.set()

        with pytest.raises(BakeCancelled):
            bake_cube(GradingParams(), size=5, cancel_event=event)

    def test_cancel_during_bake(self):
        """Test setting the event while slabs are running aborts the bake."""
        event = threading.Event()
        baker = BakeEvaluator(size=9, workers=1, cancel_event=event)
        original = BakeEvaluator._grade_slabs

        def grade_then_cancel(self, *args):
            result = original(self, *args)
            event.set()
            return result

        with mock.patch.object(BakeEvaluator, "_grade_slabs", grade_then_cancel):
            with pytest.raises(BakeCancelled):
                baker.evaluate(GradingParams())

    def test_cancelled_is_runtime_error(self):
        assert issubclass(BakeCancelled, RuntimeError)

"""Tests for the shared numeric helpers and color space conversions."""

import numpy as np
import pytest

from lumagrade.shared import (
    fract,
    hash_noise,
    hsl_to_rgb,
    hue_distance,
    linear_to_srgb,
    luminance,
    mix,
    rgb_to_hsl,
    safe_divide,
    smoothstep,
    srgb_to_linear,
)


@pytest.fixture
def random_colors():
    """Random sRGB colors in [0, 1]."""
    rng = np.random.default_rng(7)
    return rng.random((500, 3))


class TestNumeric:
    """Test GLSL-style numeric helpers."""

    def test_smoothstep_endpoints(self):
        """Test smoothstep maps the edges to 0 and 1 and the middle to 0.5."""
        assert smoothstep(0.0, 1.0, 0.0) == 0.0
        assert smoothstep(0.0, 1.0, 1.0) == 1.0
        assert smoothstep(0.0, 1.0, 0.5) == pytest.approx(0.5)
        assert smoothstep(0.0, 1.0, -3.0) == 0.0
        assert smoothstep(0.0, 1.0, 7.0) == 1.0

    def test_smoothstep_reversed_edges(self):
        """Test reversed edges give a falling step."""
        assert smoothstep(0.33, 0.0, 0.0) == 1.0
        assert smoothstep(0.33, 0.0, 0.5) == 0.0
        assert smoothstep(1.0, 0.0, 0.25) == pytest.approx(1.0 - smoothstep(0.0, 1.0, 0.25))

    def test_smoothstep_coincident_edges(self):
        """Test zero-width edges behave like a hard step without dividing by zero."""
        with np.errstate(all="raise"):
            assert smoothstep(0.5, 0.5, 0.6) == 1.0
            assert smoothstep(0.5, 0.5, 0.4) == 0.0

    def test_safe_divide_keeps_sign(self):
        """Test the denominator floor keeps the sign of the denominator."""
        assert safe_divide(1.0, 0.0) == pytest.approx(1e6)
        assert safe_divide(1.0, -1e-9) == pytest.approx(-1e6)
        assert safe_divide(3.0, 2.0) == 1.5

    def test_mix_is_exact_at_ends(self):
        """Test mix returns the operands bit-exactly at a=0 and a=1."""
        x = np.array([0.1, 0.7, 0.3333333333333333])
        y = np.array([0.9, 0.2, 0.123456789])
        np.testing.assert_array_equal(mix(x, y, 0.0), x)
        np.testing.assert_array_equal(mix(x, y, 1.0), y)
        np.testing.assert_allclose(mix(x, y, 0.5), (x + y) / 2)

    def test_fract_wraps_negatives(self):
        """Test fract returns values in [0, 1)."""
        np.testing.assert_allclose(fract([1.25, -0.25, 3.0]), [0.25, 0.75, 0.0])

    def test_hash_noise_deterministic(self):
        """Test hash noise is deterministic and in [0, 1)."""
        rng = np.random.default_rng(0)
        u, v = rng.random(1000), rng.random(1000)
        a = hash_noise(u, v)
        np.testing.assert_array_equal(a, hash_noise(u, v))
        assert a.min() >= 0.0
        assert a.max() < 1.0
        assert a.std() > 0.2  # roughly uniform


class TestTransfer:
    """Test the gamma-2.2 transfer pair."""

    def test_srgb_to_linear_mid_grey(self):
        """Test mid grey decodes to 0.5 ** 2.2."""
        assert srgb_to_linear(0.5) == pytest.approx(0.5**2.2)
        assert srgb_to_linear(0.5) == pytest.approx(0.2176, abs=1e-4)

    def test_round_trip(self, random_colors):
        """Test encode(decode(c)) == c."""
        np.testing.assert_allclose(linear_to_srgb(srgb_to_linear(random_colors)), random_colors)

    def test_negative_inputs_floor_at_zero(self):
        """Test negative values produce 0 instead of NaN."""
        np.testing.assert_array_equal(srgb_to_linear([-0.2, 0.0]), [0.0, 0.0])
        np.testing.assert_array_equal(linear_to_srgb([-1.0]), [0.0])

    def test_extremes_are_exact(self):
        """Test 0 and 1 survive the transfer pair exactly."""
        np.testing.assert_array_equal(linear_to_srgb(srgb_to_linear([0.0, 1.0])), [0.0, 1.0])


class TestLuminance:
    """Test Rec. 709 luminance."""

    def test_weights(self):
        """Test each primary returns its weight."""
        np.testing.assert_allclose(luminance(np.eye(3)), [0.2126, 0.7152, 0.0722])

    def test_white(self):
        assert luminance([1.0, 1.0, 1.0]) == pytest.approx(1.0)

    def test_leading_shape(self, random_colors):
        """Test any leading shape is accepted."""
        assert luminance(random_colors.reshape(10, 50, 3)).shape == (10, 50)


class TestHSL:
    """Test RGB/HSL conversion and circular hue distance."""

    @pytest.mark.parametrize(
        "rgb, hsl",
        [
            ((1.0, 0.0, 0.0), (0.0, 1.0, 0.5)),
            ((0.0, 1.0, 0.0), (1.0 / 3.0, 1.0, 0.5)),
            ((0.0, 0.0, 1.0), (2.0 / 3.0, 1.0, 0.5)),
            ((1.0, 0.5, 0.0), (1.0 / 12.0, 1.0, 0.5)),
            ((0.5, 0.5, 0.5), (0.0, 0.0, 0.5)),
            ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
            ((1.0, 1.0, 1.0), (0.0, 0.0, 1.0)),
        ],
    )
    def test_known_values(self, rgb, hsl):
        """Test rgb_to_hsl on primaries, secondaries and greys."""
        np.testing.assert_allclose(rgb_to_hsl(rgb), hsl, atol=1e-12)

    def test_round_trip(self, random_colors):
        """Test hsl_to_rgb inverts rgb_to_hsl."""
        np.testing.assert_allclose(hsl_to_rgb(rgb_to_hsl(random_colors)), random_colors, atol=1e-12)

    def test_hue_wraps(self):
        """Test hues outside [0, 1) wrap around the circle."""
        np.testing.assert_allclose(hsl_to_rgb([1.0, 1.0, 0.5]), [1.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(hsl_to_rgb([-2.0 / 3.0, 1.0, 0.5]), [0.0, 1.0, 0.0], atol=1e-12)

    def test_hue_in_unit_range(self, random_colors):
        hue = rgb_to_hsl(random_colors)[..., 0]
        assert hue.min() >= 0.0
        assert hue.max() < 1.0

    def test_hue_distance_is_circular(self):
        """Test distance wraps across 0/1 and never exceeds 0.5."""
        assert hue_distance(0.95, 0.05) == pytest.approx(0.1)
        assert hue_distance(0.0, 0.5) == pytest.approx(0.5)
        assert hue_distance(0.25, 0.25) == 0.0
        d = hue_distance(np.linspace(0, 1, 101), 0.3)
        assert d.max() <= 0.5

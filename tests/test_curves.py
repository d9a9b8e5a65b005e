"""Tests for natural cubic spline curves and control point editing."""

import numpy as np
import pytest

from lumagrade.curves import (
    IDENTITY_CURVE,
    NaturalCubicSpline,
    add_point,
    delete_point,
    move_point,
    normalize_curve,
    prepare_knots,
    reset_curve,
    sample_curve,
)


class TestNaturalCubicSpline:
    """Test spline construction and evaluation."""

    def test_identity_curve(self):
        """Test the default diagonal maps every x to itself."""
        curve = NaturalCubicSpline(IDENTITY_CURVE)
        xs = np.linspace(0.0, 1.0, 257)

        np.testing.assert_allclose(curve(xs), xs, atol=1e-12)
        assert curve.is_identity()
        assert NaturalCubicSpline.identity().is_identity()

    def test_passes_through_knots(self):
        """Test the curve interpolates its control points."""
        points = [(0.0, 0.0), (0.2, 0.1), (0.5, 0.7), (0.8, 0.75), (1.0, 1.0)]
        curve = NaturalCubicSpline(points)

        for x, y in points:
            assert curve.interpolate(x) == pytest.approx(y, abs=1e-9)

    def test_known_value(self):
        """Test a three-knot curve against a hand-solved value.

        Knots (0, 0), (0.5, 0.75), (1, 1) give k1 = -3, so
        f(0.25) = 0.375 + 1.125 * 0.25 / 6 = 0.421875.
        """
        curve = NaturalCubicSpline([(0.0, 0.0), (0.5, 0.75), (1.0, 1.0)])

        np.testing.assert_allclose(curve.ks, [0.0, -3.0, 0.0], atol=1e-12)
        assert curve.interpolate(0.25) == pytest.approx(0.421875, abs=1e-12)

    def test_natural_boundary(self):
        """Test second derivatives vanish at both ends."""
        curve = NaturalCubicSpline([(0.0, 0.1), (0.3, 0.5), (0.6, 0.4), (1.0, 0.9)])
        assert curve.ks[0] == 0.0
        assert curve.ks[-1] == 0.0

    def test_flat_extension(self):
        """Test the curve is flat outside the knot range."""
        curve = NaturalCubicSpline([(0.2, 0.3), (0.5, 0.6), (0.8, 0.7)])

        assert curve.interpolate(-1.0) == 0.3
        assert curve.interpolate(0.0) == 0.3
        assert curve.interpolate(0.9) == 0.7
        assert curve.interpolate(5.0) == 0.7

    def test_single_point(self):
        """Test a one-knot curve is constant."""
        curve = NaturalCubicSpline([(0.4, 0.7)])
        assert curve.interpolate(0.0) == 0.7
        assert curve.interpolate(0.9) == 0.7

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            NaturalCubicSpline([])

    def test_unsorted_input(self):
        """Test control points may be given in any order."""
        a = NaturalCubicSpline([(1.0, 1.0), (0.0, 0.0), (0.5, 0.6)])
        b = NaturalCubicSpline([(0.0, 0.0), (0.5, 0.6), (1.0, 1.0)])
        np.testing.assert_array_equal(a.sample(64), b.sample(64))

    def test_duplicate_knots_are_nudged(self):
        """Test coincident x values are separated instead of dividing by zero."""
        xs, ys = prepare_knots([(0.0, 0.0), (0.5, 0.2), (0.5, 0.8), (1.0, 1.0)])

        assert xs[2] == pytest.approx(0.501)
        assert np.all(np.diff(xs) > 0)

        curve = NaturalCubicSpline([(0.0, 0.0), (0.5, 0.2), (0.5, 0.8), (1.0, 1.0)])
        assert np.all(np.isfinite(curve.sample(512)))

    def test_array_shape_preserved(self):
        curve = NaturalCubicSpline([(0.0, 0.0), (0.5, 0.6), (1.0, 1.0)])
        values = np.random.default_rng(1).random((4, 5, 3))
        assert curve(values).shape == (4, 5, 3)

    def test_len_and_repr(self):
        curve = NaturalCubicSpline([(0.0, 0.0), (0.5, 0.6), (1.0, 1.0)])
        assert len(curve) == 3
        assert "n=3" in repr(curve)


class TestCurveEditing:
    """Test control point editing rules."""

    def test_reset(self):
        assert reset_curve() == ((0.0, 0.0), (1.0, 1.0))

    def test_normalize_sorts(self):
        assert normalize_curve([(1, 1), (0, 0)]) == ((0.0, 0.0), (1.0, 1.0))

    def test_normalize_requires_two_points(self):
        with pytest.raises(ValueError):
            normalize_curve([(0.5, 0.5)])

    def test_add_point_snaps_to_curve(self):
        """Test a click near the curve lands exactly on it."""
        curve = add_point(IDENTITY_CURVE, 0.5, 0.55)
        assert curve == ((0.0, 0.0), (0.5, 0.5), (1.0, 1.0))

    def test_add_point_away_from_curve(self):
        """Test a click far from the curve keeps its y."""
        curve = add_point(IDENTITY_CURVE, 0.5, 0.9)
        assert curve == ((0.0, 0.0), (0.5, 0.9), (1.0, 1.0))

    def test_add_point_too_close_rejected(self):
        """Test a new point within 0.02 in x of an existing point is ignored."""
        curve = ((0.0, 0.0), (0.5, 0.9), (1.0, 1.0))
        assert add_point(curve, 0.51, 0.2) == curve
        assert add_point(curve, 0.005, 0.2) == curve

    def test_add_point_clamps(self):
        curve = add_point(IDENTITY_CURVE, 0.3, 7.0)
        assert curve[1] == (0.3, 1.0)

    def test_delete_interior_point(self):
        curve = ((0.0, 0.0), (0.5, 0.9), (1.0, 1.0))
        assert delete_point(curve, 1) == IDENTITY_CURVE

    def test_delete_endpoints_is_noop(self):
        """Test the first and last points cannot be deleted."""
        curve = ((0.0, 0.0), (0.5, 0.9), (1.0, 1.0))
        assert delete_point(curve, 0) == curve
        assert delete_point(curve, 2) == curve
        assert delete_point(curve, -1) == curve

    def test_delete_out_of_range(self):
        with pytest.raises(IndexError):
            delete_point(IDENTITY_CURVE, 5)

    def test_move_endpoint_keeps_x(self):
        """Test endpoints only move vertically."""
        curve = move_point(IDENTITY_CURVE, 0, 0.3, 0.2)
        assert curve == ((0.0, 0.2), (1.0, 1.0))

    def test_move_interior_constrained(self):
        """Test interior points stay 0.01 away from neighbours and y is clamped."""
        curve = ((0.0, 0.0), (0.5, 0.5), (1.0, 1.0))

        moved = move_point(curve, 1, 0.999, 1.5)
        assert moved[1][0] == pytest.approx(0.99)
        assert moved[1][1] == 1.0

        moved = move_point(curve, 1, -0.5, -0.5)
        assert moved[1] == (pytest.approx(0.01), 0.0)

    def test_edits_do_not_mutate_input(self):
        curve = ((0.0, 0.0), (0.5, 0.5), (1.0, 1.0))
        move_point(curve, 1, 0.4, 0.4)
        delete_point(curve, 1)
        assert curve == ((0.0, 0.0), (0.5, 0.5), (1.0, 1.0))

    def test_sample_curve_clamped(self):
        """Test sampled curves are clamped for display even when the spline overshoots."""
        curve = ((0.0, 0.0), (0.1, 0.9), (0.2, 0.1), (1.0, 1.0))
        samples = sample_curve(curve, steps=128)

        assert samples.shape == (128,)
        assert samples.min() >= 0.0
        assert samples.max() <= 1.0

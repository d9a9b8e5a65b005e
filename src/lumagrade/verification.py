"""Raster/bake parity verification.

A baked LUT is only trustworthy if applying it reproduces the live preview.
``ParityVerifier`` renders a flat swatch of every lattice color through the
RasterEvaluator and compares the results to the BakeEvaluator table.

Stages a LUT cannot represent are neutralized on both sides before the
comparison: the loaded LUT (disabled while baking), vignette and grain
(position-dependent), and the lens pre-step (distortion, chromatic
aberration).

Example:
    >>> from lumagrade.verification import ParityVerifier
    >>>
    >>> report = ParityVerifier().compare(params, size=9)
    >>> report.passed
    True
    >>> ParityVerifier().assert_equivalent(params)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from lumagrade.config.values import GradingParams, Grain, Vignette
from lumagrade.constants import PARITY_TOLERANCE
from lumagrade.evaluators.bake import BakeEvaluator, lattice_colors
from lumagrade.evaluators.raster import ArrayImageSource, RasterEvaluator
from lumagrade.grading.chain import prepare

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParityReport:
    """Outcome of a parity comparison.

    Attributes:
        size: Lattice points per axis that were compared
        max_abs_error: Largest per-channel absolute difference
        mean_abs_error: Mean per-channel absolute difference
        worst_color: Lattice input color with the largest difference
        tolerance: Threshold used for ``passed``
    """

    size: int
    max_abs_error: float
    mean_abs_error: float
    worst_color: tuple[float, float, float]
    tolerance: float = PARITY_TOLERANCE

    @property
    def passed(self) -> bool:
        return self.max_abs_error <= self.tolerance


def bakeable(params: GradingParams) -> GradingParams:
    """Strip the parts of a grading that a baked LUT cannot represent."""
    return params.replace(
        lut_text=None,
        vignette=Vignette(),
        grain=Grain(),
        distortion=0.0,
        chromatic_aberration=0.0,
    )


class ParityVerifier:
    """Compare per-pixel rendering against the baked lattice."""

    def __init__(self, tolerance: float = PARITY_TOLERANCE, workers: int | None = None):
        """
        :param tolerance: Maximum allowed absolute difference per channel
        :param workers: Thread count for the bake
        """
        self.tolerance = tolerance
        self.workers = workers

    def raster_lattice(self, params: GradingParams, size: int) -> np.ndarray:
        """Render a 1x1 uniform swatch of every lattice color.

        :param params: Bakeable grading
        :param size: Lattice points per axis
        :returns: Rendered colors [size, size, size, 3] indexed [b, g, r]
        """
        prepared = prepare(params)
        grid = lattice_colors(size)
        out = np.empty_like(grid)
        for index in np.ndindex(grid.shape[:-1]):
            source = ArrayImageSource.uniform(grid[index], width=1, height=1)
            out[index] = RasterEvaluator(source).evaluate(prepared)[0, 0]
        return out

    def compare(self, params: GradingParams, size: int = 9) -> ParityReport:
        """Measure the raster/bake disagreement on a lattice.

        :param params: Grading to verify; unbakeable parts are stripped
        :param size: Lattice points per axis
        :returns: ParityReport
        """
        params = bakeable(params)
        baked = BakeEvaluator(size=size, workers=self.workers).evaluate(params)
        rendered = self.raster_lattice(params, size)

        error = np.abs(baked - rendered)
        worst = np.unravel_index(np.argmax(error.max(axis=-1)), error.shape[:-1])
        report = ParityReport(
            size=size,
            max_abs_error=float(error.max()),
            mean_abs_error=float(error.mean()),
            worst_color=tuple(float(c) for c in lattice_colors(size)[worst]),
            tolerance=self.tolerance,
        )
        logger.debug(
            "[Parity] size=%d max=%.3g mean=%.3g", size, report.max_abs_error, report.mean_abs_error
        )
        return report

    def assert_equivalent(self, params: GradingParams, size: int = 9) -> ParityReport:
        """Assert raster and bake agree within tolerance.

        :param params: Grading to verify
        :param size: Lattice points per axis
        :returns: The passing ParityReport
        :raises AssertionError: If any channel differs by more than the tolerance
        """
        report = self.compare(params, size)
        if not report.passed:
            raise AssertionError(
                f"Raster and bake differ by {report.max_abs_error:.3g} "
                f"(tolerance {report.tolerance:g}) at input color {report.worst_color}"
            )
        return report

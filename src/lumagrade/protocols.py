"""
Protocol definitions for lumagrade collaborators.

Defines the interfaces the operator chain expects from the surrounding
application (an addressable image) and the common shape of the two
evaluators.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from lumagrade.config.values import GradingParams


@runtime_checkable
class ImageSource(Protocol):
    """
    Pixel-addressable image in display (sRGB) encoding.

    Coordinates are normalized: ``u`` runs left to right and ``v`` top to
    bottom over [0, 1]. Alpha, if any, is ignored.
    """

    @property
    def width(self) -> int:
        """Width in pixels."""
        ...

    @property
    def height(self) -> int:
        """Height in pixels."""
        ...

    def sample(self, u: ArrayLike, v: ArrayLike) -> NDArray[np.float64]:
        """
        Look up colors at normalized coordinates.

        :param u: Horizontal coordinates (any shape)
        :param v: Vertical coordinates (same shape as u)
        :returns: sRGB colors in [0, 1], shape ``u.shape + (3,)``
        """
        ...


@runtime_checkable
class Evaluator(Protocol):
    """Common surface of the raster and bake evaluators."""

    def evaluate(self, params: GradingParams) -> NDArray[np.float64]:
        """
        Run the operator chain for every sample the evaluator owns.

        :param params: Grading snapshot
        :returns: Graded colors (a frame or a LUT lattice)
        """
        ...

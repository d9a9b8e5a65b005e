"""
Per-pixel frame evaluation.

The RasterEvaluator grades every pixel of an image through the operator
chain, after the lens pre-step (UV distortion and chromatic aberration
fetch), and optionally composes the result for display (before/after split,
bypass, false-color exposure overlay).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import ArrayLike, NDArray

from lumagrade.config.values import GradingParams
from lumagrade.grading.chain import PreparedGrade, grade, prepare
from lumagrade.grading.spatial import lens_fetch
from lumagrade.protocols import ImageSource
from lumagrade.shared.colorspace import luminance
from lumagrade.shared.numeric import mix

logger = logging.getLogger(__name__)


class ArrayImageSource:
    """ImageSource over an in-memory ``[H, W, C]`` array.

    Bilinear sampling with clamp-to-edge addressing; pixel centers sit at
    ``((x + 0.5) / W, (y + 0.5) / H)``. Integer arrays are scaled by their
    dtype maximum; channels beyond RGB are ignored.
    """

    __slots__ = ("pixels",)

    def __init__(self, image: ArrayLike):
        """
        Wrap an image.

        :param image: Array [H, W, 3] or [H, W, 4], float in [0, 1] or integer
        :raises ValueError: If the array is not an RGB(A) image
        """
        image = np.asarray(image)
        if image.ndim != 3 or image.shape[2] < 3:
            raise ValueError(f"expected image of shape (H, W, 3|4), got {image.shape}")
        if np.issubdtype(image.dtype, np.integer):
            pixels = image[..., :3].astype(np.float64) / np.iinfo(image.dtype).max
        else:
            pixels = image[..., :3].astype(np.float64)
        self.pixels = np.ascontiguousarray(pixels)

    @classmethod
    def uniform(cls, color: ArrayLike, width: int = 4, height: int = 4) -> ArrayImageSource:
        """Image filled with a single color."""
        return cls(np.broadcast_to(np.asarray(color, dtype=np.float64), (height, width, 3)))

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def sample(self, u: ArrayLike, v: ArrayLike) -> NDArray[np.float64]:
        """Bilinear lookup at normalized coordinates.

        :param u: Horizontal coordinates
        :param v: Vertical coordinates (0 = top row)
        :returns: Colors with shape ``u.shape + (3,)``
        """
        x = np.asarray(u, dtype=np.float64) * self.width - 0.5
        y = np.asarray(v, dtype=np.float64) * self.height - 0.5

        x0f = np.floor(x)
        y0f = np.floor(y)
        fx = (x - x0f)[..., None]
        fy = (y - y0f)[..., None]

        x0 = np.clip(x0f.astype(np.int64), 0, self.width - 1)
        x1 = np.clip(x0f.astype(np.int64) + 1, 0, self.width - 1)
        y0 = np.clip(y0f.astype(np.int64), 0, self.height - 1)
        y1 = np.clip(y0f.astype(np.int64) + 1, 0, self.height - 1)

        p = self.pixels
        top = mix(p[y0, x0], p[y0, x1], fx)
        bottom = mix(p[y1, x0], p[y1, x1], fx)
        return mix(top, bottom, fy)


class ComparisonMode(Enum):
    """How the graded frame is shown next to the source."""

    OFF = "off"
    SPLIT = "split"
    BYPASS = "bypass"


@dataclass(frozen=True)
class ViewOptions:
    """Display composition applied after grading.

    Attributes:
        comparison: OFF shows the grade, BYPASS the source, SPLIT the source
            left of ``split_position`` and the grade to its right
        split_position: Split line as a fraction of the width
        false_color: Replace the display with IRE-band false color
    """

    comparison: ComparisonMode = ComparisonMode.OFF
    split_position: float = 0.5
    false_color: bool = False


GREEN = (0.0, 0.8, 0.0)
PINK = (1.0, 0.6, 0.7)
YELLOW = (1.0, 1.0, 0.0)
RED = (1.0, 0.0, 0.0)


def false_color(colors: ArrayLike) -> NDArray[np.float64]:
    """Map luminance to exposure bands.

    Below 5 IRE: purple ramp. 5-10: blue ramp. 40-50: green (mid grey, skin).
    50-55: pink. 85-95: yellow. 95 and up: red (clipping). Everything else
    is dimmed monochrome at ``luma * 0.2``.

    :param colors: Display colors [..., 3]
    :returns: False-color display [..., 3]
    """
    luma = luminance(colors)[..., None]
    dimmed = np.broadcast_to(luma * 0.2, luma.shape[:-1] + (3,))
    purple = mix(np.array([0.5, 0.0, 0.5]), np.array([0.2, 0.0, 0.5]), luma / 0.05)
    blue = mix(np.array([0.0, 0.0, 1.0]), np.array([0.0, 0.5, 1.0]), (luma - 0.05) / 0.05)

    conditions = [
        luma < 0.05,
        luma < 0.10,
        (luma > 0.40) & (luma < 0.50),
        (luma >= 0.50) & (luma < 0.55),
        (luma > 0.85) & (luma < 0.95),
        luma >= 0.95,
    ]
    choices = [purple, blue, GREEN, PINK, YELLOW, RED]
    return np.select(
        [np.broadcast_to(c, dimmed.shape) for c in conditions],
        [np.broadcast_to(c, dimmed.shape) for c in choices],
        default=dimmed,
    )


class RasterEvaluator:
    """
    Grade a full frame, one chain evaluation per pixel.

    Example:
        >>> source = ArrayImageSource(frame)
        >>> graded = RasterEvaluator(source).evaluate(GradingParams(exposure=0.5))
    """

    __slots__ = ("source",)

    def __init__(self, source: ImageSource):
        """
        :param source: Image to grade
        """
        self.source = source

    @property
    def resolution(self) -> tuple[int, int]:
        return (self.source.width, self.source.height)

    def pixel_uv(self) -> NDArray[np.float64]:
        """Normalized pixel-center coordinates, shape [H, W, 2]."""
        width, height = self.resolution
        u = (np.arange(width, dtype=np.float64) + 0.5) / width
        v = (np.arange(height, dtype=np.float64) + 0.5) / height
        uu, vv = np.meshgrid(u, v)
        return np.stack([uu, vv], axis=-1)

    def evaluate_at(
        self, uv: ArrayLike, grading: PreparedGrade | GradingParams
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Grade the pixels at arbitrary coordinates.

        :param uv: Normalized coordinates [..., 2]
        :param grading: PreparedGrade or GradingParams
        :returns: Tuple of (graded colors, fetched source colors); pixels the
            lens warp pushes outside the frame are black
        """
        prepared = grading if isinstance(grading, PreparedGrade) else prepare(grading)
        params = prepared.params
        uv = np.asarray(uv, dtype=np.float64)
        base, warped, inside = lens_fetch(
            self.source, uv, params.distortion, params.chromatic_aberration
        )
        graded = grade(base, prepared, uv=warped, source=self.source, resolution=self.resolution)
        graded[~inside] = 0.0
        return graded, base

    def evaluate(self, grading: PreparedGrade | GradingParams) -> NDArray[np.float64]:
        """Grade every pixel.

        :param grading: PreparedGrade or GradingParams
        :returns: Graded frame [H, W, 3] in [0, 1]
        """
        graded, _ = self.evaluate_at(self.pixel_uv(), grading)
        return graded

    def render(
        self, grading: PreparedGrade | GradingParams, view: ViewOptions | None = None
    ) -> NDArray[np.float64]:
        """Grade every pixel and compose it for display.

        :param grading: PreparedGrade or GradingParams
        :param view: Display options (defaults to the plain grade)
        :returns: Display frame [H, W, 3]
        """
        view = view or ViewOptions()
        uv = self.pixel_uv()
        graded, base = self.evaluate_at(uv, grading)

        if view.comparison is ComparisonMode.BYPASS:
            display = base
        elif view.comparison is ComparisonMode.SPLIT:
            display = np.where((uv[..., 0] < view.split_position)[..., None], base, graded)
        else:
            display = graded

        if view.false_color:
            display = false_color(display)
        return display

"""
Grid-sampling evaluation and ``.cube`` export.

The BakeEvaluator runs the operator chain once per lattice point, with the
LUT stage disabled and no image source: every color is graded as if the
whole frame were that color, so position-independent stages match the raster
preview of a flat swatch. UV-dependent stages (vignette, grain) and the lens
pre-step cannot be represented in a LUT and do not apply.

The sweep is split into blue-axis slabs evaluated on a thread pool. The
curve and LUT kernels release the GIL, and each slab writes a disjoint part
of a preallocated buffer, so no locking is needed. Text is only produced once
every slab has finished; a cancelled bake yields nothing.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

import numpy as np
from numpy.typing import NDArray

from lumagrade.config.values import GradingParams
from lumagrade.constants import DEFAULT_LUT_SIZE, DEFAULT_LUT_TITLE
from lumagrade.grading.chain import PreparedGrade, grade, prepare
from lumagrade.lut.cube import CubeLUT, format_cube, validate_lut_size

logger = logging.getLogger(__name__)


class BakeCancelled(RuntimeError):
    """Raised when a bake is cancelled before every slab finished."""


def lattice_colors(size: int) -> NDArray[np.float64]:
    """Input colors of every lattice point.

    :param size: Grid points per axis
    :returns: Colors [size, size, size, 3] indexed [b, g, r], with
        ``color[k, j, i] = (i, j, k) / (size - 1)``
    """
    return CubeLUT.identity(size).table


class BakeEvaluator:
    """
    Sample the operator chain on a regular RGB lattice.

    Example:
        >>> baker = BakeEvaluator(size=33)
        >>> table = baker.evaluate(params)
        >>> text = baker.bake(params, title="MyLook")
    """

    __slots__ = ("size", "workers", "chunk_size", "_cancel")

    def __init__(
        self,
        size: int = DEFAULT_LUT_SIZE,
        workers: int | None = None,
        chunk_size: int = 1,
        cancel_event: threading.Event | None = None,
    ):
        """
        :param size: Grid points per axis
        :param workers: Thread count (defaults to the CPU count)
        :param chunk_size: Blue-axis slabs graded per task
        :param cancel_event: Shared event that cancels the bake once set
        :raises ValueError: If size is outside the supported range or chunk_size < 1
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.size = validate_lut_size(size)
        self.workers = workers or os.cpu_count() or 1
        self.chunk_size = chunk_size
        self._cancel = cancel_event if cancel_event is not None else threading.Event()

    def cancel(self) -> None:
        """Request cancellation of the running bake (thread-safe).

        The evaluator stays cancelled until ``reset`` is called.
        """
        self._cancel.set()

    def reset(self) -> None:
        self._cancel.clear()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def _grade_slabs(self, prepared: PreparedGrade, grid: NDArray, out: NDArray, b0: int) -> int:
        b1 = min(b0 + self.chunk_size, self.size)
        for b in range(b0, b1):
            if self._cancel.is_set():
                break
            out[b] = grade(grid[b], prepared)
        return b1

    def evaluate(self, grading: PreparedGrade | GradingParams) -> NDArray[np.float64]:
        """Grade every lattice point.

        The LUT stage is always disabled: a PreparedGrade has its parsed LUT
        dropped and GradingParams are prepared without one.

        :param grading: Grading to bake
        :returns: Lattice [size, size, size, 3] indexed [b, g, r]
        :raises BakeCancelled: If ``cancel`` was called before the sweep finished
        """
        if isinstance(grading, PreparedGrade):
            prepared = dataclasses.replace(grading, lut=None)
        else:
            prepared = prepare(grading, use_lut=False)
        grid = lattice_colors(self.size)
        out = np.empty_like(grid)

        start = time.perf_counter()
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [
                executor.submit(self._grade_slabs, prepared, grid, out, b0)
                for b0 in range(0, self.size, self.chunk_size)
            ]
            for future in as_completed(futures):
                logger.debug("[Bake] Slabs up to %d/%d done", future.result(), self.size)
                if self._cancel.is_set():
                    executor.shutdown(wait=True, cancel_futures=True)
                    break

        if self._cancel.is_set():
            logger.info("[Bake] Cancelled (size %d)", self.size)
            raise BakeCancelled(f"bake of size {self.size} was cancelled")

        logger.info(
            "[Bake] %d points in %.1f ms (%d workers)",
            self.size**3,
            (time.perf_counter() - start) * 1000,
            self.workers,
        )
        return out

    def bake(self, grading: PreparedGrade | GradingParams, title: str = DEFAULT_LUT_TITLE) -> str:
        """Grade the lattice and format it as ``.cube`` text.

        :param grading: Grading to bake
        :param title: Value of the TITLE line
        :returns: Complete ``.cube`` text
        :raises BakeCancelled: If cancelled; no partial text is produced
        """
        return format_cube(self.evaluate(grading), title)


def bake_cube(
    params: GradingParams,
    size: int = DEFAULT_LUT_SIZE,
    title: str = DEFAULT_LUT_TITLE,
    workers: int | None = None,
    cancel_event: threading.Event | None = None,
) -> str:
    """Bake a grading into ``.cube`` text.

    :param params: Grading snapshot (its own LUT is not applied)
    :param size: Grid points per axis
    :param title: Value of the TITLE line
    :param workers: Thread count (defaults to the CPU count)
    :param cancel_event: Event that cancels the bake once set
    :returns: Complete ``.cube`` text
    :raises BakeCancelled: If the event is set before the table is complete
    """
    baker = BakeEvaluator(size=size, workers=workers, cancel_event=cancel_event)
    return baker.bake(params, title=title)

"""Benchmark raster grading and LUT baking."""

import logging
import time

import numpy as np

from lumagrade import ArrayImageSource, GradingParams, Pipeline, RasterEvaluator, bake_cube
from lumagrade.config.presets import CYBERPUNK, NOIR, TEAL_ORANGE
from lumagrade.lut import CubeLUT

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def create_test_frame(width: int, height: int) -> np.ndarray:
    """Create a random sRGB frame."""
    rng = np.random.default_rng(42)
    return rng.random((height, width, 3))


def benchmark(func, warmup=3, iterations=20):
    """Benchmark a function."""
    for _ in range(warmup):
        func()

    start = time.perf_counter()
    for _ in range(iterations):
        func()
    elapsed = time.perf_counter() - start

    return (elapsed / iterations) * 1000


def run_raster_benchmarks():
    """Grade frames of increasing size."""
    logger.info("=" * 70)
    logger.info("RASTER BENCHMARKS")
    logger.info("=" * 70)

    looks = {
        "neutral": GradingParams(),
        "teal_orange": TEAL_ORANGE,
        "noir": NOIR,
        "cyberpunk": CYBERPUNK,
    }

    for width, height in [(320, 180), (1280, 720), (1920, 1080)]:
        n = width * height
        evaluator = RasterEvaluator(ArrayImageSource(create_test_frame(width, height)))
        logger.info(f"\nFrame: {width}x{height} ({n:,} pixels)")
        logger.info("-" * 70)

        for name, params in looks.items():
            ms = benchmark(lambda p=params: evaluator.evaluate(p), warmup=1, iterations=5)
            throughput = (n / ms) * 1000 / 1e6
            logger.info(f"{name:12s} {ms:8.2f} ms ({throughput:.1f}M px/sec)")


def run_bake_benchmarks():
    """Bake lattices of common sizes with different worker counts."""
    logger.info("")
    logger.info("=" * 70)
    logger.info("BAKE BENCHMARKS")
    logger.info("=" * 70)

    for size in [17, 33, 65]:
        logger.info(f"\nLUT size {size} ({size**3:,} points)")
        logger.info("-" * 70)
        for workers in [1, 4, 8]:
            ms = benchmark(
                lambda s=size, w=workers: bake_cube(TEAL_ORANGE, size=s, workers=w),
                warmup=1,
                iterations=3,
            )
            logger.info(f"workers={workers}: {ms:8.2f} ms")


def run_lut_apply_benchmarks():
    """Trilinear sampling throughput (Numba kernel)."""
    logger.info("")
    logger.info("=" * 70)
    logger.info("LUT APPLY BENCHMARKS")
    logger.info("=" * 70)

    lut = CubeLUT.identity(33)
    for n in [100_000, 1_000_000]:
        colors = np.random.default_rng(0).random((n, 3))
        ms = benchmark(lambda c=colors: lut.apply(c))
        throughput = (n / ms) * 1000 / 1e6
        logger.info(f"{n:>10,} colors: {ms:.2f} ms ({throughput:.1f}M/sec)")


def run_pipeline_benchmark():
    """Compiled pipeline versus re-preparing every call."""
    logger.info("")
    logger.info("=" * 70)
    logger.info("PIPELINE BENCHMARK")
    logger.info("=" * 70)

    frame = create_test_frame(640, 360)
    pipe = Pipeline().curve("l", [(0, 0), (0.3, 0.25), (0.7, 0.8), (1, 1)]).exposure(0.2)
    evaluator = RasterEvaluator(ArrayImageSource(frame))

    compiled_ms = benchmark(lambda: pipe(frame), iterations=10)
    raw_ms = benchmark(lambda: evaluator.evaluate(pipe.params), iterations=10)
    logger.info(f"Pipeline (compiled): {compiled_ms:.2f} ms")
    logger.info(f"Evaluator (prepare each call): {raw_ms:.2f} ms")


if __name__ == "__main__":
    run_raster_benchmarks()
    run_bake_benchmarks()
    run_lut_apply_benchmarks()
    run_pipeline_benchmark()

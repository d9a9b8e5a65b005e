"""
Numba-optimized kernels for 3D LUT sampling.

Provides JIT-compiled trilinear interpolation over a ``[b, g, r, 3]`` lattice.
"""

from __future__ import annotations

import numpy as np
from numba import njit
from numpy.typing import NDArray


@njit(fastmath=True, cache=True, nogil=True)
def trilinear_numba(
    table: NDArray[np.float64],
    colors: NDArray[np.float64],
    out: NDArray[np.float64],
) -> None:
    """
    Sample a 3D LUT with trilinear interpolation.

    Input colors are clamped to [0, 1] and scaled to [0, size-1].

    Args:
        table: Lattice [size, size, size, 3] indexed [b, g, r]
        colors: Input RGB colors [N, 3]
        out: Output RGB colors [N, 3] (modified in-place)
    """
    size = table.shape[0]
    last = size - 1
    n = colors.shape[0]

    for i in range(n):
        r = min(max(colors[i, 0], 0.0), 1.0) * last
        g = min(max(colors[i, 1], 0.0), 1.0) * last
        b = min(max(colors[i, 2], 0.0), 1.0) * last

        r0 = min(int(r), last - 1)
        g0 = min(int(g), last - 1)
        b0 = min(int(b), last - 1)
        tr = r - r0
        tg = g - g0
        tb = b - b0

        for c in range(3):
            c000 = table[b0, g0, r0, c]
            c001 = table[b0, g0, r0 + 1, c]
            c010 = table[b0, g0 + 1, r0, c]
            c011 = table[b0, g0 + 1, r0 + 1, c]
            c100 = table[b0 + 1, g0, r0, c]
            c101 = table[b0 + 1, g0, r0 + 1, c]
            c110 = table[b0 + 1, g0 + 1, r0, c]
            c111 = table[b0 + 1, g0 + 1, r0 + 1, c]

            # Interpolate along r, then g, then b
            c00 = c000 + (c001 - c000) * tr
            c01 = c010 + (c011 - c010) * tr
            c10 = c100 + (c101 - c100) * tr
            c11 = c110 + (c111 - c110) * tr
            c0 = c00 + (c01 - c00) * tg
            c1 = c10 + (c11 - c10) * tg
            out[i, c] = c0 + (c1 - c0) * tb

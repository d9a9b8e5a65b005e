"""
Numba-optimized kernels for natural cubic spline curves.

Provides JIT-compiled kernels for the tridiagonal second-derivative solve and
for batched evaluation of a fitted curve.
"""

from __future__ import annotations

import numpy as np
from numba import njit
from numpy.typing import NDArray


@njit(fastmath=True, cache=True, nogil=True)
def solve_second_derivatives_numba(
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    min_dx: float,
    out: NDArray[np.float64],
) -> None:
    """
    Solve the natural-spline tridiagonal system (Thomas algorithm).

    Boundary condition k[0] = k[n-1] = 0. Every interval width is floored at
    ``min_dx`` so near-duplicate knots cannot divide by zero.

    Args:
        xs: Knot x positions [n], increasing
        ys: Knot y values [n]
        min_dx: Minimum interval width
        out: Second derivatives [n] (modified in-place)
    """
    n = xs.shape[0]
    for i in range(n):
        out[i] = 0.0
    if n < 3:
        return

    dx = np.empty(n - 1, dtype=np.float64)
    dy = np.empty(n - 1, dtype=np.float64)
    for i in range(n - 1):
        h = xs[i + 1] - xs[i]
        dx[i] = h if h > min_dx else min_dx
        dy[i] = ys[i + 1] - ys[i]

    c_prime = np.zeros(n, dtype=np.float64)
    d_prime = np.zeros(n, dtype=np.float64)

    # Forward sweep over interior rows 1..n-2
    for i in range(1, n - 1):
        sub = dx[i - 1] / 6.0
        diag = (dx[i - 1] + dx[i]) / 3.0
        sup = dx[i] / 6.0
        rhs = dy[i] / dx[i] - dy[i - 1] / dx[i - 1]
        denom = diag - sub * c_prime[i - 1]
        c_prime[i] = sup / denom
        d_prime[i] = (rhs - sub * d_prime[i - 1]) / denom

    # Back substitution
    for i in range(n - 2, 0, -1):
        out[i] = d_prime[i] - c_prime[i] * out[i + 1]


@njit(fastmath=True, cache=True, nogil=True)
def interpolate_numba(
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    ks: NDArray[np.float64],
    x: float,
) -> float:
    """
    Evaluate a fitted natural cubic spline at a single position.

    Returns the endpoint value outside the knot range (flat extension).

    Args:
        xs: Knot x positions [n]
        ys: Knot y values [n]
        ks: Second derivatives [n]
        x: Query position

    Returns:
        Curve value at x
    """
    n = xs.shape[0]
    if n == 1 or x <= xs[0]:
        return ys[0]
    if x >= xs[n - 1]:
        return ys[n - 1]

    lo = 0
    hi = n - 1
    while hi - lo > 1:
        mid = (lo + hi) >> 1
        if xs[mid] > x:
            hi = mid
        else:
            lo = mid

    h = xs[hi] - xs[lo]
    a = (xs[hi] - x) / h
    b = (x - xs[lo]) / h
    cubic = (a * a * a - a) * ks[lo] + (b * b * b - b) * ks[hi]
    return a * ys[lo] + b * ys[hi] + cubic * (h * h) / 6.0


@njit(fastmath=True, cache=True, nogil=True)
def interpolate_array_numba(
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    ks: NDArray[np.float64],
    values: NDArray[np.float64],
    out: NDArray[np.float64],
) -> None:
    """
    Evaluate a fitted spline for every element of a flat array.

    Args:
        xs: Knot x positions [n]
        ys: Knot y values [n]
        ks: Second derivatives [n]
        values: Query positions [M]
        out: Output values [M] (modified in-place)
    """
    for i in range(values.shape[0]):
        out[i] = interpolate_numba(xs, ys, ks, values[i])

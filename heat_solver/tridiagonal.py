"""Direct solver for tridiagonal linear systems (Thomas algorithm).

Solves A·x = d where A has sub-diagonal ``a``, main diagonal ``b`` and
super-diagonal ``c``, all of length n (``a[0]`` and ``c[n-1]`` are ignored).

Forward elimination (i = 1, ..., n-1):
    c'_0 = c_0 / b_0,                 d'_0 = d_0 / b_0
    m_i  = b_i - a_i · c'_{i-1}
    c'_i = c_i / m_i,                 d'_i = (d_i - a_i · d'_{i-1}) / m_i

Back substitution (i = n-2, ..., 0):
    x_{n-1} = d'_{n-1}
    x_i     = d'_i - c'_i · x_{i+1}

No pivoting is performed: every pivot m_i must be non-zero. Strict
diagonal dominance (|b_i| > |a_i| + |c_i|) guarantees this, and is what the
implicit heat stencils produce since their diagonal is 1 + 2r against
off-diagonals of -r.
"""

from __future__ import annotations

import logging

import numpy as np
from numba import njit

logger = logging.getLogger(__name__)


@njit(cache=True)
def _thomas_solve(a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray) -> np.ndarray:
    """Thomas elimination kernel. Inputs are not modified.

    Raises
    ------
    ZeroDivisionError
        If a pivot is exactly zero.
    """
    n = len(d)
    c_prime = np.empty(n, dtype=np.float64)
    d_prime = np.empty(n, dtype=np.float64)
    x = np.empty(n, dtype=np.float64)

    if b[0] == 0.0:
        raise ZeroDivisionError("zero pivot in tridiagonal elimination")
    c_prime[0] = c[0] / b[0]
    d_prime[0] = d[0] / b[0]

    # Forward elimination
    for i in range(1, n):
        denom = b[i] - a[i] * c_prime[i - 1]
        if denom == 0.0:
            raise ZeroDivisionError("zero pivot in tridiagonal elimination")
        c_prime[i] = c[i] / denom
        d_prime[i] = (d[i] - a[i] * d_prime[i - 1]) / denom

    # Back substitution
    x[n - 1] = d_prime[n - 1]
    for i in range(n - 2, -1, -1):
        x[i] = d_prime[i] - c_prime[i] * x[i + 1]

    return x


def solve_tridiagonal(
    a: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    d: np.ndarray,
) -> np.ndarray:
    """Solve a tridiagonal system A·x = d.

    Parameters
    ----------
    a : np.ndarray
        Sub-diagonal coefficients. Shape: (n,). a[0] unused.
    b : np.ndarray
        Main diagonal coefficients. Shape: (n,).
    c : np.ndarray
        Super-diagonal coefficients. Shape: (n,). c[n-1] unused.
    d : np.ndarray
        Right-hand side. Shape: (n,).

    Returns
    -------
    np.ndarray
        Solution vector x. Shape: (n,).

    Raises
    ------
    ValueError
        If the arrays are empty or of different lengths, or if elimination
        hits a zero pivot (the matrix is not diagonally dominant).
    """
    a = np.ascontiguousarray(a, dtype=np.float64)
    b = np.ascontiguousarray(b, dtype=np.float64)
    c = np.ascontiguousarray(c, dtype=np.float64)
    d = np.ascontiguousarray(d, dtype=np.float64)

    n = d.shape[0]
    if n == 0:
        raise ValueError("Cannot solve an empty tridiagonal system.")
    if not (a.shape == b.shape == c.shape == d.shape == (n,)):
        raise ValueError(
            f"Tridiagonal coefficients must be 1-D arrays of equal length, "
            f"got {a.shape}, {b.shape}, {c.shape}, {d.shape}"
        )

    try:
        return _thomas_solve(a, b, c, d)
    except ZeroDivisionError as exc:
        raise ValueError(
            "Tridiagonal elimination hit a zero pivot; the matrix must be "
            "diagonally dominant."
        ) from exc

"""Backward-Euler solver for the 1-D bar, solved directly per step.

Discretization on x_i = i·dx, i = 0, ..., n-1, with r = α·dt/dx² and
s = dt/(ρc):

Interior nodes (i = 1, ..., n-2):
    -r·u_{i-1}^{k+1} + (1 + 2r)·u_i^{k+1} - r·u_{i+1}^{k+1} = u_i^k + s·F_i

Left end (i = 0), zero flux. The mirror node u_{-1} = u_1 is folded into
the stencil as
    (1 + r)·u_0^{k+1} - r·u_1^{k+1} = u_0^k + s·F_0

Right end (i = n-1), fixed temperature:
    u_{n-1}^{k+1} = u0

Every row is strictly diagonally dominant, so the Thomas algorithm needs
no pivoting.
"""

from __future__ import annotations

import logging

import numpy as np

from heat_solver.base import ImplicitHeatSolver
from heat_solver.source_field import build_source_1d
from heat_solver.tridiagonal import solve_tridiagonal

logger = logging.getLogger(__name__)


def assemble_system(
    u: np.ndarray,
    F: np.ndarray,
    r: float,
    src_coef: float,
    u_boundary: float,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Build the tridiagonal coefficients of one implicit step.

    Parameters
    ----------
    u : np.ndarray
        Temperature at the current time level [K]. Shape: (n,).
    F : np.ndarray
        Source field. Shape: (n,).
    r : float
        Mesh ratio α·dt/dx².
    src_coef : float
        Source coefficient dt/(ρc).
    u_boundary : float
        Dirichlet value at x = L [K].

    Returns
    -------
    a, b, c, d : np.ndarray
        Sub-, main and super-diagonal and right-hand side. Shape: (n,) each.
    """
    n = u.shape[0]
    a = np.full(n, -r, dtype=np.float64)
    b = np.full(n, 1.0 + 2.0 * r, dtype=np.float64)
    c = np.full(n, -r, dtype=np.float64)
    d = u + src_coef * F

    # Neumann at x = 0
    a[0] = 0.0
    b[0] = 1.0 + r
    c[0] = -r

    # Dirichlet at x = L
    a[n - 1] = 0.0
    b[n - 1] = 1.0
    c[n - 1] = 0.0
    d[n - 1] = u_boundary

    return a, b, c, d


class HeatSolver1D(ImplicitHeatSolver):
    """Implicit heat solver on the segment [0, L].

    The field is a flat array of n node temperatures [K]; node 0 is the
    insulated end and node n-1 the clamped end. See
    :class:`heat_solver.base.ImplicitHeatSolver` for the parameters.

    Examples
    --------
    >>> from heat_model.materials import COPPER
    >>> solver = HeatSolver1D(COPPER, 1.0, 16.0, 13.0, 80.0, 11)
    >>> while solver.step():
    ...     pass
    >>> solver.time
    16.0
    """

    ndim = 1

    def _build_source(self) -> np.ndarray:
        return build_source_1d(
            self._length,
            self._n,
            self._source_amplitude,
            self._max_time,
            scale=self._source_scale,
        )

    def _advance(self, r: float, src_coef: float) -> np.ndarray:
        a, b, c, d = assemble_system(self._u, self._source, r, src_coef, self._u0_kelvin)
        return solve_tridiagonal(a, b, c, d)

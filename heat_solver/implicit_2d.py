"""Backward-Euler solver for the 2-D square plate, solved by relaxation.

Five-point stencil on the uniform grid (x_i, y_j) = (i·dx, j·dx) with
r = α·dt/dx² and s = dt/(ρc):

    (1 + 4r)·u_ij - r·(u_{i-1,j} + u_{i+1,j} + u_{i,j-1} + u_{i,j+1})
        = u_ij^k + s·F_ij

The system is relaxed in place with Gauss-Seidel sweeps in row-major order
(j outer, i inner), each update reading the values already updated in the
same sweep. Boundaries:

- i = 0 / j = 0 (left/bottom): zero flux, the missing neighbour is replaced
  by its mirror (u_{1,j} for u_{-1,j}, u_{i,1} for u_{i,-1}).
- i = n-1 / j = n-1 (right/top): clamped to u0 on every sweep.

Sweeps stop when the largest update over the interior nodes drops below
the tolerance or after ``max_iterations`` sweeps. An unconverged field is
accepted as the step result.

The sweep order is part of the output: a red-black or Jacobi variant
converges to a slightly different field within the same tolerance.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numba import njit

from heat_model.constants import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE_K
from heat_solver.base import ImplicitHeatSolver, _is_whole
from heat_solver.source_field import build_source_2d

logger = logging.getLogger(__name__)


# ===================================================================
# GAUSS-SEIDEL RELAXATION — Numba JIT
# ===================================================================


@njit(cache=True)
def _gauss_seidel_step(
    u: np.ndarray,
    F: np.ndarray,
    r: float,
    src_coef: float,
    u_boundary: float,
    max_iterations: int,
    tolerance: float,
) -> tuple:
    """Relax one implicit step of the five-point system.

    Parameters
    ----------
    u : np.ndarray
        Temperature at the current time level [K], ``u[j, i]``.
        Shape: (n, n). NOT modified.
    F : np.ndarray
        Source field, ``F[j, i]``. Shape: (n, n).
    r : float
        Mesh ratio α·dt/dx².
    src_coef : float
        Source coefficient dt/(ρc).
    u_boundary : float
        Dirichlet value on the right and top edges [K].
    max_iterations : int
        Sweep cap.
    tolerance : float
        Convergence threshold on the largest per-node change [K].

    Returns
    -------
    u_new : np.ndarray
        Relaxed field at the new time level. Shape: (n, n).
    sweeps : int
        Number of sweeps performed.
    max_diff : float
        Largest interior change during the last sweep [K].
    """
    n = u.shape[0]
    u_new = u.copy()
    denom = 1.0 + 4.0 * r
    sweeps = 0
    max_diff = 0.0

    for _ in range(max_iterations):
        max_diff = 0.0
        for j in range(n):
            for i in range(n):
                # Dirichlet on right and top edges
                if i == n - 1 or j == n - 1:
                    u_new[j, i] = u_boundary
                    continue

                old_val = u_new[j, i]

                # Neumann on left and bottom edges via mirrored neighbours
                u_left = u_new[j, i - 1] if i > 0 else u_new[j, 1]
                u_right = u_new[j, i + 1]
                u_down = u_new[j - 1, i] if j > 0 else u_new[1, i]
                u_up = u_new[j + 1, i]

                rhs = u[j, i] + src_coef * F[j, i]
                val = (rhs + r * (u_left + u_right + u_down + u_up)) / denom
                u_new[j, i] = val

                diff = abs(val - old_val)
                if diff > max_diff:
                    max_diff = diff

        sweeps += 1
        if max_diff < tolerance:
            break

    return u_new, sweeps, max_diff


# ===================================================================
# HIGH-LEVEL SOLVER CLASS
# ===================================================================


class HeatSolver2D(ImplicitHeatSolver):
    """Implicit heat solver on the square [0, L]².

    The field is stored row-major as ``u[j, i]`` where i runs along x and
    j along y, so row 0 is the insulated bottom edge and column 0 the
    insulated left edge.

    Parameters
    ----------
    max_iterations : int
        Gauss-Seidel sweep cap per step. Default: 100.
    tolerance : float
        Gauss-Seidel convergence threshold [K]. Default: 1e-6.

    Other parameters are those of
    :class:`heat_solver.base.ImplicitHeatSolver`.
    """

    ndim = 2

    def __init__(
        self,
        *args,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tolerance: float = DEFAULT_TOLERANCE_K,
        **kwargs,
    ) -> None:
        if not _is_whole(max_iterations) or max_iterations < 1:
            raise ValueError(f"max_iterations must be an integer >= 1, got {max_iterations}")
        if not (math.isfinite(tolerance) and tolerance > 0):
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self._max_iterations = int(max_iterations)
        self._tolerance = float(tolerance)
        self._last_sweeps = 0
        self._last_residual = 0.0
        self._unconverged_steps = 0
        super().__init__(*args, **kwargs)

    def _build_source(self) -> np.ndarray:
        return build_source_2d(
            self._length,
            self._n,
            self._source_amplitude,
            self._max_time,
            scale=self._source_scale,
        )

    def _advance(self, r: float, src_coef: float) -> np.ndarray:
        u_new, sweeps, max_diff = _gauss_seidel_step(
            self._u,
            self._source,
            r,
            src_coef,
            self._u0_kelvin,
            self._max_iterations,
            self._tolerance,
        )
        self._last_sweeps = int(sweeps)
        self._last_residual = float(max_diff)

        if max_diff >= self._tolerance:
            self._unconverged_steps += 1
            logger.debug(
                "Gauss-Seidel stopped at the %d-sweep cap (max change %.3e K) at step %d",
                sweeps,
                max_diff,
                self._step_count + 1,
            )
        return u_new

    def reset(self) -> None:
        """Return to t = 0 with the field at the initial temperature."""
        super().reset()
        self._last_sweeps = 0
        self._last_residual = 0.0
        self._unconverged_steps = 0

    # ------------------------------------------------------------------
    # 2-D accessors
    # ------------------------------------------------------------------

    def temperature_at(self, i: int, j: int) -> float:
        """Temperature [K] at node (i, j), i along x and j along y."""
        return float(self._u[j, i])

    def temperature_2d(self) -> list[list[float]]:
        """Field as nested rows, ``result[j][i]``."""
        return self._u.tolist()

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @property
    def tolerance(self) -> float:
        return self._tolerance

    @property
    def last_sweeps(self) -> int:
        """Sweeps used by the most recent step (0 before the first step)."""
        return self._last_sweeps

    @property
    def last_residual(self) -> float:
        """Largest interior change of the final sweep of the most recent step [K]."""
        return self._last_residual

    @property
    def unconverged_steps(self) -> int:
        """Steps since construction/reset that ended at the sweep cap."""
        return self._unconverged_steps

"""Heat Diffusion Simulator — Solver Package.

Implicit (backward-Euler) heat equation solvers: a 1-D bar solved with the
Thomas algorithm and a 2-D plate relaxed with Gauss-Seidel sweeps.
"""

from heat_solver.base import ImplicitHeatSolver
from heat_solver.implicit_1d import HeatSolver1D
from heat_solver.implicit_2d import HeatSolver2D
from heat_solver.tridiagonal import solve_tridiagonal

__all__ = ["ImplicitHeatSolver", "HeatSolver1D", "HeatSolver2D", "solve_tridiagonal"]

"""Tests for the 1-D implicit heat solver.

Test Strategy
-------------
1. **Reference scenario**: copper bar, n=11, first step behaviour.
2. **Boundary invariant**: x=L stays at u0 exactly; x=0 has zero gradient.
3. **Stepping contract**: exact step count, terminal idempotence, reset.
4. **Physics**: steady state without source, analytic single-step check.
5. **Configuration errors**: invalid construction is rejected.
"""

from __future__ import annotations

import numpy as np
import pytest

from conftest import SCENARIO, U0_KELVIN
from heat_model.materials import COPPER, GLASS, Material
from heat_solver.implicit_1d import HeatSolver1D, assemble_system


@pytest.fixture
def solver() -> HeatSolver1D:
    """Copper bar from the reference scenario, n=11."""
    return HeatSolver1D(COPPER, nodes=11, **SCENARIO)


# ===================================================================
# REFERENCE SCENARIO
# ===================================================================


class TestReferenceScenario:
    """Copper, L=1, tmax=16, u0=13 °C, f=80, n=11."""

    def test_initial_state(self, solver: HeatSolver1D) -> None:
        assert solver.time == 0.0
        assert solver.nodes == 11
        assert solver.max_time == 16.0
        assert solver.dt == pytest.approx(0.016)
        assert solver.dx == pytest.approx(0.1)
        assert solver.u0_kelvin == pytest.approx(286.15)
        assert np.all(solver.temperature == solver.u0_kelvin)
        assert not solver.finished

    def test_first_step(self, solver: HeatSolver1D) -> None:
        before = solver.temperature.copy()

        assert solver.step() is True

        u = solver.temperature
        assert solver.time == pytest.approx(0.016)
        assert u[10] == solver.u0_kelvin
        # Insulated end warms through its heated neighbour.
        assert u[0] > before[0]
        assert u[0] >= before[1]

        rise = u - before
        # Nodes 1, 2 lie in [0.1, 0.2]·L; node 8 is outside every source region.
        assert rise[1] > rise[8]
        assert rise[2] > rise[8]
        assert np.all(rise >= -1e-9)

    def test_first_step_increment_matches_source(self, solver: HeatSolver1D) -> None:
        """Inside the source the first-step rise is close to dt·F/(ρc)."""
        solver.step()
        expected = solver.source_coefficient * solver.source[1]
        assert solver.temperature[1] - U0_KELVIN == pytest.approx(expected, rel=1e-2)


# ===================================================================
# BOUNDARY CONDITIONS
# ===================================================================


class TestBoundaries:
    """Neumann at x=0, Dirichlet at x=L."""

    @pytest.mark.parametrize("material", [COPPER, GLASS])
    def test_dirichlet_exact_every_step(self, material: Material) -> None:
        solver = HeatSolver1D(material, nodes=41, num_steps=50, **SCENARIO)
        while solver.step():
            assert solver.temperature[-1] == solver.u0_kelvin

    def test_neumann_zero_gradient_at_steady_state(self) -> None:
        """With no source the bar stays at u0 (no flux through x=0)."""
        solver = HeatSolver1D(
            COPPER, 1.0, 16.0, 13.0, source_amplitude=0.0, nodes=21, num_steps=20
        )
        while solver.step():
            pass
        np.testing.assert_allclose(solver.temperature, solver.u0_kelvin, rtol=0, atol=1e-9)

    def test_assembled_rows(self) -> None:
        u = np.full(5, 300.0)
        F = np.array([0.0, 1.0, 0.0, 0.0, 0.0])
        a, b, c, d = assemble_system(u, F, r=0.5, src_coef=2.0, u_boundary=280.0)

        assert (b[0], c[0]) == (1.5, -0.5)
        np.testing.assert_array_equal(a[1:4], -0.5)
        np.testing.assert_array_equal(b[1:4], 2.0)
        np.testing.assert_array_equal(c[1:4], -0.5)
        assert d[1] == 302.0
        assert (a[4], b[4], c[4], d[4]) == (0.0, 1.0, 0.0, 280.0)


# ===================================================================
# STEPPING CONTRACT
# ===================================================================


class TestStepping:
    """Two-state machine: RUNNING → FINISHED."""

    def test_exactly_default_step_count(self) -> None:
        solver = HeatSolver1D(COPPER, nodes=5, **SCENARIO)
        calls = 0
        while solver.step():
            calls += 1
            assert solver.time == pytest.approx(calls * 16.0 / 1000)
        assert calls == 1000
        assert solver.time == 16.0
        assert solver.finished

    def test_custom_step_count(self) -> None:
        solver = HeatSolver1D(COPPER, nodes=5, num_steps=7, **SCENARIO)
        assert sum(solver.step() for _ in range(10)) == 7
        assert solver.step_count == 7
        assert solver.time == solver.max_time

    def test_terminal_idempotence(self) -> None:
        solver = HeatSolver1D(COPPER, nodes=11, num_steps=3, **SCENARIO)
        while solver.step():
            pass
        field = solver.temperature.copy()
        t = solver.time

        for _ in range(5):
            assert solver.step() is False
        np.testing.assert_array_equal(solver.temperature, field)
        assert solver.time == t

    def test_reset_reproduces_trajectory(self) -> None:
        solver = HeatSolver1D(COPPER, nodes=31, num_steps=20, **SCENARIO)
        fresh = HeatSolver1D(COPPER, nodes=31, num_steps=20, **SCENARIO)

        first_run = []
        while solver.step():
            first_run.append(solver.temperature.copy())

        solver.reset()
        assert solver.time == 0.0
        assert not solver.finished
        np.testing.assert_array_equal(solver.temperature, fresh.temperature)
        np.testing.assert_array_equal(solver.source, fresh.source)

        for expected in first_run:
            assert solver.step()
            np.testing.assert_array_equal(solver.temperature, expected)

    def test_temperature_is_read_only(self, solver: HeatSolver1D) -> None:
        with pytest.raises(ValueError):
            solver.temperature[0] = 0.0
        with pytest.raises(ValueError):
            solver.source[0] = 0.0


# ===================================================================
# CONFIGURATION ERRORS
# ===================================================================


class TestConfigurationErrors:
    """Invalid construction is rejected before any array is built."""

    @pytest.mark.parametrize("nodes", [0, 1, -3])
    def test_too_few_nodes(self, nodes: int) -> None:
        with pytest.raises(ValueError, match="Node count"):
            HeatSolver1D(COPPER, nodes=nodes, **SCENARIO)

    @pytest.mark.parametrize("length", [0.0, -1.0])
    def test_non_positive_length(self, length: float) -> None:
        with pytest.raises(ValueError, match="length"):
            HeatSolver1D(COPPER, length, 16.0, 13.0, 80.0, 11)

    @pytest.mark.parametrize("max_time", [0.0, -16.0])
    def test_non_positive_max_time(self, max_time: float) -> None:
        with pytest.raises(ValueError, match="Maximum time"):
            HeatSolver1D(COPPER, 1.0, max_time, 13.0, 80.0, 11)

    def test_zero_steps(self) -> None:
        with pytest.raises(ValueError, match="time steps"):
            HeatSolver1D(COPPER, nodes=11, num_steps=0, **SCENARIO)

    @pytest.mark.parametrize(
        "overrides",
        [
            dict(length=float("inf")),
            dict(max_time=float("inf")),
            dict(max_time=float("nan")),
            dict(initial_temp_celsius=float("nan")),
            dict(source_amplitude=float("inf")),
            dict(source_amplitude=float("nan")),
        ],
    )
    def test_non_finite_values(self, overrides: dict) -> None:
        with pytest.raises(ValueError, match="finite"):
            HeatSolver1D(COPPER, nodes=11, **{**SCENARIO, **overrides})

    def test_non_finite_source_scale(self) -> None:
        with pytest.raises(ValueError, match="Source scale"):
            HeatSolver1D(COPPER, nodes=11, source_scale=float("nan"), **SCENARIO)

    @pytest.mark.parametrize("nodes", [float("inf"), float("nan"), 10.5])
    def test_non_integral_nodes(self, nodes: float) -> None:
        with pytest.raises(ValueError, match="Node count"):
            HeatSolver1D(COPPER, nodes=nodes, **SCENARIO)

    def test_non_finite_step_count(self) -> None:
        with pytest.raises(ValueError, match="time steps"):
            HeatSolver1D(COPPER, nodes=11, num_steps=float("inf"), **SCENARIO)

    def test_minimum_grid_runs(self) -> None:
        """n=2: one insulated node, one clamped node."""
        solver = HeatSolver1D(COPPER, nodes=2, num_steps=5, **SCENARIO)
        while solver.step():
            pass
        assert solver.temperature[1] == solver.u0_kelvin
        assert np.all(np.isfinite(solver.temperature))

"""Simulation Runner — drives one solver per material to completion.

Mirrors the side-by-side comparison the simulator is used for: the same
bar (or plate), initial temperature and source are simulated for every
material of the catalog, and all solvers advance in lock-step frames until
each has reached tmax.

Snapshots store the temperature rise ΔT = u − u0 [K], which is what the
plots display.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

import numpy as np

from heat_model.constants import SimulationConfig, hash_array
from heat_model.materials import Material
from heat_solver.base import ImplicitHeatSolver
from heat_solver.implicit_1d import HeatSolver1D
from heat_solver.implicit_2d import HeatSolver2D

logger = logging.getLogger(__name__)

# Minimum colour span [K] so that an almost unheated field is not stretched.
_MIN_RISE_SPAN_K = 0.1
_FALLBACK_RISE_MAX_K = 1.0
_RISE_MARGIN = 0.05


# ---------------------------------------------------------------------------
# Solver Factory
# ---------------------------------------------------------------------------


def create_solver(
    dimension: str,
    material: Material,
    config: SimulationConfig,
    nodes: int | None = None,
) -> ImplicitHeatSolver:
    """Build a 1-D or 2-D solver from configuration.

    Parameters
    ----------
    dimension : str
        ``'1d'`` or ``'2d'``.
    material : Material
        Material to simulate.
    config : SimulationConfig
        Run configuration.
    nodes : int, optional
        Override the configured node count.

    Returns
    -------
    ImplicitHeatSolver
        A solver in the RUNNING state at t = 0.
    """
    if nodes is None:
        nodes = config.grid.nodes_for(dimension)
    dom = config.domain
    args = (
        material,
        dom.length_m,
        dom.max_time_s,
        dom.initial_temperature_C,
        dom.source_amplitude,
        nodes,
    )
    common = dict(
        num_steps=config.solver.num_steps,
        source_scale=config.solver.source_scale,
    )
    if dimension == "1d":
        return HeatSolver1D(*args, **common)
    if dimension == "2d":
        gs = config.solver.gauss_seidel
        return HeatSolver2D(
            *args,
            max_iterations=gs.max_iterations,
            tolerance=gs.tolerance_K,
            **common,
        )
    raise ValueError(f"Unknown dimension '{dimension}', expected '1d' or '2d'")


# ---------------------------------------------------------------------------
# Result Container
# ---------------------------------------------------------------------------


@dataclass
class SimulationResults:
    """Container for simulation output data.

    Attributes
    ----------
    dimension : str
        ``'1d'`` or ``'2d'``.
    material_names : list[str]
        Display names, in panel order.
    times : list[float]
        Simulated time [s] of each snapshot.
    snapshots : dict[str, list[np.ndarray]]
        Material name → ΔT fields [K], one per snapshot. 1-D fields have
        shape (n,), 2-D fields shape (n, n) indexed ``[j, i]``.
    length_m : float
        Domain length [m].
    u0_kelvin : float
        Reference temperature [K].
    metadata : dict
        Run metadata (timing, steps, grid, SHA-256 digest of each final field).
    """

    dimension: str
    material_names: list[str] = field(default_factory=list)
    times: list[float] = field(default_factory=list)
    snapshots: dict[str, list[np.ndarray]] = field(default_factory=dict)
    length_m: float = 1.0
    u0_kelvin: float = 0.0
    metadata: dict = field(default_factory=dict)

    def final_rise(self, name: str) -> np.ndarray:
        """Last recorded ΔT field of a material."""
        return self.snapshots[name][-1]


def temperature_rise_range(results: SimulationResults) -> tuple[float, float]:
    """Shared colour range (0, max ΔT + 5 %) over all final fields.

    A maximum rise below 0.1 K is replaced by 1 K.

    Returns
    -------
    tuple[float, float]
        (vmin, vmax) in K.
    """
    global_max = 0.0
    for name in results.material_names:
        frames = results.snapshots.get(name)
        if frames:
            global_max = max(global_max, float(np.max(frames[-1])))

    margin = global_max * _RISE_MARGIN
    if global_max < _MIN_RISE_SPAN_K:
        global_max = _FALLBACK_RISE_MAX_K
    return 0.0, global_max + margin


# ---------------------------------------------------------------------------
# Simulation Runner
# ---------------------------------------------------------------------------


class SimulationRunner:
    """Run one solver per material in lock-step.

    Parameters
    ----------
    config : SimulationConfig
        Full simulation configuration.
    dimension : str
        ``'1d'`` or ``'2d'``.
    materials : list[Material], optional
        Materials to simulate. Default: every material of the config, in
        catalog order.
    nodes : int, optional
        Override the configured node count.
    """

    def __init__(
        self,
        config: SimulationConfig,
        dimension: str,
        materials: list[Material] | None = None,
        nodes: int | None = None,
    ) -> None:
        if dimension not in ("1d", "2d"):
            raise ValueError(f"Unknown dimension '{dimension}', expected '1d' or '2d'")
        self._config = config
        self._dimension = dimension

        if materials is None:
            materials = list(config.materials.values())
        if not materials:
            raise ValueError("SimulationRunner needs at least one material.")

        self._solvers: list[ImplicitHeatSolver] = [
            create_solver(dimension, m, config, nodes=nodes) for m in materials
        ]

        logger.info(
            "SimulationRunner initialized: %s, %d materials (%s), n=%d, steps/frame=%d",
            dimension,
            len(self._solvers),
            ", ".join(m.name for m in materials),
            self._solvers[0].nodes,
            config.run.steps_per_frame,
        )

    @property
    def solvers(self) -> list[ImplicitHeatSolver]:
        return list(self._solvers)

    @property
    def finished(self) -> bool:
        return all(s.finished for s in self._solvers)

    def reset(self) -> None:
        """Reset every solver to t = 0."""
        for solver in self._solvers:
            solver.reset()
        logger.info("All %d solvers reset", len(self._solvers))

    def advance_frame(self) -> bool:
        """Advance every solver by ``steps_per_frame`` steps.

        Returns
        -------
        bool
            True if at least one solver advanced.
        """
        advanced = False
        for _ in range(self._config.run.steps_per_frame):
            any_step = False
            for solver in self._solvers:
                if solver.step():
                    any_step = True
            if not any_step:
                break
            advanced = True
        return advanced

    def run(self, max_frames: int | None = None) -> SimulationResults:
        """Execute frames until every solver reports FINISHED.

        Parameters
        ----------
        max_frames : int, optional
            Stop after this many frames even if not finished.

        Returns
        -------
        SimulationResults
            Snapshots of ΔT for every material.
        """
        first = self._solvers[0]
        results = SimulationResults(
            dimension=self._dimension,
            material_names=[s.material.name for s in self._solvers],
            length_m=first.length,
            u0_kelvin=first.u0_kelvin,
            metadata={
                "nodes": first.nodes,
                "num_steps": first.num_steps,
                "dt_s": first.dt,
                "max_time_s": first.max_time,
                "steps_per_frame": self._config.run.steps_per_frame,
            },
        )
        for name in results.material_names:
            results.snapshots[name] = []

        interval = self._config.run.snapshot_interval
        self._record(results)

        logger.info(
            "Starting %s run: tmax=%.3g s, %d steps of dt=%.3e s",
            self._dimension,
            first.max_time,
            first.num_steps,
            first.dt,
        )
        wall_start = time.perf_counter()
        frames = 0
        last_recorded = 0
        progress_every = max(1, first.num_steps // 10)
        next_progress = progress_every

        while max_frames is None or frames < max_frames:
            if not self.advance_frame():
                break
            frames += 1
            if frames % interval == 0:
                self._record(results)
                last_recorded = frames

            if first.step_count >= next_progress:
                next_progress = (first.step_count // progress_every + 1) * progress_every
                logger.info(
                    "  Frame %d (t=%.3f s): max ΔT=%.3f K",
                    frames,
                    first.time,
                    max(float(np.max(s.temperature)) - s.u0_kelvin for s in self._solvers),
                )

        # Always capture the final state
        if frames > 0 and last_recorded != frames:
            self._record(results)

        wall_elapsed = time.perf_counter() - wall_start
        results.metadata["frames"] = frames
        results.metadata["wall_time_s"] = wall_elapsed
        results.metadata["finished"] = self.finished
        results.metadata["field_digests"] = {
            s.material.name: hash_array(s.temperature) for s in self._solvers
        }

        logger.info(
            "Run complete: %d frames, %.2f s wall time, finished=%s",
            frames,
            wall_elapsed,
            self.finished,
        )
        return results

    def _record(self, results: SimulationResults) -> None:
        results.times.append(self._solvers[0].time)
        for solver in self._solvers:
            rise = np.asarray(solver.temperature) - solver.u0_kelvin
            results.snapshots[solver.material.name].append(rise)

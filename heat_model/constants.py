"""Default constants, typed configuration, and configuration loader.

Run parameters are loaded from YAML configuration files into frozen
dataclasses and validated before any solver is built. The module-level
defaults below mirror ``config/default_config.yaml`` so that solvers and
tests can be set up without touching the filesystem.
"""

from __future__ import annotations

import hashlib
import logging
import math
import platform
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import numba
import numpy as np
import yaml

from heat_model.materials import MATERIALS, Material

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

KELVIN_OFFSET = 273.15

DEFAULT_NUM_STEPS = 1000
DEFAULT_SOURCE_SCALE = 100.0
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_TOLERANCE_K = 1e-6


# ---------------------------------------------------------------------------
# Configuration Data Classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DomainConfig:
    """Physical problem parameters shared by every solver of a run.

    Attributes
    ----------
    length_m : float
        Domain length L [m] (side of the square in 2-D).
    max_time_s : float
        Simulated horizon tmax [s].
    initial_temperature_C : float
        Initial and Dirichlet boundary temperature [°C].
    source_amplitude : float
        Source amplitude parameter f; regions receive tmax·f².
    """

    length_m: float = 1.0
    max_time_s: float = 16.0
    initial_temperature_C: float = 13.0
    source_amplitude: float = 80.0

    @property
    def initial_temperature_K(self) -> float:
        """Initial temperature converted to Kelvin."""
        return self.initial_temperature_C + KELVIN_OFFSET


@dataclass(frozen=True)
class GridConfig:
    """Uniform grid sizes.

    Attributes
    ----------
    nodes_1d : int
        Number of nodes of the 1-D bar.
    nodes_2d : int
        Number of nodes per axis of the 2-D plate.
    """

    nodes_1d: int = 1001
    nodes_2d: int = 101

    def nodes_for(self, dimension: str) -> int:
        """Return the node count for ``'1d'`` or ``'2d'``."""
        if dimension == "1d":
            return self.nodes_1d
        if dimension == "2d":
            return self.nodes_2d
        raise ValueError(f"Unknown dimension '{dimension}', expected '1d' or '2d'")


@dataclass(frozen=True)
class GaussSeidelConfig:
    """Relaxation settings for the 2-D implicit solve.

    Attributes
    ----------
    max_iterations : int
        Maximum sweeps per time step.
    tolerance_K : float
        Stop when the largest per-sweep change falls below this [K].
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tolerance_K: float = DEFAULT_TOLERANCE_K


@dataclass(frozen=True)
class SolverConfig:
    """Time discretization and source settings.

    Attributes
    ----------
    num_steps : int
        Number of equal steps between t=0 and tmax (dt = tmax/num_steps).
    source_scale : float
        Amplification applied to the source field (visualization constant,
        not physical).
    gauss_seidel : GaussSeidelConfig
        2-D relaxation settings.
    """

    num_steps: int = DEFAULT_NUM_STEPS
    source_scale: float = DEFAULT_SOURCE_SCALE
    gauss_seidel: GaussSeidelConfig = field(default_factory=GaussSeidelConfig)


@dataclass(frozen=True)
class RunConfig:
    """Driver settings for :class:`simulation.runner.SimulationRunner`.

    Attributes
    ----------
    steps_per_frame : int
        Solver steps taken per frame.
    snapshot_interval : int
        Record a snapshot every N frames.
    """

    steps_per_frame: int = 1
    snapshot_interval: int = 50


@dataclass(frozen=True)
class Assumption:
    """A documented model assumption.

    Attributes
    ----------
    parameter : str
        Name of the assumed parameter.
    value : str
        Assumed value (string representation).
    source : str
        Rationale.
    """

    parameter: str
    value: str
    source: str


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes
    ----------
    materials : dict[str, Material]
        Material catalog, keyed by lowercase name.
    domain : DomainConfig
        Physical problem parameters.
    grid : GridConfig
        Grid sizes.
    solver : SolverConfig
        Time stepping and relaxation settings.
    run : RunConfig
        Driver settings.
    assumptions : list[Assumption]
        Registry of documented model assumptions.
    """

    materials: dict[str, Material] = field(default_factory=lambda: dict(MATERIALS))
    domain: DomainConfig = field(default_factory=DomainConfig)
    grid: GridConfig = field(default_factory=GridConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    run: RunConfig = field(default_factory=RunConfig)
    assumptions: list[Assumption] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Configuration Loader
# ---------------------------------------------------------------------------


def default_config() -> SimulationConfig:
    """Return the built-in configuration (same values as the default YAML)."""
    config = SimulationConfig()
    config.assumptions = _build_assumptions_registry(config.solver)
    _validate_config(config)
    return config


def load_config(config_path: str | Path) -> SimulationConfig:
    """Load and validate a simulation configuration from a YAML file.

    Missing sections or keys fall back to the built-in defaults.

    Parameters
    ----------
    config_path : str or Path
        Path to the YAML configuration file.

    Returns
    -------
    SimulationConfig
        Fully populated, typed configuration object.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    ValueError
        If values are invalid.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw: dict[str, Any] = yaml.safe_load(f) or {}

    logger.info("Loading configuration from: %s", config_path)
    config = config_from_dict(raw)
    logger.info(
        "Configuration loaded successfully. %d materials, %d assumptions registered.",
        len(config.materials),
        len(config.assumptions),
    )
    return config


def config_from_dict(raw: dict[str, Any]) -> SimulationConfig:
    """Build a validated configuration from a parsed YAML mapping."""
    defaults = SimulationConfig()

    # --- Parse materials ---
    materials = dict(defaults.materials)
    for key, props in (raw.get("materials") or {}).items():
        materials[str(key).lower()] = Material(
            name=str(props.get("name", key)),
            conductivity=float(props["conductivity"]),
            density=float(props["density"]),
            specific_heat=float(props["specific_heat"]),
        )

    # --- Parse domain ---
    dom = raw.get("domain") or {}
    d0 = defaults.domain
    domain = DomainConfig(
        length_m=float(dom.get("length_m", d0.length_m)),
        max_time_s=float(dom.get("max_time_s", d0.max_time_s)),
        initial_temperature_C=float(dom.get("initial_temperature_C", d0.initial_temperature_C)),
        source_amplitude=float(dom.get("source_amplitude", d0.source_amplitude)),
    )

    # --- Parse grid ---
    grd = raw.get("grid") or {}
    grid = GridConfig(
        nodes_1d=int(grd.get("nodes_1d", defaults.grid.nodes_1d)),
        nodes_2d=int(grd.get("nodes_2d", defaults.grid.nodes_2d)),
    )

    # --- Parse solver ---
    slv = raw.get("solver") or {}
    gs = slv.get("gauss_seidel") or {}
    s0 = defaults.solver
    solver = SolverConfig(
        num_steps=int(slv.get("num_steps", s0.num_steps)),
        source_scale=float(slv.get("source_scale", s0.source_scale)),
        gauss_seidel=GaussSeidelConfig(
            max_iterations=int(gs.get("max_iterations", s0.gauss_seidel.max_iterations)),
            tolerance_K=float(gs.get("tolerance_K", s0.gauss_seidel.tolerance_K)),
        ),
    )

    # --- Parse run ---
    rn = raw.get("run") or {}
    run = RunConfig(
        steps_per_frame=int(rn.get("steps_per_frame", defaults.run.steps_per_frame)),
        snapshot_interval=int(rn.get("snapshot_interval", defaults.run.snapshot_interval)),
    )

    config = SimulationConfig(
        materials=materials,
        domain=domain,
        grid=grid,
        solver=solver,
        run=run,
        assumptions=_build_assumptions_registry(solver),
    )
    _validate_config(config)
    return config


def _build_assumptions_registry(solver: SolverConfig) -> list[Assumption]:
    """Build the documented assumptions registry."""
    return [
        Assumption(
            "Source Amplitude",
            "tmax * f^2",
            "Inherited formula; ties injected power to the simulated horizon",
        ),
        Assumption(
            "Source Scale",
            f"{solver.source_scale:g}x",
            "Visualization amplification, not physical",
        ),
        Assumption("Time Step", f"tmax / {solver.num_steps}", "Fixed, non-adaptive"),
        Assumption("Left/Bottom Boundary", "zero flux", "Mirrored neighbour (Neumann)"),
        Assumption("Right/Top Boundary", "u0", "Clamped to initial temperature (Dirichlet)"),
        Assumption(
            "2-D Linear Solve",
            f"Gauss-Seidel, <= {solver.gauss_seidel.max_iterations} sweeps",
            "Best effort; unconverged fields are accepted",
        ),
    ]


def _validate_config(config: SimulationConfig) -> None:
    """Validate constraints on configuration values.

    Raises
    ------
    ValueError
        If any value is invalid.
    """
    if not config.materials:
        raise ValueError("At least one material must be configured.")
    domain = config.domain
    if not (math.isfinite(domain.length_m) and domain.length_m > 0):
        raise ValueError(f"Domain length must be positive and finite, got {domain.length_m}")
    if not (math.isfinite(domain.max_time_s) and domain.max_time_s > 0):
        raise ValueError(f"Maximum time must be positive and finite, got {domain.max_time_s}")
    if not math.isfinite(domain.initial_temperature_C):
        raise ValueError(f"Initial temperature must be finite, got {domain.initial_temperature_C}")
    if not math.isfinite(domain.source_amplitude):
        raise ValueError(f"Source amplitude must be finite, got {domain.source_amplitude}")
    if not math.isfinite(config.solver.source_scale):
        raise ValueError(f"Source scale must be finite, got {config.solver.source_scale}")
    if config.grid.nodes_1d < 2 or config.grid.nodes_2d < 2:
        raise ValueError("Grids need at least 2 nodes per axis.")
    if config.solver.num_steps < 1:
        raise ValueError("Number of time steps must be at least 1.")
    if config.solver.gauss_seidel.max_iterations < 1:
        raise ValueError("Gauss-Seidel needs at least one sweep.")
    tolerance = config.solver.gauss_seidel.tolerance_K
    if not (math.isfinite(tolerance) and tolerance > 0):
        raise ValueError("Gauss-Seidel tolerance must be positive and finite.")
    if config.run.steps_per_frame < 1:
        raise ValueError("steps_per_frame must be at least 1.")
    if config.run.snapshot_interval < 1:
        raise ValueError("snapshot_interval must be at least 1.")

    logger.debug("Configuration validation passed.")


def override_domain(config: SimulationConfig, **overrides: float | None) -> SimulationConfig:
    """Return a copy of ``config`` with domain values replaced and re-validated.

    ``None`` values are ignored, so unset CLI options can be passed as-is.
    """
    values = {k: float(v) for k, v in overrides.items() if v is not None}
    if not values:
        return config
    updated = replace(config, domain=replace(config.domain, **values))
    _validate_config(updated)
    return updated


def log_assumptions(config: SimulationConfig) -> None:
    """Log all documented model assumptions to the logger."""
    logger.info("=" * 70)
    logger.info("MODEL ASSUMPTIONS REGISTRY")
    logger.info("=" * 70)
    for i, a in enumerate(config.assumptions, 1):
        logger.info(
            "  [%02d] %-22s = %-34s | %s",
            i,
            a.parameter,
            a.value,
            a.source,
        )
    logger.info("=" * 70)


def log_platform_info() -> None:
    """Log platform and library version information for reproducibility."""
    logger.info("=" * 70)
    logger.info("PLATFORM INFORMATION (for reproducibility)")
    logger.info("=" * 70)
    logger.info("  Python:    %s", sys.version)
    logger.info("  Platform:  %s", platform.platform())
    logger.info("  NumPy:     %s", np.__version__)
    logger.info("  Numba:     %s", numba.__version__)
    logger.info("  Float64 eps: %e", np.finfo(np.float64).eps)
    logger.info("=" * 70)


def hash_array(arr: np.ndarray) -> str:
    """Compute SHA-256 hash of a NumPy array for reproducibility verification.

    Parameters
    ----------
    arr : np.ndarray
        Array to hash.

    Returns
    -------
    str
        Hex digest of the SHA-256 hash.
    """
    return hashlib.sha256(np.ascontiguousarray(arr).tobytes()).hexdigest()

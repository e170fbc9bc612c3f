"""Shared configuration and stepping contract of the implicit heat solvers.

Both solvers integrate

    ∂u/∂t = α ∇²u + F / (ρ c)

with backward Euler over a fixed number of equal steps from t = 0 to
t = tmax, on a uniform grid with spacing dx = L/(n-1). The left (and
bottom) boundary is insulated, the right (and top) boundary is held at the
initial temperature. Subclasses supply the source layout and the linear
solve of one implicit step; everything else lives here.

State machine::

    RUNNING  --step()-->  RUNNING | FINISHED
    FINISHED --step()-->  FINISHED   (returns False, no change)
    any      --reset()--> RUNNING    (t = 0, u = u0)
"""

from __future__ import annotations

import logging
import math
import numbers
from abc import ABC, abstractmethod

import numpy as np

from heat_model.constants import DEFAULT_NUM_STEPS, DEFAULT_SOURCE_SCALE, KELVIN_OFFSET
from heat_model.materials import Material

logger = logging.getLogger(__name__)


def _read_only(arr: np.ndarray) -> np.ndarray:
    view = arr.view()
    view.flags.writeable = False
    return view


def _is_whole(value) -> bool:
    """True for integers and finite integral floats such as ``11.0``."""
    if isinstance(value, numbers.Integral):
        return True
    return isinstance(value, numbers.Real) and math.isfinite(value) and int(value) == value


class ImplicitHeatSolver(ABC):
    """Backward-Euler heat solver on a uniform grid.

    Parameters
    ----------
    material : Material
        Constant material properties.
    length : float
        Domain length L [m]. Must be positive.
    max_time : float
        Simulated horizon tmax [s]. Must be positive.
    initial_temp_celsius : float
        Initial temperature, also the Dirichlet boundary value [°C].
    source_amplitude : float
        Source amplitude parameter f.
    nodes : int
        Nodes per axis n. Must be at least 2.
    num_steps : int
        Number of equal time steps; dt = tmax / num_steps.
    source_scale : float
        Presentation amplification of the source field.

    Raises
    ------
    ValueError
        If any configuration value is out of range.
    """

    #: Number of spatial dimensions; set by subclasses.
    ndim: int = 0

    def __init__(
        self,
        material: Material,
        length: float,
        max_time: float,
        initial_temp_celsius: float,
        source_amplitude: float,
        nodes: int,
        *,
        num_steps: int = DEFAULT_NUM_STEPS,
        source_scale: float = DEFAULT_SOURCE_SCALE,
    ) -> None:
        if not isinstance(material, Material):
            raise ValueError(f"material must be a Material, got {type(material).__name__}")
        if not _is_whole(nodes) or nodes < 2:
            raise ValueError(f"Node count must be an integer >= 2, got {nodes}")
        if not (math.isfinite(length) and length > 0):
            raise ValueError(f"Domain length must be positive and finite, got {length}")
        if not (math.isfinite(max_time) and max_time > 0):
            raise ValueError(f"Maximum time must be positive and finite, got {max_time}")
        if not _is_whole(num_steps) or num_steps < 1:
            raise ValueError(f"Number of time steps must be an integer >= 1, got {num_steps}")
        for label, value in (
            ("Initial temperature", initial_temp_celsius),
            ("Source amplitude", source_amplitude),
            ("Source scale", source_scale),
        ):
            if not math.isfinite(value):
                raise ValueError(f"{label} must be finite, got {value}")

        self._material = material
        self._length = float(length)
        self._max_time = float(max_time)
        self._n = int(nodes)
        self._num_steps = int(num_steps)
        self._dx = self._length / (self._n - 1)
        self._dt = self._max_time / self._num_steps
        self._u0_kelvin = float(initial_temp_celsius) + KELVIN_OFFSET
        self._source_amplitude = float(source_amplitude)
        self._source_scale = float(source_scale)

        self._source = self._build_source()
        self._source.flags.writeable = False

        self._u = np.full(self._source.shape, self._u0_kelvin, dtype=np.float64)
        self._t = 0.0
        self._step_count = 0

        logger.info(
            "%s initialized: material=%s, n=%d, L=%.3g m, tmax=%.3g s, dt=%.3e s, "
            "r=%.3e, u0=%.2f K",
            type(self).__name__,
            material.name,
            self._n,
            self._length,
            self._max_time,
            self._dt,
            self.mesh_ratio,
            self._u0_kelvin,
        )

    # ------------------------------------------------------------------
    # Strategy hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _build_source(self) -> np.ndarray:
        """Return the source field F, same shape as the temperature field."""

    @abstractmethod
    def _advance(self, r: float, src_coef: float) -> np.ndarray:
        """Solve one implicit step from the current field.

        Parameters
        ----------
        r : float
            Mesh ratio α·dt/dx².
        src_coef : float
            Source coefficient dt/(ρc).

        Returns
        -------
        np.ndarray
            The new temperature field. Must not alias ``self._u``.
        """

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------

    def step(self) -> bool:
        """Advance the field by one time step.

        Returns
        -------
        bool
            True if time advanced, False if tmax was already reached (the
            call is then a no-op).
        """
        if self.finished:
            return False

        self._u = self._advance(self.mesh_ratio, self.source_coefficient)
        self._step_count += 1
        if self._step_count == self._num_steps:
            self._t = self._max_time
        else:
            self._t = self._step_count * self._dt

        if self.finished:
            logger.debug(
                "%s (%s) reached tmax=%.3g s after %d steps",
                type(self).__name__,
                self._material.name,
                self._max_time,
                self._step_count,
            )
        return True

    def reset(self) -> None:
        """Return to t = 0 with the field at the initial temperature."""
        self._u = np.full(self._source.shape, self._u0_kelvin, dtype=np.float64)
        self._t = 0.0
        self._step_count = 0

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def temperature(self) -> np.ndarray:
        """Current temperature field [K] (read-only view)."""
        return _read_only(self._u)

    @property
    def source(self) -> np.ndarray:
        """Source field F (read-only)."""
        return self._source

    @property
    def time(self) -> float:
        """Current simulated time [s]."""
        return self._t

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def finished(self) -> bool:
        """True once the solver has reached tmax."""
        return self._step_count >= self._num_steps

    @property
    def nodes(self) -> int:
        """Nodes per axis."""
        return self._n

    @property
    def num_steps(self) -> int:
        return self._num_steps

    @property
    def max_time(self) -> float:
        return self._max_time

    @property
    def length(self) -> float:
        return self._length

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def dx(self) -> float:
        return self._dx

    @property
    def u0_kelvin(self) -> float:
        """Initial and Dirichlet boundary temperature [K]."""
        return self._u0_kelvin

    @property
    def material(self) -> Material:
        return self._material

    @property
    def mesh_ratio(self) -> float:
        """r = α·dt/dx²."""
        return self._material.alpha * self._dt / (self._dx * self._dx)

    @property
    def source_coefficient(self) -> float:
        """dt/(ρc), converts the source into a temperature increment."""
        return self._dt / (self._material.density * self._material.specific_heat)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(material={self._material.name!r}, n={self._n}, "
            f"t={self._t:.6g}/{self._max_time:.6g})"
        )

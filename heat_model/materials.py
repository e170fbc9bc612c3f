"""Material descriptors for the heat diffusion solvers.

A material is fully described by three constant thermophysical properties;
the thermal diffusivity used by the solvers is derived from them:

    α = λ / (ρ · c)

The built-in catalog reproduces the four materials of the classroom
exercise this simulator is modelled on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Material:
    """Constant thermophysical properties of a homogeneous material.

    Attributes
    ----------
    name : str
        Human-readable material name.
    conductivity : float
        Thermal conductivity λ [W/(m·K)].
    density : float
        Density ρ [kg/m³].
    specific_heat : float
        Specific heat capacity c [J/(kg·K)].
    """

    name: str
    conductivity: float
    density: float
    specific_heat: float

    def __post_init__(self) -> None:
        if self.density <= 0:
            raise ValueError(f"Material '{self.name}': density must be positive, got {self.density}")
        if self.specific_heat <= 0:
            raise ValueError(
                f"Material '{self.name}': specific heat must be positive, got {self.specific_heat}"
            )
        if self.conductivity < 0:
            raise ValueError(
                f"Material '{self.name}': conductivity cannot be negative, got {self.conductivity}"
            )

    @property
    def heat_capacity(self) -> float:
        """Volumetric heat capacity ρ·c [J/(m³·K)]."""
        return self.density * self.specific_heat

    @property
    def alpha(self) -> float:
        """Thermal diffusivity α = λ/(ρc) [m²/s]."""
        return self.conductivity / (self.density * self.specific_heat)


COPPER = Material("Copper", conductivity=389.0, density=8940.0, specific_heat=380.0)
IRON = Material("Iron", conductivity=80.2, density=7874.0, specific_heat=440.0)
GLASS = Material("Glass", conductivity=1.2, density=2530.0, specific_heat=840.0)
POLYSTYRENE = Material("Polystyrene", conductivity=0.1, density=1040.0, specific_heat=1200.0)

# Ordered: the runner lays panels out in this order.
MATERIALS: dict[str, Material] = {
    "copper": COPPER,
    "iron": IRON,
    "glass": GLASS,
    "polystyrene": POLYSTYRENE,
}


def get_material(key: str, catalog: dict[str, Material] | None = None) -> Material:
    """Look up a material by key (case-insensitive).

    Parameters
    ----------
    key : str
        Catalog key, e.g. ``"copper"``.
    catalog : dict[str, Material], optional
        Catalog to search. Default: the built-in :data:`MATERIALS`.

    Returns
    -------
    Material
        The matching material.

    Raises
    ------
    KeyError
        If no material is registered under ``key``.
    """
    if catalog is None:
        catalog = MATERIALS
    try:
        return catalog[key.strip().lower()]
    except KeyError:
        raise KeyError(
            f"Unknown material '{key}'. Known materials: {', '.join(sorted(catalog))}"
        ) from None

"""Tests for materials and configuration loading."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from heat_model.constants import (
    KELVIN_OFFSET,
    SimulationConfig,
    config_from_dict,
    default_config,
    hash_array,
    load_config,
    override_domain,
)
from heat_model.materials import COPPER, MATERIALS, Material, get_material


class TestMaterials:

    def test_copper_diffusivity(self) -> None:
        assert COPPER.alpha == pytest.approx(389.0 / (8940.0 * 380.0))
        assert COPPER.heat_capacity == pytest.approx(8940.0 * 380.0)

    def test_catalog_order_and_lookup(self) -> None:
        assert list(MATERIALS) == ["copper", "iron", "glass", "polystyrene"]
        assert get_material("  Glass ") is MATERIALS["glass"]

    def test_unknown_material(self) -> None:
        with pytest.raises(KeyError, match="Known materials"):
            get_material("unobtainium")

    @pytest.mark.parametrize(
        "kwargs",
        [
            dict(conductivity=1.0, density=0.0, specific_heat=1.0),
            dict(conductivity=1.0, density=1.0, specific_heat=-5.0),
            dict(conductivity=-1.0, density=1.0, specific_heat=1.0),
        ],
    )
    def test_invalid_material(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            Material("bad", **kwargs)

    def test_material_is_immutable(self) -> None:
        with pytest.raises(AttributeError):
            COPPER.density = 1.0  # type: ignore[misc]


class TestConfigLoading:

    def test_default_yaml_matches_builtin(self, config_path: Path) -> None:
        loaded = load_config(config_path)
        builtin = default_config()

        assert loaded.domain == builtin.domain
        assert loaded.grid == builtin.grid
        assert loaded.solver == builtin.solver
        assert loaded.run == builtin.run
        assert loaded.materials == builtin.materials

    def test_defaults(self) -> None:
        config = default_config()
        assert config.domain.length_m == 1.0
        assert config.domain.max_time_s == 16.0
        assert config.domain.initial_temperature_K == pytest.approx(13.0 + KELVIN_OFFSET)
        assert config.grid.nodes_1d == 1001
        assert config.grid.nodes_2d == 101
        assert config.solver.num_steps == 1000
        assert config.solver.source_scale == 100.0
        assert config.solver.gauss_seidel.max_iterations == 100
        assert config.solver.gauss_seidel.tolerance_K == 1e-6
        assert config.assumptions

    def test_partial_mapping_uses_defaults(self) -> None:
        config = config_from_dict({"domain": {"max_time_s": 32.0}, "grid": {"nodes_2d": 21}})
        assert config.domain.max_time_s == 32.0
        assert config.domain.length_m == 1.0
        assert config.grid.nodes_2d == 21
        assert config.grid.nodes_1d == 1001

    def test_extra_material(self) -> None:
        config = config_from_dict(
            {"materials": {"Aluminium": {"conductivity": 237.0, "density": 2700.0, "specific_heat": 897.0}}}
        )
        assert get_material("aluminium", config.materials).name == "Aluminium"
        assert "copper" in config.materials

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    @pytest.mark.parametrize(
        "raw",
        [
            {"domain": {"length_m": 0.0}},
            {"domain": {"max_time_s": -1.0}},
            {"grid": {"nodes_1d": 1}},
            {"solver": {"num_steps": 0}},
            {"solver": {"gauss_seidel": {"tolerance_K": 0.0}}},
            {"run": {"steps_per_frame": 0}},
            {"domain": {"length_m": float("inf")}},
            {"domain": {"max_time_s": float("inf")}},
            {"domain": {"initial_temperature_C": float("nan")}},
            {"domain": {"source_amplitude": float("nan")}},
            {"solver": {"source_scale": float("inf")}},
            {"solver": {"gauss_seidel": {"tolerance_K": float("nan")}}},
        ],
    )
    def test_invalid_values(self, raw: dict) -> None:
        with pytest.raises(ValueError):
            config_from_dict(raw)

    def test_yaml_round_trip_file(self, tmp_path: Path) -> None:
        path = tmp_path / "cfg.yaml"
        path.write_text("domain:\n  source_amplitude: 0.0\nrun:\n  snapshot_interval: 5\n", encoding="utf-8")
        config = load_config(path)
        assert config.domain.source_amplitude == 0.0
        assert config.run.snapshot_interval == 5

    def test_override_domain(self) -> None:
        base = default_config()
        updated = override_domain(base, length_m=2.0, max_time_s=None)
        assert updated.domain.length_m == 2.0
        assert updated.domain.max_time_s == base.domain.max_time_s
        assert base.domain.length_m == 1.0
        assert override_domain(base) is base
        with pytest.raises(ValueError):
            override_domain(base, max_time_s=0.0)

    def test_nodes_for(self) -> None:
        grid = SimulationConfig().grid
        assert grid.nodes_for("1d") == 1001
        assert grid.nodes_for("2d") == 101
        with pytest.raises(ValueError):
            grid.nodes_for("3d")


def test_hash_array_is_content_based() -> None:
    a = np.arange(12, dtype=np.float64).reshape(3, 4)
    assert hash_array(a) == hash_array(a.copy())
    assert hash_array(a) != hash_array(a + 1e-12)


def test_yaml_infinity_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text("domain:\n  max_time_s: .inf\n", encoding="utf-8")
    with pytest.raises(ValueError, match="finite"):
        load_config(path)

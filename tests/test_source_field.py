"""Tests for the 1-D and 2-D source field layouts."""

from __future__ import annotations

import numpy as np
import pytest

from heat_solver.source_field import build_source_1d, build_source_2d, node_coordinates


class TestSource1D:
    """Two heated intervals on the bar."""

    def test_reference_grid_layout(self) -> None:
        """n=11 on L=1: nodes 1,2 in the first interval, node 5 in the second."""
        F = build_source_1d(1.0, 11, amplitude=80.0, max_time=16.0)
        f1 = 16.0 * 80.0**2 * 100.0

        assert F[1] == pytest.approx(f1)
        assert F[2] == pytest.approx(f1)
        assert F[5] == pytest.approx(0.75 * f1)
        for i in (0, 3, 4, 7, 8, 9, 10):
            assert F[i] == 0.0

    def test_scale_is_applied(self) -> None:
        unscaled = build_source_1d(1.0, 101, amplitude=2.0, max_time=3.0, scale=1.0)
        scaled = build_source_1d(1.0, 101, amplitude=2.0, max_time=3.0)
        np.testing.assert_allclose(scaled, 100.0 * unscaled)
        assert unscaled.max() == pytest.approx(3.0 * 2.0**2)

    def test_heated_nodes_inside_intervals(self) -> None:
        L, n = 2.5, 401
        x = node_coordinates(L, n)
        F = build_source_1d(L, n, amplitude=1.0, max_time=1.0)
        heated = x[F > 0]

        in_first = (heated >= L / 10) & (heated <= 2 * L / 10)
        in_second = (heated >= 5 * L / 10) & (heated <= 6 * L / 10)
        assert np.all(in_first | in_second)
        assert np.any(in_first) and np.any(in_second)

    def test_zero_amplitude(self) -> None:
        F = build_source_1d(1.0, 21, amplitude=0.0, max_time=16.0)
        assert np.all(F == 0.0)


class TestSource2D:
    """Four square blocks on the plate."""

    def test_shape_and_symmetry(self) -> None:
        F = build_source_2d(1.0, 61, amplitude=80.0, max_time=16.0)
        assert F.shape == (61, 61)
        np.testing.assert_array_equal(F, F.T)

    def test_four_blocks_uniform(self) -> None:
        L, n = 1.0, 61
        F = build_source_2d(L, n, amplitude=80.0, max_time=16.0)
        x = node_coordinates(L, n)
        value = 16.0 * 80.0**2 * 100.0

        assert set(np.unique(F)) == {0.0, value}

        # Block centres are heated, domain centre and corners are not.
        centre = lambda frac: int(np.argmin(np.abs(x - frac * L)))  # noqa: E731
        for fy in (1.5 / 6, 4.5 / 6):
            for fx in (1.5 / 6, 4.5 / 6):
                assert F[centre(fy), centre(fx)] == value
        assert F[centre(0.5), centre(0.5)] == 0.0
        assert F[0, 0] == 0.0
        assert F[-1, -1] == 0.0

    def test_heated_nodes_inside_blocks(self) -> None:
        L, n = 1.0, 121
        x = node_coordinates(L, n)
        F = build_source_2d(L, n, amplitude=1.0, max_time=1.0)

        def in_band(v: np.ndarray) -> np.ndarray:
            return ((v >= L / 6) & (v <= 2 * L / 6)) | ((v >= 4 * L / 6) & (v <= 5 * L / 6))

        jj, ii = np.nonzero(F)
        assert np.all(in_band(x[ii]) & in_band(x[jj]))

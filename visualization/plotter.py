"""Visualization of temperature-rise fields for the material grid.

Generates figures using matplotlib:
- 1-D bar ΔT profiles, one panel per material
- 2-D plate ΔT heatmaps (inferno colormap), one panel per material
- Peak ΔT vs. time for every material

All panels of a figure share one colour range so that materials can be
compared directly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend for headless rendering

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import Normalize

if TYPE_CHECKING:
    from simulation.runner import SimulationResults

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Color Configuration
# ---------------------------------------------------------------------------

_THERMAL_CMAP = "inferno"
_FACE = "#0f0f1a"
_PANEL = "#1a1a2e"
_LINE_COLORS = ["#ff6b6b", "#ffd43b", "#51cf66", "#748ffc", "#e599f7", "#69db7c"]
_DPI = 150


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _grid_shape(count: int) -> tuple[int, int]:
    cols = int(np.ceil(np.sqrt(count)))
    rows = int(np.ceil(count / cols))
    return rows, cols


def _style_axis(ax: plt.Axes, title: str) -> None:
    ax.set_facecolor(_PANEL)
    ax.set_title(title, fontsize=12, fontweight="bold", color="white")
    ax.tick_params(colors="white")
    for spine in ax.spines.values():
        spine.set_edgecolor("#444")


def _save(fig: plt.Figure, output_path: Path | str | None, dpi: int, label: str) -> None:
    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=dpi, facecolor=fig.get_facecolor())
        logger.info("%s saved: %s", label, output_path)
    plt.close(fig)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def plot_bar_grid(
    rises: dict[str, np.ndarray],
    length_m: float,
    time_s: float,
    vrange: tuple[float, float],
    output_path: Path | str | None = None,
    dpi: int = _DPI,
) -> plt.Figure:
    """Plot 1-D temperature-rise profiles, one panel per material.

    Parameters
    ----------
    rises : dict[str, np.ndarray]
        Material name → ΔT profile [K]. Each: (n,).
    length_m : float
        Bar length [m].
    time_s : float
        Simulated time shown in the title [s].
    vrange : tuple[float, float]
        Shared ΔT axis range [K].
    output_path : Path or str, optional
        If provided, save figure to this path.
    dpi : int
        Figure resolution.

    Returns
    -------
    matplotlib.figure.Figure
        The generated figure.
    """
    rows, cols = _grid_shape(len(rises))
    fig, axes = plt.subplots(rows, cols, figsize=(6 * cols, 4 * rows), facecolor=_FACE, squeeze=False)

    for k, ax in enumerate(axes.flat):
        if k >= len(rises):
            ax.set_visible(False)
            continue
        name, rise = list(rises.items())[k]
        x = np.linspace(0.0, length_m, len(rise))
        ax.plot(x, rise, color=_LINE_COLORS[k % len(_LINE_COLORS)], linewidth=1.5)
        ax.fill_between(x, rise, 0.0, color=_LINE_COLORS[k % len(_LINE_COLORS)], alpha=0.15)
        ax.set_ylim(*vrange)
        ax.set_xlim(0.0, length_m)
        ax.set_xlabel("x [m]", color="white")
        ax.set_ylabel("ΔT [K]", color="white")
        ax.grid(True, alpha=0.2, color="white")
        _style_axis(ax, name)

    fig.suptitle(f"1-D Bar — t = {time_s:.3f} s", fontsize=14, fontweight="bold", color="white")
    fig.tight_layout()
    _save(fig, output_path, dpi, "Bar grid")
    return fig


def plot_plate_grid(
    rises: dict[str, np.ndarray],
    length_m: float,
    time_s: float,
    vrange: tuple[float, float],
    output_path: Path | str | None = None,
    dpi: int = _DPI,
) -> plt.Figure:
    """Plot 2-D temperature-rise heatmaps, one panel per material.

    Parameters
    ----------
    rises : dict[str, np.ndarray]
        Material name → ΔT field [K], indexed ``[j, i]``. Each: (n, n).
    length_m : float
        Plate side [m].
    time_s : float
        Simulated time shown in the title [s].
    vrange : tuple[float, float]
        Shared colour range [K].
    output_path : Path or str, optional
        If provided, save figure to this path.
    dpi : int
        Figure resolution.

    Returns
    -------
    matplotlib.figure.Figure
        The generated figure.
    """
    rows, cols = _grid_shape(len(rises))
    fig, axes = plt.subplots(rows, cols, figsize=(5 * cols, 4.5 * rows), facecolor=_FACE, squeeze=False)
    norm = Normalize(vmin=vrange[0], vmax=vrange[1])

    image = None
    for k, ax in enumerate(axes.flat):
        if k >= len(rises):
            ax.set_visible(False)
            continue
        name, rise = list(rises.items())[k]
        image = ax.imshow(
            rise,
            origin="lower",
            extent=(0.0, length_m, 0.0, length_m),
            cmap=_THERMAL_CMAP,
            norm=norm,
        )
        ax.set_xlabel("x [m]", color="white")
        ax.set_ylabel("y [m]", color="white")
        ax.set_aspect("equal")
        _style_axis(ax, name)

    if image is not None:
        cbar = fig.colorbar(image, ax=axes.ravel().tolist(), label="ΔT [K]", shrink=0.8)
        cbar.ax.yaxis.label.set_color("white")
        cbar.ax.tick_params(colors="white")

    fig.suptitle(f"2-D Plate — t = {time_s:.3f} s", fontsize=14, fontweight="bold", color="white")
    _save(fig, output_path, dpi, "Plate grid")
    return fig


def plot_peak_rise(
    times_s: list[float],
    snapshots: dict[str, list[np.ndarray]],
    title: str = "Peak Temperature Rise vs. Time",
    output_path: Path | str | None = None,
    dpi: int = _DPI,
) -> plt.Figure:
    """Plot max ΔT over the domain vs. time for every material."""
    fig, ax = plt.subplots(1, 1, figsize=(12, 6), facecolor=_FACE)

    for k, (name, frames) in enumerate(snapshots.items()):
        peaks = [float(np.max(f)) for f in frames]
        ax.plot(
            times_s[: len(peaks)],
            peaks,
            label=name,
            color=_LINE_COLORS[k % len(_LINE_COLORS)],
            linewidth=1.5,
            alpha=0.9,
        )

    ax.set_xlabel("Time [s]", color="white", fontsize=12)
    ax.set_ylabel("max ΔT [K]", color="white", fontsize=12)
    ax.grid(True, alpha=0.2, color="white")
    _style_axis(ax, title)

    legend = ax.legend(facecolor=_PANEL, edgecolor="#444", fontsize=10)
    for text in legend.get_texts():
        text.set_color("white")

    fig.tight_layout()
    _save(fig, output_path, dpi, "Peak rise plot")
    return fig


def generate_all_plots(
    results: SimulationResults,
    output_dir: Path | str = "output",
    dpi: int = _DPI,
) -> list[Path]:
    """Generate all standard plots from simulation results.

    Parameters
    ----------
    results : SimulationResults
        Full simulation results.
    output_dir : Path or str
        Directory for output plots.
    dpi : int
        Figure resolution.

    Returns
    -------
    list[Path]
        Paths to all generated plot files.
    """
    from simulation.runner import temperature_rise_range

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    saved: list[Path] = []

    if not results.times:
        logger.warning("No snapshots recorded; nothing to plot")
        return saved

    vrange = temperature_rise_range(results)
    final = {name: results.final_rise(name) for name in results.material_names}

    # 1. Final field per material
    if results.dimension == "1d":
        p = output_dir / "bar_grid.png"
        plot_bar_grid(final, results.length_m, results.times[-1], vrange, output_path=p, dpi=dpi)
    else:
        p = output_dir / "plate_grid.png"
        plot_plate_grid(final, results.length_m, results.times[-1], vrange, output_path=p, dpi=dpi)
    saved.append(p)

    # 2. Peak rise history
    if len(results.times) > 1:
        p = output_dir / "peak_rise.png"
        plot_peak_rise(results.times, results.snapshots, output_path=p, dpi=dpi)
        saved.append(p)

    logger.info("Generated %d plots in %s", len(saved), output_dir)
    return saved

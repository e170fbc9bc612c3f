"""Volumetric heat source fields for the 1-D bar and the 2-D plate.

The source is piecewise constant over fixed fractions of the domain and is
computed once per solver. Amplitudes follow the inherited formula
``tmax · f²`` and are multiplied by a presentation scale (100× by default)
so that heating is visible over the short default horizon. Neither the
formula nor the scale is physical; both are kept for output parity.

Region membership is tested on node coordinates x_i = i·dx with closed
intervals, so nodes that land exactly on an interval end are included.
"""

from __future__ import annotations

import logging

import numpy as np

from heat_model.constants import DEFAULT_SOURCE_SCALE

logger = logging.getLogger(__name__)


def node_coordinates(length: float, nodes: int) -> np.ndarray:
    """Uniform node coordinates x_i = i · L/(n-1) [m]. Shape: (n,)."""
    dx = length / (nodes - 1)
    return np.arange(nodes, dtype=np.float64) * dx


def build_source_1d(
    length: float,
    nodes: int,
    amplitude: float,
    max_time: float,
    scale: float = DEFAULT_SOURCE_SCALE,
) -> np.ndarray:
    """Source field of the 1-D bar.

    Two heated intervals: [L/10, 2L/10] with tmax·f² and [5L/10, 6L/10]
    with 0.75·tmax·f², both times ``scale``. Zero elsewhere.

    Parameters
    ----------
    length : float
        Bar length L [m].
    nodes : int
        Number of grid nodes n.
    amplitude : float
        Source amplitude parameter f.
    max_time : float
        Simulated horizon tmax [s].
    scale : float
        Presentation amplification factor.

    Returns
    -------
    np.ndarray
        Source field F. Shape: (n,).
    """
    x = node_coordinates(length, nodes)
    f1 = max_time * amplitude * amplitude
    f2 = 0.75 * max_time * amplitude * amplitude

    first = (x >= length / 10.0) & (x <= 2.0 * length / 10.0)
    second = (x >= 5.0 * length / 10.0) & (x <= 6.0 * length / 10.0)

    F = np.zeros(nodes, dtype=np.float64)
    F[first] = f1 * scale
    F[second & ~first] = f2 * scale

    logger.debug(
        "1-D source built: %d/%d nodes heated, peak=%.3e",
        int(np.count_nonzero(F)),
        nodes,
        F.max(),
    )
    return F


def build_source_2d(
    length: float,
    nodes: int,
    amplitude: float,
    max_time: float,
    scale: float = DEFAULT_SOURCE_SCALE,
) -> np.ndarray:
    """Source field of the 2-D plate.

    Four square blocks of side L/6 spanning [L/6, 2L/6] and [4L/6, 5L/6]
    along each axis (bottom-left, bottom-right, top-left, top-right), each
    with uniform amplitude tmax·f² times ``scale``. Zero elsewhere.

    Returns
    -------
    np.ndarray
        Source field F indexed ``F[j, i]`` (row j along y, column i along x).
        Shape: (n, n).
    """
    coords = node_coordinates(length, nodes)
    in_band = ((coords >= length / 6.0) & (coords <= 2.0 * length / 6.0)) | (
        (coords >= 4.0 * length / 6.0) & (coords <= 5.0 * length / 6.0)
    )
    f_val = max_time * amplitude * amplitude

    # Rows are y (index j), columns are x (index i).
    mask = in_band[:, np.newaxis] & in_band[np.newaxis, :]
    F = np.where(mask, f_val * scale, 0.0).astype(np.float64)

    logger.debug(
        "2-D source built: %d/%d nodes heated, peak=%.3e",
        int(np.count_nonzero(F)),
        nodes * nodes,
        F.max(),
    )
    return F

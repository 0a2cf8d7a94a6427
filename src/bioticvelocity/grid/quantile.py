"""Position of cumulative-mass quantiles along one axis.

One routine serves every axis. The caller passes the coordinate grid
(latitude for south→north, longitude for west→east, elevation for low→high)
and the cell width along that axis.

Algorithm
---------
1. Keep masked cells with value > 0 and a known coordinate.
2. Sum the mass of all cells sharing a coordinate (a grid row for latitude,
   a column for longitude, an elevation value for elevation).
3. Sort the distinct coordinates in the positive direction of the axis.
4. Place each coordinate at the cumulative-mass fraction of its own centre,
   i.e. halfway through its mass: ``(cumsum - mass / 2) / total``.
5. Anchor fraction 0 half a cell width before the first coordinate and
   fraction 1 half a cell width after the last one.
6. Interpolate linearly between these knots.

With five equal cells in a row this puts the median exactly on the centre
cell and the 0 and 1 quantiles on the outer cell edges. With a cell width
of zero the 0 and 1 quantiles are the outermost coordinates with mass.
"""

from typing import Sequence, Tuple

import numpy as np

from bioticvelocity.grid.centroid import mass_weights

__all__ = [
    'axis_cell_width',
    'axis_mass_profile',
    'profile_quantiles',
    'axis_quantiles',
    'axis_quantile',
]


def axis_cell_width(coords: np.ndarray) -> float:
    """Cell width along an axis: smallest gap between distinct coordinates.

    Returns 0.0 when the axis has fewer than two distinct coordinates.
    """
    distinct = np.unique(coords[np.isfinite(coords)])
    if distinct.size < 2:
        return 0.0
    return float(np.min(np.diff(distinct)))


def axis_mass_profile(grid: np.ndarray, mask: np.ndarray, coord_axis: np.ndarray,
                      sign: int = 1) -> Tuple[np.ndarray, np.ndarray]:
    """Distinct signed coordinates with mass, and the mass at each.

    Returns
    -------
    coords : np.ndarray
        Distinct values of ``sign * coord_axis`` carrying mass, ascending.
    mass : np.ndarray
        Summed cell mass at each coordinate (all > 0).
    """
    weights = mass_weights(grid, mask & ~np.isnan(coord_axis))
    carries_mass = weights > 0
    coords, inverse = np.unique(sign * coord_axis[carries_mass], return_inverse=True)
    mass = np.bincount(inverse.ravel(), weights=weights[carries_mass], minlength=coords.size)
    return coords, mass


def axis_quantiles(grid: np.ndarray, mask: np.ndarray, coord_axis: np.ndarray,
                   levels: Sequence[float], cell_width: float, sign: int = 1) -> tuple:
    """Positions of several cumulative-mass quantiles along one axis.

    Parameters
    ----------
    grid : np.ndarray
        2D grid of cell values, NaN for missing.
    mask : np.ndarray
        Boolean grid of cells to include.
    coord_axis : np.ndarray
        Coordinate of each cell along the axis, same shape as grid.
    levels : sequence of float
        Quantile levels in [0, 1].
    cell_width : float
        Width of one cell along the axis; sets the outer edges.
    sign : int
        +1 if coordinates increase in the positive direction of the axis
        (north, east, up), -1 if they decrease.

    Returns
    -------
    tuple of float
        One position per level, in the units of coord_axis. All NaN when
        no masked cell carries mass.
    """
    coords, mass = axis_mass_profile(grid, mask, coord_axis, sign)
    return profile_quantiles(coords, mass, levels, cell_width, sign)


def profile_quantiles(coords: np.ndarray, mass: np.ndarray, levels: Sequence[float],
                      cell_width: float, sign: int = 1) -> tuple:
    """Interpolate quantile positions from a mass profile (see axis_mass_profile)."""
    if coords.size == 0:
        return tuple(np.nan for _ in levels)

    total = mass.sum()
    centres = (np.cumsum(mass) - mass / 2.0) / total
    half = cell_width / 2.0

    fractions = np.concatenate(([0.0], centres, [1.0]))
    positions = np.concatenate(([coords[0] - half], coords, [coords[-1] + half]))

    found = np.interp(np.asarray(levels, dtype=float), fractions, positions)
    return tuple(float(sign * p) for p in found)


def axis_quantile(grid: np.ndarray, mask: np.ndarray, coord_axis: np.ndarray,
                  level: float, cell_width: float, sign: int = 1) -> float:
    """Position of a single cumulative-mass quantile along one axis."""
    return axis_quantiles(grid, mask, coord_axis, [level], cell_width, sign)[0]

"""Mass-weighted centroids and directional sub-centroids.

Cell values are treated as mass: only masked cells with value > 0 carry
weight. Missing and non-positive cells are excluded from every centroid.

Directional sub-centroids follow a two-phase protocol. Phase 1 computes the
anchor, the whole-landscape centroid of the starting grid. Phase 2 applies
that same anchor to both grids of the pair, so the displacement of, e.g.,
the northern part of a range is measured against a fixed boundary.
"""

from typing import NamedTuple, Tuple

import numpy as np

__all__ = [
    'DIRECTIONS',
    'DirectionalCentroid',
    'mass_weights',
    'weighted_mean',
    'centroid',
    'partition_mask',
    'directional_centroid',
]

DIRECTIONS = ("north", "south", "east", "west")


class DirectionalCentroid(NamedTuple):
    lon: float
    lat: float
    weight: float


def mass_weights(grid: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Cell weights: the value where masked and > 0, zero elsewhere."""
    with np.errstate(invalid="ignore"):
        carries_mass = mask & (grid > 0)
    return np.where(carries_mass, grid, 0.0)


def weighted_mean(grid: np.ndarray, mask: np.ndarray, coords: np.ndarray) -> float:
    """Mass-weighted mean of a coordinate grid (longitude, latitude or elevation).

    Cells whose coordinate is missing are dropped. Returns NaN when the
    remaining mass is zero.
    """
    weights = mass_weights(grid, mask & ~np.isnan(coords))
    total = weights.sum()
    if total <= 0:
        return np.nan
    return float(np.sum(weights * np.nan_to_num(coords)) / total)


def centroid(grid: np.ndarray, mask: np.ndarray,
             longitude: np.ndarray, latitude: np.ndarray) -> Tuple[float, float]:
    """Compute the mass-weighted centroid of a grid.

    Parameters
    ----------
    grid : np.ndarray
        2D grid of cell values, NaN for missing.
    mask : np.ndarray
        Boolean grid of cells to include.
    longitude, latitude : np.ndarray
        Cell-centre coordinates, same shape as grid.

    Returns
    -------
    tuple of float
        (lon, lat) = (sum(v * lon) / sum(v), sum(v * lat) / sum(v)) over
        masked cells with v > 0. (NaN, NaN) if there is no mass.

    Examples
    --------
    >>> grid = np.array([[0.0, 2.0], [0.0, 0.0]])
    >>> lon = np.array([[1.0, 2.0], [1.0, 2.0]])
    >>> lat = np.array([[2.0, 2.0], [1.0, 1.0]])
    >>> centroid(grid, np.ones_like(grid, bool), lon, lat)
    (2.0, 2.0)
    """
    weights = mass_weights(grid, mask)
    total = weights.sum()
    if total <= 0:
        return (np.nan, np.nan)
    return (
        float(np.sum(weights * longitude) / total),
        float(np.sum(weights * latitude) / total),
    )


def partition_mask(mask: np.ndarray, longitude: np.ndarray, latitude: np.ndarray,
                   reference_lat: float, reference_lon: float, direction: str) -> np.ndarray:
    """Restrict a mask to cells strictly beyond a reference line.

    Cells lying exactly on the reference latitude (north/south) or longitude
    (east/west) belong to neither side. A NaN reference selects no cells.
    """
    with np.errstate(invalid="ignore"):
        if direction == "north":
            beyond = latitude > reference_lat
        elif direction == "south":
            beyond = latitude < reference_lat
        elif direction == "east":
            beyond = longitude > reference_lon
        elif direction == "west":
            beyond = longitude < reference_lon
        else:
            raise ValueError(f"Unknown direction: {direction}")
    return mask & beyond


def directional_centroid(grid: np.ndarray, mask: np.ndarray,
                         longitude: np.ndarray, latitude: np.ndarray,
                         reference_lat: float, reference_lon: float,
                         direction: str) -> DirectionalCentroid:
    """Centroid and total weight of the part of a grid beyond an anchor.

    Parameters
    ----------
    grid, mask, longitude, latitude : np.ndarray
        As for centroid().
    reference_lat, reference_lon : float
        Anchor, normally the centroid of the starting grid of the pair.
    direction : str
        One of "north", "south", "east", "west".

    Returns
    -------
    DirectionalCentroid
        (lon, lat, weight). Position is NaN when the partition has no mass.
        Weight is the summed mass of the partition, or NaN when the
        partition holds no valid cell at all.
    """
    part = partition_mask(mask, longitude, latitude, reference_lat, reference_lon, direction)
    if not np.any(part & ~np.isnan(grid)):
        return DirectionalCentroid(np.nan, np.nan, np.nan)

    lon, lat = centroid(grid, part, longitude, latitude)
    weight = float(mass_weights(grid, part).sum())
    return DirectionalCentroid(lon, lat, weight)

"""Conversion of displacements between two time slices into rates.

Scalar quantities (mean elevation, abundance) change at
``(value_to - value_from) / time_span``. Positional quantities (centroids,
axis quantiles) move ``distance_fn(position_from, position_to) / time_span``.
Distance is unsigned; directional metrics supply the signed displacement
along their axis so that north, east and up are positive.

Distance functions take two (lon, lat) positions and must be picklable
(module-level functions) when pairs run in a process pool.
"""

import math
from typing import Callable, Optional, Tuple

import numpy as np

__all__ = [
    'EARTH_RADIUS_M',
    'planar_distance',
    'great_circle_distance',
    'get_distance_fn',
    'rate',
    'positional_rate',
]

EARTH_RADIUS_M = 6371008.8

Position = Tuple[float, float]


def planar_distance(position_from: Position, position_to: Position) -> float:
    """Euclidean distance between two (x, y) positions in linear units."""
    return math.hypot(position_to[0] - position_from[0], position_to[1] - position_from[1])


def great_circle_distance(position_from: Position, position_to: Position) -> float:
    """Haversine distance in metres between two (lon, lat) positions in degrees."""
    lon1, lat1 = map(math.radians, position_from)
    lon2, lat2 = map(math.radians, position_to)
    h = (math.sin((lat2 - lat1) / 2.0) ** 2
         + math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1) / 2.0) ** 2)
    return 2.0 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


_DISTANCE_FUNCTIONS = {
    "planar": planar_distance,
    "great_circle": great_circle_distance,
}


def get_distance_fn(method: str) -> Callable[[Position, Position], float]:
    """Look up a distance function by its configured name."""
    try:
        return _DISTANCE_FUNCTIONS[method]
    except KeyError:
        raise ValueError(f"Unknown distance method: {method}") from None


def rate(value_from: float, value_to: float, time_span: float) -> float:
    """Signed rate of change of a scalar: (value_to - value_from) / time_span.

    NaN inputs give NaN.

    Examples
    --------
    >>> rate(2.0, 5.0, 1.5)
    2.0
    """
    return float((value_to - value_from) / time_span)


def positional_rate(position_from: Position, position_to: Position, time_span: float,
                    distance_fn: Callable[[Position, Position], float],
                    signed_delta: Optional[float] = None,
                    vertical_delta: float = 0.0) -> float:
    """Rate of movement between two positions.

    Parameters
    ----------
    position_from, position_to : tuple of float
        (lon, lat) positions at the start and end of the interval.
    time_span : float
        Elapsed time.
    distance_fn : callable
        Unsigned distance between two positions.
    signed_delta : float, optional
        Displacement along the metric's axis in its positive direction. If
        given, the rate takes its sign. If None,
        the rate is an unsigned speed.
    vertical_delta : float
        Change in elevation folded into the distance as a third dimension.

    Returns
    -------
    float
        Rate in distance units per time unit, NaN if either position is undefined.
    """
    if any(np.isnan(v) for v in (*position_from, *position_to, vertical_delta)):
        return np.nan

    distance = distance_fn(position_from, position_to)
    if vertical_delta:
        distance = math.hypot(distance, vertical_delta)

    speed = distance / time_span
    if signed_delta is None:
        return float(speed)
    return float(math.copysign(speed, signed_delta))

"""Input stack contract.

Enforces the structural preconditions of a run before any time-step pair
is evaluated: a 3-D stack of equal-shape grids, strictly increasing times,
coordinate grids matching the grid shape, a valid time selection and the
ancillary data each requested metric needs.
"""

import numpy as np

from bioticvelocity.contracts.base import require_input

# Metrics whose formulas treat cell values as non-negative mass.
MASS_METRICS = (
    "centroid",
    "nsCentroid",
    "ewCentroid",
    "nCentroid",
    "sCentroid",
    "eCentroid",
    "wCentroid",
    "nsQuants",
    "ewQuants",
    "elevCentroid",
    "elevQuants",
)

ELEVATION_METRICS = ("elevCentroid", "elevQuants")


def assert_stack(values: np.ndarray, times: np.ndarray) -> None:
    """Enforce the grid stack contract.

    Parameters
    ----------
    values : np.ndarray
        Stack of grids, shape (time, y, x).

    times : np.ndarray
        One time tag per grid.

    Raises
    ------
    InputError
        If any invariant is violated
    """
    require_input(
        values.ndim == 3,
        f"Stack contract violated: grid stack has {values.ndim} dims, expected 3 (time, y, x)"
    )
    require_input(
        values.shape[0] >= 2,
        f"Stack contract violated: {values.shape[0]} time slice(s), at least 2 required"
    )
    require_input(
        values.shape[1] > 0 and values.shape[2] > 0,
        f"Stack contract violated: empty grids of shape {values.shape[1:]}"
    )
    require_input(
        times.ndim == 1 and times.shape[0] == values.shape[0],
        f"Stack contract violated: {times.shape[0] if times.ndim == 1 else times.size} times "
        f"for {values.shape[0]} grids"
    )
    require_input(
        bool(np.all(np.isfinite(times))),
        "Stack contract violated: times must be finite numbers"
    )
    require_input(
        bool(np.all(np.diff(times) > 0)),
        "Stack contract violated: times must be strictly increasing (oldest first)"
    )


def assert_coordinates(coords: np.ndarray, shape: tuple, name: str) -> None:
    """Enforce that a coordinate grid matches the grid shape."""
    require_input(
        coords.ndim == 2,
        f"Coordinate contract violated: '{name}' has {coords.ndim} dims, expected 2"
    )
    require_input(
        coords.shape == tuple(shape),
        f"Coordinate contract violated: '{name}' has shape {coords.shape}, expected {tuple(shape)}"
    )
    require_input(
        bool(np.all(np.isfinite(coords))),
        f"Coordinate contract violated: '{name}' contains missing or infinite values"
    )


def assert_elevation(elevation, shape: tuple, n_times: int) -> None:
    """Enforce that elevation is a single grid or one grid per time slice."""
    if elevation is None:
        return
    if elevation.ndim == 2:
        require_input(
            elevation.shape == tuple(shape),
            f"Elevation contract violated: shape {elevation.shape}, expected {tuple(shape)}"
        )
    else:
        require_input(
            elevation.ndim == 3 and elevation.shape == (n_times,) + tuple(shape),
            f"Elevation contract violated: shape {elevation.shape}, expected "
            f"{tuple(shape)} or {(n_times,) + tuple(shape)}"
        )


def assert_selection(times: np.ndarray, at_times: np.ndarray) -> None:
    """Enforce that the evaluation times are an ordered subset of the stack times.

    Raises
    ------
    InputError
        If fewer than two times are selected, they are not increasing, or any
        of them is not one of the stack times.
    """
    require_input(
        at_times.ndim == 1 and at_times.shape[0] >= 2,
        f"Selection contract violated: {at_times.size} time(s) selected, at least 2 required"
    )
    require_input(
        bool(np.all(np.diff(at_times) > 0)),
        "Selection contract violated: selected times must be strictly increasing"
    )
    missing = [float(t) for t in at_times if not np.any(times == t)]
    require_input(
        not missing,
        f"Selection contract violated: times {missing} are not among the stack times"
    )


def assert_metric_inputs(values: np.ndarray, elevation, metrics) -> None:
    """Enforce that the stack supports every requested metric.

    Elevation metrics need elevation data. Mass-based metrics need values
    that are missing or >= 0.
    """
    wants_elevation = [m for m in metrics if m in ELEVATION_METRICS]
    require_input(
        not wants_elevation or elevation is not None,
        f"Metric contract violated: {wants_elevation} requested without elevation data"
    )

    wants_mass = [m for m in metrics if m in MASS_METRICS]
    if wants_mass:
        with np.errstate(invalid="ignore"):
            has_negative = bool(np.any(values < 0))
        require_input(
            not has_negative,
            f"Metric contract violated: negative cell values are undefined for {wants_mass}"
        )

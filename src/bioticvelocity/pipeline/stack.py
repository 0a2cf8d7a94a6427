"""Time-ordered stack of grids with shared cell coordinates.

The stack is the boundary between caller data and the engines. It converts
arrays once (float64, NaN for missing), fills in default coordinates, checks
the input contracts and freezes every array, so no stage can modify caller
data or the shared coordinate grids.
"""

import logging
from typing import Optional, List, Tuple

import numpy as np
import xarray as xr

from bioticvelocity.contracts import (
    assert_stack,
    assert_coordinates,
    assert_elevation,
    assert_selection,
)

__all__ = ['GridStack', 'default_coordinates']

logger = logging.getLogger(__name__)


def _as_float_array(x) -> np.ndarray:
    """Copy to float64 with masked entries turned into NaN."""
    if isinstance(x, xr.DataArray):
        x = x.values
    if np.ma.isMaskedArray(x):
        return np.ma.filled(x.astype(np.float64), np.nan)
    return np.array(x, dtype=np.float64)


def _freeze(arr: Optional[np.ndarray]) -> Optional[np.ndarray]:
    if arr is not None:
        arr.setflags(write=False)
    return arr


def default_coordinates(shape: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray]:
    """Index-based coordinates in unitless cell lengths.

    Longitude runs 1..ncol from the first column (west) to the last (east).
    Latitude runs nrow..1 from the first row (north) to the last (south).
    """
    nrow, ncol = shape
    longitude = np.tile(np.arange(1, ncol + 1, dtype=np.float64), (nrow, 1))
    latitude = np.tile(np.arange(nrow, 0, -1, dtype=np.float64)[:, np.newaxis], (1, ncol))
    return longitude, latitude


class GridStack:
    """Grids of one quantity at successive times, plus cell coordinates.

    Parameters
    ----------
    values : array-like
        Shape (time, y, x). NaN (or masked) marks missing cells. Values
        should be missing or >= 0.
    times : array-like, optional
        One numeric time per grid, strictly increasing (earlier times are
        smaller, e.g. -24, -23, -22 for 24, 23, 22 kybp). Default 1..N.
    longitude, latitude : array-like, optional
        Cell-centre coordinates, shape (y, x), in an equal-area system.
        Default: index-based coordinates (see default_coordinates), which
        make velocities unitless cell lengths per time unit.
    elevation : array-like, optional
        Shape (y, x) for a constant surface, or (time, y, x) for one per grid.

    Raises
    ------
    InputError
        If the stack, times, coordinates or elevation violate their contracts.

    Examples
    --------
    >>> stack = GridStack(np.random.rand(3, 10, 12), times=[-20, -10, 0])
    >>> stack.pair_indices()
    [(0, 1), (1, 2)]
    """

    def __init__(self, values, times=None, longitude=None, latitude=None, elevation=None):
        values = _as_float_array(values)
        if times is None:
            times = np.arange(1, values.shape[0] + 1, dtype=np.float64) if values.ndim == 3 else np.array([])
        times = np.asarray(times, dtype=np.float64).ravel()
        assert_stack(values, times)

        shape = values.shape[1:]
        default_lon, default_lat = default_coordinates(shape)
        longitude = default_lon if longitude is None else _as_float_array(longitude)
        latitude = default_lat if latitude is None else _as_float_array(latitude)
        assert_coordinates(longitude, shape, "longitude")
        assert_coordinates(latitude, shape, "latitude")

        if elevation is not None:
            elevation = _as_float_array(elevation)
        assert_elevation(elevation, shape, values.shape[0])

        self.values = _freeze(values)
        self.times = _freeze(times)
        self.longitude = _freeze(longitude)
        self.latitude = _freeze(latitude)
        self.elevation = _freeze(elevation)

        logger.debug("GridStack: %d grids of shape %s, times %s..%s, elevation=%s",
                     self.n_times, shape, times[0], times[-1],
                     "none" if elevation is None else elevation.ndim)

    @classmethod
    def from_array(cls, values, times=None, longitude=None, latitude=None, elevation=None):
        """Build a stack from a numpy (or masked) array, or a DataArray.

        DataArrays are routed through from_dataarray so their coordinates
        are used when no explicit ones are given.
        """
        if isinstance(values, xr.DataArray) and longitude is None and latitude is None:
            return cls.from_dataarray(values, times=times, elevation=elevation)
        return cls(values, times=times, longitude=longitude, latitude=latitude,
                   elevation=elevation)

    @classmethod
    def from_dataarray(cls, da: xr.DataArray, times=None, elevation=None,
                       time_dim: str = "time", lon_name: str = "lon", lat_name: str = "lat"):
        """Build a stack from an xarray.DataArray with a time dimension.

        Coordinates are taken from ``lon_name``/``lat_name`` coordinates (1D or
        2D) when present, otherwise from the 1D coordinates of the two spatial
        dimensions (x is longitude, y is latitude), otherwise defaults. Times
        come from the time coordinate when it is numeric.
        """
        if time_dim not in da.dims:
            raise ValueError(f"DataArray has no '{time_dim}' dimension: {da.dims}")
        spatial = [d for d in da.dims if d != time_dim]
        if len(spatial) != 2:
            raise ValueError(f"Expected 2 spatial dims besides '{time_dim}', got {spatial}")
        da = da.transpose(time_dim, *spatial)
        y_dim, x_dim = spatial

        if times is None and time_dim in da.coords and np.issubdtype(da[time_dim].dtype, np.number):
            times = da[time_dim].values

        longitude = latitude = None
        if lon_name in da.coords and lat_name in da.coords:
            lon = da[lon_name].values
            lat = da[lat_name].values
            if lon.ndim == 1 and lat.ndim == 1:
                longitude, latitude = np.meshgrid(lon, lat)
            else:
                longitude, latitude = lon, lat
        elif x_dim in da.coords and y_dim in da.coords:
            longitude, latitude = np.meshgrid(da[x_dim].values, da[y_dim].values)

        if isinstance(elevation, xr.DataArray):
            elevation = elevation.values

        return cls(da.values, times=times, longitude=longitude, latitude=latitude,
                   elevation=elevation)

    @property
    def n_times(self) -> int:
        return self.values.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape[1:]

    def grid(self, index: int) -> np.ndarray:
        return self.values[index]

    def elevation_at(self, index: int) -> Optional[np.ndarray]:
        """Elevation grid for one time slice (None without elevation)."""
        if self.elevation is None:
            return None
        if self.elevation.ndim == 2:
            return self.elevation
        return self.elevation[index]

    def pair_indices(self, at_times=None) -> List[Tuple[int, int]]:
        """Index pairs of consecutive selected times.

        Parameters
        ----------
        at_times : array-like, optional
            Subset of the stack times to evaluate across. Default: all times,
            giving pairs (0, 1), (1, 2), ...

        Raises
        ------
        InputError
            If at_times is not an increasing subset of at least two stack times.
        """
        if at_times is None:
            indices = list(range(self.n_times))
        else:
            at_times = np.asarray(at_times, dtype=np.float64).ravel()
            assert_selection(self.times, at_times)
            indices = [int(np.flatnonzero(self.times == t)[0]) for t in at_times]
        return list(zip(indices[:-1], indices[1:]))

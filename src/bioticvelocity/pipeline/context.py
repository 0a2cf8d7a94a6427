"""Shared state of one time-step pair.

A PairContext is built once per (from, to) pair and passed by reference to
every metric. It owns the pair's masks and caches the expensive
intermediates several metrics need (centroids, elevation centroids, axis
mass profiles), so none of them is computed twice for the same pair.

Each worker owns its contexts exclusively; nothing here is shared between
pairs.
"""

import logging
from enum import Enum
from functools import cached_property
from typing import Optional, Tuple

import numpy as np

from bioticvelocity.grid.mask import compute_mask
from bioticvelocity.grid.centroid import (
    centroid,
    directional_centroid,
    partition_mask,
    weighted_mean,
)
from bioticvelocity.grid.quantile import axis_mass_profile, profile_quantiles

__all__ = ['PairStage', 'PairContext']

logger = logging.getLogger(__name__)


class PairStage(str, Enum):
    """Lifecycle of a time-step pair. No stage is ever retried."""
    MASK_BUILT = "mask_built"
    STATS_COMPUTED = "stats_computed"
    POSITIONS_COMPUTED = "positions_computed"
    RATES_COMPUTED = "rates_computed"
    RECORD_ASSEMBLED = "record_assembled"


class PairContext:
    """Per-pair inputs, masks and cached intermediates.

    Parameters
    ----------
    time_from, time_to : float
        Times of the two slices; time_to > time_from.
    grid_from, grid_to : np.ndarray
        The two grids (read-only).
    longitude, latitude : np.ndarray
        Shared cell-centre coordinates (read-only).
    elevation_from, elevation_to : np.ndarray or None
        Elevation under each slice (the same grid when elevation is constant).
    lon_width, lat_width : float
        Cell widths along longitude and latitude, for axis quantiles.
    quantiles : tuple of float
        Requested quantile levels.
    only_shared : bool
        Evaluate both slices over the cells valid in both.
    warn : bool
        Log advisory warnings.
    """

    def __init__(self, time_from: float, time_to: float,
                 grid_from: np.ndarray, grid_to: np.ndarray,
                 longitude: np.ndarray, latitude: np.ndarray,
                 elevation_from: Optional[np.ndarray], elevation_to: Optional[np.ndarray],
                 lon_width: float, lat_width: float,
                 quantiles: Tuple[float, ...], only_shared: bool, warn: bool):
        self.time_from = float(time_from)
        self.time_to = float(time_to)
        self.time_span = self.time_to - self.time_from
        self.grid_from = grid_from
        self.grid_to = grid_to
        self.longitude = longitude
        self.latitude = latitude
        self.elevation_from = elevation_from
        self.elevation_to = elevation_to
        self.lon_width = lon_width
        self.lat_width = lat_width
        self.quantiles = tuple(quantiles)
        self.warn = warn
        self._axis_cache = {}

        self.mask = compute_mask(grid_from, grid_to, only_shared)
        self.stage = PairStage.MASK_BUILT
        if self.mask.is_empty:
            logger.debug("Pair %s -> %s has no valid cells", self.time_from, self.time_to)

    def advance(self, stage: PairStage) -> None:
        self.stage = stage
        logger.debug("Pair %s -> %s: %s", self.time_from, self.time_to, stage.value)

    @property
    def has_elevation(self) -> bool:
        return self.elevation_from is not None

    def _slice(self, which: str):
        if which == "from":
            return self.grid_from, self.mask.from_mask, self.elevation_from
        return self.grid_to, self.mask.to_mask, self.elevation_to

    # ------------------------------------------------------------------
    # Centroids
    # ------------------------------------------------------------------

    @cached_property
    def centroid_from(self) -> Tuple[float, float]:
        """Whole-landscape centroid of the starting grid (also the directional anchor)."""
        return centroid(self.grid_from, self.mask.from_mask, self.longitude, self.latitude)

    @cached_property
    def centroid_to(self) -> Tuple[float, float]:
        return centroid(self.grid_to, self.mask.to_mask, self.longitude, self.latitude)

    @cached_property
    def elevation_centroid_from(self) -> float:
        if not self.has_elevation:
            return np.nan
        return weighted_mean(self.grid_from, self.mask.from_mask, self.elevation_from)

    @cached_property
    def elevation_centroid_to(self) -> float:
        if not self.has_elevation:
            return np.nan
        return weighted_mean(self.grid_to, self.mask.to_mask, self.elevation_to)

    @cached_property
    def reference(self) -> Tuple[float, float]:
        """Fixed (lon, lat) used to measure along-axis distances.

        The starting centroid when defined, otherwise the centre of the grid.
        """
        lon, lat = self.centroid_from
        if np.isnan(lon) or np.isnan(lat):
            return float(np.mean(self.longitude)), float(np.mean(self.latitude))
        return lon, lat

    def directional(self, direction: str, which: str):
        """Directional sub-centroid of one slice, anchored on the starting centroid.

        Phase 1 is centroid_from (computed once per pair). Phase 2 applies that
        anchor to whichever slice is asked for.
        """
        anchor_lon, anchor_lat = self.centroid_from
        grid, mask, _ = self._slice(which)
        return directional_centroid(grid, mask, self.longitude, self.latitude,
                                    anchor_lat, anchor_lon, direction)

    def directional_elevation(self, direction: str, which: str) -> float:
        """Mass-weighted mean elevation of a directional partition."""
        anchor_lon, anchor_lat = self.centroid_from
        grid, mask, elevation = self._slice(which)
        part = partition_mask(mask, self.longitude, self.latitude, anchor_lat, anchor_lon, direction)
        return weighted_mean(grid, part, elevation)

    # ------------------------------------------------------------------
    # Axis quantiles
    # ------------------------------------------------------------------

    def _axis(self, axis: str, which: str):
        grid, mask, elevation = self._slice(which)
        if axis == "lat":
            return grid, mask, self.latitude, self.lat_width
        if axis == "lon":
            return grid, mask, self.longitude, self.lon_width
        if axis == "elev":
            return grid, mask, elevation, 0.0
        raise ValueError(f"Unknown axis: {axis}")

    def axis_quantiles(self, axis: str, which: str) -> tuple:
        """Positions of all requested quantile levels for one axis and slice."""
        key = (axis, which)
        cache = self._axis_cache
        if key not in cache:
            grid, mask, coords, width = self._axis(axis, which)
            profile_coords, mass = axis_mass_profile(grid, mask, coords)
            if self.warn and profile_coords.size == 1:
                logger.warning("Pair %s -> %s: all mass of the '%s' grid lies on one %s value; "
                               "%s quantiles are degenerate",
                               self.time_from, self.time_to, which, axis, axis)
            cache[key] = profile_quantiles(profile_coords, mass, self.quantiles, width)
        return cache[key]

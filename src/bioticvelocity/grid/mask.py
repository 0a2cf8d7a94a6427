"""Valid-cell masks for a pair of time slices.

A cell is valid in a slice when its value is not missing (NaN). Under the
shared-cells policy both slices of a pair are evaluated over the cells that
are valid in both, so every metric of that pair sees the same population.
"""

from typing import NamedTuple

import numpy as np

__all__ = ['PairMask', 'valid_cells', 'compute_mask']


class PairMask(NamedTuple):
    """Masks used by the engines for one time-step pair.

    from_mask, to_mask : cells each slice is evaluated over
    shared : cells valid in both slices (always the pairing mask)
    """
    from_mask: np.ndarray
    to_mask: np.ndarray
    shared: np.ndarray

    @property
    def is_empty(self) -> bool:
        return not (self.from_mask.any() or self.to_mask.any())


def valid_cells(grid: np.ndarray) -> np.ndarray:
    """Boolean grid of non-missing cells."""
    return ~np.isnan(grid)


def compute_mask(grid_from: np.ndarray, grid_to: np.ndarray, only_shared: bool) -> PairMask:
    """Build the masks for a pair of grids.

    Parameters
    ----------
    grid_from, grid_to : np.ndarray
        2D grids of the starting and ending time slice. NaN marks missing cells.

    only_shared : bool
        If False, each slice keeps its own valid cells. If True, both slices
        use only the cells that are valid in both.

    Returns
    -------
    PairMask
        Per-slice masks plus the shared mask. An all-missing pair yields
        all-False masks; dependent statistics then come out as NaN.
    """
    from_valid = valid_cells(grid_from)
    to_valid = valid_cells(grid_to)
    shared = from_valid & to_valid

    if only_shared:
        return PairMask(shared, shared, shared)
    return PairMask(from_valid, to_valid, shared)

"""Summary statistics of cell values over a masked grid."""

from typing import NamedTuple, Sequence

import numpy as np

__all__ = ['Summary', 'Coverage', 'summarize', 'coverage']


class Summary(NamedTuple):
    mean: float
    sum: float
    quantiles: tuple
    prevalence: float


class Coverage(NamedTuple):
    """Proportion of all grid cells that are non-missing."""
    from_prop: float
    to_prop: float
    shared_prop: float


def summarize(grid: np.ndarray, mask: np.ndarray, quantile_levels: Sequence[float]) -> Summary:
    """Compute mean, sum, value quantiles and prevalence over masked cells.

    Parameters
    ----------
    grid : np.ndarray
        2D grid of cell values, NaN for missing.

    mask : np.ndarray
        Boolean grid of cells to include. Missing cells are excluded even
        when the mask includes them.

    quantile_levels : sequence of float
        Levels in [0, 1]. Quantiles are taken over the sorted cell values at
        zero-indexed rank ``q * (n - 1)``, interpolating linearly between the
        bracketing values.

    Returns
    -------
    Summary
        mean, sum, quantiles (one per level) and prevalence (share of cells
        with value > 0). Every field is NaN when no cell qualifies.
    """
    values = grid[mask]
    values = values[~np.isnan(values)]

    if values.size == 0:
        nan_quantiles = tuple(np.nan for _ in quantile_levels)
        return Summary(np.nan, np.nan, nan_quantiles, np.nan)

    total = float(values.sum())
    quantiles = tuple(
        float(q) for q in np.quantile(values, list(quantile_levels), method="linear")
    ) if len(quantile_levels) else ()
    prevalence = float(np.count_nonzero(values > 0)) / values.size

    return Summary(total / values.size, total, quantiles, prevalence)


def coverage(grid_from: np.ndarray, grid_to: np.ndarray) -> Coverage:
    """Proportion of cells non-missing in "from", in "to", and in both."""
    n_cells = grid_from.size
    from_valid = ~np.isnan(grid_from)
    to_valid = ~np.isnan(grid_to)
    return Coverage(
        float(from_valid.sum()) / n_cells,
        float(to_valid.sum()) / n_cells,
        float((from_valid & to_valid).sum()) / n_cells,
    )

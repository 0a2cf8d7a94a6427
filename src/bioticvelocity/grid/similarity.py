"""Cell-by-cell similarity between two aligned grids.

All statistics are computed over the shared mask (cells non-missing in
both grids), with x1 the starting grid, x2 the ending grid and n the number
of shared cells:

- simpleMeanDiff: sum(x2 - x1) / n
- meanAbsDiff:    sum(|x2 - x1|) / n
- rmsd:           sqrt(sum((x2 - x1)^2)) / n
- godsoeEsp:      1 - sum(2 * x1 * x2) / sum(x1 + x2)  (Godsoe 2014)
- schoenersD:     1 - sum(|x1 - x2|) / n            (Schoener 1968)
- warrensI:       1 - sqrt(sum((sqrt(x1) - sqrt(x2))^2) / n)  (Warren et al. 2008)
- cor, rankCor:   Pearson and Spearman correlation

godsoeEsp, schoenersD and warrensI are meant for values in [0, 1].
schoenersD and warrensI are 1 for identical grids. godsoeEsp follows the
published form, which is 0 for identical presence/absence grids and
1 - sum(x^2) / sum(x) for any grid compared with itself.
"""

import logging

import numpy as np
from scipy import stats

__all__ = ['SIMILARITY_FIELDS', 'similarity']

logger = logging.getLogger(__name__)

SIMILARITY_FIELDS = (
    "simpleMeanDiff",
    "meanAbsDiff",
    "rmsd",
    "godsoeEsp",
    "schoenersD",
    "warrensI",
    "cor",
    "rankCor",
)


def _correlations(x1: np.ndarray, x2: np.ndarray):
    """Pearson and Spearman correlation; NaN when undefined (n < 2 or constant input)."""
    if x1.size < 2 or np.all(x1 == x1[0]) or np.all(x2 == x2[0]):
        return np.nan, np.nan
    pearson = stats.pearsonr(x1, x2)[0]
    spearman = stats.spearmanr(x1, x2)[0]
    return float(pearson), float(spearman)


def similarity(grid_from: np.ndarray, grid_to: np.ndarray, shared_mask: np.ndarray,
               warn: bool = True) -> dict:
    """Compare two grids cell by cell.

    Parameters
    ----------
    grid_from, grid_to : np.ndarray
        2D grids of the starting and ending time slice, NaN for missing.
    shared_mask : np.ndarray
        Boolean grid of cells valid in both slices.
    warn : bool
        Log advisory warnings for inputs outside the intended [0, 1] range.

    Returns
    -------
    dict
        One entry per name in SIMILARITY_FIELDS. All NaN when no cell is
        shared. warrensI is NaN when any shared value is negative.
    """
    mask = shared_mask & ~np.isnan(grid_from) & ~np.isnan(grid_to)
    x1 = grid_from[mask].astype(np.float64)
    x2 = grid_to[mask].astype(np.float64)
    n = x1.size

    if n == 0:
        return {name: np.nan for name in SIMILARITY_FIELDS}

    diff = x2 - x1
    abs_diff = np.abs(diff)
    pair_total = np.sum(x1 + x2)

    has_negative = bool(np.any(x1 < 0) or np.any(x2 < 0))
    if warn and (has_negative or np.any(x1 > 1) or np.any(x2 > 1)):
        logger.warning("Similarity inputs outside [0, 1]; "
                       "godsoeEsp, schoenersD and warrensI may be hard to interpret")

    if has_negative:
        if warn:
            logger.warning("Negative cell values: warrensI is undefined for this pair")
        warrens_i = np.nan
    else:
        warrens_i = float(1.0 - np.sqrt(np.sum((np.sqrt(x1) - np.sqrt(x2)) ** 2) / n))

    cor, rank_cor = _correlations(x1, x2)

    return {
        "simpleMeanDiff": float(np.sum(diff) / n),
        "meanAbsDiff": float(np.sum(abs_diff) / n),
        "rmsd": float(np.sqrt(np.sum(diff ** 2)) / n),
        "godsoeEsp": float(1.0 - np.sum(2.0 * x1 * x2) / pair_total) if pair_total != 0 else np.nan,
        "schoenersD": float(1.0 - np.sum(abs_diff) / n),
        "warrensI": warrens_i,
        "cor": cor,
        "rankCor": rank_cor,
    }

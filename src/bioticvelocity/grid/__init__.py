"""Per-pair engines: masks, summaries, centroids, axis quantiles, similarity, rates."""

from bioticvelocity.grid.mask import PairMask, compute_mask
from bioticvelocity.grid.stats import summarize, coverage
from bioticvelocity.grid.centroid import centroid, directional_centroid, weighted_mean
from bioticvelocity.grid.quantile import axis_quantile, axis_quantiles, axis_cell_width
from bioticvelocity.grid.similarity import similarity
from bioticvelocity.grid.velocity import (
    rate,
    positional_rate,
    planar_distance,
    great_circle_distance,
)

__all__ = [
    "PairMask",
    "compute_mask",
    "summarize",
    "coverage",
    "centroid",
    "directional_centroid",
    "weighted_mean",
    "axis_quantile",
    "axis_quantiles",
    "axis_cell_width",
    "similarity",
    "rate",
    "positional_rate",
    "planar_distance",
    "great_circle_distance",
]

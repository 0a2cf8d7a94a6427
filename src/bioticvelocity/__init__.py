"""`bioticvelocity` - rates and directions of change of mapped quantities.

Tracks how a quantity distributed over a 2-D grid (abundance, suitability,
a climate variable) moves across an ordered stack of time slices.

Subpackages:
- grid: Masks, weighted statistics, centroids, axis quantiles, similarity, rates
- pipeline: Grid stacks, per-pair context, metric orchestration
- schemas: Pydantic configuration
- contracts: Input and output invariants
"""

__version__ = "0.1.0"

from bioticvelocity.api import biotic_velocity
from bioticvelocity.pipeline.orchestrator import MetricOrchestrator, records_to_frame
from bioticvelocity.pipeline.stack import GridStack

__all__ = [
    "biotic_velocity",
    "MetricOrchestrator",
    "GridStack",
    "records_to_frame",
]

"""Pipeline modules.

- stack: Grid stack with coordinates, elevation and time selection
- context: Per-pair state and cached intermediates
- metrics: Metric registry (record fields per metric identifier)
- orchestrator: Pair evaluation, worker pool, record assembly
"""

from bioticvelocity.pipeline.stack import GridStack
from bioticvelocity.pipeline.context import PairContext, PairStage
from bioticvelocity.pipeline.metrics import METRICS, metric_fields
from bioticvelocity.pipeline.orchestrator import (
    MetricOrchestrator,
    evaluate_pair,
    records_to_frame,
    setup_logging,
)

__all__ = [
    "GridStack",
    "PairContext",
    "PairStage",
    "METRICS",
    "metric_fields",
    "MetricOrchestrator",
    "evaluate_pair",
    "records_to_frame",
    "setup_logging",
]

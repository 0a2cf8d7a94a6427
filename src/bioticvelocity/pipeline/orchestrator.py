"""Time-step pair orchestration.

Builds one task per pair of consecutive selected times, evaluates every
requested metric for each pair through the PairStage sequence and returns
one flat record per pair, in pair order.

Pairs are independent. With ``workers > 1`` they are mapped over a
``concurrent.futures`` process or thread pool; ``executor.map`` keeps
results in submission order, so parallel output is identical to sequential
output.
"""

import logging
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from typing import Callable, List, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd

from bioticvelocity.contracts import assert_metric_inputs, assert_result_records
from bioticvelocity.contracts.stack import ELEVATION_METRICS
from bioticvelocity.grid.quantile import axis_cell_width
from bioticvelocity.grid.velocity import get_distance_fn
from bioticvelocity.pipeline.context import PairContext, PairStage
from bioticvelocity.pipeline.metrics import METRICS, metric_fields
from bioticvelocity.pipeline.stack import GridStack
from bioticvelocity.schemas import ALL_METRICS, InternalConfig

__all__ = ['MetricOrchestrator', 'PairTask', 'evaluate_pair', 'records_to_frame', 'setup_logging']

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "bioticvelocity"
CONSOLE_HANDLER = "bioticvelocity-console"


def setup_logging(level: str = "INFO") -> None:
    """Attach a console handler to the package logger and set its level.

    Calling it again only updates the level.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if any(h.get_name() == CONSOLE_HANDLER for h in package_logger.handlers):
        return

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console.set_name(CONSOLE_HANDLER)
    package_logger.addHandler(console)


class PairTask(NamedTuple):
    """Everything one worker needs to evaluate a pair (picklable)."""
    time_from: float
    time_to: float
    grid_from: np.ndarray
    grid_to: np.ndarray
    longitude: np.ndarray
    latitude: np.ndarray
    elevation_from: Optional[np.ndarray]
    elevation_to: Optional[np.ndarray]
    lon_width: float
    lat_width: float
    metric_names: Tuple[str, ...]
    quantiles: Tuple[float, ...]
    only_shared: bool
    warn: bool
    distance_fn: Callable


def evaluate_pair(task: PairTask) -> dict:
    """Evaluate all requested metrics for one pair and assemble its record."""
    ctx = PairContext(
        task.time_from, task.time_to,
        task.grid_from, task.grid_to,
        task.longitude, task.latitude,
        task.elevation_from, task.elevation_to,
        task.lon_width, task.lat_width,
        task.quantiles, task.only_shared, task.warn,
    )
    metrics = [METRICS[name] for name in task.metric_names]

    fields = {}
    for metric in metrics:
        if metric.kind == "stats":
            fields[metric.name] = metric.measure(ctx)
    ctx.advance(PairStage.STATS_COMPUTED)

    measured = {}
    for metric in metrics:
        if metric.kind != "stats":
            measured[metric.name] = metric.measure(ctx)
    ctx.advance(PairStage.POSITIONS_COMPUTED)

    for name, values in measured.items():
        fields[name] = METRICS[name].convert(ctx, values, task.distance_fn)
    ctx.advance(PairStage.RATES_COMPUTED)

    record = {
        "fromTime": ctx.time_from,
        "toTime": ctx.time_to,
        "timeSpan": ctx.time_span,
    }
    for metric in metrics:
        record.update(fields[metric.name])
    ctx.advance(PairStage.RECORD_ASSEMBLED)
    return record


class MetricOrchestrator:
    """Evaluates the configured metrics across every time-step pair of a stack.

    Parameters
    ----------
    config : InternalConfig
        Resolved runtime configuration (see ``schemas.resolve_config``).
    distance_fn : callable, optional
        Distance between two (lon, lat) positions. Overrides
        ``config.distance.method``. Must be a module-level function when
        ``config.execution.backend`` is "process".

    Examples
    --------
    >>> from bioticvelocity.schemas import resolve_config
    >>> config = resolve_config(user_cfg={"metrics": ["centroid"]})
    >>> records = MetricOrchestrator(config).run(GridStack(values))
    """

    def __init__(self, config: InternalConfig, distance_fn: Optional[Callable] = None):
        self.config = config
        self.distance_fn = distance_fn or get_distance_fn(config.distance.method)

    def _check_geometry(self, stack: GridStack) -> None:
        """Advise when great-circle distances meet poles or the antimeridian."""
        if not self.config.logging.warn or self.config.distance.method != "great_circle":
            return
        if np.nanmax(np.abs(stack.latitude)) > 80.0:
            logger.warning("Coordinates reach within 10 degrees of a pole; "
                           "great-circle velocities there are unreliable")
        if np.nanmax(stack.longitude) - np.nanmin(stack.longitude) > 180.0:
            logger.warning("Longitudes span more than 180 degrees; the grid may cross "
                           "the antimeridian and east-west velocities may be wrong")

    def metric_names(self, stack: GridStack) -> Tuple[str, ...]:
        """Metrics evaluated on this stack.

        The full metric set ("all", the default) skips the elevation metrics
        when the stack has no elevation. A subset naming them is kept as is
        and fails the input contract.
        """
        names = tuple(self.config.metrics.names)
        if stack.elevation is not None or set(names) != set(ALL_METRICS):
            return names
        if self.config.logging.warn:
            logger.warning("No elevation data: skipping %s", ", ".join(ELEVATION_METRICS))
        return tuple(name for name in names if name not in ELEVATION_METRICS)

    def build_tasks(self, stack: GridStack, at_times=None) -> List[PairTask]:
        """Validate the stack against the configured metrics and build pair tasks.

        Only the grids of the selected times are checked for values the
        metrics cannot take.

        Raises
        ------
        InputError
            If the stack cannot support the requested metrics or the time
            selection is invalid. Raised before any pair is evaluated.
        """
        metrics_cfg = self.config.metrics
        names = self.metric_names(stack)
        pairs = stack.pair_indices(at_times)
        selected = sorted({index for pair in pairs for index in pair})
        assert_metric_inputs(stack.values[selected], stack.elevation, names)
        self._check_geometry(stack)

        lon_width = axis_cell_width(stack.longitude)
        lat_width = axis_cell_width(stack.latitude)

        return [
            PairTask(
                time_from=float(stack.times[i]),
                time_to=float(stack.times[j]),
                grid_from=stack.grid(i),
                grid_to=stack.grid(j),
                longitude=stack.longitude,
                latitude=stack.latitude,
                elevation_from=stack.elevation_at(i),
                elevation_to=stack.elevation_at(j),
                lon_width=lon_width,
                lat_width=lat_width,
                metric_names=names,
                quantiles=tuple(metrics_cfg.quantiles),
                only_shared=metrics_cfg.only_in_shared_cells,
                warn=self.config.logging.warn,
                distance_fn=self.distance_fn,
            )
            for i, j in pairs
        ]

    def run(self, stack: GridStack, at_times=None) -> List[dict]:
        """Evaluate every pair of consecutive selected times.

        Parameters
        ----------
        stack : GridStack
            Grids, times, coordinates and optional elevation.
        at_times : array-like, optional
            Increasing subset of ``stack.times``; default all times.

        Returns
        -------
        list of dict
            One record per pair, in time order: fromTime, toTime, timeSpan,
            then the fields of each requested metric in request order.
        """
        setup_logging(self.config.logging.level)
        execution = self.config.execution
        tasks = self.build_tasks(stack, at_times)
        names = tasks[0].metric_names

        logger.info("Evaluating %d time-step pairs: metrics=%s, workers=%d (%s)",
                    len(tasks), ",".join(names),
                    execution.workers, execution.backend if execution.workers > 1 else "sequential")

        if execution.workers == 1 or len(tasks) == 1:
            records = [evaluate_pair(task) for task in tasks]
        else:
            pool = ProcessPoolExecutor if execution.backend == "process" else ThreadPoolExecutor
            with pool(max_workers=min(execution.workers, len(tasks))) as executor:
                records = list(executor.map(evaluate_pair, tasks))

        assert_result_records(
            records, len(tasks),
            metric_fields(names, self.config.metrics.quantiles),
        )
        logger.info("Evaluated %d time-step pairs", len(records))
        return records


def records_to_frame(records: List[dict]) -> pd.DataFrame:
    """One row per pair, columns in record order."""
    return pd.DataFrame.from_records(records)

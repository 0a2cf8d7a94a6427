"""Public entry point: velocities of a mapped quantity across a grid stack."""

import logging
from typing import Callable, Optional, Union

import pandas as pd

from bioticvelocity.pipeline.orchestrator import MetricOrchestrator, records_to_frame
from bioticvelocity.pipeline.stack import GridStack
from bioticvelocity.schemas import resolve_config, UserConfig

__all__ = ['biotic_velocity']

logger = logging.getLogger(__name__)


def biotic_velocity(x, times=None, at_times=None, longitude=None, latitude=None,
                    elevation=None, metrics=None, quantiles=None,
                    only_in_shared_cells: Optional[bool] = None,
                    workers: Optional[int] = None,
                    config: Optional[Union[dict, UserConfig]] = None,
                    distance_fn: Optional[Callable] = None) -> pd.DataFrame:
    """Rates and directions of change of a gridded quantity between time slices.

    Parameters
    ----------
    x : array-like or xarray.DataArray or GridStack
        Grids of shape (time, y, x). NaN (or masked) marks missing cells.
    times : array-like, optional
        One time per grid, strictly increasing. Default 1..N.
    at_times : array-like, optional
        Increasing subset of ``times`` to evaluate across. Default all.
    longitude, latitude : array-like, optional
        Cell-centre coordinates, shape (y, x). Default: column index 1..ncol
        for longitude and nrow..1 for latitude (first row northernmost).
    elevation : array-like, optional
        Shape (y, x) or (time, y, x). Required for elevCentroid/elevQuants.
    metrics : str or list of str, optional
        Metric identifiers, or "all" (default).
    quantiles : float or list of float, optional
        Quantile levels in [0, 1]. Default (0.05, 0.1, 0.5, 0.9, 0.95).
    only_in_shared_cells : bool, optional
        Evaluate both slices over the cells valid in both. Default False.
    workers : int, optional
        Number of pairs evaluated in parallel. Default 1 (sequential).
    config : dict or UserConfig, optional
        Further user settings (``backend``, ``distance``, ``warn``,
        ``log_level``, ...). Explicit arguments take precedence.
    distance_fn : callable, optional
        Distance between two (lon, lat) positions; overrides ``distance``.

    Returns
    -------
    pandas.DataFrame
        One row per pair of consecutive selected times: fromTime, toTime,
        timeSpan, then the fields of each requested metric.

    Raises
    ------
    InputError
        If the stack, times, coordinates, elevation or time selection cannot
        support the requested metrics.
    pydantic.ValidationError
        If the configuration is invalid.

    Examples
    --------
    >>> import numpy as np
    >>> x = np.zeros((2, 3, 3))
    >>> x[0, 1, 1] = 1.0    # centre cell
    >>> x[1, 0, 1] = 1.0    # one row north
    >>> out = biotic_velocity(x, metrics="nsCentroid")
    >>> float(out.loc[0, "nsCentroid"])
    1.0
    """
    # Aliases (quants, cores, ...) become field names before explicit arguments apply
    user = UserConfig.model_validate(config or {}).model_dump(exclude_none=True)

    arguments = {
        "metrics": metrics,
        "quantiles": quantiles,
        "only_in_shared_cells": only_in_shared_cells,
        "workers": workers,
    }
    user.update({k: v for k, v in arguments.items() if v is not None})

    internal = resolve_config(user_cfg=UserConfig.model_validate(user))

    if isinstance(x, GridStack):
        stack = x
    else:
        stack = GridStack.from_array(x, times=times, longitude=longitude,
                                     latitude=latitude, elevation=elevation)
    logger.debug("Stack of %d grids, shape %s", stack.n_times, stack.shape)

    records = MetricOrchestrator(internal, distance_fn=distance_fn).run(stack, at_times=at_times)
    return records_to_frame(records)

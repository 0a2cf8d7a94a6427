import numpy as np
import pytest

from bioticvelocity.pipeline.stack import GridStack
from bioticvelocity.schemas import ALL_METRICS, InternalConfig, ParamConfig, UserConfig
from bioticvelocity.schemas.resolve import resolve_config

from tests.helpers.fake_stack import random_stack, single_cell_stack


@pytest.fixture
def north_shift_stack() -> GridStack:
    """3x3 stack: a single unit cell moves one row north between two slices."""
    return GridStack(single_cell_stack())


@pytest.fixture
def drifting_stack() -> GridStack:
    """Five slices of a range drifting north, with missing cells and elevation."""
    values = random_stack(n_times=5, shape=(6, 8), seed=3)
    elevation = np.add.outer(np.arange(6)[::-1] * 100.0, np.arange(8) * 10.0)
    return GridStack(values, times=[-40, -30, -20, -10, 0], elevation=elevation)


@pytest.fixture
def pipeline_config() -> InternalConfig:
    """InternalConfig for pipeline tests: all metrics, default quantiles."""
    return resolve_config(ParamConfig(), UserConfig(metrics="all"))


@pytest.fixture
def horizontal_config() -> InternalConfig:
    """Every metric that needs no elevation data."""
    names = [m for m in ALL_METRICS if not m.startswith("elev")]
    return resolve_config(ParamConfig(), UserConfig(metrics=names))

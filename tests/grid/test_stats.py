"""Tests for masked summary statistics and coverage."""

import numpy as np
import pytest

from bioticvelocity.grid.stats import summarize, coverage

pytestmark = pytest.mark.unit


def test_mean_and_sum_over_masked_cells():
    grid = np.array([[1.0, 2.0], [3.0, np.nan]])
    mask = np.array([[True, True], [False, True]])

    result = summarize(grid, mask, [0.5])

    assert result.sum == 3.0
    assert result.mean == 1.5


def test_quantiles_interpolate_between_sorted_values():
    grid = np.array([[4.0, 1.0, 3.0, 2.0]])
    mask = np.ones_like(grid, dtype=bool)

    result = summarize(grid, mask, [0.0, 0.25, 0.5, 1.0])

    # rank q * (n - 1) over [1, 2, 3, 4]
    assert result.quantiles == pytest.approx((1.0, 1.75, 2.5, 4.0))


def test_prevalence_zero_when_nothing_positive():
    grid = np.array([[0.0, 0.0], [-1.0, 0.0]])
    result = summarize(grid, np.ones_like(grid, dtype=bool), [0.5])
    assert result.prevalence == 0.0


def test_prevalence_one_when_everything_positive():
    grid = np.array([[0.2, 1.0], [5.0, np.nan]])
    result = summarize(grid, np.ones_like(grid, dtype=bool), [0.5])
    assert result.prevalence == 1.0


def test_prevalence_is_share_of_positive_cells():
    grid = np.array([[0.0, 1.0, 2.0, 0.0]])
    result = summarize(grid, np.ones_like(grid, dtype=bool), [])
    assert result.prevalence == 0.5
    assert result.quantiles == ()


def test_empty_mask_gives_nan_everywhere():
    grid = np.array([[1.0, 2.0]])
    result = summarize(grid, np.zeros_like(grid, dtype=bool), [0.1, 0.9])

    assert np.isnan(result.mean)
    assert np.isnan(result.sum)
    assert np.isnan(result.prevalence)
    assert all(np.isnan(q) for q in result.quantiles)
    assert len(result.quantiles) == 2


def test_coverage_proportions():
    grid_from = np.array([[1.0, np.nan], [1.0, 1.0]])
    grid_to = np.array([[np.nan, np.nan], [1.0, 1.0]])

    result = coverage(grid_from, grid_to)

    assert result.from_prop == 0.75
    assert result.to_prop == 0.5
    assert result.shared_prop == 0.5

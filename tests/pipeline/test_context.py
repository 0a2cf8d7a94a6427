import logging

import numpy as np
import pytest

from bioticvelocity.pipeline.context import PairContext, PairStage
from bioticvelocity.pipeline.stack import default_coordinates

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


def make_context(grid_from, grid_to, elevation=None, only_shared=False, warn=True,
                 quantiles=(0.0, 0.5, 1.0)):
    lon, lat = default_coordinates(grid_from.shape)
    return PairContext(0.0, 2.0, grid_from, grid_to, lon, lat, elevation, elevation,
                       lon_width=1.0, lat_width=1.0, quantiles=quantiles,
                       only_shared=only_shared, warn=warn)


@pytest.fixture
def shifted_pair():
    grid_from = np.zeros((3, 3))
    grid_to = np.zeros((3, 3))
    grid_from[1, 1] = 1.0
    grid_to[0, 1] = 1.0
    return grid_from, grid_to


def test_context_starts_with_mask_built(shifted_pair):
    ctx = make_context(*shifted_pair)
    assert ctx.stage is PairStage.MASK_BUILT
    assert ctx.time_span == 2.0


def test_advance_records_stage(shifted_pair):
    ctx = make_context(*shifted_pair)
    ctx.advance(PairStage.STATS_COMPUTED)
    assert ctx.stage is PairStage.STATS_COMPUTED


def test_centroids_of_both_slices(shifted_pair):
    ctx = make_context(*shifted_pair)
    assert ctx.centroid_from == (2.0, 2.0)
    assert ctx.centroid_to == (2.0, 3.0)
    assert ctx.reference == (2.0, 2.0)


def test_centroids_are_computed_once(shifted_pair):
    ctx = make_context(*shifted_pair)
    assert ctx.centroid_from is ctx.centroid_from


def test_reference_falls_back_to_grid_centre():
    empty = np.zeros((3, 3))
    ctx = make_context(empty, empty)
    assert np.isnan(ctx.centroid_from[0])
    assert ctx.reference == (2.0, 2.0)


def test_directional_anchor_is_starting_centroid(shifted_pair):
    ctx = make_context(*shifted_pair)

    north_from = ctx.directional("north", "from")
    north_to = ctx.directional("north", "to")

    # the starting cell lies on the anchor line: no valid cell beyond it carries mass
    assert np.isnan(north_from.lat) and north_from.weight == 0.0
    assert north_to.lat == 3.0 and north_to.weight == 1.0


def test_elevation_centroids():
    grid = np.zeros((2, 2))
    grid[0, 0] = 1.0
    grid[1, 1] = 1.0
    elevation = np.array([[100.0, 0.0], [0.0, 300.0]])

    ctx = make_context(grid, grid, elevation=elevation)

    assert ctx.has_elevation
    assert ctx.elevation_centroid_from == pytest.approx(200.0)


def test_elevation_centroid_without_elevation_is_nan(shifted_pair):
    ctx = make_context(*shifted_pair)
    assert not ctx.has_elevation
    assert np.isnan(ctx.elevation_centroid_to)


def test_axis_quantiles_are_cached(shifted_pair):
    ctx = make_context(*shifted_pair, warn=False)
    first = ctx.axis_quantiles("lat", "to")
    assert ctx.axis_quantiles("lat", "to") is first
    assert first == pytest.approx((2.5, 3.0, 3.5))


def test_single_rank_profile_warns(shifted_pair, caplog):
    ctx = make_context(*shifted_pair)
    with caplog.at_level(logging.WARNING, logger="bioticvelocity"):
        ctx.axis_quantiles("lon", "from")
    assert "quantiles are degenerate" in caplog.text


def test_single_rank_warning_can_be_silenced(shifted_pair, caplog):
    ctx = make_context(*shifted_pair, warn=False)
    with caplog.at_level(logging.WARNING, logger="bioticvelocity"):
        ctx.axis_quantiles("lon", "from")
    assert caplog.text == ""


def test_shared_policy_restricts_both_slices():
    grid_from = np.array([[1.0, 1.0]])
    grid_to = np.array([[1.0, np.nan]])

    ctx = make_context(grid_from, grid_to, only_shared=True)

    assert ctx.centroid_from == (1.0, 1.0)


def test_unknown_axis_is_rejected(shifted_pair):
    with pytest.raises(ValueError, match="Unknown axis"):
        make_context(*shifted_pair).axis_quantiles("depth", "from")

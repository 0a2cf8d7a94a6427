import numpy as np
import pandas as pd
import pytest
import xarray as xr

from bioticvelocity import GridStack, biotic_velocity
from bioticvelocity.contracts import InputError
from bioticvelocity.schemas import UserConfig

from tests.helpers.fake_stack import planar_coordinates, random_stack, row_stack, single_cell_stack

pytestmark = pytest.mark.unit


def test_returns_one_row_per_pair():
    out = biotic_velocity(random_stack(n_times=4), metrics=["centroid", "summary"])

    assert isinstance(out, pd.DataFrame)
    assert len(out) == 3
    assert list(out.columns[:3]) == ["fromTime", "toTime", "timeSpan"]
    np.testing.assert_array_equal(out["fromTime"], [1.0, 2.0, 3.0])


def test_north_shift_with_default_coordinates():
    out = biotic_velocity(single_cell_stack(), metrics=["centroid", "nsCentroid"])

    assert out.loc[0, "centroidVelocity"] == pytest.approx(1.0)
    assert out.loc[0, "nsCentroid"] > 0


def test_five_cell_row_quantiles():
    out = biotic_velocity(row_stack(), metrics="ewQuants", quantiles=[0, 0.5, 1], config={"warn": False})

    assert out.loc[0, "ewQuantLon_0.5"] == pytest.approx(3.0)
    assert out.loc[0, "ewQuantLon_0"] == pytest.approx(0.5)
    assert out.loc[0, "ewQuantLon_1"] == pytest.approx(5.5)
    assert out.loc[0, "ewQuantVelocity_0.5"] == 0.0


def test_metres_per_year_with_projected_coordinates():
    values = single_cell_stack(shape=(3, 3), cells=((2, 1), (0, 1)))
    lon, lat = planar_coordinates((3, 3), spacing=1000.0)

    out = biotic_velocity(values, times=[0, 100], longitude=lon, latitude=lat, metrics="nsCentroid")

    assert out.loc[0, "nsCentroid"] == pytest.approx(20.0)
    assert out.loc[0, "timeSpan"] == 100.0


def test_selected_times_and_workers():
    values = random_stack(n_times=5)
    everything = biotic_velocity(values, times=[10, 20, 30, 40, 50], at_times=[10, 30, 50],
                                 metrics="all", workers=2, config={"backend": "thread", "warn": False},
                                 elevation=np.zeros((6, 8)))

    assert list(everything["fromTime"]) == [10.0, 30.0]
    assert list(everything["timeSpan"]) == [20.0, 20.0]


def test_explicit_arguments_override_config():
    out = biotic_velocity(single_cell_stack(), metrics="summary", quantiles=[0.5],
                          config=UserConfig(quants=[0.1, 0.9], warn=False))
    assert "quantile_0.5" in out.columns
    assert "quantile_0.1" not in out.columns


def test_accepts_dataarray_and_gridstack():
    values = single_cell_stack()
    da = xr.DataArray(values, dims=("time", "y", "x"),
                      coords={"time": [0.0, 1.0], "y": [3.0, 2.0, 1.0], "x": [1.0, 2.0, 3.0]})

    from_da = biotic_velocity(da, metrics="centroid")
    from_stack = biotic_velocity(GridStack(values, times=[0.0, 1.0]), metrics="centroid")

    pd.testing.assert_frame_equal(from_da, from_stack)


def test_setup_faults_raise_before_evaluation():
    with pytest.raises(InputError):
        biotic_velocity(single_cell_stack(), times=[2, 1])
    with pytest.raises(InputError, match="without elevation"):
        biotic_velocity(single_cell_stack(), metrics="elevCentroid")
    with pytest.raises(ValueError):
        biotic_velocity(single_cell_stack(), quantiles=[2.0])


def test_default_call_without_elevation():
    out = biotic_velocity(single_cell_stack())

    assert len(out) == 1
    assert out.loc[0, "centroidVelocity"] == pytest.approx(1.0)
    assert "warrensI" in out.columns
    assert not any(column.startswith("elev") for column in out.columns)


def test_explicit_arguments_override_config_aliases():
    out = biotic_velocity(single_cell_stack(), metrics="summary", quantiles=[0.5],
                          config={"quants": [0.1, 0.9], "warn": False})

    assert "quantile_0.5" in out.columns
    assert "quantile_0.1" not in out.columns
    assert "quantile_0.9" not in out.columns

"""Tests for input and output contracts.

These tests exercise the contracts directly, without any downstream logic.
"""

import numpy as np
import pytest

pytestmark = pytest.mark.unit

from bioticvelocity.contracts import (
    ContractViolation,
    InputError,
    assert_coordinates,
    assert_elevation,
    assert_metric_inputs,
    assert_result_records,
    assert_selection,
    assert_stack,
    require,
    require_input,
)


class TestFailureTypes:

    def test_require_raises_contract_violation(self):
        with pytest.raises(ContractViolation, match="broken"):
            require(False, "broken")

    def test_require_input_raises_input_error(self):
        with pytest.raises(InputError, match="bad input"):
            require_input(False, "bad input")

    def test_passing_conditions_do_nothing(self):
        require(True, "unused")
        require_input(True, "unused")

    def test_failure_type_hierarchy(self):
        assert issubclass(ContractViolation, RuntimeError)
        assert issubclass(InputError, ValueError)


class TestStackContract:

    def test_valid_stack_passes(self):
        assert_stack(np.zeros((3, 2, 2)), np.array([1.0, 2.0, 5.0]))

    def test_missing_values_are_allowed(self):
        assert_stack(np.full((2, 2, 2), np.nan), np.array([1.0, 2.0]))

    def test_non_finite_times_fail(self):
        with pytest.raises(InputError, match="finite"):
            assert_stack(np.zeros((2, 2, 2)), np.array([1.0, np.nan]))

    def test_empty_grids_fail(self):
        with pytest.raises(InputError, match="empty grids"):
            assert_stack(np.zeros((2, 0, 3)), np.array([1.0, 2.0]))

    def test_coordinates_with_missing_values_fail(self):
        coords = np.array([[1.0, np.nan]])
        with pytest.raises(InputError, match="'latitude' contains missing"):
            assert_coordinates(coords, (1, 2), "latitude")

    def test_one_dimensional_coordinates_fail(self):
        with pytest.raises(InputError, match="expected 2"):
            assert_coordinates(np.arange(3.0), (1, 3), "longitude")

    def test_elevation_shapes(self):
        assert_elevation(None, (2, 2), 3)
        assert_elevation(np.zeros((2, 2)), (2, 2), 3)
        assert_elevation(np.zeros((3, 2, 2)), (2, 2), 3)
        with pytest.raises(InputError, match="Elevation contract"):
            assert_elevation(np.zeros((2, 3)), (2, 2), 3)

    def test_selection_subset(self):
        times = np.array([-2.0, -1.0, 0.0])
        assert_selection(times, np.array([-2.0, 0.0]))
        with pytest.raises(InputError, match="not among"):
            assert_selection(times, np.array([-2.0, 1.0]))


class TestMetricInputContract:

    def test_elevation_metrics_need_elevation(self):
        with pytest.raises(InputError, match="elevQuants"):
            assert_metric_inputs(np.zeros((2, 2, 2)), None, ["summary", "elevQuants"])

    def test_negative_values_fail_for_mass_metrics(self):
        values = np.array([[[1.0, -0.1]], [[np.nan, 1.0]]])
        with pytest.raises(InputError, match="negative cell values"):
            assert_metric_inputs(values, None, ["nsQuants"])

    def test_negative_values_pass_for_statistics(self):
        values = np.array([[[1.0, -0.1]], [[np.nan, 1.0]]])
        assert_metric_inputs(values, None, ["summary", "similarity"])


class TestRecordContract:

    @pytest.fixture
    def records(self):
        return [
            {"fromTime": 1.0, "toTime": 2.0, "timeSpan": 1.0, "centroidVelocity": np.nan},
            {"fromTime": 2.0, "toTime": 4.0, "timeSpan": 2.0, "centroidVelocity": 0.5},
        ]

    def test_valid_records_pass(self, records):
        assert_result_records(records, 2, ["centroidVelocity"])

    def test_wrong_record_count_fails(self, records):
        with pytest.raises(ContractViolation, match="2 records for 3"):
            assert_result_records(records, 3, [])

    def test_missing_time_column_fails(self, records):
        del records[1]["timeSpan"]
        with pytest.raises(ContractViolation, match="missing 'timeSpan'"):
            assert_result_records(records, 2, [])

    def test_non_positive_time_span_fails(self, records):
        records[0]["timeSpan"] = 0.0
        with pytest.raises(ContractViolation, match="timeSpan 0.0"):
            assert_result_records(records, 2, [])

    def test_broken_chain_fails(self, records):
        records[1]["fromTime"] = 3.0
        with pytest.raises(ContractViolation, match="does not start where"):
            assert_result_records(records, 2, [])

    def test_missing_metric_field_fails(self, records):
        with pytest.raises(ContractViolation, match="centroidLat"):
            assert_result_records(records, 2, ["centroidVelocity", "centroidLat"])

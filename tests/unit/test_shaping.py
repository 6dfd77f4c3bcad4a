"""Unit tests for the array-shaping engine."""

import numpy as np
import pandas as pd
import pytest

from forecast_store.data.series import Deterministic, Probabilistic, Scenarios, SingleTimeSeries
from forecast_store.data.shaping import (
    restore_from_storage,
    shape_for_storage,
    transform_array_for_storage,
)
from forecast_store.data.structs import ElementKind, PiecewiseLinearData, PiecewiseStepData
from forecast_store.utils.error_handling import (
    ArgumentError,
    ConflictingInputsError,
    FeatureNotImplementedError,
)

from conftest import T0


HOUR = pd.Timedelta(hours=1)


class TestConstantShapes:
    def test_single_window(self):
        array = transform_array_for_storage([1.0, 2.0, 3.0], ElementKind.CONSTANT)
        assert array.shape == (3,)
        assert array.dtype == np.float64

    def test_store_columns_are_windows(self, constant_windows):
        forecast = Deterministic("test", constant_windows, HOUR)
        array = shape_for_storage(forecast)

        assert array.shape == (4, 3)
        for j, values in enumerate(constant_windows.values()):
            np.testing.assert_array_equal(array[:, j], values)

    def test_matrix_window(self):
        array = transform_array_for_storage(np.ones((4, 3)), ElementKind.CONSTANT)
        assert array.shape == (4, 3)

    def test_rank_three_rejected(self):
        with pytest.raises(ArgumentError, match="rank"):
            transform_array_for_storage(np.ones((2, 2, 2)), ElementKind.CONSTANT)

    def test_empty_store(self):
        with pytest.raises(ArgumentError, match="empty"):
            transform_array_for_storage({}, ElementKind.CONSTANT)

    def test_horizon_mismatch_across_windows(self):
        data = {T0: [1.0, 2.0], T0 + HOUR: [1.0, 2.0, 3.0]}
        with pytest.raises(ArgumentError, match="horizon mismatch"):
            transform_array_for_storage(data, ElementKind.CONSTANT)


class TestPolynomialShapes:
    def test_single_window(self):
        array = transform_array_for_storage([(1.0, 2.0), (3.0, 4.0), (5.0, 6.0)], ElementKind.POLYNOMIAL)
        assert array.shape == (3, 2)

    def test_store(self, polynomial_windows):
        forecast = Deterministic("test", polynomial_windows, HOUR)
        array = shape_for_storage(forecast)

        assert array.shape == (2, 2, 3)
        np.testing.assert_array_equal(array[1, 0], [4.0, 5.0, 6.0])
        np.testing.assert_array_equal(array[0, 1], [7.0, 8.0, 9.0])

    def test_mixed_degree_window(self):
        with pytest.raises(ArgumentError, match="degree mismatch"):
            transform_array_for_storage([(1.0, 2.0), (1.0, 2.0, 3.0)], ElementKind.POLYNOMIAL)

    def test_unsupported_degree(self):
        with pytest.raises(ArgumentError, match="degree must be one of"):
            transform_array_for_storage([(1.0, 2.0, 3.0, 4.0)], ElementKind.POLYNOMIAL)


class TestPiecewiseShapes:
    def test_single_window(self):
        curve = [(0.0, 0.0), (1.0, 2.0), (2.0, 5.0)]
        array = transform_array_for_storage([curve, curve], ElementKind.PIECEWISE_LINEAR)
        assert array.shape == (2, 3, 2)
        np.testing.assert_array_equal(array[1, 2], [2.0, 5.0])

    def test_typed_curves(self):
        curve = PiecewiseLinearData([(0, 0), (1, 1)])
        array = transform_array_for_storage([curve], ElementKind.PIECEWISE_LINEAR)
        assert array.shape == (1, 2, 2)

    def test_store(self, curve_windows):
        forecast = Deterministic("test", curve_windows, HOUR)
        array = shape_for_storage(forecast)

        assert array.shape == (2, 2, 3, 2)
        np.testing.assert_array_equal(array[0, 1, 2], [100.0, 30.0])

    def test_point_count_mismatch_within_window(self):
        four = [(0, 0), (1, 1), (2, 2), (3, 3)]
        three = [(0, 0), (1, 1), (2, 2)]
        forecast = Deterministic("test", {T0: [four, three, four], T0 + HOUR: [four, four, four]}, HOUR)

        with pytest.raises(ArgumentError, match="point count"):
            shape_for_storage(forecast)

    def test_point_count_mismatch_across_windows(self):
        four = [(0, 0), (1, 1), (2, 2), (3, 3)]
        three = [(0, 0), (1, 1), (2, 2)]
        data = {T0: [four, four], T0 + HOUR: [three, three]}

        with pytest.raises(ArgumentError, match="point count"):
            transform_array_for_storage(data, ElementKind.PIECEWISE_LINEAR)

    def test_point_arity(self):
        with pytest.raises(ArgumentError, match="arity"):
            transform_array_for_storage([[(0, 0, 0), (1, 1, 1)]], ElementKind.PIECEWISE_LINEAR)


class TestUnsupportedKinds:
    def test_piecewise_step(self):
        step = PiecewiseStepData([0.0, 1.0], [2.0])
        forecast = Deterministic("steps", {T0: [step]}, HOUR)

        with pytest.raises(FeatureNotImplementedError) as exc_info:
            shape_for_storage(forecast)
        assert exc_info.value.feature == "transform_array_for_storage"
        assert exc_info.value.data == ElementKind.PIECEWISE_STEP
        assert "ElementKind.PIECEWISE_STEP" in str(exc_info.value)

    def test_piecewise_step_window(self):
        step = PiecewiseStepData([0.0, 1.0], [2.0])
        with pytest.raises(FeatureNotImplementedError):
            transform_array_for_storage([step], ElementKind.PIECEWISE_STEP)

    def test_is_a_not_implemented_error(self):
        with pytest.raises(NotImplementedError):
            transform_array_for_storage({T0: [1.0]}, ElementKind.PIECEWISE_STEP)


class TestMatrixForecasts:
    def test_probabilistic_store(self):
        data = {T0: np.arange(6.0).reshape(2, 3), T0 + HOUR: np.arange(6.0, 12.0).reshape(2, 3)}
        forecast = Probabilistic("test", data, [10, 50, 90], HOUR)
        array = shape_for_storage(forecast)

        assert array.shape == (2, 2, 3)
        np.testing.assert_array_equal(array[:, 1, :], data[T0 + HOUR])

    def test_scenarios_store(self):
        forecast = Scenarios("test", {T0: np.ones((4, 5))}, HOUR)
        assert shape_for_storage(forecast).shape == (4, 1, 5)


class TestRestoreFromStorage:
    def test_constant(self, constant_windows):
        forecast = Deterministic("test", constant_windows, HOUR)
        restored = restore_from_storage(shape_for_storage(forecast), forecast.get_metadata())

        assert restored.uuid == forecast.uuid
        assert restored.get_initial_times() == forecast.get_initial_times()
        for start in constant_windows:
            np.testing.assert_array_equal(restored.data[start], forecast.data[start])

    def test_polynomial(self, polynomial_windows):
        forecast = Deterministic("test", polynomial_windows, HOUR)
        restored = restore_from_storage(shape_for_storage(forecast), forecast.get_metadata())
        assert restored.element_kind == ElementKind.POLYNOMIAL
        np.testing.assert_array_equal(restored.data[T0 + HOUR], forecast.data[T0 + HOUR])

    def test_piecewise(self, curve_windows):
        forecast = Deterministic("test", curve_windows, HOUR)
        restored = restore_from_storage(shape_for_storage(forecast), forecast.get_metadata())
        assert restored.element_kind == ElementKind.PIECEWISE_LINEAR
        assert restored.data[T0] == forecast.data[T0]

    def test_piecewise_without_points(self):
        data = {T0: [(), ()], T0 + HOUR: [(), ()]}
        forecast = Deterministic("test", data, HOUR, element_kind=ElementKind.PIECEWISE_LINEAR)
        array = shape_for_storage(forecast)
        assert array.shape == (2, 2, 0, 2)

        restored = restore_from_storage(array, forecast.get_metadata())
        assert restored.element_kind == ElementKind.PIECEWISE_LINEAR
        assert restored.data[T0 + HOUR] == ((), ())

    def test_probabilistic(self):
        forecast = Probabilistic("test", {T0: np.ones((2, 3))}, [5, 50, 95], HOUR)
        restored = restore_from_storage(shape_for_storage(forecast), forecast.get_metadata())
        assert isinstance(restored, Probabilistic)
        assert restored.percentiles == (5.0, 50.0, 95.0)

    def test_single(self, hourly_series):
        series = SingleTimeSeries("load", hourly_series)
        restored = restore_from_storage(shape_for_storage(series), series.get_metadata())
        assert isinstance(restored, SingleTimeSeries)
        assert restored.to_series().tolist() == hourly_series.tolist()

    def test_shape_mismatch(self, constant_windows):
        forecast = Deterministic("test", constant_windows, HOUR)
        with pytest.raises(ConflictingInputsError):
            restore_from_storage(np.ones((4, 2)), forecast.get_metadata())

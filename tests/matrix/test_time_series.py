"""Tests for TimeSeriesMatrix access, slicing, differencing and maps."""

from __future__ import annotations

import dataclasses
import logging

import numpy as np
import pandas as pd
import pytest

from tsmatrix import (
    MatrixConfig,
    TimeSeriesMatrix,
    UniformDateTimeIndex,
    from_vectors,
)
from tsmatrix.core.errors import EIndexOutOfRange, ELengthMismatch, ENotFound


def _hour(h: int) -> pd.Timestamp:
    return pd.Timestamp("2024-01-01", tz="UTC") + pd.Timedelta(hours=h)


class TestConstruction:
    """Tests for the dataclass invariants."""

    def test_shape(self, two_column_matrix) -> None:
        assert two_column_matrix.shape == (5, 2)
        assert two_column_matrix.n_rows == 5
        assert two_column_matrix.n_columns == 2
        assert two_column_matrix.keys == ("a", "b")

    def test_data_is_copied_and_read_only(self, hourly_index) -> None:
        source = np.arange(10, dtype=float).reshape(5, 2)
        matrix = TimeSeriesMatrix(hourly_index, source, ("a", "b"))
        source[0, 0] = 99.0
        assert matrix.data[0, 0] == 0.0
        assert not matrix.data.flags.writeable
        assert matrix.data.flags.f_contiguous
        with pytest.raises(ValueError):
            matrix.data[0, 0] = 1.0

    def test_frozen(self, two_column_matrix) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            two_column_matrix.keys = ("x", "y")

    def test_column_major_buffer(self, hourly_index) -> None:
        flat = np.arange(10, dtype=float)
        matrix = TimeSeriesMatrix(hourly_index, flat, ("a", "b"))
        np.testing.assert_array_equal(matrix.series("a"), [0, 1, 2, 3, 4])
        np.testing.assert_array_equal(matrix.series("b"), [5, 6, 7, 8, 9])

    def test_row_mismatch(self, hourly_index) -> None:
        with pytest.raises(ELengthMismatch):
            TimeSeriesMatrix(hourly_index, np.zeros((4, 2)), ("a", "b"))

    def test_column_mismatch(self, hourly_index) -> None:
        with pytest.raises(ELengthMismatch):
            TimeSeriesMatrix(hourly_index, np.zeros((5, 2)), ("a",))

    def test_duplicate_keys_allowed(self, hourly_index) -> None:
        matrix = TimeSeriesMatrix(hourly_index, np.zeros((5, 2)), ("a", "a"))
        assert matrix.keys == ("a", "a")

    def test_empty_matrix(self) -> None:
        index = UniformDateTimeIndex(_hour(0), 0, "h")
        matrix = TimeSeriesMatrix(index, np.empty((0, 0)), ())
        assert matrix.shape == (0, 0)


class TestAccess:
    def test_series(self, two_column_matrix) -> None:
        np.testing.assert_array_equal(two_column_matrix.series("b"), [6, 7, 8, 9, 10])

    def test_series_missing_key(self, two_column_matrix) -> None:
        with pytest.raises(ENotFound):
            two_column_matrix.series("z")

    def test_head(self, two_column_matrix) -> None:
        key, vector = two_column_matrix.head()
        assert key == "a"
        np.testing.assert_array_equal(vector, [1, 2, 3, 4, 5])

    def test_head_without_columns(self, hourly_index) -> None:
        matrix = TimeSeriesMatrix(hourly_index, np.empty((5, 0)), ())
        with pytest.raises(EIndexOutOfRange):
            matrix.head()

    def test_iter_series_restarts(self, two_column_matrix) -> None:
        first = [v.tolist() for v in two_column_matrix.iter_series()]
        second = [v.tolist() for v in two_column_matrix.iter_series()]
        assert first == second == [[1, 2, 3, 4, 5], [6, 7, 8, 9, 10]]

    def test_iter_key_and_series(self, two_column_matrix) -> None:
        keys = [key for key, _ in two_column_matrix.iter_key_and_series()]
        assert keys == ["a", "b"]

    def test_returned_vectors_are_copies(self, two_column_matrix) -> None:
        vector = two_column_matrix.series("a")
        vector[0] = 42.0
        assert two_column_matrix.data[0, 0] == 1.0

    def test_to_instants(self, two_column_matrix) -> None:
        instants = two_column_matrix.to_instants()
        assert len(instants) == 5
        ts, row = instants[2]
        assert ts == _hour(18)
        np.testing.assert_array_equal(row, [3, 8])

    def test_data_as_array_is_column_major(self, two_column_matrix) -> None:
        np.testing.assert_array_equal(
            two_column_matrix.data_as_array(), [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]
        )

    def test_to_pandas(self, two_column_matrix) -> None:
        frame = two_column_matrix.to_pandas()
        assert list(frame.columns) == ["a", "b"]
        assert frame.index[0] == _hour(16)
        assert frame["b"].tolist() == [6, 7, 8, 9, 10]

    def test_to_pandas_tuple_keys(self, hourly_index) -> None:
        matrix = from_vectors([[1, 2, 3, 4, 5]], hourly_index, [("a", 1)])
        assert list(matrix.to_pandas().columns) == [("a", 1)]

    def test_repr(self, two_column_matrix) -> None:
        assert "shape=(5, 2)" in repr(two_column_matrix)


class TestSlice:
    def test_rows_and_index(self, two_column_matrix) -> None:
        sub = two_column_matrix.slice(1, 3)
        assert sub.index == UniformDateTimeIndex(_hour(17), 2, "h")
        np.testing.assert_array_equal(sub.series("a"), [2, 3])
        np.testing.assert_array_equal(sub.series("b"), [7, 8])

    def test_empty_slice(self, two_column_matrix) -> None:
        assert two_column_matrix.slice(2, 2).shape == (0, 2)

    def test_out_of_range(self, two_column_matrix) -> None:
        with pytest.raises(EIndexOutOfRange):
            two_column_matrix.slice(3, 6)

    def test_irregular_index(self, irregular_index) -> None:
        matrix = from_vectors([[1.0, 2.0, 3.0]], irregular_index, ["x"])
        sub = matrix.slice(1, 3)
        assert sub.index.first == pd.Timestamp("2024-01-03", tz="UTC")
        np.testing.assert_array_equal(sub.series("x"), [2.0, 3.0])


class TestDifferencing:
    def test_differences(self, two_column_matrix) -> None:
        diffs = two_column_matrix.differences()
        assert diffs.index == UniformDateTimeIndex(_hour(17), 4, "h")
        np.testing.assert_array_equal(diffs.series("a"), [1, 1, 1, 1])

    def test_differences_with_lag(self, two_column_matrix) -> None:
        diffs = two_column_matrix.differences(2)
        assert diffs.index.first == _hour(18)
        np.testing.assert_array_equal(diffs.series("b"), [2, 2, 2])

    def test_differences_propagate_nan(self, hourly_index) -> None:
        matrix = from_vectors([[1.0, np.nan, 3.0, 4.0, 5.0]], hourly_index, ["a"])
        np.testing.assert_array_equal(
            matrix.differences().series("a"), [np.nan, np.nan, 1.0, 1.0]
        )

    def test_quotients(self, hourly_index) -> None:
        matrix = from_vectors([[1, 2, 4, 8, 16]], hourly_index, ["a"])
        quotients = matrix.quotients(2)
        assert quotients.index.first == _hour(18)
        np.testing.assert_array_equal(quotients.series("a"), [4, 4, 4])

    def test_quotients_zero_denominator_warns(self, hourly_index, caplog) -> None:
        matrix = from_vectors([[0, 1, 2, 3, 4]], hourly_index, ["a"])
        with caplog.at_level(logging.WARNING, logger="tsmatrix"):
            quotients = matrix.quotients()
        assert np.isinf(quotients.series("a")[0])
        assert "non-finite" in caplog.text

    def test_price2ret(self, hourly_index) -> None:
        matrix = from_vectors([[100.0, 110.0, 99.0, 99.0, 49.5]], hourly_index, ["p"])
        returns = matrix.price2ret()
        assert returns.index == UniformDateTimeIndex(_hour(17), 4, "h")
        np.testing.assert_allclose(returns.series("p"), [0.1, -0.1, 0.0, -0.5])

    def test_lag_zero_rejected(self, two_column_matrix) -> None:
        with pytest.raises(ValueError):
            two_column_matrix.differences(0)

    def test_lag_beyond_rows(self, two_column_matrix) -> None:
        with pytest.raises(EIndexOutOfRange):
            two_column_matrix.quotients(6)

    def test_lag_equal_to_rows(self, two_column_matrix) -> None:
        assert two_column_matrix.differences(5).shape == (0, 2)


class TestMaps:
    def test_map_series(self, two_column_matrix) -> None:
        doubled = two_column_matrix.map_series(lambda v: v * 2)
        np.testing.assert_array_equal(doubled.series("a"), [2, 4, 6, 8, 10])
        assert doubled.index == two_column_matrix.index

    def test_map_series_new_index(self, two_column_matrix) -> None:
        new_index = UniformDateTimeIndex(_hour(16), 2, "h")
        shrunk = two_column_matrix.map_series(lambda v: v[:2], new_index)
        assert shrunk.index == new_index
        np.testing.assert_array_equal(shrunk.series("b"), [6, 7])

    def test_map_series_wrong_length(self, two_column_matrix) -> None:
        with pytest.raises(ELengthMismatch):
            two_column_matrix.map_series(lambda v: v[:2])

    def test_map_series_with_key(self, two_column_matrix) -> None:
        shifted = two_column_matrix.map_series_with_key(
            lambda key, v: v + (100 if key == "b" else 0)
        )
        np.testing.assert_array_equal(shifted.series("a"), [1, 2, 3, 4, 5])
        np.testing.assert_array_equal(shifted.series("b"), [106, 107, 108, 109, 110])

    def test_map_values(self, two_column_matrix) -> None:
        assert two_column_matrix.map_values(lambda v: float(v.sum())) == [
            ("a", 15.0),
            ("b", 40.0),
        ]

    def test_union_appends_column(self, two_column_matrix) -> None:
        extended = two_column_matrix.union([0, 0, 0, 0, 1], "c")
        assert extended.keys == ("a", "b", "c")
        np.testing.assert_array_equal(extended.series("c"), [0, 0, 0, 0, 1])
        assert two_column_matrix.keys == ("a", "b")

    def test_union_wrong_length(self, two_column_matrix) -> None:
        with pytest.raises(ELengthMismatch):
            two_column_matrix.union([1, 2], "c")

    def test_config_carried(self, hourly_index) -> None:
        config = MatrixConfig.hourly()
        matrix = from_vectors([[1, 2, 3, 4, 5]], hourly_index, ["a"], config=config)
        assert matrix.differences().config is config
        assert matrix.map_series(lambda v: v).config is config

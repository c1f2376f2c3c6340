"""Tests for series/alignment.py."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tsmatrix.core.errors import EIncompatibleFrequency, ELengthMismatch, EMisalignedSample
from tsmatrix.series import (
    covering_index,
    min_max_datetimes,
    slice_to_index,
    union_indexed,
    union_vectors,
)
from tsmatrix.time import UniformDateTimeIndex


def _daily(start: str, size: int) -> UniformDateTimeIndex:
    return UniformDateTimeIndex(pd.Timestamp(start, tz="UTC"), size, "D")


class TestSliceToIndex:
    """Tests for slice_to_index."""

    def test_same_index_is_identity(self, daily_index) -> None:
        vector = np.arange(10, dtype=float)
        result = slice_to_index(daily_index, daily_index, vector)
        np.testing.assert_array_equal(result, vector)
        assert not np.shares_memory(result, vector)

    def test_sub_window(self, daily_index) -> None:
        vector = np.arange(10, dtype=float)
        result = slice_to_index(daily_index, _daily("2024-01-03", 4), vector)
        np.testing.assert_array_equal(result, [2.0, 3.0, 4.0, 5.0])

    def test_padding_on_both_ends(self) -> None:
        source = _daily("2024-01-03", 3)
        result = slice_to_index(source, _daily("2024-01-01", 7), [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(
            result, [np.nan, np.nan, 1.0, 2.0, 3.0, np.nan, np.nan]
        )

    def test_target_overlaps_source_start(self) -> None:
        source = _daily("2024-01-03", 5)
        result = slice_to_index(source, _daily("2024-01-01", 4), [1, 2, 3, 4, 5])
        np.testing.assert_array_equal(result, [np.nan, np.nan, 1.0, 2.0])

    def test_target_overlaps_source_end(self) -> None:
        source = _daily("2024-01-03", 5)
        result = slice_to_index(source, _daily("2024-01-05", 5), [1, 2, 3, 4, 5])
        np.testing.assert_array_equal(result, [3.0, 4.0, 5.0, np.nan, np.nan])

    def test_disjoint_target_is_all_missing(self) -> None:
        source = _daily("2024-01-03", 5)
        result = slice_to_index(source, _daily("2024-01-20", 3), [1, 2, 3, 4, 5])
        assert result.shape == (3,)
        assert np.isnan(result).all()

    def test_positions_keep_their_timestamps(self) -> None:
        """Every output value is the source value at the same timestamp."""
        source = _daily("2024-01-05", 6)
        target = _daily("2024-01-02", 12)
        vector = np.arange(100.0, 106.0)
        result = slice_to_index(source, target, vector)
        for offset, ts in enumerate(target):
            src = source.offset_of(ts, exact=False)
            expected = vector[src] if 0 <= src < source.size else np.nan
            np.testing.assert_equal(result[offset], expected)

    def test_frequency_mismatch_raises(self, daily_index, hourly_index) -> None:
        with pytest.raises(EIncompatibleFrequency):
            slice_to_index(daily_index, hourly_index, np.zeros(10))

    def test_irregular_raises(self, daily_index, irregular_index) -> None:
        with pytest.raises(EIncompatibleFrequency):
            slice_to_index(daily_index, irregular_index, np.zeros(10))

    def test_out_of_phase_raises(self) -> None:
        source = UniformDateTimeIndex(pd.Timestamp("2024-01-01 00:00", tz="UTC"), 4, "h")
        target = UniformDateTimeIndex(pd.Timestamp("2024-01-01 00:30", tz="UTC"), 4, "h")
        with pytest.raises(EMisalignedSample):
            slice_to_index(source, target, np.zeros(4))

    def test_length_mismatch_raises(self, daily_index) -> None:
        with pytest.raises(ELengthMismatch):
            slice_to_index(daily_index, daily_index, np.zeros(3))


class TestUnionVectors:
    def test_first_non_missing_wins(self) -> None:
        result = union_vectors([[np.nan, 2.0, np.nan], [1.0, np.nan, np.nan]])
        np.testing.assert_array_equal(result, [1.0, 2.0, np.nan])

    def test_order_matters(self) -> None:
        np.testing.assert_array_equal(union_vectors([[1.0, np.nan], [5.0, 6.0]]), [1.0, 6.0])
        np.testing.assert_array_equal(union_vectors([[5.0, 6.0], [1.0, np.nan]]), [5.0, 6.0])

    def test_single_vector(self) -> None:
        np.testing.assert_array_equal(union_vectors([[1.0, np.nan]]), [1.0, np.nan])

    def test_length_mismatch_raises(self) -> None:
        with pytest.raises(ELengthMismatch):
            union_vectors([[1.0, 2.0], [1.0]])

    def test_no_vectors_raises(self) -> None:
        with pytest.raises(ValueError):
            union_vectors([])


class TestUnionIndexed:
    def test_spans_all_indexes(self) -> None:
        index, vector = union_indexed(
            [_daily("2024-01-01", 3), _daily("2024-01-03", 3)],
            [[1.0, 2.0, 3.0], [30.0, 40.0, 50.0]],
        )
        assert index == _daily("2024-01-01", 5)
        np.testing.assert_array_equal(vector, [1.0, 2.0, 3.0, 40.0, 50.0])

    def test_gap_between_indexes_is_missing(self) -> None:
        index, vector = union_indexed(
            [_daily("2024-01-04", 1), _daily("2024-01-01", 1)],
            [[4.0], [1.0]],
        )
        assert index == _daily("2024-01-01", 4)
        np.testing.assert_array_equal(vector, [1.0, np.nan, np.nan, 4.0])

    def test_frequency_mismatch_raises(self, daily_index, hourly_index) -> None:
        with pytest.raises(EIncompatibleFrequency):
            union_indexed([daily_index, hourly_index], [np.zeros(10), np.zeros(5)])

    def test_count_mismatch_raises(self, daily_index) -> None:
        with pytest.raises(ELengthMismatch):
            union_indexed([daily_index], [np.zeros(10), np.zeros(10)])

    def test_covering_index(self) -> None:
        combined = covering_index([_daily("2024-01-05", 2), _daily("2024-01-02", 2)])
        assert combined == _daily("2024-01-02", 5)

    def test_empty_index_does_not_widen(self) -> None:
        """An empty input contributes no timestamps to the result window."""
        index, vector = union_indexed(
            [_daily("2024-01-01", 0), _daily("2024-01-05", 2)],
            [[], [1.0, 2.0]],
        )
        assert index == _daily("2024-01-05", 2)
        np.testing.assert_array_equal(vector, [1.0, 2.0])

    def test_empty_index_after_data(self) -> None:
        index, vector = union_indexed(
            [_daily("2024-01-01", 2), _daily("2024-01-20", 0)],
            [[1.0, 2.0], []],
        )
        assert index == _daily("2024-01-01", 2)
        np.testing.assert_array_equal(vector, [1.0, 2.0])

    def test_all_empty(self) -> None:
        index, vector = union_indexed(
            [_daily("2024-01-03", 0), _daily("2024-01-01", 0)], [[], []]
        )
        assert index.size == 0
        assert vector.shape == (0,)


class TestMinMaxDatetimes:
    def test_ignores_missing(self, daily_index) -> None:
        vector = [3.0, np.nan, 1.0, 7.0, 5.0, 5.0, 5.0, 5.0, 5.0, 5.0]
        low, high = min_max_datetimes(daily_index, vector)
        assert low == daily_index.timestamp_at(2)
        assert high == daily_index.timestamp_at(3)

    def test_all_missing(self, daily_index) -> None:
        assert min_max_datetimes(daily_index, np.full(10, np.nan)) == (None, None)

    def test_length_mismatch(self, daily_index) -> None:
        with pytest.raises(ELengthMismatch):
            min_max_datetimes(daily_index, [1.0])

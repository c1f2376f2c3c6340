"""Shared fixtures for tsmatrix tests."""

from __future__ import annotations

import pandas as pd
import pytest

from tsmatrix import IrregularDateTimeIndex, UniformDateTimeIndex, from_vectors


@pytest.fixture
def hourly_index() -> UniformDateTimeIndex:
    """Five hourly timestamps, 4 pm to 8 pm UTC."""
    return UniformDateTimeIndex(pd.Timestamp("2024-01-01 16:00", tz="UTC"), 5, "h")


@pytest.fixture
def daily_index() -> UniformDateTimeIndex:
    """Ten daily timestamps from 2024-01-01 UTC."""
    return UniformDateTimeIndex(pd.Timestamp("2024-01-01", tz="UTC"), 10, "D")


@pytest.fixture
def irregular_index() -> IrregularDateTimeIndex:
    return IrregularDateTimeIndex(
        pd.to_datetime(["2024-01-01", "2024-01-03", "2024-01-07"]).tz_localize("UTC")
    )


@pytest.fixture
def two_column_matrix(hourly_index):
    """Columns a = 1..5 and b = 6..10 on the hourly index."""
    return from_vectors([[1, 2, 3, 4, 5], [6, 7, 8, 9, 10]], hourly_index, ["a", "b"])

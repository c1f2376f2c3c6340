"""Time module - frequencies and date-time indexes."""

from tsmatrix.time.frequency import Frequency
from tsmatrix.time.index import (
    DateTimeIndex,
    IrregularDateTimeIndex,
    UniformDateTimeIndex,
    from_pandas,
    irregular,
    require_common_frequency,
    uniform,
)
from tsmatrix.time.timestamps import to_timestamp

__all__ = [
    "Frequency",
    "DateTimeIndex",
    "UniformDateTimeIndex",
    "IrregularDateTimeIndex",
    "uniform",
    "irregular",
    "from_pandas",
    "require_common_frequency",
    "to_timestamp",
]

"""Construction of TimeSeriesMatrix from samples, vectors and DataFrames."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping, Sequence
from itertools import groupby
from operator import itemgetter
from typing import Any

import numpy as np
import pandas as pd

from tsmatrix.core.config import DEFAULT_CONFIG, MatrixConfig
from tsmatrix.core.errors import ELengthMismatch, ERequiresUniformIndex
from tsmatrix.core.types import Sample
from tsmatrix.matrix.time_series import TimeSeriesMatrix
from tsmatrix.series.alignment import covering_index, slice_to_index, union_vectors
from tsmatrix.series.resample import samples_to_time_series
from tsmatrix.time.frequency import FrequencyLike
from tsmatrix.time.index import (
    DateTimeIndex,
    IrregularDateTimeIndex,
    UniformDateTimeIndex,
    from_pandas as index_from_pandas,
)
from tsmatrix.time.timestamps import to_timestamp

logger = logging.getLogger(__name__)


def _row(values: Any, n_keys: int, position: int) -> np.ndarray:
    row = np.asarray(values, dtype=np.float64)
    if row.shape != (n_keys,):
        raise ELengthMismatch(
            f"Sample {position} has shape {row.shape}, expected ({n_keys},)",
            context={"position": position, "shape": row.shape, "n_keys": n_keys},
        )
    return row


def from_irregular_samples(
    samples: Iterable[tuple[Any, Sequence[float]]],
    keys: Sequence[Hashable],
    tz: str | None = None,
    config: MatrixConfig | None = None,
) -> TimeSeriesMatrix[Any]:
    """Build a matrix on an irregular index from ``(timestamp, row)`` samples.

    Samples may arrive in any order. Rows sharing a timestamp collapse into
    one row holding, per column, the first non-missing value in input order.

    Args:
        samples: ``(timestamp, values)`` pairs, ``len(values) == len(keys)``
        keys: Column keys
        tz: Timezone for naive timestamps (defaults to ``config.tz``)
        config: Matrix defaults

    Raises:
        ELengthMismatch: If a row has the wrong number of values
    """
    cfg = config or DEFAULT_CONFIG
    zone = tz or cfg.tz
    key_tuple = tuple(keys)

    rows = [
        (to_timestamp(ts, zone), _row(values, len(key_tuple), position))
        for position, (ts, values) in enumerate(samples)
    ]
    rows.sort(key=itemgetter(0))

    stamps: list[pd.Timestamp] = []
    data_rows: list[np.ndarray] = []
    collapsed = 0
    for ts, group in groupby(rows, key=itemgetter(0)):
        group_rows = [row for _, row in group]
        collapsed += len(group_rows) - 1
        stamps.append(ts)
        data_rows.append(group_rows[0] if len(group_rows) == 1 else union_vectors(group_rows))

    if collapsed:
        logger.debug("Collapsed %d samples with repeated timestamps", collapsed)

    data = np.vstack(data_rows) if data_rows else np.empty((0, len(key_tuple)))
    return TimeSeriesMatrix(IrregularDateTimeIndex(stamps), data, key_tuple, cfg)


def from_uniform_samples(
    samples: Sequence[Sequence[float]],
    index: UniformDateTimeIndex,
    keys: Sequence[Hashable],
    config: MatrixConfig | None = None,
) -> TimeSeriesMatrix[Any]:
    """Build a matrix from one row per position of a uniform index.

    Raises:
        ERequiresUniformIndex: If ``index`` is not uniform
        ELengthMismatch: If the sample count differs from ``index.size``
    """
    if not isinstance(index, UniformDateTimeIndex):
        raise ERequiresUniformIndex(
            "from_uniform_samples requires a UniformDateTimeIndex",
            context={"index_type": type(index).__name__},
        )
    rows = list(samples)
    if len(rows) != index.size:
        raise ELengthMismatch(
            f"Got {len(rows)} samples for an index of size {index.size}",
            context={"samples": len(rows), "index_size": index.size},
        )
    key_tuple = tuple(keys)
    data_rows = [_row(values, len(key_tuple), position) for position, values in enumerate(rows)]
    data = np.vstack(data_rows) if data_rows else np.empty((0, len(key_tuple)))
    return TimeSeriesMatrix(index, data, key_tuple, config or DEFAULT_CONFIG)


def from_vectors(
    vectors: Iterable[Sequence[float]],
    index: DateTimeIndex,
    keys: Sequence[Hashable],
    config: MatrixConfig | None = None,
) -> TimeSeriesMatrix[Any]:
    """Build a matrix from one column vector per key.

    Raises:
        ELengthMismatch: If a vector length differs from ``index.size`` or
            the vector count differs from the key count
    """
    key_tuple = tuple(keys)
    columns = [np.asarray(v, dtype=np.float64) for v in vectors]
    if len(columns) != len(key_tuple):
        raise ELengthMismatch(
            f"Got {len(columns)} vectors for {len(key_tuple)} keys",
            context={"vectors": len(columns), "keys": len(key_tuple)},
        )
    for key, column in zip(key_tuple, columns):
        if column.shape != (index.size,):
            raise ELengthMismatch(
                f"Vector for {key!r} has shape {column.shape}, index has {index.size}",
                context={"key": repr(key), "shape": column.shape, "index_size": index.size},
            )
    data = np.column_stack(columns) if columns else np.empty((index.size, 0))
    return TimeSeriesMatrix(index, data, key_tuple, config or DEFAULT_CONFIG)


def from_sample_streams(
    streams: Mapping[Hashable, Iterable[Sample]],
    freq: FrequencyLike | None = None,
    config: MatrixConfig | None = None,
) -> TimeSeriesMatrix[Any]:
    """Resample one sample stream per key and align them on a shared index.

    Each stream is resampled onto ``freq`` from its own first sample. The
    resulting vectors are padded with NaN to the span from the earliest
    first sample to the latest last sample.

    Raises:
        ELengthMismatch: If a stream is empty
        EMisalignedSample: If samples are off-grid or streams are out of phase
    """
    cfg = config or DEFAULT_CONFIG
    frequency = cfg.frequency if freq is None else freq
    if not streams:
        raise ValueError("At least one sample stream is required")

    resampled = {key: samples_to_time_series(samples, frequency) for key, samples in streams.items()}
    combined = covering_index([ix for ix, _ in resampled.values()])

    columns = [slice_to_index(ix, combined, vector) for ix, vector in resampled.values()]
    logger.debug("Aligned %d streams onto %r", len(columns), combined)
    return from_vectors(columns, combined, list(resampled), cfg)


def from_pandas(frame: pd.DataFrame, config: MatrixConfig | None = None) -> TimeSeriesMatrix[Any]:
    """Build a matrix from a DataFrame indexed by datetimes.

    Columns become keys. The index becomes uniform when its frequency is set
    or inferable (falling back to ``config.freq`` for fewer than three rows),
    irregular otherwise.

    Raises:
        ValueError: If the frame is not indexed by datetimes
    """
    cfg = config or DEFAULT_CONFIG
    if not isinstance(frame.index, pd.DatetimeIndex):
        raise ValueError("DataFrame must be indexed by a DatetimeIndex")

    dt_index = frame.index
    if dt_index.tz is None:
        dt_index = dt_index.tz_localize(cfg.tz)

    index = index_from_pandas(dt_index)
    if isinstance(index, IrregularDateTimeIndex) and len(dt_index) < 3:
        index = index_from_pandas(dt_index, freq=cfg.freq)

    data = frame.to_numpy(dtype=np.float64)
    return TimeSeriesMatrix(index, data, tuple(frame.columns), cfg)


__all__ = [
    "from_irregular_samples",
    "from_uniform_samples",
    "from_vectors",
    "from_sample_streams",
    "from_pandas",
]

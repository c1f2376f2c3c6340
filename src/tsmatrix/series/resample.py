"""Resampling of timestamped samples onto a uniform grid.

Turns a lazily produced, ascending stream of ``(timestamp, value)`` samples
into a stream with one entry per grid point, inserting NaN where the input
has no sample. Samples must already sit on the grid anchored at the first
sample; anything else raises EMisalignedSample.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

import numpy as np
import pandas as pd

from tsmatrix.core.errors import ELengthMismatch, EMisalignedSample
from tsmatrix.core.types import Sample
from tsmatrix.time.frequency import Frequency, FrequencyLike
from tsmatrix.time.index import UniformDateTimeIndex
from tsmatrix.time.timestamps import to_timestamp

logger = logging.getLogger(__name__)


class UniformFrequencyIterator(Iterator[Sample]):
    """Pull-based state machine yielding one sample per grid point.

    State is the anchor of the grid, the number of grid points emitted so
    far and the next input sample not yet emitted. The iterator ends right
    after the last input sample has been emitted.
    """

    def __init__(self, samples: Iterable[Sample], frequency: FrequencyLike) -> None:
        self._samples = iter(samples)
        self._frequency = Frequency.parse(frequency)
        self._anchor: pd.Timestamp | None = None
        self._step = 0
        self._pending: Sample | None = None
        self._exhausted = False

    def _pull(self) -> bool:
        """Load the next input sample into ``_pending``; False at end of input."""
        if self._exhausted:
            return False
        try:
            ts, value = next(self._samples)
        except StopIteration:
            self._exhausted = True
            return False
        self._pending = (to_timestamp(ts, tz=None), float(value))
        return True

    def __next__(self) -> Sample:
        if self._pending is None and not self._pull():
            raise StopIteration
        assert self._pending is not None
        pending_ts, pending_value = self._pending

        if self._anchor is None:
            if not self._frequency.is_on_offset(pending_ts):
                raise EMisalignedSample(
                    f"First sample {pending_ts} is not on the {self._frequency.alias} grid",
                    context={"timestamp": str(pending_ts), "freq": self._frequency.alias},
                )
            self._anchor = pending_ts

        grid_ts = self._frequency.advance(self._anchor, self._step)
        if pending_ts < grid_ts:
            raise EMisalignedSample(
                f"Sample at {pending_ts} is off-grid or out of order",
                context={
                    "timestamp": str(pending_ts),
                    "expected_at_or_after": str(grid_ts),
                    "freq": self._frequency.alias,
                },
            )

        self._step += 1
        if pending_ts == grid_ts:
            self._pending = None
            return grid_ts, pending_value
        return grid_ts, np.nan


def iterate_with_uniform_frequency(
    samples: Iterable[Sample],
    frequency: FrequencyLike,
) -> Iterator[Sample]:
    """Iterate samples at uniform intervals, with NaN where there is no data.

    Args:
        samples: Ascending, unique ``(timestamp, value)`` pairs on the grid
        frequency: Grid step

    Returns:
        Lazy iterator over ``(timestamp, value)`` from the first sample's
        timestamp through the last sample's timestamp

    Example:
        >>> ts = pd.Timestamp("2024-01-01", tz="UTC")
        >>> samples = [(ts, 1.0), (ts + pd.Timedelta(days=2), 3.0)]
        >>> [value for _, value in iterate_with_uniform_frequency(samples, "D")]
        [1.0, nan, 3.0]
    """
    return UniformFrequencyIterator(samples, frequency)


def samples_to_time_series(
    samples: Iterable[Sample],
    frequency: FrequencyLike,
) -> tuple[UniformDateTimeIndex, np.ndarray]:
    """Resample samples into a dense vector and the index it discovered.

    Raises:
        ELengthMismatch: If there are no samples
        EMisalignedSample: If a sample is off the grid
    """
    freq = Frequency.parse(frequency)
    stamps: list[pd.Timestamp] = []
    values: list[float] = []
    for ts, value in iterate_with_uniform_frequency(samples, freq):
        stamps.append(ts)
        values.append(value)

    if not stamps:
        raise ELengthMismatch(
            "Cannot build a time series from zero samples",
            fix_hint="Provide at least one (timestamp, value) sample",
        )

    index = UniformDateTimeIndex(stamps[0], len(values), freq)
    vector = np.asarray(values, dtype=np.float64)
    logger.debug(
        "Resampled %d grid points at %s starting %s (%d missing)",
        index.size,
        freq.alias,
        index.start,
        int(np.isnan(vector).sum()),
    )
    return index, vector


def samples_to_time_series_on_index(
    samples: Iterable[Sample],
    index: UniformDateTimeIndex,
) -> np.ndarray:
    """Resample samples to fill exactly ``index.size`` positions.

    The first sample must fall on ``index.start``; samples beyond the index
    are never consumed.

    Raises:
        EMisalignedSample: If the stream does not start at ``index.start``
        ELengthMismatch: If the resampled stream is shorter than the index
    """
    vector = np.empty(index.size, dtype=np.float64)
    if index.size == 0:
        return vector

    it = iterate_with_uniform_frequency(samples, index.frequency)
    for i in range(index.size):
        try:
            ts, value = next(it)
        except StopIteration:
            raise ELengthMismatch(
                f"Samples cover {i} of {index.size} index positions",
                context={"covered": i, "size": index.size},
            ) from None
        if i == 0 and ts != index.start:
            raise EMisalignedSample(
                f"Samples start at {ts}, index starts at {index.start}",
                context={"first_sample": str(ts), "index_start": str(index.start)},
            )
        vector[i] = value
    return vector


__all__ = [
    "UniformFrequencyIterator",
    "iterate_with_uniform_frequency",
    "samples_to_time_series",
    "samples_to_time_series_on_index",
]

"""Date-time indexes mapping integer offsets to timestamps and back.

Two variants are provided:

- ``UniformDateTimeIndex``: a start timestamp, a size and a frequency.
  Offsets outside ``[0, size)`` can still be computed for alignment math.
- ``IrregularDateTimeIndex``: an explicit, strictly increasing list of
  timestamps searched by bisection.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any, Literal

import pandas as pd

from tsmatrix.core.errors import (
    EIncompatibleFrequency,
    EIndexOutOfRange,
    EMisalignedSample,
    ENotFound,
)
from tsmatrix.time.frequency import Frequency, FrequencyLike
from tsmatrix.time.timestamps import DEFAULT_TZ, to_timestamp

Rounding = Literal["floor", "ceil"]


class DateTimeIndex(ABC):
    """Ordered, immutable association between offsets ``0..size-1`` and timestamps."""

    @property
    @abstractmethod
    def size(self) -> int: ...

    @property
    def frequency(self) -> Frequency | None:
        """Uniform step of the index, or None when it has none."""
        return None

    @abstractmethod
    def timestamp_at(self, offset: int) -> pd.Timestamp:
        """Timestamp at ``offset``; raises EIndexOutOfRange outside ``[0, size)``."""

    @abstractmethod
    def offset_of(
        self,
        ts: Any,
        exact: bool = True,
        rounding: Rounding = "floor",
    ) -> int:
        """Offset of a timestamp.

        Args:
            ts: Timestamp to locate (naive values are read as UTC)
            exact: If True, ``ts`` must be present in the index
            rounding: For inexact lookups, return the last position at or
                before ``ts`` ("floor") or the first at or after it ("ceil")

        Returns:
            The offset. Inexact lookups may return values below 0 or at or
            beyond ``size``.

        Raises:
            ENotFound: If ``exact`` and the timestamp is not in the index
        """

    @abstractmethod
    def islice(self, start: int, end: int) -> DateTimeIndex:
        """Sub-index covering offsets ``[start, end)``."""

    @abstractmethod
    def to_pandas(self) -> pd.DatetimeIndex: ...

    @property
    def first(self) -> pd.Timestamp:
        return self.timestamp_at(0)

    @property
    def last(self) -> pd.Timestamp:
        return self.timestamp_at(self.size - 1)

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[pd.Timestamp]:
        for offset in range(self.size):
            yield self.timestamp_at(offset)

    def _check_offset(self, offset: int) -> None:
        if not 0 <= offset < self.size:
            raise EIndexOutOfRange(
                f"Offset {offset} outside index of size {self.size}",
                context={"offset": offset, "size": self.size},
            )

    def _check_range(self, start: int, end: int) -> None:
        if not 0 <= start <= end <= self.size:
            raise EIndexOutOfRange(
                f"Range [{start}, {end}) outside index of size {self.size}",
                context={"start": start, "end": end, "size": self.size},
                fix_hint="Ranges must satisfy 0 <= start <= end <= size",
            )


class UniformDateTimeIndex(DateTimeIndex):
    """Index of ``size`` timestamps spaced by ``frequency`` from ``start``."""

    __slots__ = ("_start", "_size", "_frequency")

    def __init__(self, start: Any, size: int, frequency: FrequencyLike) -> None:
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        freq = Frequency.parse(frequency)
        start_ts = to_timestamp(start, tz=None)
        if not freq.is_on_offset(start_ts):
            raise EMisalignedSample(
                f"Start {start_ts} is not on the {freq.alias} grid",
                context={"start": str(start_ts), "freq": freq.alias},
            )
        self._start = start_ts
        self._size = int(size)
        self._frequency = freq

    @property
    def start(self) -> pd.Timestamp:
        return self._start

    @property
    def size(self) -> int:
        return self._size

    @property
    def frequency(self) -> Frequency:
        return self._frequency

    @property
    def end(self) -> pd.Timestamp:
        """Grid point one step past the last timestamp."""
        return self._frequency.advance(self._start, self._size)

    def grid_timestamp(self, offset: int) -> pd.Timestamp:
        """Timestamp of any grid position, including ones outside the index."""
        return self._frequency.advance(self._start, offset)

    def timestamp_at(self, offset: int) -> pd.Timestamp:
        self._check_offset(offset)
        return self.grid_timestamp(offset)

    def offset_of(
        self,
        ts: Any,
        exact: bool = True,
        rounding: Rounding = "floor",
    ) -> int:
        ts = to_timestamp(ts, tz=None)
        n = self._frequency.steps_between(self._start, ts)
        on_grid = self.grid_timestamp(n) == ts

        if exact:
            if not on_grid or not 0 <= n < self._size:
                raise ENotFound(
                    f"{ts} is not a timestamp of this index",
                    context={"timestamp": str(ts), "on_grid": on_grid, "position": n},
                )
            return n

        if not on_grid and rounding == "ceil":
            n += 1
        return n

    def islice(self, start: int, end: int) -> UniformDateTimeIndex:
        self._check_range(start, end)
        return UniformDateTimeIndex(self.grid_timestamp(start), end - start, self._frequency)

    def to_pandas(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex(list(self), tz=self._start.tz, name="ds")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UniformDateTimeIndex):
            return NotImplemented
        return (
            self._start == other._start
            and self._size == other._size
            and self._frequency == other._frequency
        )

    def __hash__(self) -> int:
        return hash((self._start, self._size, self._frequency))

    def __repr__(self) -> str:
        return (
            f"UniformDateTimeIndex(start={self._start.isoformat()}, "
            f"size={self._size}, freq={self._frequency.alias})"
        )


class IrregularDateTimeIndex(DateTimeIndex):
    """Index over an explicit, strictly increasing timestamp sequence."""

    __slots__ = ("_index",)

    def __init__(self, timestamps: Iterable[Any]) -> None:
        stamps = [to_timestamp(ts, tz=None) for ts in timestamps]
        tz = stamps[0].tz if stamps else DEFAULT_TZ
        index = pd.DatetimeIndex([ts.tz_convert(tz) for ts in stamps], tz=tz, name="ds")
        if not (index.is_monotonic_increasing and index.is_unique):
            raise ValueError("Irregular index timestamps must be strictly increasing")
        self._index = index

    @property
    def size(self) -> int:
        return len(self._index)

    @property
    def timestamps(self) -> tuple[pd.Timestamp, ...]:
        return tuple(self._index)

    def timestamp_at(self, offset: int) -> pd.Timestamp:
        self._check_offset(offset)
        return self._index[offset]

    def offset_of(
        self,
        ts: Any,
        exact: bool = True,
        rounding: Rounding = "floor",
    ) -> int:
        ts = to_timestamp(ts, tz=None)
        pos = int(self._index.searchsorted(ts, side="left"))
        found = pos < self.size and self._index[pos] == ts

        if found:
            return pos
        if exact:
            raise ENotFound(
                f"{ts} is not a timestamp of this index",
                context={"timestamp": str(ts), "insertion_point": pos},
            )
        return pos - 1 if rounding == "floor" else pos

    def islice(self, start: int, end: int) -> IrregularDateTimeIndex:
        self._check_range(start, end)
        return IrregularDateTimeIndex(self._index[start:end])

    def to_pandas(self) -> pd.DatetimeIndex:
        return self._index.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IrregularDateTimeIndex):
            return NotImplemented
        return self._index.equals(other._index)

    def __hash__(self) -> int:
        return hash(tuple(self._index.asi8))

    def __repr__(self) -> str:
        if self.size == 0:
            return "IrregularDateTimeIndex(size=0)"
        return (
            f"IrregularDateTimeIndex(first={self.first.isoformat()}, "
            f"last={self.last.isoformat()}, size={self.size})"
        )


def uniform(start: Any, periods: int, freq: FrequencyLike) -> UniformDateTimeIndex:
    """Create a uniform index of ``periods`` timestamps from ``start``."""
    return UniformDateTimeIndex(start, periods, freq)


def irregular(timestamps: Iterable[Any]) -> IrregularDateTimeIndex:
    """Create an irregular index from strictly increasing timestamps."""
    return IrregularDateTimeIndex(timestamps)


def from_pandas(index: pd.DatetimeIndex, freq: FrequencyLike | None = None) -> DateTimeIndex:
    """Convert a pandas DatetimeIndex.

    A uniform index is returned when a frequency is given, attached to the
    index, or inferable, and the timestamps match that grid exactly.
    Everything else becomes an irregular index.
    """
    if len(index) == 0:
        if freq is None:
            return IrregularDateTimeIndex([])
        frequency = Frequency.parse(freq)
        anchor = frequency.offset.rollforward(pd.Timestamp(0, tz=DEFAULT_TZ))
        return UniformDateTimeIndex(anchor, 0, frequency)

    if freq is None:
        freq = index.freq
    if freq is None and len(index) >= 3:
        freq = pd.infer_freq(index)

    if freq is not None:
        try:
            candidate = UniformDateTimeIndex(index[0], len(index), freq)
        except EMisalignedSample:
            candidate = None
        if candidate is not None and all(
            a == to_timestamp(b, tz=None) for a, b in zip(candidate, index)
        ):
            return candidate

    return IrregularDateTimeIndex(index)


def require_common_frequency(*indexes: DateTimeIndex) -> Frequency:
    """Return the frequency shared by every index.

    Raises:
        EIncompatibleFrequency: If any index is irregular or frequencies differ
    """
    if not indexes:
        raise ValueError("At least one index is required")

    freqs = [ix.frequency for ix in indexes]
    if any(freq is None for freq in freqs):
        raise EIncompatibleFrequency(
            "Irregular indexes have no frequency to compare",
            context={"index_types": [type(ix).__name__ for ix in indexes]},
        )
    if len(set(freqs)) > 1:
        raise EIncompatibleFrequency(
            "Indexes must share one frequency",
            context={"frequencies": [freq.alias for freq in freqs]},  # type: ignore[union-attr]
        )
    return freqs[0]  # type: ignore[return-value]


__all__ = [
    "DateTimeIndex",
    "UniformDateTimeIndex",
    "IrregularDateTimeIndex",
    "uniform",
    "irregular",
    "from_pandas",
    "require_common_frequency",
]

"""Calendar frequencies backed by pandas offsets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Union

import pandas as pd
from pandas.tseries.frequencies import to_offset
from pandas.tseries.offsets import BaseOffset, Tick

FrequencyLike = Union[str, timedelta, pd.Timedelta, BaseOffset, "Frequency"]

# Steps used to estimate the average length of a calendar-aware step
_NOMINAL_SPAN = 16


@dataclass(frozen=True)
class Frequency:
    """A strictly positive calendar step.

    Grid point ``n`` relative to an anchor is always ``anchor + n * offset``
    (never ``n`` repeated additions), so calendar-aware offsets such as
    month-ends or business days map offsets to timestamps consistently in
    both directions.

    Example:
        >>> freq = Frequency.parse("D")
        >>> freq.advance(pd.Timestamp("2024-01-01", tz="UTC"), 3)
        Timestamp('2024-01-04 00:00:00+0000', tz='UTC')
    """

    offset: BaseOffset

    def __post_init__(self) -> None:
        if self.offset.n < 1:
            raise ValueError(f"Frequency step must be positive, got {self.offset.freqstr}")

    @classmethod
    def parse(cls, freq: FrequencyLike) -> Frequency:
        """Build a Frequency from a pandas alias, timedelta or offset."""
        if isinstance(freq, Frequency):
            return freq
        try:
            offset = to_offset(freq)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Unrecognized frequency: {freq!r}") from exc
        return cls(offset)

    @property
    def alias(self) -> str:
        return self.offset.freqstr

    @property
    def is_fixed(self) -> bool:
        """True when every step has the same absolute duration."""
        return isinstance(self.offset, Tick)

    def advance(self, ts: pd.Timestamp, n: int = 1) -> pd.Timestamp:
        """Return the timestamp ``n`` steps from ``ts`` (``n`` may be negative)."""
        if n == 0:
            return ts
        return ts + self.offset * int(n)

    def is_on_offset(self, ts: pd.Timestamp) -> bool:
        """True when ``ts`` can anchor a grid of this frequency."""
        return bool(self.offset.is_on_offset(ts))

    def steps_between(self, start: pd.Timestamp, ts: pd.Timestamp) -> int:
        """Number of whole steps from ``start`` to the last grid point at or before ``ts``.

        Negative when ``ts`` precedes ``start``.
        """
        if self.is_fixed:
            return int((ts - start) // pd.Timedelta(self.offset))

        nominal = (self.advance(start, _NOMINAL_SPAN) - start) / _NOMINAL_SPAN
        n = int((ts - start) // nominal)
        n += int((ts - self.advance(start, n)) // nominal)
        while self.advance(start, n) > ts:
            n -= 1
        while self.advance(start, n + 1) <= ts:
            n += 1
        return n

    def is_on_grid(self, anchor: pd.Timestamp, ts: pd.Timestamp) -> bool:
        """True when ``ts`` is a grid point of the grid anchored at ``anchor``."""
        return self.advance(anchor, self.steps_between(anchor, ts)) == ts

    def __str__(self) -> str:
        return self.alias

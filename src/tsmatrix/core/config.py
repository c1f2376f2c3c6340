"""Configuration shared by matrix construction and resampling.

A single frozen dataclass carries the defaults that would otherwise be
repeated on every call: the timezone naive timestamps are read in, the
frequency assumed when none is given, and the default lag key scheme.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tsmatrix.core.types import KeyFn
from tsmatrix.time.frequency import Frequency


@dataclass(frozen=True)
class MatrixConfig:
    """Defaults for building and transforming time-series matrices.

    Args:
        tz: Timezone naive timestamps are localized to
        freq: Frequency alias (pandas offset alias: 'D', 'h', 'B', 'MS', etc.)
        lag_key: Default key scheme for lagged columns - 'pair' yields
            ``(key, lag)`` tuples, 'string' yields ``"lag{n}(key)"``
    """

    tz: str = "UTC"
    freq: str = "D"
    lag_key: Literal["pair", "string"] = "pair"

    def __post_init__(self) -> None:
        # Validation
        Frequency.parse(self.freq)
        try:
            ZoneInfo(self.tz)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {self.tz}") from exc
        if self.lag_key not in ("pair", "string"):
            raise ValueError(f"lag_key must be 'pair' or 'string', got {self.lag_key!r}")

    @classmethod
    def daily(cls, tz: str = "UTC") -> MatrixConfig:
        """Calendar-day grid."""
        return cls(tz=tz, freq="D")

    @classmethod
    def hourly(cls, tz: str = "UTC") -> MatrixConfig:
        """Hourly grid."""
        return cls(tz=tz, freq="h")

    @classmethod
    def business_daily(cls, tz: str = "UTC") -> MatrixConfig:
        """Business-day grid (weekends skipped)."""
        return cls(tz=tz, freq="B")

    @property
    def frequency(self) -> Frequency:
        return Frequency.parse(self.freq)

    @property
    def key_fn(self) -> KeyFn:
        from tsmatrix.matrix.keys import lagged_pair_key, lagged_string_key

        if self.lag_key == "string":
            return lagged_string_key
        return lagged_pair_key


DEFAULT_CONFIG = MatrixConfig()

"""Timestamp coercion helpers."""

from __future__ import annotations

from typing import Any

import pandas as pd

DEFAULT_TZ = "UTC"


def to_timestamp(value: Any, tz: str | None = DEFAULT_TZ) -> pd.Timestamp:
    """Coerce a datetime-like value to a timezone-aware Timestamp.

    Naive values are localized to ``tz``. Aware values are converted to
    ``tz`` when one is given and left in their own zone otherwise.

    Raises:
        ValueError: If the value cannot be parsed or is NaT
    """
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Cannot interpret {value!r} as a timestamp") from exc

    if pd.isna(ts):
        raise ValueError("NaT is not a valid timestamp")

    if ts.tz is None:
        return ts.tz_localize(tz or DEFAULT_TZ)
    if tz is not None:
        return ts.tz_convert(tz)
    return ts

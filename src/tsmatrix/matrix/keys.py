"""Key functions for lagged columns."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any


def lagged_pair_key(key: Hashable, lag: int) -> tuple[Any, int]:
    """Key a lagged column by the pair ``(original key, lag order)``."""
    return (key, lag)


def lagged_string_key(key: Hashable, lag: int) -> str:
    """Key a lagged column as ``"lag{n}(key)"``; order 0 keeps the original key."""
    if lag > 0:
        return f"lag{lag}({key})"
    return str(key)


__all__ = ["lagged_pair_key", "lagged_string_key"]

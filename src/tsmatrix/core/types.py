"""Shared type definitions for tsmatrix."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Any, TypeVar

import numpy as np
import pandas as pd

# Column key types
K = TypeVar("K", bound=Hashable)
U = TypeVar("U", bound=Hashable)

# One dense column of float64 values
Vector = np.ndarray

# (timestamp, value) pair consumed by the resampler
Sample = tuple[pd.Timestamp, float]

# Builds the key of a lagged column from (original key, lag order)
KeyFn = Callable[[Any, int], Any]

__all__ = [
    "K",
    "U",
    "Vector",
    "Sample",
    "KeyFn",
]

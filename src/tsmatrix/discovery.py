"""API discovery and introspection for tsmatrix.

Provides ``describe()`` which returns a machine-readable schema of the
library's public surface: version, operations and error codes with fix
hints.

Usage:
    >>> from tsmatrix.discovery import describe
    >>> info = describe()
    >>> sorted(info)
    ['apis', 'error_codes', 'version']
"""

from __future__ import annotations

from typing import Any


def describe() -> dict[str, Any]:
    """Return a machine-readable API schema for tsmatrix."""
    import tsmatrix

    return {
        "version": tsmatrix.__version__,
        "apis": _get_apis(),
        "error_codes": _get_error_codes(),
    }


def _get_apis() -> dict[str, dict[str, str]]:
    """Return the public operation surface."""
    return {
        "index": {
            "function": "UniformDateTimeIndex / IrregularDateTimeIndex",
            "description": "Map offsets to timestamps and back",
        },
        "resample": {
            "function": "samples_to_time_series",
            "description": "Resample ascending samples onto a uniform grid with NaN gaps",
        },
        "align": {
            "function": "slice_to_index",
            "description": "Conform a vector to another window of the same frequency",
        },
        "union": {
            "function": "union_vectors / union_indexed",
            "description": "Coalesce vectors, first non-missing value wins",
        },
        "construct": {
            "function": "from_vectors / from_uniform_samples / from_irregular_samples",
            "description": "Build a TimeSeriesMatrix",
        },
        "lags": {
            "function": "TimeSeriesMatrix.lags / lags_per_column",
            "description": "Expand columns into lagged copies on a shrunken window",
        },
        "differences": {
            "function": "TimeSeriesMatrix.differences / quotients / price2ret",
            "description": "Lagged differences, ratios and periodic returns",
        },
        "transform": {
            "function": "TimeSeriesMatrix.map_series / map_series_with_key / map_values",
            "description": "Per-column transforms and reductions",
        },
    }


def _get_error_codes() -> dict[str, dict[str, str]]:
    """Return error codes with class name, description and fix hint."""
    from tsmatrix.core.errors import ERROR_REGISTRY

    return {
        code: {
            "class": cls.__name__,
            "description": (cls.__doc__ or "").strip(),
            "fix_hint": cls.fix_hint,
        }
        for code, cls in ERROR_REGISTRY.items()
    }

"""Contracts module - validated inputs for matrix operations."""

from tsmatrix.contracts.lag_spec import BaseSpec, ColumnLagSpec, normalize_lag_specs

__all__ = [
    "BaseSpec",
    "ColumnLagSpec",
    "normalize_lag_specs",
]

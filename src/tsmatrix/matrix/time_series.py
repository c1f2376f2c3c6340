"""TimeSeriesMatrix: keyed columns of observations on a shared time index.

The matrix pairs one ``DateTimeIndex`` with a column-major float64 buffer
(one row per timestamp, one column per key). It is immutable: the buffer is
copied and frozen on construction, and every transformation returns a new
matrix that shares no memory with its source.

Example input (keys ``a`` and ``b``)::

    time   a   b
    4 pm   1   6
    5 pm   2   7
    6 pm   3   8
    7 pm   4   9
    8 pm   5   10

``lags(2, include_originals=True, key_fn=lagged_string_key)`` gives::

    time   a   lag1(a)   lag2(a)   b   lag1(b)   lag2(b)
    6 pm   3   2         1         8   7         6
    7 pm   4   3         2         9   8         7
    8 pm   5   4         3         10  9         8
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Hashable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic

import numpy as np
import pandas as pd

from tsmatrix.contracts.lag_spec import ColumnLagSpec, normalize_lag_specs
from tsmatrix.core.config import DEFAULT_CONFIG, MatrixConfig
from tsmatrix.core.errors import (
    EDuplicateKey,
    EIndexOutOfRange,
    ELengthMismatch,
    ENotFound,
    ERequiresUniformIndex,
)
from tsmatrix.core.types import K, KeyFn, U
from tsmatrix.time.index import DateTimeIndex, UniformDateTimeIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TimeSeriesMatrix(Generic[K]):
    """Dense, immutable matrix of time series sharing one index.

    Attributes:
        index: Time index; ``index.size`` equals the number of rows
        data: Read-only float64 array of shape ``(index.size, len(keys))``
            in column-major order. NaN marks a missing observation.
        keys: One key per column; keys need not be unique
        config: Defaults carried through every derived matrix
    """

    index: DateTimeIndex
    data: np.ndarray
    keys: tuple[K, ...]
    config: MatrixConfig = field(default=DEFAULT_CONFIG, repr=False)

    def __post_init__(self) -> None:
        keys = tuple(self.keys)
        data = np.array(self.data, dtype=np.float64, order="F", copy=True)
        if data.ndim == 1 and data.size == self.index.size * len(keys):
            data = data.reshape((self.index.size, len(keys)), order="F")
        if data.ndim != 2:
            raise ValueError(f"data must be 2-D, got shape {data.shape}")
        if data.shape[0] != self.index.size:
            raise ELengthMismatch(
                f"data has {data.shape[0]} rows, index has {self.index.size}",
                context={"rows": data.shape[0], "index_size": self.index.size},
            )
        if data.shape[1] != len(keys):
            raise ELengthMismatch(
                f"data has {data.shape[1]} columns for {len(keys)} keys",
                context={"columns": data.shape[1], "keys": len(keys)},
            )
        data.flags.writeable = False
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "keys", keys)

    # ------------------------------------------------------------------
    # Shape and access
    # ------------------------------------------------------------------

    @property
    def n_rows(self) -> int:
        return self.data.shape[0]

    @property
    def n_columns(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self.n_rows, self.n_columns

    def _position(self, key: K) -> int:
        try:
            return self.keys.index(key)
        except ValueError:
            raise ENotFound(
                f"Key {key!r} is not a column of this matrix",
                context={"key": repr(key), "n_columns": self.n_columns},
                fix_hint="Check matrix.keys for available columns",
            ) from None

    def series(self, key: K) -> np.ndarray:
        """Copy of the first column stored under ``key``."""
        return self.data[:, self._position(key)].copy()

    def head(self) -> tuple[K, np.ndarray]:
        """First key and its column."""
        if self.n_columns == 0:
            raise EIndexOutOfRange("Matrix has no columns", context={"n_columns": 0})
        return self.keys[0], self.data[:, 0].copy()

    def iter_series(self) -> Iterator[np.ndarray]:
        """Iterate column vectors; each call starts a fresh pass."""
        for pos in range(self.n_columns):
            yield self.data[:, pos].copy()

    def iter_key_and_series(self) -> Iterator[tuple[K, np.ndarray]]:
        """Iterate ``(key, column vector)`` pairs; each call starts a fresh pass."""
        for pos, key in enumerate(self.keys):
            yield key, self.data[:, pos].copy()

    def to_instants(self) -> list[tuple[pd.Timestamp, np.ndarray]]:
        """One ``(timestamp, row vector)`` pair per index position."""
        return [(ts, self.data[row, :].copy()) for row, ts in enumerate(self.index)]

    def data_as_array(self) -> np.ndarray:
        """Column-major flattened copy of the data."""
        return self.data.ravel(order="F").copy()

    def to_pandas(self) -> pd.DataFrame:
        """DataFrame indexed by timestamp with one column per key."""
        return pd.DataFrame(
            self.data.copy(),
            index=self.index.to_pandas(),
            columns=pd.Index(list(self.keys), tupleize_cols=False),
        )

    def _derive(
        self,
        index: DateTimeIndex,
        data: np.ndarray,
        keys: Sequence[Any],
    ) -> TimeSeriesMatrix[Any]:
        return TimeSeriesMatrix(index, data, tuple(keys), self.config)

    # ------------------------------------------------------------------
    # Row selection
    # ------------------------------------------------------------------

    def slice(self, start: int, end: int) -> TimeSeriesMatrix[K]:
        """Rows ``[start, end)`` with the matching sub-index.

        Raises:
            EIndexOutOfRange: If the range exceeds the matrix
        """
        sub_index = self.index.islice(start, end)
        return self._derive(sub_index, self.data[start:end, :], self.keys)

    # ------------------------------------------------------------------
    # Lag expansion
    # ------------------------------------------------------------------

    def _require_uniform(self, operation: str) -> UniformDateTimeIndex:
        if not isinstance(self.index, UniformDateTimeIndex):
            raise ERequiresUniformIndex(
                f"{operation} requires a uniform index, got {type(self.index).__name__}",
                context={"operation": operation},
            )
        return self.index

    def _lagged(
        self,
        plan: Sequence[tuple[int, ColumnLagSpec]],
        key_fn: KeyFn | None,
    ) -> TimeSeriesMatrix[Any]:
        index = self._require_uniform("lags")
        key_fn = key_fn or self.config.key_fn
        max_lag = max((spec.max_lag for _, spec in plan), default=0)
        if max_lag > self.n_rows:
            raise EIndexOutOfRange(
                f"Lag {max_lag} exceeds the {self.n_rows} available rows",
                context={"max_lag": max_lag, "n_rows": self.n_rows},
            )

        n_out = self.n_rows - max_lag
        columns: list[np.ndarray] = []
        new_keys: list[Any] = []
        for pos, spec in plan:
            source = self.data[:, pos]
            first_lag = 0 if spec.keep_original else 1
            for lag in range(first_lag, spec.max_lag + 1):
                begin = max_lag - lag
                columns.append(source[begin : begin + n_out])
                new_keys.append(key_fn(self.keys[pos], lag))

        try:
            counts = Counter(new_keys)
        except TypeError as exc:
            raise EDuplicateKey(
                f"Lagged key function returned an unhashable key: {exc}",
                context={"keys": [repr(key) for key in new_keys]},
                fix_hint="key_fn must return hashable keys, e.g. tuples or strings",
            ) from exc
        duplicates = [key for key, count in counts.items() if count > 1]
        if duplicates:
            raise EDuplicateKey(
                "Lagged key function produced colliding keys",
                context={"duplicates": [repr(key) for key in duplicates]},
            )

        data = np.column_stack(columns) if columns else np.empty((n_out, 0))
        logger.debug(
            "Lag expansion: %d columns -> %d columns over %d rows (max lag %d)",
            self.n_columns,
            len(new_keys),
            n_out,
            max_lag,
        )
        return self._derive(index.islice(max_lag, self.n_rows), data, new_keys)

    def lags(
        self,
        max_lag: int,
        include_originals: bool = False,
        key_fn: KeyFn | None = None,
    ) -> TimeSeriesMatrix[Any]:
        """Lag every column by orders ``1..max_lag``.

        Output row ``r`` of lag order ``l`` holds input row ``r + max_lag - l``;
        the first ``max_lag`` timestamps are dropped.

        Args:
            max_lag: Deepest lag order
            include_originals: Also emit order 0 (the unlagged column)
            key_fn: Builds each new key from ``(key, lag)``; defaults to the
                config's scheme. Must be injective over the generated pairs.

        Raises:
            ERequiresUniformIndex: If the index is irregular
            EDuplicateKey: If generated keys collide
        """
        if max_lag < 0:
            raise ValueError(f"max_lag must be non-negative, got {max_lag}")
        spec = ColumnLagSpec(keep_original=include_originals, max_lag=max_lag)
        return self._lagged([(pos, spec) for pos in range(self.n_columns)], key_fn)

    def lags_per_column(
        self,
        lags_per_col: Mapping[Hashable, ColumnLagSpec | tuple[bool, int]],
        key_fn: KeyFn | None = None,
    ) -> TimeSeriesMatrix[Any]:
        """Lag each listed column by its own depth.

        ``lags_per_col`` maps a key to ``(keep_original, max_lag)`` or a
        ColumnLagSpec. Columns not listed are dropped. The output window
        shrinks by the deepest lag so all columns share one index.

        Raises:
            ENotFound: If a listed key is not a column
        """
        specs = normalize_lag_specs(lags_per_col)
        unknown = [key for key in specs if key not in self.keys]
        if unknown:
            raise ENotFound(
                "Lag spec names keys that are not columns",
                context={"unknown": [repr(key) for key in unknown]},
            )
        plan = [(pos, specs[key]) for pos, key in enumerate(self.keys) if key in specs]
        return self._lagged(plan, key_fn)

    # ------------------------------------------------------------------
    # Differencing
    # ------------------------------------------------------------------

    def _pairwise(
        self,
        lag: int,
        op: Callable[[np.ndarray, np.ndarray], np.ndarray],
    ) -> TimeSeriesMatrix[K]:
        if lag < 1:
            raise ValueError(f"lag must be at least 1, got {lag}")
        if lag > self.n_rows:
            raise EIndexOutOfRange(
                f"Lag {lag} exceeds the {self.n_rows} available rows",
                context={"lag": lag, "n_rows": self.n_rows},
            )
        later = self.data[lag:, :]
        earlier = self.data[: self.n_rows - lag, :]
        return self._derive(self.index.islice(lag, self.n_rows), op(later, earlier), self.keys)

    def differences(self, lag: int = 1) -> TimeSeriesMatrix[K]:
        """``x[t] - x[t - lag]`` per column; the first ``lag`` timestamps are dropped."""
        return self._pairwise(lag, np.subtract)

    def quotients(self, lag: int = 1) -> TimeSeriesMatrix[K]:
        """``x[t] / x[t - lag]`` per column; the first ``lag`` timestamps are dropped."""

        def divide(later: np.ndarray, earlier: np.ndarray) -> np.ndarray:
            with np.errstate(divide="ignore", invalid="ignore"):
                result = later / earlier
            produced = np.isfinite(later) & np.isfinite(earlier) & ~np.isfinite(result)
            if produced.any():
                logger.warning(
                    "Quotients produced %d non-finite values from zero denominators",
                    int(produced.sum()),
                )
            return result

        return self._pairwise(lag, divide)

    def price2ret(self) -> TimeSeriesMatrix[K]:
        """Periodic (not log) returns: ``x[t] / x[t - 1] - 1``."""
        ratios = self.quotients(1)
        return self._derive(ratios.index, ratios.data - 1.0, ratios.keys)

    # ------------------------------------------------------------------
    # Column transforms
    # ------------------------------------------------------------------

    def _map_columns(
        self,
        f: Callable[[K, np.ndarray], Any],
        new_index: DateTimeIndex | None,
    ) -> TimeSeriesMatrix[K]:
        target = self.index if new_index is None else new_index
        columns: list[np.ndarray] = []
        for key, vector in self.iter_key_and_series():
            out = np.asarray(f(key, vector), dtype=np.float64)
            if out.ndim != 1 or len(out) != target.size:
                raise ELengthMismatch(
                    f"Transform of {key!r} returned shape {out.shape}, index has {target.size}",
                    context={"key": repr(key), "shape": out.shape, "index_size": target.size},
                )
            columns.append(out)
        data = np.column_stack(columns) if columns else np.empty((target.size, 0))
        return self._derive(target, data, self.keys)

    def map_series(
        self,
        f: Callable[[np.ndarray], Any],
        new_index: DateTimeIndex | None = None,
    ) -> TimeSeriesMatrix[K]:
        """Apply ``f`` to every column.

        Args:
            f: Maps a column vector to a vector
            new_index: Index the outputs align to; defaults to the current one

        Raises:
            ELengthMismatch: If an output length differs from the index size
        """
        return self._map_columns(lambda _key, vector: f(vector), new_index)

    def map_series_with_key(
        self,
        f: Callable[[K, np.ndarray], Any],
        new_index: DateTimeIndex | None = None,
    ) -> TimeSeriesMatrix[K]:
        """Like map_series, passing the key along with each column."""
        return self._map_columns(f, new_index)

    def map_values(self, f: Callable[[np.ndarray], U]) -> list[tuple[K, U]]:
        """Reduce each column to one value, returned as ``(key, value)`` pairs."""
        return [(key, f(vector)) for key, vector in self.iter_key_and_series()]

    def union(self, vector: Sequence[float] | np.ndarray, key: K) -> TimeSeriesMatrix[K]:
        """New matrix with ``vector`` appended as column ``key``."""
        column = np.asarray(vector, dtype=np.float64)
        if column.ndim != 1 or len(column) != self.n_rows:
            raise ELengthMismatch(
                f"Vector of shape {column.shape} does not fit {self.n_rows} rows",
                context={"shape": column.shape, "n_rows": self.n_rows},
            )
        data = np.column_stack([self.data, column])
        return self._derive(self.index, data, (*self.keys, key))

    def __repr__(self) -> str:
        return f"TimeSeriesMatrix(index={self.index!r}, shape={self.shape}, keys={list(self.keys)!r})"


__all__ = ["TimeSeriesMatrix"]

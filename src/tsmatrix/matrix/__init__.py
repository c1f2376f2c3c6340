"""Matrix module - the TimeSeriesMatrix entity and its constructors."""

from tsmatrix.matrix.construct import (
    from_irregular_samples,
    from_pandas,
    from_sample_streams,
    from_uniform_samples,
    from_vectors,
)
from tsmatrix.matrix.keys import lagged_pair_key, lagged_string_key
from tsmatrix.matrix.time_series import TimeSeriesMatrix

__all__ = [
    "TimeSeriesMatrix",
    # Construction
    "from_irregular_samples",
    "from_uniform_samples",
    "from_vectors",
    "from_sample_streams",
    "from_pandas",
    # Lag keys
    "lagged_pair_key",
    "lagged_string_key",
]

"""tsmatrix - time-indexed numeric matrices with alignment arithmetic.

Keyed observation sequences on a shared time index, with resampling,
alignment, slicing, lagging and differencing over dense arrays.

Basic usage:
    >>> from tsmatrix import UniformDateTimeIndex, from_vectors
    >>> index = UniformDateTimeIndex("2024-01-01 16:00", 5, "h")
    >>> matrix = from_vectors([[1, 2, 3, 4, 5]], index, ["a"])
    >>> matrix.lags(2, include_originals=True).to_instants()[0]

From raw samples:
    >>> from tsmatrix import samples_to_time_series
    >>> daily, vector = samples_to_time_series(samples, "D")

Index arithmetic:
    >>> index.offset_of("2024-01-01 18:00")
    2
    >>> index.offset_of("2024-01-01 12:00", exact=False)
    -4
"""

__version__ = "0.3.0"

# Core API
from tsmatrix.core.config import MatrixConfig
from tsmatrix.core.errors import (
    EDuplicateKey,
    EIncompatibleFrequency,
    EIndexOutOfRange,
    ELengthMismatch,
    EMisalignedSample,
    ENotFound,
    ERequiresUniformIndex,
    EUnsupportedOperation,
    TSMatrixError,
)

# Contracts
from tsmatrix.contracts import ColumnLagSpec

# Matrix
from tsmatrix.matrix import (
    TimeSeriesMatrix,
    from_irregular_samples,
    from_pandas,
    from_sample_streams,
    from_uniform_samples,
    from_vectors,
    lagged_pair_key,
    lagged_string_key,
)

# Resampling and alignment
from tsmatrix.series import (
    covering_index,
    iterate_with_uniform_frequency,
    min_max_datetimes,
    samples_to_time_series,
    samples_to_time_series_on_index,
    slice_to_index,
    union_indexed,
    union_vectors,
)

# Time
from tsmatrix.time import (
    DateTimeIndex,
    Frequency,
    IrregularDateTimeIndex,
    UniformDateTimeIndex,
    require_common_frequency,
)

__all__ = [
    "__version__",
    # Config
    "MatrixConfig",
    "ColumnLagSpec",
    # Time
    "Frequency",
    "DateTimeIndex",
    "UniformDateTimeIndex",
    "IrregularDateTimeIndex",
    "require_common_frequency",
    # Resampling
    "iterate_with_uniform_frequency",
    "samples_to_time_series",
    "samples_to_time_series_on_index",
    # Alignment
    "slice_to_index",
    "covering_index",
    "union_vectors",
    "union_indexed",
    "min_max_datetimes",
    # Matrix
    "TimeSeriesMatrix",
    "from_irregular_samples",
    "from_uniform_samples",
    "from_vectors",
    "from_sample_streams",
    "from_pandas",
    "lagged_pair_key",
    "lagged_string_key",
    # Errors
    "TSMatrixError",
    "EIncompatibleFrequency",
    "EIndexOutOfRange",
    "ENotFound",
    "ELengthMismatch",
    "ERequiresUniformIndex",
    "EUnsupportedOperation",
    "EMisalignedSample",
    "EDuplicateKey",
]

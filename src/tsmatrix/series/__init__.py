"""Series module - resampling and alignment of single dense vectors."""

from .alignment import (
    covering_index,
    min_max_datetimes,
    slice_to_index,
    union_indexed,
    union_vectors,
)
from .resample import (
    UniformFrequencyIterator,
    iterate_with_uniform_frequency,
    samples_to_time_series,
    samples_to_time_series_on_index,
)

__all__ = [
    # Resampling
    "UniformFrequencyIterator",
    "iterate_with_uniform_frequency",
    "samples_to_time_series",
    "samples_to_time_series_on_index",
    # Alignment
    "slice_to_index",
    "covering_index",
    "union_vectors",
    "union_indexed",
    "min_max_datetimes",
]

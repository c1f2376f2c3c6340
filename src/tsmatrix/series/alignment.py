"""Alignment of dense vectors between indexes, and union by coalescing.

Provides:
- ``slice_to_index``: re-window a vector from one uniform index to another
  of the same frequency, padding positions outside the source with NaN
- ``union_vectors``: position-wise first non-missing value across vectors
  that already share one index
- ``union_indexed``: align vectors on distinct indexes onto the span of all
  of them, then coalesce
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from tsmatrix.core.errors import ELengthMismatch, EMisalignedSample
from tsmatrix.time.index import DateTimeIndex, UniformDateTimeIndex, require_common_frequency

logger = logging.getLogger(__name__)


def _as_vector(values: Sequence[float] | np.ndarray) -> np.ndarray:
    vector = np.asarray(values, dtype=np.float64)
    if vector.ndim != 1:
        raise ValueError(f"Expected a 1-D vector, got shape {vector.shape}")
    return vector


def slice_to_index(
    source: DateTimeIndex,
    target: DateTimeIndex,
    vector: Sequence[float] | np.ndarray,
) -> np.ndarray:
    """Conform a vector indexed by ``source`` to the window of ``target``.

    Positions of ``target`` that fall outside ``source`` are NaN; every
    output position holds the value observed at the same timestamp.

    Args:
        source: Index the vector is laid out on
        target: Index to conform to (same frequency, same grid phase)
        vector: Values, one per ``source`` position

    Returns:
        New vector of length ``target.size``

    Raises:
        EIncompatibleFrequency: If either index is irregular or frequencies differ
        EMisalignedSample: If the target grid is offset from the source grid
        ELengthMismatch: If ``len(vector) != source.size``
    """
    require_common_frequency(source, target)
    assert isinstance(source, UniformDateTimeIndex)
    assert isinstance(target, UniformDateTimeIndex)

    values = _as_vector(vector)
    if len(values) != source.size:
        raise ELengthMismatch(
            f"Vector has {len(values)} values, source index has {source.size}",
            context={"vector_length": len(values), "index_size": source.size},
        )

    start_loc = source.offset_of(target.start, exact=False)
    if source.grid_timestamp(start_loc) != target.start:
        raise EMisalignedSample(
            f"Target start {target.start} is not on the source grid",
            context={"source_start": str(source.start), "target_start": str(target.start)},
        )
    end_loc = source.offset_of(target.end, exact=False)

    if start_loc >= 0 and end_loc <= source.size:
        return values[start_loc:end_loc].copy()

    result = np.full(end_loc - start_loc, np.nan)
    safe_start = max(start_loc, 0)
    safe_end = min(end_loc, source.size)
    if safe_start < safe_end:
        result[safe_start - start_loc : safe_end - start_loc] = values[safe_start:safe_end]

    logger.debug(
        "Padded slice: source [%d, %d) -> target [%d, %d), %d observed positions",
        0,
        source.size,
        start_loc,
        end_loc,
        max(safe_end - safe_start, 0),
    )
    return result


def union_vectors(vectors: Sequence[Sequence[float] | np.ndarray]) -> np.ndarray:
    """Coalesce same-length vectors position by position.

    Position ``i`` of the result is the first non-NaN ``vectors[j][i]``
    scanning ``j`` in input order, or NaN if every vector is missing there.

    Example:
        >>> union_vectors([[np.nan, 2.0, np.nan], [1.0, np.nan, np.nan]])
        array([ 1.,  2., nan])
    """
    if len(vectors) == 0:
        raise ValueError("At least one vector is required")

    arrays = [_as_vector(v) for v in vectors]
    lengths = {len(a) for a in arrays}
    if len(lengths) > 1:
        raise ELengthMismatch(
            "Vectors to union must have equal lengths",
            context={"lengths": [len(a) for a in arrays]},
        )

    stacked = np.vstack(arrays)
    observed = ~np.isnan(stacked)
    first = observed.argmax(axis=0)
    result = stacked[first, np.arange(stacked.shape[1])]

    all_missing = int((~observed.any(axis=0)).sum())
    if all_missing:
        logger.debug("Union left %d of %d positions missing", all_missing, len(result))
    return result


def covering_index(indexes: Sequence[DateTimeIndex]) -> UniformDateTimeIndex:
    """Uniform index from the earliest start to the latest end of ``indexes``.

    Empty indexes cover no timestamps and do not widen the result. When
    every index is empty the result is empty, anchored at the first start.

    Raises:
        EIncompatibleFrequency: If frequencies differ or any index is irregular
    """
    freq = require_common_frequency(*indexes)
    uniform_indexes = [ix for ix in indexes if isinstance(ix, UniformDateTimeIndex)]
    non_empty = [ix for ix in uniform_indexes if ix.size > 0]
    if not non_empty:
        return UniformDateTimeIndex(uniform_indexes[0].start, 0, freq)

    start = min(ix.start for ix in non_empty)
    end = max(ix.end for ix in non_empty)
    anchor = next(ix for ix in non_empty if ix.start == start)
    return UniformDateTimeIndex(start, anchor.offset_of(end, exact=False), freq)


def union_indexed(
    indexes: Sequence[DateTimeIndex],
    vectors: Sequence[Sequence[float] | np.ndarray],
) -> tuple[UniformDateTimeIndex, np.ndarray]:
    """Union vectors laid out on distinct uniform indexes.

    The result index runs from the earliest start to the latest end of the
    inputs. Each vector is aligned onto it with ``slice_to_index`` and the
    aligned vectors are coalesced in input order.

    Raises:
        EIncompatibleFrequency: If frequencies differ or any index is irregular
        ELengthMismatch: If the number of indexes and vectors differ
    """
    if len(indexes) != len(vectors):
        raise ELengthMismatch(
            f"Got {len(indexes)} indexes for {len(vectors)} vectors",
            context={"indexes": len(indexes), "vectors": len(vectors)},
        )
    combined = covering_index(indexes)
    aligned = [slice_to_index(ix, combined, v) for ix, v in zip(indexes, vectors)]
    return combined, union_vectors(aligned)


def min_max_datetimes(
    index: DateTimeIndex,
    vector: Sequence[float] | np.ndarray,
) -> tuple[pd.Timestamp | None, pd.Timestamp | None]:
    """Timestamps of the minimum and maximum values, ignoring NaN.

    Ties resolve to the earliest timestamp. Returns ``(None, None)`` when
    every value is missing.
    """
    values = _as_vector(vector)
    if len(values) != index.size:
        raise ELengthMismatch(
            f"Vector has {len(values)} values, index has {index.size}",
            context={"vector_length": len(values), "index_size": index.size},
        )
    if len(values) == 0 or np.isnan(values).all():
        return None, None
    return index.timestamp_at(int(np.nanargmin(values))), index.timestamp_at(
        int(np.nanargmax(values))
    )


__all__ = [
    "slice_to_index",
    "covering_index",
    "union_vectors",
    "union_indexed",
    "min_max_datetimes",
]

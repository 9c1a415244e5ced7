"""
Categorical cross features computation module.

A feature cross is the flattened outer product of two encoded categorical
vectors. Flattening is row-major over the first vector, then the second:
entry ``i * len(second) + j`` equals ``first[i] * second[j]``. Column names
produced by ``cross_feature_names`` follow the same ordering.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..config.exceptions import InvalidArgumentError
from ..config.logging import get_logger
from ..models.categorical_vector import CategoricalVector, CrossRecord, CrossResult

logger = get_logger(__name__)

VectorLike = Union[Sequence[float], np.ndarray, CategoricalVector]
RecordLike = Union[CrossRecord, Tuple[VectorLike, VectorLike]]


def _as_vector(vector: VectorLike, name: str) -> np.ndarray:
    if isinstance(vector, CategoricalVector):
        vector = vector.values
    arr = np.asarray(vector, dtype=np.float64)
    if arr.ndim != 1:
        raise InvalidArgumentError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        raise InvalidArgumentError(f"{name} must not be empty")
    return arr


def _unpack(record: RecordLike) -> Tuple[VectorLike, VectorLike]:
    if isinstance(record, CrossRecord):
        return record.first, record.second
    try:
        first, second = record
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"record must be a pair of vectors: {e}") from e
    return first, second


def cross(a: VectorLike, b: VectorLike) -> np.ndarray:
    """
    Compute the flattened outer product of two categorical vectors.

    Args:
        a: First vector, length M >= 1
        b: Second vector, length N >= 1 (need not equal M)

    Returns:
        New float64 array of length M * N with ``result[i * N + j] == a[i] * b[j]``

    Raises:
        InvalidArgumentError: If either vector is empty or not one-dimensional
    """
    first = _as_vector(a, "a")
    second = _as_vector(b, "b")
    return np.outer(first, second).ravel()


def cross_many(*vectors: VectorLike) -> np.ndarray:
    """
    N-way feature cross, folded left to right.

    ``cross_many(a, b, c)`` equals ``cross(cross(a, b), c)``, so the index of
    ``(i, j, k)`` is ``(i * len(b) + j) * len(c) + k``.
    """
    if not vectors:
        raise InvalidArgumentError("cross_many requires at least one vector")
    result = _as_vector(vectors[0], "vectors[0]").copy()
    for position, vector in enumerate(vectors[1:], start=1):
        _as_vector(vector, f"vectors[{position}]")
        result = cross(result, vector)
    return result


def cross_batch(records: Iterable[RecordLike], max_workers: Optional[int] = None) -> List[np.ndarray]:
    """
    Cross every record of a batch, preserving input order.

    The first malformed record aborts the batch by raising its
    InvalidArgumentError. Use ``cross_batch_results`` to collect per-record
    failures instead.

    Args:
        records: Sequence of CrossRecord or (first, second) pairs
        max_workers: Thread pool size; None or 1 processes records inline

    Returns:
        List of cross feature vectors; position k corresponds to record k
    """
    pairs = [_unpack(record) for record in records]
    if not max_workers or max_workers <= 1 or len(pairs) <= 1:
        return [cross(first, second) for first, second in pairs]

    output: List[Optional[np.ndarray]] = [None] * len(pairs)
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(cross, first, second) for first, second in pairs]
        for index, future in enumerate(futures):
            output[index] = future.result()
    logger.debug("Crossed batch", record_count=len(pairs), max_workers=max_workers)
    return output


def _cross_one(index: int, record: RecordLike) -> CrossResult:
    try:
        first, second = _unpack(record)
        return CrossResult(index=index, vector=cross(first, second))
    except (TypeError, ValueError) as e:
        return CrossResult(index=index, error=str(e))


def cross_batch_results(records: Iterable[RecordLike], max_workers: Optional[int] = None) -> List[CrossResult]:
    """
    Cross every record of a batch, collecting failures per record.

    Malformed records yield a CrossResult with ``error`` set and no vector;
    the rest of the batch is still processed. Order is preserved.
    """
    items = list(records)
    if not max_workers or max_workers <= 1 or len(items) <= 1:
        results = [_cross_one(index, record) for index, record in enumerate(items)]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(_cross_one, range(len(items)), items))

    failed = [r.index for r in results if not r.ok]
    if failed:
        logger.warning("Cross batch contained malformed records", failed_count=len(failed), failed_indices=failed[:10])
    return results


def active_index(vector: VectorLike) -> int:
    """
    Return the position of the single 1 in a strictly one-hot vector.

    Raises:
        InvalidArgumentError: If the vector is empty or not strictly one-hot
    """
    arr = _as_vector(vector, "vector")
    ones = np.flatnonzero(arr == 1.0)
    if ones.size != 1 or np.count_nonzero(arr) != 1:
        raise InvalidArgumentError("vector is not strictly one-hot")
    return int(ones[0])


def split_cross_index(index: int, second_length: int) -> Tuple[int, int]:
    """Map a flattened cross index back to ``(i, j)``."""
    if second_length <= 0:
        raise InvalidArgumentError(f"second_length must be positive, got {second_length}")
    if index < 0:
        raise InvalidArgumentError(f"index must be non-negative, got {index}")
    return divmod(index, second_length)


def cross_feature_names(
    first_names: Sequence[str],
    second_names: Sequence[str],
    separator: str = "_x_",
) -> List[str]:
    """Column names for a cross, in the same row-major order as ``cross``."""
    if not first_names or not second_names:
        raise InvalidArgumentError("feature name lists must not be empty")
    return [f"{a}{separator}{b}" for a in first_names for b in second_names]

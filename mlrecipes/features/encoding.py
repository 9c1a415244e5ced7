"""
Binning and one-hot encoding of continuous columns.

Thin wrappers over scikit-learn's KBinsDiscretizer and OneHotEncoder that
keep the bin count explicit, so every encoded vector of a column has the
same length.
"""
from typing import Sequence, Union

import numpy as np
from sklearn.preprocessing import KBinsDiscretizer, OneHotEncoder

from ..config.exceptions import InvalidArgumentError

ArrayLike = Union[Sequence[float], np.ndarray]


def _as_column(values: ArrayLike) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim != 1:
        arr = arr.reshape(-1)
    if arr.size == 0:
        raise InvalidArgumentError("cannot encode an empty column")
    if not np.all(np.isfinite(arr)):
        raise InvalidArgumentError("cannot bin missing or non-finite values")
    return arr.reshape(-1, 1)


class BinAssigner:
    """Maps continuous values to one of K ordered bins."""

    def __init__(self, n_bins: int = 10, strategy: str = "quantile"):
        if n_bins < 2:
            raise InvalidArgumentError(f"n_bins must be at least 2, got {n_bins}")
        self.n_bins = n_bins
        self.strategy = strategy
        self._discretizer = None

    def fit(self, values: ArrayLike) -> "BinAssigner":
        self._discretizer = KBinsDiscretizer(n_bins=self.n_bins, encode="ordinal", strategy=self.strategy)
        self._discretizer.fit(_as_column(values))
        return self

    @property
    def n_bins_(self) -> int:
        """Effective bin count after fitting (edges that collapse are removed)."""
        if self._discretizer is None:
            raise InvalidArgumentError("BinAssigner is not fitted")
        return int(self._discretizer.n_bins_[0])

    @property
    def bin_edges_(self) -> np.ndarray:
        if self._discretizer is None:
            raise InvalidArgumentError("BinAssigner is not fitted")
        return self._discretizer.bin_edges_[0]

    def transform(self, values: ArrayLike) -> np.ndarray:
        if self._discretizer is None:
            raise InvalidArgumentError("BinAssigner is not fitted")
        return self._discretizer.transform(_as_column(values)).astype(np.int64).ravel()

    def fit_transform(self, values: ArrayLike) -> np.ndarray:
        return self.fit(values).transform(values)


class OneHotBinEncoder:
    """Maps a bin index in ``0..n_categories-1`` to a unit vector of length ``n_categories``."""

    def __init__(self, n_categories: int):
        if n_categories < 1:
            raise InvalidArgumentError(f"n_categories must be positive, got {n_categories}")
        self.n_categories = n_categories
        self._encoder = OneHotEncoder(
            categories=[np.arange(n_categories)],
            sparse_output=False,
            dtype=np.float64,
        )
        # categories are fixed, fitting only validates them
        self._encoder.fit(np.arange(n_categories).reshape(-1, 1))

    def transform(self, indices: ArrayLike) -> np.ndarray:
        arr = np.asarray(indices, dtype=np.int64).reshape(-1, 1)
        if arr.size == 0:
            raise InvalidArgumentError("cannot encode an empty column")
        if arr.min() < 0 or arr.max() >= self.n_categories:
            raise InvalidArgumentError(
                f"bin indices must be in [0, {self.n_categories - 1}], got [{arr.min()}, {arr.max()}]"
            )
        return self._encoder.transform(arr)


def encode_column(values: ArrayLike, n_bins: int = 10, strategy: str = "quantile") -> np.ndarray:
    """Bin a continuous column and one-hot encode it; returns an (n, K) array."""
    assigner = BinAssigner(n_bins=n_bins, strategy=strategy)
    indices = assigner.fit_transform(values)
    return OneHotBinEncoder(assigner.n_bins_).transform(indices)

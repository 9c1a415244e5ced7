"""
Cross feature transformer.

scikit-learn compatible transformer that bins two continuous DataFrame
columns, one-hot encodes the bins, crosses the two encodings per record and
replaces the source columns with the cross columns.
"""

from typing import List, Optional

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

from ..config.exceptions import DatasetFormatError, InvalidArgumentError
from ..config.logging import get_logger
from ..features.cross_features import cross_batch, cross_feature_names
from ..features.encoding import BinAssigner, OneHotBinEncoder

logger = get_logger(__name__)


class CrossFeatureTransformer(BaseEstimator, TransformerMixin):
    """Replaces two continuous columns with the cross of their binned one-hot encodings."""

    def __init__(
        self,
        first_column: str,
        second_column: str,
        n_bins: int = 10,
        strategy: str = "quantile",
        output_prefix: str = "location",
        drop_source: bool = True,
        max_workers: Optional[int] = None,
    ):
        self.first_column = first_column
        self.second_column = second_column
        self.n_bins = n_bins
        self.strategy = strategy
        self.output_prefix = output_prefix
        self.drop_source = drop_source
        self.max_workers = max_workers

    def _check_columns(self, X: pd.DataFrame) -> None:
        if not isinstance(X, pd.DataFrame):
            raise InvalidArgumentError("CrossFeatureTransformer expects a pandas DataFrame")
        missing = [c for c in (self.first_column, self.second_column) if c not in X.columns]
        if missing:
            raise DatasetFormatError(f"Missing columns for feature cross: {missing}")
        for column in (self.first_column, self.second_column):
            if X[column].isna().any():
                raise DatasetFormatError(f"Column {column} has missing values")

    def fit(self, X: pd.DataFrame, y=None) -> "CrossFeatureTransformer":
        self._check_columns(X)
        self.first_binner_ = BinAssigner(self.n_bins, self.strategy).fit(X[self.first_column].to_numpy())
        self.second_binner_ = BinAssigner(self.n_bins, self.strategy).fit(X[self.second_column].to_numpy())
        self.first_encoder_ = OneHotBinEncoder(self.first_binner_.n_bins_)
        self.second_encoder_ = OneHotBinEncoder(self.second_binner_.n_bins_)
        self.feature_names_out_ = cross_feature_names(
            [f"{self.output_prefix}_{i}" for i in range(self.first_binner_.n_bins_)],
            [str(j) for j in range(self.second_binner_.n_bins_)],
            separator="_",
        )
        logger.info(
            "Fitted cross feature bins",
            first_column=self.first_column,
            second_column=self.second_column,
            first_bins=self.first_binner_.n_bins_,
            second_bins=self.second_binner_.n_bins_,
            cross_width=len(self.feature_names_out_),
        )
        return self

    def _check_fitted(self) -> None:
        if not hasattr(self, "feature_names_out_"):
            raise InvalidArgumentError("CrossFeatureTransformer is not fitted")

    def encode(self, X: pd.DataFrame):
        """Return the two one-hot matrices ``(first, second)`` for ``X``."""
        self._check_fitted()
        self._check_columns(X)
        first = self.first_encoder_.transform(self.first_binner_.transform(X[self.first_column].to_numpy()))
        second = self.second_encoder_.transform(self.second_binner_.transform(X[self.second_column].to_numpy()))
        return first, second

    def cross_vectors(self, X: pd.DataFrame) -> np.ndarray:
        """Cross feature matrix of shape ``(len(X), first_bins * second_bins)``."""
        first, second = self.encode(X)
        vectors = cross_batch(zip(first, second), max_workers=self.max_workers)
        if not vectors:
            return np.empty((0, len(self.feature_names_out_)), dtype=np.float64)
        return np.vstack(vectors)

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        crossed = pd.DataFrame(self.cross_vectors(X), columns=self.feature_names_out_, index=X.index)
        base = X.drop(columns=[self.first_column, self.second_column]) if self.drop_source else X
        return pd.concat([base, crossed], axis=1)

    def get_feature_names_out(self, input_features=None) -> List[str]:
        self._check_fitted()
        return list(self.feature_names_out_)

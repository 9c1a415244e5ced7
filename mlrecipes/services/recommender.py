"""
Matrix factorization recommender.

Factorizes the user x item rating matrix with scikit-learn's NMF and
scores (user, item) pairs from the reconstruction.
"""

from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.decomposition import NMF

from ..config.exceptions import InvalidArgumentError
from ..config.logging import get_logger

logger = get_logger(__name__)


class MatrixFactorizationRecommender:
    """Rating predictor backed by a low-rank non-negative factorization."""

    def __init__(self, rank: int = 100, iterations: int = 200, random_state: Optional[int] = None):
        if rank < 1:
            raise InvalidArgumentError(f"rank must be positive, got {rank}")
        self.rank = rank
        self.iterations = iterations
        self.random_state = random_state
        self.global_mean_: Optional[float] = None
        self._user_index: Dict = {}
        self._item_index: Dict = {}
        self._reconstruction: Optional[np.ndarray] = None

    def fit(
        self,
        ratings: pd.DataFrame,
        user_col: str = "user_id",
        item_col: str = "movie_id",
        rating_col: str = "rating",
    ) -> "MatrixFactorizationRecommender":
        """
        Fit on a long-format ratings table.

        Unobserved cells are filled with the global mean rating before factorization.
        """
        if ratings.empty:
            raise InvalidArgumentError("cannot fit a recommender on an empty ratings table")

        matrix = ratings.pivot_table(index=user_col, columns=item_col, values=rating_col, aggfunc="mean")
        self.global_mean_ = float(ratings[rating_col].mean())
        self._user_index = {user: i for i, user in enumerate(matrix.index)}
        self._item_index = {item: j for j, item in enumerate(matrix.columns)}

        filled = matrix.fillna(self.global_mean_).to_numpy(dtype=np.float64)
        n_components = min(self.rank, *filled.shape)
        nmf = NMF(n_components=n_components, init="nndsvda", max_iter=self.iterations, random_state=self.random_state)
        user_factors = nmf.fit_transform(filled)
        self._reconstruction = user_factors @ nmf.components_

        logger.info(
            "Fitted matrix factorization",
            user_count=len(self._user_index),
            item_count=len(self._item_index),
            rank=n_components,
            reconstruction_error=round(float(nmf.reconstruction_err_), 4),
        )
        return self

    def predict_one(self, user, item) -> float:
        if self._reconstruction is None:
            raise InvalidArgumentError("recommender is not fitted")
        i = self._user_index.get(user)
        j = self._item_index.get(item)
        if i is None or j is None:
            return self.global_mean_
        return float(self._reconstruction[i, j])

    def predict(self, users: Sequence, items: Sequence) -> np.ndarray:
        """Score aligned sequences of users and items; unknown ids score the global mean."""
        if len(users) != len(items):
            raise InvalidArgumentError(f"users and items must align: {len(users)} != {len(items)}")
        return np.array([self.predict_one(u, i) for u, i in zip(users, items)], dtype=np.float64)

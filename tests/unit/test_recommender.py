"""
Unit tests for the matrix factorization recommender.
"""
import numpy as np
import pandas as pd
import pytest

from mlrecipes.config.exceptions import InvalidArgumentError
from mlrecipes.services.recommender import MatrixFactorizationRecommender


@pytest.fixture
def ratings():
    """Two user groups with opposite tastes over four movies."""
    rows = []
    for user in range(1, 7):
        likes = {1, 2} if user <= 3 else {3, 4}
        for movie in range(1, 5):
            rows.append((user, movie, 5.0 if movie in likes else 1.0))
    return pd.DataFrame(rows, columns=["user_id", "movie_id", "rating"])


def test_reconstructs_known_ratings(ratings):
    recommender = MatrixFactorizationRecommender(rank=2, iterations=500, random_state=0).fit(ratings)

    assert recommender.predict_one(1, 1) > recommender.predict_one(1, 3)
    assert recommender.predict_one(5, 4) > recommender.predict_one(5, 2)


def test_unknown_ids_score_global_mean(ratings):
    recommender = MatrixFactorizationRecommender(rank=2, random_state=0).fit(ratings)

    assert recommender.global_mean_ == pytest.approx(3.0)
    assert recommender.predict_one(999, 1) == pytest.approx(3.0)
    assert recommender.predict_one(1, 999) == pytest.approx(3.0)


def test_rank_is_capped_by_matrix_shape(ratings):
    recommender = MatrixFactorizationRecommender(rank=100, iterations=50, random_state=0).fit(ratings)

    scores = recommender.predict([1, 2, 999], [1, 2, 3])

    assert scores.shape == (3,)
    assert np.all(np.isfinite(scores))


def test_predict_requires_aligned_inputs(ratings):
    recommender = MatrixFactorizationRecommender(rank=2, random_state=0).fit(ratings)

    with pytest.raises(InvalidArgumentError):
        recommender.predict([1, 2], [1])


def test_predict_before_fit():
    with pytest.raises(InvalidArgumentError):
        MatrixFactorizationRecommender().predict_one(1, 1)


def test_invalid_rank():
    with pytest.raises(InvalidArgumentError):
        MatrixFactorizationRecommender(rank=0)


def test_empty_ratings():
    with pytest.raises(InvalidArgumentError):
        MatrixFactorizationRecommender().fit(pd.DataFrame(columns=["user_id", "movie_id", "rating"]))

"""
Unit tests for CrossFeatureTransformer.
"""
import numpy as np
import pandas as pd
import pytest
from sklearn.pipeline import Pipeline

from mlrecipes.config.exceptions import DatasetFormatError, InvalidArgumentError
from mlrecipes.features.cross_features import active_index, split_cross_index
from mlrecipes.services.console_table import format_vector_digits
from mlrecipes.services.cross_feature_transformer import CrossFeatureTransformer


@pytest.fixture
def locations():
    """50 records with distinct longitudes and latitudes."""
    rng = np.random.default_rng(0)
    return pd.DataFrame(
        {
            "longitude": rng.permutation(np.linspace(-124.0, -114.0, 50)),
            "latitude": rng.permutation(np.linspace(32.0, 42.0, 50)),
            "median_income": rng.uniform(1, 10, 50),
        }
    )


def test_ten_by_ten_location_cross(locations):
    """Each record gets a 100-wide vector with a single 1."""
    transformer = CrossFeatureTransformer("longitude", "latitude", n_bins=10).fit(locations)

    vectors = transformer.cross_vectors(locations)

    assert vectors.shape == (50, 100)
    assert np.all(vectors.sum(axis=1) == 1.0)
    for vector in vectors:
        digits = format_vector_digits(vector)
        assert len(digits) == 100
        assert digits.count("1") == 1
        assert set(digits) == {"0", "1"}


def test_active_index_matches_bins(locations):
    transformer = CrossFeatureTransformer("longitude", "latitude", n_bins=10).fit(locations)

    vectors = transformer.cross_vectors(locations)
    lon_bins = transformer.first_binner_.transform(locations["longitude"].to_numpy())
    lat_bins = transformer.second_binner_.transform(locations["latitude"].to_numpy())

    for vector, i, j in zip(vectors, lon_bins, lat_bins):
        assert split_cross_index(active_index(vector), 10) == (i, j)


def test_transform_replaces_source_columns(locations):
    transformed = CrossFeatureTransformer("longitude", "latitude", n_bins=4).fit_transform(locations)

    assert "longitude" not in transformed.columns
    assert "latitude" not in transformed.columns
    assert transformed.columns[0] == "median_income"
    assert list(transformed.columns[1:5]) == ["location_0_0", "location_0_1", "location_0_2", "location_0_3"]
    assert transformed.shape == (50, 1 + 16)
    assert transformed.index.equals(locations.index)


def test_keep_source_columns(locations):
    transformed = CrossFeatureTransformer("longitude", "latitude", n_bins=3, drop_source=False).fit_transform(locations)

    assert {"longitude", "latitude"} <= set(transformed.columns)


def test_uneven_bin_counts_with_threads(locations):
    transformer = CrossFeatureTransformer("longitude", "latitude", n_bins=5, max_workers=4).fit(locations)

    assert len(transformer.get_feature_names_out()) == 25
    assert transformer.cross_vectors(locations).shape == (50, 25)


def test_threaded_matches_inline(locations):
    inline = CrossFeatureTransformer("longitude", "latitude").fit(locations).cross_vectors(locations)
    threaded = CrossFeatureTransformer("longitude", "latitude", max_workers=3).fit(locations).cross_vectors(locations)

    np.testing.assert_array_equal(inline, threaded)


def test_works_inside_pipeline(locations):
    pipeline = Pipeline([("cross", CrossFeatureTransformer("longitude", "latitude", n_bins=2))])

    transformed = pipeline.fit_transform(locations)

    assert transformed.shape == (50, 5)


def test_missing_column_raises(locations):
    with pytest.raises(DatasetFormatError):
        CrossFeatureTransformer("longitude", "altitude").fit(locations)


def test_transform_before_fit_raises(locations):
    with pytest.raises(InvalidArgumentError):
        CrossFeatureTransformer("longitude", "latitude").transform(locations)


def test_missing_coordinate_raises(locations):
    locations.loc[locations.index[5], "longitude"] = np.nan

    with pytest.raises(DatasetFormatError, match="longitude"):
        CrossFeatureTransformer("longitude", "latitude").fit(locations)

"""
Unit tests for TrainingDataset.
"""
import pandas as pd
import pytest
from pydantic import ValidationError

from mlrecipes.models.training_dataset import TrainingDataset


def test_summary():
    dataset = TrainingDataset(
        recipe="taxi-fare",
        features=pd.DataFrame({"a": [1, 2], "b": [3, 4]}),
        labels=pd.Series([0.5, 1.5]),
        metadata={"source": "unit-test"},
    )

    summary = dataset.to_dict()

    assert dataset.get_record_count() == 2
    assert dataset.get_feature_names() == ["a", "b"]
    assert summary["recipe"] == "taxi-fare"
    assert summary["metadata"] == {"source": "unit-test", "record_count": 2, "feature_names": ["a", "b"]}
    assert summary["created_at"].endswith("+00:00")


def test_empty_features_rejected():
    with pytest.raises(ValidationError):
        TrainingDataset(recipe="r", features=pd.DataFrame())


def test_empty_labels_rejected():
    with pytest.raises(ValidationError):
        TrainingDataset(recipe="r", features=pd.DataFrame({"a": [1]}), labels=pd.Series([], dtype=float))


def test_inconsistent_lengths():
    dataset = TrainingDataset(recipe="r", features=pd.DataFrame({"a": [1, 2, 3]}), labels=pd.Series([1, 0]))

    with pytest.raises(ValueError):
        dataset.validate_consistency()


def test_labels_are_optional():
    dataset = TrainingDataset(recipe="iris-clustering", features=pd.DataFrame({"a": [1.0]}))

    dataset.validate_consistency()
    assert dataset.labels is None

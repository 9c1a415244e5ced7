"""
Unit tests for ModelTrainer.

The estimator registry is patched with dummy models where the test is about
ModelTrainer's own behaviour rather than the underlying library.
"""
import numpy as np
import pandas as pd
import pytest
from sklearn.compose import ColumnTransformer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from xgboost import XGBClassifier

from mlrecipes.config.exceptions import ModelTrainingError
from mlrecipes.models.training_dataset import TrainingDataset


@pytest.fixture
def classification_dataset():
    rng = np.random.default_rng(0)
    X = pd.DataFrame({"feature1": rng.normal(size=40), "feature2": rng.normal(size=40)})
    y = pd.Series((X["feature1"] > 0).astype(int))
    return TrainingDataset(recipe="test-recipe", features=X, labels=y)


def test_fit_called_with_features_and_labels(trainer):
    """ModelTrainer passes only X and y to fit()."""
    X = pd.DataFrame({"feature1": [1.0, 2.0, 3.0, 4.0], "feature2": [0.1, 0.2, 0.3, 0.4]})
    y = pd.Series([0.0, 1.0, 0.5, -0.5])
    dataset = TrainingDataset(recipe="test-recipe", features=X, labels=y)

    calls = {}

    class DummyModel:
        def __init__(self, **kwargs):
            calls["init_kwargs"] = kwargs

        def fit(self, *args, **kwargs):
            calls["fit_args"] = args
            calls["fit_kwargs"] = kwargs
            return self

    trainer.supported_model_types = {"xgboost": {"classifier": DummyModel, "regressor": DummyModel}}

    model = trainer.train_model(
        dataset=dataset,
        model_type="xgboost",
        task_type="regression",
        hyperparameters={"max_depth": 3},
    )

    assert isinstance(model, DummyModel)
    assert calls["fit_kwargs"] == {}
    assert calls["fit_args"][0] is X
    assert calls["init_kwargs"]["max_depth"] == 3
    assert calls["init_kwargs"]["random_state"] == 0


def test_clustering_fits_without_labels(trainer):
    calls = {}

    class DummyClusterer:
        def __init__(self, **kwargs):
            calls["init_kwargs"] = kwargs

        def fit(self, X, y=None):
            calls["y"] = y
            return self

    trainer.supported_model_types = {"kmeans": {"clusterer": DummyClusterer}}
    dataset = TrainingDataset(recipe="test-recipe", features=pd.DataFrame({"a": [1.0, 2.0, 3.0]}))

    trainer.train_model(dataset, model_type="kmeans", task_type="clustering")

    assert calls["y"] is None
    assert calls["init_kwargs"]["n_clusters"] == 3


def test_training_failure_is_wrapped(trainer, classification_dataset):
    class FailingModel:
        def __init__(self, **kwargs):
            pass

        def fit(self, X, y):
            raise RuntimeError("boom")

    trainer.supported_model_types = {"xgboost": {"classifier": FailingModel}}

    with pytest.raises(ModelTrainingError, match="boom"):
        trainer.train_model(classification_dataset, model_type="xgboost", task_type="classification")


def test_supervised_task_requires_labels(trainer):
    dataset = TrainingDataset(recipe="test-recipe", features=pd.DataFrame({"a": [1.0, 2.0]}))

    with pytest.raises(ModelTrainingError):
        trainer.train_model(dataset, model_type="random_forest", task_type="regression")


@pytest.mark.parametrize(
    "model_type,task_type",
    [("svm", "classification"), ("kmeans", "regression"), ("xgboost", "ranking")],
)
def test_unsupported_combinations(trainer, model_type, task_type):
    with pytest.raises(ValueError):
        trainer.build_estimator(model_type, task_type)


def test_preprocessor_builds_pipeline(trainer, classification_dataset):
    preprocessor = ColumnTransformer([("scale", StandardScaler(), ["feature1", "feature2"])])

    model = trainer.train_model(
        classification_dataset,
        model_type="logistic_regression",
        task_type="classification",
        preprocessor=preprocessor,
    )

    assert isinstance(model, Pipeline)
    assert model.predict(classification_dataset.features).shape == (40,)


def test_xgboost_classifier_trains(trainer, classification_dataset):
    model = trainer.train_model(classification_dataset, model_type="xgboost", task_type="classification")

    assert isinstance(model, XGBClassifier)
    assert model.predict_proba(classification_dataset.features).shape == (40, 2)


def test_cross_validate_returns_one_score_per_fold(trainer, classification_dataset):
    scores = trainer.cross_validate(
        classification_dataset,
        model_type="logistic_regression",
        task_type="classification",
        folds=4,
        scoring="roc_auc",
    )

    assert len(scores) == 4
    assert all(0.0 <= s <= 1.0 for s in scores)
    assert np.mean(scores) > 0.8


def test_cross_validate_requires_labels(trainer):
    dataset = TrainingDataset(recipe="test-recipe", features=pd.DataFrame({"a": [1.0, 2.0]}))

    with pytest.raises(ModelTrainingError):
        trainer.cross_validate(dataset, model_type="logistic_regression")



def test_registry_covers_recipe_models(trainer):
    """Only the model families the recipes train are registered."""
    assert set(trainer.supported_model_types) == {"xgboost", "random_forest", "logistic_regression", "kmeans"}

    with pytest.raises(ValueError):
        trainer.build_estimator("sgd_classifier")

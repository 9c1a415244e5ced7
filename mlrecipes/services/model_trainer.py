"""
ML model trainer service.

Trains XGBoost and scikit-learn models from training datasets, optionally
behind a scikit-learn preprocessing step, and runs k-fold cross validation.
"""

from typing import Dict, Any, List, Optional, Literal
import numpy as np

from sklearn.base import clone
from sklearn.cluster import KMeans
from sklearn.ensemble import RandomForestClassifier, RandomForestRegressor
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import KFold, StratifiedKFold, cross_val_score
from sklearn.pipeline import Pipeline
from xgboost import XGBClassifier, XGBRegressor

from ..models.training_dataset import TrainingDataset
from ..config.settings import settings
from ..config.exceptions import ModelTrainingError
from ..config.logging import get_logger

logger = get_logger(__name__)

ModelType = Literal["xgboost", "random_forest", "logistic_regression", "kmeans"]
TaskType = Literal["classification", "regression", "clustering"]

_TASK_KEYS = {"classification": "classifier", "regression": "regressor", "clustering": "clusterer"}


class ModelTrainer:
    """Trains ML models from training datasets."""

    def __init__(self, random_state: Optional[int] = None):
        """
        Initialize model trainer.

        Args:
            random_state: Seed for estimators and fold shuffling (defaults to MLRECIPES_RANDOM_STATE)
        """
        self.random_state = settings.mlrecipes_random_state if random_state is None else random_state
        self.supported_model_types = {
            "xgboost": {"classifier": XGBClassifier, "regressor": XGBRegressor},
            "random_forest": {"classifier": RandomForestClassifier, "regressor": RandomForestRegressor},
            "logistic_regression": {"classifier": LogisticRegression},
            "kmeans": {"clusterer": KMeans},
        }

    def build_estimator(
        self,
        model_type: ModelType,
        task_type: TaskType = "classification",
        hyperparameters: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Create an unfitted estimator with default hyperparameters merged with overrides.

        Raises:
            ValueError: If model_type or task_type is not supported
        """
        if model_type not in self.supported_model_types:
            raise ValueError(f"Unsupported model type: {model_type}")
        if task_type not in _TASK_KEYS:
            raise ValueError(f"Unsupported task type: {task_type}")

        model_class = self.supported_model_types[model_type].get(_TASK_KEYS[task_type])
        if model_class is None:
            raise ValueError(f"Model type {model_type} does not support {task_type}")

        params = {**self._get_default_hyperparameters(model_type, task_type), **(hyperparameters or {})}
        return model_class(**params)

    def train_model(
        self,
        dataset: TrainingDataset,
        model_type: ModelType,
        task_type: TaskType = "classification",
        hyperparameters: Optional[Dict[str, Any]] = None,
        preprocessor: Optional[Any] = None,
    ) -> Any:
        """
        Train a model from a training dataset.

        Args:
            dataset: TrainingDataset with features and labels
            model_type: Type of model to train
            task_type: 'classification', 'regression' or 'clustering'
            hyperparameters: Optional hyperparameters for the model
            preprocessor: Optional scikit-learn transformer applied before the model

        Returns:
            Trained model, a Pipeline when a preprocessor is given

        Raises:
            ValueError: If model_type or task_type is not supported
            ModelTrainingError: If fitting fails or labels are missing for a supervised task
        """
        logger.info(
            "Starting model training",
            model_type=model_type,
            task_type=task_type,
            dataset_size=dataset.get_record_count(),
            feature_count=len(dataset.get_feature_names()),
        )

        dataset.validate_consistency()
        if task_type != "clustering" and dataset.labels is None:
            raise ModelTrainingError(f"Task {task_type} requires labels")

        estimator = self.build_estimator(model_type, task_type, hyperparameters)
        model = Pipeline([("preprocess", preprocessor), ("model", estimator)]) if preprocessor is not None else estimator

        X = dataset.features
        y = dataset.labels if task_type != "clustering" else None

        if task_type == "classification" and y is not None and y.nunique() < 2:
            logger.warning(
                "All labels are identical - model may not learn effectively",
                unique_label=y.iloc[0],
                dataset_size=len(y),
            )

        try:
            model.fit(X, y)
        except Exception as e:
            logger.error("Model training failed", model_type=model_type, error=str(e), exc_info=True)
            raise ModelTrainingError(f"Training {model_type} failed: {e}") from e

        logger.info(
            "Model training completed",
            model_type=model_type,
            task_type=task_type,
            dataset_size=dataset.get_record_count(),
        )
        return model

    def cross_validate(
        self,
        dataset: TrainingDataset,
        model_type: ModelType,
        task_type: TaskType = "classification",
        hyperparameters: Optional[Dict[str, Any]] = None,
        preprocessor: Optional[Any] = None,
        folds: Optional[int] = None,
        scoring: str = "roc_auc",
    ) -> List[float]:
        """
        K-fold cross validation of a (preprocessor, model) pipeline.

        Classification uses stratified folds. Returns one score per fold.
        """
        folds = settings.model_cv_folds if folds is None else folds
        if dataset.labels is None:
            raise ModelTrainingError("Cross validation requires labels")

        estimator = self.build_estimator(model_type, task_type, hyperparameters)
        model = Pipeline([("preprocess", clone(preprocessor)), ("model", estimator)]) if preprocessor is not None else estimator

        if task_type == "classification":
            splitter = StratifiedKFold(n_splits=folds, shuffle=True, random_state=self.random_state)
        else:
            splitter = KFold(n_splits=folds, shuffle=True, random_state=self.random_state)

        try:
            scores = cross_val_score(model, dataset.features, dataset.labels, cv=splitter, scoring=scoring)
        except ValueError as e:
            raise ModelTrainingError(f"Cross validation failed: {e}") from e

        scores_list = [float(s) for s in scores]
        logger.info(
            "Cross validation completed",
            model_type=model_type,
            folds=folds,
            scoring=scoring,
            mean_score=round(float(np.mean(scores_list)), 4),
        )
        return scores_list

    def _get_default_hyperparameters(self, model_type: str, task_type: str) -> Dict[str, Any]:
        """
        Get default hyperparameters for a model type.

        Args:
            model_type: Type of model
            task_type: Type of task

        Returns:
            Dictionary of default hyperparameters
        """
        seed = self.random_state
        defaults = {
            "xgboost": {
                "classification": {
                    "n_estimators": 100,
                    "max_depth": 6,
                    "learning_rate": 0.2,
                    "subsample": 1.0,
                    "random_state": seed,
                },
                "regression": {
                    "n_estimators": 100,
                    "max_depth": 6,
                    "learning_rate": 0.1,
                    "subsample": 0.8,
                    "colsample_bytree": 0.8,
                    "random_state": seed,
                },
            },
            "random_forest": {
                "classification": {
                    "n_estimators": 100,
                    "max_depth": 10,
                    "random_state": seed,
                },
                "regression": {
                    "n_estimators": 100,
                    "max_depth": 10,
                    "random_state": seed,
                },
            },
            "logistic_regression": {
                "classification": {
                    "max_iter": 1000,
                    "random_state": seed,
                },
            },
            "kmeans": {
                "clustering": {
                    "n_clusters": 3,
                    "n_init": 10,
                    "random_state": seed,
                },
            },
        }
        return dict(defaults.get(model_type, {}).get(task_type, {}))

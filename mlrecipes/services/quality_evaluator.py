"""
Model quality evaluator.

Calculates binary classification, multiclass classification, regression
and clustering metrics for model evaluation.
"""

from typing import Dict, Optional, Sequence
import pandas as pd
import numpy as np
from sklearn.metrics import (
    accuracy_score,
    average_precision_score,
    balanced_accuracy_score,
    davies_bouldin_score,
    f1_score,
    log_loss,
    mean_absolute_error,
    mean_squared_error,
    precision_score,
    r2_score,
    recall_score,
    roc_auc_score,
)

from ..config.logging import get_logger

logger = get_logger(__name__)

# Probabilities are clipped before log loss so a single confident miss stays finite.
_PROBA_EPS = 1e-15


class QualityEvaluator:
    """Evaluates model quality using various metrics."""

    def evaluate(
        self,
        y_true: pd.Series,
        y_pred: Sequence,
        y_pred_proba: Optional[np.ndarray] = None,
        task_type: str = "binary",
        labels: Optional[Sequence] = None,
    ) -> Dict[str, float]:
        """
        Evaluate model quality using appropriate metrics.

        Args:
            y_true: True labels / values
            y_pred: Predicted labels / values
            y_pred_proba: Predicted probabilities; positive-class column for
                'binary', an (n, n_classes) matrix for 'multiclass'
            task_type: 'binary', 'multiclass' or 'regression'
            labels: Class labels in probability-column order (multiclass)

        Returns:
            Dictionary of metric names to values
        """
        if task_type == "binary":
            metrics = self._evaluate_binary(pd.Series(y_true), pd.Series(y_pred), y_pred_proba)
        elif task_type == "multiclass":
            metrics = self._evaluate_multiclass(pd.Series(y_true), pd.Series(y_pred), y_pred_proba, labels)
        elif task_type == "regression":
            metrics = self._evaluate_regression(pd.Series(y_true), pd.Series(y_pred))
        else:
            raise ValueError(f"Unknown task type: {task_type}")

        logger.info("Model quality evaluation completed", metric_count=len(metrics), task_type=task_type)
        return metrics

    def _evaluate_binary(
        self, y_true: pd.Series, y_pred: pd.Series, y_pred_proba: Optional[np.ndarray] = None
    ) -> Dict[str, float]:
        """
        Evaluate binary classification model.

        Labels are treated as booleans; True is the positive class.
        """
        y_true = y_true.astype(bool)
        y_pred = y_pred.astype(bool)

        metrics = {
            "accuracy": float(accuracy_score(y_true, y_pred)),
            "f1_score": float(f1_score(y_true, y_pred, zero_division=0)),
            "positive_precision": float(precision_score(y_true, y_pred, pos_label=True, zero_division=0)),
            "positive_recall": float(recall_score(y_true, y_pred, pos_label=True, zero_division=0)),
            "negative_precision": float(precision_score(y_true, y_pred, pos_label=False, zero_division=0)),
            "negative_recall": float(recall_score(y_true, y_pred, pos_label=False, zero_division=0)),
        }

        if y_pred_proba is None:
            return metrics

        proba = np.clip(np.asarray(y_pred_proba, dtype=np.float64).ravel(), _PROBA_EPS, 1 - _PROBA_EPS)
        if y_true.nunique() > 1:
            metrics["auc"] = float(roc_auc_score(y_true, proba))
            metrics["auprc"] = float(average_precision_score(y_true, proba))
        else:
            logger.warning("Only one class present in y_true, AUC is undefined")
            metrics["auc"] = 0.0
            metrics["auprc"] = 0.0

        metrics["log_loss"] = float(log_loss(y_true, proba, labels=[False, True]))
        prior = float(np.clip(y_true.mean(), _PROBA_EPS, 1 - _PROBA_EPS))
        prior_log_loss = float(log_loss(y_true, np.full(len(y_true), prior), labels=[False, True]))
        metrics["log_loss_reduction"] = self._log_loss_reduction(metrics["log_loss"], prior_log_loss)
        return metrics

    def _evaluate_multiclass(
        self,
        y_true: pd.Series,
        y_pred: pd.Series,
        y_pred_proba: Optional[np.ndarray] = None,
        labels: Optional[Sequence] = None,
    ) -> Dict[str, float]:
        """
        Evaluate multiclass classification model.

        Micro accuracy is the fraction of correct predictions; macro accuracy
        averages the per-class accuracy (recall) so small classes weigh the same.
        """
        metrics = {
            "micro_accuracy": float(accuracy_score(y_true, y_pred)),
            "macro_accuracy": float(balanced_accuracy_score(y_true, y_pred)),
        }

        if y_pred_proba is None:
            return metrics

        proba = np.clip(np.asarray(y_pred_proba, dtype=np.float64), _PROBA_EPS, 1.0)
        proba = proba / proba.sum(axis=1, keepdims=True)
        class_labels = list(labels) if labels is not None else sorted(y_true.unique())
        metrics["log_loss"] = float(log_loss(y_true, proba, labels=class_labels))

        prior = y_true.value_counts(normalize=True).reindex(class_labels, fill_value=0.0).to_numpy()
        prior = np.clip(prior, _PROBA_EPS, 1.0)
        prior = prior / prior.sum()
        prior_log_loss = float(log_loss(y_true, np.tile(prior, (len(y_true), 1)), labels=class_labels))
        metrics["log_loss_reduction"] = self._log_loss_reduction(metrics["log_loss"], prior_log_loss)
        return metrics

    def _evaluate_regression(self, y_true: pd.Series, y_pred: pd.Series) -> Dict[str, float]:
        """
        Evaluate regression model.

        Args:
            y_true: True values
            y_pred: Predicted values

        Returns:
            Dictionary of regression metrics
        """
        metrics = {}

        metrics["mse"] = float(mean_squared_error(y_true, y_pred))
        metrics["mae"] = float(mean_absolute_error(y_true, y_pred))
        metrics["rmse"] = float(np.sqrt(metrics["mse"]))

        if len(y_true) > 1:
            metrics["r2_score"] = float(r2_score(y_true, y_pred))
        else:
            logger.warning("R2 score needs at least two samples")
            metrics["r2_score"] = 0.0

        return metrics

    def evaluate_clustering(
        self, features: np.ndarray, labels: np.ndarray, centers: np.ndarray
    ) -> Dict[str, float]:
        """
        Evaluate a clustering.

        average_distance is the mean squared Euclidean distance of each point
        to its assigned centroid.
        """
        X = np.asarray(features, dtype=np.float64)
        assigned = np.asarray(centers, dtype=np.float64)[np.asarray(labels)]
        metrics = {"average_distance": float(np.mean(np.sum((X - assigned) ** 2, axis=1)))}

        n_clusters = len(np.unique(labels))
        if 1 < n_clusters < len(X):
            metrics["davies_bouldin_index"] = float(davies_bouldin_score(X, labels))
        else:
            logger.warning("Davies-Bouldin index undefined", cluster_count=n_clusters, sample_count=len(X))
            metrics["davies_bouldin_index"] = 0.0

        logger.info("Clustering evaluation completed", cluster_count=n_clusters)
        return metrics

    @staticmethod
    def _log_loss_reduction(model_log_loss: float, prior_log_loss: float) -> float:
        """Relative improvement of the model's log loss over predicting the class prior."""
        if prior_log_loss <= 0:
            return 0.0
        return float((prior_log_loss - model_log_loss) / prior_log_loss)

"""
Recipe base class.

A recipe is one stand-alone program: load a dataset, build a pipeline from
library primitives, fit it, evaluate it and print a report.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..config.settings import settings
from ..config.logging import bind_context, clear_context, get_logger
from ..services.console_table import ConsoleTable
from ..services.data_loader import DatasetLoader
from ..services.model_trainer import ModelTrainer
from ..services.quality_evaluator import QualityEvaluator

logger = get_logger(__name__)

BINARY_METRICS = [
    "accuracy",
    "auc",
    "auprc",
    "f1_score",
    "log_loss",
    "log_loss_reduction",
    "positive_precision",
    "positive_recall",
    "negative_precision",
    "negative_recall",
]


class RecipeResult(BaseModel):
    """What a recipe run produced: metrics plus recipe-specific details."""

    recipe: str
    metrics: Dict[str, float] = Field(default_factory=dict)
    details: Dict[str, Any] = Field(default_factory=dict)


class Recipe(ABC):
    """Base class for all recipes."""

    name: str = ""
    description: str = ""

    def __init__(
        self,
        data_dir: Optional[Union[str, Path]] = None,
        trainer: Optional[ModelTrainer] = None,
        evaluator: Optional[QualityEvaluator] = None,
        output: Callable[[str], None] = print,
    ):
        self.loader = DatasetLoader(data_dir)
        self.trainer = trainer or ModelTrainer()
        self.evaluator = evaluator or QualityEvaluator()
        self.output = output
        self.random_state = settings.mlrecipes_random_state

    def run(self) -> RecipeResult:
        """Run the recipe with its name bound to the logging context."""
        bind_context(recipe=self.name)
        try:
            logger.info("Running recipe", data_dir=str(self.loader.data_dir))
            result = self.execute()
            logger.info("Recipe finished", metric_count=len(result.metrics))
            return result
        finally:
            clear_context()

    @abstractmethod
    def execute(self) -> RecipeResult:
        """Load, fit, evaluate and report; called by run() inside the logging context."""

    # reporting helpers

    def say(self, message: str = "") -> None:
        self.output(message)

    def report_metrics(self, metrics: Dict[str, float], keys: List[str], title: str = "Model metrics:") -> None:
        labels = {
            "rmse": "RMSE",
            "mse": "MSE",
            "mae": "MAE",
            "r2_score": "R2",
            "auc": "Auc",
            "auprc": "Auprc",
            "f1_score": "F1Score",
            "log_loss": "LogLoss",
            "log_loss_reduction": "LogLossReduction",
            "accuracy": "Accuracy",
            "positive_precision": "PositivePrecision",
            "positive_recall": "PositiveRecall",
            "negative_precision": "NegativePrecision",
            "negative_recall": "NegativeRecall",
            "micro_accuracy": "MicroAccuracy",
            "macro_accuracy": "MacroAccuracy",
            "average_distance": "Average distance",
            "davies_bouldin_index": "Davies Bouldin index",
        }
        self.say(title)
        width = max(len(labels.get(k, k)) for k in keys) + 1
        for key in keys:
            if key in metrics:
                self.say(f"  {labels.get(key, key) + ':':<{width}} {metrics[key]:.4f}")
        self.say()

    def report_table(self, table: ConsoleTable) -> None:
        self.say(table.render())

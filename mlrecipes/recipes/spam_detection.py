"""
Spam detection: text featurization and logistic regression.

Runs k-fold cross validation on the training partition before fitting the
final model.
"""

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.feature_extraction.text import TfidfVectorizer

from ..models.training_dataset import TrainingDataset
from ..services.data_loader import ColumnSpec, DatasetSpec, train_test_split_frame
from .base import BINARY_METRICS, Recipe, RecipeResult

SPAM_DATASET = DatasetSpec(
    filename="spam.tsv",
    columns=[
        ColumnSpec(name="raw_label", index=0, dtype="str"),
        ColumnSpec(name="message", index=1, dtype="str"),
    ],
    separator="\t",
)

SAMPLE_MESSAGES = [
    "Hi, wanna grab lunch together today?",
    "Win a Nokia, PSP, or €25 every week. Txt YEAHIWANNA now to join",
    "Home in 30 mins. Need anything from store?",
    "CONGRATS U WON LOTERY CLAIM UR 1 MILIONN DOLARS PRIZE",
]


def build_preprocessor() -> ColumnTransformer:
    return ColumnTransformer(transformers=[("text", TfidfVectorizer(), "message")])


class SpamDetectionRecipe(Recipe):
    name = "spam-detection"
    description = "Classify SMS messages as spam with tf-idf features and logistic regression"

    def execute(self) -> RecipeResult:
        data = self.loader.load(SPAM_DATASET)
        data["label"] = (data["raw_label"].str.strip().str.lower() == "spam").astype(int)
        train, test = train_test_split_frame(data)

        dataset = TrainingDataset(recipe=self.name, features=train[["message"]], labels=train["label"])

        self.say("Performing cross validation...")
        fold_aucs = self.trainer.cross_validate(
            dataset,
            model_type="logistic_regression",
            task_type="classification",
            preprocessor=build_preprocessor(),
            scoring="roc_auc",
        )
        for fold, auc in enumerate(fold_aucs):
            self.say(f"  Fold: {fold}, AUC: {auc:.4f}")
        average_auc = float(np.mean(fold_aucs))
        self.say(f"   Average AUC: {average_auc:.4f}")
        self.say()

        self.say("Training the model...")
        model = self.trainer.train_model(
            dataset,
            model_type="logistic_regression",
            task_type="classification",
            preprocessor=build_preprocessor(),
        )

        self.say("Evaluating the model...")
        probabilities = model.predict_proba(test[["message"]])[:, 1]
        metrics = self.evaluator.evaluate(
            test["label"], probabilities >= 0.5, y_pred_proba=probabilities, task_type="binary"
        )
        metrics["cv_average_auc"] = average_auc
        self.report_metrics(metrics, BINARY_METRICS)

        self.say("Predicting spam probabilities for a sample messages...")
        sample_probabilities = model.predict_proba(pd.DataFrame({"message": SAMPLE_MESSAGES}))[:, 1]
        for message, probability in zip(SAMPLE_MESSAGES, sample_probabilities):
            self.say(f"  [{probability:.2%}] {message}")

        return RecipeResult(
            recipe=self.name,
            metrics=metrics,
            details={
                "fold_aucs": fold_aucs,
                "sample_probabilities": [float(p) for p in sample_probabilities],
            },
        )

"""
Heart disease prediction: binary classification with boosted trees.
"""

import pandas as pd

from ..models.training_dataset import TrainingDataset
from ..services.data_loader import ColumnSpec, DatasetSpec, train_test_split_frame
from .base import BINARY_METRICS, Recipe, RecipeResult

FEATURES = [
    "age",
    "sex",
    "cp",
    "trestbps",
    "chol",
    "fbs",
    "restecg",
    "thalac",
    "exang",
    "oldpeak",
    "slope",
    "ca",
    "thal",
]

HEART_DATASET = DatasetSpec(
    filename="processed.cleveland.data.csv",
    columns=[ColumnSpec(name=name, index=position) for position, name in enumerate(FEATURES)]
    + [ColumnSpec(name="raw_label", index=13)],
    has_header=False,
    na_values=["?"],
)

SAMPLE_PATIENT = {
    "age": 36.0,
    "sex": 1.0,
    "cp": 4.0,
    "trestbps": 145.0,
    "chol": 210.0,
    "fbs": 0.0,
    "restecg": 2.0,
    "thalac": 148.0,
    "exang": 1.0,
    "oldpeak": 1.9,
    "slope": 2.0,
    "ca": 1.0,
    "thal": 7.0,
}


class HeartDiseaseRecipe(Recipe):
    name = "heart-disease"
    description = "Predict elevated heart disease risk from the Cleveland dataset"

    def execute(self) -> RecipeResult:
        self.say("Loading data...")
        data = self.loader.load(HEART_DATASET).dropna(subset=["raw_label"])
        data["label"] = data["raw_label"] > 0
        train, test = train_test_split_frame(data)

        dataset = TrainingDataset(recipe=self.name, features=train[FEATURES], labels=train["label"].astype(int))

        self.say("Training model...")
        model = self.trainer.train_model(dataset, model_type="xgboost", task_type="classification")

        self.say("Evaluating model...")
        probabilities = model.predict_proba(test[FEATURES])[:, 1]
        metrics = self.evaluator.evaluate(
            test["label"], probabilities >= 0.5, y_pred_proba=probabilities, task_type="binary"
        )
        self.report_metrics(metrics, BINARY_METRICS, title="Model metrics:")

        self.say("Making a prediction for a sample patient...")
        probability = float(model.predict_proba(pd.DataFrame([SAMPLE_PATIENT])[FEATURES])[0, 1])
        for key, value in SAMPLE_PATIENT.items():
            self.say(f"  {key}: {value}")
        self.say()
        risk = "Elevated heart disease risk" if probability >= 0.5 else "Normal heart disease risk"
        self.say(f"Prediction: {risk}")
        self.say(f"Probability: {probability:.2%}")

        return RecipeResult(recipe=self.name, metrics=metrics, details={"sample_probability": probability})

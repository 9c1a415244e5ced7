"""
Titanic survival prediction: missing-value imputation, one-hot encoding and boosted trees.
"""

import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.impute import SimpleImputer
from sklearn.preprocessing import OneHotEncoder

from ..models.training_dataset import TrainingDataset
from ..services.data_loader import ColumnSpec, DatasetSpec
from .base import BINARY_METRICS, Recipe, RecipeResult

PASSENGER_COLUMNS = [
    ColumnSpec(name="label", index=1, dtype="bool"),
    ColumnSpec(name="pclass", index=2),
    ColumnSpec(name="name", index=3, dtype="str"),
    ColumnSpec(name="sex", index=4, dtype="str"),
    ColumnSpec(name="raw_age", index=5, dtype="str"),
    ColumnSpec(name="sib_sp", index=6),
    ColumnSpec(name="parch", index=7),
    ColumnSpec(name="ticket", index=8, dtype="str"),
    ColumnSpec(name="fare", index=9),
    ColumnSpec(name="cabin", index=10, dtype="str"),
    ColumnSpec(name="embarked", index=11, dtype="str"),
]

TRAIN_DATASET = DatasetSpec(filename="train_data.csv", columns=PASSENGER_COLUMNS)
TEST_DATASET = DatasetSpec(filename="test_data.csv", columns=PASSENGER_COLUMNS)

FEATURES = ["age", "pclass", "sib_sp", "parch", "sex", "embarked"]

SAMPLE_PASSENGER = {
    "pclass": 1.0,
    "name": "Mark Farragher",
    "sex": "male",
    "raw_age": "48",
    "sib_sp": 0.0,
    "parch": 0.0,
    "ticket": "",
    "fare": 70.0,
    "cabin": "",
    "embarked": "S",
}


def prepare_passengers(df: pd.DataFrame) -> pd.DataFrame:
    """Drop unused text columns and parse ages; missing ages become NaN."""
    prepared = df.drop(columns=["name", "cabin", "ticket"])
    prepared["age"] = pd.to_numeric(prepared["raw_age"].str.strip(), errors="coerce")
    return prepared.drop(columns=["raw_age"])


def build_preprocessor() -> ColumnTransformer:
    return ColumnTransformer(
        transformers=[
            ("age", SimpleImputer(strategy="mean"), ["age"]),
            ("numeric", "passthrough", ["pclass", "sib_sp", "parch"]),
            ("onehot", OneHotEncoder(handle_unknown="ignore"), ["sex", "embarked"]),
        ]
    )


class TitanicRecipe(Recipe):
    name = "titanic"
    description = "Predict Titanic passenger survival"

    def execute(self) -> RecipeResult:
        self.say("Loading data...")
        train = prepare_passengers(self.loader.load(TRAIN_DATASET))
        test = prepare_passengers(self.loader.load(TEST_DATASET))

        dataset = TrainingDataset(recipe=self.name, features=train[FEATURES], labels=train["label"].astype(int))

        self.say("Training model...")
        model = self.trainer.train_model(
            dataset,
            model_type="xgboost",
            task_type="classification",
            preprocessor=build_preprocessor(),
        )

        self.say("Evaluating model...")
        probabilities = model.predict_proba(test[FEATURES])[:, 1]
        metrics = self.evaluator.evaluate(
            test["label"], probabilities >= 0.5, y_pred_proba=probabilities, task_type="binary"
        )
        self.report_metrics(metrics, BINARY_METRICS)

        self.say("Making a prediction...")
        passenger = prepare_passengers(pd.DataFrame([SAMPLE_PASSENGER]))
        probability = float(model.predict_proba(passenger[FEATURES])[0, 1])
        self.say(f"Passenger:   {SAMPLE_PASSENGER['name']}")
        self.say(f"Prediction:  {'survived' if probability >= 0.5 else 'perished'}")
        self.say(f"Probability: {probability:.4f}")

        return RecipeResult(recipe=self.name, metrics=metrics, details={"sample_probability": probability})

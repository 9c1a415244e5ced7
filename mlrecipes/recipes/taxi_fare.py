"""
Taxi fare prediction: regression with boosted trees.
"""

import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.preprocessing import OneHotEncoder

from ..models.training_dataset import TrainingDataset
from ..services.data_loader import ColumnSpec, DatasetSpec, train_test_split_frame
from .base import Recipe, RecipeResult

TAXI_DATASET = DatasetSpec(
    filename="yellow_tripdata_2018-12.csv",
    columns=[
        ColumnSpec(name="vendor_id", index=0, dtype="str"),
        ColumnSpec(name="rate_code", index=5, dtype="str"),
        ColumnSpec(name="passenger_count", index=3),
        ColumnSpec(name="trip_distance", index=4),
        ColumnSpec(name="payment_type", index=9, dtype="str"),
        ColumnSpec(name="fare_amount", index=10),
    ],
)

CATEGORICAL_FEATURES = ["vendor_id", "rate_code", "payment_type"]
NUMERIC_FEATURES = ["passenger_count", "trip_distance"]
LABEL = "fare_amount"

SAMPLE_TRIP = {
    "vendor_id": "2",
    "rate_code": "1",
    "passenger_count": 1.0,
    "trip_distance": 3.75,
    "payment_type": "1",
}


def build_preprocessor() -> ColumnTransformer:
    return ColumnTransformer(
        transformers=[
            ("onehot", OneHotEncoder(handle_unknown="ignore"), CATEGORICAL_FEATURES),
            ("numeric", "passthrough", NUMERIC_FEATURES),
        ]
    )


class TaxiFareRecipe(Recipe):
    name = "taxi-fare"
    description = "Predict taxi fares with one-hot encoded trip features and boosted trees"

    def execute(self) -> RecipeResult:
        self.say("Loading training data....")
        data = self.loader.load(TAXI_DATASET).dropna(subset=NUMERIC_FEATURES + [LABEL])
        train, test = train_test_split_frame(data)

        features = CATEGORICAL_FEATURES + NUMERIC_FEATURES
        dataset = TrainingDataset(recipe=self.name, features=train[features], labels=train[LABEL])

        self.say("Training the model....")
        model = self.trainer.train_model(
            dataset,
            model_type="xgboost",
            task_type="regression",
            preprocessor=build_preprocessor(),
        )

        self.say("Evaluating the model....")
        predictions = model.predict(test[features])
        metrics = self.evaluator.evaluate(test[LABEL], predictions, task_type="regression")
        self.report_metrics(metrics, ["rmse", "mse", "mae"])

        predicted_fare = float(model.predict(pd.DataFrame([SAMPLE_TRIP]))[0])
        self.say("Single prediction:")
        self.say(f"  Predicted fare: {predicted_fare:.4f}")

        return RecipeResult(recipe=self.name, metrics=metrics, details={"sample_prediction": predicted_fare})

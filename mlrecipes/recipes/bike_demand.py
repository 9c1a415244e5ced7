"""
Bike demand prediction: regression with a random forest.
"""

import pandas as pd

from ..models.training_dataset import TrainingDataset
from ..services.data_loader import ColumnSpec, DatasetSpec, train_test_split_frame
from .base import Recipe, RecipeResult

FEATURES = [
    "season",
    "year",
    "month",
    "hour",
    "holiday",
    "weekday",
    "working_day",
    "weather",
    "temperature",
    "normalized_temperature",
    "humidity",
    "windspeed",
]
LABEL = "count"

BIKE_DATASET = DatasetSpec(
    filename="bikedemand.csv",
    columns=[ColumnSpec(name=name, index=position) for position, name in enumerate(FEATURES, start=2)]
    + [ColumnSpec(name=LABEL, index=16)],
)

FOREST_HYPERPARAMETERS = {
    "n_estimators": 100,
    "max_leaf_nodes": 20,
    "min_samples_leaf": 10,
    "max_depth": None,
}

SAMPLE_OBSERVATION = {
    "season": 3,
    "year": 1,
    "month": 8,
    "hour": 10,
    "holiday": 0,
    "weekday": 4,
    "working_day": 1,
    "weather": 1,
    "temperature": 0.8,
    "normalized_temperature": 0.7576,
    "humidity": 0.55,
    "windspeed": 0.2239,
}


class BikeDemandRecipe(Recipe):
    name = "bike-demand"
    description = "Predict hourly bike rental demand with a random forest"

    def execute(self) -> RecipeResult:
        self.say("Loading data...")
        data = self.loader.load(BIKE_DATASET).dropna()
        train, test = train_test_split_frame(data)

        dataset = TrainingDataset(recipe=self.name, features=train[FEATURES], labels=train[LABEL])

        self.say("Training the model...")
        model = self.trainer.train_model(
            dataset,
            model_type="random_forest",
            task_type="regression",
            hyperparameters=FOREST_HYPERPARAMETERS,
        )

        self.say("Evaluating the model...")
        predictions = model.predict(test[FEATURES])
        metrics = self.evaluator.evaluate(test[LABEL], predictions, task_type="regression")
        self.report_metrics(metrics, ["rmse", "mse", "mae"])

        self.say("Making a prediction...")
        predicted_count = float(model.predict(pd.DataFrame([SAMPLE_OBSERVATION])[FEATURES])[0])
        self.say(f"   {predicted_count:.2f}")

        return RecipeResult(recipe=self.name, metrics=metrics, details={"sample_prediction": predicted_count})

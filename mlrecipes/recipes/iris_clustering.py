"""
Iris flower clustering with k-means.
"""

from ..models.training_dataset import TrainingDataset
from ..services.data_loader import ColumnSpec, DatasetSpec, train_test_split_frame
from .base import Recipe, RecipeResult

FEATURES = ["sepal_length", "sepal_width", "petal_length", "petal_width"]

IRIS_DATASET = DatasetSpec(
    filename="iris-data.csv",
    columns=[ColumnSpec(name=name, index=position) for position, name in enumerate(FEATURES)]
    + [ColumnSpec(name="label", index=4, dtype="str")],
    has_header=False,
)

CLUSTER_COUNT = 3
PREVIEW_INDICES = [0, 10, 20]


class IrisClusteringRecipe(Recipe):
    name = "iris-clustering"
    description = "Cluster iris flowers into three groups with k-means"

    def execute(self) -> RecipeResult:
        self.say("Loading data...")
        data = self.loader.load(IRIS_DATASET).dropna(subset=FEATURES)
        train, test = train_test_split_frame(data)

        dataset = TrainingDataset(recipe=self.name, features=train[FEATURES])

        self.say("Training model...")
        model = self.trainer.train_model(
            dataset,
            model_type="kmeans",
            task_type="clustering",
            hyperparameters={"n_clusters": CLUSTER_COUNT},
        )

        self.say("Evaluating model...")
        test_features = test[FEATURES].to_numpy()
        assignments = model.predict(test[FEATURES])
        metrics = self.evaluator.evaluate_clustering(test_features, assignments, model.cluster_centers_)
        self.report_metrics(metrics, ["average_distance", "davies_bouldin_index"], title="Evaluation metrics:")

        self.say("Predicting 3 flowers from the test set...")
        predictions = []
        for index in PREVIEW_INDICES:
            if index >= len(test):
                continue
            flower = test.iloc[index]
            cluster = int(assignments[index])
            predictions.append({"index": index, "label": flower["label"], "cluster": cluster})
            self.say(f"  Flower: {flower['label']}, prediction: {cluster}")

        return RecipeResult(recipe=self.name, metrics=metrics, details={"predictions": predictions})

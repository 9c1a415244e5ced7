"""
Handwritten digit recognition: multiclass classification on MNIST pixel values.
"""

from ..models.training_dataset import TrainingDataset
from ..services.console_table import ConsoleTable
from ..services.data_loader import ColumnSpec, DatasetSpec
from .base import Recipe, RecipeResult

PIXEL_COUNT = 784
PIXELS = [f"pixel_{i}" for i in range(PIXEL_COUNT)]
LABEL = "number"

DIGIT_COLUMNS = [ColumnSpec(name=LABEL, index=0)] + [
    ColumnSpec(name=name, index=position) for position, name in enumerate(PIXELS, start=1)
]

TRAIN_DATASET = DatasetSpec(filename="mnist_train.csv", columns=DIGIT_COLUMNS)
TEST_DATASET = DatasetSpec(filename="mnist_test.csv", columns=DIGIT_COLUMNS)

PREVIEW_INDICES = [5, 16, 28, 63, 129]


class DigitRecognitionRecipe(Recipe):
    name = "digit-recognition"
    description = "Recognize handwritten digits with multinomial logistic regression"

    def execute(self) -> RecipeResult:
        self.say("Loading data...")
        train = self.loader.load(TRAIN_DATASET).fillna(0.0)
        test = self.loader.load(TEST_DATASET).fillna(0.0)
        train[LABEL] = train[LABEL].astype(int)
        test[LABEL] = test[LABEL].astype(int)

        dataset = TrainingDataset(recipe=self.name, features=train[PIXELS] / 255.0, labels=train[LABEL])

        self.say("Training model...")
        model = self.trainer.train_model(dataset, model_type="logistic_regression", task_type="classification")

        self.say("Evaluating model...")
        test_features = test[PIXELS] / 255.0
        predictions = model.predict(test_features)
        probabilities = model.predict_proba(test_features)
        metrics = self.evaluator.evaluate(
            test[LABEL],
            predictions,
            y_pred_proba=probabilities,
            task_type="multiclass",
            labels=list(model.classes_),
        )
        self.report_metrics(
            metrics, ["micro_accuracy", "macro_accuracy", "log_loss", "log_loss_reduction"], title="Evaluation metrics:"
        )

        classes = [int(c) for c in model.classes_]
        table = ConsoleTable("Digit", *[f"P{digit}" for digit in range(10)])
        preview = []
        for index in PREVIEW_INDICES:
            if index >= len(test):
                continue
            by_class = dict(zip(classes, probabilities[index]))
            row = [round(float(by_class.get(digit, 0.0)), 2) for digit in range(10)]
            table.add_row(int(test[LABEL].iloc[index]), *row)
            preview.append({"index": index, "digit": int(test[LABEL].iloc[index]), "probabilities": row})
        self.report_table(table)

        return RecipeResult(recipe=self.name, metrics=metrics, details={"preview": preview})

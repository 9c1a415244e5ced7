"""
End-to-end recipe runs over small synthetic datasets.
"""
import math

import pytest

from mlrecipes.config.exceptions import DatasetNotFoundError, RecipeNotFoundError
from mlrecipes.recipes import RECIPES, get_recipe
from mlrecipes.recipes.base import Recipe
from mlrecipes.recipes.bike_demand import BikeDemandRecipe
from mlrecipes.recipes.california_housing import CaliforniaHousingRecipe
from mlrecipes.recipes.digit_recognition import DigitRecognitionRecipe
from mlrecipes.recipes.heart_disease import HeartDiseaseRecipe
from mlrecipes.recipes.iris_clustering import IrisClusteringRecipe
from mlrecipes.recipes.movie_recommender import MovieRecommenderRecipe
from mlrecipes.recipes.sales_spikes import SalesSpikesRecipe
from mlrecipes.recipes.spam_detection import SpamDetectionRecipe
from mlrecipes.recipes.taxi_fare import TaxiFareRecipe
from mlrecipes.recipes.titanic import TitanicRecipe


def run(recipe_class, data_dir, trainer, output):
    return recipe_class(data_dir=data_dir, trainer=trainer, output=output.append).run()


def test_registry_has_every_recipe():
    assert sorted(RECIPES) == [
        "bike-demand",
        "california-housing",
        "digit-recognition",
        "heart-disease",
        "iris-clustering",
        "movie-recommender",
        "sales-spikes",
        "spam-detection",
        "taxi-fare",
        "titanic",
    ]
    assert get_recipe("titanic") is TitanicRecipe


def test_unknown_recipe():
    with pytest.raises(RecipeNotFoundError):
        get_recipe("weather-forecast")


def test_recipe_without_execute_cannot_be_created(data_dir):
    class Incomplete(Recipe):
        name = "incomplete"

    with pytest.raises(TypeError):
        Recipe(data_dir=data_dir)
    with pytest.raises(TypeError):
        Incomplete(data_dir=data_dir)


def test_missing_data_file(data_dir, trainer, captured_output):
    with pytest.raises(DatasetNotFoundError):
        run(CaliforniaHousingRecipe, data_dir, trainer, captured_output)


class TestCaliforniaHousing:
    """Location cross feature built end to end from the housing file."""

    def test_location_vectors(self, recipe_data_dir, trainer, captured_output):
        result = run(CaliforniaHousingRecipe, recipe_data_dir, trainer, captured_output)

        assert result.details["record_count"] == 58
        assert result.details["cross_width"] == 100
        preview = result.details["location_preview"]
        assert len(preview) == 10
        for digits in preview:
            assert len(digits) == 100
            assert digits.count("1") == 1
            assert digits.count("0") == 99

    def test_columns(self, recipe_data_dir, trainer, captured_output):
        columns = run(CaliforniaHousingRecipe, recipe_data_dir, trainer, captured_output).details["columns"]

        assert "longitude" not in columns
        assert "latitude" not in columns
        assert "median_house_value" not in columns
        assert "normalized_median_house_value" in columns
        assert "rooms_per_person" in columns
        assert "location_9_9" in columns

    def test_prints_location_table(self, recipe_data_dir, trainer, captured_output):
        run(CaliforniaHousingRecipe, recipe_data_dir, trainer, captured_output)

        table = [line for line in captured_output if "Location" in line]
        assert table
        assert any(line.startswith("┌") for line in "\n".join(captured_output).split("\n"))


@pytest.mark.parametrize("recipe_class", [TaxiFareRecipe, BikeDemandRecipe])
def test_regression_recipes(recipe_class, recipe_data_dir, trainer, captured_output):
    result = run(recipe_class, recipe_data_dir, trainer, captured_output)

    assert {"rmse", "mse", "mae"} <= set(result.metrics)
    assert result.metrics["rmse"] == pytest.approx(math.sqrt(result.metrics["mse"]))
    assert math.isfinite(result.details["sample_prediction"])
    assert any(line.strip().startswith("RMSE:") for line in captured_output)


@pytest.mark.parametrize("recipe_class", [HeartDiseaseRecipe, TitanicRecipe])
def test_binary_recipes(recipe_class, recipe_data_dir, trainer, captured_output):
    result = run(recipe_class, recipe_data_dir, trainer, captured_output)

    assert {"accuracy", "auc", "f1_score", "log_loss", "log_loss_reduction"} <= set(result.metrics)
    assert 0.0 <= result.details["sample_probability"] <= 1.0


def test_spam_detection(recipe_data_dir, trainer, captured_output):
    result = run(SpamDetectionRecipe, recipe_data_dir, trainer, captured_output)

    assert len(result.details["fold_aucs"]) == 5
    assert result.metrics["auc"] > 0.9
    assert len(result.details["sample_probabilities"]) == 4
    assert any("Average AUC" in line for line in captured_output)


def test_iris_clustering(recipe_data_dir, trainer, captured_output):
    result = run(IrisClusteringRecipe, recipe_data_dir, trainer, captured_output)

    assert result.metrics["average_distance"] < 0.5
    assert result.metrics["davies_bouldin_index"] > 0.0
    assert [p["index"] for p in result.details["predictions"]] == [0, 10, 20]
    assert all(p["cluster"] in (0, 1, 2) for p in result.details["predictions"])


def test_digit_recognition(recipe_data_dir, trainer, captured_output):
    result = run(DigitRecognitionRecipe, recipe_data_dir, trainer, captured_output)

    assert result.metrics["micro_accuracy"] >= 0.9
    assert "macro_accuracy" in result.metrics
    assert [row["index"] for row in result.details["preview"]] == [5, 16, 28]
    for row in result.details["preview"]:
        assert len(row["probabilities"]) == 10
    assert any("P9" in line for line in captured_output)


def test_movie_recommender(recipe_data_dir, trainer, captured_output):
    result = run(MovieRecommenderRecipe, recipe_data_dir, trainer, captured_output)

    assert {"rmse", "mse", "mae"} <= set(result.metrics)
    # user 999 never rated anything, so every movie scores the global mean
    assert result.details["top_movies"] == [
        "Toy Story (1995)",
        "Jumanji (1995)",
        "Grumpier Old Men (1995)",
        "Waiting to Exhale (1995)",
        "Father of the Bride Part II (1995)",
    ]
    assert any("GoldenEye (1995)" in line for line in captured_output)


def test_sales_spikes(recipe_data_dir, trainer, captured_output):
    result = run(SalesSpikesRecipe, recipe_data_dir, trainer, captured_output)

    assert result.details["history_length"] == 9
    assert isinstance(result.details["spike_months"], list)
    assert isinstance(result.details["change_point_months"], list)
    assert "Spike detection:" in captured_output
    assert "Change point detection:" in captured_output

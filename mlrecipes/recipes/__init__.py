"""
Recipe registry.
"""

from typing import Dict, Type

from ..config.exceptions import RecipeNotFoundError
from .base import Recipe, RecipeResult
from .bike_demand import BikeDemandRecipe
from .california_housing import CaliforniaHousingRecipe
from .digit_recognition import DigitRecognitionRecipe
from .heart_disease import HeartDiseaseRecipe
from .iris_clustering import IrisClusteringRecipe
from .movie_recommender import MovieRecommenderRecipe
from .sales_spikes import SalesSpikesRecipe
from .spam_detection import SpamDetectionRecipe
from .taxi_fare import TaxiFareRecipe
from .titanic import TitanicRecipe

RECIPES: Dict[str, Type[Recipe]] = {
    recipe.name: recipe
    for recipe in (
        CaliforniaHousingRecipe,
        TaxiFareRecipe,
        BikeDemandRecipe,
        HeartDiseaseRecipe,
        SpamDetectionRecipe,
        TitanicRecipe,
        IrisClusteringRecipe,
        DigitRecognitionRecipe,
        MovieRecommenderRecipe,
        SalesSpikesRecipe,
    )
}


def get_recipe(name: str) -> Type[Recipe]:
    """
    Look up a recipe class by name.

    Raises:
        RecipeNotFoundError: If no recipe is registered under the name
    """
    try:
        return RECIPES[name]
    except KeyError:
        raise RecipeNotFoundError(f"Unknown recipe: {name}. Available: {', '.join(sorted(RECIPES))}") from None


__all__ = ["RECIPES", "Recipe", "RecipeResult", "get_recipe"]

"""
Shared test fixtures for mlrecipes tests.
"""
import pytest

from mlrecipes.services.model_trainer import ModelTrainer

# Import all fixtures from fixtures modules so pytest can discover them
from tests.fixtures.datasets import (
    data_dir,
    recipe_data_dir,
)


@pytest.fixture
def trainer():
    """Model trainer with a fixed seed."""
    return ModelTrainer(random_state=0)


@pytest.fixture
def captured_output():
    """Collects what a recipe prints, one entry per line."""
    lines = []
    return lines

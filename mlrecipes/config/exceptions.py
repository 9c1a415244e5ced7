"""
Custom exception classes for mlrecipes.

Provides structured error handling with appropriate exception types
for different error scenarios.
"""


class MLRecipesError(Exception):
    """Base exception for all mlrecipes errors."""

    pass


class ConfigurationError(MLRecipesError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidArgumentError(MLRecipesError, ValueError):
    """Raised when an input vector or parameter is malformed (e.g. zero-length vector)."""

    pass


class DatasetError(MLRecipesError):
    """Raised when dataset operations fail."""

    pass


class DatasetNotFoundError(DatasetError):
    """Raised when a dataset file does not exist."""

    pass


class DatasetFormatError(DatasetError):
    """Raised when a dataset file cannot be parsed into the expected columns."""

    pass


class MovieNotFoundError(DatasetError):
    """Raised when a movie identifier is not in the catalog."""

    pass


class ModelTrainingError(MLRecipesError):
    """Raised when model training fails."""

    pass


class RecipeNotFoundError(MLRecipesError):
    """Raised when a recipe name is not registered."""

    pass

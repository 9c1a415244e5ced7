"""
Configuration management using pydantic-settings.

Loads configuration from environment variables with validation and type conversion.
"""

from pathlib import Path
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Runtime Configuration
    mlrecipes_log_level: str = Field(default="INFO", alias="MLRECIPES_LOG_LEVEL")
    mlrecipes_data_dir: str = Field(
        default="data",
        alias="MLRECIPES_DATA_DIR",
        description="Directory holding the recipe datasets (CSV/TSV files)",
    )
    mlrecipes_preview_rows: int = Field(
        default=10,
        alias="MLRECIPES_PREVIEW_ROWS",
        description="Maximum number of rows shown in transformed-data previews",
    )

    # Dataset Split Configuration
    mlrecipes_test_fraction: float = Field(
        default=0.2,
        alias="MLRECIPES_TEST_FRACTION",
        description="Fraction of records held out for evaluation when a recipe has a single data file",
    )
    mlrecipes_random_state: int = Field(default=42, alias="MLRECIPES_RANDOM_STATE")

    # Cross Feature Configuration
    cross_feature_bins: int = Field(
        default=10,
        alias="CROSS_FEATURE_BINS",
        description="Number of bins per crossed column (longitude x latitude uses 10 x 10)",
    )
    cross_feature_bin_strategy: str = Field(
        default="quantile",
        alias="CROSS_FEATURE_BIN_STRATEGY",
        description="Binning strategy: 'quantile' (equal density), 'uniform' (equal width) or 'kmeans'",
    )
    cross_feature_max_workers: int = Field(
        default=1,
        alias="CROSS_FEATURE_MAX_WORKERS",
        description="Thread pool size for batch crossing. 1 disables the pool.",
    )

    # Model Training Configuration
    model_cv_folds: int = Field(default=5, alias="MODEL_CV_FOLDS")

    @field_validator("mlrecipes_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}, got {v}")
        return v_upper

    @field_validator("cross_feature_bin_strategy")
    @classmethod
    def validate_bin_strategy(cls, v: str) -> str:
        """Validate binning strategy name."""
        valid_strategies = ["quantile", "uniform", "kmeans"]
        v_lower = v.lower()
        if v_lower not in valid_strategies:
            raise ValueError(f"Bin strategy must be one of {valid_strategies}, got {v}")
        return v_lower

    @property
    def data_path(self) -> Path:
        """Get the data directory as a Path."""
        return Path(self.mlrecipes_data_dir)

    def validate_on_startup(self) -> None:
        """
        Validate configuration on startup.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        from .exceptions import ConfigurationError

        errors: List[str] = []

        if not 0.0 < self.mlrecipes_test_fraction < 1.0:
            errors.append(
                f"MLRECIPES_TEST_FRACTION must be between 0.0 and 1.0 (exclusive), "
                f"got {self.mlrecipes_test_fraction}"
            )

        if self.mlrecipes_preview_rows <= 0:
            errors.append(f"MLRECIPES_PREVIEW_ROWS must be positive, got {self.mlrecipes_preview_rows}")

        if self.cross_feature_bins < 2:
            errors.append(f"CROSS_FEATURE_BINS must be at least 2, got {self.cross_feature_bins}")

        if self.cross_feature_max_workers < 1:
            errors.append(f"CROSS_FEATURE_MAX_WORKERS must be positive, got {self.cross_feature_max_workers}")

        if self.model_cv_folds < 2:
            errors.append(f"MODEL_CV_FOLDS must be at least 2, got {self.model_cv_folds}")

        if errors:
            error_message = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            raise ConfigurationError(error_message)


# Global settings instance
settings = Settings()

"""
Training Dataset data model.

A transient pairing of a feature DataFrame and its label Series, as handed
to the model trainer by a recipe.
"""

from datetime import datetime, timezone
from typing import Dict, Any, Optional, List
from uuid import uuid4
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TrainingDataset(BaseModel):
    """
    Training dataset data model.

    ``labels`` is optional so unsupervised recipes (clustering) can reuse
    the same container.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    dataset_id: str = Field(default_factory=lambda: str(uuid4()), description="Unique identifier for this dataset")
    recipe: str = Field(..., description="Name of the recipe that built this dataset")
    features: pd.DataFrame = Field(..., description="pandas DataFrame with feature columns")
    labels: Optional[pd.Series] = Field(default=None, description="pandas Series with target labels")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Free-form dataset metadata")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("features")
    @classmethod
    def validate_features(cls, v: pd.DataFrame) -> pd.DataFrame:
        """Validate features DataFrame is not empty."""
        if v.empty:
            raise ValueError("Features DataFrame cannot be empty")
        return v

    @field_validator("labels")
    @classmethod
    def validate_labels(cls, v: Optional[pd.Series]) -> Optional[pd.Series]:
        """Validate labels Series is not empty."""
        if v is not None and v.empty:
            raise ValueError("Labels Series cannot be empty")
        return v

    def validate_consistency(self) -> None:
        """
        Validate that features and labels have consistent dimensions.

        Raises:
            ValueError: If features and labels dimensions don't match
        """
        if self.labels is not None and len(self.features) != len(self.labels):
            raise ValueError(
                f"Features and labels must have the same length: "
                f"features={len(self.features)}, labels={len(self.labels)}"
            )

    def get_record_count(self) -> int:
        """Get the number of records in the dataset."""
        return len(self.features)

    def get_feature_names(self) -> List[str]:
        """Get the list of feature column names."""
        return list(self.features.columns)

    def to_dict(self) -> Dict[str, Any]:
        """Summary of the dataset without the DataFrame/Series payloads."""
        return {
            "dataset_id": self.dataset_id,
            "recipe": self.recipe,
            "metadata": {
                **self.metadata,
                "record_count": self.get_record_count(),
                "feature_names": self.get_feature_names(),
            },
            "created_at": self.created_at.isoformat(),
        }

"""
Categorical vector data models.

Plain named records for the inputs and outputs of feature crossing: one
encoded categorical vector, a per-record pair of them, and the outcome of
crossing one record inside a batch.
"""

from typing import List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CategoricalVector(BaseModel):
    """
    One-hot (or soft) encoding over K mutually exclusive bins.

    Length is fixed at construction; entries are non-negative. Exactly-one-hot
    is not enforced, soft encodings are accepted.
    """

    model_config = ConfigDict(frozen=True)

    values: List[float] = Field(..., description="Encoded values, one per bin")
    labels: Optional[List[str]] = Field(default=None, description="Optional bin labels, same length as values")

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: List[float]) -> List[float]:
        """Validate entries are non-negative."""
        if any(x < 0 for x in v):
            raise ValueError("Categorical vector entries must be non-negative")
        return v

    @model_validator(mode="after")
    def validate_labels_length(self) -> "CategoricalVector":
        if self.labels is not None and len(self.labels) != len(self.values):
            raise ValueError(
                f"labels and values must have the same length: labels={len(self.labels)}, values={len(self.values)}"
            )
        return self

    @classmethod
    def one_hot(cls, active: int, size: int, labels: Optional[List[str]] = None) -> "CategoricalVector":
        """Build a strictly one-hot vector with a single 1 at ``active``."""
        if not 0 <= active < size:
            raise ValueError(f"active index {active} out of range for size {size}")
        values = [0.0] * size
        values[active] = 1.0
        return cls(values=values, labels=labels)

    def __len__(self) -> int:
        return len(self.values)

    def to_array(self) -> np.ndarray:
        return np.asarray(self.values, dtype=np.float64)

    def is_one_hot(self) -> bool:
        """Check whether exactly one entry is 1 and the rest are 0."""
        return sum(1 for x in self.values if x == 1.0) == 1 and all(x in (0.0, 1.0) for x in self.values)


class CrossRecord(BaseModel):
    """The two encoded categorical vectors of a single input record."""

    model_config = ConfigDict(frozen=True)

    first: CategoricalVector
    second: CategoricalVector


class CrossResult(BaseModel):
    """
    Outcome of crossing one record inside a batch.

    Exactly one of ``vector`` and ``error`` is set.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    index: int = Field(..., description="Position of the record in the input batch")
    vector: Optional[np.ndarray] = Field(default=None, description="Cross feature vector on success")
    error: Optional[str] = Field(default=None, description="Error message on failure")

    @model_validator(mode="after")
    def validate_outcome(self) -> "CrossResult":
        if (self.vector is None) == (self.error is None):
            raise ValueError("exactly one of vector and error must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

"""
Movie data model.
"""

from pydantic import BaseModel, ConfigDict, Field


class Movie(BaseModel):
    """A single movie of the recommendation catalog."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Movie identifier")
    title: str = Field(..., description="Movie title (may contain commas)")

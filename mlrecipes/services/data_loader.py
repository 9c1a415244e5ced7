"""
Dataset loading utilities.

Loads delimited text files into pandas DataFrames, selecting columns by
position and naming them, and provides row filtering and train/test
partitioning.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd
from pydantic import BaseModel, Field, field_validator
from sklearn.model_selection import train_test_split

from ..config.settings import settings
from ..config.exceptions import DatasetError, DatasetFormatError, DatasetNotFoundError, InvalidArgumentError
from ..config.logging import get_logger

logger = get_logger(__name__)


class ColumnSpec(BaseModel):
    """One column to load: output name, zero-based source position and dtype."""

    name: str
    index: int = Field(..., ge=0)
    dtype: str = Field(default="float64", description="pandas dtype: 'float64', 'str', 'bool', ...")


class DatasetSpec(BaseModel):
    """Description of a delimited dataset file."""

    filename: str
    columns: List[ColumnSpec]
    has_header: bool = True
    separator: str = ","
    na_values: List[str] = Field(default_factory=list)

    @field_validator("columns")
    @classmethod
    def validate_columns(cls, v: List[ColumnSpec]) -> List[ColumnSpec]:
        """Validate column names and positions are unique."""
        if not v:
            raise ValueError("DatasetSpec requires at least one column")
        names = [c.name for c in v]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate column names: {names}")
        indices = [c.index for c in v]
        if len(set(indices)) != len(indices):
            raise ValueError(f"Duplicate column positions: {indices}")
        return v

    def dtypes(self) -> Dict[str, str]:
        return {c.name: c.dtype for c in self.columns}


class DatasetLoader:
    """Loads recipe datasets from a data directory."""

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        """
        Initialize dataset loader.

        Args:
            data_dir: Directory holding dataset files (defaults to MLRECIPES_DATA_DIR)
        """
        self.data_dir = Path(data_dir) if data_dir is not None else settings.data_path

    def resolve(self, filename: str) -> Path:
        """
        Resolve a dataset filename against the data directory.

        Raises:
            DatasetNotFoundError: If the file does not exist
        """
        path = Path(filename)
        if not path.is_absolute():
            path = self.data_dir / path
        if not path.is_file():
            raise DatasetNotFoundError(f"Dataset file not found: {path}")
        return path

    def load(self, spec: DatasetSpec) -> pd.DataFrame:
        """
        Load a dataset file as described by a DatasetSpec.

        Returns:
            DataFrame with one column per ColumnSpec, in spec order

        Raises:
            DatasetNotFoundError: If the file does not exist
            DatasetFormatError: If the file cannot be parsed into the requested columns
        """
        path = self.resolve(spec.filename)
        ordered = sorted(spec.columns, key=lambda c: c.index)

        try:
            df = pd.read_csv(
                path,
                sep=spec.separator,
                header=0 if spec.has_header else None,
                usecols=[c.index for c in ordered],
                na_values=spec.na_values or None,
                dtype=str,
                keep_default_na=True,
            )
        except (ValueError, pd.errors.ParserError) as e:
            raise DatasetFormatError(f"Cannot parse {path}: {e}") from e

        df.columns = [c.name for c in ordered]
        df = df[[c.name for c in spec.columns]]

        for column in spec.columns:
            df[column.name] = self._convert(df[column.name], column, path)

        logger.info(
            "Loaded dataset",
            path=str(path),
            record_count=len(df),
            columns=list(df.columns),
        )
        return df

    @staticmethod
    def _convert(series: pd.Series, column: ColumnSpec, path: Path) -> pd.Series:
        if column.dtype == "str":
            return series.fillna("")
        if column.dtype == "bool":
            lowered = series.str.strip().str.lower()
            mapping = {"1": True, "0": False, "true": True, "false": False}
            converted = lowered.map(mapping)
            if converted.isna().any():
                raise DatasetFormatError(f"Column {column.name} in {path} has non-boolean values")
            return converted.astype(bool)
        try:
            return pd.to_numeric(series.str.strip(), errors="coerce").astype(column.dtype)
        except (TypeError, ValueError) as e:
            raise DatasetFormatError(f"Column {column.name} in {path} cannot be converted to {column.dtype}: {e}") from e


def filter_rows_by_column(
    df: pd.DataFrame,
    column: str,
    lower_bound: Optional[float] = None,
    upper_bound: Optional[float] = None,
) -> pd.DataFrame:
    """Keep rows with ``lower_bound <= df[column] < upper_bound`` (either bound optional)."""
    if column not in df.columns:
        raise DatasetFormatError(f"Column not found: {column}")
    mask = pd.Series(True, index=df.index)
    if lower_bound is not None:
        mask &= df[column] >= lower_bound
    if upper_bound is not None:
        mask &= df[column] < upper_bound
    filtered = df.loc[mask].reset_index(drop=True)
    logger.debug("Filtered rows", column=column, kept=len(filtered), dropped=len(df) - len(filtered))
    return filtered


def train_test_split_frame(
    df: pd.DataFrame,
    test_fraction: Optional[float] = None,
    random_state: Optional[int] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Split a DataFrame into training and test partitions.

    Args:
        df: Dataset to split
        test_fraction: Fraction of rows in the test partition (defaults to MLRECIPES_TEST_FRACTION)
        random_state: Seed (defaults to MLRECIPES_RANDOM_STATE)
    """
    test_fraction = settings.mlrecipes_test_fraction if test_fraction is None else test_fraction
    random_state = settings.mlrecipes_random_state if random_state is None else random_state
    if not 0.0 < test_fraction < 1.0:
        raise InvalidArgumentError(f"test_fraction must be between 0 and 1, got {test_fraction}")
    if len(df) < 2:
        raise DatasetError(f"Need at least 2 records to split, got {len(df)}")

    train, test = train_test_split(df, test_size=test_fraction, random_state=random_state)
    return train.reset_index(drop=True), test.reset_index(drop=True)

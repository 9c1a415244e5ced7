"""
California housing: loading and transforming data.

Bins longitude and latitude into 10 buckets each, one-hot encodes both and
crosses them into a single 100-wide location feature.
"""

import numpy as np

from ..config.settings import settings
from ..services.console_table import ConsoleTable, format_vector_digits
from ..services.cross_feature_transformer import CrossFeatureTransformer
from ..services.data_loader import ColumnSpec, DatasetSpec, filter_rows_by_column
from .base import Recipe, RecipeResult

HOUSING_DATASET = DatasetSpec(
    filename="california_housing.csv",
    columns=[
        ColumnSpec(name="longitude", index=0),
        ColumnSpec(name="latitude", index=1),
        ColumnSpec(name="housing_median_age", index=2),
        ColumnSpec(name="total_rooms", index=3),
        ColumnSpec(name="total_bedrooms", index=4),
        ColumnSpec(name="population", index=5),
        ColumnSpec(name="households", index=6),
        ColumnSpec(name="median_income", index=7),
        ColumnSpec(name="median_house_value", index=8),
    ],
)

# capped values in the source data
MAX_HOUSE_VALUE = 499_999


class CaliforniaHousingRecipe(Recipe):
    name = "california-housing"
    description = "Bin and cross longitude x latitude into a one-hot location vector"

    def execute(self) -> RecipeResult:
        self.say("Loading data...")
        data = self.loader.load(HOUSING_DATASET)
        data = filter_rows_by_column(data, "median_house_value", upper_bound=MAX_HOUSE_VALUE)

        data["normalized_median_house_value"] = data["median_house_value"] / 1000
        rooms_per_person = data["total_rooms"] / data["population"]
        data["rooms_per_person"] = rooms_per_person.replace([np.inf, -np.inf], np.nan).fillna(0.0)

        transformer = CrossFeatureTransformer(
            first_column="longitude",
            second_column="latitude",
            n_bins=settings.cross_feature_bins,
            strategy=settings.cross_feature_bin_strategy,
            output_prefix="location",
            max_workers=settings.cross_feature_max_workers,
        )
        transformed = transformer.fit_transform(data).drop(columns=["median_house_value"])

        preview_rows = data.head(settings.mlrecipes_preview_rows)
        location_vectors = transformer.cross_vectors(preview_rows)
        location_preview = [format_vector_digits(v) for v in location_vectors]

        table = ConsoleTable("Location")
        for digits in location_preview:
            table.add_row(digits)
        self.report_table(table)

        return RecipeResult(
            recipe=self.name,
            details={
                "record_count": len(transformed),
                "cross_width": len(transformer.get_feature_names_out()),
                "columns": list(transformed.columns),
                "location_preview": location_preview,
            },
        )

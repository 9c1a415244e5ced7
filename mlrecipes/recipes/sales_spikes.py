"""
Shampoo sales anomalies: spike and change-point detection on a monthly series.
"""

from ..services.console_table import ConsoleTable
from ..services.data_loader import ColumnSpec, DatasetSpec
from ..services.spike_detector import detect_iid_change_points, detect_iid_spikes
from .base import Recipe, RecipeResult

SALES_DATASET = DatasetSpec(
    filename="shampoo-sales.csv",
    columns=[
        ColumnSpec(name="month", index=0, dtype="str"),
        ColumnSpec(name="sales", index=1),
    ],
)

CONFIDENCE = 95.0


class SalesSpikesRecipe(Recipe):
    name = "sales-spikes"
    description = "Detect spikes and change points in monthly shampoo sales"

    def execute(self) -> RecipeResult:
        self.say("Loading data...")
        data = self.loader.load(SALES_DATASET).dropna(subset=["sales"]).reset_index(drop=True)
        history_length = max(len(data) // 4, 2)

        spikes = detect_iid_spikes(data["sales"], confidence=CONFIDENCE, history_length=history_length)
        self.say("Spike detection:")
        self.report_table(self._alert_table(data, spikes, "Spike"))

        change_points = detect_iid_change_points(
            data["sales"], confidence=CONFIDENCE, change_history_length=history_length
        )
        self.say("Change point detection:")
        self.report_table(self._alert_table(data, change_points, "Change"))

        return RecipeResult(
            recipe=self.name,
            details={
                "history_length": history_length,
                "spike_months": data.loc[spikes["alert"] == 1, "month"].tolist(),
                "change_point_months": data.loc[change_points["alert"] == 1, "month"].tolist(),
            },
        )

    @staticmethod
    def _alert_table(data, detections, marker: str) -> ConsoleTable:
        table = ConsoleTable("Month", "Sales", "Alert", "P-Value")
        for month, row in zip(data["month"], detections.itertuples(index=False)):
            table.add_row(
                month,
                round(float(row.score), 2),
                f"{marker} <---" if row.alert else "",
                f"{row.p_value:.4f}",
            )
        return table

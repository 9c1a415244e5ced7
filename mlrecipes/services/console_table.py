"""
Console table rendering.

Unicode box-drawing tables for recipe reports and data previews.
"""

from typing import Any, List, Sequence

import numpy as np


def format_cell(value: Any) -> str:
    """Format one table cell; vectors are shown as ``<vector>``."""
    if isinstance(value, (np.ndarray, list, tuple)):
        return "<vector>"
    if isinstance(value, (float, np.floating)):
        return f"{float(value):g}"
    if value is None:
        return ""
    return str(value)


def format_vector_digits(vector: Sequence[float]) -> str:
    """Render a vector as its concatenated values, e.g. ``0010`` for a one-hot vector."""
    return "".join(f"{float(v):g}" for v in vector)


class ConsoleTable:
    """A table of string cells rendered with box-drawing characters."""

    def __init__(self, *headers: str):
        self.headers: List[str] = [str(h) for h in headers]
        self.rows: List[List[str]] = []

    def add_column(self, header: str) -> "ConsoleTable":
        if self.rows:
            raise ValueError("Cannot add a column after rows have been added")
        self.headers.append(str(header))
        return self

    def add_row(self, *values: Any) -> "ConsoleTable":
        if len(values) != len(self.headers):
            raise ValueError(f"Row has {len(values)} values, table has {len(self.headers)} columns")
        self.rows.append([format_cell(v) for v in values])
        return self

    def _widths(self) -> List[int]:
        widths = [len(h) for h in self.headers]
        for row in self.rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))
        return widths

    def render(self) -> str:
        if not self.headers:
            return ""
        widths = self._widths()

        def border(left: str, mid: str, right: str) -> str:
            return left + mid.join("─" * (w + 2) for w in widths) + right

        def line(cells: Sequence[str]) -> str:
            return "│" + "│".join(f" {cell:<{w}} " for cell, w in zip(cells, widths)) + "│"

        lines = [border("┌", "┬", "┐"), line(self.headers), border("├", "┼", "┤")]
        lines.extend(line(row) for row in self.rows)
        lines.append(border("└", "┴", "┘"))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

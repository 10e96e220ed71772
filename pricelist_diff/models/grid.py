from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Union

"""Grid and row domain models.

A grid is the rectangular shape produced by the spreadsheet codec: a list of
rows, row 0 holding the column labels. Cells stay loosely typed (text, number
or empty); all coercion lives in services/cells.py.
"""

__all__ = [
    "Cell",
    "Row",
    "Grid",
    "RowType",
    "YearNote",
    "ClassifiedRow",
    "YearBlock",
]

Cell = Union[str, int, float, None]
Row = list[Any]
Grid = list[Row]


class RowType(IntEnum):
    """Discriminator stored in column 0 of every data row."""
    SEPARATOR = 0       # blank marker row, carries no business data
    MARKER = 1          # standalone legacy marker
    SECTION = 2         # model header, column 2 = model name
    YEAR_BLOCK = 3      # year header, column 2 = "2025 ... Unidades Nuevas"
    VERSION = 4         # version line: label, base price, secondary price


@dataclass(frozen=True)
class YearNote:
    year: int  # 0 when no 19xx/20xx year is present
    note: str


@dataclass(frozen=True)
class ClassifiedRow:
    """A row tagged with its type. ``type`` is None for "other" rows."""
    type: RowType | None
    cells: tuple[Any, ...]

    def cell(self, index: int) -> Any:
        return self.cells[index] if index < len(self.cells) else ""


@dataclass
class YearBlock:
    """A type-3 header row plus the type-4 rows that follow it."""
    year: int
    note: str
    priority: int
    rows: list[Row] = field(default_factory=list)

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.grid import Grid, Row, RowType
from .classifier import row_type
from .cells import parse_year_and_note

"""Contextual year stamping and Temp-column pruning for comparisons.

Both steps run on raw (unformatted) grids and prepare them for key matching;
they are not part of the display transform.
"""

__all__ = [
    "DEFAULT_YEAR_LABEL",
    "stamp_year_context",
    "drop_temp_column",
    "prepare_for_comparison",
]

DEFAULT_YEAR_LABEL = "AñoContexto"


def _is_row(row: Any) -> bool:
    return isinstance(row, Sequence) and not isinstance(row, str)


def stamp_year_context(grid: Grid, label: str = DEFAULT_YEAR_LABEL) -> Grid:
    """Append the forward-filled contextual year to every row.

    The year comes from the nearest preceding type-3 row and is sticky: a
    type-3 row without a parseable year keeps the previous one. A type-4 row
    may seed the year from its own label only while no year is known yet.
    Data rows are padded to the header width first so that the year always
    sits under ``label``. Entries that are not rows are dropped.
    """
    if not grid:
        return []
    header = list(grid[0]) if _is_row(grid[0]) else []
    width = len(header)
    stamped: Grid = [[*header, label]]

    current_year = 0
    for row in grid[1:]:
        if not _is_row(row):
            continue
        cells: Row = list(row)
        if len(cells) < width:
            cells.extend([""] * (width - len(cells)))
        kind = row_type(cells)
        label_cell = cells[2] if len(cells) > 2 else ""
        if kind is RowType.YEAR_BLOCK or (kind is RowType.VERSION and current_year == 0):
            year = parse_year_and_note(label_cell).year
            if year:
                current_year = year
        cells.append(current_year)
        stamped.append(cells)
    return stamped


def drop_temp_column(grid: Grid, marker: str = "temp") -> Grid:
    """Remove the first column whose header contains ``marker`` (case-insensitive)."""
    if not grid or not _is_row(grid[0]):
        return grid
    needle = marker.lower()
    temp_idx = next(
        (i for i, name in enumerate(grid[0]) if needle in str(name).lower()),
        -1,
    )
    if temp_idx == -1:
        return grid
    return [
        [cell for i, cell in enumerate(row) if i != temp_idx] if _is_row(row) else row
        for row in grid
    ]


def prepare_for_comparison(
    grid: Grid, label: str = DEFAULT_YEAR_LABEL, temp_marker: str = "temp"
) -> Grid:
    return drop_temp_column(stamp_year_context(grid, label), temp_marker)

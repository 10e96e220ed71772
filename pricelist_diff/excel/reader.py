from __future__ import annotations

import io
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from ..models.config_models import ExportConfig
from ..models.grid import Grid

"""Spreadsheet codec: first sheet <-> grid.

Reading mirrors what the comparison expects: no header inference (row 0 of the
grid is the sheet's first row), blank rows dropped, empty cells as "", and
floats that hold whole numbers given back as int (pandas turns integer columns
with gaps into float64).
"""

__all__ = [
    "CodecError",
    "read_grid",
    "write_grid",
    "export_processed",
    "export_comparison",
    "drop_named_column",
]

DIFF_FILL = PatternFill(start_color="FFEBEE", end_color="FFEBEE", fill_type="solid")
DIFF_FONT = Font(color="D32F2F", bold=True)


class CodecError(Exception):
    """Raised when a workbook cannot be read or written."""


def _to_cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, np.generic):
        value = value.item()
    if not isinstance(value, (list, tuple)) and pd.isna(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def read_grid(source: Path | str | bytes) -> Grid:
    """Read the first sheet of a workbook (path or raw bytes) into a grid."""
    handle: Any = io.BytesIO(source) if isinstance(source, bytes) else source
    try:
        xls = pd.ExcelFile(handle)
        if not xls.sheet_names:
            raise CodecError("workbook has no sheets")
        df = xls.parse(xls.sheet_names[0], header=None, dtype=object)
    except CodecError:
        raise
    except Exception as e:
        raise CodecError(f"cannot read workbook: {e}") from e

    grid: Grid = []
    for raw in df.itertuples(index=False, name=None):
        row = [_to_cell(v) for v in raw]
        if all(c == "" for c in row):
            continue
        grid.append(row)
    return grid


def write_grid(
    grid: Grid,
    path: Path,
    sheet_name: str = "Sheet1",
    column_widths: Iterable[int] | None = None,
    default_width: int | None = None,
    highlight: Iterable[tuple[int, int]] | None = None,
) -> Path:
    """Write ``grid`` as the only sheet of ``path`` (header row included as data).

    ``highlight`` holds 0-based (grid_row, column) cells to paint as differences.
    """
    widths = list(column_widths or [])
    try:
        df = pd.DataFrame(grid)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet_name, header=False, index=False)
            ws = writer.sheets[sheet_name]
            ncols = df.shape[1]
            for col in range(ncols):
                width = widths[col] if col < len(widths) else default_width
                if width:
                    ws.column_dimensions[get_column_letter(col + 1)].width = width
            for r, c in highlight or ():
                cell = ws.cell(row=r + 1, column=c + 1)
                cell.fill = DIFF_FILL
                cell.font = DIFF_FONT
    except Exception as e:
        raise CodecError(f"cannot write workbook {path}: {e}") from e
    return path


def drop_named_column(grid: Grid, name: str) -> Grid:
    """Remove the column whose header equals ``name`` (case-insensitive)."""
    if not grid:
        return []
    header = [str(c).lower() for c in grid[0]]
    try:
        idx = header.index(name.lower())
    except ValueError:
        return [list(r) for r in grid]
    return [[c for i, c in enumerate(row) if i != idx] for row in grid]


def export_processed(grid: Grid, path: Path, config: ExportConfig | None = None) -> Path:
    """Export a transformed new sheet without its Temp column."""
    cfg = config or ExportConfig()
    if not grid:
        raise CodecError("no processed data to export")
    data = drop_named_column(grid, "temp")
    return write_grid(
        data,
        path,
        sheet_name=cfg.sheet_name,
        column_widths=cfg.column_widths,
        default_width=cfg.default_width,
    )


def export_comparison(
    display_data: Grid,
    differences: Iterable[str],
    path: Path,
    columns: int = 5,
    sheet_name: str = "Comparacion_Base",
) -> Path:
    """Export the visible leading columns of a comparison with differing cells highlighted."""
    if not display_data:
        raise CodecError("no comparison data to export")
    visible = [list(row[:columns]) for row in display_data]
    cells: list[tuple[int, int]] = []
    for coord in differences:
        row_s, col_s = coord.split(":", 1)
        row_i, col_i = int(row_s), int(col_s)
        if col_i < columns:
            cells.append((row_i + 1, col_i))  # data row -> grid row (header first)
    return write_grid(visible, path, sheet_name=sheet_name, highlight=cells)

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models.grid import Grid, Row, RowType
from .cells import cell_text, parse_year_and_note
from .classifier import row_type

"""Vehicle field formatter.

Rewrites the display fields of a reordered sheet:

- type 2: the model name in column 2 becomes the current model.
- type 3: column 2 -> "{year} {model}", column 3 -> "Unidades Nuevas" /
  "Unidades Usadas" as written in the source (or empty), column 4 cleared.
- type 4: the word "Lista" is removed from column 3.

Must run after reordering: the rewritten column 2 no longer carries the
original year text the reorderer sorts on.
"""

__all__ = [
    "format_vehicle_fields",
]

_CONDITION_RE = re.compile(r"Unidades (Nuevas|Usadas)", re.IGNORECASE)
_LISTA_RE = re.compile(r"lista", re.IGNORECASE)


@dataclass(frozen=True)
class _Context:
    current_model: str = ""


def _padded(row: Sequence[object], width: int) -> Row:
    out = list(row)
    if len(out) < width:
        out.extend([""] * (width - len(out)))
    return out


def _format_year_header(row: Row, ctx: _Context) -> Row:
    out = _padded(row, 5)
    text = cell_text(out[2])
    year = parse_year_and_note(text).year
    condition = _CONDITION_RE.search(text)
    label = f"{year} {ctx.current_model}" if year else ctx.current_model
    out[2] = label.strip()
    out[3] = condition.group(0) if condition else ""
    out[4] = ""
    return out


def _format_version(row: Row) -> Row:
    if len(row) < 4 or not isinstance(row[3], str):
        return list(row)
    out = list(row)
    if _LISTA_RE.search(out[3]):
        out[3] = _LISTA_RE.sub("", out[3]).strip()
    return out


def format_vehicle_fields(grid: Grid) -> Grid:
    """Format every data row of ``grid``; the header row is returned unchanged."""
    if not grid:
        return []
    result: Grid = [grid[0]]
    ctx = _Context()
    for row in grid[1:]:
        kind = row_type(row)
        if kind is RowType.SECTION:
            ctx = _Context(current_model=cell_text(row[2] if len(row) > 2 else "").strip())
            result.append(list(row))
        elif kind is RowType.YEAR_BLOCK:
            result.append(_format_year_header(row, ctx))
        elif kind is RowType.VERSION:
            result.append(_format_version(row))
        else:
            result.append(list(row))
    return result

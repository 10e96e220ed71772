from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models.grid import Grid, Row, RowType, YearBlock
from .cells import condition_priority, parse_year_and_note
from .classifier import row_type

"""Section reordering.

Data rows are split into sections at every type-2 row; rows before the first
section are left where they are. Inside a section the type-3 rows open
year-blocks which own the type-4 rows that follow them. Blocks are sorted by
year (newest first) and then by condition (new, used, other); the sort is
stable so equal blocks keep their encounter order.

Rows of a section that belong to no block are kept: type-4 rows seen before
the first type-3 row stay right after the section header, and any other row
(separators, markers, unknown types) is moved after the sorted blocks in
encounter order, which keeps a separator in front of the next section header.
A separator is dropped there when the row emitted before it is one already.
"""

__all__ = [
    "reorder_all",
    "reorder_section",
    "split_sections",
]


@dataclass
class _Section:
    header: Row
    preamble: list[Row] = field(default_factory=list)
    blocks: list[YearBlock] = field(default_factory=list)
    trailer: list[Row] = field(default_factory=list)


def split_sections(rows: Sequence[Row]) -> tuple[list[Row], list[list[Row]]]:
    """Return (rows before the first section, list of section row runs)."""
    lead: list[Row] = []
    sections: list[list[Row]] = []
    for row in rows:
        if row_type(row) is RowType.SECTION:
            sections.append([row])
        elif sections:
            sections[-1].append(row)
        else:
            lead.append(row)
    return lead, sections


def _block_for(row: Row) -> YearBlock:
    parsed = parse_year_and_note(row[2] if len(row) > 2 else "")
    return YearBlock(
        year=parsed.year,
        note=parsed.note,
        priority=condition_priority(parsed.note),
        rows=[row],
    )


def reorder_section(section_rows: Sequence[Row]) -> list[Row]:
    """Reorder one section. ``section_rows[0]`` is its type-2 header."""
    if not section_rows:
        return []
    section = _Section(header=section_rows[0])
    current: YearBlock | None = None

    for row in section_rows[1:]:
        kind = row_type(row)
        if kind is RowType.YEAR_BLOCK:
            current = _block_for(row)
            section.blocks.append(current)
        elif kind is RowType.VERSION:
            if current is not None:
                current.rows.append(row)
            else:
                section.preamble.append(row)
        else:
            section.trailer.append(row)

    ordered = sorted(section.blocks, key=lambda b: (-b.year, b.priority))
    result: list[Row] = [section.header, *section.preamble]
    for block in ordered:
        result.extend(block.rows)
    for row in section.trailer:
        # never stack separators
        if row_type(row) is RowType.SEPARATOR and row_type(result[-1]) is RowType.SEPARATOR:
            continue
        result.append(row)
    return result


def reorder_all(grid: Grid) -> Grid:
    """Reorder every section of ``grid`` (header row included and kept first)."""
    if not grid:
        return []
    lead, sections = split_sections(grid[1:])
    result: Grid = [grid[0], *lead]
    for section in sections:
        result.extend(reorder_section(section))
    return result

from __future__ import annotations

import logging
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..models.config_models import ZeroRowConfig, ZeroRowPolicy
from ..models.grid import Grid, Row, RowType
from .classifier import row_type

"""Zero-row (separator) normalization for new price sheets.

Two independent steps:

1. ``drop_legacy_zero_rows`` - the legacy positional rule. Pre-existing
   separator rows at fixed grid positions (or inside a leading window,
   depending on ZeroRowPolicy) are removed. Only rows whose column 0 literally
   holds 0 / "0" are candidates; a blank column 0 is left alone.

2. ``insert_separators`` - a single left-to-right state machine over the data
   rows (header excluded):

   state            | type-0          | type-1                          | type-2 (not first)         | other
   -----------------|-----------------|---------------------------------|----------------------------|---------
   START            | AFTER_SEPARATOR | +0, row -> AFTER_MARKER         | +0, row -> AFTER_SECTION   | IN_BLOCK
   AFTER_SEPARATOR  | AFTER_SEPARATOR | row -> AFTER_MARKER             | row -> AFTER_SECTION       | IN_BLOCK
   AFTER_MARKER     | AFTER_SEPARATOR | +0, row -> AFTER_MARKER         | +0, row -> AFTER_SECTION   | +0, row -> IN_BLOCK
   AFTER_SECTION    | AFTER_SEPARATOR | +0, row -> AFTER_MARKER         | +0, row -> AFTER_SECTION   | IN_BLOCK
   IN_BLOCK         | AFTER_SEPARATOR | +0, row -> AFTER_MARKER         | +0, row -> AFTER_SECTION   | IN_BLOCK

   "+0" emits a separator row. Leaving AFTER_MARKER for anything but a
   separator emits the marker's trailing separator; ending the pass in
   AFTER_MARKER emits it too. The first type-2 row of the grid is emitted as
   is, whatever the state.
"""

__all__ = [
    "ScanState",
    "drop_legacy_zero_rows",
    "insert_separators",
    "separator_row",
]

logger = logging.getLogger(__name__)


class ScanState(Enum):
    START = "start"
    AFTER_SEPARATOR = "after_separator"
    AFTER_MARKER = "after_marker"
    AFTER_SECTION = "after_section"
    IN_BLOCK = "in_block"


@dataclass
class _Scan:
    state: ScanState = ScanState.START
    seen_section: bool = False
    marker_width: int = 1


def separator_row(width: int) -> Row:
    return [0] + [""] * max(width - 1, 0)


def _is_literal_zero(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Real):
        return value == 0
    if isinstance(value, str):
        return value.strip() == "0"
    return False


def _first_cell(row: Sequence[Any]) -> Any:
    return row[0] if len(row) > 0 else None


def drop_legacy_zero_rows(grid: Grid, config: ZeroRowConfig | None = None) -> Grid:
    """Apply the legacy positional separator deletion. ``grid`` includes its header."""
    cfg = config or ZeroRowConfig()
    if cfg.legacy_policy is ZeroRowPolicy.DISABLED or not grid:
        return list(grid)

    if cfg.legacy_policy is ZeroRowPolicy.FIXED_POSITIONS:
        # indices refer to the original grid: delete from the highest down
        doomed = {
            i for i in cfg.positions
            if 0 < i < len(grid) and _is_literal_zero(_first_cell(grid[i]))
        }
    else:
        last = min(cfg.window, len(grid) - 1)
        doomed = {i for i in range(1, last + 1) if _is_literal_zero(_first_cell(grid[i]))}

    if doomed:
        logger.debug(f"legacy zero rows removed at grid indices {sorted(doomed)}")
    return [row for i, row in enumerate(grid) if i not in doomed]


def insert_separators(rows: Sequence[Row]) -> list[Row]:
    """Insert separator rows around markers and sections. ``rows`` excludes the header."""
    out: list[Row] = []
    scan = _Scan()

    for row in rows:
        kind = row_type(row)

        if scan.state is ScanState.AFTER_MARKER and kind is not RowType.SEPARATOR:
            out.append(separator_row(scan.marker_width))
            scan.state = ScanState.AFTER_SEPARATOR

        if kind is RowType.SEPARATOR:
            out.append(row)
            scan.state = ScanState.AFTER_SEPARATOR
        elif kind is RowType.MARKER:
            if scan.state is not ScanState.AFTER_SEPARATOR:
                out.append(separator_row(len(row)))
            out.append(row)
            scan.marker_width = len(row)
            scan.state = ScanState.AFTER_MARKER
        elif kind is RowType.SECTION:
            if scan.seen_section and scan.state is not ScanState.AFTER_SEPARATOR:
                out.append(separator_row(len(row)))
            scan.seen_section = True
            out.append(row)
            scan.state = ScanState.AFTER_SECTION
        else:
            out.append(row)
            scan.state = ScanState.IN_BLOCK

    if scan.state is ScanState.AFTER_MARKER:
        out.append(separator_row(scan.marker_width))
    return out

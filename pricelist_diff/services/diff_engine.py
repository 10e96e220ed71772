from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..models.comparison_result import (
    ComparisonFailure,
    ComparisonOutcome,
    ComparisonResult,
    ComparisonStats,
)
from ..models.grid import Grid, Row
from .cells import normalize_cell
from .keys import INVALID_KEY, fallback_key, get_key
from .year_context import DEFAULT_YEAR_LABEL, prepare_for_comparison

"""Key-based cell diff between two price sheets.

The reference grid is indexed twice, by full key and by year-agnostic
fallback key; when several reference rows share a key the last one wins.
Each subject row is then resolved (full key first, fallback second) and its
leading columns are compared cell by cell through normalize_cell. A subject
row with no reference is compared against an empty row, so every non-empty
cell of it is reported.

Coordinates are "{data_row}:{column}" with data rows counted from 0 after the
header of the subject grid.
"""

__all__ = [
    "COMPARED_COLUMNS",
    "ReferenceIndex",
    "build_reference_index",
    "diff_grids",
    "compare",
    "compare_raw",
]

logger = logging.getLogger(__name__)

COMPARED_COLUMNS = 5


@dataclass(frozen=True)
class ReferenceIndex:
    by_full_key: dict[str, Row]
    by_fallback_key: dict[str, Row]

    def resolve(self, key: str) -> tuple[Row | None, str]:
        """Return (reference row or None, how it was found: full|fallback|none)."""
        row = self.by_full_key.get(key)
        if row is not None:
            return row, "full"
        row = self.by_fallback_key.get(fallback_key(key))
        if row is not None:
            return row, "fallback"
        return None, "none"


def _is_row(row: Any) -> bool:
    return isinstance(row, Sequence) and not isinstance(row, str)


def build_reference_index(reference: Grid) -> ReferenceIndex:
    by_full: dict[str, Row] = {}
    by_fallback: dict[str, Row] = {}
    for row in reference[1:]:
        if not _is_row(row):
            continue
        key = get_key(row)
        if key == INVALID_KEY:
            continue
        by_full[key] = row
        by_fallback[fallback_key(key)] = row
    return ReferenceIndex(by_full_key=by_full, by_fallback_key=by_fallback)


def _differing_columns(subject_row: Row, reference_row: Row | None, columns: int) -> list[int]:
    ref: Sequence[Any] = reference_row if reference_row is not None else ()
    diffs: list[int] = []
    for j in range(columns):
        base_val = normalize_cell(subject_row[j]) if j < len(subject_row) else ""
        ref_val = normalize_cell(ref[j]) if j < len(ref) else ""
        if base_val == "" and ref_val == "":
            continue
        if base_val != ref_val:
            diffs.append(j)
    return diffs


def diff_grids(
    subject: Grid, reference: Grid, columns: int = COMPARED_COLUMNS
) -> ComparisonResult:
    """Diff two prepared (year-stamped, Temp-pruned) grids. May raise."""
    index = build_reference_index(reference)
    differences: set[str] = set()
    compared = matched = fallback = unmatched = skipped = 0

    for i, row in enumerate(subject[1:], start=1):
        if not _is_row(row):
            skipped += 1
            continue
        key = get_key(row)
        if key == INVALID_KEY:
            skipped += 1
            continue
        compared += 1
        ref_row, how = index.resolve(key)
        if how == "full":
            matched += 1
        elif how == "fallback":
            fallback += 1
        else:
            unmatched += 1
            logger.debug(f"row {i - 1}: no reference for key={key!r} nor {fallback_key(key)!r}")
        for j in _differing_columns(row, ref_row, columns):
            differences.add(f"{i - 1}:{j}")

    stats = ComparisonStats(
        compared_rows=compared,
        matched_rows=matched,
        fallback_rows=fallback,
        unmatched_rows=unmatched,
        skipped_rows=skipped,
    )
    logger.info(
        f"compared {len(subject) - 1 if subject else 0} rows, {len(differences)} differing cells"
    )
    return ComparisonResult(display_data=subject, differences=frozenset(differences), stats=stats)


def compare(
    subject: Grid, reference: Grid, columns: int = COMPARED_COLUMNS
) -> ComparisonOutcome:
    """Diff two prepared grids; any exception becomes a ComparisonFailure."""
    try:
        return diff_grids(subject, reference, columns)
    except Exception as e:
        logger.error(f"comparison failed: {e}")
        return ComparisonFailure(error=f"comparison error: {e}")


def compare_raw(
    subject: Grid,
    reference: Grid,
    columns: int = COMPARED_COLUMNS,
    year_label: str = DEFAULT_YEAR_LABEL,
    temp_marker: str = "temp",
) -> ComparisonOutcome:
    """Year-stamp and Temp-prune both raw grids, then diff them."""
    try:
        prepared_subject = prepare_for_comparison(subject, year_label, temp_marker)
        prepared_reference = prepare_for_comparison(reference, year_label, temp_marker)
        return diff_grids(prepared_subject, prepared_reference, columns)
    except Exception as e:
        logger.error(f"comparison failed: {e}")
        return ComparisonFailure(error=f"comparison error: {e}")

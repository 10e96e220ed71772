from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .grid import Grid

"""Comparison outcome models.

A comparison either fully succeeds (ComparisonResult) or fails as a whole
(ComparisonFailure); there is no partial result.
"""

__all__ = [
    "ComparisonStats",
    "ComparisonResult",
    "ComparisonFailure",
    "ComparisonError",
    "ComparisonOutcome",
]


class ComparisonError(Exception):
    """Raised by ComparisonFailure.raise_for_error()."""


@dataclass(frozen=True)
class ComparisonStats:
    compared_rows: int = 0  # subject data rows with a valid key
    matched_rows: int = 0  # resolved through the full key
    fallback_rows: int = 0  # resolved through the year-agnostic key
    unmatched_rows: int = 0  # no reference row at all
    skipped_rows: int = 0  # invalid key, not compared


@dataclass(frozen=True)
class ComparisonResult:
    """Subject grid as displayed plus the "row:col" coordinates that differ.

    Row indices are 0-based data rows (header excluded) of ``display_data``.
    """
    display_data: Grid
    differences: frozenset[str]
    stats: ComparisonStats = field(default_factory=ComparisonStats)

    @property
    def ok(self) -> bool:
        return True

    def raise_for_error(self) -> None:
        return None

    def has_difference(self, row: int, col: int) -> bool:
        return f"{row}:{col}" in self.differences

    def to_message(self) -> dict:
        return {
            "displayData": self.display_data,
            "differences": sorted(self.differences),
        }


@dataclass(frozen=True)
class ComparisonFailure:
    error: str

    @property
    def ok(self) -> bool:
        return False

    def raise_for_error(self) -> None:
        raise ComparisonError(self.error)

    def to_message(self) -> dict:
        return {"error": self.error}


ComparisonOutcome = Union[ComparisonResult, ComparisonFailure]

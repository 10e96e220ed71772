from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.grid import ClassifiedRow, RowType
from .cells import to_number

"""Row classifier.

Column 0 of a data row holds the row type. It is coerced like a spreadsheet
number, so a blank first cell reads as a separator (type 0) while text such as
"Nota" reads as "other" (None) and is never matched by type-specific rules.
"""

__all__ = [
    "row_type",
    "classify",
    "is_type",
]


def row_type(row: Any) -> RowType | None:
    if not isinstance(row, Sequence) or isinstance(row, str):
        return None
    if len(row) == 0:
        return None
    num = to_number(row[0])
    if num is None or not num.is_integer():
        return None
    try:
        return RowType(int(num))
    except ValueError:
        return None


def is_type(row: Any, kind: RowType) -> bool:
    return row_type(row) is kind


def classify(row: Sequence[Any]) -> ClassifiedRow:
    return ClassifiedRow(type=row_type(row), cells=tuple(row))

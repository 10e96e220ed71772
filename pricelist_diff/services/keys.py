from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from .cells import cell_text, collapse_whitespace, normalize_cell

"""Row identity keys used to match rows across two price sheets.

full key      "{type}|{year}|{version}"   e.g. "4|2025|integra a-spec"
fallback key  "{type}||{version}"         year-agnostic, for year rollovers

The year is read from the last column, where stamp_year_context puts it.
"""

__all__ = [
    "INVALID_KEY",
    "YEAR_FALLBACK_TOKEN",
    "get_key",
    "fallback_key",
]

INVALID_KEY = "invalid|invalid|invalid"
YEAR_FALLBACK_TOKEN = "_"
_YEAR_SEGMENT_RE = re.compile(r"\|[^|]*\|")


def _version_label(value: Any) -> str:
    if value is None or value == "" or value == 0:
        return ""
    return collapse_whitespace(cell_text(value)).lower()


def get_key(row: Any) -> str:
    """Composite key of a year-stamped row; INVALID_KEY for unkeyable rows."""
    if not isinstance(row, Sequence) or isinstance(row, str) or len(row) < 3:
        return INVALID_KEY
    kind = normalize_cell(row[0])
    raw_year = normalize_cell(row[-1])
    year = raw_year if raw_year not in ("", "0") else YEAR_FALLBACK_TOKEN
    return f"{kind}|{year}|{_version_label(row[2])}"


def fallback_key(key: str) -> str:
    return _YEAR_SEGMENT_RE.sub("||", key, count=1)

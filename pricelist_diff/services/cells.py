from __future__ import annotations

import math
import numbers
import re
from typing import Any

from ..models.grid import YearNote

"""Cell normalization and year/note extraction.

Every coercion of a raw cell value (number vs text vs empty) goes through this
module. Numbers are rendered the way a spreadsheet shows them: an integral
float such as ``1200.0`` (what pandas yields for integer columns with gaps)
renders as ``"1200"``.
"""

__all__ = [
    "cell_text",
    "normalize_cell",
    "to_number",
    "parse_year_and_note",
    "condition_priority",
    "collapse_whitespace",
]

_CURRENCY_RE = re.compile(r"[$,]")
_WS_RE = re.compile(r"\s+")
# ASCII word boundaries: a non-ASCII letter is not a word character, so "ñ2025" yields 2025
_YEAR_RE = re.compile(r"\b(19|20)\d{2}\b", re.ASCII)
# 1e21 and above are printed in exponent form by spreadsheet tools
_MAX_PLAIN_INT = 1e21


def _format_number(value: float) -> str:
    if value.is_integer() and abs(value) < _MAX_PLAIN_INT:
        return str(int(value))
    return repr(value)


def cell_text(value: Any) -> str:
    """Display text of a cell. Empty/None/NaN -> ``""``; no case folding."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        f = float(value)
        if math.isnan(f):
            return ""
        if math.isinf(f):
            return "Infinity" if f > 0 else "-Infinity"
        return _format_number(f)
    return str(value)


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def normalize_cell(value: Any) -> str:
    """Canonical comparable form of a cell.

    Lower-cased, trimmed, ``$`` and ``,`` removed, internal whitespace
    collapsed. A numeric-looking result is returned in number form only when
    that form round-trips to the exact same string, so ``"1200"`` and ``1200``
    are equal while ``"1200.00"`` keeps its own spelling.
    """
    if value is None:
        return ""
    normalized = cell_text(value).lower().strip()
    normalized = _CURRENCY_RE.sub("", normalized)
    normalized = collapse_whitespace(normalized)
    num = to_number(normalized)
    if num is not None and math.isfinite(num) and _format_number(num) == normalized:
        return _format_number(num)
    return normalized


def to_number(value: Any) -> float | None:
    """Spreadsheet-style numeric coercion.

    Numbers pass through, ``None`` and blank text coerce to ``0``, numeric
    text is parsed, anything else is ``None``.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, numbers.Real):
        f = float(value)
        return None if math.isnan(f) else f
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text == "":
        return 0.0
    if "_" in text:
        return None
    try:
        f = float(text)
    except ValueError:
        return None
    if math.isnan(f):
        return None
    return f


def parse_year_and_note(text: Any) -> YearNote:
    """Split ``"2025 INTEGRA Unidades Nuevas"`` into ``(2025, "INTEGRA Unidades Nuevas")``.

    Only the first 19xx/20xx year is taken; later years stay inside the note.
    """
    raw = cell_text(text)
    match = _YEAR_RE.search(raw)
    if match is None:
        return YearNote(year=0, note=raw.strip())
    note = (raw[: match.start()] + raw[match.end():]).strip()
    return YearNote(year=int(match.group(0)), note=note)


def condition_priority(note: str) -> int:
    """Sort rank of a year-block condition: new units 1, used units 2, other 3."""
    lower = note.lower()
    if "nueva" in lower:
        return 1
    if "usada" in lower:
        return 2
    return 3

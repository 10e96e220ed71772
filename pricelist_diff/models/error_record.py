from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

``row`` is the 0-based data row the failure refers to, or -1 when the failure
concerns the whole file or operation (unreadable workbook, worker crash).
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """One failed operation.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: workbook the operation was working on
        operation: transform | compare | store | export
        row: data row index, -1 when unknown
        error_type: UPPER_SNAKE_CASE classification
        message: human readable reason
    """
    timestamp: str
    file: str
    operation: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, operation: str, row: int, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            operation=operation,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

"""Processing result models for the transform and compare commands."""

__all__ = [
    "FileStat",
    "TransformResult",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file outcome of a transform run."""
    file_name: str
    status: str  # success/failed
    rows: int  # rows of the canonical grid (header included)
    elapsed_seconds: float
    output_path: Path | None = None
    error: str | None = None


@dataclass(frozen=True)
class TransformResult:
    success_files: int
    failed_files: int
    total_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] = field(default_factory=list)

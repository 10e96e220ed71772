from __future__ import annotations

from ..models.comparison_result import ComparisonResult
from ..models.processing_result import TransformResult

"""SUMMARY line rendering for the transform and compare commands."""

__all__ = [
    "format_seconds",
    "render_transform_summary",
    "render_compare_summary",
]


def format_seconds(seconds: float) -> str:
    """Render elapsed seconds without scientific notation or a useless ".0"."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return str(round(seconds, 3))


def render_transform_summary(result: TransformResult) -> str:
    """SUMMARY files={t}/{t} success={s} failed={f} rows={r} elapsed_sec={e}

    >>> from datetime import datetime, timezone
    >>> t = datetime(2025, 1, 1, tzinfo=timezone.utc)
    >>> r = TransformResult(success_files=1, failed_files=0, total_rows=12,
    ...                     start_time=t, end_time=t, elapsed_seconds=2.0)
    >>> render_transform_summary(r)
    'SUMMARY files=1/1 success=1 failed=0 rows=12 elapsed_sec=2'
    """
    total = result.success_files + result.failed_files
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )


def render_compare_summary(result: ComparisonResult, elapsed_seconds: float) -> str:
    """SUMMARY rows={n} matched={m} fallback={f} unmatched={u} differences={d} elapsed_sec={e}"""
    stats = result.stats
    rows = len(result.display_data) - 1 if result.display_data else 0
    return (
        f"SUMMARY rows={rows} "
        f"matched={stats.matched_rows} "
        f"fallback={stats.fallback_rows} "
        f"unmatched={stats.unmatched_rows} "
        f"differences={len(result.differences)} "
        f"elapsed_sec={format_seconds(elapsed_seconds)}"
    )

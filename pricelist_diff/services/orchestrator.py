from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..db.grid_store import GridStoreError
from ..excel.reader import CodecError, export_processed, read_grid
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.comparison_result import ComparisonError, ComparisonResult
from ..models.config_models import AppConfig
from ..models.processing_result import FileStat, TransformResult
from .diff_engine import compare_raw
from .pipeline import process_new_data
from .progress import ProgressTracker
from .runner import run_comparison

"""Service orchestration: workbook in, canonical grid / comparison out.

Both entry points read through the codec, run the pure core, and only then
write to the grid store, so a failure never overwrites data stored by a
previous successful run.
"""

__all__ = [
    "ProcessingError",
    "scan_excel_files",
    "transform_files",
    "compare_files",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal failure of a transform or compare invocation."""


def scan_excel_files(directory: Path) -> list[Path]:
    """List the .xlsx files of ``directory`` (non-recursive, sorted by name)."""
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == ".xlsx")
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _output_path(output_dir: Path, source: Path) -> Path:
    return output_dir / f"{source.stem}_procesado.xlsx"


def _transform_one(
    path: Path, config: AppConfig, store: Any, output_dir: Path | None
) -> tuple[int, Path | None]:
    grid = read_grid(path)
    if not grid:
        raise CodecError(f"{path.name}: first sheet is empty")
    processed = process_new_data(grid, config.zero_rows)
    out_path = None
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        out_path = export_processed(processed, _output_path(output_dir, path), config.export)
    with store.transaction():
        store.replace("newData", processed)
    return len(processed), out_path


def transform_files(
    paths: Sequence[Path],
    config: AppConfig,
    store: Any,
    output_dir: Path | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> TransformResult:
    """Transform each new price sheet; a failing file does not stop the others."""
    start_time = datetime.now(UTC)
    file_stats: list[FileStat] = []
    success = failed = total_rows = 0

    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path)
            file_start = time.perf_counter()
            try:
                rows, out_path = _transform_one(path, config, store, output_dir)
            except (CodecError, GridStoreError) as e:
                failed += 1
                logger.error(f"transform {path.name}: {e}")
                if error_log is not None:
                    error_type = "CODEC_ERROR" if isinstance(e, CodecError) else "STORE_ERROR"
                    error_log.append(ErrorRecord.create(path.name, "transform", -1, error_type, str(e)))
                file_stats.append(
                    FileStat(
                        file_name=path.name,
                        status="failed",
                        rows=0,
                        elapsed_seconds=time.perf_counter() - file_start,
                        error=str(e),
                    )
                )
                progress.finish_file(success=False)
                continue

            success += 1
            total_rows += rows
            logger.info(f"transformed {path.name}: {rows} rows" + (f" -> {out_path}" if out_path else ""))
            file_stats.append(
                FileStat(
                    file_name=path.name,
                    status="success",
                    rows=rows,
                    elapsed_seconds=time.perf_counter() - file_start,
                    output_path=out_path,
                )
            )
            progress.finish_file(success=True)

    end_time = datetime.now(UTC)
    return TransformResult(
        success_files=success,
        failed_files=failed,
        total_rows=total_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )


def compare_files(
    base_path: Path,
    new_path: Path,
    config: AppConfig,
    store: Any,
    error_log: ErrorLogBuffer | None = None,
    use_worker: bool = True,
) -> ComparisonResult:
    """Compare a base price sheet against the canonical form of a new one.

    The base sheet is the subject (its rows are annotated), the transformed
    new sheet is the reference. Raises ProcessingError on any failure.
    """
    def _fail(file: str, error_type: str, message: str) -> ProcessingError:
        if error_log is not None:
            error_log.append(ErrorRecord.create(file, "compare", -1, error_type, message))
        return ProcessingError(message)

    try:
        base = read_grid(base_path)
        new = read_grid(new_path)
    except CodecError as e:
        raise _fail(f"{base_path.name},{new_path.name}", "CODEC_ERROR", str(e)) from e

    reference = process_new_data(new, config.zero_rows)

    if use_worker:
        outcome = run_comparison(base, reference, config.comparison)
    else:
        cmp_cfg = config.comparison
        outcome = compare_raw(base, reference, cmp_cfg.columns, cmp_cfg.year_context_label, cmp_cfg.temp_marker)

    try:
        outcome.raise_for_error()
    except ComparisonError as e:
        raise _fail(base_path.name, "COMPARISON_ERROR", str(e)) from e

    # both grids or neither
    try:
        with store.transaction():
            store.replace("baseData", base)
            store.replace("newData", reference)
    except GridStoreError as e:
        raise _fail(base_path.name, "STORE_ERROR", str(e)) from e
    return outcome

from __future__ import annotations

import argparse
import os
import sys
import time
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, default_config, load_config
from ..db.grid_store import InMemoryGridStore, PostgresGridStore, db_connection
from ..excel.reader import CodecError, export_comparison, read_grid
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..logging.init import log_summary, setup_logging
from ..models.config_models import AppConfig
from ..services.orchestrator import ProcessingError, compare_files, scan_excel_files, transform_files
from ..services.summary import render_compare_summary, render_transform_summary

"""CLI entrypoint.

    pricelist-diff [--config PATH] [--debug] transform [NEW.xlsx ...] [--dir DIR] [--output-dir DIR]
    pricelist-diff [--config PATH] [--debug] compare BASE.xlsx NEW.xlsx [--export PATH]
    pricelist-diff inspect FILE.xlsx

Grids are persisted to PostgreSQL when a connection can be made, otherwise
(or with DISABLE_DB_CONNECT=1) to an in-memory store for the run.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; its values override the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="pricelist-diff", description="Vehicle price list transform & diff")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    t = sub.add_parser("transform", help="Normalize, reorder and format new price sheets")
    t.add_argument("files", nargs="*", type=Path)
    t.add_argument("--dir", type=Path, default=None, dest="source_dir", help="Also transform every .xlsx file in DIR")
    t.add_argument("--output-dir", type=Path, default=None, help="Write <name>_procesado.xlsx here")

    c = sub.add_parser(
        "compare",
        help="Diff a canonical base price sheet against a new one",
        description=(
            "The new sheet is transformed first; BASE is compared as is and is expected to be "
            "in canonical form already (e.g. the output of a previous transform), otherwise its "
            "year-header rows find no counterpart."
        ),
    )
    c.add_argument("base", type=Path, help="Canonical (already transformed) base sheet")
    c.add_argument("new", type=Path)
    c.add_argument("--export", type=Path, default=None, help="Write the highlighted comparison here")

    i = sub.add_parser("inspect", help="Print the header and first rows of a workbook")
    i.add_argument("file", type=Path)
    i.add_argument("--rows", type=int, default=5)
    return p.parse_args(argv)


def _resolve_config(path: Path | None) -> AppConfig:
    if path is not None:
        return load_config(path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return default_config()


@contextmanager
def _grid_store(cfg: AppConfig, logger: Any) -> Iterator[Any]:
    """Yield a Postgres-backed store, or an in-memory one when the DB is unavailable."""
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> memory store")
        yield InMemoryGridStore()
        return
    with ExitStack() as stack:
        try:
            cur = stack.enter_context(db_connection(cfg.database))
        except Exception as e:
            logger.info(f"DB connection failed -> memory store: {e}")
            cur = None
        if cur is None:
            yield InMemoryGridStore()
            return
        store = PostgresGridStore(cur)
        with store.transaction():
            store.ensure_schema()
        yield store


def _inspect(path: Path, rows: int) -> int:
    try:
        grid = read_grid(path)
    except CodecError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {path.name} rows={len(grid)}")
    if grid:
        print(f"  header={grid[0]}")
        for row in grid[1 : rows + 1]:
            print(f"  {row}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None -> read sys.argv; an explicit [] must stay empty (tests call main([]))
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    if args.command == "inspect":
        return _inspect(args.file, args.rows)

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer()
    try:
        with _grid_store(cfg, logger) as store:
            if args.command == "transform":
                return _run_transform(args, cfg, store, error_log)
            return _run_compare(args, cfg, store, error_log)
    finally:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log written: {log_path}")


def _run_transform(args: argparse.Namespace, cfg: AppConfig, store: Any, error_log: ErrorLogBuffer) -> int:
    logger = setup_logging()
    if not args.files and args.source_dir is None:
        logger.error("transform: no input files (give paths or --dir)")
        return EXIT_FATAL
    missing = [p for p in args.files if not p.exists()]
    if missing:
        logger.error(f"file not found: {', '.join(str(p) for p in missing)}")
        return EXIT_FATAL

    files = list(args.files)
    if args.source_dir is not None:
        try:
            files.extend(scan_excel_files(args.source_dir))
        except ProcessingError as e:
            logger.error(f"transform: {e}")
            return EXIT_FATAL

    result = transform_files(files, cfg, store, output_dir=args.output_dir, error_log=error_log)
    log_summary(render_transform_summary(result)[len("SUMMARY "):])
    if result.failed_files > 0 and result.success_files > 0:
        return EXIT_PARTIAL_FAILURE
    if result.failed_files > 0:
        return EXIT_FATAL
    return EXIT_SUCCESS_ALL


def _run_compare(args: argparse.Namespace, cfg: AppConfig, store: Any, error_log: ErrorLogBuffer) -> int:
    logger = setup_logging()
    for p in (args.base, args.new):
        if not p.exists():
            logger.error(f"file not found: {p}")
            return EXIT_FATAL

    started = time.perf_counter()
    try:
        result = compare_files(args.base, args.new, cfg, store, error_log=error_log)
    except ProcessingError as e:
        logger.error(f"compare: {e}")
        return EXIT_FATAL

    if args.export is not None:
        try:
            export_comparison(result.display_data, result.differences, args.export, cfg.comparison.columns)
            logger.info(f"comparison exported: {args.export}")
        except CodecError as e:
            logger.error(f"export: {e}")
            error_log.append(ErrorRecord.create(args.export.name, "export", -1, "CODEC_ERROR", str(e)))
            return EXIT_FATAL

    log_summary(render_compare_summary(result, time.perf_counter() - started)[len("SUMMARY "):])
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

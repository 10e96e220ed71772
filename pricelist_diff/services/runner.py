from __future__ import annotations

import logging
import multiprocessing
from multiprocessing.connection import Connection
from typing import Any

from ..models.comparison_result import ComparisonFailure, ComparisonOutcome
from ..models.config_models import ComparisonConfig
from ..models.grid import Grid
from .diff_engine import compare_raw

"""Isolated comparison worker.

A comparison runs in its own process and posts exactly one message back: a
ComparisonResult or a ComparisonFailure. Results are keyed only by "latest",
so submitting a new comparison terminates the one still in flight instead of
queueing behind it. A wait that times out terminates the worker as well.
"""

__all__ = [
    "ComparisonRunner",
    "run_comparison",
]

logger = logging.getLogger(__name__)


def _comparison_worker(
    conn: Connection,
    subject: Grid,
    reference: Grid,
    columns: int,
    year_label: str,
    temp_marker: str,
) -> None:
    try:
        outcome: ComparisonOutcome = compare_raw(subject, reference, columns, year_label, temp_marker)
    except Exception as e:  # pragma: no cover - compare_raw already converts
        outcome = ComparisonFailure(error=f"worker error: {e}")
    try:
        conn.send(outcome)
    finally:
        conn.close()


class ComparisonRunner:
    """Runs one comparison at a time in a separate process."""

    def __init__(self, config: ComparisonConfig | None = None, start_method: str = "spawn") -> None:
        self.config = config or ComparisonConfig()
        self._ctx = multiprocessing.get_context(start_method)
        self._process: Any = None
        self._conn: Connection | None = None

    @property
    def in_flight(self) -> bool:
        return self._process is not None and self._process.is_alive()

    def submit(self, subject: Grid, reference: Grid) -> None:
        """Start comparing ``subject`` against ``reference``, superseding any running job."""
        if self._process is not None:
            logger.debug("superseding in-flight comparison")
            self.cancel()
        reader, writer = self._ctx.Pipe(duplex=False)
        process = self._ctx.Process(
            target=_comparison_worker,
            args=(
                writer,
                subject,
                reference,
                self.config.columns,
                self.config.year_context_label,
                self.config.temp_marker,
            ),
            daemon=True,
        )
        process.start()
        writer.close()
        self._process = process
        self._conn = reader

    def wait(self, timeout: float | None = None) -> ComparisonOutcome:
        """Block for the outcome of the last submitted comparison.

        ``timeout`` defaults to the configured one; ``0`` or less waits forever.
        """
        if self._process is None or self._conn is None:
            raise RuntimeError("no comparison submitted")
        limit = self.config.timeout_seconds if timeout is None else timeout
        wait_for = limit if limit and limit > 0 else None
        try:
            if not self._conn.poll(wait_for):
                logger.warning(f"comparison timed out after {limit}s, terminating worker")
                return ComparisonFailure(error=f"comparison timed out after {limit}s")
            try:
                return self._conn.recv()
            except EOFError:
                code = self._process.exitcode
                return ComparisonFailure(error=f"comparison worker exited without a result (exitcode={code})")
        finally:
            self.cancel()

    def cancel(self) -> None:
        """Terminate the in-flight worker, if any, and discard its result."""
        process, conn = self._process, self._conn
        self._process = None
        self._conn = None
        if process is not None:
            if process.is_alive():
                process.terminate()
            process.join()
        if conn is not None:
            conn.close()

    def __enter__(self) -> ComparisonRunner:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cancel()


def run_comparison(
    subject: Grid,
    reference: Grid,
    config: ComparisonConfig | None = None,
    timeout: float | None = None,
) -> ComparisonOutcome:
    """Submit one comparison to a fresh runner and wait for its outcome."""
    with ComparisonRunner(config) as runner:
        runner.submit(subject, reference)
        return runner.wait(timeout)

from __future__ import annotations

import copy

import pytest

from pricelist_diff.models.comparison_result import ComparisonFailure, ComparisonResult
from pricelist_diff.models.config_models import ComparisonConfig
from pricelist_diff.services.runner import ComparisonRunner, run_comparison


def test_run_comparison_returns_result_from_worker(base_grid):
    reference = copy.deepcopy(base_grid)
    reference[3][3] = "1100"
    outcome = run_comparison(base_grid, reference, timeout=30)
    assert isinstance(outcome, ComparisonResult)
    assert outcome.differences == frozenset({"2:3"})


def test_worker_failure_comes_back_typed(base_grid):
    outcome = run_comparison(base_grid, 5, timeout=30)
    assert isinstance(outcome, ComparisonFailure)
    assert outcome.error.startswith("comparison error:")


def test_wait_without_submit_raises():
    runner = ComparisonRunner()
    with pytest.raises(RuntimeError):
        runner.wait()


def test_timeout_terminates_worker(base_grid):
    runner = ComparisonRunner(ComparisonConfig(timeout_seconds=0.001))
    runner.submit(base_grid, base_grid)
    process = runner._process
    outcome = runner.wait()
    assert isinstance(outcome, ComparisonFailure)
    assert "timed out" in outcome.error
    assert not process.is_alive()
    assert not runner.in_flight


def test_new_submit_supersedes_in_flight(base_grid):
    reference = copy.deepcopy(base_grid)
    reference[3][4] = "1"
    with ComparisonRunner() as runner:
        runner.submit(base_grid, base_grid)
        first = runner._process
        runner.submit(base_grid, reference)
        assert not first.is_alive()
        outcome = runner.wait(30)
    assert isinstance(outcome, ComparisonResult)
    assert outcome.differences == frozenset({"2:4"})

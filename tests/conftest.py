# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from pricelist_diff.logging.init import reset_logging

HEADER = ["Tipo", "Clase", "Versiones", "Preciobase", "Preciobase2", "Temp"]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """zero_rows:
  legacy_policy: fixed_positions
  positions: [1, 3]
comparison:
  columns: 5
  temp_marker: temp
  timeout_seconds: 30
export:
  sheet_name: Datos Procesados
database:
  host: localhost
  port: 5432
  user: appuser
  database: pricelists
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "pricelist.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def base_grid() -> list[list[object]]:
    return [
        list(HEADER),
        [2, "", "Model A", "", "", " "],
        [3, "", "2024 Unidades Nuevas", "", "", ""],
        [4, "", "Trim 1", "1000", "900", ""],
    ]


@pytest.fixture()
def new_price_sheet() -> list[list[object]]:
    """New sheet as delivered: unsorted year blocks, stray separators, "Lista" notes."""
    return [
        list(HEADER),
        [0, "", "", "", "", ""],
        [2, "", "INTEGRA", "", "", ""],
        [0, "", "", "", "", ""],
        [3, "", "2024 INTEGRA Unidades Usadas", "", "", ""],
        [4, "A", "Integra Base", "Lista 500000", "480000", ""],
        [3, "", "2025 INTEGRA Unidades Nuevas", "", "", ""],
        [4, "A", "Integra A-Spec", "Lista 650000", "620000", ""],
        [4, "A", "Integra Type S", "900000", "880000", ""],
        [2, "", "MDX", "", "", ""],
        [3, "", "2025 MDX Unidades Nuevas", "", "", ""],
        [4, "B", "MDX Advance", "1200000", "1150000", ""],
    ]

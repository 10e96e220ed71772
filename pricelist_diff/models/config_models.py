from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Config dataclasses for the price list reconciler.

These are the typed, defaulted view of config/pricelist.yml produced by
pricelist_diff.config.loader. Every field has a default so that the core
services can run without a config file.
"""

__all__ = [
    "ZeroRowPolicy",
    "ZeroRowConfig",
    "ComparisonConfig",
    "ExportConfig",
    "DatabaseConfig",
    "AppConfig",
]


class ZeroRowPolicy(Enum):
    """Legacy rule deleting pre-existing separator rows near the top of a new sheet.

    - FIXED_POSITIONS: delete type-0 rows found at the configured grid indices
      (header is index 0), checked against the original positions.
    - LEADING_WINDOW: delete every type-0 row within the first ``window`` data rows.
    - DISABLED: keep all separator rows.
    """
    FIXED_POSITIONS = "fixed_positions"
    LEADING_WINDOW = "leading_window"
    DISABLED = "disabled"


@dataclass(frozen=True)
class ZeroRowConfig:
    legacy_policy: ZeroRowPolicy = ZeroRowPolicy.FIXED_POSITIONS
    positions: tuple[int, ...] = (1, 3)
    window: int = 10


@dataclass(frozen=True)
class ComparisonConfig:
    columns: int = 5  # tipo, clase, versiones, preciobase, preciobase2
    temp_marker: str = "temp"
    year_context_label: str = "AñoContexto"
    timeout_seconds: float = 60.0


@dataclass(frozen=True)
class ExportConfig:
    sheet_name: str = "Datos Procesados"
    column_widths: tuple[int, ...] = (8, 15, 40, 15, 15)
    default_width: int = 12


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection fallback used when environment variables are not set."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class AppConfig:
    zero_rows: ZeroRowConfig = field(default_factory=ZeroRowConfig)
    comparison: ComparisonConfig = field(default_factory=ComparisonConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

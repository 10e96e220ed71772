"""Domain models for the price list reconciler.

Grids and row types, comparison outcomes, configuration and run results.
"""

from .comparison_result import (
    ComparisonError,
    ComparisonFailure,
    ComparisonResult,
    ComparisonStats,
)
from .config_models import AppConfig, ComparisonConfig, DatabaseConfig, ExportConfig, ZeroRowConfig, ZeroRowPolicy
from .grid import ClassifiedRow, RowType, YearBlock, YearNote
from .processing_result import FileStat, TransformResult

__all__ = [
    # Grid models
    "RowType",
    "YearNote",
    "YearBlock",
    "ClassifiedRow",
    # Comparison
    "ComparisonResult",
    "ComparisonFailure",
    "ComparisonStats",
    "ComparisonError",
    # Configuration models
    "AppConfig",
    "ZeroRowConfig",
    "ZeroRowPolicy",
    "ComparisonConfig",
    "ExportConfig",
    "DatabaseConfig",
    # Run results
    "FileStat",
    "TransformResult",
]

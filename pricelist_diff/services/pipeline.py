from __future__ import annotations

import copy
import logging

from ..models.config_models import ZeroRowConfig
from ..models.grid import Grid
from .formatter import format_vehicle_fields
from .reorder import reorder_all
from .zero_rows import drop_legacy_zero_rows, insert_separators

"""New-file transform pipeline.

The step order is fixed:

    copy -> legacy zero deletion -> separator insertion -> reorder -> format

Reordering parses the year out of the original column-2 text, which the
formatter overwrites, so formatting always comes last.
"""

__all__ = [
    "process_new_data",
]

logger = logging.getLogger(__name__)


def process_new_data(grid: Grid, zero_rows: ZeroRowConfig | None = None) -> Grid:
    """Turn a freshly loaded new price sheet into its canonical form.

    The input grid is never modified.
    """
    if not grid:
        return []
    data = copy.deepcopy(grid)
    data = drop_legacy_zero_rows(data, zero_rows)
    data = [data[0], *insert_separators(data[1:])]
    data = reorder_all(data)
    data = format_vehicle_fields(data)
    logger.debug(f"transformed new sheet: {len(grid)} -> {len(data)} rows")
    return data

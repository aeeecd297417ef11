"""Vertical merge reconciliation for parsed tables."""
from __future__ import annotations

from typing import Dict

from docx_resolver.model.elements import Table, TableCell
from docx_resolver.utils.logger import get_logger

LOGGER = get_logger(__name__)

RESTART = "restart"
CONTINUE = "continue"


class TableMergeProcessor:
    """Fold ``w:vMerge`` runs of cells into a row span on the first cell.

    Columns are tracked by the cell's index within its row, not by grid
    column, so rows with differing ``gridSpan`` layouts are not reconciled.
    """

    def process(self, table: Table) -> Table:
        active: Dict[int, TableCell] = {}
        for row_index, row in enumerate(table.rows):
            for column, cell in enumerate(row.cells):
                marker = cell.properties.v_merge
                if marker == RESTART:
                    cell.properties.row_span = 1
                    active[column] = cell
                elif marker == CONTINUE:
                    origin = active.get(column)
                    if origin is None:
                        LOGGER.debug("Orphaned vMerge continue at row %d, cell %d", row_index, column)
                        continue
                    origin.properties.row_span = (origin.properties.row_span or 1) + 1
                    cell.properties.merged = True
                else:
                    active.pop(column, None)
        return table

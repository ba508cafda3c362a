"""Grow-only resize planning for destination worksheets."""

from collections.abc import Sequence
from typing import Any

from sheetsync.models import Dimension, ResizeOperation, SheetSize
from sheetsync.ranges import column_letter_to_index


def required_size(dataset: Sequence[Sequence[Any]], first_column: str = "A") -> SheetSize:
    """Return the grid extent needed to write ``dataset`` from row 1 at ``first_column``."""
    if not dataset:
        return SheetSize(row_count=0, column_count=0)
    width = max(len(row) for row in dataset)
    offset = column_letter_to_index(first_column) if first_column else 0
    return SheetSize(row_count=len(dataset), column_count=offset + width)


def plan_resize(current: SheetSize, required: SheetSize) -> list[ResizeOperation]:
    """Return the operations that grow ``current`` to hold ``required``.

    Never shrinks. Planning again against the resulting size yields nothing.
    """
    operations = []
    if current.row_count < required.row_count:
        operations.append(ResizeOperation(Dimension.ROWS, required.row_count))
    if current.column_count < required.column_count:
        operations.append(ResizeOperation(Dimension.COLUMNS, required.column_count))
    return operations


def apply_plan(current: SheetSize, operations: Sequence[ResizeOperation]) -> SheetSize:
    """Return the size ``current`` has after ``operations`` are applied."""
    rows, columns = current.row_count, current.column_count
    for operation in operations:
        if operation.dimension is Dimension.ROWS:
            rows = operation.count
        else:
            columns = operation.count
    return SheetSize(row_count=rows, column_count=columns)


def to_batch_update_requests(
    sheet_id: int, operations: Sequence[ResizeOperation]
) -> list[dict[str, Any]]:
    """Build ``updateSheetProperties`` requests for a spreadsheets.batchUpdate call."""
    requests = []
    for operation in operations:
        if operation.dimension is Dimension.ROWS:
            grid, fields = {"rowCount": operation.count}, "gridProperties.rowCount"
        else:
            grid, fields = {"columnCount": operation.count}, "gridProperties.columnCount"
        requests.append(
            {
                "updateSheetProperties": {
                    "properties": {"sheetId": sheet_id, "gridProperties": grid},
                    "fields": fields,
                }
            }
        )
    return requests

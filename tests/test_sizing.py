"""Unit tests for resize planning."""

import pytest

from sheetsync.models import Dimension, ResizeOperation, SheetSize
from sheetsync.sizing import apply_plan, plan_resize, required_size, to_batch_update_requests


class TestRequiredSize:
    """Tests for required_size."""

    def test_rows_and_widest_row(self) -> None:
        dataset = [["a", "b"], ["c", "d", "e"], ["f"]]
        assert required_size(dataset) == SheetSize(row_count=3, column_count=3)

    def test_empty_dataset(self) -> None:
        assert required_size([]) == SheetSize(0, 0)

    def test_first_column_offset(self) -> None:
        """Data written from column C needs two more columns of grid."""
        assert required_size([["a", "b"]], first_column="C") == SheetSize(1, 4)


class TestPlanResize:
    """Tests for plan_resize."""

    def test_no_change_needed(self) -> None:
        assert plan_resize(SheetSize(1000, 26), SheetSize(10, 5)) == []

    def test_exact_fit(self) -> None:
        assert plan_resize(SheetSize(10, 5), SheetSize(10, 5)) == []

    def test_grow_rows_only(self) -> None:
        assert plan_resize(SheetSize(100, 26), SheetSize(150, 3)) == [
            ResizeOperation(Dimension.ROWS, 150)
        ]

    def test_grow_columns_only(self) -> None:
        assert plan_resize(SheetSize(100, 26), SheetSize(10, 30)) == [
            ResizeOperation(Dimension.COLUMNS, 30)
        ]

    def test_grow_both(self) -> None:
        operations = plan_resize(SheetSize(0, 0), SheetSize(3, 4))
        assert set(operations) == {
            ResizeOperation(Dimension.ROWS, 3),
            ResizeOperation(Dimension.COLUMNS, 4),
        }

    def test_never_shrinks(self) -> None:
        assert plan_resize(SheetSize(5000, 100), SheetSize(1, 1)) == []

    @pytest.mark.parametrize(
        ("current", "required"),
        [
            (SheetSize(0, 0), SheetSize(3, 4)),
            (SheetSize(10, 2), SheetSize(5, 8)),
            (SheetSize(1, 50), SheetSize(200, 26)),
            (SheetSize(100, 26), SheetSize(100, 26)),
        ],
    )
    def test_idempotent(self, current: SheetSize, required: SheetSize) -> None:
        """Planning against the size the first plan produces yields nothing."""
        first = plan_resize(current, required)
        resized = apply_plan(current, first)
        assert plan_resize(resized, required) == []


class TestApplyPlan:
    """Tests for apply_plan."""

    def test_applies_each_dimension(self) -> None:
        operations = [
            ResizeOperation(Dimension.COLUMNS, 12),
            ResizeOperation(Dimension.ROWS, 300),
        ]
        assert apply_plan(SheetSize(10, 2), operations) == SheetSize(300, 12)

    def test_no_operations(self) -> None:
        assert apply_plan(SheetSize(7, 3), []) == SheetSize(7, 3)


class TestBatchUpdateRequests:
    """Tests for the Sheets batchUpdate request bodies."""

    def test_row_and_column_requests(self) -> None:
        requests = to_batch_update_requests(
            42,
            [ResizeOperation(Dimension.ROWS, 150), ResizeOperation(Dimension.COLUMNS, 30)],
        )
        assert requests == [
            {
                "updateSheetProperties": {
                    "properties": {"sheetId": 42, "gridProperties": {"rowCount": 150}},
                    "fields": "gridProperties.rowCount",
                }
            },
            {
                "updateSheetProperties": {
                    "properties": {"sheetId": 42, "gridProperties": {"columnCount": 30}},
                    "fields": "gridProperties.columnCount",
                }
            },
        ]

    def test_empty(self) -> None:
        assert to_batch_update_requests(0, []) == []

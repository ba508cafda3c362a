"""Data model for a single sync request.

Everything here is constructed per request and discarded once the response
has been sent. Nothing persists between invocations.
"""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

CellValue = str | int | float | bool
Row = list[CellValue]
Dataset = list[Row]


class Dimension(str, Enum):
    """Grid dimension of a worksheet."""

    ROWS = "ROWS"
    COLUMNS = "COLUMNS"


@dataclass(frozen=True)
class RangeDescriptor:
    """Logical description of a rectangular worksheet range.

    Row bounds are 1-based. ``None`` (or 0) leaves the bound open so the
    range spans the whole column extent.
    """

    sheet_name: str
    first_column: str
    last_column: str
    sheet_id: int | None = None
    first_row: int | None = None
    last_row: int | None = None


@dataclass(frozen=True)
class SheetSize:
    """Grid capacity of a worksheet, independent of how much holds data."""

    row_count: int = 0
    column_count: int = 0


@dataclass(frozen=True)
class ResizeOperation:
    """Set the row or column count of a worksheet grid to ``count``."""

    dimension: Dimension
    count: int


class WriteStrategy(str, Enum):
    SKIP = "skip"
    FULL_REWRITE = "full_rewrite"
    SPARSE_ROW_REWRITE = "sparse_row_rewrite"


@dataclass(frozen=True)
class UpdatePlan:
    """Structural changes plus the write strategy for one destination."""

    strategy: WriteStrategy
    resize_operations: tuple[ResizeOperation, ...] = ()
    row_indices: tuple[int, ...] = ()

    @classmethod
    def skip(cls) -> "UpdatePlan":
        return cls(strategy=WriteStrategy.SKIP)

    @property
    def needs_write(self) -> bool:
        return self.strategy is not WriteStrategy.SKIP


class SyncOutcome(Enum):
    """Terminal states of a sync request: (HTTP status, response text)."""

    COMPLETED = (200, "Completed")
    NO_UPDATE_NEEDED = (200, "No update needed; data is already synchronized.")
    BAD_REQUEST = (
        400,
        "Bad Request: Missing originSpreadsheetId or destinationSpreadsheetId",
    )
    INTERNAL_ERROR = (500, "Internal Server Error")

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


@dataclass
class SyncResult:
    """What a sync request ended in, and what it did on the way."""

    outcome: SyncOutcome
    plan: UpdatePlan | None = None
    rows_written: int = 0
    missing: list[str] = field(default_factory=list)


class SyncRequest(BaseModel):
    """Origin and destination identifiers submitted by a caller.

    Field names follow the camelCase JSON body. Every field is optional at
    parse time; ``missing_identifiers`` reports the invariant that has to
    hold before any I/O happens.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    origin_spreadsheet_id: str = ""
    origin_spreadsheet_name: str = ""
    origin_worksheet_id: int | None = None
    origin_worksheet_name: str = ""
    origin_worksheet_first_column: str = ""
    origin_worksheet_last_column: str = ""
    origin_worksheet_first_row: int | None = None
    origin_worksheet_last_row: int | None = None
    destination_spreadsheet_id: str = ""
    destination_spreadsheet_name: str = ""
    destination_worksheet_id: int | None = None
    destination_worksheet_name: str = ""

    def missing_identifiers(self) -> list[str]:
        """Return the camelCase names of required identifiers that are empty."""
        missing = []
        if not self.origin_spreadsheet_id:
            missing.append("originSpreadsheetId")
        if not self.destination_spreadsheet_id:
            missing.append("destinationSpreadsheetId")
        return missing

    def origin_range(self) -> RangeDescriptor:
        return RangeDescriptor(
            sheet_name=self.origin_worksheet_name,
            sheet_id=self.origin_worksheet_id,
            first_column=self.origin_worksheet_first_column,
            last_column=self.origin_worksheet_last_column,
            first_row=self.origin_worksheet_first_row,
            last_row=self.origin_worksheet_last_row,
        )

    def destination_range(self) -> RangeDescriptor:
        """Destination range, written from row 1.

        The request carries no destination column bounds, so the origin's
        column bounds are reused.
        """
        return RangeDescriptor(
            sheet_name=self.destination_worksheet_name,
            sheet_id=self.destination_worksheet_id,
            first_column=self.origin_worksheet_first_column,
            last_column=self.origin_worksheet_last_column,
        )

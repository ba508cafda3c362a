"""Sync decision engine.

Reads an origin and a destination range, decides whether the destination is
stale and, if it is, rewrites it to match the origin:

1. Reject requests missing either spreadsheet id (no I/O).
2. Read both ranges concurrently.
3. Equal whole-dataset fingerprints: nothing to do.
4. Empty destination: grow the grid, then write the whole origin at once.
5. Otherwise: find the differing rows, grow the grid, then rewrite each
   differing row at its own single-row address.

Any backend failure aborts the remaining steps. Nothing is rolled back; every
write is idempotent, so running the request again converges from whatever
state the destination was left in. Concurrent external edits to the
destination during a sync are not detected (lost update risk).
"""

import asyncio

from loguru import logger

from sheetsync.backend import BackendError, SheetsBackend
from sheetsync.fingerprint import differing_rows, fingerprint
from sheetsync.models import (
    Dataset,
    Row,
    SyncOutcome,
    SyncRequest,
    SyncResult,
    UpdatePlan,
    WriteStrategy,
)
from sheetsync.ranges import resolve_read_range, row_range
from sheetsync.sizing import plan_resize, required_size


class SyncEngine:
    """Synchronizes one destination range with one origin range per call.

    The engine holds no per-request state, so a single instance can serve
    concurrent requests.
    """

    def __init__(self, backend: SheetsBackend, row_write_concurrency: int = 1) -> None:
        """Initialize the engine.

        Args:
            backend: Spreadsheet backend used for every read, resize and write
            row_write_concurrency: Maximum number of row writes in flight at once.
                1 writes rows sequentially.
        """
        if row_write_concurrency < 1:
            raise ValueError("row_write_concurrency must be at least 1")
        self._backend = backend
        self._row_write_concurrency = row_write_concurrency

    async def sync(self, request: SyncRequest) -> SyncResult:
        """Run a sync request to one of its terminal outcomes."""
        missing = request.missing_identifiers()
        if missing:
            logger.error("Missing required identifiers", extra={"missing": missing})
            return SyncResult(outcome=SyncOutcome.BAD_REQUEST, missing=missing)

        try:
            return await self._run(request)
        except BackendError as e:
            logger.exception(
                "Sync aborted by backend failure",
                extra={
                    "origin_spreadsheet_id": request.origin_spreadsheet_id,
                    "destination_spreadsheet_id": request.destination_spreadsheet_id,
                    "error_type": type(e).__name__,
                    "status_code": e.status_code,
                },
            )
            return SyncResult(outcome=SyncOutcome.INTERNAL_ERROR)

    async def plan(
        self, request: SyncRequest, origin: Dataset, destination: Dataset
    ) -> UpdatePlan:
        """Decide what has to change in the destination.

        Queries the destination grid size only when something has to be written.
        """
        if fingerprint(origin) == fingerprint(destination):
            return UpdatePlan.skip()

        if not destination:
            strategy = WriteStrategy.FULL_REWRITE
            row_indices: tuple[int, ...] = ()
        else:
            row_indices = tuple(differing_rows(origin, destination))
            strategy = WriteStrategy.SPARSE_ROW_REWRITE
            if not row_indices:
                # Only trailing empty rows differ; nothing to resize or write.
                return UpdatePlan(strategy=strategy)

        current = await self._backend.get_sheet_size(
            request.destination_spreadsheet_id, request.destination_worksheet_id
        )
        required = required_size(origin, request.origin_worksheet_first_column)
        operations = plan_resize(current, required)
        logger.info(
            "Destination grid checked",
            extra={
                "current": {"rows": current.row_count, "columns": current.column_count},
                "required": {"rows": required.row_count, "columns": required.column_count},
                "resize_operations": len(operations),
            },
        )
        return UpdatePlan(
            strategy=strategy,
            resize_operations=tuple(operations),
            row_indices=row_indices,
        )

    async def _run(self, request: SyncRequest) -> SyncResult:
        origin_address = resolve_read_range(request.origin_range())
        destination_address = resolve_read_range(request.destination_range())
        logger.info(
            "Reading ranges",
            extra={"origin_range": origin_address, "destination_range": destination_address},
        )

        origin, destination = await asyncio.gather(
            self._backend.read_range(origin_address, request.origin_spreadsheet_id),
            self._backend.read_range(destination_address, request.destination_spreadsheet_id),
        )
        logger.info(
            "Ranges read",
            extra={"origin_rows": len(origin), "destination_rows": len(destination)},
        )

        plan = await self.plan(request, origin, destination)
        if not plan.needs_write:
            logger.info("No update needed; data is already synchronized")
            return SyncResult(outcome=SyncOutcome.NO_UPDATE_NEEDED, plan=plan)

        # Grid capacity must cover the origin before any positional write.
        if plan.resize_operations:
            await self._backend.apply_resize(
                request.destination_spreadsheet_id,
                request.destination_worksheet_id,
                plan.resize_operations,
            )

        if plan.strategy is WriteStrategy.FULL_REWRITE:
            logger.info(
                "Destination empty, writing full range",
                extra={"range": destination_address, "rows": len(origin)},
            )
            await self._backend.write_range(
                destination_address, request.destination_spreadsheet_id, origin
            )
            rows_written = len(origin)
        else:
            logger.info(
                "Rewriting differing rows",
                extra={"rows": list(plan.row_indices), "count": len(plan.row_indices)},
            )
            rows_written = await self._write_rows(request, plan, origin, destination)

        logger.info("Sync completed", extra={"strategy": plan.strategy.value, "rows": rows_written})
        return SyncResult(outcome=SyncOutcome.COMPLETED, plan=plan, rows_written=rows_written)

    async def _write_rows(
        self,
        request: SyncRequest,
        plan: UpdatePlan,
        origin: Dataset,
        destination: Dataset,
    ) -> int:
        descriptor = request.destination_range()
        semaphore = asyncio.Semaphore(self._row_write_concurrency)

        async def write_one(index: int) -> None:
            address = row_range(descriptor, index)
            values = _row_for_write(origin, destination, index)
            async with semaphore:
                await self._backend.write_range(
                    address, request.destination_spreadsheet_id, [values]
                )

        if self._row_write_concurrency == 1:
            for index in plan.row_indices:
                await write_one(index)
            return len(plan.row_indices)

        # The first failed write cancels every write still pending.
        try:
            async with asyncio.TaskGroup() as group:
                for index in plan.row_indices:
                    group.create_task(write_one(index))
        except ExceptionGroup as failures:
            first = failures.exceptions[0]
            if isinstance(first, BackendError):
                raise first from failures
            raise
        return len(plan.row_indices)


def _row_for_write(origin: Dataset, destination: Dataset, index: int) -> Row:
    """Origin row at ``index``, padded with blanks to clear stale destination cells."""
    row: Row = list(origin[index]) if index < len(origin) else []
    stale_width = len(destination[index]) if index < len(destination) else 0
    if len(row) < stale_width:
        row.extend([""] * (stale_width - len(row)))
    return row

"""Spreadsheet backend used by the sync engine.

Defines the SheetsBackend protocol, the backend error taxonomy and
GoogleSheetsBackend, the production implementation over the Google Sheets
v4 REST API. Tests provide an in-memory implementation of the protocol.
"""

from __future__ import annotations

import asyncio
import ssl
import urllib.parse
from collections.abc import Sequence
from typing import Any, Protocol

import certifi
import google.auth
import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport import requests as google_requests
from google.oauth2 import service_account
from loguru import logger

from sheetsync.models import Dataset, ResizeOperation, SheetSize
from sheetsync.sizing import to_batch_update_requests

API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
DEFAULT_TIMEOUT = 60


class BackendError(Exception):
    """Base exception for spreadsheet backend failures."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ReadError(BackendError):
    """Raised when reading a range fails."""


class WriteError(BackendError):
    """Raised when writing a range fails."""


class SizeQueryError(BackendError):
    """Raised when the worksheet grid size cannot be fetched."""


class ResizeError(BackendError):
    """Raised when resizing a worksheet grid fails."""


class CredentialsError(BackendError):
    """Raised when credentials cannot be loaded or refreshed."""


class SheetsBackend(Protocol):
    """Operations the sync engine needs from a spreadsheet service."""

    async def read_range(self, address: str, spreadsheet_id: str) -> Dataset: ...

    async def write_range(
        self, address: str, spreadsheet_id: str, dataset: Dataset
    ) -> None: ...

    async def get_sheet_size(
        self, spreadsheet_id: str, worksheet_id: int | None
    ) -> SheetSize: ...

    async def apply_resize(
        self,
        spreadsheet_id: str,
        worksheet_id: int | None,
        operations: Sequence[ResizeOperation],
    ) -> None: ...

    async def close(self) -> None: ...


def load_credentials(credentials_file: str = "") -> Any:
    """Load Google credentials with the spreadsheets scope.

    Uses the service account key file when one is given, Application Default
    Credentials otherwise.
    """
    try:
        if credentials_file:
            return service_account.Credentials.from_service_account_file(
                credentials_file, scopes=SHEETS_SCOPES
            )
        credentials, _ = google.auth.default(scopes=SHEETS_SCOPES)
        return credentials
    except (GoogleAuthError, OSError, ValueError) as e:
        raise CredentialsError(f"Unable to load Google credentials: {e}") from e


class GoogleSheetsBackend:
    """Production backend talking to the Google Sheets API.

    Owns one httpx.AsyncClient for its lifetime. The access token comes from
    google-auth credentials and is refreshed in a worker thread whenever it
    is missing or expired, since google-auth is synchronous.
    """

    def __init__(
        self,
        credentials: Any,
        timeout: int = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            credentials: google-auth credentials with the spreadsheets scope
            timeout: Request timeout in seconds
            client: Optional preconfigured HTTP client (injectable for testing)
        """
        self._credentials = credentials
        self._refresh_lock = asyncio.Lock()
        if client is None:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            client = httpx.AsyncClient(
                timeout=timeout,
                verify=ssl_context,
                headers={"Accept": "application/json"},
            )
        self._client = client

    async def read_range(self, address: str, spreadsheet_id: str) -> Dataset:
        url = f"{API_BASE}/{spreadsheet_id}/values/{_quote(address)}"
        response = await self._request(
            "GET",
            url,
            ReadError,
            params={"valueRenderOption": "UNFORMATTED_VALUE", "majorDimension": "ROWS"},
        )
        values: Dataset = response.get("values", [])
        logger.debug(
            "Range read",
            extra={"spreadsheet_id": spreadsheet_id, "range": address, "rows": len(values)},
        )
        return values

    async def write_range(self, address: str, spreadsheet_id: str, dataset: Dataset) -> None:
        url = f"{API_BASE}/{spreadsheet_id}/values/{_quote(address)}"
        response = await self._request(
            "PUT",
            url,
            WriteError,
            params={"valueInputOption": "RAW"},
            json={"range": address, "majorDimension": "ROWS", "values": dataset},
        )
        logger.debug(
            "Range written",
            extra={
                "spreadsheet_id": spreadsheet_id,
                "range": address,
                "updated_rows": response.get("updatedRows", 0),
                "updated_columns": response.get("updatedColumns", 0),
            },
        )

    async def get_sheet_size(self, spreadsheet_id: str, worksheet_id: int | None) -> SheetSize:
        """Return the grid size of a worksheet, or 0x0 if the worksheet is absent."""
        url = f"{API_BASE}/{spreadsheet_id}"
        response = await self._request(
            "GET",
            url,
            SizeQueryError,
            params={"fields": "sheets.properties(sheetId,gridProperties)"},
        )
        for sheet in response.get("sheets", []):
            props = sheet.get("properties", {})
            if props.get("sheetId", 0) == worksheet_id:
                grid = props.get("gridProperties", {})
                return SheetSize(
                    row_count=grid.get("rowCount", 0),
                    column_count=grid.get("columnCount", 0),
                )
        logger.warning(
            "Worksheet not found, assuming empty grid",
            extra={"spreadsheet_id": spreadsheet_id, "worksheet_id": worksheet_id},
        )
        return SheetSize(row_count=0, column_count=0)

    async def apply_resize(
        self,
        spreadsheet_id: str,
        worksheet_id: int | None,
        operations: Sequence[ResizeOperation],
    ) -> None:
        if not operations:
            return
        if worksheet_id is None:
            # A null sheetId resizes the first sheet, not necessarily the target one.
            logger.warning(
                "Worksheet id unknown, skipping resize",
                extra={
                    "spreadsheet_id": spreadsheet_id,
                    "operations": [(op.dimension.value, op.count) for op in operations],
                },
            )
            return
        url = f"{API_BASE}/{spreadsheet_id}:batchUpdate"
        await self._request(
            "POST",
            url,
            ResizeError,
            json={"requests": to_batch_update_requests(worksheet_id, operations)},
        )

    async def _authorization_header(self) -> dict[str, str]:
        async with self._refresh_lock:
            if not self._credentials.valid:
                try:
                    await asyncio.to_thread(self._credentials.refresh, google_requests.Request())
                except GoogleAuthError as e:
                    raise CredentialsError(f"Unable to refresh Google credentials: {e}") from e
        return {"Authorization": f"Bearer {self._credentials.token}"}

    async def _request(
        self,
        method: str,
        url: str,
        error_class: type[BackendError],
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Make an authenticated request, mapping failures to ``error_class``."""
        headers = await self._authorization_header()
        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
            response.raise_for_status()
            result: dict[str, Any] = response.json()
            return result
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body = e.response.text
            raise error_class(f"API error ({status}): {body}", status_code=status) from e
        except httpx.RequestError as e:
            raise error_class(f"Network error: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


def _quote(address: str) -> str:
    return urllib.parse.quote(address, safe="")

"""sheetsync - keep a Google Sheets range in sync with another.

Compares an origin and a destination range by content fingerprint and
rewrites the destination wholesale or row by row when they differ.
"""

__version__ = "1.0.0"

from sheetsync.backend import (
    BackendError,
    CredentialsError,
    GoogleSheetsBackend,
    ReadError,
    ResizeError,
    SheetsBackend,
    SizeQueryError,
    WriteError,
)
from sheetsync.engine import SyncEngine
from sheetsync.models import (
    RangeDescriptor,
    SheetSize,
    SyncOutcome,
    SyncRequest,
    SyncResult,
    UpdatePlan,
    WriteStrategy,
)

__all__ = [
    "BackendError",
    "CredentialsError",
    "GoogleSheetsBackend",
    "RangeDescriptor",
    "ReadError",
    "ResizeError",
    "SheetSize",
    "SheetsBackend",
    "SizeQueryError",
    "SyncEngine",
    "SyncOutcome",
    "SyncRequest",
    "SyncResult",
    "UpdatePlan",
    "WriteError",
    "WriteStrategy",
    "__version__",
]

"""Shared fixtures."""

import pytest

from sheetsync.models import SyncRequest
from tests.fakes import FakeSheetsBackend, request_body


@pytest.fixture
def backend() -> FakeSheetsBackend:
    """Create a fake backend."""
    return FakeSheetsBackend()


@pytest.fixture
def sync_request() -> SyncRequest:
    """Create a request syncing Source!A:C into Target!A:C."""
    return SyncRequest.model_validate(request_body())

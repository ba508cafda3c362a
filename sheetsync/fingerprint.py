"""Content fingerprints for equality testing of datasets.

A fingerprint is the hex SHA-256 of a canonical JSON encoding. JSON keeps
row order, row lengths and cell types apart (``1``, ``1.0`` and ``"1"``
encode differently), so two datasets share a fingerprint only when they are
structurally identical.
"""

import hashlib
import json
from collections.abc import Sequence
from typing import Any


def _digest(value: Any) -> str:
    encoded = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def fingerprint(dataset: Sequence[Sequence[Any]]) -> str:
    """Fingerprint a whole dataset."""
    return _digest([list(row) for row in dataset])


def row_fingerprint(row: Sequence[Any]) -> str:
    """Fingerprint a single row."""
    return _digest(list(row))


def differing_rows(
    origin: Sequence[Sequence[Any]], destination: Sequence[Sequence[Any]]
) -> list[int]:
    """Return the ascending row indices where origin and destination differ.

    Rows are compared positionally up to the longer of the two datasets; a
    row missing on the shorter side compares as an empty row.
    """
    differing = []
    for index in range(max(len(origin), len(destination))):
        origin_row = origin[index] if index < len(origin) else []
        destination_row = destination[index] if index < len(destination) else []
        if row_fingerprint(origin_row) != row_fingerprint(destination_row):
            differing.append(index)
    return differing

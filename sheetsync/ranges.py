"""A1 notation helpers.

Builds range addresses from a RangeDescriptor. Nothing here validates
column letters; a malformed descriptor produces a malformed address and the
Sheets API reports the error.
"""

from sheetsync.models import RangeDescriptor


def quote_sheet_name(name: str) -> str:
    """Quote a sheet title for use in an A1 range when the API requires it.

    Titles containing spaces, quotes, ``!``, ``:`` or starting with a digit
    are wrapped in single quotes, with embedded quotes doubled.
    """
    needs_quoting = (
        " " in name
        or "'" in name
        or "!" in name
        or ":" in name
        or (len(name) > 0 and name[0].isdigit())
    )
    if needs_quoting:
        escaped = name.replace("'", "''")
        return f"'{escaped}'"
    return name


def _bound(row: int | None) -> str:
    return str(row) if row else ""


def resolve_read_range(descriptor: RangeDescriptor) -> str:
    """Return ``SheetName!<FirstColumn><FirstRow>:<LastColumn><LastRow>``.

    Absent or zero row bounds render as empty strings, giving an open-ended
    range over the whole column span.
    """
    sheet = quote_sheet_name(descriptor.sheet_name)
    start = f"{descriptor.first_column}{_bound(descriptor.first_row)}"
    end = f"{descriptor.last_column}{_bound(descriptor.last_row)}"
    return f"{sheet}!{start}:{end}"


def row_range(descriptor: RangeDescriptor, row_index: int) -> str:
    """Return the address of a single 0-based row within the descriptor's columns."""
    row_number = row_index + 1
    sheet = quote_sheet_name(descriptor.sheet_name)
    return (
        f"{sheet}!{descriptor.first_column}{row_number}"
        f":{descriptor.last_column}{row_number}"
    )


def column_letter_to_index(letters: str) -> int:
    """Convert Excel-style column letters to a 0-based index.

    Examples: A -> 0, Z -> 25, AA -> 26
    """
    index = 0
    for char in letters.upper():
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1

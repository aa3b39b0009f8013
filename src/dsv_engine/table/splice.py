"""Cut substrings out of, and paste them into, a document's raw text."""

from __future__ import annotations

from .document import DSVDocument
from .offsets import (
    first_index,
    is_extension_operation,
    is_trim_operation,
    last_index,
    next_cell,
    previous_cell,
)
from .state import Coordinates


def slice_out(
    document: DSVDocument,
    coords: Coordinates,
    *,
    keeping_cell: bool = False,
    keeping_value: bool = False,
) -> str:
    """Return the text at ``coords`` and, unless ``keeping_value``, remove it.

    ``keeping_cell`` takes only the cell content and leaves its delimiters in
    place. Otherwise the cell or row is taken together with one delimiter: the
    one before it for the last column or last row, the one after it elsewhere.
    """

    if keeping_cell:
        start = first_index(document, coords)
        end = last_index(document, coords)
    elif is_trim_operation(document, coords):
        start = last_index(document, previous_cell(document, coords))
        end = last_index(document, coords)
    else:
        start = first_index(document, coords)
        end = first_index(document, next_cell(document, coords))

    text = document.raw_data
    value = text[start:end]
    if not keeping_value:
        document.raw_data = text[:start] + text[end:]
    return value


def insert_at(document: DSVDocument, value: str, coords: Coordinates) -> None:
    """Splice ``value`` in at ``coords``; callers supply any delimiters."""

    if is_extension_operation(document, coords):
        index = last_index(document, previous_cell(document, coords))
    else:
        index = first_index(document, coords)
    text = document.raw_data
    document.raw_data = text[:index] + value + text[index:]


def blank_row(document: DSVDocument, row: int) -> str:
    """Delimiter-only text for a new row inserted at ``row``."""

    cells = document.delimiter * (document.column_count() - 1)
    if row > document.row_count() - 1:
        return document.row_delimiter + cells
    return cells + document.row_delimiter


__all__ = ["slice_out", "insert_at", "blank_row"]

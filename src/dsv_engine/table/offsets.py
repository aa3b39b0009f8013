"""Map logical coordinates to offsets inside a document's raw text.

All functions read row/column counts and offsets from the document's parsed
snapshot. The only live value is the end of the last row, taken from the
current length of ``raw_data``.
"""

from __future__ import annotations

from .document import DSVDocument
from .state import Coordinates


def first_index(document: DSVDocument, coords: Coordinates) -> int:
    """Offset where the cell (or the row, when ``column`` is None) begins."""

    column = 0 if coords.column is None else coords.column
    return document.get_offset_index(coords.row + 1, column)


def last_index(document: DSVDocument, coords: Coordinates) -> int:
    """Offset one past the cell or row content, excluding the delimiter after it."""

    column = coords.column
    if column is not None and 0 <= column < document.column_count() - 1:
        next_start = document.get_offset_index(coords.row + 1, column + 1)
        return next_start - len(document.delimiter)
    return row_end(document, coords.row)


def row_end(document: DSVDocument, row: int) -> int:
    """End of ``row``'s content; row -1 is the header row."""

    row_delimiter = document.row_delimiter
    if row < document.row_count() - 1:
        return document.get_offset_index(row + 2, 0) - len(row_delimiter)
    text = document.raw_data
    if text.endswith(row_delimiter):
        return len(text) - len(row_delimiter)
    return len(text)


def is_trim_operation(document: DSVDocument, coords: Coordinates) -> bool:
    """Removing the last column or the last row must take the preceding delimiter."""

    if coords.is_row:
        return coords.row == document.row_count() - 1
    return coords.column == document.column_count() - 1


def is_extension_operation(document: DSVDocument, coords: Coordinates) -> bool:
    """Inserting past the current bounds anchors to the end of the previous cell."""

    if coords.column is not None and coords.column >= document.column_count():
        return True
    return coords.row >= document.row_count()


def previous_cell(document: DSVDocument, coords: Coordinates) -> Coordinates:
    if coords.is_row:
        return Coordinates(coords.row - 1)
    if coords.column == 0:
        return Coordinates(coords.row - 1, document.column_count() - 1)
    return Coordinates(coords.row, coords.column - 1)


def next_cell(document: DSVDocument, coords: Coordinates) -> Coordinates:
    if coords.is_row:
        return Coordinates(coords.row + 1)
    if coords.column == document.column_count() - 1:
        return Coordinates(coords.row + 1, 0)
    return Coordinates(coords.row, coords.column + 1)


__all__ = [
    "first_index",
    "last_index",
    "row_end",
    "is_trim_operation",
    "is_extension_operation",
    "previous_cell",
    "next_cell",
]

"""Single-slot clipboard for cut/copy/paste of cell blocks."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

CellBlock = Tuple[Tuple[str, ...], ...]


class ClipboardRegister:
    """Holds the last cut or copied block; paste reads it without consuming it."""

    def __init__(self) -> None:
        self._block: Optional[CellBlock] = None

    @property
    def has_data(self) -> bool:
        return self._block is not None

    def store(self, rows: Sequence[Sequence[str]]) -> None:
        self._block = tuple(tuple(row) for row in rows)

    def get(self) -> Optional[CellBlock]:
        return self._block

    def clear(self) -> None:
        self._block = None


def parse_clipboard_text(
    text: str, *, row_separator: str = "\n", column_separator: str = "\t"
) -> CellBlock:
    """Split plain clipboard text into rows of cells.

    Spreadsheet hosts end copied text with a row separator; that one trailing
    separator does not start another row.
    """

    if text.endswith(row_separator):
        text = text[: -len(row_separator)]
    return tuple(
        tuple(line.split(column_separator)) for line in text.split(row_separator)
    )


__all__ = ["CellBlock", "ClipboardRegister", "parse_clipboard_text"]

"""DSV document: raw text plus the structural index parsed from it.

The index (row starts, per-row column starts, row content ends, header names)
is a snapshot taken at parse time. Editing code mutates ``raw_data`` directly
and keeps reading offsets from the snapshot until the next parse, which is why
multi-step edits run back to front.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .events import DOCUMENT_PARSED, EventBus


@dataclass(frozen=True, slots=True)
class DSVOptions:
    """Dialect of a document and of plain-text clipboard data."""

    delimiter: str = ","
    row_delimiter: str = "\n"
    quote: Optional[str] = '"'
    clipboard_row_separator: str = "\n"
    clipboard_column_separator: str = "\t"

    def __post_init__(self) -> None:
        if not self.delimiter:
            raise ValueError("delimiter cannot be empty")
        if not self.row_delimiter:
            raise ValueError("row_delimiter cannot be empty")
        if self.delimiter == self.row_delimiter:
            raise ValueError("delimiter and row_delimiter must differ")
        if self.quote is not None and not self.quote:
            raise ValueError("quote cannot be empty; pass None to disable quoting")
        if not self.clipboard_row_separator or not self.clipboard_column_separator:
            raise ValueError("clipboard separators cannot be empty")


@dataclass(frozen=True, slots=True)
class ParseCompleted:
    """Payload of ``document.parsed``; ``token`` echoes the parse request."""

    token: Optional[int]
    version: int


def column_name(number: int) -> str:
    """Spreadsheet-style label for the 1-based column ``number`` (1 -> A, 27 -> AA)."""

    if number < 1:
        raise ValueError("column numbers start at 1")
    label = ""
    while number:
        number, remainder = divmod(number - 1, 26)
        label = chr(ord("A") + remainder) + label
    return label


class DSVDocument:
    """Parser collaborator consumed by the editable model."""

    def __init__(
        self,
        raw_data: str = "",
        *,
        options: Optional[DSVOptions] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.options = options or DSVOptions()
        self.bus = bus or EventBus()
        self.raw_data = raw_data
        self.header: List[str] = []
        self.version = 0
        self._row_starts: List[List[int]] = []
        self._row_ends: List[int] = []
        self._length = 0
        self._stale = False
        self._requested_token: Optional[int] = None
        self._handle: Optional[asyncio.Handle] = None
        self.parse()

    @property
    def delimiter(self) -> str:
        return self.options.delimiter

    @property
    def row_delimiter(self) -> str:
        return self.options.row_delimiter

    @property
    def stale(self) -> bool:
        """True while a requested re-parse has not completed."""

        return self._stale

    # -- structural index -------------------------------------------------

    def row_count(self, region: str = "body") -> int:
        rows = len(self._row_starts)
        if region == "body":
            return max(rows - 1, 0)
        if region == "column-header":
            return 1 if rows else 0
        raise ValueError(f"Unknown row region '{region}'")

    def column_count(self, region: str = "body") -> int:
        if region == "body":
            return len(self._row_starts[0]) if self._row_starts else 0
        if region == "row-header":
            return 1
        raise ValueError(f"Unknown column region '{region}'")

    def get_offset_index(self, row: int, column: int) -> int:
        """Offset where ``column`` of parser row ``row`` (0 is the header) starts.

        Columns missing from a short row resolve to that row's end; rows past
        the end resolve to the buffer length at parse time.
        """

        if row >= len(self._row_starts):
            return self._length
        starts = self._row_starts[row]
        if column < len(starts):
            return starts[column]
        return self._row_ends[row]

    def data(self, region: str, row: int, column: int) -> str:
        if region == "body":
            return self._cell_text(row + 1, column)
        if region == "column-header":
            return self.header[column]
        if region == "row-header":
            return str(row + 1)
        if region == "corner-header":
            return ""
        raise ValueError(f"Unknown cell region '{region}'")

    def _cell_text(self, row: int, column: int) -> str:
        starts = self._row_starts[row]
        if column >= len(starts):
            return ""
        start = starts[column]
        if column + 1 < len(starts):
            end = starts[column + 1] - len(self.delimiter)
        else:
            end = self._row_ends[row]
        return self._unquote(self.raw_data[start:end])

    def _unquote(self, value: str) -> str:
        quote = self.options.quote
        if (
            quote
            and len(value) >= 2 * len(quote)
            and value.startswith(quote)
            and value.endswith(quote)
        ):
            return value[len(quote) : -len(quote)].replace(quote * 2, quote)
        return value

    # -- parsing ----------------------------------------------------------

    def parse(self) -> None:
        """Rebuild the structural index from ``raw_data`` synchronously."""

        text = self.raw_data
        size = len(text)
        row_starts: List[List[int]] = []
        row_ends: List[int] = []

        index = 0
        while index < size:
            starts, end = self._scan_row(text, index)
            row_starts.append(starts)
            row_ends.append(end)
            # a delimiter at the very end is the document terminator, not a new row
            index = end + len(self.row_delimiter)

        self._row_starts = row_starts
        self._row_ends = row_ends
        self._length = size
        self.header[:] = (
            [self._cell_text(0, column) for column in range(len(row_starts[0]))]
            if row_starts
            else []
        )
        self.version += 1
        self._stale = False

    def _scan_row(self, text: str, index: int) -> Tuple[List[int], int]:
        """Column starts of the row beginning at ``index`` and where its content ends."""

        delimiter = self.delimiter
        row_delimiter = self.row_delimiter
        quote = self.options.quote
        size = len(text)
        starts = [index]
        while True:
            if quote and text.startswith(quote, index):
                index = self._skip_quoted(text, index + len(quote), quote)
            while (
                index < size
                and not text.startswith(delimiter, index)
                and not text.startswith(row_delimiter, index)
            ):
                index += 1
            if index < size and text.startswith(delimiter, index):
                index += len(delimiter)
                starts.append(index)
                continue
            return starts, index

    def header_extent(self) -> Tuple[List[int], int]:
        """Column starts and content end of the header row in the live ``raw_data``.

        Read from the text itself, not from the parse snapshot.
        """

        if not self.raw_data:
            return [], 0
        return self._scan_row(self.raw_data, 0)

    def read_header(self) -> List[str]:
        """Header names as they currently stand in ``raw_data``."""

        starts, end = self.header_extent()
        text = self.raw_data
        names = []
        for column, start in enumerate(starts):
            if column + 1 < len(starts):
                stop = starts[column + 1] - len(self.delimiter)
            else:
                stop = end
            names.append(self._unquote(text[start:stop]))
        return names

    @staticmethod
    def _skip_quoted(text: str, index: int, quote: str) -> int:
        size = len(text)
        while index < size:
            if text.startswith(quote, index):
                if text.startswith(quote, index + len(quote)):
                    index += 2 * len(quote)
                    continue
                return index + len(quote)
            index += 1
        return size

    def parse_async(self, *, token: Optional[int] = None) -> None:
        """Request a re-parse; completion emits ``document.parsed``.

        Runs on the next turn of the running asyncio loop. A newer request
        supersedes a pending one. Without a running loop the parse completes
        before this call returns.
        """

        self._stale = True
        self._requested_token = token
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._complete_parse()
            return
        self._handle = loop.call_soon(self._complete_parse)

    def ensure_current(self) -> None:
        """Complete a pending re-parse now so the index matches ``raw_data``."""

        if not self._stale:
            return
        if self._handle is not None:
            self._handle.cancel()
        self._complete_parse()

    def _complete_parse(self) -> None:
        self._handle = None
        self.parse()
        self.bus.emit(
            DOCUMENT_PARSED,
            ParseCompleted(token=self._requested_token, version=self.version),
        )

    def replace_text(self, raw_data: str) -> None:
        """Load new text from outside the editing core and re-parse it."""

        self.raw_data = raw_data
        self.parse_async()


__all__ = ["DSVDocument", "DSVOptions", "ParseCompleted", "column_name"]

"""Editable DSV model: structural edits, clipboard and undo/redo over one buffer."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, ContextManager, Dict, Optional

from dsv_engine.runtime import telemetry

from .changes import (
    CellsChanged,
    Change,
    ColumnsInserted,
    ColumnsMoved,
    ColumnsRemoved,
    ModelReset,
    RowsInserted,
    RowsMoved,
    RowsRemoved,
    describe_change,
    invert_change,
)
from .document import DSVDocument, DSVOptions, column_name
from .events import MODEL_CANCEL_EDITING, EventBus
from .registers import ClipboardRegister, parse_clipboard_text
from .splice import blank_row, insert_at, slice_out
from .state import CellSelection, Coordinates
from .sync import ChangeNotifier
from .undo import DATAMODEL_RECORD, Transaction, TransactionLog

CLIPBOARD_MODES = ("cut-cells", "copy-cells")


class EditableDSVModel:
    """Owns a ``DSVDocument`` and applies edits to its raw text in place.

    Every mutating operation commits the resulting text, header and change to
    the transaction log, then publishes the change through the notifier.
    Out-of-bounds coordinates are not checked.
    """

    def __init__(
        self,
        raw_data: str = "",
        *,
        name: str = "default",
        options: Optional[DSVOptions] = None,
        document: Optional[DSVDocument] = None,
        transaction_log: Optional[TransactionLog] = None,
        clipboard: Optional[ClipboardRegister] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.name = name
        if document is None:
            self.bus = bus or EventBus()
            document = DSVDocument(raw_data, options=options, bus=self.bus)
        else:
            self.bus = bus or document.bus
        self.document = document
        self.transaction_log = transaction_log or TransactionLog()
        self.clipboard = clipboard or ClipboardRegister()
        self.notifier = ChangeNotifier(self.document, self.bus)
        self._commit(ModelReset())

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        delimiter: str = ",",
        row_delimiter: str = "\n",
        name: str = "default",
    ) -> "EditableDSVModel":
        options = DSVOptions(delimiter=delimiter, row_delimiter=row_delimiter)
        return cls(text, name=name, options=options)

    # -- reads --------------------------------------------------------------

    @property
    def raw_data(self) -> str:
        return self.document.raw_data

    @property
    def header(self) -> list[str]:
        return self.document.header

    @property
    def header_length(self) -> int:
        """Length of the header row as written in the buffer, row delimiter included."""

        document = self.document
        _, end = document.header_extent()
        if document.raw_data.startswith(document.row_delimiter, end):
            return end + len(document.row_delimiter)
        return end

    @property
    def body_text(self) -> str:
        return self.document.raw_data[self.header_length :]

    def row_count(self, region: str = "body") -> int:
        self.document.ensure_current()
        return self.document.row_count(region)

    def column_count(self, region: str = "body") -> int:
        self.document.ensure_current()
        return self.document.column_count(region)

    def data(self, region: str, row: int, column: int) -> str:
        self.document.ensure_current()
        return self.document.data(region, row, column)

    def metadata(self, region: str, row: int, column: int) -> Dict[str, str]:
        del region, row, column
        return {"type": "string"}

    # -- cell edits -----------------------------------------------------------

    def set_data(self, region: str, row: int, column: int, value: Any) -> bool:
        """Overwrite one cell; ``column-header`` renames a header cell."""

        if region not in ("body", "column-header"):
            return False
        text = "" if value is None else str(value)
        with EditSpan(self, "set_data", row=row, column=column, region=region) as edit:
            if region == "column-header":
                # row -1 addresses the header row in the offset resolver
                coords = Coordinates(-1, column)
                row = 0
            else:
                coords = Coordinates(row, column)
            slice_out(self.document, coords, keeping_cell=True)
            insert_at(self.document, text, coords)
            if region == "column-header":
                self.document.header[:] = self.document.read_header()
            edit.commit(CellsChanged(row=row, column=column, region=region))
        return True

    # -- rows and columns -----------------------------------------------------

    def add_row(self, row: int) -> Change:
        document = self.document
        with EditSpan(self, "add_row", row=row) as edit:
            insert_at(document, blank_row(document, row), Coordinates(row))
            return edit.commit(RowsInserted(index=row))

    def remove_row(self, row: int) -> Change:
        with EditSpan(self, "remove_row", row=row) as edit:
            slice_out(self.document, Coordinates(row))
            return edit.commit(RowsRemoved(index=row))

    def add_column(self, column: int) -> Change:
        """Insert an empty column at ``column`` and append a header label."""

        document = self.document
        with EditSpan(self, "add_column", column=column) as edit:
            for row in range(document.row_count() - 1, -1, -1):
                insert_at(document, document.delimiter, Coordinates(row, column))

            label = column_name(document.column_count() + 1)
            _, header_end = document.header_extent()
            text = document.raw_data
            document.raw_data = (
                text[:header_end] + document.delimiter + label + text[header_end:]
            )
            document.header.append(label)
            return edit.commit(ColumnsInserted(index=column))

    def remove_column(self, column: int) -> Change:
        """Drop ``column`` from every body row and the last header label."""

        document = self.document
        with EditSpan(self, "remove_column", column=column) as edit:
            for row in range(document.row_count() - 1, -1, -1):
                slice_out(document, Coordinates(row, column))

            starts, header_end = document.header_extent()
            text = document.raw_data
            cut = max(starts[-1] - len(document.delimiter), 0)
            document.raw_data = text[:cut] + text[header_end:]
            document.header.pop()
            return edit.commit(ColumnsRemoved(index=column))

    def move_row(self, start: int, end: int) -> Optional[Change]:
        if start == end:
            _noop("move_row", start=start, end=end)
            return None
        document = self.document
        row_delimiter = document.row_delimiter
        with EditSpan(self, "move_row", start=start, end=end) as edit:
            last = document.row_count() - 1
            if start < end:
                # insert below first so the source offsets stay valid
                values = slice_out(document, Coordinates(start), keeping_value=True)
                if end == last:
                    values = row_delimiter + values[: len(values) - len(row_delimiter)]
                insert_at(document, values, Coordinates(end + 1))
                slice_out(document, Coordinates(start))
            else:
                values = slice_out(document, Coordinates(start))
                if start == last:
                    values = values[len(row_delimiter) :] + row_delimiter
                insert_at(document, values, Coordinates(end))
            return edit.commit(RowsMoved(index=start, destination=end))

    def move_column(self, start: int, end: int) -> Optional[Change]:
        if start == end:
            _noop("move_column", start=start, end=end)
            return None
        document = self.document
        delimiter = document.delimiter
        with EditSpan(self, "move_column", start=start, end=end) as edit:
            rows = document.row_count()
            last = document.column_count() - 1
            if start < end:
                for row in range(rows - 1, -1, -1):
                    value = slice_out(
                        document, Coordinates(row, start), keeping_value=True
                    )
                    if end == last:
                        # "val," becomes ",val" at the end of the row
                        value = delimiter + value[: len(value) - len(delimiter)]
                    insert_at(document, value, Coordinates(row, end + 1))
                    slice_out(document, Coordinates(row, start))
            else:
                for row in range(rows - 1, -1, -1):
                    value = slice_out(document, Coordinates(row, start))
                    if start == last:
                        # ",val" leaves the end of the row as "val,"
                        value = value[len(delimiter) :] + delimiter
                    insert_at(document, value, Coordinates(row, end))
            return edit.commit(ColumnsMoved(index=start, destination=end))

    # -- clipboard ------------------------------------------------------------

    def cut_and_copy(
        self, selection: CellSelection, mode: str = "cut-cells"
    ) -> Optional[Change]:
        """Fill the clipboard from ``selection``; ``cut-cells`` also empties it."""

        if mode not in CLIPBOARD_MODES:
            raise ValueError(f"Unknown clipboard mode '{mode}'")
        copying = mode == "copy-cells"
        with EditSpan(self, mode, selection=selection) as edit:
            block = [[""] * selection.column_span for _ in range(selection.row_span)]
            for i, j, coords in selection.cells_reversed():
                block[i][j] = slice_out(
                    self.document, coords, keeping_cell=True, keeping_value=copying
                )
            self.clipboard.store(block)
            if copying:
                return None
            return edit.commit(
                CellsChanged(
                    row=selection.start_row,
                    column=selection.start_column,
                    row_span=selection.row_span,
                    column_span=selection.column_span,
                )
            )

    def paste(self, start: Coordinates, data: Optional[str] = None) -> Optional[Change]:
        """Overwrite cells from ``start`` with the clipboard, or with ``data``.

        The pasted block is clipped to the grid; paste never adds rows or
        columns.
        """

        block = self.clipboard.get()
        if block is None and data is not None:
            options = self.document.options
            block = parse_clipboard_text(
                data,
                row_separator=options.clipboard_row_separator,
                column_separator=options.clipboard_column_separator,
            )
        if not block:
            _noop("paste", reason="empty clipboard")
            return None

        document = self.document
        document.ensure_current()
        first_column = start.column or 0
        row_span = min(len(block), document.row_count() - start.row)
        column_span = min(len(block[0]), document.column_count() - first_column)
        if row_span <= 0 or column_span <= 0:
            _noop("paste", reason="outside grid")
            return None

        self.bus.emit(MODEL_CANCEL_EDITING)
        with EditSpan(self, "paste", row=start.row, column=first_column) as edit:
            for i in range(row_span - 1, -1, -1):
                cells = block[i]
                for j in range(column_span - 1, -1, -1):
                    coords = Coordinates(start.row + i, first_column + j)
                    slice_out(document, coords, keeping_cell=True)
                    insert_at(document, cells[j] if j < len(cells) else "", coords)
            return edit.commit(
                CellsChanged(
                    row=start.row,
                    column=first_column,
                    row_span=row_span,
                    column_span=column_span,
                )
            )

    # -- history --------------------------------------------------------------

    def undo(self, change: Optional[Change]) -> Optional[Change]:
        """Roll the log back one transaction and broadcast the inverse of ``change``."""

        log = self.transaction_log
        if change is None or not log.can_undo():
            _noop("undo")
            return None
        document = self.document
        with EditSpan(self, "undo", change=change.type) as edit:
            log.undo()
            record = log.get_record(DATAMODEL_RECORD)
            document.raw_data = record.raw_data
            document.header[:] = record.header
            inverse = edit.commit(invert_change(change), record=False)
        telemetry.record_event("history.undo", data=describe_change(inverse))
        return inverse

    def redo(self, change: Optional[Change], raw_data: str) -> Optional[Change]:
        """Restore ``raw_data`` and broadcast ``change`` as originally emitted."""

        if change is None:
            _noop("redo")
            return None
        document = self.document
        with EditSpan(self, "redo", change=change.type) as edit:
            if isinstance(change, ColumnsInserted):
                document.header.append(column_name(len(document.header) + 1))
            elif isinstance(change, ColumnsRemoved):
                document.header.pop()
            document.raw_data = raw_data
            if isinstance(change, CellsChanged) and change.region == "column-header":
                document.header[:] = document.read_header()
            edit.commit(change, record=False)
        telemetry.record_event("history.redo", data=describe_change(change))
        return change

    def undo_last(self) -> Optional[Change]:
        """Undo the most recent transaction using the change stored with it."""

        log = self.transaction_log
        if not log.can_undo():
            _noop("undo_last")
            return None
        return self.undo(log.get_record(DATAMODEL_RECORD).change)

    def redo_last(self) -> Optional[Change]:
        log = self.transaction_log
        if not log.redo():
            _noop("redo_last")
            return None
        record = log.get_record(DATAMODEL_RECORD)
        return self.redo(record.change, record.raw_data)

    def _commit(self, change: Change) -> None:
        log = self.transaction_log
        log.begin_transaction()
        log.update_record(
            DATAMODEL_RECORD,
            Transaction(
                raw_data=self.document.raw_data,
                header=tuple(self.document.header),
                change=change,
            ),
        )
        log.end_transaction()


class EditSpan(AbstractContextManager["EditSpan"]):
    """Scope of one edit: index barrier on entry, telemetry span, commit + publish."""

    def __init__(self, model: EditableDSVModel, label: str, **metadata: object) -> None:
        self.model = model
        self.label = label
        self.metadata = metadata
        self.change: Optional[Change] = None
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "EditSpan":
        self.model.document.ensure_current()
        self._span_cm = telemetry.span(
            name=f"table::{self.label}",
            component=True,
            metadata={"model": self.model.name, **self.metadata},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, change: Change, *, record: bool = True) -> Change:
        model = self.model
        if record:
            model._commit(change)
        model.notifier.publish(change, model.body_text)
        self.change = change
        return change

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


def _noop(operation: str, **data: object) -> None:
    telemetry.record_event(
        "table.noop", level="debug", data={"operation": operation, **data}
    )


__all__ = ["CLIPBOARD_MODES", "EditSpan", "EditableDSVModel"]

"""Editable DSV table: document, offset resolution, splicing, undo/redo."""

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
    invert_change,
)
from .document import DSVDocument, DSVOptions, ParseCompleted, column_name
from .events import EventBus
from .model import EditableDSVModel, EditSpan
from .registers import ClipboardRegister, parse_clipboard_text
from .state import CellSelection, Coordinates
from .sync import ChangeListener, ChangeNotifier
from .undo import (
    DATAMODEL_RECORD,
    RecordLocator,
    Transaction,
    TransactionLog,
    TransactionLogError,
)

__all__ = [
    "CellSelection",
    "CellsChanged",
    "Change",
    "ChangeListener",
    "ChangeNotifier",
    "ClipboardRegister",
    "ColumnsInserted",
    "ColumnsMoved",
    "ColumnsRemoved",
    "Coordinates",
    "DATAMODEL_RECORD",
    "DSVDocument",
    "DSVOptions",
    "EditSpan",
    "EditableDSVModel",
    "EventBus",
    "ModelReset",
    "ParseCompleted",
    "RecordLocator",
    "RowsInserted",
    "RowsMoved",
    "RowsRemoved",
    "Transaction",
    "TransactionLog",
    "TransactionLogError",
    "column_name",
    "invert_change",
    "parse_clipboard_text",
]

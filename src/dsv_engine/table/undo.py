"""Transaction log backing undo/redo of table edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .changes import Change, ModelReset

SCHEMA_ID = "datamodel"
RECORD_ID = "datamodel"


@dataclass(frozen=True, slots=True)
class RecordLocator:
    schema: str = SCHEMA_ID
    record: str = RECORD_ID


DATAMODEL_RECORD = RecordLocator()


@dataclass(frozen=True, slots=True)
class Transaction:
    """State of the document after one edit, and the change that produced it."""

    raw_data: str
    header: Tuple[str, ...]
    change: Change = field(default_factory=ModelReset)


State = Dict[RecordLocator, Transaction]


class TransactionLogError(RuntimeError):
    """Raised when the begin/update/end protocol is misused."""

    def __init__(self, message: str, *, locator: RecordLocator | None = None) -> None:
        super().__init__(message)
        self.locator = locator


class TransactionLog:
    """Linear history of committed states.

    The first committed transaction is the baseline: ``undo`` never steps back
    past it. Committing after an undo discards the redo tail. ``limit`` caps
    the number of states kept, oldest first, the baseline moving forward with
    the trim.
    """

    def __init__(self, *, limit: Optional[int] = None) -> None:
        if limit is not None and limit < 1:
            raise ValueError("limit must be at least 1")
        self._limit = limit
        self._states: List[State] = []
        self._index: int = -1
        self._pending: Optional[State] = None

    def __len__(self) -> int:
        return len(self._states)

    @property
    def in_transaction(self) -> bool:
        return self._pending is not None

    def begin_transaction(self) -> None:
        if self._pending is not None:
            raise TransactionLogError("A transaction is already open")
        current = self._states[self._index] if self._index >= 0 else {}
        self._pending = dict(current)

    def update_record(self, locator: RecordLocator, payload: Transaction) -> None:
        if self._pending is None:
            raise TransactionLogError("update_record outside a transaction", locator=locator)
        self._pending[locator] = payload

    def end_transaction(self) -> None:
        if self._pending is None:
            raise TransactionLogError("end_transaction without begin_transaction")
        del self._states[self._index + 1 :]
        self._states.append(self._pending)
        self._pending = None
        if self._limit is not None and len(self._states) > self._limit:
            del self._states[: len(self._states) - self._limit]
        self._index = len(self._states) - 1

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._states) - 1

    def undo(self) -> bool:
        if not self.can_undo():
            return False
        self._index -= 1
        return True

    def redo(self) -> bool:
        if not self.can_redo():
            return False
        self._index += 1
        return True

    def get_record(self, locator: RecordLocator = DATAMODEL_RECORD) -> Transaction:
        if self._index < 0:
            raise TransactionLogError("No transaction has been committed", locator=locator)
        try:
            return self._states[self._index][locator]
        except KeyError as exc:
            raise TransactionLogError(
                f"No record {locator.schema}/{locator.record}", locator=locator
            ) from exc


__all__ = [
    "DATAMODEL_RECORD",
    "RECORD_ID",
    "SCHEMA_ID",
    "RecordLocator",
    "Transaction",
    "TransactionLog",
    "TransactionLogError",
]

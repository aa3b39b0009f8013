"""Change descriptors broadcast after every edit and stored with transactions."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Callable, ClassVar, Dict, Union


@dataclass(frozen=True, slots=True)
class CellsChanged:
    row: int
    column: int
    row_span: int = 1
    column_span: int = 1
    region: str = "body"
    type: ClassVar[str] = "cells-changed"


@dataclass(frozen=True, slots=True)
class RowsInserted:
    index: int
    span: int = 1
    type: ClassVar[str] = "rows-inserted"


@dataclass(frozen=True, slots=True)
class RowsRemoved:
    index: int
    span: int = 1
    type: ClassVar[str] = "rows-removed"


@dataclass(frozen=True, slots=True)
class ColumnsInserted:
    index: int
    span: int = 1
    type: ClassVar[str] = "columns-inserted"


@dataclass(frozen=True, slots=True)
class ColumnsRemoved:
    index: int
    span: int = 1
    type: ClassVar[str] = "columns-removed"


@dataclass(frozen=True, slots=True)
class RowsMoved:
    index: int
    destination: int
    span: int = 1
    type: ClassVar[str] = "rows-moved"


@dataclass(frozen=True, slots=True)
class ColumnsMoved:
    index: int
    destination: int
    span: int = 1
    type: ClassVar[str] = "columns-moved"


@dataclass(frozen=True, slots=True)
class ModelReset:
    type: ClassVar[str] = "model-reset"


Change = Union[
    CellsChanged,
    RowsInserted,
    RowsRemoved,
    ColumnsInserted,
    ColumnsRemoved,
    RowsMoved,
    ColumnsMoved,
    ModelReset,
]

STRUCTURAL_CHANGES = (
    RowsInserted,
    RowsRemoved,
    ColumnsInserted,
    ColumnsRemoved,
    RowsMoved,
    ColumnsMoved,
)

_INVERSES: Dict[type, Callable[..., Change]] = {
    CellsChanged: lambda c: c,
    RowsInserted: lambda c: RowsRemoved(index=c.index, span=c.span),
    RowsRemoved: lambda c: RowsInserted(index=c.index, span=c.span),
    ColumnsInserted: lambda c: ColumnsRemoved(index=c.index, span=c.span),
    ColumnsRemoved: lambda c: ColumnsInserted(index=c.index, span=c.span),
    RowsMoved: lambda c: RowsMoved(
        index=c.destination, destination=c.index, span=c.span
    ),
    ColumnsMoved: lambda c: ColumnsMoved(
        index=c.destination, destination=c.index, span=c.span
    ),
    ModelReset: lambda c: c,
}


def invert_change(change: Change) -> Change:
    """Return the change that describes undoing ``change``."""

    try:
        inverse = _INVERSES[type(change)]
    except KeyError as exc:
        raise ValueError(f"Cannot invert {change!r}") from exc
    return inverse(change)


def describe_change(change: Change) -> Dict[str, object]:
    """Flat mapping used for telemetry payloads."""

    return {"type": change.type, **asdict(change)}


__all__ = [
    "Change",
    "CellsChanged",
    "RowsInserted",
    "RowsRemoved",
    "ColumnsInserted",
    "ColumnsRemoved",
    "RowsMoved",
    "ColumnsMoved",
    "ModelReset",
    "STRUCTURAL_CHANGES",
    "invert_change",
    "describe_change",
]

"""Hooks-based bridge between an EditableDSVModel and a grid widget."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from dsv_engine.table import (
    CellSelection,
    CellsChanged,
    Change,
    Coordinates,
    EditableDSVModel,
    ModelReset,
)
from dsv_engine.table.changes import STRUCTURAL_CHANGES
from dsv_engine.table.events import MODEL_CANCEL_EDITING, MODEL_CHANGED, MODEL_TEXT


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class GridUIHooks:
    """Callbacks the adapter invokes to keep a grid widget in sync."""

    # (row, column, row_span, column_span) of body cells to repaint
    refresh_cells: Callable[[int, int, int, int], None]
    refresh_header: Callable[[int], None] = _noop
    refresh_structure: Callable[[Change], None] = _noop
    cancel_editing: Callable[[], None] = _noop
    update_text: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualGridAdapter:
    """Relays model events to hooks and named grid commands to the model."""

    def __init__(self, model: EditableDSVModel, hooks: GridUIHooks) -> None:
        self.model = model
        self.hooks = hooks
        self._commands: Dict[str, Callable[..., Any]] = {
            "set_cell": self._set_cell,
            "add_row": model.add_row,
            "remove_row": model.remove_row,
            "add_column": model.add_column,
            "remove_column": model.remove_column,
            "move_row": model.move_row,
            "move_column": model.move_column,
            "cut": lambda **kw: self._clip("cut-cells", **kw),
            "copy": lambda **kw: self._clip("copy-cells", **kw),
            "paste": self._paste,
            "undo": model.undo_last,
            "redo": model.redo_last,
        }
        model.bus.subscribe(MODEL_CHANGED, self._on_changed)
        model.bus.subscribe(MODEL_CANCEL_EDITING, self._on_cancel_editing)
        model.bus.subscribe(MODEL_TEXT, self._on_text)

    @property
    def commands(self) -> tuple[str, ...]:
        return tuple(self._commands)

    def handle_command(self, name: str, **arguments: Any) -> Any:
        """Run the grid command ``name`` against the model."""

        try:
            command = self._commands[name]
        except KeyError as exc:
            raise KeyError(f"Unknown grid command '{name}'") from exc
        self.hooks.log(f"command -> {name} {arguments!r}")
        return command(**arguments)

    def close(self) -> None:
        bus = self.model.bus
        bus.unsubscribe(MODEL_CHANGED, self._on_changed)
        bus.unsubscribe(MODEL_CANCEL_EDITING, self._on_cancel_editing)
        bus.unsubscribe(MODEL_TEXT, self._on_text)

    def _set_cell(self, *, row: int, column: int, value: str) -> bool:
        return self.model.set_data("body", row, column, value)

    def _clip(
        self, mode: str, *, row: int, column: int, row_span: int = 1, column_span: int = 1
    ) -> Optional[Change]:
        selection = CellSelection(
            start_row=row,
            start_column=column,
            end_row=row + row_span - 1,
            end_column=column + column_span - 1,
        )
        return self.model.cut_and_copy(selection, mode)

    def _paste(self, *, row: int, column: int, data: Optional[str] = None) -> Optional[Change]:
        return self.model.paste(Coordinates(row, column), data)

    def _on_changed(self, payload: object) -> None:
        self.hooks.log(f"change <- {payload!r}")
        if isinstance(payload, CellsChanged):
            if payload.region == "column-header":
                self.hooks.refresh_header(payload.column)
            else:
                self.hooks.refresh_cells(
                    payload.row, payload.column, payload.row_span, payload.column_span
                )
        elif isinstance(payload, STRUCTURAL_CHANGES + (ModelReset,)):
            self.hooks.refresh_structure(payload)

    def _on_cancel_editing(self, _payload: object) -> None:
        self.hooks.cancel_editing()

    def _on_text(self, payload: object) -> None:
        if isinstance(payload, str):
            self.hooks.update_text(payload)


__all__ = ["GridUIHooks", "TextualGridAdapter"]

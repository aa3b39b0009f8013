"""Textual grid viewer/editor hosting an EditableDSVModel."""

from __future__ import annotations

import argparse
import re
from pathlib import Path
from typing import Optional, Sequence

from textual.app import App, ComposeResult
from textual.coordinate import Coordinate
from textual.widgets import DataTable, Footer, Header, Input, Static

from dsv_engine.runtime import telemetry
from dsv_engine.table import Change, DSVOptions, EditableDSVModel

from .controller import GridUIHooks, TextualGridAdapter


class DSVGridApp(App[None]):
    """Grid over a DSV buffer; cell changes repaint in place, structure rebuilds."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#grid {
		height: 1fr;
		border: round $accent;
	}

	#cell-editor {
		height: 3;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+s", "save", "Save"),
        ("e", "edit_cell", "Edit"),
        ("o", "add_row", "Row+"),
        ("d", "remove_row", "Row-"),
        ("a", "add_column", "Col+"),
        ("D", "remove_column", "Col-"),
        ("alt+up", "move_row(-1)", "Move up"),
        ("alt+down", "move_row(1)", "Move down"),
        ("alt+left", "move_column(-1)", "Move left"),
        ("alt+right", "move_column(1)", "Move right"),
        ("x", "cut", "Cut"),
        ("y", "copy", "Copy"),
        ("p", "paste", "Paste"),
        ("u", "undo", "Undo"),
        ("ctrl+r", "redo", "Redo"),
        ("escape", "cancel_edit", "Cancel"),
    ]

    def __init__(
        self,
        text: str = "",
        *,
        path: Optional[Path] = None,
        options: Optional[DSVOptions] = None,
    ) -> None:
        super().__init__()
        self.path = path
        self.model = EditableDSVModel(text, name=str(path or "untitled"), options=options)
        self.adapter: TextualGridAdapter | None = None
        self._table: DataTable | None = None
        self._editor: Input | None = None
        self._status: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._table = DataTable(id="grid", zebra_stripes=True)
        self._editor = Input(placeholder="cell value", id="cell-editor")
        self._status = Static("", id="status-line")
        yield self._table
        yield self._editor
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        hooks = GridUIHooks(
            refresh_cells=self._refresh_cells,
            refresh_header=lambda _column: self._rebuild(),
            refresh_structure=self._refresh_structure,
            cancel_editing=self.action_cancel_edit,
            log=telemetry.get_logger("dsv_engine.viewer").debug,
        )
        self.adapter = TextualGridAdapter(self.model, hooks)
        self._rebuild()
        if self._table is not None:
            self._table.focus()

    def on_unmount(self) -> None:
        if self.adapter is not None:
            self.adapter.close()
            self.adapter = None

    # -- rendering ------------------------------------------------------------

    def _rebuild(self) -> None:
        table = self._table
        if table is None:
            return
        cursor = table.cursor_coordinate
        model = self.model
        table.clear(columns=True)
        table.add_columns(*model.header)
        rows = model.row_count()
        columns = model.column_count()
        table.add_rows(
            [model.data("body", row, column) for column in range(columns)]
            for row in range(rows)
        )
        if rows and columns:
            table.move_cursor(
                row=min(cursor.row, rows - 1), column=min(cursor.column, columns - 1)
            )

    def _refresh_cells(self, row: int, column: int, row_span: int, column_span: int) -> None:
        table = self._table
        if table is None:
            return
        for r in range(row, row + row_span):
            for c in range(column, column + column_span):
                table.update_cell_at(Coordinate(r, c), self.model.data("body", r, c))
        self._set_status(f"cells {row},{column} +{row_span}x{column_span}")

    def _refresh_structure(self, change: Change) -> None:
        self._rebuild()
        self._set_status(change.type)

    def _set_status(self, text: str) -> None:
        if self._status is not None:
            self._status.update(text)

    def _cursor(self) -> Coordinate:
        assert self._table is not None
        return self._table.cursor_coordinate

    def _run(self, name: str, **arguments: object) -> None:
        if self.adapter is not None:
            self.adapter.handle_command(name, **arguments)

    # -- actions --------------------------------------------------------------

    def action_edit_cell(self) -> None:
        if self._editor is None or not self.model.row_count():
            return
        cursor = self._cursor()
        self._editor.value = self.model.data("body", cursor.row, cursor.column)
        self._editor.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if not self.model.row_count():
            return
        cursor = self._cursor()
        self._run("set_cell", row=cursor.row, column=cursor.column, value=event.value)
        self.action_cancel_edit()

    def action_cancel_edit(self) -> None:
        if self._editor is not None:
            self._editor.value = ""
        if self._table is not None:
            self._table.focus()

    def action_add_row(self) -> None:
        row = self._cursor().row + 1 if self.model.row_count() else 0
        self._run("add_row", row=row)

    def action_remove_row(self) -> None:
        if self.model.row_count():
            self._run("remove_row", row=self._cursor().row)

    def action_add_column(self) -> None:
        self._run("add_column", column=self.model.column_count())

    def action_remove_column(self) -> None:
        if self.model.column_count() > 1:
            self._run("remove_column", column=self.model.column_count() - 1)

    def action_move_row(self, step: int) -> None:
        start = self._cursor().row
        end = start + step
        if 0 <= end < self.model.row_count():
            self._run("move_row", start=start, end=end)
            self._table.move_cursor(row=end)  # type: ignore[union-attr]

    def action_move_column(self, step: int) -> None:
        start = self._cursor().column
        end = start + step
        if 0 <= end < self.model.column_count():
            self._run("move_column", start=start, end=end)
            self._table.move_cursor(column=end)  # type: ignore[union-attr]

    def action_cut(self) -> None:
        if self.model.row_count():
            cursor = self._cursor()
            self._run("cut", row=cursor.row, column=cursor.column)

    def action_copy(self) -> None:
        if self.model.row_count():
            cursor = self._cursor()
            self._run("copy", row=cursor.row, column=cursor.column)
            self._set_status("copied")

    def action_paste(self) -> None:
        if self.model.row_count():
            cursor = self._cursor()
            self._run("paste", row=cursor.row, column=cursor.column)

    def action_undo(self) -> None:
        self._run("undo")

    def action_redo(self) -> None:
        self._run("redo")

    def action_save(self) -> None:
        if self.path is None:
            self._set_status("no file to save to")
            return
        self.path.write_text(self.model.raw_data, encoding="utf-8")
        telemetry.record_event("viewer.save", data={"path": str(self.path)})
        self._set_status(f"saved {self.path}")


_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "\\": "\\"}


def _unescape(value: str) -> str:
    """Expand \\t, \\n, \\r and \\\\ in a command-line delimiter; other text is kept as is."""

    return re.sub(
        r"\\(.)", lambda match: _ESCAPES.get(match.group(1), match.group(0)), value
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Edit a delimiter-separated file.")
    parser.add_argument("path", type=Path)
    parser.add_argument("--delimiter", default=",", help="column delimiter, e.g. '\\t'")
    parser.add_argument("--row-delimiter", default="\\n", help="row delimiter")
    parser.add_argument("--preset", default=None, help="telemetry preset")
    args = parser.parse_args(argv)

    if args.preset:
        telemetry.configure(preset=args.preset)
    options = DSVOptions(
        delimiter=_unescape(args.delimiter),
        row_delimiter=_unescape(args.row_delimiter),
    )
    text = args.path.read_text(encoding="utf-8") if args.path.exists() else ""
    DSVGridApp(text, path=args.path, options=options).run()


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()


__all__ = ["DSVGridApp", "main"]

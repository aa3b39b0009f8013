from __future__ import annotations

from dsv_engine.table import Coordinates as C
from dsv_engine.table import DSVDocument
from dsv_engine.table.offsets import (
    first_index,
    is_extension_operation,
    is_trim_operation,
    last_index,
    next_cell,
    previous_cell,
    row_end,
)

GRID = "A,B,C\n1,2,3\n4,5,6\n"


def make_document(text: str = GRID) -> DSVDocument:
    return DSVDocument(text)


def test_first_index_addresses_cells_and_rows() -> None:
    document = make_document()

    assert first_index(document, C(0, 0)) == 6
    assert first_index(document, C(0, 1)) == 8
    assert first_index(document, C(1)) == 12
    assert first_index(document, C(-1, 2)) == 4


def test_last_index_excludes_following_delimiter() -> None:
    document = make_document()

    assert last_index(document, C(0, 0)) == 7
    assert last_index(document, C(0, 2)) == 11
    assert last_index(document, C(1, 2)) == 17
    assert last_index(document, C(1)) == 17


def test_row_end_handles_header_and_terminator() -> None:
    assert row_end(make_document(), -1) == 5
    assert row_end(make_document(), 0) == 11
    assert row_end(make_document(), 1) == 17
    assert row_end(make_document(GRID.rstrip("\n")), 1) == 17


def test_row_end_of_last_row_uses_live_length() -> None:
    document = make_document()
    document.raw_data = document.raw_data[:-1] + ",7\n"

    assert row_end(document, 1) == 19


def test_trim_and_extension_classification() -> None:
    document = make_document()

    assert is_trim_operation(document, C(0, 2))
    assert not is_trim_operation(document, C(0, 1))
    assert is_trim_operation(document, C(1))
    assert not is_trim_operation(document, C(0))

    assert is_extension_operation(document, C(0, 3))
    assert is_extension_operation(document, C(2))
    assert not is_extension_operation(document, C(1, 2))


def test_previous_cell_wraps_into_header_row() -> None:
    document = make_document()

    assert previous_cell(document, C(1, 0)) == C(0, 2)
    assert previous_cell(document, C(0, 1)) == C(0, 0)
    assert previous_cell(document, C(0)) == C(-1)
    assert previous_cell(document, C(0, 0)) == C(-1, 2)


def test_next_cell_wraps_to_following_row() -> None:
    document = make_document()

    assert next_cell(document, C(0, 2)) == C(1, 0)
    assert next_cell(document, C(0, 0)) == C(0, 1)
    assert next_cell(document, C(1)) == C(2)

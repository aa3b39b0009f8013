from __future__ import annotations

import pytest

from dsv_engine.table import Coordinates as C
from dsv_engine.table import DSVDocument, DSVOptions
from dsv_engine.table.splice import blank_row, insert_at, slice_out

TEXT = "A,B\n1,2\n3,4\n"


def make_document(text: str = TEXT) -> DSVDocument:
    return DSVDocument(text)


def test_peek_leaves_buffer_untouched() -> None:
    document = make_document()

    value = slice_out(document, C(0, 1), keeping_cell=True, keeping_value=True)

    assert value == "2"
    assert document.raw_data == TEXT


def test_interior_cell_takes_following_delimiter() -> None:
    document = make_document()

    assert slice_out(document, C(0, 0)) == "1,"
    assert document.raw_data == "A,B\n2\n3,4\n"


def test_last_column_takes_preceding_delimiter() -> None:
    document = make_document()

    assert slice_out(document, C(0, 1)) == ",2"
    assert document.raw_data == "A,B\n1\n3,4\n"


def test_interior_row_takes_following_row_delimiter() -> None:
    document = make_document()

    assert slice_out(document, C(0)) == "1,2\n"
    assert document.raw_data == "A,B\n3,4\n"


def test_last_row_takes_preceding_row_delimiter() -> None:
    document = make_document()

    assert slice_out(document, C(1)) == "\n3,4"
    assert document.raw_data == "A,B\n1,2\n"


def test_only_row_is_cut_back_to_header() -> None:
    document = make_document("A,B\n1,2\n")

    assert slice_out(document, C(0)) == "\n1,2"
    assert document.raw_data == "A,B\n"


@pytest.mark.parametrize("row", [0, 1])
@pytest.mark.parametrize("column", [0, 1])
def test_cell_content_reinserts_in_place(row: int, column: int) -> None:
    document = make_document()

    value = slice_out(document, C(row, column), keeping_cell=True)
    insert_at(document, value, C(row, column))

    assert document.raw_data == TEXT


def test_interior_row_reinserts_in_place() -> None:
    document = make_document()

    value = slice_out(document, C(0))
    insert_at(document, value, C(0))

    assert document.raw_data == TEXT


def test_extension_column_anchors_to_row_end() -> None:
    document = make_document()

    insert_at(document, ",x", C(1, 2))

    assert document.raw_data == "A,B\n1,2\n3,4,x\n"


def test_extension_row_anchors_before_terminator() -> None:
    document = make_document()

    insert_at(document, "\n5,6", C(2))

    assert document.raw_data == "A,B\n1,2\n3,4\n5,6\n"


def test_blank_row_shape_depends_on_position() -> None:
    document = make_document()

    assert blank_row(document, 0) == ",\n"
    assert blank_row(document, 1) == ",\n"
    assert blank_row(document, 2) == "\n,"


def test_multi_character_delimiters_are_cut_whole() -> None:
    document = DSVDocument(
        "h1::h2||a::b||c::d",
        options=DSVOptions(delimiter="::", row_delimiter="||"),
    )

    assert slice_out(document, C(0, 1)) == "::b"
    assert document.raw_data == "h1::h2||a||c::d"

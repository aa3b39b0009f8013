from __future__ import annotations

import asyncio
from typing import List

import pytest

from dsv_engine.table import DSVDocument, DSVOptions, ParseCompleted, column_name
from dsv_engine.table.events import DOCUMENT_PARSED


def make_document(text: str = "A,B\n1,2\n3,4\n", **options: str) -> DSVDocument:
    return DSVDocument(text, options=DSVOptions(**options))


def test_parse_reads_header_and_counts() -> None:
    document = make_document()

    assert document.header == ["A", "B"]
    assert document.row_count() == 2
    assert document.row_count("column-header") == 1
    assert document.column_count() == 2
    assert document.column_count("row-header") == 1


def test_trailing_row_delimiter_terminates_last_row() -> None:
    assert make_document("A,B\n1,2\n").row_count() == 1
    assert make_document("A,B\n1,2").row_count() == 1
    # an empty line before the terminator is still a row
    assert make_document("A,B\n1,2\n\n").row_count() == 2


def test_empty_document_has_no_rows_or_columns() -> None:
    document = make_document("")

    assert document.header == []
    assert document.row_count() == 0
    assert document.row_count("column-header") == 0
    assert document.column_count() == 0


def test_offsets_follow_parser_rows() -> None:
    document = make_document()

    assert document.get_offset_index(0, 0) == 0
    assert document.get_offset_index(0, 1) == 2
    assert document.get_offset_index(1, 0) == 4
    assert document.get_offset_index(1, 1) == 6
    assert document.get_offset_index(2, 0) == 8
    assert document.get_offset_index(2, 1) == 10
    # rows past the end resolve to the buffer length
    assert document.get_offset_index(3, 0) == 12


def test_short_row_resolves_missing_columns_to_row_end() -> None:
    document = make_document("A,B,C\n1\n")

    assert document.get_offset_index(1, 2) == 7
    assert document.data("body", 0, 0) == "1"
    assert document.data("body", 0, 2) == ""


def test_multi_character_delimiters() -> None:
    document = make_document("a::b||1::2", delimiter="::", row_delimiter="||")

    assert document.header == ["a", "b"]
    assert document.get_offset_index(0, 1) == 3
    assert document.get_offset_index(1, 0) == 6
    assert document.get_offset_index(1, 1) == 9
    assert document.data("body", 0, 1) == "2"


def test_quoted_cells_keep_delimiters_and_unescape() -> None:
    document = make_document('name,note\n"x,y","say ""hi"""\n')

    assert document.column_count() == 2
    assert document.get_offset_index(1, 1) == 16
    assert document.data("body", 0, 0) == "x,y"
    assert document.data("body", 0, 1) == 'say "hi"'


def test_quoting_can_be_disabled() -> None:
    document = DSVDocument('A,B\n"x,y"\n', options=DSVOptions(quote=None))

    assert document.data("body", 0, 0) == '"x'
    assert document.data("body", 0, 1) == 'y"'


def test_data_regions() -> None:
    document = make_document()

    assert document.data("body", 1, 0) == "3"
    assert document.data("column-header", 0, 1) == "B"
    assert document.data("row-header", 1, 0) == "2"
    assert document.data("corner-header", 0, 0) == ""
    with pytest.raises(ValueError):
        document.data("footer", 0, 0)
    with pytest.raises(ValueError):
        document.row_count("row-header")


@pytest.mark.parametrize(
    "options",
    [
        {"delimiter": ""},
        {"row_delimiter": ""},
        {"delimiter": ";", "row_delimiter": ";"},
        {"quote": ""},
        {"clipboard_column_separator": ""},
    ],
)
def test_options_reject_unusable_dialects(options: dict) -> None:
    with pytest.raises(ValueError):
        DSVOptions(**options)


def test_column_names_are_spreadsheet_labels() -> None:
    assert column_name(1) == "A"
    assert column_name(26) == "Z"
    assert column_name(27) == "AA"
    assert column_name(52) == "AZ"
    assert column_name(703) == "AAA"
    with pytest.raises(ValueError):
        column_name(0)


def test_parse_async_without_loop_completes_inline() -> None:
    document = make_document()
    parsed: List[object] = []
    document.bus.subscribe(DOCUMENT_PARSED, parsed.append)

    document.raw_data += "5,6\n"
    document.parse_async(token=3)

    assert not document.stale
    assert document.row_count() == 3
    assert parsed == [ParseCompleted(token=3, version=document.version)]


def test_parse_async_runs_on_next_loop_turn() -> None:
    async def scenario() -> None:
        document = make_document("A\n1\n")
        parsed: List[object] = []
        document.bus.subscribe(DOCUMENT_PARSED, parsed.append)

        document.raw_data = "A\n1\n2\n"
        document.parse_async(token=7)
        assert document.stale
        assert document.row_count() == 1

        await asyncio.sleep(0)
        assert not document.stale
        assert document.row_count() == 2
        assert parsed == [ParseCompleted(token=7, version=document.version)]

    asyncio.run(scenario())


def test_newer_parse_request_supersedes_pending_one() -> None:
    async def scenario() -> None:
        document = make_document("A\n1\n")
        parsed: List[ParseCompleted] = []
        document.bus.subscribe(DOCUMENT_PARSED, parsed.append)

        document.parse_async(token=1)
        document.parse_async(token=2)
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert [event.token for event in parsed] == [2]

    asyncio.run(scenario())


def test_ensure_current_completes_pending_parse_once() -> None:
    async def scenario() -> None:
        document = make_document("A\n1\n")
        parsed: List[ParseCompleted] = []
        document.bus.subscribe(DOCUMENT_PARSED, parsed.append)

        document.raw_data = "A\n1\n2\n3\n"
        document.parse_async(token=4)
        document.ensure_current()
        assert document.row_count() == 3

        await asyncio.sleep(0)
        assert len(parsed) == 1
        document.ensure_current()
        assert len(parsed) == 1

    asyncio.run(scenario())


def test_replace_text_reparses_without_token() -> None:
    document = make_document()
    parsed: List[ParseCompleted] = []
    document.bus.subscribe(DOCUMENT_PARSED, parsed.append)

    document.replace_text("X,Y,Z\n1,2,3\n")

    assert document.header == ["X", "Y", "Z"]
    assert parsed[-1].token is None


def test_header_extent_reads_live_text() -> None:
    document = make_document('"a,b",c\n1,2\n')

    assert document.header_extent() == ([0, 6], 7)

    document.raw_data = '"a,b",c,"d"\n1,2\n'
    assert document.header_extent() == ([0, 6, 8], 11)
    assert document.read_header() == ["a,b", "c", "d"]
    assert make_document("").read_header() == []

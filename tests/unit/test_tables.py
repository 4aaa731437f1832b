from summarykit.render.models import TableBlock
from summarykit.render.tables import (
    header_columns,
    keyword_columns,
    normalize_table_rows,
    parse_pipe_row,
    row_columns,
    split_columns,
    table_to_markdown,
)


def test_split_columns_on_aligned_gaps():
    assert split_columns("Cerebrum    Controls thinking") == ["Cerebrum", "Controls thinking"]


def test_split_columns_undoes_glued_cells():
    assert split_columns("CerebrumControls thinking") == ["Cerebrum", "Controls thinking"]
    assert split_columns("Area51Secret base") == ["Area51", "Secret base"]


def test_keyword_header():
    assert keyword_columns("Brain Part Function Size/Location") == ["Brain Part", "Function", "Size/Location"]


def test_keyword_header_rejects_prose():
    assert keyword_columns("Section 3 explains the function of neurons") == []
    assert header_columns("The heart pumps blood.") == []


def test_row_fallback_splits_leading_phrase():
    assert row_columns("Frontal Lobe decision making", 2) == ["Frontal Lobe", "decision making"]
    assert row_columns("Cerebellum coordinates balance, posture", 3) == [
        "Cerebellum",
        "coordinates balance",
        "posture",
    ]


def test_ragged_rows_are_padded_to_widest():
    rows = normalize_table_rows([["A", "B"], ["1", "2", "3"], ["x", "y"]])
    assert rows == [["A", "B", "—"], ["1", "2", "3"], ["x", "y", "—"]]


def test_overflow_is_merged_into_last_cell():
    block = TableBlock.from_rows(["A", "B"], [["1", "2", "3", "4"]], col_count=2)
    assert block.rows == [["1", "2 3 4"]]


def test_table_to_markdown_escapes_pipes():
    block = TableBlock(headers=["A", "B"], rows=[["1", "x|y"]])
    assert table_to_markdown(block) == "| A | B |\n| --- | --- |\n| 1 | x\\|y |"


def test_parse_pipe_row_respects_escaped_pipes():
    assert parse_pipe_row("| a | b \\| c |") == ["a", "b | c"]

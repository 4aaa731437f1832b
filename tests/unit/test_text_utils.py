import pytest
from summarykit.render.text_utils import clean_inline, normalize_general, normalize_list_marker


def test_clean_inline_strips_markup_and_whitespace():
    text = "**Bold** and __under__ with `code`   spaced "
    assert clean_inline(text) == "Bold and under with code spaced"


def test_clean_inline_keeps_snake_case_and_drops_emphasis():
    assert clean_inline("an *emphasis* and snake_case_name") == "an emphasis and snake_case_name"


def test_clean_inline_br_becomes_space():
    assert clean_inline("line<br>next") == "line next"


@pytest.mark.parametrize(
    "line, expected",
    [
        ("1.2. Sub point", "• Sub point"),
        ("3. Third", "• Third"),
        ("- dash", "• dash"),
        ("* star", "• star"),
        ("+ plus", "• plus"),
        ("plain line", "plain line"),
    ],
)
def test_normalize_list_marker(line, expected):
    assert normalize_list_marker(line) == expected


def test_normalize_general_document():
    src = "# Title\n\n\n\n> quoted\n1. first\n- second\n**bold** text"
    assert normalize_general(src) == "Title\n\nquoted\n• first\n• second\nbold text"


def test_normalize_general_splits_br_cells_first():
    assert normalize_general("Cell one<br>Cell two") == "Cell one\nCell two"


def test_normalize_general_nested_prefixes():
    # Markers hidden behind bold or a heading marker are resolved in one pass.
    assert normalize_general("- **1. Nested**") == "• Nested"
    assert normalize_general("> ## Quoted heading") == "Quoted heading"


@pytest.mark.parametrize(
    "src",
    [
        "",
        "#",
        "- **1. Nested**",
        "## Overview\n\n\n\n* a\n  * b\n1.1. c",
        "Key Insights:\n- **Definition:** thing<br>other",
        "| A | B |\n|---|---|\n| 1 | 2 |",
    ],
)
def test_normalize_general_is_idempotent(src):
    once = normalize_general(src)
    assert normalize_general(once) == once


def test_normalize_general_none():
    assert normalize_general(None) == ""

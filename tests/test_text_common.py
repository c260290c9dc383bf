from pathlib import Path

from text.common import (
    natural_sort_key,
    normalize_newlines,
    remove_control_characters,
    split_paragraphs,
)


def test_remove_control_characters_keeps_whitespace():
    text = "a\x00b\x07c\td\ne\rf\x7fg\x85h"
    assert remove_control_characters(text) == "abc\td\ne\rfgh"


def test_remove_control_characters_drops_noncharacters():
    assert remove_control_characters("x\ufffey\uffffz") == "xyz"


def test_normalize_newlines():
    assert normalize_newlines("a\r\nb\rc\n") == "a\nb\nc\n"


def test_split_paragraphs_on_blank_lines():
    text = "First line\nsecond line\n\n  \n\nNext paragraph\r\n\r\nLast"
    assert split_paragraphs(text) == [
        "First line\nsecond line",
        "Next paragraph",
        "Last",
    ]


def test_split_paragraphs_whitespace_only_line_is_blank():
    assert split_paragraphs("one\n \t \ntwo") == ["one", "two"]


def test_split_paragraphs_empty_text():
    assert split_paragraphs("") == []
    assert split_paragraphs("\n\n   \n") == []


def test_natural_sort_key_orders_numbers_numerically():
    names = ["ch10.txt", "ch2.txt", "ch1.txt", "Ch3.txt"]
    ordered = sorted((Path(n) for n in names), key=natural_sort_key)
    assert [p.name for p in ordered] == ["ch1.txt", "ch2.txt", "Ch3.txt", "ch10.txt"]

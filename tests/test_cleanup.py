import xml.etree.ElementTree as ET

import pytest

from core.exceptions import ChapterCleanupError
from epub.cleanup import clean_chapter_file
from epub.templates import generate_chapter_xhtml

XHTML = "{http://www.w3.org/1999/xhtml}"


def test_cleanup_keeps_generated_chapter_well_formed(tmp_path):
    path = tmp_path / "ch0002.xhtml"
    path.write_text(generate_chapter_xhtml("Intro", "Hello\n\nWorld", 1), encoding="utf-8")

    clean_chapter_file(path)

    root = ET.fromstring(path.read_bytes())
    paragraphs = [p.text for p in root.iter(f"{XHTML}p")]
    assert paragraphs == ["Hello", "World"]
    assert root.find(f".//{XHTML}h1").text == "Intro"


def test_cleanup_removes_control_characters_and_empty_paragraphs(tmp_path):
    path = tmp_path / "ch0003.xhtml"
    path.write_text(
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml"><head><title>T</title></head><body>'
        '<p>keep\x01 this\x85</p><p></p><p>   </p><p><br/></p>'
        '</body></html>',
        encoding="utf-8",
    )

    clean_chapter_file(path)

    root = ET.fromstring(path.read_bytes())
    paragraphs = list(root.iter(f"{XHTML}p"))
    assert [p.text for p in paragraphs] == ["keep this", None]
    assert paragraphs[1].find(f"{XHTML}br") is not None


def test_unparseable_chapter_is_left_untouched(tmp_path):
    path = tmp_path / "broken.xhtml"
    broken_markup = "<html><body><p>unclosed</body></html>"
    path.write_text(broken_markup, encoding="utf-8")

    with pytest.raises(ChapterCleanupError) as excinfo:
        clean_chapter_file(path)

    assert excinfo.value.path == str(path)
    assert path.read_text(encoding="utf-8") == broken_markup


def test_missing_chapter_file(tmp_path):
    with pytest.raises(ChapterCleanupError):
        clean_chapter_file(tmp_path / "missing.xhtml")

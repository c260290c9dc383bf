import zipfile

import pytest

from core.exceptions import ArchiveError
from epub.packaging import (
    CONTAINER_XML,
    MIMETYPE,
    package_epub,
    prepare_story_directory,
    write_boilerplate,
)


def test_write_boilerplate_creates_structure(tmp_path):
    story_dir = tmp_path / "story"
    package_dir = write_boilerplate(story_dir)

    assert package_dir == story_dir / "EPUB"
    assert (story_dir / "mimetype").read_bytes() == MIMETYPE.encode("ascii")
    assert (story_dir / "META-INF" / "container.xml").read_text(encoding="utf-8") == CONTAINER_XML
    assert 'full-path="EPUB/content.opf"' in CONTAINER_XML
    assert (package_dir / "styles" / "style.css").is_file()
    assert (package_dir / "text").is_dir()
    assert (package_dir / "images").is_dir()


def test_write_boilerplate_is_idempotent(tmp_path):
    story_dir = tmp_path / "story"
    write_boilerplate(story_dir)
    first = sorted(p.relative_to(story_dir) for p in story_dir.rglob("*"))
    write_boilerplate(story_dir)
    second = sorted(p.relative_to(story_dir) for p in story_dir.rglob("*"))
    assert first == second


def test_prepare_story_directory_removes_stale_files(tmp_path):
    story_dir = tmp_path / "story"
    write_boilerplate(story_dir)
    (story_dir / "stale.xhtml").write_text("old", encoding="utf-8")
    prepare_story_directory(story_dir)
    assert story_dir.is_dir()
    assert list(story_dir.iterdir()) == []


def test_prepare_story_directory_reuses_empty_folder(tmp_path):
    story_dir = tmp_path / "story"
    story_dir.mkdir()
    assert prepare_story_directory(story_dir) == story_dir
    assert story_dir.is_dir()


def test_prepare_story_directory_keeps_unrelated_folder(tmp_path):
    story_dir = tmp_path / "story"
    story_dir.mkdir()
    (story_dir / "01 Intro.txt").write_text("mine", encoding="utf-8")

    with pytest.raises(FileExistsError):
        prepare_story_directory(story_dir)
    assert (story_dir / "01 Intro.txt").read_text(encoding="utf-8") == "mine"


def _make_package(root):
    write_boilerplate(root)
    (root / "EPUB" / "text" / "ch0002.xhtml").write_text("<p>héllo</p>", encoding="utf-8")
    (root / "EPUB" / "images" / "cover.png").write_bytes(bytes(range(256)) * 4)
    return root


def test_archive_round_trip_is_byte_identical(tmp_path):
    source = _make_package(tmp_path / "story")
    dest = tmp_path / "out" / "story.epub"
    assert package_epub(source, dest) == dest

    files = {p.relative_to(source).as_posix(): p.read_bytes() for p in source.rglob("*") if p.is_file()}
    with zipfile.ZipFile(dest) as z:
        infos = z.infolist()
        assert infos[0].filename == "mimetype"
        assert all(info.compress_type == zipfile.ZIP_STORED for info in infos)
        assert {info.filename for info in infos} == set(files)
        for name, data in files.items():
            assert z.read(name) == data


def test_archive_replaces_existing_file(tmp_path):
    source = _make_package(tmp_path / "story")
    dest = tmp_path / "story.epub"
    dest.write_bytes(b"not a zip")

    package_epub(source, dest)

    assert zipfile.is_zipfile(dest)
    leftovers = [p.name for p in tmp_path.iterdir() if p.name.endswith(".tmp")]
    assert leftovers == []


def test_archive_missing_source_raises(tmp_path):
    with pytest.raises(ArchiveError):
        package_epub(tmp_path / "missing", tmp_path / "out.epub")
    assert not (tmp_path / "out.epub").exists()

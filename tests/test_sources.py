import pytest

from core.exceptions import NoContentError, StoryValidationError
from core.metadata_reader import MetadataFileNotFoundError, StoryMetadata
from epub.builder import build_story_epub
from epub.staging import StagingArea
from sources import ChapterRef, ContentSource, LocalFolderSource, build_story_from_source


@pytest.fixture
def story_folder(tmp_path):
    folder = tmp_path / "my_tale"
    folder.mkdir()
    (folder / "10 Finale.txt").write_text("The end.", encoding="utf-8")
    (folder / "2 Middle.md").write_text("Middle part.\n\nMore middle.", encoding="utf-8")
    (folder / "1 Intro.txt").write_text("Once upon a time.", encoding="utf-8")
    (folder / "notes.docx").write_bytes(b"ignored")
    (tmp_path / "my_tale_metadata.txt").write_text(
        "title: My Tale\nauthor: Ann\nlanguage: English\ntags: a, b\n",
        encoding="utf-8",
    )
    return folder


class _MemorySource(ContentSource):
    def __init__(self, chapters, cover=None):
        self.chapters = chapters
        self.cover = cover

    def fetch_story_metadata(self):
        return StoryMetadata(title="Memory", author="Mem", language="de")

    def chapter_refs(self):
        return [ChapterRef(label, label) for label in self.chapters]

    def fetch_chapter_text(self, chapter):
        return self.chapters[chapter.ref]

    def fetch_cover_reference(self):
        return self.cover


def test_local_source_orders_chapters_naturally(story_folder):
    source = LocalFolderSource(story_folder)
    assert [c.label for c in source.chapter_refs()] == ["1 Intro", "2 Middle", "10 Finale"]


def test_local_source_reads_blocks(story_folder):
    source = LocalFolderSource(story_folder)
    middle = source.chapter_refs()[1]
    assert source.fetch_chapter_text(middle) == ["Middle part.", "More middle."]


def test_local_source_cover_lookup(story_folder, tmp_path):
    source = LocalFolderSource(story_folder)
    assert source.fetch_cover_reference() is None

    (story_folder / "cover.png").write_bytes(b"png")
    assert source.fetch_cover_reference() == str(story_folder / "cover.png")


def test_metadata_cover_is_resolved_beside_metadata_file(tmp_path):
    folder = tmp_path / "tale"
    folder.mkdir()
    (folder / "a.txt").write_text("x", encoding="utf-8")
    (tmp_path / "tale_metadata.txt").write_text("title: T\ncover: art/front.jpg\n", encoding="utf-8")
    assert LocalFolderSource(folder).fetch_cover_reference() == str(tmp_path / "art/front.jpg")


def test_local_source_errors(tmp_path):
    with pytest.raises(NoContentError):
        LocalFolderSource(tmp_path / "missing")

    empty = tmp_path / "empty"
    empty.mkdir()
    source = LocalFolderSource(empty)
    with pytest.raises(NoContentError):
        source.chapter_refs()
    with pytest.raises(MetadataFileNotFoundError):
        source.fetch_story_metadata()


def test_build_story_from_local_folder(story_folder, tmp_path):
    staging = StagingArea.create(tmp_path / "staging")
    story = build_story_from_source(LocalFolderSource(story_folder), staging)

    assert story.title == "My Tale"
    assert story.author == "Ann"
    assert story.tags == ("a", "b")
    assert [c.display_label for c in story.chapters] == ["1 Intro", "2 Middle", "10 Finale"]
    assert all(c.path.parent == staging.directory for c in story.chapters)
    assert story.chapters[1].path.read_text(encoding="utf-8") == "Middle part.\n\nMore middle."


def test_build_story_from_source_with_range(tmp_path):
    source = _MemorySource({"one": ["1"], "two": ["2"], "three": ["3"]}, cover="https://x/c.png")
    staging = StagingArea.create(tmp_path / "staging")

    story = build_story_from_source(source, staging, start=1, end=2)

    assert [c.label for c in story.chapters] == ["two", "three"]
    assert story.language == "de"
    assert story.cover == "https://x/c.png"

    with pytest.raises(StoryValidationError):
        build_story_from_source(source, staging, start=2, end=1)


def test_end_to_end_from_folder(story_folder, tmp_path):
    staging = StagingArea.create(tmp_path / "staging")
    story = build_story_from_source(LocalFolderSource(story_folder), staging)

    result = build_story_epub(story, tmp_path / "out", staging=staging)

    assert result.output_path == tmp_path / "out" / "My Tale.epub"
    assert result.output_path.is_file()
    assert not staging.directory.exists()

import sys
import pathlib

import pytest

# Ensure the repository root is on sys.path for test imports
ROOT_PATH = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT_PATH) not in sys.path:
    sys.path.insert(0, str(ROOT_PATH))

from core.story import Story  # noqa: E402


@pytest.fixture
def write_chapters(tmp_path):
    """Write chapter text files and return their paths in the given order."""
    def _write(chapters, folder_name="chapters"):
        folder = tmp_path / folder_name
        folder.mkdir(exist_ok=True)
        paths = []
        for name, text in chapters:
            path = folder / f"{name}.txt"
            path.write_text(text, encoding="utf-8")
            paths.append(path)
        return paths
    return _write


@pytest.fixture
def make_story(write_chapters):
    def _make(title="My Tale", chapters=(("Intro", "text A"), ("End", "text B")), **kwargs):
        paths = write_chapters(chapters)
        kwargs.setdefault("language", "en")
        kwargs.setdefault("author", "Ann Author")
        return Story(
            title=title,
            chapters=tuple((p.stem, p) for p in paths),
            **kwargs,
        )
    return _make

"""
ローカルフォルダをコンテンツソースとするモジュール。

フォルダ内のテキストファイル（.txt / .md）を自然順に並べてチャプターとし、
フォルダと同じ階層の <フォルダ名>_metadata.txt から書誌情報を読み込みます。
"""
from pathlib import Path

from core.exceptions import FileNotFoundError_, NoContentError
from core.messages import msg
from core.metadata_reader import StoryMetadata, load_metadata_for_folder
from sources.base import ChapterRef, ContentSource
from text.common import natural_sort_key, split_paragraphs

CHAPTER_SUFFIXES = (".txt", ".md")
COVER_SUFFIXES = (".jpg", ".jpeg", ".png", ".gif", ".webp")


class LocalFolderSource(ContentSource):
    """
    ローカルフォルダのコンテンツソース。

    Notes
    -----
    フォルダ構成の例::

        novels/
        ├── my_tale_metadata.txt
        └── my_tale/
            ├── 01 Intro.txt
            ├── 02 End.txt
            └── cover.jpg      （metadataにcoverがない場合に使用）
    """

    def __init__(self, folder: str | Path):
        self.folder = Path(folder)
        if not self.folder.is_dir():
            raise NoContentError(msg("folder_not_found", path=self.folder))
        self._metadata: StoryMetadata | None = None

    def fetch_story_metadata(self) -> StoryMetadata:
        if self._metadata is None:
            self._metadata = load_metadata_for_folder(self.folder)
        return self._metadata

    def chapter_refs(self) -> list[ChapterRef]:
        files = sorted(
            (p for p in self.folder.iterdir() if p.is_file() and p.suffix.lower() in CHAPTER_SUFFIXES),
            key=natural_sort_key,
        )
        if not files:
            raise NoContentError(msg("no_chapters_in_folder", folder=self.folder))
        return [ChapterRef(label=p.stem, ref=str(p)) for p in files]

    def fetch_chapter_text(self, chapter: ChapterRef) -> list[str]:
        path = Path(chapter.ref)
        if not path.is_file():
            raise FileNotFoundError_(str(path), msg("file_type_chapter"))
        with open(path, "r", encoding="utf-8") as f:
            return split_paragraphs(f.read())

    def fetch_cover_reference(self) -> str | None:
        """
        表紙画像の参照を取得する。

        書誌情報の cover を優先し、相対パスは書誌情報ファイルの場所から解決する。
        指定がなければフォルダ内の cover.* を探す。
        """
        cover = self.fetch_story_metadata().cover
        if cover:
            if cover.lower().startswith("http") or Path(cover).is_absolute():
                return cover
            return str(self.folder.parent / cover)

        for suffix in COVER_SUFFIXES:
            candidate = self.folder / f"cover{suffix}"
            if candidate.is_file():
                return str(candidate)
        return None

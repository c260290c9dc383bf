"""
コンテンツソースを抽象化するモジュール。

物語のメタデータ・チャプター本文・表紙の取得元に依存しない
統一的なインターフェースと、そこから Story を組み立てる関数を提供します。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass

from core import logger
from core.metadata_reader import StoryMetadata
from core.messages import msg
from core.story import ChapterSource, Story, chapter_slice
from epub.staging import StagingArea


@dataclass(frozen=True)
class ChapterRef:
    """取得元におけるチャプターの参照。"""
    label: str
    ref: str


class ContentSource(ABC):
    """コンテンツソースの抽象基底クラス。"""

    @abstractmethod
    def fetch_story_metadata(self) -> StoryMetadata:
        """物語のメタデータを取得する。"""
        pass

    @abstractmethod
    def chapter_refs(self) -> list[ChapterRef]:
        """読み順に並んだチャプター参照を取得する。"""
        pass

    @abstractmethod
    def fetch_chapter_text(self, chapter: ChapterRef) -> list[str]:
        """チャプター本文をテキストブロックの列として取得する。"""
        pass

    @abstractmethod
    def fetch_cover_reference(self) -> str | None:
        """表紙画像のURLまたはローカルパスを取得する（なければNone）。"""
        pass


def build_story_from_source(
    source: ContentSource,
    staging: StagingArea,
    start: int = 0,
    end: int | None = None
) -> Story:
    """
    コンテンツソースから物語を組み立てる。

    各チャプターの本文を一時フォルダに書き出し、そのファイルを
    チャプターの入力とする Story を返します。

    Parameters
    ----------
    source : ContentSource
        取得元。
    staging : StagingArea
        チャプター本文を書き出す一時フォルダ。
    start : int
        最初に含めるチャプターの位置（0始まり）。
    end : int | None
        最後に含めるチャプターの位置（0始まり、この位置を含む）。Noneの場合は最後まで。

    Returns
    -------
    Story
        読み順にチャプターを並べた物語。

    Raises
    ------
    StoryValidationError
        範囲が不正な場合、またはタイトルが空の場合。
    """
    metadata = source.fetch_story_metadata()
    refs = source.chapter_refs()[chapter_slice(start, end)]

    logger.info(msg("source_discovered", title=metadata.title, author=metadata.author, count=len(refs)))

    chapters: list[ChapterSource] = []
    for chapter in refs:
        logger.info(msg("source_fetching_chapter", label=chapter.label))
        blocks = source.fetch_chapter_text(chapter)
        path = staging.write_chapter(chapter.label, blocks)
        chapters.append(ChapterSource(chapter.label, path))

    return Story(
        title=metadata.title,
        language=metadata.language,
        author=metadata.author,
        chapters=tuple(chapters),
        series=metadata.series,
        tags=tuple(metadata.tags),
        cover=source.fetch_cover_reference(),
    )

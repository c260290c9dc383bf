"""
物語データモデルモジュール。

EPUB生成の入力となる物語（タイトル、著者、言語、シリーズ、タグ、表紙、
チャプターの並び）を不変のデータクラスとして保持します。
"""
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Mapping

from core.exceptions import StoryValidationError
from core.messages import msg


@dataclass(frozen=True)
class Series:
    """シリーズ情報（タイトルと巻数）。"""
    title: str
    volume: int = 1

    def __post_init__(self):
        if self.volume < 1:
            raise StoryValidationError(msg("series_volume_invalid", volume=self.volume))


@dataclass(frozen=True)
class ChapterSource:
    """チャプターの入力元。並び順は Story.chapters のタプル順で決まる。"""
    label: str   # 呼び出し元が付けたキー（表示ラベルはファイル名から取る）
    path: Path

    @property
    def display_label(self) -> str:
        """目次・見出しに使う表示ラベル（拡張子を除いたファイル名）。"""
        return self.path.stem


@dataclass(frozen=True)
class Story:
    """EPUB化する物語。"""
    title: str
    language: str
    author: str
    chapters: tuple[ChapterSource, ...] = ()
    series: Series | None = None
    tags: tuple[str, ...] = ()
    cover: str | None = None        # ローカルパスまたはURL
    identifier: str | None = None   # 指定がなければ組み立て時に生成

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise StoryValidationError(msg("story_title_empty"))
        object.__setattr__(self, "chapters", tuple(
            ch if isinstance(ch, ChapterSource) else ChapterSource(ch[0], Path(ch[1]))
            for ch in self.chapters
        ))
        object.__setattr__(self, "tags", _unique_tags(self.tags))
        if self.cover is not None and not str(self.cover).strip():
            object.__setattr__(self, "cover", None)
        elif self.cover is not None:
            object.__setattr__(self, "cover", str(self.cover))

    @classmethod
    def from_mapping(
        cls,
        title: str,
        language: str,
        author: str,
        chapters: Mapping[str, str | Path],
        series: Series | None = None,
        tags: Iterable[str] = (),
        cover: str | None = None,
        identifier: str | None = None,
    ) -> "Story":
        """
        ラベル→パスのマッピングから物語を生成する。

        マッピングの挿入順を読み順として、明示的なチャプター列に変換します。
        """
        return cls(
            title=title,
            language=language,
            author=author,
            chapters=tuple(ChapterSource(label, Path(path)) for label, path in chapters.items()),
            series=series,
            tags=tuple(tags),
            cover=cover,
            identifier=identifier,
        )

    def with_chapter_range(self, start: int = 0, end: int | None = None) -> "Story":
        """
        チャプターの一部だけを含む物語を返す。

        Parameters
        ----------
        start : int
            最初に含めるチャプターの位置（0始まり）。
        end : int | None
            最後に含めるチャプターの位置（0始まり、この位置を含む）。
            Noneの場合は最後まで。

        Raises
        ------
        StoryValidationError
            範囲が不正な場合。
        """
        return replace(self, chapters=self.chapters[chapter_slice(start, end)])


def chapter_slice(start: int = 0, end: int | None = None) -> slice:
    """0始まり・両端を含むチャプター範囲をスライスに変換する。"""
    if start < 0 or (end is not None and end < start):
        raise StoryValidationError(msg("chapter_range_invalid", start=start, end=end))
    return slice(start, None if end is None else end + 1)


def _unique_tags(tags: Iterable[str]) -> tuple[str, ...]:
    """タグの重複と空文字を除去する（順序は保持）。"""
    seen: list[str] = []
    for tag in tags:
        tag = str(tag).strip()
        if tag and tag not in seen:
            seen.append(tag)
    return tuple(seen)

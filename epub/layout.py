"""
EPUBパッケージ構成モジュール。

読み順（spine）とマニフェスト項目を一度だけ計算し、OPF・NCX・nav・
チャプターファイル名のすべてをこの構成から導出します。
各文書を生成後に突き合わせる必要はありません。
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator

from core.config import (
    CHAPTER_FILE_OFFSET,
    COVER_PAGE_NAME,
    IMAGES_DIR,
    NAV_NAME,
    NCX_NAME,
    STYLES_DIR,
    STYLESHEET_NAME,
    TEXT_DIR,
    TITLE_PAGE_NAME,
    LanguageConfig,
    resolve_language,
)
from core.story import Story


# 拡張子からMIMEタイプへのマッピング
MEDIA_TYPES = {
    ".xhtml": "application/xhtml+xml",
    ".html": "application/xhtml+xml",
    ".ncx": "application/x-dtbncx+xml",
    ".opf": "application/oebps-package+xml",
    ".css": "text/css",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
}


def get_media_type(filename: str) -> str:
    """
    ファイル名からMIMEタイプを取得する。

    Parameters
    ----------
    filename : str
        ファイル名またはパス（拡張子付き）。

    Returns
    -------
    str
        MIMEタイプ。未知の拡張子の場合は'application/octet-stream'。
    """
    ext = Path(filename).suffix.lower()
    return MEDIA_TYPES.get(ext, "application/octet-stream")


class EntryKind(Enum):
    """spine項目の種類。"""
    TITLE_PAGE = "title_page"
    COVER = "cover"
    CHAPTER = "chapter"


@dataclass(frozen=True)
class StagedCover:
    """パッケージ内に配置済みの表紙画像。"""
    path: Path          # 配置先の実ファイル
    filename: str       # 例: cover.jpg
    media_type: str

    @property
    def href(self) -> str:
        """EPUB/ からの相対パス。"""
        return f"{IMAGES_DIR}/{self.filename}"


@dataclass(frozen=True)
class ChapterEntry:
    """1つのチャプターの出力情報。"""
    sequence: int       # 1始まりの順番
    label: str          # 表示ラベル（入力ファイル名から）
    source: Path

    @property
    def item_id(self) -> str:
        return f"ch{self.sequence + CHAPTER_FILE_OFFSET:04d}"

    @property
    def filename(self) -> str:
        return f"{self.item_id}.xhtml"

    @property
    def href(self) -> str:
        return f"{TEXT_DIR}/{self.filename}"


@dataclass(frozen=True)
class SpineEntry:
    """読み順の1項目。NCXのnavPoint・navのliと1対1で対応する。"""
    item_id: str
    href: str           # EPUB/ からの相対パス
    label: str
    kind: EntryKind
    play_order: int
    chapter: ChapterEntry | None = None


@dataclass(frozen=True)
class ManifestItem:
    """マニフェストの1項目。"""
    item_id: str
    href: str
    media_type: str
    properties: str = ""


@dataclass(frozen=True)
class PackageLayout:
    """1回の組み立てで使うパッケージ構成。"""
    identifier: str
    language: LanguageConfig
    spine: tuple[SpineEntry, ...]
    chapters: tuple[ChapterEntry, ...]
    cover: StagedCover | None = None

    @property
    def has_cover(self) -> bool:
        return self.cover is not None

    def manifest_items(self) -> Iterator[ManifestItem]:
        """マニフェスト項目を順に返す（IDは構成上一意）。"""
        yield ManifestItem("ncx", NCX_NAME, get_media_type(NCX_NAME))
        yield ManifestItem("nav", NAV_NAME, get_media_type(NAV_NAME), "nav")
        yield ManifestItem("css", f"{STYLES_DIR}/{STYLESHEET_NAME}", get_media_type(STYLESHEET_NAME))
        if self.cover is not None:
            yield ManifestItem("cover_image", self.cover.href, self.cover.media_type, "cover-image")
        for entry in self.spine:
            yield ManifestItem(entry.item_id, entry.href, get_media_type(entry.href))


def build_layout(
    story: Story,
    identifier: str,
    cover: StagedCover | None = None
) -> PackageLayout:
    """
    物語からパッケージ構成を計算する。

    Parameters
    ----------
    story : Story
        EPUB化する物語。
    identifier : str
        dc:identifier に使う一意な識別子。
    cover : StagedCover | None
        配置済みの表紙画像。Noneの場合は表紙ページを含めない。

    Returns
    -------
    PackageLayout
        spine順: タイトルページ → 表紙（あれば） → チャプター。
    """
    language = resolve_language(story.language)

    chapters = tuple(
        ChapterEntry(sequence=index, label=source.display_label, source=source.path)
        for index, source in enumerate(story.chapters, 1)
    )

    entries: list[tuple[str, str, str, EntryKind, ChapterEntry | None]] = [
        ("title_page", f"{TEXT_DIR}/{TITLE_PAGE_NAME}", language.title_page_label, EntryKind.TITLE_PAGE, None),
    ]
    if cover is not None:
        entries.append(("cover", f"{TEXT_DIR}/{COVER_PAGE_NAME}", language.cover_label, EntryKind.COVER, None))
    for chapter in chapters:
        entries.append((chapter.item_id, chapter.href, chapter.label, EntryKind.CHAPTER, chapter))

    spine = tuple(
        SpineEntry(item_id, href, label, kind, play_order, chapter)
        for play_order, (item_id, href, label, kind, chapter) in enumerate(entries, 1)
    )

    return PackageLayout(
        identifier=identifier,
        language=language,
        spine=spine,
        chapters=chapters,
        cover=cover,
    )

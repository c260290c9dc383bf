"""
EPUB3用テンプレート生成モジュール。

OPF、NCX、nav、タイトルページ、表紙、チャプターの各文書を生成します。
いずれも入出力を行わない純粋な関数で、並び順は PackageLayout から取ります。
"""
from datetime import datetime, timezone
from html import escape

from core.config import (
    NAV_NAME,
    STYLES_DIR,
    STYLESHEET_NAME,
    resolve_language,
)
from core.story import Story
from epub.layout import EntryKind, PackageLayout, StagedCover
from text.common import remove_control_characters, split_paragraphs

# 文書の位置からスタイルシートへの相対パス
CSS_PATH_FROM_PACKAGE = f"{STYLES_DIR}/{STYLESHEET_NAME}"
CSS_PATH_FROM_TEXT = f"../{STYLES_DIR}/{STYLESHEET_NAME}"


def _text(value: str) -> str:
    """制御文字を除去してXMLエスケープする。"""
    return escape(remove_control_characters(value))


def _xhtml_document(
    title: str,
    body: str,
    lang: str,
    css_path: str = CSS_PATH_FROM_TEXT
) -> str:
    """
    XHTML文書の共通の外枠を生成する。

    Parameters
    ----------
    title : str
        <title>要素の内容（エスケープ前）。
    body : str
        <body>要素の内容（XHTMLフォーマット済み）。
    lang : str
        言語タグ。
    css_path : str
        スタイルシートへの相対パス。
    """
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops" xml:lang="{escape(lang)}" lang="{escape(lang)}">
<head>
    <title>{_text(title)}</title>
    <link rel="stylesheet" type="text/css" href="{css_path}"/>
</head>
<body>
{body}
</body>
</html>'''


# =============================================================================
# OPF
# =============================================================================

def _generate_metadata_elements(story: Story, layout: PackageLayout, modified: datetime) -> list[str]:
    """OPFのmetadata要素の中身を生成する。"""
    elements = [
        f'        <dc:identifier id="pub-id">{_text(layout.identifier)}</dc:identifier>',
        f'        <dc:title id="title">{_text(story.title)}</dc:title>',
        f'        <dc:language>{_text(layout.language.epub_lang)}</dc:language>',
    ]
    if story.author.strip():
        elements.append(f'        <dc:creator id="creator">{_text(story.author)}</dc:creator>')
    for tag in story.tags:
        elements.append(f'        <dc:subject>{_text(tag)}</dc:subject>')
    elements.append(
        f'        <meta property="dcterms:modified">{modified.strftime("%Y-%m-%dT%H:%M:%SZ")}</meta>'
    )

    if story.series is not None:
        series_title = _text(story.series.title)
        volume = story.series.volume
        elements.extend([
            f'        <meta property="belongs-to-collection" id="series">{series_title}</meta>',
            '        <meta refines="#series" property="collection-type">series</meta>',
            f'        <meta refines="#series" property="group-position">{volume}</meta>',
            f'        <meta name="calibre:series" content="{series_title}"/>',
            f'        <meta name="calibre:series_index" content="{volume}"/>',
        ])

    if layout.cover is not None:
        elements.append('        <meta name="cover" content="cover_image"/>')

    return elements


def generate_opf(
    story: Story,
    layout: PackageLayout,
    modified: datetime | None = None
) -> str:
    """
    パッケージ文書（content.opf）を生成する。

    Parameters
    ----------
    story : Story
        EPUB化する物語。
    layout : PackageLayout
        パッケージ構成。マニフェストとspineはここから取る。
    modified : datetime | None
        dcterms:modified の値。Noneの場合は現在時刻（UTC）。

    Returns
    -------
    str
        生成されたOPFドキュメント。

    Notes
    -----
    NCXとnavはマニフェストに含めるが、spineには含めない。
    """
    if modified is None:
        modified = datetime.now(timezone.utc)

    metadata_elements = _generate_metadata_elements(story, layout, modified)

    manifest_items: list[str] = []
    for item in layout.manifest_items():
        properties = f' properties="{item.properties}"' if item.properties else ""
        manifest_items.append(
            f'        <item id="{item.item_id}" href="{escape(item.href)}" '
            f'media-type="{item.media_type}"{properties}/>'
        )

    spine_items = [f'        <itemref idref="{entry.item_id}"/>' for entry in layout.spine]

    return f'''<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="pub-id" xml:lang="{escape(layout.language.epub_lang)}">
    <metadata xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:opf="http://www.idpf.org/2007/opf">
{chr(10).join(metadata_elements)}
    </metadata>
    <manifest>
{chr(10).join(manifest_items)}
    </manifest>
    <spine toc="ncx">
{chr(10).join(spine_items)}
    </spine>
</package>'''


# =============================================================================
# ナビゲーション
# =============================================================================

def generate_ncx(story: Story, layout: PackageLayout) -> str:
    """
    旧形式の目次（toc.ncx）を生成する。

    spineの各項目に1つずつnavPointを作り、playOrderは1から順に振る。

    Parameters
    ----------
    story : Story
        EPUB化する物語。
    layout : PackageLayout
        パッケージ構成。

    Returns
    -------
    str
        生成されたNCXドキュメント。
    """
    nav_points = "\n".join(
        f'''        <navPoint id="navPoint-{entry.play_order}" playOrder="{entry.play_order}">
            <navLabel>
                <text>{_text(entry.label)}</text>
            </navLabel>
            <content src="{escape(entry.href)}"/>
        </navPoint>'''
        for entry in layout.spine
    )

    return f'''<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1" xml:lang="{escape(layout.language.epub_lang)}">
    <head>
        <meta name="dtb:uid" content="{_text(layout.identifier)}"/>
        <meta name="dtb:depth" content="1"/>
        <meta name="dtb:totalPageCount" content="0"/>
        <meta name="dtb:maxPageNumber" content="0"/>
    </head>
    <docTitle>
        <text>{_text(story.title)}</text>
    </docTitle>
    <docAuthor>
        <text>{_text(story.author)}</text>
    </docAuthor>
    <navMap>
{nav_points}
    </navMap>
</ncx>'''


def generate_nav_xhtml(story: Story, layout: PackageLayout) -> str:
    """
    EPUB3の目次（nav.xhtml）を生成する。

    目次の並びはNCXのnavPointと同じ（どちらもspineから生成する）。

    Parameters
    ----------
    story : Story
        EPUB化する物語。
    layout : PackageLayout
        パッケージ構成。

    Returns
    -------
    str
        生成されたnav.xhtmlドキュメント。
    """
    toc_title = layout.language.toc_title
    nav_items = "\n".join(
        f'            <li><a href="{escape(entry.href)}">{_text(entry.label)}</a></li>'
        for entry in layout.spine
    )

    landmarks = [
        f'            <li><a epub:type="toc" href="{NAV_NAME}">{_text(toc_title)}</a></li>',
    ]
    for entry in layout.spine:
        if entry.kind is EntryKind.COVER:
            landmarks.append(
                f'            <li><a epub:type="cover" href="{escape(entry.href)}">{_text(entry.label)}</a></li>'
            )
        elif entry.kind is EntryKind.TITLE_PAGE:
            landmarks.append(
                f'            <li><a epub:type="titlepage" href="{escape(entry.href)}">{_text(entry.label)}</a></li>'
            )
    if layout.chapters:
        first = layout.chapters[0]
        landmarks.append(
            f'            <li><a epub:type="bodymatter" href="{escape(first.href)}">{_text(first.label)}</a></li>'
        )

    body = f'''    <nav epub:type="toc" id="toc" role="doc-toc">
        <h1>{_text(toc_title)}</h1>
        <ol>
{nav_items}
        </ol>
    </nav>
    <nav epub:type="landmarks" id="landmarks" hidden="hidden">
        <ol>
{chr(10).join(landmarks)}
        </ol>
    </nav>'''

    return _xhtml_document(
        f"{story.title} - {toc_title}",
        body,
        layout.language.epub_lang,
        css_path=CSS_PATH_FROM_PACKAGE,
    )


# =============================================================================
# 特別ページ
# =============================================================================

def generate_title_page(story: Story) -> str:
    """
    タイトルページ（title_page.xhtml）を生成する。

    タイトル、シリーズ（あれば）、著者を表示する。
    """
    language = resolve_language(story.language)
    lines = [
        '    <section epub:type="titlepage" class="titlepage">',
        f'        <h1 class="title">{_text(story.title)}</h1>',
    ]
    if story.series is not None:
        series_line = language.series_format.format(
            title=story.series.title, volume=story.series.volume
        )
        lines.append(f'        <p class="series">{_text(series_line)}</p>')
    if story.author.strip():
        lines.append(f'        <p class="author">{_text(language.author_prefix)} {_text(story.author)}</p>')
    lines.append('    </section>')

    return _xhtml_document(story.title, "\n".join(lines), language.epub_lang)


def generate_cover_page(story: Story, cover: StagedCover) -> str:
    """
    表紙ページ（cover.xhtml）を生成する。

    表紙画像を配置できた場合にのみ呼び出す。
    """
    language = resolve_language(story.language)
    body = f'''    <section epub:type="cover" class="cover">
        <img src="../{escape(cover.href)}" alt="{_text(story.title)}"/>
    </section>'''
    return _xhtml_document(language.cover_label, body, language.epub_lang)


# =============================================================================
# チャプター
# =============================================================================

def format_paragraph(paragraph: str) -> str:
    """段落をp要素に変換する。段落内の改行は<br/>にする。"""
    lines = [_text(line) for line in paragraph.split("\n")]
    return f"        <p>{'<br/>'.join(lines)}</p>"


def generate_chapter_xhtml(
    label: str,
    content: str,
    sequence: int,
    lang: str = "en"
) -> str:
    """
    チャプター用XHTMLドキュメントを生成する。

    Parameters
    ----------
    label : str
        チャプターの表示ラベル（<title>とh1に使用）。
    content : str
        チャプター本文（プレーンテキスト）。空行で段落に分割する。
    sequence : int
        チャプターの順番（1始まり）。section要素のIDに使用。
    lang : str
        言語タグ。

    Returns
    -------
    str
        生成されたXHTMLドキュメント。
    """
    paragraphs = [format_paragraph(p) for p in split_paragraphs(remove_control_characters(content))]
    body = f'''    <section epub:type="chapter" role="doc-chapter" id="chapter-{sequence}">
        <h1>{_text(label)}</h1>
{chr(10).join(paragraphs)}
    </section>'''
    return _xhtml_document(label, body, lang)

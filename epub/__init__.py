"""
EPUB生成モジュール。

パッケージ構成の計算、文書テンプレート、表紙の配置、チャプター整形、
パッケージング、組み立てを提供する。
"""
from epub.builder import AssemblyResult, AssemblyWarning, build_story_epub
from epub.layout import PackageLayout, build_layout, get_media_type
from epub.packaging import package_epub, write_boilerplate
from epub.staging import StagingArea
from epub.templates import (
    generate_opf,
    generate_ncx,
    generate_nav_xhtml,
    generate_title_page,
    generate_cover_page,
    generate_chapter_xhtml,
)

__all__ = [
    "AssemblyResult",
    "AssemblyWarning",
    "build_story_epub",
    "PackageLayout",
    "build_layout",
    "get_media_type",
    "package_epub",
    "write_boilerplate",
    "StagingArea",
    "generate_opf",
    "generate_ncx",
    "generate_nav_xhtml",
    "generate_title_page",
    "generate_cover_page",
    "generate_chapter_xhtml",
]

"""
コンテンツソースパッケージ。

物語の取得元（ローカルフォルダなど）を抽象化します。
"""
from sources.base import ChapterRef, ContentSource, build_story_from_source
from sources.local import LocalFolderSource

__all__ = [
    "ChapterRef",
    "ContentSource",
    "LocalFolderSource",
    "build_story_from_source",
]

"""
テキスト処理モジュール。

ファイル名の安全化、制御文字の除去、段落分割、自然順ソートを提供する。
"""
from text.common import (
    remove_control_characters,
    normalize_newlines,
    split_paragraphs,
    natural_sort_key,
)
from text.filename import sanitize_filename

__all__ = [
    "remove_control_characters",
    "normalize_newlines",
    "split_paragraphs",
    "natural_sort_key",
    "sanitize_filename",
]

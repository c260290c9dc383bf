import re
from pathlib import Path


# =============================================================================
# 制御文字
# =============================================================================

# XML 1.0 で使用できない文字と、表示されない制御文字（タブ・改行は残す）
CONTROL_CHAR_PATTERN = re.compile(
    "[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufffe\uffff\ud800-\udfff]"
)

# 段落の区切り（空白のみの行を含む空行）
BLANK_LINE_PATTERN = re.compile(r"\n[ \t　]*\n")


def remove_control_characters(text: str) -> str:
    """
    テキストから制御文字を除去する。

    タブ、改行（LF/CR）はそのまま残します。

    Parameters
    ----------
    text : str
        処理するテキスト。

    Returns
    -------
    str
        制御文字を除去したテキスト。
    """
    return CONTROL_CHAR_PATTERN.sub("", text)


def normalize_newlines(text: str) -> str:
    """改行コードを LF に統一する。"""
    return text.replace("\r\n", "\n").replace("\r", "\n")


# =============================================================================
# 段落分割
# =============================================================================

def split_paragraphs(text: str) -> list[str]:
    """
    空行を境にテキストを段落に分割する。

    Parameters
    ----------
    text : str
        チャプター本文。

    Returns
    -------
    list[str]
        段落のリスト。各段落は前後の空白を除去済みで、空の段落は含まない。
        段落内の単一改行は保持する。
    """
    normalized = normalize_newlines(text)
    blocks = BLANK_LINE_PATTERN.split(normalized)
    paragraphs: list[str] = []
    for block in blocks:
        lines = [line.strip() for line in block.split("\n")]
        paragraph = "\n".join(line for line in lines if line)
        if paragraph:
            paragraphs.append(paragraph)
    return paragraphs


# =============================================================================
# ファイル名ユーティリティ
# =============================================================================

def natural_sort_key(path: Path) -> list:
    """
    自然順ソートのためのキー関数。

    ファイル名内の数字を数値として扱い、人間が期待する順序でソートする。
    例: ch1, ch2, ch10 → ch1, ch2, ch10 (文字列だと ch1, ch10, ch2)
    """
    def convert(text: str):
        return int(text) if text.isdigit() else text.lower()
    return [convert(c) for c in re.split(r'(\d+)', path.name)]

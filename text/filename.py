"""
ファイル名サニタイズモジュール。

物語のタイトルやチャプター名から、どのプラットフォームでも
安全に使えるファイル名を生成します。
"""
import re

from core.config import MAX_FILENAME_LENGTH, RESERVED_DEVICE_NAMES, UNTITLED_FILENAME

# 最も厳しいプラットフォーム（Windows）で使えない文字
_INVALID_CHARS_PATTERN = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

# 前後から除去する文字
_TRIM_CHARS = " ."


def sanitize_filename(value: str) -> str:
    """
    任意の文字列をファイル名として安全な文字列に変換する。

    Parameters
    ----------
    value : str
        変換元の文字列（タイトル、チャプター名など）。

    Returns
    -------
    str
        安全なファイル名。空になる場合は "untitled"。

    Notes
    -----
    処理順:
    1. 空白のみの入力は "untitled"
    2. 使用できない文字を "_" に置換
    3. 前後の空白とピリオドを除去
    4. 255文字に切り詰め（切り詰め後に再度前後を除去）
    5. 予約デバイス名（CON, NUL, COM1 など）と大文字小文字を無視して一致した場合は "_名前_"

    同じ関数を2回適用しても結果は変わらない。
    """
    if value is None or not value.strip():
        return UNTITLED_FILENAME

    safe_name = _INVALID_CHARS_PATTERN.sub("_", value)
    safe_name = safe_name.strip(_TRIM_CHARS)

    if len(safe_name) > MAX_FILENAME_LENGTH:
        safe_name = safe_name[:MAX_FILENAME_LENGTH].strip(_TRIM_CHARS)

    if safe_name.upper() in RESERVED_DEVICE_NAMES:
        safe_name = f"_{safe_name}_"

    if not safe_name.strip():
        return UNTITLED_FILENAME

    return safe_name

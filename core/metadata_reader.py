"""
書誌情報ファイル読み取りモジュール。

メタデータファイルから物語のメタ情報を読み取り、EPUB生成に使用します。
"""
from dataclasses import dataclass, field
from pathlib import Path

from core.config import DEFAULT_LANGUAGE
from core.messages import msg
from core.story import Series


class MetadataFileNotFoundError(Exception):
    """書誌情報ファイルが見つからない場合の例外。"""

    def __init__(self, metadata_path: str):
        self.metadata_path = metadata_path
        super().__init__(msg("metadata_not_found", path=metadata_path))


class MetadataTitleMissingError(Exception):
    """書誌情報にタイトルがない場合の例外。"""

    def __init__(self):
        super().__init__(msg("metadata_no_title"))


@dataclass
class StoryMetadata:
    """物語のメタデータを保持するデータクラス。"""

    title: str  # タイトル（必須）
    author: str = ""  # 著者
    language: str = DEFAULT_LANGUAGE  # 言語
    series: Series | None = None  # シリーズ（オプション）
    tags: list[str] = field(default_factory=list)  # タグ
    cover: str | None = None  # 表紙画像のパスまたはURL（オプション）


# ファイル内のキーとフィールド名のマッピング
_FIELD_MAPPING: dict[str, str] = {
    "title": "title",
    "author": "author",
    "creator": "author",
    "language": "language",
    "lang": "language",
    "series": "series",
    "volume": "volume",
    "tags": "tags",
    "subject": "tags",
    "cover": "cover",
}


def get_metadata_path_for_folder(source_folder: str | Path) -> Path:
    """
    フォルダ処理用のメタデータファイルパスを取得する。

    Parameters
    ----------
    source_folder : str | Path
        チャプターファイルが格納されたフォルダのパス（例：/path/to/bar）

    Returns
    -------
    Path
        メタデータファイルのパス（例：/path/to/bar_metadata.txt）
    """
    folder_path = Path(source_folder)
    metadata_filename = f"{folder_path.name}_metadata.txt"
    return folder_path.parent / metadata_filename


def parse_metadata_file(metadata_path: Path) -> dict[str, str]:
    """
    メタデータファイルをパースして辞書を返す。

    Parameters
    ----------
    metadata_path : Path
        メタデータファイルのパス

    Returns
    -------
    dict[str, str]
        フィールド名と値の辞書。tags は複数行の値をカンマ区切りで連結する。

    Notes
    -----
    ファイルフォーマット:
        title: 〇〇
        author: 〇〇
        language: English
        series: 〇〇
        volume: 2
        tags: fantasy, adventure
        cover: https://example.com/cover.jpg
    """
    result: dict[str, str] = {}

    with open(metadata_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            # 「:」または「：」で分割（半角コロン優先）
            if ":" in line:
                key, _, value = line.partition(":")
            elif "：" in line:
                key, _, value = line.partition("：")
            else:
                continue

            key = key.strip().lower()
            value = value.strip()

            if not value or key not in _FIELD_MAPPING:
                continue

            name = _FIELD_MAPPING[key]
            if name == "tags" and name in result:
                result[name] = f"{result[name]},{value}"
            else:
                result[name] = value

    return result


def _parse_volume(value: str | None) -> int:
    """巻数の文字列を整数に変換する（不正値は1）。"""
    if not value:
        return 1
    try:
        return max(1, int(value))
    except ValueError:
        return 1


def load_metadata(metadata_path: str | Path) -> StoryMetadata:
    """
    メタデータファイルを読み込む。

    Parameters
    ----------
    metadata_path : str | Path
        メタデータファイルのパス

    Returns
    -------
    StoryMetadata
        読み込んだメタデータ

    Raises
    ------
    MetadataFileNotFoundError
        メタデータファイルが見つからない場合
    MetadataTitleMissingError
        タイトルが記載されていない場合
    """
    metadata_path = Path(metadata_path)
    if not metadata_path.exists():
        raise MetadataFileNotFoundError(str(metadata_path))

    fields = parse_metadata_file(metadata_path)

    if "title" not in fields:
        raise MetadataTitleMissingError()

    series = None
    if "series" in fields:
        series = Series(fields["series"], _parse_volume(fields.get("volume")))

    tags = [t.strip() for t in fields.get("tags", "").split(",") if t.strip()]

    return StoryMetadata(
        title=fields["title"],
        author=fields.get("author", ""),
        language=fields.get("language", DEFAULT_LANGUAGE),
        series=series,
        tags=tags,
        cover=fields.get("cover"),
    )


def load_metadata_for_folder(source_folder: str | Path) -> StoryMetadata:
    """
    フォルダ処理用のメタデータを読み込む。

    Parameters
    ----------
    source_folder : str | Path
        チャプターファイルが格納されたフォルダのパス

    Returns
    -------
    StoryMetadata
        読み込んだメタデータ

    Raises
    ------
    MetadataFileNotFoundError
        メタデータファイルが見つからない場合
    MetadataTitleMissingError
        タイトルが記載されていない場合
    """
    return load_metadata(get_metadata_path_for_folder(source_folder))

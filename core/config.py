"""
EPUB生成ツールの設定定数モジュール。

プロジェクト全体で使用される設定値を一元管理します。
"""
import tempfile
from dataclasses import dataclass
from pathlib import Path


# --- 言語設定 ---
@dataclass
class LanguageConfig:
    """言語ごとの設定を保持するデータクラス。"""
    code: str                    # 言語コード（例: "en", "ja"）
    display_name: str            # 表示名
    epub_lang: str               # EPUB言語タグ（dc:language, xml:lang）
    toc_title: str               # 目次見出し
    title_page_label: str        # タイトルページの目次ラベル
    cover_label: str             # 表紙の目次ラベル
    author_prefix: str           # タイトルページの著者行の接頭辞
    series_format: str           # タイトルページのシリーズ行（{title}, {volume}）


# 対応言語の設定
LANGUAGE_CONFIGS: dict[str, LanguageConfig] = {
    "en": LanguageConfig(
        code="en",
        display_name="English",
        epub_lang="en",
        toc_title="Table of Contents",
        title_page_label="Title Page",
        cover_label="Cover",
        author_prefix="by",
        series_format="{title}, Book {volume}",
    ),
    "ja": LanguageConfig(
        code="ja",
        display_name="日本語",
        epub_lang="ja",
        toc_title="目次",
        title_page_label="扉",
        cover_label="表紙",
        author_prefix="著",
        series_format="{title} 第{volume}巻",
    ),
    "de": LanguageConfig(
        code="de",
        display_name="Deutsch",
        epub_lang="de",
        toc_title="Inhaltsverzeichnis",
        title_page_label="Titelseite",
        cover_label="Umschlag",
        author_prefix="von",
        series_format="{title}, Band {volume}",
    ),
}

# 表示名・地域付きコードから言語コードへの別名
LANGUAGE_ALIASES: dict[str, str] = {
    "english": "en",
    "en_us": "en",
    "en-us": "en",
    "en_gb": "en",
    "en-gb": "en",
    "japanese": "ja",
    "日本語": "ja",
    "ja_jp": "ja",
    "ja-jp": "ja",
    "german": "de",
    "deutsch": "de",
    "de_de": "de",
    "de-de": "de",
}

# デフォルト言語
DEFAULT_LANGUAGE = "en"

# --- パッケージ構成 ---
PACKAGE_DIR = "EPUB"          # OPFを含むパッケージルート
TEXT_DIR = "text"             # XHTML文書
IMAGES_DIR = "images"         # 表紙画像
STYLES_DIR = "styles"         # スタイルシート
STYLESHEET_NAME = "style.css"
OPF_NAME = "content.opf"
NCX_NAME = "toc.ncx"
NAV_NAME = "nav.xhtml"
TITLE_PAGE_NAME = "title_page.xhtml"
COVER_PAGE_NAME = "cover.xhtml"
COVER_IMAGE_STEM = "cover"
DEFAULT_COVER_SUFFIX = ".jpg"
EPUB_SUFFIX = ".epub"

# チャプターファイル番号のオフセット（ch{番号+1:04d}.xhtml）
CHAPTER_FILE_OFFSET = 1

# --- ファイル名設定 ---
MAX_FILENAME_LENGTH = 255
UNTITLED_FILENAME = "untitled"
RESERVED_DEVICE_NAMES: frozenset[str] = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)

# --- 表紙取得設定 ---
COVER_FETCH_ATTEMPTS = 3        # 最大試行回数
COVER_FETCH_TIMEOUT = 30.0      # 1回あたりのタイムアウト（秒）
COVER_FETCH_BACKOFF = 1.0       # 再試行までの待機秒数（試行回数に比例）
HTTP_USER_AGENT = "storyepub/1.0"

# --- 作業用ディレクトリ ---
TEMP_ROOT = Path(tempfile.gettempdir()) / "storyepub"  # 全実行で共有する一時ルート
STAGING_PREFIX = "run-"
OUTPUT_SUBDIR = "epub_output"  # CLIの既定出力先（物語フォルダの下）

# --- チャプター処理 ---
DEFAULT_CHAPTER_WORKERS = 1


def get_language_config(lang_code: str) -> LanguageConfig:
    """言語コードから設定を取得する。

    Parameters
    ----------
    lang_code : str
        言語コード（例: "en", "ja"）

    Returns
    -------
    LanguageConfig
        言語設定

    Raises
    ------
    ValueError
        未対応の言語コードの場合
    """
    if lang_code not in LANGUAGE_CONFIGS:
        available = ", ".join(LANGUAGE_CONFIGS.keys())
        raise ValueError(f"未対応の言語コード: {lang_code}（対応言語: {available}）")
    return LANGUAGE_CONFIGS[lang_code]


def resolve_language(language: str) -> LanguageConfig:
    """
    物語の言語表記から言語設定を解決する。

    "English" のような表示名や "en-US" のような地域付きタグも受け付ける。
    未知の言語はタグをそのまま使い、ラベルは英語の設定を流用する。

    Parameters
    ----------
    language : str
        物語の言語表記。

    Returns
    -------
    LanguageConfig
        言語設定。
    """
    key = language.strip()
    lowered = key.lower()
    if lowered in LANGUAGE_CONFIGS:
        return LANGUAGE_CONFIGS[lowered]
    if lowered in LANGUAGE_ALIASES:
        return LANGUAGE_CONFIGS[LANGUAGE_ALIASES[lowered]]
    if not key:
        return LANGUAGE_CONFIGS[DEFAULT_LANGUAGE]

    fallback = LANGUAGE_CONFIGS[DEFAULT_LANGUAGE]
    return LanguageConfig(
        code=key,
        display_name=key,
        epub_lang=key,
        toc_title=fallback.toc_title,
        title_page_label=fallback.title_page_label,
        cover_label=fallback.cover_label,
        author_prefix=fallback.author_prefix,
        series_format=fallback.series_format,
    )

"""
EPUB生成ツールのメインモジュール。

チャプターのテキストファイルを格納したフォルダから、表紙・目次付きのEPUB3を生成する。
"""
from datetime import datetime
from pathlib import Path

from core import logger
from core.messages import msg, set_ui_language
from core.config import (
    DEFAULT_LANGUAGE,
    LANGUAGE_CONFIGS,
    OUTPUT_SUBDIR,
    get_language_config,
    LanguageConfig,
)
from core.exceptions import EpubGenerationError
from core.metadata_reader import MetadataFileNotFoundError, MetadataTitleMissingError
from epub.builder import AssemblyResult, build_story_epub
from epub.staging import StagingArea
from sources import LocalFolderSource, build_story_from_source


# =============================================================================
# ログ出力
# =============================================================================

def _log_processing_start(start_time: datetime) -> None:
    """処理開始ログを出力する。"""
    logger.info(msg("processing_start", time=start_time.strftime('%Y-%m-%d %H:%M:%S')))


def _log_processing_end(start_time: datetime, result: AssemblyResult) -> None:
    """処理終了ログを出力する。"""
    end_time = datetime.now()
    logger.separator("=", 50)
    logger.info(msg("processing_end", time=end_time.strftime('%Y-%m-%d %H:%M:%S')))
    logger.info(msg("elapsed_time", time=end_time - start_time))
    if result.raw:
        logger.info(msg("output_directory", path=result.output_path))
    else:
        logger.info(msg("output_file", path=result.output_path))

    if result.warnings:
        logger.info(msg("warnings_header", count=len(result.warnings)))
        for w in result.warnings:
            logger.info(msg("warning_item", kind=w.kind, message=w.message))


# =============================================================================
# UI入力ヘルパー関数
# =============================================================================

def _clean_path_input(value: str) -> str:
    """引用符付き入力への対応: "path" や 'path' をトリムする。"""
    return value.strip().strip('"').strip("'")


def _prompt_choice(
    prompt: str,
    options: list[str],
    default: int = 1
) -> int:
    """
    選択肢を表示してユーザー入力を取得する。

    Parameters
    ----------
    prompt : str
        質問文
    options : list[str]
        選択肢のリスト
    default : int
        デフォルト値（1始まり）

    Returns
    -------
    int
        選択されたインデックス（1始まり）
    """
    print(prompt)
    for i, option in enumerate(options, 1):
        print(f"  {i}: {option}")
    logger.separator("-")

    choice = input(msg("choice_prompt", n=len(options), d=default)).strip()

    if not choice:
        return default

    try:
        value = int(choice)
        if 1 <= value <= len(options):
            return value
        print(msg("invalid_value", n=len(options), d=default))
    except ValueError:
        print(msg("invalid_input", n=len(options), d=default))

    return default


def _prompt_language() -> LanguageConfig:
    """言語選択を行う（UIメッセージの言語を切り替える）。"""
    print(msg("select_language"))
    lang_options = list(LANGUAGE_CONFIGS.keys())

    for i, lang_code in enumerate(lang_options, 1):
        config = LANGUAGE_CONFIGS[lang_code]
        print(f"  {i}: {config.display_name} ({lang_code})")
    logger.separator("-")

    choice = input(msg("language_prompt", n=len(lang_options))).strip()

    try:
        index = int(choice) - 1 if choice else 0
        if not (0 <= index < len(lang_options)):
            index = 0
        lang_config = get_language_config(lang_options[index])
        set_ui_language(lang_config.code)
        logger.info(msg("selected_language", name=lang_config.display_name))
        return lang_config
    except ValueError:
        lang_config = get_language_config(DEFAULT_LANGUAGE)
        set_ui_language(lang_config.code)
        logger.info(msg("default_language", name=lang_config.display_name))
        return lang_config


def _prompt_story_folder() -> Path:
    """チャプターファイルを格納したフォルダのパスを取得する。"""
    folder = Path(_clean_path_input(input(msg("prompt_story_folder"))))
    if not folder.is_dir():
        raise EpubGenerationError(msg("folder_not_found", path=folder))
    return folder


def _prompt_output_dir(default: Path) -> Path:
    """出力先フォルダを取得する（空入力でデフォルト）。"""
    value = _clean_path_input(input(msg("prompt_output_dir", path=default)))
    return Path(value) if value else default


def _prompt_cover_override() -> str | None:
    """表紙の上書き指定を取得する（空入力で指定なし）。"""
    value = _clean_path_input(input(msg("prompt_cover_override")))
    return value or None


def _prompt_raw() -> bool:
    """.epubを作成せずフォルダのまま残すかを選択する。"""
    options = [
        msg("opt_raw_no"),
        msg("opt_raw_yes"),
    ]
    return _prompt_choice(msg("raw_question"), options, default=1) == 2


# =============================================================================
# 処理
# =============================================================================

def process_story_folder(
    source_folder: str | Path,
    output_dir: str | Path,
    cover_override: str | None = None,
    raw: bool = False
) -> AssemblyResult:
    """
    フォルダ内のチャプターファイルからEPUBを生成する。

    Parameters
    ----------
    source_folder : str | Path
        チャプターファイルを格納したフォルダ。
    output_dir : str | Path
        出力先フォルダ。
    cover_override : str | None
        表紙画像のパスまたはURL（書誌情報の表紙より優先）。
    raw : bool
        Trueの場合は.epubを作成せず、展開したフォルダを残す。
    """
    start_time = datetime.now()
    _log_processing_start(start_time)

    source = LocalFolderSource(source_folder)
    staging = StagingArea.create()
    try:
        story = build_story_from_source(source, staging)
    except Exception:
        staging.cleanup()
        raise

    result = build_story_epub(
        story,
        output_dir,
        cover_override=cover_override,
        raw=raw,
        staging=staging,
    )

    _log_processing_end(start_time, result)
    return result


# =============================================================================
# メイン関数
# =============================================================================

def main() -> None:
    """EPUB生成ツールのメイン処理。"""
    logger.separator("=")
    print(msg("tool_title"))
    logger.separator("=")

    # 言語選択
    _prompt_language()
    logger.separator("-")

    try:
        folder = _prompt_story_folder()
        output_dir = _prompt_output_dir(folder / OUTPUT_SUBDIR)
        cover_override = _prompt_cover_override()
        raw = _prompt_raw()
        logger.separator("-")

        process_story_folder(folder, output_dir, cover_override=cover_override, raw=raw)
    except (MetadataFileNotFoundError, MetadataTitleMissingError) as e:
        logger.error(str(e))
    except EpubGenerationError as e:
        logger.error(str(e))
        print(msg("processing_aborted"))


if __name__ == "__main__":
    main()

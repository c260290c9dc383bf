"""
UIメッセージ国際化モジュール。

OSのロケールに基づいて日本語/英語のUIメッセージを自動切替する。
"""
import locale
import os
import sys

MESSAGES: dict[str, dict[str, str]] = {
    "ja": {
        # ツールタイトル
        "tool_title": "storyepub - 物語テキストからEPUBを生成",

        # 言語選択
        "select_language": "言語を選択してください / Select language:",
        "language_prompt": "言語 / Language (1-{n}, デフォルト: 1): ",
        "selected_language": "選択された言語: {name}",
        "default_language": "デフォルト言語を使用: {name}",

        # 共通選択UI
        "choice_prompt": "選択 (1-{n}, デフォルト: {d}): ",
        "invalid_value": "無効な値です。1-{n}の範囲で入力してください。デフォルト値({d})を使用します。",
        "invalid_input": "無効な入力です。数値を入力してください。デフォルト値({d})を使用します。",

        # パス入力
        "prompt_story_folder": "チャプターのテキストファイルが格納されたフォルダのパスを指定してください\n",
        "prompt_output_dir": "出力先フォルダを指定してください（空欄: {path}）\n",
        "prompt_cover_override": "表紙画像のパスまたはURLを指定してください（空欄: 物語の表紙を使用）\n",

        # 出力形式
        "raw_question": "EPUBファイルを作成せず、展開済みのフォルダのまま出力しますか？",
        "opt_raw_no": "EPUBファイルを作成する（デフォルト）",
        "opt_raw_yes": "フォルダのまま出力する",

        # 処理ログ
        "processing_start": "処理開始: {time}",
        "processing_end": "処理終了: {time}",
        "elapsed_time": "所要時間: {time}",
        "output_file": "生成ファイル: {path}",
        "output_directory": "出力フォルダ: {path}",
        "processing_aborted": "処理を中断しました。",
        "warnings_header": "{count} 件の警告があります:",
        "warning_item": "  [{kind}] {message}",

        # エラー・バリデーション
        "folder_not_found": "フォルダが見つかりません: {path}",
        "no_chapters_in_folder": "{folder} に.txtまたは.mdファイルが見つかりません。",
        "story_title_empty": "物語のタイトルが空です。",
        "series_volume_invalid": "シリーズの巻数は1以上である必要があります: {volume}",
        "chapter_range_invalid": "チャプターの範囲が不正です: {start}-{end}",

        # メタデータエラー
        "metadata_not_found": "エラー：書誌情報がありません\n期待されるファイル: {path}\n処理を中断しました。",
        "metadata_no_title": "エラー：書誌情報にタイトルがありません\n処理を中断しました。",

        # ロガープレフィックス
        "log_warning": "警告: {message}",
        "log_success": "成功: {message}",

        # 例外メッセージ
        "exception_file_not_found": "{file_type}が見つかりません: {file_path}",
        "document_write_failed": "必須ファイルを書き出せませんでした: {path}（{error}）",
        "story_dir_occupied": "EPUBの作業フォルダではない既存のフォルダがあるため、上書きしません: {path}",
        "archive_failed": "EPUBファイルを作成できませんでした: {path}（{error}）",
        "chapter_cleanup_failed": "チャプターの整形に失敗しました: {path}（{error}）",

        # ファイル種別名（FileNotFoundError_ の file_type 引数用）
        "file_type_chapter": "チャプターファイル",

        # 取得元
        "source_discovered": "検出: {title}（著者: {author}、{count} チャプター）",
        "source_fetching_chapter": "本文を取得中: {label}",
        "staging_chapter_written": "  一時ファイルに書き出しました: {path}",
        "staging_cleanup_failed": "一時フォルダを削除できませんでした: {path}（{error}）",

        # EPUBビルダー
        "epub_start": "EPUBファイルを生成します: {title}",
        "epub_base_files": "EPUBの基本ファイルを書き出しています...",
        "epub_documents_written": "OPF・NCX・目次・タイトルページを書き出しました。",
        "epub_chapter_writing": "チャプターを書き出しています...",
        "epub_chapter_written": "  {file} を書き出しました: {label}",
        "epub_creating": "EPUBファイルを作成しています: {file}",
        "epub_saved": "EPUBファイルを生成しました: {file}",
        "epub_raw_skip": "フォルダ出力が指定されたため、EPUBファイルの作成を省略します。",
        "epub_cleanup_done": "作業フォルダを削除しました: {path}",
        "epub_cleanup_failed": "作業フォルダを削除できませんでした: {path} ({error})",
        "epub_chapter_count_done": "   チャプター数: {count}",

        # 表紙
        "cover_checking": "表紙画像を確認しています...",
        "cover_none": "表紙画像は指定されていません。",
        "cover_downloaded": "表紙画像をダウンロードしました: {source}",
        "cover_copied": "表紙画像をコピーしました: {source}",
        "cover_http_failed": "表紙画像のダウンロードに失敗しました（HTTP {status}）: {source}",
        "cover_download_error": "表紙画像のダウンロード中にエラーが発生しました: {error}",
        "cover_retry": "表紙画像の取得を再試行します（{attempt}/{attempts}）",
        "cover_file_not_found": "表紙画像が指定されていますが、ファイルが見つかりません: {source}",
        "cover_copy_error": "表紙画像のコピー中にエラーが発生しました: {error}",
        "cover_page_written": "cover.xhtml を生成しました: {path}",
        "cover_skipped": "表紙なしで続行します: {reason}",
        "cover_unsupported_type": "表紙画像の形式に対応していません（{suffix}）: {source}",
    },
    "en": {
        # Tool title
        "tool_title": "storyepub - Build EPUB files from story text",

        # Language selection
        "select_language": "Select language:",
        "language_prompt": "Language (1-{n}, default: 1): ",
        "selected_language": "Selected language: {name}",
        "default_language": "Using default language: {name}",

        # Common selection UI
        "choice_prompt": "Selection (1-{n}, default: {d}): ",
        "invalid_value": "Invalid value. Enter a number between 1-{n}. Using default ({d}).",
        "invalid_input": "Invalid input. Enter a number. Using default ({d}).",

        # Path input
        "prompt_story_folder": "Specify the path to the folder containing the chapter text files\n",
        "prompt_output_dir": "Specify the output folder (empty: {path})\n",
        "prompt_cover_override": "Specify a cover image path or URL (empty: use the story's cover)\n",

        # Output format
        "raw_question": "Skip the .epub archive and keep the unpacked folder instead?",
        "opt_raw_no": "Create the .epub file (default)",
        "opt_raw_yes": "Keep the unpacked folder",

        # Processing log
        "processing_start": "Processing started: {time}",
        "processing_end": "Processing finished: {time}",
        "elapsed_time": "Elapsed time: {time}",
        "output_file": "Output file: {path}",
        "output_directory": "Output folder: {path}",
        "processing_aborted": "Processing aborted.",
        "warnings_header": "{count} warning(s):",
        "warning_item": "  [{kind}] {message}",

        # Error / validation
        "folder_not_found": "Folder not found: {path}",
        "no_chapters_in_folder": "No .txt or .md files found in {folder}.",
        "story_title_empty": "The story title is empty.",
        "series_volume_invalid": "Series volume must be 1 or greater: {volume}",
        "chapter_range_invalid": "Invalid chapter range: {start}-{end}",

        # Metadata errors
        "metadata_not_found": "Error: Metadata file not found\nExpected file: {path}\nProcessing aborted.",
        "metadata_no_title": "Error: No title found in metadata\nProcessing aborted.",

        # Logger prefixes
        "log_warning": "Warning: {message}",
        "log_success": "Success: {message}",

        # Exception messages
        "exception_file_not_found": "{file_type} not found: {file_path}",
        "document_write_failed": "Failed to write required file: {path} ({error})",
        "story_dir_occupied": "Refusing to overwrite an existing folder that is not an earlier EPUB build: {path}",
        "archive_failed": "Failed to create EPUB file: {path} ({error})",
        "chapter_cleanup_failed": "Failed to clean chapter: {path} ({error})",

        # File type names (for FileNotFoundError_ file_type argument)
        "file_type_chapter": "chapter file",

        # Content source
        "source_discovered": "Discovered: {title} by {author} with {count} chapter(s).",
        "source_fetching_chapter": "Fetching content: {label}",
        "staging_chapter_written": "  Staged chapter text: {path}",
        "staging_cleanup_failed": "Could not remove temporary folder: {path} ({error})",

        # EPUB builder
        "epub_start": "Generating EPUB: {title}",
        "epub_base_files": "Writing EPUB base files...",
        "epub_documents_written": "Wrote OPF, NCX, navigation and title page.",
        "epub_chapter_writing": "Writing chapters to file...",
        "epub_chapter_written": "  Wrote {file}: {label}",
        "epub_creating": "Creating final EPUB file {file}",
        "epub_saved": "EPUB file generated: {file}",
        "epub_raw_skip": "Raw output requested, skipping .epub creation.",
        "epub_cleanup_done": "Removed working folder: {path}",
        "epub_cleanup_failed": "Could not remove working folder: {path} ({error})",
        "epub_chapter_count_done": "   Chapters: {count}",

        # Cover
        "cover_checking": "Checking for cover art...",
        "cover_none": "No cover art specified.",
        "cover_downloaded": "Downloaded cover from URL: {source}",
        "cover_copied": "Copied cover from {source}",
        "cover_http_failed": "Failed to download cover (HTTP {status}) from {source}",
        "cover_download_error": "Error downloading cover: {error}",
        "cover_retry": "Retrying cover download ({attempt}/{attempts})",
        "cover_file_not_found": "Cover art set, but file not found: {source}",
        "cover_copy_error": "Error copying cover file: {error}",
        "cover_page_written": "Generated cover.xhtml at {path}",
        "cover_skipped": "Continuing without cover: {reason}",
        "cover_unsupported_type": "Unsupported cover image type ({suffix}): {source}",
    },
}

# OS言語判定
def _detect_ui_language() -> str:
    """OSのロケールから UI 言語を判定する。"""
    # macOS: システム言語設定（AppleLanguages）を最優先
    # LANG=C.UTF-8 等はシステム言語と無関係なため、macOS設定を先にチェック
    if sys.platform == "darwin":
        try:
            import subprocess
            result = subprocess.run(
                ["defaults", "read", "-g", "AppleLanguages"],
                capture_output=True, text=True, timeout=2
            )
            if result.returncode == 0:
                # 出力例: ("ja-JP", "en-US", ...) → 先頭の言語コードを取得
                for line in result.stdout.splitlines():
                    line = line.strip().strip('",() ')
                    if line:
                        return "ja" if line.startswith("ja") else "en"
        except (OSError, subprocess.SubprocessError):
            pass
    # 環境変数をチェック（LC_ALL, LC_MESSAGES, LANG）
    # C / C.UTF-8 / POSIX はデフォルト値のため言語指定なしとして除外
    for env_var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(env_var, "")
        if value and not value.startswith("C") and value != "POSIX":
            return "ja" if value.startswith("ja") else "en"
    # フォールバック: locale.getlocale()
    # Windows では "Japanese_Japan" のように返るため、大文字小文字を無視して判定
    try:
        loc = locale.getlocale()[0] or ""
    except ValueError:
        loc = ""
    return "ja" if loc.lower().startswith("ja") else "en"

_ui_lang = _detect_ui_language()


def set_ui_language(lang_code: str) -> None:
    """
    UIメッセージ言語を手動で設定する。

    言語選択UIでユーザーが選択した言語に合わせて呼び出す。

    Parameters
    ----------
    lang_code : str
        言語コード（例: "ja", "en", "de"）。
        "ja" で始まる場合は日本語、それ以外は英語を使用する。
    """
    global _ui_lang
    _ui_lang = "ja" if lang_code.startswith("ja") else "en"


def get_ui_language() -> str:
    """現在のUIメッセージ言語を返す。"""
    return _ui_lang


def msg(key: str, **kwargs) -> str:
    """
    指定キーのUIメッセージを現在のロケールに応じて返す。

    Parameters
    ----------
    key : str
        メッセージキー
    **kwargs
        メッセージ内のプレースホルダーに渡す値

    Returns
    -------
    str
        ロケールに応じたメッセージ文字列
    """
    template = MESSAGES[_ui_lang].get(key, key)
    if kwargs:
        return template.format(**kwargs)
    return template

"""
EPUB生成処理用のカスタム例外クラス。

処理パイプラインの各段階で発生するエラーを明確に分類し、
適切なエラーハンドリングを可能にします。

- 致命的: DocumentWriteError, ArchiveError, FileNotFoundError_, StoryValidationError
- 回復可能（チャプター単位）: ChapterCleanupError
- 回復可能（表紙なしで続行）: CoverStagingError
"""
from core.messages import msg


class EpubGenerationError(Exception):
    """EPUB生成処理の基底例外クラス。"""
    pass


class FileNotFoundError_(EpubGenerationError):
    """必要なファイルが見つからない場合の例外。"""

    def __init__(self, file_path: str, file_type: str = ""):
        self.file_path = file_path
        self.file_type = file_type
        super().__init__(msg("exception_file_not_found", file_type=file_type, file_path=file_path))


class StoryValidationError(EpubGenerationError):
    """物語の入力データが不正な場合の例外。"""

    def __init__(self, message: str):
        super().__init__(message)


class DocumentWriteError(EpubGenerationError):
    """構造上必須のファイル・フォルダを書き出せなかった場合の例外。"""

    def __init__(self, path: str, error: Exception | str):
        self.path = path
        self.error = error
        super().__init__(msg("document_write_failed", path=path, error=error))


class ArchiveError(EpubGenerationError):
    """EPUBアーカイブの作成に失敗した場合の例外。"""

    def __init__(self, path: str, error: Exception | str):
        self.path = path
        self.error = error
        super().__init__(msg("archive_failed", path=path, error=error))


class ChapterCleanupError(EpubGenerationError):
    """書き出し済みチャプターの整形に失敗した場合の例外。"""

    def __init__(self, path: str, error: Exception | str):
        self.path = path
        self.error = error
        super().__init__(msg("chapter_cleanup_failed", path=path, error=error))


class CoverStagingError(EpubGenerationError):
    """表紙画像の取得・コピーに失敗した場合の例外。"""

    def __init__(self, message: str, source: str = ""):
        self.source = source
        super().__init__(message)


class NoContentError(EpubGenerationError):
    """処理対象のコンテンツが存在しない場合のエラー。"""

    def __init__(self, message: str):
        super().__init__(message)

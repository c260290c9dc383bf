"""
コアモジュール。

共通の例外、ロガー、設定、物語データモデル、メタデータ読み込みを提供する。
"""
from core.exceptions import (
    EpubGenerationError,
    FileNotFoundError_,
    StoryValidationError,
    DocumentWriteError,
    ArchiveError,
    ChapterCleanupError,
    CoverStagingError,
    NoContentError,
)
from core.logger import (
    debug, info, warning, error, success, section, separator,
    set_log_level, LogLevel
)
from core.config import (
    DEFAULT_LANGUAGE,
    LANGUAGE_CONFIGS,
    get_language_config,
    resolve_language,
    LanguageConfig,
)
from core.story import Series, ChapterSource, Story
from core.metadata_reader import (
    StoryMetadata,
    load_metadata,
    load_metadata_for_folder,
    MetadataFileNotFoundError,
    MetadataTitleMissingError,
)

__all__ = [
    # exceptions
    "EpubGenerationError", "FileNotFoundError_", "StoryValidationError",
    "DocumentWriteError", "ArchiveError", "ChapterCleanupError",
    "CoverStagingError", "NoContentError",
    # logger
    "debug", "info", "warning", "error", "success", "section", "separator",
    "set_log_level", "LogLevel",
    # config
    "DEFAULT_LANGUAGE", "LANGUAGE_CONFIGS", "get_language_config", "resolve_language",
    "LanguageConfig",
    # story
    "Series", "ChapterSource", "Story",
    # metadata_reader
    "StoryMetadata", "load_metadata", "load_metadata_for_folder",
    "MetadataFileNotFoundError", "MetadataTitleMissingError",
]

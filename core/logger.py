"""
ロギングユーティリティモジュール。

アプリケーション全体で一貫したログ出力を提供します。
進捗ログは人が読むための逐次メッセージであり、処理結果には影響しません。
"""
import io
import logging
import sys
from enum import IntEnum
from typing import Callable

from core.messages import msg


class LogLevel(IntEnum):
    """ログレベル定義。"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


# Windows cp932 環境でのUnicodeEncodeError対策
if sys.stdout.encoding and sys.stdout.encoding.lower() != 'utf-8' and hasattr(sys.stdout, "buffer"):
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace')

# アプリケーション用のロガーを作成
_logger = logging.getLogger("storyepub")
_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging.Formatter("%(message)s"))
_logger.addHandler(_handler)
_logger.setLevel(logging.INFO)


class _CallbackHandler(logging.Handler):
    """ログメッセージを呼び出し元のコールバックへ転送するハンドラ。"""

    def __init__(self, callback: Callable[[str], None]):
        super().__init__()
        self.callback = callback
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.callback(self.format(record))
        except Exception:
            self.handleError(record)


def get_logger() -> logging.Logger:
    """アプリケーション用のロガーを返す。"""
    return _logger


def set_log_level(level: LogLevel) -> None:
    """ログレベルを設定する。"""
    _logger.setLevel(level)


def add_listener(callback: Callable[[str], None]) -> logging.Handler:
    """
    ログメッセージを受け取るコールバックを登録する。

    Parameters
    ----------
    callback : Callable[[str], None]
        整形済みのログ文字列を受け取る関数。

    Returns
    -------
    logging.Handler
        登録したハンドラ。remove_listener() に渡して解除する。
    """
    handler = _CallbackHandler(callback)
    _logger.addHandler(handler)
    return handler


def remove_listener(handler: logging.Handler) -> None:
    """add_listener() で登録したハンドラを解除する。"""
    _logger.removeHandler(handler)


def debug(message: str) -> None:
    """デバッグメッセージを出力する。"""
    _logger.debug(message)


def info(message: str) -> None:
    """情報メッセージを出力する。"""
    _logger.info(message)


def warning(message: str) -> None:
    """警告メッセージを出力する。"""
    _logger.warning(msg("log_warning", message=message))


def error(message: str) -> None:
    """エラーメッセージを出力する。"""
    _logger.error(f"❌ {message}")


def success(message: str) -> None:
    """成功メッセージを出力する。"""
    _logger.info(f"✅ {msg('log_success', message=message)}")


def section(title: str) -> None:
    """セクション見出しを出力する。"""
    _logger.info("-" * 30)
    _logger.info(f"★{title}")


def separator(char: str = "=", length: int = 60) -> None:
    """区切り線を出力する。"""
    _logger.info(char * length)


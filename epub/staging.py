"""
一時ステージングモジュール。

コンテンツソースから取得したチャプター本文を、実行ごとに作成する
一時フォルダにテキストファイルとして書き出します。
"""
import shutil
import tempfile
from pathlib import Path
from typing import Iterable

from core import logger
from core.config import STAGING_PREFIX, TEMP_ROOT
from core.messages import msg
from text.filename import sanitize_filename


class StagingArea:
    """1回の実行で使う一時フォルダ。"""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._written: set[str] = set()

    @classmethod
    def create(cls, root: Path = TEMP_ROOT) -> "StagingArea":
        """
        共有ルートの下に一意な名前の一時フォルダを作成する。

        Parameters
        ----------
        root : Path
            一時フォルダを作成する親フォルダ（なければ作成）。
        """
        root = Path(root)
        root.mkdir(parents=True, exist_ok=True)
        return cls(Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=root)))

    def _unique_name(self, label: str) -> str:
        base = sanitize_filename(label)
        name = base
        counter = 2
        while name.lower() in self._written:
            name = f"{base} ({counter})"
            counter += 1
        self._written.add(name.lower())
        return name

    def write_chapter(self, label: str, blocks: Iterable[str]) -> Path:
        """
        チャプター本文を <ラベル>.txt として書き出す。

        Parameters
        ----------
        label : str
            チャプターのラベル。ファイル名として安全な形に変換する。
            同名が既にある場合は " (2)" などを付ける。
        blocks : Iterable[str]
            本文のテキストブロック。空行で区切って連結する。

        Returns
        -------
        Path
            書き出したファイルのパス。
        """
        path = self.directory / f"{self._unique_name(label)}.txt"
        text = "\n\n".join(block.strip() for block in blocks if block and block.strip())
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        logger.debug(msg("staging_chapter_written", path=path))
        return path

    def cleanup(self) -> None:
        """一時フォルダを削除する。失敗してもエラーにしない。"""
        try:
            shutil.rmtree(self.directory)
        except OSError as e:
            logger.debug(msg("staging_cleanup_failed", path=self.directory, error=e))

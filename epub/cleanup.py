"""
チャプター整形モジュール。

書き出し済みのチャプターXHTMLから制御文字と空段落を取り除きます。
XSLT 3.0 プロセッサ（saxonche）で文書を読み直して再シリアライズするため、
整形後のファイルは必ず整形式のXMLになります。
"""
import threading
from pathlib import Path

from saxonche import PySaxonApiError, PySaxonProcessor

from core import logger
from core.exceptions import ChapterCleanupError
from text.common import remove_control_characters

# XSLTファイルのパス（resourcesディレクトリに配置）
PROJECT_ROOT = Path(__file__).parent.parent
XSLT_CLEAN_CHAPTER = PROJECT_ROOT / "resources" / "clean_chapter.xsl"

# saxoncheのプロセッサはスレッド間で同時に使わない
_saxon_lock = threading.Lock()


def _transform(xml_text: str) -> str:
    """整形用XSLTを適用した文字列を返す。"""
    with _saxon_lock, PySaxonProcessor(license=False) as proc:
        xslt_proc = proc.new_xslt30_processor()
        executable = xslt_proc.compile_stylesheet(stylesheet_file=str(XSLT_CLEAN_CHAPTER))
        node = proc.parse_xml(xml_text=xml_text)
        if node is None:
            raise ValueError("chapter is not well-formed XML")
        result = executable.transform_to_string(xdm_node=node)

    if not result:
        raise ValueError("empty transform result")
    return result


def clean_chapter_file(path: Path) -> None:
    """
    チャプターXHTMLファイルをその場で整形する。

    1. XMLで使用できない制御文字を取り除く
    2. XSLTでテキストノードの制御文字と空の段落を取り除き、再シリアライズする

    変換に成功した場合にのみファイルを置き換えます。

    Parameters
    ----------
    path : Path
        整形するチャプターファイルのパス。

    Raises
    ------
    ChapterCleanupError
        読み込み・解析・書き込みのいずれかに失敗した場合。
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
        cleaned = _transform(remove_control_characters(raw))
        with open(path, "w", encoding="utf-8") as f:
            f.write(cleaned)
    except (OSError, UnicodeDecodeError, PySaxonApiError, ValueError) as e:
        raise ChapterCleanupError(str(path), e) from e

    logger.debug(f"cleaned {path.name}")

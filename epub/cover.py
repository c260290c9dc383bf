"""
表紙画像の配置モジュール。

表紙の指定（ローカルパスまたはURL）から画像をパッケージ内に配置します。
配置できなかった場合も例外は送出せず、理由付きの結果を返すため、
呼び出し側は表紙なしでEPUB生成を続けられます。
"""
import shutil
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from pathlib import Path

from core import logger
from core.config import (
    COVER_FETCH_ATTEMPTS,
    COVER_FETCH_BACKOFF,
    COVER_FETCH_TIMEOUT,
    COVER_IMAGE_STEM,
    DEFAULT_COVER_SUFFIX,
    HTTP_USER_AGENT,
)
from core.exceptions import CoverStagingError
from core.messages import msg
from epub.layout import StagedCover, get_media_type


@dataclass(frozen=True)
class CoverUnavailable:
    """表紙を配置できなかったことを表す結果。"""
    source: str
    reason: str


CoverResult = StagedCover | CoverUnavailable


def is_url(source: str) -> bool:
    """表紙の指定がURLかどうか（"http" で始まるか、大文字小文字を無視）。"""
    return source.lower().startswith("http")


def cover_suffix(source: str) -> str:
    """
    表紙の指定から画像の拡張子を取得する。

    URLの場合はクエリ文字列を無視してパス部分から取得します。
    拡張子がなければ ".jpg" とします。
    """
    if is_url(source):
        path = urllib.parse.urlparse(source).path
    else:
        path = source
    suffix = Path(path).suffix.lower()
    return suffix if suffix else DEFAULT_COVER_SUFFIX


def _download(url: str, destination: Path, timeout: float) -> None:
    """
    URLから画像をダウンロードする（1回分）。

    Raises
    ------
    urllib.error.HTTPError
        HTTPステータスが4xx/5xxの場合。
    CoverStagingError
        2xx以外の応答の場合。
    urllib.error.URLError, OSError
        接続・書き込みに失敗した場合。
    """
    req = urllib.request.Request(url, headers={"User-Agent": HTTP_USER_AGENT})
    with urllib.request.urlopen(req, timeout=timeout) as response:
        status = getattr(response, "status", 200)
        if not 200 <= status < 300:
            raise CoverStagingError(msg("cover_http_failed", status=status, source=url), url)
        with open(destination, "wb") as f:
            shutil.copyfileobj(response, f)


def fetch_cover(
    url: str,
    destination: Path,
    attempts: int = COVER_FETCH_ATTEMPTS,
    timeout: float = COVER_FETCH_TIMEOUT,
    backoff: float = COVER_FETCH_BACKOFF
) -> None:
    """
    URLから表紙画像を取得する。一時的な失敗は最大 attempts 回まで再試行する。

    Parameters
    ----------
    url : str
        表紙画像のURL。
    destination : Path
        保存先のパス。
    attempts : int
        最大試行回数。
    timeout : float
        1回あたりのタイムアウト（秒）。
    backoff : float
        再試行前の待機秒数（試行回数に比例して増加）。

    Raises
    ------
    CoverStagingError
        すべての試行に失敗した場合、または再試行しても解決しない応答（4xx）の場合。
    """
    attempts = max(1, attempts)
    last_error = CoverStagingError(msg("cover_download_error", error=url), url)

    for attempt in range(1, attempts + 1):
        if attempt > 1:
            logger.info(msg("cover_retry", attempt=attempt, attempts=attempts))
            time.sleep(backoff * (attempt - 1))
        try:
            _download(url, destination, timeout)
            return
        except urllib.error.HTTPError as e:
            last_error = CoverStagingError(msg("cover_http_failed", status=e.code, source=url), url)
            if 400 <= e.code < 500:
                break
        except CoverStagingError as e:
            last_error = e
            break
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            last_error = CoverStagingError(msg("cover_download_error", error=e), url)

    destination.unlink(missing_ok=True)
    raise last_error


def copy_cover(source: Path, destination: Path) -> None:
    """
    ローカルの表紙画像をコピーする。

    Raises
    ------
    CoverStagingError
        ファイルが存在しない場合、またはコピーに失敗した場合。
    """
    if not source.is_file():
        raise CoverStagingError(msg("cover_file_not_found", source=source), str(source))
    try:
        shutil.copyfile(source, destination)
    except OSError as e:
        destination.unlink(missing_ok=True)
        raise CoverStagingError(msg("cover_copy_error", error=e), str(source)) from e


def stage_cover(
    source: str,
    images_dir: Path,
    attempts: int = COVER_FETCH_ATTEMPTS,
    timeout: float = COVER_FETCH_TIMEOUT,
    backoff: float = COVER_FETCH_BACKOFF
) -> CoverResult:
    """
    表紙画像をパッケージの images フォルダに配置する。

    Parameters
    ----------
    source : str
        表紙画像のローカルパスまたはURL。
    images_dir : Path
        配置先フォルダ（EPUB/images）。
    attempts, timeout, backoff
        URLの場合の取得設定。fetch_cover() を参照。

    Returns
    -------
    StagedCover | CoverUnavailable
        配置できた場合はStagedCover、できなかった場合は理由付きのCoverUnavailable。
    """
    suffix = cover_suffix(source)
    filename = f"{COVER_IMAGE_STEM}{suffix}"
    media_type = get_media_type(filename)
    if not media_type.startswith("image/"):
        reason = msg("cover_unsupported_type", suffix=suffix, source=source)
        logger.warning(reason)
        return CoverUnavailable(source, reason)

    destination = images_dir / filename

    try:
        images_dir.mkdir(parents=True, exist_ok=True)
        if is_url(source):
            fetch_cover(source, destination, attempts=attempts, timeout=timeout, backoff=backoff)
            logger.info(msg("cover_downloaded", source=source))
        else:
            copy_cover(Path(source), destination)
            logger.info(msg("cover_copied", source=source))
    except CoverStagingError as e:
        logger.warning(str(e))
        return CoverUnavailable(source, str(e))
    except OSError as e:
        destination.unlink(missing_ok=True)
        reason = msg("cover_copy_error", error=e)
        logger.warning(reason)
        return CoverUnavailable(source, reason)

    return StagedCover(path=destination, filename=filename, media_type=media_type)

"""
EPUBパッケージングモジュール。

EPUB3のフォルダ構造作成、固定ファイル（mimetype、container.xml、CSS）の出力、
ZIPパッケージング等の機能を提供します。
"""
import os
import shutil
import tempfile
import zipfile
from pathlib import Path

from core import logger
from core.config import IMAGES_DIR, PACKAGE_DIR, STYLES_DIR, STYLESHEET_NAME, TEXT_DIR, OPF_NAME
from core.exceptions import ArchiveError
from core.messages import msg


MIMETYPE = "application/epub+zip"

CSS_CONTENT = """
body {
    margin: 0 5%;
    line-height: 1.5;
}
h1 {
    font-size: 1.5em;
    margin-bottom: 1em;
    text-align: center;
}
p {
    margin: 0 0 0.8em 0;
    text-indent: 1em;
}
.titlepage {
    text-align: center;
    margin-top: 30%;
}
.titlepage p {
    text-indent: 0;
}
.series {
    font-style: italic;
}
.cover {
    text-align: center;
    margin: 0;
    padding: 0;
}
.cover img {
    max-width: 100%;
    max-height: 100%;
}
"""

CONTAINER_XML = ('<?xml version="1.0" encoding="UTF-8"?>'
                 '<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">'
                 '<rootfiles>'
                 f'<rootfile full-path="{PACKAGE_DIR}/{OPF_NAME}" media-type="application/oebps-package+xml"/>'
                 '</rootfiles>'
                 '</container>')


def is_package_tree(story_dir: Path) -> bool:
    """前回の実行で作成された物語フォルダ（mimetype または EPUB/content.opf を持つ）かどうか。"""
    return (story_dir / "mimetype").is_file() or (story_dir / PACKAGE_DIR / OPF_NAME).is_file()


def prepare_story_directory(story_dir: Path) -> Path:
    """
    作業用の物語フォルダを作り直す。

    前回の実行で残ったパッケージフォルダであれば削除してから作成するため、
    古いファイルが新しいパッケージに混ざることはありません。
    それ以外の既存フォルダ・ファイルには手を付けません。

    Parameters
    ----------
    story_dir : Path
        物語フォルダのパス。

    Returns
    -------
    Path
        作成したフォルダのパス。

    Raises
    ------
    FileExistsError
        パッケージフォルダではない既存のフォルダ・ファイルがある場合。
    """
    if story_dir.is_dir() and is_package_tree(story_dir):
        shutil.rmtree(story_dir)
    elif story_dir.is_dir() and not any(story_dir.iterdir()):
        story_dir.rmdir()
    elif story_dir.exists():
        raise FileExistsError(msg("story_dir_occupied", path=story_dir))
    story_dir.mkdir(parents=True)
    return story_dir


def write_boilerplate(story_dir: Path) -> Path:
    """
    EPUBの固定ファイルとフォルダ構造を出力する。

    何度呼び出しても同じ結果になります。

    Parameters
    ----------
    story_dir : Path
        物語フォルダのパス。

    Returns
    -------
    Path
        パッケージルート（story_dir/EPUB）のパス。

    Notes
    -----
    作成されるフォルダ構造::

        mimetype
        META-INF/
        └── container.xml
        EPUB/
        ├── text/
        ├── images/
        └── styles/
            └── style.css
    """
    package_dir = story_dir / PACKAGE_DIR
    meta_inf = story_dir / "META-INF"

    for d in [meta_inf, package_dir / TEXT_DIR, package_dir / IMAGES_DIR, package_dir / STYLES_DIR]:
        d.mkdir(parents=True, exist_ok=True)

    with open(story_dir / "mimetype", "w", encoding="ascii", newline="") as f:
        f.write(MIMETYPE)
    with open(meta_inf / "container.xml", "w", encoding="utf-8") as f:
        f.write(CONTAINER_XML)
    with open(package_dir / STYLES_DIR / STYLESHEET_NAME, "w", encoding="utf-8") as f:
        f.write(CSS_CONTENT)

    return package_dir


def _iter_package_files(source_dir: Path) -> list[tuple[Path, str]]:
    """アーカイブに格納するファイルと格納名を返す（mimetypeを先頭に）。"""
    files: list[tuple[Path, str]] = []
    for p in sorted(source_dir.rglob("*")):
        if p.is_file():
            files.append((p, p.relative_to(source_dir).as_posix()))
    files.sort(key=lambda item: item[1] != "mimetype")
    return files


def package_epub(source_dir: Path, output_epub: Path) -> Path:
    """
    フォルダ内のすべてのファイルを無圧縮のZIP（.epub）にまとめる。

    一時ファイルに書き出してから出力先に置き換えるため、
    途中で失敗しても壊れたEPUBファイルは残りません。
    既存のファイルは置き換えられます。

    Parameters
    ----------
    source_dir : Path
        パッケージ化するフォルダ（mimetype, META-INF, EPUB を含む）。
    output_epub : Path
        出力EPUBファイルのパス。

    Returns
    -------
    Path
        出力EPUBファイルのパス。

    Raises
    ------
    ArchiveError
        フォルダが存在しない場合や書き込みに失敗した場合。

    Notes
    -----
    EPUB仕様ではmimetypeを無圧縮で先頭に格納する必要があります。
    すべてのエントリをZIP_STOREDで格納し、mimetypeを先頭に並べます。
    """
    source_dir = Path(source_dir)
    output_epub = Path(output_epub)

    if not source_dir.is_dir():
        raise ArchiveError(str(output_epub), f"{source_dir} is not a directory")

    output_epub.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{output_epub.stem}.", suffix=".tmp", dir=output_epub.parent
    )
    os.close(fd)
    tmp_path = Path(tmp_name)

    try:
        with zipfile.ZipFile(tmp_path, "w", compression=zipfile.ZIP_STORED) as z:
            for path, arcname in _iter_package_files(source_dir):
                z.write(path, arcname, compress_type=zipfile.ZIP_STORED)
        os.replace(tmp_path, output_epub)
    except (OSError, zipfile.BadZipFile) as e:
        tmp_path.unlink(missing_ok=True)
        raise ArchiveError(str(output_epub), e) from e

    logger.debug(f"archived {source_dir} -> {output_epub}")
    return output_epub

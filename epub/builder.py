"""
物語からEPUB3パッケージを組み立てるモジュール。

物語フォルダの作成、固定ファイルの出力、表紙の配置、OPF・NCX・nav・
タイトルページ・チャプターの書き出し、ZIPパッケージングまでを順に行います。

エラーの扱い:
- 構造上必須の文書・フォルダの書き出し失敗は致命的（例外を送出し、作業フォルダを削除）
- 表紙の配置失敗は表紙なしで続行（警告として返す）
- チャプター整形の失敗はそのチャプターだけ整形せずに続行（警告として返す）
- 一時フォルダの削除失敗は無視
"""
import shutil
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from core import logger
from core.config import (
    COVER_FETCH_ATTEMPTS,
    COVER_FETCH_TIMEOUT,
    COVER_PAGE_NAME,
    DEFAULT_CHAPTER_WORKERS,
    EPUB_SUFFIX,
    IMAGES_DIR,
    NAV_NAME,
    NCX_NAME,
    OPF_NAME,
    TEXT_DIR,
    TITLE_PAGE_NAME,
)
from core.exceptions import (
    ChapterCleanupError,
    DocumentWriteError,
    EpubGenerationError,
    FileNotFoundError_,
)
from core.messages import msg
from core.story import Story
from epub.cleanup import clean_chapter_file
from epub.cover import CoverUnavailable, stage_cover
from epub.layout import ChapterEntry, PackageLayout, StagedCover, build_layout
from epub.packaging import package_epub, prepare_story_directory, write_boilerplate
from epub.staging import StagingArea
from epub.templates import (
    generate_chapter_xhtml,
    generate_cover_page,
    generate_nav_xhtml,
    generate_ncx,
    generate_opf,
    generate_title_page,
)
from text.filename import sanitize_filename

WARNING_COVER = "cover"
WARNING_CHAPTER = "chapter"
WARNING_CLEANUP = "cleanup"


@dataclass(frozen=True)
class AssemblyWarning:
    """処理は成功したが一部が劣化したことを表す警告。"""
    kind: str       # "cover" | "chapter" | "cleanup"
    message: str
    target: str = ""


@dataclass
class AssemblyResult:
    """組み立て結果。"""
    output_path: Path       # .epubファイル、またはrawモードでは物語フォルダ
    raw: bool
    identifier: str
    warnings: list[AssemblyWarning] = field(default_factory=list)

    def warnings_of(self, kind: str) -> list[AssemblyWarning]:
        return [w for w in self.warnings if w.kind == kind]


def new_identifier() -> str:
    """dc:identifier 用の一意な識別子を生成する。"""
    return f"urn:uuid:{uuid.uuid4()}"


def _write_document(path: Path, content: str) -> None:
    """構造上必須の文書を書き出す。失敗は致命的。"""
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise DocumentWriteError(str(path), e) from e


def _discard(story_dir: Path) -> None:
    """中断時に作業途中の物語フォルダを削除する。"""
    shutil.rmtree(story_dir, ignore_errors=True)


def _prepare_package(story_dir: Path) -> Path:
    """
    物語フォルダを作り直し、固定ファイルを出力する。

    既存のフォルダがパッケージフォルダでない場合は何も削除せずに中断する。
    """
    logger.info(msg("epub_base_files"))
    try:
        prepare_story_directory(story_dir)
    except OSError as e:
        raise DocumentWriteError(str(story_dir), e) from e
    try:
        return write_boilerplate(story_dir)
    except OSError as e:
        _discard(story_dir)
        raise DocumentWriteError(str(story_dir), e) from e


def _resolve_cover(
    story: Story,
    cover_override: str | Path | None,
    images_dir: Path,
    warnings: list[AssemblyWarning],
    attempts: int,
    timeout: float
) -> StagedCover | None:
    """
    表紙を決定して配置する。

    上書き指定があれば物語の表紙より優先する。
    配置できなかった場合は警告を追加してNoneを返す。
    """
    logger.info(msg("cover_checking"))

    source = str(cover_override).strip() if cover_override is not None else ""
    # Path("") は "." になる
    if not source or source == ".":
        source = story.cover or ""
    if not source:
        logger.info(msg("cover_none"))
        return None

    result = stage_cover(source, images_dir, attempts=attempts, timeout=timeout)
    if isinstance(result, CoverUnavailable):
        logger.info(msg("cover_skipped", reason=result.reason))
        warnings.append(AssemblyWarning(WARNING_COVER, result.reason, result.source))
        return None
    return result


def _write_package_documents(story: Story, layout: PackageLayout, package_dir: Path) -> None:
    """OPF・NCX・nav・タイトルページ・表紙ページを書き出す。"""
    _write_document(package_dir / OPF_NAME, generate_opf(story, layout))
    _write_document(package_dir / NCX_NAME, generate_ncx(story, layout))
    _write_document(package_dir / NAV_NAME, generate_nav_xhtml(story, layout))
    _write_document(package_dir / TEXT_DIR / TITLE_PAGE_NAME, generate_title_page(story))

    if layout.cover is not None:
        cover_path = package_dir / TEXT_DIR / COVER_PAGE_NAME
        _write_document(cover_path, generate_cover_page(story, layout.cover))
        logger.info(msg("cover_page_written", path=cover_path))

    logger.info(msg("epub_documents_written"))


def _write_chapter(entry: ChapterEntry, package_dir: Path, lang: str) -> AssemblyWarning | None:
    """
    1チャプターを読み込み、XHTMLを書き出して整形する。

    Returns
    -------
    AssemblyWarning | None
        整形に失敗した場合は警告。チャプター自体は生成時のまま残る。

    Raises
    ------
    FileNotFoundError_
        チャプターの入力ファイルが存在しない場合。
    DocumentWriteError
        入力の読み込み、またはXHTMLの書き出しに失敗した場合。
    """
    if not entry.source.is_file():
        raise FileNotFoundError_(str(entry.source), msg("file_type_chapter"))
    try:
        with open(entry.source, "r", encoding="utf-8", errors="replace") as f:
            content = f.read()
    except OSError as e:
        raise DocumentWriteError(str(entry.source), e) from e

    path = package_dir / TEXT_DIR / entry.filename
    _write_document(path, generate_chapter_xhtml(entry.label, content, entry.sequence, lang))
    logger.info(msg("epub_chapter_written", file=entry.filename, label=entry.label))

    try:
        clean_chapter_file(path)
    except ChapterCleanupError as e:
        logger.warning(str(e))
        return AssemblyWarning(WARNING_CHAPTER, str(e), entry.filename)
    return None


def _write_chapters(layout: PackageLayout, package_dir: Path, workers: int) -> list[AssemblyWarning]:
    """
    全チャプターを書き出す。

    workers が2以上の場合はスレッドプールで並列に処理する。
    出力ファイル名と並び順は PackageLayout で確定済みのため、完了順には依存しない。
    """
    logger.info(msg("epub_chapter_writing"))
    lang = layout.language.epub_lang

    if workers > 1 and len(layout.chapters) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(
                lambda entry: _write_chapter(entry, package_dir, lang), layout.chapters
            ))
    else:
        results = [_write_chapter(entry, package_dir, lang) for entry in layout.chapters]

    logger.info(msg("epub_chapter_count_done", count=len(layout.chapters)))
    return [w for w in results if w is not None]


def build_story_epub(
    story: Story,
    output_dir: str | Path,
    cover_override: str | Path | None = None,
    raw: bool = False,
    staging: StagingArea | None = None,
    workers: int = DEFAULT_CHAPTER_WORKERS,
    cover_attempts: int = COVER_FETCH_ATTEMPTS,
    cover_timeout: float = COVER_FETCH_TIMEOUT
) -> AssemblyResult:
    """
    物語からEPUB3を生成する。

    Parameters
    ----------
    story : Story
        EPUB化する物語。
    output_dir : str | Path
        出力先フォルダ。物語フォルダ（タイトル名）と.epubファイルはここに作成される。
    cover_override : str | Path | None
        表紙画像のパスまたはURL。指定すると物語の表紙より優先する。空文字は指定なし。
    raw : bool
        Trueの場合は物語フォルダをそのまま残し、.epubを作成しない。
    staging : StagingArea | None
        チャプター本文の一時フォルダ。指定した場合は成否にかかわらず最後に削除する。
    workers : int
        チャプター処理の並列数（1で逐次処理）。
    cover_attempts : int
        表紙URLの最大試行回数。
    cover_timeout : float
        表紙URLの1回あたりのタイムアウト（秒）。

    Returns
    -------
    AssemblyResult
        出力パス、識別子、警告のリスト。

    Raises
    ------
    DocumentWriteError
        構造上必須の文書・フォルダを書き出せなかった場合、
        または出力先に前回の出力ではない既存のフォルダがある場合（削除はしない）。
    FileNotFoundError_
        チャプターの入力ファイルが存在しない場合。
    ArchiveError
        .epubの作成に失敗した場合。

    Notes
    -----
    出力フォルダ構造（rawモード）::

        <output_dir>/<タイトル>/
        ├── mimetype
        ├── META-INF/container.xml
        └── EPUB/
            ├── content.opf, toc.ncx, nav.xhtml
            ├── styles/style.css
            ├── images/cover.<ext>      （表紙がある場合）
            └── text/
                ├── title_page.xhtml
                ├── cover.xhtml        （表紙がある場合）
                └── ch0002.xhtml ...
    """
    output_dir = Path(output_dir)
    base_name = sanitize_filename(story.title)
    story_dir = output_dir / base_name
    warnings: list[AssemblyWarning] = []

    logger.section(msg("epub_start", title=story.title))

    try:
        package_dir = _prepare_package(story_dir)
        try:
            # 表紙はOPF等より先に配置し、成否をパッケージ構成に反映する
            cover = _resolve_cover(
                story, cover_override, package_dir / IMAGES_DIR, warnings,
                attempts=cover_attempts, timeout=cover_timeout
            )

            identifier = story.identifier or new_identifier()
            layout = build_layout(story, identifier, cover)

            _write_package_documents(story, layout, package_dir)
            warnings.extend(_write_chapters(layout, package_dir, workers))

            if raw:
                logger.info(msg("epub_raw_skip"))
                output_path = story_dir
            else:
                output_path = output_dir / f"{base_name}{EPUB_SUFFIX}"
                logger.info(msg("epub_creating", file=output_path))
                package_epub(story_dir, output_path)
        except EpubGenerationError:
            _discard(story_dir)
            raise

        if not raw:
            try:
                shutil.rmtree(story_dir)
                logger.debug(msg("epub_cleanup_done", path=story_dir))
            except OSError as e:
                message = msg("epub_cleanup_failed", path=story_dir, error=e)
                logger.warning(message)
                warnings.append(AssemblyWarning(WARNING_CLEANUP, message, str(story_dir)))
    finally:
        if staging is not None:
            staging.cleanup()

    logger.success(msg("epub_saved", file=output_path))
    return AssemblyResult(output_path=output_path, raw=raw, identifier=identifier, warnings=warnings)

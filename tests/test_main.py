import zipfile

import pytest

import main
from core import messages
from core.exceptions import DocumentWriteError


def _metadata_folder(tmp_path):
    folder = tmp_path / "tale"
    folder.mkdir()
    (folder / "01 Start.txt").write_text("Begin.", encoding="utf-8")
    (folder / "02 Stop.txt").write_text("Finish.", encoding="utf-8")
    (tmp_path / "tale_metadata.txt").write_text("title: Tale\nauthor: A\n", encoding="utf-8")
    return folder


def test_process_story_folder(tmp_path):
    folder = _metadata_folder(tmp_path)
    result = main.process_story_folder(folder, tmp_path / "out")

    assert result.output_path == tmp_path / "out" / "Tale.epub"
    with zipfile.ZipFile(result.output_path) as z:
        assert "EPUB/text/ch0003.xhtml" in z.namelist()


def test_main_prompts_and_builds_raw_folder(tmp_path, monkeypatch):
    folder = _metadata_folder(tmp_path)
    answers = iter([
        "1",                    # UI language
        f'"{folder}"',          # story folder (quoted)
        "",                     # output folder: default (inside the story folder)
        "",                     # no cover override
        "2",                    # keep the unpacked folder
    ])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    monkeypatch.setattr(messages, "_ui_lang", messages.get_ui_language())

    main.main()

    output = folder / "epub_output"
    assert (output / "Tale" / "EPUB" / "content.opf").is_file()
    assert not (output / "Tale.epub").exists()
    assert (folder / "01 Start.txt").read_text(encoding="utf-8") == "Begin."


def test_story_folder_named_after_title_is_not_overwritten(tmp_path):
    folder = tmp_path / "My Tale"
    folder.mkdir()
    (folder / "01 Intro.txt").write_text("text A", encoding="utf-8")
    (folder / "cover.jpg").write_bytes(b"jpg")
    (tmp_path / "My Tale_metadata.txt").write_text("title: My Tale\n", encoding="utf-8")

    with pytest.raises(DocumentWriteError):
        main.process_story_folder(folder, folder.parent)

    assert (folder / "01 Intro.txt").read_text(encoding="utf-8") == "text A"
    assert (folder / "cover.jpg").read_bytes() == b"jpg"
    assert not (tmp_path / "My Tale.epub").exists()


def test_main_reports_missing_folder(tmp_path, monkeypatch, capsys):
    answers = iter(["1", str(tmp_path / "nowhere")])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    monkeypatch.setattr(messages, "_ui_lang", messages.get_ui_language())

    main.main()

    assert messages.msg("processing_aborted") in capsys.readouterr().out

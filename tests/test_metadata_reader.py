import pytest

from core.metadata_reader import (
    MetadataFileNotFoundError,
    MetadataTitleMissingError,
    get_metadata_path_for_folder,
    load_metadata,
    load_metadata_for_folder,
)


def test_metadata_path_sits_beside_folder(tmp_path):
    folder = tmp_path / "my_tale"
    assert get_metadata_path_for_folder(folder) == tmp_path / "my_tale_metadata.txt"


def test_load_metadata_reads_all_fields(tmp_path):
    path = tmp_path / "meta.txt"
    path.write_text(
        "# comment line\n"
        "Title: My Tale\n"
        "author: Ann Author\n"
        "language: Japanese\n"
        "series: The Saga\n"
        "volume: 2\n"
        "tags: fantasy, adventure\n"
        "tags: fantasy\n"
        "cover: https://example.com/cover.png?size=large\n"
        "unknown: ignored\n",
        encoding="utf-8",
    )
    metadata = load_metadata(path)
    assert metadata.title == "My Tale"
    assert metadata.author == "Ann Author"
    assert metadata.language == "Japanese"
    assert metadata.series.title == "The Saga"
    assert metadata.series.volume == 2
    assert metadata.tags == ["fantasy", "adventure", "fantasy"]
    assert metadata.cover == "https://example.com/cover.png?size=large"


def test_full_width_colon_is_accepted(tmp_path):
    path = tmp_path / "meta.txt"
    path.write_text("title：物語\n", encoding="utf-8")
    assert load_metadata(path).title == "物語"


def test_invalid_volume_falls_back_to_one(tmp_path):
    path = tmp_path / "meta.txt"
    path.write_text("title: T\nseries: S\nvolume: zero\n", encoding="utf-8")
    assert load_metadata(path).series.volume == 1


def test_missing_metadata_file(tmp_path):
    with pytest.raises(MetadataFileNotFoundError):
        load_metadata_for_folder(tmp_path / "nothing")


def test_missing_title(tmp_path):
    path = tmp_path / "meta.txt"
    path.write_text("author: Someone\n", encoding="utf-8")
    with pytest.raises(MetadataTitleMissingError):
        load_metadata(path)

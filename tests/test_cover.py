import io
import urllib.error

import pytest

from epub import cover as cover_module
from epub.cover import CoverUnavailable, cover_suffix, stage_cover
from epub.layout import StagedCover


class _FakeResponse(io.BytesIO):
    def __init__(self, data, status=200):
        super().__init__(data)
        self.status = status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(cover_module.time, "sleep", lambda seconds: None)


@pytest.mark.parametrize("source, suffix", [
    ("https://example.com/img/cover.PNG?size=large", ".png"),
    ("HTTP://example.com/cover", ".jpg"),
    ("/books/art/front.webp", ".webp"),
    ("front", ".jpg"),
])
def test_cover_suffix(source, suffix):
    assert cover_suffix(source) == suffix


def test_url_cover_is_downloaded(tmp_path, monkeypatch):
    requests = []

    def fake_urlopen(req, timeout=None):
        requests.append(req)
        return _FakeResponse(b"PNGDATA")

    monkeypatch.setattr(cover_module.urllib.request, "urlopen", fake_urlopen)

    result = stage_cover("https://example.com/cover.png", tmp_path / "images")

    assert isinstance(result, StagedCover)
    assert result.filename == "cover.png"
    assert result.media_type == "image/png"
    assert result.href == "images/cover.png"
    assert result.path.read_bytes() == b"PNGDATA"
    assert requests[0].get_header("User-agent")


def test_http_404_is_not_retried(tmp_path, monkeypatch, caplog):
    calls = []

    def fake_urlopen(req, timeout=None):
        calls.append(req)
        raise urllib.error.HTTPError(req.full_url, 404, "Not Found", {}, None)

    monkeypatch.setattr(cover_module.urllib.request, "urlopen", fake_urlopen)

    with caplog.at_level("WARNING", logger="storyepub"):
        result = stage_cover("https://example.com/missing.jpg", tmp_path / "images", attempts=3)

    assert isinstance(result, CoverUnavailable)
    assert "404" in result.reason
    assert len(calls) == 1
    assert not (tmp_path / "images" / "missing.jpg").exists()
    assert not (tmp_path / "images" / "cover.jpg").exists()
    assert any(r.levelname == "WARNING" for r in caplog.records)


def test_transient_errors_are_retried(tmp_path, monkeypatch):
    calls = []

    def fake_urlopen(req, timeout=None):
        calls.append(req)
        if len(calls) < 3:
            raise urllib.error.URLError("connection reset")
        return _FakeResponse(b"JPEG")

    monkeypatch.setattr(cover_module.urllib.request, "urlopen", fake_urlopen)

    result = stage_cover("https://example.com/c.jpg", tmp_path / "images", attempts=3)

    assert isinstance(result, StagedCover)
    assert len(calls) == 3


def test_retries_are_bounded(tmp_path, monkeypatch):
    calls = []

    def fake_urlopen(req, timeout=None):
        calls.append(req)
        raise urllib.error.HTTPError(req.full_url, 503, "Unavailable", {}, None)

    monkeypatch.setattr(cover_module.urllib.request, "urlopen", fake_urlopen)

    result = stage_cover("https://example.com/c.jpg", tmp_path / "images", attempts=2)

    assert isinstance(result, CoverUnavailable)
    assert len(calls) == 2


def test_non_2xx_status_is_a_failure(tmp_path, monkeypatch):
    monkeypatch.setattr(
        cover_module.urllib.request, "urlopen",
        lambda req, timeout=None: _FakeResponse(b"", status=304),
    )
    result = stage_cover("https://example.com/c.gif", tmp_path / "images")
    assert isinstance(result, CoverUnavailable)
    assert not (tmp_path / "images" / "cover.gif").exists()


def test_local_cover_is_copied(tmp_path):
    source = tmp_path / "art.jpeg"
    source.write_bytes(b"\xff\xd8\xff")

    result = stage_cover(str(source), tmp_path / "images")

    assert isinstance(result, StagedCover)
    assert result.filename == "cover.jpeg"
    assert result.media_type == "image/jpeg"
    assert result.path.read_bytes() == b"\xff\xd8\xff"


def test_missing_local_cover(tmp_path):
    result = stage_cover(str(tmp_path / "nope.png"), tmp_path / "images")
    assert isinstance(result, CoverUnavailable)
    assert result.source == str(tmp_path / "nope.png")


def test_non_image_url_is_not_fetched(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(
        cover_module.urllib.request, "urlopen",
        lambda req, timeout=None: calls.append(req) or _FakeResponse(b"html"),
    )

    result = stage_cover("https://example.com/cover.php?id=7", tmp_path / "images")

    assert isinstance(result, CoverUnavailable)
    assert ".php" in result.reason
    assert calls == []
    assert not (tmp_path / "images").exists()

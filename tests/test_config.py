import pytest

from core.config import DEFAULT_LANGUAGE, get_language_config, resolve_language


@pytest.mark.parametrize("value, code", [
    ("en", "en"),
    ("English", "en"),
    ("ja-JP", "ja"),
    ("日本語", "ja"),
    ("Deutsch", "de"),
    ("", DEFAULT_LANGUAGE),
])
def test_resolve_known_languages(value, code):
    assert resolve_language(value).code == code


def test_unknown_language_keeps_tag_with_default_labels():
    config = resolve_language("fr")
    assert config.epub_lang == "fr"
    assert config.toc_title == get_language_config("en").toc_title


def test_get_language_config_rejects_unknown_code():
    with pytest.raises(ValueError):
        get_language_config("xx")

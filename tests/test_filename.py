import pytest

from text.filename import sanitize_filename


@pytest.mark.parametrize("value", ["", "   ", "\t", " . . "])
def test_blank_input_becomes_untitled(value):
    assert sanitize_filename(value) == "untitled"


def test_illegal_characters_are_replaced():
    assert sanitize_filename('a<b>c:d"e/f\\g|h?i*j') == "a_b_c_d_e_f_g_h_i_j"
    assert sanitize_filename("tab\x00nul\x1fend") == "tab_nul_end"


def test_leading_and_trailing_spaces_and_periods_are_trimmed():
    assert sanitize_filename("  ..My Tale.. ") == "My Tale"


@pytest.mark.parametrize("name, expected", [
    ("NUL", "_NUL_"),
    ("CON", "_CON_"),
    ("con", "_con_"),
    ("Com1", "_Com1_"),
    ("LPT9", "_LPT9_"),
    (" aux. ", "_aux_"),
])
def test_reserved_device_names_are_wrapped(name, expected):
    assert sanitize_filename(name) == expected


def test_reserved_name_only_matches_whole_name():
    # "con.txt" is not the device name itself
    assert sanitize_filename("con.txt") == "con.txt"
    assert sanitize_filename("CONSOLE") == "CONSOLE"


def test_long_names_are_truncated():
    result = sanitize_filename("x" * 300)
    assert len(result) == 255


def test_truncation_does_not_leave_trailing_period():
    value = "a" * 254 + ". tail"
    result = sanitize_filename(value)
    assert not result.endswith(".")
    assert not result.endswith(" ")


@pytest.mark.parametrize("value", [
    "",
    "NUL",
    "con.txt",
    "  My: Tale?  ",
    "a" * 254 + ". tail",
    "...",
    "_CON_",
    "日本語のタイトル",
    "x" * 400,
])
def test_sanitize_is_idempotent(value):
    once = sanitize_filename(value)
    assert sanitize_filename(once) == once

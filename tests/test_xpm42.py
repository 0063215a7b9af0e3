import pytest

from solong.errors import MlxErrno, MlxError
from solong.pixels import rgba_to_mono
from solong.xpm42 import load_xpm42, parse_xpm42

RED = bytes([0xFF, 0x00, 0x00, 0xFF])
GREEN = bytes([0x00, 0xFF, 0x00, 0xFF])

SAMPLE = [
    "!XPM42\n",
    "2 2 2 1 c\n",
    "a #FF0000FF\n",
    "b #00FF00FF\n",
    "ab\n",
    "ba\n",
]


def test_parse_sample():
    xpm = parse_xpm42(SAMPLE)
    assert (xpm.texture.width, xpm.texture.height) == (2, 2)
    assert (xpm.color_count, xpm.cpp, xpm.mode) == (2, 1, "c")
    assert bytes(xpm.texture.pixels) == RED + GREEN + GREEN + RED


def test_parse_two_chars_per_pixel():
    lines = ["!XPM42\n", "2 1 2 2 c\n", "aa #FF0000FF\n", "ab #00FF00FF\n", "abaa\n"]
    xpm = parse_xpm42(lines)
    assert bytes(xpm.texture.pixels) == GREEN + RED


def test_parse_last_row_without_newline():
    lines = SAMPLE[:-1] + ["ba"]
    xpm = parse_xpm42(lines)
    assert bytes(xpm.texture.pixels[-4:]) == RED


def test_parse_monochrome():
    lines = ["!XPM42\n", "1 1 1 1 m\n", "x #336699FF\n", "x\n"]
    xpm = parse_xpm42(lines)
    assert bytes(xpm.texture.pixels) == rgba_to_mono(0x336699FF).to_bytes(4, "big")


def test_unknown_key_is_transparent_black():
    lines = ["!XPM42\n", "2 1 1 1 c\n", "a #FF0000FF\n", "az\n"]
    xpm = parse_xpm42(lines)
    assert bytes(xpm.texture.pixels) == RED + bytes(4)


def test_header_accepts_hex_numbers():
    lines = ["!XPM42\n", "0x2 0x1 1 1 c\n", "a #00FF00FF\n", "aa\n"]
    xpm = parse_xpm42(lines)
    assert (xpm.texture.width, xpm.texture.height) == (2, 1)
    assert bytes(xpm.texture.pixels) == GREEN + GREEN


@pytest.mark.parametrize(
    "lines",
    [
        [],
        ["XPM42\n", "1 1 1 1 c\n", "a #FF0000FF\n", "a\n"],
        ["!XPM42\n"],
        ["!XPM42\n", "1 1 1 1\n", "a #FF0000FF\n", "a\n"],
        ["!XPM42\n", "1 1 1 1 x\n", "a #FF0000FF\n", "a\n"],
        ["!XPM42\n", "1 1 1 11 c\n"],
        ["!XPM42\n", "40000 1 1 1 c\n"],
        ["!XPM42\n", "1 40000 1 1 c\n"],
        ["!XPM42\n", "one 1 1 1 c\n"],
        ["!XPM42\n", "1 1 1 1 c\n", "ab #FF0000FF\n", "a\n"],
        ["!XPM42\n", "1 1 1 1 c\n", "a FF0000FF\n", "a\n"],
        ["!XPM42\n", "1 1 1 1 c\n", "a #-F0000FF\n", "a\n"],
        ["!XPM42\n", "1 1 2 1 c\n", "a #FF0000FF\n"],
        ["!XPM42\n", "2 1 1 1 c\n", "a #FF0000FF\n", "a\n"],
        ["!XPM42\n", "1 2 1 1 c\n", "a #FF0000FF\n", "a\n"],
    ],
)
def test_parse_rejects_invalid(lines):
    with pytest.raises(MlxError) as info:
        parse_xpm42(lines)
    assert info.value.code is MlxErrno.INVXPM


def test_load_round_trip(tmp_path):
    path = tmp_path / "sprite.xpm42"
    path.write_text("".join(SAMPLE))
    xpm = load_xpm42(path)
    assert bytes(xpm.texture.pixels) == RED + GREEN + GREEN + RED


def test_load_wrong_extension(tmp_path):
    path = tmp_path / "sprite.png"
    path.write_text("".join(SAMPLE))
    with pytest.raises(MlxError) as info:
        load_xpm42(path)
    assert info.value.code is MlxErrno.INVEXT


def test_load_missing_file(tmp_path):
    with pytest.raises(MlxError) as info:
        load_xpm42(tmp_path / "absent.xpm42")
    assert info.value.code is MlxErrno.INVFILE


def test_load_corrupted_file(tmp_path):
    path = tmp_path / "broken.xpm42"
    path.write_text("!XPM42\n2 2 2 1 c\n")
    with pytest.raises(MlxError) as info:
        load_xpm42(path)
    assert info.value.code is MlxErrno.INVXPM
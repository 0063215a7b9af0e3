"""Reader for the XPM42 text image format."""

from __future__ import annotations

import os
import re
import string
from collections.abc import Iterable
from dataclasses import dataclass

from solong.errors import MlxErrno, MlxError
from solong.pixels import BYTES_PER_PIXEL, draw_pixel, fnv_hash, rgba_to_mono
from solong.texture import Texture

_MAGIC = "!XPM42"
_TABLE_SIZE = 0xFFFF
_MAX_DIMENSION = 0x7FFF
_MAX_CPP = 10
_ALNUM = frozenset(string.ascii_letters + string.digits)

_C_INT = re.compile(r"[+-]?(?:0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_HEX_PREFIX = re.compile(r"\s*([+-]?)([0-9a-fA-F]*)")


@dataclass
class Xpm:
    """A decoded XPM42 image."""

    texture: Texture
    color_count: int
    cpp: int
    mode: str


def _invalid(reason: str) -> MlxError:
    return MlxError(MlxErrno.INVXPM, reason)


def _parse_c_int(token: str) -> int:
    if not _C_INT.fullmatch(token):
        raise _invalid(f"bad number {token!r}")
    sign = -1 if token.startswith("-") else 1
    digits = token.lstrip("+-")
    if digits[:2].lower() == "0x":
        value = int(digits[2:], 16)
    elif len(digits) > 1 and digits[0] == "0":
        value = int(digits, 8)
    else:
        value = int(digits)
    return sign * value


def _hex_channel(text: str) -> int:
    sign, digits = _HEX_PREFIX.match(text[:2]).groups()
    if not digits:
        return 0
    value = int(digits, 16)
    return (-value if sign == "-" else value) & 0xFF


def _table_index(key: str) -> int:
    return fnv_hash(key) % _TABLE_SIZE


def _parse_entry(line: str, cpp: int, mode: str) -> tuple[int, int]:
    if line.rfind(" ") != cpp:
        raise _invalid("colour key has the wrong width")
    if len(line) < cpp + 3 or line[cpp + 1] != "#" or line[cpp + 2] not in _ALNUM:
        raise _invalid("malformed colour entry")
    start = cpp + 2
    color = 0
    for shift, offset in ((24, 0), (16, 2), (8, 4), (0, 6)):
        color |= _hex_channel(line[start + offset:start + offset + 2]) << shift
    if mode == "m":
        color = rgba_to_mono(color)
    return _table_index(line[:cpp]), color


def parse_xpm42(lines: Iterable[str]) -> Xpm:
    """Decode XPM42 text given as an iterable of lines."""
    rows = iter(lines)

    def next_line(what: str) -> str:
        line = next(rows, None)
        if line is None:
            raise _invalid(f"missing {what}")
        return line

    if next_line("file type").rstrip("\n") != _MAGIC:
        raise _invalid("missing !XPM42 declaration")

    tokens = next_line("header").split()
    if len(tokens) < 5:
        raise _invalid("incomplete header")
    width, height, color_count, cpp = (_parse_c_int(token) for token in tokens[:4])
    mode = tokens[4][0]
    if width < 0 or height < 0 or width > _MAX_DIMENSION or height > _MAX_DIMENSION:
        raise _invalid("dimensions out of range")
    if mode not in ("c", "m"):
        raise _invalid(f"unknown colour mode {mode!r}")
    if cpp < 1 or cpp > _MAX_CPP:
        raise _invalid("characters per pixel out of range")

    table: dict[int, int] = {}
    for _ in range(color_count):
        index, color = _parse_entry(next_line("colour entry"), cpp, mode)
        table[index] = color

    pixels = bytearray(width * height * BYTES_PER_PIXEL)
    offset = 0
    for _ in range(height):
        line = next_line("pixel row")
        if line.endswith("\n"):
            line = line[:-1]
        if len(line) != width * cpp:
            raise _invalid("pixel row has the wrong length")
        for start in range(0, len(line), cpp):
            color = table.get(_table_index(line[start:start + cpp]), 0)
            draw_pixel(pixels, offset, color)
            offset += BYTES_PER_PIXEL

    return Xpm(Texture(width, height, pixels), color_count, cpp, mode)


def load_xpm42(path: str | os.PathLike[str]) -> Xpm:
    """Read and decode an ``.xpm42`` file."""
    if ".xpm42" not in os.fsdecode(path):
        raise MlxError(MlxErrno.INVEXT, os.fsdecode(path))
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="") as file:
            return parse_xpm42(file)
    except OSError as exc:
        raise MlxError(MlxErrno.INVFILE, str(exc)) from exc
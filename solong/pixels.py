"""Pixel-level helpers: string hashing, grayscale conversion, RGBA writes."""

from __future__ import annotations

import struct

BYTES_PER_PIXEL = 4

_FNV_PRIME = 0x100000001B3
_FNV_OFFSET = 0xCBF29CE484222325
_MASK64 = (1 << 64) - 1


def fnv_hash(data: bytes | str) -> int:
    """Return the 64-bit FNV-1a hash of ``data``.

    Bytes of 0x80 and above are sign-extended before mixing, as with a signed
    ``char``.
    """
    if isinstance(data, str):
        data = data.encode("utf-8", "surrogateescape")
    value = _FNV_OFFSET
    for byte in data:
        if byte >= 0x80:
            byte = (byte - 0x100) & _MASK64
        value = ((value ^ byte) * _FNV_PRIME) & _MASK64
    return value


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


_WEIGHTS = (_f32(0.299), _f32(0.587), _f32(0.114))


def rgba_to_mono(color: int) -> int:
    """Convert a 0xRRGGBBAA colour to gray, keeping the alpha channel."""
    color &= 0xFFFFFFFF
    channels = ((color >> 24) & 0xFF, (color >> 16) & 0xFF, (color >> 8) & 0xFF)
    gray = sum(int(_f32(weight * channel)) for weight, channel in zip(_WEIGHTS, channels))
    gray &= 0xFF
    return (gray << 24) | (gray << 16) | (gray << 8) | (color & 0xFF)


def draw_pixel(pixels: bytearray, offset: int, color: int) -> None:
    """Write ``color`` as four R, G, B, A bytes into ``pixels`` at ``offset``."""
    if offset < 0 or offset + BYTES_PER_PIXEL > len(pixels):
        raise IndexError(f"pixel offset {offset} out of range")
    pixels[offset:offset + BYTES_PER_PIXEL] = (color & 0xFFFFFFFF).to_bytes(
        BYTES_PER_PIXEL, "big"
    )
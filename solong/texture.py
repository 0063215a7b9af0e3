"""RGBA textures and PNG loading."""

from __future__ import annotations

import os
from dataclasses import dataclass

from PIL import Image as PILImage

from solong.errors import MlxErrno, MlxError
from solong.pixels import BYTES_PER_PIXEL


@dataclass
class Texture:
    """A block of RGBA pixels, row by row, four bytes per pixel."""

    width: int
    height: int
    pixels: bytearray
    bytes_per_pixel: int = BYTES_PER_PIXEL

    def __post_init__(self) -> None:
        self.pixels = bytearray(self.pixels)
        expected = self.width * self.height * self.bytes_per_pixel
        if self.width < 0 or self.height < 0 or len(self.pixels) != expected:
            raise ValueError(
                f"pixel buffer of {len(self.pixels)} bytes does not fit "
                f"{self.width}x{self.height}"
            )


def load_png(path: str | os.PathLike[str]) -> Texture:
    """Decode a PNG file into an RGBA texture."""
    try:
        with PILImage.open(path) as img:
            if img.format != "PNG":
                raise MlxError(MlxErrno.INVPNG, "not a PNG file")
            rgba = img.convert("RGBA")
            return Texture(rgba.width, rgba.height, bytearray(rgba.tobytes()))
    except (OSError, ValueError, SyntaxError, PILImage.DecompressionBombError) as exc:
        raise MlxError(MlxErrno.INVPNG, str(exc)) from exc
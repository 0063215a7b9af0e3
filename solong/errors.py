"""Error codes and the exception raised by the graphics layer."""

from __future__ import annotations

from enum import IntEnum


class MlxErrno(IntEnum):
    """Numeric error codes, each carrying its English description."""

    description: str

    def __new__(cls, value: int, description: str) -> "MlxErrno":
        member = int.__new__(cls, value)
        member._value_ = value
        member.description = description
        return member

    SUCCESS = (0, "No Errors")
    INVEXT = (1, "File has invalid extension")
    INVFILE = (2, "Failed to open the file")
    INVPNG = (3, "PNG file is invalid or corrupted")
    INVXPM = (4, "XPM42 file is invalid or corrupted")
    INVPOS = (5, "The specified X or Y positions are out of bounds")
    INVDIM = (6, "The specified Width or Height dimensions are out of bounds")
    INVIMG = (
        7,
        "The provided image is invalid, might indicate mismanagement of images",
    )
    VERTFAIL = (8, "Failed to compile the vertex shader.")
    FRAGFAIL = (9, "Failed to compile the fragment shader.")
    SHDRFAIL = (10, "Failed to compile the shaders.")
    MEMFAIL = (11, "Failed to allocate memory")
    GLADFAIL = (12, "Failed to initialize GLAD")
    GLFWFAIL = (13, "Failed to initialize GLFW")
    WINFAIL = (14, "Failed to create window")
    STRTOOBIG = (15, "String is too big to be drawn")


def strerror(code: int) -> str:
    """Return the English description of an error code."""
    index = int(code)
    try:
        return MlxErrno(index).description
    except ValueError:
        raise ValueError(f"error code out of range: {index}") from None


class MlxError(Exception):
    """Raised when a graphics operation fails; carries an MlxErrno code."""

    def __init__(self, code: int, detail: str | None = None) -> None:
        self.code = MlxErrno(code)
        self.detail = detail
        message = self.code.description
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
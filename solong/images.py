"""Images, their on-screen instances and the depth-ordered render queue."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from solong.errors import MlxErrno, MlxError
from solong.pixels import BYTES_PER_PIXEL, draw_pixel
from solong.texture import Texture

MAX_DIMENSION = 0x7FFF


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def _check_dimensions(width: int, height: int) -> None:
    if not width or not height or width < 0 or height < 0:
        raise MlxError(MlxErrno.INVDIM, f"{width}x{height}")
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise MlxError(MlxErrno.INVDIM, f"{width}x{height}")


@dataclass
class Instance:
    """One placement of an image in the window."""

    x: int
    y: int
    z: int
    enabled: bool = True


@dataclass(eq=False)
class Image:
    """A mutable RGBA pixel buffer that can be shown several times."""

    width: int
    height: int
    pixels: bytearray = field(default=None, repr=False)  # type: ignore[assignment]
    instances: list[Instance] = field(default_factory=list)
    enabled: bool = True

    def __post_init__(self) -> None:
        size = self.width * self.height * BYTES_PER_PIXEL
        if self.pixels is None:
            self.pixels = bytearray(size)
        else:
            self.pixels = bytearray(self.pixels)
            if len(self.pixels) != size:
                raise ValueError(
                    f"pixel buffer of {len(self.pixels)} bytes does not fit "
                    f"{self.width}x{self.height}"
                )

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Set the pixel at (x, y) to the 0xRRGGBBAA ``color``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise MlxError(MlxErrno.INVPOS, f"({x}, {y})")
        draw_pixel(self.pixels, (y * self.width + x) * BYTES_PER_PIXEL, color)

    def resize(self, width: int, height: int) -> None:
        """Rescale the pixels to ``width`` x ``height`` by nearest neighbour."""
        _check_dimensions(width, height)
        if width == self.width and height == self.height:
            return
        wstep = _f32(self.width / width)
        hstep = _f32(self.height / height)
        source = self.pixels
        resized = bytearray(width * height * BYTES_PER_PIXEL)
        out = 0
        for j in range(height):
            src_row = int(_f32(j * hstep)) * self.width
            for i in range(width):
                start = (src_row + int(_f32(i * wstep))) * BYTES_PER_PIXEL
                resized[out:out + BYTES_PER_PIXEL] = source[start:start + BYTES_PER_PIXEL]
                out += BYTES_PER_PIXEL
        self.pixels = resized
        self.width = width
        self.height = height


@dataclass(eq=False)
class DrawCall:
    """A request to draw one instance of an image."""

    image: Image
    instance_id: int

    @property
    def instance(self) -> Instance:
        return self.image.instances[self.instance_id]


class Canvas:
    """Owns images and keeps the queue of instances to draw, ordered by depth."""

    def __init__(self) -> None:
        self.images: list[Image] = []
        self.render_queue: list[DrawCall] = []
        self.zdepth = 0
        self._needs_sort = False

    def new_image(self, width: int, height: int) -> Image:
        """Create a transparent black image and register it."""
        _check_dimensions(width, height)
        image = Image(width, height)
        self.images.insert(0, image)
        return image

    def texture_to_image(self, texture: Texture) -> Image:
        """Create an image holding a copy of ``texture``'s pixels."""
        image = self.new_image(texture.width, texture.height)
        row_bytes = texture.width * texture.bytes_per_pixel
        for row in range(texture.height):
            start = row * row_bytes
            image.pixels[start:start + row_bytes] = texture.pixels[start:start + row_bytes]
        return image

    def image_to_window(self, image: Image, x: int, y: int) -> int:
        """Place a new instance of ``image`` at (x, y); return its index."""
        index = len(image.instances)
        image.instances.append(Instance(x, y, self.zdepth))
        self.zdepth += 1
        self.render_queue.insert(0, DrawCall(image, index))
        self._needs_sort = True
        return index

    def set_instance_depth(self, instance: Instance, depth: int) -> None:
        """Change an instance's depth; the queue is re-sorted before drawing."""
        if instance.z == depth:
            return
        instance.z = depth
        self._needs_sort = True

    def delete_image(self, image: Image) -> None:
        """Forget ``image`` and every queued draw of it."""
        self.render_queue = [call for call in self.render_queue if call.image is not image]
        for position, candidate in enumerate(self.images):
            if candidate is image:
                del self.images[position]
                break

    def render_order(self) -> list[DrawCall]:
        """Return the draw calls to execute, lowest depth first.

        Among calls of equal depth the later one in the queue comes first.
        Disabled images and disabled instances are left out.
        """
        if self._needs_sort:
            self._needs_sort = False
            self.render_queue = sorted(
                reversed(self.render_queue), key=lambda call: call.instance.z
            )
        return [
            call
            for call in self.render_queue
            if call.image.enabled and call.instance.enabled
        ]
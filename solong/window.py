"""A window that runs frame hooks, forwards key events and draws a canvas."""

from __future__ import annotations

import math
import os
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import IntEnum

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from solong.errors import MlxErrno, MlxError  # noqa: E402
from solong.images import Canvas, DrawCall  # noqa: E402

KEY_UNKNOWN = -1
KEY_SPACE = 32
KEY_A = 65
KEY_D = 68
KEY_S = 83
KEY_W = 87
KEY_ESCAPE = 256
KEY_ENTER = 257
KEY_TAB = 258
KEY_BACKSPACE = 259
KEY_RIGHT = 262
KEY_LEFT = 263
KEY_DOWN = 264
KEY_UP = 265

MOD_SHIFT = 0x1
MOD_CONTROL = 0x2
MOD_ALT = 0x4
MOD_SUPER = 0x8

_CLEAR_COLOR = (51, 51, 51)

_SPECIAL_KEYS = {
    pygame.K_SPACE: KEY_SPACE,
    pygame.K_ESCAPE: KEY_ESCAPE,
    pygame.K_RETURN: KEY_ENTER,
    pygame.K_TAB: KEY_TAB,
    pygame.K_BACKSPACE: KEY_BACKSPACE,
    pygame.K_RIGHT: KEY_RIGHT,
    pygame.K_LEFT: KEY_LEFT,
    pygame.K_DOWN: KEY_DOWN,
    pygame.K_UP: KEY_UP,
}

_MODIFIERS = (
    (pygame.KMOD_SHIFT, MOD_SHIFT),
    (pygame.KMOD_CTRL, MOD_CONTROL),
    (pygame.KMOD_ALT, MOD_ALT),
    (pygame.KMOD_GUI, MOD_SUPER),
)


class Setting(IntEnum):
    """Window options read when the window is created."""

    STRETCH_IMAGE = 0
    FULLSCREEN = 1
    MAXIMIZED = 2
    DECORATED = 3
    HEADLESS = 4


DEFAULT_SETTINGS: Mapping[Setting, bool] = {
    Setting.STRETCH_IMAGE: False,
    Setting.FULLSCREEN: False,
    Setting.MAXIMIZED: False,
    Setting.DECORATED: True,
    Setting.HEADLESS: False,
}


class Action(IntEnum):
    """What happened to a key."""

    RELEASE = 0
    PRESS = 1
    REPEAT = 2


@dataclass(frozen=True)
class KeyData:
    """A key event handed to the key hook."""

    key: int
    action: Action
    scancode: int = 0
    modifiers: int = 0


def _div(numerator: float, denominator: float) -> float:
    """Divide with IEEE results for a zero denominator."""
    numerator = float(numerator)
    denominator = float(denominator)
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def projection_matrix(width: float, height: float, depth: float) -> tuple[float, ...]:
    """Return the column-major 4x4 orthographic projection for the window."""
    w = float(width)
    h = float(height)
    d = float(depth)
    span = d - -d
    return (
        _div(2.0, w), 0.0, 0.0, 0.0,
        0.0, _div(2.0, -h), 0.0, 0.0,
        0.0, 0.0, _div(-2.0, span), 0.0,
        -1.0, -_div(h, -h), -_div(d + -d, span), 1.0,
    )


def _glfw_key(pygame_key: int) -> int:
    if pygame.K_a <= pygame_key <= pygame.K_z:
        return pygame_key - pygame.K_a + KEY_A
    if pygame.K_0 <= pygame_key <= pygame.K_9:
        return pygame_key - pygame.K_0 + ord("0")
    return _SPECIAL_KEYS.get(pygame_key, KEY_UNKNOWN)


def _glfw_mods(pygame_mods: int) -> int:
    return sum(flag for mask, flag in _MODIFIERS if pygame_mods & mask)


def _require_callable(func: object) -> None:
    if func is None or not callable(func):
        raise TypeError("hook must be callable")


class Window:
    """A window, its hooks and the canvas it draws every frame.

    With ``Setting.HEADLESS`` no display is opened: frames still run their
    hooks and compute what would be drawn.
    """

    def __init__(
        self,
        width: int,
        height: int,
        title: str,
        resize: bool = False,
        *,
        canvas: Canvas | None = None,
        settings: Mapping[Setting, bool] | None = None,
    ) -> None:
        if title is None:
            raise TypeError("title must not be None")
        if width <= 0:
            raise ValueError("Window width must be positive")
        if height <= 0:
            raise ValueError("Window height must be positive")
        self.settings: dict[Setting, bool] = dict(DEFAULT_SETTINGS)
        for key, value in (settings or {}).items():
            self.settings[Setting(key)] = bool(value)
        self.canvas = canvas if canvas is not None else Canvas()
        self.width = width
        self.height = height
        self.initial_size = (width, height)
        self.title = title
        self.resizable = resize
        self.delta_time = 0.0
        self.matrix = projection_matrix(width, height, self.canvas.zdepth)
        self._key_hook: Callable[[KeyData], object] | None = None
        self._loop_hooks: list[Callable[[], object]] = []
        self._close_hook: Callable[[], object] | None = None
        self._resize_hook: Callable[[int, int], object] | None = None
        self._should_close = False
        self._terminated = False
        self._display: pygame.Surface | None = None
        self._flags = 0
        self._clock_start = time.perf_counter()
        self._last_time = 0.0
        if not self.settings[Setting.HEADLESS]:
            self._open_display()

    def __enter__(self) -> Window:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.terminate()

    def _open_display(self) -> None:
        try:
            pygame.display.init()
        except pygame.error as exc:
            raise MlxError(MlxErrno.GLFWFAIL, str(exc)) from exc
        flags = 0
        if self.resizable:
            flags |= pygame.RESIZABLE
        if not self.settings[Setting.DECORATED]:
            flags |= pygame.NOFRAME
        if self.settings[Setting.FULLSCREEN]:
            flags |= pygame.FULLSCREEN
        size = (self.width, self.height)
        if self.settings[Setting.MAXIMIZED] and not self.settings[Setting.FULLSCREEN]:
            desktops = pygame.display.get_desktop_sizes()
            if desktops:
                size = desktops[0]
        try:
            self._display = pygame.display.set_mode(size, flags)
        except pygame.error as exc:
            pygame.display.quit()
            raise MlxError(MlxErrno.WINFAIL, str(exc)) from exc
        self._flags = flags
        pygame.display.set_caption(self.title)
        self.width, self.height = self._display.get_size()

    def key_hook(self, func: Callable[[KeyData], object]) -> None:
        """Set the function called with a KeyData for every key event."""
        _require_callable(func)
        self._key_hook = func

    def loop_hook(self, func: Callable[[], object]) -> None:
        """Add a function called once per frame, after those added before it."""
        _require_callable(func)
        self._loop_hooks.append(func)

    def close_hook(self, func: Callable[[], object]) -> None:
        """Set the function called when the user asks to close the window."""
        _require_callable(func)
        self._close_hook = func

    def resize_hook(self, func: Callable[[int, int], object]) -> None:
        """Set the function called with the new width and height on resize."""
        _require_callable(func)
        self._resize_hook = func

    def _emit_key(self, data: KeyData) -> None:
        if self._key_hook is not None:
            self._key_hook(data)

    def dispatch_key(self, key: int, action: int) -> None:
        """Deliver a key event to the key hook as if it came from the keyboard."""
        self._emit_key(KeyData(int(key), Action(action)))

    def set_title(self, title: str) -> None:
        """Change the window title."""
        if title is None:
            raise TypeError("title must not be None")
        self.title = title
        if self._display is not None:
            pygame.display.set_caption(title)

    def _resized(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        if self._resize_hook is not None:
            self._resize_hook(width, height)

    def set_size(self, width: int, height: int) -> None:
        """Resize the window and notify the resize hook."""
        if self._display is not None:
            self._display = pygame.display.set_mode((width, height), self._flags)
        self._resized(width, height)

    def close(self) -> None:
        """Ask the loop to stop after the current frame."""
        self._should_close = True

    def should_close(self) -> bool:
        """Tell whether the window has been asked to close."""
        return self._should_close

    def step(self) -> list[DrawCall]:
        """Run one frame; return the draw calls it rendered, in order."""
        if self._terminated:
            raise RuntimeError("window has been terminated")
        now = time.perf_counter() - self._clock_start
        self.delta_time = now - self._last_time
        self._last_time = now

        if self._display is not None:
            self.width, self.height = self._display.get_size()
        if self.width > 1 or self.height > 1:
            if self.settings[Setting.STRETCH_IMAGE]:
                width, height = self.initial_size
            else:
                width, height = self.width, self.height
            self.matrix = projection_matrix(width, height, self.canvas.zdepth)

        for hook in list(self._loop_hooks):
            if self._should_close:
                break
            hook()

        calls = self.canvas.render_order()
        if self._display is not None:
            self._draw(calls)
            self._poll_events()
        return calls

    def _draw(self, calls: list[DrawCall]) -> None:
        display = self._display
        stretch = self.settings[Setting.STRETCH_IMAGE]
        target = pygame.Surface(self.initial_size) if stretch else display
        target.fill(_CLEAR_COLOR)
        surfaces: dict[int, pygame.Surface] = {}
        for call in calls:
            image = call.image
            surface = surfaces.get(id(image))
            if surface is None:
                surface = pygame.image.frombuffer(
                    bytes(image.pixels), (image.width, image.height), "RGBA"
                )
                surfaces[id(image)] = surface
            instance = call.instance
            target.blit(surface, (instance.x, instance.y))
        if stretch:
            display.blit(pygame.transform.scale(target, display.get_size()), (0, 0))
        pygame.display.flip()

    def _poll_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._should_close = True
                if self._close_hook is not None:
                    self._close_hook()
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                action = Action.PRESS if event.type == pygame.KEYDOWN else Action.RELEASE
                self._emit_key(
                    KeyData(
                        _glfw_key(event.key),
                        action,
                        getattr(event, "scancode", 0),
                        _glfw_mods(getattr(event, "mod", 0)),
                    )
                )
            elif event.type == pygame.VIDEORESIZE:
                self._resized(event.w, event.h)

    def run(self) -> None:
        """Run frames until the window is asked to close."""
        while not self._should_close:
            self.step()

    def terminate(self) -> None:
        """Drop hooks and images and close the display."""
        if self._terminated:
            return
        self._terminated = True
        self._should_close = True
        self._key_hook = None
        self._loop_hooks.clear()
        self._close_hook = None
        self._resize_hook = None
        for image in list(self.canvas.images):
            self.canvas.delete_image(image)
        self.canvas.render_queue.clear()
        if self._display is not None:
            self._display = None
            pygame.display.quit()
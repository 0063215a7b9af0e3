"""Mouse position, mouse buttons, cursor mode and monitor sizes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from weakref import WeakKeyDictionary

import pygame

from solong.window import Setting, Window

BUTTON_LEFT = 0
BUTTON_RIGHT = 1
BUTTON_MIDDLE = 2

# pygame reports buttons as (left, middle, right).
_PRESSED_INDEX = {BUTTON_LEFT: 0, BUTTON_MIDDLE: 1, BUTTON_RIGHT: 2}


class CursorMode(IntEnum):
    """How the cursor behaves over the window."""

    NORMAL = 0x00034001
    HIDDEN = 0x00034002
    DISABLED = 0x00034003


@dataclass
class _PointerState:
    x: int = 0
    y: int = 0
    mode: CursorMode = CursorMode.NORMAL


_states: WeakKeyDictionary[Window, _PointerState] = WeakKeyDictionary()


def _state(window: Window) -> _PointerState:
    if window is None:
        raise TypeError("window must not be None")
    state = _states.get(window)
    if state is None:
        state = _PointerState()
        _states[window] = state
    return state


def _is_live(window: Window) -> bool:
    return (
        not window.settings[Setting.HEADLESS]
        and pygame.display.get_init()
        and pygame.display.get_surface() is not None
    )


def get_mouse_pos(window: Window) -> tuple[int, int]:
    """Return the cursor position relative to the window, in whole pixels."""
    state = _state(window)
    if _is_live(window):
        x, y = pygame.mouse.get_pos()
        state.x, state.y = int(x), int(y)
    return state.x, state.y


def set_mouse_pos(window: Window, x: int, y: int) -> None:
    """Move the cursor to (x, y) relative to the window."""
    state = _state(window)
    state.x, state.y = int(x), int(y)
    if _is_live(window):
        pygame.mouse.set_pos((state.x, state.y))


def is_mouse_down(window: Window, button: int) -> bool:
    """Tell whether ``button`` is held down over the window."""
    _state(window)
    if button not in _PRESSED_INDEX:
        raise ValueError(f"unknown mouse button {button!r}")
    if not _is_live(window):
        return False
    return bool(pygame.mouse.get_pressed()[_PRESSED_INDEX[button]])


def set_cursor_mode(window: Window, mode: int) -> CursorMode:
    """Set how the cursor behaves; return the mode that was in effect before."""
    state = _state(window)
    new_mode = CursorMode(mode)
    previous = state.mode
    state.mode = new_mode
    if _is_live(window):
        pygame.mouse.set_visible(new_mode is CursorMode.NORMAL)
        pygame.event.set_grab(new_mode is CursorMode.DISABLED)
    return previous


def monitor_size(index: int) -> tuple[int, int]:
    """Return the size of monitor ``index``, or (0, 0) if there is no such monitor."""
    if index < 0:
        raise ValueError("Index out of bounds")
    was_initialised = pygame.display.get_init()
    try:
        if not was_initialised:
            pygame.display.init()
        sizes = list(pygame.display.get_desktop_sizes())
    except pygame.error:
        return 0, 0
    finally:
        if not was_initialised and pygame.display.get_init():
            pygame.display.quit()
    if index >= len(sizes):
        return 0, 0
    width, height = sizes[index]
    return int(width), int(height)
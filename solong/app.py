"""Command entry point: load a ``.ber`` map and play it in a window."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

import pygame

from solong.errors import MlxError
from solong.game import Direction, Game, GameOver
from solong.gamemap import MapError, check_extension, read_map
from solong.images import Canvas, Image
from solong.route import check_routes
from solong.window import KEY_A, KEY_D, KEY_ESCAPE, KEY_S, KEY_W, Action, KeyData, Window

TITLE = "so_long"
MAP_EXTENSION = ".ber"
_LABEL_POSITION = (10, 10)
_LABEL_COLOR = (255, 255, 255)
_LABEL_FONT_SIZE = 20

_KEY_DIRECTIONS = {
    KEY_W: Direction.UP,
    KEY_S: Direction.DOWN,
    KEY_A: Direction.LEFT,
    KEY_D: Direction.RIGHT,
}

_surface_bytes = getattr(pygame.image, "tobytes", None) or pygame.image.tostring


class _MoveLabel:
    """Keeps one text image on the canvas, replacing it when the text changes."""

    def __init__(self, canvas: Canvas) -> None:
        self.canvas = canvas
        self.image: Image | None = None
        self.text: str | None = None
        try:
            pygame.font.init()
            self.font = pygame.font.Font(None, _LABEL_FONT_SIZE)
        except (pygame.error, OSError):
            self.font = None

    def show(self, text: str) -> None:
        if self.font is None or text == self.text:
            return
        self.text = text
        if self.image is not None:
            self.canvas.delete_image(self.image)
            self.image = None
        surface = self.font.render(text, True, _LABEL_COLOR)
        width, height = surface.get_size()
        if not width or not height:
            return
        image = self.canvas.new_image(width, height)
        image.pixels[:] = _surface_bytes(surface, "RGBA")
        self.canvas.image_to_window(image, *_LABEL_POSITION)
        self.image = image


def load_game(path: str | os.PathLike[str]) -> Game:
    """Read a map, load the sprites and check that the map can be finished."""
    game_map = read_map(path)
    try:
        game = Game(game_map)
    except MlxError as exc:
        raise MapError("Error loading textures.") from exc
    check_routes(game_map, game.player.y, game.player.x)
    return game


def run(path: str | os.PathLike[str]) -> int:
    """Play the map at ``path`` until the window closes; return the exit status."""
    game = load_game(path)
    width, height = game.window_size
    try:
        window = Window(width, height, TITLE, True, canvas=game.canvas)
    except MlxError as exc:
        raise MapError("Error al inicializar mlx.") from exc

    with window:
        game.layout()
        label = _MoveLabel(game.canvas)

        def on_key(data: KeyData) -> None:
            if data.action in (Action.PRESS, Action.REPEAT):
                direction = _KEY_DIRECTIONS.get(data.key)
                if direction is not None:
                    game.move(direction)
            if data.key == KEY_ESCAPE and data.action == Action.PRESS:
                print("See you next time!")
                window.close()

        window.key_hook(on_key)
        window.loop_hook(lambda: label.show(game.move_label()))
        window.loop_hook(game.exit_open)
        try:
            window.run()
        except GameOver as over:
            print(over.message)
            return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the game on the single map file named in ``argv``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Error. Send only a file")
        return 1
    path = args[0]
    try:
        if not check_extension(path, MAP_EXTENSION):
            print("Error. File ext must be .ber")
            return 1
        return run(path)
    except MapError as exc:
        print(exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
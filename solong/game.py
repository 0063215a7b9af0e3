"""Game state: the player, the tiles on screen and the rules of a move."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from solong.gamemap import COLLECTIBLE, ENEMY, EXIT, FLOOR, PLAYER, WALL, GameMap, MapError
from solong.images import Canvas, Image
from solong.texture import Texture, load_png

WIN_MESSAGE = "YOU WON!"
LOSE_MESSAGE = "YOU LOST!"


class Sprite(Enum):
    """The pictures the game draws, valued by their file name."""

    FLOOR = "floor.png"
    WALL = "wall3.png"
    COLLECTIBLE = "coinsmall.png"
    EXIT = "exit.png"
    EXIT_OPEN = "exit2.png"
    ENEMY = "enemy.png"
    PLAYER_DOWN = "player.png"
    PLAYER_UP = "playerup.png"
    PLAYER_LEFT = "playerleft.png"
    PLAYER_RIGHT = "playerright.png"


class Direction(Enum):
    """A step on the grid and the player picture that goes with it."""

    UP = (0, -1, Sprite.PLAYER_UP)
    DOWN = (0, 1, Sprite.PLAYER_DOWN)
    LEFT = (-1, 0, Sprite.PLAYER_LEFT)
    RIGHT = (1, 0, Sprite.PLAYER_RIGHT)

    def __init__(self, dx: int, dy: int, sprite: Sprite) -> None:
        self.dx = dx
        self.dy = dy
        self.sprite = sprite


class GameOver(Exception):
    """Raised when the player reaches the open exit or walks into an enemy."""

    def __init__(self, message: str, won: bool) -> None:
        super().__init__(message)
        self.message = message
        self.won = won


@dataclass
class Player:
    """The player's position in tiles."""

    x: int
    y: int


_TILE_SPRITES = {
    WALL: Sprite.WALL,
    EXIT: Sprite.EXIT,
    COLLECTIBLE: Sprite.COLLECTIBLE,
    PLAYER: Sprite.PLAYER_DOWN,
    ENEMY: Sprite.ENEMY,
}


class Game:
    """A running game: the map, the player, the move counter and the canvas."""

    def __init__(
        self,
        game_map: GameMap,
        textures: Mapping[Sprite, Texture] | None = None,
        *,
        canvas: Canvas | None = None,
        sprite_dir: str | os.PathLike[str] = "sprites",
        tile_size: tuple[int, int] | None = None,
    ) -> None:
        self.map = game_map
        self.canvas = canvas if canvas is not None else Canvas()
        start = game_map.find(PLAYER)
        if start is None:
            raise MapError("Error. At least 1 c, only 1 e and p")
        self.player = Player(*start)
        if textures is None:
            textures = {
                sprite: load_png(os.path.join(sprite_dir, sprite.value))
                for sprite in Sprite
            }
        missing = [sprite.name for sprite in Sprite if sprite not in textures]
        if missing:
            raise KeyError(f"missing textures: {', '.join(missing)}")
        self.images: dict[Sprite, Image] = {
            sprite: self.canvas.texture_to_image(textures[sprite]) for sprite in Sprite
        }
        floor = self.images[Sprite.FLOOR]
        self.tile_size = tile_size if tile_size is not None else (floor.width, floor.height)
        self.moves = 0
        self.remaining = game_map.collectibles
        self.enemies = game_map.enemies()
        self._exit_shown_open = False

    @property
    def window_size(self) -> tuple[int, int]:
        """Window width and height in pixels."""
        width, height = self.tile_size
        return self.map.cols * width, self.map.rows * height

    def _place(self, sprite: Sprite, x: int, y: int) -> tuple[Sprite, int, int]:
        width, height = self.tile_size
        px, py = x * width, y * height
        self.canvas.image_to_window(self.images[sprite], px, py)
        return sprite, px, py

    def layout(self) -> list[tuple[Sprite, int, int]]:
        """Draw the whole map; return each placement as (sprite, x, y) in pixels."""
        placed = []
        for y, row in enumerate(self.map.grid):
            for x, tile in enumerate(row):
                placed.append(self._place(Sprite.FLOOR, x, y))
                sprite = _TILE_SPRITES.get(tile)
                if sprite is not None:
                    placed.append(self._place(sprite, x, y))
        return placed

    def move(self, direction: Direction) -> bool:
        """Try a step; return True and count it if the player moved.

        Raises GameOver when the step wins or loses the game.
        """
        new_x = self.player.x + direction.dx
        new_y = self.player.y + direction.dy
        if direction.dy:
            inside = 0 < new_y < self.map.rows
        else:
            inside = 0 < new_x < self.map.cols
        if not inside or self.map.grid[new_y][new_x] == WALL:
            return False
        self._step(new_x, new_y, direction.sprite)
        self.moves += 1
        return True

    def _step(self, new_x: int, new_y: int, sprite: Sprite) -> None:
        grid = self.map.grid
        old_x, old_y = self.player.x, self.player.y
        new_tile = grid[new_y][new_x]
        old_tile = grid[old_y][old_x]

        if new_tile == COLLECTIBLE:
            self.remaining -= 1
        if new_tile == EXIT and self.remaining <= 0:
            raise GameOver(WIN_MESSAGE, won=True)
        self._place(Sprite.EXIT if old_tile == EXIT else Sprite.FLOOR, old_x, old_y)
        if new_tile == ENEMY:
            raise GameOver(LOSE_MESSAGE, won=False)

        if new_tile != EXIT:
            grid[new_y][new_x] = PLAYER
            if old_tile != EXIT:
                grid[old_y][old_x] = FLOOR
        else:
            grid[old_y][old_x] = FLOOR
        self._place(sprite, new_x, new_y)
        self.player.x, self.player.y = new_x, new_y

    def exit_open(self) -> bool:
        """Show the open exit once every collectible is taken; tell if it is open."""
        if self.remaining > 0:
            return False
        if not self._exit_shown_open:
            position = self.map.find(EXIT)
            if position is not None:
                self._place(Sprite.EXIT_OPEN, *position)
                self._exit_shown_open = True
        return True

    def move_label(self) -> str:
        """Return the move counter text."""
        return f"Moves: {self.moves}"
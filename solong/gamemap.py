"""Loading and validating ``.ber`` maps."""

from __future__ import annotations

import os
import string
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

WALL = "1"
FLOOR = "0"
PLAYER = "P"
EXIT = "E"
COLLECTIBLE = "C"
ENEMY = "T"

_COUNTED = frozenset((PLAYER, EXIT, COLLECTIBLE, ENEMY))
_PLAIN = frozenset((FLOOR, WALL))
_ALNUM = frozenset(string.ascii_letters + string.digits)


class MapError(Exception):
    """Raised when a map file is missing, malformed or unplayable."""


@dataclass
class GameMap:
    """A validated map: a grid of tiles and the count of each special tile."""

    grid: list[list[str]]
    players: int = 0
    exits: int = 0
    collectibles: int = 0
    enemy_count: int = 0

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    def find(self, tile: str) -> tuple[int, int] | None:
        """Return ``(x, y)`` of the first ``tile`` in row-major order, or None."""
        for y, row in enumerate(self.grid):
            for x, cell in enumerate(row):
                if cell == tile:
                    return x, y
        return None

    def enemies(self) -> list[tuple[int, int]]:
        """Return ``(x, y)`` of every enemy tile in row-major order."""
        return [
            (x, y)
            for y, row in enumerate(self.grid)
            for x, cell in enumerate(row)
            if cell == ENEMY
        ]

    def debug_dump(self) -> str:
        """Return a readable report of the map's size, contents and rows."""
        lines = [
            "========= MAP DEBUG =========",
            f"Dimensions: {self.rows} rows x {self.cols} cols",
            f"Player: {self.players} | Exits: {self.exits} | "
            f"Collectibles: {self.collectibles} | Enemies: {self.enemy_count}",
        ]
        lines.extend(f"{index}: [{''.join(row)}]" for index, row in enumerate(self.grid))
        lines.append("========= END DEBUG =========")
        return "\n".join(lines) + "\n"


def check_extension(path: str | os.PathLike[str], ext: str) -> bool:
    """Tell whether ``path`` ends with ``ext``.

    The name must start with an ASCII letter or digit, otherwise MapError is
    raised.
    """
    name = os.fsdecode(path)
    if not name or name[0] not in _ALNUM:
        raise MapError("Error. Wrong file name struct")
    return len(name) >= len(ext) and name.endswith(ext)


def parse_map(lines: Iterable[str]) -> GameMap:
    """Build and validate a map from its text lines."""
    rows = [line[:-1] if line.endswith("\n") else line for line in lines]
    cols = len(rows[0]) if rows else 0
    if any(len(row) != cols for row in rows):
        raise MapError("Error. All rows and cols must have same length")

    counts: Counter[str] = Counter()
    last_row = len(rows) - 1
    last_col = cols - 1
    for i, row in enumerate(rows):
        for j, tile in enumerate(row):
            if tile in _COUNTED:
                counts[tile] += 1
            elif tile not in _PLAIN:
                raise MapError("Error. Wrong char detected")
            on_border = i in (0, last_row) or j in (0, last_col)
            if on_border and tile != WALL:
                raise MapError("Error. All borders must be 1")

    if counts[COLLECTIBLE] < 1 or counts[EXIT] != 1 or counts[PLAYER] != 1:
        raise MapError("Error. At least 1 c, only 1 e and p")

    return GameMap(
        grid=[list(row) for row in rows],
        players=counts[PLAYER],
        exits=counts[EXIT],
        collectibles=counts[COLLECTIBLE],
        enemy_count=counts[ENEMY],
    )


def read_map(path: str | os.PathLike[str]) -> GameMap:
    """Read and validate a map file."""
    try:
        with open(path, encoding="latin-1", newline="\n") as file:
            lines = list(file)
    except OSError as exc:
        raise MapError("Error opening file") from exc
    return parse_map(lines)
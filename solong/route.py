"""Reachability checks: can the player collect everything and leave?"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from solong.gamemap import COLLECTIBLE, EXIT, WALL, GameMap, MapError

_BLOCKED = frozenset((WALL, "X"))


@dataclass(frozen=True)
class Reach:
    """What a walk from a starting cell can reach."""

    collectibles: int = 0
    exits: int = 0


def flood_fill(grid: Sequence[Sequence[str]], row: int, col: int) -> Reach:
    """Count the collectibles and exits connected to ``(row, col)``.

    Walls block the walk; every other tile, enemies included, is passable.
    The grid is not modified.
    """
    height = len(grid)
    seen: set[tuple[int, int]] = set()
    stack = [(row, col)]
    collectibles = exits = 0
    while stack:
        r, c = stack.pop()
        if r < 0 or c < 0 or r >= height or c >= len(grid[r]):
            continue
        if (r, c) in seen:
            continue
        tile = grid[r][c]
        if tile in _BLOCKED:
            continue
        seen.add((r, c))
        if tile == COLLECTIBLE:
            collectibles += 1
        elif tile == EXIT:
            exits += 1
        stack.extend(((r + 1, c), (r - 1, c), (r, c + 1), (r, c - 1)))
    return Reach(collectibles, exits)


def check_routes(game_map: GameMap, row: int, col: int) -> Reach:
    """Require every collectible and the exit to be reachable from ``(row, col)``."""
    reach = flood_fill(game_map.grid, row, col)
    if reach.collectibles != game_map.collectibles or reach.exits != 1:
        raise MapError("Error. You can't get everything")
    return reach
# solong

A small top-down tile puzzle game. You walk a character around a walled map,
pick up every coin, steer clear of the enemies and leave through the exit once
every coin has been taken.

## Installing

```
pip install .
```

This pulls in `pygame` for the window and `pillow` for loading the PNG sprites.

## Playing

```
solong maps/level1.ber
```

The command takes exactly one argument, a map file whose name ends in `.ber`
and starts with a letter or digit. Anything else is rejected with a message
and a non-zero exit status.

The game loads its sprites from `sprites/` relative to the current directory,
so start it from the directory that holds them. It expects these files:
`floor.png`, `wall3.png`, `coinsmall.png`, `exit.png`, `exit2.png`,
`enemy.png`, `player.png`, `playerup.png`, `playerleft.png` and
`playerright.png`. The size of `floor.png` sets the size of one tile.

Controls:

| Key      | Action      |
|----------|-------------|
| `W`      | move up     |
| `A`      | move left   |
| `S`      | move down   |
| `D`      | move right  |
| `Escape` | quit        |

The number of moves so far is shown in the top-left corner. Once every coin
has been collected the exit is redrawn as open. Walking onto an enemy prints
`YOU LOST!`; walking onto the exit after every coin has been collected prints
`YOU WON!`. Both end the game with exit status 1; quitting with `Escape`
prints `See you next time!` and exits with status 0.

## Map files

A map is a plain text file. Every line is one row of tiles and every row must
have the same length.

| Char | Tile                       |
|------|----------------------------|
| `1`  | wall                       |
| `0`  | floor                      |
| `P`  | player start (exactly one) |
| `E`  | exit (exactly one)         |
| `C`  | coin (at least one)        |
| `T`  | enemy                      |

The whole border must be wall, no other characters are allowed, and every
coin and the exit must be reachable from the player's start without crossing a
wall. A map that breaks any rule is rejected with a message and the game does
not start.

Example:

```
1111111111
1P0C00T0E1
1000110001
10C0000C01
1111111111
```

## Using it as a library

The map and game logic work without a window:

```python
from solong.gamemap import parse_map
from solong.route import check_routes

game_map = parse_map([
    "11111",
    "1PCE1",
    "11111",
])
x, y = game_map.find("P")
check_routes(game_map, y, x)   # raises MapError if something is unreachable
```

The modules:

- `solong.gamemap`: `parse_map`, `read_map` and `check_extension`; a
  `GameMap` with `find`, `enemies` and `debug_dump`; `MapError`.
- `solong.route`: `flood_fill` and `check_routes`, returning a `Reach`.
- `solong.game`: `Game` holds the playing state and takes moves as
  `Direction` values through `Game.move`; it raises `GameOver` when the game
  is won or lost. `Game.layout`, `Game.exit_open` and `Game.move_label` drive
  what is drawn. Textures can be passed in as a mapping from `Sprite` to
  `Texture` instead of being loaded from disk.
- `solong.app`: `load_game` builds a `Game` from a map file and checks its
  routes; `run` plays it; `main` is the `solong` command.
- `solong.images`: `Canvas`, `Image`, `Instance` and `DrawCall`, an in-memory
  set of RGBA images placed in a depth-ordered render queue.
- `solong.texture`: `Texture` and `load_png`.
- `solong.xpm42`: `parse_xpm42` and `load_xpm42` for the XPM42 text image
  format.
- `solong.pixels`: `fnv_hash`, `rgba_to_mono` and `draw_pixel`.
- `solong.window`: `Window`, a pygame window with key, loop, close and resize
  hooks that draws a `Canvas`; with `Setting.HEADLESS` it opens no display.
- `solong.pointer`: mouse position and buttons, `CursorMode` and
  `monitor_size`.
- `solong.errors`: `MlxError` and its `MlxErrno` codes, with `strerror`.

## What it does not do

The package ships no sprite images and no maps; you provide them. Enemies
stand still. The game itself does not use the mouse.
import pytest
from PIL import Image as PILImage

from solong.errors import MlxError
from solong.game import Direction, Game, GameOver, Player, Sprite
from solong.gamemap import parse_map
from solong.texture import Texture


def _textures(size=2):
    result = {}
    for index, sprite in enumerate(Sprite):
        pixels = bytes([index, index, index, 255]) * (size * size)
        result[sprite] = Texture(size, size, bytearray(pixels))
    return result


def _game(rows):
    return Game(parse_map(rows), _textures())


def _instances_at(game, sprite):
    return [(inst.x, inst.y) for inst in game.images[sprite].instances]


def test_player_found_and_tile_size_from_floor():
    game = _game(["11111", "1PCE1", "11111"])
    assert game.player == Player(1, 1)
    assert game.tile_size == (2, 2)
    assert game.window_size == (10, 6)


def test_blocked_by_wall_does_not_count():
    game = _game(["11111", "1PCE1", "11111"])
    assert game.move(Direction.UP) is False
    assert game.move(Direction.LEFT) is False
    assert game.moves == 0
    assert game.player == Player(1, 1)


def test_collect_then_win():
    game = _game(["11111", "1PCE1", "11111"])
    assert game.move(Direction.RIGHT) is True
    assert game.remaining == 0
    assert game.moves == 1
    assert game.map.grid[1] == list("10PE1")
    with pytest.raises(GameOver) as info:
        game.move(Direction.RIGHT)
    assert info.value.won is True
    assert str(info.value) == "YOU WON!"
    assert game.moves == 1


def test_enemy_loses():
    game = _game(["1111111", "1PTC0E1", "1111111"])
    with pytest.raises(GameOver) as info:
        game.move(Direction.RIGHT)
    assert info.value.won is False
    assert info.value.message == "YOU LOST!"


def test_stepping_over_closed_exit_keeps_it():
    game = _game(["1111111", "1PE0C01", "1111111"])
    assert game.move(Direction.RIGHT)
    assert game.player == Player(2, 1)
    assert game.map.grid[1] == list("10E0C01")
    assert game.move(Direction.RIGHT)
    assert game.map.grid[1] == list("10EPC01")
    assert (4, 2) in _instances_at(game, Sprite.EXIT)


def test_move_draws_directional_sprite_and_floor():
    game = _game(["11111", "1P001", "1C0E1", "11111"])
    assert game.move(Direction.DOWN)
    assert _instances_at(game, Sprite.PLAYER_DOWN) == [(2, 4)]
    assert _instances_at(game, Sprite.FLOOR) == [(2, 2)]
    assert game.move(Direction.UP)
    assert _instances_at(game, Sprite.PLAYER_UP) == [(2, 2)]


def test_layout_places_floor_everywhere():
    game = _game(["11111", "1PCE1", "11111"])
    placed = game.layout()
    floors = [item for item in placed if item[0] is Sprite.FLOOR]
    assert len(floors) == game.map.rows * game.map.cols
    assert (Sprite.PLAYER_DOWN, 2, 2) in placed
    assert (Sprite.COLLECTIBLE, 4, 2) in placed
    assert (Sprite.EXIT, 6, 2) in placed
    walls = [item for item in placed if item[0] is Sprite.WALL]
    assert len(walls) == 12


def test_exit_opens_once():
    game = _game(["11111", "1PC01", "1E001", "11111"])
    assert game.exit_open() is False
    assert game.images[Sprite.EXIT_OPEN].instances == []
    game.move(Direction.RIGHT)
    assert game.exit_open() is True
    assert game.exit_open() is True
    assert _instances_at(game, Sprite.EXIT_OPEN) == [(2, 4)]


def test_move_label():
    game = _game(["11111", "1P0C1", "1E001", "11111"])
    assert game.move_label() == "Moves: 0"
    game.move(Direction.RIGHT)
    assert game.move_label() == "Moves: 1"


def test_enemies_listed():
    game = _game(["1111111", "1PT0CE1", "10T0001", "1111111"])
    assert game.enemies == [(2, 1), (2, 2)]


def test_missing_texture_rejected():
    textures = _textures()
    del textures[Sprite.ENEMY]
    with pytest.raises(KeyError):
        Game(parse_map(["11111", "1PCE1", "11111"]), textures)


def test_loads_sprites_from_directory(tmp_path):
    for sprite in Sprite:
        PILImage.new("RGBA", (3, 3), (1, 2, 3, 255)).save(tmp_path / sprite.value)
    game = Game(parse_map(["11111", "1PCE1", "11111"]), sprite_dir=tmp_path)
    assert game.tile_size == (3, 3)
    assert game.images[Sprite.WALL].pixels[:4] == bytes([1, 2, 3, 255])


def test_missing_sprite_directory(tmp_path):
    with pytest.raises(MlxError):
        Game(parse_map(["11111", "1PCE1", "11111"]), sprite_dir=tmp_path / "none")
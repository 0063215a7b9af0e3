import pytest
from PIL import Image as PILImage

from solong.app import load_game, main
from solong.game import Player, Sprite
from solong.gamemap import MapError

VALID = "11111\n1PCE1\n11111\n"
UNREACHABLE = "111111\n1P1CE1\n111111\n"
OPEN_BORDER = "11111\n0PCE1\n11111\n"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    sprites = tmp_path / "sprites"
    sprites.mkdir()
    for sprite in Sprite:
        PILImage.new("RGBA", (4, 4), (10, 20, 30, 255)).save(sprites / sprite.value)
    return tmp_path


@pytest.fixture
def bare_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write(directory, name, text):
    (directory / name).write_text(text)
    return name


def test_load_game_builds_game(workdir):
    game = load_game(_write(workdir, "level.ber", VALID))
    assert game.player == Player(1, 1)
    assert game.remaining == 1
    assert game.moves == 0
    assert game.tile_size == (4, 4)


def test_load_game_unreachable_items(workdir):
    name = _write(workdir, "level.ber", UNREACHABLE)
    with pytest.raises(MapError, match="can't get everything"):
        load_game(name)


def test_load_game_without_sprites(bare_dir):
    name = _write(bare_dir, "level.ber", VALID)
    with pytest.raises(MapError, match="Error loading textures."):
        load_game(name)


def test_load_game_missing_file(workdir):
    with pytest.raises(MapError, match="Error opening file"):
        load_game("missing.ber")


@pytest.mark.parametrize("argv", [[], ["a.ber", "b.ber"]])
def test_main_needs_one_argument(argv, capsys):
    assert main(argv) == 1
    assert capsys.readouterr().out == "Error. Send only a file\n"


def test_main_rejects_wrong_extension(workdir, capsys):
    name = _write(workdir, "level.txt", VALID)
    assert main([name]) == 1
    assert capsys.readouterr().out == "Error. File ext must be .ber\n"


def test_main_rejects_bad_name(workdir, capsys):
    name = _write(workdir, "_level.ber", VALID)
    assert main([name]) == 1
    assert capsys.readouterr().out == "Error. Wrong file name struct\n"


def test_main_missing_file(workdir, capsys):
    assert main(["missing.ber"]) == 1
    assert capsys.readouterr().out == "Error opening file\n"


def test_main_reports_open_border(workdir, capsys):
    name = _write(workdir, "level.ber", OPEN_BORDER)
    assert main([name]) == 1
    assert capsys.readouterr().out == "Error. All borders must be 1\n"


def test_main_reports_unreachable(workdir, capsys):
    name = _write(workdir, "level.ber", UNREACHABLE)
    assert main([name]) == 1
    assert capsys.readouterr().out == "Error. You can't get everything\n"
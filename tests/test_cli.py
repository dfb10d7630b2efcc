import json

import pytest

from okey.cli import main, parse_tile_token, parse_wildcard, run_check
from okey.tiles import Color

WINNING = "red1 red2 red3 black7 black8 black9 blue10 blue11 blue12 yellow2 yellow3 yellow4 red5 red5".split()


def test_parse_tile_token():
    tile = parse_tile_token("Black-12", 4)
    assert (tile.id, tile.value, tile.color) == (4, 12, Color.BLACK)
    assert parse_tile_token("joker", 9).is_special_joker
    assert parse_tile_token("yellow1", 1).value == 1


@pytest.mark.parametrize("token", ["red", "red14", "red0", "purple3", "5"])
def test_parse_tile_token_rejects(token):
    with pytest.raises(ValueError):
        parse_tile_token(token, 1)


def test_parse_wildcard():
    wildcard = parse_wildcard("blue-8")
    assert (wildcard.color, wildcard.value) == (Color.BLUE, 8)
    with pytest.raises(ValueError):
        parse_wildcard("joker")


def test_run_check():
    lines = run_check("red5", WINNING)
    assert lines[0] == "winning hand"
    assert len(lines) == 5
    assert run_check("red5", WINNING[:-1] + ["black13"]) == ["not a winning hand"]


def test_main_check_exit_codes(capsys):
    assert main(["check", "--wildcard", "red5", *WINNING]) == 0
    assert capsys.readouterr().out.startswith("winning hand")
    assert main(["check", "--wildcard", "red5", *WINNING[:13]]) == 1
    assert capsys.readouterr().out.strip() == "not a winning hand"


def test_main_deal_prints_view(capsys):
    assert main(["deal", "--seed", "7", "--player", "1"]) == 0
    view = json.loads(capsys.readouterr().out)
    assert view["perspective"] == 1
    assert view["phase"] == "playing"
    assert view["hand_counts"] == [15, 14, 14, 14]
    assert len(view["rack"]) == 30

    assert main(["deal", "--seed", "7", "--player", "1"]) == 0
    assert json.loads(capsys.readouterr().out) == view


@pytest.mark.parametrize(
    "argv",
    [
        ["deal", "--player", "9"],
        ["check", "--wildcard", "red5", "red1", "purple2"],
        ["check", "--wildcard", "joker", *WINNING],
        ["check", "--wildcard", "red5", "red14"],
    ],
)
def test_main_reports_bad_input_as_usage_error(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2
    assert "error:" in capsys.readouterr().err

import pytest

from okey.deck import create_deck
from okey.game import initialize_round
from okey.tiles import Color

COLORS = {"r": Color.RED, "k": Color.BLACK, "b": Color.BLUE, "y": Color.YELLOW}


def _take(pool, code):
    for index, tile in enumerate(pool):
        if code == "J" and tile.is_special_joker:
            return pool.pop(index)
        if code != "J" and tile.color is COLORS[code[0]] and tile.value == int(code[1:]):
            return pool.pop(index)
    raise LookupError(f"No tile {code} left in the deck.")


def rigged_deck(starter_codes, indicator_code):
    """Order a full deck so that the starter is dealt ``starter_codes`` in slot order."""
    pool = create_deck()
    indicator = _take(pool, indicator_code)
    starter = [_take(pool, code) for code in starter_codes]
    return pool + list(reversed(starter)) + [indicator]


@pytest.fixture
def deal():
    def _deal(starter_codes, indicator_code, **kwargs):
        return initialize_round(deck=rigged_deck(starter_codes, indicator_code), **kwargs)

    return _deal

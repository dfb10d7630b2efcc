"""Deck creation and shuffling utilities for Okey."""

from __future__ import annotations

from random import Random
from typing import List, Optional, Sequence

from .tiles import COLOR_ORDER, JOKER_VALUE, MAX_VALUE, MIN_VALUE, Tile

COPIES_PER_KIND = 2
SPECIAL_JOKERS = 2
DECK_SIZE = len(COLOR_ORDER) * MAX_VALUE * COPIES_PER_KIND + SPECIAL_JOKERS


def create_deck() -> List[Tile]:
    """Return the ordered 106-tile deck: two copies of every colour/value, then the jokers."""
    tiles: List[Tile] = []
    next_id = 1
    for color in COLOR_ORDER:
        for value in range(MIN_VALUE, MAX_VALUE + 1):
            for _ in range(COPIES_PER_KIND):
                tiles.append(Tile(next_id, value, color))
                next_id += 1
    for _ in range(SPECIAL_JOKERS):
        tiles.append(Tile(next_id, JOKER_VALUE, None, is_special_joker=True))
        next_id += 1
    return tiles


def shuffle(tiles: Sequence[Tile], rng: Optional[Random] = None) -> List[Tile]:
    """Return a uniformly shuffled copy of ``tiles`` (Fisher-Yates from the end)."""
    if rng is None:
        rng = Random()
    shuffled = list(tiles)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled

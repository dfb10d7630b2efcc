"""Tile-related data structures and helpers for Okey."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Mapping, Optional, Tuple

MIN_VALUE = 1
MAX_VALUE = 13
JOKER_VALUE = 0


class Color(Enum):
    RED = auto()
    BLACK = auto()
    BLUE = auto()
    YELLOW = auto()

    def __str__(self) -> str:
        return self.name.lower()


# Colour order used for dealing the canonical deck and for sorting racks.
COLOR_ORDER: list[Color] = [Color.RED, Color.BLACK, Color.BLUE, Color.YELLOW]

COLOR_RANK: dict[Color, int] = {color: index for index, color in enumerate(COLOR_ORDER)}


def color_from_name(name: str) -> Color:
    try:
        return Color[name.strip().upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown colour: {name!r}") from exc


@dataclass(frozen=True)
class Tile:
    """Immutable representation of a physical tile."""

    id: int
    value: int
    color: Optional[Color]
    is_special_joker: bool = False

    def kind(self) -> Tuple[Optional[Color], int]:
        return self.color, self.value


@dataclass(frozen=True)
class WildcardDefinition:
    """The (colour, value) pair acting as the round's wildcard."""

    color: Color
    value: int

    def matches(self, tile: Tile) -> bool:
        """Return True for a realized wildcard: a numbered tile of this kind."""
        return not tile.is_special_joker and tile.color is self.color and tile.value == self.value

    def is_budget_tile(self, tile: Tile) -> bool:
        """Return True if the tile may substitute for a missing meld member."""
        return tile.is_special_joker or self.matches(tile)


def next_value(value: int) -> int:
    return MIN_VALUE if value == MAX_VALUE else value + 1


def derive_wildcard(
    indicator: Tile,
    *,
    fallback: Tuple[Color, int] = (Color.RED, 1),
) -> WildcardDefinition:
    """Return the wildcard revealed by the indicator: same colour, one value up."""
    if indicator.is_special_joker or indicator.color is None:
        color, value = fallback
        return WildcardDefinition(color, value)
    return WildcardDefinition(indicator.color, next_value(indicator.value))


def tile_sort_key(tile: Tile) -> Tuple[int, int, int]:
    if tile.color is None:
        return len(COLOR_ORDER), tile.value, tile.id
    return COLOR_RANK[tile.color], tile.value, tile.id


def serialize_tile(tile: Tile) -> dict:
    return {
        "id": tile.id,
        "value": tile.value,
        "color": str(tile.color) if tile.color is not None else None,
        "special_joker": tile.is_special_joker,
    }


def deserialize_tile(payload: Mapping) -> Tile:
    """Rebuild a tile from ``serialize_tile`` output, raising ValueError on bad input."""
    try:
        tile_id = int(payload["id"])
        value = int(payload["value"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed tile payload: {payload!r}") from exc
    special = payload.get("special_joker", False)
    if not isinstance(special, bool):
        raise ValueError("special_joker must be a boolean.")
    color_name = payload.get("color")
    if special:
        if color_name is not None or value != JOKER_VALUE:
            raise ValueError("Special jokers carry no colour and value 0.")
        return Tile(tile_id, JOKER_VALUE, None, True)
    if not isinstance(color_name, str):
        raise ValueError("Numbered tiles must carry a colour name.")
    if not MIN_VALUE <= value <= MAX_VALUE:
        raise ValueError(f"Tile value {value} out of range.")
    return Tile(tile_id, value, color_from_name(color_name))


def tile_label(tile: Tile) -> str:
    if tile.is_special_joker:
        return "Joker"
    assert tile.color is not None
    return f"{tile.color.name.title()} {tile.value}"


def wildcard_label(wildcard: WildcardDefinition) -> str:
    return f"{wildcard.color.name.title()} {wildcard.value}"

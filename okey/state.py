"""Round state for Okey."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import List, Optional, Tuple

from .rack import Rack
from .rules_schema import DEFAULT_RULES, RuleSet
from .tiles import Tile, WildcardDefinition

NUM_PLAYERS = 4


class Phase(Enum):
    DEALING = auto()
    PLAYING = auto()
    STACK_EMPTY = auto()
    ROUND_OVER = auto()

    def __str__(self) -> str:
        return self.name.lower()


def next_player(player: int) -> int:
    return (player + 1) % NUM_PLAYERS


def previous_player(player: int) -> int:
    """Return the player whose discard pile ``player`` may draw from."""
    return (player + NUM_PLAYERS - 1) % NUM_PLAYERS


@dataclass(frozen=True)
class RoundState:
    """Immutable snapshot of a round.

    The centre stack and every discard pile keep their top tile at the end of
    the tuple. ``finishing_tile`` holds the tile set aside by a winning finish
    so that the round still accounts for all tiles.
    """

    phase: Phase
    hands: Tuple[Rack, ...]
    center_stack: Tuple[Tile, ...]
    discard_piles: Tuple[Tuple[Tile, ...], ...]
    indicator_tile: Tile
    wildcard: WildcardDefinition
    current_turn: int = 0
    winner: Optional[int] = None
    finishing_tile: Optional[Tile] = None
    rules: RuleSet = field(default=DEFAULT_RULES, compare=False, repr=False)

    def __post_init__(self) -> None:
        if len(self.hands) != NUM_PLAYERS or len(self.discard_piles) != NUM_PLAYERS:
            raise ValueError("RoundState requires exactly four hands and four discard piles.")
        if not 0 <= self.current_turn < NUM_PLAYERS:
            raise ValueError(f"current_turn {self.current_turn} out of range.")

    def hand(self, player: int) -> Rack:
        return self.hands[player]

    def hand_count(self, player: int) -> int:
        return self.hands[player].count()

    def discard_top(self, player: int) -> Optional[Tile]:
        pile = self.discard_piles[player]
        return pile[-1] if pile else None

    def is_over(self) -> bool:
        return self.phase is Phase.ROUND_OVER

    def all_tiles(self) -> List[Tile]:
        """Every tile the round accounts for, wherever it currently sits."""
        tiles: List[Tile] = list(self.center_stack)
        for pile in self.discard_piles:
            tiles.extend(pile)
        for rack in self.hands:
            tiles.extend(rack.tiles())
        tiles.append(self.indicator_tile)
        if self.finishing_tile is not None:
            tiles.append(self.finishing_tile)
        return tiles

    def total_tiles(self) -> int:
        return len(self.all_tiles())

    def with_hand(self, player: int, rack: Rack, **changes) -> "RoundState":
        hands = list(self.hands)
        hands[player] = rack
        return replace(self, hands=tuple(hands), **changes)

    def piles_with(self, player: int, pile: Tuple[Tile, ...]) -> Tuple[Tuple[Tile, ...], ...]:
        piles = list(self.discard_piles)
        piles[player] = pile
        return tuple(piles)

"""Round setup and session orchestration for Okey."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from random import Random
from typing import List, Optional, Sequence

from .deck import DECK_SIZE, create_deck, shuffle
from .rack import Rack
from .rules_schema import DEFAULT_RULES, RuleSet
from .state import NUM_PLAYERS, Phase, RoundState
from .tiles import Tile, derive_wildcard, tile_label, wildcard_label

logger = logging.getLogger(__name__)


def initialize_round(
    *,
    rng: Optional[Random] = None,
    deck: Optional[Sequence[Tile]] = None,
    rules: Optional[RuleSet] = None,
) -> RoundState:
    """Shuffle, reveal the indicator, deal and return the opening state.

    A caller-supplied ``deck`` is used in the given order without shuffling.
    Tiles are taken from the end of the sequence: first the indicator, then
    the starter's hand, then the other three hands. What remains is the
    centre stack, whose top is its last tile.
    """
    rules = rules or DEFAULT_RULES
    if deck is not None:
        tiles = list(deck)
    else:
        tiles = shuffle(create_deck(), rng)
    if len(tiles) != DECK_SIZE:
        raise ValueError(f"Deck must contain exactly {DECK_SIZE} tiles.")

    indicator = tiles.pop()
    wildcard = derive_wildcard(indicator, fallback=rules.indicator_fallback.as_pair())

    hands: List[Rack] = []
    for player in range(NUM_PLAYERS):
        size = rules.drawn_hand_size if player == 0 else rules.hand_size
        dealt = [tiles.pop() for _ in range(size)]
        hands.append(Rack.from_tiles(dealt, size=rules.rack_size))

    state = RoundState(
        phase=Phase.DEALING,
        hands=tuple(hands),
        center_stack=tuple(tiles),
        discard_piles=((),) * NUM_PLAYERS,
        indicator_tile=indicator,
        wildcard=wildcard,
        current_turn=0,
        winner=None,
        rules=rules,
    )
    logger.info(
        "Dealt round: indicator %s, wildcard %s, %d tiles in the centre",
        tile_label(indicator),
        wildcard_label(wildcard),
        len(state.center_stack),
    )
    return replace(state, phase=Phase.PLAYING)


@dataclass
class OkeySession:
    """Own the current round and remember how earlier rounds ended."""

    seed: Optional[int] = None
    rules: RuleSet = DEFAULT_RULES
    rng: Random = field(init=False)
    current_round: Optional[RoundState] = field(default=None, init=False)
    outcomes: List[Optional[int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.rng = Random(self.seed)

    def start_round(self) -> RoundState:
        """Deal a fresh round, recording the outcome of a finished one."""
        if self.current_round is not None and self.current_round.is_over():
            self.outcomes.append(self.current_round.winner)
        self.current_round = initialize_round(rng=self.rng, rules=self.rules)
        return self.current_round

    def update(self, state: RoundState) -> RoundState:
        if self.current_round is None:
            raise RuntimeError("No active round.")
        self.current_round = state
        return state

    def rounds_played(self) -> int:
        finished = 1 if self.current_round is not None and self.current_round.is_over() else 0
        return len(self.outcomes) + finished

    def history(self) -> List[Optional[int]]:
        if self.current_round is not None and self.current_round.is_over():
            return self.outcomes + [self.current_round.winner]
        return list(self.outcomes)

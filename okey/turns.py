"""Turn state machine: validate a player action and produce the next round state.

Every ``apply_*`` function checks all of its preconditions before building
anything, then returns a new ``RoundState``. A rejected action raises one of
the errors in ``okey.errors`` and the input state is left as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from random import Random
from typing import Iterable, List, Optional

from .deck import shuffle
from .errors import (
    EmptySource,
    InvalidMeld,
    InvalidPhase,
    InvalidSlot,
    InvalidTileCount,
    InvalidTurn,
)
from .melds import is_winning_hand
from .state import NUM_PLAYERS, Phase, RoundState, next_player, previous_player
from .tiles import Tile, tile_label

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    DRAW = "draw"
    DRAW_FROM_DISCARD = "draw_from_discard"
    MOVE = "move"
    AUTO_SORT = "auto_sort"
    DISCARD = "discard"
    FINISH = "finish"
    RESHUFFLE = "reshuffle"
    END_TIE = "end_tie"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    player: Optional[int] = None
    slot: Optional[int] = None
    target: Optional[int] = None

    @classmethod
    def draw(cls, player: int, slot: Optional[int] = None) -> "Action":
        return cls(ActionKind.DRAW, player=player, slot=slot)

    @classmethod
    def draw_from_discard(cls, player: int, slot: Optional[int] = None) -> "Action":
        return cls(ActionKind.DRAW_FROM_DISCARD, player=player, slot=slot)

    @classmethod
    def move(cls, player: int, src: int, dst: int) -> "Action":
        return cls(ActionKind.MOVE, player=player, slot=src, target=dst)

    @classmethod
    def auto_sort(cls, player: int) -> "Action":
        return cls(ActionKind.AUTO_SORT, player=player)

    @classmethod
    def discard(cls, player: int, slot: int) -> "Action":
        return cls(ActionKind.DISCARD, player=player, slot=slot)

    @classmethod
    def finish(cls, player: int, slot: int) -> "Action":
        return cls(ActionKind.FINISH, player=player, slot=slot)

    @classmethod
    def reshuffle(cls) -> "Action":
        return cls(ActionKind.RESHUFFLE)

    @classmethod
    def end_tie(cls) -> "Action":
        return cls(ActionKind.END_TIE)


# Validation helpers --------------------------------------------------------


def _require_player(player: int) -> None:
    if not 0 <= player < NUM_PLAYERS:
        raise InvalidTurn(f"Unknown player {player}.")


def _require_phase(state: RoundState, *allowed: Phase) -> None:
    if state.phase not in allowed:
        names = ", ".join(str(phase) for phase in allowed)
        raise InvalidPhase(f"Action not allowed in phase {state.phase}. Expected {names}.")


def _require_turn(state: RoundState, player: int) -> None:
    _require_player(player)
    if player != state.current_turn:
        raise InvalidTurn(f"Not player {player}'s turn; player {state.current_turn} is to act.")


def _require_count(state: RoundState, player: int, expected: int) -> None:
    count = state.hand_count(player)
    if count != expected:
        raise InvalidTileCount(f"Player {player} holds {count} tiles; this action needs {expected}.")


def _require_occupied(state: RoundState, player: int, slot: int) -> None:
    if not state.hand(player).is_occupied(slot):
        raise InvalidSlot(f"Slot {slot} is empty.")


def _require_target(state: RoundState, player: int, slot: Optional[int]) -> None:
    # Range check only; a taken slot falls back to the nearest free one.
    if slot is not None:
        state.hand(player).check_slot(slot)


# Actions -------------------------------------------------------------------


def apply_draw(state: RoundState, player: int, slot: Optional[int] = None) -> RoundState:
    """Take the top tile of the centre stack into the player's rack."""
    _require_phase(state, Phase.PLAYING)
    _require_turn(state, player)
    _require_count(state, player, state.rules.hand_size)
    _require_target(state, player, slot)
    if not state.center_stack:
        raise EmptySource("The centre stack is empty.")

    tile = state.center_stack[-1]
    stack = state.center_stack[:-1]
    phase = Phase.STACK_EMPTY if not stack else state.phase
    rack = state.hand(player).with_tile(tile, slot)
    logger.debug("Player %d drew %s from the centre (%d left)", player, tile_label(tile), len(stack))
    if phase is Phase.STACK_EMPTY:
        logger.info("Centre stack exhausted")
    return state.with_hand(player, rack, center_stack=stack, phase=phase)


def apply_draw_from_discard(state: RoundState, player: int, slot: Optional[int] = None) -> RoundState:
    """Take the top tile of the previous player's discard pile."""
    _require_phase(state, Phase.PLAYING)
    _require_turn(state, player)
    _require_count(state, player, state.rules.hand_size)
    _require_target(state, player, slot)
    source = previous_player(state.current_turn)
    pile = state.discard_piles[source]
    if not pile:
        raise EmptySource(f"Discard pile of player {source} is empty.")

    tile = pile[-1]
    rack = state.hand(player).with_tile(tile, slot)
    logger.debug("Player %d took %s from player %d's discards", player, tile_label(tile), source)
    return state.with_hand(player, rack, discard_piles=state.piles_with(source, pile[:-1]))


def apply_move(state: RoundState, player: int, src: int, dst: int) -> RoundState:
    """Move a tile to another slot of the same rack, swapping with any occupant."""
    _require_player(player)
    rack = state.hand(player).swapped(src, dst)
    return state.with_hand(player, rack)


def apply_auto_sort(state: RoundState, player: int) -> RoundState:
    """Rearrange the player's rack into canonical order."""
    _require_player(player)
    rack = state.hand(player).sorted(state.wildcard, state.rules.shelf_size)
    return state.with_hand(player, rack)


def apply_discard(state: RoundState, player: int, slot: int) -> RoundState:
    """Put a tile on the player's own discard pile and pass the turn."""
    _require_phase(state, Phase.PLAYING)
    _require_turn(state, player)
    _require_count(state, player, state.rules.drawn_hand_size)
    _require_occupied(state, player, slot)

    rack, tile = state.hand(player).without(slot)
    pile = state.discard_piles[player] + (tile,)
    logger.debug("Player %d discarded %s", player, tile_label(tile))
    return state.with_hand(
        player,
        rack,
        discard_piles=state.piles_with(player, pile),
        current_turn=next_player(state.current_turn),
    )


def apply_finish(state: RoundState, player: int, slot: int) -> RoundState:
    """Set aside the tile at ``slot`` and win with the remaining hand."""
    _require_phase(state, Phase.PLAYING, Phase.STACK_EMPTY)
    _require_turn(state, player)
    _require_count(state, player, state.rules.drawn_hand_size)
    _require_occupied(state, player, slot)

    rack, tile = state.hand(player).without(slot)
    if not is_winning_hand(rack.tiles(), state.wildcard, state.rules):
        raise InvalidMeld(f"Player {player}'s hand does not split into runs and sets.")

    logger.info("Player %d finished the round, setting aside %s", player, tile_label(tile))
    return state.with_hand(player, rack, finishing_tile=tile, phase=Phase.ROUND_OVER, winner=player)


def apply_reshuffle(state: RoundState, rng: Optional[Random] = None) -> RoundState:
    """Turn every discard pile into a fresh centre stack.

    With nothing to reshuffle the round cannot continue and ends in a tie.
    """
    _require_phase(state, Phase.STACK_EMPTY)
    collected: List[Tile] = [tile for pile in state.discard_piles for tile in pile]
    if not collected:
        logger.info("No discards to reshuffle; round ends in a tie")
        return replace(state, phase=Phase.ROUND_OVER, winner=None)

    stack = tuple(shuffle(collected, rng))
    logger.info("Reshuffled %d discarded tiles into the centre", len(stack))
    return replace(
        state,
        center_stack=stack,
        discard_piles=((),) * NUM_PLAYERS,
        phase=Phase.PLAYING,
    )


def apply_end_tie(state: RoundState) -> RoundState:
    """End a stalled round without a winner."""
    _require_phase(state, Phase.STACK_EMPTY)
    logger.info("Round ended in a tie")
    return replace(state, phase=Phase.ROUND_OVER, winner=None)


# Dispatch ------------------------------------------------------------------


def apply_action(state: RoundState, action: Action, rng: Optional[Random] = None) -> RoundState:
    kind = action.kind
    if kind is ActionKind.RESHUFFLE:
        return apply_reshuffle(state, rng)
    if kind is ActionKind.END_TIE:
        return apply_end_tie(state)

    if action.player is None:
        raise InvalidTurn(f"Action {kind.value} needs a player.")
    if kind is ActionKind.DRAW:
        return apply_draw(state, action.player, action.slot)
    if kind is ActionKind.DRAW_FROM_DISCARD:
        return apply_draw_from_discard(state, action.player, action.slot)
    if kind is ActionKind.AUTO_SORT:
        return apply_auto_sort(state, action.player)

    if action.slot is None:
        raise InvalidSlot(f"Action {kind.value} needs a slot.")
    if kind is ActionKind.MOVE:
        if action.target is None:
            raise InvalidSlot("Move needs a target slot.")
        return apply_move(state, action.player, action.slot, action.target)
    if kind is ActionKind.DISCARD:
        return apply_discard(state, action.player, action.slot)
    if kind is ActionKind.FINISH:
        return apply_finish(state, action.player, action.slot)
    raise ValueError(f"Unknown action kind {kind!r}")


def replay(state: RoundState, actions: Iterable[Action], rng: Optional[Random] = None) -> RoundState:
    """Fold a sequence of actions over a state."""
    for action in actions:
        state = apply_action(state, action, rng)
    return state


def available_actions(state: RoundState, player: int) -> List[ActionKind]:
    """Return the kinds of action ``player`` could currently take.

    Slot-dependent checks (which tile to discard, whether a particular finish
    validates) are left to the action itself.
    """
    _require_player(player)
    kinds: List[ActionKind] = []
    count = state.hand_count(player)
    if count:
        kinds.extend([ActionKind.MOVE, ActionKind.AUTO_SORT])

    if state.phase is Phase.STACK_EMPTY:
        kinds.extend([ActionKind.RESHUFFLE, ActionKind.END_TIE])
    if player != state.current_turn:
        return kinds

    if state.phase is Phase.PLAYING and count == state.rules.hand_size:
        if state.center_stack:
            kinds.append(ActionKind.DRAW)
        if state.discard_piles[previous_player(player)]:
            kinds.append(ActionKind.DRAW_FROM_DISCARD)
    if count == state.rules.drawn_hand_size:
        if state.phase is Phase.PLAYING:
            kinds.append(ActionKind.DISCARD)
        if state.phase in (Phase.PLAYING, Phase.STACK_EMPTY):
            kinds.append(ActionKind.FINISH)
    return kinds

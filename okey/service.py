"""Convenience service layer for UI and network callers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from . import turns
from .errors import ActionError
from .game import OkeySession
from .melds import find_winning_partition
from .state import NUM_PLAYERS, RoundState
from .tiles import serialize_tile, tile_label, wildcard_label

logger = logging.getLogger(__name__)


@dataclass
class PileView:
    owner: int
    size: int
    top: Optional[dict]
    top_label: Optional[str]


@dataclass
class RoundView:
    phase: str
    perspective: int
    current_turn: int
    winner: Optional[int]
    indicator: dict
    indicator_label: str
    wildcard: dict
    wildcard_label: str
    rack: list[Optional[dict]]
    rack_labels: list[Optional[str]]
    hand_counts: list[int]
    center_size: int
    discard_piles: list[PileView]
    legal_actions: list[str]
    winning_melds: list[str]


@dataclass
class SessionView:
    rounds_played: int
    history: list[Optional[int]]
    round: Optional[RoundView]


class RoundService:
    """Facade around OkeySession for UI consumers."""

    def __init__(self, session: Optional[OkeySession] = None) -> None:
        self.session = session or OkeySession()

    # Session lifecycle -------------------------------------------------

    def start_new_round(self, perspective: int = 0) -> RoundView:
        self.session.start_round()
        return self.get_round_view(perspective)

    def has_active_round(self) -> bool:
        return self.session.current_round is not None

    # Actions -----------------------------------------------------------

    def draw(self, player: int, slot: Optional[int] = None) -> RoundView:
        return self._apply("draw", player, lambda state: turns.apply_draw(state, player, slot))

    def draw_from_discard(self, player: int, slot: Optional[int] = None) -> RoundView:
        return self._apply("draw_from_discard", player, lambda state: turns.apply_draw_from_discard(state, player, slot))

    def move(self, player: int, src: int, dst: int) -> RoundView:
        return self._apply("move", player, lambda state: turns.apply_move(state, player, src, dst))

    def auto_sort(self, player: int) -> RoundView:
        return self._apply("auto_sort", player, lambda state: turns.apply_auto_sort(state, player))

    def discard(self, player: int, slot: int) -> RoundView:
        return self._apply("discard", player, lambda state: turns.apply_discard(state, player, slot))

    def finish(self, player: int, slot: int) -> RoundView:
        return self._apply("finish", player, lambda state: turns.apply_finish(state, player, slot))

    def reshuffle(self, perspective: int = 0) -> RoundView:
        rng = self.session.rng
        return self._apply("reshuffle", perspective, lambda state: turns.apply_reshuffle(state, rng))

    def end_tie(self, perspective: int = 0) -> RoundView:
        return self._apply("end_tie", perspective, turns.apply_end_tie)

    # Views -------------------------------------------------------------

    def get_session_view(self, perspective: int = 0) -> SessionView:
        return SessionView(
            rounds_played=self.session.rounds_played(),
            history=self.session.history(),
            round=self.get_round_view(perspective) if self.has_active_round() else None,
        )

    def get_round_view(self, perspective: int = 0) -> RoundView:
        state = self._require_round()
        if not 0 <= perspective < NUM_PLAYERS:
            raise ValueError(f"Unknown player {perspective}.")
        rack = state.hand(perspective)

        piles = []
        for owner, pile in enumerate(state.discard_piles):
            top = state.discard_top(owner)
            piles.append(
                PileView(
                    owner=owner,
                    size=len(pile),
                    top=serialize_tile(top) if top is not None else None,
                    top_label=tile_label(top) if top is not None else None,
                )
            )

        return RoundView(
            phase=str(state.phase),
            perspective=perspective,
            current_turn=state.current_turn,
            winner=state.winner,
            indicator=serialize_tile(state.indicator_tile),
            indicator_label=tile_label(state.indicator_tile),
            wildcard={"color": str(state.wildcard.color), "value": state.wildcard.value},
            wildcard_label=wildcard_label(state.wildcard),
            rack=[serialize_tile(tile) if tile is not None else None for tile in rack.slots],
            rack_labels=[tile_label(tile) if tile is not None else None for tile in rack.slots],
            hand_counts=[state.hand_count(player) for player in range(NUM_PLAYERS)],
            center_size=len(state.center_stack),
            discard_piles=piles,
            legal_actions=[kind.value for kind in turns.available_actions(state, perspective)],
            winning_melds=self._winning_melds(state),
        )

    # Helpers -----------------------------------------------------------

    def _apply(self, name: str, player: int, action: Callable[[RoundState], RoundState]) -> RoundView:
        state = self._require_round()
        try:
            new_state = action(state)
        except ActionError as exc:
            logger.debug("Rejected %s by player %d: %s", name, player, exc)
            raise
        self.session.update(new_state)
        return self.get_round_view(player)

    def _winning_melds(self, state: RoundState) -> list[str]:
        if state.winner is None:
            return []
        partition = find_winning_partition(state.hand(state.winner).tiles(), state.wildcard, state.rules)
        return [meld.describe() for meld in partition or []]

    def _require_round(self) -> RoundState:
        if self.session.current_round is None:
            raise RuntimeError("No active round.")
        return self.session.current_round

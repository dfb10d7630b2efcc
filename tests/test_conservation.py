from random import Random

import pytest

from okey.deck import DECK_SIZE
from okey.errors import InvalidMeld
from okey.game import initialize_round
from okey.state import NUM_PLAYERS
from okey.turns import Action, ActionKind, apply_action, available_actions


def choose_action(state, rng):
    player = state.current_turn
    kinds = [kind for kind in available_actions(state, player) if kind is not ActionKind.END_TIE]
    kind = rng.choice(kinds)
    occupied = [slot for slot, tile in enumerate(state.hand(player).slots) if tile is not None]
    rack_size = len(state.hand(player))

    if kind is ActionKind.DRAW:
        return Action.draw(player, rng.choice([None, rng.randrange(rack_size)]))
    if kind is ActionKind.DRAW_FROM_DISCARD:
        return Action.draw_from_discard(player)
    if kind is ActionKind.MOVE:
        return Action.move(player, rng.choice(occupied), rng.randrange(rack_size))
    if kind is ActionKind.AUTO_SORT:
        return Action.auto_sort(player)
    if kind is ActionKind.DISCARD:
        return Action.discard(player, rng.choice(occupied))
    if kind is ActionKind.FINISH:
        return Action.finish(player, rng.choice(occupied))
    return Action.reshuffle()


def check_invariants(state):
    tiles = state.all_tiles()
    assert len(tiles) == DECK_SIZE
    assert len({tile.id for tile in tiles}) == DECK_SIZE

    counts = [state.hand_count(player) for player in range(NUM_PLAYERS)]
    if state.is_over():
        if state.winner is not None:
            assert counts[state.winner] == state.rules.hand_size
        return
    for player, count in enumerate(counts):
        if player == state.current_turn:
            assert count in (state.rules.hand_size, state.rules.drawn_hand_size)
        else:
            assert count == state.rules.hand_size


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_random_play_conserves_tiles(seed):
    rng = Random(seed)
    state = initialize_round(rng=Random(seed))
    check_invariants(state)
    seen = set()

    for _ in range(600):
        if state.is_over():
            break
        action = choose_action(state, rng)
        try:
            state = apply_action(state, action, rng)
        except InvalidMeld:
            continue
        seen.add(action.kind)
        check_invariants(state)

    assert {ActionKind.DRAW, ActionKind.DISCARD} <= seen

from dataclasses import replace
from random import Random

import pytest

from okey.deck import create_deck
from okey.game import OkeySession, initialize_round
from okey.rules_schema import RuleSet
from okey.state import Phase
from okey.tiles import Color, WildcardDefinition


def test_initial_deal_counts():
    state = initialize_round(rng=Random(3))
    assert state.phase is Phase.PLAYING
    assert state.current_turn == 0
    assert state.winner is None
    assert [state.hand_count(player) for player in range(4)] == [15, 14, 14, 14]
    assert len(state.center_stack) == 48
    assert state.discard_piles == ((), (), (), ())
    assert state.total_tiles() == 106
    assert len({tile.id for tile in state.all_tiles()}) == 106


def test_dealt_tiles_fill_leading_slots():
    state = initialize_round(rng=Random(3))
    starter = state.hand(0)
    assert all(starter.is_occupied(slot) for slot in range(15))
    assert not any(starter.is_occupied(slot) for slot in range(15, 30))
    other = state.hand(2)
    assert all(other.is_occupied(slot) for slot in range(14))
    assert not other.is_occupied(14)


def test_wildcard_derived_from_indicator():
    state = initialize_round(rng=Random(8))
    indicator = state.indicator_tile
    if indicator.is_special_joker:
        assert state.wildcard == WildcardDefinition(Color.RED, 1)
    else:
        expected = 1 if indicator.value == 13 else indicator.value + 1
        assert state.wildcard == WildcardDefinition(indicator.color, expected)


def test_seeded_rounds_are_reproducible():
    assert initialize_round(rng=Random(21)) == initialize_round(rng=Random(21))
    assert initialize_round(rng=Random(21)) != initialize_round(rng=Random(22))


def test_supplied_deck_is_dealt_from_the_end():
    deck = create_deck()
    state = initialize_round(deck=deck)
    assert state.indicator_tile == deck[-1]
    assert state.hand(0).tiles() == list(reversed(deck[-16:-1]))
    assert state.hand(1).tiles() == list(reversed(deck[-30:-16]))
    assert state.center_stack == tuple(deck[:48])
    # The supplied sequence is not consumed.
    assert len(deck) == 106


def test_supplied_deck_must_be_complete():
    with pytest.raises(ValueError):
        initialize_round(deck=create_deck()[:-1])


def test_joker_indicator_uses_fallback(deal):
    state = deal([], "J")
    assert state.indicator_tile.is_special_joker
    assert state.wildcard == WildcardDefinition(Color.RED, 1)

    rules = RuleSet(indicator_fallback={"color": "blue", "value": 12})
    state = deal([], "J", rules=rules)
    assert state.wildcard == WildcardDefinition(Color.BLUE, 12)


def test_indicator_thirteen_wraps(deal):
    state = deal(["k1", "k2"], "y13")
    assert state.wildcard == WildcardDefinition(Color.YELLOW, 1)
    assert [tile.kind() for tile in state.hand(0).tiles()[:2]] == [(Color.BLACK, 1), (Color.BLACK, 2)]


def test_session_records_finished_rounds():
    session = OkeySession(seed=4)
    first = session.start_round()
    assert session.rounds_played() == 0
    assert session.history() == []

    session.update(replace(first, phase=Phase.ROUND_OVER, winner=2))
    assert session.rounds_played() == 1
    assert session.history() == [2]

    second = session.start_round()
    assert second != first
    assert session.history() == [2]
    assert session.rounds_played() == 1


def test_session_update_requires_round():
    session = OkeySession()
    with pytest.raises(RuntimeError):
        session.update(initialize_round(rng=Random(1)))

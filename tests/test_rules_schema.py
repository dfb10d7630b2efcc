import pytest
from pydantic import ValidationError

from okey.game import initialize_round
from okey.melds import is_winning_hand
from okey.rules_schema import DEFAULT_RULES, RuleSet, load_rules
from okey.tiles import Color, Tile, WildcardDefinition


def test_defaults_describe_the_standard_game():
    rules = load_rules()
    assert rules is DEFAULT_RULES
    assert rules.rack_size == 30
    assert rules.shelf_size == 15
    assert rules.hand_size == 14
    assert rules.drawn_hand_size == 15
    assert (rules.runs.min_length, rules.runs.max_length) == (3, 13)
    assert rules.runs.allow_wraparound
    assert (rules.sets.min_size, rules.sets.max_size) == (3, 4)
    assert rules.indicator_fallback.as_pair() == (Color.RED, 1)
    assert rules.meld_search.memoize


def test_load_rules_overrides():
    rules = load_rules({"runs": {"allow_wraparound": False}, "indicator_fallback": {"color": "Yellow", "value": 7}})
    assert rules.runs.allow_wraparound is False
    assert rules.runs.min_length == 3
    assert rules.indicator_fallback.color == "yellow"
    assert rules.indicator_fallback.as_pair() == (Color.YELLOW, 7)


@pytest.mark.parametrize(
    "payload",
    [
        {"runs": {"min_length": 2}},
        {"runs": {"min_length": 6, "max_length": 5}},
        {"runs": {"max_length": 14}},
        {"sets": {"max_size": 5}},
        {"indicator_fallback": {"color": "green"}},
        {"indicator_fallback": {"value": 0}},
        {"rack_size": 14},
        {"rack_size": 31},
        {"hand_size": 27, "rack_size": 30},
    ],
)
def test_invalid_rules_are_rejected(payload):
    with pytest.raises(ValidationError):
        load_rules(payload)


def test_rules_are_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_RULES.hand_size = 10


def test_rules_flow_into_the_round():
    rules = RuleSet(rack_size=45)
    state = initialize_round(rules=rules)
    assert len(state.hand(0)) == 45
    assert state.rules is rules


def test_run_length_bounds_are_respected():
    wildcard = WildcardDefinition(Color.YELLOW, 13)
    tiles = [Tile(index, index, Color.RED) for index in range(1, 8)]
    tiles += [Tile(10 + index, index, Color.BLACK) for index in range(1, 8)]
    assert is_winning_hand(tiles, wildcard)
    strict = load_rules({"runs": {"min_length": 8}})
    assert not is_winning_hand(tiles, wildcard, strict)

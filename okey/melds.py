"""Winning-hand validation.

A hand wins when its tiles split, with nothing left over, into runs (one
colour, consecutive values, optionally wrapping from 13 to 1) and sets (one
value, distinct colours). Realized wildcards and special jokers form a shared
budget that can stand in for any missing member of any meld.

The search takes the lowest remaining tile, which must belong to some meld,
tries every run window and set that contains it, and recurses on whatever is
left. Remaining tiles are kept in an immutable tuple so that sub-searches can
be memoised on the kinds of tiles left and the unused budget.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from itertools import combinations
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from .rules_schema import DEFAULT_RULES, RuleSet, RunConfig, SetConfig
from .tiles import MAX_VALUE, MIN_VALUE, Tile, WildcardDefinition, tile_label, tile_sort_key


class MeldKind(str, Enum):
    RUN = "run"
    SET = "set"


@dataclass(frozen=True)
class Meld:
    """A meld found in a winning hand: real tiles plus wildcard substitutions."""

    kind: MeldKind
    tiles: Tuple[Tile, ...]
    wildcards: int = 0

    def size(self) -> int:
        return len(self.tiles) + self.wildcards

    def describe(self) -> str:
        labels = [tile_label(tile) for tile in self.tiles]
        if self.wildcards:
            labels.append(f"{self.wildcards} wild")
        return f"{self.kind.value}: " + ", ".join(labels)


@lru_cache(maxsize=None)
def run_windows(value: int, min_length: int, max_length: int, allow_wraparound: bool) -> Tuple[Tuple[int, ...], ...]:
    """Return every run (as a tuple of values) that contains ``value``."""
    windows: List[Tuple[int, ...]] = []
    for length in range(min_length, max_length + 1):
        for start in range(MIN_VALUE, MAX_VALUE + 1):
            if not allow_wraparound and start + length - 1 > MAX_VALUE:
                continue
            window = tuple((start - 1 + offset) % MAX_VALUE + 1 for offset in range(length))
            if value in window:
                windows.append(window)
    return tuple(windows)


def split_hand(tiles: Iterable[Tile], wildcard: WildcardDefinition) -> Tuple[List[Tile], int]:
    """Separate the substitution budget from the tiles that must be melded.

    Returns the remaining tiles sorted by (colour, value) and the budget size.
    """
    normal: List[Tile] = []
    budget = 0
    for tile in tiles:
        if wildcard.is_budget_tile(tile):
            budget += 1
        else:
            normal.append(tile)
    normal.sort(key=tile_sort_key)
    return normal, budget


class _PartitionSearch:
    def __init__(self, runs: RunConfig, sets: SetConfig, memoize: bool) -> None:
        self.runs = runs
        self.sets = sets
        self.memoize = memoize
        self._failed: Set[Tuple[Tuple, int]] = set()

    def solve(self, remaining: Tuple[Tile, ...], budget: int) -> Optional[Tuple[Meld, ...]]:
        if not remaining:
            return ()
        key = (tuple(tile.kind() for tile in remaining), budget)
        if self.memoize and key in self._failed:
            return None

        first, rest = remaining[0], remaining[1:]
        for meld, left in self._candidates(first, rest, budget):
            found = self.solve(left, budget - meld.wildcards)
            if found is not None:
                return (meld,) + found

        if self.memoize:
            self._failed.add(key)
        return None

    def _candidates(self, first: Tile, rest: Tuple[Tile, ...], budget: int) -> Iterator[Tuple[Meld, Tuple[Tile, ...]]]:
        yield from self._runs(first, rest, budget)
        yield from self._sets(first, rest, budget)

    def _runs(self, first: Tile, rest: Tuple[Tile, ...], budget: int) -> Iterator[Tuple[Meld, Tuple[Tile, ...]]]:
        windows = run_windows(first.value, self.runs.min_length, self.runs.max_length, self.runs.allow_wraparound)
        tried: Set[Tuple[Tuple[int, ...], int]] = set()
        for window in windows:
            picked = [first]
            left = list(rest)
            missing = 0
            for value in window:
                if value == first.value:
                    continue
                index = next(
                    (i for i, tile in enumerate(left) if tile.color is first.color and tile.value == value),
                    None,
                )
                if index is None:
                    missing += 1
                    if missing > budget:
                        break
                else:
                    picked.append(left.pop(index))
            if missing > budget:
                continue
            signature = (tuple(sorted(tile.value for tile in picked)), missing)
            if signature in tried:
                continue
            tried.add(signature)
            yield Meld(MeldKind.RUN, tuple(picked), missing), tuple(left)

    def _sets(self, first: Tile, rest: Tuple[Tile, ...], budget: int) -> Iterator[Tuple[Meld, Tuple[Tile, ...]]]:
        others: List[int] = []
        colors = {first.color}
        for index, tile in enumerate(rest):
            if tile.value == first.value and tile.color not in colors:
                others.append(index)
                colors.add(tile.color)

        for size in range(self.sets.min_size, self.sets.max_size + 1):
            for count in range(min(len(others), size - 1), -1, -1):
                missing = size - 1 - count
                if missing > budget:
                    break
                for combo in combinations(others, count):
                    members = tuple(rest[index] for index in combo)
                    left = tuple(tile for index, tile in enumerate(rest) if index not in combo)
                    yield Meld(MeldKind.SET, (first,) + members, missing), left


def find_winning_partition(
    tiles: Iterable[Optional[Tile]],
    wildcard: WildcardDefinition,
    rules: Optional[RuleSet] = None,
) -> Optional[List[Meld]]:
    """Return one decomposition of a winning hand, or None if there is none.

    Empty rack slots (``None``) are ignored; the occupied tiles must number
    exactly ``rules.hand_size``.
    """
    rules = rules or DEFAULT_RULES
    hand = [tile for tile in tiles if tile is not None]
    if len(hand) != rules.hand_size:
        return None

    normal, budget = split_hand(hand, wildcard)
    search = _PartitionSearch(rules.runs, rules.sets, rules.meld_search.memoize)
    found = search.solve(tuple(normal), budget)
    if found is None:
        return None
    return list(found)


def is_winning_hand(
    tiles: Iterable[Optional[Tile]],
    wildcard: WildcardDefinition,
    rules: Optional[RuleSet] = None,
) -> bool:
    return find_winning_partition(tiles, wildcard, rules) is not None

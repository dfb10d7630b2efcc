"""Player rack handling: a fixed row of slots, each empty or holding one tile."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidSlot
from .tiles import Tile, WildcardDefinition, tile_sort_key

RACK_SIZE = 30

Slot = Optional[Tile]


@dataclass(frozen=True)
class Rack:
    """Immutable rack; every operation returns a new rack.

    Slot positions only matter for presentation. Rule evaluation looks at the
    occupied tiles alone.
    """

    slots: Tuple[Slot, ...]

    @classmethod
    def empty(cls, size: int = RACK_SIZE) -> "Rack":
        return cls((None,) * size)

    @classmethod
    def from_tiles(cls, tiles: Iterable[Tile], size: int = RACK_SIZE) -> "Rack":
        """Place tiles into the leading slots, leaving the rest empty."""
        placed = list(tiles)
        if len(placed) > size:
            raise InvalidSlot(f"Cannot place {len(placed)} tiles on a {size}-slot rack.")
        return cls(tuple(placed) + (None,) * (size - len(placed)))

    def __len__(self) -> int:
        return len(self.slots)

    def __getitem__(self, slot: int) -> Slot:
        self.check_slot(slot)
        return self.slots[slot]

    def tiles(self) -> List[Tile]:
        return [tile for tile in self.slots if tile is not None]

    def count(self) -> int:
        return sum(1 for tile in self.slots if tile is not None)

    def is_occupied(self, slot: int) -> bool:
        self.check_slot(slot)
        return self.slots[slot] is not None

    def free_slot_near(self, slot: Optional[int] = None) -> int:
        """Return the requested slot if free, else the nearest free one.

        Without a preference the first free slot is returned. Searching
        outwards tries the right-hand neighbour before the left at each
        distance.
        """
        if slot is None:
            for index, tile in enumerate(self.slots):
                if tile is None:
                    return index
            raise InvalidSlot("Rack is full.")

        self.check_slot(slot)
        if self.slots[slot] is None:
            return slot
        for distance in range(1, len(self.slots)):
            right = slot + distance
            left = slot - distance
            if right < len(self.slots) and self.slots[right] is None:
                return right
            if left >= 0 and self.slots[left] is None:
                return left
        raise InvalidSlot("Rack is full.")

    def with_tile(self, tile: Tile, slot: Optional[int] = None) -> "Rack":
        target = self.free_slot_near(slot)
        slots = list(self.slots)
        slots[target] = tile
        return Rack(tuple(slots))

    def without(self, slot: int) -> Tuple["Rack", Tile]:
        """Return the rack with ``slot`` emptied, and the tile that was there."""
        tile = self[slot]
        if tile is None:
            raise InvalidSlot(f"Slot {slot} is empty.")
        slots = list(self.slots)
        slots[slot] = None
        return Rack(tuple(slots)), tile

    def swapped(self, src: int, dst: int) -> "Rack":
        """Move the tile at ``src`` to ``dst``, swapping with whatever is there."""
        if self[src] is None:
            raise InvalidSlot(f"Slot {src} is empty.")
        self.check_slot(dst)
        slots = list(self.slots)
        slots[src], slots[dst] = slots[dst], slots[src]
        return Rack(tuple(slots))

    def sorted(self, wildcard: WildcardDefinition, shelf_size: Optional[int] = None) -> "Rack":
        """Return the canonical arrangement of the occupied tiles.

        Numbered tiles are grouped by colour and ordered by value, followed by
        realized wildcards and then special jokers. Groups are separated by one
        empty slot while the rack has room for it. With ``shelf_size`` a group
        that fits on one shelf is not split across a shelf boundary, as long as
        the whole arrangement still fits.
        """
        groups = canonical_groups(self.tiles(), wildcard)
        placed: Optional[List[Slot]] = None
        if shelf_size:
            placed = _shelf_layout(groups, len(self.slots), shelf_size)
        if placed is None:
            placed = _gapped_layout(groups, len(self.slots))
        return Rack(tuple(placed))

    def check_slot(self, slot: int) -> None:
        if not 0 <= slot < len(self.slots):
            raise InvalidSlot(f"Slot {slot} is outside the rack (0..{len(self.slots) - 1}).")


def canonical_groups(tiles: Sequence[Tile], wildcard: WildcardDefinition) -> List[List[Tile]]:
    """Split tiles into colour groups, then wildcards, then special jokers."""
    numbered: dict = {}
    wilds: List[Tile] = []
    jokers: List[Tile] = []
    for tile in sorted(tiles, key=tile_sort_key):
        if tile.is_special_joker:
            jokers.append(tile)
        elif wildcard.matches(tile):
            wilds.append(tile)
        else:
            numbered.setdefault(tile.color, []).append(tile)
    groups = list(numbered.values())
    if wilds:
        groups.append(wilds)
    if jokers:
        groups.append(jokers)
    return groups


def _gapped_layout(groups: List[List[Tile]], size: int) -> List[Slot]:
    total = sum(len(group) for group in groups)
    use_gaps = total + max(len(groups) - 1, 0) <= size

    placed: List[Slot] = []
    for index, group in enumerate(groups):
        if index and use_gaps:
            placed.append(None)
        placed.extend(group)
    return placed + [None] * (size - len(placed))


def _shelf_layout(groups: List[List[Tile]], size: int, shelf_size: int) -> Optional[List[Slot]]:
    """Place groups shelf by shelf; None if they do not fit that way."""
    placed: List[Slot] = [None] * size
    position = 0
    for index, group in enumerate(groups):
        if index and position % shelf_size:
            position += 1
        end = position + len(group)
        if len(group) <= shelf_size and position // shelf_size != (end - 1) // shelf_size:
            position = (position // shelf_size + 1) * shelf_size
            end = position + len(group)
        if end > size:
            return None
        placed[position:end] = group
        position = end
    return placed

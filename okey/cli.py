"""Command line tools: deal a seeded round or check a hand."""

from __future__ import annotations

import argparse
import json
import logging
import re
from dataclasses import asdict
from typing import List, Optional, Sequence

from .game import OkeySession
from .melds import find_winning_partition
from .service import RoundService
from .state import NUM_PLAYERS
from .tiles import JOKER_VALUE, MAX_VALUE, MIN_VALUE, Tile, WildcardDefinition, color_from_name

TOKEN_PATTERN = re.compile(r"^([a-z]+)-?(\d+)$")


def parse_tile_token(token: str, tile_id: int) -> Tile:
    """Parse ``red5``, ``red-5`` or ``joker`` into a tile."""
    text = token.strip().lower()
    if text == "joker":
        return Tile(tile_id, JOKER_VALUE, None, is_special_joker=True)
    match = TOKEN_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Cannot parse tile {token!r}.")
    value = int(match.group(2))
    if not MIN_VALUE <= value <= MAX_VALUE:
        raise ValueError(f"Tile value {value} out of range.")
    return Tile(tile_id, value, color_from_name(match.group(1)))


def parse_wildcard(token: str) -> WildcardDefinition:
    tile = parse_tile_token(token, 0)
    if tile.is_special_joker or tile.color is None:
        raise ValueError("The wildcard must name a colour and value.")
    return WildcardDefinition(tile.color, tile.value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="okey", description="Okey rules engine tools.")
    parser.add_argument("--verbose", action="store_true", help="Log engine activity to stderr.")
    sub = parser.add_subparsers(dest="command", required=True)

    deal = sub.add_parser("deal", help="Deal a round and print a player's view as JSON.")
    deal.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible deal.")
    deal.add_argument(
        "--player",
        type=int,
        default=0,
        choices=range(NUM_PLAYERS),
        help="Perspective to render (0-3).",
    )

    check = sub.add_parser("check", help="Check whether tiles form a winning hand.")
    check.add_argument("--wildcard", required=True, help="Round wildcard, e.g. red-5.")
    check.add_argument("tiles", nargs="+", help="Tiles such as red1 black12 joker.")
    return parser


def run_deal(seed: Optional[int], player: int) -> str:
    service = RoundService(OkeySession(seed=seed))
    view = service.start_new_round(perspective=player)
    return json.dumps(asdict(view), indent=2)


def run_check(wildcard_token: str, tokens: Sequence[str]) -> List[str]:
    wildcard = parse_wildcard(wildcard_token)
    tiles = [parse_tile_token(token, index) for index, token in enumerate(tokens, start=1)]
    partition = find_winning_partition(tiles, wildcard)
    if partition is None:
        return ["not a winning hand"]
    return ["winning hand"] + [meld.describe() for meld in partition]


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "deal":
        print(run_deal(args.seed, args.player))
        return 0

    try:
        lines = run_check(args.wildcard, args.tiles)
    except ValueError as exc:
        parser.error(str(exc))
    for line in lines:
        print(line)
    return 0 if lines[0] == "winning hand" else 1


if __name__ == "__main__":
    raise SystemExit(main())

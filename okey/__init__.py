"""Core rules engine package for Okey."""

__all__ = [
    "tiles",
    "errors",
    "rules_schema",
    "deck",
    "rack",
    "melds",
    "state",
    "game",
    "turns",
    "service",
    "cli",
]

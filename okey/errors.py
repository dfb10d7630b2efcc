"""Rejection reasons raised by the turn state machine."""

from __future__ import annotations


class ActionError(RuntimeError):
    """Base class for rejected player actions."""


class InvalidTurn(ActionError):
    """Raised when the actor is not the player whose turn it is."""


class InvalidTileCount(ActionError):
    """Raised when the actor's rack holds the wrong number of tiles for the action."""


class EmptySource(ActionError):
    """Raised when the centre stack or the relevant discard pile is empty."""


class InvalidSlot(ActionError):
    """Raised for out-of-range slots or slots whose occupancy does not fit the action."""


class InvalidMeld(ActionError):
    """Raised when a finish is attempted with a hand that does not decompose."""


class InvalidPhase(ActionError):
    """Raised when the round phase does not allow the action."""

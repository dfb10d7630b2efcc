"""Validation schema for Okey rules configuration."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .deck import DECK_SIZE
from .tiles import MAX_VALUE, MIN_VALUE, Color, color_from_name

COLOR_NAMES = ("red", "black", "blue", "yellow")
MAX_SET_SIZE = len(COLOR_NAMES)


def _validate_color(value: str) -> str:
    normalized = value.lower()
    if normalized not in COLOR_NAMES:
        raise ValueError(f"Unknown colour: {value!r}")
    return normalized


class RunConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_length: int = Field(3, ge=3, description="Shortest legal run.")
    max_length: int = Field(MAX_VALUE, le=MAX_VALUE, description="Longest legal run.")
    allow_wraparound: bool = Field(True, description="Whether a run may continue from 13 through 1.")

    @model_validator(mode="after")
    def check_bounds(self) -> "RunConfig":
        if self.max_length < self.min_length:
            raise ValueError("Run max_length must not be below min_length.")
        return self


class SetConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_size: int = Field(3, ge=3, description="Smallest legal set.")
    max_size: int = Field(MAX_SET_SIZE, le=MAX_SET_SIZE, description="Largest legal set, one tile per colour.")

    @model_validator(mode="after")
    def check_bounds(self) -> "SetConfig":
        if self.max_size < self.min_size:
            raise ValueError("Set max_size must not be below min_size.")
        return self


class IndicatorFallback(BaseModel):
    model_config = ConfigDict(frozen=True)

    color: str = Field("red", description="Wildcard colour when the indicator is a special joker.")
    value: int = Field(1, ge=MIN_VALUE, le=MAX_VALUE, description="Wildcard value when the indicator is a special joker.")

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        return _validate_color(value)

    def as_pair(self) -> tuple[Color, int]:
        return color_from_name(self.color), self.value


class MeldSearchConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    memoize: bool = Field(True, description="Remember failed sub-searches while validating a hand.")


class RuleSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    rack_size: int = Field(30, gt=0, description="Slots on a player's rack.")
    shelf_size: int = Field(15, gt=0, description="Slots per rack shelf.")
    hand_size: int = Field(14, gt=0, description="Tiles held between turns.")
    runs: RunConfig = Field(default_factory=RunConfig)
    sets: SetConfig = Field(default_factory=SetConfig)
    indicator_fallback: IndicatorFallback = Field(default_factory=IndicatorFallback)
    meld_search: MeldSearchConfig = Field(default_factory=MeldSearchConfig)

    @model_validator(mode="after")
    def check_rack(self) -> "RuleSet":
        if self.rack_size < self.hand_size + 1:
            raise ValueError("Rack must hold a drawn tile on top of a full hand.")
        if self.rack_size % self.shelf_size != 0:
            raise ValueError("Rack size must be a whole number of shelves.")
        # Four hands, the starter's extra tile and the indicator come out of the deck.
        if 4 * self.hand_size + 2 > DECK_SIZE:
            raise ValueError("Hands do not fit in a single deck.")
        return self

    @property
    def drawn_hand_size(self) -> int:
        return self.hand_size + 1


DEFAULT_RULES = RuleSet()


def load_rules(payload: Optional[Mapping[str, Any]] = None) -> RuleSet:
    """Build a validated RuleSet, falling back to the standard game."""
    if not payload:
        return DEFAULT_RULES
    return RuleSet.model_validate(dict(payload))

"""
Rule set model and normalization of loader output.

The rule configuration file is parsed elsewhere; this module turns the
resulting mappings into frozen RuleSet models, filling any missing or empty
field with the documented defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from colorjong.logic.exceptions import InvalidRuleError

logger = structlog.get_logger()

WILDCARD_COLOR = "any"
DEFAULT_DEALER_CYCLES_PER_SET = 2


class TileKind(BaseModel):
    """A physical tile kind and how many copies of it the wall holds."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    color_id: str
    color_code: str = ""
    copies: int = Field(ge=0)


class Requirement(BaseModel):
    """One clause of a winning pattern: `count` tiles of a name or a color."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    color: str | None = None
    count: int = Field(ge=1)

    @property
    def is_wildcard(self) -> bool:
        return self.name is None and self.color == WILDCARD_COLOR


class WinningPattern(BaseModel):
    """A named, scored pattern (yaku)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    point: int = 0
    requirements: tuple[Requirement, ...] = ()


class RuleSet(BaseModel):
    """Normalized rule set consumed by the engine."""

    model_config = ConfigDict(frozen=True)

    name: str
    hand_size: int = Field(ge=1)
    win_hand_size: int = Field(default=0, ge=0)  # 0 means hand_size + 1
    initial_score: int = 0
    tile_kinds: tuple[TileKind, ...]
    winning_patterns: tuple[WinningPattern, ...]
    dealer_cycles_per_set: int = Field(default=DEFAULT_DEALER_CYCLES_PER_SET, ge=1)

    @model_validator(mode="before")
    @classmethod
    def _default_win_hand_size(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("win_hand_size") and "hand_size" in data:
            return {**data, "win_hand_size": int(data["hand_size"]) + 1}
        return data

    @property
    def total_tiles(self) -> int:
        return sum(kind.copies for kind in self.tile_kinds)

    def color_of(self, name: str) -> str | None:
        """Return the color group of a tile kind id, or None if unknown."""
        for kind in self.tile_kinds:
            if kind.id == name:
                return kind.color_id
        return None


DEFAULT_TILE_KINDS: tuple[TileKind, ...] = (
    TileKind(id="red", label="Red", color_id="red", color_code="#e34b4b", copies=12),
    TileKind(id="blue", label="Blue", color_id="blue", color_code="#3a6fe2", copies=12),
    TileKind(id="green", label="Green", color_id="green", color_code="#3ca36b", copies=12),
    TileKind(id="yellow", label="Yellow", color_id="yellow", color_code="#e2b93b", copies=12),
)

DEFAULT_WINNING_PATTERNS: tuple[WinningPattern, ...] = (
    WinningPattern(
        id="triple-sets-3",
        name="Triple Sets x3",
        point=3,
        requirements=(
            Requirement(color=WILDCARD_COLOR, count=3),
            Requirement(color=WILDCARD_COLOR, count=3),
            Requirement(color=WILDCARD_COLOR, count=3),
        ),
    ),
)

DEFAULT_RULE = RuleSet(
    name="Default",
    hand_size=8,
    initial_score=5,
    tile_kinds=DEFAULT_TILE_KINDS,
    winning_patterns=DEFAULT_WINNING_PATTERNS,
)


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present, non-None value among the given keys."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _normalize_tile_kind(raw: Mapping[str, Any]) -> TileKind:
    kind_id = str(raw["id"])
    return TileKind(
        id=kind_id,
        label=str(_pick(raw, "label") or kind_id),
        color_id=str(_pick(raw, "colorId", "color_id") or kind_id),
        color_code=str(_pick(raw, "colorCode", "color_code", "color") or ""),
        copies=int(_pick(raw, "copies") or 0),
    )


def _normalize_pattern(raw: Mapping[str, Any]) -> WinningPattern:
    requirements = _pick(raw, "requirements", "required") or ()
    return WinningPattern(
        id=str(raw["id"]),
        name=str(_pick(raw, "name") or raw["id"]),
        point=int(_pick(raw, "point", "points") or 0),
        requirements=tuple(
            Requirement(name=req.get("name"), color=req.get("color"), count=int(req["count"]))
            for req in requirements
        ),
    )


def normalize_rule(raw: Mapping[str, Any]) -> RuleSet:
    """
    Build a RuleSet from a loader mapping, falling back to defaults.

    Accepts the camelCase keys of the rule file (handSize, winHandSize,
    initialScore, tiles, yakus) and their snake_case equivalents. Raises
    InvalidRuleError when a present field cannot be used.
    """
    try:
        return _build_rule(raw)
    except (ValidationError, AttributeError, KeyError, TypeError, ValueError) as e:
        raise InvalidRuleError(f"invalid rule {raw.get('name')!r}: {e}") from e


def _build_rule(raw: Mapping[str, Any]) -> RuleSet:
    tiles_raw = _pick(raw, "tiles", "tileKinds", "tile_kinds")
    patterns_raw = _pick(raw, "yakus", "winningPatterns", "winning_patterns")
    hand_size = _pick(raw, "handSize", "hand_size")
    win_hand_size = _pick(raw, "winHandSize", "win_hand_size")
    initial_score = _pick(raw, "initialScore", "initial_score")
    dealer_cycles = _pick(raw, "dealerCyclesPerSet", "dealer_cycles_per_set")

    tile_kinds = tuple(_normalize_tile_kind(t) for t in tiles_raw) if tiles_raw else DEFAULT_TILE_KINDS
    patterns = tuple(_normalize_pattern(p) for p in patterns_raw) if patterns_raw else DEFAULT_WINNING_PATTERNS
    hand_size = int(hand_size) if hand_size is not None else DEFAULT_RULE.hand_size

    return RuleSet(
        name=str(_pick(raw, "name") or DEFAULT_RULE.name),
        hand_size=hand_size,
        win_hand_size=int(win_hand_size) if win_hand_size is not None else hand_size + 1,
        initial_score=int(initial_score) if initial_score is not None else DEFAULT_RULE.initial_score,
        tile_kinds=tile_kinds,
        winning_patterns=patterns,
        dealer_cycles_per_set=int(dealer_cycles) if dealer_cycles is not None else DEFAULT_DEALER_CYCLES_PER_SET,
    )


def _rule_entries(raw: object) -> list[Mapping[str, Any]]:
    if isinstance(raw, list):
        return [r for r in raw if isinstance(r, Mapping)]
    if isinstance(raw, Mapping) and isinstance(raw.get("rules"), list):
        return [r for r in raw["rules"] if isinstance(r, Mapping)]
    return []


def load_rule_sets(raw: object) -> tuple[RuleSet, ...]:
    """
    Normalize every rule entry in loader output.

    Entries may be plain rule mappings or `{name, body}` wrappers. Always
    returns at least one rule set (the default) so the engine can start;
    entries that fail to normalize are skipped.
    """
    rules: list[RuleSet] = []
    for entry in _rule_entries(raw):
        if "body" in entry and "name" in entry:
            body = entry.get("body") or {}
            entry = {**body, "name": entry["name"]}  # noqa: PLW2901
        try:
            rules.append(normalize_rule(entry))
        except InvalidRuleError as e:
            logger.warning("skipping rule entry", name=entry.get("name"), error=str(e))

    if not rules:
        logger.info("no usable rule sets, falling back to default")
        return (DEFAULT_RULE,)
    return tuple(rules)

"""
Winning pattern (yaku) evaluation.

A pattern is a list of requirements over tile-name counts and color-group
counts. Matching order is fixed:

1. name requirements, mirrored onto the color counts so a tile is never
   counted twice;
2. explicit color requirements;
3. wildcard ("any" color) requirements, largest first, each taking the
   smallest remaining color group that still satisfies it (best fit). The
   chosen group is used up entirely.

Tenpai and reach-eligible discards are derived by exhaustive single-tile
perturbation of the same check; hands and patterns are small enough that
this is the intended algorithm.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from colorjong.logic.rules import WinningPattern
from colorjong.logic.tiles import Tile, count_by_color, count_by_name, make_tile

if TYPE_CHECKING:
    from collections.abc import Sequence

    from colorjong.logic.rules import Requirement, RuleSet

WAIT_TILE_SUFFIX = "wait"


class YakuEvaluation(BaseModel):
    """Result of evaluating a hand against every winning pattern."""

    model_config = ConfigDict(frozen=True)

    is_won: bool = False
    achieved_yakus: tuple[WinningPattern, ...] = ()
    best_yaku: WinningPattern | None = None
    total_points: int = 0


def _split_requirements(
    pattern: WinningPattern,
) -> tuple[list[Requirement], list[Requirement], list[int]]:
    """Partition requirements into (name, explicit color, wildcard counts desc)."""
    name_reqs = [req for req in pattern.requirements if req.name]
    color_reqs = [req for req in pattern.requirements if not req.name and req.color and not req.is_wildcard]
    wildcard_counts = sorted((req.count for req in pattern.requirements if req.is_wildcard), reverse=True)
    return name_reqs, color_reqs, wildcard_counts


def _best_fit_group(color_counts: Counter[str], required: int) -> str | None:
    """Return the color with the smallest count >= required (first found on ties)."""
    best_color = None
    best_count = None
    for color, count in color_counts.items():
        if count >= required and (best_count is None or count < best_count):
            best_color = color
            best_count = count
    return best_color


def pattern_achieved(
    name_counts: Counter[str],
    color_counts: Counter[str],
    pattern: WinningPattern,
    rule: RuleSet,
) -> bool:
    """Check whether the counted hand satisfies every requirement of a pattern."""
    names = Counter(name_counts)
    colors = Counter(color_counts)
    name_reqs, color_reqs, wildcard_counts = _split_requirements(pattern)

    for req in name_reqs:
        if names[req.name] < req.count:
            return False
        names[req.name] -= req.count
        color_id = rule.color_of(req.name)
        if color_id is not None:
            if colors[color_id] < req.count:
                return False
            colors[color_id] -= req.count

    for req in color_reqs:
        if colors[req.color] < req.count:
            return False
        colors[req.color] -= req.count

    available = Counter({color: count for color, count in colors.items() if count > 0})
    for required in wildcard_counts:
        color_id = _best_fit_group(available, required)
        if color_id is None:
            return False
        del available[color_id]

    return True


def evaluate_yaku(hand: Sequence[Tile], rule: RuleSet) -> YakuEvaluation:
    """
    Evaluate a hand against all winning patterns.

    The best pattern is the highest-point achieved one (first found on ties);
    the hand scores only the best pattern, never a sum.
    """
    name_counts = count_by_name(hand)
    color_counts = count_by_color(hand)

    achieved = tuple(
        pattern
        for pattern in rule.winning_patterns
        if pattern_achieved(name_counts, color_counts, pattern, rule)
    )
    if not achieved:
        return YakuEvaluation()

    best = achieved[0]
    for pattern in achieved[1:]:
        if pattern.point > best.point:
            best = pattern

    return YakuEvaluation(
        is_won=True,
        achieved_yakus=achieved,
        best_yaku=best,
        total_points=best.point,
    )


def can_win(hand: Sequence[Tile], rule: RuleSet) -> bool:
    name_counts = count_by_name(hand)
    color_counts = count_by_color(hand)
    return any(pattern_achieved(name_counts, color_counts, p, rule) for p in rule.winning_patterns)


def _take_partial(counts: Counter[str], key: str, count: int) -> int:
    taken = min(counts[key], count)
    counts[key] -= taken
    return taken


def missing_for_pattern(
    name_counts: Counter[str],
    color_counts: Counter[str],
    pattern: WinningPattern,
    rule: RuleSet,
) -> int:
    """
    Count how many tiles a hand still lacks for a pattern.

    Same order as pattern_achieved, but every requirement takes what it can
    and adds its shortfall. A wildcard with no sufficient group takes the
    largest remaining group instead.
    """
    names = Counter(name_counts)
    colors = Counter(color_counts)
    name_reqs, color_reqs, wildcard_counts = _split_requirements(pattern)
    missing = 0

    for req in name_reqs:
        taken = _take_partial(names, req.name, req.count)
        missing += req.count - taken
        color_id = rule.color_of(req.name)
        if color_id is not None:
            _take_partial(colors, color_id, taken)

    for req in color_reqs:
        missing += req.count - _take_partial(colors, req.color, req.count)

    available = Counter({color: count for color, count in colors.items() if count > 0})
    for required in wildcard_counts:
        color_id = _best_fit_group(available, required)
        if color_id is None and available:
            color_id = max(available, key=lambda c: available[c])
        if color_id is None:
            missing += required
            continue
        missing += required - min(available[color_id], required)
        del available[color_id]

    return missing


def get_waiting_tiles(hand: Sequence[Tile], rule: RuleSet) -> tuple[str, ...]:
    """
    Return tile kind ids that would complete a pattern.

    Only a hand of exactly win_hand_size - 1 tiles can be waiting.
    """
    if len(hand) != rule.win_hand_size - 1:
        return ()
    waits = []
    for kind in rule.tile_kinds:
        candidate = [*hand, make_tile(kind, WAIT_TILE_SUFFIX)]
        if can_win(candidate, rule):
            waits.append(kind.id)
    return tuple(waits)


def is_tenpai(hand: Sequence[Tile], rule: RuleSet) -> bool:
    """Check if a win_hand_size - 1 hand is one tile away from winning."""
    return len(get_waiting_tiles(hand, rule)) > 0


def get_reach_discards(hand: Sequence[Tile], rule: RuleSet) -> tuple[str, ...]:
    """
    Return ids of tiles whose discard leaves the hand tenpai.

    Only defined for a hand of exactly win_hand_size tiles.
    """
    if len(hand) != rule.win_hand_size:
        return ()
    eligible = []
    for index, tile in enumerate(hand):
        remaining = [*hand[:index], *hand[index + 1 :]]
        if is_tenpai(remaining, rule):
            eligible.append(tile.id)
    return tuple(eligible)

"""
AI discard strategies and the AI player that applies them.

A strategy is a plain function (hand, rule, context, rng) -> tile id or
None. Strategies never see the game state directly; the optional context
carries what is public at the table (discard piles and reach status).
"""

from __future__ import annotations

import random
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from colorjong.logic.actions import Action, DeclareReachAction, DiscardAction
from colorjong.logic.enums import StrategyId
from colorjong.logic.reach import can_declare_reach, declare_reach, get_legal_discards
from colorjong.logic.tiles import Tile, count_by_color, count_by_name
from colorjong.logic.yaku import get_waiting_tiles, missing_for_pattern

if TYPE_CHECKING:
    from colorjong.logic.rules import RuleSet, WinningPattern
    from colorjong.logic.state import GameState

HIGH_SCORE_THRESHOLD = 100_000
TENPAI_SCORE_BASE = 1000


class AIStrategyContext(BaseModel):
    """Public table information a strategy may use."""

    model_config = ConfigDict(frozen=True)

    seat: int | None = None
    discards: Mapping[int, tuple[Tile, ...]] = {}
    last_reach: int | None = None
    is_reached: Mapping[int, bool] = {}

    @classmethod
    def from_state(cls, state: GameState, seat: int) -> AIStrategyContext:
        return cls(
            seat=seat,
            discards=dict(enumerate(state.discards)),
            last_reach=state.last_reach,
            is_reached=dict(enumerate(state.reached)),
        )


Strategy = Callable[[Sequence[Tile], "RuleSet", AIStrategyContext | None, random.Random | None], str | None]


def _without(hand: Sequence[Tile], index: int) -> list[Tile]:
    return [*hand[:index], *hand[index + 1 :]]


def score_hand_for_yakus(
    hand: Sequence[Tile],
    rule: RuleSet,
    patterns: Sequence[WinningPattern] | None = None,
) -> float:
    """Sum point / (missing + 1) over the patterns: closer, richer patterns weigh more."""
    patterns = rule.winning_patterns if patterns is None else patterns
    name_counts = count_by_name(hand)
    color_counts = count_by_color(hand)
    return sum(
        pattern.point / (missing_for_pattern(name_counts, color_counts, pattern, rule) + 1) for pattern in patterns
    )


def minimum_missing(hand: Sequence[Tile], rule: RuleSet) -> int | None:
    """Smallest deficit across all patterns, or None if the rule has no patterns."""
    if not rule.winning_patterns:
        return None
    name_counts = count_by_name(hand)
    color_counts = count_by_color(hand)
    return min(missing_for_pattern(name_counts, color_counts, p, rule) for p in rule.winning_patterns)


def _best_discard(hand: Sequence[Tile], score: Callable[[list[Tile]], float]) -> str | None:
    """Return the id of the discard maximizing score; first maximum in hand order wins."""
    if not hand:
        return None
    best_id = hand[0].id
    best_score = float("-inf")
    for index, tile in enumerate(hand):
        candidate_score = score(_without(hand, index))
        if candidate_score > best_score:
            best_score = candidate_score
            best_id = tile.id
    return best_id


def _random_tile(hand: Sequence[Tile], rng: random.Random | None) -> str | None:
    if not hand:
        return None
    return (rng or random.Random()).choice(hand).id  # noqa: S311


def choose_human(
    hand: Sequence[Tile],
    rule: RuleSet,
    context: AIStrategyContext | None = None,
    rng: random.Random | None = None,
) -> str | None:
    """Human seats never decide automatically."""
    return None


def choose_random(
    hand: Sequence[Tile],
    rule: RuleSet,
    context: AIStrategyContext | None = None,
    rng: random.Random | None = None,
) -> str | None:
    return _random_tile(hand, rng)


def choose_by_yaku_progress(
    hand: Sequence[Tile],
    rule: RuleSet,
    context: AIStrategyContext | None = None,
    rng: random.Random | None = None,
) -> str | None:
    """Discard the tile whose removal keeps the best weighted progress toward all patterns."""
    return _best_discard(hand, lambda remaining: score_hand_for_yakus(remaining, rule))


def choose_by_deal_in_avoidance(
    hand: Sequence[Tile],
    rule: RuleSet,
    context: AIStrategyContext | None = None,
    rng: random.Random | None = None,
) -> str | None:
    """
    Defend against the latest reach declarer.

    Walk that seat's discards from newest to oldest and discard the first
    hand tile sharing a name with one of them. Fall back to yaku progress
    when nobody else has reached or no such tile is held.
    """
    if not hand:
        return None
    reacher = context.last_reach if context is not None else None
    if context is not None and reacher is not None and reacher != context.seat:
        for discarded in reversed(context.discards.get(reacher, ())):
            for tile in hand:
                if tile.name == discarded.name:
                    return tile.id
    return choose_by_yaku_progress(hand, rule, context, rng)


def choose_by_agari_priority(
    hand: Sequence[Tile],
    rule: RuleSet,
    context: AIStrategyContext | None = None,
    rng: random.Random | None = None,
) -> str | None:
    """
    Prefer discards that leave the hand tenpai with the widest wait.

    Non-tenpai options rank below every tenpai one, ordered by the smallest
    deficit across patterns.
    """

    def score(remaining: list[Tile]) -> float:
        waits = get_waiting_tiles(remaining, rule)
        if waits:
            return TENPAI_SCORE_BASE + len(waits)
        return -(minimum_missing(remaining, rule) or 0)

    return _best_discard(hand, score)


def choose_by_high_score_focus(
    hand: Sequence[Tile],
    rule: RuleSet,
    context: AIStrategyContext | None = None,
    rng: random.Random | None = None,
) -> str | None:
    """Yaku progress restricted to high-value patterns; random when the rule has none."""
    if not hand:
        return None
    high_patterns = [p for p in rule.winning_patterns if p.point > HIGH_SCORE_THRESHOLD]
    if not high_patterns:
        return _random_tile(hand, rng)
    return _best_discard(hand, lambda remaining: score_hand_for_yakus(remaining, rule, high_patterns))


STRATEGIES: dict[StrategyId, Strategy] = {
    StrategyId.HUMAN: choose_human,
    StrategyId.RANDOM: choose_random,
    StrategyId.YAKU_PROGRESS: choose_by_yaku_progress,
    StrategyId.AVOID_DEAL_IN: choose_by_deal_in_avoidance,
    StrategyId.AGARI_PRIORITY: choose_by_agari_priority,
    StrategyId.HIGH_SCORE: choose_by_high_score_focus,
}


class AIPlayer:
    """
    AI seat driven by one discard strategy.

    Declares reach whenever the hand allows it, then discards: the drawn
    tile once reached, the strategy's pick among reach-eligible tiles while
    reach is pending, and the strategy's pick otherwise.
    """

    def __init__(
        self,
        strategy: StrategyId = StrategyId.YAKU_PROGRESS,
        rng: random.Random | None = None,
        *,
        auto_reach: bool = True,
    ) -> None:
        self.strategy = strategy
        self.rng = rng or random.Random()  # noqa: S311
        self.auto_reach = auto_reach

    def should_declare_reach(self, state: GameState, seat: int) -> bool:
        return self.auto_reach and can_declare_reach(state, seat)

    def select_discard(self, state: GameState, seat: int) -> str | None:
        """Select a legal discard, or None when the strategy defers to a human."""
        legal = get_legal_discards(state, seat)
        if not legal:
            return None
        if state.reached[seat]:
            return legal[0]

        hand = state.hands[seat]
        context = AIStrategyContext.from_state(state, seat)
        choice = STRATEGIES[self.strategy](hand, state.rule, context, self.rng)
        if choice is None or choice in legal:
            return choice

        # reach pending: rerun the strategy over the eligible tiles only
        candidates = [t for t in hand if t.id in legal]
        choice = STRATEGIES[self.strategy](candidates, state.rule, context, self.rng)
        return choice if choice in legal else legal[0]

    def get_turn_actions(self, state: GameState, seat: int) -> list[Action]:
        """Return the actions to dispatch for this seat's discard phase, in order."""
        actions: list[Action] = []
        if self.strategy == StrategyId.HUMAN:
            return actions
        if self.should_declare_reach(state, seat):
            actions.append(DeclareReachAction(seat=seat))
            # pick the discard against the post-reach restrictions
            state = declare_reach(state, seat)
        discard = self.select_discard(state, seat)
        if discard is not None:
            actions.append(DiscardAction(tile_id=discard, seat=seat))
        return actions

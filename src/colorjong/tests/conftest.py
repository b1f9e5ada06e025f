from __future__ import annotations

from typing import TYPE_CHECKING

from colorjong.logic.enums import Phase
from colorjong.logic.rules import DEFAULT_RULE, RuleSet
from colorjong.logic.state import NUM_SEATS, GameState
from colorjong.logic.tiles import Tile, make_tile, sort_hand
from colorjong.logic.wall import Wall, build_wall

if TYPE_CHECKING:
    from collections.abc import Sequence


# ============================================================================
# Test State Builder Helpers
# ============================================================================


def tile(name: str, copy: int, rule: RuleSet = DEFAULT_RULE) -> Tile:
    """Create the tile `{name}-{copy}` of a rule's tile kind."""
    kind = next(k for k in rule.tile_kinds if k.id == name)
    return make_tile(kind, copy)


def make_hand(rule: RuleSet = DEFAULT_RULE, *, start: int = 1, **counts: int) -> tuple[Tile, ...]:
    """
    Create a sorted hand from per-kind counts, e.g. make_hand(red=3, blue=3).

    Copies are numbered from `start` so several hands can be built without
    id clashes.
    """
    tiles = [tile(name, start + i, rule) for name, count in counts.items() for i in range(count)]
    return sort_hand(tiles)


def create_deal_wall(
    hands: Sequence[Sequence[Tile]],
    draws: Sequence[Tile] = (),
    rule: RuleSet = DEFAULT_RULE,
) -> tuple[Tile, ...]:
    """
    Order a full wall so dealing yields `hands` and the first draws are `draws`.

    Dealing is round-robin, one tile per seat at a time, so tile r of seat s
    sits at position r * 4 + s. Every tile of the rule not named is appended
    after `draws` in build order.
    """
    hand_size = len(hands[0])
    dealt = [hands[seat][r] for r in range(hand_size) for seat in range(NUM_SEATS)]
    used = {t.id for t in (*dealt, *draws)}
    rest = [t for t in build_wall(rule).tiles if t.id not in used]
    return (*dealt, *draws, *rest)


def create_game_state(
    *,
    rule: RuleSet = DEFAULT_RULE,
    hands: Sequence[Sequence[Tile]] | None = None,
    wall: Sequence[Tile] = (),
    discards: Sequence[Sequence[Tile]] | None = None,
    last_drawn: Sequence[str | None] | None = None,
    reached: Sequence[bool] | None = None,
    reach_pending: Sequence[bool] | None = None,
    reach_options: Sequence[Sequence[str]] | None = None,
    last_reach: int | None = None,
    scores: Sequence[int] | None = None,
    dealer: int = 0,
    set_start_dealer: int | None = None,
    dealer_cycles: int = 0,
    hand_number: int = 1,
    set_over: bool = False,
    turn: int = 0,
    phase: Phase = Phase.DRAW,
) -> GameState:
    """Create a mid-hand GameState with sensible defaults for testing."""
    empty: tuple = ((),) * NUM_SEATS
    return GameState(
        rule=rule,
        wall=Wall(tiles=tuple(wall)),
        hands=tuple(sort_hand(h) for h in hands) if hands is not None else empty,
        discards=tuple(tuple(d) for d in discards) if discards is not None else empty,
        last_drawn=tuple(last_drawn) if last_drawn is not None else (None,) * NUM_SEATS,
        reached=tuple(reached) if reached is not None else (False,) * NUM_SEATS,
        reach_pending=tuple(reach_pending) if reach_pending is not None else (False,) * NUM_SEATS,
        reach_options=tuple(tuple(o) for o in reach_options) if reach_options is not None else empty,
        last_reach=last_reach,
        scores=tuple(scores) if scores is not None else (rule.initial_score,) * NUM_SEATS,
        dealer=dealer,
        set_start_dealer=set_start_dealer if set_start_dealer is not None else dealer,
        dealer_cycles=dealer_cycles,
        hand_number=hand_number,
        set_over=set_over,
        turn=turn,
        phase=phase,
    )


def even_color_hands() -> tuple[tuple[Tile, ...], ...]:
    """Four hands holding two tiles of every color; no draw or claim can win against them."""
    return tuple(
        make_hand(start=2 * seat + 1, red=2, blue=2, green=2, yellow=2) for seat in range(NUM_SEATS)
    )

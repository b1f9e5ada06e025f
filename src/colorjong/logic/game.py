"""
Hand initialization and set progression.

A set is a run of hands that ends once the dealer seat has wrapped back to
the set's first dealer `rule.dealer_cycles_per_set` times.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from colorjong.logic.enums import Phase
from colorjong.logic.exceptions import InvalidActionError
from colorjong.logic.rng import create_hand_rng, determine_dealer, generate_seed
from colorjong.logic.state import NUM_SEATS, SEATS, GameState, next_seat
from colorjong.logic.wall import create_wall, create_wall_from_tiles, deal_hands, tiles_remaining
from colorjong.logic.yaku import is_tenpai

if TYPE_CHECKING:
    from collections.abc import Sequence

    from colorjong.logic.tiles import Tile

logger = structlog.get_logger()


def is_new_set(state: GameState) -> bool:
    """A new set starts on the very first hand or after the previous set ended."""
    return state.hand_number == 0 or state.set_over


def start_game(
    state: GameState,
    *,
    seed: str | None = None,
    wall: Sequence[Tile] | None = None,
    dealer: int | None = None,
) -> GameState:
    """
    Deal a new hand.

    On a new set the dealer is drawn uniformly at random (unless given) and
    scores reset to the rule's initial score; otherwise dealer and scores
    carry over from the previous hand. When wall is provided it is dealt
    as-is instead of shuffling (tests/replays).
    """
    if state.phase not in (Phase.IDLE, Phase.END):
        raise InvalidActionError(f"cannot start a hand in phase {state.phase}")
    if dealer is not None and dealer not in SEATS:
        raise InvalidActionError(f"invalid dealer seat {dealer}")

    rule = state.rule
    game_seed = seed or state.seed or generate_seed()
    hand_serial = 0 if seed else state.hand_serial
    try:
        rng = create_hand_rng(game_seed, hand_serial)
    except ValueError as e:
        raise InvalidActionError(f"invalid seed: {e}") from e

    if is_new_set(state):
        first_dealer = dealer if dealer is not None else determine_dealer(rng)
        set_fields = {
            "dealer": first_dealer,
            "set_start_dealer": first_dealer,
            "dealer_cycles": 0,
            "set_over": False,
            "hand_number": 1,
            "scores": (rule.initial_score,) * NUM_SEATS,
        }
        log_line = f"New set. Dealer is P{first_dealer}."
    else:
        current_dealer = dealer if dealer is not None else state.dealer
        set_fields = {"dealer": current_dealer, "hand_number": state.hand_number + 1}
        log_line = f"Hand {state.hand_number + 1}. Dealer is P{current_dealer}."

    new_wall = create_wall_from_tiles(wall) if wall is not None else create_wall(rule, rng)
    new_wall, hands = deal_hands(new_wall, rule.hand_size)

    new_state = state.model_copy(
        update={
            **set_fields,
            "wall": new_wall,
            "hands": hands,
            "discards": ((),) * NUM_SEATS,
            "last_drawn": (None,) * NUM_SEATS,
            "tenpai": tuple(is_tenpai(hand, rule) for hand in hands),
            "reached": (False,) * NUM_SEATS,
            "reach_pending": (False,) * NUM_SEATS,
            "reach_options": ((),) * NUM_SEATS,
            "reach_discard_id": (None,) * NUM_SEATS,
            "last_reach": None,
            "win_info": None,
            "draw_info": None,
            "seed": game_seed,
            "hand_serial": hand_serial + 1,
        }
    )
    new_state = new_state.model_copy(
        update={
            "turn": new_state.dealer,
            "phase": Phase.DRAW,
            "log": (log_line, f"P{new_state.dealer} draws first."),
        }
    )
    logger.debug(
        "hand started",
        hand_number=new_state.hand_number,
        dealer=new_state.dealer,
        wall_count=tiles_remaining(new_state.wall),
    )
    return new_state


def advance_dealer(state: GameState, winner: int | None) -> GameState:
    """
    Move the dealer for the next hand.

    The dealer keeps the seat only when it won the hand. Each time rotation
    lands back on the set's first dealer the cycle counter grows; the set is
    over once it reaches the rule's cap.
    """
    if winner is not None and winner == state.dealer:
        return state

    new_dealer = next_seat(state.dealer)
    cycles = state.dealer_cycles + (1 if new_dealer == state.set_start_dealer else 0)
    set_over = cycles >= state.rule.dealer_cycles_per_set
    if set_over:
        logger.debug("set over", dealer_cycles=cycles, scores=state.scores)
    return state.model_copy(
        update={
            "dealer": new_dealer,
            "dealer_cycles": cycles,
            "set_over": set_over,
        }
    )


def rank_seats(scores: Sequence[int]) -> tuple[int, ...]:
    """
    Return seats ordered from 1st to 4th place.

    Higher score ranks higher; ties are broken by seat order.
    """
    return tuple(sorted(SEATS, key=lambda seat: (-scores[seat], seat)))

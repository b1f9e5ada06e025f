"""
Read-only views of the game state for the presentation layer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from colorjong.logic.reach import can_declare_reach, get_legal_discards
from colorjong.logic.state import SEATS
from colorjong.logic.types import GameView, SeatView
from colorjong.logic.wall import tiles_remaining
from colorjong.logic.yaku import evaluate_yaku, get_reach_discards, get_waiting_tiles

if TYPE_CHECKING:
    from colorjong.logic.state import GameState


def _seat_view(state: GameState, seat: int, viewer: int) -> SeatView:
    hand = state.hands[seat]
    is_viewer = seat == viewer
    evaluation = evaluate_yaku(hand, state.rule) if is_viewer else None
    return SeatView(
        seat=seat,
        score=state.scores[seat],
        discards=state.discards[seat],
        tile_count=len(hand),
        is_reached=state.reached[seat],
        is_reach_pending=state.reach_pending[seat],
        is_dealer=seat == state.dealer,
        tiles=hand if is_viewer else None,
        is_tenpai=state.tenpai[seat] if is_viewer else None,
        waiting_tiles=get_waiting_tiles(hand, state.rule) if is_viewer else None,
        winning_yakus=tuple(y.name for y in evaluation.achieved_yakus) if evaluation else None,
    )


def get_game_view(state: GameState, seat: int) -> GameView:
    """
    Return the state visible to one seat.

    Each seat sees every discard pile, score, reach flag and hand size, but
    only its own tiles, tenpai flag, waits and pattern evaluation. Legal
    discards and reach eligibility are filled in when it is the seat's turn.
    """
    can_reach = can_declare_reach(state, seat)
    return GameView(
        seat=seat,
        phase=state.phase,
        turn=state.turn,
        dealer=state.dealer,
        hand_number=state.hand_number,
        set_over=state.set_over,
        wall_count=tiles_remaining(state.wall),
        seats=tuple(_seat_view(state, s, seat) for s in SEATS),
        legal_discards=get_legal_discards(state, seat),
        can_declare_reach=can_reach,
        reach_discards=get_reach_discards(state.hands[seat], state.rule) if can_reach else (),
        win_info=state.win_info,
        draw_info=state.draw_info,
    )

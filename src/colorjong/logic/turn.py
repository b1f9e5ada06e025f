"""
Turn processing: draw, discard and the win checks that can end a hand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from colorjong.logic.enums import DrawReason, Phase, WinType
from colorjong.logic.exceptions import InvalidActionError, InvalidDiscardError
from colorjong.logic.game import advance_dealer
from colorjong.logic.reach import get_legal_discards
from colorjong.logic.scoring import apply_ron_score, apply_tsumo_score
from colorjong.logic.state import next_seat, seats_after
from colorjong.logic.state_utils import (
    add_discard,
    add_tile_to_hand,
    append_log,
    remove_tile_from_hand,
    update_seat,
)
from colorjong.logic.tiles import find_tile
from colorjong.logic.types import DrawInfo, WinInfo
from colorjong.logic.wall import draw_one, is_wall_exhausted, tiles_remaining
from colorjong.logic.yaku import YakuEvaluation, evaluate_yaku, is_tenpai

if TYPE_CHECKING:
    from colorjong.logic.state import GameState
    from colorjong.logic.tiles import Tile

logger = structlog.get_logger()


def _win_info(
    winner: int,
    win_type: WinType,
    tile: Tile,
    evaluation: YakuEvaluation,
    score_deltas: tuple[int, int, int, int],
    from_seat: int | None = None,
) -> WinInfo:
    return WinInfo(
        winner=winner,
        win_type=win_type,
        from_seat=from_seat,
        tile_id=tile.id,
        yaku_names=tuple(y.name for y in evaluation.achieved_yakus),
        best_yaku=evaluation.best_yaku.name if evaluation.best_yaku else None,
        points=evaluation.total_points,
        score_deltas=score_deltas,
    )


def _process_exhaustive_draw(state: GameState) -> GameState:
    """End the hand with no winner; the dealer always rotates."""
    logger.debug("exhaustive draw", dealer=state.dealer)
    new_state = state.model_copy(update={"phase": Phase.END, "draw_info": DrawInfo(reason=DrawReason.EXHAUSTED)})
    new_state = advance_dealer(new_state, winner=None)
    return append_log(new_state, "The wall is exhausted. Hand ends in a draw.")


def process_draw(state: GameState) -> GameState:
    """
    Draw one tile for the seat whose turn it is.

    An empty wall ends the hand as an exhaustive draw. A drawn tile that
    completes a pattern ends it as a self-draw win. Otherwise the seat moves
    on to its discard.
    """
    if state.phase != Phase.DRAW:
        raise InvalidActionError(f"cannot draw in phase {state.phase}")

    if is_wall_exhausted(state.wall):
        return _process_exhaustive_draw(state)

    seat = state.turn
    tile, new_wall = draw_one(state.wall)

    new_state = state.model_copy(update={"wall": new_wall})
    new_state = add_tile_to_hand(new_state, seat, tile)
    hand = new_state.hands[seat]
    new_state = update_seat(new_state, seat, last_drawn=tile.id)
    logger.debug("tile drawn", seat=seat, tile_id=tile.id, wall_count=tiles_remaining(new_wall))

    evaluation = evaluate_yaku(hand, state.rule)
    if evaluation.is_won:
        return _process_tsumo(new_state, seat, tile, evaluation)

    new_state = new_state.model_copy(update={"phase": Phase.DISCARD})
    return append_log(new_state, f"P{seat} draws {tile.label}.")


def _process_tsumo(state: GameState, seat: int, tile: Tile, evaluation: YakuEvaluation) -> GameState:
    new_scores, deltas = apply_tsumo_score(state.scores, seat, evaluation.total_points)
    win_info = _win_info(seat, WinType.TSUMO, tile, evaluation, deltas)
    logger.debug("tsumo", seat=seat, tile_id=tile.id, points=evaluation.total_points)

    new_state = state.model_copy(update={"scores": new_scores, "win_info": win_info, "phase": Phase.END})
    new_state = advance_dealer(new_state, winner=seat)
    return append_log(
        new_state,
        f"P{seat} draws {tile.label} and wins by self-draw for {evaluation.total_points} points.",
        f"Patterns: {', '.join(win_info.yaku_names)}",
    )


def find_ron_winner(state: GameState, discarder: int, tile: Tile) -> tuple[int, YakuEvaluation] | None:
    """
    Return the first seat after the discarder whose hand wins with the tile.

    Only one seat can claim a discard; later seats in turn order are ignored.
    """
    for seat in seats_after(discarder):
        evaluation = evaluate_yaku((*state.hands[seat], tile), state.rule)
        if evaluation.is_won:
            return seat, evaluation
    return None


def process_discard(state: GameState, tile_id: str, seat: int | None = None) -> GameState:
    """
    Discard a tile for the seat whose turn it is.

    Enforces reach restrictions, completes a pending reach, then checks
    whether another seat claims the tile (ron). Without a claim the turn
    passes to the next seat.
    """
    if state.phase != Phase.DISCARD:
        raise InvalidActionError(f"cannot discard in phase {state.phase}")
    current = state.turn
    if seat is not None and seat != current:
        raise InvalidActionError(f"seat {seat} cannot discard on seat {current}'s turn")

    tile = find_tile(state.hands[current], tile_id)
    if tile is None:
        raise InvalidDiscardError(f"tile {tile_id} not in seat {current}'s hand")
    if tile_id not in get_legal_discards(state, current):
        raise InvalidDiscardError(f"tile {tile_id} is not a legal discard under reach")

    new_state = remove_tile_from_hand(state, current, tile_id)
    new_state = add_discard(new_state, current, tile)
    new_state = update_seat(
        new_state,
        current,
        last_drawn=None,
        tenpai=is_tenpai(new_state.hands[current], state.rule),
    )
    log_line = f"P{current} discards {tile.label}."

    if state.reach_pending[current]:
        new_state = update_seat(
            new_state,
            current,
            reached=True,
            reach_pending=False,
            reach_options=(),
            reach_discard_id=tile_id,
        )
        log_line = f"P{current} discards {tile.label} for reach."
    new_state = append_log(new_state, log_line)
    logger.debug("tile discarded", seat=current, tile_id=tile_id, reached=new_state.reached[current])

    claim = find_ron_winner(new_state, current, tile)
    if claim is not None:
        winner, evaluation = claim
        return _process_ron(new_state, winner, current, tile, evaluation)

    following = next_seat(current)
    new_state = new_state.model_copy(update={"turn": following, "phase": Phase.DRAW})
    return append_log(new_state, f"P{following}'s turn.")


def _process_ron(
    state: GameState,
    winner: int,
    discarder: int,
    tile: Tile,
    evaluation: YakuEvaluation,
) -> GameState:
    # the claimed tile leaves the discard pile for the winner's hand
    new_state = update_seat(state, discarder, discards=state.discards[discarder][:-1])
    new_state = add_tile_to_hand(new_state, winner, tile)

    new_scores, deltas = apply_ron_score(state.scores, winner, discarder, evaluation.total_points)
    win_info = _win_info(winner, WinType.RON, tile, evaluation, deltas, from_seat=discarder)
    logger.debug("ron", winner=winner, discarder=discarder, tile_id=tile.id, points=evaluation.total_points)

    new_state = new_state.model_copy(update={"scores": new_scores, "win_info": win_info, "phase": Phase.END})
    new_state = advance_dealer(new_state, winner=winner)
    return append_log(
        new_state,
        f"P{winner} claims P{discarder}'s {tile.label} and wins for {evaluation.total_points} points.",
        f"Patterns: {', '.join(win_info.yaku_names)}",
    )

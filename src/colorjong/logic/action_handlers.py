"""
The reducer: apply one action to a GameState.

Domain functions raise GameRuleError subclasses for illegal actions; this
boundary logs them and returns the unchanged state, so every transition is
total.
"""

from __future__ import annotations

import structlog

from colorjong.logic.actions import (
    Action,
    DeclareReachAction,
    DiscardAction,
    DrawAction,
    StartGameAction,
)
from colorjong.logic.exceptions import GameRuleError
from colorjong.logic.game import start_game
from colorjong.logic.reach import declare_reach
from colorjong.logic.state import GameState
from colorjong.logic.turn import process_discard, process_draw

logger = structlog.get_logger()


def _apply(state: GameState, action: Action) -> GameState:
    match action:
        case StartGameAction():
            return start_game(state, seed=action.seed, wall=action.wall, dealer=action.dealer)
        case DrawAction():
            return process_draw(state)
        case DiscardAction():
            return process_discard(state, action.tile_id, seat=action.seat)
        case DeclareReachAction():
            seat = action.seat if action.seat is not None else state.turn
            return declare_reach(state, seat)
    raise GameRuleError(f"unknown action {action!r}")


def transition(state: GameState, action: Action) -> GameState:
    """
    Return the state after applying action.

    Illegal actions are no-ops: the same state object is returned.
    """
    try:
        return _apply(state, action)
    except GameRuleError as e:
        logger.debug("action ignored", action=action.type, phase=state.phase, turn=state.turn, reason=str(e))
        return state

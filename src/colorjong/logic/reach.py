"""
Reach declaration and the discard restrictions it imposes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from colorjong.logic.enums import Phase
from colorjong.logic.exceptions import InvalidReachError
from colorjong.logic.state_utils import append_log, update_seat
from colorjong.logic.tiles import tile_ids
from colorjong.logic.yaku import get_reach_discards

if TYPE_CHECKING:
    from colorjong.logic.state import GameState

logger = structlog.get_logger()


def can_declare_reach(state: GameState, seat: int) -> bool:
    """
    Check if a seat can declare reach right now.

    Requirements:
    - Must be the seat's turn, in the discard phase
    - Must not already be reached or reach-pending
    - At least one discard must leave the hand tenpai
    """
    if state.phase != Phase.DISCARD or state.turn != seat:
        return False
    if state.reached[seat] or state.reach_pending[seat]:
        return False
    return len(get_reach_discards(state.hands[seat], state.rule)) > 0


def declare_reach(state: GameState, seat: int) -> GameState:
    """
    Mark a seat reach-pending.

    Does not discard; the seat's next discard must be one of the
    reach-eligible tiles recorded here.
    """
    if state.phase != Phase.DISCARD or state.turn != seat:
        raise InvalidReachError(f"seat {seat} cannot declare reach out of turn")
    if state.reached[seat] or state.reach_pending[seat]:
        raise InvalidReachError(f"seat {seat} already declared reach")

    options = get_reach_discards(state.hands[seat], state.rule)
    if not options:
        raise InvalidReachError(f"seat {seat} has no reach-eligible discard")

    new_state = update_seat(state, seat, reach_pending=True, reach_options=options)
    new_state = new_state.model_copy(update={"last_reach": seat})
    logger.debug("reach declared", seat=seat, options=options)
    return append_log(new_state, f"P{seat} declares reach.")


def get_legal_discards(state: GameState, seat: int) -> tuple[str, ...]:
    """
    Return tile ids the seat may discard now.

    - reached: only the tile just drawn
    - reach-pending: only the reach-eligible tiles
    - otherwise: any tile in hand
    """
    if state.phase != Phase.DISCARD or state.turn != seat:
        return ()
    if state.reached[seat]:
        drawn = state.last_drawn[seat]
        return (drawn,) if drawn is not None else ()
    if state.reach_pending[seat]:
        return state.reach_options[seat]
    return tile_ids(state.hands[seat])

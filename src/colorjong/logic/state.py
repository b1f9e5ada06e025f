"""
Game state model.

GameState is frozen; every transition returns a new instance built with
model_copy. Per-seat data is stored as 4-tuples indexed by seat.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from colorjong.logic.enums import Phase
from colorjong.logic.rules import DEFAULT_RULE, RuleSet
from colorjong.logic.tiles import Tile
from colorjong.logic.types import DrawInfo, WinInfo
from colorjong.logic.wall import Wall

NUM_SEATS = 4
SEATS = tuple(range(NUM_SEATS))

EMPTY_HANDS: tuple[tuple[Tile, ...], ...] = ((), (), (), ())


class GameState(BaseModel):
    """Complete state of the table: the current hand plus set progression."""

    model_config = ConfigDict(frozen=True)

    rule: RuleSet = DEFAULT_RULE

    # tiles
    wall: Wall = Wall()
    hands: tuple[tuple[Tile, ...], ...] = EMPTY_HANDS
    discards: tuple[tuple[Tile, ...], ...] = EMPTY_HANDS
    last_drawn: tuple[str | None, ...] = (None, None, None, None)

    # readiness and reach
    tenpai: tuple[bool, ...] = (False, False, False, False)  # set on deal and discard; a draw leaves it as is
    reached: tuple[bool, ...] = (False, False, False, False)
    reach_pending: tuple[bool, ...] = (False, False, False, False)  # declared this turn, discard not made yet
    reach_options: tuple[tuple[str, ...], ...] = ((), (), (), ())  # reach-eligible discards at declaration
    reach_discard_id: tuple[str | None, ...] = (None, None, None, None)  # tile that completed the reach
    last_reach: int | None = None

    # scores and dealer progression
    scores: tuple[int, ...] = (0, 0, 0, 0)
    dealer: int = 0
    set_start_dealer: int = 0
    dealer_cycles: int = 0  # times the dealer wrapped back to set_start_dealer
    hand_number: int = 0  # 1-based hand counter within the set, 0 before the first deal
    set_over: bool = False

    # turn
    turn: int = 0
    phase: Phase = Phase.IDLE

    log: tuple[str, ...] = ()

    win_info: WinInfo | None = None
    draw_info: DrawInfo | None = None

    # reproducible shuffles: each new hand derives its rng from (seed, hand_serial)
    seed: str = ""
    hand_serial: int = 0


def initial_state(rule: RuleSet = DEFAULT_RULE, seed: str = "") -> GameState:
    """Return an idle table for the given rule set."""
    return GameState(
        rule=rule,
        scores=(rule.initial_score,) * NUM_SEATS,
        seed=seed,
        log=("Press start to begin.",),
    )


def next_seat(seat: int) -> int:
    return (seat + 1) % NUM_SEATS


def seats_after(seat: int) -> tuple[int, ...]:
    """Other seats in turn order, starting right after `seat`."""
    return tuple((seat + offset) % NUM_SEATS for offset in range(1, NUM_SEATS))

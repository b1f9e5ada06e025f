"""
Headless batch evaluation of AI strategies.

BatchRunner plays whole hands through the reducer, with the same dealer and
scoring rules as interactive play, and accumulates per-seat statistics in a
frozen BatchSession. `wins` mode targets a number of hands and counts
winners; `ranking` mode targets a number of sets and counts the final place
of each seat at every set end.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict, Field

from colorjong.logic.action_handlers import transition
from colorjong.logic.actions import DiscardAction, DrawAction, StartGameAction
from colorjong.logic.ai_player_controller import AIPlayerController
from colorjong.logic.enums import BatchMode, Phase, StrategyId
from colorjong.logic.game import rank_seats
from colorjong.logic.reach import get_legal_discards
from colorjong.logic.rules import DEFAULT_RULE, RuleSet
from colorjong.logic.settings import EngineSettings
from colorjong.logic.state import NUM_SEATS, SEATS, GameState, initial_state
from colorjong.logic.timer import StepTimer

if TYPE_CHECKING:
    from colorjong.logic.actions import Action

logger = structlog.get_logger()

ZERO_PER_SEAT = (0,) * NUM_SEATS


class BatchStalledError(RuntimeError):
    """A hand stopped making progress (every action was rejected)."""


class BatchSession(BaseModel):
    """Running totals of one batch run."""

    model_config = ConfigDict(frozen=True)

    mode: BatchMode = BatchMode.WINS
    target: int = Field(default=100, ge=1)
    games_played: int = 0
    sets_played: int = 0
    wins: tuple[int, ...] = ZERO_PER_SEAT
    rank_counts: tuple[tuple[int, ...], ...] = (ZERO_PER_SEAT,) * NUM_SEATS  # [seat][place]
    cumulative_scores: tuple[int, ...] = ZERO_PER_SEAT
    draws: int = 0
    running: bool = False

    @property
    def progress(self) -> int:
        return self.sets_played if self.mode == BatchMode.RANKING else self.games_played

    @property
    def is_complete(self) -> bool:
        return self.progress >= self.target

    def win_rates(self) -> tuple[float, ...]:
        if not self.games_played:
            return (0.0,) * NUM_SEATS
        return tuple(w / self.games_played for w in self.wins)

    def average_ranks(self) -> tuple[float, ...]:
        """Mean final place per seat (1.0 is always first), 0.0 before any set ended."""
        if not self.sets_played:
            return (0.0,) * NUM_SEATS
        return tuple(
            sum((place + 1) * count for place, count in enumerate(counts)) / self.sets_played
            for counts in self.rank_counts
        )


def record_hand(session: BatchSession, state: GameState) -> BatchSession:
    """Fold a finished hand (phase END) into the session totals."""
    wins = session.wins
    draws = session.draws
    deltas: tuple[int, ...] = ZERO_PER_SEAT
    if state.win_info is not None:
        winner = state.win_info.winner
        wins = tuple(w + (1 if seat == winner else 0) for seat, w in enumerate(wins))
        deltas = state.win_info.score_deltas
    elif state.draw_info is not None:
        draws += 1
        deltas = state.draw_info.score_deltas

    update: dict[str, object] = {
        "games_played": session.games_played + 1,
        "wins": wins,
        "draws": draws,
        "cumulative_scores": tuple(total + d for total, d in zip(session.cumulative_scores, deltas, strict=True)),
    }
    if state.set_over:
        update["sets_played"] = session.sets_played + 1
        if session.mode == BatchMode.RANKING:
            update["rank_counts"] = _add_ranking(session.rank_counts, rank_seats(state.scores))
    return session.model_copy(update=update)


def _add_ranking(rank_counts: tuple[tuple[int, ...], ...], order: tuple[int, ...]) -> tuple[tuple[int, ...], ...]:
    places = {seat: place for place, seat in enumerate(order)}
    return tuple(
        tuple(count + (1 if place == places[seat] else 0) for place, count in enumerate(counts))
        for seat, counts in enumerate(rank_counts)
    )


class BatchRunner:
    """
    Drive hands headlessly until the session target is reached.

    Every seat is played by the controller; a seat without an AI strategy
    discards its drawn tile (or its first legal tile).
    """

    def __init__(
        self,
        rule: RuleSet = DEFAULT_RULE,
        controller: AIPlayerController | None = None,
        *,
        seed: str = "",
        settings: EngineSettings | None = None,
    ) -> None:
        self.controller = controller or AIPlayerController.from_strategies(
            dict.fromkeys(SEATS, StrategyId.YAKU_PROGRESS), seed or None
        )
        self.state = initial_state(rule, seed)
        self.session = BatchSession()
        self._settings = settings or EngineSettings()
        self._timer = StepTimer()

    @property
    def pending(self) -> bool:
        return self._timer.pending

    def reset(self, mode: BatchMode | None = None, target: int | None = None) -> None:
        """Cancel any outstanding step and start fresh totals on a fresh table."""
        self._timer.cancel()
        self.state = initial_state(self.state.rule, self.state.seed)
        self.session = BatchSession(
            mode=mode or self._settings.default_batch_mode,
            target=target or self._settings.default_target,
            running=True,
        )
        logger.info("batch reset", mode=self.session.mode, target=self.session.target)

    def _discard_actions(self, state: GameState) -> list[Action]:
        seat = state.turn
        actions = self.controller.get_turn_actions(seat, state)
        if actions:
            return actions
        legal = get_legal_discards(state, seat)
        drawn = state.last_drawn[seat]
        return [DiscardAction(tile_id=drawn if drawn in legal else legal[0], seat=seat)]

    def _advance(self, state: GameState) -> GameState:
        """Apply the next move of the current hand."""
        if state.phase == Phase.DRAW:
            return transition(state, DrawAction())
        for action in self._discard_actions(state):
            state = transition(state, action)
        return state

    def play_hand(self) -> GameState:
        """Deal and play one hand to its end, then record it."""
        state = transition(self.state, StartGameAction())
        if state is self.state:
            raise BatchStalledError(f"cannot start a hand in phase {state.phase}")
        while state.phase != Phase.END:
            next_state = self._advance(state)
            if next_state is state:
                raise BatchStalledError(f"no progress in phase {state.phase} on seat {state.turn}")
            state = next_state
        self.state = state
        self.session = record_hand(self.session, state)
        logger.debug(
            "batch hand recorded",
            games_played=self.session.games_played,
            sets_played=self.session.sets_played,
            winner=state.win_info.winner if state.win_info else None,
        )
        return state

    def _finish(self) -> None:
        self.session = self.session.model_copy(update={"running": False})
        logger.info(
            "batch finished",
            games_played=self.session.games_played,
            sets_played=self.session.sets_played,
            wins=self.session.wins,
            draws=self.session.draws,
        )

    def run(self, mode: BatchMode | None = None, target: int | None = None) -> BatchSession:
        """Play synchronously until the target is reached."""
        self.reset(mode, target)
        while not self.session.is_complete:
            self.play_hand()
        self._finish()
        return self.session

    def start(self, mode: BatchMode | None = None, target: int | None = None) -> None:
        """Start an asynchronous run, one hand per scheduled step. Requires a running event loop."""
        self.reset(mode, target)
        self._schedule_next()

    def cancel(self) -> None:
        """Stop the run; totals collected so far are kept."""
        self._timer.cancel()
        if self.session.running:
            self.session = self.session.model_copy(update={"running": False})
            logger.info("batch cancelled", games_played=self.session.games_played)

    async def wait(self) -> BatchSession:
        await self._timer.wait()
        return self.session

    def _schedule_next(self) -> None:
        self._timer.schedule(self._settings.batch_step_delay_seconds, self._step)

    async def _step(self) -> None:
        if not self.session.running:
            return
        try:
            self.play_hand()
        except BatchStalledError:
            logger.exception("batch stalled", games_played=self.session.games_played)
            self._finish()
            return
        if self.session.is_complete:
            self._finish()
        else:
            self._schedule_next()

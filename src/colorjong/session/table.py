"""
Interactive table driver.

Owns the current GameState and advances it the way a table would: draws
happen by themselves after a short pause, AI seats discard after a think
delay, and human seats wait for commands. Only one deferred step is ever
pending; any command replaces it, and every step reads the latest state
when it fires.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from colorjong.logic.action_handlers import transition
from colorjong.logic.actions import DeclareReachAction, DiscardAction, DrawAction, StartGameAction
from colorjong.logic.ai_player_controller import AIPlayerController
from colorjong.logic.enums import Phase, StrategyId
from colorjong.logic.rules import DEFAULT_RULE, RuleSet
from colorjong.logic.settings import EngineSettings
from colorjong.logic.state import SEATS, GameState, initial_state
from colorjong.logic.timer import StepTimer
from colorjong.logic.view import get_game_view

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from colorjong.logic.actions import Action
    from colorjong.logic.tiles import Tile
    from colorjong.logic.types import GameView

logger = structlog.get_logger()

HUMAN_SEAT = 0


class TableDriver:
    def __init__(
        self,
        rule: RuleSet = DEFAULT_RULE,
        controller: AIPlayerController | None = None,
        *,
        seed: str = "",
        settings: EngineSettings | None = None,
        on_update: Callable[[GameState], None] | None = None,
    ) -> None:
        self.controller = controller or AIPlayerController.from_strategies(
            {seat: StrategyId.HUMAN if seat == HUMAN_SEAT else StrategyId.RANDOM for seat in SEATS},
            seed or None,
        )
        self.state = initial_state(rule, seed)
        self._settings = settings or EngineSettings()
        self._timer = StepTimer()
        self._on_update = on_update

    @property
    def pending(self) -> bool:
        return self._timer.pending

    def view(self, seat: int = HUMAN_SEAT) -> GameView:
        return get_game_view(self.state, seat)

    def dispatch(self, action: Action) -> bool:
        """Apply an action to the latest state. Returns False if it was rejected."""
        new_state = transition(self.state, action)
        if new_state is self.state:
            return False
        self.state = new_state
        if self._on_update is not None:
            self._on_update(new_state)
        return True

    def start_hand(
        self,
        *,
        seed: str | None = None,
        wall: Sequence[Tile] | None = None,
        dealer: int | None = None,
    ) -> bool:
        """Deal the next hand and start pacing it. Requires a running event loop."""
        self._timer.cancel()
        action = StartGameAction(seed=seed, wall=tuple(wall) if wall is not None else None, dealer=dealer)
        accepted = self.dispatch(action)
        self._schedule_next()
        return accepted

    def discard(self, tile_id: str, seat: int = HUMAN_SEAT) -> bool:
        """Discard for a human seat."""
        if self.controller.is_ai_player(seat):
            logger.debug("discard command for ai seat ignored", seat=seat)
            return False
        accepted = self.dispatch(DiscardAction(tile_id=tile_id, seat=seat))
        if accepted:
            self._schedule_next()
        return accepted

    def declare_reach(self, seat: int = HUMAN_SEAT) -> bool:
        if self.controller.is_ai_player(seat):
            return False
        return self.dispatch(DeclareReachAction(seat=seat))

    def stop(self) -> None:
        self._timer.cancel()

    async def wait_idle(self) -> None:
        """Wait until no deferred step is pending (a human decision or the hand's end)."""
        await self._timer.wait()

    def _schedule_next(self) -> None:
        state = self.state
        if state.phase == Phase.DRAW:
            self._timer.schedule(self._settings.draw_delay_seconds, self._auto_draw)
        elif state.phase == Phase.DISCARD and self.controller.is_ai_player(state.turn):
            self._timer.schedule(self._settings.ai_delay_seconds, self._ai_turn)
        else:
            self._timer.cancel()

    async def _auto_draw(self) -> None:
        self.dispatch(DrawAction())
        self._schedule_next()

    async def _ai_turn(self) -> None:
        seat = self.state.turn
        for action in self.controller.get_turn_actions(seat, self.state):
            self.dispatch(action)
        self._schedule_next()

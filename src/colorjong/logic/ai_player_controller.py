"""
AI player controller as a pure decision-maker.

Maps seats to AI players and answers "what should this seat do now".
Dispatching the returned actions is left to the session drivers.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from colorjong.logic.ai_player import AIPlayer
from colorjong.logic.enums import Phase, StrategyId
from colorjong.logic.rng import create_strategy_rng
from colorjong.logic.state import SEATS

if TYPE_CHECKING:
    from collections.abc import Mapping

    from colorjong.logic.actions import Action
    from colorjong.logic.state import GameState


class AIPlayerController:
    """
    Decision-maker for AI seats.

    Seats holding a `human` strategy are never decided automatically.
    """

    def __init__(self, ai_players: dict[int, AIPlayer]) -> None:
        self._ai_players = ai_players

    @classmethod
    def from_strategies(
        cls,
        strategies: Mapping[int, StrategyId],
        seed: str | None = None,
    ) -> AIPlayerController:
        """Build one AIPlayer per seat; a seed makes each seat's choices reproducible."""
        players = {
            seat: AIPlayer(strategy, create_strategy_rng(seed, seat) if seed else random.Random())  # noqa: S311
            for seat, strategy in strategies.items()
        }
        return cls(players)

    def is_ai_player(self, seat: int) -> bool:
        player = self._ai_players.get(seat)
        return player is not None and player.strategy != StrategyId.HUMAN

    def set_strategy(self, seat: int, strategy: StrategyId) -> None:
        """Swap the strategy of a seat, keeping its rng stream."""
        player = self._ai_players.get(seat)
        self._ai_players[seat] = AIPlayer(strategy, player.rng if player else None)

    def strategy_of(self, seat: int) -> StrategyId:
        player = self._ai_players.get(seat)
        return player.strategy if player else StrategyId.HUMAN

    @property
    def ai_player_seats(self) -> set[int]:
        return {seat for seat in SEATS if self.is_ai_player(seat)}

    def get_turn_actions(self, seat: int, state: GameState) -> list[Action]:
        """
        Return the AI seat's discard-phase actions in dispatch order.

        Empty when the seat is human, it is not the seat's discard turn, or
        the hand has ended.
        """
        if not self.is_ai_player(seat):
            return []
        if state.phase != Phase.DISCARD or state.turn != seat:
            return []
        return self._ai_players[seat].get_turn_actions(state, seat)

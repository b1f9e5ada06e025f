"""
Action models dispatched to the reducer.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from colorjong.logic.enums import GameAction
from colorjong.logic.tiles import Tile


class StartGameAction(BaseModel):
    """Deal a new hand. wall/dealer are explicit overrides for tests and replays."""

    model_config = ConfigDict(frozen=True)

    type: Literal[GameAction.START_GAME] = GameAction.START_GAME
    seed: str | None = None
    wall: tuple[Tile, ...] | None = None
    dealer: int | None = None


class DrawAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[GameAction.DRAW] = GameAction.DRAW


class DiscardAction(BaseModel):
    """Discard a tile; seat defaults to the seat whose turn it is."""

    model_config = ConfigDict(frozen=True)

    type: Literal[GameAction.DISCARD] = GameAction.DISCARD
    tile_id: str
    seat: int | None = None


class DeclareReachAction(BaseModel):
    """Declare reach; seat defaults to the seat whose turn it is."""

    model_config = ConfigDict(frozen=True)

    type: Literal[GameAction.DECLARE_REACH] = GameAction.DECLARE_REACH
    seat: int | None = None


Action = Annotated[
    StartGameAction | DrawAction | DiscardAction | DeclareReachAction,
    Field(discriminator="type"),
]

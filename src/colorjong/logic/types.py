"""
Pydantic models for hand results and presentation views.
"""

from pydantic import BaseModel, ConfigDict

from colorjong.logic.enums import DrawReason, Phase, WinType
from colorjong.logic.tiles import Tile


class WinInfo(BaseModel):
    """Result of a won hand (tsumo or ron)."""

    model_config = ConfigDict(frozen=True)

    winner: int
    win_type: WinType
    from_seat: int | None = None  # discarder for ron, None for tsumo
    tile_id: str  # winning tile
    yaku_names: tuple[str, ...] = ()
    best_yaku: str | None = None
    points: int
    score_deltas: tuple[int, int, int, int]


class DrawInfo(BaseModel):
    """Result of a hand that ended without a winner."""

    model_config = ConfigDict(frozen=True)

    reason: DrawReason = DrawReason.EXHAUSTED
    score_deltas: tuple[int, int, int, int] = (0, 0, 0, 0)


class SeatView(BaseModel):
    """Per-seat data visible to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    seat: int
    score: int
    discards: tuple[Tile, ...]
    tile_count: int
    is_reached: bool
    is_reach_pending: bool
    is_dealer: bool
    tiles: tuple[Tile, ...] | None = None  # only for the viewing seat
    is_tenpai: bool | None = None
    waiting_tiles: tuple[str, ...] | None = None
    winning_yakus: tuple[str, ...] | None = None


class GameView(BaseModel):
    """Game state as seen from one seat, with derived action data."""

    model_config = ConfigDict(frozen=True)

    seat: int
    phase: Phase
    turn: int
    dealer: int
    hand_number: int
    set_over: bool
    wall_count: int
    seats: tuple[SeatView, ...]
    legal_discards: tuple[str, ...] = ()
    can_declare_reach: bool = False
    reach_discards: tuple[str, ...] = ()
    win_info: WinInfo | None = None
    draw_info: DrawInfo | None = None

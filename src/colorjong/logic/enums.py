"""
String enum definitions for game concepts.
"""

from enum import StrEnum


class Phase(StrEnum):
    """Phase of a single hand."""

    IDLE = "idle"
    DRAW = "draw"
    DISCARD = "discard"
    END = "end"


class GameAction(StrEnum):
    """Actions dispatched to the reducer."""

    START_GAME = "start_game"
    DRAW = "draw"
    DISCARD = "discard"
    DECLARE_REACH = "declare_reach"


class WinType(StrEnum):
    """How a hand was won."""

    TSUMO = "tsumo"
    RON = "ron"


class DrawReason(StrEnum):
    """Why a hand ended without a winner."""

    EXHAUSTED = "exhausted"


class StrategyId(StrEnum):
    """Available discard strategies."""

    HUMAN = "human"
    RANDOM = "random"
    YAKU_PROGRESS = "yaku_progress"
    AVOID_DEAL_IN = "avoid_deal_in"
    AGARI_PRIORITY = "agari_priority"
    HIGH_SCORE = "high_score"


class BatchMode(StrEnum):
    """What the batch harness counts and targets."""

    WINS = "wins"  # per-hand winners, target counts hands
    RANKING = "ranking"  # final standings per set, target counts sets

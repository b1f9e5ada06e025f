"""
Score application for won hands.

Both win types are zero-sum: the winner gains exactly the best pattern's
point value and the losers pay exactly that amount between them.
"""

from __future__ import annotations

import structlog

from colorjong.logic.state import NUM_SEATS, seats_after

logger = structlog.get_logger()

TSUMO_PAYERS = NUM_SEATS - 1


def tsumo_payments(winner: int, points: int) -> tuple[int, ...]:
    """
    Split a self-draw win between the three other seats.

    Each pays points // 3; the remainder is paid by the seat right after
    the winner so the winner collects the full value.
    """
    share, remainder = divmod(points, TSUMO_PAYERS)
    payments = [0] * NUM_SEATS
    for index, seat in enumerate(seats_after(winner)):
        payments[seat] = share + (remainder if index == 0 else 0)
    return tuple(payments)


def apply_tsumo_score(
    scores: tuple[int, ...],
    winner: int,
    points: int,
) -> tuple[tuple[int, ...], tuple[int, int, int, int]]:
    """
    Apply a self-draw win.

    Returns (new_scores, score_deltas).
    """
    payments = tsumo_payments(winner, points)
    deltas = [-payment for payment in payments]
    deltas[winner] = points
    new_scores = tuple(score + delta for score, delta in zip(scores, deltas, strict=True))
    logger.debug("tsumo scored", winner=winner, points=points, deltas=deltas)
    return new_scores, (deltas[0], deltas[1], deltas[2], deltas[3])


def apply_ron_score(
    scores: tuple[int, ...],
    winner: int,
    loser: int,
    points: int,
) -> tuple[tuple[int, ...], tuple[int, int, int, int]]:
    """
    Apply a discard-claim win: the discarder pays the full value to the winner.

    Returns (new_scores, score_deltas).
    """
    deltas = [0] * NUM_SEATS
    deltas[winner] = points
    deltas[loser] = -points
    new_scores = tuple(score + delta for score, delta in zip(scores, deltas, strict=True))
    logger.debug("ron scored", winner=winner, loser=loser, points=points)
    return new_scores, (deltas[0], deltas[1], deltas[2], deltas[3])

"""
Immutable state update utilities using Pydantic model_copy.

These helpers never mutate the input state; they return new GameState
objects with the requested per-seat changes applied.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from colorjong.logic.tiles import remove_tile, sort_hand

if TYPE_CHECKING:
    from colorjong.logic.state import GameState
    from colorjong.logic.tiles import Tile


def replace_at(values: tuple, seat: int, value: object) -> tuple:
    """Return a copy of a per-seat tuple with one entry replaced."""
    items = list(values)
    items[seat] = value
    return tuple(items)


def update_seat(state: GameState, seat: int, **updates: object) -> GameState:
    """
    Return new state with per-seat fields replaced for one seat.

    Each keyword names a per-seat tuple field of GameState (hands, tenpai,
    reached, ...) and gives the new value for `seat`.
    """
    changes = {field: replace_at(getattr(state, field), seat, value) for field, value in updates.items()}
    return state.model_copy(update=changes)


def add_tile_to_hand(state: GameState, seat: int, tile: Tile) -> GameState:
    """Return new state with tile added to the seat's hand, hand re-sorted."""
    return update_seat(state, seat, hands=sort_hand((*state.hands[seat], tile)))


def remove_tile_from_hand(state: GameState, seat: int, tile_id: str) -> GameState:
    """Return new state with tile removed from the seat's hand, hand re-sorted."""
    return update_seat(state, seat, hands=sort_hand(remove_tile(state.hands[seat], tile_id)))


def add_discard(state: GameState, seat: int, tile: Tile) -> GameState:
    """Return new state with tile appended to the seat's discard pile."""
    return update_seat(state, seat, discards=(*state.discards[seat], tile))


def append_log(state: GameState, *lines: str) -> GameState:
    """Return new state with lines appended to the running log."""
    return state.model_copy(update={"log": (*state.log, *lines)})

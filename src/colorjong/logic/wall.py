"""
Wall state and operations.

The wall is every tile the rule declares, shuffled once per hand and then
consumed strictly from the front. It is never replenished mid-hand; an empty
wall on draw ends the hand as an exhaustive draw.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from colorjong.logic.exceptions import InvalidActionError
from colorjong.logic.rng import fisher_yates_shuffle
from colorjong.logic.tiles import Tile, make_tile, sort_hand

if TYPE_CHECKING:
    import random
    from collections.abc import Iterable

    from colorjong.logic.rules import RuleSet

NUM_SEATS = 4


class Wall(BaseModel):
    """Immutable wall state for a hand."""

    model_config = ConfigDict(frozen=True)

    tiles: tuple[Tile, ...] = ()


def build_wall(rule: RuleSet) -> Wall:
    """
    Expand every tile kind into `copies` distinct tiles, in rule order.

    Deterministic: no shuffling happens here.
    """
    tiles = tuple(make_tile(kind, copy) for kind in rule.tile_kinds for copy in range(1, kind.copies + 1))
    return Wall(tiles=tiles)


def create_wall_from_tiles(tiles: Iterable[Tile]) -> Wall:
    """Create a wall with an explicit tile order (for tests/replays)."""
    tiles = tuple(tiles)
    if len({t.id for t in tiles}) != len(tiles):
        raise InvalidActionError("All tile IDs must be unique")
    return Wall(tiles=tiles)


def shuffle_wall(wall: Wall, rng: random.Random) -> Wall:
    """Return the wall uniformly shuffled."""
    return Wall(tiles=tuple(fisher_yates_shuffle(wall.tiles, rng)))


def create_wall(rule: RuleSet, rng: random.Random) -> Wall:
    """Build and shuffle a fresh wall for a new hand."""
    return shuffle_wall(build_wall(rule), rng)


def draw_one(wall: Wall) -> tuple[Tile | None, Wall]:
    """Draw from front of wall. Returns (tile, new_wall) or (None, wall) if empty."""
    if not wall.tiles:
        return None, wall
    return wall.tiles[0], wall.model_copy(update={"tiles": wall.tiles[1:]})


def deal_hands(wall: Wall, hand_size: int) -> tuple[Wall, tuple[tuple[Tile, ...], ...]]:
    """
    Deal `hand_size` tiles to each seat, one tile at a time in seat order 0..3.

    Returns (updated_wall, hands) where hands is indexed by seat, each sorted.
    """
    needed = NUM_SEATS * hand_size
    if len(wall.tiles) < needed:
        raise InvalidActionError(f"Wall has {len(wall.tiles)} tiles, need at least {needed} for dealing")

    hands: list[list[Tile]] = [[] for _ in range(NUM_SEATS)]
    pos = 0
    for _ in range(hand_size):
        for seat in range(NUM_SEATS):
            hands[seat].append(wall.tiles[pos])
            pos += 1

    new_wall = wall.model_copy(update={"tiles": wall.tiles[pos:]})
    return new_wall, tuple(sort_hand(hand) for hand in hands)


def is_wall_exhausted(wall: Wall) -> bool:
    return len(wall.tiles) == 0


def tiles_remaining(wall: Wall) -> int:
    """Count tiles remaining in the wall."""
    return len(wall.tiles)

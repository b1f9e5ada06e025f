"""
Tile representation utilities.

A Tile is one physical tile instance. Gameplay identity is the `id`
(unique per copy); pattern matching looks only at `name` and `color_id`.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from collections.abc import Iterable

    from colorjong.logic.rules import TileKind


class Tile(BaseModel):
    """Immutable tile instance."""

    model_config = ConfigDict(frozen=True)

    id: str  # "{kind_id}-{copy}", unique per physical tile
    name: str  # tile kind id, the pattern-matching key
    color_id: str
    label: str
    color_code: str = ""


def make_tile(kind: TileKind, suffix: str | int) -> Tile:
    """Create a tile instance of the given kind."""
    return Tile(
        id=f"{kind.id}-{suffix}",
        name=kind.id,
        color_id=kind.color_id,
        label=kind.label,
        color_code=kind.color_code,
    )


def sort_hand(tiles: Iterable[Tile]) -> tuple[Tile, ...]:
    """
    Sort tiles by (label, id) for deterministic display and matching.
    """
    return tuple(sorted(tiles, key=lambda t: (t.label, t.id)))


def count_by_name(tiles: Iterable[Tile]) -> Counter[str]:
    return Counter(t.name for t in tiles)


def count_by_color(tiles: Iterable[Tile]) -> Counter[str]:
    return Counter(t.color_id for t in tiles)


def find_tile(tiles: Iterable[Tile], tile_id: str) -> Tile | None:
    """Return the tile with the given id, or None if absent."""
    for tile in tiles:
        if tile.id == tile_id:
            return tile
    return None


def remove_tile(tiles: tuple[Tile, ...], tile_id: str) -> tuple[Tile, ...]:
    """Return tiles without the one matching tile_id (unchanged if absent)."""
    return tuple(t for t in tiles if t.id != tile_id)


def tile_ids(tiles: Iterable[Tile]) -> tuple[str, ...]:
    return tuple(t.id for t in tiles)

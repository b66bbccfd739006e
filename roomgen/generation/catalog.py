"""Tile definitions and the immutable catalog the solver draws from.

A tile is a room template reduced to what matters for layout: one ExitType per
cardinal edge. Two tiles may sit next to each other iff the exits on their
shared edge are equal, so the whole compatibility model is a table of
``tile_count x 4`` exit values. The catalog keeps that table as a numpy array
so the solver can filter a candidate set against one edge with a single
vectorized comparison.

Usage:
    from roomgen.generation.catalog import ExitType, TileDefinition, build_catalog

    catalog = build_catalog(
        [
            TileDefinition(0, "west_end", east=ExitType.DOOR),
            TileDefinition(1, "east_end", west=ExitType.DOOR),
        ],
        include_mirrors=True,
    )
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Protocol

import numpy as np

from roomgen.types import TileIndex


class InvalidCatalogError(ValueError):
    """Raised when a tile catalog cannot be built.

    This covers an empty base list and definitions whose exits are not
    ExitType values. It is raised before any generation starts.
    """

    pass


class ExitType(IntEnum):
    """Compatibility signature on one edge of a tile.

    NONE means the edge is closed. It is the only value allowed along the
    border of the grid.
    """

    NONE = 0
    DOOR = 1
    CORRIDOR = 2
    WIDE = 3


class Direction(IntEnum):
    """Cardinal direction on the layout grid. North is +y, east is +x."""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    @property
    def offset(self) -> tuple[int, int]:
        return DIR_OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        return Direction((self + 2) % 4)


DIRECTIONS: tuple[Direction, ...] = tuple(Direction)
DIR_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, -1),
    Direction.WEST: (-1, 0),
}


@dataclass(frozen=True)
class TileDefinition:
    """A placeable tile and its four edge signatures.

    Attributes:
        index: Position of this tile in its catalog. Reassigned by build_catalog.
        name: Human-readable name, used by renderers and logs.
        north, east, south, west: ExitType on each edge.
        mirrored_from: Index of the base tile this one mirrors, or None.
    """

    index: TileIndex
    name: str
    north: ExitType = ExitType.NONE
    east: ExitType = ExitType.NONE
    south: ExitType = ExitType.NONE
    west: ExitType = ExitType.NONE
    mirrored_from: TileIndex | None = None

    def exit(self, direction: Direction) -> ExitType:
        """Return the exit on the given edge."""
        match direction:
            case Direction.NORTH:
                return self.north
            case Direction.EAST:
                return self.east
            case Direction.SOUTH:
                return self.south
            case Direction.WEST:
                return self.west
        raise ValueError(f"Unknown direction: {direction!r}")

    @property
    def exits(self) -> tuple[ExitType, ExitType, ExitType, ExitType]:
        """Exits in Direction order (N, E, S, W)."""
        return (self.north, self.east, self.south, self.west)

    def mirrored(self, index: TileIndex) -> TileDefinition:
        """Return a copy flipped about the vertical axis (east/west swapped)."""
        return replace(
            self,
            index=index,
            name=f"{self.name}_mirrored",
            east=self.west,
            west=self.east,
            mirrored_from=self.index,
        )


class TileSource(Protocol):
    """Anything that can be turned into a TileDefinition (e.g. a RoomTemplate)."""

    def to_tile(self, index: TileIndex) -> TileDefinition: ...


class TileCatalog:
    """Immutable, ordered set of tile definitions.

    Insertion order is the enumeration order of every candidate set, which
    makes it the tie-break order for deterministic runs.
    """

    def __init__(self, tiles: Sequence[TileDefinition]) -> None:
        self._tiles: tuple[TileDefinition, ...] = tuple(tiles)
        # exits[tile_index, direction] -> ExitType value
        self._exits = np.array(
            [[int(e) for e in tile.exits] for tile in self._tiles], dtype=np.int8
        ).reshape(len(self._tiles), len(DIRECTIONS))
        self._exits.setflags(write=False)

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[TileDefinition]:
        return iter(self._tiles)

    def __getitem__(self, index: TileIndex) -> TileDefinition:
        return self._tiles[index]

    def __repr__(self) -> str:
        return f"TileCatalog({len(self)} tiles)"

    @property
    def tiles(self) -> tuple[TileDefinition, ...]:
        return self._tiles

    @property
    def names(self) -> list[str]:
        return [tile.name for tile in self._tiles]

    @property
    def exits(self) -> np.ndarray:
        """Read-only ``(tile_count, 4)`` int8 array of exits in Direction order."""
        return self._exits

    def tiles_with_exit(self, direction: Direction, exit_type: ExitType) -> np.ndarray:
        """Boolean mask of tiles whose exit on ``direction`` equals ``exit_type``."""
        return self._exits[:, direction] == exit_type


def _coerce(entry: TileDefinition | TileSource, index: TileIndex) -> TileDefinition:
    """Turn one base entry into a TileDefinition at ``index``."""
    if isinstance(entry, TileDefinition):
        tile = replace(entry, index=index, mirrored_from=None)
    elif hasattr(entry, "to_tile"):
        tile = entry.to_tile(index)
    else:
        raise InvalidCatalogError(
            f"Catalog entry {index} is not a tile definition: {entry!r}"
        )

    for direction in DIRECTIONS:
        value = tile.exit(direction)
        if not isinstance(value, ExitType):
            raise InvalidCatalogError(
                f"Tile {tile.name!r} has invalid {direction.name.lower()} exit: "
                f"{value!r}"
            )
    return tile


def build_catalog(
    base_definitions: Iterable[TileDefinition | TileSource],
    include_mirrors: bool = False,
) -> TileCatalog:
    """Build an immutable catalog from base tile definitions.

    Args:
        base_definitions: Tiles in the order they should be enumerated.
            Indices are reassigned to match catalog position.
        include_mirrors: Append one east/west mirrored derivative per base tile,
            after all base tiles.

    Returns:
        The new TileCatalog.

    Raises:
        InvalidCatalogError: If there are no base definitions or one of them
            is malformed.
    """
    # Snapshot first; mirrors are appended to a separate list below.
    base = tuple(
        _coerce(entry, index) for index, entry in enumerate(base_definitions)
    )
    if not base:
        raise InvalidCatalogError("Tile catalog needs at least one base definition")

    mirrors: list[TileDefinition] = []
    if include_mirrors:
        for tile in base:
            mirrors.append(tile.mirrored(len(base) + len(mirrors)))

    return TileCatalog(base + tuple(mirrors))

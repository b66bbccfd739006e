"""Shared catalogs and assertions for generation tests."""

from __future__ import annotations

from typing import TypeVar

from roomgen.events import GenerationEvent
from roomgen.generation.catalog import (
    Direction,
    ExitType,
    TileCatalog,
    TileDefinition,
    build_catalog,
)
from roomgen.generation.grid import CellState, GridState

PLUG = ExitType.DOOR

E = TypeVar("E", bound=GenerationEvent)


class EventRecorder:
    """Publish target that keeps every event in order."""

    def __init__(self) -> None:
        self.events: list[GenerationEvent] = []

    def __call__(self, event: GenerationEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type[E]) -> list[E]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()


def make_pair_catalog() -> TileCatalog:
    """A opens east, B opens west. On a 2x1 grid only A|B fits."""
    return build_catalog(
        [
            TileDefinition(0, "A", east=PLUG),
            TileDefinition(1, "B", west=PLUG),
        ]
    )


def make_all_open_catalog() -> TileCatalog:
    """Tiles with an opening on every side. Nothing fits on any border."""
    return build_catalog(
        [
            TileDefinition(0, "cross", PLUG, PLUG, PLUG, PLUG),
            TileDefinition(
                1,
                "cross_corridor",
                ExitType.CORRIDOR,
                ExitType.CORRIDOR,
                ExitType.CORRIDOR,
                ExitType.CORRIDOR,
            ),
        ]
    )


def assert_layout_valid(grid: GridState, catalog: TileCatalog) -> None:
    """Check border and adjacency rules over all resolved cells."""
    for x in range(grid.width):
        for y in range(grid.height):
            tile_index = grid.tile_at(x, y)
            if tile_index is None:
                assert grid.state(x, y) is not CellState.RESOLVED
                continue
            tile = catalog[tile_index]

            if x == 0:
                assert tile.west is ExitType.NONE, f"open west wall at ({x}, {y})"
            if x == grid.width - 1:
                assert tile.east is ExitType.NONE, f"open east wall at ({x}, {y})"
            if y == 0:
                assert tile.south is ExitType.NONE, f"open south wall at ({x}, {y})"
            if y == grid.height - 1:
                assert tile.north is ExitType.NONE, f"open north wall at ({x}, {y})"

            east_index = grid.tile_at(x + 1, y) if x + 1 < grid.width else None
            if east_index is not None:
                assert tile.east == catalog[east_index].west, (
                    f"east/west mismatch between ({x}, {y}) and ({x + 1}, {y})"
                )
            north_index = grid.tile_at(x, y + 1) if y + 1 < grid.height else None
            if north_index is not None:
                assert tile.exit(Direction.NORTH) == catalog[north_index].south, (
                    f"north/south mismatch between ({x}, {y}) and ({x}, {y + 1})"
                )

"""Tests for tile definitions and catalog building."""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from roomgen.generation.catalog import (
    DIR_OFFSETS,
    DIRECTIONS,
    Direction,
    ExitType,
    InvalidCatalogError,
    TileCatalog,
    TileDefinition,
    build_catalog,
)
from roomgen.generation.rooms import RoomTemplate

DOOR = ExitType.DOOR
CORRIDOR = ExitType.CORRIDOR


def make_base_tiles() -> list[TileDefinition]:
    return [
        TileDefinition(0, "west_door", west=DOOR),
        TileDefinition(1, "east_corridor", north=DOOR, east=CORRIDOR),
        TileDefinition(2, "hall_ew", east=DOOR, west=DOOR),
    ]


# =============================================================================
# Directions
# =============================================================================


class TestDirection:
    def test_opposites(self) -> None:
        assert Direction.NORTH.opposite is Direction.SOUTH
        assert Direction.SOUTH.opposite is Direction.NORTH
        assert Direction.EAST.opposite is Direction.WEST
        assert Direction.WEST.opposite is Direction.EAST

    def test_north_is_positive_y(self) -> None:
        """North points to increasing y, east to increasing x."""
        assert Direction.NORTH.offset == (0, 1)
        assert Direction.EAST.offset == (1, 0)

    def test_opposite_offsets_cancel(self) -> None:
        for direction in DIRECTIONS:
            dx, dy = DIR_OFFSETS[direction]
            ox, oy = DIR_OFFSETS[direction.opposite]
            assert (dx + ox, dy + oy) == (0, 0)


# =============================================================================
# Tile definitions
# =============================================================================


class TestTileDefinition:
    def test_exit_lookup_matches_fields(self) -> None:
        tile = TileDefinition(
            0, "mixed", north=DOOR, east=CORRIDOR, south=ExitType.WIDE
        )
        assert tile.exit(Direction.NORTH) is DOOR
        assert tile.exit(Direction.EAST) is CORRIDOR
        assert tile.exit(Direction.SOUTH) is ExitType.WIDE
        assert tile.exit(Direction.WEST) is ExitType.NONE
        assert tile.exits == (DOOR, CORRIDOR, ExitType.WIDE, ExitType.NONE)

    def test_tiles_are_immutable(self) -> None:
        tile = TileDefinition(0, "room")
        with pytest.raises(dataclasses.FrozenInstanceError):
            tile.north = DOOR  # type: ignore[misc]

    def test_mirrored_swaps_east_and_west_only(self) -> None:
        tile = TileDefinition(
            3, "airlock", north=DOOR, east=CORRIDOR, south=ExitType.WIDE, west=DOOR
        )
        mirror = tile.mirrored(7)

        assert mirror.index == 7
        assert mirror.name == "airlock_mirrored"
        assert mirror.mirrored_from == 3
        assert mirror.east is DOOR
        assert mirror.west is CORRIDOR
        assert mirror.north is DOOR
        assert mirror.south is ExitType.WIDE
        # Original untouched
        assert tile.east is CORRIDOR
        assert tile.west is DOOR


# =============================================================================
# build_catalog
# =============================================================================


class TestBuildCatalog:
    def test_empty_base_raises(self) -> None:
        with pytest.raises(InvalidCatalogError):
            build_catalog([])

    def test_empty_base_with_mirrors_raises(self) -> None:
        with pytest.raises(InvalidCatalogError):
            build_catalog([], include_mirrors=True)

    def test_malformed_exit_raises(self) -> None:
        bad = TileDefinition(0, "bad", north=1)  # type: ignore[arg-type]
        with pytest.raises(InvalidCatalogError, match="north"):
            build_catalog([bad])

    def test_non_tile_entry_raises(self) -> None:
        with pytest.raises(InvalidCatalogError):
            build_catalog(["not a tile"])  # type: ignore[list-item]

    def test_preserves_order_and_reassigns_indices(self) -> None:
        tiles = [
            TileDefinition(40, "first"),
            TileDefinition(10, "second", north=DOOR),
        ]
        catalog = build_catalog(tiles)

        assert catalog.names == ["first", "second"]
        assert [tile.index for tile in catalog] == [0, 1]

    def test_without_mirrors_has_base_tiles_only(self) -> None:
        catalog = build_catalog(make_base_tiles())
        assert len(catalog) == 3
        assert all(tile.mirrored_from is None for tile in catalog)

    def test_mirrors_are_appended_after_base_tiles(self) -> None:
        base = make_base_tiles()
        catalog = build_catalog(base, include_mirrors=True)

        assert len(catalog) == 2 * len(base)
        assert catalog.names[:3] == ["west_door", "east_corridor", "hall_ew"]
        assert catalog.names[3:] == [
            "west_door_mirrored",
            "east_corridor_mirrored",
            "hall_ew_mirrored",
        ]
        for offset, original in enumerate(catalog.tiles[:3]):
            mirror = catalog[3 + offset]
            assert mirror.index == 3 + offset
            assert mirror.mirrored_from == original.index
            assert mirror.east is original.west
            assert mirror.west is original.east
            assert mirror.north is original.north
            assert mirror.south is original.south

    def test_mirroring_does_not_touch_input(self) -> None:
        """Building mirrors from a list never grows or edits that list."""
        base = make_base_tiles()
        snapshot = list(base)

        build_catalog(base, include_mirrors=True)

        assert base == snapshot

    def test_accepts_generators(self) -> None:
        catalog = build_catalog(
            (tile for tile in make_base_tiles()), include_mirrors=True
        )
        assert len(catalog) == 6

    def test_accepts_room_templates(self) -> None:
        catalog = build_catalog(
            [RoomTemplate("closet"), RoomTemplate("hall", east=DOOR, west=DOOR)]
        )
        assert catalog.names == ["closet", "hall"]
        assert catalog[1].east is DOOR
        assert catalog[1].index == 1


# =============================================================================
# TileCatalog
# =============================================================================


class TestTileCatalog:
    def test_exit_table_shape_and_values(self) -> None:
        catalog = build_catalog(make_base_tiles())

        assert catalog.exits.shape == (3, 4)
        assert catalog.exits[1, Direction.NORTH] == DOOR
        assert catalog.exits[1, Direction.EAST] == CORRIDOR
        assert catalog.exits[0, Direction.WEST] == DOOR

    def test_exit_table_is_read_only(self) -> None:
        catalog = build_catalog(make_base_tiles())
        with pytest.raises(ValueError):
            catalog.exits[0, 0] = 3

    def test_tiles_with_exit(self) -> None:
        catalog = build_catalog(make_base_tiles())

        west_doors = catalog.tiles_with_exit(Direction.WEST, DOOR)
        np.testing.assert_array_equal(west_doors, [True, False, True])

        closed_east = catalog.tiles_with_exit(Direction.EAST, ExitType.NONE)
        np.testing.assert_array_equal(closed_east, [True, False, False])

    def test_sequence_protocol(self) -> None:
        catalog = build_catalog(make_base_tiles())
        assert isinstance(catalog, TileCatalog)
        assert len(catalog) == 3
        assert catalog[2].name == "hall_ew"
        assert [tile.name for tile in catalog] == catalog.names

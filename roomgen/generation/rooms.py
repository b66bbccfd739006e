"""Room templates for the default layout catalog.

Templates describe rooms the way a level designer thinks about them: a name, a
short description, and which kind of opening sits on each wall. build_catalog
reduces them to TileDefinitions.

The DOOR rooms cover all sixteen combinations of open/closed walls, so a
catalog made only of them can always satisfy its neighbors. The CORRIDOR rooms
break that closure on purpose; a corridor mouth must meet another corridor
mouth, and some neighborhoods have no room that fits. Those cells become
contradictions and are handled by the active contradiction policy.
"""

from __future__ import annotations

from dataclasses import dataclass

from roomgen.types import TileIndex

from .catalog import ExitType, TileCatalog, TileDefinition, build_catalog

NO = ExitType.NONE
DR = ExitType.DOOR
CR = ExitType.CORRIDOR


@dataclass(frozen=True)
class RoomTemplate:
    """Template for one room prefab.

    Attributes:
        name: Unique name of the room.
        north, east, south, west: Opening on each wall.
        description: Free text for tooling and debug views.
    """

    name: str
    north: ExitType = ExitType.NONE
    east: ExitType = ExitType.NONE
    south: ExitType = ExitType.NONE
    west: ExitType = ExitType.NONE
    description: str = ""

    def to_tile(self, index: TileIndex) -> TileDefinition:
        return TileDefinition(
            index=index,
            name=self.name,
            north=self.north,
            east=self.east,
            south=self.south,
            west=self.west,
        )


# Walls are listed N, E, S, W.
DOOR_ROOM_TEMPLATES: tuple[RoomTemplate, ...] = (
    RoomTemplate("closet", NO, NO, NO, NO, "Sealed storage room"),
    RoomTemplate("dead_end_n", DR, NO, NO, NO, "Single door to the north"),
    RoomTemplate("dead_end_e", NO, DR, NO, NO, "Single door to the east"),
    RoomTemplate("dead_end_s", NO, NO, DR, NO, "Single door to the south"),
    RoomTemplate("dead_end_w", NO, NO, NO, DR, "Single door to the west"),
    RoomTemplate("hall_ns", DR, NO, DR, NO, "North-south hallway"),
    RoomTemplate("hall_ew", NO, DR, NO, DR, "East-west hallway"),
    RoomTemplate("corner_ne", DR, DR, NO, NO),
    RoomTemplate("corner_se", NO, DR, DR, NO),
    RoomTemplate("corner_sw", NO, NO, DR, DR),
    RoomTemplate("corner_nw", DR, NO, NO, DR),
    RoomTemplate("junction_n", DR, DR, NO, DR, "T-junction open to the north"),
    RoomTemplate("junction_e", DR, DR, DR, NO, "T-junction open to the east"),
    RoomTemplate("junction_s", NO, DR, DR, DR, "T-junction open to the south"),
    RoomTemplate("junction_w", DR, NO, DR, DR, "T-junction open to the west"),
    RoomTemplate("crossroads", DR, DR, DR, DR, "Doors on every wall"),
)

CORRIDOR_ROOM_TEMPLATES: tuple[RoomTemplate, ...] = (
    RoomTemplate("tunnel_ew", NO, CR, NO, CR, "Long east-west crawlspace"),
    RoomTemplate("tunnel_ns", CR, NO, CR, NO, "Long north-south crawlspace"),
    RoomTemplate("airlock", NO, CR, NO, DR, "Door west, crawlspace east"),
    RoomTemplate("shaft_top", NO, NO, CR, NO, "Crawlspace dropping south"),
    RoomTemplate("shaft_bottom", CR, NO, NO, NO, "Crawlspace rising north"),
)

DEFAULT_ROOM_TEMPLATES: tuple[RoomTemplate, ...] = (
    DOOR_ROOM_TEMPLATES + CORRIDOR_ROOM_TEMPLATES
)


def create_default_catalog(include_mirrors: bool = False) -> TileCatalog:
    """Build the catalog of all default rooms."""
    return build_catalog(DEFAULT_ROOM_TEMPLATES, include_mirrors=include_mirrors)


def create_door_catalog() -> TileCatalog:
    """Build a catalog of DOOR rooms only. Such layouts never contradict."""
    return build_catalog(DOOR_ROOM_TEMPLATES)

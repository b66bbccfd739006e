"""Room layout generation.

This package provides the pieces of the step-at-a-time layout generator:
- TileCatalog / build_catalog: Tiles and their edge exits, optionally mirrored
- GridState: Per-cell candidate sets for one attempt
- CompatibilitySolver: Observation, collapse and single-hop propagation
- GenerationProcess: Resumable state machine around the solver

And a default set of room templates:
- RoomTemplate, DEFAULT_ROOM_TEMPLATES, create_default_catalog
"""

from .catalog import (
    Direction,
    ExitType,
    InvalidCatalogError,
    TileCatalog,
    TileDefinition,
    build_catalog,
)
from .grid import CellState, GridState, InvalidDimensionsError
from .process import GenerationProcess, ProcessState
from .rooms import DEFAULT_ROOM_TEMPLATES, RoomTemplate, create_default_catalog
from .solver import CompatibilitySolver, ContradictionPolicy, StepOutcome

__all__ = [
    "DEFAULT_ROOM_TEMPLATES",
    "CellState",
    "CompatibilitySolver",
    "ContradictionPolicy",
    "Direction",
    "ExitType",
    "GenerationProcess",
    "GridState",
    "InvalidCatalogError",
    "InvalidDimensionsError",
    "ProcessState",
    "RoomTemplate",
    "StepOutcome",
    "TileCatalog",
    "TileDefinition",
    "build_catalog",
    "create_default_catalog",
]

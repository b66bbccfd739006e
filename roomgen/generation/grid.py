"""Per-cell solver state for one generation attempt.

The grid stores every cell's candidate set as a row of booleans over catalog
indices, so a candidate set is always ordered by catalog index and can never
hold duplicates. All arrays are indexed ``[x, y]``, matching the layout's
``(x, y)`` positions.

Only the solver mutates a GridState. Renderers read it through the query
methods, or better, through the events the solver publishes.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from roomgen.types import GridCoord, GridPos, TileIndex

UNRESOLVED_TILE = -1


class InvalidDimensionsError(ValueError):
    """Raised when a grid is requested with a non-positive width or height."""

    pass


class CellState(Enum):
    """Lifecycle of a single cell within one attempt."""

    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    CONTRADICTION = "contradiction"


def validate_dimensions(width: int, height: int) -> None:
    """Raise InvalidDimensionsError unless both dimensions are positive."""
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(
            f"Grid dimensions must be positive, got {width}x{height}"
        )


class GridState:
    """Candidate sets, committed tiles and contradiction flags for a grid.

    Attributes:
        width: Grid width in cells.
        height: Grid height in cells.
        tile_count: Size of the catalog the candidate rows range over.
        candidates: ``(width, height, tile_count)`` bool array.
        resolved: ``(width, height)`` array of committed tile indices,
            ``UNRESOLVED_TILE`` where nothing is committed.
        contradiction: ``(width, height)`` bool array of cells that ran out
            of candidates before being resolved.
        contradiction_reported: Cells whose contradiction was already handed
            to a contradiction policy.
    """

    def __init__(self, width: int, height: int, tile_count: int) -> None:
        validate_dimensions(width, height)
        self.width = width
        self.height = height
        self.tile_count = tile_count

        self.candidates = np.ones((width, height, tile_count), dtype=bool)
        self.resolved = np.full((width, height), UNRESOLVED_TILE, dtype=np.int32)
        self.contradiction = np.zeros((width, height), dtype=bool)
        self.contradiction_reported = np.zeros((width, height), dtype=bool)

    def __repr__(self) -> str:
        return (
            f"GridState({self.width}x{self.height}, "
            f"resolved={self.resolved_count}, "
            f"contradictions={self.contradiction_count})"
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def in_bounds(self, x: GridCoord, y: GridCoord) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def positions(self) -> list[GridPos]:
        """All cell positions in scan order (x-major, then y)."""
        return [(x, y) for x in range(self.width) for y in range(self.height)]

    def state(self, x: GridCoord, y: GridCoord) -> CellState:
        if self.resolved[x, y] != UNRESOLVED_TILE:
            return CellState.RESOLVED
        if self.contradiction[x, y]:
            return CellState.CONTRADICTION
        return CellState.UNRESOLVED

    def candidates_at(self, x: GridCoord, y: GridCoord) -> list[TileIndex]:
        """Candidate tile indices for a cell, in catalog order."""
        return [int(i) for i in np.flatnonzero(self.candidates[x, y])]

    def candidate_count(self, x: GridCoord, y: GridCoord) -> int:
        return int(np.count_nonzero(self.candidates[x, y]))

    def candidate_counts(self) -> np.ndarray:
        """``(width, height)`` candidate counts. Resolved cells count as 1."""
        return np.count_nonzero(self.candidates, axis=2)

    def tile_at(self, x: GridCoord, y: GridCoord) -> TileIndex | None:
        tile = int(self.resolved[x, y])
        return None if tile == UNRESOLVED_TILE else tile

    def is_reported(self, x: GridCoord, y: GridCoord) -> bool:
        return bool(self.contradiction_reported[x, y])

    @property
    def resolved_count(self) -> int:
        return int(np.count_nonzero(self.resolved != UNRESOLVED_TILE))

    @property
    def contradiction_count(self) -> int:
        return int(np.count_nonzero(self.contradiction))

    @property
    def unresolved_count(self) -> int:
        return self.width * self.height - self.resolved_count - self.contradiction_count

    def contradiction_positions(self) -> list[GridPos]:
        return [(int(x), int(y)) for x, y in np.argwhere(self.contradiction)]

    def to_layout(self) -> list[list[TileIndex | None]]:
        """Committed tiles as ``layout[x][y]``, None where nothing is committed."""
        return [
            [self.tile_at(x, y) for y in range(self.height)]
            for x in range(self.width)
        ]

    # ------------------------------------------------------------------
    # Mutation (solver only)
    # ------------------------------------------------------------------

    def restrict(self, x: GridCoord, y: GridCoord, allowed: np.ndarray) -> int:
        """Intersect an unresolved cell's candidates with ``allowed``.

        A cell left without candidates becomes a contradiction.

        Returns:
            The number of candidates remaining.
        """
        if self.state(x, y) is not CellState.UNRESOLVED:
            raise ValueError(f"Cell ({x}, {y}) is not unresolved")

        self.candidates[x, y] &= allowed
        remaining = self.candidate_count(x, y)
        if remaining == 0:
            self.contradiction[x, y] = True
        return remaining

    def resolve(self, x: GridCoord, y: GridCoord, tile: TileIndex) -> None:
        """Commit ``tile`` at an unresolved cell. It must be a candidate there."""
        if self.state(x, y) is not CellState.UNRESOLVED:
            raise ValueError(f"Cell ({x}, {y}) is not unresolved")
        if not self.candidates[x, y, tile]:
            raise ValueError(f"Tile {tile} is not a candidate at ({x}, {y})")

        self.candidates[x, y] = False
        self.candidates[x, y, tile] = True
        self.resolved[x, y] = tile

    def mark_reported(self, x: GridCoord, y: GridCoord) -> None:
        self.contradiction_reported[x, y] = True

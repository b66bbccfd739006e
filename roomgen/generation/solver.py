"""Step-at-a-time Wave Function Collapse solver for room layouts.

Unlike a batch solver, this one never loops on its own. Each call to
``step()`` does exactly one round of:

1. Observation: scan the grid for the most constrained unresolved cell
   (fewest remaining candidates, ties broken by a little random jitter) and
   hand any newly found contradiction cells to the contradiction policy.
2. Collapse: commit one of that cell's candidates, drawn uniformly.
3. Propagation: narrow the candidate sets of the cell's direct neighbors to
   tiles whose facing exit matches the committed tile.

Propagation is a single hop. A neighbor that was narrowed does not in turn
narrow its own neighbors; they catch up when that neighbor is collapsed. This
keeps each step cheap and easy to visualize, at the cost of discovering
contradictions later than full arc consistency would.

Grid borders are handled once, in ``initialize()``, by removing every tile
with an opening on a border edge.

Usage:
    solver = CompatibilitySolver(catalog, rng)
    grid = solver.initialize(width, height)
    while solver.step(grid, ContradictionPolicy.PLACEHOLDER) is StepOutcome.COLLAPSED:
        pass
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from enum import Enum, auto

import numpy as np

from roomgen import config
from roomgen.events import (
    CandidatesChangedEvent,
    ContradictionEvent,
    GenerationEvent,
    TilePlacedEvent,
    publish_event,
)
from roomgen.types import GridCoord, GridPos, TileIndex
from roomgen.util.rng import RNG

from .catalog import DIRECTIONS, Direction, ExitType, TileCatalog
from .grid import CellState, GridState

logger = logging.getLogger(__name__)


class ContradictionPolicy(Enum):
    """What the solver does when it finds a cell with no candidates left."""

    # Report the cell once and keep solving the rest of the grid. Renderers
    # usually spawn an error tile at the reported position.
    PLACEHOLDER = "placeholder"
    # Throw the grid away and start a fresh attempt.
    RESTART = "restart"

    @classmethod
    def from_name(cls, name: str) -> ContradictionPolicy:
        """Look a policy up by its config name, e.g. ``"restart"``."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(policy.value for policy in cls)
            raise ValueError(
                f"Unknown contradiction policy {name!r} (expected one of: {valid})"
            ) from None


class StepOutcome(Enum):
    """Result of a single solver step."""

    COLLAPSED = auto()  # One cell was resolved and its neighbors narrowed
    RESTART = auto()  # Restart policy hit a contradiction; grid must be rebuilt
    EXHAUSTED = auto()  # No unresolved cell with candidates remains


class CompatibilitySolver:
    """Observation, collapse and propagation over a GridState.

    The solver owns no grid itself; it initializes one and then advances
    whatever grid it is handed, so a restart only needs a fresh
    ``initialize()`` call. All randomness comes from a single stream shared by
    the tie-break jitter and the tile draw.
    """

    def __init__(
        self,
        catalog: TileCatalog,
        rng: RNG,
        publish: Callable[[GenerationEvent], None] = publish_event,
        jitter: float = config.CONSTRAINT_JITTER,
    ) -> None:
        """Initialize the solver.

        Args:
            catalog: Tiles to place.
            rng: Random stream for jitter and tile choice.
            publish: Receives every event the solver emits.
            jitter: Half-width of the tie-break noise added to scores.
        """
        self.catalog = catalog
        self.rng = rng
        self.publish = publish
        self.jitter = jitter

    @property
    def tile_count(self) -> int:
        return len(self.catalog)

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def _border_mask(self, direction: Direction) -> np.ndarray:
        """Tiles allowed on the grid border in ``direction`` (closed edge)."""
        return self.catalog.tiles_with_exit(direction, ExitType.NONE)

    def initialize(self, width: int, height: int) -> GridState:
        """Create a grid where every cell allows every border-legal tile.

        Raises:
            InvalidDimensionsError: If width or height is not positive.
        """
        grid = GridState(width, height, self.tile_count)

        border_masks = {
            direction: self._border_mask(direction) for direction in DIRECTIONS
        }
        for x, y in grid.positions():
            allowed = np.ones(self.tile_count, dtype=bool)
            if y == height - 1:
                allowed &= border_masks[Direction.NORTH]
            if y == 0:
                allowed &= border_masks[Direction.SOUTH]
            if x == 0:
                allowed &= border_masks[Direction.WEST]
            if x == width - 1:
                allowed &= border_masks[Direction.EAST]

            remaining = grid.restrict(x, y, allowed)
            self.publish(CandidatesChangedEvent(x, y, remaining, self.tile_count))

        logger.info(
            f"WFC initialization done: {width}x{height} grid, "
            f"{self.tile_count} tiles, "
            f"{grid.contradiction_count} cells empty after border filtering"
        )
        return grid

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self, grid: GridState, policy: ContradictionPolicy) -> StepOutcome:
        """Run one observe, collapse, propagate round on ``grid``."""
        picked = None
        biggest_constraint = -math.inf

        for x, y in grid.positions():
            state = grid.state(x, y)
            if state is CellState.RESOLVED:
                continue

            if state is CellState.CONTRADICTION:
                if grid.is_reported(x, y):
                    continue
                grid.mark_reported(x, y)
                self.publish(ContradictionEvent(x, y, policy))
                if policy is ContradictionPolicy.RESTART:
                    logger.debug(f"Contradiction at ({x}, {y}), restarting")
                    return StepOutcome.RESTART
                logger.debug(f"Contradiction at ({x}, {y}), leaving placeholder")
                continue

            # Fewer candidates = more constrained. The jitter only reorders
            # cells whose candidate counts are equal.
            constraint = self.tile_count - grid.candidate_count(x, y)
            constraint += self.rng.uniform(-self.jitter, self.jitter)
            if constraint > biggest_constraint:
                biggest_constraint = constraint
                picked = (x, y)

        if picked is None:
            return StepOutcome.EXHAUSTED

        tile = self._collapse(grid, *picked)
        self._propagate(grid, picked, tile)
        return StepOutcome.COLLAPSED

    def _collapse(self, grid: GridState, x: GridCoord, y: GridCoord) -> TileIndex:
        """Commit a uniformly drawn candidate at ``(x, y)``."""
        available = grid.candidates_at(x, y)
        tile = available[self.rng.randrange(len(available))]
        grid.resolve(x, y, tile)
        self.publish(TilePlacedEvent(x, y, tile))
        logger.debug(
            f"Placed {self.catalog[tile].name} at ({x}, {y}) "
            f"from {len(available)} candidates"
        )
        return tile

    def _propagate(self, grid: GridState, origin: GridPos, tile: TileIndex) -> None:
        """Drop neighbor candidates whose facing exit doesn't match ``tile``."""
        x, y = origin
        placed = self.catalog[tile]

        for direction in DIRECTIONS:
            dx, dy = direction.offset
            nx, ny = x + dx, y + dy

            if not grid.in_bounds(nx, ny):
                continue
            if grid.state(nx, ny) is not CellState.UNRESOLVED:
                continue

            # The neighbor's edge facing back at us must carry the same exit.
            allowed = self.catalog.tiles_with_exit(
                direction.opposite, placed.exit(direction)
            )
            remaining = grid.restrict(nx, ny, allowed)
            self.publish(CandidatesChangedEvent(nx, ny, remaining, self.tile_count))

            if remaining == 0:
                logger.debug(f"Propagation from ({x}, {y}) emptied ({nx}, {ny})")

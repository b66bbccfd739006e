"""Resumable generation process.

GenerationProcess wraps the solver in an explicit state machine so a host can
drive generation one unit of work at a time, for instance once per rendered
frame, and stop or restart it between any two units:

    UNINITIALIZED --reset()--> INITIALIZING --(grid built)--> LOOPING
    LOOPING --advance()--> LOOPING            (one cell collapsed, or restart)
    LOOPING --advance()--> FINISHED           (no eligible cell left)
    any state --reset()--> INITIALIZING --> LOOPING

Everything a loop would keep in local variables (the grid, counters, the
attempt number) lives on the instance, so each ``advance()`` call picks up
exactly where the previous one stopped. Steps are atomic; there is no partial
rollback.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum, auto

from roomgen.events import (
    GenerationEvent,
    GenerationFinishedEvent,
    GenerationRestartedEvent,
    GenerationStartedEvent,
    publish_event,
)
from roomgen.types import GridCoord, TileIndex
from roomgen.util.rng import RNG

from .catalog import TileCatalog
from .grid import GridState, validate_dimensions
from .solver import CompatibilitySolver, ContradictionPolicy, StepOutcome

logger = logging.getLogger(__name__)


class ProcessState(Enum):
    UNINITIALIZED = auto()
    INITIALIZING = auto()
    LOOPING = auto()
    FINISHED = auto()


class GenerationProcess:
    """One layout generation, advanced a step at a time.

    Attributes:
        catalog: Tiles to place.
        width, height: Grid size in cells.
        policy: Contradiction policy read on every scan. May be changed
            between steps.
        state: Current ProcessState.
        grid: The current attempt's GridState, None before the first reset.
        step_count: advance() calls that ran a solver step since the last reset.
        attempt: 1 for the first grid after a reset, incremented on restarts.
        collapse_count: Cells resolved in the current attempt.
    """

    def __init__(
        self,
        catalog: TileCatalog,
        width: int,
        height: int,
        rng: RNG,
        policy: ContradictionPolicy = ContradictionPolicy.PLACEHOLDER,
        publish: Callable[[GenerationEvent], None] = publish_event,
    ) -> None:
        self.catalog = catalog
        self.width = width
        self.height = height
        self.policy = policy
        self._publish = publish
        self.solver = CompatibilitySolver(catalog, rng, publish)

        self.state = ProcessState.UNINITIALIZED
        self.grid: GridState | None = None
        self.step_count = 0
        self.attempt = 0
        self.collapse_count = 0

    @property
    def is_finished(self) -> bool:
        return self.state is ProcessState.FINISHED

    def tile_at(self, x: GridCoord, y: GridCoord) -> TileIndex | None:
        """Tile committed at ``(x, y)`` in the current attempt, if any."""
        if self.grid is None:
            return None
        return self.grid.tile_at(x, y)

    def layout(self) -> list[list[TileIndex | None]]:
        """Committed tiles as ``layout[x][y]``. Empty before the first reset."""
        if self.grid is None:
            return []
        return self.grid.to_layout()

    def reset(self) -> None:
        """Discard all progress and build a fresh grid.

        Building the grid is itself one unit of work: after reset() returns
        the process is LOOPING and the next advance() runs the first step.

        Raises:
            InvalidDimensionsError: If width or height is not positive.
        """
        validate_dimensions(self.width, self.height)

        self.state = ProcessState.INITIALIZING
        self.step_count = 0
        self.attempt = 1
        self._begin_attempt()
        self.state = ProcessState.LOOPING

    def _begin_attempt(self) -> None:
        # Consumers clear their view on the start event, before the new grid's
        # initial candidate counts arrive.
        self._publish(GenerationStartedEvent(self.width, self.height, self.attempt))
        self.grid = self.solver.initialize(self.width, self.height)
        self.collapse_count = 0

    def advance(self) -> ProcessState:
        """Perform one unit of work and return the resulting state.

        Before any reset this performs the reset instead, and that reset is
        the whole unit of work: no cell is collapsed until the next call.
        ExecutionController.step() differs here; it resets and then advances,
        so a single step from a fresh controller already places a tile. Once
        FINISHED this does nothing.
        """
        match self.state:
            case ProcessState.UNINITIALIZED:
                self.reset()
            case ProcessState.LOOPING:
                self._step()
            case ProcessState.FINISHED:
                pass
            case ProcessState.INITIALIZING:
                raise RuntimeError("advance() called while initializing")
        return self.state

    def _step(self) -> None:
        assert self.grid is not None

        outcome = self.solver.step(self.grid, self.policy)
        self.step_count += 1

        match outcome:
            case StepOutcome.COLLAPSED:
                self.collapse_count += 1
            case StepOutcome.RESTART:
                self.attempt += 1
                logger.warning(
                    f"Contradiction after {self.collapse_count} placements, "
                    f"starting attempt {self.attempt}"
                )
                self._publish(GenerationRestartedEvent(self.attempt))
                self._begin_attempt()
            case StepOutcome.EXHAUSTED:
                self.state = ProcessState.FINISHED
                contradictions = self.grid.contradiction_count
                logger.info(
                    f"Generation finished after {self.step_count} steps "
                    f"(attempt {self.attempt}, {contradictions} contradictions)"
                )
                self._publish(
                    GenerationFinishedEvent(
                        success=True,
                        contradiction_count=contradictions,
                        step_count=self.step_count,
                    )
                )

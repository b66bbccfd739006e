"""Host-facing controls for a single generation process.

The controller is the only thing a host (a game loop, an editor panel, the CLI)
talks to. It mirrors the buttons of a generator debug panel: Reset, Step,
Run, Pause, and a contradiction policy selector. The host calls ``tick()``
once per frame; ticks only advance generation while running continuously.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from roomgen import config
from roomgen.events import GenerationEvent, publish_event
from roomgen.generation.catalog import TileCatalog
from roomgen.generation.process import GenerationProcess, ProcessState
from roomgen.generation.solver import ContradictionPolicy
from roomgen.types import RandomSeed
from roomgen.util.rng import RNGProvider

logger = logging.getLogger(__name__)


class ExecutionController:
    """Owns one GenerationProcess and drives it on behalf of the host."""

    def __init__(
        self,
        catalog: TileCatalog,
        width: int = config.DEFAULT_LEVEL_WIDTH,
        height: int = config.DEFAULT_LEVEL_HEIGHT,
        policy: ContradictionPolicy | None = None,
        seed: RandomSeed = config.RANDOM_SEED,
        publish: Callable[[GenerationEvent], None] = publish_event,
    ) -> None:
        """Initialize the controller. Nothing is generated until the first
        reset(), step() or run_continuously().

        Args:
            catalog: Tiles to place.
            width: Grid width in cells.
            height: Grid height in cells.
            policy: Initial contradiction policy. Defaults to the configured one.
            seed: Master seed. None gives a different layout every run.
            publish: Receives every generation event.
        """
        if policy is None:
            policy = ContradictionPolicy.from_name(config.DEFAULT_CONTRADICTION_POLICY)

        self._rng_provider = RNGProvider(seed)
        self._process = GenerationProcess(
            catalog,
            width,
            height,
            self._rng_provider.get(config.GENERATION_RNG_DOMAIN),
            policy=policy,
            publish=publish,
        )
        self._running = False

    @property
    def process(self) -> GenerationProcess:
        return self._process

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def policy(self) -> ContradictionPolicy:
        return self._process.policy

    @property
    def seed(self) -> RandomSeed:
        return self._rng_provider.master_seed

    def _ensure_started(self) -> None:
        if self._process.state is ProcessState.UNINITIALIZED:
            self.reset()

    def reset(self) -> None:
        """Throw away the current layout and initialize a new one.

        Stops continuous running. The random stream is not reseeded, so
        successive resets produce different layouts.
        """
        self._running = False
        self._process.reset()

    def reseed(self, seed: RandomSeed) -> None:
        """Reset with a new master seed.

        The process keeps its stream proxy, which picks up the new seed's
        stream on its next draw.
        """
        logger.info(f"Reseeding generation with {seed!r}")
        self._rng_provider.reset(seed)
        self.reset()

    def step(self) -> ProcessState:
        """Pause continuous running and advance exactly one step.

        A fresh controller is reset first, so the first step() both builds
        the grid and collapses a cell.
        """
        self._ensure_started()
        self._running = False
        return self._process.advance()

    def run_continuously(self) -> None:
        """Advance once per tick() until finished, reset or paused."""
        self._ensure_started()
        self._running = not self._process.is_finished

    def pause(self) -> None:
        self._running = False

    def tick(self) -> bool:
        """Host frame hook. Returns True if generation advanced."""
        if not self._running:
            return False

        self._process.advance()
        if self._process.is_finished:
            self._running = False
        return True

    def set_contradiction_policy(self, policy: ContradictionPolicy) -> None:
        """Change the policy used from the next scan on.

        Contradictions that were already reported are not revisited.
        """
        if policy is not self._process.policy:
            logger.info(f"Contradiction policy set to {policy.value}")
        self._process.policy = policy

    def run_until_finished(self, max_ticks: int = config.DEFAULT_MAX_TICKS) -> bool:
        """Tick headlessly until the process finishes or ``max_ticks`` pass.

        Returns:
            True if generation finished.
        """
        self.run_continuously()
        ticks = 0
        while self._running and ticks < max_ticks:
            self.tick()
            ticks += 1

        if not self._process.is_finished:
            logger.warning(f"Generation not finished after {max_ticks} ticks")
            self._running = False
        return self._process.is_finished

"""Generate a room layout from the command line and print it as text.

    python -m roomgen --width 8 --height 6 --seed burrito1 --policy restart

Each room is drawn as a 3x3 block with north at the top. Wall glyphs show the
exit on that side; the center shows the cell's state.
"""

from __future__ import annotations

import argparse
import logging

from roomgen import config
from roomgen.controller import ExecutionController
from roomgen.events import (
    ContradictionEvent,
    EventBus,
    GenerationRestartedEvent,
    TilePlacedEvent,
)
from roomgen.generation.catalog import ExitType, TileCatalog
from roomgen.generation.grid import CellState, GridState, InvalidDimensionsError
from roomgen.generation.rooms import create_default_catalog
from roomgen.generation.solver import ContradictionPolicy
from roomgen.util.clock import Clock

logger = logging.getLogger(__name__)

_EXIT_GLYPHS = {
    ExitType.NONE: "#",
    ExitType.DOOR: " ",
    ExitType.CORRIDOR: ":",
    ExitType.WIDE: " ",
}
_CENTER_GLYPHS = {
    CellState.RESOLVED: ".",
    CellState.UNRESOLVED: "?",
    CellState.CONTRADICTION: "X",
}


def format_layout(grid: GridState, catalog: TileCatalog) -> str:
    """Render a grid as rows of 3x3 character blocks, north at the top."""
    lines: list[str] = []
    for y in reversed(range(grid.height)):
        top, middle, bottom = [], [], []
        for x in range(grid.width):
            state = grid.state(x, y)
            center = _CENTER_GLYPHS[state]
            tile = grid.tile_at(x, y)
            if tile is None:
                top.append("###")
                middle.append(f"#{center}#")
                bottom.append("###")
                continue

            room = catalog[tile]
            top.append(f"#{_EXIT_GLYPHS[room.north]}#")
            middle.append(
                f"{_EXIT_GLYPHS[room.west]}{center}{_EXIT_GLYPHS[room.east]}"
            )
            bottom.append(f"#{_EXIT_GLYPHS[room.south]}#")
        lines.extend("".join(row) for row in (top, middle, bottom))
    return "\n".join(lines)


class _ProgressCounter:
    """Collects event counts for the run summary."""

    def __init__(self, bus: EventBus) -> None:
        self.placed = 0
        self.contradictions = 0
        self.restarts = 0
        bus.subscribe(TilePlacedEvent, self._on_placed)
        bus.subscribe(ContradictionEvent, self._on_contradiction)
        bus.subscribe(GenerationRestartedEvent, self._on_restart)

    def _on_placed(self, event: TilePlacedEvent) -> None:
        self.placed += 1

    def _on_contradiction(self, event: ContradictionEvent) -> None:
        self.contradictions += 1

    def _on_restart(self, event: GenerationRestartedEvent) -> None:
        self.restarts += 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roomgen", description="Generate a room layout with WFC"
    )
    parser.add_argument("--width", type=int, default=config.DEFAULT_LEVEL_WIDTH)
    parser.add_argument("--height", type=int, default=config.DEFAULT_LEVEL_HEIGHT)
    parser.add_argument(
        "--seed",
        type=str,
        default=config.RANDOM_SEED,
        help="Master seed (default: random)",
    )
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in ContradictionPolicy],
        default=config.DEFAULT_CONTRADICTION_POLICY,
        help="What to do when a cell runs out of candidates",
    )
    parser.add_argument(
        "--mirrors",
        action="store_true",
        default=config.DEFAULT_INCLUDE_MIRRORS,
        help="Add east/west mirrored copies of every room",
    )
    parser.add_argument(
        "--tps",
        type=float,
        default=config.DEFAULT_TICKS_PER_SECOND,
        help="Ticks per second to pace generation at (default: uncapped)",
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=config.DEFAULT_MAX_TICKS,
        help=f"Give up after this many ticks (default: {config.DEFAULT_MAX_TICKS})",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    catalog = create_default_catalog(include_mirrors=args.mirrors)
    bus = EventBus()
    progress = _ProgressCounter(bus)

    controller = ExecutionController(
        catalog,
        width=args.width,
        height=args.height,
        policy=ContradictionPolicy.from_name(args.policy),
        seed=args.seed,
        publish=bus.publish,
    )

    clock = Clock()
    try:
        controller.run_continuously()
    except InvalidDimensionsError as exc:
        parser.error(str(exc))
    ticks = 0
    while controller.is_running and ticks < args.max_ticks:
        clock.sync(args.tps)
        controller.tick()
        ticks += 1
    controller.pause()

    process = controller.process
    assert process.grid is not None
    print(format_layout(process.grid, catalog))
    print(
        f"{'finished' if process.is_finished else 'stopped'} after {ticks} ticks: "
        f"{progress.placed} rooms placed, {progress.contradictions} contradictions, "
        f"{progress.restarts} restarts"
    )
    if ticks:
        logger.info(f"Mean tick rate: {clock.mean_tps:.1f}/s")
    return 0 if process.is_finished else 1


if __name__ == "__main__":
    raise SystemExit(main())

"""Event system for streaming generation progress to renderers and debug views.

The solver never talks to a renderer directly. Every observable change to the
layout (a tile committed, a candidate set narrowed, a contradiction found, the
run finishing) is published as an event, and whatever draws the layout
subscribes to the event types it cares about.

USE FOR:
- Spawning room instances when a tile is placed
- Candidate-count heatmaps and debug text
- Placeholder markers for contradiction cells
- Progress reporting in the CLI

DO NOT USE FOR:
- Driving the solver (use ExecutionController)
- Anything that needs a return value from the consumer
- Error handling or exception propagation

The bus is fire-and-forget: handlers execute immediately (synchronously) in
subscription order. A handler that raises is logged and skipped so one broken
consumer cannot stall generation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from typing import TYPE_CHECKING

from roomgen.types import GridCoord, TileIndex

if TYPE_CHECKING:
    from roomgen.generation.solver import ContradictionPolicy

logger = logging.getLogger(__name__)


@dataclass
class GenerationEvent:
    """Base class for all generation events."""

    pass


@dataclass
class GenerationStartedEvent(GenerationEvent):
    """A new attempt is starting.

    Published before the new grid is built, so consumers can clear the previous
    attempt's view before its initial CandidatesChangedEvents arrive.
    """

    width: int
    height: int
    attempt: int


@dataclass
class CandidatesChangedEvent(GenerationEvent):
    """An unresolved cell's candidate set was (re)computed.

    Sent for every cell at initialization and for each neighbor touched by
    propagation, even when propagation happened to remove nothing.
    """

    x: GridCoord
    y: GridCoord
    remaining: int
    total: int


@dataclass
class TilePlacedEvent(GenerationEvent):
    """A cell was committed to a tile. Sent exactly once per resolved cell."""

    x: GridCoord
    y: GridCoord
    tile_index: TileIndex


@dataclass
class ContradictionEvent(GenerationEvent):
    """A cell ran out of candidates.

    Attributes:
        x, y: Position of the contradiction cell.
        policy: The policy that was in force when the cell was reported. With
            the placeholder policy a consumer typically draws an error tile at
            this position; with the restart policy the grid is about to be
            discarded.
    """

    x: GridCoord
    y: GridCoord
    policy: ContradictionPolicy


@dataclass
class GenerationRestartedEvent(GenerationEvent):
    """The grid was discarded and rebuilt after a contradiction."""

    attempt: int


@dataclass
class GenerationFinishedEvent(GenerationEvent):
    """No eligible cells remain; the process will do nothing more until reset.

    ``success`` is True whenever the run reached its natural end. Contradiction
    cells left behind by the placeholder policy are counted separately in
    ``contradiction_count``.
    """

    success: bool
    contradiction_count: int = 0
    step_count: int = 0


class EventBus:
    """Simple event bus for publish/subscribe pattern."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = {}

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: GenerationEvent) -> None:
        """Publish an event to all subscribed handlers."""
        event_type = type(event)
        if event_type in self._handlers:
            for handler in self._handlers[event_type]:
                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error handling event {event_type.__name__}")


# Global event bus instance
_global_event_bus = EventBus()


# Public API functions


def subscribe_to_event(event_type: type, handler: Callable) -> None:
    """Subscribe to an event type globally."""
    _global_event_bus.subscribe(event_type, handler)


def unsubscribe_from_event(event_type: type, handler: Callable) -> None:
    """Unsubscribe from an event type globally."""
    _global_event_bus.unsubscribe(event_type, handler)


def publish_event(event: GenerationEvent) -> None:
    """Publish an event globally."""
    _global_event_bus.publish(event)


def reset_event_bus_for_testing() -> None:
    """Reset the global event bus. Use only in tests."""
    global _global_event_bus
    _global_event_bus = EventBus()

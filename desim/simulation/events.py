"""
Event system for the discrete-event simulation kernel.

Provides the abstract event type that model code subclasses, and the
priority queue that orders pending events by time.
"""

from __future__ import annotations

import heapq
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, NamedTuple, NewType

if TYPE_CHECKING:
    from .simulator import Simulator

# Logical simulation clock value (unitless)
SimTime = NewType("SimTime", float)


class Event(ABC):
    """A unit of deferred work executed by the simulator.

    Subclasses implement ``action`` and may override ``describe`` to give
    the event a readable label in the event log.

    The same instance is referenced by the caller (who may cancel it) and
    by the simulator's queue (which pops it later).  Cancellation is a flag
    write; the queue entry stays in place and is discarded when popped.

    Attributes:
        delay: Non-negative duration from the scheduling moment.
        time: Absolute execution time, assigned by ``Simulator.schedule``.
            None until the event has been scheduled.
        cancelled: If True, the simulator skips the event when popped.
    """

    def __init__(self, delay: float) -> None:
        if delay < 0:
            raise ValueError(f"Event delay must be non-negative, got {delay}")
        self.delay = delay
        self.time: SimTime | None = None
        self.cancelled = False

    def cancel(self) -> None:
        """Prevent this event from executing."""
        self.cancelled = True

    @abstractmethod
    def action(self, sim: Simulator) -> None:
        """Execute the event.

        Args:
            sim: The simulator executing the event. Use it to read the
                current time and to schedule follow-up events.
        """
        pass

    def describe(self) -> str:
        """Return a short label used when logging executed events."""
        return f"{type(self).__name__}()"

    def __repr__(self) -> str:
        state = " cancelled" if self.cancelled else ""
        return f"{type(self).__name__}(delay={self.delay}, time={self.time}{state})"


class ScheduledEntry(NamedTuple):
    """Heap entry: ordered by time, then by submission sequence."""

    time: SimTime
    seq: int
    event: Event


class EventQueue:
    """Priority queue of scheduled events ordered by (time, sequence).

    Uses a min-heap.  Each pushed event is stamped with an incrementing
    sequence number, so events with equal times come out in the order they
    were pushed.

    The queue does not look at ``Event.cancelled``: cancelled events stay
    in the heap until popped and the caller decides what to do with them.
    """

    def __init__(self) -> None:
        self._heap: list[ScheduledEntry] = []
        self._counter = 0

    def push(self, event: Event) -> ScheduledEntry:
        """Add a scheduled event to the queue.

        Args:
            event: Event whose ``time`` has already been assigned.

        Returns:
            The heap entry created for the event.
        """
        if event.time is None:
            raise ValueError(f"Cannot queue {event!r} before its time is assigned")
        entry = ScheduledEntry(event.time, self._counter, event)
        self._counter += 1
        heapq.heappush(self._heap, entry)
        return entry

    def pop(self) -> ScheduledEntry | None:
        """Remove and return the earliest entry, or None if the queue is empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap)

    def peek(self) -> ScheduledEntry | None:
        """Return the earliest entry without removing it."""
        return self._heap[0] if self._heap else None

    def is_empty(self) -> bool:
        """Check if queue has no entries (cancelled ones included)."""
        return not self._heap

    def __len__(self) -> int:
        """Return number of entries in queue (may include cancelled)."""
        return len(self._heap)

    def __repr__(self) -> str:
        return f"EventQueue({len(self._heap)} events)"

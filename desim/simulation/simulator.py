"""
Discrete-event simulator engine.

The simulator owns the logical clock and the event queue.  ``run`` pops
events in (time, sequence) order, jumps the clock to each event's time and
invokes its action, which may schedule further events.
"""

import logging

from .events import Event, EventQueue, SimTime

logger = logging.getLogger(__name__)


class Simulator:
    """Discrete-event simulation engine.

    The simulator maintains:
    - The current simulation time, which only moves forward
    - An event queue ordered by (time, submission sequence)
    - An optional log of executed events

    Execution is single-threaded: each action runs to completion before the
    next event is popped.  Cancelled events are discarded when they reach
    the front of the queue, without advancing the clock.
    """

    def __init__(self, log_events: bool = False):
        """Initialize the simulator.

        Args:
            log_events: Whether to log each executed event and keep it in
                ``event_log``. The log keeps every executed event for the
                simulator's lifetime and is never truncated.
        """
        self.log_events = log_events
        self.event_queue = EventQueue()
        self.event_log: list[Event] = []
        self._time = SimTime(0.0)

    def now(self) -> SimTime:
        """Return the current simulation time."""
        return self._time

    def schedule(self, event: Event) -> None:
        """Schedule an event to execute ``event.delay`` after now.

        An event is scheduled at most once; its time never changes after
        this call.

        Args:
            event: Event to schedule. Its ``time`` is set here.

        Raises:
            ValueError: If the event was already scheduled or its delay is
                negative.
        """
        if event.time is not None:
            raise ValueError(f"{event!r} is already scheduled at t={event.time}")
        if event.delay < 0:
            raise ValueError(f"Event delay must be non-negative, got {event.delay}")
        event.time = SimTime(self._time + event.delay)
        self.event_queue.push(event)

    def pending(self) -> int:
        """Return the number of queued entries, cancelled ones included."""
        return len(self.event_queue)

    def run(self, until: float = -1.0) -> None:
        """Run the simulation.

        Processes events in chronological order until the queue is empty or
        the next event lies beyond ``until``.  In the latter case the clock
        is set to ``until`` and the event stays queued, so a later call
        resumes from the same point.

        Args:
            until: Maximum simulation time. A negative value means no limit;
                the call then returns only once the queue is empty.
        """
        while True:
            entry = self.event_queue.peek()
            if entry is None:
                break

            if until >= 0 and entry.time > until:
                if until > self._time:
                    self._time = SimTime(until)
                logger.debug("Stopped at t=%.4f, next event at t=%.4f", self._time, entry.time)
                break

            self.event_queue.pop()
            event = entry.event
            if event.cancelled:
                logger.debug("Skipping cancelled %r", event)
                continue

            self._time = entry.time

            if self.log_events:
                self.event_log.append(event)
                logger.info("t=%6.1f | %s", self._time, event.describe())

            event.action(self)

    def __repr__(self) -> str:
        return f"Simulator(now={self._time}, pending={len(self.event_queue)})"

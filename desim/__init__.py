"""
desim: a discrete-event simulation kernel with built-in statistics.

Model code subclasses ``Event``, schedules instances on a ``Simulator`` and
records observations in a ``StatsCollector``.  ``ReplicationRunner`` repeats
a model over independent seeds and aggregates the results.
"""

from .simulation import (
    SimTime,
    Event,
    ScheduledEntry,
    EventQueue,
    Simulator,
    T_CRITICAL_95,
    EventStats,
    TimeWeightedStats,
    StatsCollector,
)
from .replications import (
    ReplicationConfig,
    ReplicationResults,
    ReplicationRunner,
    run_replications,
)

__version__ = "0.1.0"

__all__ = [
    "SimTime",
    "Event",
    "ScheduledEntry",
    "EventQueue",
    "Simulator",
    "T_CRITICAL_95",
    "EventStats",
    "TimeWeightedStats",
    "StatsCollector",
    "ReplicationConfig",
    "ReplicationResults",
    "ReplicationRunner",
    "run_replications",
]

"""
Discrete-event simulation kernel.

This package provides the event queue, the simulator run loop and the
statistics collectors that summarize observations made while it runs.
"""

from .events import SimTime, Event, ScheduledEntry, EventQueue
from .simulator import Simulator
from .metrics import (
    T_CRITICAL_95,
    EventStats,
    TimeWeightedStats,
    StatsCollector,
)

__all__ = [
    # Events
    "SimTime",
    "Event",
    "ScheduledEntry",
    "EventQueue",
    # Simulator
    "Simulator",
    # Metrics
    "T_CRITICAL_95",
    "EventStats",
    "TimeWeightedStats",
    "StatsCollector",
]

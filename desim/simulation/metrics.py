"""
Statistics collection for the discrete-event simulator.

Two kinds of statistic are supported:

- Event-based (``EventStats``): values observed at specific instants, such
  as a waiting time recorded when a customer starts service.
- Time-weighted (``TimeWeightedStats``): state that holds its value between
  updates, such as a queue length.  The average weights each value by how
  long it persisted.

``StatsCollector`` keeps one registry of each kind, keyed by name, and
creates entries on first use.
"""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np
from scipy import stats as scipy_stats

from .events import SimTime

# Two-tailed 95% Student-t critical values indexed by degrees of freedom (1-29)
T_CRITICAL_95: dict[int, float] = {
    1: 12.706, 2: 4.303, 3: 3.182, 4: 2.776, 5: 2.571,
    6: 2.447, 7: 2.365, 8: 2.306, 9: 2.262, 10: 2.228,
    11: 2.201, 12: 2.179, 13: 2.160, 14: 2.145, 15: 2.131,
    16: 2.120, 17: 2.110, 18: 2.101, 19: 2.093, 20: 2.086,
    21: 2.080, 22: 2.074, 23: 2.069, 24: 2.064, 25: 2.060,
    26: 2.056, 27: 2.052, 28: 2.048, 29: 2.045,
}

# Normal approximation used once n exceeds the table
Z_CRITICAL_95 = 1.96
LARGE_SAMPLE_SIZE = 30


class EventStats:
    """Collects event-based observations and summarizes them.

    Summaries are computed from the stored observations on every call.
    Empty statistics report 0 for the average, extremes and standard
    deviation rather than raising.

    Attributes:
        name: Descriptive name used in reports.
    """

    def __init__(self, name: str):
        self.name = name
        self._observations: list[float] = []

    def add(self, value: float) -> None:
        """Record one observation."""
        self._observations.append(float(value))

    def extend(self, values: Iterable[float]) -> None:
        """Record several observations in order."""
        self._observations.extend(float(v) for v in values)

    @property
    def observations(self) -> list[float]:
        """Copy of the recorded observations in insertion order."""
        return list(self._observations)

    def count(self) -> int:
        return len(self._observations)

    def average(self) -> float:
        """Arithmetic mean, or 0.0 if there are no observations."""
        if not self._observations:
            return 0.0
        return float(np.mean(self._observations))

    def min(self) -> float:
        if not self._observations:
            return 0.0
        return float(np.min(self._observations))

    def max(self) -> float:
        if not self._observations:
            return 0.0
        return float(np.max(self._observations))

    def standard_deviation(self) -> float:
        """Sample standard deviation (n - 1 denominator).

        Returns:
            Standard deviation, or 0.0 with fewer than 2 observations.
        """
        if len(self._observations) < 2:
            return 0.0
        return float(np.std(self._observations, ddof=1))

    def standard_error(self) -> float:
        """Standard error of the mean, or 0.0 with fewer than 2 observations."""
        n = len(self._observations)
        if n < 2:
            return 0.0
        return self.standard_deviation() / math.sqrt(n)

    def confidence_interval_95(self) -> tuple[float, float]:
        """Calculate a 95% confidence interval for the mean.

        For n > 30 the normal approximation (z = 1.96) is used, otherwise the
        published Student-t critical value for n - 1 degrees of freedom.

        Returns:
            Tuple of (lower_bound, upper_bound).

        Raises:
            ValueError: If fewer than 2 observations were recorded.
        """
        n = len(self._observations)
        if n < 2:
            raise ValueError(
                f"Insufficient data for confidence interval of {self.name!r}: "
                f"need at least 2 observations, got {n}"
            )
        if n > LARGE_SAMPLE_SIZE:
            critical = Z_CRITICAL_95
        else:
            critical = T_CRITICAL_95[n - 1]
        mean = self.average()
        margin = critical * self.standard_error()
        return (mean - margin, mean + margin)

    def confidence_interval(self, confidence_level: float = 0.95) -> tuple[float, float]:
        """Calculate a Student-t confidence interval at any level.

        Unlike ``confidence_interval_95`` the critical value is exact for
        every sample size.

        Args:
            confidence_level: Desired confidence level (e.g., 0.99).

        Returns:
            Tuple of (lower_bound, upper_bound).

        Raises:
            ValueError: If fewer than 2 observations were recorded or the
                level is not strictly between 0 and 1.
        """
        if not 0.0 < confidence_level < 1.0:
            raise ValueError(
                f"confidence_level must be in (0, 1), got {confidence_level}"
            )
        n = len(self._observations)
        if n < 2:
            raise ValueError(
                f"Insufficient data for confidence interval of {self.name!r}: "
                f"need at least 2 observations, got {n}"
            )
        alpha = 1.0 - confidence_level
        t_crit = float(scipy_stats.t.ppf(1 - alpha / 2, df=n - 1))
        mean = self.average()
        margin = t_crit * self.standard_error()
        return (mean - margin, mean + margin)

    def report(self) -> str:
        """Generate a text summary of the observations."""
        lines = [
            f"{self.name} (Event-based)",
            f"  Count: {self.count()}",
            f"  Average: {self.average():.4f}",
            f"  Std Dev: {self.standard_deviation():.4f}",
            f"  Min: {self.min():.4f}",
            f"  Max: {self.max():.4f}",
        ]
        if self.count() >= 2:
            low, high = self.confidence_interval_95()
            lines.append(f"  95% CI: [{low:.4f}, {high:.4f}]")
        else:
            lines.append("  95% CI: N/A (need >= 2 observations)")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"EventStats({self.name!r}, n={self.count()}, mean={self.average():.4f})"


class TimeWeightedStats:
    """Collects a time-weighted statistic for a piecewise-constant value.

    The statistic starts with value 0 at time 0; this implicit update counts
    towards ``count()`` and towards the minimum and maximum.  Update at
    time 0 to start from another value.

    Attributes:
        name: Descriptive name used in reports.
    """

    def __init__(self, name: str):
        self.name = name
        self._last_time = SimTime(0.0)
        self._last_value = 0.0
        self._integral = 0.0
        self._min = 0.0
        self._max = 0.0
        self._update_count = 1

    def update(self, time: float, value: float) -> None:
        """Record that the value changes to ``value`` at ``time``.

        The previous value is accumulated over [last_time, time).

        Args:
            time: Current simulation time; must be >= the last update time.
            value: The new value.

        Raises:
            ValueError: If ``time`` is earlier than the last update.
        """
        if time < self._last_time:
            raise ValueError(
                f"Out-of-order update for {self.name!r}: "
                f"time {time} < last update time {self._last_time}"
            )
        self._integral += self._last_value * (time - self._last_time)
        self._min = min(self._min, value)
        self._max = max(self._max, value)
        self._last_time = SimTime(time)
        self._last_value = value
        self._update_count += 1

    def count(self) -> int:
        """Number of updates, including the implicit one at construction."""
        return self._update_count

    def average(self, end_time: float) -> float:
        """Calculate the time-weighted average over [0, end_time].

        Args:
            end_time: End of the observation window, usually the final
                simulation time. The last value is held until then.

        Returns:
            The time-weighted average, or 0.0 if ``end_time <= 0``.

        Raises:
            ValueError: If ``end_time`` is before the last update.
        """
        if end_time <= 0:
            return 0.0
        if end_time < self._last_time:
            raise ValueError(
                f"Cannot average {self.name!r} up to {end_time}: "
                f"before the last recorded update at {self._last_time}"
            )
        total = self._integral + self._last_value * (end_time - self._last_time)
        return total / end_time

    def min(self) -> float:
        return self._min

    def max(self) -> float:
        return self._max

    @property
    def integral(self) -> float:
        """Accumulated area up to the last update (open interval excluded)."""
        return self._integral

    @property
    def last_time(self) -> SimTime:
        return self._last_time

    @property
    def last_value(self) -> float:
        return self._last_value

    def report(self, end_time: float) -> str:
        """Generate a text summary averaged up to ``end_time``."""
        lines = [
            f"{self.name} (Time-Weighted)",
            f"  Updates: {self.count()}",
            f"  Average: {self.average(end_time):.4f}",
            f"  Min: {self.min():.4f}",
            f"  Max: {self.max():.4f}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"TimeWeightedStats({self.name!r}, updates={self._update_count}, "
            f"last=({self._last_time}, {self._last_value}))"
        )


class StatsCollector:
    """Named registry of event-based and time-weighted statistics.

    The two kinds live in separate namespaces, so the same name may refer to
    both an ``EventStats`` and a ``TimeWeightedStats``.  Statistics are
    created on first ``add`` and kept for the collector's lifetime.
    """

    def __init__(self) -> None:
        self._event_stats: dict[str, EventStats] = {}
        self._time_weighted_stats: dict[str, TimeWeightedStats] = {}

    def add(self, name: str, *args: float) -> None:
        """Record an observation.

        ``add(name, value)`` records an event-based observation;
        ``add(name, time, value)`` updates a time-weighted statistic.

        Raises:
            TypeError: If called with neither one nor two values.
            ValueError: If a time-weighted update goes back in time.
        """
        if len(args) == 1:
            self.add_event(name, args[0])
        elif len(args) == 2:
            self.add_time_weighted(name, args[0], args[1])
        else:
            raise TypeError(
                f"add() takes (name, value) or (name, time, value), "
                f"got {len(args)} values"
            )

    def add_event(self, name: str, value: float) -> None:
        """Record an event-based observation, creating the statistic if needed."""
        stats = self._event_stats.get(name)
        if stats is None:
            stats = self._event_stats[name] = EventStats(name)
        stats.add(value)

    def add_time_weighted(self, name: str, time: float, value: float) -> None:
        """Update a time-weighted statistic, creating it if needed."""
        stats = self._time_weighted_stats.get(name)
        if stats is None:
            stats = self._time_weighted_stats[name] = TimeWeightedStats(name)
        stats.update(time, value)

    def get_event(self, name: str) -> EventStats | None:
        return self._event_stats.get(name)

    def get_time_weighted(self, name: str) -> TimeWeightedStats | None:
        return self._time_weighted_stats.get(name)

    def has_event(self, name: str) -> bool:
        return name in self._event_stats

    def has_time_weighted(self, name: str) -> bool:
        return name in self._time_weighted_stats

    def event_names(self) -> list[str]:
        """Names of event-based statistics in creation order."""
        return list(self._event_stats)

    def time_weighted_names(self) -> list[str]:
        """Names of time-weighted statistics in creation order."""
        return list(self._time_weighted_stats)

    def report(self, end_time: float) -> str:
        """Generate a report of every statistic.

        Args:
            end_time: End of the observation window for time-weighted
                statistics.

        Returns:
            Event-based reports followed by time-weighted reports, separated
            by blank lines, under a fixed header.
        """
        sections = [stats.report() for stats in self._event_stats.values()]
        sections.extend(
            stats.report(end_time) for stats in self._time_weighted_stats.values()
        )
        return "=== Statistics Report ===\n" + "\n\n".join(sections)

    def __repr__(self) -> str:
        return (
            f"StatsCollector(event={len(self._event_stats)}, "
            f"time_weighted={len(self._time_weighted_stats)})"
        )

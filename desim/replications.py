"""
Independent-replication runner for discrete-event models.

Runs the same model several times with different seeds and aggregates the
per-replication statistics, so that replication-level means come with a
confidence interval.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from .simulation.metrics import EventStats, StatsCollector
from .simulation.simulator import Simulator

logger = logging.getLogger(__name__)

# Model setup callback: schedules the initial events of one replication
ModelSetup = Callable[[Simulator, StatsCollector, np.random.Generator], None]


@dataclass
class ReplicationConfig:
    """Configuration for a set of independent replications.

    Attributes:
        num_replications: Number of replications to run.
        end_time: Simulation time at which each replication stops.
        base_seed: Seed of the first replication.
        seed_stride: Seed increment between replications
            (replication i uses ``base_seed + i * seed_stride``).
        log_events: Whether each simulator logs its executed events.
    """

    num_replications: int
    end_time: float
    base_seed: int = 42
    seed_stride: int = 100
    log_events: bool = False

    def __post_init__(self) -> None:
        if self.num_replications < 1:
            raise ValueError(
                f"num_replications must be at least 1, got {self.num_replications}"
            )
        if self.end_time < 0:
            raise ValueError(f"end_time must be non-negative, got {self.end_time}")
        if self.seed_stride < 1:
            raise ValueError(f"seed_stride must be at least 1, got {self.seed_stride}")

    def seed_for(self, index: int) -> int:
        """Return the seed used by replication ``index``."""
        return self.base_seed + index * self.seed_stride


@dataclass
class ReplicationResults:
    """Statistics collected by each replication.

    Attributes:
        end_time: Simulation time at which the replications stopped.
        collectors: One ``StatsCollector`` per replication, in run order.
        seeds: Seed used by each replication.
    """

    end_time: float
    collectors: list[StatsCollector] = field(default_factory=list)
    seeds: list[int] = field(default_factory=list)

    def pooled(self, name: str) -> EventStats:
        """Pool the observations of an event-based statistic across replications.

        Replications that never recorded ``name`` contribute nothing.
        """
        pooled = EventStats(f"{name} (All Replications)")
        for collector in self.collectors:
            stats = collector.get_event(name)
            if stats is not None:
                pooled.extend(stats.observations)
        return pooled

    def replication_averages(self, name: str) -> EventStats:
        """Collect one time-weighted average per replication.

        The result is an ``EventStats`` over replication means, whose
        confidence interval estimates the long-run average.
        """
        averages = EventStats(f"Average {name} per Replication")
        for collector in self.collectors:
            stats = collector.get_time_weighted(name)
            if stats is not None:
                averages.add(stats.average(self.end_time))
        return averages

    def summary(self) -> str:
        """Generate a text summary across all replications."""
        event_names: dict[str, None] = {}
        time_weighted_names: dict[str, None] = {}
        for collector in self.collectors:
            event_names.update(dict.fromkeys(collector.event_names()))
            time_weighted_names.update(dict.fromkeys(collector.time_weighted_names()))

        sections = [f"=== Replication Results ({len(self.collectors)} runs) ==="]
        sections.extend(self.pooled(name).report() for name in event_names)
        sections.extend(
            self.replication_averages(name).report() for name in time_weighted_names
        )
        return "\n\n".join(sections)

    def __repr__(self) -> str:
        return f"ReplicationResults(n={len(self.collectors)}, end_time={self.end_time})"


def _run_single_replication(
    model: ModelSetup,
    end_time: float,
    seed: int,
    log_events: bool,
) -> StatsCollector:
    """Run one replication on a fresh simulator and collector."""
    sim = Simulator(log_events=log_events)
    stats = StatsCollector()
    rng = np.random.default_rng(seed)

    model(sim, stats, rng)
    sim.run(until=end_time)
    return stats


class ReplicationRunner:
    """Runs independent replications of a model sequentially."""

    def __init__(self, config: ReplicationConfig):
        """Initialize the runner.

        Args:
            config: Replication configuration.
        """
        self.config = config

    def run(
        self,
        model: ModelSetup,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> ReplicationResults:
        """Run all replications.

        Args:
            model: Callable(sim, stats, rng) that sets up one replication by
                scheduling its initial events.
            progress_callback: Optional callback(completed, total).

        Returns:
            ReplicationResults holding each replication's collector.
        """
        total = self.config.num_replications
        results = ReplicationResults(end_time=self.config.end_time)

        for i in range(total):
            seed = self.config.seed_for(i)
            stats = _run_single_replication(
                model=model,
                end_time=self.config.end_time,
                seed=seed,
                log_events=self.config.log_events,
            )
            results.collectors.append(stats)
            results.seeds.append(seed)
            logger.debug("Completed replication %d/%d (seed=%d)", i + 1, total, seed)

            if progress_callback:
                progress_callback(i + 1, total)

        return results


def run_replications(
    model: ModelSetup,
    num_replications: int,
    end_time: float,
    base_seed: int = 42,
) -> ReplicationResults:
    """Convenience function to run replications with default settings.

    Args:
        model: Callable(sim, stats, rng) that sets up one replication.
        num_replications: Number of replications to run.
        end_time: Simulation time at which each replication stops.
        base_seed: Seed of the first replication.

    Returns:
        ReplicationResults.
    """
    config = ReplicationConfig(
        num_replications=num_replications,
        end_time=end_time,
        base_seed=base_seed,
    )
    return ReplicationRunner(config).run(model)

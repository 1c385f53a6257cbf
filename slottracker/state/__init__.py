"""
In-memory slot statistics (running records, aggregator, scheduler).
"""

from .slot_stats import SlotStats, Trend
from .aggregator import BatchAggregator, apply_batch
from .scheduler import SimulationScheduler

__all__ = [
    "SlotStats",
    "Trend",

    # Aggregation
    "BatchAggregator",
    "apply_batch",

    # Driver
    "SimulationScheduler",
]

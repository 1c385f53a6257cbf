#!/usr/bin/env python3
"""
SlotTracker Demo: Convergence Walkthrough

Runs the simulator for one slot in fixed batches and shows:
1. Live RTP drifting toward the theoretical value
2. Where it sits in the expected sampling band
3. The rolling window summary
4. Mock AI commentary
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from slottracker.ai.commentary import CommentaryService
from slottracker.analysis.window import expected_rtp_band, summarize_window
from slottracker.catalog.slots import load_catalog
from slottracker.simulation.outcome import make_rng
from slottracker.state.aggregator import BatchAggregator

import logging

logger = logging.getLogger(__name__)


def demo_simulation(slot_id: str = 'book-of-dead', ticks: int = 500, stake: float = 1.0):
    """Run convergence demo."""
    logger.info("=" * 80)
    logger.info("SlotTracker Convergence Demo")
    logger.info("=" * 80)

    catalog = load_catalog()
    config = catalog.get(slot_id)

    aggregator = BatchAggregator(catalog, rng=make_rng(42))
    aggregator.seed()

    logger.info(f"\nSlot: {config.name} ({config.provider})")
    logger.info(f"  Theoretical RTP: {config.rtp:.2f}%")
    logger.info(f"  Hit frequency: {config.hit_freq * 100:.1f}%")
    logger.info(f"  Volatility (sigma): {config.volatility}")

    logger.info("\n" + "-" * 80)
    logger.info("STEP 1: Simulating")
    logger.info("-" * 80)

    for i in range(1, ticks + 1):
        stats = aggregator.tick(slot_id, stake)
        if i in (1, 10, 100, ticks):
            low, high = expected_rtp_band(config, stats.total_spins)
            logger.info(
                f"  {stats.total_spins:>8,} spins  live RTP {stats.live_rtp:7.2f}%  "
                f"band [{low:6.2f}, {high:6.2f}]  max {stats.max_multiplier:7.1f}x"
            )

    logger.info("\n" + "-" * 80)
    logger.info("STEP 2: Rolling Window")
    logger.info("-" * 80)

    summary = summarize_window(stats)
    logger.info(f"  Window hit rate: {summary['hit_rate']:.3f}")
    logger.info(f"  Window max: {summary['max_multiplier']:.1f}x")
    for bucket, share in summary['distribution'].items():
        logger.info(f"    {bucket:>8}: {share:.2%}")

    logger.info("\n" + "-" * 80)
    logger.info("STEP 3: Commentary")
    logger.info("-" * 80)

    insight = CommentaryService(use_mock=True).get_insights(config, stats)
    logger.info(f"  [{insight.luck_forecast.value}] {insight.commentary}")

    logger.info("\n" + "=" * 80)
    logger.info("✓ Demo completed")


if __name__ == '__main__':
    demo_simulation()

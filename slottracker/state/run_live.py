"""CLI entrypoint to run the slot simulator headless."""
import argparse
import logging
import time

from slottracker.catalog.slots import load_catalog
from slottracker.config import (
    ACTIVE_SLOTS,
    BATCH_SIZE,
    DEFAULT_STAKE,
    SIM_SEED,
    TICK_INTERVAL,
    setup_logging,
)
from slottracker.simulation.outcome import make_rng
from .aggregator import BatchAggregator
from .scheduler import SimulationScheduler

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the live slot simulator")
    parser.add_argument(
        "--slots",
        default=",".join(ACTIVE_SLOTS),
        help="Comma-separated slot ids to track",
    )
    parser.add_argument(
        "--stake",
        type=float,
        default=DEFAULT_STAKE,
        help="Stake per spin",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=BATCH_SIZE,
        help="Spins simulated per slot per tick",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=TICK_INTERVAL,
        help="Tick interval seconds",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=SIM_SEED,
        help="Seed for reproducible runs",
    )
    parser.add_argument(
        "--report-seconds",
        type=float,
        default=10.0,
        help="How often to log a stats report",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this run",
    )
    args = parser.parse_args()

    if args.log_level:
        setup_logging(args.log_level)

    aggregator = BatchAggregator(load_catalog(), rng=make_rng(args.seed))
    aggregator.seed()

    scheduler = SimulationScheduler(
        aggregator,
        active_slots=[s.strip() for s in args.slots.split(",") if s.strip()],
        stake=args.stake,
        batch_size=args.batch_size,
        interval=args.interval,
    )
    scheduler.start()

    try:
        while True:
            time.sleep(args.report_seconds)
            for slot_id in scheduler.active_slots():
                stats = aggregator.snapshot(slot_id)
                logger.info(
                    "%s spins=%d wagered=%.2f live_rtp=%.2f%% max_multi=%.0fx trend=%s",
                    slot_id,
                    stats.total_spins,
                    stats.total_stakes,
                    stats.live_rtp,
                    stats.max_multiplier,
                    stats.trend.value,
                )
    except KeyboardInterrupt:
        logger.info("Shutting down live simulator...")
        scheduler.stop()


if __name__ == "__main__":  # pragma: no cover
    main()

"""
SlotTracker: live slot-machine simulation statistics

Continuously simulates slot spins in the background and aggregates them into
per-slot running statistics (live RTP, wager totals, multiplier extremes,
rolling chart windows), with optional AI luck commentary.
"""

__version__ = '0.1.0'

# Make key imports available at package level
from slottracker.config import (
    ACTIVE_SLOTS,
    BATCH_SIZE,
    DEFAULT_STAKE,
    STAKE_OPTIONS,
    TICK_INTERVAL
)

__all__ = [
    '__version__',
    'ACTIVE_SLOTS',
    'BATCH_SIZE',
    'DEFAULT_STAKE',
    'STAKE_OPTIONS',
    'TICK_INTERVAL'
]

"""Fold simulated batches into per-slot running statistics."""
from __future__ import annotations

from collections import deque
from dataclasses import replace
from threading import Lock
from typing import Dict, Iterable, List, Optional, Sequence
import logging

import numpy as np

from slottracker.catalog.slots import SlotCatalog, SlotConfig
from slottracker.config import BATCH_SIZE, HISTORY_WINDOW, RTP_WINDOW
from slottracker.errors import EmptyBatch, UnknownAsset
from slottracker.simulation.outcome import SpinResult, simulate_batch
from .slot_stats import SlotStats, Trend

logger = logging.getLogger(__name__)


def apply_batch(
    stats: SlotStats,
    config: SlotConfig,
    batch: Sequence[SpinResult],
    history_window: int = HISTORY_WINDOW,
    rtp_window: int = RTP_WINDOW,
) -> SlotStats:
    """
    Return a new record with batch folded in.

    Batch sums and the batch maximum are computed first, then folded into the
    lifetime totals. Windows keep only the newest entries. Trend compares the
    new live RTP against the previous one strictly, so ties read as DOWN.
    """
    if not batch:
        raise EmptyBatch(f"Empty batch for slot {config.id}")

    batch_stakes = sum(r.stake for r in batch)
    batch_wins = sum(r.win for r in batch)
    batch_max_multiplier = max(r.multiplier for r in batch)

    total_stakes = stats.total_stakes + batch_stakes
    total_wins = stats.total_wins + batch_wins
    total_spins = stats.total_spins + len(batch)

    live_rtp = (total_wins / total_stakes) * 100 if total_stakes > 0 else config.rtp

    history = deque(stats.history, maxlen=history_window)
    history.extend(batch)

    rtp_history = deque(stats.recent_rtp_history, maxlen=rtp_window)
    rtp_history.append(live_rtp)

    return replace(
        stats,
        live_rtp=live_rtp,
        total_spins=total_spins,
        total_stakes=total_stakes,
        total_wins=total_wins,
        max_multiplier=max(stats.max_multiplier, batch_max_multiplier),
        history=tuple(history),
        recent_rtp_history=tuple(rtp_history),
        trend=Trend.UP if live_rtp > stats.live_rtp else Trend.DOWN,
    )


class BatchAggregator:
    """
    Owns the slot id -> SlotStats map.

    Lifecycle: created empty, seeded from the catalog, then mutated only
    through tick()/apply(). Updates to one slot are serialized by a per-slot
    lock; different slots may be ticked from different threads.
    """

    def __init__(
        self,
        catalog: SlotCatalog,
        rng: Optional[np.random.Generator] = None,
        history_window: int = HISTORY_WINDOW,
        rtp_window: int = RTP_WINDOW,
    ):
        self.catalog = catalog
        self.rng = rng
        self.history_window = history_window
        self.rtp_window = rtp_window

        self._stats: Dict[str, SlotStats] = {}
        self._locks: Dict[str, Lock] = {}

    def seed(self) -> None:
        """Create an initial record for every catalog slot."""
        for config in self.catalog:
            self._stats[config.id] = SlotStats.initial(config)
            self._locks[config.id] = Lock()
        logger.info("Seeded stats for %d slots", len(self._stats))

    def _lock_for(self, slot_id: str) -> Lock:
        # Validates against the catalog before any record is touched
        self.catalog.get(slot_id)
        lock = self._locks.get(slot_id)
        if lock is None:
            raise UnknownAsset(slot_id)
        return lock

    def apply(self, slot_id: str, batch: Sequence[SpinResult]) -> SlotStats:
        """Fold an externally simulated batch into slot_id's record."""
        config = self.catalog.get(slot_id)
        with self._lock_for(slot_id):
            updated = apply_batch(
                self._stats[slot_id],
                config,
                batch,
                history_window=self.history_window,
                rtp_window=self.rtp_window,
            )
            self._stats[slot_id] = updated
        return updated

    def tick(self, slot_id: str, stake: float, batch_size: int = BATCH_SIZE) -> SlotStats:
        """Simulate one batch for slot_id and fold it in."""
        config = self.catalog.get(slot_id)
        if batch_size < 1:
            raise EmptyBatch(f"batch_size must be at least 1, got {batch_size}")

        batch = simulate_batch(config, batch_size, stake, rng=self.rng)
        updated = self.apply(slot_id, batch)

        logger.debug(
            "Tick %s: spins=%d live_rtp=%.2f max_multi=%.1f trend=%s",
            slot_id,
            updated.total_spins,
            updated.live_rtp,
            updated.max_multiplier,
            updated.trend.value,
        )
        return updated

    def tick_many(
        self,
        slot_ids: Iterable[str],
        stake: float,
        batch_size: int = BATCH_SIZE,
    ) -> Dict[str, SlotStats]:
        """Tick each slot in turn; the same stake is used for every spin."""
        return {slot_id: self.tick(slot_id, stake, batch_size) for slot_id in slot_ids}

    def snapshot(self, slot_id: str) -> SlotStats:
        """Current record for slot_id (immutable)."""
        with self._lock_for(slot_id):
            return self._stats[slot_id]

    def snapshots(self) -> Dict[str, SlotStats]:
        return {slot_id: self.snapshot(slot_id) for slot_id in self.slot_ids()}

    def slot_ids(self) -> List[str]:
        return [s for s in self.catalog.ids() if s in self._stats]

    def total_wagered(self) -> float:
        """Lifetime stakes across every slot."""
        return sum(s.total_stakes for s in self.snapshots().values())

"""Periodic driver that ticks every active slot on a fixed cadence."""
from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional

from slottracker.config import ACTIVE_SLOTS, BATCH_SIZE, DEFAULT_STAKE, TICK_INTERVAL
from slottracker.errors import InvalidConfiguration
from .aggregator import BatchAggregator
from .slot_stats import SlotStats

logger = logging.getLogger(__name__)


class SimulationScheduler:
    """
    Holds the active slot set and global stake, and runs step() on a
    background thread every interval seconds.
    """

    def __init__(
        self,
        aggregator: BatchAggregator,
        active_slots: Optional[Iterable[str]] = None,
        stake: float = DEFAULT_STAKE,
        batch_size: int = BATCH_SIZE,
        interval: float = TICK_INTERVAL,
    ):
        self.aggregator = aggregator
        self.batch_size = batch_size
        self.interval = interval

        self._lock = threading.Lock()
        self._active: List[str] = []
        self._stake = DEFAULT_STAKE
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.set_stake(stake)
        for slot_id in (ACTIVE_SLOTS if active_slots is None else active_slots):
            self.activate(slot_id)

    # -------------------------
    # Active set and stake
    # -------------------------
    @property
    def stake(self) -> float:
        with self._lock:
            return self._stake

    def set_stake(self, stake: float) -> None:
        if not stake > 0:
            raise InvalidConfiguration(f"stake must be positive, got {stake}")
        with self._lock:
            self._stake = float(stake)
        logger.info("Global stake set to %.2f", stake)

    def active_slots(self) -> List[str]:
        with self._lock:
            return list(self._active)

    def is_active(self, slot_id: str) -> bool:
        with self._lock:
            return slot_id in self._active

    def activate(self, slot_id: str) -> None:
        self.aggregator.catalog.get(slot_id)
        with self._lock:
            if slot_id not in self._active:
                self._active.append(slot_id)

    def deactivate(self, slot_id: str) -> None:
        self.aggregator.catalog.get(slot_id)
        with self._lock:
            if slot_id in self._active:
                self._active.remove(slot_id)

    def toggle(self, slot_id: str) -> bool:
        """Flip tracking for slot_id; returns the new active flag."""
        if self.is_active(slot_id):
            self.deactivate(slot_id)
            return False
        self.activate(slot_id)
        return True

    # -------------------------
    # Ticking
    # -------------------------
    def step(self) -> Dict[str, SlotStats]:
        """One tick: simulate a batch for every active slot, sequentially."""
        return self.aggregator.tick_many(self.active_slots(), self.stake, self.batch_size)

    def run(self) -> None:
        """Tick until stop() is called."""
        logger.info(
            "Starting SimulationScheduler (interval=%.2fs, batch=%d, active=%s)",
            self.interval,
            self.batch_size,
            ",".join(self.active_slots()) or "-",
        )
        while not self._stop_event.is_set():
            try:
                self.step()
            except Exception as exc:  # pragma: no cover - resilience path
                logger.error("Simulation tick failed: %s", exc, exc_info=True)
            self._stop_event.wait(self.interval)
        logger.info("SimulationScheduler stopped")

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name="slot-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

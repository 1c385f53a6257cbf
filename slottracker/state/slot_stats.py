"""Per-slot running statistics record."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

from slottracker.catalog.slots import SlotConfig
from slottracker.simulation.outcome import SpinResult


class Trend(Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class SlotStats:
    """
    Lifetime totals plus bounded display windows for one slot.

    total_* never evict. history and recent_rtp_history are recent windows
    only, so their sums do not match the totals once they are full.
    """

    slot_id: str
    live_rtp: float
    total_spins: int = 0
    total_stakes: float = 0.0
    total_wins: float = 0.0
    max_multiplier: float = 0.0
    history: Tuple[SpinResult, ...] = field(default_factory=tuple)
    recent_rtp_history: Tuple[float, ...] = field(default_factory=tuple)
    trend: Trend = Trend.DOWN

    @classmethod
    def initial(cls, config: SlotConfig) -> "SlotStats":
        """Empty record; live RTP starts at the theoretical value."""
        return cls(slot_id=config.id, live_rtp=config.rtp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slot_id": self.slot_id,
            "live_rtp": self.live_rtp,
            "total_spins": self.total_spins,
            "total_stakes": self.total_stakes,
            "total_wins": self.total_wins,
            "max_multiplier": self.max_multiplier,
            "history": [r.to_dict() for r in self.history],
            "recent_rtp_history": list(self.recent_rtp_history),
            "trend": self.trend.value,
        }

"""Serializable slot snapshot used as commentary prompt context."""
from __future__ import annotations

from typing import Any, Dict

from slottracker.catalog.slots import SlotConfig
from slottracker.state.slot_stats import SlotStats


def build_snapshot(config: SlotConfig, stats: SlotStats) -> Dict[str, Any]:
    """
    Flatten a config + stats pair for prompts/telemetry.

    Only JSON-native types; the spin history is reduced to its multipliers.
    """
    return {
        "slot_id": config.id,
        "name": config.name,
        "provider": config.provider,
        "theoretical_rtp": config.rtp,
        "hit_freq": config.hit_freq,
        "volatility": config.volatility,
        "live_rtp": round(stats.live_rtp, 4),
        "rtp_deviation": round(stats.live_rtp - config.rtp, 4),
        "total_spins": stats.total_spins,
        "total_stakes": round(stats.total_stakes, 2),
        "total_wins": round(stats.total_wins, 2),
        "max_multiplier": round(stats.max_multiplier, 2),
        "trend": stats.trend.value,
        "recent_rtp_history": [round(v, 3) for v in stats.recent_rtp_history],
        "recent_multipliers": [round(r.multiplier, 2) for r in stats.history],
    }

"""Derived views over a SlotStats record for the dashboard."""
from __future__ import annotations

from typing import Dict, Tuple
import logging

import numpy as np
import pandas as pd
from scipy.stats import norm

from slottracker.catalog.slots import SlotConfig
from slottracker.state.slot_stats import SlotStats

logger = logging.getLogger(__name__)

BUCKET_EDGES = [-np.inf, 0.0, 1.0, 2.0, 5.0, 10.0, 50.0, 100.0, np.inf]
BUCKET_LABELS = ["0x", "0-1x", "1-2x", "2-5x", "5-10x", "10-50x", "50-100x", "100x+"]


def rtp_deviation(stats: SlotStats, config: SlotConfig) -> float:
    """Live minus theoretical RTP, in percentage points."""
    return float(stats.live_rtp - config.rtp)


def return_variance(config: SlotConfig) -> float:
    """Variance of the per-unit-stake return of one spin."""
    return config.return_variance


def expected_rtp_band(
    config: SlotConfig,
    spins: int,
    confidence: float = 0.95,
) -> Tuple[float, float]:
    """
    Normal-approximation band for the observed RTP after spins spins.

    Returns:
        (low, high) in percent
    """
    if spins < 1:
        raise ValueError("spins must be at least 1")
    if not (0.0 < confidence < 1.0):
        raise ValueError("confidence must be in (0, 1)")

    z = float(norm.ppf(0.5 + confidence / 2.0))
    stderr = config.rtp_stderr(spins)
    return config.rtp - z * stderr, config.rtp + z * stderr


def summarize_window(stats: SlotStats) -> Dict:
    """Hit rate, multiplier extremes and bucket shares of the history window."""
    df = pd.DataFrame([r.to_dict() for r in stats.history], columns=["stake", "win", "multiplier"])

    if df.empty:
        return {
            "spins": 0,
            "hit_rate": 0.0,
            "mean_multiplier": 0.0,
            "max_multiplier": 0.0,
            "window_rtp": None,
            "distribution": {label: 0.0 for label in BUCKET_LABELS},
        }

    buckets = pd.cut(df["multiplier"], bins=BUCKET_EDGES, labels=BUCKET_LABELS)
    shares = buckets.value_counts(normalize=True).reindex(BUCKET_LABELS, fill_value=0.0)

    window_stakes = float(df["stake"].sum())
    window_rtp = float(df["win"].sum() / window_stakes * 100.0) if window_stakes > 0 else None

    return {
        "spins": int(len(df)),
        "hit_rate": float((df["win"] > 0).mean()),
        "mean_multiplier": float(df["multiplier"].mean()),
        "max_multiplier": float(df["multiplier"].max()),
        "window_rtp": window_rtp,
        "distribution": {label: round(float(v), 4) for label, v in shares.items()},
    }


def summarize_slot(stats: SlotStats, config: SlotConfig, confidence: float = 0.95) -> Dict:
    """Window summary plus lifetime deviation and where it sits in the expected band."""
    summary = summarize_window(stats)
    summary["rtp_deviation"] = rtp_deviation(stats, config)

    if stats.total_spins > 0:
        low, high = expected_rtp_band(config, stats.total_spins, confidence)
        summary["expected_band"] = [low, high]
        summary["within_band"] = bool(low <= stats.live_rtp <= high)
    else:
        summary["expected_band"] = None
        summary["within_band"] = None

    return summary

"""Synthetic spin outcomes drawn from a slot's payout shape."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional
import logging

import numpy as np

from slottracker.catalog.slots import SlotConfig, validate_slot
from slottracker.config import SIM_SEED
from slottracker.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

# Shared production generator; numpy bit generators serialize concurrent draws
_DEFAULT_RNG = np.random.default_rng(SIM_SEED)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Return a generator; pass a seed for reproducible runs."""
    return np.random.default_rng(seed)


@dataclass(frozen=True)
class SpinResult:
    stake: float
    win: float
    multiplier: float

    @classmethod
    def from_multiplier(cls, stake: float, multiplier: float) -> "SpinResult":
        win = float(stake) * float(multiplier)
        return cls(
            stake=float(stake),
            win=win,
            multiplier=win / stake if stake > 0 else 0.0,
        )

    def to_dict(self) -> Dict[str, float]:
        return {"stake": self.stake, "win": self.win, "multiplier": self.multiplier}


def lognormal_params(config: SlotConfig) -> tuple:
    """
    (mu, sigma) of the hit multiplier.

    mu is chosen so that E[multiplier | hit] = (rtp / 100) / hit_freq, which
    makes the unconditional expected return per unit stake rtp / 100.
    """
    sigma = float(config.volatility)
    mu = float(np.log(config.mean_hit_multiplier)) - 0.5 * sigma ** 2
    return mu, sigma


def draw_multipliers(
    config: SlotConfig,
    size: int,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Draw size independent spin multipliers (0.0 for a miss)."""
    rng = rng if rng is not None else _DEFAULT_RNG
    mu, sigma = lognormal_params(config)

    hits = rng.random(size) < config.hit_freq
    amounts = rng.lognormal(mean=mu, sigma=sigma, size=size)
    return np.where(hits, amounts, 0.0)


def _check_inputs(config: SlotConfig, stake: float) -> None:
    validate_slot(config)
    if not stake > 0:
        raise InvalidConfiguration(f"stake must be positive, got {stake}")


def simulate_spin(
    config: SlotConfig,
    stake: float,
    rng: Optional[np.random.Generator] = None,
) -> SpinResult:
    """Simulate a single spin at the given stake."""
    _check_inputs(config, stake)
    multiplier = draw_multipliers(config, 1, rng)[0]
    return SpinResult.from_multiplier(stake, multiplier)


def simulate_batch(
    config: SlotConfig,
    count: int,
    stake: float,
    rng: Optional[np.random.Generator] = None,
) -> List[SpinResult]:
    """
    Simulate count independent spins at one stake.

    Args:
        config: Slot to simulate
        count: Number of spins (0 returns an empty list)
        stake: Wager per spin, same for every spin in the batch
        rng: Optional generator; defaults to the shared unseeded one

    Returns:
        SpinResults in draw order
    """
    _check_inputs(config, stake)
    if count < 0:
        raise InvalidConfiguration(f"count must be non-negative, got {count}")

    multipliers = draw_multipliers(config, count, rng)
    results = [SpinResult.from_multiplier(stake, m) for m in multipliers]

    logger.debug(
        "Simulated %d spins on %s at stake %.2f (hits=%d)",
        count,
        config.id,
        stake,
        int(np.count_nonzero(multipliers)),
    )
    return results

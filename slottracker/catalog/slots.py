"""Static slot catalog: identity and payout-shape parameters."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import math

from slottracker.errors import InvalidConfiguration, UnknownAsset

logger = logging.getLogger(__name__)

# Every slot must reach +/-2pp of its RTP by 200k spins at roughly 3 sigma
CONVERGENCE_SPINS = 200_000
MAX_RTP_STDERR = 0.7


@dataclass(frozen=True)
class SlotConfig:
    """
    One slot machine as the simulator sees it.

    rtp is a percentage in (0, 100); hit_freq is the probability that a spin
    pays anything; volatility is the sigma of the log-normal hit multiplier.
    """

    id: str
    name: str
    rtp: float
    hit_freq: float
    volatility: float
    color: str = "#3b82f6"
    provider: str = ""

    @property
    def mean_hit_multiplier(self) -> float:
        """Average multiplier of a paying spin that yields the target RTP."""
        return (self.rtp / 100.0) / self.hit_freq

    @property
    def return_variance(self) -> float:
        """
        Variance of the per-unit-stake return of one spin.

        With hit probability h and a log-normal hit multiplier of mean M and
        sigma s, E[R^2] = h * M^2 * exp(s^2).
        """
        h = self.hit_freq
        m = self.mean_hit_multiplier
        r = self.rtp / 100.0
        return h * m ** 2 * math.exp(self.volatility ** 2) - r ** 2

    def rtp_stderr(self, spins: int) -> float:
        """Standard error of the observed RTP (percentage points) after spins spins."""
        return math.sqrt(max(self.return_variance, 0.0) / spins) * 100.0

    def to_dict(self) -> Dict:
        return asdict(self)


def validate_slot(config: SlotConfig) -> None:
    """Raise InvalidConfiguration if any payout parameter is out of range."""
    errors = []

    if not config.id:
        errors.append("id must be non-empty")
    if not (0.0 < config.rtp < 100.0):
        errors.append(f"rtp must be in (0, 100), got {config.rtp}")
    if not (0.0 < config.hit_freq <= 1.0):
        errors.append(f"hit_freq must be in (0, 1], got {config.hit_freq}")
    if config.volatility <= 0.0:
        errors.append(f"volatility must be positive, got {config.volatility}")

    if not errors:
        stderr = config.rtp_stderr(CONVERGENCE_SPINS)
        if stderr > MAX_RTP_STDERR:
            errors.append(
                f"volatility {config.volatility} too high: RTP stderr after "
                f"{CONVERGENCE_SPINS:,} spins is {stderr:.2f}pp (max {MAX_RTP_STDERR}pp)"
            )

    if errors:
        raise InvalidConfiguration(
            f"Invalid slot '{config.id}': " + "; ".join(errors)
        )


# Theoretical RTPs are the providers' published defaults
SLOTS: Tuple[SlotConfig, ...] = (
    SlotConfig(
        id="book-of-dead", name="Book of Dead", rtp=96.21, hit_freq=0.31,
        volatility=1.0, color="#f59e0b", provider="Play'n GO",
    ),
    SlotConfig(
        id="razor-shark", name="Razor Shark", rtp=96.70, hit_freq=0.28,
        volatility=1.0, color="#06b6d4", provider="Push Gaming",
    ),
    SlotConfig(
        id="sweet-bonanza", name="Sweet Bonanza", rtp=96.48, hit_freq=0.22,
        volatility=0.85, color="#ec4899", provider="Pragmatic Play",
    ),
    SlotConfig(
        id="gates-of-olympus", name="Gates of Olympus", rtp=96.50, hit_freq=0.27,
        volatility=0.95, color="#8b5cf6", provider="Pragmatic Play",
    ),
    SlotConfig(
        id="starburst", name="Starburst", rtp=96.09, hit_freq=0.225,
        volatility=0.9, color="#a855f7", provider="NetEnt",
    ),
    SlotConfig(
        id="dead-or-alive-2", name="Dead or Alive 2", rtp=96.80, hit_freq=0.15,
        volatility=0.6, color="#b45309", provider="NetEnt",
    ),
    SlotConfig(
        id="reactoonz", name="Reactoonz", rtp=96.51, hit_freq=0.24,
        volatility=0.9, color="#22c55e", provider="Play'n GO",
    ),
    SlotConfig(
        id="money-train-3", name="Money Train 3", rtp=96.10, hit_freq=0.19,
        volatility=0.75, color="#ef4444", provider="Relax Gaming",
    ),
)


class SlotCatalog:
    """Ordered, immutable collection of validated slot configurations."""

    def __init__(self, slots: Optional[Iterable[SlotConfig]] = None):
        slots = tuple(SLOTS if slots is None else slots)
        by_id: Dict[str, SlotConfig] = {}
        for slot in slots:
            validate_slot(slot)
            if slot.id in by_id:
                raise InvalidConfiguration(f"Duplicate slot id: {slot.id}")
            by_id[slot.id] = slot

        self._slots = slots
        self._by_id = by_id
        logger.info("Loaded slot catalog with %d slots", len(slots))

    def get(self, slot_id: str) -> SlotConfig:
        """Return the config for slot_id or raise UnknownAsset."""
        try:
            return self._by_id[slot_id]
        except KeyError:
            raise UnknownAsset(slot_id) from None

    def ids(self) -> List[str]:
        return [s.id for s in self._slots]

    def __contains__(self, slot_id: object) -> bool:
        return slot_id in self._by_id

    def __iter__(self):
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)


def load_catalog(slots: Optional[Iterable[SlotConfig]] = None) -> SlotCatalog:
    """Build the catalog once at startup; fails fast on bad entries."""
    return SlotCatalog(slots)

"""Precondition errors raised by the simulator and aggregator."""


class SlotTrackerError(ValueError):
    """Base class for caller contract violations. Never retried."""


class InvalidConfiguration(SlotTrackerError):
    """Stake, hit frequency, RTP or volatility out of range."""


class EmptyBatch(SlotTrackerError):
    """Aggregation requested with zero spins."""


class UnknownAsset(SlotTrackerError, KeyError):
    """Slot id absent from the catalog."""

    def __init__(self, slot_id: str):
        self.slot_id = slot_id
        super().__init__(f"Unknown slot: {slot_id}")

    def __str__(self) -> str:
        return f"Unknown slot: {self.slot_id}"

"""Slot catalog package."""

from .slots import SLOTS, SlotCatalog, SlotConfig, load_catalog, validate_slot

__all__ = ["SLOTS", "SlotCatalog", "SlotConfig", "load_catalog", "validate_slot"]

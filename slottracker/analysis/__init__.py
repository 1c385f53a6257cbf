"""Analysis helpers over running slot statistics."""

from .window import expected_rtp_band, rtp_deviation, summarize_slot, summarize_window

__all__ = ["expected_rtp_band", "rtp_deviation", "summarize_slot", "summarize_window"]

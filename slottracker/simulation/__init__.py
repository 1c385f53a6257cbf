"""Outcome simulator package."""

from .outcome import SpinResult, draw_multipliers, make_rng, simulate_batch, simulate_spin

__all__ = ["SpinResult", "draw_multipliers", "make_rng", "simulate_batch", "simulate_spin"]

"""Deterministic scenarios built on the simulated scheduler."""

from .sim_slow_handlers import SimSlowHandlers

__all__ = [
    "SimSlowHandlers",
]

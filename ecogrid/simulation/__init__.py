"""Simulation package containing the tick loop and world seeding."""

from __future__ import annotations
from .loop import run

__all__ = [
    "loop",
    "bootstrap",
    "run",
]

"""Observers around the landscape: statistics, telemetry, history, hand-off."""

from __future__ import annotations

__all__ = [
    "stats",
    "channel",
    "telemetry",
    "history",
]

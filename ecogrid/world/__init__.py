"""Grid ownership, perception geometry and the tick scheduler."""

from __future__ import annotations

__all__ = [
    "arena",
    "perception",
    "view",
    "landscape",
]

"""Package initializer for the grid life simulation."""

from __future__ import annotations

from .config import settings as settings  # Re-export for convenience.

__all__ = ["settings"]

"""Agent models and decision policies."""

from __future__ import annotations

__all__ = [
    "types",
    "brain",
    "plant",
    "animal",
]

"""Error types shared by the landscape and its agents.

Two families exist. :class:`RecoverableError` covers the expected outcomes
of a busy world (population ceiling reached, no free cell) which the
landscape answers by silently skipping the requested action.
:class:`InvariantViolation` signals broken internal bookkeeping; it is never
caught inside the simulation core.
"""

from __future__ import annotations

from typing import Tuple

__all__ = [
    "RecoverableError",
    "AddAgentError",
    "TakenCellError",
    "OutOfBoundsError",
    "InvariantViolation",
    "StaleHandleError",
]

Point = Tuple[int, int]


class RecoverableError(Exception):
    """Raised for soft failures the caller is expected to skip over."""


class AddAgentError(RecoverableError):
    """Raised when an agent cannot be inserted at the requested point."""

    def __init__(self, point: Point, message: str) -> None:
        super().__init__(message)
        self.point = point


class TakenCellError(AddAgentError):
    def __init__(self, point: Point) -> None:
        super().__init__(point, f"Cell ({point[0]}, {point[1]}) already holds an agent of that kind")


class OutOfBoundsError(AddAgentError):
    def __init__(self, point: Point) -> None:
        super().__init__(point, f"Point ({point[0]}, {point[1]}) lies outside the landscape")


class InvariantViolation(RuntimeError):
    """Raised when the simulation reaches a state it must never be in."""


class StaleHandleError(InvariantViolation):
    """Raised when an arena identifier no longer refers to a live entry."""

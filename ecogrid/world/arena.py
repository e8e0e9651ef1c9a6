"""Stable-index storage for agents.

Grid cells never hold agent objects directly. They hold an :class:`AgentId`
into an :class:`Arena`, and every lookup checks that the slot still carries
the generation the identifier was issued with. A freed slot is reused with a
bumped generation, so an identifier that outlived its agent is detected
instead of silently resolving to a newcomer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Iterator, List, Optional, Tuple, TypeVar

from ..errors import StaleHandleError

logger = logging.getLogger("ecogrid.arena")

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class AgentId:
    index: int
    generation: int


@dataclass
class _Slot(Generic[T]):
    generation: int
    item: Optional[T] = None


class Arena(Generic[T]):
    def __init__(self) -> None:
        self._slots: List[_Slot[T]] = []
        self._free: List[int] = []
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def insert(self, item: T) -> AgentId:
        if self._free:
            index = self._free.pop()
            slot = self._slots[index]
            slot.generation += 1
            slot.item = item
        else:
            index = len(self._slots)
            slot = _Slot(generation=0, item=item)
            self._slots.append(slot)
        self._count += 1
        return AgentId(index, slot.generation)

    def contains(self, agent_id: AgentId) -> bool:
        if not 0 <= agent_id.index < len(self._slots):
            return False
        slot = self._slots[agent_id.index]
        return slot.item is not None and slot.generation == agent_id.generation

    def get(self, agent_id: AgentId) -> T:
        if not self.contains(agent_id):
            message = f"Identifier {agent_id} does not refer to a live entry"
            logger.critical(message)
            raise StaleHandleError(message)
        return self._slots[agent_id.index].item

    def remove(self, agent_id: AgentId) -> T:
        item = self.get(agent_id)
        self._slots[agent_id.index].item = None
        self._free.append(agent_id.index)
        self._count -= 1
        return item

    def items(self) -> Iterator[Tuple[AgentId, T]]:
        for index, slot in enumerate(self._slots):
            if slot.item is not None:
                yield AgentId(index, slot.generation), slot.item

    def __iter__(self) -> Iterator[T]:
        for _, item in self.items():
            yield item

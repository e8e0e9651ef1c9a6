"""Per-tick view snapshot handed to the renderer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, Tuple

from ..entities.types import Direction, Species


class CellMarker(str, Enum):
    KILLED_ANIMAL = "killed_animal"
    DEAD_ANIMAL = "dead_animal"
    HERB_LEFT = "herb_left"
    HERB_RIGHT = "herb_right"
    HERB_FRONT = "herb_front"
    HERB_BACK = "herb_back"
    CARN_LEFT = "carn_left"
    CARN_RIGHT = "carn_right"
    CARN_FRONT = "carn_front"
    CARN_BACK = "carn_back"
    PLANT = "plant"
    NONE = "none"

    @property
    def priority(self) -> int:
        return _PRIORITY[self]

    @property
    def is_live_animal(self) -> bool:
        return self.priority == _LIVE_PRIORITY


_LIVE_PRIORITY = 4

_PRIORITY: Dict[CellMarker, int] = {
    CellMarker.NONE: 0,
    CellMarker.PLANT: 1,
    CellMarker.KILLED_ANIMAL: 2,
    CellMarker.DEAD_ANIMAL: 3,
    CellMarker.HERB_LEFT: _LIVE_PRIORITY,
    CellMarker.HERB_RIGHT: _LIVE_PRIORITY,
    CellMarker.HERB_FRONT: _LIVE_PRIORITY,
    CellMarker.HERB_BACK: _LIVE_PRIORITY,
    CellMarker.CARN_LEFT: _LIVE_PRIORITY,
    CellMarker.CARN_RIGHT: _LIVE_PRIORITY,
    CellMarker.CARN_FRONT: _LIVE_PRIORITY,
    CellMarker.CARN_BACK: _LIVE_PRIORITY,
}

# Sprite names describe the side of the animal the viewer sees: an animal
# walking north shows its back.
_SPRITES: Dict[Tuple[Species, Direction], CellMarker] = {
    (Species.HERBIVORE, Direction.NORTH): CellMarker.HERB_BACK,
    (Species.HERBIVORE, Direction.SOUTH): CellMarker.HERB_FRONT,
    (Species.HERBIVORE, Direction.WEST): CellMarker.HERB_LEFT,
    (Species.HERBIVORE, Direction.EAST): CellMarker.HERB_RIGHT,
    (Species.CARNIVORE, Direction.NORTH): CellMarker.CARN_BACK,
    (Species.CARNIVORE, Direction.SOUTH): CellMarker.CARN_FRONT,
    (Species.CARNIVORE, Direction.WEST): CellMarker.CARN_LEFT,
    (Species.CARNIVORE, Direction.EAST): CellMarker.CARN_RIGHT,
}


def marker_for_animal(species: Species, facing: Direction) -> CellMarker:
    return _SPRITES[(species, facing)]


def strongest(markers: Iterable[CellMarker]) -> CellMarker:
    """Return the highest-priority marker, ``NONE`` for an empty cell."""

    best = CellMarker.NONE
    for marker in markers:
        if marker.priority > best.priority:
            best = marker
    return best


@dataclass(frozen=True, slots=True)
class ViewEntry:
    x: int
    y: int
    marker: CellMarker


@dataclass(frozen=True)
class ViewSnapshot:
    """Immutable copy of every non-empty cell at the end of a tick.

    Entries hold plain coordinates and markers only, so a snapshot can be
    handed to another thread while the landscape keeps mutating.
    """

    tick: int
    width: int
    height: int
    entries: Tuple[ViewEntry, ...] = ()

    def __iter__(self) -> Iterator[ViewEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def as_triples(self) -> Tuple[Tuple[int, int, CellMarker], ...]:
        return tuple((entry.x, entry.y, entry.marker) for entry in self.entries)

    def marker_at(self, x: int, y: int) -> CellMarker:
        for entry in self.entries:
            if entry.x == x and entry.y == y:
                return entry.marker
        return CellMarker.NONE

"""Direction-relative perception geometry.

Each facing owns four fixed offset areas around the animal (``X``). For an
animal looking north (the y axis grows downwards)::

    F F F F F
    L P P P R
    L P X P R

and for an animal looking west::

    F R R
    F P P
    F P X
    F P P
    F L L

South and east areas are the point reflections of north and west.
"""

from __future__ import annotations

import random
from typing import Dict, Iterator, List, NamedTuple, Optional, Protocol, Sequence, Tuple

from ..entities.animal import Animal
from ..entities.plant import Plant
from ..entities.types import AgentKind, Direction, Perception, Species

Offset = Tuple[int, int]
Point = Tuple[int, int]


class AreaOffsets(NamedTuple):
    front: Tuple[Offset, ...]
    left: Tuple[Offset, ...]
    right: Tuple[Offset, ...]
    proximity: Tuple[Offset, ...]


class AreaCount(NamedTuple):
    plants: int
    herbivores: int
    carnivores: int


class GridView(Protocol):
    """Read access to cell occupants, as offered by the landscape."""

    width: int
    height: int

    def plant_at(self, x: int, y: int) -> Optional[Plant]:
        ...

    def animal_at(self, x: int, y: int) -> Optional[Animal]:
        ...


NORTH = AreaOffsets(
    front=((-2, -2), (-1, -2), (0, -2), (1, -2), (2, -2)),
    left=((-2, 0), (-2, -1)),
    right=((2, 0), (2, -1)),
    proximity=((-1, 0), (-1, -1), (0, -1), (1, -1), (1, 0)),
)

WEST = AreaOffsets(
    front=((-2, 2), (-2, 1), (-2, 0), (-2, -1), (-2, -2)),
    left=((0, 2), (-1, 2)),
    right=((0, -2), (-1, -2)),
    proximity=((0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1)),
)


def _reflect(area: AreaOffsets) -> AreaOffsets:
    return AreaOffsets(*(tuple((-dx, -dy) for dx, dy in offsets) for offsets in area))


OFFSETS: Dict[Direction, AreaOffsets] = {
    Direction.NORTH: NORTH,
    Direction.SOUTH: _reflect(NORTH),
    Direction.WEST: WEST,
    Direction.EAST: _reflect(WEST),
}


def wrap(coord: int, size: int) -> int:
    """Fold any integer coordinate back onto a toroidal axis of ``size`` cells."""

    return coord % size


def area_cells(offsets: Sequence[Offset], x: int, y: int, width: int, height: int) -> Iterator[Point]:
    for dx, dy in offsets:
        yield wrap(x + dx, width), wrap(y + dy, height)


def count_agents_in_area(grid: GridView, offsets: Sequence[Offset], x: int, y: int) -> AreaCount:
    """Count live plants, herbivores and carnivores on the given offsets."""

    plants = herbivores = carnivores = 0
    for cx, cy in area_cells(offsets, x, y, grid.width, grid.height):
        plant = grid.plant_at(cx, cy)
        if plant is not None and not plant.is_eaten:
            plants += 1
        animal = grid.animal_at(cx, cy)
        if animal is not None and not animal.is_dead:
            if animal.species is Species.HERBIVORE:
                herbivores += 1
            else:
                carnivores += 1
    return AreaCount(plants, herbivores, carnivores)


def perceive(grid: GridView, x: int, y: int, facing: Direction) -> Perception:
    area = OFFSETS[facing]
    front = count_agents_in_area(grid, area.front, x, y)
    left = count_agents_in_area(grid, area.left, x, y)
    right = count_agents_in_area(grid, area.right, x, y)
    proximity = count_agents_in_area(grid, area.proximity, x, y)
    return Perception(
        plant_front=front.plants,
        plant_left=left.plants,
        plant_right=right.plants,
        plant_proximity=proximity.plants,
        herbivore_front=front.herbivores,
        herbivore_left=left.herbivores,
        herbivore_right=right.herbivores,
        herbivore_proximity=proximity.herbivores,
        carnivore_front=front.carnivores,
        carnivore_left=left.carnivores,
        carnivore_right=right.carnivores,
        carnivore_proximity=proximity.carnivores,
    )


def shuffled_proximity(facing: Direction, rng: random.Random | None = None) -> List[Offset]:
    rng = rng or random
    offsets = list(OFFSETS[facing].proximity)
    rng.shuffle(offsets)
    return offsets


def choose_target(
    grid: GridView,
    x: int,
    y: int,
    facing: Direction,
    target: AgentKind,
    rng: random.Random | None = None,
) -> Optional[Point]:
    """Return the cell of a random edible ``target`` in the proximity area.

    Eaten plants and dead animals are not edible. The proximity offsets are
    permuted first so the pick is uniform among all candidates.
    """

    for cx, cy in area_cells(shuffled_proximity(facing, rng), x, y, grid.width, grid.height):
        if target is AgentKind.PLANT:
            plant = grid.plant_at(cx, cy)
            if plant is not None and not plant.is_eaten:
                return cx, cy
        else:
            animal = grid.animal_at(cx, cy)
            if animal is not None and not animal.is_dead and animal.kind is target:
                return cx, cy
    return None


def destination(x: int, y: int, facing: Direction, width: int, height: int) -> Point:
    dx, dy = facing.step
    return wrap(x + dx, width), wrap(y + dy, height)

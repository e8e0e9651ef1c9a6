"""Closed vocabularies shared by agents, policies and the landscape."""

from __future__ import annotations

from dataclasses import astuple, dataclass
from enum import Enum
from typing import Sequence, Tuple

Energy = float


class AgentKind(str, Enum):
    """Categories that compete for their own slot in a grid cell."""

    PLANT = "plant"
    HERBIVORE = "herbivore"
    CARNIVORE = "carnivore"


class Species(str, Enum):
    HERBIVORE = "herbivore"
    CARNIVORE = "carnivore"

    @property
    def kind(self) -> AgentKind:
        return AgentKind(self.value)


class Direction(str, Enum):
    """Facing of an animal. The y axis grows downwards, so north is ``y - 1``."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    def turned(self, left: bool) -> "Direction":
        left_turn, right_turn = _TURNS[self]
        return left_turn if left else right_turn

    @property
    def step(self) -> Tuple[int, int]:
        return _STEPS[self]


_TURNS = {
    Direction.NORTH: (Direction.WEST, Direction.EAST),
    Direction.SOUTH: (Direction.EAST, Direction.WEST),
    Direction.EAST: (Direction.NORTH, Direction.SOUTH),
    Direction.WEST: (Direction.SOUTH, Direction.NORTH),
}

_STEPS = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}


class AnimalAction(str, Enum):
    TURN_LEFT = "turn_left"
    TURN_RIGHT = "turn_right"
    MOVE = "move"
    EAT = "eat"
    REPRODUCE = "reproduce"
    NONE = "none"


class PlantAction(str, Enum):
    GROW = "grow"
    REPRODUCE = "reproduce"
    NONE = "none"


PERCEPTION_KEYS: Sequence[str] = (
    "plant_front",
    "plant_left",
    "plant_right",
    "plant_proximity",
    "herbivore_front",
    "herbivore_left",
    "herbivore_right",
    "herbivore_proximity",
    "carnivore_front",
    "carnivore_left",
    "carnivore_right",
    "carnivore_proximity",
)


@dataclass(frozen=True, slots=True)
class Perception:
    """Counts of live occupants around an animal, relative to its facing."""

    plant_front: int = 0
    plant_left: int = 0
    plant_right: int = 0
    plant_proximity: int = 0
    herbivore_front: int = 0
    herbivore_left: int = 0
    herbivore_right: int = 0
    herbivore_proximity: int = 0
    carnivore_front: int = 0
    carnivore_left: int = 0
    carnivore_right: int = 0
    carnivore_proximity: int = 0

    def as_vector(self) -> Tuple[int, ...]:
        return astuple(self)

    @classmethod
    def from_vector(cls, values: Sequence[int]) -> "Perception":
        if len(values) != len(PERCEPTION_KEYS):
            raise ValueError(f"Expected {len(PERCEPTION_KEYS)} perception values, received {len(values)}")
        if any(value < 0 for value in values):
            raise ValueError("Perception counts must be non-negative")
        return cls(*(int(value) for value in values))

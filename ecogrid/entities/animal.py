"""Animals: energy bookkeeping and the intent/realization split.

An animal only states what it wants (:meth:`Animal.intend_action`). The
landscape decides whether the wish can be granted and then calls the matching
``apply_*`` method, which updates nothing but the animal's own state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NoReturn

from ..config.constants import (
    EAT_ACTION_ENERGY_RATE,
    MOVE_ACTION_ENERGY_RATE,
    NONE_ACTION_ENERGY_RATE,
    REPRODUCE_ACTION_ENERGY_RATE,
    TURN_ACTION_ENERGY_RATE,
)
from ..errors import InvariantViolation
from .brain import DecisionPolicy, PerceptionLike
from .types import AgentKind, AnimalAction, Direction, Energy, Species

logger = logging.getLogger("ecogrid.animal")


@dataclass(slots=True, eq=False)
class Animal:
    species: Species
    energy: Energy
    max_energy: Energy
    homeostasis_cost: Energy
    birth_energy: Energy
    eaten_energy_share: float
    reproduce_energy_rate: float
    policy: DecisionPolicy
    allow_reproduction: bool = True
    facing: Direction = Direction.NORTH
    age: int = 0
    generation: int = 0
    is_eaten: bool = False
    processed_this_tick: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.energy <= self.max_energy:
            raise ValueError(f"Animal energy {self.energy} outside [0, {self.max_energy}]")

    @property
    def kind(self) -> AgentKind:
        return self.species.kind

    @property
    def is_dead(self) -> bool:
        return self.energy <= 0

    @property
    def is_herbivore(self) -> bool:
        return self.species is Species.HERBIVORE

    @property
    def reproduction_threshold(self) -> Energy:
        return self.reproduce_energy_rate * self.max_energy

    def intend_action(self, perception: PerceptionLike) -> AnimalAction:
        """Age one tick, mark the animal as processed and pick an action.

        Reproduction is not the policy's choice: once energy crosses the
        threshold it overrides whatever the policy would have done.
        """

        if self.is_dead:
            self._fail("Dead animal asked for an action")
        if self.processed_this_tick:
            self._fail("Animal asked for a second action in the same tick")
        self.age += 1
        self.processed_this_tick = True
        if self.allow_reproduction and self.energy > self.reproduction_threshold:
            return AnimalAction.REPRODUCE
        return self.policy.decide(perception)

    def _fail(self, message: str) -> NoReturn:
        logger.critical("%s (%s, age %d)", message, self.species.value, self.age)
        raise InvariantViolation(message)

    def _action_cost(self, rate: float) -> Energy:
        return rate * self.homeostasis_cost

    def _settle(self, delta: Energy) -> None:
        self.energy = min(self.max_energy, max(0.0, self.energy + delta))

    def apply_turn(self, left: bool) -> None:
        self._settle(-self._action_cost(TURN_ACTION_ENERGY_RATE))
        self.facing = self.facing.turned(left)

    def apply_move(self, succeeded: bool) -> None:
        # The attempt costs the same whether or not the landscape let it happen.
        self._settle(-self._action_cost(MOVE_ACTION_ENERGY_RATE))

    def apply_eat(self, gained_energy: Energy) -> None:
        self._settle(gained_energy - self._action_cost(EAT_ACTION_ENERGY_RATE))

    def apply_reproduce(self) -> "Animal":
        self._settle(-(self._action_cost(REPRODUCE_ACTION_ENERGY_RATE) + self.birth_energy))
        return Animal(
            species=self.species,
            energy=min(self.birth_energy, self.max_energy),
            max_energy=self.max_energy,
            homeostasis_cost=self.homeostasis_cost,
            birth_energy=self.birth_energy,
            eaten_energy_share=self.eaten_energy_share,
            reproduce_energy_rate=self.reproduce_energy_rate,
            policy=self.policy.clone_with_mutation(),
            allow_reproduction=True,
            facing=self.facing,
            age=0,
            generation=self.generation + 1,
            processed_this_tick=True,
        )

    def apply_failed_reproduce(self) -> None:
        # No child means no endowment, only the attempt is paid for.
        self._settle(-self._action_cost(REPRODUCE_ACTION_ENERGY_RATE))

    def apply_inactivity(self) -> None:
        self._settle(-self._action_cost(NONE_ACTION_ENERGY_RATE))

    def be_eaten(self) -> Energy:
        """Give up energy to a predator. Only herbivores can be eaten whole."""

        if not self.is_herbivore:
            return 0.0
        released = self.eaten_energy_share * self.energy
        self.energy = 0.0
        self.is_eaten = True
        # An eaten animal can no longer act this tick.
        self.processed_this_tick = True
        return released

    def clear_tick(self) -> None:
        self.processed_this_tick = False

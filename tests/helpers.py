"""Builders and scripted policies shared by the grid simulation tests."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from ecogrid.config.settings import SimulationSettings
from ecogrid.entities.animal import Animal
from ecogrid.entities.plant import Plant
from ecogrid.entities.types import AnimalAction, Direction, Species


class ScriptedPolicy:
    """Decision policy that replays a fixed list of actions."""

    def __init__(self, actions: Iterable[AnimalAction] = (AnimalAction.NONE,)) -> None:
        self.actions: List[AnimalAction] = list(actions)
        self.calls = 0
        self.perceptions: list = []

    def decide(self, perception) -> AnimalAction:
        self.perceptions.append(perception)
        action = self.actions[min(self.calls, len(self.actions) - 1)]
        self.calls += 1
        return action

    def clone_with_mutation(self) -> "ScriptedPolicy":
        return ScriptedPolicy(self.actions)


def small_settings(**overrides) -> SimulationSettings:
    base = replace(
        SimulationSettings(),
        GRID_WIDTH=10,
        GRID_HEIGHT=10,
        INITIAL_PLANTS=0,
        INITIAL_HERBIVORE=0,
        INITIAL_CARNIVORE=0,
        HEADLESS_MODE=True,
        LOG_EVERY=0,
    )
    return replace(base, **overrides)


def make_animal(
    species: Species = Species.HERBIVORE,
    *,
    energy: float = 25.0,
    actions: Iterable[AnimalAction] = (AnimalAction.NONE,),
    facing: Direction = Direction.NORTH,
    settings: SimulationSettings | None = None,
    **overrides,
) -> Animal:
    settings = settings or SimulationSettings()
    values = dict(
        species=species,
        energy=energy,
        max_energy=settings.MAX_ANIMAL_ENERGY,
        homeostasis_cost=settings.ANIMAL_HOMEOSTASIS_COST,
        birth_energy=settings.ANIMAL_BIRTH_ENERGY,
        eaten_energy_share=settings.ANIMAL_EATEN_ENERGY_SHARE,
        reproduce_energy_rate=settings.ANIMAL_REPRODUCE_ENERGY_RATE,
        policy=ScriptedPolicy(actions),
        facing=facing,
    )
    values.update(overrides)
    return Animal(**values)


def make_plant(energy: float = 15.0, **overrides) -> Plant:
    values = dict(
        energy=energy,
        max_energy=15.0,
        eaten_energy=15.0,
        reproduce_energy_rate=0.5,
        allow_reproduction=False,
    )
    values.update(overrides)
    return Plant(**values)

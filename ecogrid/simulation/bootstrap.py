"""World seeding: the initial plants and animals of a fresh landscape."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config.settings import SimulationSettings
from ..entities.animal import Animal
from ..entities.brain import build_policy
from ..entities.plant import Plant
from ..entities.types import AgentKind, Direction, Species
from ..errors import RecoverableError

if TYPE_CHECKING:
    from ..world.landscape import Landscape

logger = logging.getLogger("ecogrid.bootstrap")


@dataclass(frozen=True, slots=True)
class SeedReport:
    plants: int
    herbivores: int
    carnivores: int

    @property
    def animals(self) -> int:
        return self.herbivores + self.carnivores


def make_plant(settings: SimulationSettings, energy: float | None = None) -> Plant:
    return Plant(
        energy=settings.MAX_PLANT_ENERGY if energy is None else energy,
        max_energy=settings.MAX_PLANT_ENERGY,
        eaten_energy=settings.PLANT_EATEN_ENERGY,
        reproduce_energy_rate=settings.PLANT_REPRODUCE_ENERGY_RATE,
        allow_reproduction=settings.PLANT_ALLOW_REPRODUCTION,
    )


def make_animal(
    settings: SimulationSettings,
    species: Species,
    rng: random.Random,
    *,
    facing: Direction | None = None,
) -> Animal:
    policy = build_policy(settings.DECISION_POLICY, rng=rng, mutation_count=settings.MUTATION_COUNT)
    return Animal(
        species=species,
        energy=settings.ANIMAL_BIRTH_ENERGY,
        max_energy=settings.MAX_ANIMAL_ENERGY,
        homeostasis_cost=settings.ANIMAL_HOMEOSTASIS_COST,
        birth_energy=settings.ANIMAL_BIRTH_ENERGY,
        eaten_energy_share=settings.ANIMAL_EATEN_ENERGY_SHARE,
        reproduce_energy_rate=settings.ANIMAL_REPRODUCE_ENERGY_RATE,
        policy=policy,
        allow_reproduction=settings.ANIMAL_ALLOW_REPRODUCTION,
        facing=facing if facing is not None else rng.choice(list(Direction)),
    )


def _seed(landscape: "Landscape", kind: AgentKind, count: int, factory) -> int:
    add = landscape.add_plant if kind is AgentKind.PLANT else landscape.add_animal
    placed = 0
    for _ in range(count):
        # Without a fresh order every seed would land in the same column.
        landscape.shuffle_order()
        try:
            x, y = landscape.find_empty_spot(kind)
        except RecoverableError as exc:
            logger.warning("Seeded %d of %d %s agents: %s", placed, count, kind.value, exc)
            break
        add(x, y, factory())
        placed += 1
    return placed


def populate(landscape: "Landscape", settings: SimulationSettings, rng: random.Random) -> SeedReport:
    """Seed plants at full energy and animals at birth energy."""

    plants = _seed(landscape, AgentKind.PLANT, settings.INITIAL_PLANTS, lambda: make_plant(settings))
    herbivores = _seed(
        landscape,
        AgentKind.HERBIVORE,
        settings.INITIAL_HERBIVORE,
        lambda: make_animal(settings, Species.HERBIVORE, rng),
    )
    carnivores = _seed(
        landscape,
        AgentKind.CARNIVORE,
        settings.INITIAL_CARNIVORE,
        lambda: make_animal(settings, Species.CARNIVORE, rng),
    )
    report = SeedReport(plants=plants, herbivores=herbivores, carnivores=carnivores)
    logger.info(
        "Seeded %d plants, %d herbivores, %d carnivores on a %dx%d grid",
        report.plants,
        report.herbivores,
        report.carnivores,
        landscape.width,
        landscape.height,
    )
    return report

"""Landscape statistics: per-species counters and summary helpers.

The counters are observers only. Nothing in the simulation reads them to make
a decision, so they can be inspected or reset without changing outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

from ..entities.types import Species
from ..world.arena import AgentId

if TYPE_CHECKING:  # pragma: no cover
    from ..entities.animal import Animal
    from ..world.landscape import Landscape


@dataclass(frozen=True, slots=True)
class DeceasedRecord:
    """What is remembered about an animal once its body has been dropped."""

    species: Species
    age: int
    generation: int
    tick: int
    was_eaten: bool


@dataclass(slots=True)
class SpeciesStats:
    population: int = 0
    reproductions: int = 0
    deaths: int = 0
    max_generation: int = 0
    best_alive: Optional[AgentId] = None
    best_alive_age: int = 0
    best_dead: Optional[DeceasedRecord] = None

    def record_reproduction(self, generation: int) -> None:
        self.reproductions += 1
        if generation > self.max_generation:
            self.max_generation = generation

    def record_death(self, animal: "Animal", tick: int) -> None:
        self.population -= 1
        self.deaths += 1
        if self.best_dead is None or animal.age > self.best_dead.age:
            self.best_dead = DeceasedRecord(
                species=animal.species,
                age=animal.age,
                generation=animal.generation,
                tick=tick,
                was_eaten=animal.is_eaten,
            )

    def offer_alive(self, agent_id: AgentId, animal: "Animal") -> None:
        if self.best_alive is None or animal.age > self.best_alive_age:
            self.best_alive = agent_id
            self.best_alive_age = animal.age

    def reset_alive(self) -> None:
        self.best_alive = None
        self.best_alive_age = 0


@dataclass(slots=True)
class LandscapeStatistics:
    plants: int = 0
    species: Dict[Species, SpeciesStats] = field(
        default_factory=lambda: {member: SpeciesStats() for member in Species}
    )

    def __getitem__(self, species: Species) -> SpeciesStats:
        return self.species[species]

    @property
    def herbivores(self) -> SpeciesStats:
        return self.species[Species.HERBIVORE]

    @property
    def carnivores(self) -> SpeciesStats:
        return self.species[Species.CARNIVORE]

    @property
    def animal_count(self) -> int:
        return sum(entry.population for entry in self.species.values())


def collect_population_stats(landscape: "Landscape") -> Dict[str, object]:
    """Return a flat summary of the landscape suitable for logs and telemetry."""

    statistics = landscape.statistics
    summary: Dict[str, object] = {
        "tick": landscape.tick_count,
        "plants": statistics.plants,
        "dormant_plants": sum(1 for plant in landscape.plants() if plant.is_eaten),
        "deceased_this_tick": len(landscape.deceased),
    }
    for species, entry in statistics.species.items():
        prefix = species.value
        summary[f"{prefix}_population"] = entry.population
        summary[f"{prefix}_reproductions"] = entry.reproductions
        summary[f"{prefix}_deaths"] = entry.deaths
        summary[f"{prefix}_max_generation"] = entry.max_generation
        summary[f"{prefix}_oldest_alive_age"] = entry.best_alive_age if entry.best_alive else 0
        summary[f"{prefix}_oldest_dead_age"] = entry.best_dead.age if entry.best_dead else 0
    return summary


def format_summary(summary: Dict[str, object]) -> str:
    return (
        "tick {tick}: plants={plants} herbivores={herbivore_population} "
        "carnivores={carnivore_population} births={herbivore_reproductions}/"
        "{carnivore_reproductions} deaths={herbivore_deaths}/{carnivore_deaths} "
        "max_gen={herbivore_max_generation}/{carnivore_max_generation}"
    ).format(**summary)

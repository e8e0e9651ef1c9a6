"""Plants: stationary energy stores that regrow after being eaten."""

from __future__ import annotations

from dataclasses import dataclass

from .types import AgentKind, Energy, PlantAction


@dataclass(slots=True, eq=False)
class Plant:
    """A plant never dies; at zero energy it is dormant and may grow again.

    A plant does not know where it grows. The landscape owns its position.
    """

    energy: Energy
    max_energy: Energy
    eaten_energy: Energy
    reproduce_energy_rate: float
    allow_reproduction: bool = False

    def __post_init__(self) -> None:
        if self.max_energy < 0:
            raise ValueError("max_energy must be non-negative")
        if not 0 <= self.energy <= self.max_energy:
            raise ValueError(f"Plant energy {self.energy} outside [0, {self.max_energy}]")

    @property
    def kind(self) -> AgentKind:
        return AgentKind.PLANT

    @property
    def is_eaten(self) -> bool:
        return self.energy <= 0

    def intend_action(self) -> PlantAction:
        if self.allow_reproduction and self.energy > self.reproduce_energy_rate * self.max_energy:
            return PlantAction.REPRODUCE
        if self.energy < self.max_energy:
            return PlantAction.GROW
        return PlantAction.NONE

    def apply_grow(self, gained_energy: Energy) -> None:
        self.energy = min(self.max_energy, self.energy + gained_energy)

    def apply_reproduce(self) -> "Plant":
        # A seed carries no energy and has to sprout first.
        return Plant(
            energy=0.0,
            max_energy=self.max_energy,
            eaten_energy=self.eaten_energy,
            reproduce_energy_rate=self.reproduce_energy_rate,
            allow_reproduction=True,
        )

    def apply_inactivity(self) -> None:
        """Plants have no upkeep cost."""

    def be_eaten(self) -> Energy:
        released = min(self.eaten_energy, self.energy)
        self.energy -= released
        return released

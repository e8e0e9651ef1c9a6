"""Toroidal grid that owns every agent and drives the per-tick sweep.

A tick visits every cell once, in an order re-shuffled per axis each tick.
Each visited cell first lets its plant act and then its animal, unless that
animal already acted this tick (it may have walked into a cell the sweep has
not reached yet). Once the sweep is done, dead animals are collected, the
statistics are updated and a fresh :class:`ViewSnapshot` is built.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, Iterator, List, NoReturn, Optional, Tuple

from ..config.settings import SimulationSettings
from ..entities.animal import Animal
from ..entities.plant import Plant
from ..entities.types import AgentKind, AnimalAction, PlantAction, Species
from ..errors import InvariantViolation, OutOfBoundsError, RecoverableError, TakenCellError
from ..systems.stats import LandscapeStatistics
from .arena import AgentId, Arena
from .perception import choose_target, destination, perceive
from .view import CellMarker, ViewEntry, ViewSnapshot, marker_for_animal, strongest

logger = logging.getLogger("ecogrid.landscape")

Point = Tuple[int, int]


@dataclass(slots=True)
class Cell:
    plant: Optional[AgentId] = None
    animal: Optional[AgentId] = None


class Landscape:
    def __init__(self, settings: SimulationSettings, rng: random.Random | None = None) -> None:
        if settings.GRID_WIDTH <= 0 or settings.GRID_HEIGHT <= 0:
            raise ValueError(
                f"Landscape dimensions must be positive, got {settings.GRID_WIDTH}x{settings.GRID_HEIGHT}"
            )
        self.settings = settings
        self.width = settings.GRID_WIDTH
        self.height = settings.GRID_HEIGHT
        self._rng = rng or random.Random(settings.SEED)

        self._plants: Arena[Plant] = Arena()
        self._animals: Arena[Animal] = Arena()
        self._cells: List[List[Cell]] = [[Cell() for _ in range(self.height)] for _ in range(self.width)]
        self._order_x: List[int] = list(range(self.width))
        self._order_y: List[int] = list(range(self.height))
        self.shuffle_order()
        self._deceased: List[Animal] = []
        self._ceilings: Dict[AgentKind, int] = {
            AgentKind.PLANT: settings.MAX_PLANTS,
            AgentKind.HERBIVORE: settings.MAX_HERBIVORE,
            AgentKind.CARNIVORE: settings.MAX_CARNIVORE,
        }

        self.statistics = LandscapeStatistics()
        self._tick_count = 0
        self._view = ViewSnapshot(tick=0, width=self.width, height=self.height)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def deceased(self) -> Tuple[Animal, ...]:
        """Animals removed at the end of the last tick."""

        return tuple(self._deceased)

    def cell(self, x: int, y: int) -> Cell:
        self._check_bounds(x, y)
        return self._cells[x][y]

    def plant_at(self, x: int, y: int) -> Optional[Plant]:
        plant_id = self.cell(x, y).plant
        return None if plant_id is None else self._plants.get(plant_id)

    def animal_at(self, x: int, y: int) -> Optional[Animal]:
        animal_id = self.cell(x, y).animal
        return None if animal_id is None else self._animals.get(animal_id)

    def plants(self) -> Iterator[Plant]:
        return iter(self._plants)

    def animals(self) -> Iterator[Animal]:
        return iter(self._animals)

    def animal(self, agent_id: AgentId) -> Animal:
        return self._animals.get(agent_id)

    def plant(self, agent_id: AgentId) -> Plant:
        return self._plants.get(agent_id)

    def animal_positions(self) -> Iterator[Tuple[int, int, Animal]]:
        for x in range(self.width):
            for y in range(self.height):
                animal_id = self._cells[x][y].animal
                if animal_id is not None:
                    yield x, y, self._animals.get(animal_id)

    def population(self, kind: AgentKind) -> int:
        if kind is AgentKind.PLANT:
            return self.statistics.plants
        return self.statistics[Species(kind.value)].population

    def view_state(self) -> ViewSnapshot:
        return self._view

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBoundsError((x, y))

    def add_plant(self, x: int, y: int, plant: Plant) -> AgentId:
        self._check_bounds(x, y)
        cell = self._cells[x][y]
        if cell.plant is not None:
            raise TakenCellError((x, y))
        cell.plant = self._plants.insert(plant)
        self.statistics.plants += 1
        return cell.plant

    def add_animal(self, x: int, y: int, animal: Animal) -> AgentId:
        self._check_bounds(x, y)
        cell = self._cells[x][y]
        if cell.animal is not None:
            raise TakenCellError((x, y))
        cell.animal = self._animals.insert(animal)
        self.statistics[animal.species].population += 1
        return cell.animal

    def find_empty_spot(self, kind: AgentKind) -> Point:
        """Return a free cell for an agent of ``kind``.

        The population ceiling is checked before the grid is scanned, in the
        current shuffled order. Running out of room for a plant is an ordinary
        outcome; running out of room for an animal while under its ceiling
        means the bookkeeping is broken.
        """

        ceiling = self._ceilings[kind]
        if self.population(kind) >= ceiling:
            raise RecoverableError(f"Maximum number ({ceiling}) of {kind.value} agents reached")

        slot = "plant" if kind is AgentKind.PLANT else "animal"
        for x in self._order_x:
            for y in self._order_y:
                if getattr(self._cells[x][y], slot) is None:
                    return x, y

        if kind is AgentKind.PLANT:
            raise RecoverableError("No free cell left for a plant")
        self._fail(f"No free cell left for a new {kind.value}")

    def _fail(self, message: str) -> NoReturn:
        logger.critical(message)
        raise InvariantViolation(message)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def shuffle_order(self) -> None:
        """Re-permute both axes; used by the sweep and by empty-cell search."""

        self._rng.shuffle(self._order_x)
        self._rng.shuffle(self._order_y)

    def tick(self) -> ViewSnapshot:
        self.shuffle_order()

        for x in self._order_x:
            for y in self._order_y:
                cell = self._cells[x][y]
                if cell.plant is not None:
                    self._simulate_plant(self._plants.get(cell.plant))

                if cell.animal is not None:
                    animal = self._animals.get(cell.animal)
                    if animal.processed_this_tick:
                        continue
                    if animal.is_dead:
                        self._fail(f"Dead animal reached the sweep at ({x}, {y})")
                    self._simulate_animal(animal, x, y)

        self._tick_count += 1
        self._finalize_tick()
        return self._view

    def _simulate_plant(self, plant: Plant) -> None:
        action = plant.intend_action()
        if action is PlantAction.GROW:
            plant.apply_grow(self.settings.PLANT_GROW_ENERGY)
        elif action is PlantAction.REPRODUCE:
            self._reproduce_plant(plant)
        else:
            plant.apply_inactivity()

    def _reproduce_plant(self, plant: Plant) -> None:
        try:
            x, y = self.find_empty_spot(AgentKind.PLANT)
        except RecoverableError as exc:
            logger.debug("Plant reproduction skipped: %s", exc)
            return
        self._add_found(self.add_plant, x, y, plant.apply_reproduce())

    def _simulate_animal(self, animal: Animal, x: int, y: int) -> None:
        action = animal.intend_action(perceive(self, x, y, animal.facing))
        if action is AnimalAction.TURN_LEFT:
            animal.apply_turn(left=True)
        elif action is AnimalAction.TURN_RIGHT:
            animal.apply_turn(left=False)
        elif action is AnimalAction.MOVE:
            self._move_animal(animal, x, y)
        elif action is AnimalAction.EAT:
            self._feed_animal(animal, x, y)
        elif action is AnimalAction.REPRODUCE:
            self._reproduce_animal(animal)
        else:
            animal.apply_inactivity()

    def _move_animal(self, animal: Animal, x: int, y: int) -> None:
        nx, ny = destination(x, y, animal.facing, self.width, self.height)
        target = self._cells[nx][ny]
        if target.animal is not None:
            animal.apply_move(succeeded=False)
            return
        source = self._cells[x][y]
        target.animal, source.animal = source.animal, None
        animal.apply_move(succeeded=True)

    def _feed_animal(self, animal: Animal, x: int, y: int) -> None:
        # A missed bite is free: nothing happens when no target is in reach.
        if animal.is_herbivore:
            spot = choose_target(self, x, y, animal.facing, AgentKind.PLANT, self._rng)
            if spot is not None:
                animal.apply_eat(self.plant_at(*spot).be_eaten())
            return

        spot = choose_target(self, x, y, animal.facing, AgentKind.HERBIVORE, self._rng)
        if spot is None:
            return
        prey = self.animal_at(*spot)
        if prey.species is Species.CARNIVORE:
            self._fail(f"Carnivore at ({x}, {y}) tried to eat a carnivore at {spot}")
        animal.apply_eat(prey.be_eaten())

    def _reproduce_animal(self, animal: Animal) -> None:
        try:
            x, y = self.find_empty_spot(animal.kind)
        except RecoverableError as exc:
            logger.debug("%s reproduction skipped: %s", animal.species.value, exc)
            animal.apply_failed_reproduce()
            return
        child = animal.apply_reproduce()
        self._add_found(self.add_animal, x, y, child)
        self.statistics[animal.species].record_reproduction(child.generation)
        logger.debug("%s born at (%d, %d), generation %d", animal.species.value, x, y, child.generation)

    def _add_found(self, add, x: int, y: int, agent) -> None:
        try:
            add(x, y, agent)
        except RecoverableError as exc:
            self._fail(f"Free cell ({x}, {y}) could not take a new agent: {exc}")

    # ------------------------------------------------------------------
    # End of tick
    # ------------------------------------------------------------------

    def _finalize_tick(self) -> None:
        self._deceased.clear()
        for entry in self.statistics.species.values():
            entry.reset_alive()

        entries: List[ViewEntry] = []
        for x in range(self.width):
            for y in range(self.height):
                cell = self._cells[x][y]
                markers: List[CellMarker] = []
                if cell.plant is not None:
                    markers.append(CellMarker.PLANT)
                if cell.animal is not None:
                    markers.append(self._settle_animal(cell, x, y))
                if markers:
                    entries.append(ViewEntry(x, y, strongest(markers)))

        self._view = ViewSnapshot(
            tick=self._tick_count,
            width=self.width,
            height=self.height,
            entries=tuple(entries),
        )

    def _settle_animal(self, cell: Cell, x: int, y: int) -> CellMarker:
        animal_id = cell.animal
        animal = self._animals.get(animal_id)
        if animal.is_dead:
            cell.animal = None
            self._animals.remove(animal_id)
            self._deceased.append(animal)
            self.statistics[animal.species].record_death(animal, self._tick_count)
            logger.debug(
                "%s died at (%d, %d), age %d%s",
                animal.species.value,
                x,
                y,
                animal.age,
                " (eaten)" if animal.is_eaten else "",
            )
            return CellMarker.KILLED_ANIMAL if animal.is_eaten else CellMarker.DEAD_ANIMAL

        animal.clear_tick()
        self.statistics[animal.species].offer_alive(animal_id, animal)
        return marker_for_animal(animal.species, animal.facing)

"""Tests for animal energy bookkeeping and action intents."""

from __future__ import annotations

import logging

import pytest

from ecogrid.entities.types import AnimalAction, Direction, Species
from ecogrid.errors import InvariantViolation

from .helpers import ScriptedPolicy, make_animal

COST = 0.005


class TestIntent:
    def test_intent_ages_and_marks_processed(self):
        animal = make_animal(actions=[AnimalAction.MOVE])
        assert animal.intend_action([0] * 12) is AnimalAction.MOVE
        assert animal.age == 1
        assert animal.processed_this_tick

    def test_second_intent_in_same_tick_is_fatal(self):
        animal = make_animal()
        animal.intend_action([0] * 12)
        with pytest.raises(InvariantViolation):
            animal.intend_action([0] * 12)
        animal.clear_tick()
        animal.intend_action([0] * 12)
        assert animal.age == 2

    def test_dead_animal_cannot_act(self, caplog):
        animal = make_animal(energy=0.0)
        assert animal.is_dead
        with caplog.at_level(logging.CRITICAL, logger="ecogrid.animal"):
            with pytest.raises(InvariantViolation):
                animal.intend_action([0] * 12)
        (record,) = caplog.records
        assert record.levelno == logging.CRITICAL
        assert "Dead animal asked for an action" in record.getMessage()

    def test_reproduction_overrides_policy(self):
        animal = make_animal(energy=55.0, actions=[AnimalAction.MOVE])
        assert animal.intend_action([0] * 12) is AnimalAction.REPRODUCE
        assert animal.policy.calls == 0

    def test_reproduction_needs_permission(self):
        animal = make_animal(energy=55.0, actions=[AnimalAction.EAT], allow_reproduction=False)
        assert animal.intend_action([0] * 12) is AnimalAction.EAT

    def test_threshold_is_strict(self):
        animal = make_animal(energy=30.0, actions=[AnimalAction.MOVE], reproduce_energy_rate=0.5)
        assert animal.reproduction_threshold == 30.0
        assert animal.intend_action([0] * 12) is AnimalAction.MOVE


@pytest.mark.parametrize(
    "facing, left, right",
    [
        (Direction.NORTH, Direction.WEST, Direction.EAST),
        (Direction.SOUTH, Direction.EAST, Direction.WEST),
        (Direction.EAST, Direction.NORTH, Direction.SOUTH),
        (Direction.WEST, Direction.SOUTH, Direction.NORTH),
    ],
)
def test_turns_rotate_ninety_degrees(facing, left, right):
    animal = make_animal(facing=facing)
    animal.apply_turn(left=True)
    assert animal.facing is left
    animal = make_animal(facing=facing)
    animal.apply_turn(left=False)
    assert animal.facing is right


def test_turn_costs_homeostasis():
    animal = make_animal(energy=10.0)
    animal.apply_turn(left=True)
    assert animal.energy == pytest.approx(10.0 - COST)


def test_move_costs_even_when_blocked():
    blocked = make_animal(energy=10.0)
    moved = make_animal(energy=10.0)
    blocked.apply_move(succeeded=False)
    moved.apply_move(succeeded=True)
    assert blocked.energy == moved.energy == pytest.approx(10.0 - COST)


def test_eat_adds_energy_and_clamps():
    animal = make_animal(energy=50.0)
    animal.apply_eat(15.0)
    assert animal.energy == 60.0
    animal = make_animal(energy=10.0)
    animal.apply_eat(15.0)
    assert animal.energy == pytest.approx(25.0 - COST)


def test_inactivity_costs_homeostasis():
    animal = make_animal(energy=1.0)
    animal.apply_inactivity()
    assert animal.energy == pytest.approx(1.0 - COST)


def test_energy_never_drops_below_zero():
    animal = make_animal(energy=0.001)
    animal.apply_inactivity()
    assert animal.energy == 0.0
    assert animal.is_dead


def test_reproduce_hands_over_birth_energy():
    parent = make_animal(energy=58.0, facing=Direction.EAST, generation=3)
    child = parent.apply_reproduce()
    assert parent.energy == pytest.approx(58.0 - 25.0 - COST)
    assert child.energy == 25.0
    assert child.generation == 4
    assert child.age == 0
    assert child.allow_reproduction is True
    assert child.species is parent.species
    assert child.facing is Direction.EAST
    assert child.processed_this_tick is True
    assert isinstance(child.policy, ScriptedPolicy)
    assert child.policy is not parent.policy


def test_failed_reproduction_costs_only_the_attempt():
    animal = make_animal(energy=58.0)
    animal.apply_failed_reproduce()
    assert animal.energy == pytest.approx(58.0 - COST)


def test_herbivore_releases_share_when_eaten():
    prey = make_animal(Species.HERBIVORE, energy=20.0)
    released = prey.be_eaten()
    assert released == pytest.approx(0.3 * 20.0)
    assert prey.energy == 0.0
    assert prey.is_eaten
    assert prey.is_dead
    assert prey.processed_this_tick


def test_carnivore_cannot_be_eaten():
    carnivore = make_animal(Species.CARNIVORE, energy=20.0)
    assert carnivore.be_eaten() == 0.0
    assert carnivore.energy == 20.0
    assert not carnivore.is_eaten


def test_energy_above_max_is_rejected():
    with pytest.raises(ValueError):
        make_animal(energy=61.0)

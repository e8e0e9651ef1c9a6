"""Tests for cell markers and the view snapshot."""

from __future__ import annotations

import dataclasses

import pytest

from ecogrid.entities.types import Direction, Species
from ecogrid.world.view import CellMarker, ViewEntry, ViewSnapshot, marker_for_animal, strongest


def test_priority_order_is_plant_killed_dead_live():
    assert CellMarker.NONE.priority < CellMarker.PLANT.priority
    assert CellMarker.PLANT.priority < CellMarker.KILLED_ANIMAL.priority
    assert CellMarker.KILLED_ANIMAL.priority < CellMarker.DEAD_ANIMAL.priority
    assert CellMarker.DEAD_ANIMAL.priority < CellMarker.HERB_FRONT.priority
    assert CellMarker.HERB_FRONT.priority == CellMarker.CARN_LEFT.priority


def test_strongest_keeps_highest_marker():
    assert strongest([CellMarker.PLANT, CellMarker.CARN_BACK]) is CellMarker.CARN_BACK
    assert strongest([CellMarker.KILLED_ANIMAL, CellMarker.PLANT]) is CellMarker.KILLED_ANIMAL
    assert strongest([CellMarker.PLANT, CellMarker.DEAD_ANIMAL]) is CellMarker.DEAD_ANIMAL
    assert strongest([]) is CellMarker.NONE


@pytest.mark.parametrize(
    "species, facing, expected",
    [
        (Species.HERBIVORE, Direction.NORTH, CellMarker.HERB_BACK),
        (Species.HERBIVORE, Direction.SOUTH, CellMarker.HERB_FRONT),
        (Species.HERBIVORE, Direction.WEST, CellMarker.HERB_LEFT),
        (Species.HERBIVORE, Direction.EAST, CellMarker.HERB_RIGHT),
        (Species.CARNIVORE, Direction.NORTH, CellMarker.CARN_BACK),
        (Species.CARNIVORE, Direction.SOUTH, CellMarker.CARN_FRONT),
        (Species.CARNIVORE, Direction.WEST, CellMarker.CARN_LEFT),
        (Species.CARNIVORE, Direction.EAST, CellMarker.CARN_RIGHT),
    ],
)
def test_sprite_marker_follows_facing(species, facing, expected):
    marker = marker_for_animal(species, facing)
    assert marker is expected
    assert marker.is_live_animal


def test_snapshot_is_immutable():
    snapshot = ViewSnapshot(tick=1, width=3, height=3, entries=(ViewEntry(0, 1, CellMarker.PLANT),))
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.tick = 2
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.entries[0].marker = CellMarker.NONE
    assert snapshot.as_triples() == ((0, 1, CellMarker.PLANT),)
    assert snapshot.marker_at(0, 1) is CellMarker.PLANT
    assert snapshot.marker_at(2, 2) is CellMarker.NONE
    assert len(snapshot) == 1

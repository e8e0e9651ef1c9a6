"""Constant values for the grid life simulation."""

from __future__ import annotations

# The largest grid that still fits a 1920x1080 window at 20px sprites.
MAX_GRID_SIZE = (96, 54)

DEFAULTS = {
    "GRID_WIDTH": 96,
    "GRID_HEIGHT": 54,
    "MAX_STEPS": 1000,
    "MAX_PLANTS": 35,
    "MAX_HERBIVORE": 18,
    "MAX_CARNIVORE": 18,
    "INITIAL_PLANTS": 35,
    "INITIAL_HERBIVORE": 9,
    "INITIAL_CARNIVORE": 9,
    "PLANT_GROW_ENERGY": 5.0,
    "MAX_PLANT_ENERGY": 15.0,
    "PLANT_EATEN_ENERGY": 15.0,
    "PLANT_REPRODUCE_ENERGY_RATE": 0.5,
    "MAX_ANIMAL_ENERGY": 60.0,
    "ANIMAL_BIRTH_ENERGY": 25.0,
    "ANIMAL_HOMEOSTASIS_COST": 0.005,
    "ANIMAL_EATEN_ENERGY_SHARE": 0.3,
    "ANIMAL_REPRODUCE_ENERGY_RATE": 0.9,
}

# Energy cost multipliers applied to the homeostasis cost, one per action.
TURN_ACTION_ENERGY_RATE = 1.0
MOVE_ACTION_ENERGY_RATE = 1.0
EAT_ACTION_ENERGY_RATE = 1.0
REPRODUCE_ACTION_ENERGY_RATE = 1.0
NONE_ACTION_ENERGY_RATE = 1.0

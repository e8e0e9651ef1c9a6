"""Shared fixtures for the grid simulation tests."""

from __future__ import annotations

import logging
import random

import pytest


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture(autouse=True)
def _reset_ecogrid_logger():
    yield
    root = logging.getLogger("ecogrid")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)

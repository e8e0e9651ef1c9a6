"""Entry point for the grid life simulation."""

import sys

from ecogrid.config import settings
from ecogrid.simulation import run


if __name__ == "__main__":
    runtime_settings = settings.load_runtime_settings(sys.argv[1:])
    run(runtime_settings)

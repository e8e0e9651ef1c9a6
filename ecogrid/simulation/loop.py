"""Tick driver for headless and windowed runs."""

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional

from ..config.settings import SimulationSettings
from ..systems.channel import SnapshotChannel
from ..systems.history import PopulationHistory, plot_history
from ..systems.stats import collect_population_stats, format_summary
from ..systems.telemetry import TelemetrySink, TickSample, open_tick_sink
from ..world.landscape import Landscape
from ..world.view import ViewSnapshot
from .bootstrap import SeedReport, populate

logger = logging.getLogger("ecogrid.simulation")

RendererFactory = Callable[[SimulationSettings, SnapshotChannel[ViewSnapshot]], object]


def initialise_logger(settings: SimulationSettings) -> logging.Logger:
    """Attach the debug log file to the ``ecogrid`` logger tree once."""

    log_dir = settings.LOG_DIRECTORY
    if not isinstance(log_dir, Path):
        log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / settings.DEBUG_LOG_FILE

    root = logging.getLogger("ecogrid")
    if root.handlers:
        return root

    level_name = str(settings.DEBUG_LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    root.setLevel(level)

    file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    file_handler.setLevel(level)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)
    root.propagate = False

    root.info("Debug logging initialised at %s", log_path)
    return root


@dataclass
class RunResult:
    ticks: int
    seed_report: SeedReport
    statistics: Dict[str, object]
    history: PopulationHistory = field(default_factory=PopulationHistory)
    elapsed_seconds: float = 0.0
    snapshots_sent: int = 0
    snapshots_dropped: int = 0
    plot_path: Optional[Path] = None


def build_landscape(settings: SimulationSettings, rng: random.Random | None = None) -> tuple[Landscape, SeedReport]:
    rng = rng or random.Random(settings.SEED)
    landscape = Landscape(settings, rng)
    report = populate(landscape, settings, rng)
    return landscape, report


def _default_renderer(settings: SimulationSettings, channel: SnapshotChannel[ViewSnapshot]):
    from ..rendering.grid_renderer import GridRenderer

    return GridRenderer(
        settings.GRID_WIDTH,
        settings.GRID_HEIGHT,
        channel,
        cell_size=settings.CELL_SIZE,
        fps=settings.FPS,
        title="ecogrid",
    )


def _advance(
    landscape: Landscape,
    settings: SimulationSettings,
    history: PopulationHistory,
    sink: Optional[TelemetrySink],
    channel: Optional[SnapshotChannel[ViewSnapshot]],
) -> None:
    snapshot = landscape.tick()
    if channel is not None:
        channel.send(snapshot)
    summary = collect_population_stats(landscape)
    history.record(summary)
    if sink is not None:
        sink.write(TickSample.from_summary(summary))
    if settings.LOG_EVERY and landscape.tick_count % settings.LOG_EVERY == 0:
        logger.info(format_summary(summary))


def run(
    settings: SimulationSettings,
    *,
    rng: random.Random | None = None,
    renderer_factory: RendererFactory | None = None,
) -> RunResult:
    """Seed a landscape and run ``MAX_STEPS`` ticks.

    In windowed mode the renderer runs on its own thread and only ever sees
    snapshots through a lossy channel, so the tick loop never waits for it.
    The final join waits until the window is closed.
    """

    initialise_logger(settings)
    landscape, report = build_landscape(settings, rng)
    history = PopulationHistory()
    sink = open_tick_sink(settings.LOG_DIRECTORY) if settings.TELEMETRY_ENABLED else None

    channel: Optional[SnapshotChannel[ViewSnapshot]] = None
    renderer_thread: Optional[threading.Thread] = None
    if not settings.HEADLESS_MODE:
        channel = SnapshotChannel()
        renderer = (renderer_factory or _default_renderer)(settings, channel)
        renderer_thread = threading.Thread(target=renderer.run, name="ecogrid-renderer", daemon=True)
        renderer_thread.start()
        channel.send(landscape.view_state())

    logger.info("Starting run of %d ticks (%s)", settings.MAX_STEPS, "headless" if settings.HEADLESS_MODE else "windowed")
    started = time.perf_counter()
    try:
        for _ in range(settings.MAX_STEPS):
            _advance(landscape, settings, history, sink, channel)
    finally:
        if sink is not None:
            sink.close()
        if channel is not None:
            channel.close()
    elapsed = time.perf_counter() - started
    logger.info("Simulation of %d ticks took %.2f minutes", landscape.tick_count, elapsed / 60.0)

    if renderer_thread is not None:
        renderer_thread.join()

    plot_path = None
    if settings.PLOT_PATH is not None and len(history):
        plot_path = plot_history(history, settings.PLOT_PATH)
        logger.info("Population plot written to %s", plot_path)

    return RunResult(
        ticks=landscape.tick_count,
        seed_report=report,
        statistics=collect_population_stats(landscape),
        history=history,
        elapsed_seconds=elapsed,
        snapshots_sent=channel.sent if channel is not None else 0,
        snapshots_dropped=channel.dropped if channel is not None else 0,
        plot_path=plot_path,
    )

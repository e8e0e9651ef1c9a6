"""Tests for the run loop in headless and windowed mode."""

from __future__ import annotations

import logging
import random

from ecogrid.simulation.loop import build_landscape, initialise_logger, run
from ecogrid.systems.telemetry import read_samples

from .helpers import small_settings


def _settings(tmp_path, **overrides):
    values = dict(
        INITIAL_PLANTS=15,
        INITIAL_HERBIVORE=4,
        INITIAL_CARNIVORE=2,
        MAX_PLANTS=20,
        MAX_HERBIVORE=8,
        MAX_CARNIVORE=4,
        MAX_STEPS=15,
        SEED=11,
        LOG_DIRECTORY=tmp_path / "logs",
        LOG_EVERY=5,
    )
    values.update(overrides)
    return small_settings(**values)


class _RecordingRenderer:
    def __init__(self, settings, channel):
        self.channel = channel
        self.seen = []

    def run(self):
        while True:
            snapshot = self.channel.receive(timeout=1.0)
            if snapshot is not None:
                self.seen.append(snapshot)
            elif self.channel.closed:
                break


def test_initialise_logger_is_idempotent(tmp_path):
    settings = _settings(tmp_path)
    first = initialise_logger(settings)
    second = initialise_logger(settings)
    assert first is second
    assert len(first.handlers) == 1
    assert first.propagate is False
    assert (tmp_path / "logs" / settings.DEBUG_LOG_FILE).exists()


def test_build_landscape_seeds_world(tmp_path):
    landscape, report = build_landscape(_settings(tmp_path), random.Random(1))
    assert report.plants == 15
    assert landscape.statistics.animal_count == 6
    assert landscape.tick_count == 0


def test_headless_run_collects_history_and_outputs(tmp_path):
    settings = _settings(tmp_path, TELEMETRY_ENABLED=True, PLOT_PATH=tmp_path / "population.png")
    result = run(settings)

    assert result.ticks == 15
    assert len(result.history) == 15
    assert result.history.ticks == list(range(1, 16))
    assert result.statistics["tick"] == 15
    assert result.snapshots_sent == 0
    assert result.plot_path is not None and result.plot_path.exists()

    telemetry_files = list((tmp_path / "logs" / "telemetry").glob("ticks_*.jsonl"))
    assert len(telemetry_files) == 1
    assert [sample.tick for sample in read_samples(telemetry_files[0])] == list(range(1, 16))

    logging.getLogger("ecogrid").handlers[0].flush()
    log_text = (tmp_path / "logs" / settings.DEBUG_LOG_FILE).read_text(encoding="utf-8")
    assert "tick 5:" in log_text
    assert "tick 15:" in log_text


def test_same_seed_gives_same_history(tmp_path):
    first = run(_settings(tmp_path / "a"))
    second = run(_settings(tmp_path / "b"))
    assert first.history.series == second.history.series


def test_windowed_run_streams_snapshots_to_renderer(tmp_path):
    settings = _settings(tmp_path, HEADLESS_MODE=False)
    renderers = []

    def factory(settings, channel):
        renderer = _RecordingRenderer(settings, channel)
        renderers.append(renderer)
        return renderer

    result = run(settings, renderer_factory=factory)

    (renderer,) = renderers
    assert result.snapshots_sent == settings.MAX_STEPS + 1
    assert renderer.seen
    assert renderer.seen[-1].tick == settings.MAX_STEPS
    assert len(renderer.seen) + result.snapshots_dropped == result.snapshots_sent

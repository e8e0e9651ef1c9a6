"""Per-tick population telemetry written as JSON lines."""

from __future__ import annotations

import json
import os
import threading
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Mapping


@dataclass(slots=True)
class TickSample:
    tick: int
    plants: int
    herbivores: int
    carnivores: int
    herbivore_reproductions: int
    carnivore_reproductions: int
    herbivore_deaths: int
    carnivore_deaths: int
    herbivore_max_generation: int
    carnivore_max_generation: int

    @classmethod
    def from_summary(cls, summary: Mapping[str, object]) -> "TickSample":
        return cls(
            tick=int(summary["tick"]),
            plants=int(summary["plants"]),
            herbivores=int(summary["herbivore_population"]),
            carnivores=int(summary["carnivore_population"]),
            herbivore_reproductions=int(summary["herbivore_reproductions"]),
            carnivore_reproductions=int(summary["carnivore_reproductions"]),
            herbivore_deaths=int(summary["herbivore_deaths"]),
            carnivore_deaths=int(summary["carnivore_deaths"]),
            herbivore_max_generation=int(summary["herbivore_max_generation"]),
            carnivore_max_generation=int(summary["carnivore_max_generation"]),
        )


class TelemetrySink:
    """Buffered JSONL writer."""

    def __init__(self, kind: str, *, directory: Path, flush_interval: int = 32) -> None:
        directory.mkdir(parents=True, exist_ok=True)
        timestamp = int(time.time())
        self.path = directory / f"{kind}_{timestamp}.jsonl"
        self._buffer: list[dict] = []
        self._lock = threading.Lock()
        self._flush_interval = max(1, flush_interval)
        self._counter = 0
        self._closed = False

    def write(self, payload: TickSample) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError(f"Telemetry sink {self.path.name} is closed")
            self._buffer.append(asdict(payload))
            self._counter += 1
            if self._counter >= self._flush_interval:
                self._flush_locked()

    def flush(self) -> None:
        with self._lock:
            self._flush_locked()

    def close(self) -> None:
        with self._lock:
            self._flush_locked()
            self._closed = True

    def _flush_locked(self) -> None:
        if not self._buffer:
            self._counter = 0
            return
        with self.path.open("a", encoding="utf-8") as handle:
            for row in self._buffer:
                handle.write(json.dumps(row, ensure_ascii=False) + os.linesep)
        self._buffer.clear()
        self._counter = 0


def open_tick_sink(log_directory: Path, *, flush_interval: int = 32) -> TelemetrySink:
    return TelemetrySink("ticks", directory=Path(log_directory) / "telemetry", flush_interval=flush_interval)


def read_samples(path: Path) -> list[TickSample]:
    samples: list[TickSample] = []
    with Path(path).open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if line:
                samples.append(TickSample(**json.loads(line)))
    return samples

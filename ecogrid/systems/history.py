"""Population history recorded over a run, with a matplotlib summary plot."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping

import matplotlib

matplotlib.use("Agg")
from matplotlib import pyplot as plt  # noqa: E402

SERIES = (
    "plants",
    "herbivore_population",
    "carnivore_population",
    "herbivore_max_generation",
    "carnivore_max_generation",
)


@dataclass
class PopulationHistory:
    ticks: List[int] = field(default_factory=list)
    series: Dict[str, List[int]] = field(default_factory=lambda: {name: [] for name in SERIES})

    def record(self, summary: Mapping[str, object]) -> None:
        self.ticks.append(int(summary["tick"]))
        for name in SERIES:
            self.series[name].append(int(summary[name]))

    def __len__(self) -> int:
        return len(self.ticks)

    def latest(self, name: str) -> int:
        values = self.series[name]
        if not values:
            raise IndexError(f"No samples recorded for {name}")
        return values[-1]


def plot_history(history: PopulationHistory, out_path: Path) -> Path:
    """Render population and generation curves into ``out_path`` (PNG)."""

    if not history.ticks:
        raise ValueError("Cannot plot an empty history")

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig, axes = plt.subplots(2, 1, figsize=(10, 6), sharex=True)
    try:
        ax = axes[0]
        ax.plot(history.ticks, history.series["plants"], label="plants", color="tab:green")
        ax.plot(history.ticks, history.series["herbivore_population"], label="herbivores", color="tab:blue")
        ax.plot(history.ticks, history.series["carnivore_population"], label="carnivores", color="tab:red")
        ax.set_ylabel("population")
        ax.legend()

        ax = axes[1]
        ax.plot(history.ticks, history.series["herbivore_max_generation"], label="herbivores", color="tab:blue")
        ax.plot(history.ticks, history.series["carnivore_max_generation"], label="carnivores", color="tab:red")
        ax.set_ylabel("max generation")
        ax.legend()

        axes[-1].set_xlabel("tick")
        fig.tight_layout()
        fig.savefig(out_path)
    finally:
        plt.close(fig)
    return out_path

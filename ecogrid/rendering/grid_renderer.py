"""Pygame viewer that draws landscape snapshots received over a channel."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pygame

from ..systems.channel import SnapshotChannel
from ..world.view import CellMarker, ViewSnapshot

logger = logging.getLogger("ecogrid.rendering")

Color = Tuple[int, int, int]


@dataclass
class GridStyle:
    margin: int = 10
    status_height: int = 24
    background_color: Color = (245, 245, 245)
    grid_color: Color = (220, 220, 220)
    plant_color: Color = (50, 160, 70)
    herbivore_color: Color = (60, 90, 220)
    carnivore_color: Color = (220, 60, 60)
    killed_color: Color = (170, 20, 20)
    dead_color: Color = (130, 130, 130)
    text_color: Color = (20, 20, 20)


# Unit-square triangle tips: the animal points where it is heading.
_TRIANGLES: Dict[str, List[Tuple[float, float]]] = {
    "back": [(0.5, 0.1), (0.15, 0.85), (0.85, 0.85)],
    "front": [(0.5, 0.9), (0.15, 0.15), (0.85, 0.15)],
    "left": [(0.1, 0.5), (0.85, 0.15), (0.85, 0.85)],
    "right": [(0.9, 0.5), (0.15, 0.15), (0.15, 0.85)],
}


class GridRenderer:
    def __init__(
        self,
        width: int,
        height: int,
        channel: SnapshotChannel[ViewSnapshot],
        *,
        cell_size: int = 20,
        fps: int = 30,
        title: str = "ecogrid",
    ) -> None:
        self.width = width
        self.height = height
        self.channel = channel
        self.cell_size = cell_size
        self.fps = fps
        self.title = title
        self.style = GridStyle()
        self.snapshot: Optional[ViewSnapshot] = None
        self.frames = 0
        self.screen: Optional[pygame.Surface] = None

    def open(self) -> None:
        window_width = self.style.margin * 2 + self.width * self.cell_size
        window_height = self.style.margin * 2 + self.height * self.cell_size + self.style.status_height
        pygame.init()
        self.screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption(self.title)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont(None, max(14, int(self.cell_size * 0.9)))

    def close(self) -> None:
        pygame.quit()

    def run(self) -> None:
        """Draw until the window is closed.

        The window stays open after the simulation has finished, showing the
        final state, until the user closes it.
        """

        self.open()
        logger.info("Renderer window opened (%dx%d cells)", self.width, self.height)
        try:
            while self.update():
                pass
        finally:
            self.close()
            logger.info("Renderer closed after %d frames", self.frames)

    def update(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False

        latest = self.channel.try_receive()
        if latest is not None:
            self.snapshot = latest

        self.screen.fill(self.style.background_color)
        self._draw_grid()
        if self.snapshot is not None:
            for entry in self.snapshot:
                self._draw_marker(entry.x, entry.y, entry.marker)
        self._draw_status()

        pygame.display.flip()
        self.clock.tick(self.fps)
        self.frames += 1
        return True

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            self.style.margin + x * self.cell_size,
            self.style.margin + y * self.cell_size,
            self.cell_size,
            self.cell_size,
        )

    def _draw_grid(self) -> None:
        for x in range(self.width + 1):
            x_pix = self.style.margin + x * self.cell_size
            pygame.draw.line(
                self.screen,
                self.style.grid_color,
                (x_pix, self.style.margin),
                (x_pix, self.style.margin + self.height * self.cell_size),
                1,
            )
        for y in range(self.height + 1):
            y_pix = self.style.margin + y * self.cell_size
            pygame.draw.line(
                self.screen,
                self.style.grid_color,
                (self.style.margin, y_pix),
                (self.style.margin + self.width * self.cell_size, y_pix),
                1,
            )

    def _draw_marker(self, x: int, y: int, marker: CellMarker) -> None:
        rect = self._cell_rect(x, y)
        if marker is CellMarker.PLANT:
            pygame.draw.rect(self.screen, self.style.plant_color, rect.inflate(-2, -2))
        elif marker is CellMarker.KILLED_ANIMAL:
            pygame.draw.line(self.screen, self.style.killed_color, rect.topleft, rect.bottomright, 2)
            pygame.draw.line(self.screen, self.style.killed_color, rect.topright, rect.bottomleft, 2)
        elif marker is CellMarker.DEAD_ANIMAL:
            pygame.draw.circle(self.screen, self.style.dead_color, rect.center, max(2, self.cell_size // 3))
        elif marker.is_live_animal:
            species, side = marker.value.split("_")
            color = self.style.herbivore_color if species == "herb" else self.style.carnivore_color
            points = [(rect.x + fx * rect.width, rect.y + fy * rect.height) for fx, fy in _TRIANGLES[side]]
            pygame.draw.polygon(self.screen, color, points)

    def _draw_status(self) -> None:
        if self.snapshot is None:
            text = "waiting for the first tick"
        else:
            text = f"tick {self.snapshot.tick}  occupied cells {len(self.snapshot)}"
        if self.channel.closed:
            text += "  (finished)"
        surface = self.font.render(text, True, self.style.text_color)
        self.screen.blit(surface, (self.style.margin, self.style.margin + self.height * self.cell_size + 4))

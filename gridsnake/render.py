from __future__ import annotations

from typing import Tuple

import numpy as np

try:
    import pygame  # type: ignore
except ImportError:  # pragma: no cover - pygame not installed in some envs
    pygame = None

from gridsnake.game import SnakeGame, Vec2

Color = Tuple[int, int, int]

COLOR_BG: Color = (51, 51, 51)
COLOR_SNAKE: Color = (128, 128, 128)
COLOR_FOOD: Color = (26, 179, 26)
COLOR_GRID: Color = (77, 77, 77)

VERTICES_PER_QUAD = 4


def cell_vertices(grid_size: Tuple[int, int], x: int, y: int) -> np.ndarray:
    """Quad for cell ``(x, y)`` in NDC: left-bottom, right-bottom, right-top, left-top."""
    width, height = grid_size
    inc_x = 2.0 / width
    inc_y = 2.0 / height
    left = -1.0 + x * inc_x
    right = left + inc_x
    bot = -1.0 + y * inc_y
    top = bot + inc_y
    return np.array(
        [
            [left, bot],
            [right, bot],
            [right, top],
            [left, top],
        ],
        dtype=np.float32,
    )


def grid_lines(grid_size: Tuple[int, int]) -> np.ndarray:
    """Interior grid lines as ``(n, 2, 2)`` endpoints, vertical lines first."""
    width, height = grid_size
    assert width > 0 and height > 0

    xs = -1.0 + np.arange(1, width, dtype=np.float32) * (2.0 / width)
    ys = -1.0 + np.arange(1, height, dtype=np.float32) * (2.0 / height)

    vertical = np.zeros((width - 1, 2, 2), dtype=np.float32)
    vertical[:, :, 0] = xs[:, None]
    vertical[:, 0, 1] = -1.0
    vertical[:, 1, 1] = 1.0

    horizontal = np.zeros((height - 1, 2, 2), dtype=np.float32)
    horizontal[:, 0, 0] = -1.0
    horizontal[:, 1, 0] = 1.0
    horizontal[:, :, 1] = ys[:, None]

    return np.concatenate([vertical, horizontal], axis=0)


def ndc_to_pixels(points: np.ndarray, window_size: Tuple[int, int]) -> np.ndarray:
    """Map NDC points to screen pixels; screen y grows downwards."""
    width_px, height_px = window_size
    pixels = np.empty(points.shape, dtype=np.float32)
    pixels[..., 0] = (points[..., 0] + 1.0) * 0.5 * width_px
    pixels[..., 1] = (1.0 - points[..., 1]) * 0.5 * height_px
    return pixels


class VertexBatch:
    """Fixed-capacity block of quads that is rewritten every frame."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self.capacity = capacity
        self.vertices = np.zeros((capacity, VERTICES_PER_QUAD, 2), dtype=np.float32)
        self.count = 0

    def write(self, position: int, quads: np.ndarray) -> None:
        quads = np.asarray(quads, dtype=np.float32).reshape(-1, VERTICES_PER_QUAD, 2)
        end = position + len(quads)
        if position < 0 or end > self.capacity:
            raise IndexError(f"write [{position}, {end}) exceeds capacity {self.capacity}")
        self.vertices[position:end] = quads
        self.count = max(self.count, end)

    def clear(self) -> None:
        self.count = 0

    def active(self) -> np.ndarray:
        return self.vertices[: self.count]


def _write_cell(cell: Vec2, context: Tuple[VertexBatch, Tuple[int, int], list]) -> None:
    batch, grid_size, offset = context
    batch.write(offset[0], cell_vertices(grid_size, cell[0], cell[1]))
    offset[0] += 1


class BoardRenderer:
    def __init__(
        self,
        grid_size: Tuple[int, int],
        window_size: Tuple[int, int] = (600, 600),
        caption: str = "Snake",
    ) -> None:
        if pygame is None:
            raise ImportError("pygame is required for rendering")

        self.grid_size = grid_size
        self.window_size = window_size
        self.snake_batch = VertexBatch(grid_size[0] * grid_size[1])
        self.food_batch = VertexBatch(1)
        self._lines = ndc_to_pixels(grid_lines(grid_size), window_size)

        pygame.init()
        self._window = pygame.display.set_mode(window_size)
        pygame.display.set_caption(caption)

    def draw(self, game: SnakeGame) -> None:
        # A restart shortens the body, so drop last frame's quads first.
        self.snake_batch.clear()
        game.for_each((self.snake_batch, self.grid_size, [0]), _write_cell)

        fx, fy = game.food_position()
        self.food_batch.write(0, cell_vertices(self.grid_size, fx, fy))

        self._window.fill(COLOR_BG)
        self._draw_quads(self.snake_batch, COLOR_SNAKE)
        self._draw_quads(self.food_batch, COLOR_FOOD)
        for start, end in self._lines:
            pygame.draw.line(self._window, COLOR_GRID, start.tolist(), end.tolist())

        pygame.display.flip()

    def _draw_quads(self, batch: VertexBatch, color: Color) -> None:
        for quad in ndc_to_pixels(batch.active(), self.window_size):
            pygame.draw.polygon(self._window, color, quad.tolist())

    def close(self) -> None:
        if pygame:
            pygame.quit()

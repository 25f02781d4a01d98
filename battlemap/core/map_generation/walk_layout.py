"""
Random-Walk Layout: a cursor wanders from the map centre opening every cell
it steps on, occasionally spawning a short side walk.
"""
from typing import Tuple

from .generation_config import GenerationParameters
from .grid import Canvas, Grid, blank_canvas
from .seeded_stream import SeededStream
from .terrain import BLOCKED, OPEN, Theme

# Indexed by a draw in [0, 4): right, left, down, up
WALK_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))

MIN_BRANCH_STEPS = 10
BRANCH_STEP_SPREAD = 50


def _step(canvas: Canvas, stream: SeededStream, x: int, y: int) -> Tuple[int, int, bool]:
    """Try one move; out-of-bounds moves leave the cursor where it is."""
    dx, dy = WALK_DIRECTIONS[stream.next_int(4)]
    nx, ny = x + dx, y + dy
    if 0 <= nx < len(canvas[0]) and 0 <= ny < len(canvas):
        canvas[ny][nx] = OPEN
        return nx, ny, True
    return x, y, False


def walk_branch(canvas: Canvas, stream: SeededStream, x: int, y: int, steps: int) -> None:
    """Side corridor; does not spawn further branches."""
    for _ in range(steps):
        x, y, _moved = _step(canvas, stream, x, y)


def carve_walk(
    width: int,
    height: int,
    stream: SeededStream,
    parameters: GenerationParameters,
) -> Canvas:
    canvas = blank_canvas(width, height, BLOCKED)
    x, y = width // 2, height // 2
    canvas[y][x] = OPEN

    for _ in range(parameters.steps):
        x, y, moved = _step(canvas, stream, x, y)
        if moved and stream.chance(parameters.branch_chance):
            branch_steps = stream.next_int(BRANCH_STEP_SPREAD) + MIN_BRANCH_STEPS
            walk_branch(canvas, stream, x, y, branch_steps)

    return canvas


def build_walk_layout(
    width: int,
    height: int,
    stream: SeededStream,
    parameters: GenerationParameters,
    theme: Theme,
) -> Grid:
    """Random-Walk Layout as a single call. The theme does not affect it."""
    return Grid.from_rows(carve_walk(width, height, stream, parameters))

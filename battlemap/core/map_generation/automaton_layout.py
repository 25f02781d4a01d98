"""
Automaton Layout: organic caves from a random fill smoothed by
birth/death neighbour rules.
"""
from .features import decorate_caves
from .generation_config import GenerationParameters
from .grid import Canvas, Grid, blank_canvas, count_neighbors
from .seeded_stream import SeededStream
from .terrain import BLOCKED, OPEN, Theme


def random_fill(width: int, height: int, stream: SeededStream, fill: float) -> Canvas:
    """Every cell starts BLOCKED and turns OPEN with probability ``fill``."""
    canvas = blank_canvas(width, height, BLOCKED)
    for y in range(height):
        for x in range(width):
            if stream.chance(fill):
                canvas[y][x] = OPEN
    return canvas


def step_automaton(canvas: Canvas, birth_limit: int, death_limit: int) -> Canvas:
    """
    One synchronous update.

    Reads only the previous snapshot. Interior cells follow the rules; the
    edge ring of the new snapshot is always BLOCKED.
    """
    height = len(canvas)
    width = len(canvas[0])
    updated = blank_canvas(width, height, BLOCKED)

    for y in range(1, height - 1):
        for x in range(1, width - 1):
            neighbors = count_neighbors(canvas, x, y, OPEN)
            if canvas[y][x] == OPEN:
                updated[y][x] = BLOCKED if neighbors < death_limit else OPEN
            else:
                updated[y][x] = OPEN if neighbors > birth_limit else BLOCKED

    return updated


def run_automaton(canvas: Canvas, iterations: int, birth_limit: int, death_limit: int) -> Canvas:
    """Apply ``iterations`` updates; zero iterations returns the canvas untouched."""
    for _ in range(iterations):
        canvas = step_automaton(canvas, birth_limit, death_limit)
    return canvas


def carve_automaton(
    width: int,
    height: int,
    stream: SeededStream,
    parameters: GenerationParameters,
    theme: Theme,
) -> Canvas:
    canvas = random_fill(width, height, stream, parameters.initial_fill)
    canvas = run_automaton(
        canvas, parameters.iterations, parameters.birth_limit, parameters.death_limit
    )
    decorate_caves(canvas, stream, theme, parameters.cave_feature_chance)
    return canvas


def build_automaton_layout(
    width: int,
    height: int,
    stream: SeededStream,
    parameters: GenerationParameters,
    theme: Theme,
) -> Grid:
    """Automaton Layout as a single call."""
    return Grid.from_rows(carve_automaton(width, height, stream, parameters, theme))

"""
Feature passes shared by the layout algorithms.

Each pass walks its cells in row-major order and only draws from the stream
for cells that are currently open, so the draw sequence depends on nothing
but the canvas and the seed.
"""
from typing import Optional

from .grid import Canvas, Room, count_neighbors
from .seeded_stream import SeededStream
from .terrain import (
    BLOCKED,
    CAVE_DECORATIONS,
    CORRIDOR_FEATURES,
    OPEN,
    THEME_FEATURES,
    Theme,
)


def scatter_theme_features(
    canvas: Canvas,
    stream: SeededStream,
    theme: Theme,
    chance: float,
    x0: int = 1,
    y0: int = 1,
    x1: Optional[int] = None,
    y1: Optional[int] = None,
) -> None:
    """
    Replace open cells in ``[x0, x1) x [y0, y1)`` with theme features.

    The bounds default to the grid interior (everything but the edge ring).
    Cells outside the canvas are skipped.
    """
    height = len(canvas)
    width = len(canvas[0])
    x1 = width - 1 if x1 is None else x1
    y1 = height - 1 if y1 is None else y1
    features = THEME_FEATURES[theme]

    for y in range(y0, y1):
        if not 0 <= y < height:
            continue
        row = canvas[y]
        for x in range(x0, x1):
            if 0 <= x < width and row[x] == OPEN and stream.chance(chance):
                row[x] = stream.choice(features)


def scatter_room_features(
    canvas: Canvas,
    stream: SeededStream,
    room: Room,
    theme: Theme,
    chance: float,
) -> None:
    """Theme features inside a room's interior (its border ring excluded)."""
    if room.width - 2 < 2 or room.height - 2 < 2:
        return
    scatter_theme_features(
        canvas, stream, theme, chance,
        x0=room.x + 1, y0=room.y + 1,
        x1=room.x + room.width - 1, y1=room.y + room.height - 1,
    )


def scatter_corridor_features(
    canvas: Canvas,
    stream: SeededStream,
    chance: float,
    obstructing: str = BLOCKED,
    min_obstructing_neighbors: int = 4,
) -> None:
    """
    Drop hazards onto corridor-like cells.

    A sampled open cell counts as corridor when at least
    ``min_obstructing_neighbors`` of its 8 neighbours are obstructing.
    """
    height = len(canvas)
    width = len(canvas[0])
    for y in range(1, height - 1):
        for x in range(1, width - 1):
            if canvas[y][x] != OPEN or not stream.chance(chance):
                continue
            if count_neighbors(canvas, x, y, obstructing) >= min_obstructing_neighbors:
                canvas[y][x] = stream.choice(CORRIDOR_FEATURES)


def decorate_caves(
    canvas: Canvas,
    stream: SeededStream,
    theme: Theme,
    chance: float,
) -> None:
    """Automaton decoration step: hazards, crystals and water in open cells."""
    rule = CAVE_DECORATIONS[theme]
    height = len(canvas)
    width = len(canvas[0])
    for y in range(1, height - 1):
        for x in range(1, width - 1):
            if canvas[y][x] != OPEN or not stream.chance(chance):
                continue
            replacement = rule.fallback
            for threshold, terrain_id in rule.steps:
                if stream.chance(threshold):
                    replacement = terrain_id
                    break
            if replacement is not None:
                canvas[y][x] = replacement

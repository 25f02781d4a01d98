"""
Template Layout: a fixed walled chamber varied per seed with theme features.
"""
from .features import scatter_theme_features
from .generation_config import GenerationParameters
from .grid import Canvas, Grid, blank_canvas
from .seeded_stream import SeededStream
from .terrain import BLOCKED, OPEN, Theme


def base_template(width: int, height: int) -> Canvas:
    """Edge ring of BLOCKED around one open chamber filling the interior."""
    canvas = blank_canvas(width, height, OPEN)
    for x in range(width):
        canvas[0][x] = BLOCKED
        canvas[height - 1][x] = BLOCKED
    for y in range(height):
        canvas[y][0] = BLOCKED
        canvas[y][width - 1] = BLOCKED
    return canvas


def build_template_layout(
    width: int,
    height: int,
    stream: SeededStream,
    parameters: GenerationParameters,
    theme: Theme,
) -> Grid:
    canvas = base_template(width, height)
    scatter_theme_features(canvas, stream, theme, parameters.variation_chance)
    return Grid.from_rows(canvas)

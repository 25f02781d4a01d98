"""
Procedural Terrain Generator.

Dispatches a validated GenerationConfig to one of the layout algorithms and
packages the result for the scorer, the codec and the API.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union
import logging

from .automaton_layout import build_automaton_layout
from .compression import CompressedGrid, compress_grid, to_compact_string
from .features import decorate_caves
from .generation_config import (
    Algorithm,
    GenerationConfig,
    GenerationParameters,
    preset_config,
)
from .grid import Grid
from .partition_layout import PartitionLayout, build_partition_layout
from .seeded_stream import SeededStream
from .template_layout import build_template_layout
from .terrain import Theme
from .walk_layout import build_walk_layout

logger = logging.getLogger("battlemap.map_generation")


@dataclass(frozen=True)
class GeneratedMap:
    """A generated grid together with the config that reproduces it."""
    config: GenerationConfig
    grid: Grid

    def compress(self) -> CompressedGrid:
        return compress_grid(self.grid, self.config.seed, self.config.theme.value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        compressed = self.compress()
        return {
            **self.config.to_dict(),
            "grid": self.grid.to_list(),
            "compact": to_compact_string(compressed),
            "compression_ratio": compressed.compression_ratio,
        }


class TerrainGenerator:
    """
    Generates terrain grids from a GenerationConfig.

    Each algorithm family has one ``generate_<algorithm>`` method taking a
    fresh stream; ``generate`` picks the method for ``config.algorithm``.
    Every call to ``generate`` starts a new stream from the seed, so repeated
    calls return identical grids.
    """

    _LAYOUT_METHODS: Dict[Algorithm, str] = {
        Algorithm.PARTITION: "generate_partition",
        Algorithm.AUTOMATON: "generate_automaton",
        Algorithm.WALK: "generate_walk",
        Algorithm.TEMPLATE: "generate_template",
        Algorithm.COMPOSITE: "generate_composite",
    }

    def __init__(self, config: GenerationConfig):
        self.config = config

    @property
    def parameters(self) -> GenerationParameters:
        return self.config.parameters

    def generate(self) -> Grid:
        """Generate the grid for the configured algorithm."""
        layout: Callable[[SeededStream], Grid] = getattr(
            self, self._LAYOUT_METHODS[self.config.algorithm]
        )
        stream = SeededStream(self.config.seed)
        grid = layout(stream)
        logger.info(
            f"Generated {grid.width}x{grid.height} {self.config.theme.value} map "
            f"with {self.config.algorithm.value} layout (seed={self.config.seed}, draws={stream.draws})"
        )
        return grid

    def generate_map(self) -> GeneratedMap:
        return GeneratedMap(config=self.config, grid=self.generate())

    def generate_compressed(self) -> CompressedGrid:
        """Generate and run-length encode in one step."""
        return compress_grid(self.generate(), self.config.seed, self.config.theme.value)

    # ------------------------------------------------------------------
    # Algorithm families
    # ------------------------------------------------------------------

    def generate_partition(self, stream: SeededStream) -> Grid:
        return build_partition_layout(
            self.config.width, self.config.height, stream, self.parameters, self.config.theme
        )

    def generate_automaton(self, stream: SeededStream) -> Grid:
        return build_automaton_layout(
            self.config.width, self.config.height, stream, self.parameters, self.config.theme
        )

    def generate_walk(self, stream: SeededStream) -> Grid:
        return build_walk_layout(
            self.config.width, self.config.height, stream, self.parameters, self.config.theme
        )

    def generate_template(self, stream: SeededStream) -> Grid:
        return build_template_layout(
            self.config.width, self.config.height, stream, self.parameters, self.config.theme
        )

    def generate_composite(self, stream: SeededStream) -> Grid:
        """Partition layout followed by a light cave-decoration pass."""
        layout = PartitionLayout(
            self.config.width, self.config.height, stream, self.parameters, self.config.theme
        )
        canvas, _ = layout.carve()
        decorate_caves(canvas, stream, self.config.theme, self.parameters.composite_feature_chance)
        return Grid.from_rows(canvas)


def generate_terrain(
    seed: int,
    width: int = 25,
    height: int = 25,
    theme: Union[str, Theme] = "dungeon",
    algorithm: Union[str, Algorithm] = "composite",
    parameters: Optional[Mapping[str, Any]] = None,
) -> GeneratedMap:
    """
    Convenience function to generate a map.

    Args:
        seed: Non-negative integer seed
        width: Grid width in cells
        height: Grid height in cells
        theme: "dungeon", "wilderness", "underground", "urban" or "mystical"
        algorithm: "partition", "automaton", "walk", "template" or "composite"
        parameters: Optional knob overrides (camelCase or snake_case names)

    Returns:
        GeneratedMap with the grid and its config
    """
    config = GenerationConfig.create(
        seed=seed, width=width, height=height,
        theme=theme, algorithm=algorithm, parameters=parameters,
    )
    return TerrainGenerator(config).generate_map()


def generate_preset(name: str, seed: int, width: int = 25, height: int = 25) -> GeneratedMap:
    """Generate one of the named quick-generation presets."""
    return TerrainGenerator(preset_config(name, seed, width, height)).generate_map()

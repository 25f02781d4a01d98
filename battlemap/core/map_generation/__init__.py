"""
Procedural Battlemap Generation System.

Generates deterministic tactical battlemaps from a seed using:
- Recursive partitioning for room-and-corridor layouts
- Cellular automata for organic caves
- Random walks for winding tunnels
- A walled template chamber with per-seed variation
- Run-length encoding for compact storage and transport
"""

from .seeded_stream import SeededStream
from .grid import Grid, Position, Room
from .terrain import Theme, TerrainConfig, TERRAIN_TYPES, get_terrain
from .generation_config import (
    Algorithm,
    GenerationConfig,
    GenerationParameters,
    params_to_string,
    preset_config,
    string_to_params,
)
from .terrain_generator import GeneratedMap, TerrainGenerator, generate_preset, generate_terrain
from .compression import (
    CompressedGrid,
    compress_grid,
    compression_stats,
    decompress_grid,
    from_compact_string,
    to_compact_string,
)

__all__ = [
    "SeededStream",
    "Grid",
    "Position",
    "Room",
    "Theme",
    "TerrainConfig",
    "TERRAIN_TYPES",
    "get_terrain",
    "Algorithm",
    "GenerationConfig",
    "GenerationParameters",
    "params_to_string",
    "preset_config",
    "string_to_params",
    "GeneratedMap",
    "TerrainGenerator",
    "generate_preset",
    "generate_terrain",
    "CompressedGrid",
    "compress_grid",
    "compression_stats",
    "decompress_grid",
    "from_compact_string",
    "to_compact_string",
]

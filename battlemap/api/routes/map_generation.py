"""
Map Generation API Routes.

Handles seeded battlemap generation, tactical position lookup and decoding
of compact map strings.
"""
from fastapi import APIRouter, Query
from pydantic import BaseModel, Field
from typing import Dict, Any, List, Optional, Tuple

from battlemap.config import MAX_TOP_POSITIONS, Settings, get_settings
from battlemap.core.ai import TacticalPositionScorer
from battlemap.core.errors import InvalidDimensionsError, MalformedCompressedDataError
from battlemap.core.map_generation import (
    Algorithm,
    GeneratedMap,
    GenerationConfig,
    TERRAIN_TYPES,
    TerrainGenerator,
    Theme,
    decompress_grid,
    from_compact_string,
    generate_preset,
)
from battlemap.core.map_generation.generation_config import MAX_MAP_SIZE, PRESETS
from battlemap.core.map_generation.terrain import THEME_PALETTES

router = APIRouter(prefix="/maps", tags=["map_generation"])


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class GenerateMapRequest(BaseModel):
    """Request to generate a battlemap."""
    seed: int = Field(ge=0, description="Non-negative integer seed")
    width: Optional[int] = Field(default=None, le=MAX_MAP_SIZE, description="Grid width in cells")
    height: Optional[int] = Field(default=None, le=MAX_MAP_SIZE, description="Grid height in cells")
    theme: Optional[str] = Field(default=None, description="Map theme")
    algorithm: Optional[str] = Field(default=None, description="Layout algorithm")
    parameters: Optional[Dict[str, Any]] = Field(default=None, description="Algorithm knobs")
    top_positions: Optional[int] = Field(
        default=None, ge=0, le=MAX_TOP_POSITIONS, description="Tactical positions to return"
    )


class DecodeMapRequest(BaseModel):
    """Request to expand a compact map string."""
    compact: str = Field(min_length=1, description="Compact map string")


class MapResponse(BaseModel):
    """Response containing generated map data."""
    success: bool
    map: Dict[str, Any]
    positions: List[Dict[str, Any]] = []
    message: str = ""


class DecodedMapResponse(BaseModel):
    """Response containing a decoded grid."""
    success: bool
    width: int
    height: int
    seed: int
    theme: str
    version: str
    grid: List[List[str]]


class CatalogResponse(BaseModel):
    """Response listing catalog entries."""
    success: bool
    items: List[Dict[str, Any]]


def _dimensions(settings: Settings, width: Optional[int], height: Optional[int]) -> Tuple[int, int]:
    """Fill in default dimensions and hold them to the service's size limit."""
    defaults = settings.generation_defaults()
    width = defaults["width"] if width is None else width
    height = defaults["height"] if height is None else height
    if not settings.fits(width, height):
        raise InvalidDimensionsError(width, height, max_size=settings.MAX_MAP_SIZE)
    return width, height


def _map_response(generated: GeneratedMap, top_positions: int) -> MapResponse:
    scorer = TacticalPositionScorer(generated.grid)
    positions = [p.to_dict() for p in scorer.find_tactical_positions(top_positions)]
    config = generated.config
    return MapResponse(
        success=True,
        map=generated.to_dict(),
        positions=positions,
        message=(
            f"Generated {config.width}x{config.height} {config.theme.value} map "
            f"with {config.algorithm.value} layout"
        ),
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/generate", response_model=MapResponse)
async def generate_map(request: GenerateMapRequest):
    """
    Generate a seeded battlemap.

    The same seed, algorithm, parameters and size always produce the same
    grid. The response carries the grid, its compact string and the best
    tactical positions for placing adversaries.
    """
    settings = get_settings()
    defaults = settings.generation_defaults()
    width, height = _dimensions(settings, request.width, request.height)
    config = GenerationConfig.create(
        seed=request.seed,
        width=width,
        height=height,
        theme=request.theme or defaults["theme"],
        algorithm=request.algorithm or defaults["algorithm"],
        parameters=request.parameters,
    )
    generated = TerrainGenerator(config).generate_map()
    top_positions = request.top_positions
    if top_positions is None:
        top_positions = settings.DEFAULT_TOP_POSITIONS
    return _map_response(generated, top_positions)


@router.post("/decode", response_model=DecodedMapResponse)
async def decode_map(request: DecodeMapRequest):
    """
    Expand a compact map string back into its grid.

    The declared size is checked against the service limit before any row
    is expanded.
    """
    settings = get_settings()
    if len(request.compact) > settings.MAX_COMPACT_LENGTH:
        raise MalformedCompressedDataError(
            f"Compact string is longer than {settings.MAX_COMPACT_LENGTH} characters",
            details={"length": len(request.compact), "max_length": settings.MAX_COMPACT_LENGTH}
        )
    compressed = from_compact_string(request.compact)
    if not settings.fits(compressed.width, compressed.height):
        raise MalformedCompressedDataError(
            f"Declared size {compressed.width}x{compressed.height} exceeds the "
            f"{settings.MAX_MAP_SIZE}x{settings.MAX_MAP_SIZE} limit",
            details={
                "width": compressed.width,
                "height": compressed.height,
                "max_size": settings.MAX_MAP_SIZE,
            }
        )
    grid = decompress_grid(compressed)
    return DecodedMapResponse(
        success=True,
        width=grid.width,
        height=grid.height,
        seed=compressed.seed,
        theme=compressed.theme,
        version=compressed.version,
        grid=grid.to_list(),
    )


@router.get("/algorithms", response_model=CatalogResponse)
async def list_algorithms():
    """List all available layout algorithms."""
    return CatalogResponse(
        success=True,
        items=[{"id": a.value, "name": a.value.title()} for a in Algorithm],
    )


@router.get("/themes", response_model=CatalogResponse)
async def list_themes():
    """List all themes with the terrain each one draws from."""
    return CatalogResponse(
        success=True,
        items=[
            {"id": t.value, "name": t.value.title(), "terrain": list(THEME_PALETTES[t])}
            for t in Theme
        ],
    )


@router.get("/terrain", response_model=CatalogResponse)
async def list_terrain():
    """List the terrain catalog."""
    return CatalogResponse(
        success=True,
        items=[
            {
                "id": t.id,
                "name": t.name,
                "glyph": t.display_glyph,
                "blocks_movement": t.blocks_movement,
                "blocks_line_of_sight": t.blocks_line_of_sight,
                "movement_cost": t.movement_cost,
                "category": t.category.value,
                "description": t.description,
            }
            for t in TERRAIN_TYPES.values()
        ],
    )


@router.get("/presets", response_model=CatalogResponse)
async def list_presets():
    """List the quick-generation presets."""
    return CatalogResponse(
        success=True,
        items=[
            {"id": name, "theme": theme.value, "algorithm": algorithm.value}
            for name, (theme, algorithm) in PRESETS.items()
        ],
    )


@router.get("/presets/{name}", response_model=MapResponse)
async def generate_preset_map(
    name: str,
    seed: int = Query(ge=0),
    width: Optional[int] = Query(default=None, le=MAX_MAP_SIZE),
    height: Optional[int] = Query(default=None, le=MAX_MAP_SIZE),
    top_positions: Optional[int] = Query(default=None, ge=0, le=MAX_TOP_POSITIONS),
):
    """Generate a map from one of the named presets."""
    settings = get_settings()
    width, height = _dimensions(settings, width, height)
    generated = generate_preset(name, seed, width=width, height=height)
    if top_positions is None:
        top_positions = settings.DEFAULT_TOP_POSITIONS
    return _map_response(generated, top_positions)

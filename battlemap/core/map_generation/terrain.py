"""
Terrain Catalog for Battlemap Generation.

Grids only store terrain ids; everything a consumer needs to know about an id
(movement, sight, cost, glyph) is looked up here.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class TerrainCategory(str, Enum):
    """Broad terrain groupings."""
    OPEN = "open"
    OBSTRUCTING = "obstructing"
    HAZARDOUS = "hazardous"
    INTERACTIVE = "interactive"
    ENVIRONMENTAL = "environmental"
    STRUCTURAL = "structural"


class Theme(str, Enum):
    """Map themes; each selects a palette and decoration tables."""
    DUNGEON = "dungeon"
    WILDERNESS = "wilderness"
    UNDERGROUND = "underground"
    URBAN = "urban"
    MYSTICAL = "mystical"


@dataclass(frozen=True)
class TerrainConfig:
    """Static properties of one terrain id."""
    id: str
    name: str
    display_glyph: str
    blocks_movement: bool
    blocks_line_of_sight: bool
    movement_cost: int
    description: str
    category: TerrainCategory


# Terrain every layout builds from
OPEN = "empty"
BLOCKED = "wall"


TERRAIN_TYPES: Dict[str, TerrainConfig] = {
    t.id: t for t in [
        TerrainConfig("empty", "Empty", " ", False, False, 1,
                      "Open ground", TerrainCategory.OPEN),
        TerrainConfig("wall", "Wall", "#", True, True, 0,
                      "Solid stone wall", TerrainCategory.STRUCTURAL),
        TerrainConfig("pit", "Pit", "□", True, False, 2,
                      "Bottomless pit", TerrainCategory.HAZARDOUS),
        TerrainConfig("lava", "Lava", "≈", True, False, 0,
                      "Molten rock river", TerrainCategory.HAZARDOUS),
        TerrainConfig("water", "Water", "~", False, False, 2,
                      "Shallow water or marsh", TerrainCategory.OPEN),
        TerrainConfig("difficult", "Difficult Terrain", "^", False, False, 2,
                      "Dense undergrowth or loose scree", TerrainCategory.OPEN),
        TerrainConfig("ruins", "Ancient Ruins", "☗", False, True, 3,
                      "Crumbling stones of a forgotten age", TerrainCategory.ENVIRONMENTAL),
        TerrainConfig("mushrooms", "Giant Mushrooms", "♣", False, True, 2,
                      "Towering fungi, bioluminescent at night", TerrainCategory.ENVIRONMENTAL),
        TerrainConfig("crystal", "Crystal Spire", "✶", True, False, 0,
                      "Jagged glowing crystal spire", TerrainCategory.ENVIRONMENTAL),
        TerrainConfig("altar", "Forgotten Altar", "⚑", False, False, 1,
                      "A mysterious altar radiating old power", TerrainCategory.INTERACTIVE),
        TerrainConfig("trees", "Dense Trees", "♠", False, True, 2,
                      "Thick forest canopy", TerrainCategory.ENVIRONMENTAL),
        TerrainConfig("stalagmite", "Stalagmite", "▲", False, True, 2,
                      "Limestone formation", TerrainCategory.ENVIRONMENTAL),
        TerrainConfig("chasm", "Chasm", "‖", True, False, 0,
                      "Deep fissure in the earth", TerrainCategory.HAZARDOUS),
        TerrainConfig("bridge", "Bridge", "=", False, False, 1,
                      "Wooden bridge over a chasm", TerrainCategory.STRUCTURAL),
        TerrainConfig("portal", "Mystic Portal", "◎", False, False, 1,
                      "Swirling vortex of magic", TerrainCategory.INTERACTIVE),
        TerrainConfig("rubble", "Rubble", "※", False, True, 2,
                      "Collapsed building debris", TerrainCategory.OBSTRUCTING),
        TerrainConfig("ice", "Ice", "⋄", False, False, 2,
                      "Slippery ice surface", TerrainCategory.HAZARDOUS),
    ]
}


THEME_PALETTES: Dict[Theme, Tuple[str, ...]] = {
    Theme.DUNGEON: ("empty", "wall", "pit", "water", "difficult", "ruins", "crystal", "altar"),
    Theme.WILDERNESS: ("empty", "difficult", "trees", "water", "pit", "chasm", "bridge", "rubble"),
    Theme.UNDERGROUND: ("empty", "wall", "stalagmite", "water", "difficult", "crystal", "portal", "altar"),
    Theme.URBAN: ("empty", "wall", "rubble", "water", "difficult", "pit", "bridge", "portal"),
    Theme.MYSTICAL: ("empty", "crystal", "portal", "altar", "ruins", "mushrooms", "water", "difficult"),
}

# Features scattered through room interiors and template variation
THEME_FEATURES: Dict[Theme, Tuple[str, ...]] = {
    Theme.DUNGEON: ("pit", "water", "difficult", "altar"),
    Theme.WILDERNESS: ("difficult", "trees", "water", "pit"),
    Theme.UNDERGROUND: ("crystal", "water", "difficult", "stalagmite"),
    Theme.URBAN: ("rubble", "water", "pit", "difficult"),
    Theme.MYSTICAL: ("crystal", "portal", "altar", "mushrooms"),
}

CORRIDOR_FEATURES: Tuple[str, ...] = ("pit", "difficult", "water")


@dataclass(frozen=True)
class DecorationRule:
    """
    Cave decoration table for one theme.

    Each ``(threshold, terrain)`` step takes a fresh draw and stops at the
    first draw below its threshold; if none hit, ``fallback`` is used
    (``None`` leaves the cell open).
    """
    steps: Tuple[Tuple[float, str], ...]
    fallback: Optional[str]


CAVE_DECORATIONS: Dict[Theme, DecorationRule] = {
    Theme.DUNGEON: DecorationRule(((0.3, "pit"), (0.5, "water")), "difficult"),
    Theme.WILDERNESS: DecorationRule((), "difficult"),
    Theme.UNDERGROUND: DecorationRule(((0.4, "crystal"), (0.7, "water")), None),
    Theme.URBAN: DecorationRule(((0.5, "rubble"),), "difficult"),
    Theme.MYSTICAL: DecorationRule(((0.4, "mushrooms"), (0.5, "crystal")), "portal"),
}


def parse_theme(value) -> Theme:
    """Coerce a theme name (any case) to ``Theme``; raises ValueError."""
    if isinstance(value, Theme):
        return value
    return Theme(str(value).lower())


def get_terrain(terrain_id: str) -> Optional[TerrainConfig]:
    """Get terrain config by id."""
    return TERRAIN_TYPES.get(terrain_id)


def blocks_movement(terrain_id: str) -> bool:
    """Unknown ids are treated as impassable."""
    terrain = TERRAIN_TYPES.get(terrain_id)
    return terrain.blocks_movement if terrain else True


def blocks_line_of_sight(terrain_id: str) -> bool:
    """Unknown ids are treated as opaque."""
    terrain = TERRAIN_TYPES.get(terrain_id)
    return terrain.blocks_line_of_sight if terrain else True


def get_movement_cost(terrain_id: str) -> int:
    terrain = TERRAIN_TYPES.get(terrain_id)
    return terrain.movement_cost if terrain else 0


def get_display_glyph(terrain_id: str) -> str:
    terrain = TERRAIN_TYPES.get(terrain_id)
    return terrain.display_glyph if terrain else "?"


def is_valid_terrain(terrain_id: str) -> bool:
    return terrain_id in TERRAIN_TYPES


def terrain_by_category(category: TerrainCategory) -> List[TerrainConfig]:
    """All catalog entries in a category."""
    return [t for t in TERRAIN_TYPES.values() if t.category == category]


def terrain_for_theme(theme: Theme) -> List[str]:
    """Palette of terrain ids a theme draws from."""
    return list(THEME_PALETTES[parse_theme(theme)])

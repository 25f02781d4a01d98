"""
Tactical Position Scoring.

Ranks the cells of a finished grid by how attractive they are as placement
tiles for an adversary group:
- Cover from neighbouring terrain that blocks line of sight
- Flanking lanes (open neighbours that can themselves be approached)
- Mobility (cheap cardinal moves out of the tile)
- Elevation, when the host supplies a height map
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple
import logging

from ..map_generation.grid import ALL_DIRECTIONS, CARDINAL_DIRECTIONS, Grid, Position
from ..map_generation.terrain import (
    blocks_line_of_sight,
    blocks_movement,
    get_movement_cost,
)

logger = logging.getLogger("battlemap.tactics")


# Base value per terrain id; ambush-friendly ground scores higher
TERRAIN_TACTICAL_VALUES: Dict[str, int] = {
    "altar": 12,
    "ruins": 10,
    "difficult": 8,
    "mushrooms": 7,
    "crystal": 5,
    "empty": 3,
}
DEFAULT_TACTICAL_VALUE = 1

# Never offered as placement tiles
HAZARD_TERRAIN: FrozenSet[str] = frozenset({"pit", "lava", "water"})

# Half cover when the neighbour does not already block sight
PARTIAL_COVER_TERRAIN: FrozenSet[str] = frozenset({"ruins", "mushrooms", "difficult"})

COVER_WEIGHT = 10
FLANKING_WEIGHT = 5
MOBILITY_WEIGHT = 3
ELEVATION_WEIGHT = 2

# Non-blocking neighbours a tile needs so it is not a dead end
MIN_OPEN_NEIGHBORS = 2
# Open cardinals a neighbour needs to count as an approach lane
MIN_LANE_CARDINALS = 3
MAX_MOVEMENT_COST = 3

# Thresholds for tactical_tags
COVER_TAG_THRESHOLD = 2
FLANK_TAG_THRESHOLD = 3
MOBILE_TAG_THRESHOLD = 4


@dataclass(frozen=True)
class TacticalPosition:
    """Scored candidate tile. Recomputed on every call, never stored."""
    position: Position
    terrain_id: str
    score: float
    cover: float
    flanking: int
    mobility: int
    elevation: int = 0

    def to_dict(self) -> Dict:
        return {
            "x": self.position.x,
            "y": self.position.y,
            "terrain_id": self.terrain_id,
            "score": self.score,
            "cover": self.cover,
            "flanking": self.flanking,
            "mobility": self.mobility,
            "elevation": self.elevation,
            "tags": tactical_tags(self),
        }


def tactical_value(
    terrain_id: str,
    cover: float,
    flanking: int,
    mobility: int,
    elevation: int = 0,
) -> float:
    """Weighted sum of the scoring terms for one tile."""
    base = TERRAIN_TACTICAL_VALUES.get(terrain_id, DEFAULT_TACTICAL_VALUE)
    return (
        base
        + COVER_WEIGHT * cover
        + FLANKING_WEIGHT * flanking
        + MOBILITY_WEIGHT * mobility
        + ELEVATION_WEIGHT * elevation
    )


def tactical_tags(position: TacticalPosition) -> List[str]:
    """Short behaviour hints for whoever seats a creature on the tile."""
    tags = []
    if position.cover > COVER_TAG_THRESHOLD:
        tags.append("use_cover")
    if position.flanking > FLANK_TAG_THRESHOLD:
        tags.append("flank")
    if position.mobility > MOBILE_TAG_THRESHOLD:
        tags.append("mobile")
    return tags


class TacticalPositionScorer:
    """
    Scores every eligible tile of a grid.

    A tile is eligible when it does not block movement, is not a hazard and
    has at least two non-blocking neighbours. The scorer never mutates the
    grid and draws nothing from a random stream.
    """

    def __init__(self, grid: Grid, elevation: Optional[Mapping[Tuple[int, int], int]] = None):
        self.grid = grid
        self.elevation = dict(elevation or {})

    # ------------------------------------------------------------------
    # Neighbourhood measurements
    # ------------------------------------------------------------------

    def _passable(self, x: int, y: int) -> bool:
        return self.grid.in_bounds(x, y) and not blocks_movement(self.grid.get(x, y))

    def open_neighbor_count(self, x: int, y: int) -> int:
        return sum(1 for dx, dy in ALL_DIRECTIONS if self._passable(x + dx, y + dy))

    def cover_at(self, x: int, y: int) -> float:
        """1 per sight-blocking neighbour, 0.5 per partial-cover neighbour."""
        cover = 0.0
        for nx, ny in self.grid.neighbors(x, y):
            terrain_id = self.grid.get(nx, ny)
            if blocks_line_of_sight(terrain_id):
                cover += 1.0
            elif terrain_id in PARTIAL_COVER_TERRAIN:
                cover += 0.5
        return cover

    def flanking_at(self, x: int, y: int) -> int:
        """Passable neighbours that are themselves open on 3+ cardinal sides."""
        lanes = 0
        for nx, ny in self.grid.neighbors(x, y):
            if not self._passable(nx, ny):
                continue
            open_cardinals = sum(
                1 for dx, dy in CARDINAL_DIRECTIONS if self._passable(nx + dx, ny + dy)
            )
            if open_cardinals >= MIN_LANE_CARDINALS:
                lanes += 1
        return lanes

    def mobility_at(self, x: int, y: int) -> int:
        mobility = 0
        for nx, ny in self.grid.neighbors(x, y, diagonal=False):
            terrain_id = self.grid.get(nx, ny)
            if not blocks_movement(terrain_id):
                mobility += max(0, MAX_MOVEMENT_COST - get_movement_cost(terrain_id))
        return mobility

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def is_eligible(self, x: int, y: int) -> bool:
        terrain_id = self.grid.get(x, y)
        if blocks_movement(terrain_id) or terrain_id in HAZARD_TERRAIN:
            return False
        return self.open_neighbor_count(x, y) >= MIN_OPEN_NEIGHBORS

    def score_position(self, x: int, y: int) -> Optional[TacticalPosition]:
        """
        Score one tile.

        Returns:
            TacticalPosition, or None when the tile is not eligible
        """
        if not self.is_eligible(x, y):
            return None
        terrain_id = self.grid.get(x, y)
        cover = self.cover_at(x, y)
        flanking = self.flanking_at(x, y)
        mobility = self.mobility_at(x, y)
        elevation = self.elevation.get((x, y), 0)
        return TacticalPosition(
            position=Position(x, y),
            terrain_id=terrain_id,
            score=tactical_value(terrain_id, cover, flanking, mobility, elevation),
            cover=cover,
            flanking=flanking,
            mobility=mobility,
            elevation=elevation,
        )

    def analyze_all_positions(self) -> List[TacticalPosition]:
        """Every eligible tile, best first; equal scores keep row-major order."""
        scored = []
        for position, _ in self.grid.cells():
            candidate = self.score_position(position.x, position.y)
            if candidate is not None:
                scored.append(candidate)
        # sorted() is stable, so the scan order survives among ties
        ranked = sorted(scored, key=lambda p: p.score, reverse=True)
        logger.debug(
            f"Scored {len(ranked)} eligible tiles on a {self.grid.width}x{self.grid.height} grid"
        )
        return ranked

    def find_tactical_positions(self, count: int) -> List[TacticalPosition]:
        """Top ``count`` tiles for placement."""
        if count <= 0:
            return []
        return self.analyze_all_positions()[:count]

"""
Grid and geometry primitives shared by the layout algorithms, the tactical
scorer and the compression codec.
"""
from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Sequence, Tuple


CARDINAL_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
ALL_DIRECTIONS: Tuple[Tuple[int, int], ...] = CARDINAL_DIRECTIONS + (
    (-1, -1), (-1, 1), (1, -1), (1, 1)
)

# Scan order used when counting neighbours (row by row around the cell)
MOORE_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)

Canvas = List[List[str]]


class Position(NamedTuple):
    """A cell coordinate, 0-indexed."""
    x: int
    y: int


@dataclass
class Room:
    """A rectangular room produced while partitioning; never stored in a Grid."""
    x: int
    y: int
    width: int
    height: int

    @property
    def center(self) -> Position:
        """Center cell of the room (floored)."""
        return Position(self.x + self.width // 2, self.y + self.height // 2)

    def contains(self, px: int, py: int) -> bool:
        """Check if a point is inside this room."""
        return (self.x <= px < self.x + self.width and
                self.y <= py < self.y + self.height)


def blank_canvas(width: int, height: int, terrain_id: str) -> Canvas:
    """Mutable construction buffer filled with one terrain id."""
    return [[terrain_id for _ in range(width)] for _ in range(height)]


def count_neighbors(canvas: Sequence[Sequence[str]], x: int, y: int, terrain_id: str) -> int:
    """Count in-bounds 8-neighbours of (x, y) holding ``terrain_id``."""
    height = len(canvas)
    width = len(canvas[0]) if height else 0
    count = 0
    for dx, dy in MOORE_OFFSETS:
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height and canvas[ny][nx] == terrain_id:
            count += 1
    return count


class Grid:
    """
    Read-only rectangular matrix of terrain ids.

    Rows are stored as tuples; construction code works on a plain list canvas
    and freezes it with ``Grid.from_rows`` once the layout is finished.
    """

    __slots__ = ("_rows", "width", "height")

    def __init__(self, rows: Sequence[Sequence[str]]):
        frozen = tuple(tuple(row) for row in rows)
        if not frozen or not frozen[0]:
            raise ValueError("Grid must have at least one row and one column")
        width = len(frozen[0])
        for y, row in enumerate(frozen):
            if len(row) != width:
                raise ValueError(f"Row {y} has {len(row)} cells, expected {width}")
            for x, cell in enumerate(row):
                if not isinstance(cell, str) or not cell:
                    raise ValueError(f"Cell ({x}, {y}) has no terrain id")
        self._rows = frozen
        self.width = width
        self.height = len(frozen)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]) -> "Grid":
        """Freeze a construction canvas into a Grid."""
        return cls(rows)

    @property
    def rows(self) -> Tuple[Tuple[str, ...], ...]:
        return self._rows

    def get(self, x: int, y: int) -> str:
        """Terrain id at (x, y); raises IndexError when out of bounds."""
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside a {self.width}x{self.height} grid")
        return self._rows[y][x]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def neighbors(self, x: int, y: int, diagonal: bool = True) -> Iterator[Position]:
        """In-bounds neighbour positions (cardinals first, then diagonals)."""
        directions = ALL_DIRECTIONS if diagonal else CARDINAL_DIRECTIONS
        for dx, dy in directions:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield Position(nx, ny)

    def cells(self) -> Iterator[Tuple[Position, str]]:
        """All cells in row-major scan order."""
        for y, row in enumerate(self._rows):
            for x, terrain_id in enumerate(row):
                yield Position(x, y), terrain_id

    def edge_cells(self) -> Iterator[Tuple[Position, str]]:
        """Cells on the outer border of the grid."""
        for position, terrain_id in self.cells():
            if position.x in (0, self.width - 1) or position.y in (0, self.height - 1):
                yield position, terrain_id

    def terrain_counts(self) -> dict:
        """Number of cells per terrain id."""
        counts: dict = {}
        for _, terrain_id in self.cells():
            counts[terrain_id] = counts.get(terrain_id, 0) + 1
        return counts

    def to_list(self) -> List[List[str]]:
        """Mutable copy of the rows (for JSON responses and new canvases)."""
        return [list(row) for row in self._rows]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Grid):
            return self._rows == other._rows
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height})"

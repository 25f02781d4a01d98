"""
Partition Layout using recursive space partitioning.

Splits the map into regions, carves one walled room per leaf region and joins
the rooms in generation order with L-shaped corridors.
"""
import logging
from typing import List, Tuple

from .features import scatter_corridor_features, scatter_room_features
from .generation_config import GenerationParameters
from .grid import Canvas, Grid, Room, blank_canvas
from .seeded_stream import SeededStream
from .terrain import BLOCKED, OPEN, Theme

logger = logging.getLogger("battlemap.map_generation")


class PartitionLayout:
    """
    Room-and-corridor generator.

    The map edge and every room border are ``BLOCKED``; room interiors and
    the space between rooms are ``OPEN``. Corridors punch through room borders
    but never touch the map edge.
    """

    def __init__(
        self,
        width: int,
        height: int,
        stream: SeededStream,
        parameters: GenerationParameters,
        theme: Theme,
    ):
        self.width = width
        self.height = height
        self.stream = stream
        self.parameters = parameters
        self.theme = theme
        self.rooms: List[Room] = []

    def carve(self) -> Tuple[Canvas, List[Room]]:
        """
        Build the layout on a mutable canvas.

        Returns:
            The canvas and the rooms in generation order
        """
        params = self.parameters
        canvas = blank_canvas(self.width, self.height, OPEN)

        self.rooms = self._split(
            1, 1, self.width - 2, self.height - 2,
            params.min_room_size, params.max_rooms
        )

        for room in self.rooms:
            self._stamp_room(canvas, room)
        self._seal_edges(canvas)

        self._connect_rooms(canvas, params.corridor_width)

        for room in self.rooms:
            scatter_room_features(canvas, self.stream, room, self.theme, params.room_feature_chance)
        scatter_corridor_features(canvas, self.stream, params.corridor_feature_chance)

        logger.debug(f"Partitioned {self.width}x{self.height} map into {len(self.rooms)} rooms")
        return canvas, self.rooms

    def build(self) -> Grid:
        canvas, _ = self.carve()
        return Grid.from_rows(canvas)

    # ------------------------------------------------------------------
    # Partitioning
    # ------------------------------------------------------------------

    def _split(self, x: int, y: int, w: int, h: int, min_size: int, budget: int) -> List[Room]:
        """
        Recursively partition a region.

        Args:
            x, y, w, h: Region rectangle
            min_size: Minimum room edge length
            budget: Maximum number of rooms this region may produce

        Returns:
            Rooms in generation order (first half before second half)
        """
        if w < min_size * 2 or h < min_size * 2 or budget <= 1:
            return [self._place_room(x, y, w, h, min_size)]

        if self.stream.chance(0.5):
            split_y = y + min_size + self.stream.next_int(h - min_size * 2)
            top_height = split_y - y
            first = self._split(x, y, w, top_height, min_size, budget - 1)
            second = self._split(x, split_y, w, h - top_height, min_size, budget - len(first))
        else:
            split_x = x + min_size + self.stream.next_int(w - min_size * 2)
            left_width = split_x - x
            first = self._split(x, y, left_width, h, min_size, budget - 1)
            second = self._split(split_x, y, w - left_width, h, min_size, budget - len(first))

        return first + second

    def _place_room(self, x: int, y: int, w: int, h: int, min_size: int) -> Room:
        """Size and position a room inside a leaf region."""
        room_width = max(min_size, min(w - 2, self.stream.next_int(w - min_size) + min_size))
        room_height = max(min_size, min(h - 2, self.stream.next_int(h - min_size) + min_size))
        room_x = x + self.stream.next_int(w - room_width - 1) + 1
        room_y = y + self.stream.next_int(h - room_height - 1) + 1

        # Keep the room inside its region
        if room_x + room_width > x + w:
            room_width = (x + w) - room_x - 1
        if room_y + room_height > y + h:
            room_height = (y + h) - room_y - 1

        return Room(room_x, room_y, max(1, room_width), max(1, room_height))

    # ------------------------------------------------------------------
    # Carving
    # ------------------------------------------------------------------

    def _stamp_room(self, canvas: Canvas, room: Room) -> None:
        """Border ring becomes BLOCKED, interior becomes OPEN."""
        # Clipped to the canvas
        for y in range(max(room.y, 0), min(room.y + room.height, self.height)):
            for x in range(max(room.x, 0), min(room.x + room.width, self.width)):
                on_border = (
                    x == room.x or x == room.x + room.width - 1 or
                    y == room.y or y == room.y + room.height - 1
                )
                canvas[y][x] = BLOCKED if on_border else OPEN

    def _seal_edges(self, canvas: Canvas) -> None:
        for x in range(self.width):
            canvas[0][x] = BLOCKED
            canvas[self.height - 1][x] = BLOCKED
        for y in range(self.height):
            canvas[y][0] = BLOCKED
            canvas[y][self.width - 1] = BLOCKED

    def _connect_rooms(self, canvas: Canvas, corridor_width: int) -> None:
        """Join room i to room i+1 with an L-shaped corridor."""
        for current, following in zip(self.rooms, self.rooms[1:]):
            start_x, start_y = self._clamp_inside(current.center)
            end_x, end_y = self._clamp_inside(following.center)
            half = corridor_width // 2

            # Horizontal run at the source row
            for x in range(min(start_x, end_x), max(start_x, end_x) + 1):
                for cy in range(start_y - half, start_y + half + 1):
                    self._carve_cell(canvas, x, cy)

            # Vertical run at the destination column
            for y in range(min(start_y, end_y), max(start_y, end_y) + 1):
                for cx in range(end_x - half, end_x + half + 1):
                    self._carve_cell(canvas, cx, y)

    def _clamp_inside(self, point: Tuple[int, int]) -> Tuple[int, int]:
        px, py = point
        return (
            max(1, min(self.width - 2, px)),
            max(1, min(self.height - 2, py)),
        )

    def _carve_cell(self, canvas: Canvas, x: int, y: int) -> None:
        if 1 <= x < self.width - 1 and 1 <= y < self.height - 1:
            if canvas[y][x] == BLOCKED:
                canvas[y][x] = OPEN


def build_partition_layout(
    width: int,
    height: int,
    stream: SeededStream,
    parameters: GenerationParameters,
    theme: Theme,
) -> Grid:
    """Partition Layout as a single call."""
    return PartitionLayout(width, height, stream, parameters, theme).build()

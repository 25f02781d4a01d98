"""
Compact Map Representation and Compression.

Run-length encodes a grid row by row and serializes the result either as the
pipe-delimited compact string (the stable wire format) or as JSON.

Compact string grammar::

    {width}x{height}|{seed}|{theme}|{version}|{row}|{row}|...
    row     := segment(","segment)*
    segment := terrainId ":" count
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..errors import MalformedCompressedDataError
from .grid import Grid

logger = logging.getLogger("battlemap.compression")

FORMAT_VERSION = "1.0.0"

# Characters with meaning in the compact string
RESERVED_CHARACTERS = ("|", ",", ":")


@dataclass(frozen=True)
class RLESegment:
    """``count`` consecutive cells of one terrain id."""
    terrain: str
    count: int


@dataclass(frozen=True)
class RLERow:
    """Encoded row ``y``; segment counts sum to the grid width."""
    y: int
    segments: Tuple[RLESegment, ...]

    @property
    def length(self) -> int:
        return sum(segment.count for segment in self.segments)


@dataclass(frozen=True)
class CompressedGrid:
    """A run-length encoded grid plus the metadata needed to regenerate it."""
    width: int
    height: int
    rows: Tuple[RLERow, ...]
    seed: int
    theme: str
    version: str = FORMAT_VERSION

    @property
    def segment_count(self) -> int:
        return sum(len(row.segments) for row in self.rows)

    @property
    def compression_ratio(self) -> float:
        """Percentage of cells saved: ``(1 - segments / cells) * 100``."""
        return _ratio(self.segment_count, self.width * self.height)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "dimensions": {"width": self.width, "height": self.height},
            "rleData": [
                {
                    "y": row.y,
                    "segments": [
                        {"terrain": segment.terrain, "count": segment.count}
                        for segment in row.segments
                    ],
                }
                for row in self.rows
            ],
            "metadata": {
                "seed": self.seed,
                "theme": self.theme,
                "version": self.version,
                "compressionRatio": self.compression_ratio,
            },
        }


def _ratio(segments: int, cells: int) -> float:
    if cells == 0:
        return 0.0
    return (1 - segments / cells) * 100


# =============================================================================
# RUN-LENGTH CODEC
# =============================================================================

def encode_row(row: Sequence[str], y: int) -> RLERow:
    """Merge consecutive identical terrain ids into segments."""
    segments: List[RLESegment] = []
    current = row[0]
    count = 1
    for terrain_id in row[1:]:
        if terrain_id == current:
            count += 1
        else:
            segments.append(RLESegment(current, count))
            current = terrain_id
            count = 1
    segments.append(RLESegment(current, count))
    return RLERow(y=y, segments=tuple(segments))


def compress_grid(grid: Grid, seed: int, theme: str) -> CompressedGrid:
    """
    Run-length encode a grid.

    Args:
        grid: Grid to encode
        seed: Seed the grid was generated from
        theme: Theme name the grid was generated with

    Returns:
        CompressedGrid; ``decompress_grid`` reproduces ``grid`` exactly
    """
    theme_name = getattr(theme, "value", theme)
    rows = tuple(encode_row(row, y) for y, row in enumerate(grid.rows))
    compressed = CompressedGrid(
        width=grid.width, height=grid.height, rows=rows, seed=seed, theme=theme_name
    )
    logger.debug(
        f"Compressed {grid.width}x{grid.height} grid into {compressed.segment_count} segments "
        f"({compressed.compression_ratio:.1f}% saved)"
    )
    return compressed


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_name(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def validate_compressed(compressed: CompressedGrid) -> None:
    """Reject data that would not decode to exactly ``width`` x ``height``."""
    # Types before values
    for field_name in ("width", "height", "seed"):
        value = getattr(compressed, field_name)
        if not _is_int(value):
            raise MalformedCompressedDataError(
                f"{field_name} must be an integer, got {type(value).__name__}",
                details={field_name: repr(value)}
            )
    for field_name in ("theme", "version"):
        value = getattr(compressed, field_name)
        if not _is_name(value):
            raise MalformedCompressedDataError(
                f"{field_name} must be a non-empty string, got {value!r}",
                details={field_name: repr(value)}
            )
    if compressed.seed < 0:
        raise MalformedCompressedDataError(
            f"Seed must be non-negative, got {compressed.seed}", details={"seed": compressed.seed}
        )
    if compressed.width <= 0 or compressed.height <= 0:
        raise MalformedCompressedDataError(
            f"Dimensions must be positive, got {compressed.width}x{compressed.height}",
            details={"width": compressed.width, "height": compressed.height}
        )
    if len(compressed.rows) != compressed.height:
        raise MalformedCompressedDataError(
            f"Expected {compressed.height} rows, got {len(compressed.rows)}",
            details={"expected_rows": compressed.height, "rows": len(compressed.rows)}
        )

    if not all(_is_int(row.y) for row in compressed.rows):
        raise MalformedCompressedDataError("Row indices must be integers")
    seen = sorted(row.y for row in compressed.rows)
    if seen != list(range(compressed.height)):
        raise MalformedCompressedDataError(
            "Row indices must cover 0..height-1 exactly once",
            details={"row_indices": seen}
        )

    for row in compressed.rows:
        for segment in row.segments:
            if not _is_name(segment.terrain):
                raise MalformedCompressedDataError(
                    f"Row {row.y} has a segment without a terrain id: {segment.terrain!r}",
                    details={"y": row.y, "terrain": repr(segment.terrain)}
                )
            if not _is_int(segment.count) or segment.count < 1:
                raise MalformedCompressedDataError(
                    f"Row {row.y} has an invalid run length: {segment.count!r}",
                    details={"y": row.y, "count": repr(segment.count)}
                )
        if row.length != compressed.width:
            raise MalformedCompressedDataError(
                f"Row {row.y} expands to {row.length} cells, expected {compressed.width}",
                details={"y": row.y, "length": row.length, "width": compressed.width}
            )


def decompress_grid(compressed: CompressedGrid) -> Grid:
    """Expand every segment and reassemble rows by ascending ``y``."""
    validate_compressed(compressed)
    rows: List[List[str]] = []
    for rle_row in sorted(compressed.rows, key=lambda r: r.y):
        row: List[str] = []
        for segment in rle_row.segments:
            row.extend([segment.terrain] * segment.count)
        rows.append(row)
    return Grid.from_rows(rows)


# =============================================================================
# COMPACT STRING
# =============================================================================

def to_compact_string(compressed: CompressedGrid) -> str:
    """Serialize as ``WxH|seed|theme|version|row|row|...``."""
    for field_name, value in (("theme", compressed.theme), ("version", compressed.version)):
        if "|" in value:
            raise MalformedCompressedDataError(
                f"{field_name} may not contain '|': {value!r}", details={field_name: value}
            )
    for row in compressed.rows:
        for segment in row.segments:
            if any(ch in segment.terrain for ch in RESERVED_CHARACTERS):
                raise MalformedCompressedDataError(
                    f"Terrain id {segment.terrain!r} contains a reserved character",
                    details={"terrain": segment.terrain, "reserved": list(RESERVED_CHARACTERS)}
                )

    header = (
        f"{compressed.width}x{compressed.height}|{compressed.seed}"
        f"|{compressed.theme}|{compressed.version}"
    )
    body = "|".join(
        ",".join(f"{segment.terrain}:{segment.count}" for segment in row.segments)
        for row in sorted(compressed.rows, key=lambda r: r.y)
    )
    return f"{header}|{body}"


def from_compact_string(text: str) -> CompressedGrid:
    """
    Parse a compact string back into a CompressedGrid.

    Raises:
        MalformedCompressedDataError: bad header, bad segment, row count not
            equal to height, or a row whose counts do not sum to width
    """
    parts = text.split("|")
    if len(parts) < 5:
        raise MalformedCompressedDataError(
            "Compact string needs a 4-field header and at least one row",
            details={"fields": len(parts)}
        )
    dims, seed_str, theme, version = parts[:4]
    row_strings = parts[4:]

    width, height = _parse_dimensions(dims)
    seed = _parse_number(seed_str)
    if seed is None:
        raise MalformedCompressedDataError(
            f"Seed is not a non-negative integer: {seed_str!r}", details={"seed": seed_str}
        )

    if len(row_strings) != height:
        raise MalformedCompressedDataError(
            f"Expected {height} rows, got {len(row_strings)}",
            details={"expected_rows": height, "rows": len(row_strings)}
        )

    rows = tuple(
        RLERow(y=y, segments=_parse_segments(row_str, y))
        for y, row_str in enumerate(row_strings)
    )
    compressed = CompressedGrid(
        width=width, height=height, rows=rows, seed=seed, theme=theme, version=version
    )
    validate_compressed(compressed)
    return compressed


def _parse_number(text: str) -> Optional[int]:
    """Plain ASCII digits with no sign, padding or leading zero; None otherwise."""
    if not (text.isascii() and text.isdigit()):
        return None
    if len(text) > 1 and text.startswith("0"):
        return None
    return int(text)


def _parse_dimensions(dims: str) -> Tuple[int, int]:
    width_str, sep, height_str = dims.partition("x")
    width, height = _parse_number(width_str), _parse_number(height_str)
    if not sep or width is None or height is None:
        raise MalformedCompressedDataError(
            f"Dimensions must look like WxH, got {dims!r}", details={"dimensions": dims}
        )
    if width <= 0 or height <= 0:
        raise MalformedCompressedDataError(
            f"Dimensions must be positive, got {dims!r}", details={"dimensions": dims}
        )
    return width, height


def _parse_segments(row_str: str, y: int) -> Tuple[RLESegment, ...]:
    segments = []
    for seg_str in row_str.split(","):
        terrain, sep, count_str = seg_str.partition(":")
        if not sep or not terrain:
            raise MalformedCompressedDataError(
                f"Row {y} has a malformed segment: {seg_str!r}",
                details={"y": y, "segment": seg_str}
            )
        count = _parse_number(count_str)
        if count is None:
            raise MalformedCompressedDataError(
                f"Row {y} has a malformed run length: {seg_str!r}",
                details={"y": y, "segment": seg_str}
            )
        segments.append(RLESegment(terrain, count))
    return tuple(segments)


# =============================================================================
# COMPACT JSON
# =============================================================================

def to_compact_json(compressed: CompressedGrid) -> str:
    """JSON form of the compressed grid, without whitespace."""
    return json.dumps(compressed.to_dict(), separators=(",", ":"))


def from_compact_json(text: str) -> CompressedGrid:
    """Parse ``to_compact_json`` output, with the same checks as the compact string."""
    try:
        data = json.loads(text)
        dimensions = data["dimensions"]
        metadata = data["metadata"]
        rows = tuple(
            RLERow(
                y=row["y"],
                segments=tuple(
                    RLESegment(segment["terrain"], segment["count"])
                    for segment in row["segments"]
                ),
            )
            for row in data["rleData"]
        )
        compressed = CompressedGrid(
            width=dimensions["width"],
            height=dimensions["height"],
            rows=rows,
            seed=metadata["seed"],
            theme=metadata["theme"],
            version=metadata.get("version", FORMAT_VERSION),
        )
    except (ValueError, KeyError, TypeError) as exc:
        raise MalformedCompressedDataError(
            f"Compact JSON is malformed: {exc}", details={"reason": type(exc).__name__}
        ) from None
    validate_compressed(compressed)
    return compressed


# =============================================================================
# STATISTICS
# =============================================================================

def compression_stats(grid: Grid) -> Dict[str, Any]:
    """Size of a grid before and after run-length encoding."""
    original_size = grid.width * grid.height
    segments = sum(len(encode_row(row, y).segments) for y, row in enumerate(grid.rows))
    return {
        "original_size": original_size,
        "compressed_size": segments,
        "compression_ratio": _ratio(segments, original_size),
    }

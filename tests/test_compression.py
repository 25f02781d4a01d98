"""Tests for run-length compression and the compact string format."""
import json

import pytest

from battlemap.core.errors import ErrorCode, MalformedCompressedDataError
from battlemap.core.map_generation.compression import (
    FORMAT_VERSION,
    CompressedGrid,
    RLERow,
    RLESegment,
    compress_grid,
    compression_stats,
    decompress_grid,
    encode_row,
    from_compact_json,
    from_compact_string,
    to_compact_json,
    to_compact_string,
)
from battlemap.core.map_generation.grid import Grid
from battlemap.core.map_generation.terrain_generator import generate_terrain


class TestEncodeRow:
    def test_uniform_row_is_one_segment(self):
        row = encode_row(["wall"] * 10, 0)
        assert row.segments == (RLESegment("wall", 10),)

    def test_runs_merged(self):
        row = encode_row(["empty", "empty", "wall", "empty"], 3)
        assert row.y == 3
        assert row.segments == (
            RLESegment("empty", 2), RLESegment("wall", 1), RLESegment("empty", 1)
        )
        assert row.length == 4


class TestCompactString:
    """Tests for the wire format."""

    def test_reference_string_decodes(self):
        """The documented example decodes to the documented grid."""
        compressed = from_compact_string("3x2|1|dungeon|1.0.0|wall:3|empty:2,wall:1")
        grid = decompress_grid(compressed)
        assert grid.to_list() == [["wall", "wall", "wall"], ["empty", "empty", "wall"]]
        assert compressed.seed == 1
        assert compressed.theme == "dungeon"
        assert compressed.version == "1.0.0"

    def test_reference_string_round_trips(self):
        text = "3x2|1|dungeon|1.0.0|wall:3|empty:2,wall:1"
        assert to_compact_string(from_compact_string(text)) == text

    @pytest.mark.parametrize("algorithm", ["partition", "automaton", "walk", "template", "composite"])
    def test_generated_maps_round_trip(self, algorithm):
        grid = generate_terrain(seed=4321, algorithm=algorithm, theme="mystical").grid
        text = to_compact_string(compress_grid(grid, 4321, "mystical"))
        parsed = from_compact_string(text)
        assert decompress_grid(parsed) == grid
        assert to_compact_string(parsed) == text

    def test_row_sum_mismatch_rejected(self):
        with pytest.raises(MalformedCompressedDataError) as exc_info:
            from_compact_string("3x2|1|dungeon|1.0.0|wall:3|empty:2")
        assert exc_info.value.code == ErrorCode.COMPRESSED_DATA_MALFORMED
        assert exc_info.value.http_status == 422

    def test_row_sum_overflow_rejected(self):
        with pytest.raises(MalformedCompressedDataError):
            from_compact_string("3x2|1|dungeon|1.0.0|wall:4|empty:3")

    def test_too_few_rows_rejected(self):
        with pytest.raises(MalformedCompressedDataError):
            from_compact_string("3x3|1|dungeon|1.0.0|wall:3|empty:3")

    def test_too_many_rows_rejected(self):
        with pytest.raises(MalformedCompressedDataError):
            from_compact_string("3x1|1|dungeon|1.0.0|wall:3|empty:3")

    @pytest.mark.parametrize("text", [
        "",
        "3x2|1|dungeon",
        "3by2|1|dungeon|1.0.0|wall:3|wall:3",
        "0x2|1|dungeon|1.0.0|wall:3|wall:3",
        "3x2|seed|dungeon|1.0.0|wall:3|wall:3",
        "3x2|1|dungeon|1.0.0|wall3|wall:3",
        "3x2|1|dungeon|1.0.0|wall:x|wall:3",
        "3x2|1|dungeon|1.0.0|wall:0,wall:3|wall:3",
        "3x2|1|dungeon|1.0.0|wall:-1,wall:4|wall:3",
        "3x2|1|dungeon|1.0.0|:3|wall:3",
    ])
    def test_malformed_strings_rejected(self, text):
        with pytest.raises(MalformedCompressedDataError):
            from_compact_string(text)

    @pytest.mark.parametrize("text", [
        " 3x2|1|dungeon|1.0.0|wall:3|wall:3",
        "+3x2|1|dungeon|1.0.0|wall:3|wall:3",
        "3x02|1|dungeon|1.0.0|wall:3|wall:3",
        "3_0x1|1|dungeon|1.0.0|wall:30",
        "3x2|+1|dungeon|1.0.0|wall:3|wall:3",
        "3x2| 1|dungeon|1.0.0|wall:3|wall:3",
        "3x2|01|dungeon|1.0.0|wall:3|wall:3",
        "3x2|1_0|dungeon|1.0.0|wall:3|wall:3",
        "3x2|-1|dungeon|1.0.0|wall:3|wall:3",
        "3x2|1|dungeon|1.0.0|wall:03|wall:3",
        "3x2|1|dungeon||wall:3|wall:3",
        "3x2|1||1.0.0|wall:3|wall:3",
    ])
    def test_loose_numbers_and_empty_header_fields_rejected(self, text):
        """Header and run-length numbers are plain digits; padding, signs and separators fail."""
        with pytest.raises(MalformedCompressedDataError):
            from_compact_string(text)

    def test_seed_zero_accepted(self):
        """A lone zero is not a leading zero."""
        assert from_compact_string("1x1|0|dungeon|1.0.0|wall:1").seed == 0

    def test_reserved_characters_in_terrain_rejected(self):
        grid = Grid.from_rows([["wa:ll", "empty"]])
        with pytest.raises(MalformedCompressedDataError):
            to_compact_string(compress_grid(grid, 1, "dungeon"))

    def test_pipe_in_theme_rejected(self):
        grid = Grid.from_rows([["wall"]])
        with pytest.raises(MalformedCompressedDataError):
            to_compact_string(compress_grid(grid, 1, "dun|geon"))


class TestCompressedGrid:
    """Tests for metadata and statistics."""

    def test_reference_scenario_ratio_positive(self):
        """Seed 12345 partition map compresses to a positive ratio."""
        grid = generate_terrain(
            seed=12345, width=25, height=25, algorithm="partition",
            parameters={"minRoomSize": 4, "maxRooms": 8, "corridorWidth": 1},
        ).grid
        compressed = compress_grid(grid, 12345, "dungeon")
        assert compressed.compression_ratio > 0
        assert compressed.version == FORMAT_VERSION

    def test_ratio_zero_without_runs(self):
        grid = Grid.from_rows([["wall", "empty", "wall"]])
        assert compress_grid(grid, 1, "dungeon").compression_ratio == 0

    def test_ratio_formula(self):
        grid = Grid.from_rows([["wall"] * 4, ["empty", "empty", "wall", "wall"]])
        compressed = compress_grid(grid, 1, "dungeon")
        assert compressed.segment_count == 3
        assert compressed.compression_ratio == pytest.approx((1 - 3 / 8) * 100)

    def test_stats(self):
        grid = Grid.from_rows([["wall"] * 4, ["empty", "empty", "wall", "wall"]])
        stats = compression_stats(grid)
        assert stats["original_size"] == 8
        assert stats["compressed_size"] == 3
        assert stats["compression_ratio"] == pytest.approx(62.5)

    def test_rows_reassembled_by_y(self):
        """Row order in the container does not matter, only ``y``."""
        compressed = CompressedGrid(
            width=2, height=2, seed=1, theme="dungeon",
            rows=(
                RLERow(1, (RLESegment("empty", 2),)),
                RLERow(0, (RLESegment("wall", 2),)),
            ),
        )
        assert decompress_grid(compressed).to_list() == [["wall", "wall"], ["empty", "empty"]]

    def test_duplicate_row_index_rejected(self):
        compressed = CompressedGrid(
            width=1, height=2, seed=1, theme="dungeon",
            rows=(RLERow(0, (RLESegment("wall", 1),)), RLERow(0, (RLESegment("wall", 1),))),
        )
        with pytest.raises(MalformedCompressedDataError):
            decompress_grid(compressed)

    def test_to_dict(self):
        grid = Grid.from_rows([["wall", "wall"]])
        data = compress_grid(grid, 9, "urban").to_dict()
        assert data["dimensions"] == {"width": 2, "height": 1}
        assert data["rleData"] == [{"y": 0, "segments": [{"terrain": "wall", "count": 2}]}]
        assert data["metadata"]["seed"] == 9
        assert data["metadata"]["theme"] == "urban"


class TestCompactJson:
    def test_round_trip(self):
        grid = generate_terrain(seed=10, algorithm="composite").grid
        compressed = compress_grid(grid, 10, "dungeon")
        assert from_compact_json(to_compact_json(compressed)) == compressed

    def test_no_whitespace(self):
        compressed = compress_grid(Grid.from_rows([["wall"]]), 1, "dungeon")
        assert " " not in to_compact_json(compressed)

    def test_bad_json_rejected(self):
        with pytest.raises(MalformedCompressedDataError):
            from_compact_json("{not json")

    @staticmethod
    def _data():
        return compress_grid(Grid.from_rows([["wall", "wall"]]), 1, "dungeon").to_dict()

    @pytest.mark.parametrize("field,value", [
        ("width", "2"),
        ("width", 2.0),
        ("width", True),
        ("height", "1"),
        ("height", None),
    ])
    def test_non_integer_dimensions_rejected(self, field, value):
        """Dimensions of the wrong type fail as malformed data, not a TypeError."""
        data = self._data()
        data["dimensions"][field] = value
        with pytest.raises(MalformedCompressedDataError) as exc_info:
            from_compact_json(json.dumps(data))
        assert exc_info.value.http_status == 422

    @pytest.mark.parametrize("field,value", [
        ("seed", "x"),
        ("seed", "1"),
        ("seed", 1.5),
        ("seed", -1),
        ("theme", 7),
        ("theme", ""),
        ("theme", None),
        ("version", 1),
    ])
    def test_bad_metadata_rejected(self, field, value):
        data = self._data()
        data["metadata"][field] = value
        with pytest.raises(MalformedCompressedDataError):
            from_compact_json(json.dumps(data))

    @pytest.mark.parametrize("terrain", [5, "", None, ["wall"]])
    def test_non_string_terrain_rejected(self, terrain):
        """A terrain id that is not a non-empty string never reaches the grid."""
        data = self._data()
        data["rleData"][0]["segments"][0]["terrain"] = terrain
        with pytest.raises(MalformedCompressedDataError):
            from_compact_json(json.dumps(data))

    def test_non_integer_count_rejected(self):
        data = self._data()
        data["rleData"][0]["segments"][0]["count"] = "2"
        with pytest.raises(MalformedCompressedDataError):
            from_compact_json(json.dumps(data))

    def test_row_sum_checked(self):
        data = compress_grid(Grid.from_rows([["wall", "wall"]]), 1, "dungeon").to_dict()
        data["rleData"][0]["segments"][0]["count"] = 3
        with pytest.raises(MalformedCompressedDataError):
            from_compact_json(json.dumps(data))

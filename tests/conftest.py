"""
Battlemap Engine - Test Configuration and Fixtures
Shared test utilities and fixtures for pytest.
"""
import pytest
from typing import List
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from battlemap.core.map_generation.generation_config import GenerationParameters
from battlemap.core.map_generation.grid import Grid
from battlemap.core.map_generation.seeded_stream import SeededStream


# ==================== Generation Fixtures ====================

@pytest.fixture
def stream() -> SeededStream:
    """A stream seeded with the reference seed."""
    return SeededStream(12345)


@pytest.fixture
def default_parameters() -> GenerationParameters:
    return GenerationParameters()


@pytest.fixture
def reference_parameters() -> GenerationParameters:
    """Knobs used by the reference 25x25 partition scenario."""
    return GenerationParameters(minRoomSize=4, maxRooms=8, corridorWidth=1)


# ==================== Grid Fixtures ====================

def grid_from_strings(rows: List[str], legend=None) -> Grid:
    """Build a grid from ASCII art: '#' wall, '.' empty, anything else via legend."""
    mapping = {"#": "wall", ".": "empty"}
    mapping.update(legend or {})
    return Grid.from_rows([[mapping[ch] for ch in row] for row in rows])


@pytest.fixture
def open_room() -> Grid:
    """5x5 grid: walled edge around a 3x3 open floor."""
    return grid_from_strings([
        "#####",
        "#...#",
        "#...#",
        "#...#",
        "#####",
    ])


@pytest.fixture
def open_field() -> Grid:
    """7x7 grid of open floor with no walls at all."""
    return grid_from_strings(["......."] * 7)


# ==================== API Fixtures ====================

@pytest.fixture
def client():
    """FastAPI test client for the battlemap service."""
    from fastapi.testclient import TestClient
    from battlemap.main import app
    return TestClient(app)


@pytest.fixture
def make_grid():
    """Builder for ASCII-art grids; see ``grid_from_strings``."""
    return grid_from_strings

"""
Service configuration.

Values come from environment variables, with a ``.env`` file loaded first.
Generation limits and defaults are checked against what the engine accepts
when the settings are built, so a bad deployment value fails at startup.
"""
import os
from functools import lru_cache
from typing import Any, Dict

from dotenv import load_dotenv

from battlemap.core.errors import ConfigurationError
from battlemap.core.map_generation.generation_config import (
    MAX_MAP_SIZE,
    parse_algorithm,
    parse_theme_name,
)

load_dotenv()

# Hard ceilings for per-request knobs the service exposes
MAX_TOP_POSITIONS = 50
MAX_COMPACT_LENGTH = 1_000_000


def _env_int(name: str, default: int, low: int, high: int) -> int:
    """Integer setting in [low, high]; unset or blank means ``default``."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(
            message=f"{name} must be an integer, got {raw!r}",
            details={"setting": name, "value": raw}
        ) from None
    if not low <= value <= high:
        raise ConfigurationError(
            message=f"{name} must be between {low} and {high}, got {value}",
            details={"setting": name, "value": value, "min": low, "max": high}
        )
    return value


def _env_bool(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in ("1", "true", "yes")


class Settings:
    """Service settings, read from the environment on construction."""

    def __init__(self):
        # Server
        self.HOST: str = os.getenv("HOST", "127.0.0.1")
        self.PORT: int = _env_int("PORT", 8000, 1, 65535)
        self.DEBUG: bool = _env_bool("DEBUG")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # CORS - Frontend URL
        self.FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

        # Request limits; a deployment may lower them but never raise them
        self.MAX_MAP_SIZE: int = _env_int("MAX_MAP_SIZE", MAX_MAP_SIZE, 1, MAX_MAP_SIZE)
        self.MAX_COMPACT_LENGTH: int = _env_int(
            "MAX_COMPACT_LENGTH", MAX_COMPACT_LENGTH, 1, MAX_COMPACT_LENGTH
        )

        # Defaults for requests that leave them out
        default_size = min(25, self.MAX_MAP_SIZE)
        self.DEFAULT_MAP_WIDTH: int = _env_int("DEFAULT_MAP_WIDTH", default_size, 1, self.MAX_MAP_SIZE)
        self.DEFAULT_MAP_HEIGHT: int = _env_int("DEFAULT_MAP_HEIGHT", default_size, 1, self.MAX_MAP_SIZE)
        self.DEFAULT_THEME: str = parse_theme_name(os.getenv("DEFAULT_THEME", "dungeon")).value
        self.DEFAULT_ALGORITHM: str = parse_algorithm(os.getenv("DEFAULT_ALGORITHM", "composite")).value
        self.DEFAULT_TOP_POSITIONS: int = _env_int("DEFAULT_TOP_POSITIONS", 5, 0, MAX_TOP_POSITIONS)

    def generation_defaults(self) -> Dict[str, Any]:
        """Values filled into a generation request that omits them."""
        return {
            "width": self.DEFAULT_MAP_WIDTH,
            "height": self.DEFAULT_MAP_HEIGHT,
            "theme": self.DEFAULT_THEME,
            "algorithm": self.DEFAULT_ALGORITHM,
        }

    def fits(self, width: int, height: int) -> bool:
        """True when both dimensions are within the service's map size limit."""
        return 0 < width <= self.MAX_MAP_SIZE and 0 < height <= self.MAX_MAP_SIZE


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

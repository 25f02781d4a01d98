"""Tests for service settings."""
import pytest

from battlemap.config import MAX_COMPACT_LENGTH, Settings, get_settings
from battlemap.core.errors import ConfigurationError, UnknownAlgorithmError, UnknownThemeError
from battlemap.core.map_generation.generation_config import MAX_MAP_SIZE


SETTING_NAMES = (
    "PORT", "DEBUG", "MAX_MAP_SIZE", "MAX_COMPACT_LENGTH",
    "DEFAULT_MAP_WIDTH", "DEFAULT_MAP_HEIGHT", "DEFAULT_THEME",
    "DEFAULT_ALGORITHM", "DEFAULT_TOP_POSITIONS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in SETTING_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Tests for reading settings from the environment."""

    def test_defaults(self, clean_env):
        settings = Settings()
        assert settings.PORT == 8000
        assert settings.DEBUG is False
        assert settings.MAX_MAP_SIZE == MAX_MAP_SIZE
        assert settings.MAX_COMPACT_LENGTH == MAX_COMPACT_LENGTH
        assert settings.DEFAULT_TOP_POSITIONS == 5
        assert settings.generation_defaults() == {
            "width": 25, "height": 25, "theme": "dungeon", "algorithm": "composite",
        }

    def test_names_normalised(self, clean_env):
        """Theme and algorithm names resolve the same way requests do."""
        clean_env.setenv("DEFAULT_THEME", " Underground ")
        clean_env.setenv("DEFAULT_ALGORITHM", "cellular")
        defaults = Settings().generation_defaults()
        assert defaults["theme"] == "underground"
        assert defaults["algorithm"] == "automaton"

    def test_unknown_default_names_fail_at_startup(self, clean_env):
        clean_env.setenv("DEFAULT_THEME", "arctic")
        with pytest.raises(UnknownThemeError):
            Settings()
        clean_env.setenv("DEFAULT_THEME", "dungeon")
        clean_env.setenv("DEFAULT_ALGORITHM", "voronoi")
        with pytest.raises(UnknownAlgorithmError):
            Settings()

    def test_limit_can_be_lowered(self, clean_env):
        """Lowering the size limit also pulls the default size under it."""
        clean_env.setenv("MAX_MAP_SIZE", "12")
        settings = Settings()
        assert settings.MAX_MAP_SIZE == 12
        assert settings.generation_defaults()["width"] == 12
        assert settings.fits(12, 1)
        assert not settings.fits(13, 1)

    @pytest.mark.parametrize("name,value", [
        ("MAX_MAP_SIZE", str(MAX_MAP_SIZE + 1)),
        ("MAX_MAP_SIZE", "0"),
        ("MAX_COMPACT_LENGTH", str(MAX_COMPACT_LENGTH + 1)),
        ("DEFAULT_MAP_WIDTH", str(MAX_MAP_SIZE + 1)),
        ("DEFAULT_TOP_POSITIONS", "51"),
        ("PORT", "eighty"),
        ("PORT", "70000"),
    ])
    def test_out_of_range_values_rejected(self, clean_env, name, value):
        """Limits may be lowered but never raised past what the engine accepts."""
        clean_env.setenv(name, value)
        with pytest.raises(ConfigurationError) as exc_info:
            Settings()
        assert exc_info.value.details["setting"] == name

    def test_blank_value_uses_default(self, clean_env):
        clean_env.setenv("PORT", "  ")
        assert Settings().PORT == 8000

    @pytest.mark.parametrize("raw,expected", [("true", True), ("1", True), ("YES", True), ("no", False)])
    def test_debug_flag(self, clean_env, raw, expected):
        clean_env.setenv("DEBUG", raw)
        assert Settings().DEBUG is expected

    def test_fits_rejects_non_positive(self, clean_env):
        settings = Settings()
        assert not settings.fits(0, 5)
        assert not settings.fits(5, -1)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

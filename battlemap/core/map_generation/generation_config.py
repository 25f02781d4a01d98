"""
Generation configuration.

Validates a generation request up front so that no layout algorithm ever
starts drawing from its stream with bad input.
"""
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..errors import (
    ConfigurationError,
    ErrorCode,
    InvalidDimensionsError,
    InvalidParameterError,
    UnknownAlgorithmError,
    UnknownThemeError,
)
from .terrain import Theme


class Algorithm(str, Enum):
    """Layout algorithms the terrain generator can dispatch to."""
    PARTITION = "partition"
    AUTOMATON = "automaton"
    WALK = "walk"
    TEMPLATE = "template"
    COMPOSITE = "composite"


# Older names accepted on input
ALGORITHM_ALIASES: Dict[str, Algorithm] = {
    "bsp": Algorithm.PARTITION,
    "cellular": Algorithm.AUTOMATON,
    "drunkard": Algorithm.WALK,
    "mixed": Algorithm.COMPOSITE,
}

# Upper bounds that keep a single generation request cheap
MAX_MAP_SIZE = 200
MAX_CORRIDOR_WIDTH = 15
MAX_ITERATIONS = 100
MAX_WALK_STEPS = 100_000
MAX_ROOMS = 256


class GenerationParameters(BaseModel):
    """
    Tuning knobs for the layout algorithms.

    Accepts the camelCase names used on the wire (``minRoomSize``) as well as
    the Python field names (``min_room_size``). Knobs that an algorithm does
    not use are ignored by it.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    # Partition layout
    min_room_size: int = Field(default=4, ge=1, le=MAX_MAP_SIZE, alias="minRoomSize")
    max_rooms: int = Field(default=8, ge=1, le=MAX_ROOMS, alias="maxRooms")
    corridor_width: int = Field(default=1, ge=1, le=MAX_CORRIDOR_WIDTH, alias="corridorWidth")

    # Automaton layout
    initial_fill: float = Field(default=0.45, ge=0.0, le=1.0, alias="initialFill")
    iterations: int = Field(default=4, ge=0, le=MAX_ITERATIONS, alias="iterations")
    birth_limit: int = Field(default=4, ge=0, le=8, alias="birthLimit")
    death_limit: int = Field(default=3, ge=0, le=8, alias="deathLimit")

    # Random-walk layout
    steps: int = Field(default=2000, ge=0, le=MAX_WALK_STEPS, alias="steps")
    branch_chance: float = Field(default=0.1, ge=0.0, le=1.0, alias="branchChance")

    # Feature passes
    room_feature_chance: float = Field(default=0.15, ge=0.0, le=1.0, alias="roomFeatureChance")
    corridor_feature_chance: float = Field(default=0.05, ge=0.0, le=1.0, alias="corridorFeatureChance")
    cave_feature_chance: float = Field(default=0.1, ge=0.0, le=1.0, alias="caveFeatureChance")
    variation_chance: float = Field(default=0.2, ge=0.0, le=1.0, alias="variationChance")
    composite_feature_chance: float = Field(default=0.05, ge=0.0, le=1.0, alias="compositeFeatureChance")


class GenerationConfig(BaseModel):
    """A fully validated generation request."""
    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0, le=MAX_MAP_SIZE)
    height: int = Field(gt=0, le=MAX_MAP_SIZE)
    seed: int = Field(ge=0)
    theme: Theme = Theme.DUNGEON
    algorithm: Algorithm = Algorithm.COMPOSITE
    parameters: GenerationParameters = Field(default_factory=GenerationParameters)

    @classmethod
    def create(
        cls,
        seed: int,
        width: int = 25,
        height: int = 25,
        theme: Union[str, Theme] = Theme.DUNGEON,
        algorithm: Union[str, Algorithm] = Algorithm.COMPOSITE,
        parameters: Optional[Union[Mapping[str, Any], GenerationParameters]] = None,
    ) -> "GenerationConfig":
        """
        Build a config, raising ConfigurationError on any invalid input.

        Args:
            seed: Non-negative integer seed
            width: Grid width in cells
            height: Grid height in cells
            theme: Theme name or enum
            algorithm: Algorithm name (or legacy alias) or enum
            parameters: Knob mapping or GenerationParameters

        Returns:
            Frozen GenerationConfig
        """
        if not (_is_int(width) and _is_int(height)) or not (
            0 < width <= MAX_MAP_SIZE and 0 < height <= MAX_MAP_SIZE
        ):
            raise InvalidDimensionsError(width, height, max_size=MAX_MAP_SIZE)
        if not _is_int(seed) or seed < 0:
            raise ConfigurationError(
                message=f"Seed must be a non-negative integer, got {seed!r}",
                details={"seed": repr(seed)}
            )

        return cls(
            width=width,
            height=height,
            seed=seed,
            theme=parse_theme_name(theme),
            algorithm=parse_algorithm(algorithm),
            parameters=build_parameters(parameters),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenerationConfig":
        """Create config from a request dictionary."""
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                message=f"Config must be a mapping, got {type(data).__name__}"
            )
        if "seed" not in data:
            raise ConfigurationError(message="Seed is required", details={"field": "seed"})
        dimensions = data.get("dimensions") or {}
        if not isinstance(dimensions, Mapping):
            raise ConfigurationError(
                message="dimensions must be an object with width and height",
                code=ErrorCode.INVALID_DIMENSIONS,
                details={"dimensions": repr(dimensions)}
            )
        return cls.create(
            seed=data["seed"],
            width=data.get("width", dimensions.get("width", 25)),
            height=data.get("height", dimensions.get("height", 25)),
            theme=data.get("theme", Theme.DUNGEON),
            algorithm=data.get("algorithm", Algorithm.COMPOSITE),
            parameters=data.get("parameters"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            "width": self.width,
            "height": self.height,
            "seed": self.seed,
            "theme": self.theme.value,
            "algorithm": self.algorithm.value,
            "parameters": self.parameters.model_dump(by_alias=True),
        }


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_algorithm(value: Union[str, Algorithm]) -> Algorithm:
    """Resolve an algorithm name or legacy alias."""
    if isinstance(value, Algorithm):
        return value
    name = str(value).strip().lower()
    if name in ALGORITHM_ALIASES:
        return ALGORITHM_ALIASES[name]
    try:
        return Algorithm(name)
    except ValueError:
        raise UnknownAlgorithmError(value, available=[a.value for a in Algorithm]) from None


def parse_theme_name(value: Union[str, Theme]) -> Theme:
    """Resolve a theme name, raising UnknownThemeError."""
    if isinstance(value, Theme):
        return value
    try:
        return Theme(str(value).strip().lower())
    except ValueError:
        raise UnknownThemeError(value, available=[t.value for t in Theme]) from None


def build_parameters(
    parameters: Optional[Union[Mapping[str, Any], GenerationParameters]]
) -> GenerationParameters:
    """Validate a knob mapping into GenerationParameters."""
    if parameters is None:
        return GenerationParameters()
    if isinstance(parameters, GenerationParameters):
        return parameters
    if not isinstance(parameters, Mapping):
        raise InvalidParameterError(
            f"Generation parameters must be a mapping of knob names to values, "
            f"got {type(parameters).__name__}",
            errors=[{"field": "parameters", "message": "Expected an object", "type": "type_error"}]
        )
    try:
        return GenerationParameters.model_validate(dict(parameters))
    except PydanticValidationError as exc:
        errors = [
            {
                "field": " -> ".join(str(loc) for loc in error.get("loc", [])),
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error"),
            }
            for error in exc.errors()
        ]
        fields = ", ".join(e["field"] for e in errors)
        raise InvalidParameterError(f"Invalid generation parameters: {fields}", errors=errors) from None


# =============================================================================
# PRESETS
# =============================================================================

PRESETS: Dict[str, Tuple[Theme, Algorithm]] = {
    "dungeon": (Theme.DUNGEON, Algorithm.PARTITION),
    "wilderness": (Theme.WILDERNESS, Algorithm.COMPOSITE),
    "underground": (Theme.UNDERGROUND, Algorithm.AUTOMATON),
    "urban": (Theme.URBAN, Algorithm.TEMPLATE),
    "mystical": (Theme.MYSTICAL, Algorithm.COMPOSITE),
}


def preset_config(name: str, seed: int, width: int = 25, height: int = 25) -> GenerationConfig:
    """Config for one of the named quick-generation presets."""
    key = name.strip().lower()
    if key not in PRESETS:
        raise ConfigurationError(
            message=f"Unknown preset: {name}",
            details={"preset": name, "available": sorted(PRESETS)}
        )
    theme, algorithm = PRESETS[key]
    return GenerationConfig.create(
        seed=seed, width=width, height=height, theme=theme, algorithm=algorithm
    )


# =============================================================================
# SEED-MAP PARAMETER STRING
# =============================================================================

def params_to_string(config: GenerationConfig) -> str:
    """
    Render a config as ``seed|theme|WxH|algorithm|key:value,...``.

    The string is enough to regenerate the exact same grid.
    """
    knobs = config.parameters.model_dump(by_alias=True)
    param_str = ",".join(f"{key}:{_format_value(value)}" for key, value in knobs.items())
    return (
        f"{config.seed}|{config.theme.value}|{config.width}x{config.height}"
        f"|{config.algorithm.value}|{param_str}"
    )


def string_to_params(text: str) -> GenerationConfig:
    """Parse a string produced by ``params_to_string``."""
    parts = text.split("|")
    if len(parts) != 5:
        raise ConfigurationError(
            message="Parameter string must have 5 '|'-separated fields",
            details={"fields": len(parts)}
        )
    seed_str, theme, dims, algorithm, param_str = parts

    try:
        seed = int(seed_str)
        width_str, height_str = dims.split("x")
        width, height = int(width_str), int(height_str)
    except ValueError:
        raise ConfigurationError(
            message=f"Malformed seed or dimensions in parameter string: {seed_str!r}, {dims!r}"
        ) from None

    parameters: Dict[str, Any] = {}
    if param_str:
        for item in param_str.split(","):
            key, sep, value = item.partition(":")
            if not sep or not key:
                raise ConfigurationError(
                    message=f"Malformed parameter entry: {item!r}",
                    details={"entry": item}
                )
            parameters[key] = _parse_value(value)

    return GenerationConfig.create(
        seed=seed, width=width, height=height,
        theme=theme, algorithm=algorithm, parameters=parameters,
    )


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_value(raw: str) -> Any:
    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            pass
    if raw in ("true", "false"):
        return raw == "true"
    return raw

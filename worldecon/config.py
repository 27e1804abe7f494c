"""World constants and configuration."""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)

# City population bounds
MIN_POPULATION = 250_000
MAX_POPULATION = 5_000_000

# World generation
INITIAL_CITY_COUNT = 8
MIN_CITIES_PER_COUNTRY = 3

# Salary level (0-1 position inside each class salary band)
SALARY_LEVEL_MIN = 0.1
SALARY_LEVEL_MAX = 1.0
SALARY_LEVEL_DEFAULT = 0.5

# Infrastructure thresholds (population must exceed these)
AIRPORT_THRESHOLD = 500_000
RAILWAY_THRESHOLD = 250_000

# Demographics
NON_WORKING_PERCENTAGE = 0.30
EMPLOYMENT_RATE = 0.85

# Monthly population growth range
POPULATION_GROWTH_MIN = 0.001
POPULATION_GROWTH_MAX = 0.003

# Map layout: each country gets a REGION_SIZE cell on a REGION_COLUMNS wide grid
MAP_SIZE = 1000.0
REGION_SIZE = 200.0
REGION_COLUMNS = 5
COASTAL_MARGIN = 100.0
SEAPORT_POPULATION_THRESHOLD = 500_000

# Climate bands on the y axis
COLD_LATITUDE = 200.0
TROPICAL_LATITUDE = 800.0

# Consumer confidence random walk
CONSUMER_CONFIDENCE_START = 0.7
CONSUMER_CONFIDENCE_MIN = 0.3
CONSUMER_CONFIDENCE_MAX = 1.0


class ConfigError(ValueError):
    """Raised when a world configuration is invalid."""


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    if low > high:
        raise ValueError(f"Invalid bounds: {low} > {high}")
    return max(low, min(high, value))


def _check_range(name: str, low: float, high: float) -> None:
    if low > high:
        raise ConfigError(f"{name}: min ({low}) is greater than max ({high})")


def _check_fraction(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigError(f"{name} must be within [0, 1], got {value}")


@dataclass(frozen=True)
class SalaryLevelConfig:
    """Bounds and default for a city's salary level."""
    min: float = SALARY_LEVEL_MIN
    max: float = SALARY_LEVEL_MAX
    default: float = SALARY_LEVEL_DEFAULT

    def __post_init__(self) -> None:
        _check_fraction("salary_level.min", self.min)
        _check_fraction("salary_level.max", self.max)
        _check_range("salary_level", self.min, self.max)
        if not self.min <= self.default <= self.max:
            raise ConfigError(
                f"salary_level.default ({self.default}) is outside "
                f"[{self.min}, {self.max}]"
            )


@dataclass(frozen=True)
class InfrastructureConfig:
    """Population thresholds above which a city gets an airport or railway."""
    airport_threshold: int = AIRPORT_THRESHOLD
    railway_threshold: int = RAILWAY_THRESHOLD

    def __post_init__(self) -> None:
        if self.airport_threshold < 0 or self.railway_threshold < 0:
            raise ConfigError("infrastructure thresholds must be non-negative")


@dataclass(frozen=True)
class DemographicsConfig:
    """Share of non-working population and employment rate of the workforce."""
    non_working_percentage: float = NON_WORKING_PERCENTAGE
    employment_rate: float = EMPLOYMENT_RATE

    def __post_init__(self) -> None:
        _check_fraction("demographics.non_working_percentage", self.non_working_percentage)
        _check_fraction("demographics.employment_rate", self.employment_rate)


@dataclass(frozen=True)
class GrowthRateConfig:
    """Range of the monthly population growth rate."""
    min: float = POPULATION_GROWTH_MIN
    max: float = POPULATION_GROWTH_MAX

    def __post_init__(self) -> None:
        _check_range("population_growth_rate", self.min, self.max)
        if self.min <= -1.0:
            raise ConfigError("population_growth_rate.min must be greater than -1")


@dataclass(frozen=True)
class WorldConfig:
    """Immutable, validated world configuration.

    Built once at startup. Invalid values raise ConfigError instead of being
    silently replaced, the runtime clamping of populations and salary levels
    goes through clamp_population / clamp_salary_level.
    """
    min_population: int = MIN_POPULATION
    max_population: int = MAX_POPULATION
    initial_city_count: int = INITIAL_CITY_COUNT
    min_cities_per_country: int = MIN_CITIES_PER_COUNTRY
    salary_level: SalaryLevelConfig = field(default_factory=SalaryLevelConfig)
    infrastructure: InfrastructureConfig = field(default_factory=InfrastructureConfig)
    demographics: DemographicsConfig = field(default_factory=DemographicsConfig)
    population_growth_rate: GrowthRateConfig = field(default_factory=GrowthRateConfig)

    def __post_init__(self) -> None:
        if self.min_population < 0:
            raise ConfigError("min_population must be non-negative")
        _check_range("population", self.min_population, self.max_population)
        if self.initial_city_count < 0:
            raise ConfigError("initial_city_count must be non-negative")
        if self.min_cities_per_country < 0:
            raise ConfigError("min_cities_per_country must be non-negative")

    @property
    def population_range(self) -> int:
        """Width of the allowed population range."""
        return self.max_population - self.min_population

    def clamp_population(self, population: float) -> int:
        """Clamp a population into [min_population, max_population]."""
        return int(clamp(population, self.min_population, self.max_population))

    def clamp_salary_level(self, level: float) -> float:
        """Clamp a salary level into the configured bounds."""
        return clamp(level, self.salary_level.min, self.salary_level.max)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorldConfig:
        """Build a config from a plain mapping. Missing keys use defaults."""
        sections = {
            "salary_level": SalaryLevelConfig,
            "infrastructure": InfrastructureConfig,
            "demographics": DemographicsConfig,
            "population_growth_rate": GrowthRateConfig,
        }
        scalars = ("min_population", "max_population", "initial_city_count", "min_cities_per_country")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key in scalars:
                kwargs[key] = value
            elif key in sections:
                if not isinstance(value, Mapping):
                    raise ConfigError(f"{key} must be a mapping")
                kwargs[key] = _build_section(key, sections[key], value)
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

        try:
            return cls(**kwargs)
        except TypeError as e:
            raise ConfigError(str(e)) from e


def _build_section(name: str, section_cls: type, data: Mapping[str, Any]) -> Any:
    known = set(section_cls.__dataclass_fields__)
    values = {}
    for key, value in data.items():
        if key in known:
            values[key] = value
        else:
            logger.warning(f"Ignoring unknown config key: {name}.{key}")
    return section_cls(**values)


def load_config(path: Path | str) -> WorldConfig:
    """Load a world configuration from a JSON file."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be an object: {config_path}")

    logger.debug(f"Loaded config from {config_path}")
    return WorldConfig.from_dict(data)

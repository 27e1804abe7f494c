"""Data-driven registries for countries and city names.

Load static world data from JSON files under worldecon/data. Adding a
country or growing the name pool only requires editing the JSON files.
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

# Path to data directory
DATA_DIR = Path(__file__).parent.parent / "data"


@dataclass(frozen=True)
class CountryInfo:
    """Immutable country definition loaded from JSON."""
    name: str
    continent: str
    economic_level: str
    resources: tuple[str, ...] = ()
    specialization: tuple[str, ...] = ()
    currency: str = ""


def _read_json(file_name: str) -> dict | None:
    json_path = DATA_DIR / file_name
    if not json_path.exists():
        logger.warning(f"World data file not found: {json_path}")
        return None

    with open(json_path, "r") as f:
        return json.load(f)


class CountryRegistry:
    """Singleton registry for country definitions.

    Keeps the JSON order, which decides each country's map region.
    """
    _instance: CountryRegistry | None = None
    _initialized: bool = False

    def __new__(cls) -> CountryRegistry:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if CountryRegistry._initialized:
            return

        self._countries: dict[str, CountryInfo] = {}
        self._by_continent: dict[str, list[str]] = {}
        self._continents: list[str] = []

        self._load_from_json()
        CountryRegistry._initialized = True

    def _load_from_json(self) -> None:
        """Load country definitions from JSON file."""
        data = _read_json("countries.json")
        if data is None:
            return

        self._continents = list(data.get("continents", []))

        for name, country_data in data.get("countries", {}).items():
            info = CountryInfo(
                name=name,
                continent=country_data.get("continent", "CENTRAL"),
                economic_level=country_data.get("economic_level", "EMERGING"),
                resources=tuple(country_data.get("resources", [])),
                specialization=tuple(country_data.get("specialization", [])),
                currency=country_data.get("currency", ""),
            )
            self._countries[name] = info
            self._by_continent.setdefault(info.continent, []).append(name)

    def get(self, name: str) -> CountryInfo | None:
        """Get country info by name."""
        return self._countries.get(name)

    def get_all(self) -> Iterator[CountryInfo]:
        """Iterate over all country definitions in file order."""
        return iter(self._countries.values())

    def get_all_names(self) -> list[str]:
        """Get all country names in file order."""
        return list(self._countries.keys())

    def get_by_continent(self, continent: str) -> list[str]:
        """Get names of all countries on a continent."""
        return self._by_continent.get(continent, []).copy()

    @property
    def continents(self) -> list[str]:
        return self._continents.copy()

    def __len__(self) -> int:
        return len(self._countries)

    @classmethod
    def reload(cls) -> None:
        """Force reload from JSON (for development/testing)."""
        cls._initialized = False
        if cls._instance:
            cls._instance.__init__()


class CityNameRegistry:
    """Singleton registry for the city name pool and procedural name parts."""
    _instance: CityNameRegistry | None = None
    _initialized: bool = False

    def __new__(cls) -> CityNameRegistry:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if CityNameRegistry._initialized:
            return

        self._names: tuple[str, ...] = ()
        self._prefixes: tuple[str, ...] = ()
        self._middles: tuple[str, ...] = ()
        self._suffixes: tuple[str, ...] = ()

        self._load_from_json()
        CityNameRegistry._initialized = True

    def _load_from_json(self) -> None:
        """Load the name pool from JSON file, dropping duplicates."""
        data = _read_json("city_names.json")
        if data is None:
            return

        self._names = tuple(dict.fromkeys(data.get("names", [])))

        procedural = data.get("procedural", {})
        self._prefixes = tuple(procedural.get("prefixes", []))
        self._middles = tuple(procedural.get("middles", []))
        self._suffixes = tuple(procedural.get("suffixes", []))

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def prefixes(self) -> tuple[str, ...]:
        return self._prefixes

    @property
    def middles(self) -> tuple[str, ...]:
        return self._middles

    @property
    def suffixes(self) -> tuple[str, ...]:
        return self._suffixes

    @classmethod
    def reload(cls) -> None:
        """Force reload from JSON (for development/testing)."""
        cls._initialized = False
        if cls._instance:
            cls._instance.__init__()


# Convenience functions for quick access
def get_country_registry() -> CountryRegistry:
    """Get the singleton CountryRegistry instance."""
    return CountryRegistry()


def get_city_name_registry() -> CityNameRegistry:
    """Get the singleton CityNameRegistry instance."""
    return CityNameRegistry()

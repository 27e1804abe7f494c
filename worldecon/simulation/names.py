"""City name generation."""
from __future__ import annotations
import logging
import random

from ..core.registries import get_city_name_registry

logger = logging.getLogger(__name__)


class CityNameGenerator:
    """Hand out city names without repeats.

    Names come from the curated pool first. Once it is exhausted, names are
    built from prefix + middle + suffix parts, e.g. "NorthRiverport".
    """

    def __init__(
        self,
        names: list[str] | tuple[str, ...] | None = None,
        prefixes: tuple[str, ...] | None = None,
        middles: tuple[str, ...] | None = None,
        suffixes: tuple[str, ...] | None = None,
    ) -> None:
        registry = get_city_name_registry()
        self._pool: tuple[str, ...] = tuple(names) if names is not None else registry.names
        self._prefixes = prefixes or registry.prefixes
        self._middles = middles or registry.middles
        self._suffixes = suffixes or registry.suffixes

        self._available: list[str] = list(self._pool)
        self.used_names: set[str] = set()
        self._warned_exhausted = False

    @property
    def remaining(self) -> int:
        """Curated names not handed out yet."""
        return len(self._available)

    def next_name(self, rng: random.Random) -> str:
        """Draw a random unused name from the pool."""
        if not self._available:
            if not self._warned_exhausted:
                logger.warning("City name pool exhausted, using procedural names")
                self._warned_exhausted = True
            return self.procedural_name(rng)

        name = self._available.pop(rng.randrange(len(self._available)))
        self.used_names.add(name)
        return name

    def procedural_name(self, rng: random.Random) -> str:
        prefix = rng.choice(self._prefixes)
        middle = rng.choice(self._middles)
        suffix = rng.choice(self._suffixes)
        return f"{prefix}{middle}{suffix}"

    def reset(self) -> None:
        """Return every curated name to the pool."""
        self._available = list(self._pool)
        self.used_names.clear()
        self._warned_exhausted = False

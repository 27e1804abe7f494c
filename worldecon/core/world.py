"""World state container."""
from __future__ import annotations
import logging
import random
from typing import Iterable
from uuid import UUID

from ..config import WorldConfig
from ..entities.country import Country, create_country, establish_trade_agreement
from ..simulation.directory import WorldDirectory
from ..simulation.transport import RouteEngine
from .events import EventBus, MonthlyUpdateEvent, YearlyUpdateEvent
from .registries import CountryInfo, get_country_registry

logger = logging.getLogger(__name__)


class World:
    """Owns the countries and the city directory, and runs periodic updates.

    There is no clock here: whoever drives the simulation calls
    update_monthly and update_yearly on tick boundaries.
    """

    def __init__(
        self,
        countries: Iterable[Country],
        config: WorldConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config or WorldConfig()
        self.event_bus = event_bus or EventBus()
        self._countries: dict[UUID, Country] = {c.id: c for c in countries}
        self.directory = WorldDirectory(
            self._countries.values(),
            config=self.config,
            route_engine=RouteEngine(),
            event_bus=self.event_bus,
        )

    @property
    def countries(self) -> list[Country]:
        return list(self._countries.values())

    def get_country(self, country_id: UUID) -> Country | None:
        """Get a country by ID."""
        return self._countries.get(country_id)

    def get_country_by_name(self, name: str) -> Country | None:
        """Get the first country with a specific name."""
        for country in self._countries.values():
            if country.name == name:
                return country
        return None

    def establish_continental_agreements(self) -> None:
        """Give every pair of countries on the same continent a trade agreement."""
        by_continent: dict[str, list[Country]] = {}
        for country in self._countries.values():
            by_continent.setdefault(country.continent, []).append(country)

        for members in by_continent.values():
            for i, a in enumerate(members):
                for b in members[i + 1:]:
                    establish_trade_agreement(a, b)

    def update_monthly(self, rng: random.Random) -> None:
        """Monthly tick: cities first, then country GDP from the updated cities."""
        self.directory.update_monthly(rng)
        for country in self._countries.values():
            country.update_monthly(rng)

        total_population = self.directory.total_population()
        total_purchasing_power = self.directory.total_purchasing_power()
        logger.info(
            f"Monthly update: population {total_population:,}, "
            f"purchasing power {total_purchasing_power:,}"
        )
        self.event_bus.publish(MonthlyUpdateEvent(
            total_population=total_population,
            total_purchasing_power=total_purchasing_power,
        ))

    def update_yearly(self, rng: random.Random) -> None:
        """Yearly tick: city salary drift and living costs, country quota reset."""
        self.directory.update_yearly(rng)
        for country in self._countries.values():
            country.update_yearly()

        average = self.directory.average_salary_level()
        logger.info(f"Yearly update: average salary level {average:.3f}")
        self.event_bus.publish(YearlyUpdateEvent(average_salary_level=average))


def create_world(
    rng: random.Random,
    config: WorldConfig | None = None,
    country_infos: Iterable[CountryInfo] | None = None,
    city_count: int | None = None,
    continental_agreements: bool = True,
    event_bus: EventBus | None = None,
) -> World:
    """Create countries, trade agreements and the initial cities.

    Args:
        rng: Random generator for every generated value
        config: World configuration (defaults if omitted)
        country_infos: Country definitions, the bundled registry if omitted
        city_count: Total cities to generate, config.initial_city_count if omitted
        continental_agreements: Whether same-continent countries trade tariff-free
        event_bus: Bus to publish world events on

    Returns:
        The populated world
    """
    if country_infos is None:
        country_infos = get_country_registry().get_all()

    countries = [create_country(info, rng) for info in country_infos]
    world = World(countries, config=config, event_bus=event_bus)

    if continental_agreements:
        world.establish_continental_agreements()

    world.directory.generate_initial_cities(rng, total_count=city_count)

    logger.info(
        f"World created with {len(countries)} countries, "
        f"{len(world.directory.cities)} cities, "
        f"{world.directory.total_population():,} total population"
    )
    return world

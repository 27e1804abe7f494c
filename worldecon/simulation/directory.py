"""City directory: world generation, geography and shipping cost queries."""
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from ..config import (
    WorldConfig,
    REGION_SIZE,
    REGION_COLUMNS,
    MAP_SIZE,
    COASTAL_MARGIN,
    SEAPORT_POPULATION_THRESHOLD,
    COLD_LATITUDE,
    TROPICAL_LATITUDE,
)
from ..core.events import EventBus, CityCreatedEvent, CitiesGeneratedEvent, TariffAppliedEvent
from ..entities.city import City, Climate, Coordinates
from ..entities.country import Country, EconomicLevel, ProductDescriptor, ProductTier
from .names import CityNameGenerator
from .transport import RouteEngine, RoutePriority, RouteResult

logger = logging.getLogger(__name__)

CITY_NOT_FOUND_ERROR = "City not found"

# Shipping quotes do not know the cargo, so every border crossing is taxed
# as general manufactured goods.
SHIPPING_TARIFF_PRODUCT = ProductDescriptor(tier=ProductTier.MANUFACTURED, category="GENERAL")

# (cumulative probability, start of band, band width) as fractions of the
# configured population range
POPULATION_BANDS: tuple[tuple[float, float, float], ...] = (
    (0.4, 0.0, 0.10),   # Small
    (0.7, 0.10, 0.25),  # Medium
    (0.9, 0.35, 0.30),  # Large
    (1.0, 0.65, 0.35),  # Major
)

# (low, high) salary level drawn per economic level
SALARY_LEVEL_RANGES: dict[EconomicLevel, tuple[float, float]] = {
    EconomicLevel.DEVELOPED: (0.6, 0.9),
    EconomicLevel.EMERGING: (0.4, 0.7),
    EconomicLevel.DEVELOPING: (0.3, 0.6),
}


@dataclass
class NearbyCity:
    """A city found near another, with the distance between them."""
    city: City
    distance: float
    same_country: bool

    @property
    def distance_formatted(self) -> str:
        return f"{self.distance:.1f} km"


@dataclass(frozen=True)
class CountryStatistics:
    """Per-country rollup of its cities."""
    country_name: str
    city_count: int
    population: int
    gdp: float
    average_salary_level: float


def climate_for(coordinates: Coordinates) -> Climate:
    if coordinates.y < COLD_LATITUDE:
        return Climate.COLD
    if coordinates.y > TROPICAL_LATITUDE:
        return Climate.TROPICAL
    return Climate.TEMPERATE


def is_near_map_edge(coordinates: Coordinates) -> bool:
    far_edge = MAP_SIZE - COASTAL_MARGIN
    return (
        coordinates.x < COASTAL_MARGIN
        or coordinates.x > far_edge
        or coordinates.y < COASTAL_MARGIN
        or coordinates.y > far_edge
    )


class WorldDirectory:
    """Creates and indexes cities, and quotes shipping between them.

    Countries own their cities; the directory keeps an id index over all of
    them and is the entry point for shipping cost queries, combining the
    route engine with the destination country's tariff policy.
    """

    def __init__(
        self,
        countries: Iterable[Country],
        config: WorldConfig | None = None,
        route_engine: RouteEngine | None = None,
        name_generator: CityNameGenerator | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.countries: list[Country] = list(countries)
        self._countries_by_id: dict[UUID, Country] = {c.id: c for c in self.countries}
        self.config = config or WorldConfig()
        self.transportation = route_engine or RouteEngine()
        self.name_generator = name_generator or CityNameGenerator()
        self.event_bus = event_bus
        self.cities: dict[UUID, City] = {}

    # --- Generation ---

    def generate_initial_cities(
        self,
        rng: random.Random,
        total_count: int | None = None,
        min_per_country: int | None = None,
    ) -> list[City]:
        """Generate the starting cities.

        Every country first gets min_per_country cities, the rest of
        max(total_count, countries * min_per_country) is dealt round-robin
        in country order. Coastal cities are designated afterwards.
        """
        if total_count is None:
            total_count = self.config.initial_city_count
        if min_per_country is None:
            min_per_country = self.config.min_cities_per_country

        minimum_total = len(self.countries) * min_per_country
        city_count = max(total_count, minimum_total)

        for country in self.countries:
            for _ in range(min_per_country):
                self.add_city(country, self.generate_city_for_country(country, rng))

        if self.countries:
            for i in range(city_count - minimum_total):
                country = self.countries[i % len(self.countries)]
                self.add_city(country, self.generate_city_for_country(country, rng))

        self.designate_coastal_cities()

        logger.info(
            f"Generated {len(self.cities)} cities across {len(self.countries)} countries "
            f"(min {min_per_country} per country)"
        )
        if self.event_bus:
            self.event_bus.publish(CitiesGeneratedEvent(
                city_count=len(self.cities),
                country_count=len(self.countries),
            ))

        return self.get_all_cities()

    def draw_population(self, rng: random.Random) -> int:
        """Draw a population from the weighted quartile bands of the configured range."""
        population_range = self.config.population_range
        roll = rng.random()

        for threshold, start, width in POPULATION_BANDS:
            if roll < threshold:
                break

        population = (
            self.config.min_population
            + population_range * start
            + rng.random() * population_range * width
        )
        return int(population)

    def draw_salary_level(self, country: Country, rng: random.Random) -> float:
        low, high = SALARY_LEVEL_RANGES[country.economic_level]
        level = low + rng.random() * (high - low)
        return self.config.clamp_salary_level(level)

    def region_origin(self, country: Country) -> tuple[float, float]:
        """Top-left corner of the country's cell on the map grid."""
        index = self.countries.index(country)
        return (
            (index % REGION_COLUMNS) * REGION_SIZE,
            (index // REGION_COLUMNS) * REGION_SIZE,
        )

    def generate_city_for_country(self, country: Country, rng: random.Random) -> City:
        """Create a city placed inside the country's map region. Does not register it."""
        name = self.name_generator.next_name(rng)
        population = self.draw_population(rng)
        salary_level = self.draw_salary_level(country, rng)

        city = City(name, population, salary_level, country, self.config, rng)

        region_x, region_y = self.region_origin(country)
        city.coordinates = Coordinates(
            x=region_x + rng.random() * REGION_SIZE,
            y=region_y + rng.random() * REGION_SIZE,
        )
        city.climate = climate_for(city.coordinates)
        return city

    def add_city(self, country: Country, city: City) -> None:
        """Hand a city to its country and index it. The city must have been built for that country."""
        if country.id not in self._countries_by_id:
            raise ValueError(f"Unknown country: {country.name}")
        if city.country_id != country.id:
            raise ValueError(f"{city.name} does not belong to {country.name}")

        country.add_city(city)
        self.cities[city.id] = city
        logger.debug(f"Created {city.name} in {country.name} (population {city.population:,})")

        if self.event_bus:
            self.event_bus.publish(CityCreatedEvent(
                city_id=city.id,
                city_name=city.name,
                country_id=country.id,
            ))

    def designate_coastal_cities(self) -> None:
        """Mark cities near the map edge as coastal; the larger ones get a seaport."""
        for city in self.cities.values():
            if is_near_map_edge(city.coordinates):
                city.is_coastal = True
                city.has_seaport = city.population > SEAPORT_POPULATION_THRESHOLD

    # --- Lookups ---

    def get_city(self, city_id: UUID) -> City | None:
        return self.cities.get(city_id)

    def get_country(self, country_id: UUID | None) -> Country | None:
        if country_id is None:
            return None
        return self._countries_by_id.get(country_id)

    def get_all_cities(self) -> list[City]:
        return list(self.cities.values())

    def get_cities_by_country(self, country_id: UUID) -> list[City]:
        return [city for city in self.cities.values() if city.country_id == country_id]

    def get_nearby_cities(self, city_id: UUID, max_distance: float = 200) -> list[NearbyCity]:
        """Other cities within max_distance, closest first. Unknown ids give []."""
        city = self.cities.get(city_id)
        if not city:
            return []

        nearby = []
        for other in self.cities.values():
            if other.id == city_id:
                continue
            distance = self.transportation.distance(city, other)
            if distance <= max_distance:
                nearby.append(NearbyCity(
                    city=other,
                    distance=distance,
                    same_country=other.country_id == city.country_id,
                ))

        nearby.sort(key=lambda n: n.distance)
        return nearby

    # --- Shipping ---

    def calculate_shipping_cost(
        self,
        origin_id: UUID,
        destination_id: UUID,
        cargo_units: float,
        priority: RoutePriority | str = RoutePriority.COST,
    ) -> RouteResult:
        """Quote the best route, adding the destination's tariff across borders."""
        origin = self.cities.get(origin_id)
        destination = self.cities.get(destination_id)
        if not origin or not destination:
            return RouteResult(distance=None, error=CITY_NOT_FOUND_ERROR)

        result = self.transportation.find_optimal_route(origin, destination, cargo_units, priority)

        if origin.country_id == destination.country_id or not result.found:
            return result

        origin_country = self.get_country(origin.country_id)
        destination_country = self.get_country(destination.country_id)
        if not origin_country or not destination_country:
            return result

        rate = destination_country.get_tariff(SHIPPING_TARIFF_PRODUCT, origin_country)
        amount = result.optimal_route.add_tariff(rate)
        logger.debug(
            f"Tariff {rate:.1%} from {origin_country.name} to {destination_country.name}: {amount:,.2f}"
        )

        if self.event_bus:
            self.event_bus.publish(TariffAppliedEvent(
                origin_country_id=origin_country.id,
                destination_country_id=destination_country.id,
                rate=rate,
                amount=amount,
            ))

        return result

    # --- Periodic updates ---

    def update_monthly(self, rng: random.Random) -> None:
        for city in self.cities.values():
            city.update_monthly(rng)

    def update_yearly(self, rng: random.Random) -> None:
        for city in self.cities.values():
            city.update_yearly(rng)

    # --- Aggregates ---

    def total_population(self) -> int:
        return sum(city.population for city in self.cities.values())

    def total_purchasing_power(self) -> int:
        return sum(city.total_purchasing_power for city in self.cities.values())

    def total_employed(self) -> int:
        return sum(city.demographics.employed for city in self.cities.values())

    def average_salary_level(self) -> float:
        if not self.cities:
            return 0.0
        return sum(city.salary_level for city in self.cities.values()) / len(self.cities)

    def statistics_by_country(self) -> dict[UUID, CountryStatistics]:
        """Population, GDP, average salary level and city count per country."""
        stats = {}
        for country in self.countries:
            cities = self.get_cities_by_country(country.id)
            average = sum(c.salary_level for c in cities) / len(cities) if cities else 0.0
            stats[country.id] = CountryStatistics(
                country_name=country.name,
                city_count=len(cities),
                population=sum(c.population for c in cities),
                gdp=sum(c.total_purchasing_power for c in cities),
                average_salary_level=average,
            )
        return stats

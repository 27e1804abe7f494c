"""City entities: demographics, economic classes and purchasing power."""
from __future__ import annotations
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from ..config import (
    WorldConfig,
    clamp,
    CONSUMER_CONFIDENCE_START,
    CONSUMER_CONFIDENCE_MIN,
    CONSUMER_CONFIDENCE_MAX,
)
from .country import EconomicLevel

if TYPE_CHECKING:
    from .country import Country


class Climate(Enum):
    """Climate band, decided by map latitude."""
    COLD = "COLD"
    TEMPERATE = "TEMPERATE"
    TROPICAL = "TROPICAL"


class Infrastructure(Enum):
    """Transport infrastructure a city may have. Values are City attribute names."""
    RAILWAY = "has_railway"
    AIRPORT = "has_airport"
    SEAPORT = "has_seaport"


@dataclass(frozen=True)
class SalaryRange:
    """Annual salary band of an economic class."""
    min: float
    max: float

    def interpolate(self, level: float) -> float:
        return self.min + (self.max - self.min) * level


# Economic classes, lowest first. Shares are of the employed population.
CLASS_ORDER: tuple[str, ...] = (
    "lower", "working", "lower_middle", "upper_middle", "upper", "rich",
)

CLASS_DISTRIBUTION: dict[str, float] = {
    "lower": 0.25,
    "working": 0.35,
    "lower_middle": 0.25,
    "upper_middle": 0.14,
    "upper": 0.01,
    "rich": 0.0005,
}

SALARY_RANGES: dict[str, SalaryRange] = {
    "lower": SalaryRange(20_000, 35_000),
    "working": SalaryRange(35_000, 55_000),
    "lower_middle": SalaryRange(55_000, 110_000),
    "upper_middle": SalaryRange(110_000, 375_000),
    "upper": SalaryRange(375_000, 1_500_000),
    "rich": SalaryRange(1_500_000, 5_000_000),
}

# Share of salary left to spend
DISPOSABLE_RATES: dict[str, float] = {
    "lower": 0.15,
    "working": 0.25,
    "lower_middle": 0.35,
    "upper_middle": 0.45,
    "upper": 0.55,
    "rich": 0.65,
}

COST_OF_LIVING: dict[EconomicLevel, float] = {
    EconomicLevel.DEVELOPED: 1.2,
    EconomicLevel.EMERGING: 1.0,
    EconomicLevel.DEVELOPING: 0.8,
}

CONSUMER_CONFIDENCE_STEP = 0.05


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def class_for_salary(salary: float) -> str:
    """Economic class whose salary band contains salary."""
    for name in CLASS_ORDER[:-1]:
        if salary < SALARY_RANGES[name].max:
            return name
    return CLASS_ORDER[-1]


def format_currency(amount: float) -> str:
    """Format an amount as $1.23B / $4.56M / $7.89K / $12.34."""
    if amount >= 1e9:
        return f"${amount / 1e9:.2f}B"
    if amount >= 1e6:
        return f"${amount / 1e6:.2f}M"
    if amount >= 1e3:
        return f"${amount / 1e3:.2f}K"
    return f"${amount:.2f}"


@dataclass
class Coordinates:
    """Planar map position."""
    x: float = 0.0
    y: float = 0.0

    def distance_to(self, other: Coordinates) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass
class Demographics:
    """Population split into working age, employed and unemployed."""
    total: int
    working_age: int
    employed: int
    unemployed: int
    non_working: int
    non_working_percent: float
    employed_percent: float

    @property
    def unemployment_rate(self) -> float:
        if self.working_age <= 0:
            return 0.0
        return self.unemployed / self.working_age


@dataclass
class EconomicClass:
    """One population segment with its salary band and spending power."""
    name: str
    count: int
    share: float
    salary_range: SalaryRange
    avg_salary: int
    disposable_income: int

    @property
    def percentage(self) -> float:
        return self.share * 100

    @property
    def total_income(self) -> int:
        return self.count * self.avg_salary

    @property
    def purchasing_power(self) -> int:
        return self.count * self.disposable_income


@dataclass(frozen=True)
class MarketSize:
    """Snapshot of a city's consumer market."""
    total: float
    per_capita: float
    daily: float
    hourly: float


@dataclass
class MonthlyStats:
    total_sales: float = 0.0
    avg_product_price: float = 0.0
    employment_change: int = 0
    population_growth: float = 0.0


@dataclass
class LocalCompetitor:
    """Local business competing for the city's consumers."""
    id: str
    name: str
    market_share: float
    avg_price: float = 1.0
    avg_quality: float = 50.0
    avg_brand: float = 40.0


class City:
    """An urban market inside a country.

    Population and salary level are clamped into the configured bounds.
    Purchasing power is always derived from the economic classes and cannot
    be set directly.
    """

    def __init__(
        self,
        name: str,
        population: float,
        salary_level: float,
        country: Country | None,
        config: WorldConfig,
        rng: random.Random,
        city_id: UUID | None = None,
    ) -> None:
        self.id: UUID = city_id or uuid4()
        self.name = name
        self.config = config
        self.country_id: UUID | None = country.id if country else None

        self.population: int = config.clamp_population(population)
        self.salary_level: float = config.clamp_salary_level(salary_level)

        # Economic structure
        self.demographics = self.calculate_demographics()
        self.economic_classes = self.calculate_economic_classes()

        # Market factors
        if country:
            self.cost_of_living = COST_OF_LIVING.get(country.economic_level, 1.0)
        else:
            self.cost_of_living = 1.0
        self.consumer_confidence = CONSUMER_CONFIDENCE_START
        self.market_size = self.calculate_market_size()

        # Location and infrastructure
        infra = config.infrastructure
        self.coordinates = Coordinates()
        self.climate = Climate.TEMPERATE
        self.is_coastal = False
        self.has_airport = self.population > infra.airport_threshold
        self.has_seaport = False
        self.has_railway = self.population > infra.railway_threshold
        self.infrastructure_quality = 0.5 + rng.random() * 0.5

        self.local_competitors = self._generate_local_competitors(rng)
        self.monthly_stats = MonthlyStats()

    def __repr__(self) -> str:
        return f"City({self.name!r}, population={self.population})"

    # --- Derived state ---

    def calculate_demographics(self) -> Demographics:
        """Split the population by the configured demographic rates."""
        rates = self.config.demographics
        working_age = math.floor(self.population * (1 - rates.non_working_percentage))
        employed = math.floor(working_age * rates.employment_rate)

        return Demographics(
            total=self.population,
            working_age=working_age,
            employed=employed,
            unemployed=working_age - employed,
            non_working=self.population - working_age,
            non_working_percent=rates.non_working_percentage,
            employed_percent=rates.employment_rate,
        )

    def calculate_economic_classes(self) -> dict[str, EconomicClass]:
        """Build the six classes from the employed count and salary level.

        Class counts are truncated, so they need not add up to employed.
        """
        employed = self.demographics.employed
        classes = {}

        for name in CLASS_ORDER:
            share = CLASS_DISTRIBUTION[name]
            salary_range = SALARY_RANGES[name]
            avg_salary = _round_half_up(salary_range.interpolate(self.salary_level))
            classes[name] = EconomicClass(
                name=name,
                count=math.floor(employed * share),
                share=share,
                salary_range=salary_range,
                avg_salary=avg_salary,
                disposable_income=_round_half_up(avg_salary * DISPOSABLE_RATES[name]),
            )

        return classes

    @property
    def total_purchasing_power(self) -> int:
        """Aggregate disposable income across all economic classes."""
        return sum(c.purchasing_power for c in self.economic_classes.values())

    def calculate_market_size(self) -> MarketSize:
        total = self.total_purchasing_power
        return MarketSize(
            total=total,
            per_capita=total / self.population if self.population else 0.0,
            daily=total / 365,
            hourly=total / 365 / 24,
        )

    def has_infrastructure(self, infrastructure: Infrastructure) -> bool:
        return bool(getattr(self, infrastructure.value))

    def _generate_local_competitors(self, rng: random.Random) -> list[LocalCompetitor]:
        count = math.floor(math.log10(self.population) * 2) if self.population > 0 else 0
        return [
            LocalCompetitor(
                id=f"LOCAL_{self.id.hex[:8]}_{i}",
                name=f"Local Business {i + 1}",
                market_share=rng.random() * 0.15,
                avg_price=1.0,
                avg_quality=40 + rng.random() * 30,
                avg_brand=20 + rng.random() * 40,
            )
            for i in range(count)
        ]

    # --- Employment ---

    def add_employment(self, count: int, avg_salary: float) -> int:
        """Hire from the unemployed pool into the class matching avg_salary.

        Returns:
            Number actually hired (limited by unemployment)
        """
        if count < 0:
            raise ValueError(f"Hiring count must be non-negative, got {count}")

        hired = min(count, self.demographics.unemployed)
        self.demographics.unemployed -= hired
        self.demographics.employed += hired
        self.economic_classes[class_for_salary(avg_salary)].count += hired
        self.monthly_stats.employment_change += hired
        return hired

    def remove_employment(self, count: int) -> int:
        """Move workers back to unemployment without touching class counts.

        Returns:
            Number actually removed (employed never goes below zero)
        """
        if count < 0:
            raise ValueError(f"Layoff count must be non-negative, got {count}")

        removed = min(count, self.demographics.employed)
        self.demographics.employed -= removed
        self.demographics.unemployed += removed
        self.monthly_stats.employment_change -= removed
        return removed

    # --- Periodic updates ---

    def update_monthly(self, rng: random.Random) -> None:
        """Grow the population and rebuild demographics, classes and market size."""
        growth = self.config.population_growth_rate
        growth_rate = rng.uniform(growth.min, growth.max)

        self.population = self.config.clamp_population(
            math.floor(self.population * (1 + growth_rate))
        )
        self.monthly_stats.population_growth = growth_rate

        self.demographics = self.calculate_demographics()
        self.economic_classes = self.calculate_economic_classes()

        self.consumer_confidence += (rng.random() - 0.5) * 2 * CONSUMER_CONFIDENCE_STEP
        self.consumer_confidence = clamp(
            self.consumer_confidence, CONSUMER_CONFIDENCE_MIN, CONSUMER_CONFIDENCE_MAX
        )

        self.market_size = self.calculate_market_size()
        self.monthly_stats.total_sales = 0.0

    def update_yearly(self, rng: random.Random) -> None:
        """Drift the salary level (slightly downward on average) and inflate living costs."""
        self.salary_level += (rng.random() - 0.45) * 0.05
        self.salary_level = self.config.clamp_salary_level(self.salary_level)
        self.cost_of_living *= 1.02 + rng.random() * 0.02

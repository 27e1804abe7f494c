"""Country entities and trade policy."""
from __future__ import annotations
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from ..config import clamp

if TYPE_CHECKING:
    from ..core.registries import CountryInfo
    from .city import City


class EconomicLevel(Enum):
    """Development level of a country's economy."""
    DEVELOPED = "DEVELOPED"
    EMERGING = "EMERGING"
    DEVELOPING = "DEVELOPING"


class ProductTier(Enum):
    """Processing tier of a traded product, drives the base tariff."""
    RAW = "RAW"
    SEMI_RAW = "SEMI_RAW"
    MANUFACTURED = "MANUFACTURED"


class ImportRestriction(Enum):
    """Why an import was refused."""
    BANNED = "BANNED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"


# Base tariff rate by product tier
BASE_TARIFFS: dict[ProductTier, float] = {
    ProductTier.RAW: 0.05,
    ProductTier.SEMI_RAW: 0.10,
    ProductTier.MANUFACTURED: 0.15,
}
DEFAULT_TARIFF = 0.10  # Tiers without an entry

# Tariff multipliers
DOMESTIC_PRODUCTION_MULTIPLIER = 1.5  # Protect competing domestic industry
SAME_CONTINENT_MULTIPLIER = 0.7

RISK_PREMIUM: dict[EconomicLevel, float] = {
    EconomicLevel.DEVELOPED: 0.01,
    EconomicLevel.EMERGING: 0.03,
    EconomicLevel.DEVELOPING: 0.05,
}

INFLATION_STEP = 0.0025  # Max monthly inflation change either way
INFLATION_MAX = 0.15


@dataclass(frozen=True)
class ProductDescriptor:
    """What the trade policy needs to know about a product."""
    tier: ProductTier | str
    category: str
    id: str = ""


@dataclass
class Quota:
    """Annual import cap for one product."""
    annual: float
    used: float = 0.0

    @property
    def available(self) -> float:
        return self.annual - self.used


@dataclass(frozen=True)
class ImportCheck:
    """Result of an import restriction check."""
    allowed: bool
    reason: ImportRestriction | None = None
    available: float | None = None  # Remaining quota when rejected for quota


@dataclass
class ResourceAvailability:
    """Domestic availability of a natural resource."""
    abundant: bool = True
    quality: float = 80.0
    reserves: float = 5_000_000.0


@dataclass
class Country:
    """A country: trade policy owner and aggregate of its cities."""
    name: str
    continent: str
    economic_level: EconomicLevel = EconomicLevel.EMERGING
    resources: list[str] = field(default_factory=list)
    specialization: list[str] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    currency: str = ""

    # Economic indicators
    gdp: float = 0.0
    population: int = 0
    inflation_rate: float = 0.02
    unemployment_rate: float = 0.05
    base_interest_rate: float = 0.03
    exchange_rate: float = 1.0  # vs base currency

    # Trade policy
    tariffs: dict[ProductTier, float] = field(default_factory=lambda: dict(BASE_TARIFFS))
    trade_agreements: set[UUID] = field(default_factory=set)
    banned_products: set[str] = field(default_factory=set)
    quotas: dict[str, Quota] = field(default_factory=dict)

    production_capabilities: set[str] = field(default_factory=set)
    resource_availability: dict[str, ResourceAvailability] = field(default_factory=dict)

    cities: list[City] = field(default_factory=list)

    def __post_init__(self) -> None:
        if isinstance(self.economic_level, str):
            self.economic_level = EconomicLevel(self.economic_level)
        if not self.currency:
            self.currency = f"{self.name} Dollar"
        if not self.production_capabilities:
            self.production_capabilities = set(self.specialization)
        for resource in self.resources:
            self.resource_availability.setdefault(resource, ResourceAvailability())

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Country):
            return self.id == other.id
        return False

    @property
    def risk_premium(self) -> float:
        return RISK_PREMIUM.get(self.economic_level, 0.03)

    def can_produce(self, category: str) -> bool:
        """Check if the country has domestic capability for a product category."""
        return category in self.production_capabilities

    def has_resource(self, resource: str) -> bool:
        return resource in self.resource_availability

    # --- Trade policy ---

    def base_tariff(self, tier: ProductTier | str) -> float:
        """Base tariff for a product tier, DEFAULT_TARIFF if the tier is unknown."""
        try:
            tier = ProductTier(tier)
        except ValueError:
            return DEFAULT_TARIFF
        return self.tariffs.get(tier, DEFAULT_TARIFF)

    def get_tariff(self, product: ProductDescriptor, origin: Country) -> float:
        """Tariff rate this country charges on a product imported from origin.

        Zero under a trade agreement. Otherwise the tier's base rate, raised
        1.5x when the category competes with domestic production and cut to
        0.7x for imports from the same continent. Multipliers compound.
        """
        if origin.id in self.trade_agreements:
            return 0.0

        multiplier = 1.0
        if self.can_produce(product.category):
            multiplier = DOMESTIC_PRODUCTION_MULTIPLIER
        if origin.continent == self.continent:
            multiplier *= SAME_CONTINENT_MULTIPLIER

        return self.base_tariff(product.tier) * multiplier

    def set_tariff(self, tier: ProductTier, rate: float) -> None:
        if rate < 0:
            raise ValueError(f"Tariff rate must be non-negative, got {rate}")
        self.tariffs[ProductTier(tier)] = rate

    def add_trade_agreement(self, other_id: UUID) -> None:
        if other_id != self.id:
            self.trade_agreements.add(other_id)

    def remove_trade_agreement(self, other_id: UUID) -> None:
        self.trade_agreements.discard(other_id)

    def ban_product(self, product_id: str) -> None:
        self.banned_products.add(product_id)

    def unban_product(self, product_id: str) -> None:
        self.banned_products.discard(product_id)

    def set_quota(self, product_id: str, annual: float) -> Quota:
        """Set the annual import cap for a product, keeping usage so far."""
        if annual < 0:
            raise ValueError(f"Quota must be non-negative, got {annual}")
        quota = self.quotas.get(product_id)
        if quota:
            quota.annual = annual
        else:
            quota = Quota(annual=annual)
            self.quotas[product_id] = quota
        return quota

    def check_import_restrictions(self, product: ProductDescriptor, quantity: float) -> ImportCheck:
        """Check bans first, then quota headroom."""
        if product.id in self.banned_products:
            return ImportCheck(allowed=False, reason=ImportRestriction.BANNED)

        quota = self.quotas.get(product.id)
        if quota and quota.used + quantity > quota.annual:
            return ImportCheck(
                allowed=False,
                reason=ImportRestriction.QUOTA_EXCEEDED,
                available=quota.available,
            )

        return ImportCheck(allowed=True)

    def record_import(self, product: ProductDescriptor, quantity: float) -> ImportCheck:
        """Check restrictions and, when allowed, count quantity against the quota."""
        check = self.check_import_restrictions(product, quantity)
        if check.allowed:
            quota = self.quotas.get(product.id)
            if quota:
                quota.used += quantity
        return check

    # --- Cities ---

    def add_city(self, city: City) -> None:
        """Take ownership of a city. Population is a running total."""
        self.cities.append(city)
        self.population += city.population

    def calculate_gdp(self) -> float:
        """Sum of the owned cities' purchasing power."""
        return sum(city.total_purchasing_power for city in self.cities)

    # --- Periodic updates ---

    def update_monthly(self, rng: random.Random) -> None:
        """Random-walk inflation and recompute GDP from the cities."""
        self.inflation_rate += (rng.random() - 0.5) * 2 * INFLATION_STEP
        self.inflation_rate = clamp(self.inflation_rate, 0.0, INFLATION_MAX)
        self.gdp = self.calculate_gdp()

    def update_yearly(self) -> None:
        """Start a new quota year."""
        for quota in self.quotas.values():
            quota.used = 0.0


def create_country(info: CountryInfo, rng: random.Random) -> Country:
    """Create a country from its static definition, drawing its starting indicators.

    Args:
        info: Static country definition
        rng: Random generator for the economic indicators

    Returns:
        The created country
    """
    country = Country(
        name=info.name,
        continent=info.continent,
        economic_level=EconomicLevel(info.economic_level),
        resources=list(info.resources),
        specialization=list(info.specialization),
        currency=info.currency,
        inflation_rate=0.02 + rng.random() * 0.03,
        unemployment_rate=0.05 + rng.random() * 0.10,
        base_interest_rate=0.03 + rng.random() * 0.07,
    )

    for resource in country.resources:
        country.resource_availability[resource] = ResourceAvailability(
            abundant=True,
            quality=60 + rng.random() * 40,
            reserves=1_000_000 + rng.random() * 9_000_000,
        )

    return country


def establish_trade_agreement(a: Country, b: Country) -> None:
    """Make a bilateral tariff exemption between two countries."""
    a.add_trade_agreement(b.id)
    b.add_trade_agreement(a.id)

"""Transport modes and shipping route selection between cities."""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..entities.city import Infrastructure

if TYPE_CHECKING:
    from ..entities.city import City

logger = logging.getLogger(__name__)

NO_ROUTE_ERROR = "No available transportation options"
INVALID_CARGO_ERROR = "Cargo units must be positive"


class TransportMode(Enum):
    """Ways to move cargo between cities."""
    LOCAL_ROAD = "local_road"
    HIGHWAY = "highway"
    TRAIN = "train"
    SEA = "sea"
    AIR = "air"


class RoutePriority(Enum):
    """What a shipper optimizes for when picking a route."""
    COST = "cost"
    SPEED = "speed"
    RELIABILITY = "reliability"
    BALANCED = "balanced"

    @classmethod
    def _missing_(cls, value: object) -> RoutePriority | None:
        # Accept "COST" as well as "cost"
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None


@dataclass(frozen=True)
class ModeSpec:
    """Static definition of a transport mode."""
    mode: TransportMode
    name: str
    cost_per_unit_distance: float
    speed: float  # Distance units per hour
    reliability: float
    min_distance: float
    max_distance: float
    base_cost: float = 0.0  # Fixed cost per shipment
    requires: Infrastructure | None = None  # Needed at both ends

    def covers(self, distance: float) -> bool:
        return self.min_distance <= distance <= self.max_distance


# Declaration order is the tie-break order when scores are equal
TRANSPORT_MODES: dict[TransportMode, ModeSpec] = {
    TransportMode.LOCAL_ROAD: ModeSpec(
        TransportMode.LOCAL_ROAD, "Local Roads",
        cost_per_unit_distance=0.50, speed=50, reliability=0.85,
        min_distance=0, max_distance=100,
    ),
    TransportMode.HIGHWAY: ModeSpec(
        TransportMode.HIGHWAY, "Highway",
        cost_per_unit_distance=0.30, speed=90, reliability=0.95,
        min_distance=50, max_distance=1000,
    ),
    TransportMode.TRAIN: ModeSpec(
        TransportMode.TRAIN, "Rail Freight",
        cost_per_unit_distance=0.15, speed=80, reliability=0.90,
        min_distance=100, max_distance=3000,
        requires=Infrastructure.RAILWAY,
    ),
    TransportMode.SEA: ModeSpec(
        TransportMode.SEA, "Sea Freight",
        cost_per_unit_distance=0.08, speed=40, reliability=0.85,
        min_distance=500, max_distance=20000, base_cost=1000,
        requires=Infrastructure.SEAPORT,
    ),
    TransportMode.AIR: ModeSpec(
        TransportMode.AIR, "Air Freight",
        cost_per_unit_distance=2.50, speed=600, reliability=0.92,
        min_distance=200, max_distance=10000, base_cost=500,
        requires=Infrastructure.AIRPORT,
    ),
}

MODE_ORDER: tuple[TransportMode, ...] = tuple(TRANSPORT_MODES)


@dataclass(frozen=True)
class TransitTime:
    """Time a shipment spends in transit."""
    hours: float

    @property
    def days(self) -> float:
        return self.hours / 24

    @property
    def formatted(self) -> str:
        """Human readable duration: minutes, hours, or days plus hours."""
        if self.hours < 1:
            return f"{round(self.hours * 60)} minutes"
        if self.hours < 24:
            return f"{self.hours:.1f} hours"
        days = math.floor(self.hours / 24)
        remaining = math.floor(self.hours % 24)
        plural = "s" if days > 1 else ""
        return f"{days} day{plural} {remaining}h"


@dataclass
class RouteCandidate:
    """One priced transport option for a shipment. Computed per query."""
    mode: TransportMode
    name: str
    distance: float
    cargo_units: float
    base_cost: float
    cost_per_unit: float
    transit_time: TransitTime
    reliability: float
    score: float = 0.0
    tariff: float = 0.0  # Tariff amount already included in base_cost
    tariff_rate: float = 0.0

    def add_tariff(self, rate: float) -> float:
        """Fold a tariff rate into the cost. Returns the tariff amount."""
        amount = self.base_cost * rate
        self.tariff_rate = rate
        self.tariff = amount
        self.base_cost += amount
        self.cost_per_unit = self.base_cost / self.cargo_units
        return amount


@dataclass
class RouteResult:
    """Outcome of a route query. Failure is reported in error, never raised."""
    distance: float | None
    optimal_route: RouteCandidate | None = None
    all_routes: list[RouteCandidate] = field(default_factory=list)
    origin: str = ""
    destination: str = ""
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.error is None and self.optimal_route is not None


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.inf
    return numerator / denominator


def _score_cost(route: RouteCandidate) -> float:
    return _ratio(10000, route.cost_per_unit)


def _score_speed(route: RouteCandidate) -> float:
    return _ratio(1000, route.transit_time.hours)


def _score_reliability(route: RouteCandidate) -> float:
    return route.reliability * 100


def _score_balanced(route: RouteCandidate) -> float:
    return (
        _ratio(5000, route.cost_per_unit)
        + _ratio(500, route.transit_time.hours)
        + route.reliability * 50
    )


SCORERS: dict[RoutePriority, Callable[[RouteCandidate], float]] = {
    RoutePriority.COST: _score_cost,
    RoutePriority.SPEED: _score_speed,
    RoutePriority.RELIABILITY: _score_reliability,
    RoutePriority.BALANCED: _score_balanced,
}


class RouteEngine:
    """Stateless catalog of transport modes that prices and ranks routes."""

    def __init__(self, modes: dict[TransportMode, ModeSpec] | None = None) -> None:
        self.modes = modes if modes is not None else TRANSPORT_MODES

    def distance(self, a: City, b: City) -> float:
        """Planar Euclidean distance between two cities."""
        return a.coordinates.distance_to(b.coordinates)

    def eligible_modes(self, origin: City, destination: City, distance: float) -> list[ModeSpec]:
        """Modes whose distance window covers distance and whose gate both ends pass."""
        eligible = []
        for spec in self.modes.values():
            if not spec.covers(distance):
                continue
            if spec.requires and not (
                origin.has_infrastructure(spec.requires)
                and destination.has_infrastructure(spec.requires)
            ):
                continue
            eligible.append(spec)
        return eligible

    def transit_time(self, mode: TransportMode, distance: float) -> TransitTime:
        return TransitTime(hours=distance / self.modes[mode].speed)

    def cost(
        self,
        mode: TransportMode,
        distance: float,
        cargo_units: float,
        product_weight: float = 1.0,
    ) -> RouteCandidate:
        """Price a shipment on one mode.

        Args:
            mode: Transport mode
            distance: Distance between the endpoints
            cargo_units: Number of units shipped (must be positive)
            product_weight: Multiplier on the whole cost

        Returns:
            Unscored route candidate
        """
        if cargo_units <= 0:
            raise ValueError(f"Cargo units must be positive, got {cargo_units}")

        spec = self.modes[mode]
        total = (spec.cost_per_unit_distance * distance * cargo_units + spec.base_cost) * product_weight

        return RouteCandidate(
            mode=mode,
            name=spec.name,
            distance=distance,
            cargo_units=cargo_units,
            base_cost=total,
            cost_per_unit=total / cargo_units,
            transit_time=self.transit_time(mode, distance),
            reliability=spec.reliability,
        )

    @staticmethod
    def score(route: RouteCandidate, priority: RoutePriority | str) -> float:
        """Score a route for a priority. Higher is better."""
        return SCORERS[RoutePriority(priority)](route)

    def find_optimal_route(
        self,
        origin: City,
        destination: City,
        cargo_units: float,
        priority: RoutePriority | str = RoutePriority.COST,
    ) -> RouteResult:
        """Price every eligible mode and pick the best for priority.

        Equal scores are broken by mode declaration order. When nothing is
        eligible, or cargo_units is not positive, the result carries an error
        and the computed distance.
        """
        priority = RoutePriority(priority)
        distance = self.distance(origin, destination)

        if cargo_units <= 0:
            return RouteResult(
                distance=distance,
                origin=origin.name,
                destination=destination.name,
                error=INVALID_CARGO_ERROR,
            )

        options = self.eligible_modes(origin, destination, distance)

        if not options:
            logger.debug(f"No route from {origin.name} to {destination.name} ({distance:.1f})")
            return RouteResult(
                distance=distance,
                origin=origin.name,
                destination=destination.name,
                error=NO_ROUTE_ERROR,
            )

        routes = []
        for spec in options:
            route = self.cost(spec.mode, distance, cargo_units)
            route.score = self.score(route, priority)
            routes.append(route)

        routes.sort(key=lambda r: (-r.score, MODE_ORDER.index(r.mode)))
        best = routes[0]
        logger.debug(
            f"Route {origin.name} -> {destination.name}: {best.name} "
            f"({priority.value}, score {best.score:.2f})"
        )

        return RouteResult(
            distance=distance,
            optimal_route=best,
            all_routes=routes,
            origin=origin.name,
            destination=destination.name,
        )

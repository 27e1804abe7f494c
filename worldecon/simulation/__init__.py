"""Logistics and world generation."""
from .transport import RouteEngine, RoutePriority, RouteResult, RouteCandidate, TransportMode, TRANSPORT_MODES
from .names import CityNameGenerator
from .directory import WorldDirectory, NearbyCity, CountryStatistics

__all__ = [
    'RouteEngine', 'RoutePriority', 'RouteResult', 'RouteCandidate', 'TransportMode', 'TRANSPORT_MODES',
    'CityNameGenerator',
    'WorldDirectory', 'NearbyCity', 'CountryStatistics',
]

"""Core world plumbing: events and static data registries.

The World container lives in worldecon.core.world; it is not re-exported here
because it depends on the simulation package, which depends on this one.
"""
from .events import (
    EventBus, Event, CityCreatedEvent, CitiesGeneratedEvent,
    TariffAppliedEvent, MonthlyUpdateEvent, YearlyUpdateEvent,
)
from .registries import (
    CountryInfo, CountryRegistry, CityNameRegistry,
    get_country_registry, get_city_name_registry,
)

__all__ = [
    'EventBus', 'Event', 'CityCreatedEvent', 'CitiesGeneratedEvent',
    'TariffAppliedEvent', 'MonthlyUpdateEvent', 'YearlyUpdateEvent',
    'CountryInfo', 'CountryRegistry', 'CityNameRegistry',
    'get_country_registry', 'get_city_name_registry',
]

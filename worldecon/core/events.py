"""Event bus for decoupled notifications from the world model."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
from uuid import UUID


@dataclass
class Event:
    """Base class for all events."""
    pass


@dataclass
class CityCreatedEvent(Event):
    """Fired when a city is generated and added to a country."""
    city_id: UUID
    city_name: str
    country_id: UUID | None


@dataclass
class CitiesGeneratedEvent(Event):
    """Fired when initial city generation completes."""
    city_count: int
    country_count: int


@dataclass
class TariffAppliedEvent(Event):
    """Fired when a cross-border tariff is folded into a shipping cost."""
    origin_country_id: UUID
    destination_country_id: UUID
    rate: float
    amount: float


@dataclass
class MonthlyUpdateEvent(Event):
    """Fired after every city and country has run its monthly update."""
    total_population: int
    total_purchasing_power: float


@dataclass
class YearlyUpdateEvent(Event):
    """Fired after every city and country has run its yearly update."""
    average_salary_level: float


EventHandler = Callable[[Event], None]


class EventBus:
    """Synchronous event bus: handlers run as soon as an event is published."""

    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[EventHandler]] = {}

    def subscribe(self, event_type: type[Event], handler: EventHandler) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[Event], handler: EventHandler) -> None:
        """Unsubscribe a handler from an event type. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Event) -> None:
        """Deliver an event to handlers of its type, then to handlers of its base classes."""
        event_type = type(event)

        for handler in list(self._handlers.get(event_type, [])):
            handler(event)

        for registered_type, handlers in list(self._handlers.items()):
            if registered_type is not event_type and isinstance(event, registered_type):
                for handler in list(handlers):
                    handler(event)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()

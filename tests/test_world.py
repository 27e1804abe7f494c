"""Tests for the world container, registries and event bus."""
import random

import pytest

from worldecon.config import WorldConfig
from worldecon.core.events import (
    Event, EventBus, CityCreatedEvent, MonthlyUpdateEvent, YearlyUpdateEvent,
)
from worldecon.core.registries import CountryInfo, get_country_registry
from worldecon.core.world import World, create_world
from worldecon.entities.country import Country, ProductDescriptor, ProductTier


class TestCountryRegistry:
    """Tests for the bundled country definitions."""

    def test_singleton(self):
        """Test that the registry is shared."""
        assert get_country_registry() is get_country_registry()

    def test_contents(self):
        """Test countries and continents in the data file."""
        registry = get_country_registry()

        assert len(registry) == 25
        assert registry.continents == ["NORTHERN", "SOUTHERN", "EASTERN", "WESTERN", "CENTRAL"]
        assert registry.get_all_names()[0] == "Valdoria"
        assert len(registry.get_by_continent("NORTHERN")) == 5
        assert registry.get("Atlantis") is None

    def test_country_info(self):
        """Test a single definition."""
        info = get_country_registry().get("Valdoria")

        assert info.continent == "NORTHERN"
        assert info.economic_level == "DEVELOPED"
        assert "Coal" in info.resources
        assert "ELECTRONICS" in info.specialization


class TestEventBus:
    """Tests for event publishing."""

    def test_publish_and_unsubscribe(self):
        """Test delivery and removal of a handler."""
        bus = EventBus()
        received = []
        bus.subscribe(YearlyUpdateEvent, received.append)

        bus.publish(YearlyUpdateEvent(average_salary_level=0.5))
        bus.unsubscribe(YearlyUpdateEvent, received.append)
        bus.publish(YearlyUpdateEvent(average_salary_level=0.6))

        assert len(received) == 1
        assert received[0].average_salary_level == 0.5

    def test_unsubscribe_unknown_handler(self):
        """Test that removing an unknown handler is ignored."""
        bus = EventBus()

        bus.unsubscribe(Event, print)

    def test_base_class_subscription(self):
        """Test that base class handlers see subclass events."""
        bus = EventBus()
        received = []
        bus.subscribe(Event, received.append)

        bus.publish(MonthlyUpdateEvent(total_population=1, total_purchasing_power=2))

        assert len(received) == 1

    def test_nested_publish_is_immediate(self):
        """Test that an event published from a handler is delivered before publish returns."""
        bus = EventBus()
        received = []

        def relay(event):
            received.append(event)
            if isinstance(event, MonthlyUpdateEvent):
                bus.publish(YearlyUpdateEvent(average_salary_level=0.1))

        bus.subscribe(Event, relay)
        bus.publish(MonthlyUpdateEvent(total_population=1, total_purchasing_power=2))

        assert [type(e) for e in received] == [MonthlyUpdateEvent, YearlyUpdateEvent]

    def test_handler_unsubscribes_itself(self):
        """Test that a handler may unsubscribe while being dispatched."""
        bus = EventBus()
        received = []

        def once(event):
            received.append(event)
            bus.unsubscribe(YearlyUpdateEvent, once)

        bus.subscribe(YearlyUpdateEvent, once)
        bus.publish(YearlyUpdateEvent(average_salary_level=0.1))
        bus.publish(YearlyUpdateEvent(average_salary_level=0.2))

        assert len(received) == 1

    def test_clear(self):
        """Test that clearing removes every handler."""
        bus = EventBus()
        received = []
        bus.subscribe(Event, received.append)

        bus.clear()
        bus.publish(YearlyUpdateEvent(average_salary_level=0.1))

        assert received == []


class TestCreateWorld:
    """Tests for building a world."""

    def test_default_world(self, rng):
        """Test a world from the bundled data."""
        world = create_world(rng)

        assert len(world.countries) == 25
        # 25 countries * 3 cities beats the default total of 8
        assert len(world.directory.cities) == 75
        assert all(len(c.cities) == 3 for c in world.countries)
        assert world.directory.total_population() == sum(c.population for c in world.countries)

    def test_continental_agreements(self, rng):
        """Test same-continent agreements."""
        world = create_world(rng)
        valdoria = world.get_country_by_name("Valdoria")
        crystalia = world.get_country_by_name("Crystalia")
        thalassia = world.get_country_by_name("Thalassia")
        product = ProductDescriptor(ProductTier.MANUFACTURED, "ELECTRONICS")

        assert len(valdoria.trade_agreements) == 4
        assert crystalia.id in valdoria.trade_agreements
        assert valdoria.get_tariff(product, crystalia) == 0.0
        assert valdoria.get_tariff(product, thalassia) == pytest.approx(0.225)

    def test_without_agreements(self, rng):
        """Test a world with tariff agreements disabled."""
        world = create_world(rng, continental_agreements=False)

        assert all(not c.trade_agreements for c in world.countries)

    def test_custom_countries_and_count(self, rng):
        """Test explicit country definitions and city count."""
        infos = [
            CountryInfo(name="Alpha", continent="NORTHERN", economic_level="DEVELOPED"),
            CountryInfo(name="Beta", continent="SOUTHERN", economic_level="DEVELOPING"),
        ]
        bus = EventBus()
        created = []
        bus.subscribe(CityCreatedEvent, created.append)

        world = create_world(rng, country_infos=infos, city_count=10, event_bus=bus)

        assert [c.name for c in world.countries] == ["Alpha", "Beta"]
        assert len(world.directory.cities) == 10
        assert len(created) == 10

    def test_same_seed_same_world(self):
        """Test that generation is reproducible from the seed."""
        first = create_world(random.Random(42))
        second = create_world(random.Random(42))

        def snapshot(world):
            return [(c.name, c.population, c.salary_level) for c in world.directory.get_all_cities()]

        assert snapshot(first) == snapshot(second)

    def test_lookups(self, rng):
        """Test country lookups."""
        world = create_world(rng)
        valdoria = world.get_country_by_name("Valdoria")

        assert world.get_country(valdoria.id) is valdoria
        assert world.get_country_by_name("Atlantis") is None


class TestWorldUpdates:
    """Tests for periodic updates."""

    @pytest.fixture
    def world(self):
        countries = [
            Country(name="Alpha", continent="NORTHERN"),
            Country(name="Beta", continent="SOUTHERN"),
        ]
        world = World(countries, config=WorldConfig())
        world.directory.generate_initial_cities(random.Random(5))
        return world

    def test_monthly_update(self, world, rng):
        """Test that GDP follows the updated cities and an event is published."""
        events = []
        world.event_bus.subscribe(MonthlyUpdateEvent, events.append)

        world.update_monthly(rng)

        for country in world.countries:
            assert country.gdp == country.calculate_gdp()
            assert 0.0 <= country.inflation_rate <= 0.15
        assert len(events) == 1
        assert events[0].total_population == world.directory.total_population()
        assert events[0].total_purchasing_power == world.directory.total_purchasing_power()

    def test_yearly_update(self, world, rng):
        """Test quota reset and the yearly event."""
        events = []
        world.event_bus.subscribe(YearlyUpdateEvent, events.append)
        alpha = world.get_country_by_name("Alpha")
        alpha.set_quota("wheat", 10)
        alpha.record_import(ProductDescriptor(ProductTier.RAW, "FOOD", id="wheat"), 10)

        world.update_yearly(rng)

        assert alpha.quotas["wheat"].used == 0
        assert len(events) == 1
        assert events[0].average_salary_level == pytest.approx(world.directory.average_salary_level())

    def test_many_months_keep_invariants(self, world, rng):
        """Test bounds over a simulated decade."""
        config = world.config

        for month in range(120):
            world.update_monthly(rng)
            if month % 12 == 11:
                world.update_yearly(rng)

        for city in world.directory.get_all_cities():
            assert config.min_population <= city.population <= config.max_population
            assert config.salary_level.min <= city.salary_level <= config.salary_level.max

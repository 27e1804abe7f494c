"""Tests for world configuration."""
import json
import logging

import pytest

from worldecon.config import (
    ConfigError,
    DemographicsConfig,
    GrowthRateConfig,
    SalaryLevelConfig,
    WorldConfig,
    clamp,
    load_config,
)


class TestClamp:
    """Tests for the clamp helper."""

    def test_inside_and_outside(self):
        """Test values inside and outside the bounds."""
        assert clamp(5, 0, 10) == 5
        assert clamp(-1, 0, 10) == 0
        assert clamp(11, 0, 10) == 10

    def test_inverted_bounds(self):
        """Test that inverted bounds are rejected."""
        with pytest.raises(ValueError):
            clamp(1, 10, 0)


class TestWorldConfig:
    """Tests for config validation and clamping."""

    def test_defaults(self):
        """Test the default configuration."""
        config = WorldConfig()

        assert config.min_population == 250_000
        assert config.max_population == 5_000_000
        assert config.initial_city_count == 8
        assert config.min_cities_per_country == 3
        assert config.population_range == 4_750_000
        assert config.salary_level.min == pytest.approx(0.1)
        assert config.demographics.employment_rate == pytest.approx(0.85)

    def test_is_immutable(self):
        """Test that a built config cannot be changed."""
        config = WorldConfig()

        with pytest.raises(AttributeError):
            config.min_population = 1

    def test_inverted_population_range(self):
        """Test that min greater than max is rejected."""
        with pytest.raises(ConfigError):
            WorldConfig(min_population=10, max_population=5)

    def test_invalid_sections(self):
        """Test section validation."""
        with pytest.raises(ConfigError):
            SalaryLevelConfig(min=0.8, max=0.2)
        with pytest.raises(ConfigError):
            SalaryLevelConfig(default=2.0)
        with pytest.raises(ConfigError):
            DemographicsConfig(employment_rate=1.5)
        with pytest.raises(ConfigError):
            GrowthRateConfig(min=0.01, max=0.001)

    def test_config_error_is_value_error(self):
        """Test that config errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            WorldConfig(initial_city_count=-1)

    def test_clamp_population(self):
        """Test population clamping."""
        config = WorldConfig()

        assert config.clamp_population(100) == 250_000
        assert config.clamp_population(1_000_000.7) == 1_000_000
        assert config.clamp_population(9e9) == 5_000_000

    def test_clamp_salary_level(self):
        """Test salary level clamping."""
        config = WorldConfig()

        assert config.clamp_salary_level(0.05) == pytest.approx(0.1)
        assert config.clamp_salary_level(0.4) == pytest.approx(0.4)
        assert config.clamp_salary_level(1.3) == pytest.approx(1.0)


class TestConfigLoading:
    """Tests for building configs from dicts and files."""

    def test_from_dict(self):
        """Test overriding scalars and sections."""
        config = WorldConfig.from_dict({
            "min_population": 100_000,
            "initial_city_count": 20,
            "demographics": {"employment_rate": 0.9},
        })

        assert config.min_population == 100_000
        assert config.initial_city_count == 20
        assert config.demographics.employment_rate == pytest.approx(0.9)
        assert config.demographics.non_working_percentage == pytest.approx(0.3)

    def test_unknown_keys_warn(self, caplog):
        """Test that unknown keys are logged and ignored."""
        with caplog.at_level(logging.WARNING, logger="worldecon.config"):
            config = WorldConfig.from_dict({"bogus": 1, "salary_level": {"extra": 2}})

        assert config == WorldConfig()
        assert "bogus" in caplog.text
        assert "salary_level.extra" in caplog.text

    def test_section_must_be_mapping(self):
        """Test that a scalar section is rejected."""
        with pytest.raises(ConfigError):
            WorldConfig.from_dict({"demographics": 0.5})

    def test_invalid_values_raise(self):
        """Test that invalid values surface as ConfigError."""
        with pytest.raises(ConfigError):
            WorldConfig.from_dict({"min_population": 10, "max_population": 1})

    def test_load_config(self, tmp_path):
        """Test loading a JSON config file."""
        path = tmp_path / "world.json"
        path.write_text(json.dumps({"max_population": 2_000_000}))

        config = load_config(path)

        assert config.max_population == 2_000_000

    def test_load_missing_file(self, tmp_path):
        """Test that a missing file raises ConfigError."""
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path):
        """Test that malformed JSON raises ConfigError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_load_non_object_root(self, tmp_path):
        """Test that a JSON list is rejected."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(ConfigError):
            load_config(path)

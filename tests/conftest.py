"""Shared fixtures."""
import random

import pytest

from worldecon.config import WorldConfig


class FixedRandom(random.Random):
    """Random generator whose random() always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def fixed_rng():
    """Factory for generators returning a constant."""
    return FixedRandom


@pytest.fixture
def config():
    return WorldConfig()

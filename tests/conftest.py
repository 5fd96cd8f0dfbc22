# tests/conftest.py
import pytest

import caliper.units.registry as regmod
from caliper.units.registry import DEFAULT_REGISTRY as _ureg
from caliper.units.registry import UnitsRegistry


@pytest.fixture(scope="session")
def ureg():
    return _ureg


@pytest.fixture()
def reg():
    """Fresh, fully-bootstrapped UnitsRegistry for isolation per test."""
    return regmod._bootstrap_default_registry()


@pytest.fixture()
def bare():
    """A registry holding nothing but its unity unit."""
    return UnitsRegistry()

"""Pytest configuration and shared fixtures."""

import copy

import pytest
import yaml

from trailrank.config import reset_config
from trailrank.config.catalog_loader import DEFAULT_CATALOG_PATH, Catalog, CatalogLoader
from trailrank.types import ExperienceLevel, UserPreferences


@pytest.fixture(autouse=True)
def _reset_global_config(monkeypatch):
    """Isolate each test from the config singleton and user config files."""
    monkeypatch.delenv("TRAILRANK_CONFIG_PATH", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def catalog_data() -> dict:
    """Raw seed catalog as parsed from the bundled YAML."""
    with open(DEFAULT_CATALOG_PATH) as f:
        return yaml.safe_load(f)


@pytest.fixture
def seed_catalog() -> Catalog:
    """Seed catalog loaded through the loader."""
    return CatalogLoader().load()


@pytest.fixture
def make_catalog(catalog_data):
    """Build a catalog from a mutated copy of the seed data."""
    def _make(mutate=None) -> Catalog:
        data = copy.deepcopy(catalog_data)
        if mutate is not None:
            mutate(data)
        return CatalogLoader.from_dict(data)
    return _make


@pytest.fixture
def intermediate_prefs() -> UserPreferences:
    """Intermediate hiker from Jakarta with no stated interests."""
    return UserPreferences(
        experience_level=ExperienceLevel.INTERMEDIATE,
        fitness_level=5,
        budget_range="1m_2m",
        time_commitment="2_days",
        location="jakarta",
        group_size=2,
    )


@pytest.fixture
def beginner_prefs() -> UserPreferences:
    """Beginner on a tight budget."""
    return UserPreferences(
        experience_level=ExperienceLevel.BEGINNER,
        fitness_level=3,
        budget_range="500k_1m",
        time_commitment="full_day",
        location="yogyakarta",
        group_size=1,
    )

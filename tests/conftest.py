"""Pytest configuration and fixtures for SiteMatch tests.

Provides common fixtures for testing.
"""

from __future__ import annotations

import logging
import os
from datetime import date, timedelta
from decimal import Decimal

import pytest
import structlog

from sitematch.config import AppConfig, reset_config
from sitematch.models import InstallationDifficulty, Product, ProjectSpecification

DAY_0 = date(2025, 3, 3)

_ENV_VARS = (
    "LOG_LEVEL",
    "JSON_LOGS",
    "SITEMATCH_CATALOG",
    "SITEMATCH_MAX_RESULTS",
    "SITEMATCH_STRICT_INGESTION",
    "SITEMATCH_RULES_FILE",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Isolate every test from the caller's environment and cached config."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    for var in [k for k in os.environ if k.startswith("SCORE_")]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo configure_logging() so handlers never outlive a test's captured streams."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def app_config() -> AppConfig:
    """Default application configuration."""
    return AppConfig()


def make_product(**overrides) -> Product:
    """Build an in-stock CA lumber product with field overrides."""
    fields = {
        "product_id": "LUM-0001",
        "name": "Douglas Fir 2x4 Stud",
        "category": "Lumber",
        "manufacturer": "BuildCo",
        "price": Decimal("100"),
        "stock_qty": 50,
        "lead_time_days": 5,
        "origin_region": "CA",
        "applicable_project_types": frozenset({"Residential"}),
        "installation_difficulty": InstallationDifficulty.EASY,
    }
    fields.update(overrides)
    return Product(**fields)


def make_spec(**overrides) -> ProjectSpecification:
    """Build a residential CA specification with field overrides."""
    fields = {
        "name": "Maple Street Duplex",
        "project_type": "Residential",
        "location": "CA",
        "max_budget": Decimal("200"),
        "start_date": DAY_0,
        "end_date": DAY_0 + timedelta(days=20),
    }
    fields.update(overrides)
    return ProjectSpecification(**fields)


@pytest.fixture
def sample_product() -> Product:
    """Create a sample in-stock lumber product."""
    return make_product()


@pytest.fixture
def sample_spec() -> ProjectSpecification:
    """Create a sample residential project in CA."""
    return make_spec()


CATALOG_HEADER = (
    "productId,productName,category,manufacturer,price,unit,minOrderQty,stockQty,"
    "leadTimeDays,warehouseLocation,weight,dimensions,restrictedStates,"
    "applicableProjectTypes,certifications,ecoFriendly,recyclable,sustainableSource,"
    "warrantyYears,fireRating,installationDifficulty,description"
)


@pytest.fixture
def catalog_csv(tmp_path):
    """Write a small valid catalog CSV and return its path."""
    rows = [
        CATALOG_HEADER,
        "LUM-0001,Douglas Fir 2x4 Stud,Lumber,BuildCo,100.00,ea,1,50,5,CA,4.5,2x4x96,"
        "HI,Residential;Renovation,FSC Certified,No,Yes,Yes,0,,Easy,Kiln-dried stud",
        "ROF-0002,Architectural Shingle,Roofing,TopCover,45.50,bundle,3,0,10,TX,30,,"
        ",Residential;Commercial,UL Listed;Energy Star,Yes,Yes,No,25,Class A,"
        "Professional Required,Laminated shingle",
        "STL-0003,Steel I-Beam,Steel,IronWorks,850,ea,1,12,14,OH,500,W8x10,"
        "CA;OR,Commercial;Industrial,ASTM A992,No,Yes,No,10,,Complex,Structural beam",
    ]
    path = tmp_path / "catalog.csv"
    path.write_text("\n".join(rows) + "\n")
    return path


@pytest.fixture
def product_factory():
    """Factory for products with field overrides."""
    return make_product


@pytest.fixture
def spec_factory():
    """Factory for specifications with field overrides."""
    return make_spec

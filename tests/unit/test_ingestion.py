"""Unit tests for catalog and specification ingestion."""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from sitematch.ingestion.catalog import (
    CatalogValidationError,
    ingest_catalog,
    parse_catalog_frame,
)
from sitematch.ingestion.specs import SpecificationError, load_specification
from sitematch.models import InstallationCapability, InstallationDifficulty


def _frame(**overrides) -> pd.DataFrame:
    row = {
        "productId": "LUM-0001",
        "productName": "Douglas Fir 2x4 Stud",
        "category": "Lumber",
        "price": "6.45",
        "leadTimeDays": "5",
        "warehouseLocation": "OR",
    }
    row.update(overrides)
    return pd.DataFrame([row])


class TestIngestCatalog:
    """Test CSV catalog ingestion."""

    def test_parses_every_row(self, catalog_csv):
        """Test a valid catalog yields typed products in file order."""
        products, errors = ingest_catalog(catalog_csv)

        assert errors == []
        assert [p.product_id for p in products] == ["LUM-0001", "ROF-0002", "STL-0003"]

    def test_sets_and_flags(self, catalog_csv):
        """Test delimited sets and Yes/No flags are parsed once."""
        products, _ = ingest_catalog(catalog_csv)
        shingle = products[1]

        assert shingle.certifications == frozenset({"UL Listed", "Energy Star"})
        assert shingle.applicable_project_types == frozenset({"Residential", "Commercial"})
        assert shingle.restricted_regions == frozenset()
        assert shingle.eco_friendly is True
        assert shingle.sustainable_source is False
        assert shingle.installation_difficulty == InstallationDifficulty.PROFESSIONAL_REQUIRED
        assert shingle.fire_rating == "Class A"
        assert products[2].restricted_regions == frozenset({"CA", "OR"})

    def test_numeric_fields(self, catalog_csv):
        """Test numbers are typed, with prices as Decimal."""
        products, _ = ingest_catalog(catalog_csv)
        shingle = products[1]

        assert shingle.price == Decimal("45.50")
        assert shingle.min_order_qty == 3
        assert shingle.stock_qty == 0
        assert shingle.lead_time_days == 10
        assert shingle.warranty_years == 25
        assert shingle.weight == 30.0

    def test_missing_file(self, tmp_path):
        """Test a missing catalog raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ingest_catalog(tmp_path / "missing.csv")

    def test_unsupported_format(self, tmp_path):
        """Test unknown extensions are rejected."""
        path = tmp_path / "catalog.txt"
        path.write_text("productId\n")

        with pytest.raises(ValueError, match="Unsupported file format"):
            ingest_catalog(path)

    def test_missing_required_columns(self, tmp_path):
        """Test a catalog without required columns is rejected outright."""
        path = tmp_path / "catalog.csv"
        path.write_text("productId,productName\nA,Widget\n")

        with pytest.raises(ValueError, match="Missing required columns"):
            ingest_catalog(path)


class TestRowValidation:
    """Test per-row typed parsing and error reporting."""

    def test_minimal_row_defaults(self):
        """Test optional columns default when absent."""
        products, errors = parse_catalog_frame(_frame())

        assert errors == []
        product = products[0]
        assert product.min_order_qty == 1
        assert product.stock_qty == 0
        assert product.warranty_years == 0
        assert product.weight == 0.0
        assert product.installation_difficulty == InstallationDifficulty.MODERATE

    def test_empty_price_is_an_error(self):
        """Test an empty price is reported, not coerced to zero."""
        products, errors = parse_catalog_frame(_frame(price=""))

        assert products == []
        assert len(errors) == 1
        assert errors[0].field == "price"
        assert errors[0].message == "Missing value"

    def test_unparseable_lead_time(self):
        """Test a non-numeric lead time is reported with its column."""
        _, errors = parse_catalog_frame(_frame(leadTimeDays="soon"))

        assert errors[0].field == "leadTimeDays"
        assert "Not a number" in errors[0].message

    def test_non_finite_price(self):
        """Test NaN and infinite prices are rejected."""
        for text in ("NaN", "Infinity"):
            _, errors = parse_catalog_frame(_frame(price=text))

            assert errors[0].field == "price"

    def test_negative_lead_time(self):
        """Test negative lead times fail model validation."""
        _, errors = parse_catalog_frame(_frame(leadTimeDays="-3"))

        assert errors[0].field == "lead_time_days"

    def test_fractional_integer_rejected(self):
        """Test fractional stock quantities are rejected."""
        _, errors = parse_catalog_frame(_frame(stockQty="2.5"))

        assert errors[0].field == "stockQty"

    def test_whole_float_accepted(self):
        """Test spreadsheet-style whole numbers parse as integers."""
        products, _ = parse_catalog_frame(_frame(stockQty="12.0"))

        assert products[0].stock_qty == 12

    def test_bad_flag(self):
        """Test flags must be Yes/No."""
        _, errors = parse_catalog_frame(_frame(ecoFriendly="maybe"))

        assert errors[0].field == "ecoFriendly"

    def test_unknown_difficulty(self):
        """Test unknown installation difficulty is reported."""
        _, errors = parse_catalog_frame(_frame(installationDifficulty="Trivial"))

        assert errors[0].field == "installationDifficulty"

    def test_model_validation_error_reported(self):
        """Test a negative price surfaces the model validation error."""
        _, errors = parse_catalog_frame(_frame(price="-1"))

        assert errors[0].field == "price"
        assert "non-negative" in errors[0].message

    def test_duplicate_ids(self):
        """Test a repeated product id is rejected after the first."""
        df = pd.concat([_frame(), _frame(productName="Copy")], ignore_index=True)

        products, errors = parse_catalog_frame(df)

        assert [p.name for p in products] == ["Douglas Fir 2x4 Stud"]
        assert errors[0].row == 1
        assert "Duplicate product id" in errors[0].message

    def test_error_str(self):
        """Test row errors render with row and column."""
        _, errors = parse_catalog_frame(_frame(price=""))

        assert str(errors[0]) == "Row 0: price: Missing value"


class TestStrictMode:
    """Test strict ingestion."""

    def test_strict_rejects_catalog(self, tmp_path, catalog_csv):
        """Test one bad row rejects the whole catalog in strict mode."""
        path = tmp_path / "bad.csv"
        lines = catalog_csv.read_text().splitlines()
        lines.append(lines[1].replace("LUM-0001", "LUM-0009").replace("100.00", "abc"))
        path.write_text("\n".join(lines) + "\n")

        with pytest.raises(CatalogValidationError) as exc_info:
            ingest_catalog(path, strict=True)

        assert len(exc_info.value.errors) == 1
        assert exc_info.value.errors[0].field == "price"

    def test_lenient_skips_bad_rows(self, tmp_path, catalog_csv):
        """Test lenient mode keeps valid rows and reports the rest."""
        path = tmp_path / "bad.csv"
        lines = catalog_csv.read_text().splitlines()
        lines.append(lines[1].replace("LUM-0001", "LUM-0009").replace("100.00", "abc"))
        path.write_text("\n".join(lines) + "\n")

        products, errors = ingest_catalog(path)

        assert len(products) == 3
        assert len(errors) == 1


class TestLoadSpecification:
    """Test YAML/JSON specification loading."""

    def test_yaml(self, tmp_path):
        """Test a YAML specification loads and validates."""
        path = tmp_path / "project.yaml"
        path.write_text(
            "name: Maple Street Duplex\n"
            "project_type: Residential\n"
            "location: ca\n"
            "max_budget: 25000\n"
            "start_date: 2025-03-01\n"
            "end_date: 2025-06-30\n"
            "required_categories: [Lumber, Roofing]\n"
            "installation_capability: DIY\n"
        )

        spec = load_specification(path)

        assert spec.location == "CA"
        assert spec.max_budget == Decimal("25000")
        assert spec.start_date == date(2025, 3, 1)
        assert spec.required_categories == ["Lumber", "Roofing"]
        assert spec.installation_capability == InstallationCapability.DIY

    def test_json(self, tmp_path):
        """Test a JSON specification loads and validates."""
        path = tmp_path / "project.json"
        path.write_text(
            json.dumps(
                {
                    "name": "Warehouse",
                    "location": "TX",
                    "start_date": "2025-01-01",
                    "end_date": "2025-02-01",
                }
            )
        )

        assert load_specification(path).name == "Warehouse"

    def test_validation_error_wrapped(self, tmp_path):
        """Test model validation failures raise SpecificationError."""
        path = tmp_path / "project.yaml"
        path.write_text("name: Missing dates\nlocation: CA\n")

        with pytest.raises(SpecificationError, match="Invalid specification"):
            load_specification(path)

    def test_malformed_yaml(self, tmp_path):
        """Test malformed YAML raises SpecificationError."""
        path = tmp_path / "project.yaml"
        path.write_text("name: [unclosed\n")

        with pytest.raises(SpecificationError):
            load_specification(path)

    def test_not_a_mapping(self, tmp_path):
        """Test a top-level list is rejected."""
        path = tmp_path / "project.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(SpecificationError, match="Expected a mapping"):
            load_specification(path)

    def test_missing_file(self, tmp_path):
        """Test a missing specification raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_specification(tmp_path / "missing.yaml")

"""Product catalog ingestion for SiteMatch.

Parses CSV/XLSX catalogs into typed Product records. Validation happens here,
once, so the matching engine never sees delimited strings or coerced blanks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import ValidationError

from sitematch.models import InstallationDifficulty, Product

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {
    "productId",
    "productName",
    "category",
    "price",
    "leadTimeDays",
    "warehouseLocation",
}

_TRUE_VALUES = {"yes", "y", "true", "1"}
_FALSE_VALUES = {"no", "n", "false", "0", ""}


@dataclass(frozen=True)
class CatalogRowError:
    """A single rejected catalog row."""

    row: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"Row {self.row}: {self.field}: {self.message}"


class CatalogValidationError(ValueError):
    """Raised in strict mode when any catalog row fails validation."""

    def __init__(self, errors: list[CatalogRowError]):
        self.errors = errors
        preview = "; ".join(str(e) for e in errors[:5])
        super().__init__(f"{len(errors)} invalid catalog rows: {preview}")


def ingest_catalog(
    file_path: Path, strict: bool = False
) -> tuple[list[Product], list[CatalogRowError]]:
    """Ingest a product catalog from a CSV or XLSX file.

    Expected columns:
    - productId, productName, category, price, leadTimeDays, warehouseLocation (required)
    - manufacturer, unit, minOrderQty, stockQty, weight, dimensions (optional)
    - restrictedStates, applicableProjectTypes, certifications (optional, ';'-separated)
    - ecoFriendly, recyclable, sustainableSource (optional, Yes/No)
    - warrantyYears, fireRating, installationDifficulty, description (optional)

    Args:
        file_path: Path to CSV or XLSX file
        strict: Reject the whole catalog if any row is invalid

    Returns:
        Tuple of (products, row_errors) with products in file order

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is unsupported or required columns are missing
        CatalogValidationError: In strict mode, if any row is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Catalog not found: {file_path}")

    # Read everything as text; typing happens per field below
    if file_path.suffix.lower() == ".csv":
        df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
    elif file_path.suffix.lower() in (".xlsx", ".xls"):
        df = pd.read_excel(file_path, dtype=str, keep_default_na=False)
    else:
        raise ValueError(f"Unsupported file format: {file_path.suffix}")

    products, errors = parse_catalog_frame(df)

    logger.info(
        f"Ingested {len(products)} products from {file_path} ({len(errors)} rejected rows)"
    )

    if strict and errors:
        raise CatalogValidationError(errors)

    return products, errors


def parse_catalog_frame(df: pd.DataFrame) -> tuple[list[Product], list[CatalogRowError]]:
    """Parse a catalog DataFrame into Products.

    Args:
        df: DataFrame with catalog columns (string cells)

    Returns:
        Tuple of (products, row_errors)

    Raises:
        ValueError: If required columns are missing
    """
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {sorted(missing)}")

    products: list[Product] = []
    errors: list[CatalogRowError] = []
    seen_ids: set[str] = set()

    for idx, row in df.iterrows():
        row_dict = row.to_dict()
        try:
            product = _parse_row(row_dict)
        except _RowError as e:
            errors.append(CatalogRowError(row=idx, field=e.field, message=e.message))
            continue
        except ValidationError as e:
            for err in e.errors():
                field = ".".join(str(part) for part in err["loc"]) or "row"
                errors.append(CatalogRowError(row=idx, field=field, message=err["msg"]))
            continue

        if product.product_id in seen_ids:
            errors.append(
                CatalogRowError(
                    row=idx,
                    field="productId",
                    message=f"Duplicate product id {product.product_id!r}",
                )
            )
            continue

        seen_ids.add(product.product_id)
        products.append(product)

    return products, errors


class _RowError(Exception):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def _parse_row(row: dict[str, Any]) -> Product:
    product_id = _text(row, "productId")
    name = _text(row, "productName")
    category = _text(row, "category")
    if not product_id:
        raise _RowError("productId", "Missing product id")
    if not name:
        raise _RowError("productName", "Missing product name")
    if not category:
        raise _RowError("category", "Missing category")

    return Product(
        product_id=product_id,
        name=name,
        category=category,
        manufacturer=_text(row, "manufacturer"),
        price=_required_decimal(row, "price"),
        unit=_text(row, "unit") or "ea",
        min_order_qty=_optional_int(row, "minOrderQty", default=1),
        stock_qty=_optional_int(row, "stockQty", default=0),
        lead_time_days=_required_int(row, "leadTimeDays"),
        origin_region=_text(row, "warehouseLocation"),
        weight=_optional_float(row, "weight", default=0.0),
        dimensions=_text(row, "dimensions"),
        restricted_regions=_split_set(row, "restrictedStates"),
        applicable_project_types=_split_set(row, "applicableProjectTypes"),
        certifications=_split_set(row, "certifications"),
        eco_friendly=_flag(row, "ecoFriendly"),
        recyclable=_flag(row, "recyclable"),
        sustainable_source=_flag(row, "sustainableSource"),
        warranty_years=_optional_int(row, "warrantyYears", default=0),
        fire_rating=_text(row, "fireRating") or None,
        installation_difficulty=_difficulty(row),
        description=_text(row, "description"),
    )


def _text(row: dict[str, Any], key: str) -> str:
    value = row.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _split_set(row: dict[str, Any], key: str) -> frozenset[str]:
    return frozenset(part.strip() for part in _text(row, key).split(";") if part.strip())


def _flag(row: dict[str, Any], key: str) -> bool:
    text = _text(row, key).lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise _RowError(key, f"Expected Yes/No, got {text!r}")


def _required_decimal(row: dict[str, Any], key: str) -> Decimal:
    text = _text(row, key)
    if not text:
        raise _RowError(key, "Missing value")
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise _RowError(key, f"Not a number: {text!r}") from e
    if not value.is_finite():
        raise _RowError(key, f"Not a number: {text!r}")
    return value


def _to_int(key: str, text: str) -> int:
    try:
        number = float(text)
    except ValueError as e:
        raise _RowError(key, f"Not a number: {text!r}") from e
    if not number.is_integer():
        raise _RowError(key, f"Expected a whole number, got {text!r}")
    return int(number)


def _required_int(row: dict[str, Any], key: str) -> int:
    text = _text(row, key)
    if not text:
        raise _RowError(key, "Missing value")
    return _to_int(key, text)


def _optional_int(row: dict[str, Any], key: str, default: int) -> int:
    text = _text(row, key)
    if not text:
        return default
    return _to_int(key, text)


def _optional_float(row: dict[str, Any], key: str, default: float) -> float:
    text = _text(row, key)
    if not text:
        return default
    try:
        return float(text)
    except ValueError as e:
        raise _RowError(key, f"Not a number: {text!r}") from e


def _difficulty(row: dict[str, Any]) -> InstallationDifficulty:
    text = _text(row, "installationDifficulty")
    if not text:
        return InstallationDifficulty.MODERATE
    for level in InstallationDifficulty:
        if level.value.lower() == text.lower():
            return level
    raise _RowError("installationDifficulty", f"Unknown difficulty {text!r}")

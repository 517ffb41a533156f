"""Data ingestion module for SiteMatch.

Handles importing product catalogs and project specifications.
"""

from sitematch.ingestion.catalog import CatalogRowError, CatalogValidationError, ingest_catalog
from sitematch.ingestion.specs import SpecificationError, load_specification

__all__ = [
    "CatalogRowError",
    "CatalogValidationError",
    "SpecificationError",
    "ingest_catalog",
    "load_specification",
]

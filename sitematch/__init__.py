"""SiteMatch - construction product matching and project feasibility analysis."""

from sitematch.analysis.project import analyze_project
from sitematch.catalog_store import CatalogStore
from sitematch.matching.orchestrator import find_matches
from sitematch.models import (
    MatchResult,
    Product,
    ProjectAnalysis,
    ProjectSpecification,
)

__version__ = "0.1.0"

__all__ = [
    "CatalogStore",
    "MatchResult",
    "Product",
    "ProjectAnalysis",
    "ProjectSpecification",
    "analyze_project",
    "find_matches",
]

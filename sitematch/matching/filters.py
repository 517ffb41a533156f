"""Eligibility filters applied to the catalog before scoring.

Every filter is pure: it returns a new list holding the surviving products in
their original relative order and never touches the input.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from sitematch.models import Product, ProjectSpecification


def filter_by_location(products: Sequence[Product], region: str) -> list[Product]:
    """Drop products that may not be sold in ``region``.

    Args:
        products: Products to filter
        region: Destination region code

    Returns:
        Products legal in the region
    """
    region = region.strip().upper()
    return [p for p in products if region not in p.restricted_regions]


def filter_by_project_type(
    products: Sequence[Product], project_type: str | None
) -> list[Product]:
    """Keep products applicable to ``project_type``; no-op when it is unset."""
    if not project_type:
        return list(products)
    return [p for p in products if project_type in p.applicable_project_types]


def filter_by_categories(
    products: Sequence[Product], categories: Iterable[str] | None
) -> list[Product]:
    """Keep products in one of ``categories``; no-op when none are given."""
    wanted = set(categories or ())
    if not wanted:
        return list(products)
    return [p for p in products if p.category in wanted]


def filter_by_certifications(
    products: Sequence[Product], required: Iterable[str] | None
) -> list[Product]:
    """Keep products holding every certification in ``required``.

    Args:
        products: Products to filter
        required: Certifications the product must all hold

    Returns:
        Products whose certification set is a superset of ``required``
    """
    required_set = frozenset(required or ())
    if not required_set:
        return list(products)
    return [p for p in products if required_set <= p.certifications]


def filter_by_eco_preferences(
    products: Sequence[Product],
    eco_friendly: bool = False,
    sustainable: bool = False,
    recyclable: bool = False,
) -> list[Product]:
    """Keep products satisfying every requested environmental preference."""
    filtered = list(products)
    if eco_friendly:
        filtered = [p for p in filtered if p.eco_friendly]
    if sustainable:
        filtered = [p for p in filtered if p.sustainable_source]
    if recyclable:
        filtered = [p for p in filtered if p.recyclable]
    return filtered


def filter_by_budget(
    products: Sequence[Product],
    max_budget: Decimal | None,
    cushion: float = 0.9,
) -> list[Product]:
    """Keep products whose unit price fits within ``max_budget * cushion``.

    Not part of the default chain. No-op when the budget is missing or zero.
    """
    if not max_budget:
        return list(products)
    effective = max_budget * Decimal(str(cushion))
    return [p for p in products if p.price <= effective]


def filter_by_stock(
    products: Sequence[Product], in_stock_only: bool = False
) -> list[Product]:
    """Keep in-stock products when ``in_stock_only`` is set. Not part of the default chain."""
    if not in_stock_only:
        return list(products)
    return [p for p in products if p.in_stock]


@dataclass
class FilterChainResult:
    """Candidates surviving the chain plus per-stage survivor counts."""

    candidates: list[Product]
    stage_counts: dict[str, int] = field(default_factory=dict)
    eco_filter_skipped: bool = False


def run_filter_chain(
    products: Sequence[Product], spec: ProjectSpecification
) -> FilterChainResult:
    """Run the eligibility filters in their fixed order.

    Order:
    1. Region legality (always)
    2. Project type (if spec.project_type)
    3. Category (if spec.required_categories)
    4. Certifications, all-of (if spec.require_certifications)
    5. Eco/sustainable preference, only kept if it leaves a candidate

    Args:
        products: Full catalog
        spec: Project specification

    Returns:
        FilterChainResult with candidates in catalog order
    """
    counts: dict[str, int] = {"catalog": len(products)}

    candidates = filter_by_location(products, spec.location)
    counts["location"] = len(candidates)

    candidates = filter_by_project_type(candidates, spec.project_type)
    counts["project_type"] = len(candidates)

    candidates = filter_by_categories(candidates, spec.required_categories)
    counts["categories"] = len(candidates)

    if spec.require_certifications:
        candidates = filter_by_certifications(candidates, spec.required_certifications)
    counts["certifications"] = len(candidates)

    eco_skipped = False
    if spec.eco_friendly_preference or spec.sustainable_preference:
        eco_filtered = filter_by_eco_preferences(
            candidates,
            eco_friendly=spec.eco_friendly_preference,
            sustainable=spec.sustainable_preference,
        )
        # A preference never empties the result set
        if eco_filtered:
            candidates = eco_filtered
        elif candidates:
            eco_skipped = True
    counts["eco"] = len(candidates)

    return FilterChainResult(
        candidates=candidates, stage_counts=counts, eco_filter_skipped=eco_skipped
    )


def apply_filter_chain(
    products: Sequence[Product], spec: ProjectSpecification
) -> list[Product]:
    """Convenience function: candidates surviving the fixed filter chain."""
    return run_filter_chain(products, spec).candidates

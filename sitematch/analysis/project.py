"""Project-level feasibility analysis over a ranked match list.

Business outcomes (over budget, late deliveries, missing categories) are
reported as risk and recommendation strings, never raised.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

import structlog

from sitematch.models import (
    CategoryPick,
    MatchResult,
    ProjectAnalysis,
    ProjectSpecification,
    TimelineAnalysis,
)

logger = structlog.get_logger(__name__)

BUDGET_RECOMMENDATION = "Consider adjusting product selections or increasing budget"
TIMELINE_RECOMMENDATION = (
    "Consider adjusting timeline or selecting faster-shipping alternatives"
)
CATEGORY_RECOMMENDATION = "Expand search criteria or consider alternative categories"


class ProjectAnalyzer:
    """Turn ranked matches into a cost, timeline and risk report."""

    def analyze(
        self, matches: Sequence[MatchResult], spec: ProjectSpecification
    ) -> ProjectAnalysis:
        """Analyze a ranked match list.

        Steps:
        1. Group by category; the first match per category is its best
        2. Sum representative unit prices into the estimated total
        3. Budget overrun check
        4. Late delivery check
        5. Missing required categories check

        Args:
            matches: Matches sorted by score descending (not modified)
            spec: Project specification

        Returns:
            ProjectAnalysis
        """
        risks: list[str] = []
        recommendations: list[str] = []

        breakdown = self._category_breakdown(matches)
        total_cost = sum((pick.cost for pick in breakdown.values()), Decimal("0"))

        if spec.max_budget and total_cost > spec.max_budget:
            risks.append(
                f"Estimated cost (${total_cost:.2f}) exceeds budget (${spec.max_budget:.2f})"
            )
            recommendations.append(BUDGET_RECOMMENDATION)

        late = [m for m in matches if not m.meets_timeline]
        if late:
            risks.append(f"{len(late)} products cannot meet timeline")
            recommendations.append(TIMELINE_RECOMMENDATION)

        if spec.required_categories:
            missing = [c for c in spec.required_categories if c not in breakdown]
            if missing:
                risks.append(f"No products found for categories: {', '.join(missing)}")
                recommendations.append(CATEGORY_RECOMMENDATION)

        timeline = TimelineAnalysis(
            feasible=not late,
            critical_path=[
                m.name
                for m in sorted(spec.milestones, key=lambda m: m.target_date)
                if m.critical
            ],
            concerns=[
                f"{m.product.name} will be {abs(m.days_margin)} days late" for m in late
            ],
        )

        logger.debug(
            "project_analyzed",
            project=spec.name,
            categories=len(breakdown),
            total_cost=str(total_cost),
            risks=len(risks),
        )

        return ProjectAnalysis(
            specification=spec,
            recommended_products=list(matches),
            estimated_total_cost=total_cost,
            category_breakdown=breakdown,
            timeline_analysis=timeline,
            budget_utilization=budget_utilization(total_cost, spec.max_budget),
            risks=risks,
            recommendations=recommendations,
        )

    def _category_breakdown(
        self, matches: Sequence[MatchResult]
    ) -> dict[str, CategoryPick]:
        breakdown: dict[str, CategoryPick] = {}
        for match in matches:
            category = match.product.category
            if category in breakdown:
                continue
            breakdown[category] = CategoryPick(
                product_name=match.product.name,
                cost=match.product.price,
                delivery_date=match.estimated_delivery,
            )
        return breakdown


def budget_utilization(total_cost: Decimal, max_budget: Decimal | None) -> float:
    """Percent of ``max_budget`` consumed by ``total_cost`` (0.0 without a budget)."""
    if not max_budget:
        return 0.0
    return float(total_cost / max_budget * 100)


def analyze_project(
    matches: Sequence[MatchResult], spec: ProjectSpecification
) -> ProjectAnalysis:
    """Convenience function: analyze a ranked match list."""
    return ProjectAnalyzer().analyze(matches, spec)

"""Multi-factor match scorer.

Additive point model: every contribution is computed independently, summed,
then clamped to [min_score, max_score]. The timeline penalty is the only
negative contribution.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from sitematch.config import ScoringConfig, ShippingConfig, get_config
from sitematch.matching.shipping import estimate_shipping_days
from sitematch.models import (
    InstallationCapability,
    InstallationDifficulty,
    MatchResult,
    Product,
    ProjectSpecification,
)

_DIY_FRIENDLY = frozenset({InstallationDifficulty.EASY, InstallationDifficulty.MODERATE})


@dataclass(frozen=True)
class TimelineEstimate:
    """Delivery estimate for one product shipped to one project."""

    shipping_days: int
    total_lead_time: int
    estimated_delivery: date
    meets_timeline: bool
    days_margin: int


def check_timeline(
    product: Product,
    spec: ProjectSpecification,
    shipping: ShippingConfig | None = None,
) -> TimelineEstimate:
    """Estimate delivery of ``product`` ordered on the project start date.

    Delivery on the end date itself meets the timeline (margin 0).

    Args:
        product: Product to ship
        spec: Project specification (destination, start and end dates)
        shipping: Shipping rules (default from get_config())

    Returns:
        TimelineEstimate
    """
    shipping_days = estimate_shipping_days(product.origin_region, spec.location, shipping)
    total_lead_time = product.lead_time_days + shipping_days
    estimated_delivery = spec.start_date + timedelta(days=total_lead_time)
    days_margin = (spec.end_date - estimated_delivery).days

    return TimelineEstimate(
        shipping_days=shipping_days,
        total_lead_time=total_lead_time,
        estimated_delivery=estimated_delivery,
        meets_timeline=estimated_delivery <= spec.end_date,
        days_margin=days_margin,
    )


class MatchScorer:
    """Score eligible products against a project specification."""

    def __init__(
        self,
        scoring: ScoringConfig | None = None,
        shipping: ShippingConfig | None = None,
    ) -> None:
        """Initialize scorer.

        Args:
            scoring: Point values (default from get_config())
            shipping: Shipping rules (default from get_config())
        """
        config = get_config() if scoring is None or shipping is None else None
        self.weights = scoring or config.scoring
        self.shipping = shipping or config.shipping

    def score(self, product: Product, spec: ProjectSpecification) -> MatchResult:
        """Score one product. Never fails for a valid product/spec pair.

        Args:
            product: Candidate that already passed the filter chain
            spec: Project specification

        Returns:
            MatchResult with clamped score, reasons, warnings and timeline
        """
        w = self.weights
        reasons: list[str] = []
        warnings: list[str] = []

        # Every scored product already passed the legality filter
        total = w.base_availability
        reasons.append("Available in your location")

        total += self._score_project_type(product, spec, reasons)
        total += self._score_certifications(product, spec, reasons)
        total += self._score_eco(product, spec, reasons)

        if product.in_stock:
            total += w.in_stock_bonus
            reasons.append("In stock")
        else:
            warnings.append("Currently out of stock")

        total += self._score_installation(product, spec, reasons)
        total += self._score_warranty(product, reasons)

        timeline = check_timeline(product, spec, self.shipping)
        if timeline.meets_timeline:
            total += w.timeline_met_bonus
            reasons.append(f"Can deliver {timeline.days_margin} days before deadline")
        else:
            total += w.timeline_missed_penalty
            warnings.append(f"Will be {abs(timeline.days_margin)} days late")

        return MatchResult(
            product=product,
            score=max(w.min_score, min(w.max_score, total)),
            match_reasons=reasons,
            warnings=warnings,
            shipping_days=timeline.shipping_days,
            total_lead_time=timeline.total_lead_time,
            estimated_delivery=timeline.estimated_delivery,
            meets_timeline=timeline.meets_timeline,
            days_margin=timeline.days_margin,
        )

    def _score_project_type(
        self, product: Product, spec: ProjectSpecification, reasons: list[str]
    ) -> int:
        if spec.project_type and spec.project_type in product.applicable_project_types:
            reasons.append(f"Suitable for {spec.project_type} projects")
            return self.weights.project_type_match
        return 0

    def _score_certifications(
        self, product: Product, spec: ProjectSpecification, reasons: list[str]
    ) -> int:
        if not spec.required_certifications:
            return 0

        matched = [c for c in spec.required_certifications if c in product.certifications]
        if not matched:
            return 0

        reasons.append(f"Has {len(matched)} required certification(s)")
        return min(
            len(matched) * self.weights.certification_points,
            self.weights.max_certification_points,
        )

    def _score_eco(
        self, product: Product, spec: ProjectSpecification, reasons: list[str]
    ) -> int:
        points = 0
        if spec.eco_friendly_preference and product.eco_friendly:
            points += self.weights.eco_friendly_points
            reasons.append("Eco-friendly product")
        if spec.sustainable_preference and product.sustainable_source:
            points += self.weights.sustainable_points
            reasons.append("Sustainable source")
        return min(points, self.weights.max_eco_points)

    def _score_installation(
        self, product: Product, spec: ProjectSpecification, reasons: list[str]
    ) -> int:
        """Installation bonus.

        Professional capability only earns the bonus for Professional Required
        products, not for Complex ones.
        """
        capability = spec.installation_capability
        difficulty = product.installation_difficulty

        if capability == InstallationCapability.DIY and difficulty in _DIY_FRIENDLY:
            reasons.append("DIY-friendly installation")
            return self.weights.installation_match
        if (
            capability == InstallationCapability.PROFESSIONAL
            and difficulty == InstallationDifficulty.PROFESSIONAL_REQUIRED
        ):
            reasons.append("Professional installation available")
            return self.weights.installation_match
        return 0

    def _score_warranty(self, product: Product, reasons: list[str]) -> int:
        w = self.weights
        if product.warranty_years >= w.warranty_long_years:
            reasons.append(f"{product.warranty_years}-year warranty")
            return w.warranty_long_points
        if product.warranty_years >= w.warranty_mid_years:
            reasons.append(f"{product.warranty_years}-year warranty")
            return w.warranty_mid_points
        return 0


def score_product(
    product: Product,
    spec: ProjectSpecification,
    scoring: ScoringConfig | None = None,
    shipping: ShippingConfig | None = None,
) -> MatchResult:
    """Convenience function: score a single product."""
    return MatchScorer(scoring, shipping).score(product, spec)

"""End-to-end matching orchestrator for SiteMatch.

Coordinates filter chain → scoring → stable descending sort.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from sitematch.config import AppConfig, get_config
from sitematch.matching.filters import run_filter_chain
from sitematch.matching.scoring import MatchScorer
from sitematch.models import MatchResult, Product, ProjectSpecification

logger = structlog.get_logger(__name__)


class MatchOrchestrator:
    """Orchestrates the matching pipeline over an in-memory catalog."""

    def __init__(self, config: AppConfig | None = None):
        """Initialize orchestrator.

        Args:
            config: Application configuration (default from get_config())
        """
        self.config = config or get_config()
        self.scorer = MatchScorer(self.config.scoring, self.config.shipping)

    def match(
        self, catalog: Sequence[Product], spec: ProjectSpecification
    ) -> list[MatchResult]:
        """Rank catalog products for a project specification.

        Pipeline:
        1. Filter chain (fixed order, eco preference degrades gracefully)
        2. Score every survivor
        3. Stable sort by score descending (ties keep catalog order)

        Args:
            catalog: Full product catalog (not modified)
            spec: Project specification

        Returns:
            Ranked MatchResult list (empty if nothing survives the filters)
        """
        chain = run_filter_chain(catalog, spec)

        if chain.eco_filter_skipped:
            logger.info(
                "eco_filter_skipped",
                project=spec.name,
                reason="preference would eliminate every candidate",
            )

        results = [self.scorer.score(product, spec) for product in chain.candidates]
        # list.sort is stable, so equal scores keep filter-chain order
        results.sort(key=lambda r: r.score, reverse=True)

        if self.config.max_results is not None:
            results = results[: self.config.max_results]

        logger.info(
            "matching_complete",
            project=spec.name,
            location=spec.location,
            stage_counts=chain.stage_counts,
            matches=len(results),
        )
        return results


def find_matches(
    catalog: Sequence[Product],
    spec: ProjectSpecification,
    config: AppConfig | None = None,
) -> list[MatchResult]:
    """Convenience function: rank catalog products for a specification.

    Args:
        catalog: Full product catalog
        spec: Project specification
        config: Optional configuration override

    Returns:
        Ranked MatchResult list
    """
    orchestrator = MatchOrchestrator(config)
    return orchestrator.match(catalog, spec)

"""SiteMatch configuration management.

Loads configuration from environment variables with sensible defaults.
Score weights and shipping rules can additionally be supplied through a YAML
rules file (``SITEMATCH_RULES_FILE``) so they can be tuned without code changes.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

logger = logging.getLogger(__name__)

# Hard limits that rule overrides may narrow but never widen
SCORE_FLOOR = 0
SCORE_CEILING = 100
SHIPPING_FLOOR_DAYS = 2


@dataclass(frozen=True)
class ScoringConfig:
    """Point values for the match scorer."""

    base_availability: int = 60
    project_type_match: int = 10

    # Per certification, capped at max_certification_points
    certification_points: int = 5
    max_certification_points: int = 10

    # Eco preferences, summed then capped
    eco_friendly_points: int = 5
    sustainable_points: int = 5
    max_eco_points: int = 10

    in_stock_bonus: int = 5
    installation_match: int = 5

    # Warranty tiers (exclusive)
    warranty_long_years: int = 10
    warranty_long_points: int = 3
    warranty_mid_years: int = 5
    warranty_mid_points: int = 2

    timeline_met_bonus: int = 5
    timeline_missed_penalty: int = -10

    min_score: int = 0
    max_score: int = 100

    def __post_init__(self) -> None:
        if not SCORE_FLOOR <= self.min_score <= self.max_score <= SCORE_CEILING:
            raise ValueError(
                f"Score bounds must satisfy {SCORE_FLOOR} <= min_score <= max_score "
                f"<= {SCORE_CEILING}, got min_score={self.min_score}, "
                f"max_score={self.max_score}"
            )


DEFAULT_REMOTE_REGIONS: frozenset[str] = frozenset(
    {"AK", "HI", "ME", "MT", "WY", "ND", "SD"}
)

DEFAULT_REGION_GROUPS: dict[str, frozenset[str]] = {
    "northeast": frozenset({"ME", "NH", "VT", "MA", "RI", "CT", "NY", "NJ", "PA"}),
    "southeast": frozenset(
        {"MD", "DE", "VA", "WV", "NC", "SC", "GA", "FL", "KY", "TN", "AL", "MS", "LA", "AR"}
    ),
    "midwest": frozenset(
        {"OH", "IN", "IL", "MI", "WI", "MN", "IA", "MO", "ND", "SD", "NE", "KS"}
    ),
    "southwest": frozenset({"TX", "OK", "NM", "AZ"}),
    "west": frozenset({"CA", "NV", "OR", "WA", "ID", "UT", "CO", "WY", "MT"}),
    "other": frozenset({"AK", "HI"}),
}


@dataclass(frozen=True)
class ShippingConfig:
    """Freight transit model between regions."""

    same_region_days: int = 2
    base_days: int = 5
    remote_surcharge_days: int = 3
    same_group_reduction_days: int = 2
    min_days: int = 2
    remote_regions: frozenset[str] = DEFAULT_REMOTE_REGIONS
    region_groups: dict[str, frozenset[str]] = field(
        default_factory=lambda: dict(DEFAULT_REGION_GROUPS)
    )
    # Group whose members never earn the same-group reduction
    remote_only_group: str = "other"

    def __post_init__(self) -> None:
        if self.min_days < SHIPPING_FLOOR_DAYS:
            raise ValueError(
                f"min_days must be at least {SHIPPING_FLOOR_DAYS}, got {self.min_days}"
            )
        for name in (
            "same_region_days",
            "base_days",
            "remote_surcharge_days",
            "same_group_reduction_days",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.same_group_reduction_days > self.base_days:
            raise ValueError(
                "same_group_reduction_days must not exceed base_days "
                f"({self.same_group_reduction_days} > {self.base_days})"
            )

    def group_of(self, region: str) -> str | None:
        """Return the coarse group containing ``region`` (None if ungrouped)."""
        for name, members in self.region_groups.items():
            if region in members:
                return name
        return None


@dataclass(frozen=True)
class BudgetConfig:
    """Budget thresholds used by the optional budget filter."""

    cushion: float = 0.9  # Filter against 90% of max budget


@dataclass
class AppConfig:
    """Root application configuration."""

    log_level: str = "INFO"
    json_logs: bool = False

    catalog_path: Path | None = None
    max_results: int | None = None  # None = return every match
    ingestion_strict: bool = False

    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    shipping: ShippingConfig = field(default_factory=ShippingConfig)
    budget: BudgetConfig = field(default_factory=BudgetConfig)

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables.

        Optional (with defaults):
        - LOG_LEVEL: Logging verbosity (default: "INFO")
        - JSON_LOGS: Emit JSON logs (default: "false")
        - SITEMATCH_CATALOG: Default catalog file for the CLI
        - SITEMATCH_MAX_RESULTS: Truncate ranked matches (default: unlimited)
        - SITEMATCH_STRICT_INGESTION: Reject the whole catalog on any bad row
        - SITEMATCH_RULES_FILE: YAML file with scoring/shipping/budget overrides
        - SCORE_<FIELD>: Override a single ScoringConfig field, e.g.
          SCORE_BASE_AVAILABILITY=50

        Raises:
            ValueError: If a numeric variable or the rules file is malformed
        """
        catalog = os.getenv("SITEMATCH_CATALOG")
        max_results = os.getenv("SITEMATCH_MAX_RESULTS")

        scoring = ScoringConfig()
        shipping = ShippingConfig()
        budget = BudgetConfig()

        rules_file = os.getenv("SITEMATCH_RULES_FILE")
        if rules_file:
            scoring, shipping, budget = load_rules_file(Path(rules_file))

        scoring = _apply_scoring_env(scoring)

        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=os.getenv("JSON_LOGS", "false").lower() == "true",
            catalog_path=Path(catalog) if catalog else None,
            max_results=int(max_results) if max_results else None,
            ingestion_strict=os.getenv("SITEMATCH_STRICT_INGESTION", "false").lower()
            == "true",
            scoring=scoring,
            shipping=shipping,
            budget=budget,
        )


def load_rules_file(
    path: Path,
) -> tuple[ScoringConfig, ShippingConfig, BudgetConfig]:
    """Load scoring, shipping and budget rules from a YAML file.

    Every section is optional; missing keys keep their defaults.

    Args:
        path: Path to YAML rules file

    Returns:
        Tuple of (ScoringConfig, ShippingConfig, BudgetConfig)

    Raises:
        FileNotFoundError: If the rules file doesn't exist
        ValueError: If YAML is malformed or contains unknown keys
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping of rule sections, got {type(data)}")

    unknown_sections = set(data) - {"scoring", "shipping", "budget"}
    if unknown_sections:
        raise ValueError(f"Unknown rule sections in {path}: {sorted(unknown_sections)}")

    scoring = _override(ScoringConfig(), data.get("scoring") or {}, "scoring")

    shipping_data = dict(data.get("shipping") or {})
    if "remote_regions" in shipping_data:
        shipping_data["remote_regions"] = frozenset(
            str(r).strip().upper() for r in shipping_data["remote_regions"]
        )
    if "region_groups" in shipping_data:
        shipping_data["region_groups"] = {
            str(name): frozenset(str(r).strip().upper() for r in members)
            for name, members in shipping_data["region_groups"].items()
        }
    shipping = _override(ShippingConfig(), shipping_data, "shipping")

    budget = _override(BudgetConfig(), data.get("budget") or {}, "budget")

    logger.info(f"Loaded rules from {path}")
    return scoring, shipping, budget


def _override(base: Any, values: dict[str, Any], section: str) -> Any:
    known = {f.name for f in fields(base)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown {section} rule keys: {sorted(unknown)}")
    return replace(base, **values)


def _apply_scoring_env(scoring: ScoringConfig) -> ScoringConfig:
    overrides: dict[str, int] = {}
    for f in fields(scoring):
        raw = os.getenv(f"SCORE_{f.name.upper()}")
        if raw is None or raw == "":
            continue
        try:
            overrides[f.name] = int(raw)
        except ValueError as e:
            raise ValueError(f"SCORE_{f.name.upper()} must be an integer, got {raw!r}") from e
    return replace(scoring, **overrides) if overrides else scoring


# Singleton instance (lazy-loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create singleton AppConfig instance from environment.

    Returns:
        AppConfig: Application configuration
    """
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the env."""
    global _config
    _config = None

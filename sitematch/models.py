"""SiteMatch Pydantic models for type-safe data validation.

Catalog products and project specifications are immutable inputs; match
results and project analyses are immutable outputs.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class InstallationDifficulty(str, Enum):
    """Installation difficulty, ordered from easiest to hardest."""

    EASY = "Easy"
    MODERATE = "Moderate"
    COMPLEX = "Complex"
    PROFESSIONAL_REQUIRED = "Professional Required"

    @property
    def rank(self) -> int:
        return _DIFFICULTY_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, InstallationDifficulty):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, InstallationDifficulty):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, InstallationDifficulty):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, InstallationDifficulty):
            return NotImplemented
        return self.rank >= other.rank


_DIFFICULTY_ORDER = (
    InstallationDifficulty.EASY,
    InstallationDifficulty.MODERATE,
    InstallationDifficulty.COMPLEX,
    InstallationDifficulty.PROFESSIONAL_REQUIRED,
)


class InstallationCapability(str, Enum):
    """Who will install the products."""

    DIY = "DIY"
    PROFESSIONAL = "Professional"


def _normalize_region(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip().upper()
    return text or None


class Product(BaseModel):
    """Construction product from the catalog."""

    product_id: str
    name: str
    category: str
    manufacturer: str = ""

    # Unit pricing
    price: Decimal
    unit: str = "ea"
    min_order_qty: int = Field(default=1, ge=1)

    # Availability
    stock_qty: int = Field(default=0, ge=0)
    lead_time_days: int = Field(default=0, ge=0)
    origin_region: str

    # Physical attributes
    weight: float = Field(default=0.0, ge=0)
    dimensions: str = ""

    # Legal and applicability sets (parsed once at ingestion)
    restricted_regions: frozenset[str] = frozenset()
    applicable_project_types: frozenset[str] = frozenset()
    certifications: frozenset[str] = frozenset()

    # Environmental flags
    eco_friendly: bool = False
    recyclable: bool = False
    sustainable_source: bool = False

    warranty_years: int = Field(default=0, ge=0)
    fire_rating: str | None = None
    installation_difficulty: InstallationDifficulty = InstallationDifficulty.MODERATE
    description: str = ""

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("price must be non-negative")
        return v

    @field_validator("origin_region")
    @classmethod
    def normalize_origin(cls, v: str) -> str:
        region = _normalize_region(v)
        if region is None:
            raise ValueError("origin_region is required")
        return region

    @field_validator("restricted_regions", mode="before")
    @classmethod
    def normalize_restricted(cls, v):
        if v is None:
            return frozenset()
        return frozenset(r for r in (_normalize_region(x) for x in v) if r)

    @property
    def in_stock(self) -> bool:
        return self.stock_qty > 0

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "product_id": "LUM-0001",
                "name": "Douglas Fir 2x4 Stud",
                "category": "Lumber",
                "manufacturer": "BuildCo",
                "price": Decimal("6.45"),
                "unit": "ea",
                "stock_qty": 1200,
                "lead_time_days": 5,
                "origin_region": "OR",
                "restricted_regions": ["HI"],
                "applicable_project_types": ["Residential", "Renovation"],
                "certifications": ["FSC Certified"],
                "sustainable_source": True,
                "warranty_years": 0,
                "installation_difficulty": "Easy",
            }
        }


class Milestone(BaseModel):
    """Project milestone. Informational only; not used by the scorer."""

    name: str
    target_date: date
    required_categories: list[str] = Field(default_factory=list)
    critical: bool = False

    class Config:
        frozen = True


class ProjectSpecification(BaseModel):
    """Customer project requirements for one matching run."""

    name: str
    project_type: str | None = None
    location: str  # Destination region code
    city: str = ""
    postal_code: str = ""

    max_budget: Decimal | None = None
    start_date: date
    end_date: date
    milestones: list[Milestone] = Field(default_factory=list)

    required_categories: list[str] = Field(default_factory=list)
    preferred_manufacturers: list[str] = Field(default_factory=list)

    require_certifications: bool = False
    required_certifications: list[str] = Field(default_factory=list)

    eco_friendly_preference: bool = False
    sustainable_preference: bool = False

    installation_capability: InstallationCapability = InstallationCapability.PROFESSIONAL
    notes: str = ""

    @field_validator("location")
    @classmethod
    def normalize_location(cls, v: str) -> str:
        region = _normalize_region(v)
        if region is None:
            raise ValueError("location is required")
        return region

    @field_validator("project_type", mode="before")
    @classmethod
    def blank_project_type(cls, v):
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("max_budget")
    @classmethod
    def validate_budget(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("max_budget must be non-negative")
        return v

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "Maple Street Duplex",
                "project_type": "Residential",
                "location": "CA",
                "city": "Sacramento",
                "postal_code": "95814",
                "max_budget": Decimal("25000"),
                "start_date": "2025-03-01",
                "end_date": "2025-06-30",
                "required_categories": ["Lumber", "Roofing", "Insulation"],
                "require_certifications": True,
                "required_certifications": ["UL Listed"],
                "eco_friendly_preference": True,
                "installation_capability": "Professional",
            }
        }


class MatchResult(BaseModel):
    """Result of scoring one product against one specification."""

    product: Product
    score: int  # 0-100
    match_reasons: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    # Timeline
    shipping_days: int
    total_lead_time: int
    estimated_delivery: date
    meets_timeline: bool
    days_margin: int  # Positive = early, negative = late

    @field_validator("score")
    @classmethod
    def validate_score(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError("score must be between 0 and 100")
        return v

    @model_validator(mode="after")
    def validate_timeline_sign(self) -> MatchResult:
        if self.meets_timeline != (self.days_margin >= 0):
            raise ValueError("days_margin sign disagrees with meets_timeline")
        return self

    class Config:
        frozen = True


class CategoryPick(BaseModel):
    """Best-scored product chosen to represent a category."""

    product_name: str
    cost: Decimal
    delivery_date: date

    class Config:
        frozen = True


class TimelineAnalysis(BaseModel):
    """Timeline feasibility verdict."""

    feasible: bool = True
    critical_path: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)

    class Config:
        frozen = True


class ProjectAnalysis(BaseModel):
    """Project-level rollup of a ranked match list."""

    specification: ProjectSpecification
    recommended_products: list[MatchResult] = Field(default_factory=list)
    estimated_total_cost: Decimal = Decimal("0")
    category_breakdown: dict[str, CategoryPick] = Field(default_factory=dict)
    timeline_analysis: TimelineAnalysis = Field(default_factory=TimelineAnalysis)
    budget_utilization: float = 0.0  # Percent of max_budget, 0 when no budget
    risks: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    class Config:
        frozen = True

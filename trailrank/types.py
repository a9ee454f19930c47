"""Type definitions and data models for TrailRank."""

import math
from enum import Enum
from typing import Any, Literal, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Difficulty(str, Enum):
    """Route difficulty grade, ordered Easy < Moderate < Hard < Expert."""

    EASY = "Easy"
    MODERATE = "Moderate"
    HARD = "Hard"
    EXPERT = "Expert"

    @property
    def ordinal(self) -> int:
        return _DIFFICULTY_ORDINALS[self]


_DIFFICULTY_ORDINALS = {
    Difficulty.EASY: 1,
    Difficulty.MODERATE: 2,
    Difficulty.HARD: 3,
    Difficulty.EXPERT: 4,
}


class ExperienceLevel(str, Enum):
    """Self-reported hiking experience."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def ordinal(self) -> int:
        return _EXPERIENCE_ORDINALS[self]


_EXPERIENCE_ORDINALS = {
    ExperienceLevel.BEGINNER: 1,
    ExperienceLevel.INTERMEDIATE: 2,
    ExperienceLevel.ADVANCED: 3,
    ExperienceLevel.EXPERT: 4,
}


class BudgetLevel(str, Enum):
    """Spending tier used by the cost tables."""

    BUDGET = "budget"
    STANDARD = "standard"
    PREMIUM = "premium"


# Budget buckets in IDR, lowest first.
BUDGET_RANGES: dict[str, tuple[int, int]] = {
    "under_500k": (0, 500_000),
    "500k_1m": (500_000, 1_000_000),
    "1m_2m": (1_000_000, 2_000_000),
    "2m_5m": (2_000_000, 5_000_000),
    "above_5m": (5_000_000, 10_000_000),
}
DEFAULT_BUDGET_RANGE = (0, 2_000_000)

# Preferred trip length in days per time-commitment bucket.
TIME_COMMITMENT_DAYS: dict[str, float] = {
    "half_day": 0.5,
    "full_day": 1,
    "2_days": 2,
    "3_days": 3,
    "4_plus_days": 4,
}
DEFAULT_TIME_COMMITMENT_DAYS = 2

# Criteria computed per request; catalog criteria may not reuse these ids.
TRIP_COST_ID = "calculated_cost"
ACCESSIBILITY_ID = "accessibility_score"
COMPUTED_CRITERION_IDS = frozenset({TRIP_COST_ID, ACCESSIBILITY_ID})


def trip_days_for(duration_hours: float) -> int:
    """Trip length in whole days for a hiking duration, at least one."""
    return max(1, math.ceil(duration_hours / 24))


class CriterionSource(str, Enum):
    """Where a criterion's values come from."""

    STATIC = "static"  # stored in the route catalog
    COMPUTED = "computed"  # derived per ranking request


class Factor(BaseModel):
    """Top-level decision dimension grouping related criteria."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    order: int = Field(0, ge=0)


class Criterion(BaseModel):
    """Measurable route attribute belonging to one factor."""

    model_config = ConfigDict(frozen=True)

    id: str
    factor_id: str
    name: str
    description: str = ""
    unit: str = ""
    is_benefit: bool = Field(..., description="True if higher raw values are preferable")
    weight_in_factor: float = Field(..., ge=0, le=1)
    order: int = Field(0, ge=0)
    source: CriterionSource = CriterionSource.STATIC


class FactorWeight(BaseModel):
    """Baseline weight of a factor before preference adjustment."""

    model_config = ConfigDict(frozen=True)

    factor_id: str
    weight: float = Field(..., ge=0, le=1)


class Mountain(BaseModel):
    """Mountain hosting one or more routes."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    location: str = Field(..., description="Free-text location, e.g. 'Lombok, West Nusa Tenggara'")
    elevation_m: float = Field(0.0, ge=0)
    description: str = ""

    @property
    def location_key(self) -> str:
        """Lookup key for the location tables: first comma segment, lower-cased."""
        return self.location.lower().split(",")[0].strip()


class Route(BaseModel):
    """Static catalog entry for one hiking option."""

    model_config = ConfigDict(frozen=True)

    id: str
    mountain_id: str
    name: str
    difficulty: Difficulty
    distance_km: float = Field(..., ge=0)
    duration_hours: float = Field(..., ge=0)
    description: str = ""

    @property
    def trip_days(self) -> int:
        """Trip length in whole days, at least one."""
        return trip_days_for(self.duration_hours)


class CriterionValue(BaseModel):
    """Raw measurement of one criterion for one route."""

    model_config = ConfigDict(frozen=True)

    route_id: str
    criterion_id: str
    value: float

    @field_validator("value")
    @classmethod
    def value_is_finite(cls, v: float) -> float:
        """Reject NaN and infinities."""
        if not math.isfinite(v):
            raise ValueError("Criterion value must be finite")
        return v


class UserPreferences(BaseModel):
    """Answers a user gives before ranking."""

    model_config = ConfigDict(frozen=True)

    experience_level: ExperienceLevel = ExperienceLevel.INTERMEDIATE
    fitness_level: int = Field(5, ge=1, le=10)
    budget_range: str = "1m_2m"
    time_commitment: str = "2_days"
    location: str = Field("", description="Departure city; empty uses the configured default")
    group_size: int = Field(2, ge=1)
    interests: frozenset[str] = frozenset()
    concerns: frozenset[str] = frozenset()

    @property
    def preferred_days(self) -> float:
        return TIME_COMMITMENT_DAYS.get(self.time_commitment, DEFAULT_TIME_COMMITMENT_DAYS)


class CostInput(BaseModel):
    """Inputs for a trip cost estimate."""

    user_location: str
    mountain_location: str
    route_difficulty: Difficulty
    days: int = Field(..., ge=1)
    group_size: int = Field(..., ge=1)
    needs_guide: bool = False
    needs_equipment: bool = False
    budget_level: BudgetLevel = BudgetLevel.STANDARD


class CostBreakdown(BaseModel):
    """Trip cost per category in IDR, rounded to whole rupiah."""

    transportation: int = Field(..., ge=0)
    permits: int = Field(..., ge=0)
    guide: int = Field(..., ge=0)
    accommodation: int = Field(..., ge=0)
    meals: int = Field(..., ge=0)
    equipment: int = Field(..., ge=0)
    miscellaneous: int = Field(..., ge=0)
    total: int = Field(..., ge=0)


class CriterionScore(BaseModel):
    """One criterion's raw, normalized and weighted value for a ranked route."""

    criterion_id: str
    criterion_name: str
    factor_name: str
    source: CriterionSource
    value: float
    weight: float
    is_benefit: bool
    normalized_value: float
    weighted_value: float


class RankedRoute(BaseModel):
    """Route with its TOPSIS evaluation."""

    route_id: str
    route_name: str
    mountain_name: str
    difficulty: Difficulty
    distance_km: float
    duration_hours: float
    criteria: list[CriterionScore]
    distance_to_ideal: float = Field(..., ge=0)
    distance_to_anti_ideal: float = Field(..., ge=0)
    topsis_score: float = Field(..., ge=0, le=1)
    rank: int = Field(..., ge=1, description="Rank among candidates (1=best)")
    explanations: list[str] = Field(default_factory=list, max_length=4)
    estimated_cost: CostBreakdown


class RankingWarning(BaseModel):
    """Non-fatal condition absorbed during ranking."""

    kind: Literal["unknown_location", "constant_criterion", "degenerate_distance"]
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class FactorSummary(BaseModel):
    """Factor with the weight the user's preferences gave it."""

    name: str
    effective_weight: float
    description: str


class Methodology(BaseModel):
    """How a ranking was produced."""

    algorithm: str
    factors: list[FactorSummary]
    user_preference_weights: dict[str, float]
    explanation: str


class RankingSummary(BaseModel):
    """Headline numbers of a ranking."""

    total_routes: int = Field(..., ge=0)
    average_score: float = Field(..., ge=0, le=1)
    top_route_name: str


class RankingResult(BaseModel):
    """Ordered ranking plus methodology and warnings."""

    routes: list[RankedRoute]
    methodology: Methodology
    summary: RankingSummary
    warnings: list[RankingWarning] = Field(default_factory=list)

    @property
    def top_route(self) -> Optional[RankedRoute]:
        return self.routes[0] if self.routes else None

    def top_recommendations(self, n: int = 5) -> list[tuple[str, int, float]]:
        """(route_id, rank, score) for the first ``n`` routes."""
        return [(r.route_id, r.rank, r.topsis_score) for r in self.routes[:n]]

    def to_dataframe(self) -> pd.DataFrame:
        """Flatten ranked routes into one row per route."""
        rows = []
        for route in self.routes:
            rows.append({
                "rank": route.rank,
                "route_id": route.route_id,
                "route_name": route.route_name,
                "mountain_name": route.mountain_name,
                "difficulty": route.difficulty.value,
                "topsis_score": route.topsis_score,
                "distance_to_ideal": route.distance_to_ideal,
                "distance_to_anti_ideal": route.distance_to_anti_ideal,
                "estimated_cost": route.estimated_cost.total,
                "explanations": " | ".join(route.explanations),
            })
        return pd.DataFrame(rows)


class GearItem(BaseModel):
    """Piece of recommended gear."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: Literal["clothing", "footwear", "equipment", "safety", "navigation", "food_water"]
    priority: Literal["essential", "recommended", "optional"]
    description: str
    quantity: Optional[str] = None
    alternatives: tuple[str, ...] = ()


class GearInput(BaseModel):
    """Trip parameters for gear advice."""

    days: int = Field(..., ge=1)
    technicality: Literal["easy", "moderate", "hard", "expert"]
    weather: Literal["dry", "wet", "cold", "variable"] = "variable"
    season: Literal["dry", "wet"] = "dry"
    group_size: int = Field(1, ge=1)
    has_experience: bool = True

    @classmethod
    def from_route(
        cls,
        route: RankedRoute,
        preferences: UserPreferences,
        weather: str = "variable",
        season: str = "dry",
    ) -> "GearInput":
        """Derive gear parameters from a ranked route and the user's answers."""
        return cls(
            days=trip_days_for(route.duration_hours),
            technicality=route.difficulty.value.lower(),
            weather=weather,
            season=season,
            group_size=preferences.group_size,
            has_experience=preferences.experience_level != ExperienceLevel.BEGINNER,
        )


class GearRecommendation(BaseModel):
    """Gear split by priority."""

    essential: list[GearItem]
    recommended: list[GearItem]
    optional: list[GearItem]
    total_items: int = Field(..., ge=0)

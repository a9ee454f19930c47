"""Preference weighting rules for the three decision factors."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from trailrank.types import ExperienceLevel, UserPreferences

PHYSICAL_DEMAND = "Physical Demand"
LOGISTICS_AND_COST = "Logistics & Cost"
EXPERIENCE_QUALITY = "Experience Quality"
FACTOR_NAMES = (PHYSICAL_DEMAND, LOGISTICS_AND_COST, EXPERIENCE_QUALITY)


class WeightAdjustment(BaseModel):
    """Additive change to factor weights, applied when the trigger matches."""

    model_config = ConfigDict(frozen=True)

    name: str
    trigger: Literal["budget_range", "interest"]
    values: frozenset[str]
    deltas: dict[str, float]

    def applies(self, preferences: UserPreferences) -> bool:
        """Check whether the user's answers fire this adjustment."""
        if self.trigger == "budget_range":
            return preferences.budget_range in self.values
        return bool(self.values & preferences.interests)


class WeightingRules(BaseModel):
    """Baseline, experience overrides and ordered adjustments."""

    model_config = ConfigDict(frozen=True)

    baseline: dict[str, float]
    experience_overrides: dict[ExperienceLevel, dict[str, float]] = Field(default_factory=dict)
    adjustments: tuple[WeightAdjustment, ...] = ()

    @field_validator("baseline")
    @classmethod
    def baseline_not_empty(cls, v: dict[str, float]) -> dict[str, float]:
        """Require at least one factor."""
        if not v:
            raise ValueError("Baseline must name at least one factor")
        return v

    def starting_weights(self, preferences: UserPreferences) -> dict[str, float]:
        """Baseline, replaced wholesale by an experience override if one exists."""
        override = self.experience_overrides.get(preferences.experience_level)
        return dict(override if override is not None else self.baseline)

    @classmethod
    def from_yaml(cls, path: Path) -> "WeightingRules":
        """Load rules from a YAML file with the same shape as the model."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls(**data)


DEFAULT_WEIGHTING_RULES = WeightingRules(
    baseline={
        PHYSICAL_DEMAND: 0.33,
        LOGISTICS_AND_COST: 0.33,
        EXPERIENCE_QUALITY: 0.34,
    },
    experience_overrides={
        ExperienceLevel.BEGINNER: {
            PHYSICAL_DEMAND: 0.2,
            LOGISTICS_AND_COST: 0.5,
            EXPERIENCE_QUALITY: 0.3,
        },
        ExperienceLevel.EXPERT: {
            PHYSICAL_DEMAND: 0.5,
            LOGISTICS_AND_COST: 0.2,
            EXPERIENCE_QUALITY: 0.3,
        },
    },
    adjustments=(
        WeightAdjustment(
            name="low_budget",
            trigger="budget_range",
            values=frozenset({"under_500k", "500k_1m"}),
            deltas={LOGISTICS_AND_COST: 0.1, PHYSICAL_DEMAND: -0.05, EXPERIENCE_QUALITY: -0.05},
        ),
        WeightAdjustment(
            name="physical_challenge",
            trigger="interest",
            values=frozenset({"physical_challenge"}),
            deltas={PHYSICAL_DEMAND: 0.1, EXPERIENCE_QUALITY: -0.1},
        ),
        WeightAdjustment(
            name="scenic_views",
            trigger="interest",
            values=frozenset({"scenic_views"}),
            deltas={EXPERIENCE_QUALITY: 0.1, PHYSICAL_DEMAND: -0.1},
        ),
    ),
)

"""Trip cost estimation with per-category breakdown."""

import math
from typing import Optional

from trailrank.config.cost_tables import DEFAULT_COST_TABLES, CostTables
from trailrank.processing.geo import GeoDistance
from trailrank.types import (
    BUDGET_RANGES,
    DEFAULT_BUDGET_RANGE,
    BudgetLevel,
    CostBreakdown,
    CostInput,
    Difficulty,
)
from trailrank.utils.logging import get_logger

logger = get_logger(__name__)


def parse_budget_range(budget_range: str) -> tuple[int, int]:
    """Convert a budget bucket to (min, max) rupiah."""
    return BUDGET_RANGES.get(budget_range, DEFAULT_BUDGET_RANGE)


def budget_level_for(budget_range: str) -> BudgetLevel:
    """Map a budget bucket onto the spending tier used by the rate tables."""
    if budget_range == "under_500k":
        return BudgetLevel.BUDGET
    if budget_range == "above_5m":
        return BudgetLevel.PREMIUM
    return BudgetLevel.STANDARD


class CostEstimator:
    """Estimates what a trip costs a group, category by category."""

    def __init__(
        self,
        geo: Optional[GeoDistance] = None,
        tables: CostTables = DEFAULT_COST_TABLES,
    ):
        self.geo = geo or GeoDistance()
        self.tables = tables

    def transportation(self, distance_km: float, group_size: int) -> float:
        """Cheaper of motorcycle fuel and public transport, per person.

        Large groups may rent a car instead when that is cheaper overall.
        """
        t = self.tables
        motorcycle = (distance_km / t.motorcycle_km_per_unit) * t.motorcycle_cost_per_unit
        public = t.public_transport_base + t.public_transport_per_km * distance_km
        per_group = min(motorcycle, public) * group_size

        if group_size >= t.car_rental_min_group:
            car_rental = distance_km * t.car_rental_per_km + t.car_rental_base
            return min(per_group, car_rental)

        return per_group

    def permits(self, mountain_location: str, difficulty: Difficulty, group_size: int) -> float:
        t = self.tables
        base = t.permit_rates.get(mountain_location.strip().lower(), t.default_permit_rate)
        return base * group_size * t.difficulty_multipliers[difficulty]

    def guide(self, difficulty: Difficulty, days: int, group_size: int, needs_guide: bool) -> float:
        if not needs_guide:
            return 0.0
        guides = math.ceil(group_size / self.tables.hikers_per_guide)
        return self.tables.guide_daily_rates[difficulty] * days * guides

    def accommodation(self, days: int, group_size: int, level: BudgetLevel) -> float:
        nights = max(0, days - 1)
        return self.tables.accommodation_per_night[level] * group_size * nights

    def meals(self, days: int, group_size: int, level: BudgetLevel) -> float:
        return self.tables.meals_per_day[level] * group_size * days

    def equipment(self, difficulty: Difficulty, days: int, group_size: int, needs_equipment: bool) -> float:
        if not needs_equipment:
            return 0.0
        return self.tables.equipment_per_day[difficulty] * group_size * days

    def estimate(self, cost_input: CostInput) -> CostBreakdown:
        """Estimate the full cost breakdown for one trip.

        Args:
            cost_input: Trip parameters

        Returns:
            CostBreakdown with every category rounded to whole rupiah
        """
        distance_km = self.geo.distance_km(cost_input.user_location, cost_input.mountain_location)

        parts = {
            "transportation": self.transportation(distance_km, cost_input.group_size),
            "permits": self.permits(
                cost_input.mountain_location, cost_input.route_difficulty, cost_input.group_size
            ),
            "guide": self.guide(
                cost_input.route_difficulty, cost_input.days,
                cost_input.group_size, cost_input.needs_guide,
            ),
            "accommodation": self.accommodation(
                cost_input.days, cost_input.group_size, cost_input.budget_level
            ),
            "meals": self.meals(cost_input.days, cost_input.group_size, cost_input.budget_level),
            "equipment": self.equipment(
                cost_input.route_difficulty, cost_input.days,
                cost_input.group_size, cost_input.needs_equipment,
            ),
        }
        subtotal = sum(parts.values())
        miscellaneous = subtotal * self.tables.miscellaneous_rate
        total = subtotal + miscellaneous

        breakdown = CostBreakdown(
            **{name: round(amount) for name, amount in parts.items()},
            miscellaneous=round(miscellaneous),
            total=round(total),
        )

        logger.debug(
            "Trip cost estimated",
            mountain=cost_input.mountain_location,
            distance_km=round(distance_km, 1),
            total=breakdown.total,
        )

        return breakdown

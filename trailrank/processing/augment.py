"""Per-request criteria computed from the user's situation."""

from dataclasses import dataclass
from typing import Optional

from trailrank.config.catalog_loader import Catalog
from trailrank.processing.cost import CostEstimator, budget_level_for
from trailrank.processing.geo import GeoDistance
from trailrank.types import (
    ACCESSIBILITY_ID,
    TRIP_COST_ID,
    CostBreakdown,
    CostInput,
    Criterion,
    CriterionSource,
    ExperienceLevel,
    Mountain,
    Route,
    UserPreferences,
)
from trailrank.utils.logging import get_logger

logger = get_logger(__name__)


def computed_criteria(logistics_factor_id: str) -> tuple[Criterion, Criterion]:
    """Trip cost and accessibility criteria attached to the logistics factor."""
    return (
        Criterion(
            id=TRIP_COST_ID,
            factor_id=logistics_factor_id,
            name="Total Trip Cost",
            description="Estimated door-to-door cost for the whole group",
            unit="IDR",
            is_benefit=False,
            weight_in_factor=0.6,
            order=100,
            source=CriterionSource.COMPUTED,
        ),
        Criterion(
            id=ACCESSIBILITY_ID,
            factor_id=logistics_factor_id,
            name="Accessibility Score",
            description="How easy the trailhead is to reach from the user's location (5=very accessible)",
            unit="rating",
            is_benefit=True,
            weight_in_factor=0.4,
            order=101,
            source=CriterionSource.COMPUTED,
        ),
    )


def accessibility_score(distance_km: float) -> float:
    """Rate reachability from travel distance.

    Floors at 1; there is no upper clamp, so distances under 100 km score above 5.
    """
    return max(1.0, 6.0 - distance_km / 100.0)


@dataclass
class AugmentedRoute:
    """Route with its full criterion vector for one ranking request."""

    route: Route
    mountain: Mountain
    values: dict[str, float]
    cost_breakdown: CostBreakdown
    travel_distance_km: float
    location_resolved: bool = True

    @property
    def trip_cost(self) -> float:
        return self.values[TRIP_COST_ID]


class CriteriaAugmenter:
    """Adds trip cost and accessibility to each route's catalog values."""

    def __init__(
        self,
        geo: Optional[GeoDistance] = None,
        cost_estimator: Optional[CostEstimator] = None,
        default_location: str = "jakarta",
    ):
        self.geo = geo or GeoDistance()
        self.cost_estimator = cost_estimator or CostEstimator(geo=self.geo)
        self.default_location = default_location

    def augment(
        self,
        route: Route,
        catalog: Catalog,
        preferences: UserPreferences,
    ) -> AugmentedRoute:
        """Compute the dynamic criteria for one route.

        Args:
            route: Catalog route
            catalog: Catalog supplying the route's mountain and static values
            preferences: User answers

        Returns:
            AugmentedRoute carrying static and computed values
        """
        mountain = catalog.mountain(route.mountain_id)
        user_location = preferences.location or self.default_location
        mountain_location = mountain.location_key

        cost_input = CostInput(
            user_location=user_location,
            mountain_location=mountain_location,
            route_difficulty=route.difficulty,
            days=route.trip_days,
            group_size=preferences.group_size,
            needs_guide=preferences.experience_level == ExperienceLevel.BEGINNER,
            needs_equipment="equipment" in preferences.concerns,
            budget_level=budget_level_for(preferences.budget_range),
        )
        breakdown = self.cost_estimator.estimate(cost_input)
        travel = self.geo.lookup(user_location, mountain_location)

        values = {
            criterion.id: catalog.value(route.id, criterion.id)
            for criterion in catalog.static_criteria
        }
        values[TRIP_COST_ID] = float(breakdown.total)
        values[ACCESSIBILITY_ID] = accessibility_score(travel.distance_km)

        if not travel.resolved:
            logger.debug(
                "Location not in lookup table, using fallback distance",
                route=route.id,
                user_location=user_location,
                mountain_location=mountain_location,
                fallback_km=travel.distance_km,
            )

        return AugmentedRoute(
            route=route,
            mountain=mountain,
            values=values,
            cost_breakdown=breakdown,
            travel_distance_km=travel.distance_km,
            location_resolved=travel.resolved,
        )

    def augment_all(
        self,
        routes: list[Route],
        catalog: Catalog,
        preferences: UserPreferences,
    ) -> list[AugmentedRoute]:
        return [self.augment(route, catalog, preferences) for route in routes]

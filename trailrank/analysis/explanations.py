"""Plain-language reasons a route suits a user."""

from typing import Optional

from trailrank.processing.augment import AugmentedRoute
from trailrank.processing.cost import parse_budget_range
from trailrank.types import UserPreferences

SCENIC_CRITERION = "Scenic Value"
CROWDING_CRITERION = "Crowding Level"

SCENIC_THRESHOLD = 4.0
CROWDING_THRESHOLD = 2.0
CHALLENGING_DIFFICULTY = 3  # Hard and above
FITNESS_TOLERANCE = 2.0
DAYS_TOLERANCE = 1.0


def _format_rupiah(amount: float) -> str:
    # id-ID grouping uses dots
    return f"{amount:,.0f}".replace(",", ".")


class ExplanationBuilder:
    """Fixed-priority rules producing at most ``max_explanations`` reasons."""

    def __init__(
        self,
        max_explanations: int = 4,
        criterion_ids_by_name: Optional[dict[str, str]] = None,
    ):
        self.max_explanations = max_explanations
        self.criterion_ids_by_name = criterion_ids_by_name or {}

    def _raw_value(self, augmented: AugmentedRoute, criterion_name: str) -> Optional[float]:
        criterion_id = self.criterion_ids_by_name.get(criterion_name)
        if criterion_id is None:
            return None
        return augmented.values.get(criterion_id)

    def _experience(self, augmented: AugmentedRoute, preferences: UserPreferences) -> str:
        route_level = augmented.route.difficulty.ordinal
        user_level = preferences.experience_level.ordinal
        level = preferences.experience_level.value

        if abs(route_level - user_level) <= 1:
            return f"Perfect match for your {level} experience level"
        if route_level > user_level:
            return f"Challenging route to advance your {level} skills"
        return "Comfortable difficulty level for your experience"

    def _fitness(self, augmented: AugmentedRoute, preferences: UserPreferences) -> Optional[str]:
        physical_demand = augmented.route.difficulty.ordinal * 2.5  # 1-10 scale
        if abs(physical_demand - preferences.fitness_level) <= FITNESS_TOLERANCE:
            return f"Good match for your fitness level ({preferences.fitness_level}/10)"
        return None

    def _scenic(self, augmented: AugmentedRoute, preferences: UserPreferences) -> Optional[str]:
        if "scenic_views" not in preferences.interests:
            return None
        scenic = self._raw_value(augmented, SCENIC_CRITERION)
        if scenic is not None and scenic >= SCENIC_THRESHOLD:
            return "Excellent scenic views for photography and sightseeing"
        return None

    def _challenge(self, augmented: AugmentedRoute, preferences: UserPreferences) -> Optional[str]:
        if (
            "physical_challenge" in preferences.interests
            and augmented.route.difficulty.ordinal >= CHALLENGING_DIFFICULTY
        ):
            return "Provides the physical challenge you're seeking"
        return None

    def _solitude(self, augmented: AugmentedRoute, preferences: UserPreferences) -> Optional[str]:
        if "solitude" not in preferences.interests:
            return None
        crowding = self._raw_value(augmented, CROWDING_CRITERION)
        if crowding is not None and crowding <= CROWDING_THRESHOLD:
            return "Less crowded trail for peaceful hiking experience"
        return None

    def _time(self, augmented: AugmentedRoute, preferences: UserPreferences) -> Optional[str]:
        if abs(augmented.route.trip_days - preferences.preferred_days) <= DAYS_TOLERANCE:
            timeframe = preferences.time_commitment.replace("_", " ")
            return f"Fits well within your {timeframe} timeframe"
        return None

    def _budget(self, augmented: AugmentedRoute, preferences: UserPreferences) -> Optional[str]:
        _, upper = parse_budget_range(preferences.budget_range)
        cost = augmented.trip_cost
        if cost <= upper:
            return f"Within your budget range (estimated Rp {_format_rupiah(cost)})"
        return None

    def explain(self, augmented: AugmentedRoute, preferences: UserPreferences) -> list[str]:
        """Reasons for one route, in rule priority order, truncated."""
        rules = (
            self._experience,
            self._fitness,
            self._scenic,
            self._challenge,
            self._solitude,
            self._time,
            self._budget,
        )
        reasons = []
        for rule in rules:
            reason = rule(augmented, preferences)
            if reason:
                reasons.append(reason)
        return reasons[: self.max_explanations]

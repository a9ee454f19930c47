"""Map user answers onto factor weights."""

from typing import Optional

from trailrank.config.weighting_rules import DEFAULT_WEIGHTING_RULES, WeightingRules
from trailrank.types import UserPreferences
from trailrank.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MIN_FACTOR_WEIGHT = 0.05


class PreferenceWeighter:
    """Turns UserPreferences into a factor-name -> weight distribution.

    Adjustments are additive deltas applied in rule order on top of the
    baseline (or experience override). Each weight is then floored at
    ``min_factor_weight`` and the set renormalized to sum to 1. With
    ``min_factor_weight=None`` no floor is applied, so a weight driven
    negative by custom rules stays negative after renormalizing.
    """

    def __init__(
        self,
        rules: WeightingRules = DEFAULT_WEIGHTING_RULES,
        min_factor_weight: Optional[float] = DEFAULT_MIN_FACTOR_WEIGHT,
    ):
        self.rules = rules
        self.min_factor_weight = min_factor_weight

    def raw_weights(self, preferences: UserPreferences) -> dict[str, float]:
        """Weights after all adjustments, before flooring and renormalizing."""
        weights = self.rules.starting_weights(preferences)

        for adjustment in self.rules.adjustments:
            if not adjustment.applies(preferences):
                continue
            for factor, delta in adjustment.deltas.items():
                weights[factor] = weights.get(factor, 0.0) + delta
            logger.debug("Applied weight adjustment", adjustment=adjustment.name)

        return weights

    def weights(self, preferences: UserPreferences) -> dict[str, float]:
        """Normalized factor weights for one user.

        Args:
            preferences: User answers

        Returns:
            Mapping of factor name to weight, summing to 1
        """
        weights = self.raw_weights(preferences)

        if self.min_factor_weight is not None:
            floored = {k: max(v, self.min_factor_weight) for k, v in weights.items()}
            if floored != weights:
                logger.info(
                    "Factor weights floored",
                    before=weights,
                    minimum=self.min_factor_weight,
                )
            weights = floored

        total = sum(weights.values())
        if total == 0:
            raise ValueError("Total weight cannot be zero")

        normalized = {k: v / total for k, v in weights.items()}

        logger.debug(
            "Preference weights computed",
            experience=preferences.experience_level.value,
            weights={k: round(v, 4) for k, v in normalized.items()},
        )

        return normalized

"""Unit tests for preference weighting."""

import itertools

import pytest

from trailrank.config.weighting_rules import (
    EXPERIENCE_QUALITY,
    LOGISTICS_AND_COST,
    PHYSICAL_DEMAND,
    WeightAdjustment,
    WeightingRules,
)
from trailrank.processing.weighting import PreferenceWeighter
from trailrank.types import BUDGET_RANGES, ExperienceLevel, UserPreferences


def _negative_rules() -> WeightingRules:
    return WeightingRules(
        baseline={"A": 0.1, "B": 0.9},
        adjustments=(
            WeightAdjustment(
                name="drop_a",
                trigger="interest",
                values=frozenset({"x"}),
                deltas={"A": -0.3},
            ),
        ),
    )


class TestPreferenceWeighter:
    """Tests for PreferenceWeighter."""

    def test_baseline_weights(self, intermediate_prefs):
        """Test intermediate users with no adjustments get the baseline."""
        weights = PreferenceWeighter().weights(intermediate_prefs)

        assert weights[PHYSICAL_DEMAND] == pytest.approx(0.33)
        assert weights[LOGISTICS_AND_COST] == pytest.approx(0.33)
        assert weights[EXPERIENCE_QUALITY] == pytest.approx(0.34)

    def test_beginner_with_low_budget(self, beginner_prefs):
        """Test the beginner override plus the low-budget adjustment."""
        weights = PreferenceWeighter().weights(beginner_prefs)

        assert weights[PHYSICAL_DEMAND] == pytest.approx(0.15)
        assert weights[LOGISTICS_AND_COST] == pytest.approx(0.6)
        assert weights[EXPERIENCE_QUALITY] == pytest.approx(0.25)

    def test_beginner_favours_logistics_expert_favours_physical(self):
        """Test experience overrides shift emphasis in opposite directions."""
        weighter = PreferenceWeighter()
        beginner = weighter.weights(UserPreferences(experience_level=ExperienceLevel.BEGINNER))
        expert = weighter.weights(UserPreferences(experience_level=ExperienceLevel.EXPERT))

        assert beginner[LOGISTICS_AND_COST] > expert[LOGISTICS_AND_COST]
        assert expert[PHYSICAL_DEMAND] > beginner[PHYSICAL_DEMAND]

    def test_interest_adjustments_stack(self):
        """Test opposing interest adjustments cancel out."""
        prefs = UserPreferences(
            experience_level=ExperienceLevel.EXPERT,
            interests=frozenset({"physical_challenge", "scenic_views"}),
        )
        weights = PreferenceWeighter().weights(prefs)

        assert weights[PHYSICAL_DEMAND] == pytest.approx(0.5)
        assert weights[LOGISTICS_AND_COST] == pytest.approx(0.2)
        assert weights[EXPERIENCE_QUALITY] == pytest.approx(0.3)

    def test_scenic_interest_raises_experience_quality(self, intermediate_prefs):
        """Test scenic interest moves weight from physical demand to experience."""
        weighter = PreferenceWeighter()
        plain = weighter.weights(intermediate_prefs)
        scenic = weighter.weights(
            intermediate_prefs.model_copy(update={"interests": frozenset({"scenic_views"})})
        )

        assert scenic[EXPERIENCE_QUALITY] > plain[EXPERIENCE_QUALITY]
        assert scenic[PHYSICAL_DEMAND] < plain[PHYSICAL_DEMAND]

    def test_all_combinations_form_distribution(self):
        """Test every answer combination yields non-negative weights summing to 1."""
        weighter = PreferenceWeighter()
        interest_sets = [
            frozenset(combo)
            for n in range(3)
            for combo in itertools.combinations(["physical_challenge", "scenic_views"], n)
        ]

        for level, budget, interests in itertools.product(
            ExperienceLevel, [*BUDGET_RANGES, "unknown"], interest_sets
        ):
            prefs = UserPreferences(experience_level=level, budget_range=budget, interests=interests)
            weights = weighter.weights(prefs)

            assert sum(weights.values()) == pytest.approx(1.0, abs=1e-9)
            assert all(w >= 0 for w in weights.values())
            assert set(weights) == {PHYSICAL_DEMAND, LOGISTICS_AND_COST, EXPERIENCE_QUALITY}

    def test_floor_keeps_weights_positive(self):
        """Test a weight pushed negative is floored before renormalizing."""
        weighter = PreferenceWeighter(rules=_negative_rules(), min_factor_weight=0.05)
        prefs = UserPreferences(interests=frozenset({"x"}))

        assert weighter.raw_weights(prefs)["A"] == pytest.approx(-0.2)

        weights = weighter.weights(prefs)
        assert weights["A"] == pytest.approx(0.05 / 0.95)
        assert weights["B"] == pytest.approx(0.9 / 0.95)

    def test_unclamped_mode_allows_negative(self):
        """Test disabling the floor keeps the negative weight."""
        weighter = PreferenceWeighter(rules=_negative_rules(), min_factor_weight=None)
        weights = weighter.weights(UserPreferences(interests=frozenset({"x"})))

        assert weights["A"] == pytest.approx(-0.2 / 0.7)
        assert sum(weights.values()) == pytest.approx(1.0, abs=1e-9)

    def test_zero_total_rejected(self):
        """Test a zero weight total raises."""
        rules = WeightingRules(baseline={"A": 0.0, "B": 0.0})
        weighter = PreferenceWeighter(rules=rules, min_factor_weight=None)

        with pytest.raises(ValueError, match="zero"):
            weighter.weights(UserPreferences())


class TestWeightingRules:
    """Tests for rule loading."""

    def test_from_yaml(self, tmp_path):
        """Test rules load from YAML."""
        path = tmp_path / "rules.yaml"
        path.write_text(
            "baseline:\n"
            "  Physical Demand: 0.5\n"
            "  Logistics & Cost: 0.5\n"
            "adjustments:\n"
            "  - name: cheap\n"
            "    trigger: budget_range\n"
            "    values: [under_500k]\n"
            "    deltas:\n"
            "      Logistics & Cost: 0.2\n"
        )

        rules = WeightingRules.from_yaml(path)
        weights = PreferenceWeighter(rules=rules).weights(UserPreferences(budget_range="under_500k"))

        assert weights[LOGISTICS_AND_COST] == pytest.approx(0.7 / 1.2)

    def test_empty_baseline_rejected(self):
        """Test a baseline must name at least one factor."""
        with pytest.raises(ValueError):
            WeightingRules(baseline={})

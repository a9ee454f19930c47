"""Unit tests for trip cost estimation."""

import pytest

from trailrank.config.cost_tables import CostTables
from trailrank.processing.cost import CostEstimator, budget_level_for, parse_budget_range
from trailrank.types import BudgetLevel, CostInput, Difficulty


@pytest.fixture
def estimator() -> CostEstimator:
    return CostEstimator()


class TestBudgetBuckets:
    """Tests for budget bucket helpers."""

    def test_known_range(self):
        assert parse_budget_range("500k_1m") == (500_000, 1_000_000)

    def test_unknown_range_falls_back(self):
        assert parse_budget_range("lots") == (0, 2_000_000)

    @pytest.mark.parametrize("bucket,level", [
        ("under_500k", BudgetLevel.BUDGET),
        ("1m_2m", BudgetLevel.STANDARD),
        ("above_5m", BudgetLevel.PREMIUM),
        ("whatever", BudgetLevel.STANDARD),
    ])
    def test_budget_level(self, bucket, level):
        assert budget_level_for(bucket) == level


class TestCostEstimator:
    """Tests for CostEstimator."""

    def test_minimal_day_trip(self, estimator):
        """Test a solo day hike to an unlisted mountain on a budget."""
        breakdown = estimator.estimate(CostInput(
            user_location="jakarta",
            mountain_location="east java",
            route_difficulty=Difficulty.EASY,
            days=1,
            group_size=1,
            budget_level=BudgetLevel.BUDGET,
        ))

        assert breakdown.transportation == 100_000
        assert breakdown.permits == 120_000
        assert breakdown.guide == 0
        assert breakdown.accommodation == 0
        assert breakdown.meals == 50_000
        assert breakdown.equipment == 0
        assert breakdown.miscellaneous == 27_000
        assert breakdown.total == 297_000

    def test_total_is_sum_of_parts(self, estimator):
        """Test total equals subtotal plus miscellaneous, within rounding."""
        breakdown = estimator.estimate(CostInput(
            user_location="jakarta",
            mountain_location="lombok",
            route_difficulty=Difficulty.HARD,
            days=3,
            group_size=5,
            needs_guide=True,
            needs_equipment=True,
            budget_level=BudgetLevel.PREMIUM,
        ))

        parts = (
            breakdown.transportation + breakdown.permits + breakdown.guide
            + breakdown.accommodation + breakdown.meals + breakdown.equipment
        )
        assert abs(breakdown.total - (parts + breakdown.miscellaneous)) <= 2
        assert breakdown.miscellaneous == pytest.approx(parts * 0.10, abs=4)

    def test_permits_use_location_rate_and_difficulty(self, estimator):
        """Test permits scale with location rate, group and difficulty."""
        assert estimator.permits("lombok", Difficulty.MODERATE, 2) == pytest.approx(360_000)
        assert estimator.permits("Lombok ", Difficulty.EXPERT, 1) == pytest.approx(300_000)
        assert estimator.permits("atlantis", Difficulty.EASY, 1) == pytest.approx(120_000)

    def test_guide_per_four_hikers(self, estimator):
        """Test one guide is hired per four hikers."""
        assert estimator.guide(Difficulty.HARD, 2, 5, needs_guide=True) == pytest.approx(1_600_000)
        assert estimator.guide(Difficulty.HARD, 2, 4, needs_guide=True) == pytest.approx(800_000)
        assert estimator.guide(Difficulty.HARD, 2, 4, needs_guide=False) == 0

    def test_accommodation_counts_nights(self, estimator):
        """Test lodging is charged per night, not per day."""
        assert estimator.accommodation(1, 3, BudgetLevel.STANDARD) == 0
        assert estimator.accommodation(3, 2, BudgetLevel.STANDARD) == pytest.approx(600_000)

    def test_transport_cheaper_option_per_person(self, estimator):
        """Test the cheaper of motorcycle and public transport is chosen."""
        # motorcycle 100k vs public 200k
        assert estimator.transportation(300, 1) == pytest.approx(100_000)

    def test_car_rental_for_large_groups(self, estimator):
        """Test a group of five or more may rent a car instead."""
        # per person ~333k each for 10 people vs car 2.3m
        assert estimator.transportation(1000, 10) == pytest.approx(2_300_000)
        # below the group threshold the car is never considered
        assert estimator.transportation(1000, 4) == pytest.approx(4 * 1000 / 30 * 10_000)

    def test_equipment_rental(self, estimator):
        assert estimator.equipment(Difficulty.EXPERT, 2, 3, needs_equipment=True) == pytest.approx(1_800_000)
        assert estimator.equipment(Difficulty.EXPERT, 2, 3, needs_equipment=False) == 0

    def test_custom_tables(self):
        """Test rates come from the injected tables."""
        estimator = CostEstimator(tables=CostTables(default_permit_rate=10_000))
        assert estimator.permits("atlantis", Difficulty.EASY, 1) == pytest.approx(10_000)

    def test_cost_input_rejects_zero_days(self):
        with pytest.raises(ValueError):
            CostInput(
                user_location="jakarta",
                mountain_location="lombok",
                route_difficulty=Difficulty.EASY,
                days=0,
                group_size=1,
            )

"""Rate tables for trip cost estimates (IDR)."""

from pydantic import BaseModel, ConfigDict, Field

from trailrank.types import BudgetLevel, Difficulty


class CostTables(BaseModel):
    """Every rate the cost estimator reads."""

    model_config = ConfigDict(frozen=True)

    # Transport
    motorcycle_km_per_unit: float = Field(30.0, gt=0)
    motorcycle_cost_per_unit: float = Field(10_000, ge=0)
    public_transport_base: float = Field(50_000, ge=0)
    public_transport_per_km: float = Field(500, ge=0)
    car_rental_per_km: float = Field(2_000, ge=0)
    car_rental_base: float = Field(300_000, ge=0)
    car_rental_min_group: int = Field(5, ge=1)

    # Permits
    permit_rates: dict[str, float] = Field(
        default_factory=lambda: {"lombok": 150_000, "malang": 200_000, "magelang": 100_000}
    )
    default_permit_rate: float = Field(120_000, ge=0)
    difficulty_multipliers: dict[Difficulty, float] = Field(
        default_factory=lambda: {
            Difficulty.EASY: 1.0,
            Difficulty.MODERATE: 1.2,
            Difficulty.HARD: 1.5,
            Difficulty.EXPERT: 2.0,
        }
    )

    # Guides
    guide_daily_rates: dict[Difficulty, float] = Field(
        default_factory=lambda: {
            Difficulty.EASY: 200_000,
            Difficulty.MODERATE: 300_000,
            Difficulty.HARD: 400_000,
            Difficulty.EXPERT: 500_000,
        }
    )
    hikers_per_guide: int = Field(4, ge=1)

    # Lodging and food, per person
    accommodation_per_night: dict[BudgetLevel, float] = Field(
        default_factory=lambda: {
            BudgetLevel.BUDGET: 75_000,
            BudgetLevel.STANDARD: 150_000,
            BudgetLevel.PREMIUM: 300_000,
        }
    )
    meals_per_day: dict[BudgetLevel, float] = Field(
        default_factory=lambda: {
            BudgetLevel.BUDGET: 50_000,
            BudgetLevel.STANDARD: 75_000,
            BudgetLevel.PREMIUM: 125_000,
        }
    )

    # Equipment rental, per person per day
    equipment_per_day: dict[Difficulty, float] = Field(
        default_factory=lambda: {
            Difficulty.EASY: 100_000,
            Difficulty.MODERATE: 150_000,
            Difficulty.HARD: 200_000,
            Difficulty.EXPERT: 300_000,
        }
    )

    miscellaneous_rate: float = Field(0.10, ge=0, le=1)


DEFAULT_COST_TABLES = CostTables()

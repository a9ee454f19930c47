"""Gear recommendations from trip conditions."""

from collections import Counter
from typing import Iterable

from trailrank.types import GearInput, GearItem, GearRecommendation
from trailrank.utils.logging import get_logger

logger = get_logger(__name__)

BASE_ESSENTIAL_GEAR = (
    GearItem(
        id="hiking_boots", name="Hiking Boots", category="footwear", priority="essential",
        description="Sturdy, ankle-supporting boots with good grip",
        alternatives=("Trail running shoes (for easy trails)",),
    ),
    GearItem(
        id="daypack", name="Daypack/Backpack", category="equipment", priority="essential",
        description="Comfortable pack with proper capacity",
    ),
    GearItem(
        id="water_bottles", name="Water Bottles/Hydration System", category="food_water",
        priority="essential", description="At least 2L capacity per person",
        quantity="2-3 bottles",
    ),
    GearItem(
        id="first_aid", name="First Aid Kit", category="safety", priority="essential",
        description="Basic medical supplies for emergencies",
    ),
    GearItem(
        id="headlamp", name="Headlamp", category="equipment", priority="essential",
        description="LED headlamp with extra batteries",
        alternatives=("Flashlight (backup)",),
    ),
    GearItem(
        id="sun_protection", name="Sun Protection", category="safety", priority="essential",
        description="Sunscreen, hat, and sunglasses",
    ),
)

OVERNIGHT_GEAR = (
    GearItem(
        id="tent", name="Tent", category="equipment", priority="essential",
        description="Lightweight, weather-appropriate tent",
    ),
    GearItem(
        id="sleeping_bag", name="Sleeping Bag", category="equipment", priority="essential",
        description="Temperature-rated sleeping bag",
    ),
    GearItem(
        id="sleeping_pad", name="Sleeping Pad", category="equipment", priority="recommended",
        description="Insulating sleeping pad for comfort",
    ),
    GearItem(
        id="cooking_gear", name="Cooking Equipment", category="food_water", priority="essential",
        description="Portable stove, fuel, and cookware",
    ),
)

MULTI_DAY_GEAR = (
    GearItem(
        id="water_filter", name="Water Filter/Purification", category="food_water",
        priority="essential", description="Water filter or purification tablets",
    ),
    GearItem(
        id="camp_shoes", name="Camp Shoes", category="footwear", priority="recommended",
        description="Lightweight shoes for camp comfort",
    ),
)

MODERATE_TECHNICAL_GEAR = (
    GearItem(
        id="trekking_poles", name="Trekking Poles", category="equipment", priority="recommended",
        description="Adjustable trekking poles for stability",
    ),
    GearItem(
        id="gps_device", name="GPS Device/App", category="navigation", priority="recommended",
        description="GPS device or smartphone with offline maps",
    ),
)

HARD_TECHNICAL_GEAR = (
    GearItem(
        id="helmet", name="Climbing Helmet", category="safety", priority="essential",
        description="Lightweight climbing helmet for rockfall protection",
    ),
    GearItem(
        id="rope", name="Climbing Rope", category="safety", priority="essential",
        description="Dynamic climbing rope for technical sections",
    ),
    GearItem(
        id="harness", name="Climbing Harness", category="safety", priority="essential",
        description="Comfortable climbing harness",
    ),
)

EXPERT_TECHNICAL_GEAR = (
    GearItem(
        id="technical_gear", name="Technical Climbing Gear", category="safety",
        priority="essential", description="Carabiners, belay devices, anchors as needed",
    ),
)

RAIN_GEAR = (
    GearItem(
        id="rain_jacket", name="Rain Jacket", category="clothing", priority="essential",
        description="Waterproof, breathable rain jacket",
    ),
    GearItem(
        id="rain_pants", name="Rain Pants", category="clothing", priority="recommended",
        description="Waterproof rain pants",
    ),
    GearItem(
        id="pack_cover", name="Pack Rain Cover", category="equipment", priority="essential",
        description="Waterproof cover for backpack",
    ),
)

COLD_GEAR = (
    GearItem(
        id="insulation_layer", name="Insulation Layer", category="clothing", priority="essential",
        description="Fleece or down jacket for warmth",
    ),
    GearItem(
        id="warm_hat", name="Warm Hat", category="clothing", priority="essential",
        description="Insulating hat that covers ears",
    ),
    GearItem(
        id="gloves", name="Gloves", category="clothing", priority="essential",
        description="Insulating gloves for cold conditions",
    ),
)

VARIABLE_WEATHER_GEAR = (
    GearItem(
        id="layering_system", name="Layering System", category="clothing", priority="essential",
        description="Base layer, insulating layer, and shell layer",
    ),
)

BEGINNER_GEAR = (
    GearItem(
        id="emergency_whistle", name="Emergency Whistle", category="safety",
        priority="recommended", description="Loud whistle for emergency signaling",
    ),
    GearItem(
        id="emergency_blanket", name="Emergency Blanket", category="safety",
        priority="recommended", description="Lightweight emergency blanket",
    ),
    GearItem(
        id="duct_tape", name="Duct Tape", category="equipment", priority="optional",
        description="Small roll for emergency repairs",
    ),
)

_TECHNICAL_RANK = {"easy": 1, "moderate": 2, "hard": 3, "expert": 4}


class GearAdvisor:
    """Assembles a packing list from fixed rule tables."""

    def duration_gear(self, days: int) -> list[GearItem]:
        gear: list[GearItem] = []
        if days >= 2:
            gear.extend(OVERNIGHT_GEAR)
            gear.append(GearItem(
                id="extra_clothing", name="Extra Clothing", category="clothing",
                priority="essential", description="Complete change of clothes",
                quantity=f"{days - 1} days worth",
            ))
        if days >= 3:
            gear.extend(MULTI_DAY_GEAR)
        return gear

    def technical_gear(self, technicality: str) -> list[GearItem]:
        rank = _TECHNICAL_RANK[technicality]
        gear: list[GearItem] = []
        if rank >= 2:
            gear.extend(MODERATE_TECHNICAL_GEAR)
        if rank >= 3:
            gear.extend(HARD_TECHNICAL_GEAR)
        if rank >= 4:
            gear.extend(EXPERT_TECHNICAL_GEAR)
        return gear

    def weather_gear(self, weather: str, season: str) -> list[GearItem]:
        gear: list[GearItem] = []
        if weather == "wet" or season == "wet":
            gear.extend(RAIN_GEAR)
        if weather == "cold":
            gear.extend(COLD_GEAR)
        if weather == "variable":
            gear.extend(VARIABLE_WEATHER_GEAR)
        return gear

    def beginner_gear(self, has_experience: bool) -> list[GearItem]:
        return [] if has_experience else list(BEGINNER_GEAR)

    def recommend(self, gear_input: GearInput) -> GearRecommendation:
        """Recommend gear for a trip.

        Items are deduplicated by id (first occurrence wins) and split by priority.

        Args:
            gear_input: Trip conditions

        Returns:
            GearRecommendation
        """
        candidates = [
            *BASE_ESSENTIAL_GEAR,
            *self.duration_gear(gear_input.days),
            *self.technical_gear(gear_input.technicality),
            *self.weather_gear(gear_input.weather, gear_input.season),
            *self.beginner_gear(gear_input.has_experience),
        ]

        seen: set[str] = set()
        unique: list[GearItem] = []
        for item in candidates:
            if item.id not in seen:
                seen.add(item.id)
                unique.append(item)

        recommendation = GearRecommendation(
            essential=[i for i in unique if i.priority == "essential"],
            recommended=[i for i in unique if i.priority == "recommended"],
            optional=[i for i in unique if i.priority == "optional"],
            total_items=len(unique),
        )

        logger.info(
            "Gear recommended",
            days=gear_input.days,
            technicality=gear_input.technicality,
            total_items=recommendation.total_items,
        )

        return recommendation


def gear_summary(items: Iterable[GearItem]) -> dict[str, int]:
    """Count items per category."""
    return dict(Counter(item.category for item in items))

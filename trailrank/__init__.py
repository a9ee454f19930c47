"""TrailRank - multi-criteria ranking of hiking routes against user preferences."""

__version__ = "0.1.0"
__author__ = "TrailRank Development Team"
__description__ = "TOPSIS decision engine for hiking route recommendations"

from trailrank.types import (
    Difficulty,
    ExperienceLevel,
    RankedRoute,
    RankingResult,
    UserPreferences,
)
from trailrank.config import get_config
from trailrank.utils.logging import get_logger, configure_logging

__all__ = [
    "Difficulty",
    "ExperienceLevel",
    "RankedRoute",
    "RankingResult",
    "UserPreferences",
    "get_config",
    "get_logger",
    "configure_logging",
]

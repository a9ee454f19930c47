"""Configuration modules for TrailRank."""

from trailrank.config.settings import (
    Config,
    EngineConfig,
    LoggingConfig,
    get_config,
    reset_config,
)

__all__ = [
    "Config",
    "EngineConfig",
    "LoggingConfig",
    "get_config",
    "reset_config",
]

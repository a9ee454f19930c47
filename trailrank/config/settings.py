"""Configuration management with YAML support."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trailrank.exceptions import ConfigurationError


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level (DEBUG/INFO/WARNING/ERROR)")
    format: str = Field("console", description="Log format (console/json)")
    file: Optional[Path] = Field(None, description="Optional log file path")


class EngineConfig(BaseModel):
    """Decision engine tuning."""

    default_location: str = Field("jakarta", description="User location when none is given")
    fallback_distance_km: float = Field(
        300.0, gt=0, description="Distance used when a location is not in the lookup table"
    )
    neutral_score: float = Field(
        0.5, ge=0, le=1, description="Score for a route whose ideal and anti-ideal distances are both zero"
    )
    min_factor_weight: Optional[float] = Field(
        0.05, ge=0, lt=1, description="Floor applied to preference weights before renormalizing (None disables)"
    )
    factor_weight_tolerance: float = Field(
        0.01, ge=0, description="Allowed deviation of the baseline factor weights from 1.0"
    )
    max_explanations: int = Field(4, ge=0, le=4, description="Explanations kept per route")
    max_workers: int = Field(4, ge=1, description="Thread pool size for batch ranking")


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRAILRANK_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    catalog_path: Optional[Path] = Field(
        None, description="Route catalog YAML (bundled seed catalog when unset)"
    )

    @field_validator("catalog_path")
    @classmethod
    def catalog_must_exist(cls, v: Optional[Path]) -> Optional[Path]:
        """Ensure an explicitly configured catalog file exists."""
        if v is not None and not v.exists():
            raise ValueError(f"Catalog file not found: {v}")
        return v

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML config file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If YAML is invalid or not a mapping
        """
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in config file: {path}",
                details={"error": str(e)},
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config file must contain a mapping",
                details={"path": str(path)},
            )

        return cls(**data)

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file or environment.

        Priority:
        1. TRAILRANK_CONFIG_PATH environment variable
        2. ./trailrank_config.yaml in current directory
        3. ~/.config/trailrank/config.yaml in home directory
        4. Default configuration with environment overrides
        """
        config_path = os.getenv("TRAILRANK_CONFIG_PATH")

        if config_path and Path(config_path).exists():
            return cls.from_yaml(Path(config_path))

        default_paths = [
            Path("trailrank_config.yaml"),
            Path.home() / ".config" / "trailrank" / "config.yaml",
        ]

        for path in default_paths:
            if path.exists():
                return cls.from_yaml(path)

        return cls()


_config: Optional[Config] = None


def get_config() -> Config:
    """Get global configuration instance (lazy-loaded singleton).

    Returns:
        Config instance, creating and caching it on first call
    """
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def reset_config() -> None:
    """Reset global config instance (for testing)."""
    global _config
    _config = None

"""
Configuration Settings for the mindgraph reasoning engine
Handles environment variables and configuration management.
"""

from typing import Optional, Dict, Any
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import logging


class Settings(BaseSettings):
    """
    Engine settings with environment variable support.

    Environment variables are prefixed with 'MINDGRAPH_'.
    For example: MINDGRAPH_WORKING_MEMORY_CAPACITY, MINDGRAPH_LOG_LEVEL, etc.
    """

    model_config = SettingsConfigDict(
        env_prefix="MINDGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Debugging
    debug: bool = False

    # Working Memory
    working_memory_capacity: int = 7

    # Activation Parameters
    activation_decay_rate: float = 0.1  # per second
    passive_decay_factor: float = 0.9
    activation_epsilon: float = 0.01
    frequency_increment: float = 0.1

    # Relationship Parameters
    default_activation_threshold: float = 0.3
    reverse_strength_factor: float = 0.8
    min_edge_strength: float = 0.1
    max_edge_strength: float = 2.0
    min_concept_weight: float = 0.5

    # Thinking History
    history_limit: int = 1000

    # Auto Discovery
    auto_discovery_interval: float = 5.0
    auto_discovery_threshold: float = 0.5
    auto_discovery_max_new: int = 5

    # Logging Settings
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("passive_decay_factor", "activation_epsilon", "default_activation_threshold",
                     "reverse_strength_factor", "auto_discovery_threshold")
    @classmethod
    def validate_float_range(cls, v: float) -> float:
        """Validate float values are in range [0, 1]."""
        if not 0 <= v <= 1:
            raise ValueError(f"Value must be between 0 and 1, got {v}")
        return v

    @field_validator("working_memory_capacity", "history_limit", "auto_discovery_max_new")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Validate sizes and limits are positive."""
        if v < 1:
            raise ValueError(f"Value must be at least 1, got {v}")
        return v

    @field_validator("activation_decay_rate", "frequency_increment", "auto_discovery_interval")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Validate rates are not negative."""
        if v < 0:
            raise ValueError(f"Value must not be negative, got {v}")
        return v

    def get_activation_params(self) -> Dict[str, float]:
        """Get concept activation parameters."""
        return {
            "decay_rate": self.activation_decay_rate,
            "passive_decay_factor": self.passive_decay_factor,
            "epsilon": self.activation_epsilon,
            "frequency_increment": self.frequency_increment,
        }

    def get_edge_params(self) -> Dict[str, float]:
        """Get relationship edge parameters."""
        return {
            "activation_threshold": self.default_activation_threshold,
            "min_strength": self.min_edge_strength,
            "max_strength": self.max_edge_strength,
        }

    def get_discovery_params(self) -> Dict[str, Any]:
        """Get periodic auto-discovery parameters."""
        return {
            "interval": self.auto_discovery_interval,
            "threshold": self.auto_discovery_threshold,
            "max_new": self.auto_discovery_max_new,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get global settings instance (singleton).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None


def configure_logging(settings: Optional[Settings] = None):
    """Apply the configured log level and format to the root logger."""
    settings = settings or get_settings()
    level = "DEBUG" if settings.debug else settings.log_level
    logging.basicConfig(level=getattr(logging, level), format=settings.log_format)

"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based
configuration. Settings only tune ambient behaviour (logging, buffering);
transaction semantics never depend on them.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class EngineConfig(BaseSettings):
    """Payments engine configuration"""
    
    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Bounded feed between the CSV reader and the ledger
    feed_capacity: int = 100
    
    # Logging configuration
    log_level: str = "WARNING"
    log_format: str = "text"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr
    
    @field_validator("feed_capacity")
    @classmethod
    def _positive_capacity(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("feed_capacity must be positive")
        return value
    
    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return value
    
    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value


# Global configuration instance
config = EngineConfig()


def get_config() -> EngineConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> EngineConfig:
    """Reload configuration from environment"""
    global config
    config = EngineConfig()
    return config

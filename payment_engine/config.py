"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Optional


class PaymentEngineConfig(BaseSettings):
    """Payment engine configuration"""

    model_config = SettingsConfigDict(
        env_prefix="PAYMENT_ENGINE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging configuration
    log_level: str = "WARNING"
    log_format: Literal["json", "text"] = "json"
    log_file: Optional[str] = None  # If None, logs to stderr

    # Input configuration
    input_encoding: str = "utf-8"
    strict_input: bool = False  # Abort on malformed rows instead of skipping them


# Global configuration instance
config = PaymentEngineConfig()


def get_config() -> PaymentEngineConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> PaymentEngineConfig:
    """Reload configuration from environment"""
    global config
    config = PaymentEngineConfig()
    return config

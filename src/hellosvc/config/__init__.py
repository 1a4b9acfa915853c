"""Configuration management for hellosvc.

Loads and validates YAML-based configuration with Pydantic models.
The listening port honors the plain ``PORT`` environment variable.
"""

from hellosvc.config.settings import (
    LoggingConfig,
    ServiceConfig,
    Settings,
    SupervisorConfig,
    load_settings,
)

__all__ = [
    "LoggingConfig",
    "ServiceConfig",
    "Settings",
    "SupervisorConfig",
    "load_settings",
]

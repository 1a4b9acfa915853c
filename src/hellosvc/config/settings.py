"""Configuration management for hellosvc.

Loads settings from an optional YAML configuration file with environment
variable overrides. The demo service's listening port comes from the
plain ``PORT`` variable so the supervisor layer can set it per service.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import dotenv_values
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    YamlConfigSettingsSource,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/hellosvc.yaml")
DEFAULT_PORT = 8080
DEFAULT_SOCKET_DIR = "/var/lib/pebble/default"
SOCKET_NAME = ".pebble.socket"
UNPREFIXED_KEYS = ("PORT", "PEBBLE_SOCKET")


def default_socket_path() -> str:
    """Socket path of the supervisor, honoring ``$PEBBLE`` when set."""
    base = os.environ.get("PEBBLE") or DEFAULT_SOCKET_DIR
    return str(Path(base) / SOCKET_NAME)


class ServiceConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535, description="0 picks an ephemeral port")
    shutdown_timeout: float = Field(default=10.0, gt=0)
    greeting: str = Field(default="Hello, world!")
    access_log: bool = Field(default=False)


class SupervisorConfig(BaseModel):
    socket_path: str = Field(default_factory=default_socket_path)
    timeout: float = Field(default=10.0, gt=0)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for hellosvc.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "HELLOSVC_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "yaml_file": DEFAULT_CONFIG_PATH,
        "yaml_file_encoding": "utf-8",
        "extra": "ignore",
    }

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    supervisor: SupervisorConfig = Field(default_factory=SupervisorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # The YAML file sits below the environment and .env
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(
    config_path: Path | str | None = None,
    env_file: Path | str = ".env",
) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: PORT / PEBBLE_SOCKET > HELLOSVC_* env vars > .env file >
    YAML file > defaults. The unprefixed PORT and PEBBLE_SOCKET are read
    from the process environment first, then from the .env file.

    Raises:
        pydantic.ValidationError: If a value (e.g. ``PORT``) is invalid.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if path.exists():
        logger.info("Loading configuration from %s", path)
    else:
        logger.debug("Config file %s not found, using defaults + env vars", path)

    class FileSettings(Settings):
        model_config = {"yaml_file": path, "env_file": env_file}

    return FileSettings(**_env_overrides(env_file))


def _unprefixed_env(env_file: Path | str) -> dict[str, str]:
    """Unprefixed variables from .env, overlaid by the process environment."""
    values: dict[str, str] = {}
    env_path = Path(env_file)
    if env_path.is_file():
        for key, value in dotenv_values(env_path).items():
            if key in UNPREFIXED_KEYS and value is not None:
                values[key] = value
    for key in UNPREFIXED_KEYS:
        if key in os.environ:
            values[key] = os.environ[key]
    return {key: value.strip() for key, value in values.items()}


def _env_overrides(env_file: Path | str) -> dict:
    """Map non-prefixed vars onto the settings structure."""
    env = _unprefixed_env(env_file)
    overrides: dict = {}

    if env.get("PORT"):
        overrides["service"] = {"port": env["PORT"]}

    if env.get("PEBBLE_SOCKET"):
        overrides["supervisor"] = {"socket_path": env["PEBBLE_SOCKET"]}

    return overrides

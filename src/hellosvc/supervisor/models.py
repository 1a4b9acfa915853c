"""Data models exchanged with the supervisor API.

Layers describe services declaratively and are submitted as YAML;
service status records come back from ``GET /v1/services``.
"""

from __future__ import annotations

import enum
from datetime import datetime

import yaml
from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ServiceStartup(str, enum.Enum):
    """Whether the supervisor starts a service automatically."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> ServiceStartup:
        return cls.UNKNOWN


class ServiceState(str, enum.Enum):
    """Current run state of a supervised service."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BACKOFF = "backoff"  # Restarting after a failure
    ERROR = "error"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> ServiceState:
        return cls.UNKNOWN


class LayerOverride(str, enum.Enum):
    """How a layer's service entry combines with earlier layers."""

    MERGE = "merge"
    REPLACE = "replace"


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------


class LayerService(BaseModel):
    """One service entry inside a layer."""

    override: LayerOverride = Field(default=LayerOverride.REPLACE)
    summary: str | None = Field(default=None)
    command: str = Field(min_length=1, description="Command line the supervisor runs")
    startup: ServiceStartup = Field(default=ServiceStartup.ENABLED)
    environment: dict[str, str] = Field(default_factory=dict)


class Layer(BaseModel):
    """A configuration fragment describing one or more services."""

    summary: str | None = Field(default=None)
    description: str | None = Field(default=None)
    services: dict[str, LayerService] = Field(default_factory=dict)

    def to_yaml(self) -> str:
        """Render the layer in the YAML form the supervisor accepts."""
        data = self.model_dump(mode="json", exclude_none=True)
        for service in data.get("services", {}).values():
            if not service.get("environment"):
                service.pop("environment", None)
        return yaml.safe_dump(data, sort_keys=False)


def build_demo_layer(
    command: str,
    service_name: str = "hello",
    port: int | None = None,
    startup: ServiceStartup = ServiceStartup.ENABLED,
    summary: str = "hellosvc demo layer",
) -> Layer:
    """Build the layer that runs the demo HTTP service.

    Args:
        command: Command line that starts the demo service.
        service_name: Name the supervisor will know the service by.
        port: If given, exported to the service as ``PORT``.
        startup: Whether the service starts on replan.
        summary: Layer summary.
    """
    environment = {"PORT": str(port)} if port is not None else {}
    return Layer(
        summary=summary,
        services={
            service_name: LayerService(
                summary="Demo HTTP server",
                command=command,
                startup=startup,
                environment=environment,
            ),
        },
    )


# ---------------------------------------------------------------------------
# Service status
# ---------------------------------------------------------------------------


class ServiceInfo(BaseModel):
    """Status of one service as reported by the supervisor."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    startup: ServiceStartup = Field(default=ServiceStartup.UNKNOWN)
    current: ServiceState = Field(default=ServiceState.UNKNOWN)
    current_since: datetime | None = Field(default=None, alias="current-since")

    @property
    def is_running(self) -> bool:
        return self.current == ServiceState.ACTIVE

"""Client side of the process supervisor's HTTP API.

The supervisor itself is an external daemon; this package only builds
layers for the demo service and drives the daemon's documented
endpoints over its Unix socket.
"""

from hellosvc.supervisor.client import SupervisorClient, SupervisorError
from hellosvc.supervisor.models import (
    Layer,
    LayerOverride,
    LayerService,
    ServiceInfo,
    ServiceStartup,
    ServiceState,
    build_demo_layer,
)

__all__ = [
    "Layer",
    "LayerOverride",
    "LayerService",
    "ServiceInfo",
    "ServiceStartup",
    "ServiceState",
    "SupervisorClient",
    "SupervisorError",
    "build_demo_layer",
]

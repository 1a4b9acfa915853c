"""Tests for supervisor layer and status models."""

from __future__ import annotations

import pytest
import yaml
from pydantic import ValidationError

from hellosvc.supervisor.models import (
    Layer,
    LayerOverride,
    LayerService,
    ServiceInfo,
    ServiceStartup,
    ServiceState,
    build_demo_layer,
)


class TestDemoLayer:
    def test_layer_yaml_shape(self) -> None:
        layer = build_demo_layer("/usr/local/bin/hellosvc serve", port=8081)
        data = yaml.safe_load(layer.to_yaml())
        assert data == {
            "summary": "hellosvc demo layer",
            "services": {
                "hello": {
                    "override": "replace",
                    "summary": "Demo HTTP server",
                    "command": "/usr/local/bin/hellosvc serve",
                    "startup": "enabled",
                    "environment": {"PORT": "8081"},
                },
            },
        }

    def test_no_port_means_no_environment(self) -> None:
        layer = build_demo_layer("hellosvc serve", service_name="web")
        data = yaml.safe_load(layer.to_yaml())
        assert "environment" not in data["services"]["web"]

    def test_disabled_startup(self) -> None:
        layer = build_demo_layer("hellosvc serve", startup=ServiceStartup.DISABLED)
        assert layer.services["hello"].startup == ServiceStartup.DISABLED
        assert "startup: disabled" in layer.to_yaml()

    def test_keys_keep_declaration_order(self) -> None:
        text = build_demo_layer("hellosvc serve").to_yaml()
        assert text.index("summary") < text.index("services")
        assert text.index("override") < text.index("command")


class TestLayerModels:
    def test_empty_command_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LayerService(command="")

    def test_merge_override(self) -> None:
        layer = Layer(services={"a": LayerService(command="/bin/a", override=LayerOverride.MERGE)})
        assert "override: merge" in layer.to_yaml()

    def test_description_is_rendered(self) -> None:
        layer = Layer(summary="s", description="longer text")
        data = yaml.safe_load(layer.to_yaml())
        assert data == {"summary": "s", "description": "longer text", "services": {}}


class TestServiceInfo:
    def test_alias_and_defaults(self) -> None:
        info = ServiceInfo.model_validate({"name": "hello"})
        assert info.startup == ServiceStartup.UNKNOWN
        assert info.current == ServiceState.UNKNOWN
        assert info.current_since is None

    def test_populate_by_field_name(self) -> None:
        info = ServiceInfo(name="hello", current=ServiceState.BACKOFF)
        assert info.current == ServiceState.BACKOFF
        assert not info.is_running

    def test_frozen(self) -> None:
        info = ServiceInfo(name="hello")
        with pytest.raises(ValidationError):
            info.name = "other"  # type: ignore[misc]

"""Async client for the supervisor's HTTP API over a Unix domain socket.

Covers the calls needed to hand the demo service to the supervisor:
add a layer, replan, act on services, and list their status.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from hellosvc.supervisor.models import Layer, ServiceInfo

logger = logging.getLogger(__name__)

# Host part is ignored when talking over the socket but httpx needs one.
SOCKET_BASE_URL = "http://localhost"


class SupervisorError(Exception):
    """Raised when a supervisor API call fails."""

    def __init__(self, message: str, status_code: int | None = None, kind: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.kind = kind


class SupervisorClient:
    """Talks to the supervisor daemon through its API socket.

    Example usage::

        async with SupervisorClient("/var/lib/pebble/default/.pebble.socket") as sv:
            await sv.add_layer("hello", build_demo_layer("hellosvc serve"))
            change_id = await sv.replan()
            for info in await sv.get_services():
                print(info.name, info.current.value)
    """

    def __init__(
        self,
        socket_path: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._socket_path = socket_path
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def socket_path(self) -> str:
        return self._socket_path

    async def connect(self) -> None:
        """Create the HTTP client bound to the API socket."""
        transport = self._transport or httpx.AsyncHTTPTransport(uds=self._socket_path)
        self._client = httpx.AsyncClient(
            base_url=SOCKET_BASE_URL,
            transport=transport,
            timeout=self._timeout,
        )
        logger.debug("Using supervisor socket %s", self._socket_path)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> SupervisorClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.disconnect()

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    async def add_layer(self, label: str, layer: Layer | str, combine: bool = False) -> bool:
        """Add a configuration layer under ``label``.

        Args:
            label: Layer label; must be non-empty.
            layer: Layer model or its YAML text.
            combine: Merge into an existing layer with the same label
                     instead of failing.
        """
        if not label:
            raise ValueError("layer label must not be empty")
        text = layer.to_yaml() if isinstance(layer, Layer) else layer
        payload: dict[str, Any] = {
            "action": "add",
            "label": label,
            "format": "yaml",
            "layer": text,
        }
        if combine:
            payload["combine"] = True
        result = await self._request("POST", "/v1/layers", json=payload)
        logger.info("Added layer %r", label)
        return bool(result.get("result", True))

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    async def replan(self) -> str:
        """Reconcile running services with the merged layers.

        Returns:
            The change id of the resulting change.
        """
        return await self.services_action("replan")

    async def start(self, services: list[str]) -> str:
        return await self.services_action("start", services)

    async def stop(self, services: list[str]) -> str:
        return await self.services_action("stop", services)

    async def restart(self, services: list[str]) -> str:
        return await self.services_action("restart", services)

    async def services_action(self, action: str, services: list[str] | None = None) -> str:
        """Run a service action and return the change id."""
        payload: dict[str, Any] = {"action": action}
        if services is not None:
            payload["services"] = list(services)
        body = await self._request("POST", "/v1/services", json=payload)
        change_id = body.get("change")
        if body.get("type") != "async" or not change_id:
            raise SupervisorError(
                f"Expected an async response for action {action!r}",
                status_code=body.get("status-code"),
            )
        logger.info("Service action %s started change %s", action, change_id)
        return str(change_id)

    async def get_services(self, names: list[str] | None = None) -> list[ServiceInfo]:
        """List services in the order the supervisor reports them."""
        params = {"names": ",".join(names)} if names else None
        body = await self._request("GET", "/v1/services", params=params)
        return [ServiceInfo.model_validate(item) for item in body.get("result") or []]

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and unwrap the supervisor's response envelope."""
        if self._client is None:
            raise SupervisorError("Not connected to supervisor")
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise SupervisorError(
                f"Request {method} {path} via {self._socket_path} failed: {e}"
            ) from e

        try:
            body = resp.json()
        except ValueError as e:
            raise SupervisorError(
                f"Invalid response from {method} {path}: {resp.text[:200]!r}",
                status_code=resp.status_code,
            ) from e

        if not isinstance(body, dict):
            raise SupervisorError(
                f"Unexpected response from {method} {path}", status_code=resp.status_code
            )

        if body.get("type") == "error" or resp.is_error:
            result = body.get("result")
            result = result if isinstance(result, dict) else {}
            raise SupervisorError(
                result.get("message") or f"{method} {path} returned {resp.status_code}",
                status_code=resp.status_code,
                kind=result.get("kind", ""),
            )
        return body

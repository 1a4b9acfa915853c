"""Listener lifecycle for the demo HTTP service.

The uvicorn listener runs as its own asyncio task while the caller's
flow waits for a stop request (SIGINT/SIGTERM by default). Shutdown
stops accepting connections, drains in-flight requests, and gives up
on them once the configured deadline has passed.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import socket
from typing import Iterator

import uvicorn
from fastapi import FastAPI

from hellosvc.config.settings import ServiceConfig
from hellosvc.server.app import create_app

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ServerStartError(Exception):
    """Raised when the listening socket cannot be set up."""

    def __init__(self, message: str, host: str = "", port: int = 0) -> None:
        super().__init__(message)
        self.host = host
        self.port = port


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to DemoServer.

    ``ready`` is set once the listener accepts connections.
    """

    def __init__(self, config: uvicorn.Config, ready: asyncio.Event) -> None:
        super().__init__(config)
        self.ready = ready

    async def startup(self, sockets: list[socket.socket] | None = None) -> None:
        await super().startup(sockets=sockets)
        if not self.should_exit:
            self.ready.set()

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class DemoServer:
    """Runs the demo application on one listening socket.

    Configuration is injected rather than read from the environment, so
    tests can run several servers on ephemeral ports side by side.

    Example usage::

        server = DemoServer(ServiceConfig(port=8081))
        asyncio.run(server.serve())
    """

    def __init__(
        self,
        config: ServiceConfig,
        app: FastAPI | None = None,
        backlog: int = 2048,
    ) -> None:
        self._config = config
        self._app = app if app is not None else create_app(greeting=config.greeting)
        self._backlog = backlog
        self._socket: socket.socket | None = None
        self.started = asyncio.Event()

    @property
    def config(self) -> ServiceConfig:
        return self._config

    @property
    def bound_port(self) -> int | None:
        """Actual listening port, or None when not bound."""
        if self._socket is None:
            return None
        return self._socket.getsockname()[1]

    def bind(self) -> socket.socket:
        """Bind and listen on the configured host and port.

        Raises:
            ServerStartError: If the address is in use, not permitted,
                or otherwise unusable.
        """
        host, port = self._config.host, self._config.port
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(self._backlog)
        except OSError as e:
            sock.close()
            raise ServerStartError(
                f"Failed to listen on {host}:{port}: {e}", host=host, port=port
            ) from e
        self._socket = sock
        return sock

    async def serve(self, stop: asyncio.Event | None = None) -> None:
        """Serve until ``stop`` is set, then shut down within the deadline.

        Args:
            stop: Event requesting shutdown. When None, SIGINT and SIGTERM
                  set an internal event for the duration of the call.

        Raises:
            ServerStartError: If the socket cannot be bound.
        """
        loop = asyncio.get_running_loop()
        sock = self._socket if self._socket is not None else self.bind()

        installed: list[signal.Signals] = []
        if stop is None:
            stop = asyncio.Event()
            for sig in SHUTDOWN_SIGNALS:
                try:
                    loop.add_signal_handler(sig, stop.set)
                except (NotImplementedError, RuntimeError, ValueError):
                    logger.debug("Cannot install handler for %s on this loop", sig.name)
                else:
                    installed.append(sig)

        server = _EmbeddedServer(
            uvicorn.Config(
                self._app,
                lifespan="off",
                log_config=None,
                access_log=self._config.access_log,
                timeout_graceful_shutdown=self._config.shutdown_timeout,
            ),
            ready=self.started,
        )

        logger.info("listening on port: %s", self.bound_port)
        listener = asyncio.create_task(server.serve(sockets=[sock]))
        stopper = asyncio.create_task(stop.wait())
        try:
            done, _ = await asyncio.wait(
                {listener, stopper}, return_when=asyncio.FIRST_COMPLETED
            )
            if listener in done:
                # Listener ended on its own; surface its failure, if any.
                listener.result()
                return
            logger.info("received interrupt")
            await self._shutdown(server, listener)
        finally:
            for task in (stopper, listener):
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task
            for sig in installed:
                loop.remove_signal_handler(sig)
            # uvicorn skips its own shutdown when told to exit during startup
            for listening in getattr(server, "servers", []):
                listening.close()
            sock.close()
            self._socket = None
            self.started.clear()

    async def _shutdown(self, server: _EmbeddedServer, listener: asyncio.Task) -> None:
        """Drain the listener, abandoning it once the deadline passes."""
        timeout = self._config.shutdown_timeout
        server.should_exit = True
        try:
            await asyncio.wait_for(asyncio.shield(listener), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Shutdown deadline of %.1fs passed, abandoning open connections", timeout
            )
            server.force_exit = True
            for task in list(server.server_state.tasks):
                task.cancel()
            listener.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await listener
        else:
            logger.info("Server stopped")


def run(config: ServiceConfig) -> None:
    """Run the demo service until interrupted."""
    asyncio.run(DemoServer(config).serve())

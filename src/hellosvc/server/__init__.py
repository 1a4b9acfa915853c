"""Demo HTTP service for hellosvc.

A single-endpoint HTTP server meant to be run under a process
supervisor: it greets every request and shuts down gracefully on
SIGINT within a bounded deadline.
"""

from hellosvc.server.app import create_app
from hellosvc.server.runner import DemoServer, ServerStartError, run

__all__ = ["DemoServer", "ServerStartError", "create_app", "run"]

"""hellosvc -- demo HTTP service for a process-supervisor walkthrough.

The service answers every request with a fixed greeting and shuts down
gracefully on SIGINT. The ``supervisor`` package drives the external
supervisor daemon's HTTP API to run it as a managed service.
"""

__version__ = "0.1.0"

"""FastAPI application for the demo HTTP service.

Every request, whatever its method or path, is answered with the same
fixed greeting. There is no routing beyond that and no request
validation.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

DEFAULT_GREETING = "Hello, world!"


def create_app(greeting: str = DEFAULT_GREETING) -> FastAPI:
    """Create the FastAPI application serving ``greeting`` on every path."""
    app = FastAPI(
        title="hellosvc",
        description="Demo HTTP service supervised through a layer",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    async def hello(request: Request) -> PlainTextResponse:
        return PlainTextResponse(greeting)

    # Plain route with no method filter: every method, every path,
    # "/{path:path}" also matches the bare root.
    app.add_route("/{path:path}", hello, include_in_schema=False)

    return app

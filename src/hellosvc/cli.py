"""Command-line interface for hellosvc.

Runs the demo HTTP service, and walks through handing it to the process
supervisor: add the layer, replan, act on services, show their status.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hellosvc.config.settings import Settings
    from hellosvc.supervisor.models import ServiceInfo

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="hellosvc",
        description="Demo HTTP service and supervisor API walkthrough",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/hellosvc.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--socket",
        type=str,
        default=None,
        help="Supervisor API socket (default: $PEBBLE_SOCKET or $PEBBLE/.pebble.socket)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the demo HTTP service")
    serve_parser.add_argument("--host", type=str, default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Listening port (overrides PORT)")

    layer_parser = subparsers.add_parser("layer", help="Add the demo service layer to the supervisor")
    layer_parser.add_argument("--label", type=str, default="hello", help="Layer label")
    layer_parser.add_argument("--name", type=str, default="hello", help="Service name in the layer")
    layer_parser.add_argument(
        "--command", dest="service_command", type=str, default="hellosvc serve",
        help="Command the supervisor runs for the service",
    )
    layer_parser.add_argument("--port", type=int, default=None, help="PORT exported to the service")
    layer_parser.add_argument("--combine", action="store_true", help="Combine with an existing layer")
    layer_parser.add_argument(
        "--print", dest="print_only", action="store_true",
        help="Print the layer YAML instead of sending it",
    )

    subparsers.add_parser("replan", help="Reconcile services with the current layers")

    for action in ("start", "stop", "restart"):
        action_parser = subparsers.add_parser(action, help=f"{action.capitalize()} services")
        action_parser.add_argument("names", nargs="+", help="Service names")

    services_parser = subparsers.add_parser("services", help="Show service status")
    services_parser.add_argument("names", nargs="*", help="Only show these services")

    return parser.parse_args(argv)


def format_services(services: list[ServiceInfo]) -> str:
    """Render service status records as an aligned table."""
    rows = [("Service", "Startup", "Current", "Since")]
    for info in services:
        since = info.current_since.strftime("%Y-%m-%d %H:%M:%S") if info.current_since else "-"
        rows.append((info.name, info.startup.value, info.current.value, since))
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]
    return "\n".join(lines)


async def _add_layer(settings: Settings, args: argparse.Namespace) -> None:
    from hellosvc.supervisor import SupervisorClient, build_demo_layer

    layer = build_demo_layer(
        command=args.service_command,
        service_name=args.name,
        port=args.port,
    )
    if args.print_only:
        print(layer.to_yaml(), end="")
        return

    async with SupervisorClient(settings.supervisor.socket_path, settings.supervisor.timeout) as sv:
        await sv.add_layer(args.label, layer, combine=args.combine)
    print(f"Layer {args.label!r} added")


async def _service_action(settings: Settings, action: str, names: list[str] | None) -> None:
    from hellosvc.supervisor import SupervisorClient

    async with SupervisorClient(settings.supervisor.socket_path, settings.supervisor.timeout) as sv:
        change_id = await sv.services_action(action, names)
    print(f"Change {change_id} ({action})")


async def _show_services(settings: Settings, names: list[str]) -> None:
    from hellosvc.supervisor import SupervisorClient

    async with SupervisorClient(settings.supervisor.socket_path, settings.supervisor.timeout) as sv:
        services = await sv.get_services(names or None)
    print(format_services(services))


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the hellosvc CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from pydantic import ValidationError

    from hellosvc.config.settings import load_settings
    from hellosvc.server.runner import ServerStartError
    from hellosvc.supervisor.client import SupervisorError
    from hellosvc.utils.logging import setup_logging

    try:
        settings = load_settings(args.config)
        if args.socket:
            settings.supervisor.socket_path = args.socket
        if args.command == "serve":
            # Re-validate so a bad --port is rejected like a bad PORT.
            overrides = {k: v for k, v in (("host", args.host), ("port", args.port)) if v is not None}
            settings.service = settings.service.model_validate(
                {**settings.service.model_dump(), **overrides}
            )
    except ValidationError as e:
        print(f"hellosvc: invalid configuration:\n{e}", file=sys.stderr)
        sys.exit(1)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    try:
        if args.command == "serve":
            from hellosvc.server.runner import run

            run(settings.service)

        elif args.command == "layer":
            asyncio.run(_add_layer(settings, args))

        elif args.command == "replan":
            asyncio.run(_service_action(settings, "replan", None))

        elif args.command in ("start", "stop", "restart"):
            asyncio.run(_service_action(settings, args.command, args.names))

        elif args.command == "services":
            asyncio.run(_show_services(settings, args.names))

    except ServerStartError as e:
        logger.error("Cannot start server: %s", e)
        sys.exit(1)
    except SupervisorError as e:
        logger.error("Supervisor request failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()

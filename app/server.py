"""Process entry point: bind the listener, build the app, serve forever.

The listening socket is bound before the application is constructed so that
an occupied port or a privileged port without permission aborts startup with
a clear `StartupFailure` and a non-zero exit status, instead of surfacing
from deep inside the ASGI server.
"""

import argparse
import socket
import sys
from typing import Sequence

import uvicorn
from prometheus_client import CollectorRegistry

from app.config import Settings, get_settings
from app.core.logging_config import configure_logging, get_logger
from app.main import create_app

logger = get_logger(__name__)


class StartupFailure(RuntimeError):
    """The listening socket could not be bound."""

    def __init__(self, host: str, port: int, reason: OSError) -> None:
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"Cannot bind {host}:{port}: {reason.strerror or reason}")


def bind_listener(host: str, port: int) -> socket.socket:
    """Bind a TCP socket on host:port ready to be handed to uvicorn.

    Args:
        host: IPv4 or IPv6 address to bind.
        port: TCP port; 0 asks the OS for an ephemeral port.

    Returns:
        socket.socket: Bound, inheritable socket (not yet listening).

    Raises:
        StartupFailure: When the address is in use or permission is denied.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        raise StartupFailure(host, port, exc) from exc
    sock.set_inheritable(True)
    return sock


def serve(settings: Settings, registry: CollectorRegistry | None = None) -> bool:
    """Bind the listener and run the application until the process is stopped.

    Logger levels are left to `configure_logging`; uvicorn is given no
    `log_level` so it does not reset the noisy loggers.

    Returns:
        bool: False when the application lifespan failed to start.

    Raises:
        StartupFailure: When the listener cannot be bound.
    """
    sock = bind_listener(settings.HOST, settings.PORT)
    logger.info("Listener bound", host=settings.HOST, port=settings.PORT)

    app = create_app(settings, registry)
    config = uvicorn.Config(
        app,
        log_config=None,
    )
    server = uvicorn.Server(config)
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()
    return server.started


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="hello-node",
        description="Hello node greeting service with health, readiness and metrics probes",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s " + Settings.model_fields["VERSION"].default,
    )
    parser.add_argument("--host", help="Bind address (overrides HOST)")
    parser.add_argument("--port", type=int, help="Bind port (overrides PORT)")
    parser.add_argument(
        "--metrics",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Expose /metrics and collect default process metrics (overrides METRICS_ENABLED)",
    )
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace, base: Settings | None = None) -> Settings:
    """Apply command line overrides on top of the environment settings."""
    settings = base if base is not None else get_settings()
    overrides = {
        field: value
        for field, value in (
            ("HOST", args.host),
            ("PORT", args.port),
            ("METRICS_ENABLED", args.metrics),
        )
        if value is not None
    }
    if not overrides:
        return settings
    # Re-validate so a bad --port is rejected like a bad PORT.
    return Settings.model_validate({**settings.model_dump(), **overrides})


def main(argv: Sequence[str] | None = None) -> int:
    """Run the service.

    Returns:
        int: 0 after a clean shutdown, 1 when startup failed.
    """
    args = parse_args(argv)
    settings = resolve_settings(args)
    configure_logging(settings)

    try:
        started = serve(settings)
    except StartupFailure as exc:
        logger.critical(
            "Startup failed",
            host=exc.host,
            port=exc.port,
            error=str(exc.reason),
        )
        return 1
    if not started:
        logger.critical("Startup failed", reason="application lifespan did not complete")
        return 1
    return 0


def cli() -> None:
    sys.exit(main())

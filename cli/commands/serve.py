"""Run the feed server."""

import logging

import typer
from typing_extensions import Annotated

from cli.context import get_context
from teamfeed import create_app

logger = logging.getLogger(__name__)


def serve(
    host: Annotated[
        str | None,
        typer.Option("--host", help="Interface to bind (default: SERVER_HOST)"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port to listen on (default: SERVER_PORT)"),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable the Flask debugger and reloader"),
    ] = False,
) -> None:
    """Serve calendar feeds and the owner API over HTTP."""
    ctx = get_context()
    config = ctx.config
    host = host or config.server_host
    port = port or config.server_port

    logger.info(f"Starting feed server on {host}:{port} (store: {config.store_backend})")
    app = create_app(ctx)
    app.run(host=host, port=port, debug=debug)

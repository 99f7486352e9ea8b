"""List team feed URLs."""

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display.table_renderer import TableRenderer, TeamFeedInfo


def teams(
    base_url: Annotated[
        str | None,
        typer.Option(
            "--base-url",
            "-u",
            help="Public origin for feed URLs (default: http://SERVER_HOST:SERVER_PORT)",
        ),
    ] = None,
) -> None:
    """List the owner's teams and (re)issue their calendar feed URLs."""
    ctx = get_context()
    config = ctx.config

    if not ctx.oauth.is_authenticated():
        typer.echo("Not authenticated. Run the server and sign in with TeamSnap first.", err=True)
        raise typer.Exit(1)

    base_url = base_url or f"http://{config.server_host}:{config.server_port}"
    listing = ctx.calendar_service.list_calendars(base_url)

    renderer = TableRenderer()
    renderer.render_teams(
        listing["user"].get("email"),
        [TeamFeedInfo.from_listing(entry) for entry in listing["teams"]],
    )

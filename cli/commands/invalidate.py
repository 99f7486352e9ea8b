"""Drop a team's cached feeds."""

import typer
from typing_extensions import Annotated

from cli.context import get_context
from cli.display.console import console


def invalidate(
    team_id: Annotated[str, typer.Argument(help="TeamSnap team id")],
) -> None:
    """Delete both cached feeds of a team so the next request re-renders."""
    ctx = get_context()
    if not ctx.calendar_service.invalidate(team_id):
        console.print(f"[yellow]Could not look up team {team_id}; nothing invalidated[/yellow]")
        raise typer.Exit(1)
    console.print(f"Invalidated cached feeds for team [cyan]{team_id}[/cyan]")

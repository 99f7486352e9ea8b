"""CLI command routing."""

import functools
import logging

import typer
from typing_extensions import Annotated

from cli import setup_logging
from cli.commands import (
    config_command,
    invalidate_command,
    serve_command,
    teams_command,
)
from cli.context import CLIContext, get_context, set_context
from teamfeed.exceptions import TeamFeedError

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Custom TeamSnap calendar feeds.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show info logging")
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only show errors")
    ] = False,
) -> None:
    """Set up logging and the shared context for every command."""
    ctx = CLIContext(verbose=verbose, quiet=quiet)
    set_context(ctx)
    setup_logging(verbose=verbose, quiet=quiet, config=ctx.config)


def _guarded(command):
    """Turn feed errors into a clean exit code instead of a traceback."""

    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except TeamFeedError as e:
            logger.error(f"Feed error: {e}")
            if not get_context().quiet:
                typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    return wrapper


app.command("serve")(serve_command)
app.command("config")(config_command)
app.command("teams")(_guarded(teams_command))
app.command("invalidate")(_guarded(invalidate_command))

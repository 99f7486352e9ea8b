"""CLI commands package."""

from cli.commands.config import config as config_command
from cli.commands.invalidate import invalidate as invalidate_command
from cli.commands.serve import serve as serve_command
from cli.commands.teams import teams as teams_command

__all__ = [
    "config_command",
    "invalidate_command",
    "serve_command",
    "teams_command",
]

"""Display module for CLI output.

Provides the shared Rich console and the table renderer for team feeds and
configuration.
"""

from cli.display.console import console
from cli.display.table_renderer import TableRenderer, TeamFeedInfo

__all__ = [
    "console",
    "TableRenderer",
    "TeamFeedInfo",
]

"""Shared CLI context."""

from teamfeed.context import AppContext


class CLIContext(AppContext):
    """Application context plus the CLI's output flags.

    Usage:
        ctx = CLIContext()
        listing = ctx.calendar_service.list_calendars(base_url)
    """

    def __init__(self, verbose: bool = False, quiet: bool = False, **kwargs):
        """Initialize CLI context.

        Args:
            verbose: If True, enable info logging on the console
            quiet: If True, suppress non-error output
        """
        super().__init__(**kwargs)
        self.verbose = verbose
        self.quiet = quiet


# Global context instance (set by Typer callback)
_ctx: CLIContext | None = None


def get_context() -> CLIContext:
    """Get the current CLI context.

    Raises:
        RuntimeError: If context not initialized
    """
    if _ctx is None:
        raise RuntimeError("CLI context not initialized. This should not happen.")
    return _ctx


def set_context(ctx: CLIContext) -> None:
    """Set the global CLI context."""
    global _ctx
    _ctx = ctx

"""Display configuration file path and settings."""

import os
from pathlib import Path

from cli.context import get_context
from cli.display.console import console
from cli.display.table_renderer import TableRenderer
from teamfeed.config import FeedConfig


def _find_env_file() -> Path | None:
    """Find .env file by searching current directory and parent directories."""
    current = Path.cwd()
    for path in [current] + list(current.parents):
        env_file = path / ".env"
        if env_file.exists():
            return env_file.resolve()
    return None


def _get_source(env_key: str, value, default_value) -> str:
    """Determine the source of a config value."""
    if env_key in os.environ or value != default_value:
        return "env"
    return "default"


def _secret(value: str | None) -> str:
    return "[green]set[/green]" if value else "[dim]not set[/dim]"


def config() -> None:
    """Display configuration and OAuth session status."""
    env_file = _find_env_file()
    default_config = FeedConfig()

    ctx = get_context()
    cfg = ctx.config

    def row(name: str, env_key: str, value, default, display: str | None = None):
        shown = display if display is not None else (str(value) if value is not None else "[dim]None[/dim]")
        return (name, _get_source(env_key, value, default), shown)

    session = ctx.oauth.load_session()

    sections = [
        (
            "TeamSnap Application",
            [
                row("client_id", "TEAMSNAP_CLIENT_ID", cfg.client_id, default_config.client_id),
                row(
                    "client_secret",
                    "TEAMSNAP_CLIENT_SECRET",
                    cfg.client_secret,
                    default_config.client_secret,
                    _secret(cfg.client_secret),
                ),
                row(
                    "token_secret",
                    "CALENDAR_TOKEN_SECRET",
                    cfg.token_secret,
                    default_config.token_secret,
                    _secret(cfg.token_secret),
                ),
                row(
                    "allowed_user_email",
                    "ALLOWED_USER_EMAIL",
                    cfg.allowed_user_email,
                    default_config.allowed_user_email,
                ),
            ],
        ),
        (
            "Endpoints",
            [
                row("api_url", "TEAMSNAP_API_URL", cfg.api_url, default_config.api_url),
                row("auth_url", "TEAMSNAP_AUTH_URL", cfg.auth_url, default_config.auth_url),
                row("token_url", "TEAMSNAP_TOKEN_URL", cfg.token_url, default_config.token_url),
                row("http_timeout", "HTTP_TIMEOUT", cfg.http_timeout, default_config.http_timeout),
            ],
        ),
        (
            "Store",
            [
                row(
                    "store_backend",
                    "STORE_BACKEND",
                    cfg.store_backend,
                    default_config.store_backend,
                ),
                row(
                    "store_dir",
                    "STORE_DIR",
                    cfg.store_dir,
                    default_config.store_dir,
                    str(cfg.store_dir.resolve()),
                ),
            ],
        ),
        (
            "Rendering & Logging",
            [
                row(
                    "default_timezone",
                    "DEFAULT_TIMEZONE",
                    cfg.default_timezone,
                    default_config.default_timezone,
                ),
                row("log_dir", "LOG_DIR", cfg.log_dir, default_config.log_dir, str(cfg.log_dir.resolve())),
                row("log_filename", "LOG_FILENAME", cfg.log_filename, default_config.log_filename),
            ],
        ),
        (
            "OAuth Session",
            [
                ("access_token", "store", _secret(session.access_token)),
                ("refresh_token", "store", _secret(session.refresh_token)),
                ("user", "store", str((session.user_info or {}).get("email") or "[dim]unknown[/dim]")),
            ],
        ),
    ]

    console.print()
    console.print("━" * 50)
    console.print("[bold]  Configuration[/bold]")
    console.print("━" * 50)

    console.print("\n[bold]Config File:[/bold]")
    if env_file:
        console.print(f"  [cyan]{env_file}[/cyan]")
    else:
        console.print("  [dim]Not found (using defaults and environment variables)[/dim]")

    TableRenderer().render_settings(sections)

"""Configuration for team feeds."""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from teamfeed.constants import (
    FALLBACK_TOKEN_SECRET,
    TEAMSNAP_API_URL,
    TEAMSNAP_AUTH_URL,
    TEAMSNAP_TOKEN_URL,
)


class FeedConfig(BaseModel):
    """Feed service configuration with Pydantic validation."""

    # TeamSnap OAuth application
    client_id: str | None = None
    client_secret: str | None = None
    token_secret: str | None = None
    allowed_user_email: str | None = None

    # TeamSnap endpoints
    api_url: str = Field(default=TEAMSNAP_API_URL)
    auth_url: str = Field(default=TEAMSNAP_AUTH_URL)
    token_url: str = Field(default=TEAMSNAP_TOKEN_URL)
    http_timeout: float = Field(default=30.0, gt=0)

    # Key-value store
    store_backend: str = Field(default="file", pattern="^(file|memory)$")
    store_dir: Path = Field(default=Path("data/store"))

    # Rendering
    default_timezone: str = Field(default="UTC")

    # Logging
    log_dir: Path = Field(default=Path("logs"))
    log_filename: str = Field(default="teamfeed.log")

    # Server defaults
    server_host: str = Field(default="127.0.0.1")
    server_port: int = Field(default=8787, ge=1, le=65535)

    @property
    def calendar_token_secret(self) -> str:
        """Secret mixed into calendar token digests."""
        return self.token_secret or self.client_secret or FALLBACK_TOKEN_SECRET

    @classmethod
    def from_env(cls) -> "FeedConfig":
        """Load configuration from environment variables and .env file."""
        load_dotenv(find_dotenv(usecwd=True))

        config_dict = {}

        # OAuth application
        if "TEAMSNAP_CLIENT_ID" in os.environ:
            config_dict["client_id"] = os.environ["TEAMSNAP_CLIENT_ID"]
        if "TEAMSNAP_CLIENT_SECRET" in os.environ:
            config_dict["client_secret"] = os.environ["TEAMSNAP_CLIENT_SECRET"]
        if "CALENDAR_TOKEN_SECRET" in os.environ:
            config_dict["token_secret"] = os.environ["CALENDAR_TOKEN_SECRET"]
        if "ALLOWED_USER_EMAIL" in os.environ:
            config_dict["allowed_user_email"] = os.environ["ALLOWED_USER_EMAIL"]

        # Endpoints
        if "TEAMSNAP_API_URL" in os.environ:
            config_dict["api_url"] = os.environ["TEAMSNAP_API_URL"]
        if "TEAMSNAP_AUTH_URL" in os.environ:
            config_dict["auth_url"] = os.environ["TEAMSNAP_AUTH_URL"]
        if "TEAMSNAP_TOKEN_URL" in os.environ:
            config_dict["token_url"] = os.environ["TEAMSNAP_TOKEN_URL"]
        if "HTTP_TIMEOUT" in os.environ:
            try:
                config_dict["http_timeout"] = float(os.environ["HTTP_TIMEOUT"])
            except ValueError:
                pass  # Keep default if invalid

        # Store
        if "STORE_BACKEND" in os.environ:
            config_dict["store_backend"] = os.environ["STORE_BACKEND"]
        if "STORE_DIR" in os.environ:
            config_dict["store_dir"] = Path(os.environ["STORE_DIR"])

        # Rendering
        if "DEFAULT_TIMEZONE" in os.environ:
            config_dict["default_timezone"] = os.environ["DEFAULT_TIMEZONE"]

        # Logging
        if "LOG_DIR" in os.environ:
            config_dict["log_dir"] = Path(os.environ["LOG_DIR"])
        if "LOG_FILENAME" in os.environ:
            config_dict["log_filename"] = os.environ["LOG_FILENAME"]

        # Server
        if "SERVER_HOST" in os.environ:
            config_dict["server_host"] = os.environ["SERVER_HOST"]
        if "SERVER_PORT" in os.environ:
            try:
                config_dict["server_port"] = int(os.environ["SERVER_PORT"])
            except ValueError:
                pass  # Keep default if invalid

        return cls(**config_dict)
